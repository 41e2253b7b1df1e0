"""Example tree construction: describe, context, it, pending and hooks."""

from contextlib import contextmanager
from typing import Callable, Generator, Optional

from speccore.core.errors import ConfigurationError
from speccore.core.hooks import Hook, HookRegistry
from speccore.core.location import Location, caller_location, with_body
from speccore.core.models import Example, Group
from speccore.core.scope import (
    check_body_structure,
    ensure_not_running,
    registers_examples,
)

DEFAULT_DESCRIPTION = "assert"


class Suite:
    """Owns one example tree and the hooks declared in it.

    Registration methods append to the currently open group. There is
    always an implicit root group, so top-level ``it`` calls are legal.
    """

    __speccore_dsl__ = True

    def __init__(self):
        self.root = Group(description="")
        self.hooks = HookRegistry()
        self._stack: list[Group] = [self.root]
        self._running = False

    @property
    def current_group(self) -> Group:
        return self._stack[-1]

    def examples(self) -> list[Example]:
        """All examples in declaration order."""
        return list(self.root.examples())

    @contextmanager
    def locked(self) -> Generator["Suite", None, None]:
        """Freeze the tree shape while a run is in progress."""
        if self._running:
            raise ConfigurationError("suite is already running")
        self._running = True
        try:
            yield self
        finally:
            self._running = False

    def _check_registration(self, operation: str) -> None:
        ensure_not_running(operation)
        if self._running:
            raise ConfigurationError(
                f"cannot call '{operation}' while the suite is running"
            )

    @registers_examples
    def describe(
        self,
        description: object,
        body: Optional[Callable[[], object]] = None,
        *,
        location: Optional[Location] = None,
    ):
        """Declare a group and evaluate its body immediately.

        Without a body, returns a decorator that takes the body.
        """
        self._check_registration("describe")
        location = location or caller_location(body=body)

        if body is None:
            def decorator(func: Callable[[], object]) -> Callable[[], object]:
                self.describe(description, func, location=with_body(location, func))
                return func

            return decorator

        group = Group(description=str(description), location=location)
        self.current_group.add(group)
        self._stack.append(group)
        try:
            body()
        finally:
            self._stack.pop()
        return group

    @registers_examples
    def context(
        self,
        description: object,
        body: Optional[Callable[[], object]] = None,
        *,
        location: Optional[Location] = None,
    ):
        """Alias of ``describe``."""
        self._check_registration("context")
        location = location or caller_location(body=body)
        return self.describe(description, body, location=location)

    @registers_examples
    def it(
        self,
        description: object = DEFAULT_DESCRIPTION,
        body: Optional[Callable] = None,
        *,
        location: Optional[Location] = None,
    ):
        """Declare an example. The body is stored, not run."""
        self._check_registration("it")
        location = location or caller_location(body=body)

        if body is None:
            def decorator(func: Callable) -> Callable:
                self.it(description, func, location=with_body(location, func))
                return func

            return decorator

        check_body_structure(body, "it")
        return self._add_example(description, location, body, pending=False)

    @registers_examples
    def pending(
        self,
        description: object = DEFAULT_DESCRIPTION,
        body: Optional[Callable] = None,
        *,
        location: Optional[Location] = None,
    ):
        """Declare an example that is reported pending and never run.

        With a body, the body is only checked for illegal nesting. Without
        one, the example is registered right away and a decorator is
        returned so that ``@pending("...")`` over a function attaches it.
        """
        self._check_registration("pending")
        location = location or caller_location(body=body)

        if body is not None:
            check_body_structure(body, "pending")
            return self._add_example(description, location, body, pending=True)

        example = self._add_example(description, location, None, pending=True)

        def decorator(func: Callable) -> Callable:
            check_body_structure(func, "pending")
            example.body = func
            example.location = with_body(example.location, func)
            return func

        return decorator

    @registers_examples
    def before_each(self, hook: Hook) -> Hook:
        """Run ``hook`` before every example of the current group."""
        self._check_registration("before_each")
        return self.hooks.add_before_each(self.current_group, hook)

    @registers_examples
    def after_each(self, hook: Hook) -> Hook:
        """Run ``hook`` after every example of the current group."""
        self._check_registration("after_each")
        return self.hooks.add_after_each(self.current_group, hook)

    def _add_example(
        self,
        description: object,
        location: Location,
        body: Optional[Callable],
        pending: bool,
    ) -> Example:
        example = Example(
            description=str(description),
            location=location,
            body=body,
            pending=pending,
        )
        self.current_group.add(example)
        return example
