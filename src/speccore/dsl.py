"""Module-level registration DSL bound to a default suite.

Spec files import these functions::

    from speccore import describe, it

    @describe("calc")
    def _():
        @it("adds")
        def _():
            assert 1 + 1 == 2
"""

from contextlib import contextmanager
from typing import Callable, Generator, NoReturn, Optional

from speccore.core.errors import AssertionFailure
from speccore.core.hooks import Hook
from speccore.core.location import Location, caller_location
from speccore.core.registry import DEFAULT_DESCRIPTION, Suite
from speccore.core.scope import registers_examples

_default_suite = Suite()


def default_suite() -> Suite:
    """Return the suite the module-level DSL registers into."""
    return _default_suite


def set_default_suite(suite: Suite) -> Suite:
    """Install a new default suite and return the previous one."""
    global _default_suite
    previous = _default_suite
    _default_suite = suite
    return previous


@contextmanager
def using_suite(suite: Suite) -> Generator[Suite, None, None]:
    """Temporarily register module-level DSL calls into ``suite``."""
    previous = set_default_suite(suite)
    try:
        yield suite
    finally:
        set_default_suite(previous)


@registers_examples
def describe(description: object, body: Optional[Callable] = None, *, location: Optional[Location] = None):
    return _default_suite.describe(
        description, body, location=location or caller_location(body=body)
    )


@registers_examples
def context(description: object, body: Optional[Callable] = None, *, location: Optional[Location] = None):
    return _default_suite.context(
        description, body, location=location or caller_location(body=body)
    )


@registers_examples
def it(description: object = DEFAULT_DESCRIPTION, body: Optional[Callable] = None, *, location: Optional[Location] = None):
    return _default_suite.it(
        description, body, location=location or caller_location(body=body)
    )


@registers_examples
def pending(description: object = DEFAULT_DESCRIPTION, body: Optional[Callable] = None, *, location: Optional[Location] = None):
    return _default_suite.pending(
        description, body, location=location or caller_location(body=body)
    )


@registers_examples
def before_each(hook: Hook) -> Hook:
    return _default_suite.before_each(hook)


@registers_examples
def after_each(hook: Hook) -> Hook:
    return _default_suite.after_each(hook)


def fail(message: str, location: Optional[Location] = None) -> NoReturn:
    """Fail the running example with ``message``."""
    raise AssertionFailure(message, location or caller_location())
