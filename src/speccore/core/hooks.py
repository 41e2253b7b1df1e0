"""Before/after-each hooks inherited along the group tree."""

import logging
from typing import Callable, Optional

from speccore.core.models import Example, Group

log = logging.getLogger(__name__)

Hook = Callable[[], object]


class HookRegistry:
    """Registers hooks on groups and resolves the hooks of an example."""

    def add_before_each(self, group: Group, hook: Hook) -> Hook:
        group.hooks.before_each.append(hook)
        return hook

    def add_after_each(self, group: Group, hook: Hook) -> Hook:
        group.hooks.after_each.append(hook)
        return hook

    def before_hooks(self, example: Example) -> list[Hook]:
        """Setup hooks, outermost group first, declaration order within a group."""
        hooks: list[Hook] = []
        for group in example.ancestors():
            hooks.extend(group.hooks.before_each)
        return hooks

    def after_hooks(self, example: Example) -> list[Hook]:
        """Teardown hooks, innermost group first, reverse declaration order.

        Whatever was set up last is torn down first.
        """
        hooks: list[Hook] = []
        for group in reversed(example.ancestors()):
            hooks.extend(reversed(group.hooks.after_each))
        return hooks

    def run_before(self, example: Example) -> None:
        """Run the setup hooks of an example, stopping at the first error."""
        for hook in self.before_hooks(example):
            hook()

    def run_after(self, example: Example) -> Optional[Exception]:
        """Run every teardown hook of an example.

        A raising hook does not stop the remaining ones.

        Returns:
            The last error raised by a hook, or None
        """
        last_error: Optional[Exception] = None
        for hook in self.after_hooks(example):
            try:
                hook()
            except Exception as e:
                log.debug("after_each hook %r raised %r", hook, e)
                last_error = e
        return last_error
