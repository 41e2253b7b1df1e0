"""Capabilities available inside a running example, and nesting checks."""

import dis
import inspect
from contextlib import contextmanager
from contextvars import ContextVar
from types import CodeType, ModuleType
from typing import Any, Callable, Generator, Optional

from speccore.core.errors import AssertionFailure, ConfigurationError
from speccore.core.location import Location, caller_location

REGISTRATION_MARKER = "__speccore_registers__"

_GLOBAL_LOADS = {"LOAD_GLOBAL", "LOAD_NAME"}
_CLOSURE_LOADS = {"LOAD_DEREF", "LOAD_CLASSDEREF"}
_ATTR_LOADS = {"LOAD_ATTR", "LOAD_METHOD"}


class ExecutionScope:
    """What an example body may use while it runs.

    Deliberately narrower than the registration DSL: a body can inspect
    its own example and fail it, but cannot declare new examples.
    A body that takes one positional argument receives this object.
    """

    __slots__ = ("description", "location")

    def __init__(self, description: str, location: Location):
        self.description = description
        self.location = location

    def fail(self, message: str, location: Optional[Location] = None) -> None:
        """Fail the running example."""
        raise AssertionFailure(message, location or caller_location())

    def __repr__(self) -> str:
        return f"ExecutionScope({self.description!r}, {self.location})"


_current_scope: ContextVar[Optional[ExecutionScope]] = ContextVar(
    "speccore_current_scope", default=None
)


def current_scope() -> Optional[ExecutionScope]:
    """Return the scope of the example being run, if any."""
    return _current_scope.get()


@contextmanager
def running(scope: ExecutionScope) -> Generator[ExecutionScope, None, None]:
    """Mark an example as running for the duration of the block."""
    token = _current_scope.set(scope)
    try:
        yield scope
    finally:
        _current_scope.reset(token)


def registers_examples(func: Callable) -> Callable:
    """Mark a DSL function as one that adds to the example tree."""
    setattr(func, REGISTRATION_MARKER, True)
    return func


def _is_registration(value: Any) -> bool:
    return bool(getattr(value, REGISTRATION_MARKER, False))


def ensure_not_running(operation: str) -> None:
    """Refuse registration while an example body or hook is executing.

    Raises:
        ConfigurationError: If called from inside a running example
    """
    scope = current_scope()
    if scope is not None:
        raise ConfigurationError(
            f"cannot nest an example inside an example: "
            f"'{operation}' called while running {scope.description!r} ({scope.location})"
        )


def find_registration_call(body: Optional[Callable]) -> Optional[str]:
    """Look for DSL registration calls in the code of a block body.

    Scans the bytecode of the body and of every function or lambda
    nested in it, resolving loaded names against the body's globals and
    closure. Names that cannot be resolved statically are ignored.

    Returns:
        The name of the first registration function found, or None
    """
    if body is None:
        return None

    func = inspect.unwrap(body)
    code = getattr(func, "__code__", None)
    if code is None:
        return None

    namespace = getattr(func, "__globals__", {})
    cells = {}
    for name, cell in zip(code.co_freevars, getattr(func, "__closure__", None) or ()):
        try:
            cells[name] = cell.cell_contents
        except ValueError:
            # Empty cell
            continue

    return _scan_code(code, namespace, cells)


def _scan_code(code: CodeType, namespace: dict, cells: dict) -> Optional[str]:
    previous: Any = None
    for instruction in dis.get_instructions(code):
        name = instruction.argval
        if instruction.opname in _GLOBAL_LOADS:
            value = namespace.get(name)
        elif instruction.opname in _CLOSURE_LOADS:
            value = cells.get(name)
        elif instruction.opname in _ATTR_LOADS and isinstance(name, str):
            value = _safe_getattr(previous, name)
        else:
            previous = None
            continue

        if _is_registration(value):
            return name
        previous = value

    for const in code.co_consts:
        if isinstance(const, CodeType):
            found = _scan_code(const, namespace, cells)
            if found:
                return found
    return None


def _safe_getattr(owner: Any, name: str) -> Any:
    # Only follow attributes of modules and DSL objects; arbitrary
    # objects may run code in properties.
    if owner is None:
        return None
    if isinstance(owner, ModuleType) or getattr(owner, "__speccore_dsl__", False):
        return getattr(owner, name, None)
    return None


def check_body_structure(body: Optional[Callable], operation: str) -> None:
    """Reject an example body that would register examples when run.

    Raises:
        ConfigurationError: If the body calls a registration function
    """
    found = find_registration_call(body)
    if found:
        raise ConfigurationError(
            f"cannot nest an example inside an example: "
            f"'{operation}' body calls '{found}'"
        )
