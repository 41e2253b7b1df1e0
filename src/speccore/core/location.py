"""Source locations of groups and examples."""

import inspect
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional


@dataclass(frozen=True)
class Location:
    """A source range: file, declaration line and last line of the block."""

    file: str
    line: int
    end_line: Optional[int] = None

    def __post_init__(self):
        if self.end_line is None:
            object.__setattr__(self, "end_line", self.line)
        elif self.end_line < self.line:
            raise ValueError(
                f"end_line ({self.end_line}) must not be before line ({self.line})"
            )

    def contains(self, line: int) -> bool:
        """Check whether a line falls within this range, bounds included."""
        return self.line <= line <= self.end_line

    def same_file(self, other_file: str | Path) -> bool:
        """Compare files after resolving both paths."""
        return Path(self.file).resolve() == Path(other_file).resolve()

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"file": self.file, "line": self.line, "end_line": self.end_line}


def body_end_line(body: Optional[Callable]) -> Optional[int]:
    """Return the last source line spanned by a block body.

    Uses the source text when it can be found and falls back to the
    line table of the code object (e.g. for code compiled from strings).
    """
    if body is None:
        return None

    func = inspect.unwrap(body)
    code = getattr(func, "__code__", None)
    if code is None:
        return None

    try:
        lines, start = inspect.getsourcelines(func)
        # Lambdas report the whole source line they sit on
        return start + len(lines) - 1
    except (OSError, TypeError):
        pass

    last = code.co_firstlineno
    for _, _, line in code.co_lines():
        if line is not None and line > last:
            last = line
    return last


def caller_location(
    depth: int = 1,
    body: Optional[Callable] = None,
) -> Location:
    """Capture the location of a DSL call site.

    Args:
        depth: Number of frames above the caller of this function
        body: Block body whose last line becomes the end line

    Returns:
        Location of the call site, spanning the body when one is given
    """
    frame = sys._getframe(depth + 1)
    file = frame.f_code.co_filename
    line = frame.f_lineno
    del frame

    end_line = body_end_line(body)
    if end_line is None or end_line < line:
        end_line = line

    return Location(file=file, line=line, end_line=end_line)


def with_body(location: Location, body: Optional[Callable]) -> Location:
    """Extend a call-site location to cover a body given later.

    The decorator form captures the call site before the decorated
    function exists.
    """
    end_line = body_end_line(body)
    if end_line is None or end_line <= location.end_line:
        return location
    return Location(file=location.file, line=location.line, end_line=end_line)
