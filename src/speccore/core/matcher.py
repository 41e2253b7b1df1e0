"""Example selection by description pattern or source line."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Union

from speccore.core.location import Location


@dataclass(frozen=True)
class DescriptionFilter:
    """Selects examples whose full description contains a pattern."""

    pattern: str
    regex: bool = False

    def matches(self, description: str, location: Location) -> bool:
        if self.regex:
            return re.search(self.pattern, description) is not None
        return self.pattern in description


@dataclass(frozen=True)
class LocationFilter:
    """Selects the examples whose source range contains a target line.

    Pointing at any line inside an example body selects it, not only
    its declaration line.
    """

    file: str
    line: int

    def matches(self, description: str, location: Location) -> bool:
        return location.same_file(self.file) and location.contains(self.line)

    @classmethod
    def parse(cls, value: str) -> "LocationFilter":
        """Build a filter from ``path:LINE``."""
        path, sep, line = value.rpartition(":")
        if not sep or not path or not line.isdigit():
            raise ValueError(f"Expected FILE:LINE, got {value!r}")
        return cls(file=str(Path(path)), line=int(line))


ExampleFilter = Union[DescriptionFilter, LocationFilter]


def matches(
    description: str,
    location: Location,
    filters: Sequence[ExampleFilter] = (),
) -> bool:
    """Decide whether an example is selected by the active filters.

    Args:
        description: Full description of the example
        location: The example's own source range
        filters: Active filters; empty selects everything

    Returns:
        True if the example satisfies every filter
    """
    return all(f.matches(description, location) for f in filters)
