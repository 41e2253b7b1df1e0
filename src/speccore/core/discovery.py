"""Spec file discovery and loading."""

import logging
import runpy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from speccore.core.matcher import LocationFilter
from speccore.core.registry import Suite
from speccore.dsl import using_suite

log = logging.getLogger(__name__)


@dataclass
class DiscoveryResult:
    """Result of spec file discovery."""

    files: list[Path] = field(default_factory=list)
    locations: list[LocationFilter] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if every requested path was found."""
        return not self.missing


class SpecDiscovery:
    """Finds spec files and loads them into a suite."""

    def __init__(self, base_dir: Path, pattern: str = "*_spec.py"):
        """Initialize spec discovery.

        Args:
            base_dir: Directory relative paths are resolved against
            pattern: Glob used to find spec files inside directories
        """
        self.base_dir = base_dir
        self.pattern = pattern

    def discover(self, paths: Iterable[str]) -> DiscoveryResult:
        """Expand files, directories and ``FILE:LINE`` arguments."""
        result = DiscoveryResult()
        for raw in paths:
            location: Optional[LocationFilter] = None
            try:
                location = LocationFilter.parse(raw)
                raw = location.file
            except ValueError:
                pass

            path = Path(raw)
            if not path.is_absolute():
                path = self.base_dir / path

            if path.is_dir():
                found = sorted(p for p in path.rglob(self.pattern) if p.is_file())
                log.debug("Found %d spec files in %s", len(found), path)
                result.files.extend(found)
            elif path.is_file():
                result.files.append(path)
                if location is not None:
                    result.locations.append(LocationFilter(file=str(path), line=location.line))
            else:
                result.missing.append(raw)

        # Keep the first occurrence of each file
        seen: set[Path] = set()
        unique = []
        for path in result.files:
            resolved = path.resolve()
            if resolved not in seen:
                seen.add(resolved)
                unique.append(path)
        result.files = unique
        return result

    def load(self, files: Iterable[Path], suite: Optional[Suite] = None) -> Suite:
        """Evaluate spec files, registering their examples into ``suite``.

        Raises:
            ConfigurationError: If a spec file nests examples illegally
        """
        suite = suite or Suite()
        with using_suite(suite):
            for path in files:
                log.debug("Loading %s", path)
                runpy.run_path(str(path), run_name="__speccore_spec__")
        return suite
