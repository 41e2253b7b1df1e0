"""Configuration management for speccore."""

import json
import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from speccore.core.matcher import DescriptionFilter, ExampleFilter, LocationFilter

CONFIG_NAMES = ["speccore.json", ".speccore.json"]


class ProjectConfig(BaseModel):
    """Project identification."""

    name: str = Field(default="my-project", description="Project name for identification")


class FilterConfig(BaseModel):
    """Which examples to run."""

    pattern: Optional[str] = Field(default=None, description="Run examples whose full description contains this")
    regex: bool = Field(default=False, description="Treat pattern as a regular expression")
    file: Optional[str] = Field(default=None, description="Source file of the location filter")
    line: Optional[int] = Field(default=None, description="Any line inside the example to run")

    @field_validator("line")
    @classmethod
    def validate_line(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("Line must be at least 1")
        return v

    @model_validator(mode="after")
    def validate_location(self) -> "FilterConfig":
        if (self.file is None) != (self.line is None):
            raise ValueError("file and line must be given together")
        return self

    @model_validator(mode="after")
    def validate_regex(self) -> "FilterConfig":
        if self.regex and self.pattern:
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise ValueError(f"Invalid regular expression {self.pattern!r}: {e}") from e
        return self

    @classmethod
    def parse_location(cls, value: str, **kwargs) -> "FilterConfig":
        """Create a filter config from ``path:LINE``."""
        location = LocationFilter.parse(value)
        return cls(file=location.file, line=location.line, **kwargs)

    def build_filters(self) -> list[ExampleFilter]:
        """Return the matcher filters for this configuration."""
        filters: list[ExampleFilter] = []
        if self.pattern:
            filters.append(DescriptionFilter(self.pattern, regex=self.regex))
        if self.file is not None and self.line is not None:
            filters.append(LocationFilter(file=self.file, line=self.line))
        return filters


class RunConfig(BaseModel):
    """Run-level configuration."""

    fail_fast: bool = Field(default=False, description="Stop after the first failing example")
    format: str = Field(default="progress", description="Console output format (progress, verbose)")
    spec_paths: list[str] = Field(default_factory=lambda: ["spec"], description="Spec files or directories")
    pattern: str = Field(default="*_spec.py", description="Glob for spec files inside directories")
    filter: FilterConfig = Field(default_factory=FilterConfig)

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        allowed = {"progress", "verbose"}
        if v.lower() not in allowed:
            raise ValueError(f"Format must be one of: {allowed}")
        return v.lower()

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Spec file pattern cannot be empty")
        return v


class SpecCoreConfig(BaseModel):
    """Main configuration for speccore."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    run: RunConfig = Field(default_factory=RunConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "SpecCoreConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def find(cls, start_dir: Path | str | None = None) -> Optional[Path]:
        """Find a configuration file, searching up the directory tree."""
        current = (Path(start_dir) if start_dir is not None else Path.cwd()).resolve()
        for directory in [current, *current.parents]:
            for name in CONFIG_NAMES:
                config_path = directory / name
                if config_path.exists():
                    return config_path
        return None

    @classmethod
    def find_and_load(cls, start_dir: Path | str | None = None) -> "SpecCoreConfig":
        """Find and load configuration file, searching up the directory tree."""
        config_path = cls.find(start_dir)
        if config_path is None:
            raise FileNotFoundError(
                "No configuration file found. Create speccore.json or run 'speccore init'"
            )
        return cls.from_file(config_path)

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)


def get_default_config() -> SpecCoreConfig:
    """Return a default configuration."""
    return SpecCoreConfig(
        project=ProjectConfig(name="my-project"),
        run=RunConfig(fail_fast=False, format="progress", spec_paths=["spec"]),
    )


def create_example_config(output_path: Path | str) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    config = get_default_config()
    config.to_file(output_path)
    return output_path
