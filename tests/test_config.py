"""Tests for the configuration module."""

import json
import tempfile
from pathlib import Path

import pytest

from speccore.config import (
    FilterConfig,
    ProjectConfig,
    RunConfig,
    SpecCoreConfig,
    create_example_config,
    get_default_config,
)
from speccore.core.matcher import DescriptionFilter, LocationFilter


class TestProjectConfig:
    """Tests for ProjectConfig."""

    def test_default_values(self):
        """Test default values are set correctly."""
        config = ProjectConfig(name="test")
        assert config.name == "test"


class TestFilterConfig:
    """Tests for FilterConfig."""

    def test_empty_filter(self):
        """No filter settings means no filters."""
        assert FilterConfig().build_filters() == []

    def test_pattern_filter(self):
        """A pattern becomes a description filter."""
        filters = FilterConfig(pattern="adds", regex=True).build_filters()
        assert filters == [DescriptionFilter("adds", regex=True)]

    def test_location_filter(self):
        """file and line become a location filter."""
        filters = FilterConfig(file="spec/calc_spec.py", line=7).build_filters()
        assert filters == [LocationFilter("spec/calc_spec.py", 7)]

    def test_parse_location(self):
        """FILE:LINE strings are split."""
        config = FilterConfig.parse_location("spec/calc_spec.py:7", pattern="adds")
        assert config.file == "spec/calc_spec.py"
        assert config.line == 7
        assert config.pattern == "adds"

    def test_line_requires_file(self):
        """A line without a file is rejected."""
        with pytest.raises(ValueError):
            FilterConfig(line=3)
        with pytest.raises(ValueError):
            FilterConfig(file="spec/calc_spec.py")

    def test_line_must_be_positive(self):
        """Line numbers start at 1."""
        with pytest.raises(ValueError):
            FilterConfig(file="spec/calc_spec.py", line=0)

    def test_invalid_regex_rejected(self):
        """A regex pattern that does not compile is a config error."""
        with pytest.raises(ValueError, match="Invalid regular expression"):
            FilterConfig(pattern="(", regex=True)

    def test_plain_pattern_not_compiled(self):
        """Substring patterns may contain regex metacharacters."""
        config = FilterConfig(pattern="(")
        assert config.build_filters() == [DescriptionFilter("(")]


class TestRunConfig:
    """Tests for RunConfig."""

    def test_default_values(self):
        """Test default values are set correctly."""
        config = RunConfig()
        assert config.fail_fast is False
        assert config.format == "progress"
        assert config.spec_paths == ["spec"]
        assert config.pattern == "*_spec.py"

    def test_format_validation(self):
        """Test that only known formats are accepted."""
        with pytest.raises(ValueError):
            RunConfig(format="html")

    def test_format_case_insensitive(self):
        """Test that format is case-insensitive."""
        assert RunConfig(format="VERBOSE").format == "verbose"

    def test_empty_pattern_rejected(self):
        """Spec file pattern cannot be blank."""
        with pytest.raises(ValueError):
            RunConfig(pattern="  ")


class TestSpecCoreConfig:
    """Tests for SpecCoreConfig."""

    def test_default_config(self):
        """Test creating a default configuration."""
        config = get_default_config()
        assert config.project.name == "my-project"
        assert config.run.fail_fast is False

    def test_from_file(self):
        """Test loading configuration from a file."""
        config_data = {
            "project": {"name": "test-project"},
            "run": {"fail_fast": True, "filter": {"pattern": "adds"}},
        }

        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".json", delete=False
        ) as f:
            json.dump(config_data, f)
            f.flush()

            config = SpecCoreConfig.from_file(f.name)
            assert config.project.name == "test-project"
            assert config.run.fail_fast is True
            assert config.run.filter.pattern == "adds"

    def test_from_file_not_found(self):
        """Test loading from non-existent file raises error."""
        with pytest.raises(FileNotFoundError):
            SpecCoreConfig.from_file("/nonexistent/path.json")

    def test_to_file(self):
        """Test saving configuration to a file."""
        config = get_default_config()
        config.project.name = "saved-project"

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.json"
            config.to_file(path)

            assert path.exists()

            loaded = SpecCoreConfig.from_file(path)
            assert loaded.project.name == "saved-project"

    def test_create_example_config(self):
        """Test creating an example configuration file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "example.json"
            result = create_example_config(path)

            assert result == path
            assert path.exists()

            with open(path) as f:
                data = json.load(f)
                assert "project" in data
                assert "run" in data

    def test_find_and_load_searches_parents(self, tmp_path):
        """A config file in a parent directory is found."""
        create_example_config(tmp_path / "speccore.json")
        nested = tmp_path / "spec" / "math"
        nested.mkdir(parents=True)

        assert SpecCoreConfig.find(nested) == (tmp_path / "speccore.json").resolve()
        assert SpecCoreConfig.find_and_load(nested).project.name == "my-project"

    def test_find_and_load_missing(self, tmp_path):
        """Without a config file anywhere up the tree, loading fails."""
        if SpecCoreConfig.find(tmp_path) is not None:
            pytest.skip("a speccore.json exists above the temp directory")
        with pytest.raises(FileNotFoundError):
            SpecCoreConfig.find_and_load(tmp_path)
