"""Tests for the rich console reporter."""

import io

import pytest
from rich.console import Console

from speccore.core.errors import FailureKind
from speccore.core.location import Location
from speccore.core.models import ExampleResult, ExampleStatus, FailureDetail, RunSummary
from speccore.report.console import ConsoleReporter

WHERE = Location("spec/calc_spec.py", 6, 9)


def make_reporter(format="progress"):
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=False, width=120)
    return ConsoleReporter(console, format=format), buffer


def result(status, failure=None, description="adds"):
    return ExampleResult(
        description=description,
        full_description=f"calc {description}",
        location=WHERE,
        status=status,
        duration=None if status == ExampleStatus.PENDING else 0.002,
        failure=failure,
    )


class TestConsoleReporter:
    """Tests for ConsoleReporter."""

    def test_invalid_format(self):
        """Unknown formats are rejected."""
        with pytest.raises(ValueError):
            ConsoleReporter(format="html")

    def test_progress_glyphs(self):
        """Progress format prints one glyph per example."""
        reporter, buffer = make_reporter()

        for status in (ExampleStatus.SUCCESS, ExampleStatus.FAIL, ExampleStatus.ERROR, ExampleStatus.PENDING):
            reporter.on_example_result(result(status))

        assert buffer.getvalue() == ".FE*"

    def test_verbose_lines(self):
        """Verbose format prints the full description and status."""
        reporter, buffer = make_reporter("verbose")

        reporter.on_example_result(result(ExampleStatus.SUCCESS))
        reporter.on_example_result(result(ExampleStatus.PENDING, description="[later]"))

        output = buffer.getvalue()
        assert "success calc adds" in output
        assert "pending calc [later]" in output

    def test_summary_lists_failures(self):
        """The summary shows failure messages and locations."""
        reporter, buffer = make_reporter()
        failure = FailureDetail(
            message="expected 3",
            location=Location("spec/calc_spec.py", 8),
            kind=FailureKind.ASSERTION_FAILURE,
        )
        summary = RunSummary(
            results=[result(ExampleStatus.FAIL, failure), result(ExampleStatus.SUCCESS, description="subtracts")],
            aborted=True,
        )

        reporter.on_run_finish(summary)

        output = buffer.getvalue()
        assert "1) calc adds" in output
        assert "expected 3" in output
        assert "spec/calc_spec.py:8" in output
        assert "fail-fast" in output
        assert "Examples" in output
