"""Tests for the tree and result models."""

import pytest

from speccore.core.errors import FailureKind
from speccore.core.location import Location
from speccore.core.models import (
    Example,
    ExampleResult,
    ExampleStatus,
    FailureDetail,
    Group,
    RunSummary,
)

WHERE = Location("calc_spec.py", 3, 5)


def result(status, duration=0.25, failure=None):
    return ExampleResult(
        description="adds",
        full_description="calc adds",
        location=WHERE,
        status=status,
        duration=duration,
        failure=failure,
    )


class TestExampleStatus:
    """Tests for ExampleStatus enum."""

    def test_status_values(self):
        """Test that all expected statuses exist."""
        assert ExampleStatus.UNRUN.value == "unrun"
        assert ExampleStatus.SUCCESS.value == "success"
        assert ExampleStatus.FAIL.value == "fail"
        assert ExampleStatus.ERROR.value == "error"
        assert ExampleStatus.PENDING.value == "pending"

    def test_failed(self):
        """Only fail and error count as failed."""
        assert ExampleStatus.FAIL.failed
        assert ExampleStatus.ERROR.failed
        assert not ExampleStatus.SUCCESS.failed
        assert not ExampleStatus.PENDING.failed


class TestTree:
    """Tests for groups and examples."""

    def test_full_description_skips_root(self):
        """The implicit root contributes nothing to descriptions."""
        root = Group(description="")
        calc = Group(description="calc")
        plus = Group(description="+")
        example = Example(description="adds", location=WHERE)
        root.add(calc)
        calc.add(plus)
        plus.add(example)

        assert example.full_description == "calc + adds"
        assert example.ancestors() == [root, calc, plus]
        assert list(root.examples()) == [example]

    def test_detached_example(self):
        """An example without parent is described by itself."""
        example = Example(description="adds", location=WHERE)
        assert example.full_description == "adds"
        assert example.status == ExampleStatus.UNRUN
        assert example.duration is None


class TestExampleResult:
    """Tests for ExampleResult."""

    def test_from_example(self):
        """A result snapshots the example's outcome."""
        group = Group(description="calc")
        example = Example(description="adds", location=WHERE)
        group.add(example)
        example.status = ExampleStatus.SUCCESS
        example.duration = 0.5

        snapshot = ExampleResult.from_example(example)

        assert snapshot.full_description == "calc adds"
        assert snapshot.status == ExampleStatus.SUCCESS
        assert snapshot.duration == 0.5

    def test_to_dict(self):
        """Durations are exported in milliseconds."""
        failure = FailureDetail(
            message="nope",
            location=WHERE,
            kind=FailureKind.ASSERTION_FAILURE,
            error_type="AssertionFailure",
        )
        d = result(ExampleStatus.FAIL, failure=failure).to_dict()

        assert d["status"] == "fail"
        assert d["duration_ms"] == 250
        assert d["failure"]["kind"] == "assertion_failure"
        assert d["failure"]["location"] == {"file": "calc_spec.py", "line": 3, "end_line": 5}

    def test_pending_to_dict(self):
        """Pending results have no duration."""
        d = result(ExampleStatus.PENDING, duration=None).to_dict()
        assert d["duration_ms"] is None
        assert d["failure"] is None


class TestRunSummary:
    """Tests for RunSummary."""

    def test_counts(self):
        """Counters split results by status."""
        summary = RunSummary(
            results=[
                result(ExampleStatus.SUCCESS),
                result(ExampleStatus.FAIL),
                result(ExampleStatus.ERROR),
                result(ExampleStatus.PENDING, duration=None),
            ]
        )

        assert summary.total == 4
        assert summary.succeeded == 1
        assert summary.failed == 1
        assert summary.errored == 1
        assert summary.pending == 1
        assert not summary.success
        assert [r.status for r in summary.failures] == [ExampleStatus.FAIL, ExampleStatus.ERROR]

    def test_empty_summary_is_success(self):
        """No results means nothing failed."""
        summary = RunSummary()
        assert summary.success
        assert summary.to_dict()["total"] == 0

    def test_to_dict(self):
        """The summary exports its counters."""
        summary = RunSummary(results=[result(ExampleStatus.SUCCESS)], aborted=True, duration=1.5)
        d = summary.to_dict()

        assert d["success"] == 1
        assert d["aborted"] is True
        assert d["duration_ms"] == 1500
        assert len(d["results"]) == 1

    def test_results_are_frozen(self):
        """Results cannot be altered after the fact."""
        with pytest.raises(AttributeError):
            result(ExampleStatus.SUCCESS).status = ExampleStatus.FAIL
