"""Example execution: selection, lifecycle and fail-fast."""

import inspect
import logging
import time
import traceback
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from speccore.core.errors import AssertionFailure, ConfigurationError, classify
from speccore.core.location import Location
from speccore.core.matcher import ExampleFilter, matches
from speccore.core.models import (
    Example,
    ExampleResult,
    ExampleStatus,
    FailureDetail,
    Group,
    RunSummary,
)
from speccore.core.registry import Suite
from speccore.core.scope import ExecutionScope, running
from speccore.report.base import Reporter

log = logging.getLogger(__name__)


@dataclass
class RunState:
    """Mutable state of a single run, owned by the runner."""

    fail_fast: bool = False
    abort_requested: bool = False


class Runner:
    """Runs the selected examples of a suite, depth-first in declaration order."""

    def __init__(
        self,
        suite: Suite,
        reporters: Sequence[Reporter] = (),
        filters: Sequence[ExampleFilter] = (),
        fail_fast: bool = False,
    ):
        """Initialize the runner.

        Args:
            suite: Suite whose tree is run
            reporters: Observers notified of every event, in this order
            filters: Active example filters; empty runs everything
            fail_fast: Skip every remaining example after the first failure
        """
        self.suite = suite
        self.reporters = list(reporters)
        self.filters = list(filters)
        self.fail_fast = fail_fast

    def run(self) -> RunSummary:
        """Run the suite and return the results in reporting order.

        Raises:
            ConfigurationError: If an example tries to register examples
        """
        state = RunState(fail_fast=self.fail_fast)
        summary = RunSummary()
        start = time.monotonic()

        log.info(
            "Running suite (fail_fast=%s, filters=%d)", state.fail_fast, len(self.filters)
        )
        with self.suite.locked():
            self._notify("on_run_start")
            try:
                self._run_group(self.suite.root, state, summary)
            finally:
                summary.aborted = state.abort_requested
                summary.duration = time.monotonic() - start
                # Also sent when a configuration error ends the run
                self._notify("on_run_finish", summary)

        log.info(
            "Run finished: %d examples, %d failed, %d errors, %d pending%s",
            summary.total,
            summary.failed,
            summary.errored,
            summary.pending,
            " (aborted)" if summary.aborted else "",
        )
        return summary

    def _run_group(self, group: Group, state: RunState, summary: RunSummary) -> None:
        for child in group.children:
            if state.abort_requested:
                log.debug("Skipping %r: run aborted", child.description)
                return
            if isinstance(child, Group):
                self._run_group(child, state, summary)
            else:
                self._run_example(child, state, summary)

    def _run_example(self, example: Example, state: RunState, summary: RunSummary) -> None:
        description = example.full_description
        if not matches(description, example.location, self.filters):
            log.debug("Skipping %r: not selected", description)
            return

        self._notify("on_example_start", example.description)

        # Drop outcome details left by an earlier run of the same suite
        example.failure = None
        example.duration = None
        if example.pending:
            example.status = ExampleStatus.PENDING
        else:
            self._execute(example)

        result = ExampleResult.from_example(example)
        summary.results.append(result)
        self._notify("on_example_result", result)

        if result.status.failed and state.fail_fast:
            log.debug("Fail-fast: aborting after %r", description)
            state.abort_requested = True

    def _execute(self, example: Example) -> None:
        """Run hooks and body of one example and record its outcome."""
        scope = ExecutionScope(example.full_description, example.location)
        error: Optional[Exception] = None

        start = time.monotonic()
        with running(scope):
            try:
                self.suite.hooks.run_before(example)
                _call_body(example.body, scope)
            except Exception as e:
                error = e
            finally:
                teardown_error = self.suite.hooks.run_after(example)
        duration = time.monotonic() - start

        for raised in (error, teardown_error):
            if isinstance(raised, ConfigurationError):
                raise raised

        # The teardown error, when there is one, is the reported outcome
        if teardown_error is not None:
            error = teardown_error

        example.duration = duration
        if error is None:
            example.status = ExampleStatus.SUCCESS
        else:
            kind = classify(error)
            example.status = (
                ExampleStatus.FAIL if isinstance(error, AssertionError) else ExampleStatus.ERROR
            )
            example.failure = FailureDetail(
                message=_error_message(error),
                location=_error_location(error, example.location),
                kind=kind,
                error_type=type(error).__name__,
            )

    def _notify(self, event: str, *args) -> None:
        for reporter in self.reporters:
            try:
                getattr(reporter, event)(*args)
            except Exception:
                log.warning("Reporter %r failed on %s", reporter, event, exc_info=True)


def _call_body(body: Optional[Callable], scope: ExecutionScope) -> None:
    if body is None:
        return
    if _accepts_scope(body):
        body(scope)
    else:
        body()


def _accepts_scope(body: Callable) -> bool:
    try:
        params = inspect.signature(body).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = [
        p
        for p in params
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    ]
    return len(positional) == 1


def _error_message(error: Exception) -> str:
    if isinstance(error, AssertionFailure):
        return error.message
    message = str(error)
    if isinstance(error, AssertionError):
        return message or "assertion failed"
    return f"{type(error).__name__}: {message}" if message else type(error).__name__


def _error_location(error: Exception, fallback: Location) -> Location:
    """Best source location for an error raised by an example."""
    if isinstance(error, AssertionFailure) and error.location is not None:
        return error.location

    frames = traceback.extract_tb(error.__traceback__)
    for frame in reversed(frames):
        if frame.lineno is not None and fallback.same_file(frame.filename):
            return Location(file=frame.filename, line=frame.lineno)
    return fallback
