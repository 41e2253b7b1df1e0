"""Reporter interface notified by the runner."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from speccore.core.models import ExampleResult, RunSummary


class Reporter(ABC):
    """Abstract base class for result observers.

    Reporters receive immutable results and cannot change the outcome
    they are told about.
    """

    @abstractmethod
    def on_example_start(self, description: str) -> None:
        """Called when a selected example is about to run.

        Args:
            description: The example's own description
        """
        pass

    @abstractmethod
    def on_example_result(self, result: ExampleResult) -> None:
        """Called once with the final outcome of a selected example."""
        pass

    def on_run_start(self) -> None:
        pass

    def on_run_finish(self, summary: RunSummary) -> None:
        pass


@dataclass
class MemoryReporter(Reporter):
    """Keeps every event in memory, in the order received."""

    events: list[tuple[str, Any]] = field(default_factory=list)

    def on_example_start(self, description: str) -> None:
        self.events.append(("start", description))

    def on_example_result(self, result: ExampleResult) -> None:
        self.events.append(("result", result))

    @property
    def results(self) -> list[ExampleResult]:
        return [payload for kind, payload in self.events if kind == "result"]

    @property
    def started(self) -> list[str]:
        return [payload for kind, payload in self.events if kind == "start"]
