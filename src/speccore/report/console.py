"""Terminal reporter using rich."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from speccore.core.models import ExampleResult, ExampleStatus, RunSummary
from speccore.report.base import Reporter

STATUS_STYLES = {
    ExampleStatus.SUCCESS: ("green", "."),
    ExampleStatus.FAIL: ("red", "F"),
    ExampleStatus.ERROR: ("red", "E"),
    ExampleStatus.PENDING: ("yellow", "*"),
}

FORMATS = ("progress", "verbose")


class ConsoleReporter(Reporter):
    """Prints examples as they finish and a summary at the end."""

    def __init__(self, console: Optional[Console] = None, format: str = "progress"):
        """Initialize the reporter.

        Args:
            console: Rich console to print to (default: stdout)
            format: "progress" for one glyph per example, "verbose" for one line each
        """
        if format not in FORMATS:
            raise ValueError(f"Format must be one of: {FORMATS}")
        self.console = console or Console()
        self.format = format

    def on_example_start(self, description: str) -> None:
        pass

    def on_example_result(self, result: ExampleResult) -> None:
        style, glyph = STATUS_STYLES.get(result.status, ("white", "?"))
        if self.format == "verbose":
            duration = _format_duration(result.duration)
            self.console.print(
                f"[{style}]{result.status.value:>7}[/{style}] {escape(result.full_description)}"
                + (f" [dim]({duration})[/dim]" if duration else ""),
                highlight=False,
            )
        else:
            self.console.print(f"[{style}]{glyph}[/{style}]", end="")

    def on_run_finish(self, summary: RunSummary) -> None:
        if self.format == "progress":
            self.console.print()

        for index, result in enumerate(summary.failures, start=1):
            failure = result.failure
            self.console.print(f"\n[bold]{index}) {escape(result.full_description)}[/bold]")
            if failure:
                self.console.print(f"   [red]{escape(failure.message)}[/red]", highlight=False)
                self.console.print(f"   [dim]# {failure.location}[/dim]", highlight=False)

        table = Table(show_header=False, box=None)
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")
        table.add_row("Examples", str(summary.total))
        table.add_row("Failures", f"[red]{summary.failed}[/red]")
        table.add_row("Errors", f"[red]{summary.errored}[/red]")
        table.add_row("Pending", f"[yellow]{summary.pending}[/yellow]")
        table.add_row("Duration", _format_duration(summary.duration) or "0ms")
        self.console.print()
        self.console.print(table)

        if summary.aborted:
            self.console.print("[yellow]Run aborted after first failure (fail-fast)[/yellow]")

        if summary.failures:
            self.console.print("\n[red]Failed examples:[/red]")
            for result in summary.failures:
                self.console.print(
                    f"  [red]✗[/red] {result.location}  [dim]# {escape(result.full_description)}[/dim]",
                    highlight=False,
                )


def _format_duration(duration: Optional[float]) -> str:
    if duration is None:
        return ""
    if duration < 1:
        return f"{duration * 1000:.2f}ms"
    return f"{duration:.2f}s"
