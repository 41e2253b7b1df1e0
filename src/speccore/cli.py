"""Command-line interface for speccore."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from speccore import __version__
from speccore.config import FilterConfig, SpecCoreConfig, create_example_config, get_default_config
from speccore.core.errors import ConfigurationError
from speccore.core.discovery import SpecDiscovery
from speccore.core.runner import Runner
from speccore.report.console import ConsoleReporter


console = Console()


def print_banner() -> None:
    """Print the speccore banner."""
    console.print(
        Panel.fit(
            "[bold blue]speccore[/bold blue] - behavior-style example runner",
            subtitle=f"v{__version__}",
        )
    )


def configure_logging(verbose: bool) -> None:
    """Send library logs to the console when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def load_config(config_path: Optional[str]) -> tuple[SpecCoreConfig, Path]:
    """Load the configuration and the directory it applies to."""
    if config_path:
        return SpecCoreConfig.from_file(config_path), Path(config_path).resolve().parent

    found = SpecCoreConfig.find()
    if found is None:
        return get_default_config(), Path.cwd()
    return SpecCoreConfig.from_file(found), found.parent


@click.group()
@click.version_option(version=__version__, prog_name="speccore")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: speccore.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """speccore - run describe/it style examples.

    Builds the example tree from spec files, runs the selected examples
    and reports each result.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config
    configure_logging(verbose)


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="speccore.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
def init(output: str, force: bool) -> None:
    """Initialize a new speccore configuration file."""
    print_banner()

    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(
            f"[yellow]Configuration file already exists:[/yellow] {output_path}"
        )
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_config(output_path)
        console.print(f"[green]Created configuration file:[/green] {output_path}")
    except OSError as e:
        console.print(f"[red]Error creating configuration:[/red] {e}")
        sys.exit(1)


@main.command()
@click.argument("paths", nargs=-1)
@click.option("--example", "-e", "pattern", help="Run examples whose description contains PATTERN")
@click.option("--regex", is_flag=True, help="Treat PATTERN as a regular expression")
@click.option("--fail-fast/--no-fail-fast", default=None, help="Stop after the first failure")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["progress", "verbose"]),
    help="Output format",
)
@click.pass_context
def run(
    ctx: click.Context,
    paths: tuple[str, ...],
    pattern: Optional[str],
    regex: bool,
    fail_fast: Optional[bool],
    output_format: Optional[str],
) -> None:
    """Run examples from spec files. PATHS may be FILE, DIR or FILE:LINE."""
    try:
        config, base_dir = load_config(ctx.obj.get("config_path"))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    run_config = config.run
    discovery = SpecDiscovery(base_dir, pattern=run_config.pattern)
    found = discovery.discover(paths or run_config.spec_paths)

    if not found.success:
        for missing in found.missing:
            console.print(f"[red]Error:[/red] no such file or directory: {missing}")
        sys.exit(1)
    if len(found.locations) > 1:
        console.print("[red]Error:[/red] only one FILE:LINE location may be given")
        sys.exit(1)

    settings = run_config.filter.model_dump()
    if pattern is not None:
        settings.update(pattern=pattern, regex=regex)
    if found.locations:
        location = found.locations[0]
        settings.update(file=location.file, line=location.line)
    try:
        filter_config = FilterConfig(**settings)
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    reporter = ConsoleReporter(console, format=output_format or run_config.format)
    try:
        suite = discovery.load(found.files)
        runner = Runner(
            suite,
            reporters=[reporter],
            filters=filter_config.build_filters(),
            fail_fast=run_config.fail_fast if fail_fast is None else fail_fast,
        )
        summary = runner.run()
    except ConfigurationError as e:
        console.print(f"\n[red]Configuration error:[/red] {e}")
        sys.exit(2)

    if not summary.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
