"""
Command-line interface for rsync-facts.

Provides commands for resolving rsync version facts and printing them for
humans or for configuration-management tooling.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from rsync_facts import __version__
from rsync_facts.config import OUTPUT_FORMATS, Config
from rsync_facts.core import FactEngine, FactReport
from rsync_facts.facts import FACTS, list_facts

console = Console()
# Logs go to stderr so json/yaml/external output on stdout stays parseable
err_console = Console(stderr=True)


def setup_logging(level: str, log_file: str | None = None) -> None:
    """Configure logging with rich handler."""
    handlers: list[logging.Handler] = [RichHandler(console=err_console, rich_tracebacks=True)]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
    )


@click.group()
@click.version_option(version=__version__, prog_name="rsync-facts")
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "-V",
    "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.pass_context
def main(ctx: click.Context, config: Path | None, verbose: bool) -> None:
    """
    rsync-facts - rsync version facts for configuration management.

    Probe the installed rsync and report its release and protocol versions.
    """
    ctx.ensure_object(dict)

    if config:
        ctx.obj["config"] = Config.load(config)
    else:
        ctx.obj["config"] = Config.load()

    log_level = "DEBUG" if verbose else ctx.obj["config"].log_level
    setup_logging(log_level, ctx.obj["config"].log_file)
    ctx.obj["verbose"] = verbose


@main.command()
@click.option(
    "--fact",
    "-F",
    "facts",
    multiple=True,
    type=click.Choice(list_facts()),
    help="Specific facts to resolve (can be repeated)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Write output to file instead of stdout",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format (defaults to the configured format)",
)
@click.pass_context
def collect(
    ctx: click.Context,
    facts: tuple[str, ...],
    output: Path | None,
    format: str | None,
) -> None:
    """
    Resolve rsync facts.

    By default, resolves every fact and displays a summary. Use --fact to
    resolve specific facts only.
    """
    config: Config = ctx.obj["config"]
    output_format = format or config.output_format
    if output_format not in OUTPUT_FORMATS:
        raise click.BadParameter(
            f"unsupported output format {output_format!r}", param_hint="'--format'"
        )

    engine = FactEngine(config)
    fact_list = list(facts) if facts else None

    if output_format == "pretty":
        console.print()
        console.print(
            Panel.fit(
                f"[bold blue]rsync-facts v{__version__}[/]\nProbing rsync...",
                border_style="blue",
            )
        )
        console.print()

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Resolving facts...", total=None)
            report = engine.evaluate(fact_list)
            progress.update(task, completed=True)

        _display_summary(report)
    else:
        report = engine.evaluate(fact_list)

    if output:
        # Pretty output has no file form, save the full report as JSON
        rendered = report.to_json() if output_format == "pretty" else report.render(output_format)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(rendered)
        if output_format == "pretty":
            console.print(f"\n[dim]Report saved to: {output}[/]")
    elif output_format != "pretty":
        click.echo(report.render(output_format), nl=False)


def _display_summary(report: FactReport) -> None:
    """Display a summary table of resolved facts."""
    table = Table(title="rsync Facts", show_header=True)
    table.add_column("Fact", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Value")

    for name, value in report.facts.items():
        if value is None:
            table.add_row(name, "[red]✗[/]", "[dim]undefined[/]")
        else:
            table.add_row(name, "[green]✓[/]", value)

    console.print(table)

    if report.probe and report.probe.get("banner"):
        console.print(f"[dim]Banner: {report.probe['banner']}[/]")

    if report.errors:
        console.print()
        console.print("[yellow]Errors:[/]")
        for error in report.errors:
            console.print(f"  • {error}")


@main.command("get")
@click.argument("name", type=click.Choice(list_facts()))
@click.pass_context
def get_fact(ctx: click.Context, name: str) -> None:
    """
    Print the value of a single fact.

    Exits with status 1 when the fact is undefined on this host.
    """
    config: Config = ctx.obj["config"]
    report = FactEngine(config).evaluate([name])
    value = report.get(name)

    if value is None:
        for error in report.errors:
            err_console.print(f"[red]{error}[/]")
        sys.exit(1)

    click.echo(value)


@main.command("list")
def list_available() -> None:
    """List all available facts."""
    table = Table(title="Available Facts", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Description")

    for name, cls in FACTS.items():
        table.add_row(name, cls.description)

    console.print()
    console.print(table)


@main.command("version", short_help="Display version information")
def version() -> None:
    """Display version information for rsync-facts."""
    console.print()
    console.print(
        Panel.fit(
            f"[bold blue]rsync-facts[/]\nVersion: [cyan]{__version__}[/]",
            border_style="blue",
            title="Version Information",
        )
    )
    console.print()

    table = Table(show_header=False, box=None)
    table.add_column("Component", style="dim", width=20)
    table.add_column("Version", style="cyan")

    table.add_row("rsync-facts", __version__)
    table.add_row("Python", f"{sys.version.split()[0]}")

    console.print(table)
    console.print()


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show current configuration and whether rsync can be probed."""
    config: Config = ctx.obj["config"]

    console.print()
    console.print(
        Panel.fit(
            "[bold]rsync-facts Status[/]",
            border_style="blue",
        )
    )

    try:
        command_parts = shlex.split(config.rsync_command)
    except ValueError:
        command_parts = []
    resolved = shutil.which(command_parts[0]) if command_parts else None

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value")

    table.add_row("rsync Command", config.rsync_command)
    table.add_row("Resolved Path", resolved or "[dim]Not found on PATH[/]")
    table.add_row(
        "Probe Timeout",
        f"{config.probe_timeout}s" if config.probe_timeout is not None else "[dim]None[/]",
    )
    table.add_row("Enabled Facts", ", ".join(config.enabled_facts) or "[dim]All[/]")
    table.add_row("Disabled Facts", ", ".join(config.disabled_facts) or "[dim]None[/]")
    table.add_row("Output Format", config.output_format)
    table.add_row("Log Level", config.log_level)
    table.add_row("Log File", config.log_file or "[dim]Not set[/]")

    console.print(table)
    console.print()

    engine = FactEngine(config)
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Probing rsync...", total=None)
        result = engine.probe.probe()
        progress.update(task, completed=True)

    if result.success:
        console.print(f"[green]✓ rsync responded:[/] {result.banner}")
    else:
        console.print(f"[red]✗ rsync probe failed: {result.failure.value}[/]")


@main.command()
@click.argument("output_path", type=click.Path(path_type=Path))
@click.pass_context
def init_config(ctx: click.Context, output_path: Path) -> None:
    """
    Generate a sample configuration file.

    Creates a YAML configuration file with all available options
    and helpful comments.
    """
    sample_config = """# rsync-facts Configuration

# Probe settings
probe:
  # rsync executable, looked up on PATH. A launcher prefix is allowed,
  # e.g. "/usr/bin/env rsync"
  rsync_command: rsync

  # Seconds to wait for "rsync --version" (null = wait forever)
  probe_timeout: null

# Fact selection
facts:
  # Specific facts to resolve (empty = all)
  enabled_facts: []

  # Facts to skip
  disabled_facts: []

# Output settings
output:
  # Default format for "collect": pretty, json, yaml, external
  output_format: pretty

# Logging
logging:
  # Log level: DEBUG, INFO, WARNING, ERROR
  log_level: INFO

  # Log file path (null = stderr only)
  log_file: null
"""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(sample_config)
    console.print(f"[green]✓ Configuration file created: {output_path}[/]")
    console.print()
    console.print("Next steps:")
    console.print("  1. Point rsync_command at the rsync you want probed")
    console.print("  2. Check the probe: [cyan]rsync-facts status[/]")
    console.print("  3. Resolve facts: [cyan]rsync-facts collect --format external[/]")


if __name__ == "__main__":
    main()
