"""Main CLI entry point for resolving cluster configurations."""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from doks_planner.exceptions import (
    CannotRemoveDefaultPoolError,
    ConfigurationError,
    ExternalLookupError,
    GraphConstraintError,
    PlannerError,
    ValidationError,
)
from doks_planner.logging_config import get_logger, setup_logging

app = typer.Typer(
    name="doks-plan",
    help="Resolve DigitalOcean Kubernetes configurations into ordered resource plans",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: str | None = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Global options for all commands."""
    log_path = Path(log_file) if log_file else None
    setup_logging(verbose=verbose, log_file=log_path)
    logger.debug("Logging initialized")


def _print_validation_failures(error: ValidationError) -> None:
    table = Table(title=error.message)
    table.add_column("Location", style="cyan")
    table.add_column("Problem", style="red")
    for failure in error.failures:
        table.add_row(escape(failure.location), escape(failure.message))
    console.print(table)


def _print_error(title: str, error: PlannerError) -> None:
    console.print(f"[red]{title}:[/red] {escape(error.message)}")
    if error.details:
        console.print(f"\n{escape(error.details)}")


def _resolve(config_path: str, defaults_path: str | None, previous_path: str | None = None):
    """Load files and run the resolver, mapping errors to exit code 1."""
    from doks_planner.config import ResolverDefaults, load_config_file
    from doks_planner.render import load_plan
    from doks_planner.resolver import ConfigurationResolver

    try:
        raw = load_config_file(config_path)
        defaults = ResolverDefaults.load(defaults_path) if defaults_path else None
        previous = load_plan(previous_path) if previous_path else None
        return ConfigurationResolver(defaults=defaults).resolve(raw, previous=previous)
    except ValidationError as e:
        logger.error(f"Validation failed with {len(e.failures)} errors")
        _print_validation_failures(e)
        raise typer.Exit(code=1)
    except ConfigurationError as e:
        _print_error("Configuration Error", e)
        raise typer.Exit(code=1)
    except ExternalLookupError as e:
        logger.error(f"Version lookup failed: {e.message}")
        _print_error("Version Lookup Error", e)
        console.print("\nTip: pin kubernetes_version to resolve without the API")
        raise typer.Exit(code=1)
    except GraphConstraintError as e:
        _print_error("Graph Constraint Error", e)
        raise typer.Exit(code=1)
    except CannotRemoveDefaultPoolError as e:
        _print_error("Default Pool Error", e)
        raise typer.Exit(code=1)
    except Exception as e:
        logger.error(f"Unexpected error during resolution: {e}", exc_info=True)
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        console.print("\nRun with --verbose --log-file debug.log for more details")
        raise typer.Exit(code=1)


def _print_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        err_console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")


@app.command()
def version() -> None:
    """Show version information."""
    from doks_planner import __version__

    typer.echo(f"doks-planner version {__version__}")


@app.command()
def validate(
    config: str = typer.Argument(..., help="Path to the cluster configuration YAML"),
) -> None:
    """
    Validate a cluster configuration without resolving it.

    Every problem is reported in one pass. No API calls are made.
    """
    from doks_planner.config import load_config_file
    from doks_planner.validator import validate as validate_config

    try:
        cluster_input = validate_config(load_config_file(config))
    except ValidationError as e:
        _print_validation_failures(e)
        raise typer.Exit(code=1)
    except ConfigurationError as e:
        _print_error("Configuration Error", e)
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Configuration for '{cluster_input.cluster_name}' is valid")


@app.command()
def plan(
    config: str = typer.Argument(..., help="Path to the cluster configuration YAML"),
    output_format: str = typer.Option("yaml", "--format", "-f", help="Output format: yaml or json"),
    output: str | None = typer.Option(None, "--output", "-o", help="Write the plan to a file"),
    defaults: str | None = typer.Option(
        None, "--defaults", "-d", help="YAML file overriding the built-in defaults"
    ),
    previous: str | None = typer.Option(
        None, "--previous", "-p", help="Previously applied plan, to check node pool removals"
    ),
) -> None:
    """
    Resolve a configuration into an ordered list of resource intents.

    The plan is printed to stdout, or written to --output.
    """
    from doks_planner.render import render

    if output_format not in ("yaml", "json"):
        console.print(f"[red]Error:[/red] Unknown format '{output_format}'. Use yaml or json")
        raise typer.Exit(code=1)

    resolved = _resolve(config, defaults, previous)
    _print_warnings(resolved.warnings)
    for name in resolved.removed_pools:
        err_console.print(f"[yellow]Node pool '{name}' will be removed[/yellow]")

    text = render(resolved, output_format)
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text)
        console.print(f"[green]✓[/green] Wrote {len(resolved.intents)} intents to {output_path}")
    else:
        typer.echo(text, nl=False)


@app.command()
def graph(
    config: str = typer.Argument(..., help="Path to the cluster configuration YAML"),
    defaults: str | None = typer.Option(
        None, "--defaults", "-d", help="YAML file overriding the built-in defaults"
    ),
) -> None:
    """Show resolved resources in order, with their dependencies."""
    resolved = _resolve(config, defaults)

    tree = Tree(f"[bold]{resolved.cluster_name}[/bold] (Kubernetes {resolved.kubernetes_version})")
    for intent in resolved.intents:
        branch = tree.add(f"[cyan]{intent.name}[/cyan] [dim]{intent.kind.value}[/dim]")
        for dependency in intent.depends_on:
            branch.add(f"depends on [magenta]{dependency}[/magenta]")
    console.print(tree)

    summary = Table(title="Resources")
    summary.add_column("Kind", style="cyan")
    summary.add_column("Count", justify="right")
    for kind, count in resolved.summary().items():
        summary.add_row(kind, str(count))
    console.print(summary)
    _print_warnings(resolved.warnings)


if __name__ == "__main__":
    app()
