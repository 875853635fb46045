"""CLI entry point (Typer).

Commands:
- `create-baseline`: record act's current behavior as the baseline.
- `check`: compare act against the baseline; exit 1 when incompatible.
- `report`: print the detailed compatibility report.
- `help`: show usage.
- `serve`: run the MCP stdio server.
- `doctor run`: environment diagnostics.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from adapters.baseline_store import BaselineStore
from adapters.mcp_server import WorkflowToolbox, serve as serve_mcp
from adapters.process_runner import ActCli
from adapters.report_exporter import format_comparison_report
from cli import doctor
from cli.ui_components import print_comparison_summary, print_snapshot_summary
from core.config import AppSettings
from core.domain.models import ComparisonResult
from core.exceptions import BaselinePersistenceError
from core.logging_config import configure_logging
from core.services.compatibility import check_compatibility, create_baseline


app = typer.Typer(
    name="act-testing-mcp",
    no_args_is_help=True,
    add_completion=False,
    help="Run GitHub Actions workflows with act over MCP and track act compatibility drift.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def _settings(ctx: typer.Context) -> AppSettings:
    settings = ctx.obj
    if not isinstance(settings, AppSettings):
        settings = AppSettings()
        ctx.obj = settings
    return settings


def _compare(settings: AppSettings) -> ComparisonResult:
    store = BaselineStore.from_settings(settings)
    try:
        return check_compatibility(store, ActCli(settings))
    except BaselinePersistenceError as exc:
        _err_console.print(f"[red]❌ Could not read baseline:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    project_root: Optional[Path] = typer.Option(
        None, "--project-root", help="Repository act runs against (default: current directory)."
    ),
    act_binary: Optional[str] = typer.Option(None, "--act-binary", help="act executable name or path."),
    baseline_path: Optional[Path] = typer.Option(None, "--baseline-path", help="Baseline JSON file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
) -> None:
    settings = AppSettings()
    overrides: dict[str, object] = {}
    if project_root is not None:
        overrides["project_root"] = project_root.resolve()
    if act_binary is not None:
        overrides["act_binary"] = act_binary
    if baseline_path is not None:
        overrides["baseline_path"] = baseline_path
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


@app.command("create-baseline")
def create_baseline_command(ctx: typer.Context) -> None:
    """Create a new baseline of current act behavior."""

    settings = _settings(ctx)
    runner = ActCli(settings)
    store = BaselineStore.from_settings(settings)

    _console.print("🔍 Creating act baseline...")
    if not runner.is_available():
        _console.print("[yellow]⚠️  Act not available - creating minimal baseline for CI compatibility[/yellow]")

    try:
        snapshot = create_baseline(store, runner)
    except BaselinePersistenceError as exc:
        _err_console.print(f"[red]❌ Could not save baseline:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    print_snapshot_summary(_console, snapshot, store.path)
    _console.print('\n💡 Run "check" regularly to detect act changes')


@app.command("check")
def check_command(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the comparison as JSON."),
) -> None:
    """Compare current act behavior with the baseline."""

    settings = _settings(ctx)
    result = _compare(settings)

    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json", by_alias=True), ensure_ascii=False, indent=2))
    else:
        print_comparison_summary(_console, result)

    if not result.has_baseline or result.is_compatible is False:
        raise typer.Exit(code=1)


@app.command("report")
def report_command(ctx: typer.Context) -> None:
    """Generate a detailed compatibility report."""

    settings = _settings(ctx)
    result = _compare(settings)
    typer.echo(format_comparison_report(result).rstrip("\n"))


@app.command("help")
def help_command(ctx: typer.Context) -> None:
    """Show this help message."""

    parent = ctx.parent or ctx
    typer.echo(parent.get_help())


@app.command("serve")
def serve_command(ctx: typer.Context) -> None:
    """Run the MCP server on stdio."""

    settings = _settings(ctx)
    toolbox = WorkflowToolbox(ActCli(settings), settings)
    asyncio.run(serve_mcp(toolbox))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
