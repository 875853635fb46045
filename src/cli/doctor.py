"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.baseline_store import BaselineStore
from adapters.process_runner import ActCli
from core.config import AppSettings
from core.domain.models import CheckStatus
from core.exceptions import BaselinePersistenceError, CorruptBaselineError
from core.services.doctor import collect_doctor_checks

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_STATUS_LABELS: dict[CheckStatus, str] = {
    CheckStatus.OK: "[green]OK[/green]",
    CheckStatus.ERROR: "[red]FAIL[/red]",
    CheckStatus.INFO: "[yellow]OPTIONAL[/yellow]",
}


def _baseline_row(settings: AppSettings) -> tuple[str, str]:
    store = BaselineStore.from_settings(settings)
    try:
        snapshot = store.load()
    except (CorruptBaselineError, BaselinePersistenceError) as exc:
        return _STATUS_LABELS[CheckStatus.ERROR], escape(str(exc))
    if snapshot is None:
        return _STATUS_LABELS[CheckStatus.INFO], f"No baseline at {store.path}"
    return _STATUS_LABELS[CheckStatus.OK], f"{store.path} ({snapshot.timestamp.isoformat()})"


@app.command()
def run(ctx: typer.Context) -> None:
    """Run act/Docker diagnostics and show recommended fixes."""

    settings = ctx.obj if isinstance(ctx.obj, AppSettings) else AppSettings()
    checks = collect_doctor_checks(ActCli(settings), settings)

    table = Table(title="Act Testing Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    for check in checks:
        table.add_row(check.name, _STATUS_LABELS[check.status], check.message)

    status, detail = _baseline_row(settings)
    table.add_row("baseline", status, detail)

    table.add_row("project root", "", str(settings.project_root))
    table.add_row("act binary", "", settings.act_binary)

    _console.print(table)

    if any(c.status is CheckStatus.ERROR and c.name.startswith("docker") for c in checks):
        _console.print(
            "\n[yellow]Note:[/yellow] act needs a running Docker daemon to execute jobs; "
            "`--dryrun` still works without it."
        )
