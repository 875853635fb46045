"""Environment diagnostics for running workflows with act."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from adapters.process_runner import run_process
from core.config import AppSettings
from core.domain.models import CheckStatus, DoctorCheck, ProcessResult
from core.interfaces.act_cli import ActCommandRunner


CommandFn = Callable[[Sequence[str]], ProcessResult]


def _check_act(runner: ActCommandRunner) -> DoctorCheck:
    result = runner.run(["--version"])
    if result.success:
        return DoctorCheck(name="act", status=CheckStatus.OK, message=f"Act installed: {result.stdout.strip()}")
    return DoctorCheck(
        name="act",
        status=CheckStatus.ERROR,
        message=f"Act not found or not working: {result.stderr}",
    )


def _check_docker(run_command: CommandFn) -> list[DoctorCheck]:
    if not run_command(["docker", "--version"]).success:
        return [DoctorCheck(name="docker", status=CheckStatus.ERROR, message="Docker not found")]

    checks = [DoctorCheck(name="docker", status=CheckStatus.OK, message="Docker is installed")]
    if run_command(["docker", "ps"]).success:
        checks.append(DoctorCheck(name="docker daemon", status=CheckStatus.OK, message="Docker is running"))
    else:
        checks.append(
            DoctorCheck(
                name="docker daemon",
                status=CheckStatus.ERROR,
                message="Docker is installed but not running",
            )
        )
    return checks


def _check_project(settings: AppSettings) -> list[DoctorCheck]:
    checks: list[DoctorCheck] = []
    if settings.workflows_dir().is_dir():
        checks.append(
            DoctorCheck(
                name="workflows",
                status=CheckStatus.OK,
                message="GitHub Actions workflows directory found",
            )
        )
    else:
        checks.append(
            DoctorCheck(
                name="workflows",
                status=CheckStatus.ERROR,
                message="No .github/workflows directory found",
            )
        )

    if (settings.project_root / ".actrc").is_file():
        checks.append(DoctorCheck(name=".actrc", status=CheckStatus.OK, message=".actrc configuration file found"))
    else:
        checks.append(
            DoctorCheck(
                name=".actrc",
                status=CheckStatus.INFO,
                message="No .actrc configuration file (optional)",
            )
        )
    return checks


def collect_doctor_checks(
    runner: ActCommandRunner,
    settings: AppSettings,
    *,
    run_command: CommandFn | None = None,
) -> list[DoctorCheck]:
    """Run every environment check, in display order."""

    if run_command is None:

        def run_command(args: Sequence[str]) -> ProcessResult:
            return run_process(args, max_output_bytes=settings.max_output_bytes, timeout=settings.command_timeout_seconds)

    return [
        _check_act(runner),
        *_check_docker(run_command),
        *_check_project(settings),
    ]
