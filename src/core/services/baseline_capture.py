"""Baseline capture: observe act through a fixed probe sequence.

The capture runs four independent probes (version, help, list, dry-run) one
after another. A failing probe leaves its field absent and never stops the
remaining probes. When act is not on PATH at all, no probe is spawned and a
minimal snapshot is returned instead.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from core.domain.models import DryRunOutcome, ErrorCategory, ListSummary, Snapshot, utc_now
from core.exceptions import ProbeFailedError
from core.interfaces.act_cli import ActCommandRunner


logger = logging.getLogger(__name__)

VERSION_ARGS: tuple[str, ...] = ("--version",)
HELP_ARGS: tuple[str, ...] = ("--help",)
LIST_ARGS: tuple[str, ...] = ("--list",)
DRY_RUN_ARGS: tuple[str, ...] = ("push", "--dryrun", "--list")

WORKFLOW_FILE_MARKER = ".yml"

_LONG_FLAG = re.compile(r"--[\w-]+")

# First match wins. Best-effort only: act's error text is not a stable contract.
_ERROR_CATEGORY_RULES: tuple[tuple[str, ErrorCategory], ...] = (
    ("docker", ErrorCategory.DOCKER),
    ("workflow", ErrorCategory.WORKFLOW),
    ("permission", ErrorCategory.PERMISSION),
    ("not found", ErrorCategory.NOT_FOUND),
    ("secret", ErrorCategory.SECRET),
    ("env", ErrorCategory.ENVIRONMENT),
)


def extract_help_flags(help_text: str) -> tuple[str, ...]:
    """Long flags in `help_text`, deduplicated, in order of first occurrence."""

    return tuple(dict.fromkeys(_LONG_FLAG.findall(help_text)))


def summarize_list_output(output: str) -> ListSummary:
    lines = [line for line in output.splitlines() if line.strip()]
    return ListSummary(
        has_output=len(output) > 0,
        line_count=len(lines),
        contains_workflows=WORKFLOW_FILE_MARKER in output,
    )


def categorize_error(message: str | None) -> ErrorCategory:
    """Classify a failure message by case-insensitive substring match."""

    lowered = (message or "").lower()
    for needle, category in _ERROR_CATEGORY_RULES:
        if needle in lowered:
            return category
    return ErrorCategory.OTHER


def _probe(runner: ActCommandRunner, args: Sequence[str]) -> str:
    result = runner.run(args)
    if not result.success:
        raise ProbeFailedError(args, result.stderr)
    return result.stdout


def _probe_dry_run(runner: ActCommandRunner) -> DryRunOutcome:
    result = runner.run(DRY_RUN_ARGS)
    if result.success:
        return DryRunOutcome(succeeds=True)
    return DryRunOutcome(succeeds=False, error_category=categorize_error(result.stderr))


def capture_snapshot(runner: ActCommandRunner) -> Snapshot:
    """Observe act and assemble a `Snapshot`."""

    timestamp = utc_now()
    if not runner.is_available():
        logger.warning("act (%s) is not available; recording a minimal snapshot", runner.binary)
        return Snapshot.unavailable(timestamp)

    version: str | None = None
    help_flags: tuple[str, ...] | None = None
    list_summary: ListSummary | None = None

    try:
        version = _probe(runner, VERSION_ARGS).strip()
    except ProbeFailedError as exc:
        logger.debug("version probe skipped: %s", exc)

    try:
        help_flags = extract_help_flags(_probe(runner, HELP_ARGS))
    except ProbeFailedError as exc:
        logger.debug("help probe skipped: %s", exc)

    try:
        list_summary = summarize_list_output(_probe(runner, LIST_ARGS))
    except ProbeFailedError as exc:
        logger.debug("list probe skipped: %s", exc)

    dry_run_outcome = _probe_dry_run(runner)

    snapshot = Snapshot(
        timestamp=timestamp,
        tool_available=True,
        version=version,
        help_flags=help_flags,
        list_summary=list_summary,
        dry_run_outcome=dry_run_outcome,
    )
    logger.info(
        "captured act snapshot: version=%s flags=%s",
        snapshot.version,
        len(snapshot.help_flags) if snapshot.help_flags is not None else None,
    )
    return snapshot
