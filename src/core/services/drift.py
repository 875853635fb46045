"""Drift comparator: diff two snapshots into classified differences.

Differences are emitted in a fixed order: version, missing flags (baseline
order), new flags (current order), list format, dry-run. Only error-severity
differences make the result incompatible, and the only error-severity kind is
a list format change.
"""

from __future__ import annotations

from collections.abc import Iterator

from core.domain.models import (
    ComparisonResult,
    Difference,
    DifferenceKind,
    Severity,
    Snapshot,
)


TOOL_UNAVAILABLE_MESSAGE = "act not available - skipping compatibility check"
LIST_FORMAT_CHANGE_DESCRIPTION = "Workflow detection in --list output changed"


def _version_drift(baseline: Snapshot, current: Snapshot) -> Iterator[Difference]:
    if baseline.version is None or current.version is None:
        return
    if baseline.version != current.version:
        yield Difference(
            kind=DifferenceKind.VERSION_CHANGE,
            baseline_value=baseline.version,
            current_value=current.version,
        )


def _flag_drift(baseline: Snapshot, current: Snapshot) -> Iterator[Difference]:
    if baseline.help_flags is None or current.help_flags is None:
        return
    baseline_set = set(baseline.help_flags)
    current_set = set(current.help_flags)
    for flag in baseline.help_flags:
        if flag not in current_set:
            yield Difference(kind=DifferenceKind.MISSING_FLAG, flag=flag)
    for flag in current.help_flags:
        if flag not in baseline_set:
            yield Difference(kind=DifferenceKind.NEW_FLAG, flag=flag)


def _list_format_drift(baseline: Snapshot, current: Snapshot) -> Iterator[Difference]:
    # hasOutput/lineCount depend on the repository contents, not on act.
    if baseline.list_summary is None or current.list_summary is None:
        return
    if baseline.list_summary.contains_workflows != current.list_summary.contains_workflows:
        yield Difference(
            kind=DifferenceKind.LIST_FORMAT_CHANGE,
            description=LIST_FORMAT_CHANGE_DESCRIPTION,
        )


def _dry_run_drift(baseline: Snapshot, current: Snapshot) -> Iterator[Difference]:
    if baseline.dry_run_outcome is None or current.dry_run_outcome is None:
        return
    if baseline.dry_run_outcome.succeeds != current.dry_run_outcome.succeeds:
        yield Difference(
            kind=DifferenceKind.DRYRUN_BEHAVIOR_CHANGE,
            baseline_value=baseline.dry_run_outcome.succeeds,
            current_value=current.dry_run_outcome.succeeds,
        )


def compare_snapshots(baseline: Snapshot, current: Snapshot) -> ComparisonResult:
    """Compare `current` against `baseline`."""

    if not current.tool_available:
        return ComparisonResult(
            has_baseline=True,
            baseline_timestamp=baseline.timestamp,
            current_timestamp=current.timestamp,
            tool_available=False,
            differences=(),
            is_compatible=True,
            message=TOOL_UNAVAILABLE_MESSAGE,
        )

    differences = (
        *_version_drift(baseline, current),
        *_flag_drift(baseline, current),
        *_list_format_drift(baseline, current),
        *_dry_run_drift(baseline, current),
    )
    return ComparisonResult(
        has_baseline=True,
        baseline_timestamp=baseline.timestamp,
        current_timestamp=current.timestamp,
        differences=differences,
        is_compatible=not any(d.severity is Severity.ERROR for d in differences),
    )
