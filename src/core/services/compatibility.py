"""Compatibility check orchestration.

Glues the store, the capture and the comparator together and applies the
error policy: a missing or corrupt baseline is reported as "no baseline",
never raised.
"""

from __future__ import annotations

import logging

from adapters.baseline_store import BaselineStore
from core.domain.models import ComparisonResult, Snapshot
from core.exceptions import CorruptBaselineError
from core.interfaces.act_cli import ActCommandRunner
from core.services.baseline_capture import capture_snapshot
from core.services.drift import compare_snapshots


logger = logging.getLogger(__name__)

NO_BASELINE_MESSAGE = 'No baseline found. Run "create-baseline" first.'


def load_usable_baseline(store: BaselineStore) -> Snapshot | None:
    """Load the baseline, treating a corrupt file like a missing one."""

    try:
        return store.load()
    except CorruptBaselineError as exc:
        logger.warning("ignoring unusable baseline: %s", exc)
        return None


def create_baseline(store: BaselineStore, runner: ActCommandRunner) -> Snapshot:
    """Capture act's current behavior and store it as the new baseline."""

    snapshot = capture_snapshot(runner)
    store.save(snapshot)
    return snapshot


def check_compatibility(store: BaselineStore, runner: ActCommandRunner) -> ComparisonResult:
    baseline = load_usable_baseline(store)
    if baseline is None:
        return ComparisonResult(has_baseline=False, message=NO_BASELINE_MESSAGE)

    current = capture_snapshot(runner)
    return compare_snapshots(baseline, current)
