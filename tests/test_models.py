"""Domain model invariants."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from core.domain.models import (
    SEVERITY_BY_KIND,
    Difference,
    DifferenceKind,
    DryRunOutcome,
    ErrorCategory,
    Severity,
    Snapshot,
)


NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("kind", list(DifferenceKind))
def test_severity_is_derived_from_kind(kind):
    assert Difference(kind=kind).severity is SEVERITY_BY_KIND[kind]


def test_fixed_severities():
    assert DifferenceKind.LIST_FORMAT_CHANGE.severity is Severity.ERROR
    assert DifferenceKind.MISSING_FLAG.severity is Severity.WARNING
    assert DifferenceKind.DRYRUN_BEHAVIOR_CHANGE.severity is Severity.WARNING
    assert DifferenceKind.NEW_FLAG.severity is Severity.INFO
    assert DifferenceKind.VERSION_CHANGE.severity is Severity.INFO


def test_mismatched_severity_is_rejected():
    with pytest.raises(ValidationError):
        Difference(kind=DifferenceKind.LIST_FORMAT_CHANGE, severity=Severity.INFO)


def test_unavailable_snapshot_must_be_minimal():
    with pytest.raises(ValidationError):
        Snapshot(timestamp=NOW, tool_available=False, version="act version 0.2.61")

    snapshot = Snapshot.unavailable(NOW)
    assert snapshot.tool_available is False
    assert snapshot.version is None
    assert snapshot.help_flags is None


def test_help_flags_are_deduplicated_in_first_seen_order():
    snapshot = Snapshot(timestamp=NOW, help_flags=["--b", "--a", "--b", "--c", "--a"])

    assert snapshot.help_flags == ("--b", "--a", "--c")


def test_empty_flags_differ_from_absent_flags():
    assert Snapshot(timestamp=NOW, help_flags=[]).help_flags == ()
    assert Snapshot(timestamp=NOW).help_flags is None


def test_snapshot_is_immutable():
    snapshot = Snapshot(timestamp=NOW)
    with pytest.raises(ValidationError):
        snapshot.version = "changed"


def test_unknown_error_category_is_tolerated():
    outcome = DryRunOutcome.model_validate({"succeeds": False, "errorType": "unknown"})

    assert outcome.error_category is ErrorCategory.OTHER


def test_serialized_names_are_camel_case():
    payload = Snapshot(timestamp=NOW, help_flags=["--list"]).model_dump(mode="json", by_alias=True)

    assert set(payload) == {"timestamp", "toolAvailable", "version", "helpFlags", "listSummary", "dryRunOutcome"}
