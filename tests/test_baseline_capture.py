"""Baseline capture: probe sequence, extraction helpers, failure isolation."""

from __future__ import annotations

import pytest

from conftest import FakeActRunner, fail, healthy_responses, ok
from core.domain.models import ErrorCategory
from core.services.baseline_capture import (
    DRY_RUN_ARGS,
    capture_snapshot,
    categorize_error,
    extract_help_flags,
    summarize_list_output,
)


def test_capture_runs_probes_in_order(runner):
    snapshot = capture_snapshot(runner)

    assert runner.calls == [("--version",), ("--help",), ("--list",), DRY_RUN_ARGS]
    assert snapshot.tool_available is True
    assert snapshot.version == "act version 0.2.61"
    assert snapshot.help_flags == ("--workflows", "--list", "--dryrun", "--env", "--secret")
    assert snapshot.list_summary.contains_workflows is True
    assert snapshot.list_summary.line_count == 3
    assert snapshot.dry_run_outcome.succeeds is True
    assert snapshot.dry_run_outcome.error_category is None


def test_unavailable_tool_spawns_no_probes():
    runner = FakeActRunner(healthy_responses(), available=False)

    snapshot = capture_snapshot(runner)

    assert runner.calls == []
    assert snapshot.tool_available is False
    assert snapshot.version is None
    assert snapshot.help_flags is None
    assert snapshot.list_summary is None
    assert snapshot.dry_run_outcome is None


def test_failed_probe_leaves_only_its_field_absent():
    responses = healthy_responses()
    responses[("--help",)] = fail("unknown flag: --help")
    runner = FakeActRunner(responses)

    snapshot = capture_snapshot(runner)

    assert snapshot.help_flags is None
    assert snapshot.version == "act version 0.2.61"
    assert snapshot.list_summary is not None
    assert snapshot.dry_run_outcome is not None
    assert len(runner.calls) == 4


def test_every_probe_failing_still_yields_a_snapshot():
    runner = FakeActRunner({})

    snapshot = capture_snapshot(runner)

    assert snapshot.tool_available is True
    assert snapshot.version is None
    assert snapshot.help_flags is None
    assert snapshot.list_summary is None
    assert snapshot.dry_run_outcome.succeeds is False


def test_failed_dry_run_is_categorized():
    responses = healthy_responses()
    responses[DRY_RUN_ARGS] = fail("Error: Cannot connect to the Docker daemon at unix:///var/run/docker.sock")

    snapshot = capture_snapshot(FakeActRunner(responses))

    assert snapshot.dry_run_outcome.succeeds is False
    assert snapshot.dry_run_outcome.error_category is ErrorCategory.DOCKER


def test_help_flags_keep_first_occurrence_order():
    text = "use --verbose or --list; --verbose again, then --env-file and --list"

    assert extract_help_flags(text) == ("--verbose", "--list", "--env-file")


def test_help_without_long_flags_is_empty_not_absent():
    assert extract_help_flags("-h show help") == ()


def test_list_summary_counts_non_blank_lines():
    summary = summarize_list_output("Stage Job\n\n0 build build CI ci.yml push\n   \n")

    assert summary.has_output is True
    assert summary.line_count == 2
    assert summary.contains_workflows is True


def test_empty_list_output():
    summary = summarize_list_output("")

    assert (summary.has_output, summary.line_count, summary.contains_workflows) == (False, 0, False)


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        ("Cannot connect to the Docker daemon", ErrorCategory.DOCKER),
        ("docker: workflow failed", ErrorCategory.DOCKER),
        ("unable to read WORKFLOW file", ErrorCategory.WORKFLOW),
        ("open /repo: Permission denied", ErrorCategory.PERMISSION),
        ("event file not found", ErrorCategory.NOT_FOUND),
        ("missing secret GITHUB_TOKEN", ErrorCategory.SECRET),
        ("invalid ENV value", ErrorCategory.ENVIRONMENT),
        ("segmentation fault", ErrorCategory.OTHER),
        ("", ErrorCategory.OTHER),
        (None, ErrorCategory.OTHER),
    ],
)
def test_categorize_error_priority(message, expected):
    assert categorize_error(message) is expected


def test_version_is_stripped():
    responses = healthy_responses()
    responses[("--version",)] = ok("  act version 0.2.70\n\n")

    assert capture_snapshot(FakeActRunner(responses)).version == "act version 0.2.70"
