"""Shared test fixtures.

Provides a scripted act runner, snapshot factories and settings/stores
rooted in a temporary project directory. No test spawns the real act.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from pathlib import Path

import pytest

from adapters.baseline_store import BaselineStore
from core.config import AppSettings
from core.domain.models import DryRunOutcome, ListSummary, ProcessResult, Snapshot


HELP_TEXT = """\
Usage:
  act [event name to run] [flags]

Flags:
  -W, --workflows string      path to workflow file(s)
  -l, --list                  list workflows
  -n, --dryrun                disable container creation
      --env stringArray       env to make available to actions
  -s, --secret stringArray    secret to make available to actions
      --list                  (repeated on purpose)
"""

LIST_OUTPUT = """\
Stage  Job ID  Job name  Workflow name  Workflow file  Events
0      test    test      CI             ci.yml         push,pull_request
0      lint    lint      Lint           lint.yml       push
"""


class FakeActRunner:
    """`ActCommandRunner` answering from a table keyed by argv tuples."""

    def __init__(
        self,
        responses: Mapping[tuple[str, ...], ProcessResult] | None = None,
        *,
        available: bool = True,
        binary: str = "act",
    ) -> None:
        self.responses = dict(responses or {})
        self.available = available
        self.binary = binary
        self.calls: list[tuple[str, ...]] = []

    def is_available(self) -> bool:
        return self.available

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env_overrides: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        key = tuple(args)
        self.calls.append(key)
        if key in self.responses:
            return self.responses[key]
        return ProcessResult(success=False, stderr=f"unexpected call: {' '.join(key)}", exit_code=1)


def ok(stdout: str = "") -> ProcessResult:
    return ProcessResult(success=True, stdout=stdout, exit_code=0)


def fail(stderr: str, code: int = 1) -> ProcessResult:
    return ProcessResult(success=False, stderr=stderr, exit_code=code)


def healthy_responses(version: str = "act version 0.2.61") -> dict[tuple[str, ...], ProcessResult]:
    return {
        ("--version",): ok(version + "\n"),
        ("--help",): ok(HELP_TEXT),
        ("--list",): ok(LIST_OUTPUT),
        ("push", "--dryrun", "--list"): ok(LIST_OUTPUT),
    }


def make_snapshot(**overrides) -> Snapshot:
    fields = {
        "timestamp": datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        "tool_available": True,
        "version": "act version 0.2.61",
        "help_flags": ("--workflows", "--list", "--dryrun"),
        "list_summary": ListSummary(has_output=True, line_count=3, contains_workflows=True),
        "dry_run_outcome": DryRunOutcome(succeeds=True),
    }
    fields.update(overrides)
    return Snapshot(**fields)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / ".github" / "workflows").mkdir(parents=True)
    return root


@pytest.fixture
def settings(project_root: Path) -> AppSettings:
    return AppSettings(project_root=project_root, act_binary="act")


@pytest.fixture
def store(settings: AppSettings) -> BaselineStore:
    return BaselineStore.from_settings(settings)


@pytest.fixture
def runner() -> FakeActRunner:
    return FakeActRunner(healthy_responses())
