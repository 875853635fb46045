"""CLI tests via Typer's CliRunner with a scripted act runner."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from adapters.baseline_store import BaselineStore
from cli.main import app
from conftest import FakeActRunner, healthy_responses, make_snapshot
from core.domain.models import ListSummary


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def use_runner(monkeypatch):
    """Route every ActCli construction in the CLI to the given fake."""

    def install(fake: FakeActRunner) -> FakeActRunner:
        monkeypatch.setattr("cli.main.ActCli", lambda settings: fake)
        return fake

    return install


def _invoke(cli_runner, project_root, *args):
    return cli_runner.invoke(app, ["--project-root", str(project_root), *args])


def test_create_baseline_writes_file(cli_runner, project_root, use_runner):
    use_runner(FakeActRunner(healthy_responses()))

    result = _invoke(cli_runner, project_root, "create-baseline")

    assert result.exit_code == 0, result.output
    assert "Baseline created successfully" in result.output
    assert (project_root / ".act-baseline.json").is_file()


def test_create_baseline_without_act(cli_runner, project_root, use_runner):
    use_runner(FakeActRunner(available=False))

    result = _invoke(cli_runner, project_root, "create-baseline")

    assert result.exit_code == 0
    assert "minimal baseline" in result.output
    stored = BaselineStore(project_root / ".act-baseline.json").load()
    assert stored.tool_available is False


def test_create_baseline_persistence_failure(cli_runner, project_root, use_runner, tmp_path):
    use_runner(FakeActRunner(healthy_responses()))
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    result = _invoke(cli_runner, project_root, "--baseline-path", str(blocker / "b.json"), "create-baseline")

    assert result.exit_code == 1


def test_check_without_baseline_fails(cli_runner, project_root, use_runner):
    use_runner(FakeActRunner(healthy_responses()))

    result = _invoke(cli_runner, project_root, "check")

    assert result.exit_code == 1
    assert "No baseline found" in result.output


def test_check_compatible(cli_runner, project_root, use_runner):
    use_runner(FakeActRunner(healthy_responses("act version 0.2.70")))
    BaselineStore(project_root / ".act-baseline.json").save(make_snapshot(help_flags=None))

    result = _invoke(cli_runner, project_root, "check")

    assert result.exit_code == 0, result.output
    assert "compatible with baseline" in result.output
    assert "Version updated" in result.output


def test_check_incompatible_exits_non_zero(cli_runner, project_root, use_runner):
    responses = healthy_responses()
    responses[("--list",)] = responses[("--list",)].model_copy(update={"stdout": "no workflows here\n"})
    use_runner(FakeActRunner(responses))
    BaselineStore(project_root / ".act-baseline.json").save(
        make_snapshot(
            help_flags=None,
            list_summary=ListSummary(has_output=True, line_count=3, contains_workflows=True),
        )
    )

    result = _invoke(cli_runner, project_root, "check")

    assert result.exit_code == 1
    assert "breaking change" in result.output


def test_check_json(cli_runner, project_root, use_runner):
    use_runner(FakeActRunner(available=False))
    BaselineStore(project_root / ".act-baseline.json").save(make_snapshot())

    result = cli_runner.invoke(
        app,
        ["--project-root", str(project_root), "check", "--json"],
        env={"ACT_MCP_LOG_LEVEL": "ERROR"},
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["hasBaseline"] is True
    assert payload["toolAvailable"] is False
    assert payload["differences"] == []


def test_report_without_baseline(cli_runner, project_root, use_runner):
    use_runner(FakeActRunner(healthy_responses()))

    result = _invoke(cli_runner, project_root, "report")

    assert result.exit_code == 0
    assert "No baseline available" in result.output


def test_report_with_baseline(cli_runner, project_root, use_runner):
    use_runner(FakeActRunner(healthy_responses()))
    BaselineStore(project_root / ".act-baseline.json").save(make_snapshot(version="act version 0.2.50"))

    result = _invoke(cli_runner, project_root, "report")

    assert result.exit_code == 0
    assert "Act Compatibility Report" in result.output
    assert "version_change" in result.output


def test_help_command(cli_runner):
    result = cli_runner.invoke(app, ["help"])

    assert result.exit_code == 0
    assert "create-baseline" in result.output


def test_unknown_command_fails(cli_runner):
    result = cli_runner.invoke(app, ["frobnicate"])

    assert result.exit_code != 0


def test_report_keeps_long_lines_intact(cli_runner, project_root, use_runner):
    long_version = "act version 0.2.99-" + "build" * 20
    use_runner(FakeActRunner(healthy_responses(long_version)))
    BaselineStore(project_root / ".act-baseline.json").save(make_snapshot(version="act version 0.2.50"))

    result = _invoke(cli_runner, project_root, "report")

    assert result.exit_code == 0, result.output
    assert f"   Version: act version 0.2.50 → {long_version}" in result.output.splitlines()


@pytest.mark.parametrize("command", ["check", "report"])
def test_non_utf8_baseline_counts_as_missing(cli_runner, project_root, use_runner, command):
    use_runner(FakeActRunner(healthy_responses()))
    (project_root / ".act-baseline.json").write_bytes(b'{"timestamp": "\xff\xfe"}')

    result = _invoke(cli_runner, project_root, command)

    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "No baseline" in result.output


@pytest.mark.parametrize("command", ["check", "report"])
def test_unreadable_baseline_exits_non_zero(cli_runner, project_root, use_runner, tmp_path, command):
    use_runner(FakeActRunner(healthy_responses()))
    unreadable = tmp_path / "baseline-dir"
    unreadable.mkdir()

    result = _invoke(cli_runner, project_root, "--baseline-path", str(unreadable), command)

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
