"""Workflow plumbing around act: listing, argument building, event payloads.

The workflow-definition language itself is never parsed here; everything is
derived from act's own `--list` output and from file names.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.models import WorkflowJob


logger = logging.getLogger(__name__)

WORKFLOWS_RELATIVE_DIR = ".github/workflows"
_WORKFLOW_SUFFIXES = (".yml", ".yaml")


class RunWorkflowRequest(BaseModel):
    """Arguments of the `run_workflow` tool."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    workflow: str = Field(
        ...,
        min_length=1,
        description="Workflow file name (e.g., ci.yml) or job ID",
    )
    event: str = Field(
        default="push",
        min_length=1,
        description="Event type to trigger (push, pull_request, workflow_dispatch, etc.)",
    )
    dry_run: bool = Field(
        default=False,
        alias="dryRun",
        description="Show what would run without executing",
    )
    verbose: bool = Field(
        default=False,
        description="Enable verbose output for debugging",
    )
    env: dict[str, Any] | None = Field(
        default=None,
        description="Environment variables to set for the workflow",
    )
    secrets: dict[str, Any] | None = Field(
        default=None,
        description="Secrets to provide to the workflow",
    )
    event_data: dict[str, Any] | None = Field(
        default=None,
        alias="eventData",
        description="Custom event data to simulate specific scenarios",
    )


class ValidateWorkflowRequest(BaseModel):
    """Arguments of the `validate_workflow` tool."""

    model_config = ConfigDict(extra="ignore")

    workflow: str = Field(
        ...,
        min_length=1,
        description="Workflow file name to validate",
    )


def is_workflow_file(name: str) -> bool:
    return name.endswith(_WORKFLOW_SUFFIXES)


def parse_workflow_list(output: str) -> list[WorkflowJob]:
    """Parse `act --list` output into jobs.

    Columns are split on whitespace, so names containing spaces shift the
    columns; rows with fewer than four columns are skipped.
    """

    jobs: list[WorkflowJob] = []
    for line in output.splitlines():
        if ".yml" not in line:
            continue
        parts = line.split()
        if len(parts) < 4:
            continue
        jobs.append(
            WorkflowJob(
                stage=parts[0],
                job_id=parts[1],
                job_name=parts[2],
                workflow_name=parts[3],
                workflow_file=parts[4] if len(parts) > 4 else None,
                events=parts[5:],
            )
        )
    return jobs


def _key_value_args(flag: str, values: Mapping[str, Any] | None) -> list[str]:
    args: list[str] = []
    for key, value in (values or {}).items():
        args.extend([flag, f"{key}={value}"])
    return args


def build_act_args(request: RunWorkflowRequest, *, event_path: Path | None = None) -> list[str]:
    """act argv (binary excluded) for running `request`."""

    args = [request.event]
    if is_workflow_file(request.workflow):
        args.extend(["-W", f"{WORKFLOWS_RELATIVE_DIR}/{request.workflow}"])
    else:
        args.extend(["-j", request.workflow])

    if request.dry_run:
        args.append("--dryrun")
    if request.verbose:
        args.append("--verbose")

    args.extend(_key_value_args("--env", request.env))
    args.extend(_key_value_args("--secret", request.secrets))

    if event_path is not None:
        args.extend(["--eventpath", str(event_path)])
    return args


def resolve_workflow_path(workflows_dir: Path, workflow: str) -> Path | None:
    """Path of `workflow` inside `workflows_dir`, or None if missing or outside it."""

    base = workflows_dir.resolve()
    candidate = (base / workflow).resolve()
    if base not in candidate.parents:
        return None
    if not candidate.is_file():
        return None
    return candidate


@contextmanager
def event_file(path: Path, event_data: Mapping[str, Any] | None) -> Iterator[Path | None]:
    """Write `event_data` to `path` for the duration of the block.

    Yields None (and writes nothing) when there is no event data. The file
    is removed on exit, including when the block raises.
    """

    if event_data is None:
        yield None
        return

    path.write_text(json.dumps(event_data, ensure_ascii=False, indent=2), encoding="utf-8")
    try:
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("could not remove event file %s: %s", path, exc)
