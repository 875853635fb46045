"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation plus self-documenting fields (Field) without coupling the
  Core to I/O libraries.
- The same models serialize the baseline file and the MCP/CLI JSON output,
  using the camelCase names of the on-disk format as aliases.

Note:
- These models describe *what* act looked like, not *how* it was observed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Severity(str, Enum):
    """Impact of a difference. Only `error` blocks compatibility."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class DifferenceKind(str, Enum):
    VERSION_CHANGE = "version_change"
    MISSING_FLAG = "missing_flag"
    NEW_FLAG = "new_flag"
    LIST_FORMAT_CHANGE = "list_format_change"
    DRYRUN_BEHAVIOR_CHANGE = "dryrun_behavior_change"

    @property
    def severity(self) -> Severity:
        return SEVERITY_BY_KIND[self]


SEVERITY_BY_KIND: dict[DifferenceKind, Severity] = {
    DifferenceKind.VERSION_CHANGE: Severity.INFO,
    DifferenceKind.MISSING_FLAG: Severity.WARNING,
    DifferenceKind.NEW_FLAG: Severity.INFO,
    DifferenceKind.LIST_FORMAT_CHANGE: Severity.ERROR,
    DifferenceKind.DRYRUN_BEHAVIOR_CHANGE: Severity.WARNING,
}


class ErrorCategory(str, Enum):
    """Coarse classification of a failed dry-run's error text."""

    DOCKER = "docker"
    WORKFLOW = "workflow"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    SECRET = "secret"
    ENVIRONMENT = "environment"
    OTHER = "other"


_CATEGORY_VALUES = frozenset(c.value for c in ErrorCategory)


class _CamelModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class ListSummary(_CamelModel):
    """Shape of `act --list` output (not its content)."""

    has_output: bool = Field(
        ...,
        alias="hasOutput",
        description="Whether the listing produced any output at all.",
    )
    line_count: int = Field(
        ...,
        ge=0,
        alias="lineCount",
        description="Number of non-blank output lines.",
    )
    contains_workflows: bool = Field(
        ...,
        alias="containsWorkflows",
        description="Whether the output mentions a workflow file (.yml).",
    )


class DryRunOutcome(_CamelModel):
    succeeds: bool = Field(
        ...,
        description="Whether the fixed dry-run command exited successfully.",
    )
    error_category: ErrorCategory | None = Field(
        default=None,
        validation_alias=AliasChoices("errorCategory", "errorType", "error_category"),
        serialization_alias="errorCategory",
        description="Best-effort category of the failure (informational only).",
    )

    @field_validator("error_category", mode="before")
    @classmethod
    def _tolerate_unknown_category(cls, value: Any) -> Any:
        # Older baselines recorded "unknown" and free-form categories.
        if isinstance(value, ErrorCategory):
            return value
        if isinstance(value, str) and value not in _CATEGORY_VALUES:
            return ErrorCategory.OTHER
        return value


class Snapshot(_CamelModel):
    """Observable surface of act at one point in time (a.k.a. baseline).

    `None` means the probe did not run or failed; an empty `help_flags`
    tuple means the help probe ran and found no long flags.
    """

    timestamp: datetime = Field(
        ...,
        description="Creation instant (UTC).",
    )
    tool_available: bool = Field(
        default=True,
        validation_alias=AliasChoices("toolAvailable", "actAvailable", "tool_available"),
        serialization_alias="toolAvailable",
        description="Whether act could be invoked at all.",
    )
    version: str | None = Field(
        default=None,
        description="Self-reported `act --version` output.",
    )
    help_flags: tuple[str, ...] | None = Field(
        default=None,
        validation_alias=AliasChoices("helpFlags", "helpOutput", "help_flags"),
        serialization_alias="helpFlags",
        description="Long flags advertised by `act --help`, first-seen order, no duplicates.",
    )
    list_summary: ListSummary | None = Field(
        default=None,
        validation_alias=AliasChoices("listSummary", "listOutput", "list_summary"),
        serialization_alias="listSummary",
    )
    dry_run_outcome: DryRunOutcome | None = Field(
        default=None,
        validation_alias=AliasChoices("dryRunOutcome", "dryRunBehavior", "dry_run_outcome"),
        serialization_alias="dryRunOutcome",
    )

    @field_validator("help_flags", mode="after")
    @classmethod
    def _dedupe_flags(cls, value: tuple[str, ...] | None) -> tuple[str, ...] | None:
        if value is None:
            return None
        return tuple(dict.fromkeys(value))

    @model_validator(mode="after")
    def _unavailable_means_minimal(self) -> "Snapshot":
        if not self.tool_available:
            populated = [
                name
                for name in ("version", "help_flags", "list_summary", "dry_run_outcome")
                if getattr(self, name) is not None
            ]
            if populated:
                raise ValueError(
                    "snapshot with toolAvailable=false must not carry probe results: "
                    + ", ".join(populated)
                )
        return self

    @classmethod
    def unavailable(cls, timestamp: datetime | None = None) -> "Snapshot":
        return cls(timestamp=timestamp or utc_now(), tool_available=False)


class Difference(_CamelModel):
    """One discrepancy between a baseline and a current snapshot.

    Severity is a function of the kind; it is filled in when omitted and a
    mismatching value is rejected.
    """

    kind: DifferenceKind
    severity: Severity
    flag: str | None = None
    baseline_value: str | bool | None = Field(
        default=None,
        alias="baselineValue",
    )
    current_value: str | bool | None = Field(
        default=None,
        alias="currentValue",
    )
    description: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_severity(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("severity") is None and "kind" in data:
            kind = DifferenceKind(data["kind"])
            data = {**data, "severity": kind.severity}
        return data

    @model_validator(mode="after")
    def _check_severity(self) -> "Difference":
        expected = self.kind.severity
        if self.severity is not expected:
            raise ValueError(
                f"{self.kind.value} must have severity {expected.value}, got {self.severity.value}"
            )
        return self


class ComparisonResult(_CamelModel):
    """Outcome of comparing a fresh snapshot with the stored baseline. Never persisted."""

    has_baseline: bool = Field(..., alias="hasBaseline")
    baseline_timestamp: datetime | None = Field(default=None, alias="baselineTimestamp")
    current_timestamp: datetime | None = Field(default=None, alias="currentTimestamp")
    tool_available: bool = Field(
        default=True,
        alias="toolAvailable",
        description="False when the fresh probe run found act missing; the check is skipped.",
    )
    differences: tuple[Difference, ...] = Field(default_factory=tuple)
    is_compatible: bool | None = Field(
        default=None,
        alias="isCompatible",
        description="No error-severity difference. None when there is no baseline.",
    )
    message: str | None = None

    def by_severity(self, severity: Severity) -> list[Difference]:
        return [d for d in self.differences if d.severity is severity]


class ProcessResult(_CamelModel):
    """Uniform result of one external process invocation."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    exit_code: int | None = Field(
        default=None,
        alias="exitCode",
        description="Process exit status; None when the process never ran.",
    )


class WorkflowJob(_CamelModel):
    """One row of `act --list` output."""

    stage: str
    job_id: str = Field(..., alias="jobId")
    job_name: str = Field(..., alias="jobName")
    workflow_name: str = Field(..., alias="workflowName")
    workflow_file: str | None = Field(default=None, alias="workflowFile")
    events: list[str] = Field(default_factory=list)


class CheckStatus(str, Enum):
    OK = "ok"
    ERROR = "error"
    INFO = "info"


class DoctorCheck(_CamelModel):
    name: str = Field(..., min_length=1)
    status: CheckStatus
    message: str
