"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets adapters (process runner, baseline store, MCP server) read config consistently.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BASELINE_FILENAME = ".act-baseline.json"
DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed + validated at the edge (env vars) without polluting the Core.
    - A single configuration contract for CLI, adapters and the MCP server.

    `PROJECT_ROOT` and `ACT_BINARY` are still honored for setups written
    against the earlier JavaScript server.
    """

    model_config = SettingsConfigDict(
        env_prefix="ACT_MCP_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    project_root: Path = Field(
        default_factory=Path.cwd,
        validation_alias=AliasChoices("project_root", "ACT_MCP_PROJECT_ROOT", "PROJECT_ROOT"),
        description="Repository whose workflows act runs against.",
    )
    act_binary: str = Field(
        default="act",
        min_length=1,
        validation_alias=AliasChoices("act_binary", "ACT_MCP_ACT_BINARY", "ACT_BINARY"),
        description="act executable name or path.",
    )
    baseline_path: Path | None = Field(
        default=None,
        description="Baseline file. Relative paths resolve against project_root.",
    )
    event_file_name: str = Field(
        default=".act-event.json",
        min_length=1,
        description="Temporary event payload file written under project_root.",
    )
    max_output_bytes: int = Field(
        default=DEFAULT_MAX_OUTPUT_BYTES,
        gt=0,
        description="Per-stream output ceiling for act invocations (bytes).",
    )
    command_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout for a single act invocation (seconds). Unset = wait forever.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level for stderr diagnostics.",
    )

    def resolved_baseline_path(self) -> Path:
        if self.baseline_path is None:
            return self.project_root / DEFAULT_BASELINE_FILENAME
        if self.baseline_path.is_absolute():
            return self.baseline_path
        return self.project_root / self.baseline_path

    def workflows_dir(self) -> Path:
        return self.project_root / ".github" / "workflows"

    def event_file_path(self) -> Path:
        return self.project_root / self.event_file_name
