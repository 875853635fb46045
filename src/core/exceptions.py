"""Exception hierarchy.

All project-specific exceptions inherit from ActMcpError.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class ActMcpError(Exception):
    """Base exception for all act-testing-mcp errors."""


class ToolUnavailableError(ActMcpError):
    """Raised when the act binary cannot be resolved on PATH."""

    def __init__(self, binary: str) -> None:
        self.binary = binary
        super().__init__(f"act binary not found on PATH: {binary}")


class ProbeFailedError(ActMcpError):
    """Raised when a single baseline probe invocation fails.

    Capture absorbs it and leaves the probed field absent.
    """

    def __init__(self, args: Sequence[str], detail: str) -> None:
        self.args_used = tuple(args)
        self.detail = detail
        super().__init__(f"probe {' '.join(args)!r} failed: {detail}")


class BaselinePersistenceError(ActMcpError, OSError):
    """Raised when the baseline file cannot be written or read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"cannot access baseline file {path}: {reason}")

    def __str__(self) -> str:
        return f"cannot access baseline file {self.path}: {self.reason}"


class CorruptBaselineError(ActMcpError, ValueError):
    """Raised when the stored baseline is not a well-formed snapshot."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"baseline file {path} is corrupt: {reason}")
