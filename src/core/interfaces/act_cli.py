"""Contract for invoking the act CLI.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- Lets capture, doctor and the MCP tools run against the real binary or a
  scripted fake without coupling the Core to `subprocess`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from core.domain.models import ProcessResult


@runtime_checkable
class ActCommandRunner(Protocol):
    """Minimal contract for running act.

    Design rules:
    - `run` is synchronous and blocking; probes execute one after another.
    - `run` never raises for a failed invocation: failures come back as
      `ProcessResult(success=False, ...)` with `stderr` populated.
    """

    binary: str

    def is_available(self) -> bool:
        """Whether the act binary resolves on PATH."""

        ...

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env_overrides: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        """Run act with `args` (binary excluded) and normalize the outcome."""

        ...
