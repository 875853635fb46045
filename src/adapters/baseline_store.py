"""JSON persistence of the act baseline.

Why JSON:
- Human-readable and diffable; operators can commit the baseline next to the
  workflows it was recorded against.
- Compatible with the baseline files written by the earlier JavaScript tool.

One live baseline per project: `save` overwrites, no history is kept and
concurrent writers are not coordinated (last writer wins).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from core.config import AppSettings
from core.domain.models import Snapshot
from core.exceptions import BaselinePersistenceError, CorruptBaselineError


logger = logging.getLogger(__name__)


class BaselineStore:
    """Reads and writes a single `Snapshot` at a fixed path."""

    def __init__(self, path: Path) -> None:
        self.path = path

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "BaselineStore":
        return cls(settings.resolved_baseline_path())

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, snapshot: Snapshot) -> Path:
        """Write `snapshot` as pretty-printed UTF-8 JSON, replacing any previous baseline."""

        payload = snapshot.model_dump(mode="json", by_alias=True)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
                encoding="utf-8",
            )
        except OSError as exc:
            raise BaselinePersistenceError(self.path, str(exc)) from exc
        logger.info("baseline written to %s", self.path)
        return self.path

    def load(self) -> Snapshot | None:
        """Return the stored snapshot, or None when no baseline was recorded.

        Raises:
            CorruptBaselineError: the file is not UTF-8 JSON or not a valid snapshot.
            BaselinePersistenceError: the file exists but cannot be read.
        """

        if not self.path.exists():
            return None
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise BaselinePersistenceError(self.path, str(exc)) from exc

        try:
            data = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise CorruptBaselineError(self.path, f"not UTF-8 text: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise CorruptBaselineError(self.path, f"invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise CorruptBaselineError(self.path, "expected a JSON object")

        try:
            return Snapshot.model_validate(data)
        except ValidationError as exc:
            raise CorruptBaselineError(
                self.path, f"{exc.error_count()} invalid field(s)"
            ) from exc
