"""Execution counter persisted as a single JSON file.

The file holds ``{"executionCount": <int>}``.  Loading never fails: a missing
or malformed file falls back to a zero count so the service can always start.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from voice_counter.errors import PersistenceError

logger = logging.getLogger(__name__)


@dataclass
class CounterState:
    execution_count: int = 0

    def to_json(self) -> dict:
        return {"executionCount": self.execution_count}


def _parse_count(raw) -> int | None:
    """Return the stored count, or None if the payload has the wrong shape."""
    if not isinstance(raw, dict):
        return None
    value = raw.get("executionCount")
    # bool is an int subclass; "true" is not a count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value < 0 or not float(value).is_integer():
        return None
    return int(value)


class CounterStore:
    """Reads and writes the counter file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> CounterState:
        if not self.path.exists():
            logger.info("No counter file at %s, starting from 0", self.path)
            return CounterState()

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Failed to load counter from %s: %s", self.path, exc)
            return CounterState()

        count = _parse_count(raw)
        if count is None:
            logger.warning("Ignoring malformed counter file %s: %r", self.path, raw)
            return CounterState()

        logger.info("Loaded execution count %d from %s", count, self.path)
        return CounterState(execution_count=count)

    def save(self, state: CounterState) -> None:
        """Overwrite the counter file with ``state``."""
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".counter_", dir=str(directory))
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(state.to_json(), fh)
                os.replace(tmp_path, self.path)
            except BaseException:
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass
                raise
        except OSError as exc:
            raise PersistenceError(f"Failed to save counter to {self.path}: {exc}") from exc
