"""JSONL journal of implementor invocations."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List

__all__ = [
    "OPERATIONS",
    "OUTCOMES",
    "OUTCOME_FAILED",
    "OUTCOME_OK",
    "OUTCOME_SOFT_FAILURE",
    "BuildJournal",
    "validate_event",
]

OUTCOME_OK = "ok"
OUTCOME_SOFT_FAILURE = "soft-failure"
OUTCOME_FAILED = "failed"
OUTCOMES = frozenset({OUTCOME_OK, OUTCOME_SOFT_FAILURE, OUTCOME_FAILED})
OPERATIONS = frozenset({"source", "archive"})

_REQUIRED_KEYS = ("operation", "interface", "outcome")
_DEFAULT_MAX_BYTES = 10 * 1024 * 1024
_FILE_PATTERN = "implementor_{:02d}.jsonl"


def validate_event(event: Dict[str, Any]) -> None:
    """Raise :class:`ValueError` unless ``event`` describes one invocation.

    A failed invocation must name the failing ``kind``.
    """

    missing = [key for key in _REQUIRED_KEYS if not event.get(key)]
    if missing:
        raise ValueError(f"Journal event lacks {', '.join(missing)}")
    if event["operation"] not in OPERATIONS:
        raise ValueError(f"Unknown operation '{event['operation']}'")
    if event["outcome"] not in OUTCOMES:
        raise ValueError(f"Unknown outcome '{event['outcome']}'")
    if event["outcome"] == OUTCOME_FAILED and not event.get("kind"):
        raise ValueError("Failed invocations must carry a kind")


class BuildJournal:
    """Append one JSON object per implementor invocation.

    Files live under ``<base_dir>/<YYYYMMDD>/implementor_NN.jsonl``; a file
    that reached ``max_bytes`` is left alone and the next counter is used.
    """

    def __init__(self, base_dir: str | Path, *, max_bytes: int | None = None) -> None:
        self.base_dir = Path(base_dir)
        self.max_bytes = max_bytes or _DEFAULT_MAX_BYTES
        self._current: Path | None = None
        self._lock = threading.Lock()

    def _day_dir(self, now: datetime) -> Path:
        return self.base_dir / now.strftime("%Y%m%d")

    def _has_room(self, path: Path) -> bool:
        return not path.exists() or path.stat().st_size < self.max_bytes

    def _target(self, now: datetime) -> Path:
        day_dir = self._day_dir(now)
        day_dir.mkdir(parents=True, exist_ok=True)
        current = self._current
        if current is not None and current.parent == day_dir and self._has_room(current):
            return current
        counter = 0
        while not self._has_room(day_dir / _FILE_PATTERN.format(counter)):
            counter += 1
        self._current = day_dir / _FILE_PATTERN.format(counter)
        return self._current

    def append(self, event: Dict[str, Any]) -> Path:
        """Validate ``event``, stamp it and append it to the active file."""

        validate_event(event)
        now = datetime.now(timezone.utc)
        record = {"ts": now.isoformat(timespec="milliseconds"), **event}
        line = json.dumps(record, sort_keys=True, default=str)
        with self._lock:
            path = self._target(now)
            with path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        return path

    def events(self) -> Iterator[Dict[str, Any]]:
        """Yield every recorded event in file order, oldest day first."""

        if not self.base_dir.is_dir():
            return
        files: List[Path] = sorted(self.base_dir.glob("*/implementor_*.jsonl"))
        for path in files:
            with path.open(encoding="utf-8") as handle:
                for line in handle:
                    if line.strip():
                        yield json.loads(line)

    @property
    def current_path(self) -> Path | None:
        return self._current
