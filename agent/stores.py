from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import RLock
from typing import Any, Dict

from backend.state import UserState

logger = logging.getLogger(__name__)


class SessionStoreError(RuntimeError):
    """Loading or saving a user's state failed."""


class InMemorySessionStore:
    """Session memory keyed by user id. State is kept serialized so callers never share objects."""

    def __init__(self) -> None:
        self._records: Dict[str, Dict[str, Any]] = {}
        self._lock = RLock()

    def load(self, user_id: str) -> UserState:
        with self._lock:
            record = self._records.get(user_id or "default")
        return UserState.from_dict(record)

    def save(self, user_id: str, state: UserState) -> None:
        record = state.to_dict()
        with self._lock:
            self._records[user_id or "default"] = record

    def clear(self, user_id: str) -> None:
        with self._lock:
            self._records.pop(user_id or "default", None)


class JsonSessionStore(InMemorySessionStore):
    """JSON-backed store: one document mapping user id to state, rewritten on every save."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self._path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            # keep defaults if corrupted
            logger.exception("session file %s unreadable, starting empty", self._path)
            return
        if isinstance(raw, dict):
            self._records = {str(k): v for k, v in raw.items() if isinstance(v, dict)}

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._records, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self._path)

    def save(self, user_id: str, state: UserState) -> None:
        key = user_id or "default"
        record = state.to_dict()
        with self._lock:
            previous = self._records.get(key)
            self._records[key] = record
            try:
                self._save()
            except OSError as exc:
                if previous is None:
                    self._records.pop(key, None)
                else:
                    self._records[key] = previous
                raise SessionStoreError(f"could not write {self._path}: {exc}") from exc

    def clear(self, user_id: str) -> None:
        with self._lock:
            super().clear(user_id)
            self._save()


__all__ = ["SessionStoreError", "InMemorySessionStore", "JsonSessionStore"]
