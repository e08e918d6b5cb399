from __future__ import annotations

import copy
import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Protocol, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from utils.errors import StoreCorruption

logger = logging.getLogger(__name__)

SESSIONS_KEY = "revision_sessions"
PLANS_KEY = "learning_plans"
BOOKMARKS_KEY = "bookmarked_words"
QUIZ_HISTORY_KEY = "quiz_history"
FLASHCARD_HISTORY_KEY = "flashcard_history"
SAVED_RESULTS_KEY = "saved_quiz_results"
CHAPTER_PREFIX = "chapter_"

ModelT = TypeVar("ModelT", bound=BaseModel)


def chapter_key(chapter_id: str) -> str:
    return f"{CHAPTER_PREFIX}{chapter_id}"


class Store(Protocol):
    """Key-value store holding JSON-serialized records."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self, prefix: str = "") -> List[str]: ...

    def batch(self): ...


class SQLiteStore:
    """Store backed by the ``records`` table.

    Each ``set`` commits on its own unless it runs inside ``batch()``, in which
    case every write of the block is committed together or rolled back.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self._depth = 0

    def get(self, key: str) -> Optional[str]:
        cursor = self.conn.cursor()
        cursor.execute("SELECT value FROM records WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO records (key, value, updated_at)
            VALUES (?, ?, datetime('now'))
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (key, value),
        )
        if not self._depth:
            self.conn.commit()

    def delete(self, key: str) -> None:
        self.conn.execute("DELETE FROM records WHERE key = ?", (key,))
        if not self._depth:
            self.conn.commit()

    def keys(self, prefix: str = "") -> List[str]:
        cursor = self.conn.cursor()
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        cursor.execute(
            "SELECT key FROM records WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
            (f"{escaped}%",),
        )
        return [row[0] for row in cursor.fetchall()]

    @contextmanager
    def batch(self) -> Iterator["SQLiteStore"]:
        self._depth += 1
        try:
            yield self
        except Exception:
            self._depth -= 1
            if not self._depth:
                self.conn.rollback()
            raise
        self._depth -= 1
        if not self._depth:
            self.conn.commit()


class MemoryStore:
    """In-memory store with the same contract, used by tests and scripts."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def keys(self, prefix: str = "") -> List[str]:
        return sorted(key for key in self.data if key.startswith(prefix))

    @contextmanager
    def batch(self) -> Iterator["MemoryStore"]:
        snapshot = copy.deepcopy(self.data)
        try:
            yield self
        except Exception:
            self.data = snapshot
            raise


def _decode(raw: str, key: str):
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise StoreCorruption(f"record {key!r} is not valid JSON") from exc


def _validate(model: Type[ModelT], payload, key: str) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise StoreCorruption(f"record {key!r} failed validation ({exc.error_count()} errors)") from exc


def load_list(store: Store, key: str, model: Type[ModelT]) -> List[ModelT]:
    """Load a list record, dropping entries that fail validation.

    Corrupt data is logged and treated as absent; ``StoreCorruption`` never
    escapes to the caller.
    """
    raw = store.get(key)
    if raw is None:
        return []
    try:
        payload = _decode(raw, key)
        if not isinstance(payload, list):
            raise StoreCorruption(f"record {key!r} is not a list")
    except StoreCorruption as exc:
        logger.warning("Discarding %s", exc)
        return []
    items: List[ModelT] = []
    for index, entry in enumerate(payload):
        try:
            items.append(_validate(model, entry, f"{key}[{index}]"))
        except StoreCorruption as exc:
            logger.warning("Discarding %s", exc)
    return items


def save_list(store: Store, key: str, items: Sequence[BaseModel]) -> None:
    payload = [item.model_dump(mode="json") for item in items]
    store.set(key, json.dumps(payload))


def load_one(store: Store, key: str, model: Type[ModelT]) -> Optional[ModelT]:
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return _validate(model, _decode(raw, key), key)
    except StoreCorruption as exc:
        logger.warning("Discarding %s", exc)
        return None


def save_one(store: Store, key: str, item: BaseModel) -> None:
    store.set(key, json.dumps(item.model_dump(mode="json")))
