"""
Complex Calc — persistence for saved systems and settings.

Everything goes through a small key-value store capability (``get`` / ``set``
of text values by key) that is handed in by the caller.  ``JsonFileStore``
keeps the values in one JSON file on disk; ``MemoryStore`` keeps them in a
dict.  Session history lives only in memory (:class:`SessionHistory`).
"""

import json
import os
import threading
from typing import Optional, Protocol

from solver.logging_config import get_logger
from solver.types import HistoryEntry

logger = get_logger(__name__)

SAVED_SYSTEMS_KEY = "savedSystems"
THEME_KEY = "themeMode"

THEMES = ("dark", "light", "pink")
DEFAULT_THEME = "dark"

# Serialises read-modify-write of the saved systems list.
_saved_lock = threading.Lock()


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process store; contents vanish with the object."""

    def __init__(self, initial: Optional[dict] = None):
        self._data = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Store backed by a single JSON object in *path*."""

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _ensure_dir(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

    def _load_db(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                db = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("ignoring unreadable store %s: %s", self.path, e)
            return {}
        if not isinstance(db, dict):
            logger.warning("ignoring store %s: top level is not an object", self.path)
            return {}
        return db

    def _save_db(self, db: dict) -> None:
        self._ensure_dir()
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(db, f, indent=2, ensure_ascii=False)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._load_db().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            db = self._load_db()
            db[key] = value
            self._save_db(db)


# ── Saved systems ────────────────────────────────────────────────────────

def load_saved_systems(store: KeyValueStore) -> list[dict]:
    """Return every saved system (oldest first) as plain dicts."""
    raw = store.get(SAVED_SYSTEMS_KEY)
    if not raw:
        return []
    try:
        saved = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("ignoring corrupt %s value: %s", SAVED_SYSTEMS_KEY, e)
        return []
    if not isinstance(saved, list):
        logger.warning("ignoring %s value: not a list", SAVED_SYSTEMS_KEY)
        return []
    return saved


def save_system(store: KeyValueStore, entry: HistoryEntry) -> list[dict]:
    """Append *entry* to the saved systems and return the new list."""
    with _saved_lock:
        saved = load_saved_systems(store)
        saved.append(entry.to_dict())
        store.set(SAVED_SYSTEMS_KEY, json.dumps(saved, ensure_ascii=False))
    return saved


def clear_saved_systems(store: KeyValueStore) -> None:
    with _saved_lock:
        store.set(SAVED_SYSTEMS_KEY, json.dumps([]))


def saved_system_grid(entry: dict) -> tuple[int, list[list[str]], list[str]]:
    """Turn a saved system back into ``(size, matrix_cells, vector_cells)``.

    The cells are the polar display strings, which parse back to the same
    values.
    """
    size = int(entry["size"])
    matrix = [list(row) for row in entry.get("A_polar", [])]
    vector = list(entry.get("b_polar", []))
    return size, matrix, vector


# ── Session history ──────────────────────────────────────────────────────

class SessionHistory:
    """Solves made during this session, newest first. Not persisted."""

    def __init__(self):
        self._entries: list[HistoryEntry] = []

    def add(self, entry: HistoryEntry) -> None:
        self._entries.insert(0, entry)

    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)


# ── Settings ─────────────────────────────────────────────────────────────

def get_theme(store: KeyValueStore) -> str:
    theme = store.get(THEME_KEY)
    return theme if theme in THEMES else DEFAULT_THEME


def set_theme(store: KeyValueStore, theme: str) -> str:
    if theme not in THEMES:
        raise ValueError(f"Unknown theme '{theme}'. Choose one of: {', '.join(THEMES)}.")
    store.set(THEME_KEY, theme)
    return theme


def cycle_theme(store: KeyValueStore) -> str:
    """Advance dark → light → pink → dark and persist the new choice."""
    current = get_theme(store)
    nxt = THEMES[(THEMES.index(current) + 1) % len(THEMES)]
    return set_theme(store, nxt)
