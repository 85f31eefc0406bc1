"""
storage.py — Key-value persistence for favorites, history and the last snapshot.

Both store implementations are fallible-but-silent: a failed load returns
the caller's default and a failed save is logged and dropped. The in-memory
state stays authoritative for the session either way.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)

FAVORITES_KEY = "rag_favorites_v1"
HISTORY_KEY = "rag_history_v1"
LAST_KEY = "rag_last_v1"


class KeyValueStore(Protocol):
    def load(self, key: str, default: Any = None) -> Any: ...

    def save(self, key: str, value: Any) -> None: ...


class MemoryStore:
    """Dict-backed store. Values are round-tripped through JSON like the file store."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if not raw:
            return default
        try:
            return json.loads(raw)
        except (ValueError, RecursionError):
            return default

    def save(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError, RecursionError) as e:
            logger.warning(f"Could not serialise {key}: {e}")

    def keys(self):
        return list(self._data)


class JsonFileStore:
    """One JSON file per key inside `root`."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).expanduser()

    def _path(self, key: str) -> Path:
        safe = re.sub(r"[^a-zA-Z0-9_-]", "_", key)
        return self.root / f"{safe}.json"

    def load(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return default
        except OSError as e:
            logger.debug(f"Load {key} failed: {e}")
            return default
        if not raw.strip():
            return default
        try:
            return json.loads(raw)
        except (ValueError, RecursionError) as e:
            logger.warning(f"Ignoring corrupt store file {path.name}: {type(e).__name__}")
            return default

    def save(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".tmp")
            tmp.write_text(json.dumps(value, indent=2), encoding="utf-8")
            tmp.replace(path)
        except (OSError, TypeError, ValueError, RecursionError) as e:
            logger.warning(f"Save {key} failed: {e}")
