import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional

_locks: Dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    """One lock per file, shared by every ``LocalStorage`` over that file."""
    key = path.resolve()
    with _locks_guard:
        if key not in _locks:
            _locks[key] = threading.RLock()
        return _locks[key]


class LocalStorage:
    """String key/value store persisted as a single JSON file.

    Mirrors the browser ``localStorage`` API. Every ``set_item`` rewrites the
    file through a temporary file and ``os.replace``, so readers never observe
    a half-written file. Writes hold ``lock``; callers doing their own
    read-modify-write of a value take it too.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self.lock = _lock_for(self.path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a key/value object")
        return data

    def _dump(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self.lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def remove_item(self, key: str) -> None:
        with self.lock:
            data = self._load()
            if data.pop(key, None) is not None:
                self._dump(data)
