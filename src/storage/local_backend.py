import json
import logging
from typing import List, Optional
from utils.constants import StorageKeys
from utils.local_storage import LocalStorage
from storage.backend import SessionBackend, SessionRecord
from storage.errors import BackendUnavailableError

logger = logging.getLogger(__name__)


class LocalSessionBackend(SessionBackend):
    """All sessions live in one JSON blob under the ``sessions`` key.

    Every operation reads the whole blob and every write rewrites it; there
    is no partial update.
    """

    raise_on_write_failure = False

    def __init__(self, local_storage: LocalStorage, key: str = StorageKeys.SESSIONS.value):
        self.local_storage = local_storage
        self.key = key

    def _read_all(self) -> List[SessionRecord]:
        try:
            blob = self.local_storage.get_item(self.key)
        except (OSError, ValueError) as e:
            raise BackendUnavailableError(f"Local storage is unavailable: {e}") from e
        if not blob:
            return []
        try:
            sessions = json.loads(blob)
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing sessions, treating as empty: {e}")
            return []
        if not isinstance(sessions, list):
            logger.error("Stored sessions are not a list, treating as empty")
            return []
        return sessions

    def _write_all(self, sessions: List[SessionRecord]) -> None:
        try:
            self.local_storage.set_item(self.key, json.dumps(sessions, ensure_ascii=False))
        except (OSError, ValueError) as e:
            raise BackendUnavailableError(f"Local storage is unavailable: {e}") from e

    async def get_session(self, session_id: str) -> Optional[SessionRecord]:
        return next(
            (s for s in self._read_all() if isinstance(s, dict) and s.get("id") == session_id),
            None,
        )

    async def put_session(self, record: SessionRecord) -> None:
        with self.local_storage.lock:
            sessions = self._read_all()
            for i, s in enumerate(sessions):
                if isinstance(s, dict) and s.get("id") == record["id"]:
                    sessions[i] = record
                    break
            else:
                sessions.append(record)
            self._write_all(sessions)

    async def list_sessions(self) -> List[SessionRecord]:
        return self._read_all()

    async def delete_session(self, session_id: str) -> None:
        with self.local_storage.lock:
            sessions = self._read_all()
            remaining = [s for s in sessions if not (isinstance(s, dict) and s.get("id") == session_id)]
            if len(remaining) != len(sessions):
                self._write_all(remaining)
