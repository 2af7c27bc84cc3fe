import logging
from datetime import datetime, timezone
from typing import Any, List, Optional
from models.models import LatLng, Popup, ResultType, Session, TaskResult
from storage.backend import SessionBackend, SessionRecord
from storage.errors import BackendUnavailableError
from utils.codec import (
    CodecError,
    decode_popups,
    decode_session,
    encode_popups,
    encode_session,
    normalize_rings,
)

logger = logging.getLogger(__name__)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _is_coordinate(value: Any) -> bool:
    if isinstance(value, LatLng):
        return True
    if isinstance(value, dict):
        return "lat" in value and "lng" in value
    return (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and all(isinstance(v, (int, float)) for v in value)
    )


def build_task_result(task_id: int, payload: Any, result_type: ResultType | str) -> TaskResult:
    """Coerce a UI payload into a ``TaskResult``.

    A polygon payload may be a list of rings or a single ring; popups may be
    ``Popup`` objects or plain dicts.
    """
    if isinstance(task_id, bool) or not isinstance(task_id, int) or task_id < 1:
        raise ValueError(f"task_id must be a positive integer, got {task_id!r}")
    result_type = ResultType(result_type)
    payload = list(payload or [])

    if result_type == ResultType.POLYGON:
        if payload and _is_coordinate(payload[0]):
            payload = [payload]
        return TaskResult(task_id=task_id, type=result_type, polygons=normalize_rings(payload))

    popups: List[Popup] = decode_popups(encode_popups(payload))
    return TaskResult(task_id=task_id, type=result_type, popups=popups)


class ResultStore:
    """Per-session task results on top of a ``SessionBackend``.

    Read failures degrade to empty or absent values. Save failures are
    reported as ``False`` unless the backend asks for them to be raised.
    """

    def __init__(self, backend: SessionBackend):
        self.backend = backend

    def _decode(self, raw: SessionRecord) -> Session:
        if isinstance(raw, dict) and parse_timestamp(raw.get("createdAt")) is None:
            raw = {**raw, "createdAt": now_iso()}
        return decode_session(raw)

    async def save_task_result(
        self,
        session_id: str,
        task_id: int,
        payload: Any,
        result_type: ResultType | str,
    ) -> bool:
        result = build_task_result(task_id, payload, result_type)
        try:
            raw = await self.backend.get_session(session_id)
            session = None
            if raw is not None:
                try:
                    session = self._decode(raw)
                except CodecError as e:
                    logger.error(f"Session {session_id} is malformed, starting it afresh: {e}")
            if session is None:
                session = Session(id=session_id, created_at=now_iso())

            for i, existing in enumerate(session.results):
                if existing.task_id == task_id:
                    session.results[i] = result
                    break
            else:
                session.results.append(result)

            await self.backend.put_session(encode_session(session))
        except BackendUnavailableError as e:
            logger.error(f"Failed to save task {task_id} for session {session_id}: {e}")
            if self.backend.raise_on_write_failure:
                raise
            return False

        logger.info(f"Saved {result.type.value} result for task {task_id} in session {session_id}")
        return True

    async def get_task_results(self, session_id: str, task_id: int) -> Optional[TaskResult]:
        try:
            raw = await self.backend.get_session(session_id)
        except BackendUnavailableError as e:
            logger.error(f"Failed to load session {session_id}: {e}")
            return None
        if raw is None:
            return None
        try:
            session = self._decode(raw)
        except CodecError as e:
            logger.error(f"Session {session_id} is malformed: {e}")
            return None
        return session.find_result(task_id)

    async def get_all_sessions(self) -> List[Session]:
        """Return every stored session, newest first."""
        try:
            records = await self.backend.list_sessions()
        except BackendUnavailableError as e:
            logger.error(f"Failed to list sessions: {e}")
            return []

        sessions = []
        for raw in records:
            try:
                sessions.append(self._decode(raw))
            except CodecError as e:
                logger.warning(f"Skipping malformed session record: {e}")
        sessions.sort(key=lambda s: parse_timestamp(s.created_at), reverse=True)
        return sessions

    async def delete_session(self, session_id: str) -> bool:
        try:
            await self.backend.delete_session(session_id)
        except BackendUnavailableError as e:
            logger.error(f"Failed to delete session {session_id}: {e}")
            return False
        logger.info(f"Deleted session {session_id}")
        return True
