from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

SessionRecord = Dict[str, Any]


class SessionBackend(ABC):
    """Storage medium for session records in their persisted layout.

    Records are plain dicts (``{"id", "createdAt", "results"}``); encoding and
    decoding is the caller's job. Implementations raise
    ``BackendUnavailableError`` when the medium cannot be reached.
    """

    # Whether the store re-raises save failures instead of reporting False.
    raise_on_write_failure: bool = False

    @abstractmethod
    async def get_session(self, session_id: str) -> Optional[SessionRecord]:
        pass

    @abstractmethod
    async def put_session(self, record: SessionRecord) -> None:
        pass

    @abstractmethod
    async def list_sessions(self) -> List[SessionRecord]:
        pass

    @abstractmethod
    async def delete_session(self, session_id: str) -> None:
        pass
