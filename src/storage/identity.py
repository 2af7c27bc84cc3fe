import logging
import uuid
from typing import Any, MutableMapping
from streamlit.errors import StreamlitAPIException
from utils.constants import StorageKeys
from storage.errors import IdentityUnavailableError

logger = logging.getLogger(__name__)


class SessionIdentityProvider:
    """Creates the anonymous session id once per browser session.

    The id is kept in ``state``, normally ``st.session_state``, so each
    visitor gets their own id and nothing is shared between browsers.
    """

    def __init__(self, state: MutableMapping[str, Any]):
        self.state = state

    def get_or_create_session_id(self) -> str:
        key = StorageKeys.CURRENT_SESSION_ID.value
        try:
            session_id = self.state.get(key)
            if session_id:
                return session_id
            session_id = uuid.uuid4().hex
            self.state[key] = session_id
        except (RuntimeError, StreamlitAPIException) as e:
            raise IdentityUnavailableError(f"Session state is unavailable: {e}") from e
        logger.info(f"Created session {session_id}")
        return session_id

    def reset(self) -> None:
        """Forget the current session id; the next lookup creates a new one."""
        try:
            self.state.pop(StorageKeys.CURRENT_SESSION_ID.value, None)
        except (RuntimeError, StreamlitAPIException) as e:
            raise IdentityUnavailableError(f"Session state is unavailable: {e}") from e
        logger.info("Session id reset")
