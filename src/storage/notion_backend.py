import logging
from typing import List, Optional
from clients.notion_client import NotionSessionsClient
from storage.backend import SessionBackend, SessionRecord
from utils.notion_utils import (
    create_results_property,
    create_session_properties,
    page_to_session_record,
)

logger = logging.getLogger(__name__)


class NotionSessionBackend(SessionBackend):
    """One Notion page per session, looked up by its ``Session ID`` title."""

    raise_on_write_failure = True

    def __init__(self, notion_client: NotionSessionsClient):
        self.notion_client = notion_client

    async def get_session(self, session_id: str) -> Optional[SessionRecord]:
        pages = await self.notion_client.find_session_pages(session_id)
        if not pages:
            return None
        if len(pages) > 1:
            logger.warning(f"Found {len(pages)} pages for session {session_id}, using the first")
        return page_to_session_record(pages[0])

    async def put_session(self, record: SessionRecord) -> None:
        pages = await self.notion_client.find_session_pages(record["id"])
        if pages:
            await self.notion_client.update_session_page(
                pages[0]["id"], create_results_property(record.get("results") or [])
            )
        else:
            await self.notion_client.create_session_page(create_session_properties(record))

    async def list_sessions(self) -> List[SessionRecord]:
        pages = await self.notion_client.query_all_pages()
        return [page_to_session_record(page) for page in pages]

    async def delete_session(self, session_id: str) -> None:
        pages = await self.notion_client.find_session_pages(session_id)
        if pages:
            await self.notion_client.archive_pages([page["id"] for page in pages])
