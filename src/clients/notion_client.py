from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, List
import httpx
from notion_client import AsyncClient
from notion_client.errors import HTTPResponseError, RequestTimeoutError
from notion_client.helpers import async_collect_paginated_api
from storage.errors import BackendUnavailableError
from utils.notion_utils import create_session_id_filter


class NotionSessionsClient:
    """Thin async wrapper over the Notion database that holds sessions.

    A fresh ``AsyncClient`` is opened for every call so that each
    ``asyncio.run`` from the UI gets its own connection pool.
    """

    def __init__(
        self,
        token: str,
        database_id: str,
        notion_version: str = "2022-06-28",
        timeout_ms: int = 60_000,
        client_factory: Callable[[], Any] | None = None,
    ):
        self.database_id = database_id
        self.client_factory = client_factory or (
            lambda: AsyncClient(
                auth=token, notion_version=notion_version, timeout_ms=timeout_ms
            )
        )

    @asynccontextmanager
    async def _client(self):
        if not self.database_id:
            raise BackendUnavailableError("Notion sessions database id not found.")
        client = self.client_factory()
        try:
            yield client
        except (HTTPResponseError, RequestTimeoutError, httpx.HTTPError) as e:
            raise BackendUnavailableError(f"Notion request failed: {e}") from e
        finally:
            await client.aclose()

    async def find_session_pages(self, session_id: str) -> List[Dict[str, Any]]:
        async with self._client() as client:
            return await async_collect_paginated_api(
                client.databases.query,
                database_id=self.database_id,
                filter=create_session_id_filter(session_id),
            )

    async def query_all_pages(self) -> List[Dict[str, Any]]:
        async with self._client() as client:
            return await async_collect_paginated_api(
                client.databases.query, database_id=self.database_id
            )

    async def create_session_page(self, properties: Dict[str, Any]) -> Dict[str, Any]:
        async with self._client() as client:
            response: Any = await client.pages.create(
                parent={"database_id": self.database_id}, properties=properties
            )
        if not response:
            raise BackendUnavailableError("Failed to create Notion page")
        return response

    async def update_session_page(
        self, page_id: str, properties: Dict[str, Any]
    ) -> Dict[str, Any]:
        async with self._client() as client:
            return await client.pages.update(page_id=page_id, properties=properties)

    async def archive_pages(self, page_ids: List[str]) -> None:
        async with self._client() as client:
            for page_id in page_ids:
                await client.pages.update(page_id=page_id, archived=True)
