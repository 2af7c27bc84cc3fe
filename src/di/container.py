from dependency_injector import containers, providers
import streamlit as st
from clients.notion_client import NotionSessionsClient
from storage.identity import SessionIdentityProvider
from storage.local_backend import LocalSessionBackend
from storage.notion_backend import NotionSessionBackend
from storage.result_store import ResultStore
from ui.final_page import FinalPage
from ui.gallery_page import GalleryPage
from ui.task_page import TaskPage
from utils.constants import StorageBackends
from utils.local_storage import LocalStorage
from config.config import SETTINGS


class Container(containers.DeclarativeContainer):
    # Clients
    local_storage = providers.Singleton(LocalStorage, path=SETTINGS.local_storage_path)
    notion_sessions_client = providers.Singleton(
        NotionSessionsClient,
        token=SETTINGS.notion_token,
        database_id=SETTINGS.notion_sessions_db_id,
        notion_version=SETTINGS.notion_version,
        timeout_ms=SETTINGS.notion_timeout_ms,
    )

    # Storage
    identity_provider = providers.Singleton(
        SessionIdentityProvider, state=providers.Object(st.session_state)
    )
    session_backend = providers.Selector(
        providers.Object(SETTINGS.storage_backend),
        **{
            StorageBackends.LOCAL.value: providers.Singleton(
                LocalSessionBackend, local_storage=local_storage
            ),
            StorageBackends.NOTION.value: providers.Singleton(
                NotionSessionBackend, notion_client=notion_sessions_client
            ),
        },
    )
    result_store = providers.Singleton(ResultStore, backend=session_backend)

    # UI Pages
    task_page = providers.Singleton(
        TaskPage, result_store=result_store, identity_provider=identity_provider
    )
    final_page = providers.Singleton(FinalPage, identity_provider=identity_provider)
    gallery_page = providers.Singleton(GalleryPage, result_store=result_store)
