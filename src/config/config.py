import os
from dataclasses import dataclass

from utils.load_secrets import load_env_vars


@dataclass(frozen=True)
class Settings:
    storage_backend: str
    local_storage_path: str
    notion_token: str
    notion_sessions_db_id: str
    notion_version: str
    notion_timeout_ms: int
    log_level: str

    def __init__(self):
        load_env_vars()
        object.__setattr__(
            self,
            "storage_backend",
            os.getenv("STORAGE_BACKEND", "local").strip().lower(),
        )
        object.__setattr__(
            self,
            "local_storage_path",
            os.getenv(
                "LOCAL_STORAGE_PATH", ".geo_tutorial/local_storage.json"
            ).strip(),
        )
        object.__setattr__(self, "notion_token", os.getenv("NOTION_TOKEN", "").strip())
        object.__setattr__(
            self,
            "notion_sessions_db_id",
            os.getenv("NOTION_SESSIONS_DATABASE_ID", "").strip(),
        )
        object.__setattr__(
            self, "notion_version", os.getenv("NOTION_VERSION", "2022-06-28").strip()
        )
        object.__setattr__(
            self,
            "notion_timeout_ms",
            int(os.getenv("NOTION_TIMEOUT_MS", "60000").strip()),
        )
        object.__setattr__(
            self, "log_level", os.getenv("LOG_LEVEL", "INFO").strip().upper()
        )


SETTINGS = Settings()
