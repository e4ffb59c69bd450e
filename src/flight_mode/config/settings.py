from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Local store backend selection: auto, native or fallback
    store_backend: str = Field(default="auto", alias="STORE_BACKEND")

    # Native embedded database
    database_url: str = Field(
        default="sqlite:///./flight_mode.db",
        alias="DATABASE_URL",
    )
    database_echo: bool = Field(
        default=False,
        alias="DATABASE_ECHO",
    )
    database_auto_migrate: bool = Field(
        default=True,
        alias="DATABASE_AUTO_MIGRATE",
    )

    # Structured-document fallback
    fallback_store_path: str = Field(
        default=".flight_mode/fallback_store.json",
        alias="FALLBACK_STORE_PATH",
    )
    fallback_storage_key: str = Field(
        default="flightmode_sqlite_fallback",
        alias="FALLBACK_STORAGE_KEY",
    )

    # Remote document store
    remote_base_url: str = Field(
        default="https://firestore.googleapis.com/v1", alias="REMOTE_BASE_URL"
    )
    remote_project_id: str = Field(default="", alias="REMOTE_PROJECT_ID")
    remote_database: str = Field(default="(default)", alias="REMOTE_DATABASE")
    remote_api_key: str = Field(default="", alias="REMOTE_API_KEY")
    remote_auth_token: str = Field(default="", alias="REMOTE_AUTH_TOKEN")
    remote_timeout_seconds: float | None = Field(
        default=None, alias="REMOTE_TIMEOUT_SECONDS"
    )
    remote_sessions_collection: str = Field(
        default="focus_sessions", alias="REMOTE_SESSIONS_COLLECTION"
    )
    remote_users_collection: str = Field(
        default="users", alias="REMOTE_USERS_COLLECTION"
    )

    # Sync scheduling
    sync_interval_minutes: float = Field(default=5, alias="SYNC_INTERVAL_MINUTES")
    connectivity_probe_url: str = Field(
        default="https://firestore.googleapis.com",
        alias="CONNECTIVITY_PROBE_URL",
    )
    connectivity_probe_interval_seconds: float = Field(
        default=30, alias="CONNECTIVITY_PROBE_INTERVAL_SECONDS"
    )

    user_id: str = Field(default="", alias="FLIGHT_MODE_USER_ID")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


@lru_cache
def get_settings() -> Settings:
    return Settings()
