from __future__ import annotations

from dataclasses import dataclass

from flight_mode.config.settings import Settings, get_settings


@dataclass(frozen=True)
class DatabaseConfig:
    """Resolved native database configuration from environment settings."""

    url: str
    echo: bool
    auto_migrate: bool


def get_database_config(settings: Settings | None = None) -> DatabaseConfig:
    settings = settings or get_settings()
    return DatabaseConfig(
        url=settings.database_url,
        echo=settings.database_echo,
        auto_migrate=settings.database_auto_migrate,
    )
