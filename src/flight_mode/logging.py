"""Process logging configuration for the CLI and host applications."""

from __future__ import annotations

import logging
import sys


def _parse_log_level(value: str | None) -> int:
    if not value:
        return logging.INFO
    parsed = logging.getLevelName(value.strip().upper())
    if isinstance(parsed, int):
        return parsed
    return logging.INFO


def setup_logging(level: str | None = None) -> int:
    """Attach a stdout handler to the root logger and set the package level."""
    if level is None:
        from flight_mode.config.settings import get_settings

        level = get_settings().log_level
    resolved = _parse_log_level(level)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
        root.addHandler(handler)

    root.setLevel(resolved)
    logging.getLogger("flight_mode").setLevel(resolved)
    logging.getLogger("httpx").setLevel(max(resolved, logging.WARNING))
    return resolved
