"""
Structured logging: timestamp, level, event_type, sale.

LOG_LEVEL and LOG_FORMAT (json | console) come from the process environment,
falling back to the project .env file, and are resolved before structlog is
configured on first import. Loggers are lazy proxies, so configure_structlog()
can be called again (e.g. by tests) and applies to every module logger.

Uses only stdlib logging, python-dotenv and structlog; no ico_monitor imports
to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog
from dotenv import dotenv_values
from structlog._config import BoundLoggerLazyProxy

# ico_monitor/ico_logging/ -> project root
_ENV_PATH = Path(__file__).resolve().parents[2] / ".env"

LOG_FORMATS = ("json", "console")


def load_log_env(env_path: Path = _ENV_PATH) -> tuple[str, int]:
    """Return (log_format, level) with environment variables taking precedence over .env."""
    file_values = dotenv_values(env_path) if env_path.is_file() else {}

    def read(name: str, default: str) -> str:
        return (os.getenv(name) or file_values.get(name) or default).strip()

    log_format = read("LOG_FORMAT", "json").lower()
    if log_format not in LOG_FORMATS:
        log_format = "json"
    level = getattr(logging, read("LOG_LEVEL", "INFO").upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    return log_format, level


def _add_timestamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _normalize_event(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Rename structlog 'event' to event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def configure_structlog(log_format: str | None = None, level: int | None = None) -> None:
    """
    Configure structlog. Unset arguments are read via load_log_env().

    Output goes to stderr so stdout stays free for report JSON.
    """
    if log_format is None or level is None:
        env_format, env_level = load_log_env()
        log_format = log_format or env_format
        level = env_level if level is None else level

    renderer: Any
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _add_timestamp,
            _normalize_event,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> Any:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("statistics_done", transactions=12, tokens_issued=5.0)
    """
    return BoundLoggerLazyProxy(None, initial_values={"logger": name}, logger_factory_args=(name,))


def bind_sale(sale_name: str) -> Any:
    """Return a logger with the sale name bound to all subsequent log calls."""
    return BoundLoggerLazyProxy(
        None,
        initial_values={"logger": "ico_monitor", "sale": sale_name},
        logger_factory_args=("ico_monitor",),
    )
