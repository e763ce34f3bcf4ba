from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_CONFIGURED = False

# Keys whose values must never reach the log stream.
REDACTED_KEYS = frozenset({"password", "client_secret", "token", "access_token", "authorization"})


def redact_secrets(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Mask credential material passed as log context."""
    for key in event_dict.keys() & REDACTED_KEYS:
        event_dict[key] = "***"
    return event_dict


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure structlog for JSON output once per process.

    ``level`` accepts a ``logging`` constant or a name such as ``"DEBUG"``;
    unknown names fall back to INFO.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    min_level = _resolve_level(level)
    logging.basicConfig(level=min_level, format="%(message)s", stream=sys.stdout)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
            redact_secrets,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True
