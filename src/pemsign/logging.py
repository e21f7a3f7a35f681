"""JSON log lines on stderr; stdout is reserved for signatures and verdicts."""
from __future__ import annotations

import logging
import os
import sys
from typing import Dict

import structlog

LEVEL_ENV = "PEMSIGN_LOG_LEVEL"

_LEVELS: Dict[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def _normalize_fields(logger, _name: str, event_dict: dict) -> dict:
    # Records carry ``component`` (the logger name) and ``msg`` instead of ``event``.
    event_dict.setdefault("component", getattr(logger, "name", None) or "pemsign")
    if "msg" not in event_dict:
        event_dict["msg"] = event_dict.pop("event", "")
    return event_dict


def configure_logging(level: str | None = None) -> int:
    """Route structlog through stdlib logging and return the effective level.

    ``PEMSIGN_LOG_LEVEL`` takes precedence over ``level``; unknown names fall
    back to WARNING.
    """
    name = (os.getenv(LEVEL_ENV) or level or "warning").lower()
    numeric = _LEVELS.get(name, logging.WARNING)

    logging.basicConfig(
        level=numeric,
        handlers=[logging.StreamHandler(sys.stderr)],
        format="%(message)s",
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.stdlib.add_log_level,
            _normalize_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        cache_logger_on_first_use=True,
    )
    return numeric


__all__ = ["LEVEL_ENV", "configure_logging"]
