"""
Structured logging for the group access service and command line tools.

Log lines are JSON objects carrying the logger name, level, an ISO-8601
``timestamp``, the owning ``service`` and, inside an HTTP request, its
``request_id``. They are written to stderr so command output on stdout can
be parsed.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

import structlog

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def parse_log_level(log_level: str) -> int:
    """Map a level name such as ``"info"`` to its :mod:`logging` constant."""
    name = log_level.strip().lower()
    if name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {log_level!r}, expected one of: {', '.join(LOG_LEVELS)}")
    return getattr(logging, name.upper())


def configure_logging(service_name: str, log_level: str = "info") -> None:
    level = parse_log_level(log_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            add_service_context,
            add_request_id,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    # basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(level)
    get_logger(service_name).debug("Logging configured", level=logging.getLevelName(level))


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Tag events with the top-level logger name, e.g. ``group_access``."""
    logger_name = event_dict.get("logger", "")
    if logger_name:
        event_dict["service"] = logger_name.split(".")[0]
    return event_dict


def add_request_id(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    request_id = request_id_var.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def set_request_id(request_id: Optional[str] = None) -> str:
    """Bind ``request_id`` (a fresh uuid4 when missing) to the current context."""
    if not request_id:
        request_id = str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


def clear_context():
    request_id_var.set(None)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
