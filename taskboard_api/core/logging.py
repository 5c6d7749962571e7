from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Any, Optional


# Context variables for enriched logging
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
company_id_var: ContextVar[Optional[str]] = ContextVar("company_id", default=None)

# Stable event names; operators count these to track malformed client input and reorder outcomes.
FILTER_FALLBACK = "filter.fallback"
REORDER_APPLIED = "reorder.applied"
REORDER_FAILED = "reorder.failed"


# PUBLIC_INTERFACE
def log_event(logger: logging.Logger, level: int, event: str, message: str, **fields: Any) -> None:
    """
    Log ``message`` tagged with a stable ``event`` name and key=value ``fields``.

    The fields are rendered after the event name by the configured formatter and
    stay available on the record as ``event_fields`` for tests and handlers.
    """
    logger.log(level, message, extra={"event": event, "event_fields": fields})


def _render_fields(fields: dict[str, Any]) -> str:
    return " ".join(
        f"{key}={value!r}" if isinstance(value, str) else f"{key}={value}"
        for key, value in sorted(fields.items())
    )


class LoggingContextFilter(logging.Filter):
    """
    Logging filter that injects correlation_id, company_id and the structured
    event of a record so formatters can include them.

    If no values are present, placeholders are used.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        cid = correlation_id_var.get()
        company = company_id_var.get()
        setattr(record, "correlation_id", cid or "-")
        setattr(record, "company_id", company or "-")
        if not getattr(record, "event", None):
            setattr(record, "event", "-")
        fields = getattr(record, "event_fields", None) or {}
        setattr(record, "event_data", _render_fields(fields))
        return True


# PUBLIC_INTERFACE
def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging with a structured format and context filter."""
    handler = logging.StreamHandler(stream=sys.stdout)
    fmt = (
        "%(asctime)s | %(levelname)s | %(name)s | cid=%(correlation_id)s | company=%(company_id)s | "
        "event=%(event)s %(event_data)s | %(message)s"
    )
    formatter = logging.Formatter(fmt=fmt)
    handler.setFormatter(formatter)
    handler.addFilter(LoggingContextFilter())

    root = logging.getLogger()
    # Remove pre-existing default handlers configured elsewhere (e.g., basicConfig)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(level)
