"""
Task filter normalization.

``normalize_filters`` is the entry point used by the task listing: it repairs a
raw client filter string, parses it strictly and coerces each field through the
field type registry. It never raises; unrecoverable input yields ``{}``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from taskboard_api.core.logging import FILTER_FALLBACK, log_event

from .fields import FIELD_TYPES, FieldType, field_type_for, normalize_predicate
from .query import build_task_conditions
from .sanitizer import REWRITE_RULES, Fallback, FilterParseResult, Parsed, RewriteRule, parse_filter_string, repair

logger = logging.getLogger(__name__)

_LOGGED_RAW_LIMIT = 200


# PUBLIC_INTERFACE
def normalize_filters(raw: Optional[str]) -> Dict[str, Any]:
    """Return the predicate for ``raw``, or an empty predicate if it cannot be recovered."""
    outcome = parse_filter_string(raw)
    if isinstance(outcome, Fallback):
        log_event(
            logger,
            logging.WARNING,
            FILTER_FALLBACK,
            f"Discarding malformed task filters: {outcome.reason}; raw={outcome.raw[:_LOGGED_RAW_LIMIT]!r}",
            reason=outcome.reason.split(":", 1)[0],
            raw_length=len(outcome.raw),
        )
        return {}
    predicate = normalize_predicate(outcome.data)
    logger.debug("Normalized task filters: %s", predicate)
    return predicate


__all__ = [
    "FIELD_TYPES",
    "FieldType",
    "Fallback",
    "FilterParseResult",
    "Parsed",
    "REWRITE_RULES",
    "RewriteRule",
    "build_task_conditions",
    "field_type_for",
    "normalize_filters",
    "normalize_predicate",
    "parse_filter_string",
    "repair",
]
