"""
Domain errors raised by services.

Each error carries the HTTP status the API layer reports for it; the exception
handler in taskboard_api.api.main renders them in the standard error envelope.
"""
from __future__ import annotations

from typing import Any, List, Optional


class ServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    error_type = "service_error"

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ReorderValidationError(ServiceError):
    """The reorder request is malformed. ``reasons`` lists every problem found."""

    status_code = 400
    error_type = "validation_error"

    def __init__(self, reasons: List[str]) -> None:
        super().__init__("Invalid reorder request", details={"reasons": reasons})
        self.reasons = reasons


class ReorderForbiddenError(ServiceError):
    """The acting member lacks the role required to reorder."""

    status_code = 403
    error_type = "forbidden"


class ReorderPersistenceError(ServiceError):
    """The reorder transaction failed and was rolled back."""

    status_code = 500
    error_type = "persistence_error"


class EntityNotFoundError(ReorderPersistenceError):
    """An update in the batch matched no row."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(
            f"{entity} {entity_id} not found",
            details={"entity": entity, "id": entity_id},
        )
        self.entity = entity
        self.entity_id = entity_id


class ReorderTimeoutError(ServiceError):
    """The reorder transaction did not finish within the configured deadline."""

    status_code = 504
    error_type = "timeout"
