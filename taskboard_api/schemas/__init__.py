"""
Public Pydantic schemas used by FastAPI routes, services, and tests.

Schemas are grouped by entity (tasks, options) and also include common
reusable models such as the standard error envelope.
"""

from .common import MessageResponse, StatusResponse  # noqa: F401
