"""
API route modules.

This package contains subrouters for:
- Tasks: sheet task listing with filters, task reordering
- Options: select option reordering

Routers are included from taskboard_api.api.main (under the /api/v1 prefix).
"""
