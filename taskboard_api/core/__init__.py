"""
Core application utilities for settings and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- Logging configuration with correlation/company context
- Dependency helpers (company extraction, company-scoped DB session, current member)
"""
