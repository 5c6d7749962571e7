"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries for each entity. They assume the
provided AsyncSession has the company context configured (e.g., using the
taskboard_api.core.deps.get_company_session dependency).
"""
