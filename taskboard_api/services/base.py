from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession


class BaseService:
    """
    Base class for services bound to one company.

    Services keep business logic and orchestration, delegating data access to
    repositories that share the service's company-scoped session.
    """

    def __init__(self, session: AsyncSession, company_id: UUID) -> None:
        self.session = session
        self.company_id = company_id
