from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_api.core.settings import get_app_settings
from taskboard_api.db.models import Member, MemberType, Task
from taskboard_api.filters import build_task_conditions, normalize_filters
from taskboard_api.repositories.task import TaskRepository
from taskboard_api.services.base import BaseService

logger = logging.getLogger(__name__)


@dataclass
class TaskPage:
    tasks: List[Task]
    page: int
    pages: int
    limit: int
    count: int


class TaskService(BaseService):
    """Task listing for a sheet with client-supplied filters."""

    def __init__(self, session: AsyncSession, company_id: UUID) -> None:
        super().__init__(session, company_id)
        self.repo = TaskRepository(session, self.company_id)

    # PUBLIC_INTERFACE
    async def list_sheet_tasks(
        self,
        member: Member,
        sheet_id: UUID,
        *,
        filters: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> TaskPage:
        """
        Return a page of tasks of a sheet.

        Malformed `filters` never fail the request; they are dropped. `search`
        matches task names case-insensitively and replaces any name filter.
        Members below author only see tasks they are assigned to.
        """
        settings = get_app_settings()
        limit = min(limit or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
        page = max(page, 1)

        predicate = normalize_filters(filters)
        if search:
            predicate["name"] = {"contains": search, "mode": "insensitive"}
        conditions = build_task_conditions(predicate)

        member_id = None if member.type == MemberType.AUTHOR else member.id
        tasks, count = await self.repo.list_tasks_by_sheet(
            sheet_id=sheet_id,
            member_id=member_id,
            conditions=conditions,
            limit=limit,
            offset=(page - 1) * limit,
        )
        logger.debug("Sheet %s: %d of %d task(s) on page %d", sheet_id, len(tasks), count, page)
        return TaskPage(tasks=tasks, page=page, pages=math.ceil(count / limit), limit=limit, count=count)
