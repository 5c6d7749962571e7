from __future__ import annotations

from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import ColumnElement, func, select

from taskboard_api.db.models import Task, task_members
from .ordering import OrderedEntityRepository


class TaskRepository(OrderedEntityRepository):
    """Repository for tasks of the current company."""

    model = Task

    def scope(self) -> List[ColumnElement[bool]]:
        return [Task.company_id == self.company_id]

    async def list_tasks_by_sheet(
        self,
        *,
        sheet_id: UUID,
        member_id: Optional[UUID],
        conditions: Sequence[ColumnElement[bool]],
        limit: int,
        offset: int,
    ) -> Tuple[List[Task], int]:
        """Return one page of a sheet's tasks, highest `order` first, and the total count."""
        where = [Task.sheet_id == sheet_id, *self.scope(), *conditions]
        if member_id is not None:
            assigned = select(task_members.c.task_id).where(task_members.c.member_id == member_id)
            where.append(Task.id.in_(assigned))

        stmt = select(Task).where(*where).order_by(Task.order.desc()).offset(offset).limit(limit)
        rows = list(await self.scalars(stmt))

        count_stmt = select(func.count()).select_from(Task).where(*where)
        result = await self.execute(count_stmt)
        return rows, int(result.scalar_one())
