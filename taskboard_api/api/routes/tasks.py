from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_api.core.deps import get_company_id, get_company_session, get_current_member
from taskboard_api.db.models import Member
from taskboard_api.schemas.common import StatusResponse
from taskboard_api.schemas.task import PaginationRead, TaskListResponse, TaskRead, TaskReorderRequest
from taskboard_api.services.reorder import ReorderService
from taskboard_api.services.task import TaskService

router = APIRouter(tags=["Tasks"])

TASKS_REORDERED = "Tasks reordered successfully"


# PUBLIC_INTERFACE
@router.get(
    "/sheets/{sheet_id}/tasks",
    response_model=TaskListResponse,
    summary="List sheet tasks",
    description=(
        "Return a page of a sheet's tasks ordered by position. `filters` is a JSON object "
        'such as {"name":"838","priority":["HIGH","MEDIUM"]}; malformed filters are ignored.'
    ),
)
async def list_sheet_tasks(
    sheet_id: UUID = Path(..., description="Sheet id"),
    filters: Optional[str] = Query(None, description="Dynamic filters in JSON format"),
    search: Optional[str] = Query(None, description="Case-insensitive substring of the task name"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    company_id: UUID = Depends(get_company_id),
    member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_company_session),
) -> TaskListResponse:
    service = TaskService(session, company_id)
    result = await service.list_sheet_tasks(
        member, sheet_id, filters=filters, search=search, page=page, limit=limit
    )
    return TaskListResponse(
        tasks=[TaskRead.model_validate(t) for t in result.tasks],
        pagination=PaginationRead(page=result.page, pages=result.pages, limit=result.limit, count=result.count),
    )


# PUBLIC_INTERFACE
@router.put(
    "/tasks/reorder",
    response_model=StatusResponse,
    summary="Reorder tasks",
    description="Apply a drag-and-drop reorder of tasks atomically. Requires the author role.",
)
async def reorder_tasks(
    payload: TaskReorderRequest,
    company_id: UUID = Depends(get_company_id),
    member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_company_session),
) -> StatusResponse:
    service = ReorderService(session, company_id)
    await service.reorder_tasks(member, payload.taskId, payload.orders)
    return StatusResponse(result=TASKS_REORDERED)
