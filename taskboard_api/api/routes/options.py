from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_api.core.deps import get_company_id, get_company_session, get_current_member
from taskboard_api.db.models import Member
from taskboard_api.schemas.common import StatusResponse
from taskboard_api.schemas.option import OptionReorderRequest
from taskboard_api.services.reorder import ReorderService

router = APIRouter(prefix="/options", tags=["Options"])

OPTIONS_REORDERED = "Options reordered successfully"


# PUBLIC_INTERFACE
@router.put(
    "/reorder",
    response_model=StatusResponse,
    summary="Reorder select options",
    description="Apply a drag-and-drop reorder of select options atomically. Requires the author role.",
)
async def reorder_options(
    payload: OptionReorderRequest,
    company_id: UUID = Depends(get_company_id),
    member: Member = Depends(get_current_member),
    session: AsyncSession = Depends(get_company_session),
) -> StatusResponse:
    service = ReorderService(session, company_id)
    await service.reorder_options(member, payload.optionIds, payload.orders)
    return StatusResponse(result=OPTIONS_REORDERED)
