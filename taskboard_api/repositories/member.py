from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy import select

from taskboard_api.db.models import Member
from .base import BaseRepository


class MemberRepository(BaseRepository):
    """Repository for company memberships."""

    async def get_member(self, *, company_id: UUID, user_id: UUID) -> Optional[Member]:
        stmt = select(Member).where(Member.company_id == company_id, Member.user_id == user_id)
        return await self.scalar_one_or_none(stmt)
