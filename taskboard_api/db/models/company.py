from __future__ import annotations

import enum
from typing import Optional
from uuid import UUID

from sqlalchemy import Enum, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from taskboard_api.db.base import Base, UUIDPkMixin, TimestampMixin, CompanyMixin


class MemberType(str, enum.Enum):
    """Role a user holds inside a company."""
    AUTHOR = "AUTHOR"
    MEMBER = "MEMBER"
    VIEWER = "VIEWER"


class Company(UUIDPkMixin, TimestampMixin, Base):
    """Tenant root; every other row is scoped to a company."""
    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[Optional[UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)


class Member(UUIDPkMixin, CompanyMixin, TimestampMixin, Base):
    """A user's membership of a company, carrying the role used for authorization."""
    __tablename__ = "members"
    __table_args__ = (
        UniqueConstraint("company_id", "user_id", name="uq_members_company_user"),
    )

    # Users are managed by the external identity service.
    user_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    type: Mapped[MemberType] = mapped_column(
        Enum(MemberType, name="member_type", native_enum=False),
        nullable=False,
        default=MemberType.MEMBER,
    )
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
