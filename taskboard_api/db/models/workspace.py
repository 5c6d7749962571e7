from __future__ import annotations

from uuid import UUID

from sqlalchemy import ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from taskboard_api.db.base import Base, UUIDPkMixin, TimestampMixin, CompanyMixin


class Workspace(UUIDPkMixin, CompanyMixin, TimestampMixin, Base):
    """Top-level grouping of sheets within a company."""
    __tablename__ = "workspaces"

    name: Mapped[str] = mapped_column(Text, nullable=False)


class Sheet(UUIDPkMixin, CompanyMixin, TimestampMixin, Base):
    """A board of tasks inside a workspace."""
    __tablename__ = "sheets"

    workspace_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
