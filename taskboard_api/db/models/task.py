from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Table,
    Text,
    Uuid,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard_api.db.base import Base, UUIDPkMixin, TimestampMixin, CompanyMixin, OrderedMixin
from taskboard_api.db.models.company import Member


def _array_of(item_type):
    """Postgres array column; falls back to JSON on SQLite (tests)."""
    return ARRAY(item_type).with_variant(JSON(), "sqlite")


task_members = Table(
    "task_members",
    Base.metadata,
    Column("task_id", Uuid(as_uuid=True), ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
    Column("member_id", Uuid(as_uuid=True), ForeignKey("members.id", ondelete="CASCADE"), primary_key=True),
)


class Task(UUIDPkMixin, CompanyMixin, TimestampMixin, OrderedMixin, Base):
    """A row of a sheet. Carries fixed fields plus five slots per custom column kind."""
    __tablename__ = "tasks"
    __table_args__ = (
        Index("idx_tasks_sheet_id_order", "sheet_id", "order"),
        Index("idx_tasks_sheet_id_status", "sheet_id", "status"),
        Index("idx_tasks_sheet_id_priority", "sheet_id", "priority"),
    )

    workspace_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sheet_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("sheets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    last_updated_by_user_id: Mapped[Optional[UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    priority: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    links: Mapped[Optional[list[str]]] = mapped_column(_array_of(Text), nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    paid: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    text1: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    text2: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    text3: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    text4: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    text5: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    number1: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    number2: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    number3: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    number4: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    number5: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    checkbox1: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    checkbox2: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    checkbox3: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    checkbox4: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    checkbox5: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    select1: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    select2: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    select3: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    select4: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    select5: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    date1: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    date2: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    date3: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    date4: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    date5: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    duedate1: Mapped[Optional[list[datetime]]] = mapped_column(_array_of(DateTime(timezone=True)), nullable=True)
    duedate2: Mapped[Optional[list[datetime]]] = mapped_column(_array_of(DateTime(timezone=True)), nullable=True)
    duedate3: Mapped[Optional[list[datetime]]] = mapped_column(_array_of(DateTime(timezone=True)), nullable=True)
    duedate4: Mapped[Optional[list[datetime]]] = mapped_column(_array_of(DateTime(timezone=True)), nullable=True)
    duedate5: Mapped[Optional[list[datetime]]] = mapped_column(_array_of(DateTime(timezone=True)), nullable=True)

    members: Mapped[list[Member]] = relationship(
        Member,
        secondary=task_members,
        lazy="selectin",
    )
