from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy import ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskboard_api.db.base import Base, UUIDPkMixin, TimestampMixin, OrderedMixin


class Select(UUIDPkMixin, TimestampMixin, Base):
    """A single-choice custom column of a sheet; its choices are Options."""
    __tablename__ = "selects"

    sheet_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("sheets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)

    options: Mapped[list["Option"]] = relationship(
        "Option",
        back_populates="select",
        order_by="Option.order",
        lazy="selectin",
    )


class Option(UUIDPkMixin, TimestampMixin, OrderedMixin, Base):
    """A choice of a Select column, positioned by drag and drop."""
    __tablename__ = "options"

    select_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("selects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    color: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    select: Mapped[Select] = relationship("Select", back_populates="options")
