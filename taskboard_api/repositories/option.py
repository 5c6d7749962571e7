from __future__ import annotations

from typing import List

from sqlalchemy import ColumnElement, select

from taskboard_api.db.models import Option, Select, Sheet
from .ordering import OrderedEntityRepository


class OptionRepository(OrderedEntityRepository):
    """Repository for select options; scoped to the company through their sheet."""

    model = Option

    def scope(self) -> List[ColumnElement[bool]]:
        company_selects = (
            select(Select.id)
            .join(Sheet, Sheet.id == Select.sheet_id)
            .where(Sheet.company_id == self.company_id)
        )
        return [Option.select_id.in_(company_selects)]
