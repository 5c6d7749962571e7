from __future__ import annotations

import logging
from typing import Any, List, Sequence, Tuple, Type
from uuid import UUID

from sqlalchemy import ColumnElement, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_api.services.errors import EntityNotFoundError
from .base import BaseRepository

logger = logging.getLogger(__name__)


def _as_uuid(entity_id: str) -> UUID | None:
    try:
        return UUID(entity_id)
    except (TypeError, ValueError, AttributeError):
        return None


class OrderedEntityRepository(BaseRepository):
    """
    Writes the client-controlled `order` column of a model.

    Subclasses set `model` and may narrow `scope()` so that updates only touch
    rows inside the caller's company.
    """

    model: Type[Any]

    def __init__(self, session: AsyncSession, company_id: UUID) -> None:
        super().__init__(session)
        self.company_id = company_id

    def scope(self) -> List[ColumnElement[bool]]:
        return []

    async def apply_orders(self, pairs: Sequence[Tuple[str, int]]) -> List[Any]:
        """
        Set `order` for each (id, order) pair, in sequence, as one transaction.

        Every pair must update exactly one row; otherwise EntityNotFoundError is
        raised. On any failure the transaction is rolled back before re-raising,
        so no partial reordering is committed.
        """
        model = self.model
        try:
            for entity_id, order in pairs:
                pk = _as_uuid(entity_id)
                if pk is None:
                    raise EntityNotFoundError(model.__name__, entity_id)
                stmt = (
                    update(model)
                    .where(model.id == pk, *self.scope())
                    .values(order=order)
                    .execution_options(synchronize_session=False)
                )
                result = await self.execute(stmt)
                if result.rowcount != 1:
                    raise EntityNotFoundError(model.__name__, entity_id)

            # Read back inside the transaction; the company GUC is bound to this connection.
            ids = list({_as_uuid(entity_id) for entity_id, _ in pairs})
            stmt = select(model).where(model.id.in_(ids)).execution_options(populate_existing=True)
            rows = list(await self.scalars(stmt))
            await self.commit()
        except Exception:
            await self.rollback()
            raise
        return rows
