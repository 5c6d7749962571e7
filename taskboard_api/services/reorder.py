"""
Drag-and-drop reordering of list-like entities.

A reorder request pairs entity ids with target positions (`entity_ids[i]`
receives `target_orders[i]`). The coordinator checks the acting member's role,
validates the whole request, then hands the pairs to the repository which
applies them in a single transaction bounded by a deadline.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_api.core.logging import REORDER_APPLIED, REORDER_FAILED, log_event
from taskboard_api.core.settings import get_app_settings
from taskboard_api.db.models import Member, MemberType, Option, Task
from taskboard_api.repositories.option import OptionRepository
from taskboard_api.repositories.ordering import OrderedEntityRepository
from taskboard_api.repositories.task import TaskRepository
from taskboard_api.services.base import BaseService
from taskboard_api.services.errors import (
    ReorderForbiddenError,
    ReorderPersistenceError,
    ReorderTimeoutError,
    ReorderValidationError,
)

logger = logging.getLogger(__name__)

REORDER_ROLES = frozenset({MemberType.AUTHOR})


# PUBLIC_INTERFACE
def ensure_can_reorder(member: Optional[Member]) -> None:
    """Raise ReorderForbiddenError unless the member holds an elevated role."""
    if member is None or member.type not in REORDER_ROLES:
        raise ReorderForbiddenError("Only company authors can reorder items")


# PUBLIC_INTERFACE
def validate_reorder_request(entity_ids: Any, target_orders: Any) -> None:
    """
    Validate a reorder request as a whole.

    Collects every problem before raising so the client sees one rejection
    listing all reasons.
    """
    reasons: List[str] = []
    ids_ok = isinstance(entity_ids, (list, tuple))
    orders_ok = isinstance(target_orders, (list, tuple))
    if not ids_ok:
        reasons.append("ids must be an array")
    elif not entity_ids:
        reasons.append("ids must not be empty")
    if not orders_ok:
        reasons.append("orders must be an array")
    elif not target_orders:
        reasons.append("orders must not be empty")
    if ids_ok and orders_ok and len(entity_ids) != len(target_orders):
        reasons.append(
            f"ids and orders must have the same length ({len(entity_ids)} != {len(target_orders)})"
        )
    if ids_ok:
        for index, entity_id in enumerate(entity_ids):
            if not isinstance(entity_id, str) or not entity_id.strip():
                reasons.append(f"ids[{index}] must be a non-empty string")
    if orders_ok:
        for index, order in enumerate(target_orders):
            if isinstance(order, bool) or not isinstance(order, int):
                reasons.append(f"orders[{index}] must be an integer")
    if reasons:
        raise ReorderValidationError(reasons)


class ReorderCoordinator:
    """Applies a batch of order changes to one entity type, all or nothing."""

    def __init__(
        self,
        repository: OrderedEntityRepository,
        *,
        entity: str,
        reverse_orders: bool = False,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.repository = repository
        self.entity = entity
        self.reverse_orders = reverse_orders
        self.timeout_seconds = timeout_seconds

    # PUBLIC_INTERFACE
    async def reorder(
        self,
        member: Optional[Member],
        entity_ids: Sequence[str],
        target_orders: Sequence[int],
    ) -> List[Any]:
        """
        Reorder entities and return the affected rows.

        Raises:
            ReorderForbiddenError: member may not reorder; nothing is touched.
            ReorderValidationError: malformed request; nothing is touched.
            ReorderPersistenceError: the transaction failed and was rolled back.
            ReorderTimeoutError: the transaction exceeded the deadline and was rolled back.
        """
        ensure_can_reorder(member)
        validate_reorder_request(entity_ids, target_orders)

        orders = list(target_orders)
        if self.reverse_orders:
            orders.reverse()
        pairs = list(zip(entity_ids, orders))
        logger.debug("Reordering %d %s row(s)", len(pairs), self.entity)

        try:
            rows = await asyncio.wait_for(self.repository.apply_orders(pairs), self.timeout_seconds)
        except asyncio.TimeoutError:
            log_event(
                logger, logging.ERROR, REORDER_FAILED,
                f"Reorder of {len(pairs)} {self.entity} row(s) timed out after {self.timeout_seconds}s",
                entity=self.entity, size=len(pairs), cause="timeout",
            )
            await self.repository.rollback()
            raise ReorderTimeoutError(f"Reordering {self.entity} timed out")
        except ReorderPersistenceError as exc:
            log_event(
                logger, logging.WARNING, REORDER_FAILED, f"Reorder of {self.entity} rolled back: {exc.message}",
                entity=self.entity, size=len(pairs), cause=exc.error_type,
            )
            raise
        except SQLAlchemyError as exc:
            logger.exception("Reorder of %s failed", self.entity)
            raise ReorderPersistenceError(f"Failed to reorder {self.entity}") from exc
        log_event(
            logger, logging.INFO, REORDER_APPLIED, f"Reordered {len(pairs)} {self.entity} row(s)",
            entity=self.entity, size=len(pairs),
        )
        return rows


class ReorderService(BaseService):
    """
    Entry point for the reorder endpoints.

    Tasks keep the board's historical convention of reversing the submitted
    orders before pairing them with ids; options pair them as given.
    """

    def __init__(self, session: AsyncSession, company_id: UUID) -> None:
        super().__init__(session, company_id)
        timeout = get_app_settings().REORDER_TIMEOUT_SECONDS
        self.tasks = ReorderCoordinator(
            TaskRepository(session, self.company_id),
            entity=Task.__tablename__,
            reverse_orders=True,
            timeout_seconds=timeout,
        )
        self.options = ReorderCoordinator(
            OptionRepository(session, self.company_id),
            entity=Option.__tablename__,
            timeout_seconds=timeout,
        )

    # PUBLIC_INTERFACE
    async def reorder_tasks(self, member: Member, task_ids: Sequence[str], orders: Sequence[int]) -> List[Task]:
        """Reorder tasks; `orders` is applied reversed."""
        return await self.tasks.reorder(member, task_ids, orders)

    # PUBLIC_INTERFACE
    async def reorder_options(self, member: Member, option_ids: Sequence[str], orders: Sequence[int]) -> List[Option]:
        """Reorder select options."""
        return await self.options.reorder(member, option_ids, orders)
