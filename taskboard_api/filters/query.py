from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional
from uuid import UUID

from sqlalchemy import ColumnElement, String, false, select
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import InstrumentedAttribute

from taskboard_api.db.models import Task, task_members
from taskboard_api.filters.fields import field_type_for

logger = logging.getLogger(__name__)


def _task_column(key: str) -> Optional[InstrumentedAttribute]:
    """Only registered field kinds that exist as task columns are queryable."""
    if field_type_for(key) is None or key not in Task.__table__.c:
        return None
    return getattr(Task, key)


def _is_array(column: InstrumentedAttribute) -> bool:
    return isinstance(column.type, ARRAY)


def _bind(column: InstrumentedAttribute, value: Any) -> Any:
    # Choice fields may arrive as numbers; text columns only compare to strings.
    if isinstance(column.type, String) and not isinstance(value, str):
        return str(value)
    return value


def _member_ids(values: List[Any]) -> List[UUID]:
    ids = []
    for value in values:
        try:
            ids.append(UUID(str(value)))
        except ValueError:
            logger.debug("Ignoring non-UUID member id in filter: %r", value)
    return ids


def _members_clause(descriptor: Any) -> ColumnElement[bool]:
    if isinstance(descriptor, dict) and "in" in descriptor:
        values = list(descriptor["in"])
    elif isinstance(descriptor, dict) and "equals" in descriptor:
        values = [descriptor["equals"]]
    else:
        values = [descriptor]
    ids = _member_ids(values)
    if not ids:
        return false()
    assigned = select(task_members.c.task_id).where(task_members.c.member_id.in_(ids))
    return Task.id.in_(assigned)


def _column_clause(column: InstrumentedAttribute, descriptor: Any) -> Optional[ColumnElement[bool]]:
    array = _is_array(column)
    item_type = column.type.item_type if array else column.type

    if not isinstance(descriptor, dict):
        descriptor = {"equals": descriptor}

    if "contains" in descriptor:
        value = descriptor["contains"]
        if not isinstance(value, str) or array:
            return None
        # Substring match: % and _ in the value are literals, not wildcards.
        return column.icontains(value, autoescape=True)

    if "in" in descriptor:
        values = list(descriptor["in"])
        if array:
            if isinstance(item_type, String):
                values = [str(v) for v in values]
            return column.overlap(values)
        return column.in_([_bind(column, v) for v in values])

    if "equals" in descriptor:
        value = descriptor["equals"]
        if array:
            if isinstance(item_type, String) and not isinstance(value, str):
                value = str(value)
            return column.contains([value])
        return column == _bind(column, value)

    return None


# PUBLIC_INTERFACE
def build_task_conditions(predicate: Mapping[str, Any]) -> List[ColumnElement[bool]]:
    """
    Translate a filter predicate into SQLAlchemy boolean clauses over Task.

    Keys without a registered field kind or without a matching task column are
    logged and skipped; the remaining clauses are meant to be AND-ed together.
    """
    conditions: List[ColumnElement[bool]] = []
    for key, descriptor in predicate.items():
        if key == "members":
            conditions.append(_members_clause(descriptor))
            continue
        column = _task_column(key)
        if column is None:
            logger.info("Ignoring unsupported task filter field %r", key)
            continue
        clause = _column_clause(column, descriptor)
        if clause is None:
            logger.info("Ignoring task filter %r with unusable descriptor", key)
            continue
        conditions.append(clause)
    return conditions
