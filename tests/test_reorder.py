from __future__ import annotations

import asyncio
import logging
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import SQLAlchemyError

from taskboard_api.db.models import Member, MemberType, Option, Task
from taskboard_api.repositories.option import OptionRepository
from taskboard_api.services.errors import (
    EntityNotFoundError,
    ReorderForbiddenError,
    ReorderPersistenceError,
    ReorderTimeoutError,
    ReorderValidationError,
)
from taskboard_api.services.reorder import ReorderCoordinator, ReorderService, validate_reorder_request


def _member(role: MemberType) -> Member:
    return Member(company_id=uuid4(), user_id=uuid4(), type=role)


def _coordinator(**kwargs) -> tuple[ReorderCoordinator, AsyncMock]:
    repo = AsyncMock()
    repo.apply_orders.return_value = []
    return ReorderCoordinator(repo, entity="options", **kwargs), repo


def test_validation_accepts_well_formed_request() -> None:
    validate_reorder_request(["a", "b"], [2, 1])


def test_validation_reports_every_problem() -> None:
    with pytest.raises(ReorderValidationError) as excinfo:
        validate_reorder_request([], "1,2")
    assert excinfo.value.reasons == ["ids must not be empty", "orders must be an array"]
    assert excinfo.value.details == {"reasons": excinfo.value.reasons}


def test_validation_rejects_length_mismatch() -> None:
    with pytest.raises(ReorderValidationError) as excinfo:
        validate_reorder_request(["a", "b", "c"], [1, 2])
    assert excinfo.value.reasons == ["ids and orders must have the same length (3 != 2)"]


def test_validation_rejects_bad_elements() -> None:
    with pytest.raises(ReorderValidationError) as excinfo:
        validate_reorder_request(["a", " ", 7], [1, True, "3"])
    assert excinfo.value.reasons == [
        "ids[1] must be a non-empty string",
        "ids[2] must be a non-empty string",
        "orders[1] must be an integer",
        "orders[2] must be an integer",
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [MemberType.MEMBER, MemberType.VIEWER])
async def test_non_author_is_forbidden_before_any_write(role: MemberType) -> None:
    coordinator, repo = _coordinator()
    with pytest.raises(ReorderForbiddenError):
        await coordinator.reorder(_member(role), ["a"], [1])
    repo.apply_orders.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_member_is_forbidden() -> None:
    coordinator, repo = _coordinator()
    with pytest.raises(ReorderForbiddenError):
        await coordinator.reorder(None, ["a"], [1])
    repo.apply_orders.assert_not_awaited()


@pytest.mark.asyncio
async def test_invalid_request_is_rejected_before_any_write() -> None:
    coordinator, repo = _coordinator()
    with pytest.raises(ReorderValidationError):
        await coordinator.reorder(_member(MemberType.AUTHOR), ["a", "b"], [1])
    repo.apply_orders.assert_not_awaited()


@pytest.mark.asyncio
async def test_pairs_are_positional() -> None:
    coordinator, repo = _coordinator()
    await coordinator.reorder(_member(MemberType.AUTHOR), ["a", "b", "c"], [1, 2, 3])
    repo.apply_orders.assert_awaited_once_with([("a", 1), ("b", 2), ("c", 3)])


@pytest.mark.asyncio
async def test_reversed_orders_are_paired_back_to_front() -> None:
    coordinator, repo = _coordinator(reverse_orders=True)
    await coordinator.reorder(_member(MemberType.AUTHOR), ["a", "b", "c"], [1, 2, 3])
    repo.apply_orders.assert_awaited_once_with([("a", 3), ("b", 2), ("c", 1)])


@pytest.mark.asyncio
async def test_timeout_rolls_back() -> None:
    coordinator, repo = _coordinator(timeout_seconds=0.01)

    async def _stall(pairs):
        await asyncio.sleep(1)

    repo.apply_orders.side_effect = _stall
    with pytest.raises(ReorderTimeoutError):
        await coordinator.reorder(_member(MemberType.AUTHOR), ["a"], [1])
    repo.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_database_errors_surface_as_persistence_errors() -> None:
    coordinator, repo = _coordinator()
    repo.apply_orders.side_effect = SQLAlchemyError("connection lost")
    with pytest.raises(ReorderPersistenceError) as excinfo:
        await coordinator.reorder(_member(MemberType.AUTHOR), ["a"], [1])
    assert not isinstance(excinfo.value, EntityNotFoundError)
    assert isinstance(excinfo.value.__cause__, SQLAlchemyError)


@pytest.mark.asyncio
async def test_options_are_persisted(board, session_factory, read_orders) -> None:
    ids = board["options"]
    async with session_factory() as session:
        rows = await ReorderService(session, board["company_id"]).reorder_options(
            board["author"], [str(i) for i in ids], [3, 1, 2]
        )
    assert {row.id: row.order for row in rows} == dict(zip(ids, [3, 1, 2]))
    assert await read_orders(Option, ids) == [3, 1, 2]


@pytest.mark.asyncio
async def test_task_orders_are_applied_reversed(board, session_factory, read_orders) -> None:
    tasks = board["tasks"]
    ids = [tasks["alpha"], tasks["beta"], tasks["gamma"]]
    async with session_factory() as session:
        await ReorderService(session, board["company_id"]).reorder_tasks(
            board["author"], [str(i) for i in ids], [10, 20, 30]
        )
    assert await read_orders(Task, ids) == [30, 20, 10]


@pytest.mark.asyncio
async def test_reorder_is_idempotent(board, session_factory, read_orders) -> None:
    ids = board["options"]
    for _ in range(2):
        async with session_factory() as session:
            await ReorderService(session, board["company_id"]).reorder_options(
                board["author"], [str(i) for i in ids], [30, 20, 10]
            )
    assert await read_orders(Option, ids) == [30, 20, 10]


@pytest.mark.asyncio
async def test_duplicate_ids_last_write_wins(board, session_factory, read_orders) -> None:
    first = board["options"][0]
    async with session_factory() as session:
        await ReorderService(session, board["company_id"]).reorder_options(
            board["author"], [str(first), str(first)], [5, 9]
        )
    assert await read_orders(Option, [first]) == [9]


@pytest.mark.asyncio
async def test_missing_row_rolls_back_whole_batch(board, session_factory, read_orders) -> None:
    ids = board["options"]
    batch = [str(ids[0]), str(uuid4()), str(ids[2])]
    async with session_factory() as session:
        with pytest.raises(EntityNotFoundError):
            await ReorderService(session, board["company_id"]).reorder_options(board["author"], batch, [7, 8, 9])
    assert await read_orders(Option, ids) == [1, 2, 3]


@pytest.mark.asyncio
async def test_malformed_id_is_a_missing_row(board, session_factory, read_orders) -> None:
    ids = board["options"]
    async with session_factory() as session:
        with pytest.raises(EntityNotFoundError) as excinfo:
            await ReorderService(session, board["company_id"]).reorder_options(
                board["author"], [str(ids[0]), "not-a-uuid"], [7, 8]
            )
    assert excinfo.value.entity_id == "not-a-uuid"
    assert await read_orders(Option, ids) == [1, 2, 3]


@pytest.mark.asyncio
async def test_rows_of_another_company_are_not_touched(board, session_factory, read_orders) -> None:
    ids = board["options"]
    async with session_factory() as session:
        with pytest.raises(EntityNotFoundError):
            await OptionRepository(session, uuid4()).apply_orders([(str(ids[0]), 42)])
    assert await read_orders(Option, ids) == [1, 2, 3]


@pytest.mark.asyncio
async def test_outcomes_are_logged_as_events(caplog: pytest.LogCaptureFixture) -> None:
    coordinator, repo = _coordinator()
    with caplog.at_level(logging.INFO, logger="taskboard_api.services.reorder"):
        await coordinator.reorder(_member(MemberType.AUTHOR), ["a", "b"], [1, 2])
        repo.apply_orders.side_effect = EntityNotFoundError("Option", "b")
        with pytest.raises(EntityNotFoundError):
            await coordinator.reorder(_member(MemberType.AUTHOR), ["a", "b"], [1, 2])
    events = [(r.event, r.event_fields) for r in caplog.records if hasattr(r, "event_fields")]
    assert events == [
        ("reorder.applied", {"entity": "options", "size": 2}),
        ("reorder.failed", {"entity": "options", "size": 2, "cause": "persistence_error"}),
    ]
