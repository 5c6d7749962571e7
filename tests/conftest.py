"""Shared pytest fixtures for the taskboard API tests."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"

from taskboard_api.db.base import Base  # noqa: E402
from taskboard_api.db.models import (  # noqa: E402
    Company,
    Member,
    MemberType,
    Option,
    Select,
    Sheet,
    Task,
    Workspace,
)


@pytest_asyncio.fixture()
async def engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite database with the ORM schema."""

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture()
async def board(session_factory: async_sessionmaker[AsyncSession]) -> dict[str, Any]:
    """Seed one company with an author, a member, a sheet, three tasks and three options."""

    company_id = uuid4()
    async with session_factory() as session:
        company = Company(id=company_id, name="Acme")
        author = Member(company_id=company_id, user_id=uuid4(), type=MemberType.AUTHOR, email="author@acme.test")
        member = Member(company_id=company_id, user_id=uuid4(), type=MemberType.MEMBER, email="member@acme.test")
        workspace = Workspace(company_id=company_id, name="Operations")
        session.add_all([company, author, member, workspace])
        await session.flush()

        sheet = Sheet(company_id=company_id, workspace_id=workspace.id, name="Launch")
        session.add(sheet)
        await session.flush()

        def _task(name: str, order: int, status: str, **extra: Any) -> Task:
            return Task(
                company_id=company_id,
                workspace_id=workspace.id,
                sheet_id=sheet.id,
                name=name,
                order=order,
                status=status,
                **extra,
            )

        alpha = _task("Alpha release", 1, "In progress", priority="HIGH", members=[member])
        beta = _task("Beta feedback", 2, "Done", priority="LOW", price=10.0)
        gamma = _task("Gamma rollout", 3, "In progress", priority="MEDIUM", paid=True)

        select_column = Select(sheet_id=sheet.id, title="Stage")
        session.add_all([alpha, beta, gamma, select_column])
        await session.flush()

        options = [
            Option(select_id=select_column.id, name=name, color=color, order=index)
            for index, (name, color) in enumerate([("Todo", "gray"), ("Doing", "blue"), ("Done", "green")], start=1)
        ]
        session.add_all(options)
        await session.commit()

        return {
            "company_id": company_id,
            "author": author,
            "member": member,
            "sheet_id": sheet.id,
            "tasks": {"alpha": alpha.id, "beta": beta.id, "gamma": gamma.id},
            "options": [o.id for o in options],
        }


@pytest.fixture()
def read_orders(session_factory: async_sessionmaker[AsyncSession]) -> Callable[..., Awaitable[list[int]]]:
    """Return the persisted `order` of each id, read through a fresh session."""

    async def _read(model: type, ids: list[UUID]) -> list[int]:
        async with session_factory() as session:
            result = await session.execute(select(model.id, model.order))
            orders = {row.id: row.order for row in result}
        return [orders[i] for i in ids]

    return _read


@pytest.fixture()
def auth_headers() -> Callable[[Member, UUID], dict[str, str]]:
    """Build bearer + company headers for a seeded member."""

    def _headers(member: Member, company_id: UUID) -> dict[str, str]:
        token = jwt.encode(
            {"sub": str(member.user_id), "company_id": str(company_id)},
            os.environ["JWT_SECRET_KEY"],
            algorithm=os.environ["JWT_ALGORITHM"],
        )
        return {"Authorization": f"Bearer {token}", "X-Company-ID": str(company_id)}

    return _headers


@pytest_asyncio.fixture()
async def async_client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncClient]:
    """HTTPX client bound to the app, with the company session served from the test database."""

    from taskboard_api.api.main import app
    from taskboard_api.core.deps import get_company_session

    async def _session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_company_session] = _session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()
