"""Pytest configuration and fixtures for taskline.

Integration and API tests run against in-memory SQLite (aiosqlite) with
foreign keys and SAVEPOINTs enabled. One StaticPool connection backs every
session, so a test must not keep a transaction open while another session
works; the in_session fixture gives each step its own short-lived session.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from taskline.core.config import get_settings
from taskline.core.limiter import limiter
from taskline.domain.enums import TriggerEvent
from taskline.infrastructure.persistence import models
from taskline.infrastructure.persistence.database import (
    Base,
    get_db,
    get_db_transactional,
    install_sqlite_hooks,
    make_session_factory,
)
from taskline.infrastructure.persistence.repositories import RuleRepository

ORG_ID = 7
ALICE = 101
BOB = 202


@pytest.fixture(autouse=True)
def _settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    install_sqlite_hooks(eng)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(engine)


@pytest.fixture
def in_session(session_factory) -> Callable[[Callable[[AsyncSession], Awaitable[Any]]], Awaitable[Any]]:
    """Run fn(session) on a new session and close it afterwards.

    Use cases begin/commit their own transaction on a fresh session; plain
    reads are discarded with the session.
    """

    async def _run(fn: Callable[[AsyncSession], Awaitable[Any]]) -> Any:
        async with session_factory() as session:
            return await fn(session)

    return _run


@dataclass
class World:
    """Two projects in one org. Type ids are per project."""

    project_id: int
    other_project_id: int
    bug_type_id: int
    review_type_id: int
    other_bug_type_id: int
    card_id: int


@pytest.fixture
async def world(session_factory) -> World:
    """Project A with Bug/Review types and a card; project B with its own Bug type."""
    async with session_factory() as session, session.begin():
        project = models.Project(org_id=ORG_ID, name="Project A")
        other = models.Project(org_id=ORG_ID, name="Project B")
        session.add_all([project, other])
        await session.flush()
        bug = models.TaskType(project_id=project.id, name="Bug", capability_id=11)
        review = models.TaskType(project_id=project.id, name="Review", capability_id=12)
        other_bug = models.TaskType(project_id=other.id, name="Bug")
        card = models.Card(project_id=project.id, title="Release 1.0")
        session.add_all([bug, review, other_bug, card])
        await session.flush()
        return World(
            project_id=project.id,
            other_project_id=other.id,
            bug_type_id=bug.id,
            review_type_id=review.id,
            other_bug_type_id=other_bug.id,
            card_id=card.id,
        )


@pytest.fixture
def make_rule(session_factory):
    """Create an active workflow + rule with templates [(title_pattern, type_id), ...]."""

    async def _make(
        project_id: int,
        source_type_id: int | None,
        templates: list[tuple[str, int]],
        *,
        trigger_event: TriggerEvent = TriggerEvent.COMPLETED,
        active: bool = True,
        name: str | None = None,
    ) -> int:
        async with session_factory() as session, session.begin():
            repo = RuleRepository(session)
            workflow = await repo.create_workflow(
                ORG_ID, project_id, name or f"wf-{project_id}-{source_type_id}-{len(templates)}", ALICE
            )
            rule = await repo.create_rule(
                workflow.id,
                "rule",
                trigger_event,
                source_type_id=source_type_id,
                active=active,
            )
            for order, (pattern, type_id) in enumerate(templates):
                template = await repo.create_template(
                    ORG_ID, project_id, pattern, type_id, ALICE
                )
                await repo.attach_template(rule.id, template.id, order)
            return rule.id

    return _make


@pytest.fixture
def count_rows(session_factory):
    """Count rows of a model matching column == value filters."""

    async def _count(model: Any, **filters: Any) -> int:
        async with session_factory() as session:
            stmt = select(func.count()).select_from(model)
            for column, value in filters.items():
                stmt = stmt.where(getattr(model, column) == value)
            return (await session.execute(stmt)).scalar_one()

    return _count


@pytest.fixture
async def client(session_factory) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI), sessions on the test engine."""
    from taskline.main import create_app

    app = create_app()

    async def _db():
        async with session_factory() as session:
            yield session

    async def _db_transactional():
        async with session_factory() as session:
            async with session.begin():
                yield session

    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_db_transactional] = _db_transactional
    limiter.enabled = False
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    limiter.enabled = True
