"""Pytest fixtures for testing."""

import os
from collections.abc import AsyncGenerator
from datetime import timedelta

# Must be set before archledger modules read settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENCRYPTION_KEY", "archledger-test-encryption-key")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from archledger.core.database import get_db, get_session_factory
from archledger.core.encryption import encrypt
from archledger.main import app
from archledger.models import (
    Base,
    Canvas,
    Component,
    ComponentCommit,
    ComponentType,
    DecisionRecord,
    DecisionStatus,
    GitCommit,
    GitRepository,
    Project,
)
from archledger.models.base import utcnow

# In-memory SQLite shared by every session of a test through StaticPool
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def engine():
    """Fresh in-memory database with all tables for each test."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db: AsyncSession, session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database dependency overrides.

    Request handlers share the test session; activity entries are written
    through the test session factory.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def actor_headers() -> dict[str, str]:
    return {"X-User-ID": "alice"}


@pytest_asyncio.fixture
async def test_project(db: AsyncSession) -> Project:
    project = Project(name="Checkout Platform", description="Test project", created_by="alice")
    db.add(project)
    await db.flush()
    await db.commit()
    return project


@pytest_asyncio.fixture
async def test_canvas(db: AsyncSession, test_project: Project) -> Canvas:
    canvas = Canvas(project_id=test_project.id, name="Checkout Platform architecture")
    db.add(canvas)
    await db.commit()
    return canvas


@pytest.fixture()
def component_factory(db: AsyncSession, test_canvas: Canvas):
    """Create components, on the test canvas unless another is given."""

    async def make_component(name: str, component_id: str, canvas: Canvas | None = None) -> Component:
        component = Component(
            component_id=component_id,
            canvas_id=(canvas or test_canvas).id,
            name=name,
            type=ComponentType.SERVICE,
            position_x=0.0,
            position_y=0.0,
            metadata_json={},
        )
        db.add(component)
        await db.commit()
        return component

    return make_component


@pytest_asyncio.fixture
async def test_component(component_factory) -> Component:
    return await component_factory("Orders Service", "COMP-TEST-ORDERS")


@pytest_asyncio.fixture
async def other_component(component_factory) -> Component:
    return await component_factory("Payments Service", "COMP-TEST-PAYMENTS")


@pytest.fixture()
def decision_factory(db: AsyncSession, test_project: Project):
    """Store decision records directly, bypassing ledger validation."""

    async def make_decision(
        title: str = "Use PostgreSQL",
        status: DecisionStatus = DecisionStatus.PROPOSED,
        project: Project | None = None,
    ) -> DecisionRecord:
        record = DecisionRecord(
            project_id=(project or test_project).id,
            title=title,
            context="We need a relational store.",
            decision="Adopt PostgreSQL.",
            rationale="Mature and well understood.",
            consequences="Operate a database cluster.",
            status=status,
            tags=[],
            created_by="alice",
        )
        db.add(record)
        await db.commit()
        return record

    return make_decision


@pytest.fixture()
def decision_payload() -> dict:
    return {
        "title": "Use PostgreSQL",
        "context": "We need a relational store.",
        "decision": "Adopt PostgreSQL.",
        "rationale": "Mature and well understood.",
        "consequences": "Operate a database cluster.",
    }


@pytest_asyncio.fixture
async def test_repository(db: AsyncSession, test_project: Project) -> GitRepository:
    repository = GitRepository(
        project_id=test_project.id,
        owner="acme",
        name="checkout",
        full_name="acme/checkout",
        access_token=encrypt("ghp_test_token"),
    )
    db.add(repository)
    await db.commit()
    return repository


@pytest.fixture()
def commit_factory(db: AsyncSession, test_repository: GitRepository):
    """Store synced commits, optionally tagged with a component."""

    async def make_commit(
        sha: str,
        days_ago: float = 1,
        component: Component | None = None,
        repository: GitRepository | None = None,
    ) -> GitCommit:
        commit = GitCommit(
            repository_id=(repository or test_repository).id,
            sha=sha,
            message=f"commit {sha}",
            author="alice",
            committed_at=utcnow() - timedelta(days=days_ago),
        )
        db.add(commit)
        await db.flush()
        if component is not None:
            db.add(ComponentCommit(component_id=component.id, commit_id=commit.id))
        await db.commit()
        return commit

    return make_commit
