"""Fixtures for unit tests that run against a bare SQLite database."""

import os
import tempfile
from types import SimpleNamespace

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.ext.asyncio import create_async_engine

from src.models.todo import TodoModel  # noqa: F401 - registers the table
from src.modules.database import Base
from src.modules.query_cache import QueryCache
from src.modules.todo_service import TodoService
from src.modules.todo_store import TodoStore


@pytest_asyncio.fixture
async def test_db():
    """Create a temporary SQLite database and yield its session factory."""
    db_fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(db_fd)

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", echo=False)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await engine.dispose()
        os.unlink(db_path)


@pytest_asyncio.fixture
async def store(test_db):
    return TodoStore(test_db)


@pytest_asyncio.fixture
async def service(test_db):
    """A TodoService wired to the temporary database without a Quart app."""
    fake_app = SimpleNamespace(
        extensions={
            "database": SimpleNamespace(session_factory=test_db),
            "query_cache": QueryCache(),
        },
        config={"MUTATION_LATENCY": 0.0},
    )
    return TodoService(fake_app)
