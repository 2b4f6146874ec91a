"""Persistent todo collection backed by the async SQLAlchemy session factory."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import async_sessionmaker

from src.exceptions import NotFoundError
from src.exceptions import StoreError
from src.models.todo import Todo
from src.models.todo import TodoModel

logger = logging.getLogger(__name__)


class TodoStore:
    """Reads and writes todos, translating database failures into StoreError."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self.session_factory() as session:
                try:
                    yield session
                except SQLAlchemyError:
                    await session.rollback()
                    raise
        except SQLAlchemyError as e:
            logger.error(f"Todo store {operation} failed: {e}")
            raise StoreError(f"Could not {operation} todos") from e

    async def find_all(self) -> List[Todo]:
        """Return every todo in creation order."""
        async with self._session("read") as session:
            rows = await TodoModel.get_all(session)
            return [row.to_snapshot() for row in rows]

    async def exists(self, todo_id: str) -> bool:
        async with self._session("read") as session:
            return await TodoModel.get_by_id(session, todo_id) is not None

    async def insert(self, text: str) -> Todo:
        """Insert a new todo with completed set to False."""
        async with self._session("insert") as session:
            row = await TodoModel.create_todo(session, text)
            logger.info(f"Created todo {row.id}")
            return row.to_snapshot()

    async def update_completed(self, todo_id: str, completed: bool) -> Todo:
        """Set the completed flag of an existing todo.

        Raises:
            NotFoundError: If no todo has the given id.
        """
        async with self._session("update") as session:
            row = await TodoModel.get_by_id(session, todo_id)
            if row is None:
                raise NotFoundError(todo_id)
            await row.set_completed(session, completed)
            logger.info(f"Set todo {todo_id} completed={completed}")
            return row.to_snapshot()
