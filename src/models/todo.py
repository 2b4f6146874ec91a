"""Database model and snapshot type for todos."""

from dataclasses import dataclass
from datetime import datetime
from datetime import timezone
from typing import List
from typing import Optional
from uuid import uuid4

from sqlalchemy import Boolean
from sqlalchemy import Column
from sqlalchemy import DateTime
from sqlalchemy import String
from sqlalchemy import Text
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from src.modules.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_todo_id() -> str:
    return uuid4().hex


@dataclass(frozen=True, slots=True)
class Todo:
    """Immutable snapshot of a todo row handed to callers and templates."""

    id: str
    text: str
    completed: bool = False

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "completed": self.completed}


class TodoModel(Base):
    """Todo row."""

    __tablename__ = "todos"

    id = Column(String(32), primary_key=True, default=_new_todo_id)
    text = Column(Text, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)

    # Only used to keep the list in creation order
    created_at = Column(DateTime, default=_utcnow, nullable=False, index=True)

    def __repr__(self):
        return (
            f"<TodoModel(id={self.id}, text={self.text!r},"
            f" completed={self.completed})>"
        )

    def to_snapshot(self) -> Todo:
        return Todo(id=self.id, text=self.text, completed=bool(self.completed))

    @staticmethod
    async def get_by_id(session: AsyncSession, todo_id: str) -> Optional["TodoModel"]:
        """Get todo by ID."""
        result = await session.execute(
            select(TodoModel).where(TodoModel.id == todo_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_all(session: AsyncSession) -> List["TodoModel"]:
        """Get all todos in creation order."""
        result = await session.execute(
            select(TodoModel).order_by(TodoModel.created_at, TodoModel.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def create_todo(session: AsyncSession, text: str) -> "TodoModel":
        """Create a new, not yet completed todo."""
        todo = TodoModel(id=_new_todo_id(), text=text, completed=False)
        session.add(todo)
        await session.commit()
        await session.refresh(todo)
        return todo

    async def set_completed(self, session: AsyncSession, completed: bool):
        """Update the completed flag."""
        self.completed = completed
        await session.commit()
