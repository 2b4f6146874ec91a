"""Todo list query and mutation operations."""

import asyncio
import logging
from typing import List
from typing import Optional

from src.exceptions import ValidationError
from src.models.todo import Todo
from src.modules.actions import Action
from src.modules.decorators import perf_time
from src.modules.todo_store import TodoStore

logger = logging.getLogger(__name__)

TODOS_KEY = "todos"


class TodoService:
    """Reads the todo list through the query cache and performs mutations.

    Every mutation writes to the store first, waits ``latency`` seconds and
    only then invalidates the ``todos`` cache key, so the next read sees the
    write.
    """

    def __init__(self, app=None):
        self.store: Optional[TodoStore] = None
        self.cache = None
        self.latency: float = 0.0
        self.create_action = Action(self.create_todo, "createToDo")
        self.update_action = Action(self.update_todo, "updateToDo")
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Wire the service to the database and query cache extensions."""
        database = app.extensions["database"]
        self.store = TodoStore(database.session_factory)
        self.cache = app.extensions["query_cache"]
        self.latency = float(app.config.get("MUTATION_LATENCY", 0.0))
        app.extensions["todo_service"] = self

    async def list_todos(self) -> List[Todo]:
        """Return the current todo list, cached under the ``todos`` key."""
        return await self.cache.get(TODOS_KEY, self.store.find_all)

    def last_snapshot(self) -> Optional[List[Todo]]:
        """Return the last fetched todo list, even if it has been invalidated."""
        return self.cache.peek(TODOS_KEY)

    async def todo_exists(self, todo_id: str) -> bool:
        return await self.store.exists(todo_id)

    @perf_time
    async def create_todo(self, text) -> Todo:
        """Create a todo from non-empty ``text``.

        Raises:
            ValidationError: If text is missing, not a string or blank.
        """
        if not text or not isinstance(text, str) or not text.strip():
            raise ValidationError("Missing Text")

        todo = await self.store.insert(text.strip())
        await self._revalidate()
        return todo

    @perf_time
    async def set_completed(self, todo_id: str, completed: bool) -> Todo:
        """Set the completed flag of an existing todo.

        Raises:
            ValidationError: If completed is not a bool.
            NotFoundError: If the todo doesn't exist.
        """
        if not isinstance(completed, bool):
            raise ValidationError("Completed must be true or false")

        todo = await self.store.update_completed(todo_id, completed)
        await self._revalidate()
        return todo

    async def update_todo(self, completed: bool, todo_id: str) -> Todo:
        """Argument order used by the updateToDo action input."""
        return await self.set_completed(todo_id, completed)

    async def _revalidate(self):
        if self.latency > 0:
            await asyncio.sleep(self.latency)
        self.cache.invalidate(TODOS_KEY)
