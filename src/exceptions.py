"""Errors raised by the todo store and the mutation operations."""


class TodoError(Exception):
    """Base class for todo application errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TodoError):
    """Raised when mutation input is missing or malformed."""

    status_code = 400


class NotFoundError(TodoError):
    """Raised when a todo id does not reference an existing todo."""

    status_code = 404

    def __init__(self, todo_id: str):
        super().__init__(f"Todo {todo_id} not found")
        self.todo_id = todo_id


class StoreError(TodoError):
    """Raised when the underlying database fails."""

    status_code = 503
