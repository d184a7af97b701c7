from __future__ import annotations

from typing import Any, Optional


class TodoError(Exception):
    """Base class for domain errors raised by the repository and stores."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# PUBLIC_INTERFACE
class ValidationError(TodoError):
    """Malformed input: missing/empty title, missing/empty/non-string tag."""

    status_code = 400


# PUBLIC_INTERFACE
class NotFound(TodoError):
    """No todo with the requested id."""

    status_code = 404

    def __init__(self, todo_id: Any = None) -> None:
        super().__init__("Todo not found")
        self.todo_id = todo_id


# PUBLIC_INTERFACE
class StoreError(TodoError):
    """
    The document store is unreachable or an operation on it failed.

    Carries the failed operation name and document id (when there is one) so
    handlers can log with context.
    """

    status_code = 500

    def __init__(self, operation: str, todo_id: Optional[Any] = None, cause: Optional[BaseException] = None) -> None:
        detail = f"store {operation} failed"
        if todo_id is not None:
            detail += f" for id={todo_id!r}"
        if cause is not None:
            detail += f": {cause}"
        super().__init__(detail)
        self.operation = operation
        self.todo_id = todo_id
