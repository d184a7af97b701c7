from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from ..models import TodoEntity
from ..repositories import TodoRepository, get_repository
from ..schemas import TodoCreate, TodoOut, TodoUpdate

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)


def todo_url(request: Request, todo_id) -> str:
    return str(request.url_for("get_todo", todo_id=str(todo_id)))


def todo_out(request: Request, entity: TodoEntity) -> TodoOut:
    """Annotate a stored todo with its absolute URL for the current host."""
    return TodoOut(**entity, url=todo_url(request, entity["id"]))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="List every todo in insertion order.",
)
async def list_todos(request: Request, repo: TodoRepository = Depends(get_repository)) -> List[TodoOut]:
    """
    List all todos, each annotated with its id and url.
    """
    return [todo_out(request, t) for t in repo.list()]


# PUBLIC_INTERFACE
@router.post(
    "",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Create Todo",
    description="Create a new Todo item and redirect to it.",
    responses={
        303: {"description": "Todo created; Location points at the new resource"},
        400: {"description": "Validation error"},
        500: {"description": "Store failure"},
    },
)
async def create_todo(
    request: Request, payload: TodoCreate, repo: TodoRepository = Depends(get_repository)
) -> RedirectResponse:
    """
    Create a new Todo. Responds 303 See Other with the todo's url in Location.
    """
    created = await repo.add(payload)
    return RedirectResponse(todo_url(request, created["id"]), status_code=status.HTTP_303_SEE_OTHER)


# PUBLIC_INTERFACE
@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete All Todos",
    description="Delete every todo, including persisted copies.",
)
async def clear_todos(repo: TodoRepository = Depends(get_repository)) -> None:
    await repo.clear()
    return None


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
    },
)
async def get_todo(todo_id: str, request: Request, repo: TodoRepository = Depends(get_repository)) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    return todo_out(request, repo.get(todo_id))


# PUBLIC_INTERFACE
@router.patch(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description=(
        "Partially update a Todo item. Each field present in the body replaces the stored value; "
        "a `tags` list replaces the whole tag set."
    ),
    responses={
        200: {"description": "Todo updated"},
        400: {"description": "Validation error"},
        404: {"description": "Todo not found"},
        500: {"description": "Store failure"},
    },
)
async def patch_todo(
    todo_id: str, payload: TodoUpdate, request: Request, repo: TodoRepository = Depends(get_repository)
) -> TodoOut:
    """
    Partial update of a Todo item.
    """
    updated = await repo.update(todo_id, payload)
    return todo_out(request, updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={
        204: {"description": "Todo deleted"},
        404: {"description": "Todo not found"},
        500: {"description": "Store failure"},
    },
)
async def delete_todo(todo_id: str, repo: TodoRepository = Depends(get_repository)) -> None:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    await repo.remove(todo_id)
    return None
