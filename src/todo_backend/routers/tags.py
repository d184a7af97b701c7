from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status

from ..errors import ValidationError
from ..repositories import TodoRepository, get_repository
from ..schemas import TagsIn, TagsOut, TagsReplace, TodoOut
from .todos import todo_out

# No prefix: tag routes live under both /todos and /tags. This router must be
# included before the todos router so DELETE /todos/tags is not read as a todo id.
router = APIRouter(tags=["tags"])


# PUBLIC_INTERFACE
@router.delete(
    "/todos/tags",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear All Tags",
    description="Remove every tag from every todo. Todos are kept.",
)
async def clear_all_tags(repo: TodoRepository = Depends(get_repository)) -> None:
    await repo.clear_all_tags()
    return None


# PUBLIC_INTERFACE
@router.get(
    "/todos/{todo_id}/tags",
    response_model=TagsOut,
    summary="List Tags",
    responses={404: {"description": "Todo not found"}},
)
async def list_tags(todo_id: str, repo: TodoRepository = Depends(get_repository)) -> TagsOut:
    """
    List the tags attached to one todo.
    """
    return TagsOut(tags=repo.list_tags(todo_id))


# PUBLIC_INTERFACE
@router.post(
    "/todos/{todo_id}/tags",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Add Tags",
    description=(
        "Attach a tag (`{\"tag\": \"work\"}`) or several (`{\"tags\": [...]}`) to a todo. "
        "Tags already present are left as they are."
    ),
    responses={
        204: {"description": "Tags attached"},
        400: {"description": "Missing, empty or non-string tag"},
        404: {"description": "Todo not found"},
        500: {"description": "Store failure"},
    },
)
async def add_tags(
    todo_id: str,
    payload: Optional[TagsIn] = None,
    repo: TodoRepository = Depends(get_repository),
) -> None:
    """
    Add one or more tags to a todo (idempotent).
    """
    requested: List[object] = []
    if payload is not None:
        if payload.tag is not None:
            requested.append(payload.tag)
        requested.extend(payload.tags or [])
    if not requested:
        # Report the todo first so an unknown id is a 404 whatever the body
        repo.list_tags(todo_id)
        raise ValidationError('"tag" is a required field')
    await repo.add_tags(todo_id, requested)
    return None


# PUBLIC_INTERFACE
@router.patch(
    "/todos/{todo_id}/tags",
    response_model=TagsOut,
    summary="Replace Tags",
    description="Replace the whole tag set of a todo.",
    responses={
        400: {"description": "Empty or non-string tag"},
        404: {"description": "Todo not found"},
        500: {"description": "Store failure"},
    },
)
async def replace_tags(
    todo_id: str, payload: TagsReplace, repo: TodoRepository = Depends(get_repository)
) -> TagsOut:
    return TagsOut(tags=await repo.replace_tags(todo_id, payload.tags))


# PUBLIC_INTERFACE
@router.delete(
    "/todos/{todo_id}/tags",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear Tags For Todo",
    description="Remove every tag from one todo. The todo itself is not deleted.",
    responses={
        404: {"description": "Todo not found"},
        500: {"description": "Store failure"},
    },
)
async def clear_tags_for_todo(todo_id: str, repo: TodoRepository = Depends(get_repository)) -> None:
    await repo.clear_tags_for_todo(todo_id)
    return None


# PUBLIC_INTERFACE
@router.delete(
    "/todos/{todo_id}/tags/{tag}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Tag",
    description="Detach one tag from a todo. Detaching a tag the todo does not carry succeeds.",
    responses={
        404: {"description": "Todo not found"},
        500: {"description": "Store failure"},
    },
)
async def remove_tag(todo_id: str, tag: str, repo: TodoRepository = Depends(get_repository)) -> None:
    await repo.remove_tag(todo_id, tag)
    return None


# PUBLIC_INTERFACE
@router.get(
    "/tags/{tag}/todos",
    response_model=List[TodoOut],
    summary="Todos By Tag",
    description="List the todos carrying a tag (exact, case-sensitive match).",
)
async def todos_by_tag(tag: str, request: Request, repo: TodoRepository = Depends(get_repository)) -> List[TodoOut]:
    return [todo_out(request, t) for t in repo.todos_by_tag(tag)]
