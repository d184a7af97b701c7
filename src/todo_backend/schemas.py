from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.

    Title presence/emptiness is checked by the repository so a missing title
    and an empty title report the same 400 error body.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "build an API",
                "order": 1,
                "completed": False,
            }
        }
    )

    title: Optional[StrictStr] = Field(default=None, description="Short title for the todo item")
    order: Optional[Union[int, float]] = Field(default=None, description="Client-side sort hint")
    completed: bool = Field(default=False, description="Completion status flag")
    tags: Optional[List[StrictStr]] = Field(default=None, description="Initial tags, de-duplicated")


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.

    Shallow merge: only fields present in the request body are applied, and a
    present field replaces the stored value entirely. ``tags`` in particular
    replaces the whole tag set; it never appends.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "build a better API",
                "completed": True,
                "tags": ["work"],
            }
        }
    )

    title: Optional[StrictStr] = Field(default=None, description="Short title for the todo item")
    order: Optional[Union[int, float]] = Field(default=None, description="Client-side sort hint")
    completed: Optional[bool] = Field(default=None, description="Completion status flag")
    tags: Optional[List[StrictStr]] = Field(default=None, description="Replacement tag set")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 0,
                "title": "build an API",
                "order": 1,
                "completed": False,
                "tags": ["work"],
                "url": "http://localhost:8080/todos/0",
            }
        }
    )

    id: Union[int, str] = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    order: Optional[Union[int, float]] = Field(default=None, description="Client-side sort hint")
    completed: bool = Field(..., description="Completion status flag")
    tags: List[str] = Field(default_factory=list, description="Tags attached to the todo")
    url: str = Field(..., description="Absolute URL of this todo")


# PUBLIC_INTERFACE
class TagsIn(BaseModel):
    """Body for adding tags: a single ``tag`` and/or a list of ``tags``."""

    model_config = ConfigDict(json_schema_extra={"example": {"tag": "work"}})

    tag: Optional[StrictStr] = Field(default=None, description="Tag to add")
    tags: Optional[List[StrictStr]] = Field(default=None, description="Several tags to add")


# PUBLIC_INTERFACE
class TagsReplace(BaseModel):
    """Body for replacing a todo's whole tag set."""

    model_config = ConfigDict(json_schema_extra={"example": {"tags": ["work", "social"]}})

    tags: List[StrictStr] = Field(..., description="New tag set")


# PUBLIC_INTERFACE
class TagsOut(BaseModel):
    """Tag listing for a single todo."""

    tags: List[str] = Field(..., description="Tags attached to the todo")
