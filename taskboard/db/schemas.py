from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


Priority = Literal["low", "medium", "high"]
Status = Literal["todo", "in_progress", "completed"]


class UserCreate(BaseModel):
    email: str = Field(min_length=3)
    full_name: str | None = None
    avatar_url: str | None = None


class UserPatch(BaseModel):
    full_name: str | None = None
    avatar_url: str | None = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: str | None
    avatar_url: str | None
    created_at: datetime
    updated_at: datetime


class BoardCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None


class BoardPatch(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None


class BoardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None
    user_id: int
    created_at: datetime
    updated_at: datetime


class ListCreate(BaseModel):
    title: str = Field(min_length=1)
    board_id: int


class ListPatch(BaseModel):
    title: str | None = Field(default=None, min_length=1)


class TaskCreate(BaseModel):
    title: str = Field(min_length=1)
    list_id: int
    description: str | None = None
    due_date: date | None = None
    priority: Priority | None = None


class TaskPatch(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    due_date: date | None = None
    priority: Priority | None = None
    status: Status | None = None


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None
    list_id: int
    position: int
    due_date: date | None
    priority: Priority | None
    status: Status
    created_at: datetime
    updated_at: datetime


class ListOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    board_id: int
    position: int
    created_at: datetime
    updated_at: datetime


class ListWithTasksOut(ListOut):
    tasks: list[TaskOut] = []


class BoardDetailOut(BoardOut):
    lists: list[ListWithTasksOut] = []
