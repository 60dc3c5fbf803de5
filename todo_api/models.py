"""Task model and request/response schemas for the todo API."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import AwareDatetime, field_validator, model_validator
from sqlmodel import Field, SQLModel

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 2000
MAX_TAGS = 10
TAG_MAX_LENGTH = 50


class TaskStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"

    @property
    def rank(self) -> int:
        """Ordinal position, low=1 through urgent=4."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    TaskPriority.low: 1,
    TaskPriority.medium: 2,
    TaskPriority.high: 3,
    TaskPriority.urgent: 4,
}

TERMINAL_STATUSES = frozenset({TaskStatus.completed, TaskStatus.cancelled})


class SortField(str, Enum):
    created_at = "created_at"
    updated_at = "updated_at"
    due_date = "due_date"
    priority = "priority"
    title = "title"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.astimezone(timezone.utc)


def _clean_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Title is required")
    if len(value) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title must be {TITLE_MAX_LENGTH} characters or less")
    return value


def _clean_description(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if len(value) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(
            f"Description must be {DESCRIPTION_MAX_LENGTH} characters or less"
        )
    return value


def _clean_tags(value: list[str]) -> list[str]:
    if len(value) > MAX_TAGS:
        raise ValueError(f"Maximum {MAX_TAGS} tags allowed")
    cleaned = [tag.strip() for tag in value]
    for tag in cleaned:
        if len(tag) > TAG_MAX_LENGTH:
            raise ValueError(f"Tags must be {TAG_MAX_LENGTH} characters or less")
    return cleaned


class Task(SQLModel):
    """A task record as owned by the store."""
    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.pending
    priority: TaskPriority = TaskPriority.medium
    due_date: Optional[datetime] = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


class TaskCreate(SQLModel):
    """Schema for creating a task. Title is required, rest have defaults."""
    title: str
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.medium
    due_date: Optional[AwareDatetime] = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return _clean_description(v)

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_utc(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class TaskUpdate(SQLModel):
    """Schema for updating a task. All fields optional.

    Only fields present in the request are applied. ``description`` and
    ``due_date`` may be sent as ``null`` to clear them; the remaining
    fields cannot be cleared.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[AwareDatetime] = None
    tags: Optional[list[str]] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "TaskUpdate":
        for name in ("title", "priority", "status", "tags"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return _clean_description(v)

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_utc(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return None
        return _clean_tags(v)

    def changes(self) -> dict:
        """Return only the fields the caller supplied, explicit nulls included."""
        return self.model_dump(exclude_unset=True)


class TaskListQuery(SQLModel):
    """Filtering, sorting and paging options for listing tasks."""
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    tag: Optional[str] = Field(default=None, max_length=TAG_MAX_LENGTH)
    search: Optional[str] = Field(default=None, max_length=100)
    sort_by: SortField = SortField.created_at
    sort_order: SortOrder = SortOrder.desc
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    include_deleted: bool = False


class Pagination(SQLModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class TaskPage(SQLModel):
    data: list[Task]
    pagination: Pagination


class TaskStats(SQLModel):
    total: int
    by_status: dict[str, int]
    by_priority: dict[str, int]
    overdue: int
