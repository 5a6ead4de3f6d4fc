from __future__ import annotations
from pydantic import BaseModel, Field, ValidationError, field_validator
from enum import Enum
from datetime import date, datetime, timedelta, timezone
from typing import Any, Mapping, Optional
import re

from task_tracker.domain.errors import TaskValidationError

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 255
DATE_FORMAT_ERROR = "Invalid date format. Use YYYY-MM-DD"

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class TaskStatus(str, Enum):
    pending = "pending"
    in_progress = "in-progress"
    completed = "completed"


def parse_due_date(value: Any) -> date:
    """Accept a ``date`` or a strict ``YYYY-MM-DD`` string, nothing else."""
    if isinstance(value, datetime):
        raise ValueError(DATE_FORMAT_ERROR)
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValueError(DATE_FORMAT_ERROR)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(DATE_FORMAT_ERROR) from None


class TaskCreate(BaseModel):
    title: str = Field(min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    due_date: date
    status: TaskStatus

    @field_validator("due_date", mode="before")
    @classmethod
    def check_due_date(cls, v):
        return parse_due_date(v)


class TaskUpdate(BaseModel):
    """
    Partial update. Only fields present in the payload are applied.

    An empty string means "not provided" for every field (older clients send
    whole forms). ``description: null`` clears the description; ``null`` for
    the other fields is ignored because they can never be empty.
    """
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[TaskStatus] = None

    @field_validator("title", "status", mode="before")
    @classmethod
    def blank_is_unset(cls, v):
        return None if v == "" else v

    @field_validator("due_date", mode="before")
    @classmethod
    def check_due_date(cls, v):
        if v is None or v == "":
            return None
        return parse_due_date(v)

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        if v is not None and len(v) < TITLE_MIN_LENGTH:
            raise ValueError(f"String should have at least {TITLE_MIN_LENGTH} characters")
        return v

    def changes(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name == "description":
                if value != "":
                    out[name] = value
            elif value is not None:
                out[name] = value
        return out


class Task(TaskCreate):
    id: int
    created_at: datetime
    updated_at: datetime


def parse_task_create(payload: Mapping[str, Any]) -> TaskCreate:
    try:
        return TaskCreate.model_validate(payload)
    except ValidationError as exc:
        raise TaskValidationError.from_pydantic(exc.errors()) from exc


def parse_task_update(payload: Mapping[str, Any]) -> TaskUpdate:
    try:
        return TaskUpdate.model_validate(payload)
    except ValidationError as exc:
        raise TaskValidationError.from_pydantic(exc.errors()) from exc


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_updated_at(previous: datetime) -> datetime:
    # updated_at must move forward even when the clock does not
    now = utcnow()
    return now if now > previous else previous + timedelta(microseconds=1)
