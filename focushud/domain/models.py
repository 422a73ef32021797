"""
Domain Models using Pydantic for validation.

Architecture Decision: Why Pydantic?
Both remote services answer with loosely typed JSON. Validating it into
models at the client boundary means a malformed payload fails in one place
(and is downgraded there) instead of deep inside the timer logic.
"""

from datetime import datetime, timezone
from typing import Optional, List, Union
from pydantic import BaseModel, Field, ConfigDict, field_validator


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC (naive values are taken as UTC)"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TimeEntry(BaseModel):
    """
    A Toggl time entry.

    A negative ``duration`` is the running sentinel: the entry has no end yet.
    Its magnitude is NOT the elapsed time, always derive that from ``start``.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    workspace_id: int
    description: Optional[str] = None
    start: datetime
    duration: int = 0
    project_id: Optional[int] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("start")
    @classmethod
    def _start_in_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_not_null(cls, value):
        return value or []

    @property
    def is_running(self) -> bool:
        return self.duration < 0


class Task(BaseModel):
    """
    A ClickUp task offered as the next thing to work on.

    Immutable once fetched and never persisted.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    due_date: Optional[datetime] = None
    status: Optional[str] = None
    url: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value):
        return str(value)

    @field_validator("name", mode="before")
    @classmethod
    def _name_not_null(cls, value):
        return value or ""

    @field_validator("status", mode="before")
    @classmethod
    def _status_name(cls, value):
        # ClickUp nests the status: {"status": "in progress", "color": ...}
        if isinstance(value, dict):
            return value.get("status")
        return value

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_from_millis(cls, value):
        # ClickUp sends epoch milliseconds as a string
        if value is None or value == "":
            return None
        if isinstance(value, (int, float)) or (isinstance(value, str) and value.isdigit()):
            return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
        return value


class Project(BaseModel):
    """A Toggl project an entry can be filed under"""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    color: Optional[str] = None


class IdleState(BaseModel):
    """No session is running; the display shows 00:00"""
    model_config = ConfigDict(frozen=True)

    @property
    def is_running(self) -> bool:
        return False


class RunningState(BaseModel):
    """
    A session is running.

    ``start_instant`` is the authoritative local clock origin.
    ``remote_entry_id`` stays None until the Toggl entry id is known
    (or forever, if starting the remote entry failed).
    """
    model_config = ConfigDict(frozen=True)

    start_instant: datetime
    description: str = ""
    remote_entry_id: Optional[int] = None

    @field_validator("start_instant")
    @classmethod
    def _start_in_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @property
    def is_running(self) -> bool:
        return True


SessionState = Union[IdleState, RunningState]
