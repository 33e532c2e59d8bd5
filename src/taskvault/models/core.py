"""Task, list, instance and property data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskValues(BaseModel):
    """Values supplied by a client for an insert or update.

    Every field is optional. Only the fields a caller actually passes are
    considered touched (see ``model_dump(exclude_unset=True)``); an explicit
    ``None`` clears the column.
    """

    model_config = ConfigDict(extra="forbid")

    id: int | None = None
    list_id: int | None = None
    title: str | None = None
    description: str | None = None
    location: str | None = None
    dtstart: int | None = None
    due: int | None = None
    duration: str | None = None
    tz: str | None = None
    is_allday: bool | None = None
    status: int | None = None
    percent_complete: int | None = None
    priority: int | None = None
    classification: int | None = None
    completed: int | None = None
    completed_is_allday: bool | None = None
    created: int | None = None
    last_modified: int | None = None
    is_new: bool | None = None
    is_closed: bool | None = None
    has_alarms: bool | None = None
    has_properties: bool | None = None
    deleted: bool | None = None
    dirty: bool | None = None
    uid: str | None = None
    original_instance_id: int | None = None
    original_instance_sync_id: str | None = None
    original_instance_time: int | None = None
    original_instance_allday: bool | None = None
    rrule: str | None = None
    rdate: str | None = None
    exdate: str | None = None
    sync_id: str | None = None
    sync_version: str | None = None
    sync1: str | None = None
    sync2: str | None = None
    sync3: str | None = None
    sync4: str | None = None
    sync5: str | None = None
    sync6: str | None = None
    sync7: str | None = None
    sync8: str | None = None

    # list-derived display fields, accepted here so they can be rejected
    # with a meaningful message by the validator
    list_name: str | None = None
    list_color: str | None = None
    account_name: str | None = None
    account_type: str | None = None

    def touched(self) -> dict:
        """Return only the fields the caller explicitly supplied."""
        return self.model_dump(exclude_unset=True)


class Task(BaseModel):
    """A stored task joined with its list's display fields.

    Attributes:
        id: Row id of the task
        list_id: Id of the owning task list
        title: Short summary
        status: One of the STATUS_* constants
        dtstart: Start instant in epoch milliseconds
        due: Due instant in epoch milliseconds
        duration: RFC 5545 duration string
        tz: IANA time zone name
    """

    id: int
    list_id: int
    title: str | None = None
    description: str | None = None
    location: str | None = None
    dtstart: int | None = None
    due: int | None = None
    duration: str | None = None
    tz: str | None = None
    is_allday: bool = False
    status: int = 0
    percent_complete: int | None = None
    priority: int | None = None
    classification: int | None = None
    completed: int | None = None
    completed_is_allday: bool = False
    created: int | None = None
    last_modified: int | None = None
    is_new: bool = True
    is_closed: bool = False
    has_alarms: bool = False
    has_properties: bool = False
    deleted: bool = False
    dirty: bool = False
    uid: str | None = None
    original_instance_id: int | None = None
    original_instance_sync_id: str | None = None
    original_instance_time: int | None = None
    original_instance_allday: bool | None = None
    rrule: str | None = None
    rdate: str | None = None
    exdate: str | None = None
    sync_id: str | None = None
    sync_version: str | None = None
    list_name: str | None = None
    list_color: str | None = None
    account_name: str | None = None
    account_type: str | None = None

    @field_validator(
        "is_allday",
        "completed_is_allday",
        "is_new",
        "is_closed",
        "has_alarms",
        "has_properties",
        "deleted",
        "dirty",
        mode="before",
    )
    @classmethod
    def null_flag_is_false(cls, v):
        """Flags stored as NULL read as False."""
        return False if v is None else v


class TaskListCreate(BaseModel):
    """Model for creating a new task list.

    Attributes:
        name: Display name of the list
        account_name: Name of the owning account
        account_type: Type of the owning account, ``LOCAL`` for device-only lists
    """

    name: str
    color: str | None = None
    account_name: str = "Local"
    account_type: str = "LOCAL"
    visible: bool = True
    sync_enabled: bool = True
    owner: str | None = None
    access_level: int | None = None
    sync_id: str | None = None


class TaskList(TaskListCreate):
    """A stored task list."""

    id: int
    sync_version: str | None = None
    dirty: bool = False


class Instance(BaseModel):
    """Denormalized scheduling projection of a task."""

    task_id: int
    instance_start: int | None = None
    instance_due: int | None = None
    instance_duration: int | None = None
    instance_start_sorting: int | None = None
    instance_due_sorting: int | None = None


class PropertyValues(BaseModel):
    """Values of an extended task property."""

    model_config = ConfigDict(extra="forbid")

    mimetype: str
    data0: str | None = None
    data1: str | None = None
    data2: str | None = None
    data3: str | None = None


class Property(PropertyValues):
    """A stored extended task property."""

    model_config = ConfigDict(extra="ignore")

    id: int
    task_id: int


class SearchHit(BaseModel):
    """A task matched by a full-text query."""

    task_id: int
    score: float = Field(ge=0.0, le=1.0)
