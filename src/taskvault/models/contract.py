"""Column names and constants shared by the store and the mutation pipeline."""

from __future__ import annotations

# Task columns
ID = "id"
LIST_ID = "list_id"
TITLE = "title"
DESCRIPTION = "description"
LOCATION = "location"
DTSTART = "dtstart"
DUE = "due"
DURATION = "duration"
TZ = "tz"
IS_ALLDAY = "is_allday"
STATUS = "status"
PERCENT_COMPLETE = "percent_complete"
PRIORITY = "priority"
CLASSIFICATION = "classification"
COMPLETED = "completed"
COMPLETED_IS_ALLDAY = "completed_is_allday"
CREATED = "created"
LAST_MODIFIED = "last_modified"
IS_NEW = "is_new"
IS_CLOSED = "is_closed"
HAS_ALARMS = "has_alarms"
HAS_PROPERTIES = "has_properties"
DELETED = "deleted"
DIRTY = "dirty"
UID = "uid"
ORIGINAL_INSTANCE_ID = "original_instance_id"
ORIGINAL_INSTANCE_SYNC_ID = "original_instance_sync_id"
ORIGINAL_INSTANCE_TIME = "original_instance_time"
ORIGINAL_INSTANCE_ALLDAY = "original_instance_allday"
RRULE = "rrule"
RDATE = "rdate"
EXDATE = "exdate"
SYNC_ID = "sync_id"
SYNC_VERSION = "sync_version"
SYNC_FIELDS = tuple(f"sync{i}" for i in range(1, 9))

# Display fields joined in from the owning list; never stored on the task
LIST_NAME = "list_name"
LIST_COLOR = "list_color"
ACCOUNT_NAME = "account_name"
ACCOUNT_TYPE = "account_type"
LIST_DERIVED_FIELDS = (LIST_NAME, LIST_COLOR, ACCOUNT_NAME, ACCOUNT_TYPE)

TASK_COLUMNS = (
    ID,
    LIST_ID,
    TITLE,
    DESCRIPTION,
    LOCATION,
    DTSTART,
    DUE,
    DURATION,
    TZ,
    IS_ALLDAY,
    STATUS,
    PERCENT_COMPLETE,
    PRIORITY,
    CLASSIFICATION,
    COMPLETED,
    COMPLETED_IS_ALLDAY,
    CREATED,
    LAST_MODIFIED,
    IS_NEW,
    IS_CLOSED,
    HAS_ALARMS,
    HAS_PROPERTIES,
    DELETED,
    DIRTY,
    UID,
    ORIGINAL_INSTANCE_ID,
    ORIGINAL_INSTANCE_SYNC_ID,
    ORIGINAL_INSTANCE_TIME,
    ORIGINAL_INSTANCE_ALLDAY,
    RRULE,
    RDATE,
    EXDATE,
    SYNC_ID,
    SYNC_VERSION,
    *SYNC_FIELDS,
)

# Status values
STATUS_NEEDS_ACTION = 0
STATUS_IN_PROCESS = 1
STATUS_COMPLETED = 2
STATUS_CANCELLED = 3
STATUSES = (STATUS_NEEDS_ACTION, STATUS_IN_PROCESS, STATUS_COMPLETED, STATUS_CANCELLED)
CLOSED_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED)

STATUS_NAMES = {
    STATUS_NEEDS_ACTION: "needs-action",
    STATUS_IN_PROCESS: "in-process",
    STATUS_COMPLETED: "completed",
    STATUS_CANCELLED: "cancelled",
}

# Classification values
CLASSIFICATION_PUBLIC = 0
CLASSIFICATION_PRIVATE = 1
CLASSIFICATION_CONFIDENTIAL = 2

# Account type of lists that live only on this device
LOCAL_ACCOUNT_TYPE = "LOCAL"

# Search index entry types
SEARCHABLE_TITLE = "title"
SEARCHABLE_DESCRIPTION = "description"
SEARCHABLE_PROPERTY = "property"

# Collections observers can subscribe to
COLLECTION_TASKS = "tasks"
COLLECTION_INSTANCES = "instances"
COLLECTION_LISTS = "lists"
COLLECTION_PROPERTIES = "properties"

# Property mimetypes
MIMETYPE_CATEGORY = "vnd.taskvault/category"
MIMETYPE_COMMENT = "vnd.taskvault/comment"
MIMETYPE_ALARM = "vnd.taskvault/alarm"
