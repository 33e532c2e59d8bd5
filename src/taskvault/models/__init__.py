"""taskvault domain models.

Pydantic models for tasks, lists, instances and properties, plus the
configuration models and the column constants shared with the store.
"""

from .config_models import AppConfig, OutputConfig, SearchConfig, StoreConfig
from .core import (
    Instance,
    Property,
    PropertyValues,
    SearchHit,
    Task,
    TaskList,
    TaskListCreate,
    TaskValues,
)

__all__ = [
    # Task models
    "Task",
    "TaskValues",
    "Instance",
    "SearchHit",
    # List models
    "TaskList",
    "TaskListCreate",
    # Property models
    "Property",
    "PropertyValues",
    # Config models
    "AppConfig",
    "OutputConfig",
    "SearchConfig",
    "StoreConfig",
]
