"""Stages of the task mutation pipeline."""

from .auto_update import AutoUpdateProcessor
from .base import TaskProcessor
from .instances import InstanceProcessor, compute_instance
from .local_purge import LocalTaskProcessor
from .relation import ChangeListProcessor
from .search import SearchIndexProcessor
from .validator import TaskValidatorProcessor

__all__ = [
    "AutoUpdateProcessor",
    "ChangeListProcessor",
    "InstanceProcessor",
    "LocalTaskProcessor",
    "SearchIndexProcessor",
    "TaskProcessor",
    "TaskValidatorProcessor",
    "compute_instance",
]
