"""Extended task properties."""

from .handlers import (
    AlarmHandler,
    CategoryHandler,
    CommentHandler,
    PropertyHandler,
    get_property_handler,
)

__all__ = [
    "AlarmHandler",
    "CategoryHandler",
    "CommentHandler",
    "PropertyHandler",
    "get_property_handler",
]
