"""Handlers for extended task properties.

A handler knows how one property mimetype maps onto the generic ``data0``
to ``data3`` columns and which of its text, if any, is searchable.
"""

from __future__ import annotations

from typing import Any

from taskvault.errors import InvariantViolation
from taskvault.models.contract import MIMETYPE_ALARM, MIMETYPE_CATEGORY, MIMETYPE_COMMENT


class PropertyHandler:
    """Default handler: accepts any values, contributes nothing to search."""

    def validate(self, values: dict[str, Any]) -> None:
        pass

    def searchable_text(self, values: dict[str, Any]) -> str | None:
        return None


class CategoryHandler(PropertyHandler):
    """Categories keep their name in ``data0`` and color in ``data1``."""

    def validate(self, values: dict[str, Any]) -> None:
        if not values.get("data0"):
            raise InvariantViolation("A category needs a name")

    def searchable_text(self, values: dict[str, Any]) -> str | None:
        return values.get("data0")


class CommentHandler(PropertyHandler):
    """Comments keep their text in ``data0`` and language in ``data1``."""

    def searchable_text(self, values: dict[str, Any]) -> str | None:
        return values.get("data0")


class AlarmHandler(PropertyHandler):
    """Alarms keep minutes before the reference date in ``data0``."""

    def validate(self, values: dict[str, Any]) -> None:
        minutes = values.get("data0")
        try:
            int(minutes)
        except (TypeError, ValueError) as e:
            raise InvariantViolation(f"Invalid alarm offset {minutes!r}") from e


_HANDLERS: dict[str, PropertyHandler] = {
    MIMETYPE_CATEGORY: CategoryHandler(),
    MIMETYPE_COMMENT: CommentHandler(),
    MIMETYPE_ALARM: AlarmHandler(),
}
_DEFAULT_HANDLER = PropertyHandler()


def get_property_handler(mimetype: str) -> PropertyHandler:
    """Return the handler for *mimetype*, the default handler if unknown."""
    return _HANDLERS.get(mimetype, _DEFAULT_HANDLER)
