"""Tests for the property handler registry."""

from __future__ import annotations

import pytest

from taskvault.errors import InvariantViolation
from taskvault.models.contract import MIMETYPE_ALARM, MIMETYPE_CATEGORY, MIMETYPE_COMMENT
from taskvault.properties.handlers import (
    AlarmHandler,
    CategoryHandler,
    CommentHandler,
    PropertyHandler,
    get_property_handler,
)


class TestRegistry:
    @pytest.mark.parametrize(
        "mimetype, handler_type",
        [
            (MIMETYPE_CATEGORY, CategoryHandler),
            (MIMETYPE_COMMENT, CommentHandler),
            (MIMETYPE_ALARM, AlarmHandler),
        ],
    )
    def test_known_mimetypes(self, mimetype, handler_type):
        assert isinstance(get_property_handler(mimetype), handler_type)

    def test_unknown_mimetype_gets_default(self):
        handler = get_property_handler("vnd.example/attachment")
        assert type(handler) is PropertyHandler
        handler.validate({"data0": None})
        assert handler.searchable_text({"data0": "anything"}) is None


class TestCategoryHandler:
    def test_name_is_searchable(self):
        assert CategoryHandler().searchable_text({"data0": "Errands", "data1": "#ff0000"}) == "Errands"

    @pytest.mark.parametrize("name", [None, ""])
    def test_name_required(self, name):
        with pytest.raises(InvariantViolation):
            CategoryHandler().validate({"data0": name})


class TestCommentHandler:
    def test_text_is_searchable(self):
        assert CommentHandler().searchable_text({"data0": "call back"}) == "call back"

    def test_empty_comment(self):
        assert CommentHandler().searchable_text({}) is None


class TestAlarmHandler:
    @pytest.mark.parametrize("minutes", ["15", "-30", 0])
    def test_valid_offsets(self, minutes):
        AlarmHandler().validate({"data0": minutes})

    @pytest.mark.parametrize("minutes", [None, "soon", "1.5"])
    def test_invalid_offsets(self, minutes):
        with pytest.raises(InvariantViolation, match="alarm"):
            AlarmHandler().validate({"data0": minutes})

    def test_not_searchable(self):
        assert AlarmHandler().searchable_text({"data0": "15"}) is None
