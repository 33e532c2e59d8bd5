"""Unit tests for TaskValidatorProcessor."""

from __future__ import annotations

import pytest

from taskvault.errors import InvariantViolation, ListReferenceError
from taskvault.pipeline.changeset import WritableTaskView
from taskvault.pipeline.processors.validator import TaskValidatorProcessor

HOUR = 3_600_000
START = 1_772_442_000_000


@pytest.fixture
def validator(store):
    return TaskValidatorProcessor(store)


@pytest.fixture
def stored(store, local_list):
    task_id = store.insert_task(
        {"list_id": local_list, "title": "Stored", "dtstart": START, "tz": "Europe/Berlin"}
    )
    return store.get_task(task_id)


def _insert_view(store, **values):
    return WritableTaskView(store, None, values)


# ---------------------------------------------------------------------------
# List references
# ---------------------------------------------------------------------------


class TestListReference:
    def test_insert_requires_list(self, validator, store):
        with pytest.raises(InvariantViolation, match="list_id"):
            validator.before_insert(_insert_view(store, title="x"), False)

    def test_insert_into_unknown_list(self, validator, store):
        with pytest.raises(ListReferenceError):
            validator.before_insert(_insert_view(store, list_id=99), False)

    def test_insert_into_existing_list(self, validator, store, local_list):
        validator.before_insert(_insert_view(store, list_id=local_list, title="ok"), False)

    def test_update_to_unknown_list(self, validator, store, stored):
        view = WritableTaskView(store, stored, {"list_id": 99})
        with pytest.raises(ListReferenceError):
            validator.before_update(view, False)

    def test_update_to_existing_list(self, validator, store, stored, synced_list):
        validator.before_update(WritableTaskView(store, stored, {"list_id": synced_list}), False)


# ---------------------------------------------------------------------------
# Write permissions
# ---------------------------------------------------------------------------


class TestPermissions:
    @pytest.mark.parametrize(
        "field, value",
        [
            ("id", 5),
            ("list_name", "x"),
            ("list_color", "#fff"),
            ("account_name", "x"),
            ("account_type", "LOCAL"),
            ("is_new", True),
            ("is_closed", False),
        ],
    )
    @pytest.mark.parametrize("trusted", [False, True])
    def test_always_read_only(self, validator, store, stored, field, value, trusted):
        with pytest.raises(InvariantViolation, match="read-only"):
            validator.before_update(WritableTaskView(store, stored, {field: value}), trusted)

    @pytest.mark.parametrize(
        "field, value",
        [
            ("uid", "abc"),
            ("dirty", False),
            ("created", 1),
            ("last_modified", 1),
            ("has_alarms", True),
            ("has_properties", True),
            ("deleted", True),
        ],
    )
    def test_trusted_only_fields(self, validator, store, stored, field, value):
        with pytest.raises(InvariantViolation, match="sync adapter"):
            validator.before_update(WritableTaskView(store, stored, {field: value}), False)
        validator.before_update(WritableTaskView(store, stored, {field: value}), True)

    def test_original_instance_fields_are_exclusive(self, validator, store, local_list):
        view = _insert_view(
            store, list_id=local_list, original_instance_id=1, original_instance_sync_id="x"
        )
        with pytest.raises(InvariantViolation, match="together"):
            validator.before_insert(view, True)

    def test_original_instance_on_insert_allowed(self, validator, store, local_list):
        validator.before_insert(_insert_view(store, list_id=local_list, original_instance_id=1), False)

    def test_original_instance_update_needs_trust(self, validator, store, stored):
        view = WritableTaskView(store, stored, {"original_instance_sync_id": "remote"})
        with pytest.raises(InvariantViolation):
            validator.before_update(view, False)
        validator.before_update(WritableTaskView(store, stored, {"original_instance_sync_id": "r"}), True)


# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------


class TestRanges:
    @pytest.mark.parametrize(
        "field, bad, good",
        [
            ("priority", 10, 9),
            ("priority", -1, 0),
            ("classification", 3, 2),
            ("percent_complete", 101, 100),
            ("percent_complete", -5, 0),
            ("status", 4, 3),
        ],
    )
    def test_bounds(self, validator, store, stored, field, bad, good):
        with pytest.raises(InvariantViolation, match=field):
            validator.before_update(WritableTaskView(store, stored, {field: bad}), False)
        validator.before_update(WritableTaskView(store, stored, {field: good}), False)

    def test_null_allowed(self, validator, store, stored):
        validator.before_update(WritableTaskView(store, stored, {"priority": None}), False)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


class TestDates:
    def _insert(self, validator, store, list_id, **values):
        validator.before_insert(_insert_view(store, list_id=list_id, **values), False)

    def test_due_and_duration_exclusive(self, validator, store, local_list):
        with pytest.raises(InvariantViolation, match="due and duration"):
            self._insert(
                validator,
                store,
                local_list,
                dtstart=START,
                due=START + HOUR,
                duration="PT1H",
                tz="UTC",
            )

    def test_due_before_start(self, validator, store, local_list):
        with pytest.raises(InvariantViolation, match="before dtstart"):
            self._insert(validator, store, local_list, dtstart=START, due=START - 1, tz="UTC")

    def test_due_equal_to_start_is_fine(self, validator, store, local_list):
        self._insert(validator, store, local_list, dtstart=START, due=START, tz="UTC")

    def test_duration_requires_start(self, validator, store, local_list):
        with pytest.raises(InvariantViolation, match="requires dtstart"):
            self._insert(validator, store, local_list, duration="PT1H")

    def test_negative_duration(self, validator, store, local_list):
        with pytest.raises(InvariantViolation, match="negative"):
            self._insert(validator, store, local_list, dtstart=START, duration="-PT1H", tz="UTC")

    def test_malformed_duration(self, validator, store, local_list):
        with pytest.raises(InvariantViolation, match="Invalid duration"):
            self._insert(validator, store, local_list, dtstart=START, duration="1 hour", tz="UTC")

    def test_timed_task_needs_zone(self, validator, store, local_list):
        with pytest.raises(InvariantViolation, match="time zone"):
            self._insert(validator, store, local_list, due=START)

    def test_all_day_task_without_zone(self, validator, store, local_list):
        self._insert(validator, store, local_list, dtstart=START, is_allday=True)

    def test_unknown_zone(self, validator, store, local_list):
        with pytest.raises(InvariantViolation, match="Unknown time zone"):
            self._insert(validator, store, local_list, dtstart=START, tz="Mars/Olympus")

    def test_update_checks_merged_values(self, validator, store, stored):
        # stored task has dtstart, so a due before it is rejected
        view = WritableTaskView(store, stored, {"due": START - HOUR})
        with pytest.raises(InvariantViolation):
            validator.before_update(view, False)

    def test_update_clearing_zone_of_timed_task(self, validator, store, stored):
        with pytest.raises(InvariantViolation, match="time zone"):
            validator.before_update(WritableTaskView(store, stored, {"tz": None}), False)

    def test_untouched_dates_are_not_rechecked(self, validator, store, local_list):
        # rows written directly may be inconsistent; only date edits are checked
        task_id = store.insert_task({"list_id": local_list, "due": START})
        view = WritableTaskView(store, store.get_task(task_id), {"title": "x"})
        validator.before_update(view, False)
