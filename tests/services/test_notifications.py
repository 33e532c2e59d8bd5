"""Tests for ChangeNotifier coalescing."""

from __future__ import annotations

from unittest.mock import patch

from taskvault.services.notifications import ChangeNotifier


def test_flush_coalesces_per_collection():
    notifier = ChangeNotifier()
    received = []
    notifier.subscribe(received.append)
    notifier.post("tasks", "instances")
    notifier.post("tasks")
    notifier.flush()
    assert received == ["instances", "tasks"]


def test_flush_empties_pending():
    notifier = ChangeNotifier()
    received = []
    notifier.subscribe(received.append)
    notifier.post("tasks")
    notifier.flush()
    notifier.flush()
    assert received == ["tasks"]
    assert notifier.pending == frozenset()


def test_discard_drops_pending():
    notifier = ChangeNotifier()
    received = []
    notifier.subscribe(received.append)
    notifier.post("lists")
    notifier.discard()
    notifier.flush()
    assert received == []


def test_unsubscribe():
    notifier = ChangeNotifier()
    received = []
    unsubscribe = notifier.subscribe(received.append)
    unsubscribe()
    unsubscribe()
    notifier.post("tasks")
    notifier.flush()
    assert received == []


def test_every_observer_is_called():
    notifier = ChangeNotifier()
    first, second = [], []
    notifier.subscribe(first.append)
    notifier.subscribe(second.append)
    notifier.post("properties")
    notifier.flush()
    assert first == second == ["properties"]


def test_failing_observer_does_not_stop_delivery():
    notifier = ChangeNotifier()
    seen = []

    def broken(collection):
        raise RuntimeError("observer down")

    notifier.subscribe(broken)
    notifier.subscribe(seen.append)
    notifier.post("tasks")
    with patch("taskvault.services.notifications.logger") as log:
        notifier.flush()

    assert seen == ["tasks"]
    log.exception.assert_called_once()
