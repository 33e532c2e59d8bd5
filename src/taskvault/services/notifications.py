"""Change notifications for observers of the task store."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

Observer = Callable[[str], None]


class ChangeNotifier:
    """Collects changed collections during an operation and reports them once.

    Changes posted while an operation runs are coalesced; ``flush`` delivers
    each changed collection to every observer once, ``discard`` drops them
    (used when the operation rolled back).
    """

    def __init__(self):
        self._observers: list[Observer] = []
        self._pending: set[str] = set()

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register *observer*; returns a function that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def post(self, *collections: str) -> None:
        self._pending.update(collections)

    @property
    def pending(self) -> frozenset[str]:
        return frozenset(self._pending)

    def flush(self) -> None:
        changed, self._pending = sorted(self._pending), set()
        for collection in changed:
            for observer in list(self._observers):
                try:
                    observer(collection)
                except Exception:
                    # the operation is already committed
                    logger.exception("observer %r failed for %s", observer, collection)
        if changed:
            logger.debug("notified %d observer(s) of %s", len(self._observers), changed)

    def discard(self) -> None:
        self._pending.clear()
