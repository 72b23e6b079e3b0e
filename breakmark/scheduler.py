"""Cancellable keyed tasks on the host's single event thread.

Hosts supply a ``call_later(delay, callback)`` function, such as
``asyncio`` ``loop.call_later`` or Textual's ``App.set_timer``. The handle
it returns must have a ``cancel()`` or ``stop()`` method.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Hashable, Tuple

logger = logging.getLogger(__name__)

CallLater = Callable[[float, Callable[[], None]], Any]


def _cancel_handle(handle: Any) -> None:
    if hasattr(handle, "cancel"):
        handle.cancel()
    elif hasattr(handle, "stop"):
        handle.stop()


class TaskScheduler:
    """Schedules at most one pending task per key.

    Scheduling a key that already has a pending task cancels the older
    one, giving trailing-edge debounce and newer-wins supersession. Each
    task carries a generation number so a callback that fires after being
    superseded does nothing.
    """

    def __init__(self, call_later: CallLater):
        self._call_later = call_later
        self._pending: Dict[Hashable, Tuple[int, Any]] = {}
        self._generation = 0

    def schedule(self, key: Hashable, delay: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` after ``delay`` seconds unless superseded or cancelled."""
        self.cancel(key)
        self._generation += 1
        generation = self._generation

        def fire() -> None:
            pending = self._pending.get(key)
            if pending is None or pending[0] != generation:
                logger.debug(f"Dropping superseded task {key!r}")
                return
            del self._pending[key]
            callback()

        handle = self._call_later(delay, fire)
        self._pending[key] = (generation, handle)

    def cancel(self, key: Hashable) -> bool:
        """Cancel the pending task for ``key``. Returns True if one existed."""
        pending = self._pending.pop(key, None)
        if pending is None:
            return False
        _cancel_handle(pending[1])
        return True

    def cancel_matching(self, predicate: Callable[[Hashable], bool]) -> int:
        keys = [key for key in self._pending if predicate(key)]
        for key in keys:
            self.cancel(key)
        return len(keys)

    def cancel_all(self) -> None:
        for key in list(self._pending):
            self.cancel(key)

    def is_pending(self, key: Hashable) -> bool:
        return key in self._pending

    @property
    def pending_count(self) -> int:
        return len(self._pending)
