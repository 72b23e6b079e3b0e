"""Per-session registry of computed break sequences."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, Hashable, Iterable, List, Optional

if TYPE_CHECKING:
    from .host import RenderedContainer, Subscription

logger = logging.getLogger(__name__)


class ContainerState(Enum):
    UNCOMPUTED = "uncomputed"
    COMPUTED = "computed"
    EXTENDED = "extended"
    INVALIDATED = "invalidated"


@dataclass
class CacheEntry:
    """Cached breaks for one container.

    ``height`` and ``page_height`` record the inputs of the last full or
    incremental computation; extension resumes from them.
    """
    container: "RenderedContainer"
    breaks: List[float] = field(default_factory=list)
    height: float = 0.0
    page_height: float = 0.0
    state: ContainerState = ContainerState.UNCOMPUTED
    subscription: Optional["Subscription"] = None

    @property
    def is_current(self) -> bool:
        return self.state in (ContainerState.COMPUTED, ContainerState.EXTENDED)


class BreakCache:
    """Maps container handles to their last computed break sequence.

    Owned by a single ViewSynchronizer and only touched from the host's
    event thread.
    """

    def __init__(self):
        self._entries: Dict[Hashable, CacheEntry] = {}

    def __contains__(self, handle: Hashable) -> bool:
        return handle in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def handles(self) -> List[Hashable]:
        return list(self._entries)

    def get(self, handle: Hashable) -> Optional[CacheEntry]:
        return self._entries.get(handle)

    def state(self, handle: Hashable) -> ContainerState:
        entry = self._entries.get(handle)
        return entry.state if entry is not None else ContainerState.UNCOMPUTED

    def breaks(self, handle: Hashable) -> List[float]:
        """Return a copy of the cached sequence, empty if none is current."""
        entry = self._entries.get(handle)
        if entry is None or not entry.is_current:
            return []
        return list(entry.breaks)

    def entry_for(self, container: "RenderedContainer") -> CacheEntry:
        """Return the entry for ``container``, registering it if new."""
        entry = self._entries.get(container.handle)
        if entry is None:
            entry = CacheEntry(container=container)
            self._entries[container.handle] = entry
        else:
            entry.container = container
        return entry

    def store(self, container: "RenderedContainer", breaks: Iterable[float],
              height: float, page_height: float) -> CacheEntry:
        """Record a full computation; the entry becomes COMPUTED."""
        entry = self.entry_for(container)
        entry.breaks = list(breaks)
        entry.height = height
        entry.page_height = page_height
        entry.state = ContainerState.COMPUTED
        return entry

    def extend(self, handle: Hashable, additional: Iterable[float], new_height: float) -> CacheEntry:
        """Append incrementally computed breaks; the entry becomes EXTENDED."""
        entry = self._entries[handle]
        if not entry.is_current:
            raise ValueError(f"Cannot extend breaks in state {entry.state.value}")
        entry.breaks.extend(additional)
        entry.height = new_height
        entry.state = ContainerState.EXTENDED
        return entry

    def invalidate(self, handle: Hashable) -> None:
        entry = self._entries.get(handle)
        if entry is not None:
            entry.breaks = []
            entry.state = ContainerState.INVALIDATED

    def invalidate_all(self) -> None:
        """Drop every cached sequence; subscriptions stay attached."""
        for handle in self._entries:
            self.invalidate(handle)
        logger.debug(f"Invalidated break cache ({len(self._entries)} containers)")

    def remove(self, handle: Hashable) -> Optional[CacheEntry]:
        """Forget a container and dispose its height subscription."""
        entry = self._entries.pop(handle, None)
        if entry is not None and entry.subscription is not None:
            entry.subscription.dispose()
            entry.subscription = None
        return entry

    def prune(self, live_handles: Iterable[Hashable]) -> List[Hashable]:
        """Remove entries whose container is no longer live."""
        live = set(live_handles)
        stale = [handle for handle in self._entries if handle not in live]
        for handle in stale:
            self.remove(handle)
        return stale

    def clear(self) -> None:
        for handle in list(self._entries):
            self.remove(handle)
