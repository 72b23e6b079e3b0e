"""Contracts between the break prediction core and its host environment.

The host owns the document views and their rendered content; the renderer
owns how markers look. The core only measures heights and hands over
break markers.
"""

from abc import ABC, abstractmethod
from typing import Callable, Hashable, List, Optional, Sequence

from .breaks import BreakMarker
from .errors import ObservationFailure
from .page_config import MarkerStyle


class Subscription(ABC):
    """Handle to an active height observation."""

    @abstractmethod
    def dispose(self) -> None:
        """Stop delivering notifications. Safe to call more than once."""


class CallbackSubscription(Subscription):
    """Subscription that runs a teardown callback once."""

    def __init__(self, teardown: Callable[[], None]):
        self._teardown: Optional[Callable[[], None]] = teardown

    @property
    def disposed(self) -> bool:
        return self._teardown is None

    def dispose(self) -> None:
        teardown, self._teardown = self._teardown, None
        if teardown is not None:
            teardown()


class RenderedContainer(ABC):
    """A scrollable content region whose height the core measures."""

    @property
    @abstractmethod
    def handle(self) -> Hashable:
        """Stable identity of the region, used as the cache key."""

    @property
    @abstractmethod
    def scroll_height(self) -> float:
        """Current rendered height of the content in pixels."""

    def observe_height(self, callback: Callable[[], None]) -> Subscription:
        """Call ``callback`` whenever the content height may have changed.

        Raises:
            ObservationFailure: If the region cannot be observed.
        """
        raise ObservationFailure(f"{type(self).__name__} does not support height observation")


class DocumentView(ABC):

    @abstractmethod
    def content_container(self) -> RenderedContainer:
        """Return the view's primary scrollable region.

        Raises:
            MissingTargetError: If the view has no content region right now.
        """


class DocumentHost(ABC):

    @abstractmethod
    def active_views(self) -> List[DocumentView]:
        """Return the document views currently open."""


class MarkerRenderer(ABC):
    """Materializes break markers inside a container."""

    @abstractmethod
    def render(self, container: RenderedContainer, markers: Sequence[BreakMarker],
               style: MarkerStyle) -> None:
        """Replace all markers shown in ``container``."""

    @abstractmethod
    def append(self, container: RenderedContainer, markers: Sequence[BreakMarker],
               style: MarkerStyle) -> None:
        """Add markers after those already shown in ``container``."""

    @abstractmethod
    def clear(self, handle: Hashable) -> None:
        """Remove every marker shown for the container with ``handle``."""

    @abstractmethod
    def set_visible(self, visible: bool) -> None:
        """Show or hide all markers without touching their positions."""
