"""Terminal-backed document views.

A terminal has no pixels, so each wrapped row stands for one line of body
text at the configured font size and line height. A document's rendered
height is its row count times that row height.
"""

from __future__ import annotations

import logging
import textwrap
from typing import Callable, Dict, Hashable, List, Optional

from .constants import OverlayConstants
from .errors import MissingTargetError
from .host import CallbackSubscription, DocumentHost, DocumentView, RenderedContainer, Subscription

logger = logging.getLogger(__name__)


def wrap_paragraph(paragraph: str, num_columns: int) -> List[str]:
    """Word-wrap one paragraph; an empty paragraph is one blank row."""
    if not paragraph:
        return [""]
    return textwrap.wrap(paragraph, width=num_columns, replace_whitespace=False,
                         drop_whitespace=True) or [""]


class TerminalDocument(RenderedContainer):
    """Wrapped document text measured in terminal rows."""

    def __init__(self, name: str, paragraphs: Optional[List[str]] = None,
                 num_columns: int = OverlayConstants.DEFAULT_DOCUMENT_WIDTH,
                 row_height_px: float = 16.0):
        self.name = name
        self._paragraphs = list(paragraphs) if paragraphs is not None else [""]
        self.num_columns = num_columns
        self.row_height_px = row_height_px
        self._lines: Optional[List[str]] = None
        self._listeners: Dict[int, Callable[[], None]] = {}
        self._next_listener = 0

    @property
    def handle(self) -> Hashable:
        return self.name

    @property
    def paragraphs(self) -> List[str]:
        return list(self._paragraphs)

    @property
    def lines(self) -> List[str]:
        if self._lines is None:
            self._lines = []
            for paragraph in self._paragraphs:
                self._lines.extend(wrap_paragraph(paragraph, self.num_columns))
        return self._lines

    @property
    def scroll_height(self) -> float:
        return len(self.lines) * self.row_height_px

    def row_for_offset(self, offset: float) -> int:
        """Number of whole rows that fit above ``offset``."""
        return max(0, int(offset // self.row_height_px))

    def observe_height(self, callback: Callable[[], None]) -> Subscription:
        key = self._next_listener
        self._next_listener += 1
        self._listeners[key] = callback
        return CallbackSubscription(lambda: self._listeners.pop(key, None))

    @property
    def observer_count(self) -> int:
        return len(self._listeners)

    def set_text(self, text: str) -> None:
        self.set_paragraphs(text.split("\n"))

    def set_paragraphs(self, paragraphs: List[str]) -> None:
        """Replace the content, notifying observers if the height changed."""
        old_height = self.scroll_height
        self._paragraphs = list(paragraphs) or [""]
        self._lines = None
        if self.scroll_height != old_height:
            for callback in list(self._listeners.values()):
                callback()

    def reflow(self, num_columns: Optional[int] = None,
               row_height_px: Optional[float] = None) -> None:
        """Change the layout. Observers are not notified; this is structural."""
        if num_columns is not None:
            self.num_columns = num_columns
        if row_height_px is not None:
            self.row_height_px = row_height_px
        self._lines = None


class TerminalDocumentView(DocumentView):
    """A view that may or may not currently show a document."""

    def __init__(self, document: Optional[TerminalDocument] = None):
        self.document = document

    def content_container(self) -> TerminalDocument:
        if self.document is None:
            raise MissingTargetError("View has no document loaded")
        return self.document


class TerminalHost(DocumentHost):
    """Holds the open terminal views in display order."""

    def __init__(self):
        self._views: List[TerminalDocumentView] = []

    def open(self, view: TerminalDocumentView) -> TerminalDocumentView:
        self._views.append(view)
        return view

    def close(self, view: TerminalDocumentView) -> None:
        if view in self._views:
            self._views.remove(view)

    def active_views(self) -> List[DocumentView]:
        return list(self._views)

    def reflow_all(self, num_columns: Optional[int] = None,
                   row_height_px: Optional[float] = None) -> None:
        for view in self._views:
            if view.document is not None:
                view.document.reflow(num_columns=num_columns, row_height_px=row_height_px)
