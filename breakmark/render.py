"""Turning break markers into something a terminal can show."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, List, Optional, Sequence, Tuple

import blessed

from .breaks import BreakMarker
from .constants import OverlayConstants
from .host import MarkerRenderer, RenderedContainer
from .page_config import MarkerStyle

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class Indicator:
    """A materialized break: one full-width rule row and its colour."""
    text: str
    color: RGB
    page_number: int
    offset: float


@dataclass(frozen=True)
class ComposedLine:
    text: str
    indicator: Optional[Indicator] = None


def blend(color: RGB, opacity: float, background: RGB = (0, 0, 0)) -> RGB:
    """Mix ``color`` over ``background`` at the given opacity."""
    return tuple(
        round(bg + (fg - bg) * opacity) for fg, bg in zip(color, background)
    )  # type: ignore[return-value]


def create_break_line(page_number: int, width: int, char: str = "─",
                      show_page_number: bool = True) -> str:
    """Create a full-width rule, with a centered page badge if requested."""
    if not show_page_number:
        return char * width
    badge = OverlayConstants.PAGE_BADGE_FORMAT.format(page_number)
    if len(badge) >= width:
        return badge[:width]
    padding = (width - len(badge)) // 2
    return char * padding + badge + char * (width - padding - len(badge))


def build_indicator(marker: BreakMarker, style: MarkerStyle, width: int,
                    background: RGB = (0, 0, 0)) -> Indicator:
    char = OverlayConstants.BREAK_LINE_CHARS[style.line_style.value]
    return Indicator(
        text=create_break_line(marker.page_number, width, char, style.show_page_numbers),
        color=blend(style.rgb, style.opacity, background),
        page_number=marker.page_number,
        offset=marker.offset,
    )


class TerminalMarkerRenderer(MarkerRenderer):
    """Keeps markers per container and composes them into document rows."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None,
                 width: int = OverlayConstants.DEFAULT_DOCUMENT_WIDTH,
                 background: RGB = (0, 0, 0),
                 on_change: Optional[Callable[[], None]] = None):
        self.term = terminal or blessed.Terminal()
        self.on_change = on_change
        self.width = width
        self.background = background
        self.visible = True
        self._markers: Dict[Hashable, List[BreakMarker]] = {}
        self._styles: Dict[Hashable, MarkerStyle] = {}

    def render(self, container: RenderedContainer, markers: Sequence[BreakMarker],
               style: MarkerStyle) -> None:
        self._markers[container.handle] = list(markers)
        self._styles[container.handle] = style
        logger.debug(f"Rendered {len(markers)} indicators for {container.handle!r}")
        self._changed()

    def append(self, container: RenderedContainer, markers: Sequence[BreakMarker],
               style: MarkerStyle) -> None:
        self._markers.setdefault(container.handle, []).extend(markers)
        self._styles[container.handle] = style
        self._changed()

    def clear(self, handle: Hashable) -> None:
        self._markers.pop(handle, None)
        self._styles.pop(handle, None)
        self._changed()

    def set_visible(self, visible: bool) -> None:
        self.visible = visible
        self._changed()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def markers(self, handle: Hashable) -> List[BreakMarker]:
        return list(self._markers.get(handle, []))

    def indicators(self, handle: Hashable) -> List[Indicator]:
        style = self._styles.get(handle, MarkerStyle())
        return [build_indicator(marker, style, self.width, self.background)
                for marker in self._markers.get(handle, [])]

    def compose(self, container) -> List[ComposedLine]:
        """Interleave a terminal document's rows with its break rules.

        ``container`` must expose ``lines`` and ``row_for_offset`` like
        TerminalDocument. Hidden markers leave the rows untouched.
        """
        lines = [ComposedLine(text) for text in container.lines]
        if not self.visible:
            return lines
        by_row: Dict[int, List[Indicator]] = {}
        for indicator in self.indicators(container.handle):
            row = min(container.row_for_offset(indicator.offset), len(lines))
            by_row.setdefault(row, []).append(indicator)
        composed: List[ComposedLine] = []
        for row in range(len(lines) + 1):
            for indicator in by_row.get(row, []):
                composed.append(ComposedLine(indicator.text, indicator))
            if row < len(lines):
                composed.append(lines[row])
        return composed

    def styled_lines(self, container) -> List[str]:
        """Compose and colour break rows for direct terminal output."""
        output = []
        for line in self.compose(container):
            if line.indicator is None:
                output.append(line.text)
            else:
                output.append(self.term.color_rgb(*line.indicator.color)(line.text))
        return output
