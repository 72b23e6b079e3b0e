"""Page geometry and marker style configuration.

This module defines the physical page sizes, the per-family font metric
corrections, and the configuration snapshots the break prediction core
reads. Snapshots are immutable; a settings change produces a new one.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from .constants import OverlayConstants
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class PageSize(Enum):
    A4 = "A4"
    LETTER = "Letter"
    LEGAL = "Legal"


class Orientation(Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class FontFamily(Enum):
    DEFAULT = "default"
    SERIF = "serif"
    SANS_SERIF = "sans-serif"
    MONOSPACE = "monospace"

    @property
    def metric(self) -> float:
        """Empirical line-metric correction for this family."""
        return FONT_METRICS.get(self.value, 1.0)


class LineStyle(Enum):
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


@dataclass(frozen=True)
class PageDimensions:
    """Physical page dimensions in millimetres (portrait)."""
    width: float
    height: float


PAGE_DIMENSIONS: Dict[PageSize, PageDimensions] = {
    PageSize.A4: PageDimensions(width=210.0, height=297.0),
    PageSize.LETTER: PageDimensions(width=215.9, height=279.4),
    PageSize.LEGAL: PageDimensions(width=215.9, height=355.6),
}

FONT_METRICS: Dict[str, float] = {
    "default": 1.0,
    "serif": 1.02,
    "sans-serif": 0.98,
    "monospace": 1.05,
}

STANDARD_MARGIN_MM = 25.4  # 1 inch

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass(frozen=True)
class PageConfiguration:
    """Snapshot of the page geometry used to predict breaks.

    Attributes:
        page_size: Standard paper size
        orientation: Portrait or landscape
        margin_top: Top margin in mm
        margin_bottom: Bottom margin in mm
        margin_left: Left margin in mm
        margin_right: Right margin in mm
        font_size: Base font size in points
        line_height: Line height multiplier (1.5 = 150%)
        font_family: Family whose metric correction applies
        calibration_offset: Pixel nudge applied to every break
        min_break_spacing: Minimum pixels between consecutive breaks
    """
    page_size: PageSize = PageSize.A4
    orientation: Orientation = Orientation.PORTRAIT
    margin_top: float = STANDARD_MARGIN_MM
    margin_bottom: float = STANDARD_MARGIN_MM
    margin_left: float = STANDARD_MARGIN_MM
    margin_right: float = STANDARD_MARGIN_MM
    font_size: float = 12.0
    line_height: float = 1.5
    font_family: FontFamily = FontFamily.DEFAULT
    calibration_offset: float = 0.0
    min_break_spacing: float = 50.0

    @property
    def dimensions(self) -> PageDimensions:
        return PAGE_DIMENSIONS[self.page_size]

    @property
    def flow_length_mm(self) -> float:
        """Length of the page along the scroll axis, before margins."""
        dims = self.dimensions
        if self.orientation is Orientation.PORTRAIT:
            return dims.height
        return dims.width

    @property
    def cross_length_mm(self) -> float:
        dims = self.dimensions
        if self.orientation is Orientation.PORTRAIT:
            return dims.width
        return dims.height

    @property
    def row_height_pixels(self) -> float:
        """Rendered height of one line of body text in pixels."""
        return self.font_size * OverlayConstants.PIXELS_PER_POINT * self.line_height

    def validate(self) -> None:
        """Raise ConfigurationError if this geometry is unusable."""
        margins = {
            "margin_top": self.margin_top,
            "margin_bottom": self.margin_bottom,
            "margin_left": self.margin_left,
            "margin_right": self.margin_right,
        }
        for name, value in margins.items():
            if value < 0:
                raise ConfigurationError(f"{name} must be >= 0 mm, got {value}")
        if self.margin_top + self.margin_bottom >= self.flow_length_mm:
            raise ConfigurationError(
                f"Top and bottom margins ({self.margin_top} + {self.margin_bottom} mm) "
                f"consume the whole {self.flow_length_mm} mm page"
            )
        if self.margin_left + self.margin_right >= self.cross_length_mm:
            raise ConfigurationError(
                f"Left and right margins ({self.margin_left} + {self.margin_right} mm) "
                f"consume the whole {self.cross_length_mm} mm page"
            )
        if self.font_size <= 0:
            raise ConfigurationError(f"font_size must be > 0 pt, got {self.font_size}")
        if self.line_height <= 0:
            raise ConfigurationError(f"line_height must be > 0, got {self.line_height}")
        if self.min_break_spacing < 0:
            raise ConfigurationError(
                f"min_break_spacing must be >= 0 px, got {self.min_break_spacing}"
            )


@dataclass(frozen=True)
class MarkerStyle:
    """Visual style handed to the rendering collaborator."""
    line_color: str = "#3b82f6"
    line_style: LineStyle = LineStyle.SOLID
    opacity: float = 0.5
    show_page_numbers: bool = True

    @property
    def rgb(self) -> tuple[int, int, int]:
        value = self.line_color.lstrip("#")
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


# Persisted key -> (section, attribute, enum type or None)
_SETTING_FIELDS: Dict[str, tuple[str, str, Optional[type]]] = {
    "page_size": ("page", "page_size", PageSize),
    "orientation": ("page", "orientation", Orientation),
    "margin_top": ("page", "margin_top", None),
    "margin_bottom": ("page", "margin_bottom", None),
    "margin_left": ("page", "margin_left", None),
    "margin_right": ("page", "margin_right", None),
    "font_size": ("page", "font_size", None),
    "line_height": ("page", "line_height", None),
    "font_family": ("page", "font_family", FontFamily),
    "calibration_offset": ("page", "calibration_offset", None),
    "min_break_spacing": ("page", "min_break_spacing", None),
    "break_line_color": ("style", "line_color", None),
    "break_line_style": ("style", "line_style", LineStyle),
    "break_line_opacity": ("style", "opacity", None),
    "show_page_numbers": ("style", "show_page_numbers", None),
}

SETTING_KEYS = tuple(_SETTING_FIELDS)


def validate_setting_value(key: str, value: Any) -> bool:
    """Check a single persisted setting value.

    Args:
        key: Persisted setting key.
        value: Raw value as loaded from JSON.

    Returns:
        True if the value is acceptable for the key. Unknown keys are
        accepted for forward compatibility.
    """
    if key not in _SETTING_FIELDS:
        return True
    _, _, enum_type = _SETTING_FIELDS[key]
    if enum_type is not None:
        return isinstance(value, str) and value in {member.value for member in enum_type}
    if key == "show_page_numbers":
        return isinstance(value, bool)
    if key == "break_line_color":
        return isinstance(value, str) and bool(_HEX_COLOR.match(value))
    # Remaining keys are numeric; bool is an int subclass but not a number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if key == "calibration_offset":
        return True
    if key == "break_line_opacity":
        return 0 <= value <= 1
    if key in ("font_size", "line_height"):
        return value > 0
    return value >= 0


@dataclass(frozen=True)
class OverlaySettings:
    """Everything the user configures: page geometry plus marker style."""
    page: PageConfiguration = field(default_factory=PageConfiguration)
    style: MarkerStyle = field(default_factory=MarkerStyle)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OverlaySettings":
        """Build settings from persisted data merged over the defaults.

        Invalid values are dropped with a warning so one bad key never
        discards the rest of the user's configuration.
        """
        values: Dict[str, Dict[str, Any]] = {"page": {}, "style": {}}
        for key, raw in data.items():
            if key not in _SETTING_FIELDS:
                continue
            if not validate_setting_value(key, raw):
                logger.warning(f"Ignoring invalid value for {key}: {raw!r}")
                continue
            section, attr, enum_type = _SETTING_FIELDS[key]
            values[section][attr] = enum_type(raw) if enum_type is not None else raw
        return cls(page=PageConfiguration(**values["page"]), style=MarkerStyle(**values["style"]))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for key, (section, attr, _) in _SETTING_FIELDS.items():
            value = getattr(getattr(self, section), attr)
            data[key] = value.value if isinstance(value, Enum) else value
        return data

    def with_page(self, **changes: Any) -> "OverlaySettings":
        return replace(self, page=replace(self.page, **changes))

    def with_style(self, **changes: Any) -> "OverlaySettings":
        return replace(self, style=replace(self.style, **changes))
