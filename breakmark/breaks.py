"""Break offset generation.

Breaks are purely geometric: page N+1 starts at ``N * page_height`` plus
the calibration offset, measured from the container's top edge. Candidates
closer than ``min_spacing`` to the previous accepted break are skipped;
the first break only has to lie below the top edge.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .constants import OverlayConstants
from .errors import ConfigurationError


@dataclass(frozen=True)
class BreakMarker:
    """A break ready for rendering: offset in px and the page it starts."""
    offset: float
    page_number: int


def _check_page_height(page_height: float) -> None:
    if page_height <= 0:
        raise ConfigurationError(f"Page height must be positive, got {page_height}")


def _scan(page_index: int, last_accepted: Optional[float], bound: float, page_height: float,
          calibration_offset: float, min_spacing: float) -> List[float]:
    """Walk page indexes while ``page_index * page_height < bound``."""
    breaks: List[float] = []
    while page_index * page_height < bound:
        candidate = page_index * page_height + calibration_offset
        if last_accepted is None:
            # The first break only has to fall below the top edge
            accepted = candidate > 0
        else:
            accepted = candidate - last_accepted >= min_spacing
        if accepted:
            breaks.append(candidate)
            last_accepted = candidate
        page_index += 1
    return breaks


def generate_breaks(total_height: float, page_height: float,
                    calibration_offset: float = 0.0, min_spacing: float = 0.0) -> List[float]:
    """Compute every break offset for a container of ``total_height`` px.

    The calibration offset nudges accepted positions but never extends the
    loop bound. A document no taller than one page has no breaks.

    Args:
        total_height: Rendered height of the container in pixels.
        page_height: Page height in pixels (see geometry.page_height_pixels).
        calibration_offset: Pixel adjustment added to every candidate.
        min_spacing: Minimum distance from the previous accepted break.

    Returns:
        Strictly increasing list of break offsets.
    """
    _check_page_height(page_height)
    return _scan(1, None, total_height, page_height, calibration_offset, min_spacing)


def _first_unscanned_page(old_height: float, page_height: float) -> int:
    # Same comparison as the generator loop so float rounding agrees with it
    page_index = max(1, int(old_height // page_height) - 1)
    while page_index * page_height < old_height:
        page_index += 1
    return page_index


def extend_breaks(existing: Sequence[float], old_height: float, new_height: float,
                  page_height: float, calibration_offset: float = 0.0,
                  min_spacing: float = 0.0) -> List[float]:
    """Compute only the breaks added when a container grows.

    ``existing`` must be the sequence generated (or extended) for
    ``old_height`` with the same page height, offset and spacing. The
    generator loop resumes at the first page whose position lies at or
    beyond ``old_height``; pages before it were already considered when
    ``existing`` was built. The previous accepted break still governs the
    spacing check, so ``existing + extend_breaks(...)`` equals
    ``generate_breaks(new_height, ...)``.

    Returns:
        Additional offsets, all greater than the last existing one.
    """
    _check_page_height(page_height)
    if new_height <= old_height:
        return []
    last_accepted = existing[-1] if existing else None
    page_index = _first_unscanned_page(old_height, page_height)
    return _scan(page_index, last_accepted, new_height, page_height,
                 calibration_offset, min_spacing)


def markers_for(breaks: Sequence[float],
                first_page: int = OverlayConstants.FIRST_BREAK_PAGE) -> List[BreakMarker]:
    """Number breaks positionally: the Nth offset starts page ``first_page + N``."""
    return [BreakMarker(offset=offset, page_number=first_page + index)
            for index, offset in enumerate(breaks)]
