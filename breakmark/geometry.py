"""Page geometry to pixel conversion."""

import logging

from .constants import OverlayConstants
from .errors import ConfigurationError
from .page_config import PageConfiguration

logger = logging.getLogger(__name__)


def printable_height_mm(config: PageConfiguration) -> float:
    """Printable length along the scroll axis in millimetres.

    Landscape uses the page width as its flow length. Breaks always run
    along the container's vertical scroll axis regardless of orientation.
    """
    return config.flow_length_mm - (config.margin_top + config.margin_bottom)


def page_height_pixels(config: PageConfiguration) -> float:
    """Return the predicted page height in CSS pixels.

    The printable height is converted at 96 px per inch, scaled by the
    font family's metric correction, then by a safety factor so predicted
    pages never hold more than an export engine fits.

    Args:
        config: Page configuration snapshot.

    Returns:
        Page height in pixels, always > 0.

    Raises:
        ConfigurationError: If the configuration is invalid or the
            resulting height is not positive.
    """
    config.validate()
    height = printable_height_mm(config) * OverlayConstants.PIXELS_PER_MM
    height *= config.font_family.metric
    height *= OverlayConstants.PAGE_SAFETY_FACTOR
    if height <= 0:
        raise ConfigurationError(f"Page height must be positive, got {height:.2f}px")
    logger.debug(
        f"Page height for {config.page_size.value} {config.orientation.value}: {height:.2f}px"
    )
    return height
