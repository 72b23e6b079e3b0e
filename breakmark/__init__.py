"""Breakmark - predicted page breaks for continuously edited documents."""

from .breaks import BreakMarker, extend_breaks, generate_breaks, markers_for
from .cache import BreakCache, ContainerState
from .errors import ConfigurationError, MissingTargetError, ObservationFailure
from .geometry import page_height_pixels
from .page_config import MarkerStyle, OverlaySettings, PageConfiguration
from .synchronizer import ViewSynchronizer

__version__ = "0.1.0"

__all__ = [
    'BreakMarker',
    'BreakCache',
    'ConfigurationError',
    'ContainerState',
    'MarkerStyle',
    'MissingTargetError',
    'ObservationFailure',
    'OverlaySettings',
    'PageConfiguration',
    'ViewSynchronizer',
    'extend_breaks',
    'generate_breaks',
    'markers_for',
    'page_height_pixels',
]
