"""Error taxonomy for break prediction.

None of these are fatal to the host. The synchronizer catches each of them
per container and degrades to "no markers until the next good recompute".
"""


class BreakmarkError(Exception):
    """Base class for breakmark errors."""


class ConfigurationError(BreakmarkError, ValueError):
    """Page configuration cannot produce a usable page height."""


class MissingTargetError(BreakmarkError):
    """A view has no scrollable content region right now."""


class ObservationFailure(BreakmarkError):
    """Height-change observation could not be attached to a container."""
