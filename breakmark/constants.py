"""Constants and configuration for the breakmark overlay."""

class OverlayConstants:
    """Central configuration constants for break prediction."""
    
    # Unit conversion
    MM_PER_INCH = 25.4
    CSS_PIXELS_PER_INCH = 96  # Device-independent reference resolution
    POINTS_PER_INCH = 72
    PIXELS_PER_MM = CSS_PIXELS_PER_INCH / MM_PER_INCH
    PIXELS_PER_POINT = CSS_PIXELS_PER_INCH / POINTS_PER_INCH
    
    # Bias toward slightly shorter pages than an export engine fits
    PAGE_SAFETY_FACTOR = 0.985
    
    # Growth smaller than this (px) does not trigger extension
    GROWTH_HYSTERESIS_PX = 100
    
    # Scheduling (seconds)
    STRUCTURAL_DEBOUNCE = 0.5  # Trailing-edge collapse of layout-change bursts
    ACTIVE_VIEW_SETTLE_DELAY = 0.15  # Let the host lay out a newly focused view
    FILE_OPEN_SETTLE_DELAY = 0.3  # Let the host render a freshly opened document
    RECALIBRATE_DELAY = 0.1
    INITIAL_UPDATE_DELAY = 0.5
    
    # First page number that carries a leading break
    FIRST_BREAK_PAGE = 2
    
    # Terminal rendering
    BREAK_LINE_CHARS = {
        "solid": "─",
        "dashed": "╌",
        "dotted": "┈",
    }
    PAGE_BADGE_FORMAT = " Page {} "
    DEFAULT_DOCUMENT_WIDTH = 65
