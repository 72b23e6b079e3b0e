"""Breakmark CLI entry point.

Allows running via `python -m breakmark` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

USAGE = "usage: breakmark [--version] [--print-breaks FILE] [FILE]"


def print_breaks(filename: str) -> int:
    """Print a document with predicted page breaks using the saved settings."""
    from .breaks import generate_breaks, markers_for
    from .errors import ConfigurationError
    from .geometry import page_height_pixels
    from .render import TerminalMarkerRenderer
    from .settings_persistence import get_persistence
    from .terminal_view import TerminalDocument

    try:
        content = Path(filename).read_text(encoding="utf-8")
    except OSError as e:
        print(f"breakmark: cannot read {filename}: {e}", file=sys.stderr)
        return 1

    settings = get_persistence().load()
    page = settings.page
    try:
        page_height = page_height_pixels(page)
    except ConfigurationError as e:
        print(f"breakmark: {e}", file=sys.stderr)
        return 2

    document = TerminalDocument(filename, row_height_px=page.row_height_pixels)
    document.set_text(content)
    breaks = generate_breaks(document.scroll_height, page_height,
                             page.calibration_offset, page.min_break_spacing)
    renderer = TerminalMarkerRenderer()
    renderer.render(document, markers_for(breaks), settings.style)
    for line in renderer.styled_lines(document):
        print(line)
    return 0


def main() -> None:
    # Very small arg parsing, the same way for every mode
    if os.environ.get("BREAKMARK_LOG"):
        logging.basicConfig(level=os.environ["BREAKMARK_LOG"].upper())
    args = sys.argv[1:]
    if args and args[0] in ("--version", "-V"):
        from . import __version__
        print(__version__)
        return
    if args and args[0] == "--print-breaks":
        if len(args) != 2:
            print(USAGE, file=sys.stderr)
            sys.exit(2)
        sys.exit(print_breaks(args[1]))
    if args and args[0] in ("-h", "--help"):
        print(USAGE)
        return

    # Lazy import to avoid importing UI deps for --version
    from .textual_app import main as run_app
    run_app(args[0] if args else None)


if __name__ == "__main__":  # pragma: no cover
    main()
