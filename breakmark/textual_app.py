"""Textual editor with a live page break preview."""

import logging
from pathlib import Path
from typing import Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Footer, Header, Static, TextArea

from .render import TerminalMarkerRenderer
from .scheduler import TaskScheduler
from .settings_persistence import SettingsPersistence, get_persistence
from .synchronizer import ViewSynchronizer
from .terminal_view import TerminalDocument, TerminalDocumentView, TerminalHost

logger = logging.getLogger(__name__)


class BreakmarkApp(App):
    """Edit on the left, see where pages split on the right."""

    CSS = """
    TextArea {
        width: 1fr;
        border: none;
    }
    #preview-pane {
        width: 1fr;
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+s", "save", "Save"),
        Binding("ctrl+t", "toggle_breaks", "Toggle breaks"),
        Binding("ctrl+r", "recalibrate", "Recalibrate"),
    ]

    def __init__(self, filename: Optional[str] = None,
                 persistence: Optional[SettingsPersistence] = None):
        super().__init__()
        self.filename = filename
        self.persistence = persistence or get_persistence()
        settings = self.persistence.load()
        self.host = TerminalHost()
        self.document = TerminalDocument(
            name=filename or "untitled",
            row_height_px=settings.page.row_height_pixels,
        )
        self.view = self.host.open(TerminalDocumentView(self.document))
        self.renderer = TerminalMarkerRenderer(on_change=self.refresh_preview)
        self.synchronizer: Optional[ViewSynchronizer] = None
        self._initial_settings = settings
        self._preview_ready = False

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            editor = TextArea(id="editor")
            editor.show_line_numbers = False
            yield editor
            with VerticalScroll(id="preview-pane"):
                yield Static(id="preview")
        yield Footer()

    def on_mount(self) -> None:
        self.synchronizer = ViewSynchronizer(
            self.host,
            self.renderer,
            TaskScheduler(self.set_timer),
            settings=self._initial_settings,
            store=self.persistence,
        )
        editor = self.query_one("#editor", TextArea)
        if self.filename:
            try:
                content = Path(self.filename).read_text(encoding="utf-8")
            except OSError as e:
                self.notify(f"Error loading file: {e}", severity="error")
            else:
                editor.load_text(content)
                self.document.set_text(content)
                self.sub_title = f"Editing: {self.filename}"
        self._preview_ready = True
        self.synchronizer.on_file_open()
        self.refresh_preview()
        editor.focus()

    def on_unmount(self) -> None:
        self._preview_ready = False
        if self.synchronizer is not None:
            self.synchronizer.shutdown()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.synchronizer is None:
            return
        old_height = self.document.scroll_height
        # Growth reaches the synchronizer through the height subscription
        self.document.set_text(event.text_area.text)
        if self.document.scroll_height < old_height:
            self.synchronizer.on_layout_change()
        self.refresh_preview()

    def on_resize(self, event) -> None:
        if self.synchronizer is not None:
            self.synchronizer.on_layout_change()

    def refresh_preview(self) -> None:
        if not self._preview_ready:
            return
        text = Text()
        for line in self.renderer.compose(self.document):
            if line.indicator is None:
                text.append(line.text)
            else:
                r, g, b = line.indicator.color
                text.append(line.text, style=f"bold rgb({r},{g},{b})")
            text.append("\n")
        self.query_one("#preview", Static).update(text)

    def action_toggle_breaks(self) -> None:
        if self.synchronizer is not None:
            visible = self.synchronizer.toggle_visibility()
            self.notify("Page breaks shown" if visible else "Page breaks hidden")

    def action_recalibrate(self) -> None:
        if self.synchronizer is not None:
            self.synchronizer.recalibrate()

    def action_save(self) -> None:
        if not self.filename:
            self.notify("No filename set", severity="warning")
            return
        try:
            Path(self.filename).write_text(self.query_one("#editor", TextArea).text,
                                           encoding="utf-8")
            self.notify(f"Saved to {self.filename}")
        except OSError as e:
            self.notify(f"Error saving: {e}", severity="error")


def main(filename: Optional[str] = None) -> None:
    """Run the Textual app."""
    BreakmarkApp(filename=filename).run()
