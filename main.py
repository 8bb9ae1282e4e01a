"""
main.py

ZoneSnap - Zone Layout Editor

PyQt6 application for editing window-snap zone layouts:
- Drag zones to move them, drop onto another zone to merge
- Resize zones from any edge or corner
- Click to split a zone (Shift for top/bottom), Ctrl+click to grow it
- Edges snap to neighbouring zones and the screen borders

Usage:
    python main.py [layout.json] [--name NAME] [--windowed]

Dependencies:
    pip install PyQt6 platformdirs tomli-w

Environment:
    ZONESNAP_TRACE=1 (optional debug trace to stderr and zonesnap_debug.log)
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from PyQt6.QtWidgets import QApplication, QMainWindow, QMessageBox

from canvas import ZoneCanvas
from models import Zone, ZoneLayout, generate_layout_id
from settings import SettingsManager, get_settings
from debug_trace import trace, trace_exception, close_log

DEFAULT_LAYOUT_FILE = "layout.json"


def load_layout(path: Path) -> ZoneLayout:
    """Read a layout JSON file.

    A missing file yields an empty layout named after the file; the editor
    turns an empty zone list into a single full-screen zone.

    Raises:
        ValueError: If the file is not a layout object or a zone entry is
            malformed.
    """
    if not path.exists():
        trace(f"Layout file {path} not found, starting empty", "MAIN")
        return ZoneLayout(id=generate_layout_id(), name=path.stem)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict) or not isinstance(data.get("zones", []), list):
        raise ValueError(f"{path} does not contain a layout object with a 'zones' list.")
    try:
        return ZoneLayout.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"{path} has a malformed zone entry: {e!r}") from e


def save_layout(layout: ZoneLayout, path: Path) -> None:
    """Write a layout as pretty-printed JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(layout.to_dict(), f, indent=2)


class ZoneEditorWindow(QMainWindow):
    """Top-level window hosting the zone canvas for one layout file."""

    def __init__(self, layout: ZoneLayout, path: Path, settings_manager: SettingsManager):
        super().__init__()
        self.layout_id = layout.id
        self.layout_name = layout.name
        self.path = path
        self.settings_manager = settings_manager
        self._saved = False

        self.setWindowTitle(f"ZoneSnap - {layout.name or path.name}")
        self.canvas = ZoneCanvas(layout.zones, settings=settings_manager.settings, parent=self)
        self.canvas.zonesChanged.connect(self._on_zones_changed)
        self.canvas.closeRequested.connect(self._on_close_requested)
        self.setCentralWidget(self.canvas)
        self.statusBar().showMessage(
            "Click: split  |  Shift: split top/bottom  |  Ctrl+click: grow  |  "
            "Drag onto a zone: merge  |  S: toggle snap  |  Esc: save and close"
        )

    def _on_zones_changed(self, zones: List[Zone]) -> None:
        self._saved = False
        trace(f"Zones changed: {len(zones)}", "MAIN")

    def _on_close_requested(self, zones: List[Zone]) -> None:
        self.close()

    def current_layout(self) -> ZoneLayout:
        screen = self.screen()
        size = screen.geometry() if screen is not None else None
        return self.canvas.editor.to_layout(
            layout_id=self.layout_id,
            name=self.layout_name,
            screen_width=size.width() if size is not None else None,
            screen_height=size.height() if size is not None else None,
        )

    def save(self) -> bool:
        try:
            save_layout(self.current_layout(), self.path)
        except OSError as e:
            QMessageBox.critical(self, "Save failed", str(e))
            return False
        self._saved = True
        trace(f"Saved layout: {self.path}", "MAIN")
        return True

    def closeEvent(self, event):
        self.canvas.editor.cancel_gesture()
        if not self._saved and not self.save():
            event.ignore()
            return
        event.accept()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="zonesnap", description="Edit a window-snap zone layout.")
    parser.add_argument(
        "layout",
        nargs="?",
        help=f"Layout JSON file (default: <layouts dir>/{DEFAULT_LAYOUT_FILE})",
    )
    parser.add_argument("--name", help="Layout name to store when the file is new")
    parser.add_argument("--windowed", action="store_true", help="Open in a window instead of full screen")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Application entry point."""
    args = parse_args(argv)
    trace("Application starting", "MAIN")
    app = QApplication(sys.argv[:1])

    # Load settings (use singleton to ensure single instance)
    trace("Loading settings", "MAIN")
    settings_manager = get_settings()

    # Ensure settings file has all sections
    settings_manager.ensure_file_complete()

    path = Path(args.layout) if args.layout else settings_manager.get_layouts_dir() / DEFAULT_LAYOUT_FILE
    try:
        layout = load_layout(path)
    except (OSError, ValueError) as e:
        trace_exception("Layout load failed")
        QMessageBox.critical(None, "Open failed", str(e))
        return 1
    if args.name:
        layout.name = args.name

    # Save settings on application quit
    def save_on_quit():
        trace("Saving settings on quit", "MAIN")
        settings_manager.save()
        close_log()

    app.aboutToQuit.connect(save_on_quit)

    trace("Creating ZoneEditorWindow", "MAIN")
    w = ZoneEditorWindow(layout, path, settings_manager)
    if args.windowed:
        w.resize(1280, 800)
        w.show()
    else:
        w.showFullScreen()
    trace("Entering event loop", "MAIN")
    return app.exec()


if __name__ == "__main__":
    # Set up global exception handler to catch crashes
    def excepthook(exc_type, exc_value, exc_tb):
        import traceback
        trace("UNCAUGHT EXCEPTION:", "CRASH")
        trace("".join(traceback.format_exception(exc_type, exc_value, exc_tb)), "CRASH")
        close_log()
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = excepthook

    try:
        sys.exit(main())
    except Exception as e:
        trace(f"FATAL: {type(e).__name__}: {e}", "CRASH")
        trace_exception("Fatal exception")
        close_log()
        raise
