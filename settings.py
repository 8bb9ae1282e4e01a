"""
settings.py

Persistent settings management for ZoneSnap.

Handles cross-platform settings storage using TOML format with platformdirs
for proper user config directory detection.

Settings file location:
    - Windows: %APPDATA%/zonesnap/settings.toml
    - macOS: ~/Library/Application Support/zonesnap/settings.toml
    - Linux: ~/.config/zonesnap/settings.toml

Default values are documented in comments throughout this file.
If settings.toml is corrupted, these defaults will be used.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

# TOML reading - use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

APP_NAME = "zonesnap"

log = logging.getLogger(__name__)

# Global settings manager instance (singleton)
_settings_manager: Optional["SettingsManager"] = None


def get_settings() -> "SettingsManager":
    """Get the global settings manager instance.

    Returns:
        The singleton SettingsManager instance.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager


# =============================================================================
# Editor Settings
# =============================================================================

@dataclass
class EditorSettings:
    """Zone editing behavior.

    Defaults:
        snap_enabled: True
        snap_threshold: 0.2
        min_zone_size: 5.0
        drag_threshold_px: 5.0
    """
    snap_enabled: bool = True          # Default: True
    snap_threshold: float = 0.2        # Default: 0.2 percent of canvas
    min_zone_size: float = 5.0         # Default: 5.0 percent of canvas
    drag_threshold_px: float = 5.0     # Default: 5.0 pixels before a press counts as a drag


# =============================================================================
# Canvas Settings
# =============================================================================

@dataclass
class CanvasHandleSettings:
    """Resize handle settings.

    Defaults:
        size: 10.0
        hit_distance: 10.0
        border_color: "#3B82F6"
        fill_color: "#FFFFFF"
    """
    size: float = 10.0                # Default: 10.0 pixels
    hit_distance: float = 10.0        # Default: 10.0 pixels
    border_color: str = "#3B82F6"     # Default: blue
    fill_color: str = "#FFFFFF"       # Default: white


@dataclass
class CanvasZOrderSettings:
    """Z-order layering settings.

    Defaults:
        base: 100
        step: 1
    """
    base: int = 100  # Default: 100
    step: int = 1    # Default: 1


@dataclass
class CanvasColorSettings:
    """Zone drawing colors (#RRGGBB or #AARRGGBB).

    Defaults:
        zone_border: "#993B82F6"
        zone_fill: "#1A3B82F6"
        hover_border: "#FF3B82F6"
        hover_fill: "#333B82F6"
        split_bar: "#FF3B82F6"
        label: "#FFFFFF"
        background: "#80000000"
    """
    zone_border: str = "#993B82F6"    # Default: blue, 60% alpha
    zone_fill: str = "#1A3B82F6"      # Default: blue, 10% alpha
    hover_border: str = "#FF3B82F6"   # Default: opaque blue
    hover_fill: str = "#333B82F6"     # Default: blue, 20% alpha
    split_bar: str = "#FF3B82F6"      # Default: opaque blue
    label: str = "#FFFFFF"            # Default: white
    background: str = "#80000000"     # Default: black, 50% alpha


@dataclass
class CanvasSettings:
    """All canvas-related settings."""
    handles: CanvasHandleSettings = field(default_factory=CanvasHandleSettings)
    zorder: CanvasZOrderSettings = field(default_factory=CanvasZOrderSettings)
    colors: CanvasColorSettings = field(default_factory=CanvasColorSettings)


# =============================================================================
# Main App Settings
# =============================================================================

@dataclass
class AppSettings:
    """Application settings with default values.

    Attributes:
        layouts_dir: Default directory for layout files.
        editor: Editing behavior settings.
        canvas: Canvas drawing settings.
    """
    # Directory for layout files (empty = ~/Documents/ZoneSnap)
    layouts_dir: str = ""

    # Nested settings categories
    editor: EditorSettings = field(default_factory=EditorSettings)
    canvas: CanvasSettings = field(default_factory=CanvasSettings)


# =============================================================================
# Settings Manager
# =============================================================================

class SettingsManager:
    """Manages loading, saving, and accessing application settings.

    Settings are stored in a TOML file at the platform-appropriate location.
    If the settings file doesn't exist, defaults are used and the file is
    created on first save.

    Args:
        app_name: Application name used for the config directory.
        settings_dir: Override for the config directory (tests, portable installs).
    """

    def __init__(self, app_name: str = APP_NAME, settings_dir: Optional[Path] = None):
        if settings_dir is None:
            settings_dir = Path(platformdirs.user_config_dir(app_name))
        self.settings_dir = Path(settings_dir)
        self.settings_file = self.settings_dir / "settings.toml"
        self.settings = self.load()
        self._needs_save = not self.settings_file.exists()  # Save if file didn't exist

    def ensure_file_complete(self) -> None:
        """Ensure settings file exists with all sections. Call once at startup."""
        if self._needs_save or not self.settings_file.exists():
            self.save()
            self._needs_save = False

    def load(self) -> AppSettings:
        """Load settings from the TOML file.

        Returns:
            AppSettings instance with values from file or defaults if file
            doesn't exist or is invalid.
        """
        if not self.settings_file.exists():
            return AppSettings()

        try:
            with open(self.settings_file, "rb") as f:
                data = tomllib.load(f)

            return self._parse_toml(data)
        except (OSError, tomllib.TOMLDecodeError, AttributeError, TypeError) as e:
            # If file is corrupted or invalid, return defaults
            log.warning("Ignoring unreadable settings file %s: %s", self.settings_file, e)
            return AppSettings()

    def _parse_toml(self, data: Dict[str, Any]) -> AppSettings:
        """Parse TOML data into AppSettings.

        Args:
            data: Parsed TOML dictionary.

        Returns:
            AppSettings instance populated from TOML data.
        """
        settings = AppSettings()

        # General section
        general = data.get("general", {})
        settings.layouts_dir = general.get("layouts_dir", settings.layouts_dir)

        # Editor section
        editor = data.get("editor", {})
        settings.editor.snap_enabled = editor.get("snap_enabled", settings.editor.snap_enabled)
        settings.editor.snap_threshold = editor.get("snap_threshold", settings.editor.snap_threshold)
        settings.editor.min_zone_size = editor.get("min_zone_size", settings.editor.min_zone_size)
        settings.editor.drag_threshold_px = editor.get("drag_threshold_px", settings.editor.drag_threshold_px)

        # Canvas section
        canvas = data.get("canvas", {})
        if "handles" in canvas:
            h = canvas["handles"]
            settings.canvas.handles.size = h.get("size", settings.canvas.handles.size)
            settings.canvas.handles.hit_distance = h.get("hit_distance", settings.canvas.handles.hit_distance)
            settings.canvas.handles.border_color = h.get("border_color", settings.canvas.handles.border_color)
            settings.canvas.handles.fill_color = h.get("fill_color", settings.canvas.handles.fill_color)
        if "zorder" in canvas:
            z = canvas["zorder"]
            settings.canvas.zorder.base = z.get("base", settings.canvas.zorder.base)
            settings.canvas.zorder.step = z.get("step", settings.canvas.zorder.step)
        if "colors" in canvas:
            c = canvas["colors"]
            settings.canvas.colors.zone_border = c.get("zone_border", settings.canvas.colors.zone_border)
            settings.canvas.colors.zone_fill = c.get("zone_fill", settings.canvas.colors.zone_fill)
            settings.canvas.colors.hover_border = c.get("hover_border", settings.canvas.colors.hover_border)
            settings.canvas.colors.hover_fill = c.get("hover_fill", settings.canvas.colors.hover_fill)
            settings.canvas.colors.split_bar = c.get("split_bar", settings.canvas.colors.split_bar)
            settings.canvas.colors.label = c.get("label", settings.canvas.colors.label)
            settings.canvas.colors.background = c.get("background", settings.canvas.colors.background)

        return settings

    def save(self) -> None:
        """Save current settings to the TOML file.

        Creates the settings directory if it doesn't exist.
        """
        # Ensure directory exists
        self.settings_dir.mkdir(parents=True, exist_ok=True)

        # Convert settings to TOML structure
        data = self._to_toml_dict()

        with open(self.settings_file, "wb") as f:
            tomli_w.dump(data, f)

    def _to_toml_dict(self) -> Dict[str, Any]:
        """Convert settings to a TOML-compatible dictionary structure.

        Returns:
            Dictionary organized by TOML sections.
        """
        s = self.settings
        return {
            "general": {
                "layouts_dir": s.layouts_dir,
            },
            "editor": {
                "snap_enabled": s.editor.snap_enabled,
                "snap_threshold": s.editor.snap_threshold,
                "min_zone_size": s.editor.min_zone_size,
                "drag_threshold_px": s.editor.drag_threshold_px,
            },
            "canvas": {
                "handles": {
                    "size": s.canvas.handles.size,
                    "hit_distance": s.canvas.handles.hit_distance,
                    "border_color": s.canvas.handles.border_color,
                    "fill_color": s.canvas.handles.fill_color,
                },
                "zorder": {
                    "base": s.canvas.zorder.base,
                    "step": s.canvas.zorder.step,
                },
                "colors": {
                    "zone_border": s.canvas.colors.zone_border,
                    "zone_fill": s.canvas.colors.zone_fill,
                    "hover_border": s.canvas.colors.hover_border,
                    "hover_fill": s.canvas.colors.hover_fill,
                    "split_bar": s.canvas.colors.split_bar,
                    "label": s.canvas.colors.label,
                    "background": s.canvas.colors.background,
                },
            },
        }

    def to_toml(self) -> str:
        """Convert current settings to a TOML-formatted string.

        Returns:
            TOML representation of the current settings.
        """
        data = self._to_toml_dict()
        return tomli_w.dumps(data)

    def get_layouts_dir(self) -> Path:
        """Get the resolved layouts directory path.

        Returns:
            Path to the layouts directory. Falls back to ~/Documents/ZoneSnap
            if layouts_dir setting is empty.
        """
        if self.settings.layouts_dir:
            return Path(self.settings.layouts_dir)
        return Path.home() / "Documents" / "ZoneSnap"

    def get_settings_path(self) -> Path:
        """Get the path to the settings file.

        Returns:
            Path object pointing to the settings file location.
        """
        return self.settings_file
