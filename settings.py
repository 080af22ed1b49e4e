"""
settings.py

Persistent settings management for the joint canvas.

Handles cross-platform settings storage using TOML format with platformdirs
for proper user config directory detection.

Settings file location:
    - Windows: %APPDATA%/joint-canvas/settings.toml
    - macOS: ~/Library/Application Support/joint-canvas/settings.toml
    - Linux: ~/.config/joint-canvas/settings.toml

Default values are documented in comments throughout this file.
If settings.toml is corrupted, these defaults will be used.
"""

from __future__ import annotations

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

from models import JointConfig, PathType

APP_NAME = "joint-canvas"


# =============================================================================
# Joint Settings
# =============================================================================

@dataclass
class JointSettings:
    """Connector and joint interaction settings.

    Defaults:
        interactive_joints: True
        connector_stroke_width: 5.0
        connector_triple_offset: 5.0
        path_type: "triple-line"
        unique_connectors: True
    """
    interactive_joints: bool = True          # Default: True
    connector_stroke_width: float = 5.0      # Default: 5.0 pixels
    connector_triple_offset: float = 5.0     # Default: 5.0 pixels
    path_type: str = PathType.TRIPLE_LINE    # Default: "triple-line" | "line"
    unique_connectors: bool = True           # Default: True


# =============================================================================
# Canvas Settings
# =============================================================================

@dataclass
class CanvasColorSettings:
    """Canvas colors.

    Defaults:
        node_fill: "#1A2236"
        node_border: "#2A3A5C"
        joint: "#4D96FF"
        joint_hover: "#FFFFFF"
        connector: "#6BCB77"
        connector_selected: "#F9CA24"
        preview: "#AAAAAA"
    """
    node_fill: str = "#1A2236"           # Default: dark blue
    node_border: str = "#2A3A5C"         # Default: slate
    joint: str = "#4D96FF"               # Default: blue
    joint_hover: str = "#FFFFFF"         # Default: white
    connector: str = "#6BCB77"           # Default: green
    connector_selected: str = "#F9CA24"  # Default: yellow
    preview: str = "#AAAAAA"             # Default: gray


@dataclass
class CanvasJointSettings:
    """Joint drawing settings.

    Defaults:
        radius: 7.0
    """
    radius: float = 7.0  # Default: 7.0 pixels


@dataclass
class CanvasZoomSettings:
    """Zoom behavior settings.

    Defaults:
        wheel_factor: 1.15
    """
    wheel_factor: float = 1.15  # Default: 1.15 (15% per scroll step)


@dataclass
class CanvasSettings:
    """All canvas-related settings."""
    colors: CanvasColorSettings = field(default_factory=CanvasColorSettings)
    joints: CanvasJointSettings = field(default_factory=CanvasJointSettings)
    zoom: CanvasZoomSettings = field(default_factory=CanvasZoomSettings)


# =============================================================================
# Main App Settings
# =============================================================================

@dataclass
class AppSettings:
    """Application settings with default values.

    Attributes:
        joint: Connector and joint interaction settings.
        canvas: Canvas appearance and zoom settings.
    """
    joint: JointSettings = field(default_factory=JointSettings)
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
        settings_dir: Override the config directory (used by tests).
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
        except (OSError, tomllib.TOMLDecodeError):
            # If file is corrupted or unreadable, return defaults
            return AppSettings()
        return self._parse_toml(data)

    def _parse_toml(self, data: Dict[str, Any]) -> AppSettings:
        """Parse TOML data into AppSettings.

        Args:
            data: Parsed TOML dictionary.

        Returns:
            AppSettings instance populated from TOML data.
        """
        settings = AppSettings()

        # Joint section
        joint = data.get("joint", {})
        settings.joint.interactive_joints = bool(joint.get("interactive_joints", settings.joint.interactive_joints))
        settings.joint.connector_stroke_width = _positive(joint.get("connector_stroke_width"), settings.joint.connector_stroke_width)
        settings.joint.connector_triple_offset = _positive(joint.get("connector_triple_offset"), settings.joint.connector_triple_offset)
        path_type = joint.get("path_type", settings.joint.path_type)
        if path_type in PathType.ALL:
            settings.joint.path_type = path_type
        settings.joint.unique_connectors = bool(joint.get("unique_connectors", settings.joint.unique_connectors))

        # Canvas section
        canvas = data.get("canvas", {})
        if "colors" in canvas:
            c = canvas["colors"]
            colors = settings.canvas.colors
            colors.node_fill = c.get("node_fill", colors.node_fill)
            colors.node_border = c.get("node_border", colors.node_border)
            colors.joint = c.get("joint", colors.joint)
            colors.joint_hover = c.get("joint_hover", colors.joint_hover)
            colors.connector = c.get("connector", colors.connector)
            colors.connector_selected = c.get("connector_selected", colors.connector_selected)
            colors.preview = c.get("preview", colors.preview)
        if "joints" in canvas:
            settings.canvas.joints.radius = _positive(canvas["joints"].get("radius"), settings.canvas.joints.radius)
        if "zoom" in canvas:
            settings.canvas.zoom.wheel_factor = _positive(canvas["zoom"].get("wheel_factor"), settings.canvas.zoom.wheel_factor)

        return settings

    def save(self) -> None:
        """Save current settings to the TOML file.

        Creates the settings directory if it doesn't exist.
        """
        self.settings_dir.mkdir(parents=True, exist_ok=True)

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
            "joint": {
                "interactive_joints": s.joint.interactive_joints,
                "connector_stroke_width": s.joint.connector_stroke_width,
                "connector_triple_offset": s.joint.connector_triple_offset,
                "path_type": s.joint.path_type,
                "unique_connectors": s.joint.unique_connectors,
            },
            "canvas": {
                "colors": {
                    "node_fill": s.canvas.colors.node_fill,
                    "node_border": s.canvas.colors.node_border,
                    "joint": s.canvas.colors.joint,
                    "joint_hover": s.canvas.colors.joint_hover,
                    "connector": s.canvas.colors.connector,
                    "connector_selected": s.canvas.colors.connector_selected,
                    "preview": s.canvas.colors.preview,
                },
                "joints": {
                    "radius": s.canvas.joints.radius,
                },
                "zoom": {
                    "wheel_factor": s.canvas.zoom.wheel_factor,
                },
            },
        }

    def to_toml(self) -> str:
        """Convert current settings to a TOML-formatted string.

        Returns:
            TOML representation of the current settings.
        """
        return tomli_w.dumps(self._to_toml_dict())

    def joint_config(self) -> JointConfig:
        """Build the frozen editor configuration from the joint settings."""
        j = self.settings.joint
        return JointConfig(
            interactive_joints=j.interactive_joints,
            connector_stroke_width=j.connector_stroke_width,
            connector_triple_offset=j.connector_triple_offset,
            path_type=j.path_type,
            unique_connectors=j.unique_connectors,
        )

    def get_settings_path(self) -> Path:
        """Get the path to the settings file.

        Returns:
            Path object pointing to the settings file location.
        """
        return self.settings_file


def _positive(value: Any, default: float) -> float:
    """Coerce a TOML value to a positive float, falling back to ``default``."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    return v if v > 0 else default
