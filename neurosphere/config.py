"""Fixed parameters of the neural sphere and a few environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional, Tuple

RGB = Tuple[int, int, int]

# Particle pool
PARTICLE_COUNT = 60
SPHERE_RADIUS = 180.0

# Motion
ROTATION_SPEED = 0.002  # rad/frame, applied to both axes
POINTER_SCALE = 1e-4

# Projection
FOCAL_DISTANCE = 300.0

# Links
CONNECTION_DISTANCE = 120.0
EDGE_OPACITY = 0.15
EDGE_WIDTH = 0.5
EDGE_RGB: RGB = (255, 97, 26)

# Nodes
NODE_RADIUS = 1.5
NODE_OPACITY = 0.8

DARK_THEME = "dark"
LIGHT_THEME = "light"

NODE_RGB: Dict[str, RGB] = {
    DARK_THEME: (240, 240, 240),
    LIGHT_THEME: (26, 26, 26),
}

# Used only when the surface is not transparent
BACKGROUND_RGB: Dict[str, RGB] = {
    DARK_THEME: (13, 13, 13),
    LIGHT_THEME: (250, 250, 250),
}

FRAME_INTERVAL_MS = 16

BACKEND_ENV = "NEUROSPHERE_FORCE_BACKEND"
HOME_ENV = "NEUROSPHERE_HOME"
LOG_LEVEL_ENV = "NEUROSPHERE_LOG_LEVEL"
SETTINGS_FILE = "settings.json"


def settings_dir() -> Path:
    """Directory holding the persisted host preferences."""

    override = os.environ.get(HOME_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".neurosphere"


def settings_path(base_dir: Optional[Path] = None) -> Path:
    return (Path(base_dir) if base_dir is not None else settings_dir()) / SETTINGS_FILE


def forced_backend() -> Optional[str]:
    value = os.environ.get(BACKEND_ENV, "").strip().lower()
    if value in {"opengl", "raster"}:
        return value
    return None


__all__ = [
    "BACKGROUND_RGB",
    "CONNECTION_DISTANCE",
    "DARK_THEME",
    "EDGE_OPACITY",
    "EDGE_RGB",
    "EDGE_WIDTH",
    "FOCAL_DISTANCE",
    "FRAME_INTERVAL_MS",
    "LIGHT_THEME",
    "NODE_OPACITY",
    "NODE_RADIUS",
    "NODE_RGB",
    "PARTICLE_COUNT",
    "POINTER_SCALE",
    "ROTATION_SPEED",
    "SPHERE_RADIUS",
    "LOG_LEVEL_ENV",
    "forced_backend",
    "settings_dir",
    "settings_path",
]
