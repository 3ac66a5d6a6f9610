"""Theme flag handling.

The sphere itself only polls the theme once per frame through a callable; the
host window owns the preference through :class:`ThemeStore`, which also
persists it between sessions.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Optional

from PyQt5 import QtCore

from ..config import DARK_THEME, LIGHT_THEME, NODE_RGB, RGB, settings_path

__all__ = ["ThemeSource", "ThemeStore", "node_color", "resolve_theme"]

logger = logging.getLogger(__name__)

ThemeSource = Callable[[], object]


def resolve_theme(value: object) -> str:
    """Return ``"dark"`` only for the exact dark flag and ``"light"`` otherwise.

    The match is strict: ``"DARK"`` or ``" dark "`` select the light palette.
    """

    if value == DARK_THEME:
        return DARK_THEME
    return LIGHT_THEME


def node_color(theme: object) -> RGB:
    return NODE_RGB[resolve_theme(theme)]


class ThemeStore(QtCore.QObject):
    """Persist and expose the light/dark preference of the host window."""

    themeChanged = QtCore.pyqtSignal(str)

    def __init__(self, path: Optional[Path] = None, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        self.path = Path(path) if path is not None else settings_path()
        self._theme = self._load()

    # ------------------------------------------------------------------ storage
    def _load(self) -> str:
        if not self.path.exists():
            return LIGHT_THEME
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, exc)
            return LIGHT_THEME
        if not isinstance(data, dict):
            return LIGHT_THEME
        return resolve_theme(data.get("theme"))

    def _save(self) -> None:
        data = {}
        if self.path.exists():
            try:
                loaded = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                loaded = None
            if isinstance(loaded, dict):
                data = loaded
        data["theme"] = self._theme
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not save theme preference to %s: %s", self.path, exc)

    # ------------------------------------------------------------------ API
    def current(self) -> str:
        return self._theme

    __call__ = current

    def set(self, theme: object, *, persist: bool = True) -> str:
        resolved = resolve_theme(theme)
        changed = resolved != self._theme
        self._theme = resolved
        if persist:
            self._save()
        if changed:
            logger.info("Theme switched to %s", resolved)
            self.themeChanged.emit(resolved)
        return resolved

    def toggle(self) -> str:
        return self.set(LIGHT_THEME if self._theme == DARK_THEME else DARK_THEME)
