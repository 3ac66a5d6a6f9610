"""Drawing-surface geometry and pointer bias."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple, cast

from PyQt5 import QtCore, QtGui, QtWidgets

from ..config import LIGHT_THEME, POINTER_SCALE

__all__ = ["SurfaceController", "ViewState"]

logger = logging.getLogger(__name__)


class _Container(Protocol):
    def width(self) -> int: ...

    def height(self) -> int: ...


@dataclass(frozen=True)
class ViewState:
    """Everything a frame reads from the outside world, captured at its start."""

    width: int = 0
    height: int = 0
    mouse_x: float = 0.0
    mouse_y: float = 0.0
    theme: str = LIGHT_THEME

    @property
    def has_area(self) -> bool:
        return self.width > 0 and self.height > 0


class SurfaceController(QtCore.QObject):
    """Keeps the surface sized to its container and tracks the pointer.

    ``container`` is usually the widget the sphere is painted on, but anything
    exposing ``width()`` and ``height()`` works, which keeps the controller
    usable without a window.
    """

    resized = QtCore.pyqtSignal(int, int)

    def __init__(
        self,
        container: Optional[_Container] = None,
        pointer_scale: float = POINTER_SCALE,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.container = container
        self.pointer_scale = float(pointer_scale)
        self.width = 0
        self.height = 0
        self.mouse_x = 0.0
        self.mouse_y = 0.0
        self._attached = False

    @property
    def available(self) -> bool:
        return self.container is not None

    @property
    def has_area(self) -> bool:
        return self.width > 0 and self.height > 0

    def resize(self) -> Tuple[int, int]:
        """Adopt the container's current size and return it."""

        if self.container is None:
            return self.width, self.height
        width = max(0, int(self.container.width()))
        height = max(0, int(self.container.height()))
        if (width, height) != (self.width, self.height):
            logger.debug("Surface resized to %dx%d", width, height)
            self.width = width
            self.height = height
            self.resized.emit(width, height)
        return width, height

    def pointer_moved(self, x: float, y: float) -> None:
        """Update the rotation bias from a pointer position local to the surface."""

        self.mouse_x = (x - self.width / 2) * self.pointer_scale
        self.mouse_y = (y - self.height / 2) * self.pointer_scale

    def view_state(self, theme: str = LIGHT_THEME) -> ViewState:
        return ViewState(self.width, self.height, self.mouse_x, self.mouse_y, theme)

    # ------------------------------------------------------------------ Qt wiring
    def attach(self) -> None:
        """Listen to container resizes and to pointer moves over the whole app."""

        if self._attached:
            return
        if isinstance(self.container, QtCore.QObject):
            self.container.installEventFilter(self)
        app = QtWidgets.QApplication.instance()
        if app is not None:
            app.installEventFilter(self)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        if isinstance(self.container, QtCore.QObject):
            self.container.removeEventFilter(self)
        app = QtWidgets.QApplication.instance()
        if app is not None:
            app.removeEventFilter(self)
        self._attached = False

    def eventFilter(self, watched: QtCore.QObject, event: QtCore.QEvent) -> bool:  # type: ignore[override]
        kind = event.type()
        if kind == QtCore.QEvent.Resize and watched is self.container:
            self.resize()
        elif kind == QtCore.QEvent.MouseMove:
            mouse_event = cast(QtGui.QMouseEvent, event)
            self._track_global(mouse_event.globalPos())
        return False

    def _track_global(self, global_pos: QtCore.QPoint) -> None:
        container = self.container
        if isinstance(container, QtWidgets.QWidget):
            local = container.mapFromGlobal(global_pos)
            self.pointer_moved(float(local.x()), float(local.y()))
        else:
            self.pointer_moved(float(global_pos.x()), float(global_pos.y()))
