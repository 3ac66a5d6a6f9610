"""QPainter rendering of a simulated frame."""

from __future__ import annotations

from typing import Optional

from PyQt5 import QtCore, QtGui

from ..config import BACKGROUND_RGB, NODE_OPACITY, NODE_RADIUS
from .engine import Frame
from .linker import ProximityLinker
from .projection import clamp01
from .theme import resolve_theme

__all__ = ["SphereRenderer"]


class SphereRenderer:
    """Clears the surface, then paints links and nodes of a :class:`Frame`."""

    def __init__(
        self,
        linker: Optional[ProximityLinker] = None,
        node_radius: float = NODE_RADIUS,
        node_opacity: float = NODE_OPACITY,
    ) -> None:
        self.linker = linker if linker is not None else ProximityLinker()
        self.node_radius = float(node_radius)
        self.node_opacity = float(node_opacity)

    def clear(self, painter: QtGui.QPainter, rect: QtCore.QRectF, theme: str, transparent: bool = True) -> None:
        if transparent:
            painter.setCompositionMode(QtGui.QPainter.CompositionMode_Source)
            painter.fillRect(rect, QtCore.Qt.transparent)
        else:
            painter.setCompositionMode(QtGui.QPainter.CompositionMode_SourceOver)
            painter.fillRect(rect, QtGui.QColor(*BACKGROUND_RGB[resolve_theme(theme)]))
        painter.setCompositionMode(QtGui.QPainter.CompositionMode_SourceOver)

    def paint(
        self,
        painter: QtGui.QPainter,
        frame: Optional[Frame],
        rect: QtCore.QRectF,
        transparent: bool = True,
    ) -> None:
        painter.setRenderHint(QtGui.QPainter.Antialiasing, True)
        theme = frame.view.theme if frame is not None else resolve_theme(None)
        self.clear(painter, rect, theme, transparent)
        if frame is None or frame.empty:
            return

        self.linker.render(painter, frame.points)

        painter.setPen(QtCore.Qt.NoPen)
        color = QtGui.QColor(*frame.node_rgb)
        for point in frame.points:
            radius = self.node_radius * point.scale
            color.setAlphaF(clamp01(point.opacity * self.node_opacity))
            painter.setBrush(color)
            painter.drawEllipse(QtCore.QPointF(point.sx, point.sy), radius, radius)
