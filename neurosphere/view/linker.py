"""Proximity links drawn between nearby projected particles."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Sequence

from PyQt5 import QtCore, QtGui

from ..config import CONNECTION_DISTANCE, EDGE_OPACITY, EDGE_RGB, EDGE_WIDTH, RGB
from .projection import ProjectedPoint

__all__ = ["Link", "ProximityLinker", "find_links"]


@dataclass(frozen=True)
class Link:
    """Connected pair ``i < j`` with the alpha used to stroke it."""

    i: int
    j: int
    distance: float
    alpha: float


def find_links(
    points: Sequence[ProjectedPoint],
    threshold: float = CONNECTION_DISTANCE,
    base_opacity: float = EDGE_OPACITY,
) -> Iterator[Link]:
    """Yield every pair strictly closer than ``threshold`` in screen space.

    The scan is quadratic; the pool is small enough (60 points, 1770 pairs)
    for that to stay well under a frame budget.
    """

    if threshold <= 0:
        return
    count = len(points)
    for i in range(count):
        p1 = points[i]
        for j in range(i + 1, count):
            p2 = points[j]
            dx = p1.sx - p2.sx
            dy = p1.sy - p2.sy
            dist = math.sqrt(dx * dx + dy * dy)
            if dist < threshold:
                depth = (p1.opacity + p2.opacity) / 2
                alpha = (1 - dist / threshold) * base_opacity * depth
                yield Link(i, j, dist, alpha)


class ProximityLinker:
    def __init__(
        self,
        threshold: float = CONNECTION_DISTANCE,
        base_opacity: float = EDGE_OPACITY,
        rgb: RGB = EDGE_RGB,
        line_width: float = EDGE_WIDTH,
    ) -> None:
        self.threshold = float(threshold)
        self.base_opacity = float(base_opacity)
        self.rgb = rgb
        self.line_width = float(line_width)

    def links(self, points: Sequence[ProjectedPoint]) -> List[Link]:
        return list(find_links(points, self.threshold, self.base_opacity))

    def render(self, painter: QtGui.QPainter, points: Sequence[ProjectedPoint]) -> int:
        """Stroke the links of ``points`` and return how many were drawn."""

        painter.setBrush(QtCore.Qt.NoBrush)
        color = QtGui.QColor(*self.rgb)
        drawn = 0
        for link in find_links(points, self.threshold, self.base_opacity):
            p1 = points[link.i]
            p2 = points[link.j]
            color.setAlphaF(max(0.0, min(1.0, link.alpha)))
            painter.setPen(QtGui.QPen(color, self.line_width))
            painter.drawLine(QtCore.QLineF(p1.sx, p1.sy, p2.sx, p2.sy))
            drawn += 1
        return drawn
