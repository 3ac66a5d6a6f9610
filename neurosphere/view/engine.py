"""Particle pool and per-frame simulation step."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..config import (
    FOCAL_DISTANCE,
    PARTICLE_COUNT,
    RGB,
    ROTATION_SPEED,
    SPHERE_RADIUS,
)
from .geometry import Point3D, generate_sphere_points
from .projection import ProjectedPoint, Projector
from .surface import ViewState
from .theme import node_color

__all__ = ["Frame", "SphereEngine"]

logger = logging.getLogger(__name__)


@dataclass
class Frame:
    """Result of one simulation step, ready to be painted."""

    view: ViewState
    points: List[ProjectedPoint] = field(default_factory=list)
    node_rgb: RGB = (0, 0, 0)

    @property
    def empty(self) -> bool:
        return not self.points


class SphereEngine:
    """Owns the particle pool; rotates and projects it once per frame."""

    def __init__(
        self,
        count: int = PARTICLE_COUNT,
        radius: float = SPHERE_RADIUS,
        focal: float = FOCAL_DISTANCE,
        rotation_speed: float = ROTATION_SPEED,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.count = int(count)
        self.radius = float(radius)
        self.rotation_speed = float(rotation_speed)
        self.projector = Projector(focal, radius)
        self.rng = rng
        self.points: List[Point3D] = []
        self.frame_count = 0
        self._was_empty: Optional[bool] = None

    @property
    def populated(self) -> bool:
        return bool(self.points)

    def populate(self, points: Optional[Iterable[Point3D]] = None) -> List[Point3D]:
        """Create the pool, or adopt ``points`` as the pool when given."""

        if points is not None:
            self.points = list(points)
        else:
            self.points = generate_sphere_points(self.count, self.radius, self.rng)
        logger.debug("Particle pool ready (%d points)", len(self.points))
        return self.points

    def step(self, view: ViewState) -> Frame:
        """Advance the rotation and project every point for ``view``.

        While the surface has no area the rotation is paused on purpose as
        well as the drawing: the sphere resumes from the pose it had when it
        was last visible. The caller simply tries again on the next frame.
        """

        empty = not view.has_area
        if empty != self._was_empty:
            if empty:
                logger.debug("Surface has no area; skipping frames")
            elif self._was_empty:
                logger.debug("Surface is %dx%d again; resuming", view.width, view.height)
            self._was_empty = empty
        if empty:
            return Frame(view)

        angle_x = self.rotation_speed + view.mouse_y
        angle_y = self.rotation_speed + view.mouse_x
        for point in self.points:
            point.rotate(angle_x, angle_y)
        projected = self.projector.project_all(self.points, view.width, view.height)
        self.frame_count += 1
        return Frame(view, projected, node_color(view.theme))
