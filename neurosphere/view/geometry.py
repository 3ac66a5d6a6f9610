"""Particles of the neural sphere.

Points are sampled uniformly over the surface of a sphere and then only ever
rotated, so their distance to the origin never changes.

Rotation mutates the point in place: the engine rotates the whole pool before
projecting anything, which gives the link scan a fully rotated snapshot.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import List, Optional

from ..config import FOCAL_DISTANCE, PARTICLE_COUNT, SPHERE_RADIUS
from .projection import ProjectedPoint, project_point

__all__ = ["Point3D", "generate_sphere_points"]


@dataclass
class Point3D:
    """Mutable 3D position on the sphere shell."""

    x: float
    y: float
    z: float

    @classmethod
    def on_sphere(cls, radius: float = SPHERE_RADIUS, rng: Optional[random.Random] = None) -> "Point3D":
        """Return a point uniformly distributed over the sphere surface.

        The polar angle comes from ``acos(2u - 1)``; sampling it uniformly
        instead would bunch the points around the poles.
        """

        rng = rng or random
        theta = rng.random() * math.pi * 2
        phi = math.acos(rng.random() * 2 - 1)
        return cls(
            radius * math.sin(phi) * math.cos(theta),
            radius * math.sin(phi) * math.sin(theta),
            radius * math.cos(phi),
        )

    def rotate(self, angle_x: float, angle_y: float) -> None:
        """Rotate about Y by ``angle_y`` then about X by ``angle_x``, in place.

        Successive calls compose, so the sphere keeps spinning frame after
        frame.
        """

        cos_y = math.cos(angle_y)
        sin_y = math.sin(angle_y)
        x1 = self.x * cos_y - self.z * sin_y
        z1 = self.z * cos_y + self.x * sin_y

        cos_x = math.cos(angle_x)
        sin_x = math.sin(angle_x)
        y2 = self.y * cos_x - z1 * sin_x
        z2 = z1 * cos_x + self.y * sin_x

        self.x = x1
        self.y = y2
        self.z = z2

    def project(
        self,
        width: float,
        height: float,
        focal: float = FOCAL_DISTANCE,
        radius: float = SPHERE_RADIUS,
    ) -> ProjectedPoint:
        return project_point(self.x, self.y, self.z, width, height, focal, radius)

    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def copy(self) -> "Point3D":
        return Point3D(self.x, self.y, self.z)


def generate_sphere_points(
    count: int = PARTICLE_COUNT,
    radius: float = SPHERE_RADIUS,
    rng: Optional[random.Random] = None,
) -> List[Point3D]:
    return [Point3D.on_sphere(radius, rng) for _ in range(max(0, int(count)))]
