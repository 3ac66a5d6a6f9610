"""Single fixed-distance perspective projection used by the sphere."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Protocol

from ..config import FOCAL_DISTANCE, SPHERE_RADIUS

__all__ = ["ProjectedPoint", "Projector", "clamp01", "project_point"]


class _HasCoords(Protocol):
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class ProjectedPoint:
    """Screen position of a point for one frame.

    ``scale`` is the perspective factor applied to the node radius and
    ``opacity`` the depth visibility in ``[0, 1]``, growing toward the viewer.
    """

    sx: float
    sy: float
    scale: float
    opacity: float


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def project_point(
    x: float,
    y: float,
    z: float,
    width: float,
    height: float,
    focal: float = FOCAL_DISTANCE,
    radius: float = SPHERE_RADIUS,
) -> ProjectedPoint:
    denom = focal + z
    if denom <= 0.0:
        raise ValueError(f"point at z={z} lies behind the focal plane (focal={focal})")
    scale = focal / denom
    return ProjectedPoint(
        sx=width / 2 + x * scale,
        sy=height / 2 + y * scale,
        scale=scale,
        opacity=clamp01((z + radius) / (2 * radius)),
    )


class Projector:
    """Maps rotated points to viewport coordinates centred on the surface."""

    def __init__(self, focal: float = FOCAL_DISTANCE, radius: float = SPHERE_RADIUS) -> None:
        self.focal = float(focal)
        self.radius = float(radius)

    def project(self, point: _HasCoords, width: float, height: float) -> ProjectedPoint:
        return project_point(point.x, point.y, point.z, width, height, self.focal, self.radius)

    def project_all(self, points: Iterable[_HasCoords], width: float, height: float) -> List[ProjectedPoint]:
        return [self.project(p, width, height) for p in points]
