"""
Cursor Module - Pointing Into The Scene
========================================
Casts a ray from the camera through the pointer, finds what it strikes
first (the floor or a block face) and turns that into the grid cell where
the next block would go.

- Floor hit: the cell under the hit point, resting on the floor.
- Block hit: the neighbouring cell on the struck face, so blocks always
  attach to the visible side and never overlap.
- No hit: the cursor stays where it was.
"""

import math
import numpy as np
from typing import Iterable, Optional, Sequence, Tuple
from dataclasses import dataclass


Vector = Tuple[float, float, float]

FLOOR_NORMAL: Vector = (0.0, 1.0, 0.0)


@dataclass(frozen=True)
class Ray:
    """Half-line with a unit direction."""
    origin: np.ndarray
    direction: np.ndarray

    def at(self, distance: float) -> np.ndarray:
        return self.origin + self.direction * distance


@dataclass(frozen=True)
class RayHit:
    """
    Nearest intersection along a ray.

    Attributes:
        distance: Distance from the ray origin
        point: World position of the hit
        normal: Outward normal of the struck surface
        voxel: Center of the struck block, or None for the floor
    """
    distance: float
    point: np.ndarray
    normal: Vector
    voxel: Optional[Vector] = None

    @property
    def is_floor(self) -> bool:
        return self.voxel is None


@dataclass(frozen=True)
class Cursor:
    """Where the next block goes, plus the normal of the surface it came from."""
    position: Vector = (0.0, 0.5, 0.0)
    normal: Vector = FLOOR_NORMAL


FLOOR_SIZE = 20.0   # Floor is a square of this side centered on the origin
VOXEL_SIZE = 1.0


def intersect_floor(ray: Ray, size: float = FLOOR_SIZE) -> Optional[RayHit]:
    """
    Intersect the ray with the floor square at y = 0.

    The floor is one-sided and only counts when struck from above.
    """
    dy = ray.direction[1]
    if dy >= 0 or ray.origin[1] <= 0:
        return None

    distance = -ray.origin[1] / dy
    point = ray.at(distance)

    half = size / 2
    if abs(point[0]) > half or abs(point[2]) > half:
        return None

    return RayHit(distance=float(distance), point=point, normal=FLOOR_NORMAL)


def intersect_voxel(
    ray: Ray,
    center: Sequence[float],
    size: float = VOXEL_SIZE
) -> Optional[RayHit]:
    """
    Intersect the ray with an axis-aligned block (slab method).

    Only outside faces count: a ray starting inside the block, or a block
    entirely behind the origin, is a miss.
    """
    center = np.asarray(center, dtype=float)
    lo = center - size / 2
    hi = center + size / 2

    t_near, t_far = -math.inf, math.inf
    hit_axis = -1

    for axis in range(3):
        o = ray.origin[axis]
        d = ray.direction[axis]

        if abs(d) < 1e-12:
            # Parallel to this slab
            if o < lo[axis] or o > hi[axis]:
                return None
            continue

        t1 = (lo[axis] - o) / d
        t2 = (hi[axis] - o) / d
        if t1 > t2:
            t1, t2 = t2, t1

        if t1 > t_near:
            t_near = t1
            hit_axis = axis
        t_far = min(t_far, t2)

        if t_near > t_far:
            return None

    if hit_axis < 0 or t_near <= 0:
        return None

    normal = [0.0, 0.0, 0.0]
    normal[hit_axis] = -1.0 if ray.direction[hit_axis] > 0 else 1.0

    return RayHit(
        distance=float(t_near),
        point=ray.at(t_near),
        normal=tuple(normal),
        voxel=tuple(float(c) for c in center),
    )


def cast(ray: Ray, voxels: Iterable[Sequence[float]]) -> Optional[RayHit]:
    """
    Find the nearest thing the ray strikes.

    The floor is tested first and wins exact ties.
    """
    nearest = intersect_floor(ray)

    for center in voxels:
        hit = intersect_voxel(ray, center)
        if hit is not None and (nearest is None or hit.distance < nearest.distance):
            nearest = hit

    return nearest


def snap(value: float) -> float:
    """Round to the nearest grid line, halves upward."""
    return float(math.floor(value + 0.5))


def resolve_hit(hit: RayHit) -> Cursor:
    """
    Turn a ray hit into a placement cell.

    Args:
        hit: Nearest intersection

    Returns:
        Cursor with the target cell center and the struck surface normal
    """
    if hit.is_floor:
        return Cursor(
            position=(snap(hit.point[0]), VOXEL_SIZE / 2, snap(hit.point[2])),
            normal=hit.normal,
        )

    position = tuple(
        float(c + n * VOXEL_SIZE) for c, n in zip(hit.voxel, hit.normal)
    )
    return Cursor(position=position, normal=hit.normal)


class CursorProjector:
    """
    Owns the cursor and re-projects it from the pointer every frame.

    The camera is anything with ray_through(ndc) returning a Ray.
    """

    def __init__(self, cursor: Optional[Cursor] = None):
        self.cursor = cursor if cursor is not None else Cursor()
        self.last_hit: Optional[RayHit] = None

    @property
    def position(self) -> Vector:
        return self.cursor.position

    def update(self, camera, pointer: Tuple[float, float], voxels: Iterable[Sequence[float]]) -> bool:
        """
        Re-project the cursor.

        Args:
            camera: Scene camera
            pointer: Smoothed pointer in NDC
            voxels: Block centers to test against

        Returns:
            True if the cursor moved to a new hit, False if the ray missed
            and the previous cursor was kept
        """
        hit = cast(camera.ray_through(pointer), voxels)
        if hit is None:
            return False

        self.cursor = resolve_hit(hit)
        self.last_hit = hit
        return True

    def reset(self):
        self.cursor = Cursor()
        self.last_hit = None
