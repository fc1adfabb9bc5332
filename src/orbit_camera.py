"""
Orbit Camera Module - Scene Camera Controller
==============================================
Keeps the scene camera on an orbit around the world origin.

The orbit is driven by two independent rules:
- Zoom follows the apparent hand size whenever a hand is visible
  (a closer hand looks bigger and pulls the camera in).
- Orbit angle and height follow the pointer while navigating.

The camera always looks at the origin with +Y up. It also provides the
perspective math used for ray casting and for drawing the scene.
"""

import math
import numpy as np
from typing import Optional, Tuple
from dataclasses import dataclass, replace

from cursor import Ray


WORLD_UP = np.array([0.0, 1.0, 0.0])


@dataclass
class OrbitParameters:
    """
    Orbit state.

    Attributes:
        angle: Orbit angle around the Y axis in radians
        height: Camera height above the floor
        radius: Horizontal distance from the origin
    """
    angle: float = math.pi / 4
    height: float = 8.0
    radius: float = 15.0


class OrbitCamera:
    """Perspective camera orbiting the world origin."""

    # Lens
    FOV_DEGREES = 75.0
    NEAR = 0.1
    FAR = 1000.0

    # Zoom: target radius = ZOOM_BASE - hand_scale * ZOOM_GAIN
    ZOOM_BASE = 30.0
    ZOOM_GAIN = 100.0
    ZOOM_SMOOTHING = 0.1
    RADIUS_MIN = 5.0
    RADIUS_MAX = 25.0

    # Orbit gains per navigating frame
    ANGLE_GAIN = 0.05
    HEIGHT_GAIN = 0.2
    HEIGHT_MIN = 2.0
    HEIGHT_MAX = 15.0

    def __init__(self, aspect: float = 16 / 9, params: Optional[OrbitParameters] = None):
        """
        Args:
            aspect: Viewport width / height
            params: Starting orbit, defaults to OrbitParameters()
        """
        self.aspect = aspect
        self.params = params if params is not None else OrbitParameters()

    def zoom(self, hand_scale: float) -> float:
        """
        Ease the radius toward the hand-size target, then clamp it.

        Args:
            hand_scale: Pinky base to thumb base distance

        Returns:
            The new radius
        """
        target = self.ZOOM_BASE - hand_scale * self.ZOOM_GAIN
        radius = self.params.radius + (target - self.params.radius) * self.ZOOM_SMOOTHING
        self.params.radius = float(np.clip(radius, self.RADIUS_MIN, self.RADIUS_MAX))
        return self.params.radius

    def orbit(self, pointer: Tuple[float, float]):
        """
        Swing the camera around the origin and raise or lower it.

        Args:
            pointer: Pointer position in NDC
        """
        self.params.angle += pointer[0] * self.ANGLE_GAIN
        self.params.height = float(np.clip(
            self.params.height + pointer[1] * self.HEIGHT_GAIN,
            self.HEIGHT_MIN, self.HEIGHT_MAX
        ))

    def reset(self):
        """Return to the starting orbit."""
        self.params = OrbitParameters()

    def snapshot(self) -> "OrbitCamera":
        """Independent copy of the current view."""
        return OrbitCamera(self.aspect, replace(self.params))

    def position(self) -> np.ndarray:
        p = self.params
        return np.array([
            p.radius * math.sin(p.angle),
            p.height,
            p.radius * math.cos(p.angle),
        ])

    def basis(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Camera axes for a camera looking at the origin.

        Returns:
            Tuple of unit vectors (right, up, forward)
        """
        forward = -self.position()
        forward /= np.linalg.norm(forward)
        right = np.cross(forward, WORLD_UP)
        right /= np.linalg.norm(right)
        up = np.cross(right, forward)
        return right, up, forward

    @property
    def _tan_half_fov(self) -> float:
        return math.tan(math.radians(self.FOV_DEGREES) / 2)

    def ray_through(self, ndc: Tuple[float, float]) -> Ray:
        """
        Build the ray from the camera through a point on the screen.

        Args:
            ndc: Screen point in normalized device coordinates

        Returns:
            Ray starting at the camera position
        """
        right, up, forward = self.basis()
        t = self._tan_half_fov
        direction = (
            forward
            + ndc[0] * t * self.aspect * right
            + ndc[1] * t * up
        )
        return Ray(origin=self.position(), direction=direction / np.linalg.norm(direction))

    def project(
        self,
        points: np.ndarray,
        width: int,
        height: int
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Project world points to pixel coordinates.

        Args:
            points: Array of shape (N, 3) in world space
            width: Viewport width in pixels
            height: Viewport height in pixels

        Returns:
            Tuple of (pixels (N, 2), depth (N,)). Depth is the distance
            along the view axis; points with depth below NEAR are behind
            the lens and their pixels are meaningless.
        """
        right, up, forward = self.basis()
        rel = np.asarray(points, dtype=float) - self.position()
        cam_x = rel @ right
        cam_y = rel @ up
        depth = rel @ forward

        safe = np.where(np.abs(depth) < 1e-9, 1e-9, depth)
        t = self._tan_half_fov
        ndc_x = cam_x / (safe * t * self.aspect)
        ndc_y = cam_y / (safe * t)

        pixels = np.stack([
            (ndc_x + 1) * 0.5 * width,
            (1 - ndc_y) * 0.5 * height,
        ], axis=-1)
        return pixels, depth
