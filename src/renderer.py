"""
Renderer Module - Scene Drawing
================================
Draws the voxel scene with OpenCV: floor grid, shaded translucent blocks,
the wireframe cursor and the HUD (gesture label, block count, FPS and a
mirrored webcam preview).

Blocks are drawn back to front (painter's algorithm) with back faces
culled, which is enough for an axis-aligned grid of unit cubes.
"""

import cv2
import numpy as np
from typing import List, Optional, Sequence, Tuple

from gesture_logic import draw_gesture_ui
from hand_tracking import draw_landmarks
from orbit_camera import OrbitCamera
from pipeline import RenderFrame


# Cube corners as (dx, dy, dz) offsets from the center; bit 0 = x, 1 = y, 2 = z
CUBE_CORNERS = np.array(
    [[(i & 1) - 0.5, ((i >> 1) & 1) - 0.5, ((i >> 2) & 1) - 0.5] for i in range(8)]
)

# Corner cycles per face, with the outward normal
CUBE_FACES = [
    ((0, 2, 6, 4), (-1.0, 0.0, 0.0)),
    ((1, 3, 7, 5), (1.0, 0.0, 0.0)),
    ((0, 1, 5, 4), (0.0, -1.0, 0.0)),
    ((2, 3, 7, 6), (0.0, 1.0, 0.0)),
    ((0, 1, 3, 2), (0.0, 0.0, -1.0)),
    ((4, 5, 7, 6), (0.0, 0.0, 1.0)),
]

CUBE_EDGES = [
    (i, i | bit) for i in range(8) for bit in (1, 2, 4) if not i & bit
]


class SceneRenderer:
    """
    Software renderer for the voxel scene.

    Colors are BGR.
    """

    BACKGROUND_COLOR = (5, 2, 2)
    GRID_COLOR = (34, 34, 34)
    GRID_CENTER_COLOR = (255, 242, 0)
    VOXEL_COLOR = (255, 242, 0)
    EDGE_COLOR = (255, 255, 255)
    CURSOR_COLOR = (255, 242, 0)
    TEXT_COLOR = (255, 255, 255)

    GRID_SIZE = 20
    VOXEL_OPACITY = 0.8

    # Lighting
    AMBIENT = 0.6
    DIFFUSE = 0.4
    LIGHT_POSITION = np.array([10.0, 10.0, 10.0])

    PREVIEW_SCALE = 0.25

    def __init__(self, width: int = 960, height: int = 540):
        """
        Args:
            width: Output image width in pixels
            height: Output image height in pixels
        """
        self.width = width
        self.height = height

    @property
    def aspect(self) -> float:
        return self.width / self.height

    def render(
        self,
        scene: RenderFrame,
        preview: Optional[np.ndarray] = None,
        fps: Optional[float] = None,
        detection_fps: Optional[float] = None
    ) -> np.ndarray:
        """
        Draw one frame.

        Args:
            scene: Pipeline output for this frame, including the camera it
                is viewed through
            preview: Raw webcam frame for the inset, or None to hide it
            fps: Render rate to display, or None to hide it
            detection_fps: Hand detection rate to display, or None to hide it

        Returns:
            BGR image of size (height, width)
        """
        camera = scene.camera
        image = np.full((self.height, self.width, 3), self.BACKGROUND_COLOR, dtype=np.uint8)

        self._draw_grid(image, camera)
        image = self._draw_voxels(image, camera, scene.voxels)
        self._draw_wire_cube(image, camera, scene.cursor.position, self.CURSOR_COLOR, 2)
        self._draw_hud(image, scene, fps, detection_fps)

        if preview is not None:
            self._draw_preview(image, preview, scene)

        return image

    def _clip_segment(
        self,
        camera: OrbitCamera,
        a: np.ndarray,
        b: np.ndarray
    ) -> Optional[Tuple[Tuple[int, int], Tuple[int, int]]]:
        """Project a world segment, trimming any part behind the near plane."""
        _, depth = camera.project(np.array([a, b]), self.width, self.height)
        near = camera.NEAR
        da, db = depth

        if da < near and db < near:
            return None
        if da < near:
            a = a + (b - a) * (near - da) / (db - da)
        elif db < near:
            b = b + (a - b) * (near - db) / (da - db)

        pixels, _ = camera.project(np.array([a, b]), self.width, self.height)
        p1, p2 = np.round(pixels).astype(int)
        return (int(p1[0]), int(p1[1])), (int(p2[0]), int(p2[1]))

    def _draw_grid(self, image: np.ndarray, camera: OrbitCamera):
        half = self.GRID_SIZE // 2
        for i in range(-half, half + 1):
            color = self.GRID_CENTER_COLOR if i == 0 else self.GRID_COLOR
            for a, b in (
                ((i, 0, -half), (i, 0, half)),
                ((-half, 0, i), (half, 0, i)),
            ):
                segment = self._clip_segment(camera, np.array(a, float), np.array(b, float))
                if segment:
                    cv2.line(image, segment[0], segment[1], color, 1, cv2.LINE_AA)

    def _shade(self, color: Sequence[int], center: np.ndarray, normal: np.ndarray) -> Tuple[int, int, int]:
        to_light = self.LIGHT_POSITION - center
        to_light /= np.linalg.norm(to_light)
        intensity = min(1.0, self.AMBIENT + self.DIFFUSE * max(0.0, float(normal @ to_light)))
        return tuple(int(c * intensity) for c in color)

    def _visible_faces(
        self,
        camera: OrbitCamera,
        voxels: Sequence[Sequence[float]]
    ) -> List[Tuple[float, np.ndarray, Tuple[int, int, int]]]:
        """Front faces of every block as (depth, polygon, color)."""
        eye = camera.position()
        faces = []

        for center in voxels:
            center = np.asarray(center, dtype=float)
            corners = CUBE_CORNERS + center
            pixels, depth = camera.project(corners, self.width, self.height)

            for indices, normal in CUBE_FACES:
                normal = np.array(normal)
                face_center = center + normal * 0.5
                if normal @ (eye - face_center) <= 0:
                    continue

                idx = list(indices)
                if np.any(depth[idx] < camera.NEAR):
                    continue

                polygon = np.round(pixels[idx]).astype(np.int32)
                color = self._shade(self.VOXEL_COLOR, face_center, normal)
                faces.append((float(depth[idx].mean()), polygon, color))

        faces.sort(key=lambda face: face[0], reverse=True)
        return faces

    def _draw_voxels(
        self,
        image: np.ndarray,
        camera: OrbitCamera,
        voxels: Sequence[Sequence[float]]
    ) -> np.ndarray:
        faces = self._visible_faces(camera, voxels)
        if not faces:
            return image

        layer = image.copy()
        for _, polygon, color in faces:
            cv2.fillConvexPoly(layer, polygon, color, cv2.LINE_AA)
            cv2.polylines(layer, [polygon], True, self.EDGE_COLOR, 1, cv2.LINE_AA)

        return cv2.addWeighted(layer, self.VOXEL_OPACITY, image, 1 - self.VOXEL_OPACITY, 0)

    def _draw_wire_cube(
        self,
        image: np.ndarray,
        camera: OrbitCamera,
        center: Sequence[float],
        color: Tuple[int, int, int],
        thickness: int = 1
    ):
        corners = CUBE_CORNERS + np.asarray(center, dtype=float)
        for i, j in CUBE_EDGES:
            segment = self._clip_segment(camera, corners[i], corners[j])
            if segment:
                cv2.line(image, segment[0], segment[1], color, thickness, cv2.LINE_AA)

    def _draw_hud(
        self,
        image: np.ndarray,
        scene: RenderFrame,
        fps: Optional[float],
        detection_fps: Optional[float]
    ):
        draw_gesture_ui(image, scene.gesture)

        cv2.putText(
            image, f"Blocks: {len(scene.voxels)}",
            (20, 80), cv2.FONT_HERSHEY_SIMPLEX, 0.6, self.TEXT_COLOR, 1
        )

        if fps is not None:
            cv2.putText(
                image, f"FPS: {fps:.1f}",
                (self.width - 120, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.6,
                (0, 255, 0), 2
            )

        if detection_fps is not None:
            cv2.putText(
                image, f"Hands: {detection_fps:.1f}/s",
                (self.width - 150, 55), cv2.FONT_HERSHEY_SIMPLEX, 0.5,
                (0, 200, 0), 1
            )

        instructions = "[C] Clear | [R] Reset view | [P] Preview | [Q] Quit"
        cv2.putText(
            image, instructions,
            (20, self.height - 15), cv2.FONT_HERSHEY_SIMPLEX, 0.45,
            (150, 150, 150), 1
        )

    def _draw_preview(self, image: np.ndarray, preview: np.ndarray, scene: RenderFrame):
        """Mirrored webcam inset in the bottom right corner."""
        inset_w = int(self.width * self.PREVIEW_SCALE)
        inset_h = int(inset_w * preview.shape[0] / preview.shape[1])
        if inset_w <= 0 or inset_h <= 0 or inset_h > self.height - 20:
            return

        inset = cv2.resize(preview, (inset_w, inset_h))
        if scene.hand is not None:
            inset = draw_landmarks(inset, scene.hand, thickness=1)
        inset = cv2.flip(inset, 1)

        x = self.width - inset_w - 10
        y = self.height - inset_h - 40
        image[y:y + inset_h, x:x + inset_w] = inset
        cv2.rectangle(image, (x - 1, y - 1), (x + inset_w, y + inset_h), self.GRID_CENTER_COLOR, 1)
