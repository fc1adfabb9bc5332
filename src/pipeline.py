"""
Pipeline Module - Per-Frame Orchestration
==========================================
Runs one step of the gesture-to-world pipeline per rendered frame:

1. Pull the latest hand detection from the mailbox
2. Measure the hand
3. Classify the gesture and apply it (clear / orbit / place block)
4. Ease the smoothed pointer toward the raw pointer
5. Move the camera
6. Re-project the cursor
7. Hand the result to the renderer

Gesture effects and zoom run once per new detection, so a render loop
faster than the detector does not replay the same gesture.
"""

import time
from typing import Callable, Optional, Tuple
from dataclasses import dataclass, field

from cursor import Cursor, CursorProjector, Vector
from detection import HandFrameMailbox
from gesture_logic import Gesture, GestureClassifier, PlacementCooldown
from hand_tracking import HandData
from landmarks import Measurement, normalize
from orbit_camera import OrbitCamera
from voxel_store import VoxelStore


@dataclass
class AppState:
    """
    Everything the pipeline mutates between frames.

    The raw pointer only changes when a hand is visible; the smoothed
    pointer keeps easing toward the last known raw pointer otherwise.
    """
    camera: OrbitCamera = field(default_factory=OrbitCamera)
    voxels: VoxelStore = field(default_factory=VoxelStore)
    cursor: CursorProjector = field(default_factory=CursorProjector)
    cooldown: PlacementCooldown = field(default_factory=PlacementCooldown)
    raw_pointer: Tuple[float, float] = (0.0, 0.0)
    smoothed_pointer: Tuple[float, float] = (0.0, 0.0)
    gesture: Gesture = Gesture.IDLE
    hand: Optional[HandData] = None
    last_sequence: int = 0


@dataclass(frozen=True)
class RenderFrame:
    """Snapshot handed to the renderer each frame, viewed through its own camera copy."""
    camera: OrbitCamera
    voxels: Tuple[Vector, ...]
    cursor: Cursor
    gesture: Gesture
    hand: Optional[HandData]

    @property
    def label(self) -> str:
        return self.gesture.label


class FrameOrchestrator:
    """
    Drives the pipeline from the render loop.

    tick() must not be called concurrently with itself; the detection
    thread only ever touches the mailbox.
    """

    POINTER_SMOOTHING = 0.15

    def __init__(
        self,
        mailbox: HandFrameMailbox,
        aspect: float = 16 / 9,
        classifier: Optional[GestureClassifier] = None,
        state: Optional[AppState] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Args:
            mailbox: Source of hand detections
            aspect: Viewport width / height
            classifier: Gesture classifier, defaults to GestureClassifier()
            state: Starting state, defaults to an empty scene
            clock: Seconds source for the placement cooldown
        """
        self.mailbox = mailbox
        self.classifier = classifier or GestureClassifier()
        self.state = state or AppState()
        self.state.camera.aspect = aspect
        self.clock = clock

    def tick(self) -> RenderFrame:
        """Advance one frame and return what to draw."""
        state = self.state

        sequence, hand = self.mailbox.latest()
        if sequence != state.last_sequence:
            state.last_sequence = sequence
            state.hand = hand
            self._apply(normalize(hand))

        state.smoothed_pointer = self._smooth(state.smoothed_pointer, state.raw_pointer)

        camera = state.camera
        state.cursor.update(camera, state.smoothed_pointer, state.voxels.all())

        return RenderFrame(
            camera=camera.snapshot(),
            voxels=state.voxels.all(),
            cursor=state.cursor.cursor,
            gesture=state.gesture,
            hand=state.hand,
        )

    def _apply(self, measurement: Optional[Measurement]):
        """Apply one fresh detection: zoom, then the winning gesture."""
        state = self.state

        if measurement is not None:
            state.raw_pointer = measurement.pointer
            state.camera.zoom(measurement.hand_scale)

        gesture = self.classifier.classify(measurement)
        state.gesture = gesture

        if gesture is Gesture.CLEARING:
            removed = state.voxels.clear_all()
            if removed:
                print(f"[INFO] Cleared {removed} blocks")

        elif gesture is Gesture.NAVIGATING:
            state.camera.orbit(state.smoothed_pointer)

        elif gesture is Gesture.BUILDING:
            now = self.clock()
            if state.cooldown.ready(now):
                # Cursor still holds last frame's projection
                position = state.cursor.position
                if state.voxels.add(position):
                    print(f"[INFO] Placed block at {position}")
                state.cooldown.arm(now)

    def _smooth(
        self,
        current: Tuple[float, float],
        target: Tuple[float, float]
    ) -> Tuple[float, float]:
        a = self.POINTER_SMOOTHING
        return (
            current[0] + (target[0] - current[0]) * a,
            current[1] + (target[1] - current[1]) * a,
        )

    def clear(self) -> int:
        """Remove every block (keyboard shortcut)."""
        return self.state.voxels.clear_all()

    def reset_view(self):
        """Return the camera to its starting orbit."""
        self.state.camera.reset()
