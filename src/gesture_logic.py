"""
Gesture Logic Module - Gesture Classification
==============================================
Maps per-frame hand measurements to one of four building gestures.

Classification is stateless: each frame is judged on its own measurements.
The only state carried between frames is the placement cooldown, which
keeps a held pinch from stamping a block every frame.
"""

import numpy as np
from typing import Optional
from enum import Enum

from landmarks import Measurement


class Gesture(Enum):
    """Recognized gestures, valued by their on-screen label."""
    IDLE = "IDLE (MOVE HAND)"        # Nothing recognized
    NAVIGATING = "NAVIGATING"        # Thumb + middle pinch - orbit camera
    BUILDING = "BUILDING"            # Thumb + index pinch - place block
    CLEARING = "FIST: CLEARING ALL"  # Tight fist - remove every block

    @property
    def label(self) -> str:
        return self.value


class GestureClassifier:
    """
    Priority-ordered gesture classifier.

    Gestures overlap at the measurement level, so they are checked in a
    fixed order and the first match wins: fist, navigate pinch, build
    pinch. A relaxed middle-finger pinch often brings the index close to
    the thumb too, so the navigate pinch is checked first.
    """

    # Distance thresholds (in normalized coordinates)
    FIST_THRESHOLD = 0.15   # Every fingertip this close to the wrist
    PINCH_THRESHOLD = 0.05  # Fingertip to thumb tip

    def __init__(
        self,
        fist_threshold: Optional[float] = None,
        pinch_threshold: Optional[float] = None
    ):
        """
        Initialize the classifier.

        Args:
            fist_threshold: Override for FIST_THRESHOLD
            pinch_threshold: Override for PINCH_THRESHOLD
        """
        self.fist_threshold = self.FIST_THRESHOLD if fist_threshold is None else fist_threshold
        self.pinch_threshold = self.PINCH_THRESHOLD if pinch_threshold is None else pinch_threshold

    def is_fist(self, measurement: Measurement) -> bool:
        return bool(np.all(np.asarray(measurement.fist_distances) < self.fist_threshold))

    def is_navigate_pinch(self, measurement: Measurement) -> bool:
        return measurement.navigate_pinch < self.pinch_threshold

    def is_build_pinch(self, measurement: Measurement) -> bool:
        return measurement.build_pinch < self.pinch_threshold

    def classify(self, measurement: Optional[Measurement]) -> Gesture:
        """
        Classify one frame.

        Args:
            measurement: Hand measurements, or None when no hand is visible

        Returns:
            The winning Gesture
        """
        if measurement is None:
            return Gesture.IDLE

        if self.is_fist(measurement):
            return Gesture.CLEARING

        if self.is_navigate_pinch(measurement):
            return Gesture.NAVIGATING

        if self.is_build_pinch(measurement):
            return Gesture.BUILDING

        return Gesture.IDLE


class PlacementCooldown:
    """
    Wall-clock gate between block placements.

    Re-armed on every placement attempt, whether or not the block store
    accepted the block.
    """

    INTERVAL = 0.5  # Seconds

    def __init__(self, interval: Optional[float] = None):
        self.interval = self.INTERVAL if interval is None else interval
        self._last_placement: Optional[float] = None

    @property
    def last_placement(self) -> Optional[float]:
        return self._last_placement

    def ready(self, now: float) -> bool:
        """True once the interval has fully elapsed since the last attempt."""
        if self._last_placement is None:
            return True
        return now - self._last_placement >= self.interval

    def arm(self, now: float):
        self._last_placement = now

    def reset(self):
        self._last_placement = None


def draw_gesture_ui(frame: np.ndarray, gesture: Gesture) -> np.ndarray:
    """
    Draw the current gesture label in a box at the top left of the frame.

    Args:
        frame: Image to draw on
        gesture: Gesture to display

    Returns:
        Frame with gesture label overlay
    """
    import cv2

    colors = {
        Gesture.IDLE: (200, 200, 200),
        Gesture.NAVIGATING: (0, 200, 255),
        Gesture.BUILDING: (255, 242, 0),
        Gesture.CLEARING: (0, 0, 255),
    }
    color = colors.get(gesture, (255, 255, 255))

    (text_w, text_h), _ = cv2.getTextSize(
        gesture.label, cv2.FONT_HERSHEY_SIMPLEX, 0.8, 2
    )
    box_w = text_w + 30
    box_h = text_h + 24

    cv2.rectangle(frame, (10, 10), (10 + box_w, 10 + box_h), (0, 0, 0), -1)
    cv2.rectangle(frame, (10, 10), (10 + box_w, 10 + box_h), color, 2)
    cv2.putText(
        frame, gesture.label,
        (25, 10 + box_h - 12),
        cv2.FONT_HERSHEY_SIMPLEX, 0.8, color, 2
    )

    return frame
