"""
Hand Tracking Module - MediaPipe Hand Landmark Detection
=========================================================
Detects and tracks a single hand using MediaPipe.
Provides normalized and pixel coordinates for all 21 hand landmarks.

Uses the MediaPipe Tasks API in VIDEO running mode, which tracks between
frames and keeps detection overhead low.
"""

import cv2
import numpy as np
from typing import Tuple, List, Dict, Sequence
from dataclasses import dataclass
from enum import IntEnum
import urllib.request
from pathlib import Path
import time


class HandLandmark(IntEnum):
    """
    MediaPipe hand landmark indices.
    Reference: https://mediapipe.dev/images/mobile/hand_landmarks.png
    """
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


HAND_CONNECTIONS = [
    # Thumb
    (HandLandmark.WRIST, HandLandmark.THUMB_CMC),
    (HandLandmark.THUMB_CMC, HandLandmark.THUMB_MCP),
    (HandLandmark.THUMB_MCP, HandLandmark.THUMB_IP),
    (HandLandmark.THUMB_IP, HandLandmark.THUMB_TIP),
    # Index
    (HandLandmark.WRIST, HandLandmark.INDEX_MCP),
    (HandLandmark.INDEX_MCP, HandLandmark.INDEX_PIP),
    (HandLandmark.INDEX_PIP, HandLandmark.INDEX_DIP),
    (HandLandmark.INDEX_DIP, HandLandmark.INDEX_TIP),
    # Middle
    (HandLandmark.WRIST, HandLandmark.MIDDLE_MCP),
    (HandLandmark.MIDDLE_MCP, HandLandmark.MIDDLE_PIP),
    (HandLandmark.MIDDLE_PIP, HandLandmark.MIDDLE_DIP),
    (HandLandmark.MIDDLE_DIP, HandLandmark.MIDDLE_TIP),
    # Ring
    (HandLandmark.WRIST, HandLandmark.RING_MCP),
    (HandLandmark.RING_MCP, HandLandmark.RING_PIP),
    (HandLandmark.RING_PIP, HandLandmark.RING_DIP),
    (HandLandmark.RING_DIP, HandLandmark.RING_TIP),
    # Pinky
    (HandLandmark.WRIST, HandLandmark.PINKY_MCP),
    (HandLandmark.PINKY_MCP, HandLandmark.PINKY_PIP),
    (HandLandmark.PINKY_PIP, HandLandmark.PINKY_DIP),
    (HandLandmark.PINKY_DIP, HandLandmark.PINKY_TIP),
    # Palm
    (HandLandmark.INDEX_MCP, HandLandmark.MIDDLE_MCP),
    (HandLandmark.MIDDLE_MCP, HandLandmark.RING_MCP),
    (HandLandmark.RING_MCP, HandLandmark.PINKY_MCP),
]

FINGERTIPS = (
    HandLandmark.THUMB_TIP,
    HandLandmark.INDEX_TIP,
    HandLandmark.MIDDLE_TIP,
    HandLandmark.RING_TIP,
    HandLandmark.PINKY_TIP,
)


@dataclass(frozen=True)
class Point:
    """Represents a 2D/3D point with normalized and pixel coordinates."""
    x: float  # Normalized x (0-1)
    y: float  # Normalized y (0-1)
    z: float  # Normalized z (depth)
    px: int   # Pixel x coordinate
    py: int   # Pixel y coordinate

    def planar_distance_to(self, other: 'Point') -> float:
        """Euclidean distance in the image plane, ignoring depth."""
        return float(np.hypot(self.x - other.x, self.y - other.y))


@dataclass(frozen=True)
class HandData:
    """
    One detection result for a single hand.

    Instances are never mutated after creation; a newer detection replaces
    the whole object.

    Attributes:
        landmarks: Dict mapping HandLandmark to Point
        handedness: 'Left' or 'Right'
        confidence: Detection confidence score
        bbox: Bounding box (x, y, w, h) in pixels
    """
    landmarks: Dict[HandLandmark, Point]
    handedness: str
    confidence: float
    bbox: Tuple[int, int, int, int]

    @classmethod
    def from_normalized(
        cls,
        points: Sequence[Sequence[float]],
        width: int = 640,
        height: int = 480,
        handedness: str = "Right",
        confidence: float = 1.0,
        padding: int = 20
    ) -> 'HandData':
        """
        Build a HandData from 21 normalized (x, y[, z]) coordinates.

        Args:
            points: Landmark coordinates in HandLandmark order
            width: Frame width used for pixel coordinates
            height: Frame height used for pixel coordinates
            handedness: 'Left' or 'Right'
            confidence: Detection confidence score
            padding: Bounding box padding in pixels

        Returns:
            HandData with pixel coordinates clamped to the frame
        """
        if len(points) != len(HandLandmark):
            raise ValueError(
                f"expected {len(HandLandmark)} landmarks, got {len(points)}"
            )

        landmarks = {}
        min_x, min_y = float('inf'), float('inf')
        max_x, max_y = 0, 0

        for lm_idx, coords in enumerate(points):
            x, y = float(coords[0]), float(coords[1])
            z = float(coords[2]) if len(coords) > 2 else 0.0

            # Clamp to frame bounds
            px = max(0, min(int(x * width), width - 1))
            py = max(0, min(int(y * height), height - 1))

            landmarks[HandLandmark(lm_idx)] = Point(x=x, y=y, z=z, px=px, py=py)

            min_x = min(min_x, px)
            min_y = min(min_y, py)
            max_x = max(max_x, px)
            max_y = max(max_y, py)

        bbox = (
            max(0, min_x - padding),
            max(0, min_y - padding),
            min(width, max_x - min_x + 2 * padding),
            min(height, max_y - min_y + 2 * padding)
        )

        return cls(
            landmarks=landmarks,
            handedness=handedness,
            confidence=confidence,
            bbox=bbox
        )


def _download_model(model_path: Path) -> None:
    """Download the hand landmarker model if not present."""
    model_url = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"

    print("[INFO] Downloading hand landmarker model...")
    model_path.parent.mkdir(parents=True, exist_ok=True)
    urllib.request.urlretrieve(model_url, model_path)
    print(f"[INFO] Model downloaded to {model_path}")


class HandTracker:
    """
    Hand tracking using MediaPipe Hand Landmarker (Tasks API).

    Uses VIDEO running mode for sequential webcam frames. Confidence
    thresholds default high so that landmark jitter does not flip gestures.
    """

    def __init__(
        self,
        max_hands: int = 1,
        min_detection_confidence: float = 0.8,
        min_tracking_confidence: float = 0.8,
        model_complexity: int = 1  # Kept for API compatibility
    ):
        """
        Initialize the hand tracker.

        Args:
            max_hands: Maximum number of hands to detect
            min_detection_confidence: Minimum confidence for detection
            min_tracking_confidence: Minimum confidence for tracking
            model_complexity: Kept for backward compatibility (not used by
                the Tasks API)
        """
        self.max_hands = max_hands
        self.min_detection_confidence = min_detection_confidence
        self.min_tracking_confidence = min_tracking_confidence
        self.model_complexity = model_complexity

        # Model path - download if not exists
        self._model_dir = Path(__file__).parent.parent / "models"
        self._model_path = self._model_dir / "hand_landmarker.task"

        if not self._model_path.exists():
            _download_model(self._model_path)

        # Imported here so landmark types stay usable without MediaPipe
        import mediapipe as mp
        from mediapipe.tasks import python
        from mediapipe.tasks.python import vision
        self._mp = mp

        base_options = python.BaseOptions(model_asset_path=str(self._model_path))
        options = vision.HandLandmarkerOptions(
            base_options=base_options,
            running_mode=vision.RunningMode.VIDEO,
            num_hands=max_hands,
            min_hand_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
            min_hand_presence_confidence=min_detection_confidence
        )

        self.detector = vision.HandLandmarker.create_from_options(options)

        # Timestamp tracking for VIDEO mode
        self._frame_timestamp_ms = -1
        self._start_time = time.time()

    def _next_timestamp(self) -> int:
        """VIDEO mode rejects timestamps that do not strictly increase."""
        elapsed_ms = int((time.time() - self._start_time) * 1000)
        self._frame_timestamp_ms = max(elapsed_ms, self._frame_timestamp_ms + 1)
        return self._frame_timestamp_ms

    def process(self, frame: np.ndarray) -> List[HandData]:
        """
        Process a frame and detect hands.

        Args:
            frame: BGR image from camera (not mirrored)

        Returns:
            List of HandData objects for each detected hand
        """
        frame_height, frame_width = frame.shape[:2]

        # Convert BGR to RGB for MediaPipe
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = self._mp.Image(image_format=self._mp.ImageFormat.SRGB, data=rgb_frame)

        results = self.detector.detect_for_video(mp_image, self._next_timestamp())

        hands_data = []

        if results.hand_landmarks:
            for idx, hand_landmarks in enumerate(results.hand_landmarks):
                handedness = "Right"
                confidence = 0.0
                if results.handedness and idx < len(results.handedness):
                    hand_info = results.handedness[idx]
                    if hand_info:
                        handedness = hand_info[0].category_name
                        confidence = hand_info[0].score

                points = [
                    (lm.x, lm.y, lm.z if hasattr(lm, 'z') else 0.0)
                    for lm in hand_landmarks
                ]
                hands_data.append(HandData.from_normalized(
                    points,
                    width=frame_width,
                    height=frame_height,
                    handedness=handedness,
                    confidence=confidence
                ))

        return hands_data

    def release(self):
        """Release resources."""
        if self.detector:
            self.detector.close()
            self.detector = None


def draw_landmarks(
    frame: np.ndarray,
    hand_data: HandData,
    draw_connections: bool = True,
    landmark_color: Tuple[int, int, int] = (0, 255, 0),
    connection_color: Tuple[int, int, int] = (255, 255, 255),
    thickness: int = 2
) -> np.ndarray:
    """
    Draw hand landmarks on frame.

    Args:
        frame: Image to draw on
        hand_data: Hand data to visualize
        draw_connections: Whether to draw connections between landmarks
        landmark_color: BGR color for landmarks
        connection_color: BGR color for connections
        thickness: Line thickness

    Returns:
        Frame with landmarks drawn
    """
    h, w = frame.shape[:2]

    def to_pixels(point: Point) -> Tuple[int, int]:
        # Preview frames may be scaled relative to the detection frame
        return (int(point.x * w), int(point.y * h))

    if draw_connections:
        for start, end in HAND_CONNECTIONS:
            p1 = hand_data.landmarks.get(start)
            p2 = hand_data.landmarks.get(end)
            if p1 and p2:
                cv2.line(frame, to_pixels(p1), to_pixels(p2),
                         connection_color, thickness)

    for landmark, point in hand_data.landmarks.items():
        if landmark in FINGERTIPS:
            color = (0, 0, 255)  # Red for fingertips
            radius = 6
        else:
            color = landmark_color
            radius = 4

        cv2.circle(frame, to_pixels(point), radius, color, -1)
        cv2.circle(frame, to_pixels(point), radius, (0, 0, 0), 1)

    return frame


if __name__ == "__main__":
    # Test hand tracking module
    from camera import Camera

    print("Testing Hand Tracking Module")
    print("=" * 40)
    print("Press 'q' to quit")

    with Camera() as cam:
        tracker = HandTracker(max_hands=1)

        while True:
            frame = cam.get_frame()
            if frame is None:
                continue

            hands = tracker.process(frame)

            for hand in hands:
                frame = draw_landmarks(frame, hand)

            frame = cv2.flip(frame, 1)
            fps = cam.get_fps()
            cv2.putText(frame, f"FPS: {fps:.1f}", (frame.shape[1] - 120, 30),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0), 2)

            cv2.imshow("Hand Tracking Test", frame)

            if cv2.waitKey(1) & 0xFF == ord('q'):
                break

        tracker.release()
        cv2.destroyAllWindows()
