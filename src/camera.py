"""
Camera Module - Webcam Stream Handler
======================================
Handles webcam capture on a background thread so the render loop always
finds the most recent frame without waiting on the device.
"""

import cv2
import numpy as np
from typing import Optional, Tuple
import sys
import threading
import time


def _capture_backend() -> int:
    """DirectShow opens fastest on Windows; elsewhere let OpenCV choose."""
    return cv2.CAP_DSHOW if sys.platform == "win32" else cv2.CAP_ANY


class Camera:
    """
    Webcam stream handler with threading support for smooth frame capture.

    Attributes:
        camera_id: Index of the camera device (default 0)
        width: Frame width in pixels
        height: Frame height in pixels
        fps: Target frames per second
        mirror: Flip frames horizontally on capture. Leave off when frames
            feed the hand tracker; the landmark normalizer mirrors itself.
    """

    def __init__(
        self,
        camera_id: int = 0,
        width: int = 640,
        height: int = 480,
        fps: int = 30,
        mirror: bool = False
    ):
        """
        Initialize the camera with specified parameters.

        Args:
            camera_id: Camera device index
            width: Desired frame width
            height: Desired frame height
            fps: Target frame rate
            mirror: Whether to flip captured frames horizontally
        """
        self.camera_id = camera_id
        self.width = width
        self.height = height
        self.fps = fps
        self.mirror = mirror

        self.cap: Optional[cv2.VideoCapture] = None

        # Threading components for non-blocking capture
        self._frame: Optional[np.ndarray] = None
        self._frame_lock = threading.Lock()
        self._running = False
        self._thread: Optional[threading.Thread] = None

        # Performance metrics
        self._actual_fps = 0.0
        self._frame_count = 0
        self._start_time = 0.0

    def start(self) -> bool:
        """
        Start the camera capture.

        Returns:
            True if camera started successfully, False otherwise
        """
        self.cap = cv2.VideoCapture(self.camera_id, _capture_backend())

        if not self.cap.isOpened():
            print(f"[ERROR] Failed to open camera {self.camera_id}")
            self.cap.release()
            self.cap = None
            return False

        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.fps)

        # Set buffer size to 1 for minimum latency
        self.cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        # Get actual resolution (may differ from requested)
        self.width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))

        print(f"[INFO] Camera started: {self.width}x{self.height} @ {self.fps}fps")

        self._running = True
        self._start_time = time.time()
        self._thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._thread.start()

        return True

    def _capture_loop(self):
        """
        Internal capture loop running in separate thread.
        Continuously captures frames to ensure we always have the latest frame.
        """
        while self._running:
            ret, frame = self.cap.read()

            if ret:
                if self.mirror:
                    frame = cv2.flip(frame, 1)

                with self._frame_lock:
                    self._frame = frame
                    self._frame_count += 1
            else:
                time.sleep(0.001)  # Small delay to prevent busy waiting

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        """
        Read the latest captured frame.

        Returns:
            Tuple of (success: bool, frame: np.ndarray or None)
        """
        with self._frame_lock:
            if self._frame is None:
                return False, None
            return True, self._frame.copy()

    def get_frame(self) -> Optional[np.ndarray]:
        """Get the latest frame, or None if nothing was captured yet."""
        ret, frame = self.read()
        return frame if ret else None

    def read_latest(self) -> Tuple[int, Optional[np.ndarray]]:
        """
        Read the latest frame together with its capture number.

        Both come from the same lock acquisition, so the number always
        belongs to the returned frame.

        Returns:
            Tuple of (frame_count, frame copy or None)
        """
        with self._frame_lock:
            if self._frame is None:
                return self._frame_count, None
            return self._frame_count, self._frame.copy()

    def get_fps(self) -> float:
        """
        Calculate and return actual capture FPS.

        Returns:
            Current frames per second
        """
        elapsed = time.time() - self._start_time
        if elapsed > 0:
            self._actual_fps = self._frame_count / elapsed
        return self._actual_fps

    @property
    def frame_count(self) -> int:
        """Number of frames captured since start."""
        with self._frame_lock:
            return self._frame_count

    def stop(self):
        """Stop the camera capture and release resources."""
        self._running = False

        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

        if self.cap is not None:
            self.cap.release()
            self.cap = None

        print("[INFO] Camera stopped")

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.stop()
        return False


if __name__ == "__main__":
    # Test camera module
    print("Testing Camera Module")
    print("=" * 40)
    print("Press 'q' to quit")

    with Camera(mirror=True) as cam:
        start = time.time()
        while time.time() - start < 10:  # Run for 10 seconds
            frame = cam.get_frame()
            if frame is not None:
                fps = cam.get_fps()
                cv2.putText(
                    frame, f"FPS: {fps:.1f}", (10, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 255, 0), 2
                )
                cv2.imshow("Camera Test", frame)

            if cv2.waitKey(1) & 0xFF == ord('q'):
                break

        cv2.destroyAllWindows()
