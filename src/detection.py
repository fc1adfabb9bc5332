"""
Detection Module - Background Hand Detection
=============================================
Runs the hand tracker on its own thread and publishes the most recent
result into a single-slot mailbox. The render loop reads the mailbox
without blocking and never waits for inference.
"""

import threading
import time
from typing import Optional, Tuple

from hand_tracking import HandData


class HandFrameMailbox:
    """
    Single-slot mailbox holding the latest hand detection.

    Each put replaces the slot wholesale and bumps a sequence number, so a
    reader can tell a fresh detection from one it has already consumed.
    Sequence 0 means nothing has been published yet.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._sequence = 0
        self._hand: Optional[HandData] = None

    def put(self, hand: Optional[HandData]) -> int:
        """
        Publish a detection result.

        Args:
            hand: The detected hand, or None when no hand is visible

        Returns:
            The sequence number assigned to this result
        """
        with self._lock:
            self._sequence += 1
            self._hand = hand
            return self._sequence

    def latest(self) -> Tuple[int, Optional[HandData]]:
        """Return (sequence, hand) for the newest result without consuming it."""
        with self._lock:
            return self._sequence, self._hand


class HandDetectionWorker:
    """
    Feeds webcam frames through the hand tracker on a daemon thread.

    Only the first detected hand is published. Stopping the worker simply
    halts mailbox updates; readers keep seeing the last published value.
    """

    def __init__(self, camera, tracker, mailbox: HandFrameMailbox):
        """
        Args:
            camera: Object with a frame_count that grows with each capture
                and read_latest() returning (frame_count, frame) for the
                newest capture, or a None frame before the first one
            tracker: Object with process(frame) returning a list of HandData
            mailbox: Destination for detection results
        """
        self.camera = camera
        self.tracker = tracker
        self.mailbox = mailbox

        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._last_frame_id: Optional[int] = None

        # Performance metrics
        self._detections = 0
        self._start_time = 0.0

    def start(self):
        """Start the detection thread."""
        if self._running:
            return
        self._running = True
        self._start_time = time.time()
        self._thread = threading.Thread(target=self._detection_loop, daemon=True)
        self._thread.start()
        print("[INFO] Hand detection started")

    def _detection_loop(self):
        while self._running:
            if self.camera.frame_count == self._last_frame_id:
                time.sleep(0.002)
                continue

            # The id recorded is the one read with the frame, not the one
            # checked above; a capture may land in between
            frame_id, frame = self.camera.read_latest()
            if frame is None:
                time.sleep(0.005)
                continue

            self._last_frame_id = frame_id
            self.step(frame)

    def step(self, frame) -> Optional[HandData]:
        """
        Run detection on one frame and publish the result.

        Tracker failures are reported and published as "no hand" so the
        render loop never sees the exception.
        """
        try:
            hands = self.tracker.process(frame)
        except Exception as exc:
            print(f"[ERROR] Hand detection failed: {exc}")
            hands = []

        hand = hands[0] if hands else None
        self.mailbox.put(hand)
        self._detections += 1
        return hand

    def get_fps(self) -> float:
        """Detection results published per second since start."""
        elapsed = time.time() - self._start_time
        if elapsed <= 0:
            return 0.0
        return self._detections / elapsed

    def stop(self):
        """Stop the detection thread."""
        self._running = False

        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None
            print("[INFO] Hand detection stopped")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
