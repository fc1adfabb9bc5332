"""
UI Module - Main Application Interface
======================================
Real-time gesture voxel builder.
Wires the webcam, hand detection thread, gesture pipeline and renderer
into one window.
"""

import cv2
import os
import time

from camera import Camera
from detection import HandDetectionWorker, HandFrameMailbox
from hand_tracking import HandTracker
from pipeline import FrameOrchestrator
from renderer import SceneRenderer


WINDOW_NAME = "Gesture Voxel Builder"


class VoxelBuilderApp:
    """
    Main application class for building voxel structures by hand.

    Detection runs on its own thread and publishes into a mailbox; the
    window loop below ticks the pipeline once per displayed frame.
    """

    # Webcam capture size (detection input)
    CAPTURE_WIDTH = 640
    CAPTURE_HEIGHT = 480

    def __init__(
        self,
        camera_id: int = 0,
        width: int = 960,
        height: int = 540,
        show_preview: bool = True
    ):
        """
        Initialize the application.

        Args:
            camera_id: Camera device index
            width: Window width
            height: Window height
            show_preview: Show the webcam inset
        """
        self.camera = Camera(
            camera_id=camera_id,
            width=self.CAPTURE_WIDTH,
            height=self.CAPTURE_HEIGHT,
            fps=30
        )

        # Single hand, high confidence
        self.hand_tracker = HandTracker(
            max_hands=1,
            min_detection_confidence=0.8,
            min_tracking_confidence=0.8,
            model_complexity=1
        )

        self.mailbox = HandFrameMailbox()
        self.detector = HandDetectionWorker(self.camera, self.hand_tracker, self.mailbox)

        self.renderer = SceneRenderer(width=width, height=height)
        self.pipeline = FrameOrchestrator(self.mailbox, aspect=self.renderer.aspect)

        self.show_preview = show_preview
        self._running = False

        # Performance tracking
        self._fps_counter = 0
        self._fps_time = time.time()
        self._current_fps = 0.0

    def _update_fps(self):
        """Update FPS counter."""
        self._fps_counter += 1
        current_time = time.time()
        elapsed = current_time - self._fps_time

        if elapsed >= 1.0:
            self._current_fps = self._fps_counter / elapsed
            self._fps_counter = 0
            self._fps_time = current_time

    def _handle_keyboard(self, key: int) -> bool:
        """
        Handle keyboard input.

        Returns:
            False if should quit, True otherwise
        """
        if key == ord('q') or key == 27:  # Q or Escape
            return False

        elif key == ord('c'):
            removed = self.pipeline.clear()
            print(f"[INFO] Cleared {removed} blocks")

        elif key == ord('r'):
            self.pipeline.reset_view()

        elif key == ord('p'):
            self.show_preview = not self.show_preview

        return True

    def run(self):
        """Run the main application loop."""
        print("\n" + "=" * 60)
        print("  Gesture Voxel Builder")
        print("=" * 60)
        print("\nGestures:")
        print("  Point index finger       -> Aim cursor")
        print("  Thumb + Index pinch      -> Place block")
        print("  Thumb + Middle pinch     -> Orbit camera")
        print("  Move hand closer/farther -> Zoom")
        print("  Closed fist              -> Clear all blocks")
        print("\nKeyboard:")
        print("  [C] Clear | [R] Reset view | [P] Toggle preview | [Q] Quit")
        print("\n" + "=" * 60)

        if not self.camera.start():
            print("[ERROR] Failed to start camera!")
            self.hand_tracker.release()
            return

        self.detector.start()
        self._running = True
        cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(WINDOW_NAME, self.renderer.width, self.renderer.height)

        try:
            while self._running:
                scene = self.pipeline.tick()

                preview = self.camera.get_frame() if self.show_preview else None
                display = self.renderer.render(
                    scene, preview=preview,
                    fps=self._current_fps,
                    detection_fps=self.detector.get_fps()
                )

                self._update_fps()
                cv2.imshow(WINDOW_NAME, display)

                key = cv2.waitKey(1) & 0xFF
                if not self._handle_keyboard(key):
                    break

        finally:
            self._running = False
            self.detector.stop()
            self.camera.stop()
            self.hand_tracker.release()
            cv2.destroyAllWindows()
            print("\n[INFO] Application closed")


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        print(f"[WARNING] Ignoring {name}={value!r}: not an integer")
        return default


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Gesture Voxel Builder - build blocks with your hand")
    parser.add_argument('--camera', type=int, default=_env_int('VOXEL_CAMERA_ID', 0),
                        help='Camera device index')
    parser.add_argument('--width', type=int, default=_env_int('VOXEL_WINDOW_WIDTH', 960),
                        help='Window width in pixels')
    parser.add_argument('--height', type=int, default=_env_int('VOXEL_WINDOW_HEIGHT', 540),
                        help='Window height in pixels')
    parser.add_argument('--no-preview', action='store_true', help='Hide the webcam inset')

    args = parser.parse_args()

    app = VoxelBuilderApp(
        camera_id=args.camera,
        width=args.width,
        height=args.height,
        show_preview=not args.no_preview
    )
    app.run()


if __name__ == "__main__":
    main()
