# Gesture Voxel Builder - Build voxel structures with webcam hand gestures
# Author: Gesture Voxel Team
# Version: 1.0.0

"""
Core modules for the gesture voxel builder:
- camera: Webcam stream handler
- hand_tracking: MediaPipe hand landmark detection
- detection: Background detection thread and hand frame mailbox
- landmarks: Hand measurements (pointer, pinches, hand scale, fist)
- gesture_logic: Gesture classification and placement cooldown
- orbit_camera: Orbiting scene camera and perspective math
- voxel_store: Placed blocks
- cursor: Ray casting and grid snapping
- pipeline: Per-frame orchestration
- renderer: OpenCV scene drawing
- ui: Main application interface
"""

__version__ = "1.0.0"
__author__ = "Gesture Voxel Team"
