import numpy as np

from camera import Camera


def test_read_latest_before_first_capture():
    camera = Camera()
    assert camera.read_latest() == (0, None)
    assert camera.get_frame() is None


def test_read_latest_pairs_frame_with_its_count():
    camera = Camera()
    captured = np.full((4, 4, 3), 7, dtype=np.uint8)
    camera._frame = captured
    camera._frame_count = 3

    count, frame = camera.read_latest()
    assert count == 3
    assert np.array_equal(frame, captured)
    assert frame is not captured
    assert camera.frame_count == 3
