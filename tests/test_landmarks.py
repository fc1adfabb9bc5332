import pytest

from conftest import OPEN_HAND, build_pinch, make_hand
from hand_tracking import HandData, HandLandmark, Point
from landmarks import normalize, pointer_ndc


def test_no_hand_gives_no_measurement():
    assert normalize(None) is None


def test_pointer_is_mirrored_index_tip_in_ndc():
    m = normalize(make_hand(INDEX_TIP=(0.25, 0.75)))
    assert m.pointer == pytest.approx((0.5, -0.5))


@pytest.mark.parametrize("xy, ndc", [
    ((0.5, 0.5), (0.0, 0.0)),
    ((0.0, 0.0), (1.0, 1.0)),
    ((1.0, 1.0), (-1.0, -1.0)),
])
def test_pointer_ndc_corners(xy, ndc):
    assert pointer_ndc(*xy) == pytest.approx(ndc)


def test_pinch_distances():
    m = normalize(build_pinch(index_tip=(0.5, 0.5)))
    assert m.build_pinch == pytest.approx(0.01 * 2 ** 0.5)
    # Middle tip at (0.55, 0.35), thumb tip at (0.51, 0.51)
    assert m.navigate_pinch == pytest.approx((0.04 ** 2 + 0.16 ** 2) ** 0.5)


def test_hand_scale_is_pinky_base_to_thumb_base():
    m = normalize(make_hand())
    px, py = OPEN_HAND[HandLandmark.PINKY_MCP]
    tx, ty = OPEN_HAND[HandLandmark.THUMB_MCP]
    assert m.hand_scale == pytest.approx(((px - tx) ** 2 + (py - ty) ** 2) ** 0.5)


def test_fist_distances_cover_four_fingertips_in_order():
    m = normalize(make_hand(
        WRIST=(0.5, 0.5),
        INDEX_TIP=(0.5, 0.6),
        MIDDLE_TIP=(0.5, 0.7),
        RING_TIP=(0.5, 0.8),
        PINKY_TIP=(0.5, 0.9),
    ))
    assert m.fist_distances == pytest.approx((0.1, 0.2, 0.3, 0.4))


def test_distances_ignore_depth():
    a = Point(x=0.0, y=0.0, z=0.0, px=0, py=0)
    b = Point(x=0.3, y=0.4, z=5.0, px=0, py=0)
    assert a.planar_distance_to(b) == pytest.approx(0.5)


def test_hand_data_requires_21_landmarks():
    with pytest.raises(ValueError):
        HandData.from_normalized([(0.5, 0.5)] * 20)


def test_hand_data_pixels_clamped_to_frame():
    points = [(1.2, -0.1)] * 21
    hand = HandData.from_normalized(points, width=100, height=50)
    p = hand.landmarks[HandLandmark.WRIST]
    assert (p.px, p.py) == (99, 0)
    assert p.x == pytest.approx(1.2)
