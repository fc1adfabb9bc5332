import numpy as np
import pytest

from conftest import build_pinch, fist, make_hand, navigate_pinch, open_hand
from gesture_logic import Gesture, GestureClassifier, PlacementCooldown, draw_gesture_ui
from landmarks import normalize


@pytest.fixture
def classifier():
    return GestureClassifier()


def classify(classifier, hand):
    return classifier.classify(normalize(hand))


def test_no_hand_is_idle(classifier):
    assert classifier.classify(None) is Gesture.IDLE


def test_open_hand_is_idle(classifier):
    assert classify(classifier, open_hand()) is Gesture.IDLE


def test_index_pinch_is_building(classifier):
    assert classify(classifier, build_pinch()) is Gesture.BUILDING


def test_middle_pinch_is_navigating(classifier):
    assert classify(classifier, navigate_pinch()) is Gesture.NAVIGATING


def test_tight_fist_is_clearing(classifier):
    assert classify(classifier, fist()) is Gesture.CLEARING


def test_fist_wins_over_pinch(classifier):
    hand = make_hand(
        WRIST=(0.5, 0.6),
        INDEX_TIP=(0.5, 0.5),
        MIDDLE_TIP=(0.51, 0.51),
        RING_TIP=(0.55, 0.53),
        PINKY_TIP=(0.58, 0.56),
        THUMB_TIP=(0.505, 0.505),
    )
    m = normalize(hand)
    assert classifier.is_build_pinch(m)
    assert classifier.is_navigate_pinch(m)
    assert classifier.classify(m) is Gesture.CLEARING


def test_navigate_pinch_checked_before_build_pinch(classifier):
    hand = make_hand(
        INDEX_TIP=(0.46, 0.41),
        MIDDLE_TIP=(0.48, 0.39),
        THUMB_TIP=(0.47, 0.40),
    )
    m = normalize(hand)
    assert classifier.is_build_pinch(m)
    assert classifier.classify(m) is Gesture.NAVIGATING


def test_fist_needs_all_four_fingers(classifier):
    hand = make_hand(
        WRIST=(0.5, 0.6),
        INDEX_TIP=(0.5, 0.3),  # Index extended
        MIDDLE_TIP=(0.53, 0.51),
        RING_TIP=(0.56, 0.53),
        PINKY_TIP=(0.58, 0.56),
    )
    assert classify(classifier, hand) is not Gesture.CLEARING


def test_thresholds_can_be_overridden():
    strict = GestureClassifier(pinch_threshold=0.005)
    assert strict.classify(normalize(build_pinch())) is Gesture.IDLE


def test_labels():
    assert Gesture.IDLE.label == "IDLE (MOVE HAND)"
    assert Gesture.NAVIGATING.label == "NAVIGATING"
    assert Gesture.BUILDING.label == "BUILDING"
    assert Gesture.CLEARING.label == "FIST: CLEARING ALL"


class TestPlacementCooldown:

    def test_ready_before_first_placement(self):
        assert PlacementCooldown().ready(0.0)

    def test_blocks_until_interval_elapses(self):
        cooldown = PlacementCooldown()
        cooldown.arm(10.0)
        assert not cooldown.ready(10.0)
        assert not cooldown.ready(10.499)
        assert cooldown.ready(10.5)
        assert cooldown.ready(11.0)

    def test_reset(self):
        cooldown = PlacementCooldown(interval=5.0)
        cooldown.arm(1.0)
        cooldown.reset()
        assert cooldown.last_placement is None
        assert cooldown.ready(1.0)


def test_draw_gesture_ui_draws_on_frame():
    frame = np.zeros((120, 400, 3), dtype=np.uint8)
    out = draw_gesture_ui(frame, Gesture.BUILDING)
    assert out is frame
    assert frame.any()
