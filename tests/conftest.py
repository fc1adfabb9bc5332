from typing import Dict, Tuple

import pytest

from detection import HandFrameMailbox
from hand_tracking import HandData, HandLandmark
from pipeline import FrameOrchestrator


# Relaxed open right hand, palm facing the camera
OPEN_HAND = {
    HandLandmark.WRIST: (0.50, 0.90),
    HandLandmark.THUMB_CMC: (0.42, 0.85),
    HandLandmark.THUMB_MCP: (0.36, 0.78),
    HandLandmark.THUMB_IP: (0.32, 0.72),
    HandLandmark.THUMB_TIP: (0.28, 0.66),
    HandLandmark.INDEX_MCP: (0.45, 0.65),
    HandLandmark.INDEX_PIP: (0.44, 0.55),
    HandLandmark.INDEX_DIP: (0.44, 0.48),
    HandLandmark.INDEX_TIP: (0.44, 0.42),
    HandLandmark.MIDDLE_MCP: (0.50, 0.64),
    HandLandmark.MIDDLE_PIP: (0.50, 0.52),
    HandLandmark.MIDDLE_DIP: (0.50, 0.45),
    HandLandmark.MIDDLE_TIP: (0.50, 0.38),
    HandLandmark.RING_MCP: (0.55, 0.65),
    HandLandmark.RING_PIP: (0.56, 0.55),
    HandLandmark.RING_DIP: (0.56, 0.48),
    HandLandmark.RING_TIP: (0.56, 0.43),
    HandLandmark.PINKY_MCP: (0.60, 0.68),
    HandLandmark.PINKY_PIP: (0.62, 0.60),
    HandLandmark.PINKY_DIP: (0.63, 0.55),
    HandLandmark.PINKY_TIP: (0.64, 0.50),
}


def make_hand(**overrides: Tuple[float, float]) -> HandData:
    """Open hand with selected landmarks moved, e.g. make_hand(THUMB_TIP=(0.4, 0.4))."""
    points: Dict[HandLandmark, Tuple[float, float]] = dict(OPEN_HAND)
    for name, xy in overrides.items():
        points[HandLandmark[name]] = xy
    return HandData.from_normalized([points[lm] for lm in HandLandmark])


def open_hand(index_tip=(0.44, 0.42)) -> HandData:
    return make_hand(INDEX_TIP=index_tip)


def build_pinch(index_tip=(0.50, 0.50)) -> HandData:
    """Thumb tip on the index tip, middle finger well clear."""
    x, y = index_tip
    return make_hand(
        INDEX_TIP=(x, y),
        THUMB_TIP=(x + 0.01, y + 0.01),
        MIDDLE_TIP=(x + 0.05, y - 0.15),
    )


def navigate_pinch(index_tip=(0.44, 0.42)) -> HandData:
    """Thumb tip on the middle tip, index finger well clear."""
    return make_hand(
        INDEX_TIP=index_tip,
        MIDDLE_TIP=(0.60, 0.30),
        THUMB_TIP=(0.61, 0.31),
    )


def fist(index_tip=(0.50, 0.50)) -> HandData:
    """Every fingertip curled in within 0.1 of the wrist."""
    x, y = index_tip
    wrist = (x, y + 0.10)
    return make_hand(
        WRIST=wrist,
        INDEX_TIP=(x, y),
        MIDDLE_TIP=(x + 0.03, y + 0.01),
        RING_TIP=(x + 0.06, y + 0.03),
        PINKY_TIP=(x + 0.08, y + 0.06),
        THUMB_TIP=(x - 0.05, y + 0.05),
    )


class FakeClock:
    """Manually advanced seconds source."""

    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def mailbox() -> HandFrameMailbox:
    return HandFrameMailbox()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def orchestrator(mailbox, clock) -> FrameOrchestrator:
    return FrameOrchestrator(mailbox, aspect=16 / 9, clock=clock)
