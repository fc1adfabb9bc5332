"""
Landmarks Module - Hand Measurements
=====================================
Turns one hand's raw landmarks into the measurements the gesture logic
and camera controller work with. All distances are planar (x/y only) in
normalized landmark units.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from hand_tracking import HandData, HandLandmark


FIST_FINGERTIPS = (
    HandLandmark.INDEX_TIP,
    HandLandmark.MIDDLE_TIP,
    HandLandmark.RING_TIP,
    HandLandmark.PINKY_TIP,
)


@dataclass(frozen=True)
class Measurement:
    """
    Per-frame hand measurements.

    Attributes:
        pointer: Index fingertip in NDC (-1 to 1), mirrored horizontally
        build_pinch: Thumb tip to index tip distance
        navigate_pinch: Thumb tip to middle tip distance
        hand_scale: Pinky base to thumb base distance
        fist_distances: Index, middle, ring and pinky tip to wrist distances
    """
    pointer: Tuple[float, float]
    build_pinch: float
    navigate_pinch: float
    hand_scale: float
    fist_distances: Tuple[float, float, float, float]


def pointer_ndc(x: float, y: float) -> Tuple[float, float]:
    """Map a normalized image position to mirrored NDC."""
    return (-(x - 0.5) * 2, -(y - 0.5) * 2)


def normalize(hand: Optional[HandData]) -> Optional[Measurement]:
    """
    Measure a detected hand.

    Args:
        hand: Hand data from the tracker, or None when no hand is visible

    Returns:
        Measurement, or None when there is no hand
    """
    if hand is None:
        return None

    lm = hand.landmarks
    wrist = lm[HandLandmark.WRIST]
    thumb_tip = lm[HandLandmark.THUMB_TIP]
    index_tip = lm[HandLandmark.INDEX_TIP]
    middle_tip = lm[HandLandmark.MIDDLE_TIP]

    return Measurement(
        pointer=pointer_ndc(index_tip.x, index_tip.y),
        build_pinch=thumb_tip.planar_distance_to(index_tip),
        navigate_pinch=thumb_tip.planar_distance_to(middle_tip),
        hand_scale=lm[HandLandmark.PINKY_MCP].planar_distance_to(lm[HandLandmark.THUMB_MCP]),
        fist_distances=tuple(lm[tip].planar_distance_to(wrist) for tip in FIST_FINGERTIPS),
    )
