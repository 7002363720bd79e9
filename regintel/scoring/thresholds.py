"""Threshold crossing checks used to decide when a score change raises an alert."""
from typing import Optional


def did_cross_threshold(old_score: Optional[int], new_score: int, threshold: int) -> bool:
    """
    True only when the score moves from below the threshold to at-or-above it.

    A missing previous score (a brand new record) counts as below, so the
    first write of a high score fires once. Writes that leave an already-high
    score high do not fire again.
    """
    was_below = old_score is None or old_score < threshold
    return was_below and new_score >= threshold
