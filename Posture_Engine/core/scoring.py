"""
Scoring Module

Overall score, good-posture verdict and confidence.

    score      = clip(100 - sum(severity * 2) + bonuses, 0, 100)
    good       = no critical issue AND score > 70
    confidence = (min(1, frame / 10) * 0.4 + stability * 0.6) * 0.9 + 0.1
"""

import numpy as np
from typing import Iterable, Tuple, Callable

from .metrics import PostureMetrics
from .rules import PostureIssue
from Reference_Thresholds.posture_thresholds import (
    POSTURE_THRESHOLDS, SquatThresholds, SittingThresholds, get_score_band
)

Bonus = Tuple[Callable[[PostureMetrics], bool], int]


def squat_bonuses(t: SquatThresholds = None) -> Tuple[Bonus, ...]:
    t = t or POSTURE_THRESHOLDS['squat']
    return (
        (lambda m: m.squat_depth > t.BONUS_DEPTH[0], t.BONUS_DEPTH[1]),
        (lambda m: m.knee_tracking < t.BONUS_KNEE_TRACKING[0], t.BONUS_KNEE_TRACKING[1]),
        (lambda m: m.back_curvature < t.BONUS_BACK[0], t.BONUS_BACK[1]),
        (lambda m: m.overall_stability > t.BONUS_STABILITY[0], t.BONUS_STABILITY[1]),
    )


def sitting_bonuses(t: SittingThresholds = None) -> Tuple[Bonus, ...]:
    t = t or POSTURE_THRESHOLDS['sitting']
    return (
        (lambda m: m.neck_angle < t.BONUS_NECK[0], t.BONUS_NECK[1]),
        (lambda m: m.back_curvature < t.BONUS_BACK[0], t.BONUS_BACK[1]),
        (lambda m: m.shoulder_alignment < t.BONUS_SHOULDER[0], t.BONUS_SHOULDER[1]),
        (lambda m: m.overall_stability > t.BONUS_STABILITY[0], t.BONUS_STABILITY[1]),
    )


def overall_score(metrics: PostureMetrics, issues: Iterable[PostureIssue],
                  bonuses: Iterable[Bonus]) -> float:
    """Deduct severity * 2 per issue, add met bonuses, clamp to [0, 100]."""
    config = POSTURE_THRESHOLDS['score']
    score = config.BASE
    score -= sum(issue.severity * config.SEVERITY_WEIGHT for issue in issues)
    score += sum(points for met, points in bonuses if met(metrics))
    low, high = config.RANGE
    return float(np.clip(score, low, high))


def is_good_posture(issues: Iterable[PostureIssue], score: float,
                    threshold: float = None) -> bool:
    """A critical issue always fails the verdict, whatever the score."""
    if threshold is None:
        threshold = POSTURE_THRESHOLDS['score'].GOOD_POSTURE_MIN
    return not any(issue.is_critical for issue in issues) and score > threshold


def confidence(stability: float, frame_number: int, ramp_frames: int = None) -> float:
    """Trust in an analysis given session maturity and motion stability; [0.1, 1.0]."""
    config = POSTURE_THRESHOLDS['confidence']
    ramp_frames = ramp_frames or config.RAMP_FRAMES
    frame_confidence = float(np.clip(frame_number / ramp_frames, 0.0, 1.0))
    stability = float(np.clip(stability, 0.0, 1.0))
    blended = frame_confidence * config.FRAME_WEIGHT + stability * config.STABILITY_WEIGHT
    return float(np.clip(blended * (1 - config.FLOOR) + config.FLOOR, config.FLOOR, 1.0))


def score_band(score: float) -> str:
    return get_score_band(score)
