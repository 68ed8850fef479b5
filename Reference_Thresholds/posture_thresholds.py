"""
Posture Thresholds & Scoring Constants

Fixed cut-offs used by the Posture Engine rule tables, score bonuses,
stability estimator and confidence estimator.

The values are hand-tuned contract values carried over unchanged from the
web application; they are not calibrated against biomechanical data and
must not be re-derived.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class SquatThresholds:
    """
    Squat form thresholds (normalized image-fraction units).

    Knee tracking is the horizontal knee-over-ankle offset (valgus proxy),
    back curvature the shoulder-to-hip horizontal offset (forward lean),
    squat depth a 0-1 depth proxy (1 = hips at knee level).
    """
    KNEE_VALGUS: float = 0.15        # > 0.15 = knee collapse, injury risk
    FORWARD_LEAN: float = 0.4        # > 0.4 = spine loaded in flexion
    MIN_DEPTH: float = 0.3           # < 0.3 = partial rep
    SHOULDER_IMBALANCE: float = 0.1  # > 0.1 = uneven bar path
    MIN_STABILITY: float = 0.6       # < 0.6 = shaky movement

    # "Excellent form" recognition
    GOOD_DEPTH: float = 0.7
    GOOD_KNEE_TRACKING: float = 0.05
    GOOD_BACK: float = 0.2

    # Score bonuses: (threshold, points)
    BONUS_DEPTH: Tuple[float, int] = (0.7, 10)
    BONUS_KNEE_TRACKING: Tuple[float, int] = (0.05, 15)
    BONUS_BACK: Tuple[float, int] = (0.2, 10)
    BONUS_STABILITY: Tuple[float, int] = (0.8, 5)


@dataclass(frozen=True)
class SittingThresholds:
    """
    Seated workstation posture thresholds.

    Neck angle is the forward tilt of the neck-to-head segment in degrees
    (0 = upright). Back curvature is the spine-to-hip horizontal offset.
    """
    SEVERE_NECK: float = 35.0        # > 35 deg = tech neck
    MODERATE_NECK: float = 20.0      # 20-35 deg = moderate forward head
    SEVERE_SLOUCH: float = 0.5       # > 0.5 = excessive slouching
    MILD_SLOUCH: float = 0.25        # 0.25-0.5 = mild slouching
    SHOULDER_IMBALANCE: float = 0.08
    MIN_STABILITY: float = 0.7

    GOOD_NECK: float = 15.0
    GOOD_BACK: float = 0.2
    GOOD_SHOULDER: float = 0.05

    BONUS_NECK: Tuple[float, int] = (15.0, 15)
    BONUS_BACK: Tuple[float, int] = (0.2, 15)
    BONUS_SHOULDER: Tuple[float, int] = (0.05, 10)
    BONUS_STABILITY: Tuple[float, int] = (0.8, 5)

    # Valid range of the derived neck angle
    NECK_ANGLE_RANGE: Tuple[float, float] = (0.0, 60.0)


@dataclass(frozen=True)
class StabilityConfig:
    """
    Motion-consistency estimator.

    stability = clip(1 - mean_variance * VARIANCE_SCALE, 0, 1) over the last
    WINDOW metric vectors. Fewer than MIN_SAMPLES vectors gives NEUTRAL.
    """
    WINDOW: int = 5
    VARIANCE_SCALE: float = 10.0
    NEUTRAL: float = 0.5
    MIN_SAMPLES: int = 2
    FIELDS: Tuple[str, ...] = ("back_curvature", "shoulder_alignment", "overall_stability")


@dataclass(frozen=True)
class ConfidenceConfig:
    """
    confidence = (frame_conf * FRAME_WEIGHT + stability * STABILITY_WEIGHT)
                 * (1 - FLOOR) + FLOOR

    frame_conf ramps linearly to 1.0 over RAMP_FRAMES observations.
    """
    RAMP_FRAMES: int = 10
    FRAME_WEIGHT: float = 0.4
    STABILITY_WEIGHT: float = 0.6
    FLOOR: float = 0.1


@dataclass(frozen=True)
class ScoreConfig:
    """Overall score settings."""
    BASE: float = 100.0
    SEVERITY_WEIGHT: float = 2.0
    GOOD_POSTURE_MIN: float = 70.0   # verdict needs score strictly above this
    RANGE: Tuple[float, float] = (0.0, 100.0)

    # Display bands: (lower bound, label), checked top-down with '>'
    BANDS: Tuple[Tuple[float, str], ...] = (
        (80.0, "EXCELLENT"),
        (60.0, "GOOD"),
        (40.0, "NEEDS WORK"),
    )
    LOWEST_BAND: str = "POOR"


# Aggregate all thresholds
POSTURE_THRESHOLDS = {
    'squat': SquatThresholds(),
    'sitting': SittingThresholds(),
    'stability': StabilityConfig(),
    'confidence': ConfidenceConfig(),
    'score': ScoreConfig(),
}


def get_score_band(score: float) -> str:
    """
    Map an overall score to its display band.

    Args:
        score: Overall score (0-100)

    Returns:
        One of EXCELLENT, GOOD, NEEDS WORK, POOR
    """
    config = POSTURE_THRESHOLDS['score']
    for lower, label in config.BANDS:
        if score > lower:
            return label
    return config.LOWEST_BAND
