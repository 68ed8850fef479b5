"""
Posture Metrics Module

Derives the fixed posture feature vector from a single BodyPosition.
Derivation is a pure function of the current observation; history-dependent
values (stability) are computed by the engine.

Sitting (side view):
    neck_angle         forward tilt of the neck->head segment, degrees [0, 60]
    back_curvature     |spine.x - hips.x|, slouch proxy
    shoulder_alignment |left_shoulder.y - right_shoulder.y|

Squat:
    knee_tracking      max knee-over-ankle horizontal offset, valgus proxy
    squat_depth        0 = standing, 1 = hips at (or below) knee level
    back_curvature     |shoulder_mid.x - hips.x|, forward-lean proxy

Fields that do not apply to the active mode stay at 0.
"""

import numpy as np
from dataclasses import dataclass, asdict
from typing import Dict

from .landmarks import BodyPosition, PostureMode
from Reference_Thresholds.posture_thresholds import POSTURE_THRESHOLDS

# Sway-to-stability gains and floors (sitting is expected to be steadier)
_SITTING_SWAY_GAIN, _SITTING_STABILITY_FLOOR = 3.0, 0.5
_SQUAT_SWAY_GAIN, _SQUAT_STABILITY_FLOOR = 2.0, 0.3
_MIN_SHIN_LENGTH = 1e-3


@dataclass(frozen=True)
class PostureMetrics:
    """Mode-independent posture feature vector."""
    neck_angle: float = 0.0
    back_curvature: float = 0.0
    shoulder_alignment: float = 0.0
    hip_alignment: float = 0.0
    knee_tracking: float = 0.0
    squat_depth: float = 0.0
    overall_stability: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def neck_tilt_degrees(position: BodyPosition) -> float:
    """
    Forward tilt of the neck->head segment.

    The segment's inclination to the horizontal is |atan2(dy, dx)| folded
    into [0, 90]; an upright neck is at 90 deg, so the tilt is its complement.
    """
    head, neck = position['head'], position['neck']
    inclination = abs(np.degrees(np.arctan2(head.y - neck.y, head.x - neck.x)))
    if inclination > 90.0:
        inclination = 180.0 - inclination
    low, high = POSTURE_THRESHOLDS['sitting'].NECK_ANGLE_RANGE
    return float(np.clip(90.0 - inclination, low, high))


def derive_sitting_metrics(position: BodyPosition) -> PostureMetrics:
    """Seated posture metrics. Raises MissingLandmarkError on incomplete input."""
    position.require(PostureMode.SITTING)
    hips = position['hips']
    shoulder_mid_x, _ = position.midpoint('left_shoulder', 'right_shoulder')

    sway = abs(shoulder_mid_x - hips.x)
    stability = np.clip(1 - sway * _SITTING_SWAY_GAIN, _SITTING_STABILITY_FLOOR, 1.0)

    return PostureMetrics(
        neck_angle=neck_tilt_degrees(position),
        back_curvature=abs(position['spine'].x - hips.x),
        shoulder_alignment=abs(position['left_shoulder'].y - position['right_shoulder'].y),
        overall_stability=float(stability),
    )


def derive_squat_metrics(position: BodyPosition) -> PostureMetrics:
    """Squat form metrics. Raises MissingLandmarkError on incomplete input."""
    position.require(PostureMode.SQUAT)
    hips = position['hips']
    shoulder_mid_x, _ = position.midpoint('left_shoulder', 'right_shoulder')
    _, knee_mid_y = position.midpoint('left_knee', 'right_knee')
    ankle_mid_x, ankle_mid_y = position.midpoint('left_ankle', 'right_ankle')

    knee_tracking = max(
        abs(position['left_knee'].x - position['left_ankle'].x),
        abs(position['right_knee'].x - position['right_ankle'].x),
    )

    # Hips one shin-length above the knees reads as standing (0)
    shin = max(abs(ankle_mid_y - knee_mid_y), _MIN_SHIN_LENGTH)
    squat_depth = np.clip(1 + (hips.y - knee_mid_y) / shin, 0.0, 1.0)

    sway = abs(shoulder_mid_x - ankle_mid_x)
    stability = np.clip(1 - sway * _SQUAT_SWAY_GAIN, _SQUAT_STABILITY_FLOOR, 1.0)

    return PostureMetrics(
        back_curvature=abs(shoulder_mid_x - hips.x),
        knee_tracking=knee_tracking,
        squat_depth=float(squat_depth),
        overall_stability=float(stability),
    )


DERIVERS = {
    PostureMode.SITTING: derive_sitting_metrics,
    PostureMode.SQUAT: derive_squat_metrics,
}


def derive_metrics(position: BodyPosition, mode: PostureMode) -> PostureMetrics:
    return DERIVERS[mode](position)
