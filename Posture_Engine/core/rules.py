"""
Posture Rules Module

Ordered threshold rules per mode. Every rule is evaluated independently, so
one observation can raise several issues. Table order is the display order
(critical first); scoring does not depend on it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, List, Tuple, Dict, Any

from .metrics import PostureMetrics
from Reference_Thresholds.posture_thresholds import (
    POSTURE_THRESHOLDS, SquatThresholds, SittingThresholds
)


# -----------------------------------------------------------------------------
# Enums & Data Classes
# -----------------------------------------------------------------------------

class IssueType(Enum):
    """Issue tier."""
    CRITICAL = "critical"
    WARNING = "warning"
    MINOR = "minor"
    GOOD = "good"


@dataclass(frozen=True)
class PostureIssue:
    """A triggered rule. Severity (0-10) is a scoring weight."""
    type: IssueType
    message: str
    severity: int
    recommendation: str
    timestamp: float

    @property
    def is_critical(self) -> bool:
        return self.type is IssueType.CRITICAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'message': self.message,
            'severity': self.severity,
            'recommendation': self.recommendation,
            'timestamp': self.timestamp,
        }


Condition = Callable[[PostureMetrics, float], bool]


@dataclass(frozen=True)
class PostureRule:
    """Threshold rule: condition(metrics, stability) -> issue (+ optional tip)."""
    name: str
    type: IssueType
    severity: int
    message: str
    recommendation: str
    condition: Condition
    tip: Optional[str] = None

    def issue(self, timestamp: float) -> PostureIssue:
        return PostureIssue(self.type, self.message, self.severity, self.recommendation, timestamp)


# -----------------------------------------------------------------------------
# Rule tables
# -----------------------------------------------------------------------------

def squat_rules(t: SquatThresholds = None) -> Tuple[PostureRule, ...]:
    t = t or POSTURE_THRESHOLDS['squat']
    return (
        PostureRule(
            'knee_valgus', IssueType.CRITICAL, 9,
            "DANGER: Knee valgus detected - high injury risk!",
            "Keep knees aligned over toes. Strengthen glutes and hip abductors.",
            lambda m, s: m.knee_tracking > t.KNEE_VALGUS,
            tip="Focus on knee alignment - imagine pushing the floor apart with your feet",
        ),
        PostureRule(
            'forward_lean', IssueType.CRITICAL, 8,
            "Excessive forward lean - spine at risk",
            "Keep chest up and core engaged. Work on ankle mobility.",
            lambda m, s: m.back_curvature > t.FORWARD_LEAN,
            tip="Improve ankle flexibility with calf stretches",
        ),
        PostureRule(
            'shallow_depth', IssueType.WARNING, 6,
            "Insufficient squat depth for optimal benefits",
            "Aim to get hips below knee level. Work on hip and ankle mobility.",
            lambda m, s: m.squat_depth < t.MIN_DEPTH,
            tip="Practice bodyweight squats to improve depth",
        ),
        PostureRule(
            'uneven_shoulders', IssueType.WARNING, 5,
            "Uneven shoulder position",
            "Check for muscle imbalances. Ensure even weight distribution.",
            lambda m, s: m.shoulder_alignment > t.SHOULDER_IMBALANCE,
        ),
        PostureRule(
            'unstable_movement', IssueType.MINOR, 3,
            "Movement instability detected",
            "Focus on controlled movement. Strengthen core and stabilizer muscles.",
            lambda m, s: s < t.MIN_STABILITY,
        ),
        PostureRule(
            'excellent_form', IssueType.GOOD, 0,
            "Excellent squat form! Great depth and alignment.",
            "Maintain this form. Consider adding weight progression.",
            lambda m, s: (m.squat_depth > t.GOOD_DEPTH
                          and m.knee_tracking < t.GOOD_KNEE_TRACKING
                          and m.back_curvature < t.GOOD_BACK),
        ),
    )


def sitting_rules(t: SittingThresholds = None) -> Tuple[PostureRule, ...]:
    t = t or POSTURE_THRESHOLDS['sitting']
    return (
        PostureRule(
            'tech_neck', IssueType.CRITICAL, 9,
            "Severe forward head posture - tech neck risk!",
            "Adjust monitor height. Strengthen deep neck flexors.",
            lambda m, s: m.neck_angle > t.SEVERE_NECK,
            tip="Position screen at eye level to reduce neck strain",
        ),
        PostureRule(
            'severe_slouch', IssueType.CRITICAL, 8,
            "Excessive slouching - spinal health at risk",
            "Sit back in chair with lumbar support. Strengthen core muscles.",
            lambda m, s: m.back_curvature > t.SEVERE_SLOUCH,
            tip="Use a lumbar support cushion",
        ),
        PostureRule(
            'forward_head', IssueType.WARNING, 6,
            "Moderate forward head posture detected",
            "Adjust screen position and take regular breaks.",
            lambda m, s: t.MODERATE_NECK < m.neck_angle <= t.SEVERE_NECK,
        ),
        PostureRule(
            'shoulder_imbalance', IssueType.WARNING, 5,
            "Shoulder imbalance - check your workspace setup",
            "Ensure keyboard and mouse are at equal height.",
            lambda m, s: m.shoulder_alignment > t.SHOULDER_IMBALANCE,
            tip="Adjust chair height and armrest position",
        ),
        PostureRule(
            'mild_slouch', IssueType.WARNING, 4,
            "Mild slouching detected",
            "Engage core muscles and sit tall.",
            lambda m, s: t.MILD_SLOUCH < m.back_curvature <= t.SEVERE_SLOUCH,
        ),
        PostureRule(
            'fidgeting', IssueType.MINOR, 2,
            "Frequent position changes - consider ergonomic adjustments",
            "Take regular movement breaks every 30 minutes.",
            lambda m, s: s < t.MIN_STABILITY,
        ),
        PostureRule(
            'excellent_posture', IssueType.GOOD, 0,
            "Excellent sitting posture! Well aligned spine and neck.",
            "Maintain this posture. Take breaks to prevent stiffness.",
            lambda m, s: (m.neck_angle < t.GOOD_NECK
                          and m.back_curvature < t.GOOD_BACK
                          and m.shoulder_alignment < t.GOOD_SHOULDER),
        ),
    )


def unique(items) -> List[str]:
    """Drop repeated strings, keeping first-seen order."""
    return list(dict.fromkeys(items))


def evaluate_rules(rules, metrics: PostureMetrics, stability: float,
                   timestamp: float) -> Tuple[List[PostureIssue], List[str]]:
    """
    Apply every rule in order.

    Returns:
        Tuple of (issues in table order, de-duplicated recommendation tips)
    """
    issues: List[PostureIssue] = []
    tips: List[str] = []
    for rule in rules:
        if rule.condition(metrics, stability):
            issues.append(rule.issue(timestamp))
            if rule.tip:
                tips.append(rule.tip)
    return issues, unique(tips)
