"""
Posture Analysis Engine

Stateful per-session scorer. Each call derives metrics from one observation,
pushes them into a bounded history (window = 5), estimates stability from
that history, evaluates the mode's rule table, and returns an immutable
PostureAnalysis with score, verdict and confidence.

One engine per observation stream; the history is not safe for concurrent
mutation.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any, Callable, Union

from .landmarks import BodyPosition, PostureMode
from .metrics import PostureMetrics, derive_metrics
from .rules import PostureIssue, IssueType, squat_rules, sitting_rules, evaluate_rules
from .scoring import (
    squat_bonuses, sitting_bonuses, overall_score, is_good_posture, confidence, score_band
)
from ..utils.rolling_stats import MetricsHistory
from Reference_Thresholds.posture_thresholds import (
    POSTURE_THRESHOLDS, SquatThresholds, SittingThresholds
)

logger = logging.getLogger(__name__)

Observation = Union[BodyPosition, PostureMetrics]


# -----------------------------------------------------------------------------
# Data Classes
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class EngineConfig:
    """Engine settings. Defaults reproduce the reference thresholds."""
    window: int = POSTURE_THRESHOLDS['stability'].WINDOW
    stability_scale: float = POSTURE_THRESHOLDS['stability'].VARIANCE_SCALE
    neutral_stability: float = POSTURE_THRESHOLDS['stability'].NEUTRAL
    good_posture_min_score: float = POSTURE_THRESHOLDS['score'].GOOD_POSTURE_MIN
    confidence_ramp_frames: int = POSTURE_THRESHOLDS['confidence'].RAMP_FRAMES
    squat: SquatThresholds = field(default_factory=SquatThresholds)
    sitting: SittingThresholds = field(default_factory=SittingThresholds)


@dataclass(frozen=True)
class PostureAnalysis:
    """Result of one observation tick."""
    is_good_posture: bool
    overall_score: float
    issues: Tuple[PostureIssue, ...]
    metrics: PostureMetrics
    confidence: float
    recommendations: Tuple[str, ...]
    stability: float
    mode: PostureMode
    frame_number: int

    @property
    def critical_issues(self) -> Tuple[PostureIssue, ...]:
        return tuple(i for i in self.issues if i.type is IssueType.CRITICAL)

    @property
    def primary_issue(self) -> Optional[PostureIssue]:
        return self.issues[0] if self.issues else None

    @property
    def score_band(self) -> str:
        return score_band(self.overall_score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_good_posture': self.is_good_posture,
            'overall_score': self.overall_score,
            'issues': [i.to_dict() for i in self.issues],
            'metrics': self.metrics.to_dict(),
            'confidence': self.confidence,
            'recommendations': list(self.recommendations),
            'stability': self.stability,
            'mode': self.mode.value,
            'frame_number': self.frame_number,
            'score_band': self.score_band,
        }


# -----------------------------------------------------------------------------
# Engine
# -----------------------------------------------------------------------------

class PostureAnalysisEngine:
    """Per-session posture scorer with a rolling stability window."""

    def __init__(self, config: Optional[EngineConfig] = None,
                 clock: Callable[[], float] = time.time):
        self.config = config or EngineConfig()
        self._clock = clock
        self._history = MetricsHistory(self.config.window)
        self._rules = {
            PostureMode.SQUAT: squat_rules(self.config.squat),
            PostureMode.SITTING: sitting_rules(self.config.sitting),
        }
        self._bonuses = {
            PostureMode.SQUAT: squat_bonuses(self.config.squat),
            PostureMode.SITTING: sitting_bonuses(self.config.sitting),
        }

    @property
    def window(self) -> int:
        return self._history.window

    @property
    def history_size(self) -> int:
        return len(self._history)

    def analyze_squat_posture(self, observation: Observation, frame_number: int) -> PostureAnalysis:
        return self.analyze(observation, frame_number, PostureMode.SQUAT)

    def analyze_sitting_posture(self, observation: Observation, frame_number: int) -> PostureAnalysis:
        return self.analyze(observation, frame_number, PostureMode.SITTING)

    def analyze(self, observation: Observation, frame_number: int,
                mode: Union[PostureMode, str]) -> PostureAnalysis:
        """
        Analyze one observation.

        Args:
            observation: Landmarks for the mode, or metrics already derived
            frame_number: 1-based index of the observation in the session
            mode: PostureMode or its value ("sitting" / "squat")

        Raises:
            MissingLandmarkError: a landmark the mode needs is absent
            ValueError: unknown mode
        """
        mode = PostureMode(mode)
        if isinstance(observation, PostureMetrics):
            metrics = observation
        else:
            metrics = derive_metrics(observation, mode)

        self._history.add(metrics)
        stability = self._history.stability(
            scale=self.config.stability_scale, neutral=self.config.neutral_stability
        )

        issues, recommendations = evaluate_rules(
            self._rules[mode], metrics, stability, self._clock()
        )
        score = overall_score(metrics, issues, self._bonuses[mode])
        good = is_good_posture(issues, score, self.config.good_posture_min_score)
        conf = confidence(stability, frame_number, self.config.confidence_ramp_frames)

        logger.debug(
            "%s frame %d: score=%.1f good=%s stability=%.3f issues=%s",
            mode.value, frame_number, score, good, stability,
            [i.type.value for i in issues],
        )

        return PostureAnalysis(
            is_good_posture=good,
            overall_score=score,
            issues=tuple(issues),
            metrics=metrics,
            confidence=conf,
            recommendations=tuple(recommendations),
            stability=stability,
            mode=mode,
            frame_number=frame_number,
        )

    def reset(self):
        """Clear the stability history (start of a new session)."""
        self._history.reset()
