"""
Session Recorder Module

Collects PostureAnalysis records for one webcam session or video-upload job
and aggregates them into a summary (good-posture share, average score and
confidence, critical issue count, leading recommendations).
"""

import logging
import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Optional, List, Tuple, Dict, Any, Union

from .engine import PostureAnalysis
from .landmarks import PostureMode
from .rules import PostureIssue, IssueType, unique
from ..exceptions import EmptySessionError

logger = logging.getLogger(__name__)


class SessionKind(Enum):
    WEBCAM = "webcam"
    UPLOAD = "upload"


# Issue tiers surfaced in the live "recent issues" feed
_FEED_TYPES = (IssueType.CRITICAL, IssueType.WARNING, IssueType.GOOD)


@dataclass(frozen=True)
class RecordedAnalysis:
    timestamp: float
    analysis: PostureAnalysis


@dataclass(frozen=True)
class SessionSummary:
    """Aggregate of a recorded session."""
    mode: PostureMode
    kind: SessionKind
    total_frames: int
    good_posture_frames: int
    average_score: float
    average_confidence: float
    critical_issues: int
    recommendations: Tuple[str, ...]
    duration_s: float

    @property
    def good_posture_percentage(self) -> float:
        return self.good_posture_frames / self.total_frames * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mode': self.mode.value,
            'kind': self.kind.value,
            'total_frames': self.total_frames,
            'good_posture_frames': self.good_posture_frames,
            'good_posture_percentage': self.good_posture_percentage,
            'average_score': self.average_score,
            'average_confidence': self.average_confidence,
            'critical_issues': self.critical_issues,
            'recommendations': list(self.recommendations),
            'duration_s': self.duration_s,
        }


class SessionRecorder:
    """Consumer of engine output for one session."""
    MAX_RECOMMENDATIONS = 10

    def __init__(self, mode: Union[PostureMode, str], kind: Union[SessionKind, str] = SessionKind.WEBCAM):
        self.mode = PostureMode(mode)
        self.kind = SessionKind(kind)
        self._records: List[RecordedAnalysis] = []

    def record(self, analysis: PostureAnalysis, timestamp: float):
        if analysis.mode is not self.mode:
            raise ValueError(
                f"cannot record {analysis.mode.value} analysis in a {self.mode.value} session"
            )
        self._records.append(RecordedAnalysis(timestamp, analysis))

    def __len__(self) -> int:
        return len(self._records)

    @property
    def latest(self) -> Optional[PostureAnalysis]:
        return self._records[-1].analysis if self._records else None

    def recent_issues(self, limit: int = 10) -> List[PostureIssue]:
        """Critical, warning and good issues, newest observation first."""
        feed: List[PostureIssue] = []
        for record in reversed(self._records):
            feed.extend(i for i in record.analysis.issues if i.type in _FEED_TYPES)
            if len(feed) >= limit:
                break
        return feed[:limit]

    def summary(self) -> SessionSummary:
        """
        Aggregate the session.

        Raises:
            EmptySessionError: nothing has been recorded
        """
        if not self._records:
            raise EmptySessionError(f"no analyses recorded for {self.mode.value} session")

        analyses = [r.analysis for r in self._records]
        timestamps = [r.timestamp for r in self._records]
        summary = SessionSummary(
            mode=self.mode,
            kind=self.kind,
            total_frames=len(analyses),
            good_posture_frames=sum(1 for a in analyses if a.is_good_posture),
            average_score=float(np.mean([a.overall_score for a in analyses])),
            average_confidence=float(np.mean([a.confidence for a in analyses])),
            critical_issues=sum(len(a.critical_issues) for a in analyses),
            recommendations=tuple(
                unique(rec for a in analyses for rec in a.recommendations)[:self.MAX_RECOMMENDATIONS]
            ),
            duration_s=max(timestamps) - min(timestamps),
        )
        logger.info(
            "%s session: %d frames, %.1f%% good, avg score %.1f",
            self.mode.value, summary.total_frames,
            summary.good_posture_percentage, summary.average_score,
        )
        return summary

    def reset(self):
        self._records.clear()
