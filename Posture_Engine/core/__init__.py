"""Core analysis algorithms."""
from .landmarks import BodyPosition, Landmark, PostureMode, REQUIRED_LANDMARKS
from .metrics import PostureMetrics, derive_metrics, derive_sitting_metrics, derive_squat_metrics
from .rules import PostureIssue, PostureRule, IssueType, evaluate_rules, squat_rules, sitting_rules
from .scoring import overall_score, is_good_posture, confidence, score_band
from .engine import PostureAnalysisEngine, PostureAnalysis, EngineConfig
from .session import SessionRecorder, SessionSummary, SessionKind
