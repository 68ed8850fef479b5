"""
Posture Engine
Posture analysis: landmark sources, metric derivation, rule scoring and
session aggregation.
"""

from .core.landmarks import BodyPosition, Landmark, PostureMode
from .core.metrics import PostureMetrics
from .core.rules import PostureIssue, IssueType
from .core.engine import PostureAnalysisEngine, PostureAnalysis, EngineConfig
from .core.session import SessionRecorder, SessionSummary
from .exceptions import PostureEngineError, MissingLandmarkError, EmptySessionError
from .sources import (
    LandmarkSource, ReplayLandmarkSource, SimulatedLandmarkSource,
    VideoLandmarkSource, SmoothedLandmarkSource
)

# MediaPipe detector (import when needed)
# from .detectors.pose_detector import PoseDetector
