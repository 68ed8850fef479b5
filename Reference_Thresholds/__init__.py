"""Reference thresholds for posture scoring."""
from .posture_thresholds import (
    POSTURE_THRESHOLDS, SquatThresholds, SittingThresholds,
    StabilityConfig, ConfidenceConfig, ScoreConfig, get_score_band
)
