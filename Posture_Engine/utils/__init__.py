"""Utility modules for signal processing."""
from .kalman_filter import KalmanFilter1D, KalmanFilter2D
from .rolling_stats import MetricsHistory, StabilitySummary, population_variance
