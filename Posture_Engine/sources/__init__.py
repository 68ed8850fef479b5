"""Landmark sources feeding the analysis engine."""
from .base import LandmarkSource, ReplayLandmarkSource
from .simulated import SimulatedLandmarkSource, VideoLandmarkSource, video_sample_times
from .smoothing import SmoothedLandmarkSource
