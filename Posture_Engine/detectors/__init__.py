"""Pose detection adapters.

``pose_detector`` needs MediaPipe and OpenCV; import it explicitly.
"""
from .landmark_map import body_position_from_pose, visible_fraction
