"""
Pose Detector Module
MediaPipe Pose Landmarker wrapper producing engine-ready BodyPositions.
Uses the MediaPipe Tasks API (0.10+). Frames are never stored.

Requires the ``detector`` extra (mediapipe, opencv-python, certifi).
"""

import logging
import numpy as np
import cv2
from pathlib import Path
from typing import Optional, Iterator, Tuple, Union
import urllib.request
import ssl
import certifi

# MediaPipe Tasks API
import mediapipe as mp
from mediapipe.tasks import python as mp_python
from mediapipe.tasks.python import vision

from .landmark_map import body_position_from_pose, MIN_VISIBILITY
from ..core.landmarks import BodyPosition, PostureMode
from ..sources.simulated import video_sample_times

logger = logging.getLogger(__name__)


class PoseDetector:
    """MediaPipe Pose Landmarker - extracts landmarks, never stores video."""

    MODEL_URL = "https://storage.googleapis.com/mediapipe-models/pose_landmarker/pose_landmarker_lite/float16/latest/pose_landmarker_lite.task"
    MODEL_PATH = Path(__file__).parent.parent.parent / "models" / "pose_landmarker.task"

    def __init__(self, min_detection_confidence: float = 0.5,
                 min_tracking_confidence: float = 0.5,
                 min_visibility: float = MIN_VISIBILITY):
        self._ensure_model()

        options = vision.PoseLandmarkerOptions(
            base_options=mp_python.BaseOptions(model_asset_path=str(self.MODEL_PATH)),
            running_mode=vision.RunningMode.VIDEO,
            num_poses=1,
            min_pose_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
            output_segmentation_masks=False  # Privacy: no segmentation
        )
        self.landmarker = vision.PoseLandmarker.create_from_options(options)
        self.min_visibility = min_visibility
        self._detection_count = 0
        self._last_timestamp_ms = 0

    def _ensure_model(self):
        """Download model if not present."""
        if self.MODEL_PATH.exists():
            return

        logger.info("Downloading pose model to %s", self.MODEL_PATH)
        self.MODEL_PATH.parent.mkdir(parents=True, exist_ok=True)
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        try:
            with urllib.request.urlopen(self.MODEL_URL, context=ssl_context) as response:
                self.MODEL_PATH.write_bytes(response.read())
        except OSError as e:
            raise RuntimeError(f"Failed to download model: {e}\n"
                               f"Please manually download from:\n{self.MODEL_URL}\n"
                               f"And save to: {self.MODEL_PATH}") from e

    def detect(self, frame: np.ndarray, timestamp_ms: float,
               mode: Union[PostureMode, str]) -> Optional[BodyPosition]:
        """BGR frame -> BodyPosition for ``mode``, or None when no person is found."""
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        # MediaPipe VIDEO mode needs strictly increasing timestamps
        ts = int(timestamp_ms)
        if ts <= self._last_timestamp_ms:
            ts = self._last_timestamp_ms + 1
        self._last_timestamp_ms = ts

        result = self.landmarker.detect_for_video(mp_image, ts)
        if not result.pose_landmarks:
            return None

        self._detection_count += 1
        return body_position_from_pose(
            result.pose_landmarks[0], mode, timestamp=timestamp_ms / 1000,
            min_visibility=self.min_visibility,
        )

    def iter_video(self, path: Union[str, Path], mode: Union[PostureMode, str]
                   ) -> Iterator[Tuple[int, float, Optional[BodyPosition]]]:
        """
        Sample an uploaded clip at ``video_sample_times`` intervals.

        Yields (frame_number, timestamp_s, position or None).
        """
        cap = cv2.VideoCapture(str(path))
        if not cap.isOpened():
            raise IOError(f"Cannot open video: {path}")
        try:
            fps = cap.get(cv2.CAP_PROP_FPS) or 30.0
            duration = cap.get(cv2.CAP_PROP_FRAME_COUNT) / fps
            for i, t in enumerate(video_sample_times(duration), start=1):
                cap.set(cv2.CAP_PROP_POS_MSEC, t * 1000)
                ok, frame = cap.read()
                if not ok:
                    logger.warning("%s: no frame at %.2fs, stopping", path, t)
                    break
                yield i, t, self.detect(frame, t * 1000, mode)
        finally:
            cap.release()

    @property
    def detection_count(self) -> int:
        return self._detection_count

    def close(self):
        """Release resources."""
        if hasattr(self, 'landmarker'):
            self.landmarker.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
