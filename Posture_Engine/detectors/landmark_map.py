"""
Pose Landmark Mapping

Converts a 33-point MediaPipe Pose result into the simplified BodyPosition
used by the engine. Landmarks below the visibility threshold are dropped,
so an occluded joint surfaces as a MissingLandmarkError instead of a zero.
"""

from typing import Optional, Sequence, Dict, Any, Union

from ..core.landmarks import BodyPosition, Landmark, PostureMode, REQUIRED_LANDMARKS

# MediaPipe Pose Landmarker indices
NOSE = 0
LEFT_EAR = 7
RIGHT_EAR = 8
LEFT_SHOULDER = 11
RIGHT_SHOULDER = 12
LEFT_HIP = 23
RIGHT_HIP = 24
LEFT_KNEE = 25
RIGHT_KNEE = 26
LEFT_ANKLE = 27
RIGHT_ANKLE = 28

POSE_LANDMARK_COUNT = 33
MIN_VISIBILITY = 0.5

_DIRECT = {
    'left_shoulder': LEFT_SHOULDER, 'right_shoulder': RIGHT_SHOULDER,
    'left_knee': LEFT_KNEE, 'right_knee': RIGHT_KNEE,
    'left_ankle': LEFT_ANKLE, 'right_ankle': RIGHT_ANKLE,
}


def _to_landmark(raw: Any) -> Landmark:
    """MediaPipe NormalizedLandmark (x, y, z, visibility attrs) or (x, y, z, v) tuple."""
    if hasattr(raw, 'x'):
        return Landmark(float(raw.x), float(raw.y), float(getattr(raw, 'z', 0.0)),
                        float(getattr(raw, 'visibility', 1.0) or 0.0))
    return Landmark.parse(raw)


def _midpoint(a: Landmark, b: Landmark) -> Landmark:
    return Landmark((a.x + b.x) / 2, (a.y + b.y) / 2, (a.z + b.z) / 2,
                    min(a.visibility, b.visibility))


def body_position_from_pose(landmarks: Sequence[Any], mode: Union[PostureMode, str],
                            timestamp: Optional[float] = None,
                            min_visibility: float = MIN_VISIBILITY) -> BodyPosition:
    """
    Build the mode's landmarks from a full pose.

    head  = ear midpoint (tragus proxy)
    neck  = shoulder midpoint
    spine = halfway between shoulder and hip midpoints
    hips  = hip midpoint
    """
    mode = PostureMode(mode)
    if len(landmarks) < POSE_LANDMARK_COUNT:
        raise ValueError(f"expected {POSE_LANDMARK_COUNT} pose landmarks, got {len(landmarks)}")
    lm = [_to_landmark(raw) for raw in landmarks]

    shoulders = _midpoint(lm[LEFT_SHOULDER], lm[RIGHT_SHOULDER])
    hips = _midpoint(lm[LEFT_HIP], lm[RIGHT_HIP])
    derived: Dict[str, Landmark] = {
        'head': _midpoint(lm[LEFT_EAR], lm[RIGHT_EAR]),
        'neck': shoulders,
        'spine': _midpoint(shoulders, hips),
        'hips': hips,
    }
    derived.update({name: lm[idx] for name, idx in _DIRECT.items()})

    points = {
        name: derived[name] for name in REQUIRED_LANDMARKS[mode]
        if derived[name].visibility >= min_visibility
    }
    return BodyPosition(points, timestamp=timestamp)


def visible_fraction(position: BodyPosition, mode: Union[PostureMode, str]) -> float:
    """Share of the mode's required landmarks present after visibility filtering."""
    required = REQUIRED_LANDMARKS[PostureMode(mode)]
    return sum(1 for name in required if name in position) / len(required)
