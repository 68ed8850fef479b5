"""
Landmarks Module

Body-landmark observations in normalized image-fraction coordinates
(0-1, origin top-left, y grows downward). One BodyPosition is produced per
observation tick by a landmark source and consumed by the analysis engine.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, List, Dict, Any, Mapping

from ..exceptions import MissingLandmarkError

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Enums & Data Classes
# -----------------------------------------------------------------------------

class PostureMode(Enum):
    """Analysis mode."""
    SITTING = "sitting"
    SQUAT = "squat"


REQUIRED_LANDMARKS: Dict[PostureMode, Tuple[str, ...]] = {
    PostureMode.SITTING: ('head', 'neck', 'left_shoulder', 'right_shoulder', 'spine', 'hips'),
    PostureMode.SQUAT: ('head', 'left_shoulder', 'right_shoulder', 'hips',
                        'left_knee', 'right_knee', 'left_ankle', 'right_ankle'),
}

# Nested layout used by the browser client: {"shoulders": {"left": {...}}}
_PAIRED_GROUPS = {'shoulders': 'shoulder', 'knees': 'knee', 'ankles': 'ankle'}


@dataclass(frozen=True)
class Landmark:
    """Single body keypoint."""
    x: float
    y: float
    z: float = 0.0
    visibility: float = 1.0

    @classmethod
    def parse(cls, value: Any) -> "Landmark":
        """Build from a Landmark, a {"x", "y"[, "z", "visibility"]} dict or an (x, y[, z[, v]]) tuple."""
        if isinstance(value, Landmark):
            return value
        if isinstance(value, Mapping):
            return cls(
                x=float(value['x']),
                y=float(value['y']),
                z=float(value.get('z', 0.0)),
                visibility=float(value.get('visibility', 1.0)),
            )
        return cls(*(float(v) for v in value))

    @property
    def in_range(self) -> bool:
        return 0.0 <= self.x <= 1.0 and 0.0 <= self.y <= 1.0

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.z, self.visibility)


@dataclass(frozen=True)
class BodyPosition:
    """Named landmarks for one observation."""
    landmarks: Mapping[str, Landmark]
    timestamp: Optional[float] = None
    _names: frozenset = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'landmarks', dict(self.landmarks))
        object.__setattr__(self, '_names', frozenset(self.landmarks))

    def __hash__(self) -> int:
        return hash((frozenset(self.landmarks.items()), self.timestamp))

    def __getitem__(self, name: str) -> Landmark:
        return self.landmarks[name]

    def __contains__(self, name: str) -> bool:
        return name in self._names

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], timestamp: Optional[float] = None) -> "BodyPosition":
        """
        Parse landmark data.

        Accepts flat keys (``left_knee``) as well as the grouped layout
        (``knees: {left: ..., right: ...}``).
        """
        landmarks: Dict[str, Landmark] = {}
        for name, value in data.items():
            if name in _PAIRED_GROUPS and isinstance(value, Mapping) and 'x' not in value:
                for side, point in value.items():
                    landmarks[f"{side}_{_PAIRED_GROUPS[name]}"] = Landmark.parse(point)
            elif name == 'timestamp':
                timestamp = float(value) if timestamp is None else timestamp
            else:
                landmarks[name] = Landmark.parse(value)
        return cls(landmarks=landmarks, timestamp=timestamp)

    def missing(self, mode: PostureMode) -> List[str]:
        return [name for name in REQUIRED_LANDMARKS[mode] if name not in self._names]

    def require(self, mode: PostureMode) -> "BodyPosition":
        """Fail fast when a landmark needed by ``mode`` is absent."""
        missing = self.missing(mode)
        if missing:
            raise MissingLandmarkError(mode.value, missing)
        out_of_range = self.out_of_range()
        if out_of_range:
            logger.warning("Landmarks outside the 0-1 frame: %s", ", ".join(out_of_range))
        return self

    def out_of_range(self) -> List[str]:
        """Names of landmarks whose x or y falls outside [0, 1]."""
        return sorted(name for name, lm in self.landmarks.items() if not lm.in_range)

    def midpoint(self, a: str, b: str) -> Tuple[float, float]:
        return ((self[a].x + self[b].x) / 2, (self[a].y + self[b].y) / 2)

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            name: {'x': lm.x, 'y': lm.y, 'z': lm.z, 'visibility': lm.visibility}
            for name, lm in self.landmarks.items()
        }
