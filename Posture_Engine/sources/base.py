"""
Landmark Source Module

A landmark source yields one BodyPosition per observation tick for a fixed
mode. The engine consumes positions only, so simulated, replayed and
detector-backed sources are interchangeable.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Iterator, List, Tuple, Union, Mapping, Any, Sequence

from ..core.landmarks import BodyPosition, PostureMode


class LandmarkSource(ABC):
    """Base class for per-tick BodyPosition producers."""

    def __init__(self, mode: Union[PostureMode, str], frames: Optional[int] = None):
        self.mode = PostureMode(mode)
        self.frames = frames

    @abstractmethod
    def next_position(self, frame_number: int) -> BodyPosition:
        """Position for the 1-based ``frame_number``."""

    def __iter__(self) -> Iterator[Tuple[int, BodyPosition]]:
        frame_number = 1
        while self.frames is None or frame_number <= self.frames:
            yield frame_number, self.next_position(frame_number)
            frame_number += 1


class ReplayLandmarkSource(LandmarkSource):
    """Replays a fixed list of recorded positions, e.g. test fixtures."""

    def __init__(self, positions: Sequence[Union[BodyPosition, Mapping[str, Any]]],
                 mode: Union[PostureMode, str]):
        self._positions: List[BodyPosition] = [
            p if isinstance(p, BodyPosition) else BodyPosition.from_dict(p) for p in positions
        ]
        super().__init__(mode, frames=len(self._positions))

    @classmethod
    def from_json(cls, path: Union[str, Path], mode: Union[PostureMode, str] = None) -> "ReplayLandmarkSource":
        """
        Load ``{"mode": ..., "positions": [...]}`` or a bare list of positions.

        An explicit ``mode`` overrides the file's.
        """
        with open(path) as f:
            data = json.load(f)
        if isinstance(data, list):
            positions = data
        else:
            positions = data['positions']
            mode = mode or data.get('mode')
        if mode is None:
            raise ValueError(f"{path}: no mode given and none stored in the file")
        return cls(positions, mode)

    def next_position(self, frame_number: int) -> BodyPosition:
        if not 1 <= frame_number <= len(self._positions):
            raise IndexError(f"frame {frame_number} outside replay of {len(self._positions)} frames")
        return self._positions[frame_number - 1]
