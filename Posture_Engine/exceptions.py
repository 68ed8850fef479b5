"""Posture Engine errors."""

from typing import Iterable


class PostureEngineError(Exception):
    """Base class for Posture Engine errors."""


class MissingLandmarkError(PostureEngineError, KeyError):
    """A landmark required by the active mode is absent from the observation."""

    def __init__(self, mode: str, missing: Iterable[str]):
        self.mode = mode
        self.missing = tuple(missing)
        super().__init__(f"{mode} analysis requires landmark(s): {', '.join(self.missing)}")

    def __str__(self) -> str:
        return self.args[0]


class EmptySessionError(PostureEngineError, ValueError):
    """A session summary was requested before any analysis was recorded."""
