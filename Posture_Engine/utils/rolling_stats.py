"""Rolling window statistics over posture metric vectors."""

import numpy as np
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from Reference_Thresholds.posture_thresholds import POSTURE_THRESHOLDS


def population_variance(values: Sequence[float]) -> float:
    """Population variance; 0 for empty or single-element input."""
    if len(values) < 2:
        return 0.0
    return float(np.var(np.asarray(values, dtype=float)))


@dataclass
class StabilitySummary:
    stability: float
    variances: Dict[str, float]
    count: int


class MetricsHistory:
    """Bounded FIFO of the last `window` metric vectors."""

    def __init__(self, window: int = None):
        config = POSTURE_THRESHOLDS['stability']
        self.window = config.WINDOW if window is None else window
        if self.window < 1:
            raise ValueError(f"window must be >= 1, got {self.window}")
        self._data: deque = deque(maxlen=self.window)

    def add(self, metrics):
        """Append a vector, evicting the oldest beyond the window."""
        self._data.append(metrics)

    def __len__(self) -> int:
        return len(self._data)

    def values(self, name: str) -> List[float]:
        return [getattr(m, name) for m in self._data]

    def variance(self, name: str) -> float:
        return population_variance(self.values(name))

    def summary(self, fields: Iterable[str] = None, scale: float = None,
                neutral: float = None) -> StabilitySummary:
        config = POSTURE_THRESHOLDS['stability']
        fields = tuple(fields or config.FIELDS)
        scale = config.VARIANCE_SCALE if scale is None else scale
        neutral = config.NEUTRAL if neutral is None else neutral

        if len(self._data) < config.MIN_SAMPLES:
            return StabilitySummary(neutral, {name: 0.0 for name in fields}, len(self._data))

        variances = {name: self.variance(name) for name in fields}
        avg_variance = sum(variances.values()) / len(variances)
        stability = float(np.clip(1 - avg_variance * scale, 0.0, 1.0))
        return StabilitySummary(stability, variances, len(self._data))

    def stability(self, scale: float = None, neutral: float = None) -> float:
        """
        Motion consistency in [0, 1].

        Mean population variance of the tracked fields, scaled and inverted.
        Returns `neutral` until there are enough samples to judge.
        """
        return self.summary(scale=scale, neutral=neutral).stability

    def reset(self):
        self._data.clear()
