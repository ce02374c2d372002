"""
Rolling per-feature baselines.

Each tracked feature keeps a bounded FIFO of its most recent values. Mean and
sample standard deviation are recomputed from that window once it holds
``min_samples`` values; before that the stats stay at their previous value
(initially 0/0), which the scorer treats as "not warmed up".
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List

from . import statistics
from .schema import FeatureStats


@dataclass
class RollingFeatureStats:
    """
    Rolling mean/std for one feature.

    Warm-up: mean/std remain 0.0 until min_samples values are collected.
    """

    window_size: int
    min_samples: int
    mean: float = 0.0
    std: float = 0.0
    _values: Deque[float] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self._values = deque(maxlen=self.window_size)

    def update(self, value: float) -> None:
        self._values.append(float(value))
        if len(self._values) >= self.min_samples:
            values = list(self._values)
            self.mean = statistics.mean(values)
            self.std = statistics.standard_deviation(values, self.mean)

    def peek(self) -> FeatureStats:
        return FeatureStats(mean=self.mean, std=self.std, count=len(self._values))

    @property
    def values(self) -> List[float]:
        return list(self._values)

    @property
    def sample_count(self) -> int:
        return len(self._values)

    @property
    def is_ready(self) -> bool:
        return len(self._values) >= self.min_samples


class FeatureBaselines:
    """
    Rolling stats for a fixed set of feature names.
    """

    def __init__(self, feature_names: Iterable[str], window_size: int, min_samples: int) -> None:
        self._stats: Dict[str, RollingFeatureStats] = {
            name: RollingFeatureStats(window_size=window_size, min_samples=min_samples)
            for name in feature_names
        }

    def update(self, values: Dict[str, float]) -> None:
        for name, stats in self._stats.items():
            stats.update(values[name])

    def get(self, name: str) -> RollingFeatureStats:
        return self._stats[name]

    def snapshot(self) -> Dict[str, FeatureStats]:
        return {name: stats.peek() for name, stats in self._stats.items()}

    @property
    def sample_count(self) -> int:
        """Shortest history across features."""
        if not self._stats:
            return 0
        return min(stats.sample_count for stats in self._stats.values())

    def __iter__(self):
        return iter(self._stats.items())
