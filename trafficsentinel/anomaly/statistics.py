"""
Pure numeric helpers for rolling-window anomaly scoring.

All functions are deterministic and side-effect free. Degenerate inputs
(empty sequences, zero dispersion) map to 0 rather than NaN/Inf so that a
cold detector reads as "no signal yet".
"""

from __future__ import annotations

from math import floor, sqrt
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for empty input."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def standard_deviation(values: Sequence[float], mean_value: Optional[float] = None) -> float:
    """
    Sample standard deviation (denominator n - 1).

    Args:
        values: Observations
        mean_value: Precomputed mean, if the caller already has it

    Returns:
        0.0 when fewer than two values are given
    """
    if len(values) < 2:
        return 0.0

    avg = mean_value if mean_value is not None else mean(values)
    variance = sum((v - avg) ** 2 for v in values) / (len(values) - 1)
    return sqrt(variance)


def z_score(value: float, mean_value: float, std: float) -> float:
    """Standardized deviation; 0.0 when std is 0."""
    if std == 0:
        return 0.0
    return (value - mean_value) / std


def rolling_window(sequence: Sequence[T], window_size: int) -> List[T]:
    """Return the trailing ``window_size`` elements in original order."""
    items = list(sequence)
    if len(items) <= window_size:
        return items
    if window_size <= 0:
        return []
    return items[-window_size:]


def percentile(values: Sequence[float], p: float) -> float:
    """
    Linear-interpolation percentile over a sorted copy.

    Args:
        values: Observations (not modified)
        p: Percentile in [0, 100]

    Returns:
        0.0 for empty input
    """
    if not values:
        return 0.0

    p = min(max(p, 0.0), 100.0)
    ordered = sorted(values)
    index = (p / 100.0) * (len(ordered) - 1)
    lower = floor(index)
    upper = min(lower + 1, len(ordered) - 1)
    weight = index - lower

    if weight == 0:
        return float(ordered[lower])
    return ordered[lower] * (1 - weight) + ordered[upper] * weight
