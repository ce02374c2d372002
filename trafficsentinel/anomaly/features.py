"""
Feature extraction from recent traffic events.

Converts the events inside a trailing time window into a FeatureVector.
Features are deterministic, computed independently per call, and never
persisted.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from trafficsentinel.simulation.schema import NetworkEvent

from . import statistics
from .schema import FeatureVector

logger = logging.getLogger(__name__)


def events_in_window(
    events: Iterable[NetworkEvent],
    time_window_ms: int,
    now: Optional[datetime] = None,
) -> List[NetworkEvent]:
    """
    Filter events to those inside the trailing window.

    Args:
        events: Events in any order
        time_window_ms: Window length in milliseconds
        now: Window end (defaults to current UTC time)

    Returns:
        Events with ``timestamp >= now - time_window_ms``, order preserved
    """
    now = now or datetime.now(timezone.utc)
    window_start = now - timedelta(milliseconds=time_window_ms)
    return [event for event in events if event.timestamp >= window_start]


def extract_features(
    events: Iterable[NetworkEvent],
    time_window_ms: int = 10_000,
    now: Optional[datetime] = None,
) -> Optional[FeatureVector]:
    """
    Compute the feature vector for the trailing window.

    Returns:
        FeatureVector, or None when no event falls inside the window
        (insufficient data, not an error)
    """
    now = now or datetime.now(timezone.utc)
    recent = events_in_window(events, time_window_ms, now)
    if not recent:
        logger.debug("No events in the last %d ms; skipping feature extraction", time_window_ms)
        return None

    total = len(recent)
    error_count = sum(1 for event in recent if event.is_error)

    return FeatureVector(
        request_rate=total / (time_window_ms / 1000.0),
        error_rate=error_count / total,
        response_time=statistics.mean([event.response_time for event in recent]),
        unique_ips=len({event.source_ip for event in recent}),
        payload_size=statistics.mean([event.payload_size for event in recent]),
        timestamp=now,
        event_count=total,
    )
