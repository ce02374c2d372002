"""
Service module: Detection pipeline orchestration and subscriber broadcast.
"""

from .broadcaster import EventBroadcaster, Subscription
from .detection_service import DetectionService
from .messages import BroadcastMessage, MessageType, MetricsSnapshot, ServiceStatus
from .scheduler import IntervalScheduler

__all__ = [
    "BroadcastMessage",
    "DetectionService",
    "EventBroadcaster",
    "MessageType",
    "MetricsSnapshot",
    "IntervalScheduler",
    "ServiceStatus",
    "Subscription",
]
