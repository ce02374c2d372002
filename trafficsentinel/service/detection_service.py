"""
Detection service: orchestrates simulator, detector and subscribers.

Lifecycle: construct -> start <-> stop -> dispose. The service owns exactly
one NetworkSimulator and one AnomalyDetector and runs two periodic tasks over
them: event generation and detection sweeps. Every state change is broadcast
to subscribers as a typed message.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from trafficsentinel.anomaly.detector import AnomalyDetector
from trafficsentinel.anomaly.schema import Alert, AnomalyResult
from trafficsentinel.core.config import Config, config as default_config
from trafficsentinel.core.exceptions import ServiceDisposedError
from trafficsentinel.core.logging_config import setup_logging
from trafficsentinel.simulation.schema import NetworkEvent
from trafficsentinel.simulation.simulator import NetworkSimulator

from .broadcaster import Callback, EventBroadcaster, Subscription
from .messages import BroadcastMessage, MessageType, MetricsSnapshot, ServiceStatus
from .scheduler import IntervalScheduler

logger = logging.getLogger(__name__)

GENERATION_JOB = "event-generation"
DETECTION_JOB = "anomaly-detection"


class DetectionService:
    """
    Owner of the simulation/detection pipeline.

    Notes:
    - start()/stop() are idempotent and return False when already in the
      requested state.
    - Both periodic jobs run on one background scheduler, at most one
      instance each. Job failures are logged; the job keeps ticking.
    - Subscribers receive messages on their own delivery threads.
    """

    def __init__(
        self,
        settings: Optional[Config] = None,
        simulator: Optional[NetworkSimulator] = None,
        detector: Optional[AnomalyDetector] = None,
        broadcaster: Optional[EventBroadcaster] = None,
        scheduler: Optional[IntervalScheduler] = None,
    ) -> None:
        self.settings = settings or default_config
        self.config = self.settings.service
        setup_logging(settings=self.settings)

        self.simulator = simulator or NetworkSimulator(self.settings.simulation)
        self.detector = detector or AnomalyDetector(self.settings.detection)
        self.broadcaster = broadcaster or EventBroadcaster(self.config.subscriber_queue_size)
        self.scheduler = scheduler or IntervalScheduler()

        self._lock = threading.RLock()
        self._metrics_lock = threading.Lock()
        self._tick_lock = threading.Lock()
        self._is_running = False
        self._disposed = False

        self._events_generated = 0
        self._anomalies_detected = 0
        self._alerts_generated = 0
        self._uptime_start = datetime.now(timezone.utc)

    def __enter__(self) -> "DetectionService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    @property
    def is_running(self) -> bool:
        return self._is_running

    def _ensure_active(self) -> None:
        if self._disposed:
            raise ServiceDisposedError("Detection service has been disposed")

    def _broadcast(self, message_type: MessageType, data: Dict[str, Any]) -> None:
        self.broadcaster.publish(BroadcastMessage(type=message_type, data=data))

    # Lifecycle

    def start(self) -> bool:
        with self._lock:
            self._ensure_active()
            if self._is_running:
                logger.warning("Detection service already running")
                return False

            self._is_running = True
            self.simulator.start()
            with self._metrics_lock:
                self._uptime_start = datetime.now(timezone.utc)

            self.scheduler.add_interval_job(
                GENERATION_JOB,
                self.config.simulation_interval_ms,
                self._generation_tick,
            )
            self.scheduler.add_interval_job(
                DETECTION_JOB,
                self.config.detection_interval_ms,
                self._detection_tick,
            )
            self.scheduler.start()

        logger.info("Detection service started")
        self._broadcast(
            MessageType.STATUS,
            {"isRunning": True, "message": "Detection service started"},
        )
        return True

    def stop(self) -> bool:
        with self._lock:
            self._ensure_active()
            if not self._is_running:
                logger.warning("Detection service not running")
                return False

            self._is_running = False
            self.simulator.stop()
            for job_id in (GENERATION_JOB, DETECTION_JOB):
                self.scheduler.remove_job(job_id)
            # Wait out a tick that was already running when the jobs were removed
            with self._tick_lock:
                pass

        logger.info("Detection service stopped")
        self._broadcast(
            MessageType.STATUS,
            {"isRunning": False, "message": "Detection service stopped"},
        )
        return True

    def dispose(self) -> None:
        """Stop the pipeline and close all subscriptions. Idempotent."""
        with self._lock:
            if self._disposed:
                return
            if self._is_running:
                self.stop()
            self._disposed = True
        self.scheduler.shutdown(wait=True)
        self.broadcaster.close()
        logger.info("Detection service disposed")

    # Periodic work

    def _generation_tick(self) -> None:
        with self._tick_lock:
            if not self.simulator.is_running:
                return
            count = self.simulator.burst_size() if self.config.scale_rate_by_scenario else 1
            for _ in range(count):
                event = self.simulator.generate_event()
                with self._metrics_lock:
                    self._events_generated += 1
                self._broadcast(MessageType.EVENT, event.model_dump(mode="json", by_alias=True))

    def _detection_tick(self) -> None:
        with self._tick_lock:
            if self._is_running:
                self.run_detection()

    def run_detection(self) -> Optional[AnomalyResult]:
        """
        Run one detection sweep over the most recent events.

        Errors are logged and swallowed so the periodic task keeps running.
        """
        try:
            events = self.simulator.get_recent_events(self.config.detection_event_count)
            result = self.detector.detect_anomalies(events)
            if result is None:
                return None

            self._broadcast(
                MessageType.ANOMALY,
                {
                    "score": result.composite_score,
                    "isAnomaly": result.is_anomaly,
                    "features": result.features.model_dump(mode="json", by_alias=True),
                    "featureScores": result.model_dump(by_alias=True)["featureScores"],
                    "threshold": result.threshold,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                },
            )

            if result.is_anomaly and result.alert is not None:
                with self._metrics_lock:
                    self._anomalies_detected += 1
                    self._alerts_generated += 1
                self._broadcast(MessageType.ALERT, result.alert.model_dump(mode="json", by_alias=True))
            return result
        except Exception:
            logger.exception("Error during anomaly detection")
            return None

    # Control

    def set_scenario(self, name: str) -> bool:
        self._ensure_active()
        success = self.simulator.set_scenario(name)
        if success:
            self._broadcast(
                MessageType.SCENARIO,
                {"scenario": name, "message": f"Scenario changed to {name}"},
            )
        return success

    def set_threshold(self, value: float) -> float:
        self._ensure_active()
        applied = self.detector.set_threshold(value)
        self._broadcast(
            MessageType.THRESHOLD,
            {"threshold": applied, "message": f"Detection threshold set to {applied}"},
        )
        return applied

    def clear_alerts(self) -> None:
        self._ensure_active()
        self.detector.clear_alerts()
        self._broadcast(MessageType.ALERTS_CLEARED, {"message": "Alert history cleared"})

    def subscribe(self, callback: Callback) -> Subscription:
        """Register a callback for every broadcast; call the handle to unsubscribe."""
        self._ensure_active()
        return self.broadcaster.subscribe(callback)

    # Queries

    def get_metrics(self) -> MetricsSnapshot:
        with self._metrics_lock:
            uptime = datetime.now(timezone.utc) - self._uptime_start
            return MetricsSnapshot(
                events_generated=self._events_generated,
                anomalies_detected=self._anomalies_detected,
                alerts_generated=self._alerts_generated,
                uptime_start=self._uptime_start,
                uptime_ms=int(uptime.total_seconds() * 1000),
            )

    def get_status(self) -> ServiceStatus:
        return ServiceStatus(
            is_running=self._is_running,
            simulator=self.simulator.get_status(),
            detector=self.detector.get_status(),
            metrics=self.get_metrics(),
            subscriber_count=self.broadcaster.subscriber_count,
        )

    def get_recent_events(self, count: int = 50) -> List[NetworkEvent]:
        return self.simulator.get_recent_events(count)

    def get_recent_alerts(self, count: int = 20) -> List[Alert]:
        return self.detector.get_recent_alerts(count)

    def get_current_anomaly_data(self) -> AnomalyResult:
        """
        Ad hoc detection pass over the latest events.

        Feeds the detector's rolling statistics exactly like a scheduled run.
        Returns a zero result when the window holds no events.
        """
        self._ensure_active()
        events = self.simulator.get_recent_events(self.config.snapshot_event_count)
        result = self.detector.detect_anomalies(events)
        if result is None:
            return AnomalyResult(threshold=self.detector.threshold)
        return result
