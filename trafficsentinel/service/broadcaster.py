"""
Publish/subscribe broadcaster.

Each subscriber gets its own bounded queue and delivery thread, so a slow or
failing subscriber never blocks the publisher or other subscribers. When a
queue is full the oldest pending message is dropped.
"""

from __future__ import annotations

import itertools
import logging
import queue
import threading
from typing import Callable, Dict, List, Optional

from .messages import BroadcastMessage

logger = logging.getLogger(__name__)

Callback = Callable[[BroadcastMessage], None]

_CLOSE = object()
_ids = itertools.count(1)


class Subscription:
    """
    Handle for one registered callback.

    Calling the handle (or ``unsubscribe()``) removes the subscriber and stops
    its delivery thread after pending messages are delivered.
    """

    def __init__(
        self,
        callback: Callback,
        maxsize: int = 1000,
        on_close: Optional[Callable[["Subscription"], None]] = None,
    ) -> None:
        self.subscription_id = next(_ids)
        self.callback = callback
        self.dropped = 0
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)
        self._put_lock = threading.Lock()
        self._on_close = on_close
        self._closed = False
        self._thread = threading.Thread(
            target=self._deliver,
            name=f"subscriber-{self.subscription_id}",
            daemon=True,
        )
        self._thread.start()

    @property
    def closed(self) -> bool:
        return self._closed

    def offer(self, message: BroadcastMessage) -> bool:
        """Enqueue without blocking; returns False if the subscription is closed."""
        with self._put_lock:
            if self._closed:
                return False
            self._put_dropping_oldest(message)
            return True

    def _put_dropping_oldest(self, item: object) -> None:
        try:
            self._queue.put_nowait(item)
            return
        except queue.Full:
            pass

        try:
            self._queue.get_nowait()
            self._queue.task_done()
            self.dropped += 1
            logger.warning(
                "Subscriber %d queue full; dropped oldest message", self.subscription_id
            )
        except queue.Empty:
            pass
        self._queue.put_nowait(item)

    def _deliver(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _CLOSE:
                    return
                self.callback(item)
            except Exception:
                logger.exception("Error delivering message to subscriber %d", self.subscription_id)
            finally:
                self._queue.task_done()

    def join(self) -> None:
        """Block until every queued message has been handled."""
        self._queue.join()

    def unsubscribe(self, timeout: Optional[float] = 5.0) -> None:
        with self._put_lock:
            if self._closed:
                return
            self._closed = True
            self._put_dropping_oldest(_CLOSE)

        if self._on_close is not None:
            self._on_close(self)
        if self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def __call__(self) -> None:
        self.unsubscribe()


class EventBroadcaster:
    """
    Registry of subscriptions plus a non-blocking ``publish``.
    """

    def __init__(self, queue_size: int = 1000) -> None:
        self.queue_size = queue_size
        self._lock = threading.Lock()
        self._subscriptions: Dict[int, Subscription] = {}

    def subscribe(self, callback: Callback) -> Subscription:
        subscription = Subscription(callback, maxsize=self.queue_size, on_close=self._remove)
        with self._lock:
            self._subscriptions[subscription.subscription_id] = subscription
            total = len(self._subscriptions)
        logger.debug("New subscriber added (total=%d)", total)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscriptions.pop(subscription.subscription_id, None)
            total = len(self._subscriptions)
        logger.debug("Subscriber removed (total=%d)", total)

    def publish(self, message: BroadcastMessage) -> int:
        """Queue a message for every subscriber; returns the number queued."""
        delivered = 0
        for subscription in self._snapshot():
            if subscription.offer(message):
                delivered += 1
        return delivered

    def _snapshot(self) -> List[Subscription]:
        with self._lock:
            return list(self._subscriptions.values())

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def join(self) -> None:
        """Wait until all current subscribers have drained their queues."""
        for subscription in self._snapshot():
            subscription.join()

    def close(self) -> None:
        for subscription in self._snapshot():
            subscription.unsubscribe()
