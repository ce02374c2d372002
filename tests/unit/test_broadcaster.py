"""
Unit tests for the publish/subscribe broadcaster.
"""

import threading

from trafficsentinel.service.broadcaster import EventBroadcaster
from trafficsentinel.service.messages import BroadcastMessage, MessageType


def _message(n: int) -> BroadcastMessage:
    return BroadcastMessage(type=MessageType.EVENT, data={"n": n})


def test_publish_reaches_every_subscriber():
    broadcaster = EventBroadcaster()
    first, second = [], []
    sub_a = broadcaster.subscribe(first.append)
    sub_b = broadcaster.subscribe(second.append)

    assert broadcaster.publish(_message(1)) == 2
    broadcaster.join()

    assert [m.data["n"] for m in first] == [1]
    assert [m.data["n"] for m in second] == [1]
    sub_a()
    sub_b()


def test_failing_subscriber_does_not_block_others(caplog):
    broadcaster = EventBroadcaster()
    received = []

    def explode(message):
        raise RuntimeError("subscriber failure")

    broadcaster.subscribe(explode)
    broadcaster.subscribe(received.append)

    for n in range(3):
        broadcaster.publish(_message(n))
    broadcaster.join()

    assert [m.data["n"] for m in received] == [0, 1, 2]
    assert "Error delivering message" in caplog.text
    broadcaster.close()


def test_unsubscribe_stops_delivery():
    broadcaster = EventBroadcaster()
    received = []
    subscription = broadcaster.subscribe(received.append)
    assert broadcaster.subscriber_count == 1

    subscription()
    assert broadcaster.subscriber_count == 0
    assert subscription.closed

    assert broadcaster.publish(_message(1)) == 0
    assert received == []

    subscription.unsubscribe()  # second call is a no-op


def test_slow_subscriber_does_not_block_publisher():
    broadcaster = EventBroadcaster()
    gate = threading.Event()
    fast = []

    broadcaster.subscribe(lambda message: gate.wait(5))
    fast_sub = broadcaster.subscribe(fast.append)

    for n in range(5):
        broadcaster.publish(_message(n))
    fast_sub.join()

    assert [m.data["n"] for m in fast] == [0, 1, 2, 3, 4]
    gate.set()
    broadcaster.close()


def test_full_queue_drops_oldest_pending_message():
    broadcaster = EventBroadcaster(queue_size=2)
    started = threading.Event()
    gate = threading.Event()
    received = []

    def blocking(message):
        received.append(message.data["n"])
        started.set()
        gate.wait(5)

    subscription = broadcaster.subscribe(blocking)
    broadcaster.publish(_message(1))
    assert started.wait(5)

    for n in range(2, 6):
        broadcaster.publish(_message(n))

    gate.set()
    subscription.join()

    assert received == [1, 4, 5]
    assert subscription.dropped == 2
    broadcaster.close()


def test_subscriber_can_unsubscribe_from_its_own_callback():
    broadcaster = EventBroadcaster()
    handle = {}
    done = threading.Event()

    def once(message):
        handle["sub"]()
        done.set()

    handle["sub"] = broadcaster.subscribe(once)
    broadcaster.publish(_message(1))

    assert done.wait(5)
    assert broadcaster.subscriber_count == 0
