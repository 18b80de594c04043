from __future__ import annotations

import asyncio

import orjson
import pytest

from adrelay.delivery.consumer import PushConsumer
from adrelay.delivery.fanout import DeliveryFanout


class _RecordingConsumer:
    def __init__(self) -> None:
        self.frames: list[str] = []

    def offer(self, text: str) -> bool:
        self.frames.append(text)
        return True


class _BrokenConsumer:
    def offer(self, text: str) -> bool:
        raise ConnectionError("socket gone")


class _FakeSocket:
    def __init__(self, *, delay_s: float = 0.0, fail: bool = False) -> None:
        self.sent: list[str] = []
        self.delay_s = delay_s
        self.fail = fail

    async def send_text(self, text: str) -> None:
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.fail:
            raise ConnectionError("closed")
        self.sent.append(text)


def test_failing_consumer_is_dropped_others_still_receive() -> None:
    fanout = DeliveryFanout(max_consumers=10)
    good_a, broken, good_b = _RecordingConsumer(), _BrokenConsumer(), _RecordingConsumer()
    for consumer in (good_a, broken, good_b):
        assert fanout.register(consumer)

    delivered = fanout.broadcast({"ad": 1}, request_id="r1", source="single", timestamp="t")

    assert delivered == 2
    assert len(good_a.frames) == 1
    assert len(good_b.frames) == 1
    assert broken not in fanout
    assert fanout.get_consumer_count() == 2

    frame = orjson.loads(good_a.frames[0])
    assert frame == {"data": {"ad": 1}, "timestamp": "t", "requestId": "r1", "source": "single"}


def test_broadcast_with_no_consumers_is_noop() -> None:
    assert DeliveryFanout().broadcast([1], request_id="r", source="single") == 0


def test_register_refuses_beyond_capacity() -> None:
    fanout = DeliveryFanout(max_consumers=2)
    first, second, third = _RecordingConsumer(), _RecordingConsumer(), _RecordingConsumer()
    assert fanout.register(first)
    assert fanout.register(second)
    assert fanout.at_capacity()
    assert not fanout.register(third)
    # Re-registering an existing member is not a new admission.
    assert fanout.register(first)

    fanout.unregister(second)
    assert fanout.register(third)


def test_unregister_unknown_consumer_is_harmless() -> None:
    fanout = DeliveryFanout()
    fanout.unregister(_RecordingConsumer())
    assert fanout.get_consumer_count() == 0


@pytest.mark.asyncio
async def test_push_consumer_preserves_broadcast_order() -> None:
    fanout = DeliveryFanout()
    socket = _FakeSocket()
    consumer = PushConsumer(socket, queue_max=16, send_timeout_s=1.0)
    fanout.register(consumer)
    consumer.start()

    for n in range(5):
        fanout.broadcast({"n": n}, request_id=f"r{n}", source="single")
    await fanout.wait_idle()

    assert [orjson.loads(t)["data"]["n"] for t in socket.sent] == [0, 1, 2, 3, 4]
    await fanout.close()


@pytest.mark.asyncio
async def test_full_backlog_drops_consumer_without_blocking() -> None:
    fanout = DeliveryFanout()
    consumer = PushConsumer(_FakeSocket(), queue_max=2, send_timeout_s=1.0)
    fanout.register(consumer)

    # Writer not started: the backlog fills and the third offer is refused.
    assert fanout.broadcast(1, request_id="a", source="single") == 1
    assert fanout.broadcast(2, request_id="b", source="single") == 1
    assert fanout.broadcast(3, request_id="c", source="single") == 0

    assert not consumer.alive
    assert consumer not in fanout
    await consumer.stop()


@pytest.mark.asyncio
async def test_slow_consumer_does_not_delay_fast_one() -> None:
    fanout = DeliveryFanout()
    slow_socket, fast_socket = _FakeSocket(delay_s=5.0), _FakeSocket()
    slow = PushConsumer(slow_socket, queue_max=8, send_timeout_s=0.05)
    fast = PushConsumer(fast_socket, queue_max=8, send_timeout_s=1.0)
    for consumer in (slow, fast):
        fanout.register(consumer)
        consumer.start()

    fanout.broadcast({"x": 1}, request_id="r", source="single")
    await asyncio.wait_for(fast.join(), timeout=0.5)
    assert len(fast_socket.sent) == 1

    await asyncio.sleep(0.2)
    assert not slow.alive
    assert slow not in fanout
    assert fast in fanout
    await fanout.close()


@pytest.mark.asyncio
async def test_send_failure_unregisters_consumer() -> None:
    fanout = DeliveryFanout()
    consumer = PushConsumer(_FakeSocket(fail=True), queue_max=4, send_timeout_s=1.0)
    fanout.register(consumer)
    consumer.start()

    fanout.broadcast("x", request_id="r", source="single")
    await asyncio.wait_for(consumer.join(), timeout=0.5)

    assert not consumer.alive
    assert fanout.get_consumer_count() == 0
    await consumer.stop()
