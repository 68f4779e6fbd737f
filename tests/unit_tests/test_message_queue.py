from __future__ import annotations

import threading

from logpump.message_queue import MessageQueue


class TestPushAndDrain:
    """Ordering and batch draining"""

    def test_drain_returns_items_in_push_order(self) -> None:
        queue = MessageQueue()
        for i in range(5):
            assert queue.push(i)
        assert len(queue) == 5
        assert queue.drain_all() == [0, 1, 2, 3, 4]

    def test_drain_empties_the_queue(self) -> None:
        queue = MessageQueue()
        queue.push("a")
        queue.drain_all()
        assert len(queue) == 0
        assert queue.drain_all() == []

    def test_concurrent_producers_lose_nothing(self) -> None:
        queue = MessageQueue()

        def produce(tag: int) -> None:
            for i in range(500):
                queue.push((tag, i))

        threads = [threading.Thread(target=produce, args=(tag,)) for tag in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        batch = queue.drain_all()
        assert len(batch) == 2000
        for tag in range(4):
            assert [i for t, i in batch if t == tag] == list(range(500))


class TestClose:
    """Close acts as the stop signal"""

    def test_push_after_close_is_refused(self) -> None:
        queue = MessageQueue()
        queue.push("before")
        queue.close()
        assert queue.closed
        assert queue.push("after") is False
        assert queue.drain_all() == ["before"]

    def test_wait_returns_when_closed(self) -> None:
        queue = MessageQueue()
        closer = threading.Timer(0.05, queue.close)
        closer.start()
        queue.wait()
        assert queue.closed

    def test_wait_returns_when_item_arrives(self) -> None:
        queue = MessageQueue()
        pusher = threading.Timer(0.05, queue.push, args=("item",))
        pusher.start()
        queue.wait()
        assert queue.drain_all() == ["item"]
