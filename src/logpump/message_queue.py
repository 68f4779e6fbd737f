"""
Unbounded multi-producer / single-consumer queue shared with the worker.
"""

from __future__ import annotations

import threading
from typing import Any


class MessageQueue:
    """Ordered buffer guarded by a single condition variable.

    Producers append under a short critical section; the single consumer swaps
    the whole backlog out at once so it never re-acquires the lock per item.
    Closing the queue is the stop signal for the consumer: pushes made after
    ``close()`` are refused, everything pushed before it is still drainable.
    """

    def __init__(self) -> None:
        self._items: list[Any] = []
        self._closed = False
        self._cond = threading.Condition(threading.Lock())

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, item: Any) -> bool:
        """Append ``item`` and wake the consumer. Returns ``False`` once closed."""
        with self._cond:
            if self._closed:
                return False
            self._items.append(item)
            self._cond.notify()
            return True

    def drain_all(self) -> list[Any]:
        with self._cond:
            batch, self._items = self._items, []
        return batch

    def wait(self) -> None:
        """Block until there is something to drain or the queue is closed."""
        with self._cond:
            self._cond.wait_for(lambda: bool(self._items) or self._closed)

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)
