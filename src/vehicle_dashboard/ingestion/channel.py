"""Bounded single-producer / single-consumer channel.

A thin layer over a deque and an :class:`asyncio.Condition` that adds
what :class:`asyncio.Queue` lacks before Python 3.13: either side can
close its end. Closing the sender lets the receiver drain what is
buffered and then stop; closing the receiver fails pending and future
sends with :class:`ChannelClosedError`.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Generic, TypeVar

from vehicle_dashboard.exceptions import ChannelClosedError

T = TypeVar("T")


class BoundedChannel(Generic[T]):
    """FIFO channel whose ``send`` blocks while ``capacity`` items are buffered."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._items: deque[T] = deque()
        self._cond = asyncio.Condition()
        self._sender_closed = False
        self._receiver_closed = False

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def sender_closed(self) -> bool:
        return self._sender_closed

    @property
    def receiver_closed(self) -> bool:
        return self._receiver_closed

    def __len__(self) -> int:
        return len(self._items)

    def full(self) -> bool:
        return len(self._items) >= self._capacity

    async def send(self, item: T) -> None:
        """Append *item*, waiting for room. Never drops."""
        async with self._cond:
            if self._sender_closed:
                raise ChannelClosedError("send on a channel whose sender is closed")
            await self._cond.wait_for(lambda: self._receiver_closed or len(self._items) < self._capacity)
            if self._receiver_closed:
                raise ChannelClosedError("channel receiver is closed")
            self._items.append(item)
            self._cond.notify_all()

    async def receive(self) -> T:
        """Pop the oldest item, waiting for one.

        Raises :class:`ChannelClosedError` once the sender is closed and
        the buffer is drained, or when the receiver itself was closed.
        """
        async with self._cond:
            await self._cond.wait_for(lambda: bool(self._items) or self._sender_closed or self._receiver_closed)
            if self._receiver_closed:
                raise ChannelClosedError("channel receiver is closed")
            if not self._items:
                raise ChannelClosedError("channel sender is closed")
            item = self._items.popleft()
            self._cond.notify_all()
            return item

    async def close_sender(self) -> None:
        async with self._cond:
            self._sender_closed = True
            self._cond.notify_all()

    async def close_receiver(self) -> None:
        async with self._cond:
            self._receiver_closed = True
            self._items.clear()
            self._cond.notify_all()

    def __aiter__(self) -> BoundedChannel[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.receive()
        except ChannelClosedError:
            raise StopAsyncIteration from None
