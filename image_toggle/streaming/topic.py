# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import asyncio
import logging

from ..frames.buffer import PixelBuffer


class Subscription:
    """One subscriber's bounded view of a topic."""

    def __init__(self, topic: "FrameTopic", maxsize: int):
        self.topic = topic
        self._queue: asyncio.Queue[PixelBuffer] = asyncio.Queue(maxsize=maxsize)
        self.drops = 0
        self.closed = False

    def offer(self, frame: PixelBuffer) -> bool:
        """Queue a frame without blocking. Returns False if an old frame was dropped."""
        dropped = False
        if self._queue.full():
            # Keep the newest frames: discard the oldest one
            self._queue.get_nowait()
            self.drops += 1
            dropped = True
        self._queue.put_nowait(frame)
        return not dropped

    async def get(self) -> PixelBuffer:
        return await self._queue.get()

    def pending(self) -> int:
        return self._queue.qsize()

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.topic.unsubscribe(self)


class FrameTopic:
    """Named publish/subscribe stream of pixel buffers.

    Publishing never blocks: each subscriber has its own bounded queue and a
    slow subscriber loses its oldest frames rather than stalling the
    converter or other subscribers.
    """

    def __init__(self, name: str, queue_size: int = 10):
        if queue_size < 1:
            raise ValueError(f"queue_size must be >= 1, got {queue_size}")
        self.name = name
        self.queue_size = queue_size
        self._subscribers: list[Subscription] = []
        self.published = 0

    def subscribe(self) -> Subscription:
        sub = Subscription(self, self.queue_size)
        self._subscribers.append(sub)
        logging.getLogger("streaming").debug(f"{self.name}: subscriber added ({len(self._subscribers)} total)")
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        if sub in self._subscribers:
            self._subscribers.remove(sub)
            logging.getLogger("streaming").debug(f"{self.name}: subscriber removed ({len(self._subscribers)} total)")

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, frame: PixelBuffer) -> int:
        """Deliver a frame to every subscriber. Returns the number of frames dropped."""
        self.published += 1
        drops = 0
        for sub in list(self._subscribers):
            if not sub.offer(frame):
                drops += 1
        return drops
