"""Bounded pool of fixed-size buffers for user data."""

from __future__ import annotations

import asyncio
from typing import Callable, Iterable, Iterator, List, Optional


class Slice:
    """A byte range laid over a list of buffers.

    Iterating yields writable views of the buffer parts covered by the
    range. Releasing zeroes every buffer and hands it to ``on_release``.
    """

    def __init__(
        self,
        buffers: Iterable[bytearray],
        start: int,
        stop: int,
        on_release: Callable[[bytearray], object],
    ) -> None:
        self._buffers: List[bytearray] = []
        buffers = list(buffers)
        if start > stop:
            raise ValueError("start should not be greater than stop")
        if any(len(buffer) == 0 for buffer in buffers):
            raise ValueError("buffers must not be empty")
        total = sum(len(buffer) for buffer in buffers)
        if stop > total:
            raise ValueError("range exceeds the total length of the buffers")
        self._buffers = buffers
        self._start = start
        self._stop = stop
        self._on_release = on_release

    def __len__(self) -> int:
        return self._stop - self._start if self._buffers else 0

    def __iter__(self) -> Iterator[memoryview]:
        start, stop = self._start, self._stop
        for buffer in self._buffers:
            if start == stop:
                return
            length = len(buffer)
            if length > start:
                yield memoryview(buffer)[start:min(stop, length)]
            start = max(start - length, 0)
            stop = max(stop - length, 0)

    def release(self) -> None:
        """Zero the buffers and return them; later calls do nothing."""
        buffers, self._buffers = self._buffers, []
        for buffer in buffers:
            memoryview(buffer)[:] = bytes(len(buffer))
            self._on_release(buffer)

    def __enter__(self) -> "Slice":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __del__(self) -> None:
        self.release()


class Allocator:
    """Hands out slices backed by ``count`` buffers of ``size`` bytes each."""

    def __init__(self, size: int, count: int) -> None:
        if size < 1 or count < 1:
            raise ValueError("size and count must be positive")
        self._size = size
        self._count = count
        self._queue: asyncio.Queue[bytearray] = asyncio.Queue()
        for _ in range(count):
            self._queue.put_nowait(bytearray(size))

    def capacity(self) -> int:
        return self._size * self._count

    async def allocate(self, size: int) -> Optional[Slice]:
        """Return a slice of ``size`` bytes, waiting for free buffers.

        Returns None when ``size`` exceeds the allocator's capacity.
        """
        if size < 1:
            raise ValueError("size must be positive")
        if size > self.capacity():
            return None
        buffers: List[bytearray] = []
        remaining = size
        try:
            while remaining > 0:
                buffer = await self._queue.get()
                remaining -= len(buffer)
                buffers.append(buffer)
        except BaseException:
            for buffer in buffers:
                self._queue.put_nowait(buffer)
            raise
        return Slice(buffers, 0, size, self._queue.put_nowait)