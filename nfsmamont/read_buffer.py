"""Double-buffered reader over an asynchronous byte stream.

Synchronous XDR decoders read from a :class:`CountBuffer`. When a decoder
runs out of buffered bytes, :meth:`CountBuffer.parse_with_retry` pulls more
data from the stream and runs the decoder again from the same position.
"""

from __future__ import annotations

from typing import Callable, Protocol, TypeVar, Union

from nfsmamont.errors import IoError, IoErrorKind

T = TypeVar("T")

Writable = Union[bytearray, memoryview]


class AsyncByteSource(Protocol):
    """Anything with ``async read(n)`` returning at most ``n`` bytes, empty at EOF."""

    async def read(self, n: int) -> bytes:  # pragma: no cover - protocol
        ...


class _ReadBuffer:
    """Fixed-size buffer with separate read and write positions."""

    def __init__(self, capacity: int) -> None:
        self.data = bytearray(capacity)
        self.read_pos = 0
        self.write_pos = 0

    @property
    def available_read(self) -> int:
        return self.write_pos - self.read_pos

    @property
    def available_write(self) -> int:
        return len(self.data) - self.write_pos

    def consume(self, n: int) -> None:
        self.read_pos += n

    def append(self, chunk: bytes) -> None:
        end = self.write_pos + len(chunk)
        self.data[self.write_pos:end] = chunk
        self.write_pos = end

    def take(self, n: int) -> bytes:
        n = min(n, self.available_read)
        chunk = bytes(self.data[self.read_pos:self.read_pos + n])
        self.consume(n)
        return chunk

    def clean(self) -> None:
        self.read_pos = 0
        self.write_pos = 0


class CountBuffer:
    """Buffered reader that counts consumed bytes and can retry decoding."""

    def __init__(self, capacity: int, socket: AsyncByteSource) -> None:
        self._bufs = [_ReadBuffer(capacity), _ReadBuffer(capacity)]
        self._read = 0
        self._write = 1
        self._retry_mode = False
        self._socket = socket
        self._total_bytes = 0

    async def _fill_internal(self) -> int:
        target = self._bufs[self._write]
        room = target.available_write
        if room == 0:
            return 0
        chunk = await self._socket.read(room)
        if not chunk:
            raise IoError(IoErrorKind.UNEXPECTED_EOF, "Connection closed")
        chunk = chunk[:room]
        target.append(chunk)
        return len(chunk)

    async def parse_with_retry(self, parse: Callable[["CountBuffer"], T]) -> T:
        """Run ``parse`` on this buffer, reading more data whenever it hits EOF."""
        while True:
            start_read = self._bufs[self._read].read_pos
            start_write = self._bufs[self._write].read_pos
            start_total = self._total_bytes
            try:
                value = parse(self)
            except IoError as exc:
                if exc.kind is not IoErrorKind.UNEXPECTED_EOF:
                    raise
                self._retry_mode = True
                if await self._fill_internal() == 0:
                    raise
                self._bufs[self._read].read_pos = start_read
                self._bufs[self._write].read_pos = start_write
                self._total_bytes = start_total
                continue

            if self._retry_mode:
                self._bufs[self._read].clean()
                self._write = (self._write + 1) % 2
                self._read = (self._read + 1) % 2
            if self._read == self._write:
                raise IoError(
                    IoErrorKind.OTHER,
                    "Cannot read and write to one buffer simultaneously",
                )
            self._retry_mode = False
            return value

    def read(self, size: int = -1) -> bytes:
        """Return up to ``size`` buffered bytes; empty when nothing is buffered."""
        if size < 0:
            size = self._bufs[self._read].available_read + self._bufs[self._write].available_read
        first = self._bufs[self._read].take(size)
        second = self._bufs[self._write].take(size - len(first))
        self._total_bytes += len(first) + len(second)
        return first + second

    async def read_from_async(self, dest: Writable) -> int:
        """Fill ``dest`` entirely with bytes read straight from the stream."""
        view = memoryview(dest)
        filled = 0
        while filled < len(view):
            chunk = await self._socket.read(len(view) - filled)
            if not chunk:
                raise IoError(IoErrorKind.UNEXPECTED_EOF, "early eof")
            view[filled:filled + len(chunk)] = chunk
            filled += len(chunk)
        self._total_bytes += len(view)
        return len(view)

    def read_from_inner(self, dest: Writable) -> int:
        """Copy buffered bytes into ``dest``; return how many were copied."""
        view = memoryview(dest)
        if len(view) == 0:
            return 0
        data = self.read(len(view))
        view[:len(data)] = data
        return len(data)

    def clean(self) -> None:
        """Reset the consumed byte counter."""
        self._total_bytes = 0

    def total_bytes(self) -> int:
        """Bytes consumed since the last :meth:`clean`."""
        return self._total_bytes

    async def discard_bytes(self, n: int) -> None:
        """Skip ``n`` bytes, first from the buffers and then from the stream."""
        read_buf = self._bufs[self._read]
        write_buf = self._bufs[self._write]
        from_first = min(read_buf.available_read, n)
        read_buf.consume(from_first)
        from_second = min(write_buf.available_read, n - from_first)
        write_buf.consume(from_second)
        from_inner = from_first + from_second
        self._total_bytes += from_inner

        from_socket = n - from_inner
        if from_socket == 0:
            return

        actual = 0
        remaining = from_socket
        while remaining > 0:
            limit = min(remaining, write_buf.available_write)
            if limit == 0:
                break
            chunk = await self._socket.read(limit)
            if not chunk:
                break
            actual += len(chunk)
            remaining -= len(chunk)

        self._total_bytes += actual
        if actual != from_socket:
            raise IoError(IoErrorKind.INVALID_DATA, "Discarded not valid amount of bytes")