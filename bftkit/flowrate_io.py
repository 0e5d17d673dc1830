"""Rate-limited readers and writers built on :class:`Monitor`."""

from __future__ import annotations

import errno
from collections.abc import Callable
from typing import Any, BinaryIO

from .flowrate import Monitor


class LimitExceeded(BlockingIOError):
    """Raised by a non-blocking writer when the rate limit cuts a write short."""

    def __init__(self, written: int) -> None:
        super().__init__(errno.EAGAIN, "flowrate: flow rate limit exceeded", written)

    @property
    def written(self) -> int:
        """Number of bytes written before the limit was reached."""
        return self.characters_written


class Reader(Monitor):
    """Reads from a binary source at no more than ``limit`` bytes per second.

    A limit of zero or less means unlimited. Reads block by default.
    """

    def __init__(
        self,
        source: BinaryIO | Any,
        limit: int,
        *,
        time_source: Callable[[], int] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        super().__init__(0, 0, time_source=time_source, sleep=sleep)
        self._source = source
        self._rate_limit = limit
        self._blocking = True

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; a non-blocking reader may return ``b""``."""
        if size < 0:
            raise ValueError("size must be non-negative")
        allowed = self.limit(size, self._rate_limit, self._blocking)
        if allowed <= 0:
            return b""
        data = self._source.read(allowed)
        self.update(len(data))
        return data

    def set_limit(self, new: int) -> int:
        """Set the rate limit in bytes per second and return the old one."""
        old, self._rate_limit = self._rate_limit, new
        return old

    def set_blocking(self, new: bool) -> bool:
        """Set whether reads wait for the limit, returning the old setting."""
        old, self._blocking = self._blocking, new
        return old

    def close(self) -> None:
        """Close the source if it can be closed, and finish the transfer."""
        try:
            closer = getattr(self._source, "close", None)
            if callable(closer):
                closer()
        finally:
            self.done()

    def __enter__(self) -> "Reader":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class Writer(Monitor):
    """Writes to a binary sink at no more than ``limit`` bytes per second.

    A limit of zero or less means unlimited. Writes block by default.
    """

    def __init__(
        self,
        sink: BinaryIO | Any,
        limit: int,
        *,
        time_source: Callable[[], int] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        super().__init__(0, 0, time_source=time_source, sleep=sleep)
        self.sink = sink
        self._rate_limit = limit
        self._blocking = True

    def write(self, data: bytes) -> int:
        """Write all of ``data`` and return its length.

        A non-blocking writer raises :class:`LimitExceeded` carrying the
        number of bytes written when the limit stops it.
        """
        view = memoryview(bytes(data))
        written = 0
        while view:
            allowed = self.limit(len(view), self._rate_limit, self._blocking)
            if allowed <= 0:
                raise LimitExceeded(written)
            chunk = view[:allowed].tobytes()
            count = self.sink.write(chunk)
            if count is None:
                count = len(chunk)
            self.update(count)
            view = view[count:]
            written += count
        return written

    def set_limit(self, new: int) -> int:
        """Set the rate limit in bytes per second and return the old one."""
        old, self._rate_limit = self._rate_limit, new
        return old

    def set_blocking(self, new: bool) -> bool:
        """Set whether writes wait for the limit, returning the old setting."""
        old, self._blocking = self._blocking, new
        return old

    def close(self) -> None:
        """Close the sink if it can be closed, and finish the transfer."""
        try:
            closer = getattr(self.sink, "close", None)
            if callable(closer):
                closer()
        finally:
            self.done()

    def __enter__(self) -> "Writer":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()