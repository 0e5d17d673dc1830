"""Monitoring and limiting the flow rate of a data stream.

The instantaneous transfer rate is measured once per sampling interval, and
an exponential moving average (EMA) of those samples gives the current rate:

    sample_time = now - previous_sample_time
    sample_rate = byte_count / sample_time
    weight      = 1 - exp(-sample_time / window_size)
    new_rate    = weight * sample_rate + (1 - weight) * old_rate
"""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

CLOCK_RATE_NS = 20_000_000
_NS_PER_SEC = 1_000_000_000
_MIN_WAIT_NS = 5_000_000
TIME_REM_LIMIT_NS = ((999 * 60 + 59) * 60 + 59) * _NS_PER_SEC
_MAX_UINT32 = 2**32 - 1


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // b
    return quotient if a >= 0 else -quotient


def _clock_round_ns(d: int) -> int:
    return _trunc_div(d + CLOCK_RATE_NS // 2, CLOCK_RATE_NS) * CLOCK_RATE_NS


def _to_ns(value: float | timedelta) -> int:
    if isinstance(value, timedelta):
        value = value.total_seconds()
    return round(value * _NS_PER_SEC)


def _ns_to_td(ns: int) -> timedelta:
    return timedelta(microseconds=_trunc_div(ns, 1000))


def clock_round(seconds: float) -> float:
    """Return ``seconds`` rounded to the nearest 20 ms clock increment."""
    return _clock_round_ns(_to_ns(seconds)) / _NS_PER_SEC


def _round(x: float) -> int:
    """Round a non-negative value to the nearest integer, halves going up."""
    if math.modf(x)[0] >= 0.5:
        return int(math.ceil(x))
    return int(math.floor(x))


class Percent(int):
    """A percentage in increments of 1/1000th of a percent."""

    def as_float(self) -> float:
        """Return the percentage as a float, e.g. 12.5 for 12.500%."""
        return int(self) * 1e-3

    def __str__(self) -> str:
        return f"{int(self) // 1000}.{int(self) % 1000:03d}%"

    def __repr__(self) -> str:
        return f"Percent({int(self)})"


def percent_of(x: float, total: float) -> Percent:
    """Return what percentage of ``total`` the value ``x`` is."""
    if x < 0 or total <= 0:
        return Percent(0)
    p = _round(x / total * 1e5)
    return Percent(min(p, _MAX_UINT32))


@dataclass(frozen=True)
class Status:
    """A snapshot of a monitor. Rates are in bytes per second."""

    start: datetime
    bytes: int
    samples: int
    inst_rate: int
    cur_rate: int
    avg_rate: int
    peak_rate: int
    bytes_rem: int
    duration: timedelta
    idle: timedelta
    time_rem: timedelta
    progress: Percent
    active: bool


class Monitor:
    """Monitors and limits the transfer rate of a data stream.

    ``sample_rate`` and ``window_size`` are in seconds (or timedeltas); values
    of zero or less select 100 ms and 1 s respectively.
    """

    def __init__(
        self,
        sample_rate: float | timedelta = 0.0,
        window_size: float | timedelta = 0.0,
        *,
        time_source: Callable[[], int] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._time_source = time_source or time.monotonic_ns
        self._sleep = sleep or time.sleep
        self._zero = _clock_round_ns(self._time_source())
        self._start_wall = datetime.now(timezone.utc)
        self._lock = threading.Lock()

        s_rate = _clock_round_ns(_to_ns(sample_rate))
        if s_rate <= 0:
            s_rate = 5 * CLOCK_RATE_NS
        window_ns = _to_ns(window_size)
        if window_ns <= 0:
            window_ns = _NS_PER_SEC

        now = self._clock()
        self._active = True
        self._start = now
        self._bytes = 0
        self._samples = 0
        self._r_sample = 0.0
        self._r_ema = 0.0
        self._r_peak = 0.0
        self._r_window = window_ns / _NS_PER_SEC
        self._s_bytes = 0
        self._s_last = now
        self._s_rate = s_rate
        self._t_bytes = 0
        self._t_last = now

    def _clock(self) -> int:
        return _clock_round_ns(self._time_source()) - self._zero

    def update(self, n: int) -> int:
        """Record a transfer of ``n`` bytes and return ``n``."""
        with self._lock:
            self._update(n)
        return n

    def set_rema(self, rema: float) -> None:
        """Overwrite the current moving average and count it as a sample."""
        with self._lock:
            self._r_ema = rema
            self._samples += 1

    def done(self) -> int:
        """Finish the transfer, stop further updates and return the byte total."""
        with self._lock:
            now = self._update(0)
            if self._s_bytes > 0:
                self._reset(now)
            self._active = False
            self._t_last = 0
            return self._bytes

    def status(self) -> Status:
        """Return the current transfer status; it stays fixed after :meth:`done`."""
        with self._lock:
            now = self._update(0)
            duration = self._s_last - self._start
            bytes_rem = max(self._t_bytes - self._bytes, 0)
            avg_rate = inst_rate = cur_rate = 0
            time_rem = 0
            if duration > 0:
                r_avg = self._bytes / (duration / _NS_PER_SEC)
                avg_rate = _round(r_avg)
                if self._active:
                    inst_rate = _round(self._r_sample)
                    cur_rate = _round(self._r_ema)
                    if bytes_rem > 0:
                        t_rate = 0.8 * self._r_ema + 0.2 * r_avg
                        if t_rate > 0:
                            ns = min(bytes_rem / t_rate * 1e9, float(TIME_REM_LIMIT_NS))
                            time_rem = _clock_round_ns(int(ns))
            return Status(
                start=self._start_wall,
                bytes=self._bytes,
                samples=self._samples,
                inst_rate=inst_rate,
                cur_rate=cur_rate,
                avg_rate=avg_rate,
                peak_rate=_round(self._r_peak),
                bytes_rem=bytes_rem,
                duration=_ns_to_td(duration),
                idle=_ns_to_td(now - self._t_last),
                time_rem=_ns_to_td(time_rem),
                progress=percent_of(float(self._bytes), float(self._t_bytes)),
                active=self._active,
            )

    def limit(self, want: int, rate: int, block: bool) -> int:
        """Return how many of ``want`` bytes may move now without exceeding ``rate``.

        At least one byte is allowed per sample. With ``block`` the call waits
        until some bytes may be moved. ``want`` is returned unchanged when it
        or ``rate`` is below 1, or after :meth:`done`.
        """
        if want < 1 or rate < 1:
            return want
        with self._lock:
            allowed = _round(rate * (self._s_rate / _NS_PER_SEC))
            if allowed <= 0:
                allowed = 1
            now = self._update(0)
            if block:
                while self._s_bytes >= allowed and self._active:
                    now = self._wait_next_sample(now)
            allowed -= self._s_bytes
            if allowed > want or not self._active:
                allowed = want
        return max(allowed, 0)

    def set_transfer_size(self, size: int) -> None:
        """Set the total expected size, enabling progress and time estimates."""
        with self._lock:
            self._t_bytes = max(size, 0)

    def _update(self, n: int) -> int:
        if not self._active:
            return 0
        now = self._clock()
        if n > 0:
            self._t_last = now
        self._s_bytes += n
        s_time = now - self._s_last
        if s_time >= self._s_rate:
            t = s_time / _NS_PER_SEC
            self._r_sample = self._s_bytes / t
            self._r_peak = max(self._r_peak, self._r_sample)
            if self._samples > 0:
                w = math.exp(-t / self._r_window)
                self._r_ema = self._r_sample + w * (self._r_ema - self._r_sample)
            else:
                self._r_ema = self._r_sample
            self._reset(now)
        return now

    def _reset(self, sample_time: int) -> None:
        self._bytes += self._s_bytes
        self._samples += 1
        self._s_bytes = 0
        self._s_last = sample_time

    def _wait_next_sample(self, now: int) -> int:
        # Called with the lock held; it is released while sleeping.
        current = self._s_last
        while self._s_last == current and self._active:
            wait_ns = max(current + self._s_rate - now, _MIN_WAIT_NS)
            self._lock.release()
            try:
                self._sleep(wait_ns / _NS_PER_SEC)
            finally:
                self._lock.acquire()
            now = self._update(0)
        return now