from datetime import timedelta

from hypothesis import given
from hypothesis import strategies as st

from bftkit.flowrate import Monitor, Percent, clock_round, percent_of

MS = 1_000_000


class FakeClock:
    def __init__(self) -> None:
        self.ns = 0

    def __call__(self) -> int:
        return self.ns

    def sleep(self, seconds: float) -> None:
        self.ns += round(seconds * 1_000_000_000)

    def advance(self, ms: int) -> None:
        self.ns += ms * MS


def make_monitor(clock: FakeClock) -> Monitor:
    return Monitor(0, 0, time_source=clock, sleep=clock.sleep)


def test_percent_of_whole_is_hundred_percent():
    assert percent_of(7, 7) == 100000
    assert percent_of(7, 7).as_float() == 100.0


def test_percent_of_invalid_inputs_is_zero():
    assert percent_of(-1, 10) == 0
    assert percent_of(5, 0) == 0
    assert percent_of(5, -3) == 0


def test_percent_of_saturates_at_max_uint32():
    assert percent_of(1e9, 1.0) == 2**32 - 1


@given(st.integers(min_value=0, max_value=2**32 - 1))
def test_percent_string_round_trips(value):
    text = str(Percent(value))
    assert text.endswith("%")
    whole, frac = text[:-1].split(".")
    assert len(frac) == 3
    assert int(whole) * 1000 + int(frac) == value


@given(st.floats(min_value=0, max_value=1e5, allow_nan=False))
def test_clock_round_lands_on_nearest_increment(seconds):
    rounded = clock_round(seconds)
    ns = round(rounded * 1e9)
    assert ns % 20_000_000 == 0
    assert abs(rounded - seconds) <= 0.010001


def test_update_returns_count():
    clock = FakeClock()
    monitor = make_monitor(clock)
    assert monitor.update(42) == 42


def test_limit_passes_through_small_requests():
    monitor = make_monitor(FakeClock())
    assert monitor.limit(0, 100, False) == 0
    assert monitor.limit(-5, 100, False) == -5
    assert monitor.limit(50, 0, False) == 50


def test_limit_subtracts_bytes_in_current_sample():
    monitor = make_monitor(FakeClock())
    first = monitor.limit(1000, 100, False)
    monitor.update(4)
    assert monitor.limit(1000, 100, False) == first - 4


def test_blocking_limit_waits_for_next_sample():
    clock = FakeClock()
    monitor = make_monitor(clock)
    allowed = monitor.limit(1000, 100, False)
    monitor.update(allowed)
    assert monitor.limit(1000, 100, False) == 0
    assert monitor.limit(1000, 100, True) == allowed
    assert clock.ns >= 100 * MS


def test_first_sample_sets_all_rates_equal():
    clock = FakeClock()
    monitor = make_monitor(clock)
    monitor.update(30)
    clock.advance(100)
    status = monitor.status()
    assert status.samples == 1
    assert status.bytes == 30
    assert status.inst_rate == status.cur_rate == status.peak_rate == status.avg_rate
    assert status.duration == timedelta(milliseconds=100)
    assert status.active


def test_done_counts_unsampled_bytes_and_freezes():
    clock = FakeClock()
    monitor = make_monitor(clock)
    monitor.update(7)
    assert monitor.done() == 7
    assert monitor.update(5) == 5
    clock.advance(500)
    status = monitor.status()
    assert status.bytes == 7
    assert not status.active
    assert status.inst_rate == 0
    assert status.idle == timedelta(0)
    assert monitor.limit(10, 1, True) == 10


def test_transfer_size_drives_progress_and_remaining():
    clock = FakeClock()
    monitor = make_monitor(clock)
    monitor.set_transfer_size(100)
    monitor.update(50)
    clock.advance(100)
    status = monitor.status()
    assert status.bytes_rem == 50
    assert status.progress == percent_of(50, 100)
    assert status.time_rem > timedelta(0)


def test_negative_transfer_size_clamps_to_zero():
    clock = FakeClock()
    monitor = make_monitor(clock)
    monitor.set_transfer_size(-10)
    monitor.update(5)
    clock.advance(100)
    status = monitor.status()
    assert status.bytes_rem == 0
    assert status.progress == 0


def test_set_rema_counts_as_sample():
    monitor = make_monitor(FakeClock())
    before = monitor.status().samples
    monitor.set_rema(12.0)
    monitor.set_rema(13.0)
    assert monitor.status().samples == before + 2


def test_start_is_stable_across_statuses():
    clock = FakeClock()
    monitor = make_monitor(clock)
    first = monitor.status().start
    clock.advance(300)
    assert monitor.status().start == first