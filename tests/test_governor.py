"""Tests for the rate governor."""

import random
import threading

import pytest

from longform_tts.config import DispatchConfig
from longform_tts.governor import RateGovernor


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


def _governor(clock=None, **kwargs):
    params = dict(floor=1.0, ceiling=3.0, throttle_step=0.5, relax_step=0.25, jitter=0.0)
    params.update(kwargs)
    return RateGovernor(clock=clock or FakeClock(), **params)


def test_first_reservation_is_immediate():
    assert _governor().reserve_slot() == 0


def test_reservations_are_spaced_by_interval():
    clock = FakeClock()
    gov = _governor(clock)
    waits = [gov.reserve_slot() for _ in range(4)]
    assert waits == [0, 1.0, 2.0, 3.0]
    assert gov.last_scheduled_at == 103.0


def test_reservation_after_idle_starts_now():
    clock = FakeClock()
    gov = _governor(clock)
    gov.reserve_slot()
    clock.now += 10
    assert gov.reserve_slot() == 0


def test_jitter_adds_bounded_delay():
    gov = _governor(jitter=0.3, rng=random.Random(7))
    gov.reserve_slot()
    wait = gov.reserve_slot()
    assert 1.0 <= wait <= 1.3


def test_throttle_widens_spacing_for_next_reservation():
    """One throttle report slows every later reservation, not just the reporter's."""
    clock = FakeClock()
    gov = _governor(clock)
    gov.reserve_slot()
    gov.report_throttled()
    assert gov.min_interval == 1.5
    assert gov.reserve_slot() == 1.5
    assert gov.reserve_slot() == 3.0


def test_throttle_clamped_to_ceiling():
    gov = _governor()
    for _ in range(10):
        gov.report_throttled()
    assert gov.min_interval == 3.0


def test_relax_moves_toward_floor_without_resetting():
    gov = _governor()
    gov.report_throttled()
    gov.report_throttled()
    assert gov.min_interval == 2.0
    assert gov.relax() == 1.75
    assert gov.min_interval == 1.75


def test_relax_clamped_to_floor():
    gov = _governor()
    for _ in range(5):
        gov.relax()
    assert gov.min_interval == 1.0


def test_invalid_bounds():
    with pytest.raises(ValueError):
        _governor(floor=5.0, ceiling=1.0)


def test_from_config_uses_defaults():
    gov = RateGovernor.from_config(DispatchConfig())
    assert gov.floor == 3.5
    assert gov.ceiling == 10.0
    assert gov.min_interval == 3.5


def test_concurrent_reservations_never_collide():
    """Threads reserving at once still get distinct, fully spaced slots."""
    clock = FakeClock()
    gov = _governor(clock)
    waits = []
    lock = threading.Lock()

    def reserve_many():
        for _ in range(50):
            wait = gov.reserve_slot()
            with lock:
                waits.append(wait)

    threads = [threading.Thread(target=reserve_many) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    ordered = sorted(waits)
    assert len(set(ordered)) == 400
    gaps = [b - a for a, b in zip(ordered, ordered[1:])]
    assert all(gap == pytest.approx(1.0) for gap in gaps)
