"""Adaptive spacing of outbound synthesis calls shared by all workers."""

import logging
import random
import threading
import time

from longform_tts.config import DispatchConfig

logger = logging.getLogger(__name__)


class RateGovernor:
    """Minimum interval between call starts, widened on throttling.

    Workers reserve a start slot before every attempt and sleep until it. A
    rate-limit response from any worker widens the interval for all of them.
    Reuse one governor across jobs to remember recent backpressure.

    The lock only guards arithmetic, never an await, so a governor can be
    shared between event loops.
    """

    def __init__(
        self,
        floor: float,
        ceiling: float,
        throttle_step: float,
        relax_step: float,
        jitter: float = 0.0,
        clock=time.monotonic,
        rng: random.Random | None = None,
    ):
        if floor < 0 or floor > ceiling:
            raise ValueError(f"Invalid interval bounds: floor={floor} ceiling={ceiling}")
        self.floor = floor
        self.ceiling = ceiling
        self.throttle_step = throttle_step
        self.relax_step = relax_step
        self.jitter = jitter
        self._clock = clock
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self._min_interval = floor
        self._last_scheduled_at: float | None = None

    @classmethod
    def from_config(cls, config: DispatchConfig, **kwargs) -> "RateGovernor":
        return cls(
            floor=config.interval_floor,
            ceiling=config.interval_ceiling,
            throttle_step=config.throttle_step,
            relax_step=config.relax_step,
            jitter=config.reserve_jitter,
            **kwargs,
        )

    @property
    def min_interval(self) -> float:
        with self._lock:
            return self._min_interval

    @property
    def last_scheduled_at(self) -> float | None:
        with self._lock:
            return self._last_scheduled_at

    def reserve_slot(self) -> float:
        """Claim the next legal start time and return seconds to wait for it."""
        with self._lock:
            now = self._clock()
            start = now
            if self._last_scheduled_at is not None:
                start = max(now, self._last_scheduled_at + self._min_interval)
            if self.jitter > 0:
                start += self._rng.uniform(0, self.jitter)
            self._last_scheduled_at = start
            wait = start - now

        logger.debug("Reserved call slot in %.2fs", wait)
        return wait

    def report_throttled(self) -> float:
        """Widen the interval by one step, up to the ceiling."""
        with self._lock:
            self._min_interval = min(self._min_interval + self.throttle_step, self.ceiling)
            interval = self._min_interval

        logger.warning("Rate limited: call interval raised to %.1fs", interval)
        return interval

    def relax(self) -> float:
        """Narrow the interval by one step, down to the floor. Called at job start."""
        with self._lock:
            self._min_interval = max(self._min_interval - self.relax_step, self.floor)
            return self._min_interval
