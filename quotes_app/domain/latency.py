"""
Simulated latency for remote calls.

Every lookup a shop or service performs pauses on a latency model instead
of sleeping directly, so tests can swap in zero or scripted delays. Pauses
wait on an event: interrupting the model wakes every paused worker and
fails their lookups with InterruptedWaitError.
"""

import random
import threading
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..errors import InterruptedWaitError

DEFAULT_TIME_UNIT_SECONDS = 0.001


class LatencyModel(ABC):
    """Base class for simulated delays measured in abstract units."""

    def __init__(self, time_unit_seconds: float = DEFAULT_TIME_UNIT_SECONDS):
        if time_unit_seconds < 0:
            raise ValueError(f"time_unit_seconds must be non-negative, got {time_unit_seconds}")
        self.time_unit_seconds = time_unit_seconds
        self._interrupted = threading.Event()

    @abstractmethod
    def delay_ms(self) -> int:
        """Return the next delay in units."""

    def pause(self) -> None:
        """
        Block the calling thread for the next delay.

        Raises:
            InterruptedWaitError: If the model is interrupted before or
                during the wait.
        """
        delay = self.delay_ms()
        if self._interrupted.wait(delay * self.time_unit_seconds):
            raise InterruptedWaitError(
                f"Simulated delay of {delay} units was interrupted",
                delay_ms=delay,
                context={"model": type(self).__name__}
            )

    def interrupt(self) -> None:
        """Interrupt current and future pauses until reset()."""
        self._interrupted.set()

    def reset(self) -> None:
        self._interrupted.clear()

    @property
    def interrupted(self) -> bool:
        return self._interrupted.is_set()


class NoLatency(LatencyModel):
    """Zero delay."""

    def delay_ms(self) -> int:
        return 0


class FixedLatency(LatencyModel):
    """Constant delay, one time unit (1000 ms) by default."""

    def __init__(self, delay_ms: int = 1000, time_unit_seconds: float = DEFAULT_TIME_UNIT_SECONDS):
        super().__init__(time_unit_seconds)
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")
        self._delay_ms = delay_ms

    def delay_ms(self) -> int:
        return self._delay_ms

    def __repr__(self) -> str:
        return f"FixedLatency(delay_ms={self._delay_ms})"


class RandomLatency(LatencyModel):
    """Delay drawn uniformly from [low_ms, high_ms) with an explicit generator."""

    def __init__(
        self,
        low_ms: int = 500,
        high_ms: int = 2500,
        rng: Optional[random.Random] = None,
        time_unit_seconds: float = DEFAULT_TIME_UNIT_SECONDS
    ):
        super().__init__(time_unit_seconds)
        if low_ms < 0 or high_ms <= low_ms:
            raise ValueError(f"Invalid delay range [{low_ms}, {high_ms})")
        self.low_ms = low_ms
        self.high_ms = high_ms
        self.rng = rng if rng is not None else random.Random()

    def delay_ms(self) -> int:
        return self.low_ms + self.rng.randrange(self.high_ms - self.low_ms)

    def __repr__(self) -> str:
        return f"RandomLatency(low_ms={self.low_ms}, high_ms={self.high_ms})"


def latency_from_config(
    config: dict[str, Any],
    rng: Optional[random.Random] = None
) -> tuple[FixedLatency, RandomLatency]:
    """
    Build the fixed and random latency models from merged configuration.

    Args:
        config: Merged configuration (must contain a "latency" section)
        rng: Random generator for the random model

    Returns:
        Tuple of (fixed_latency, random_latency)
    """
    params = config["latency"]
    unit = params["time_unit_seconds"]
    fixed = FixedLatency(params["fixed_delay_ms"], time_unit_seconds=unit)
    randomized = RandomLatency(
        params["random_min_ms"],
        params["random_max_ms"],
        rng=rng,
        time_unit_seconds=unit,
    )
    return fixed, randomized
