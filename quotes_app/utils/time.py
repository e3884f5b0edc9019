"""
Wall-clock timing utilities.

Durations are measured with the monotonic performance counter and reported
as whole milliseconds, which is the resolution the batch logs and the
console walk-through print.
"""

import time
from dataclasses import dataclass, field
from typing import Optional


def monotonic_ms() -> float:
    """Current monotonic time in milliseconds."""
    return time.perf_counter() * 1000.0


def elapsed_ms(start_ms: float, end_ms: Optional[float] = None) -> int:
    """
    Whole milliseconds elapsed since start_ms.

    Args:
        start_ms: Start time from monotonic_ms()
        end_ms: End time, defaults to now

    Returns:
        Elapsed milliseconds, truncated
    """
    if end_ms is None:
        end_ms = monotonic_ms()

    return int(end_ms - start_ms)


@dataclass
class Stopwatch:
    """Started on creation; reports elapsed milliseconds."""
    started_ms: float = field(default_factory=monotonic_ms)

    def elapsed_ms(self) -> int:
        return elapsed_ms(self.started_ms)

    def restart(self) -> None:
        self.started_ms = monotonic_ms()
