"""Pytest configuration and shared fixtures."""

import random
import threading
from typing import Callable, Iterator, Optional

import pytest

from quotes_app.concurrency.pool import WorkerPool, new_worker_pool
from quotes_app.domain.latency import FixedLatency, LatencyModel, NoLatency
from quotes_app.domain.models import DiscountCode
from quotes_app.domain.shop import Shop

# Scales FixedLatency units so 1000 units take 0.1s in tests
FAST_UNIT = 0.0001


class GateLatency(LatencyModel):
    """Pauses until the test opens the gate."""

    def __init__(self, gate: threading.Event, timeout: float = 5.0):
        super().__init__()
        self.gate = gate
        self.timeout = timeout

    def delay_ms(self) -> int:
        return 0

    def pause(self) -> None:
        super().pause()
        assert self.gate.wait(self.timeout), "gate was never opened"


class StubShop(Shop):
    """Shop returning a canned quote payload."""

    def __init__(self, name: str, payload: str):
        super().__init__(name, latency=NoLatency(), random_latency=NoLatency())
        self.payload = payload

    def get_quote(self, product: str) -> str:
        return self.payload

    def get_quote_with_random_delay(self, product: str) -> str:
        return self.payload


@pytest.fixture
def no_latency() -> NoLatency:
    return NoLatency()


@pytest.fixture
def make_shop() -> Callable[..., Shop]:
    """Factory for shops with a fixed price and discount code."""

    def _make(
        name: str,
        price: float = 100.0,
        code: DiscountCode = DiscountCode.NONE,
        latency: Optional[LatencyModel] = None,
        random_latency: Optional[LatencyModel] = None,
    ) -> Shop:
        return Shop(
            name,
            rng=random.Random(0),
            latency=latency if latency is not None else NoLatency(),
            random_latency=random_latency if random_latency is not None else NoLatency(),
            pricing=lambda product, rng: price,
            discount_picker=lambda rng: code,
        )

    return _make


@pytest.fixture
def fast_delay() -> Callable[[int], FixedLatency]:
    """FixedLatency in scaled units: fast_delay(2000) pauses 0.2s."""
    return lambda units: FixedLatency(units, time_unit_seconds=FAST_UNIT)


@pytest.fixture
def pool() -> Iterator[WorkerPool]:
    worker_pool = new_worker_pool(8, name="test-pool")
    yield worker_pool
    worker_pool.shutdown(wait=False)


@pytest.fixture
def gate_latency() -> type[GateLatency]:
    return GateLatency


@pytest.fixture
def stub_shop() -> type[StubShop]:
    return StubShop
