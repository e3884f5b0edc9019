#!/usr/bin/env python3
"""
Basic Usage Example - Quote Pipelines

This script shows how to use the pipelines directly, without the engine:
- Build shops with a seeded generator and scaled-down latency
- Compose quote -> parse -> discount on a bounded pool
- React to prices as they arrive, then wait on the join-all barrier
- See a malformed quote fail only its own shop

Run: python examples/basic_usage.py
"""

import random

from quotes_app.concurrency import new_worker_pool
from quotes_app.domain import FixedLatency, RandomLatency, Shop
from quotes_app.errors import BatchError
from quotes_app.pipeline import find_prices_with_discount, report_prices_as_completed
from quotes_app.utils.time import Stopwatch

# One delay unit is 0.1 ms here, so a "1 second" lookup takes 0.1 s
TIME_UNIT = 0.0001


class GarbledShop(Shop):
    """Shop whose quote service returns an unreadable payload."""

    def get_quote(self, product: str) -> str:
        self.latency.pause()
        return f"{self.name}:???:GOLD"


def build_shops(rng: random.Random) -> list[Shop]:
    latency = FixedLatency(time_unit_seconds=TIME_UNIT)
    random_latency = RandomLatency(rng=rng, time_unit_seconds=TIME_UNIT)
    return [
        Shop(name, rng=rng, latency=latency, random_latency=random_latency)
        for name in ("BestPrice", "LetsSaveBig", "MyFavoriteShop", "BuyItAll")
    ]


def main():
    """Main demonstration function."""
    print("Quote Pipelines - Basic Usage Demo")
    print("=" * 60)

    rng = random.Random(2024)
    shops = build_shops(rng)
    service_latency = FixedLatency(time_unit_seconds=TIME_UNIT)

    print("\nDiscounted prices, collected in shop order:")
    with new_worker_pool(len(shops)) as pool:
        watch = Stopwatch()
        for line in find_prices_with_discount(shops, "myPhone", pool, service_latency):
            print(f"  {line}")
        print(f"  done in {watch.elapsed_ms()} msecs")

    print("\nPrices reported as each shop responds:")
    with new_worker_pool(len(shops)) as pool:
        watch = Stopwatch()
        barrier = report_prices_as_completed(
            shops, "myPhone", pool,
            lambda line: print(f"  {line} (after {watch.elapsed_ms()} msecs)"),
            service_latency=service_latency,
        )
        barrier.get()
        print(f"  all shops responded in {watch.elapsed_ms()} msecs")

    print("\nOne shop returning a malformed quote:")
    mixed = shops[:2] + [GarbledShop("Garbled", rng=rng, latency=service_latency)]
    with new_worker_pool(len(mixed)) as pool:
        try:
            find_prices_with_discount(mixed, "myPhone", pool, service_latency)
        except BatchError as e:
            for name, error in e.failures.items():
                print(f"  {name} failed: {error} (reason: {error.reason})")
            print(f"  partial results: {e.results}")


if __name__ == "__main__":
    main()
