#!/usr/bin/env python3
"""Console walk-through of the quote pipelines.

Runs the five scenarios end to end with real (simulated) latency:

1. Asynchronous lookup: invocation vs retrieval time
2. Direct prices from every shop on a batch pool
3. Quote -> parse -> discount pipeline
4. Price in another currency, on the shared pool and on a 1-worker pool
5. Randomized-delay shops reported as they respond, then a join-all barrier

Usage:
    python scripts/run_demo.py
"""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from quotes_app.config.loader import ConfigLoader
from quotes_app.engine import QuoteEngine
from quotes_app.errors import BatchError
from quotes_app.logging.config import configure_logging


def main() -> None:
    """Run all five scenarios."""
    logging_params = ConfigLoader.create().merge_config()["logging"]
    configure_logging(
        level=logging_params["level"],
        format_json=logging_params["format_json"],
        include_timestamp=False
    )

    with QuoteEngine() as engine:
        print("Test1: asynchronous API")
        timing = engine.price_async()
        print(f"Invocation returned after {timing.invocation_ms} msecs")
        print(f"Price is {timing.price:.2f}")
        print(f"Price returned after {timing.retrieval_ms} msecs")

        print("\nTest2: non-blocking requests")
        batch = engine.find_prices()
        print(batch.results)
        print(f"Done in {batch.elapsed_ms} msecs")

        print("\nTest3: composing sync and async operations")
        try:
            batch = engine.find_prices_with_discount()
            print(batch.results)
            print(f"Done in {batch.elapsed_ms} msecs")
        except BatchError as e:
            print(f"Shops failed: {e.failed_shops}")
            print(e.results)

        print("\nTest4: combining two independent futures")
        for shared in (True, False):
            converted = engine.price_in_currency(shared=shared)
            print(f"Price is {converted.price:.2f} in {converted.currency.name} ({converted.pool_name})")
            print(f"Done in {converted.elapsed_ms} msecs")

        print("\nTest5: reacting to completion")
        batch = engine.report_as_completed(
            lambda line, elapsed: print(f"{line} (done in {elapsed} msecs)")
        )
        print(f"All shops have now responded in {batch.elapsed_ms} msecs")


if __name__ == "__main__":
    main()
