"""
Main quote engine coordinator.

Wires configuration, shops, latency models and pools together and runs the
batch pipelines with timing, the way the console walk-through uses them:
one dedicated pool per batch sized to the number of shops, plus the shared
pool held by an explicit PoolContext.
"""

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

import structlog

from .concurrency.pool import PoolContext
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .domain.latency import latency_from_config
from .domain.models import Currency
from .domain.shop import Shop
from .errors import BatchError, ConfigValidationError
from .logging.config import get_pipeline_logger, log_batch_outcome
from .pipeline import pipelines
from .utils.time import Stopwatch

logger = structlog.get_logger(__name__)
pipeline_logger = get_pipeline_logger(__name__)


@dataclass(frozen=True)
class BatchTiming:
    """Results of one batch and how long it took."""
    results: list[Any]
    elapsed_ms: int


@dataclass(frozen=True)
class AsyncPriceTiming:
    """Invocation vs retrieval latency of a single asynchronous lookup."""
    price: float
    invocation_ms: int
    retrieval_ms: int


@dataclass(frozen=True)
class CurrencyTiming:
    """Price converted to a currency and how long the combine took."""
    price: float
    currency: Currency
    pool_name: str
    elapsed_ms: int


class QuoteEngine:
    """
    Coordinator for the quote pipelines.

    Manages:
    Config → Shops → Pools → Pipelines → Timed results
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        overrides: Optional[dict[str, Any]] = None,
        shops: Optional[Sequence[Shop]] = None,
        rng: Optional[random.Random] = None
    ) -> None:
        """Initialize the quote engine."""
        self.logger = logger
        self.config_loader = ConfigLoader.create(config_dir)
        self.config = self.config_loader.merge_config(overrides)

        validation_errors = ConfigValidator.validate_config(self.config)
        if validation_errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in validation_errors]
            self.logger.error("Configuration validation failed", errors=error_msgs)
            raise ConfigValidationError("Invalid configuration", errors=validation_errors)

        demo = self.config["demo"]
        self.rng = rng if rng is not None else random.Random(demo["seed"])
        self.latency, self.random_latency = latency_from_config(self.config, self.rng)
        self.product: str = demo["product"]
        self.currency = Currency.from_name(demo["currency"])

        if shops is None:
            shops = [self._build_shop(name) for name in demo["shops"]]
        self.shops: list[Shop] = list(shops)

        self.pool_context = PoolContext.from_config(self.config)

        self.logger.info(
            "Quote engine initialized",
            shops=[shop.name for shop in self.shops],
            product=self.product,
            pool_ceiling=self.pool_context.ceiling
        )

    def __enter__(self) -> "QuoteEngine":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _build_shop(self, name: str) -> Shop:
        return Shop(name, rng=self.rng, latency=self.latency, random_latency=self.random_latency)

    def close(self) -> None:
        """Release the shared pool."""
        self.pool_context.close()

    def price_async(self, shop: Optional[Shop] = None, product: Optional[str] = None) -> AsyncPriceTiming:
        """
        Time one asynchronous lookup on the shared pool.

        Invocation returns as soon as the lookup is scheduled; retrieval
        blocks until the price is available.
        """
        demo = self.config["demo"]
        shop = shop or self._build_shop(demo["single_shop"])
        product = product or demo["single_product"]

        watch = Stopwatch()
        future = shop.get_price_async(product, self.pool_context.shared)
        invocation_ms = watch.elapsed_ms()
        price = future.get()
        retrieval_ms = watch.elapsed_ms()

        self.logger.info(
            "Asynchronous price retrieved",
            shop=shop.name,
            invocation_ms=invocation_ms,
            retrieval_ms=retrieval_ms
        )
        return AsyncPriceTiming(price=price, invocation_ms=invocation_ms, retrieval_ms=retrieval_ms)

    def find_prices(self, product: Optional[str] = None) -> BatchTiming:
        """Direct price pipeline over all shops on a batch pool."""
        return self._run_collected(
            "find_prices",
            product or self.product,
            lambda pool, item: pipelines.find_prices(self.shops, item, pool),
        )

    def find_prices_with_discount(self, product: Optional[str] = None) -> BatchTiming:
        """Quote/parse/discount pipeline over all shops on a batch pool."""
        return self._run_collected(
            "find_prices_with_discount",
            product or self.product,
            lambda pool, item: pipelines.find_prices_with_discount(
                self.shops, item, pool, service_latency=self.latency
            ),
        )

    def _run_collected(self, name: str, product: str, run: Callable) -> BatchTiming:
        watch = Stopwatch()
        pipeline_logger.info("Batch started", pipeline=name, product=product, shop_count=len(self.shops))

        with self.pool_context.dedicated(len(self.shops), name=name) as pool:
            try:
                results = run(pool, product)
            except BatchError as e:
                log_batch_outcome(pipeline_logger, name, product, len(self.shops),
                                  watch.elapsed_ms(), failed=e.failed_shops)
                raise

        elapsed = watch.elapsed_ms()
        log_batch_outcome(pipeline_logger, name, product, len(self.shops), elapsed)
        return BatchTiming(results=results, elapsed_ms=elapsed)

    def price_in_currency(
        self,
        currency: Optional[Currency] = None,
        product: Optional[str] = None,
        shared: bool = True,
        shop: Optional[Shop] = None
    ) -> CurrencyTiming:
        """
        Combine an independent price and exchange-rate lookup.

        Args:
            currency: Target currency, defaults to the configured one
            product: Product to price
            shared: Use the shared pool; otherwise a dedicated single-worker
                pool, on which the two lookups run one after the other
            shop: Shop to ask, defaults to the configured single shop
        """
        demo = self.config["demo"]
        currency = currency or self.currency
        product = product or demo["single_product"]
        shop = shop or self._build_shop(demo["single_shop"])

        watch = Stopwatch()
        if shared:
            pool = self.pool_context.shared
            price = pipelines.price_in_currency(shop, currency, product, pool, self.latency).get()
        else:
            with self.pool_context.dedicated(1, name="price_in_currency") as pool:
                price = pipelines.price_in_currency(shop, currency, product, pool, self.latency).get()
        elapsed = watch.elapsed_ms()

        self.logger.info(
            "Price converted",
            shop=shop.name,
            currency=currency.name,
            pool=pool.name,
            elapsed_ms=elapsed
        )
        return CurrencyTiming(price=price, currency=currency, pool_name=pool.name, elapsed_ms=elapsed)

    def report_as_completed(
        self,
        on_result: Callable[[str, int], None],
        product: Optional[str] = None,
        on_error: Optional[Callable[[Shop, BaseException], None]] = None
    ) -> BatchTiming:
        """
        Reactive randomized-delay pipeline.

        on_result receives each discounted price line with the milliseconds
        elapsed since the batch started, in completion order. Blocks on the
        join-all barrier before returning.
        """
        product = product or self.product
        watch = Stopwatch()
        reported: list[str] = []
        failed: list[str] = []
        on_error = on_error or pipelines.log_shop_failure

        def _report(line: str) -> None:
            reported.append(line)
            on_result(line, watch.elapsed_ms())

        def _fail(shop: Shop, error: BaseException) -> None:
            failed.append(shop.name)
            on_error(shop, error)

        pipeline_logger.info("Batch started", pipeline="report_as_completed",
                             product=product, shop_count=len(self.shops))

        with self.pool_context.dedicated(len(self.shops), name="report_as_completed") as pool:
            barrier = pipelines.report_prices_as_completed(
                self.shops, product, pool, _report,
                on_error=_fail, service_latency=self.latency
            )
            barrier.get()

        elapsed = watch.elapsed_ms()
        log_batch_outcome(pipeline_logger, "report_as_completed", product, len(self.shops),
                          elapsed, failed=failed)
        return BatchTiming(results=reported, elapsed_ms=elapsed)
