"""
Fan-out pipelines over many shops.

Each shop's lookup runs on the given pool; shops run concurrently relative
to each other. Collected pipelines block once, at the end, and report in
submission order. The reactive pipeline reports each shop as it completes
and hands back a join-all barrier instead of blocking.
"""

from functools import partial
from typing import Callable, Iterator, Optional, Sequence, TypeVar

from ..concurrency.future import Future, await_all
from ..concurrency.pool import WorkerPool
from ..domain.discount import apply_discount
from ..domain.latency import FixedLatency, LatencyModel
from ..domain.models import Currency, Quote, format_price
from ..domain.shop import Shop
from ..errors import BatchError
from ..logging.config import get_pipeline_logger

T = TypeVar("T")

logger = get_pipeline_logger(__name__)


def collect(shops: Sequence[Shop], futures: Sequence[Future[T]]) -> list[T]:
    """
    Wait for every future and return the results in submission order.

    Raises:
        BatchError: After all futures completed, if any of them failed.
            Carries the failures by shop name and the partial results.
    """
    for future in futures:
        future.wait()

    results: list = []
    failures: dict[str, BaseException] = {}

    for shop, future in zip(shops, futures):
        error = future.exception()
        if error is None:
            results.append(future.get())
            continue
        logger.warning("Shop pipeline failed", shop=shop.name, error=repr(error))
        failures[shop.name] = error
        results.append(None)

    if failures:
        raise BatchError(
            f"{len(failures)} of {len(futures)} shops failed: {', '.join(failures)}",
            failures=failures,
            results=results,
        )

    return results


def _price_line(shop: Shop, product: str) -> str:
    return f"{shop.name} price is {format_price(shop.get_price(product))}"


def find_prices(shops: Sequence[Shop], product: str, pool: WorkerPool) -> list[str]:
    """Single-stage lookup per shop, collected in submission order."""
    futures = [pool.submit(_price_line, shop, product) for shop in shops]
    return collect(shops, futures)


def _discounted_quote(
    quote_source: Callable[[str], str],
    product: str,
    pool: WorkerPool,
    service_latency: LatencyModel
) -> Future[str]:
    """quote -> parse -> discount, with the discount submitted as its own step."""
    return (
        pool.submit(quote_source, product)
        .map(Quote.parse)
        .chain(lambda quote: pool.submit(apply_discount, quote, service_latency))
    )


def find_prices_with_discount(
    shops: Sequence[Shop],
    product: str,
    pool: WorkerPool,
    service_latency: Optional[LatencyModel] = None
) -> list[str]:
    """Three-stage quote/parse/discount pipeline per shop, collected in submission order."""
    service_latency = service_latency if service_latency is not None else FixedLatency()
    futures = [
        _discounted_quote(shop.get_quote, product, pool, service_latency)
        for shop in shops
    ]
    return collect(shops, futures)


def stream_prices_with_discount(
    shops: Sequence[Shop],
    product: str,
    pool: WorkerPool,
    service_latency: Optional[LatencyModel] = None
) -> Iterator[Future[str]]:
    """
    Lazily yield one discounted-price future per shop.

    The first stage uses the shop's randomized delay; each shop is
    submitted when the iterator reaches it.
    """
    service_latency = service_latency if service_latency is not None else FixedLatency()
    for shop in shops:
        yield _discounted_quote(shop.get_quote_with_random_delay, product, pool, service_latency)


def log_shop_failure(shop: Shop, error: BaseException) -> None:
    logger.warning("Shop did not respond", shop=shop.name, error=repr(error))


def report_prices_as_completed(
    shops: Sequence[Shop],
    product: str,
    pool: WorkerPool,
    on_result: Callable[[str], None],
    on_error: Optional[Callable[[Shop, BaseException], None]] = None,
    service_latency: Optional[LatencyModel] = None
) -> Future[list[None]]:
    """
    Report each shop's discounted price as soon as it is ready.

    on_result runs in completion order, not submission order. A failed shop
    goes to on_error (a warning log by default) and does not fail the
    returned barrier, which completes once every shop has been reported.
    """
    on_error = on_error or log_shop_failure
    streamed = stream_prices_with_discount(shops, product, pool, service_latency)
    subscriptions = [
        future.subscribe(on_result, on_error=partial(on_error, shop))
        for shop, future in zip(shops, streamed)
    ]
    return await_all(subscriptions)


def price_in_currency(
    shop: Shop,
    currency: Currency,
    product: str,
    pool: WorkerPool,
    rate_latency: Optional[LatencyModel] = None
) -> Future[float]:
    """Price and exchange rate looked up concurrently, then divided."""
    return shop.get_price_in_currency_async(currency, product, pool, rate_latency=rate_latency)
