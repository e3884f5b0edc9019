"""Tests for the fan-out quote pipelines."""

import threading

import pytest

from quotes_app.concurrency.future import Future
from quotes_app.concurrency.pool import new_worker_pool
from quotes_app.domain.latency import NoLatency
from quotes_app.domain.models import Currency, DiscountCode
from quotes_app.errors import BatchError, InterruptedWaitError, QuoteParseError
from quotes_app.pipeline import (
    collect,
    find_prices,
    find_prices_with_discount,
    price_in_currency,
    report_prices_as_completed,
    stream_prices_with_discount,
)

DISCOUNTED = [
    ("BestPrice", 10.0, DiscountCode.NONE, "BestPrice price is 10.00"),
    ("LetsSaveBig", 20.0, DiscountCode.SILVER, "LetsSaveBig price is 19.00"),
    ("MyFavoriteShop", 30.0, DiscountCode.GOLD, "MyFavoriteShop price is 27.00"),
    ("BuyItAll", 40.0, DiscountCode.PLATINUM, "BuyItAll price is 34.00"),
]


class TestCollect:
    """Test suite for blocking collection."""

    def test_submission_order(self, make_shop):
        shops = [make_shop("A"), make_shop("B")]
        assert collect(shops, [Future.completed(1), Future.completed(2)]) == [1, 2]

    def test_failures_reported_after_all(self, make_shop):
        shops = [make_shop("A"), make_shop("B"), make_shop("C")]
        error = RuntimeError("down")

        with pytest.raises(BatchError) as exc_info:
            collect(shops, [Future.completed(1), Future.failed(error), Future.completed(3)])

        assert exc_info.value.failures == {"B": error}
        assert exc_info.value.failed_shops == ["B"]
        assert exc_info.value.results == [1, None, 3]


class TestFindPrices:
    """Test suite for the direct price pipeline."""

    def test_results_in_shop_order(self, make_shop, fast_delay):
        shops = [
            make_shop("Slow", price=1.0, latency=fast_delay(2000)),
            make_shop("Fast", price=2.0, latency=fast_delay(100)),
            make_shop("Medium", price=3.456, latency=fast_delay(800)),
        ]
        with new_worker_pool(len(shops)) as pool:
            results = find_prices(shops, "myPhone", pool)

        assert results == [
            "Slow price is 1.00",
            "Fast price is 2.00",
            "Medium price is 3.46",
        ]

    def test_shops_run_concurrently(self, make_shop, gate_latency):
        """All shops must be paused at once for the gate to open."""
        gate = threading.Event()
        arrived = threading.Barrier(4, action=gate.set, timeout=5)

        class ArrivalLatency(gate_latency):
            def pause(self):
                arrived.wait()
                super().pause()

        shops = [make_shop(f"S{i}", latency=ArrivalLatency(gate)) for i in range(4)]
        with new_worker_pool(4) as pool:
            assert len(find_prices(shops, "myPhone", pool)) == 4

    def test_empty_shop_list(self, pool):
        assert find_prices([], "myPhone", pool) == []


class TestFindPricesWithDiscount:
    """Test suite for the quote/parse/discount pipeline."""

    def test_end_to_end(self, make_shop, pool):
        shops = [make_shop(name, price=price, code=code) for name, price, code, _ in DISCOUNTED]
        results = find_prices_with_discount(shops, "myPhone", pool, service_latency=NoLatency())
        assert results == [line for *_, line in DISCOUNTED]

    def test_preserves_order_with_uneven_latency(self, make_shop, fast_delay):
        shops = [
            make_shop("A", price=10.0, latency=fast_delay(1500)),
            make_shop("B", price=20.0, latency=fast_delay(100)),
        ]
        with new_worker_pool(2) as pool:
            results = find_prices_with_discount(shops, "myPhone", pool, service_latency=fast_delay(100))
        assert results == ["A price is 10.00", "B price is 20.00"]

    def test_parse_failure_isolated(self, make_shop, stub_shop, pool):
        shops = [
            make_shop("Good", price=20.0, code=DiscountCode.SILVER),
            stub_shop("Broken", "Broken:not-a-price:GOLD"),
            make_shop("AlsoGood", price=10.0),
        ]

        with pytest.raises(BatchError) as exc_info:
            find_prices_with_discount(shops, "myPhone", pool, service_latency=NoLatency())

        error = exc_info.value
        assert error.failed_shops == ["Broken"]
        assert isinstance(error.failures["Broken"], QuoteParseError)
        assert error.failures["Broken"].reason == "price_not_numeric"
        assert error.results == ["Good price is 19.00", None, "AlsoGood price is 10.00"]

    def test_unknown_discount_code_isolated(self, stub_shop, pool):
        shops = [stub_shop("Odd", "Odd:10.00:TITANIUM")]
        with pytest.raises(BatchError) as exc_info:
            find_prices_with_discount(shops, "myPhone", pool, service_latency=NoLatency())
        assert exc_info.value.failures["Odd"].reason == "unknown_discount_code"

    def test_interrupted_wait_isolated(self, make_shop, pool):
        stalled = NoLatency()
        stalled.interrupt()
        shops = [make_shop("Stalled", latency=stalled), make_shop("Fine", price=5.0)]

        with pytest.raises(BatchError) as exc_info:
            find_prices_with_discount(shops, "myPhone", pool, service_latency=NoLatency())

        assert isinstance(exc_info.value.failures["Stalled"], InterruptedWaitError)
        assert exc_info.value.results == [None, "Fine price is 5.00"]

    def test_interrupted_discount_service(self, make_shop, pool):
        service = NoLatency()
        service.interrupt()

        with pytest.raises(BatchError) as exc_info:
            find_prices_with_discount([make_shop("A")], "myPhone", pool, service_latency=service)
        assert isinstance(exc_info.value.failures["A"], InterruptedWaitError)


class TestStreamPricesWithDiscount:
    """Test suite for the lazy per-shop stream."""

    def test_submits_on_demand(self, make_shop):
        shops = [make_shop("A", price=10.0), make_shop("B", price=20.0, code=DiscountCode.SILVER)]
        with new_worker_pool(2) as pool:
            stream = stream_prices_with_discount(shops, "myPhone", pool, service_latency=NoLatency())
            assert pool.thread_count == 0

            first = next(stream)
            assert pool.thread_count >= 1
            assert first.get() == "A price is 10.00"
            assert [future.get() for future in stream] == ["B price is 19.00"]

    def test_uses_random_delay(self, make_shop, gate_latency):
        gate = threading.Event()
        shop = make_shop("A", random_latency=gate_latency(gate))
        with new_worker_pool(1) as pool:
            (future,) = stream_prices_with_discount([shop], "myPhone", pool, service_latency=NoLatency())
            assert not future.wait(timeout=0.05)
            gate.set()
            assert future.get() == "A price is 100.00"


class TestReportPricesAsCompleted:
    """Test suite for the reactive pipeline."""

    def test_completion_order(self, make_shop, fast_delay):
        shops = [
            make_shop("A", price=10.0, random_latency=fast_delay(2000)),
            make_shop("B", price=20.0, random_latency=fast_delay(500)),
            make_shop("C", price=30.0, random_latency=fast_delay(1000)),
        ]
        reported = []

        with new_worker_pool(3) as pool:
            barrier = report_prices_as_completed(
                shops, "myPhone", pool, reported.append, service_latency=NoLatency()
            )
            barrier.get()

        assert reported == ["B price is 20.00", "C price is 30.00", "A price is 10.00"]

    def test_barrier_waits_for_every_shop(self, make_shop, gate_latency):
        gate = threading.Event()
        shops = [make_shop("Fast"), make_shop("Gated", random_latency=gate_latency(gate))]
        reported = []
        first_reported = threading.Event()

        def _report(line):
            reported.append(line)
            first_reported.set()

        with new_worker_pool(2) as pool:
            barrier = report_prices_as_completed(
                shops, "myPhone", pool, _report, service_latency=NoLatency()
            )
            assert first_reported.wait(5)
            assert not barrier.done()
            assert reported == ["Fast price is 100.00"]

            gate.set()
            assert barrier.get() == [None, None]
        assert len(reported) == 2

    def test_failure_goes_to_handler(self, make_shop, stub_shop, pool):
        shops = [stub_shop("Broken", "garbage"), make_shop("Fine")]
        reported = []
        failures = []

        barrier = report_prices_as_completed(
            shops, "myPhone", pool, reported.append,
            on_error=lambda shop, error: failures.append((shop.name, error)),
            service_latency=NoLatency(),
        )
        barrier.get()

        assert reported == ["Fine price is 100.00"]
        assert failures[0][0] == "Broken"
        assert failures[0][1].reason == "field_count"

    def test_default_handler_logs(self, stub_shop, pool):
        barrier = report_prices_as_completed(
            [stub_shop("Broken", "garbage")], "myPhone", pool, lambda line: None,
            service_latency=NoLatency(),
        )
        assert barrier.get() == [None]


class TestPriceInCurrency:
    """Test suite for the two-source currency combine."""

    def test_euro_conversion(self, make_shop, pool):
        shop = make_shop("BestShop", price=116.0)
        future = price_in_currency(shop, Currency.EUR, "myPhone", pool, rate_latency=NoLatency())
        assert future.get() == pytest.approx(100.0)

    def test_usd_is_identity(self, make_shop, pool):
        shop = make_shop("BestShop", price=42.5)
        future = price_in_currency(shop, Currency.USD, "myPhone", pool, rate_latency=NoLatency())
        assert future.get() == pytest.approx(42.5)

    def test_single_worker_still_completes(self, make_shop):
        shop = make_shop("BestShop", price=11.6)
        with new_worker_pool(1) as single:
            future = price_in_currency(shop, Currency.EUR, "myPhone", single, rate_latency=NoLatency())
            assert future.get() == pytest.approx(10.0)

    def test_rate_failure_fails_result(self, make_shop, pool):
        rate_latency = NoLatency()
        rate_latency.interrupt()
        future = price_in_currency(make_shop("BestShop"), Currency.EUR, "myPhone", pool,
                                   rate_latency=rate_latency)
        with pytest.raises(InterruptedWaitError):
            future.get()
