"""
Shops: named sources of price quotes.

A shop holds nothing but its name and the collaborators it was built with
(random generator, latency models, pricing rule). Every quote is computed on
demand and returned as a fresh immutable value.
"""

import random
from typing import TYPE_CHECKING, Callable, Optional

from .latency import FixedLatency, LatencyModel, RandomLatency
from .models import FIELD_SEPARATOR, Currency, DiscountCode, Quote, round2
from .money import lookup_rate

if TYPE_CHECKING:
    from ..concurrency.future import Future
    from ..concurrency.pool import WorkerPool

PricingRule = Callable[[str, random.Random], float]
DiscountPicker = Callable[[random.Random], DiscountCode]


def default_pricing(product: str, rng: random.Random) -> float:
    """Pseudo-random price seeded from the product's first two characters."""
    if len(product) < 2:
        raise ValueError(f"Product identifier must have at least 2 characters: {product!r}")
    return rng.random() * ord(product[0]) + ord(product[1])


def random_discount_code(rng: random.Random) -> DiscountCode:
    return rng.choice(list(DiscountCode))


class Shop:
    """A named quote source."""

    def __init__(
        self,
        name: str,
        rng: Optional[random.Random] = None,
        latency: Optional[LatencyModel] = None,
        random_latency: Optional[LatencyModel] = None,
        pricing: Optional[PricingRule] = None,
        discount_picker: Optional[DiscountPicker] = None
    ) -> None:
        if FIELD_SEPARATOR in name:
            raise ValueError(f"Shop name must not contain {FIELD_SEPARATOR!r}: {name!r}")
        self.name = name
        self.rng = rng if rng is not None else random.Random()
        self.latency = latency if latency is not None else FixedLatency()
        self.random_latency = (
            random_latency if random_latency is not None else RandomLatency(rng=self.rng)
        )
        self.pricing = pricing or default_pricing
        self.discount_picker = discount_picker or random_discount_code

    def __repr__(self) -> str:
        return f"Shop({self.name!r})"

    def calculate_price(self, product: str) -> float:
        self.latency.pause()
        return self.pricing(product, self.rng)

    def calculate_price_with_random_delay(self, product: str) -> float:
        self.random_latency.pause()
        return self.pricing(product, self.rng)

    def get_price(self, product: str) -> float:
        """Price rounded to two decimals (blocks for one fixed delay)."""
        return round2(self.calculate_price(product))

    def get_quote(self, product: str) -> str:
        """Encoded quote '<name>:<price>:<code>' (blocks for one fixed delay)."""
        return self._encode(self.calculate_price(product))

    def get_quote_with_random_delay(self, product: str) -> str:
        """Encoded quote after a randomized delay."""
        return self._encode(self.calculate_price_with_random_delay(product))

    def _encode(self, price: float) -> str:
        code = self.discount_picker(self.rng)
        return Quote(self.name, round2(price), code).encode()

    # asynchronous API

    def get_price_async(self, product: str, pool: "WorkerPool") -> "Future[float]":
        """Schedule calculate_price on pool and return immediately."""
        return pool.submit(self.calculate_price, product)

    def get_price_in_currency_async(
        self,
        currency: Currency,
        product: str,
        pool: "WorkerPool",
        rate_latency: Optional[LatencyModel] = None
    ) -> "Future[float]":
        """
        Price converted to currency.

        The price and the exchange rate are independent lookups: both are
        submitted before either completes and the results are zipped.
        """
        rate_latency = rate_latency if rate_latency is not None else FixedLatency()
        price = pool.submit(self.get_price, product)
        rate = pool.submit(lookup_rate, currency, rate_latency)
        return price.zip(rate, lambda amount, fx: amount / fx)
