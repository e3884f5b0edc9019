"""
Canonical quote data models.

Immutable values exchanged between pipeline stages: the discount codes and
currencies are closed enumerations carrying their constants, and Quote owns
the colon-delimited wire encoding shops return.
"""

import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import Enum

from ..errors import QuoteParseError

_CENTS = Decimal("0.01")
# Enough digits for any finite float quantized to cents (max is ~1.8e308)
_CENTS_PRECISION = 320

FIELD_SEPARATOR = ":"
_PRICE_TEXT = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")


def _to_cents(value: float) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = _CENTS_PRECISION
        return Decimal(repr(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def round2(value: float) -> float:
    """Round half-up to two decimals, as the shops print prices."""
    return float(_to_cents(value))


def format_price(value: float) -> str:
    """Render a price with exactly two decimals."""
    return format(_to_cents(value), "f")


class DiscountCode(Enum):
    """Discount tiers with their percentage off."""
    NONE = 0
    SILVER = 5
    GOLD = 10
    PLATINUM = 15
    DIAMOND = 20

    @property
    def percentage(self) -> int:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "DiscountCode":
        """Look up a code by its exact name."""
        try:
            return cls[name]
        except KeyError:
            raise QuoteParseError(
                f"Unknown discount code: {name!r}",
                raw_data=name,
                reason="unknown_discount_code"
            ) from None


class Currency(Enum):
    """Currencies with their rate against the base unit."""
    USD = 1.0
    EUR = 1.16

    @property
    def rate(self) -> float:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "Currency":
        """Look up a currency by its exact name."""
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown currency: {name!r}") from None


@dataclass(frozen=True)
class Quote:
    """Price quote from a single shop."""
    shop_name: str
    price: float
    discount_code: DiscountCode

    def __post_init__(self) -> None:
        if FIELD_SEPARATOR in self.shop_name:
            raise ValueError(f"Shop name must not contain {FIELD_SEPARATOR!r}: {self.shop_name!r}")
        if not math.isfinite(self.price):
            raise ValueError(f"Quote price must be finite, got {self.price}")
        if self.price < 0:
            raise ValueError(f"Quote price must be non-negative, got {self.price}")

    def encode(self) -> str:
        """Encode as '<shop_name>:<price>:<discount_code>'."""
        return FIELD_SEPARATOR.join((self.shop_name, format_price(self.price), self.discount_code.name))

    @classmethod
    def parse(cls, text: str) -> "Quote":
        """
        Parse the colon-delimited quote encoding.

        Args:
            text: Encoded quote, e.g. 'BestPrice:123.26:GOLD'

        Returns:
            Parsed Quote

        Raises:
            QuoteParseError: On wrong field count, a non-numeric or negative
                price, or an unknown discount code.
        """
        fields = text.split(FIELD_SEPARATOR)
        if len(fields) != 3:
            raise QuoteParseError(
                f"Expected 3 fields, got {len(fields)}",
                raw_data=text,
                reason="field_count"
            )

        shop_name, raw_price, raw_code = fields

        # Plain decimal digits only, as encode() writes them
        price = float(raw_price) if _PRICE_TEXT.fullmatch(raw_price) else math.nan
        if not math.isfinite(price):
            raise QuoteParseError(
                f"Price is not a number: {raw_price!r}",
                raw_data=text,
                reason="price_not_numeric"
            )

        if price < 0:
            raise QuoteParseError(
                f"Price must be non-negative: {raw_price!r}",
                raw_data=text,
                reason="price_negative"
            )

        try:
            code = DiscountCode.from_name(raw_code)
        except QuoteParseError as e:
            e.raw_data = text
            raise

        return cls(shop_name=shop_name, price=price, discount_code=code)
