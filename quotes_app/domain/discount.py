"""Discount service: applies a quote's discount code to its price."""

from .latency import LatencyModel
from .models import DiscountCode, Quote, format_price, round2


def apply(price: float, code: DiscountCode) -> float:
    """Discounted price, rounded half-up to two decimals."""
    return round2(price * (100 - code.percentage) / 100)


def apply_discount(quote: Quote, latency: LatencyModel) -> str:
    """
    Apply the quote's discount after a simulated remote-call delay.

    Returns:
        '<shop_name> price is <discounted price>'
    """
    latency.pause()
    return f"{quote.shop_name} price is {format_price(apply(quote.price, quote.discount_code))}"
