"""
Quote domain module.

Shops, quotes, discount codes and currencies, plus the injectable latency
models that stand in for remote-call delays.
"""

from .latency import FixedLatency, LatencyModel, NoLatency, RandomLatency, latency_from_config
from .models import Currency, DiscountCode, Quote, format_price, round2
from .shop import Shop

__all__ = [
    "LatencyModel",
    "NoLatency",
    "FixedLatency",
    "RandomLatency",
    "latency_from_config",
    "Currency",
    "DiscountCode",
    "Quote",
    "format_price",
    "round2",
    "Shop",
]
