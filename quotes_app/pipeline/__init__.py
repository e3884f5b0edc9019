"""
Batch pipelines over many shops.

Collected pipelines (find_prices, find_prices_with_discount) report in
submission order; the reactive pipeline (report_prices_as_completed)
reports in completion order behind a join-all barrier.
"""

from .pipelines import (
    collect,
    find_prices,
    find_prices_with_discount,
    price_in_currency,
    report_prices_as_completed,
    stream_prices_with_discount,
)

__all__ = [
    "collect",
    "find_prices",
    "find_prices_with_discount",
    "price_in_currency",
    "report_prices_as_completed",
    "stream_prices_with_discount",
]
