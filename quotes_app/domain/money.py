"""Exchange-rate service."""

from .latency import LatencyModel
from .models import Currency


def lookup_rate(currency: Currency, latency: LatencyModel) -> float:
    """Return the currency's rate after a simulated remote-call delay."""
    latency.pause()
    return currency.rate
