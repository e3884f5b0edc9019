"""
Error classification for the quote pipelines.

Data errors cover malformed quote payloads and are isolated to the shop
that produced them. System failures cover interrupted waits and misuse of
pools or futures. BatchError is raised at the blocking collection edge.
"""

from .quote_errors import (
    QuoteDataError,
    QuoteParseError,
)
from .system_failures import (
    SystemFailureError,
    InterruptedWaitError,
    PoolConfigurationError,
    PoolShutdownError,
    FutureConsumedError,
    ConfigValidationError,
)
from .batch import BatchError

__all__ = [
    # Data Errors
    "QuoteDataError",
    "QuoteParseError",
    # System Failures
    "SystemFailureError",
    "InterruptedWaitError",
    "PoolConfigurationError",
    "PoolShutdownError",
    "FutureConsumedError",
    "ConfigValidationError",
    # Collection
    "BatchError",
]
