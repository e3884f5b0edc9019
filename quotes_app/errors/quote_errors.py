"""
Quote data error classifications.

These exceptions describe problems with the colon-delimited quote payload
a shop returns. They fail the parsing stage of one shop's pipeline only.
"""

from typing import Optional, Dict, Any

QUOTE_FORMAT = "<shop_name>:<price>:<discount_code>"


class QuoteDataError(Exception):
    """Base class for quote data issues confined to a single shop."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class QuoteParseError(QuoteDataError):
    """Quote payload has the wrong field count, price or discount code."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: str = QUOTE_FORMAT,
                 reason: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format
        self.reason = reason
