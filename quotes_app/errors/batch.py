"""Failure raised when a collected batch has failed shops."""

from typing import Any, Optional


class BatchError(Exception):
    """
    One or more shops in a collected batch failed.

    Raised only after every future of the batch completed, so the
    successful results are still available alongside the failures.
    """

    def __init__(self, message: str, failures: Optional[dict[str, BaseException]] = None,
                 results: Optional[list[Any]] = None):
        super().__init__(message)
        self.failures = failures or {}
        self.results = results or []

    @property
    def failed_shops(self) -> list[str]:
        """Names of the shops whose pipeline failed, in submission order."""
        return list(self.failures)
