"""
System failure error classifications.

These exceptions are terminal for the future that raised them: nothing in
the pipelines retries or recovers from them.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class InterruptedWaitError(SystemFailureError):
    """A simulated remote-call delay was interrupted."""

    def __init__(self, message: str, delay_ms: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.delay_ms = delay_ms


class PoolConfigurationError(SystemFailureError):
    """Worker pool requested with a size that is not an integer."""

    def __init__(self, message: str, requested_size: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.requested_size = requested_size


class PoolShutdownError(SystemFailureError):
    """Work submitted to a pool after it was shut down."""

    def __init__(self, message: str, pool_name: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.pool_name = pool_name


class FutureConsumedError(SystemFailureError):
    """A future was composed again after an operator already consumed it."""


class ConfigValidationError(SystemFailureError):
    """Merged configuration failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
