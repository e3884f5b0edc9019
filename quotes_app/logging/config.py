"""
Centralized logging configuration for the quotes pipelines.

This module provides standardized logging configuration using structlog
for all components. Pools, pipelines and the engine log through loggers
obtained here so batch timings and per-shop failures share one format.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO,
                        structlog.processors.CallsiteParameter.THREAD_NAME]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_pipeline_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for batch pipelines.

    Binds the pipeline subsystem so batch start/finish and per-shop
    outcomes can be filtered together. The binding happens on first use,
    so module-level loggers follow configure_logging.
    """
    return structlog.get_logger(name, subsystem="pipeline")


def get_pool_logger(name: str) -> FilteringBoundLogger:
    """Get a logger for worker pool lifecycle events."""
    return structlog.get_logger(name, subsystem="pool")


def log_batch_outcome(
    logger: FilteringBoundLogger,
    pipeline: str,
    product: str,
    shop_count: int,
    elapsed_ms: int,
    failed: Optional[list[str]] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the outcome of one fan-out batch with standardized fields.

    Args:
        logger: Structlog logger instance
        pipeline: Name of the pipeline shape that ran
        product: Product identifier that was quoted
        shop_count: Number of shops in the batch
        elapsed_ms: Wall-clock duration of the batch
        failed: Names of shops whose result failed
        context: Additional context data
    """
    bound_logger = logger.bind(
        pipeline=pipeline,
        product=product,
        shop_count=shop_count,
        elapsed_ms=elapsed_ms,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if failed:
        bound_logger.warning("Batch completed with failures", failed_shops=failed)
    else:
        bound_logger.info("Batch completed")
