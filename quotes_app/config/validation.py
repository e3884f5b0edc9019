"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..domain.models import FIELD_SEPARATOR, Currency

MAX_POOL_CEILING = 100
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_shop_name(value: Any) -> bool:
    return isinstance(value, str) and bool(value) and FIELD_SEPARATOR not in value


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_pool_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate worker pool parameters."""
        errors = []

        if "max_workers" in params:
            value = params["max_workers"]
            if not _is_int(value) or value <= 0 or value > MAX_POOL_CEILING:
                errors.append(ValidationError(
                    field="max_workers",
                    message=f"Must be an integer between 1 and {MAX_POOL_CEILING}",
                    value=value
                ))

        if "shared_pool_size" in params:
            value = params["shared_pool_size"]
            if not _is_int(value) or value < 0:
                errors.append(ValidationError(
                    field="shared_pool_size",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "thread_name_prefix" in params:
            value = params["thread_name_prefix"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="thread_name_prefix",
                    message="Must be a non-empty string",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_latency_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate simulated latency parameters."""
        errors = []

        for name in ("fixed_delay_ms", "random_min_ms", "random_max_ms"):
            if name in params:
                value = params[name]
                if not _is_int(value) or value < 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-negative integer",
                        value=value
                    ))

        low = params.get("random_min_ms")
        high = params.get("random_max_ms")
        if _is_int(low) and _is_int(high) and high <= low:
            errors.append(ValidationError(
                field="random_max_ms",
                message="Must be greater than random_min_ms",
                value=high
            ))

        if "time_unit_seconds" in params:
            value = params["time_unit_seconds"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                errors.append(ValidationError(
                    field="time_unit_seconds",
                    message="Must be a non-negative number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_demo_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate console walk-through parameters."""
        errors = []

        if "shops" in params:
            value = params["shops"]
            if (not isinstance(value, (list, tuple)) or not value
                    or not all(_is_shop_name(name) for name in value)):
                errors.append(ValidationError(
                    field="shops",
                    message=f"Must be a non-empty list of shop names without {FIELD_SEPARATOR!r}",
                    value=value
                ))

        if "single_shop" in params:
            value = params["single_shop"]
            if not _is_shop_name(value):
                errors.append(ValidationError(
                    field="single_shop",
                    message=f"Must be a non-empty shop name without {FIELD_SEPARATOR!r}",
                    value=value
                ))

        for name in ("product", "single_product"):
            if name in params:
                value = params[name]
                if not isinstance(value, str) or len(value) < 2:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a string of at least 2 characters",
                        value=value
                    ))

        if "currency" in params:
            value = params["currency"]
            if value not in Currency.__members__:
                errors.append(ValidationError(
                    field="currency",
                    message=f"Must be one of {', '.join(Currency.__members__)}",
                    value=value
                ))

        if "seed" in params:
            value = params["seed"]
            if value is not None and not _is_int(value):
                errors.append(ValidationError(
                    field="seed",
                    message="Must be an integer or null",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params:
            value = params["format_json"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="format_json",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "pool" in config:
            errors.extend(ConfigValidator.validate_pool_params(config["pool"]))

        if "latency" in config:
            errors.extend(ConfigValidator.validate_latency_params(config["latency"]))

        if "demo" in config:
            errors.extend(ConfigValidator.validate_demo_params(config["demo"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
