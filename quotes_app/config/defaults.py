"""Default configuration parameters for the quote pipelines."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PoolParams:
    """Worker pool sizing parameters."""
    max_workers: int = 100                          # Hard ceiling for any batch pool
    shared_pool_size: int = 0                       # 0 means cpu_count - 1
    thread_name_prefix: str = "quotes-worker"


@dataclass(frozen=True)
class LatencyParams:
    """Simulated remote-call latency."""
    fixed_delay_ms: int = 1000                      # Price, discount and rate lookups
    random_min_ms: int = 500                        # Random-delay quotes, inclusive
    random_max_ms: int = 2500                       # Random-delay quotes, exclusive
    time_unit_seconds: float = 0.001                # Seconds per delay unit


@dataclass(frozen=True)
class DemoParams:
    """Shops and products used by the console walk-through."""
    shops: tuple[str, ...] = ("BestPrice", "LetsSaveBig", "MyFavoriteShop", "BuyItAll")
    product: str = "myPhone"
    single_shop: str = "BestShop"
    single_product: str = "my favorite product"
    currency: str = "EUR"
    seed: Optional[int] = None


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    pool: PoolParams
    latency: LatencyParams
    demo: DemoParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        pool=PoolParams(),
        latency=LatencyParams(),
        demo=DemoParams(),
        logging=LoggingParams(),
    )
