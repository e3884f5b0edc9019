"""
Futures and worker pools.

    pool = new_worker_pool(len(shops))
    future = pool.submit(shop.get_quote, product).map(Quote.parse)
    results = await_all([...]).get()
"""

from .future import Future, await_all
from .pool import MAX_POOL_SIZE, PoolContext, WorkerPool, new_worker_pool

__all__ = [
    "Future",
    "await_all",
    "MAX_POOL_SIZE",
    "PoolContext",
    "WorkerPool",
    "new_worker_pool",
]
