"""
Bounded worker pools.

Pools host the blocking lookups. Each pool owns at most `size` daemon
threads, spawned lazily as work arrives; submissions beyond that wait in a
FIFO queue. Daemon workers never hold up interpreter exit, so a batch pool
can simply be dropped once its futures have completed.
"""

import itertools
import os
import queue
import threading
from typing import Any, Callable, Optional

from ..errors import PoolConfigurationError, PoolShutdownError
from ..logging.config import get_pool_logger
from .future import Future

MAX_POOL_SIZE = 100
DEFAULT_THREAD_NAME_PREFIX = "quotes-worker"

logger = get_pool_logger(__name__)


class _WorkItem:
    """A submitted call and the future it fills."""

    __slots__ = ("future", "fn", "args", "kwargs")

    def __init__(self, future: Future, fn: Callable[..., Any], args: tuple, kwargs: dict):
        self.future = future
        self.fn = fn
        self.args = args
        self.kwargs = kwargs

    def run(self) -> None:
        try:
            result = self.fn(*self.args, **self.kwargs)
        except BaseException as e:
            self.future.set_exception(e)
        else:
            self.future.set_result(result)


class WorkerPool:
    """Fixed-ceiling pool of daemon worker threads."""

    _ids = itertools.count()

    def __init__(self, size: int, name: Optional[str] = None,
                 thread_name_prefix: str = DEFAULT_THREAD_NAME_PREFIX):
        if size < 1:
            raise PoolConfigurationError(f"Pool size must be at least 1, got {size}",
                                         requested_size=size)
        self._size = size
        self.name = name or f"{thread_name_prefix}-{next(WorkerPool._ids)}"
        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._idle = threading.Semaphore(0)
        self._threads: list[threading.Thread] = []
        self._lock = threading.Lock()
        self._shutdown = False

    def __repr__(self) -> str:
        return f"WorkerPool(name={self.name!r}, size={self._size}, threads={self.thread_count})"

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown(wait=False)

    @property
    def size(self) -> int:
        """Maximum number of worker threads."""
        return self._size

    @property
    def thread_count(self) -> int:
        """Worker threads started so far."""
        with self._lock:
            return len(self._threads)

    @property
    def pending(self) -> int:
        """Submissions waiting for a free worker."""
        return self._queue.qsize()

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """
        Schedule fn(*args, **kwargs) and return its future immediately.

        Raises:
            PoolShutdownError: If the pool was shut down.
        """
        future: Future = Future()
        with self._lock:
            if self._shutdown:
                raise PoolShutdownError(f"Pool {self.name} is shut down", pool_name=self.name)
            self._queue.put(_WorkItem(future, fn, args, kwargs))
            self._adjust_thread_count()
        return future

    def shutdown(self, wait: bool = False) -> None:
        """
        Stop accepting work. Queued items still run.

        Args:
            wait: Join the worker threads before returning
        """
        with self._lock:
            if not self._shutdown:
                self._shutdown = True
                for _ in self._threads:
                    self._queue.put(None)
                logger.debug("Pool shut down", pool=self.name, threads=len(self._threads))
            threads = list(self._threads)

        if wait:
            for thread in threads:
                thread.join()

    def _adjust_thread_count(self) -> None:
        # An idle worker will pick the item up
        if self._idle.acquire(blocking=False):
            return

        if len(self._threads) < self._size:
            thread = threading.Thread(
                target=self._work,
                name=f"{self.name}_{len(self._threads)}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)

    def _work(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                return
            item.run()
            del item
            self._idle.release()


def new_worker_pool(
    requested_size: int,
    name: Optional[str] = None,
    ceiling: int = MAX_POOL_SIZE,
    thread_name_prefix: str = DEFAULT_THREAD_NAME_PREFIX
) -> WorkerPool:
    """
    Create a pool sized for a batch: min(requested_size, ceiling).

    The ceiling itself never exceeds MAX_POOL_SIZE. Sizes below 1 are
    clamped to 1.

    Raises:
        PoolConfigurationError: If requested_size is not an integer.
    """
    if isinstance(requested_size, bool) or not isinstance(requested_size, int):
        raise PoolConfigurationError(
            f"Pool size must be an integer, got {requested_size!r}",
            requested_size=requested_size
        )

    ceiling = max(1, min(ceiling, MAX_POOL_SIZE))
    size = max(1, min(requested_size, ceiling))

    if requested_size < 1:
        logger.warning("Pool size below 1, clamping", requested_size=requested_size, size=size)
    elif requested_size > ceiling:
        logger.info("Pool size capped at ceiling", requested_size=requested_size, size=size)

    return WorkerPool(size, name=name, thread_name_prefix=thread_name_prefix)


def default_shared_size() -> int:
    return max((os.cpu_count() or 2) - 1, 1)


class PoolContext:
    """
    Explicit holder of the shared pool plus factory for dedicated pools.

    Code that wants the shared pool is handed this context rather than
    reaching for a process-wide global; close() shuts the shared pool down.
    """

    def __init__(self, shared_size: int = 0, ceiling: int = MAX_POOL_SIZE,
                 thread_name_prefix: str = DEFAULT_THREAD_NAME_PREFIX):
        self.shared_size = shared_size or default_shared_size()
        self.ceiling = ceiling
        self.thread_name_prefix = thread_name_prefix
        self._shared: Optional[WorkerPool] = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "PoolContext":
        params = config["pool"]
        return cls(
            shared_size=params["shared_pool_size"],
            ceiling=params["max_workers"],
            thread_name_prefix=params["thread_name_prefix"],
        )

    def __enter__(self) -> "PoolContext":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def shared(self) -> WorkerPool:
        """The shared pool, created on first use."""
        with self._lock:
            if self._shared is None or self._shared.is_shutdown:
                self._shared = new_worker_pool(
                    self.shared_size,
                    name=f"{self.thread_name_prefix}-shared",
                    ceiling=self.ceiling,
                    thread_name_prefix=self.thread_name_prefix,
                )
            return self._shared

    def dedicated(self, requested_size: int, name: Optional[str] = None) -> WorkerPool:
        """A new pool owned by the caller, sized for one batch."""
        return new_worker_pool(
            requested_size,
            name=name,
            ceiling=self.ceiling,
            thread_name_prefix=self.thread_name_prefix,
        )

    def close(self) -> None:
        with self._lock:
            if self._shared is not None:
                self._shared.shutdown(wait=False)
                self._shared = None
