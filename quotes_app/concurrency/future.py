"""
Composable future values.

A Future is filled once by a producer (normally a pool worker) and is
consumed by exactly one composition operator. Operators never block: they
register a continuation that runs in whichever thread completes the input,
or immediately in the caller's thread if the input is already complete.
Blocking happens only in get() and wait().
"""

import concurrent.futures
import threading
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

import structlog

from ..errors import FutureConsumedError

T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")

logger = structlog.get_logger(__name__)


def _complete_with(target: "Future[Any]", action: Callable[[], Any]) -> None:
    """Fill target with action()'s value, or with the exception it raised."""
    try:
        value = action()
    except Exception as e:
        target.set_exception(e)
    else:
        target.set_result(value)


class Future(Generic[T]):
    """Asynchronously produced value supporting map/chain/zip/subscribe."""

    def __init__(self) -> None:
        self._cell: concurrent.futures.Future = concurrent.futures.Future()
        self._claim_lock = threading.Lock()
        self._consumed_by: Optional[str] = None

    @classmethod
    def completed(cls, value: T) -> "Future[T]":
        future: Future[T] = cls()
        future.set_result(value)
        return future

    @classmethod
    def failed(cls, error: BaseException) -> "Future[T]":
        future: Future[T] = cls()
        future.set_exception(error)
        return future

    def __repr__(self) -> str:
        if not self.done():
            state = "pending"
        elif self._cell.exception() is not None:
            state = f"failed={self._cell.exception()!r}"
        else:
            state = f"value={self._cell.result()!r}"
        return f"<Future {state}>"

    # producer side

    def set_result(self, value: T) -> None:
        self._cell.set_result(value)

    def set_exception(self, error: BaseException) -> None:
        self._cell.set_exception(error)

    # blocking edge

    def done(self) -> bool:
        return self._cell.done()

    def get(self) -> T:
        """Block until complete; return the value or re-raise the failure."""
        return self._cell.result()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until complete (or timeout) without raising; return done()."""
        concurrent.futures.wait([self._cell], timeout=timeout)
        return self._cell.done()

    def exception(self) -> Optional[BaseException]:
        """Block until complete; return the failure or None."""
        return self._cell.exception()

    @property
    def consumed(self) -> bool:
        return self._consumed_by is not None

    # composition

    def map(self, f: Callable[[T], U]) -> "Future[U]":
        """Apply f to the value once available."""
        self._claim("map")
        child: Future[U] = Future()

        def _apply(_cell: concurrent.futures.Future) -> None:
            error = _cell.exception()
            if error is not None:
                child.set_exception(error)
                return
            _complete_with(child, lambda: f(_cell.result()))

        self._on_done(_apply)
        return child

    def chain(self, f: Callable[[T], "Future[U]"]) -> "Future[U]":
        """
        Apply f, which starts another asynchronous step, to the value.

        The returned future completes with the outcome of the future f
        returns; no thread waits for that inner step.
        """
        self._claim("chain")
        child: Future[U] = Future()

        def _bind(_cell: concurrent.futures.Future) -> None:
            error = _cell.exception()
            if error is not None:
                child.set_exception(error)
                return
            try:
                inner = f(_cell.result())
                if not isinstance(inner, Future):
                    raise TypeError(
                        f"chain() function must return a Future, got {type(inner).__name__}"
                    )
                inner._claim("chain")
            except Exception as e:
                child.set_exception(e)
                return
            inner._on_done(lambda _inner_cell: child._copy_from(_inner_cell))

        self._on_done(_bind)
        return child

    def zip(self, other: "Future[U]", combine: Callable[[T, U], V]) -> "Future[V]":
        """
        Combine with an independent future once both are complete.

        Both inputs are already running; neither waits for the other to
        start. If either fails, the result fails with this future's failure
        first, then other's.
        """
        if other is self:
            raise FutureConsumedError("Cannot zip() a future with itself")
        other._ensure_unclaimed("zip")
        self._claim("zip")
        other._claim("zip")
        child: Future[V] = Future()
        remaining = [2]
        lock = threading.Lock()

        def _join(_cell: concurrent.futures.Future) -> None:
            with lock:
                remaining[0] -= 1
                if remaining[0]:
                    return
            for source in (self, other):
                error = source._cell.exception()
                if error is not None:
                    child.set_exception(error)
                    return
            _complete_with(child, lambda: combine(self._cell.result(), other._cell.result()))

        self._on_done(_join)
        other._on_done(_join)
        return child

    def subscribe(
        self,
        on_complete: Callable[[T], None],
        on_error: Optional[Callable[[BaseException], None]] = None
    ) -> "Future[None]":
        """
        Run a side effect once the value is available.

        The returned future completes after the callback ran. A failure is
        passed to on_error when given, which counts as handled; otherwise
        the returned future fails with it.
        """
        self._claim("subscribe")
        child: Future[None] = Future()

        def _notify(_cell: concurrent.futures.Future) -> None:
            error = _cell.exception()
            if error is None:
                _complete_with(child, lambda: on_complete(_cell.result()))
            elif on_error is not None:
                _complete_with(child, lambda: on_error(error))
            else:
                child.set_exception(error)

        self._on_done(_notify)
        return child

    # internals

    def _ensure_unclaimed(self, operator: str) -> None:
        if self._consumed_by is not None:
            raise FutureConsumedError(
                f"Future already consumed by {self._consumed_by}(); cannot {operator}()"
            )

    def _claim(self, operator: str) -> None:
        with self._claim_lock:
            self._ensure_unclaimed(operator)
            self._consumed_by = operator

    def _on_done(self, callback: Callable[[concurrent.futures.Future], None]) -> None:
        self._cell.add_done_callback(callback)

    def _copy_from(self, cell: concurrent.futures.Future) -> None:
        error = cell.exception()
        if error is not None:
            self.set_exception(error)
        else:
            self.set_result(cell.result())


def await_all(futures: Iterable[Future[T]]) -> Future[list[T]]:
    """
    Join-all barrier.

    Completes only after every input completed. The value lists the results
    in input order. If any input failed, the barrier fails with the first
    failure in input order, still only after all inputs completed.
    """
    futures = list(futures)
    barrier: Future[list[T]] = Future()

    if not futures:
        barrier.set_result([])
        return barrier

    # Either every input is claimed or none is
    if len({id(future) for future in futures}) != len(futures):
        raise FutureConsumedError("Same future passed to await_all() more than once")
    for future in futures:
        future._ensure_unclaimed("await_all")

    for future in futures:
        future._claim("await_all")

    remaining = [len(futures)]
    lock = threading.Lock()

    def _arrive(_cell: concurrent.futures.Future) -> None:
        with lock:
            remaining[0] -= 1
            if remaining[0]:
                return
        for future in futures:
            error = future._cell.exception()
            if error is not None:
                logger.debug("Join-all barrier failed", inputs=len(futures), error=repr(error))
                barrier.set_exception(error)
                return
        barrier.set_result([future._cell.result() for future in futures])

    for future in futures:
        future._on_done(_arrive)

    return barrier
