"""Strategies for running the proxy's coroutines from blocking code.

Both strategies capture the coroutine's outcome as a ``Result`` and raise
the original exception from it, so a blocking caller catches exactly the
same error types as an async caller.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, Protocol, TypeVar, runtime_checkable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def base_exception(error: BaseException) -> BaseException:
    """Unwrap exception groups that hold a single exception."""
    while isinstance(error, BaseExceptionGroup) and len(error.exceptions) == 1:
        error = error.exceptions[0]
    return error


@dataclass(frozen=True)
class Result(Generic[T]):
    """Value or error produced by an awaited call."""

    value: Optional[T] = None
    error: Optional[Exception] = None

    @classmethod
    async def capture(cls, func: Callable[[], Awaitable[T]]) -> "Result[T]":
        try:
            return cls(value=await func())
        except Exception as exc:
            return cls(error=exc)

    def unwrap(self) -> T:
        """Return the value, or raise the original error."""
        if self.error is not None:
            raise base_exception(self.error)
        return self.value


@runtime_checkable
class SynchronousInvocationStrategy(Protocol):
    """Runs a coroutine function to completion and returns its result."""

    def invoke(self, func: Callable[[], Awaitable[T]]) -> T: ...


def _loop_is_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


_shared: ThreadPoolExecutor | None = None
_shared_lock = threading.Lock()


def _shared_executor() -> ThreadPoolExecutor:
    global _shared

    with _shared_lock:
        if _shared is None:
            _shared = ThreadPoolExecutor(thread_name_prefix="dataproxy-sync")
        return _shared


def _run_to_result(func: Callable[[], Awaitable[T]]) -> Result[T]:
    return asyncio.run(Result.capture(func))


class WaitForResultStrategy:
    """Run the coroutine on the calling thread and wait for it.

    This is the default. It cannot be used from a thread that is already
    running an event loop; use ``RunWithinTaskStrategy`` or the ``*_async``
    methods there.
    """

    def invoke(self, func: Callable[[], Awaitable[T]]) -> T:
        if _loop_is_running():
            raise RuntimeError(
                "WaitForResultStrategy cannot block inside a running event loop; "
                "use RunWithinTaskStrategy or await the *_async method instead"
            )
        return _run_to_result(func).unwrap()


class RunWithinTaskStrategy:
    """Run the coroutine on a worker thread with its own event loop.

    The calling thread only blocks on the worker's future, so callers that
    own a running loop do not deadlock.

    Parameters
    ----------
    executor : ThreadPoolExecutor, optional
        Executor to run on. The caller keeps ownership of it
    max_workers : int, optional
        Create a private executor with this many workers, shut down by
        ``shutdown()``. With neither argument, all strategies share one
        module-level executor
    """

    def __init__(self, executor: ThreadPoolExecutor | None = None, max_workers: int | None = None):
        self._owns_executor = executor is None and max_workers is not None
        if executor is not None:
            self._executor = executor
        elif max_workers is not None:
            self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="dataproxy-sync")
        else:
            self._executor = _shared_executor()

    def invoke(self, func: Callable[[], Awaitable[T]]) -> T:
        future = self._executor.submit(_run_to_result, func)
        return future.result().unwrap()

    def shutdown(self, wait: bool = True) -> None:
        """Shut down the executor if this strategy created it; shared and given executors are left running."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(executor={self._executor!r})"


_STRATEGIES: dict[str, Callable[[], Any]] = {
    "wait": WaitForResultStrategy,
    "task": RunWithinTaskStrategy,
}


def build_invocation_strategy(name: str) -> SynchronousInvocationStrategy:
    """Create a strategy from its configured name (``wait`` or ``task``)."""
    try:
        factory = _STRATEGIES[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown synchronous invocation strategy '{name}'; expected one of {sorted(_STRATEGIES)}"
        ) from None
    logger.debug("Using %s for blocking calls", factory.__name__)
    return factory()
