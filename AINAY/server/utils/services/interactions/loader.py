from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from concurrent.futures import Future
from threading import Lock
from typing import Generic, TypeVar

from AINAY.server.utils.logger import logger

T = TypeVar("T")


###############################################################################
class InteractionsLoadError(RuntimeError):
    """The reference dataset could not be fetched or parsed."""


###############################################################################
class OnceLoader(Generic[T]):
    """
    Runs an async loader at most once at a time and keeps its result.

    The first caller starts the load on its own event loop. Every caller
    arriving while it is in flight, from any thread or loop, awaits the same
    `concurrent.futures.Future`. A failed load is not remembered: every
    waiter receives the error and the next call starts over.

    """

    __slots__ = (
        "name",
        "loader",
        "value",
        "done",
        "future",
        "task",
        "lock",
        "load_count",
    )

    def __init__(self, name: str, loader: Callable[[], Awaitable[T]]) -> None:
        self.name = name
        self.loader = loader
        self.value: T | None = None
        self.done = False
        self.future: Future[T] | None = None
        self.task: asyncio.Task[None] | None = None
        self.lock = Lock()
        self.load_count = 0

    # -------------------------------------------------------------------------
    @property
    def loaded(self) -> bool:
        return self.done

    # -------------------------------------------------------------------------
    async def get(self) -> T:
        with self.lock:
            if self.done:
                return self.value  # type: ignore[return-value]
            future = self.future
            if future is None:
                future = Future()
                self.future = future
                self.load_count += 1
                attempt = self.load_count
                self.task = asyncio.get_running_loop().create_task(
                    self.run(future, attempt)
                )
        # a cancelled caller must not cancel the load shared with the others
        return await asyncio.shield(asyncio.wrap_future(future))

    # -------------------------------------------------------------------------
    async def run(self, future: Future[T], attempt: int) -> None:
        logger.info("Loading %s (attempt %d)", self.name, attempt)
        try:
            value = await self.loader()
        except asyncio.CancelledError:
            self.fail(
                future, InteractionsLoadError(f"Loading {self.name} was cancelled")
            )
            raise
        except InteractionsLoadError as exc:
            logger.error("Failed loading %s: %s", self.name, exc)
            self.fail(future, exc)
            return
        except Exception as exc:
            logger.error("Failed loading %s: %s", self.name, exc)
            error = InteractionsLoadError(f"Unable to load {self.name}")
            error.__cause__ = exc
            self.fail(future, error)
            return
        with self.lock:
            self.value = value
            self.done = True
            self.future = None
            self.task = None
        if not future.cancelled():
            future.set_result(value)

    # -------------------------------------------------------------------------
    def fail(self, future: Future[T], error: InteractionsLoadError) -> None:
        with self.lock:
            if self.future is future:
                self.future = None
                self.task = None
        if not future.cancelled():
            future.set_exception(error)

    # -------------------------------------------------------------------------
    def reset(self) -> None:
        with self.lock:
            self.value = None
            self.done = False
            self.future = None
            self.task = None


__all__ = ["InteractionsLoadError", "OnceLoader"]
