"""First-error tracking shared by every task of a merge-dependencies run."""

import asyncio
from typing import Awaitable, TypeVar

import structlog

from mergedeps.pipeline.exceptions import RunAbortedError

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

T = TypeVar("T")


class FirstErrorScope:
    """Records the first fatal error raised by any task of a run.

    Tasks are run through ``guard`` inside asyncio task groups. The task
    groups take care of cancelling siblings; this scope only remembers which
    failure came first so that errors raised while unwinding from that
    cancellation never replace it.
    """

    def __init__(self) -> None:
        self.error: BaseException | None = None
        self.failed = asyncio.Event()

    def record(self, exc: BaseException) -> None:
        """Record a failure, keeping the first one."""
        if self.error is not None:
            logger.debug("Ignoring failure after run already failed", error=str(exc), error_type=type(exc).__name__)
            return
        logger.debug("Run failed", error=str(exc), error_type=type(exc).__name__)
        self.error = exc
        self.failed.set()

    def raise_if_failed(self) -> None:
        """Raise RunAbortedError if another task has already failed the run."""
        if self.error is not None:
            raise RunAbortedError("Run aborted after an earlier failure") from self.error

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await a task body, recording any exception it raises before re-raising it."""
        try:
            return await awaitable
        except Exception as exc:
            self.record(exc)
            raise
