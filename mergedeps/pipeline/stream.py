"""Hand-off of discovered pull requests from the discovery tasks to the coordinator."""

import asyncio
from typing import AsyncIterator

from mergedeps.pipeline.models import PullRequest
from mergedeps.utils.constants import DEFAULT_STREAM_BUFFER_SIZE

_END_OF_STREAM = object()


class StreamClosedError(Exception):
    """Raised when sending on a stream that has already been closed."""

    pass


class PullRequestStream:
    """Multi-producer, single-consumer stream of pull requests.

    Sending blocks while the buffer is full. Closing is only an end-of-data
    signal; failures travel through the task groups, never through the stream.
    """

    def __init__(self, maxsize: int = DEFAULT_STREAM_BUFFER_SIZE) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, pull_request: PullRequest) -> None:
        """Send a pull request to the consumer, waiting for buffer space."""
        if self._closed:
            raise StreamClosedError("Cannot send on a closed pull request stream")
        await self._queue.put(pull_request)

    async def close(self) -> None:
        """Signal that no more pull requests will be sent."""
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_END_OF_STREAM)

    async def receive(self) -> PullRequest | None:
        """Receive the next pull request, or None once the stream is closed and drained."""
        item = await self._queue.get()
        if item is _END_OF_STREAM:
            # Leave the marker in place so later receives also see the end.
            self._queue.put_nowait(_END_OF_STREAM)
            return None
        return item  # type: ignore[return-value]

    def __aiter__(self) -> AsyncIterator[PullRequest]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[PullRequest]:
        while (pull_request := await self.receive()) is not None:
            yield pull_request
