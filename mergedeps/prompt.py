"""Interactive yes/no prompts for the operator."""

import asyncio
import threading
from typing import Awaitable, Callable

import structlog
import typer

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

ConfirmFunc = Callable[[str], Awaitable[bool]]
"""Async oracle asked to approve an upgrade; receives the question text."""


def confirm(message: str) -> bool:
    """Ask the operator a yes/no question on the terminal and return their choice.

    Re-prompts until one of y, yes, n or no is entered.
    """
    typer.echo("")
    answer = typer.confirm(message, default=None)
    typer.echo("")
    return answer


def _resolve(future: "asyncio.Future[bool]", answer: bool | None, exc: Exception | None) -> None:
    if future.done():
        return
    if exc is not None:
        future.set_exception(exc)
    else:
        future.set_result(bool(answer))


def _answer(
    loop: asyncio.AbstractEventLoop,
    future: "asyncio.Future[bool]",
    message: str,
    confirm_func: Callable[[str], bool],
) -> None:
    answer: bool | None = None
    error: Exception | None = None
    try:
        answer = confirm_func(message)
    except Exception as exc:
        error = exc
    try:
        loop.call_soon_threadsafe(_resolve, future, answer, error)
    except RuntimeError:
        # The run already ended and its loop was closed; nobody awaits the answer.
        pass


async def ask_operator(message: str, confirm_func: Callable[[str], bool] = confirm) -> bool:
    """Ask the operator a question without blocking the event loop.

    The prompt runs in a daemon thread so that discovery keeps going while the
    operator thinks, and so that a cancelled run does not wait on stdin to
    exit.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[bool] = loop.create_future()

    logger.debug("Prompting operator", message=message)
    threading.Thread(
        target=_answer,
        args=(loop, future, message, confirm_func),
        name="mergedeps-prompt",
        daemon=True,
    ).start()
    return await future
