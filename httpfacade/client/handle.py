"""Cancellable handles for in-flight requests."""

import asyncio
from collections.abc import Callable, Coroutine, Generator
from enum import StrEnum
from typing import Any, Generic, TypeVar

from httpfacade.core.logger import LogIcon, logger

T = TypeVar("T")


class HandleState(StrEnum):
    """Observable lifecycle of a request handle."""

    PENDING = "pending"
    SETTLED = "settled"
    CANCELLED = "cancelled"


class CancelToken:
    """Cancellation flag observed by the request pipeline at its suspension points."""

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise asyncio.CancelledError("request cancelled")


class RequestHandle(Generic[T]):
    """Caller-owned reference to a pending request.

    Awaiting the handle yields the request result or raises its error.
    Awaiting a cancelled handle raises ``asyncio.CancelledError``.
    Must be created while an event loop is running.
    """

    __slots__ = ("_token", "_task", "_name")

    def __init__(self, factory: Callable[[CancelToken], Coroutine[Any, Any, T]], name: str = "request") -> None:
        self._token = CancelToken()
        self._name = name
        self._task: asyncio.Task[T] = asyncio.ensure_future(factory(self._token))

    @property
    def token(self) -> CancelToken:
        return self._token

    @property
    def state(self) -> HandleState:
        if self._token.cancelled or self._task.cancelled():
            return HandleState.CANCELLED
        if self._task.done():
            return HandleState.SETTLED
        return HandleState.PENDING

    def is_pending(self) -> bool:
        return self.state is HandleState.PENDING

    def cancel(self) -> bool:
        """Cancel the request if it is still pending. Returns whether it was cancelled."""
        if not self.is_pending():
            return False
        self._token.cancel()
        self._task.cancel()
        logger.info("Request cancelled", icon=LogIcon.CANCEL, request=self._name)
        return True

    def __await__(self) -> Generator[Any, None, T]:
        return self._task.__await__()

    def __repr__(self) -> str:
        return f"RequestHandle({self._name!r}, state={self.state})"


def safe_cancel_request(handle: RequestHandle[Any] | None = None) -> None:
    """Cancel ``handle`` if it is still pending.

    Always returns None, the value to store in place of the cancelled or completed handle.
    """
    if handle is not None and handle.is_pending():
        handle.cancel()

    return None
