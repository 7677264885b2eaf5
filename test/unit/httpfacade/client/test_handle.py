"""Tests for cancellable request handles."""

import asyncio

import pytest

from httpfacade.client.handle import CancelToken, HandleState, RequestHandle, safe_cancel_request


def _waiting_handle(event: asyncio.Event, value: str = "done") -> RequestHandle[str]:
    async def _work(token: CancelToken) -> str:
        await event.wait()
        token.raise_if_cancelled()
        return value

    return RequestHandle(_work, name="waiting")


class TestCancelToken:
    """Tests for CancelToken."""

    def test_token_starts_uncancelled(self) -> None:
        """Verify a fresh token does not raise."""
        token = CancelToken()
        assert not token.cancelled
        token.raise_if_cancelled()

    def test_cancelled_token_raises(self) -> None:
        """Verify a cancelled token raises CancelledError."""
        token = CancelToken()
        token.cancel()
        with pytest.raises(asyncio.CancelledError):
            token.raise_if_cancelled()


class TestRequestHandle:
    """Tests for RequestHandle."""

    async def test_pending_then_settled(self) -> None:
        """Verify state moves from pending to settled."""
        event = asyncio.Event()
        handle = _waiting_handle(event)
        assert handle.state is HandleState.PENDING

        event.set()
        assert await handle == "done"
        assert handle.state is HandleState.SETTLED
        assert not handle.is_pending()

    async def test_failed_request_is_settled(self) -> None:
        """Verify a failed request settles and re-raises on await."""

        async def _fail(token: CancelToken) -> str:
            raise ValueError("boom")

        handle = RequestHandle(_fail)
        with pytest.raises(ValueError, match="boom"):
            await handle
        assert handle.state is HandleState.SETTLED

    async def test_cancel_pending(self) -> None:
        """Verify cancelling a pending handle marks it cancelled."""
        handle = _waiting_handle(asyncio.Event())

        assert handle.cancel() is True
        assert handle.state is HandleState.CANCELLED
        assert handle.token.cancelled
        with pytest.raises(asyncio.CancelledError):
            await handle

    async def test_cancel_settled_is_noop(self) -> None:
        """Verify cancelling a settled handle does nothing."""
        event = asyncio.Event()
        event.set()
        handle = _waiting_handle(event)
        await handle

        assert handle.cancel() is False
        assert handle.state is HandleState.SETTLED


class TestSafeCancelRequest:
    """Tests for safe_cancel_request."""

    async def test_cancels_pending_and_returns_none(self) -> None:
        """Verify a pending handle is cancelled and None returned."""
        handle = _waiting_handle(asyncio.Event())

        assert safe_cancel_request(handle) is None
        assert handle.state is HandleState.CANCELLED

    async def test_second_call_is_safe(self) -> None:
        """Verify cancelling twice still returns None without raising."""
        handle = _waiting_handle(asyncio.Event())

        assert safe_cancel_request(handle) is None
        assert safe_cancel_request(handle) is None
        assert handle.state is HandleState.CANCELLED

    async def test_settled_handle_untouched(self) -> None:
        """Verify a settled handle keeps its result."""
        event = asyncio.Event()
        event.set()
        handle = _waiting_handle(event, value="kept")
        await handle

        assert safe_cancel_request(handle) is None
        assert handle.state is HandleState.SETTLED
        assert await handle == "kept"

    def test_absent_handle(self) -> None:
        """Verify None is accepted."""
        assert safe_cancel_request() is None
        assert safe_cancel_request(None) is None
