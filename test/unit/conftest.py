"""Test fixtures for httpfacade unit tests."""

import asyncio
from dataclasses import dataclass, field
from typing import Any

import httpx
import orjson
import pytest

from httpfacade.core.errors import BodyConsumedError
from httpfacade.models.core import HttpMethod, RequestBody


# -----------------------------------------------------------------------------
# Mock transport boundary
# -----------------------------------------------------------------------------


@dataclass
class MockResponse:
    """In-memory RawResponse whose body can be read once."""

    status: int = 200
    body: bytes = b""
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    reads: list[str] = field(default_factory=list)
    closed: bool = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def _consume(self, reader: str) -> bytes:
        if self.reads:
            raise BodyConsumedError("Response body has already been consumed")
        self.reads.append(reader)
        return self.body

    async def json(self) -> Any:
        return orjson.loads(self._consume("json"))

    async def text(self) -> str:
        return self._consume("text").decode()

    async def blob(self) -> bytes:
        return self._consume("blob")

    async def aclose(self) -> None:
        self.closed = True


@dataclass
class SentRequest:
    """Arguments a MockTransport received."""

    url: str
    method: HttpMethod
    headers: httpx.Headers
    body: RequestBody | None


@dataclass
class MockTransport:
    """Transport returning a canned response, or raising a canned error."""

    response: MockResponse = field(default_factory=MockResponse)
    error: Exception | None = None
    gate: asyncio.Event | None = None
    sent: list[SentRequest] = field(default_factory=list)

    async def send(
        self,
        url: str,
        *,
        method: HttpMethod,
        headers: httpx.Headers,
        body: RequestBody | None = None,
    ) -> MockResponse:
        self.sent.append(SentRequest(url=url, method=method, headers=headers, body=body))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.response


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def make_response():
    """Factory fixture to create mock responses."""

    def _make(
        status: int = 200,
        body: Any = None,
        headers: dict[str, str] | None = None,
        raw: bytes | None = None,
    ) -> MockResponse:
        content = raw if raw is not None else (orjson.dumps(body) if body is not None else b"")
        return MockResponse(status=status, body=content, headers=httpx.Headers(headers))

    return _make


@pytest.fixture
def make_transport(make_response):
    """Factory fixture to create mock transports around a response."""

    def _make(status: int = 200, body: Any = None, headers: dict[str, str] | None = None, **kwargs) -> MockTransport:
        return MockTransport(response=make_response(status=status, body=body, headers=headers), **kwargs)

    return _make
