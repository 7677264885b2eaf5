"""Transport boundary: protocols consumed by the client and the default httpx implementation."""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

import httpx
import orjson

from httpfacade.client.encoding import form_value
from httpfacade.core.errors import BodyConsumedError, TransportError
from httpfacade.core.logger import LogIcon, logger
from httpfacade.core.settings import settings as st
from httpfacade.models.core import HttpHeader, HttpMethod, MultipartBody, RequestBody


@runtime_checkable
class RawResponse(Protocol):
    """Response as handed back by a transport, body still unread."""

    @property
    def ok(self) -> bool: ...

    @property
    def status(self) -> int: ...

    @property
    def headers(self) -> Mapping[str, str]: ...

    async def json(self) -> Any: ...

    async def text(self) -> str: ...

    async def blob(self) -> bytes: ...

    async def aclose(self) -> None: ...


@runtime_checkable
class Transport(Protocol):
    """Performs the network I/O of a single request."""

    async def send(
        self,
        url: str,
        *,
        method: HttpMethod,
        headers: httpx.Headers,
        body: RequestBody | None = None,
    ) -> RawResponse: ...


class HttpxResponse:
    """RawResponse over a streamed ``httpx.Response``; the body can be read once."""

    __slots__ = ("_response", "_consumed")

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._consumed = False

    @property
    def ok(self) -> bool:
        return self._response.is_success

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    async def _read(self) -> bytes:
        if self._consumed:
            raise BodyConsumedError("Response body has already been consumed")
        self._consumed = True
        try:
            return await self._response.aread()
        finally:
            await self._response.aclose()

    async def json(self) -> Any:
        return orjson.loads(await self._read())

    async def text(self) -> str:
        await self._read()
        return self._response.text

    async def blob(self) -> bytes:
        return await self._read()

    async def aclose(self) -> None:
        await self._response.aclose()


def split_multipart(body: MultipartBody) -> tuple[dict[str, Any], list[tuple[str, Any]]]:
    """Split multipart fields into httpx ``data`` and ``files`` arguments.

    httpx only builds a multipart body when ``files`` is non-empty, so a form
    without any file sends its plain fields as filename-less parts instead.
    """
    data: dict[str, Any] = {}
    files: list[tuple[str, Any]] = []
    for name, value in body:
        match value:
            case bytes() | bytearray() | tuple():
                files.append((name, value))
            case _ if hasattr(value, "read"):
                files.append((name, value))
            case list():
                data[name] = [form_value(item) for item in value]
            case _:
                data[name] = form_value(value)

    if not files:
        for name, value in data.items():
            values = value if isinstance(value, list) else [value]
            files.extend((name, (None, item)) for item in values)
        data = {}
    return data, files


class HttpxTransport:
    """Default transport backed by ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient(
            headers={HttpHeader.USER_AGENT: st.user_agent},
            follow_redirects=st.FOLLOW_REDIRECTS,
            max_redirects=st.MAX_REDIRECTS,
            timeout=None,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    def _build_request(
        self,
        url: str,
        method: HttpMethod,
        headers: httpx.Headers,
        body: RequestBody | None,
    ) -> httpx.Request:
        match body:
            case None:
                return self._client.build_request(method, url, headers=headers)
            case str():
                return self._client.build_request(method, url, headers=headers, content=body)
            case MultipartBody():
                data, files = split_multipart(body)
                return self._client.build_request(
                    method, url, headers=headers, data=data or None, files=files or None
                )

    async def send(
        self,
        url: str,
        *,
        method: HttpMethod,
        headers: httpx.Headers,
        body: RequestBody | None = None,
    ) -> HttpxResponse:
        request = self._build_request(url, method, headers, body)
        try:
            response = await self._client.send(request, stream=True)
        except httpx.RequestError as ex:
            raise TransportError(f"HTTP {method} {url} failed: {ex}") from ex
        return HttpxResponse(response)

    async def aclose(self) -> None:
        await self._client.aclose()


_default_transport: HttpxTransport | None = None


def get_default_transport() -> HttpxTransport:
    """Return the shared default transport, creating it on first use."""
    global _default_transport
    if _default_transport is None:
        _default_transport = HttpxTransport()
        logger.info("Default transport created", icon=LogIcon.ADAPTER, user_agent=st.user_agent)
    return _default_transport


async def aclose_default_transport() -> None:
    """Close the shared default transport; the next request creates a fresh one."""
    global _default_transport
    if _default_transport is not None:
        transport, _default_transport = _default_transport, None
        await transport.aclose()
