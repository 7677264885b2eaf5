"""Request operations: the public surface of the client.

Each operation returns a ``RequestHandle`` immediately; awaiting it yields an
``HttpResult`` whose ``data`` holds the decoded response. Operations must be
called from a running event loop.
"""

import asyncio
from typing import Any, TypeVar

from httpfacade.client.decoding import ensure_success, extract_file_name, parse_response
from httpfacade.client.encoding import encode_payload
from httpfacade.client.handle import CancelToken, RequestHandle, safe_cancel_request
from httpfacade.client.headers import attach_correlation_id, build_request_headers
from httpfacade.client.transport import Transport, get_default_transport
from httpfacade.core.errors import EncodeError
from httpfacade.core.logger import LogIcon, logger
from httpfacade.models.core import HeadersInit, HttpHeader, HttpMethod, PayloadType, RequestBody, ResponseType
from httpfacade.models.result import FileBlob, HttpResult

T = TypeVar("T")

__all__ = [
    "delete",
    "download_file",
    "get",
    "patch",
    "post",
    "post_form_url_encoded",
    "post_multipart_form_data",
    "put",
    "safe_cancel_request",
]


def get(
    url: str, headers: HeadersInit | None = None, *, transport: Transport | None = None
) -> RequestHandle[HttpResult[T]]:
    """Retrieve the data at ``url`` as JSON."""
    return _send_request(url, HttpMethod.GET, ResponseType.JSON, headers=headers, transport=transport)


def post(
    url: str, payload: Any, headers: HeadersInit | None = None, *, transport: Transport | None = None
) -> RequestHandle[HttpResult[T]]:
    """Send ``payload`` as JSON with POST and return the JSON response."""
    return _send_request(
        url, HttpMethod.POST, ResponseType.JSON, payload, PayloadType.JSON, headers=headers, transport=transport
    )


def patch(
    url: str, payload: Any, headers: HeadersInit | None = None, *, transport: Transport | None = None
) -> RequestHandle[HttpResult[T]]:
    """Send ``payload`` as JSON with PATCH and return the JSON response."""
    return _send_request(
        url, HttpMethod.PATCH, ResponseType.JSON, payload, PayloadType.JSON, headers=headers, transport=transport
    )


def put(
    url: str, payload: Any, headers: HeadersInit | None = None, *, transport: Transport | None = None
) -> RequestHandle[HttpResult[T]]:
    """Send ``payload`` as JSON with PUT and return the JSON response."""
    return _send_request(
        url, HttpMethod.PUT, ResponseType.JSON, payload, PayloadType.JSON, headers=headers, transport=transport
    )


def delete(
    url: str, headers: HeadersInit | None = None, *, transport: Transport | None = None
) -> RequestHandle[HttpResult[T]]:
    """Send a DELETE request and return the JSON response."""
    return _send_request(url, HttpMethod.DELETE, ResponseType.JSON, headers=headers, transport=transport)


def post_form_url_encoded(
    url: str, form: Any, headers: HeadersInit | None = None, *, transport: Transport | None = None
) -> RequestHandle[HttpResult[T]]:
    """Post ``form`` URL encoded and return the JSON response."""
    return _send_request(
        url,
        HttpMethod.POST,
        ResponseType.JSON,
        form,
        PayloadType.URL_ENCODED,
        headers=headers,
        transport=transport,
    )


def post_multipart_form_data(
    url: str, payload: Any, headers: HeadersInit | None = None, *, transport: Transport | None = None
) -> RequestHandle[HttpResult[T]]:
    """Post ``payload`` as multipart/form-data and return the JSON response.

    Values that are bytes, file objects or ``(filename, content[, content_type])``
    tuples are sent as files, everything else as plain fields.
    """
    return _send_request(
        url,
        HttpMethod.POST,
        ResponseType.JSON,
        payload,
        PayloadType.MULTIPART_FORM_DATA,
        headers=headers,
        transport=transport,
    )


def download_file(
    url: str, headers: HeadersInit | None = None, *, transport: Transport | None = None
) -> RequestHandle[HttpResult[FileBlob]]:
    """Retrieve the file at ``url``.

    The result completes as soon as headers arrive; ``result.data.blob`` must be
    awaited separately to get the bytes.
    """
    result: HttpResult[FileBlob] = HttpResult.start(HttpMethod.GET, url)
    request_headers = attach_correlation_id(build_request_headers(PayloadType.NONE, headers))

    async def _download(token: CancelToken) -> HttpResult[FileBlob]:
        sender = transport or get_default_transport()

        token.raise_if_cancelled()
        logger.info("Downloading file", icon=LogIcon.DOWNLOAD, url=url)
        try:
            response = await sender.send(url, method=HttpMethod.GET, headers=request_headers)
            token.raise_if_cancelled()
            await ensure_success(HttpMethod.GET, response)
        except Exception as ex:
            logger.warning("File download failed", icon=LogIcon.ERROR, url=url, error=repr(ex))
            raise

        filename = extract_file_name(response.headers.get(HttpHeader.CONTENT_DISPOSITION))
        result.apply_data(FileBlob(filename=filename, blob=asyncio.ensure_future(response.blob())))
        logger.info(
            "File download started",
            icon=LogIcon.SUCCESS,
            url=url,
            filename=filename,
            duration_ms=result.duration,
        )
        return result

    return RequestHandle(_download, name=f"GET {url}")


def _send_request(
    url: str,
    method: HttpMethod,
    response_type: ResponseType,
    payload: Any = None,
    payload_type: PayloadType = PayloadType.NONE,
    *,
    headers: HeadersInit | None = None,
    transport: Transport | None = None,
) -> RequestHandle[HttpResult[T]]:
    """Build the request now, then send and decode it inside a cancellable handle.

    Headers and body are fixed at call time; an encoding failure is raised on await
    without reaching the transport.
    """
    result: HttpResult[T] = HttpResult.start(method, url)
    request_headers = attach_correlation_id(build_request_headers(payload_type, headers))
    body: RequestBody | None = None
    encode_error: EncodeError | None = None
    if payload is not None:
        try:
            body = encode_payload(payload, payload_type)
        except EncodeError as ex:
            encode_error = ex

    async def _run(token: CancelToken) -> HttpResult[T]:
        if encode_error is not None:
            logger.warning(
                "HTTP request not sent", icon=LogIcon.ERROR, method=method, url=url, error=repr(encode_error)
            )
            raise encode_error
        sender = transport or get_default_transport()

        token.raise_if_cancelled()
        logger.debug("Sending request", icon=LogIcon.NETWORK, method=method, url=url, payload_type=payload_type)
        try:
            response = await sender.send(url, method=method, headers=request_headers, body=body)
            token.raise_if_cancelled()
            data = await parse_response(method, response_type)(response)
        except Exception as ex:
            logger.warning("HTTP request failed", icon=LogIcon.ERROR, method=method, url=url, error=repr(ex))
            raise

        result.apply_data(data)
        logger.info(
            "HTTP request completed",
            icon=LogIcon.LATENCY,
            method=method,
            url=url,
            status=response.status,
            duration_ms=result.duration,
        )
        return result

    return RequestHandle(_run, name=f"{method} {url}")
