"""Request header construction."""

import httpx
from asgi_correlation_id import correlation_id
from beartype import beartype

from httpfacade.models.core import HeadersInit, HttpContentType, HttpHeader, PayloadType


@beartype
def build_request_headers(
    payload_type: PayloadType = PayloadType.NONE,
    headers: HeadersInit | None = None,
) -> httpx.Headers:
    """Build the header set for a request carrying a payload of ``payload_type``.

    Supplied headers are copied first; the caller's object is never modified.
    Multipart requests get no Content-Type, the transport attaches one with its boundary.
    """
    request_headers = httpx.Headers(headers)

    match payload_type:
        case PayloadType.JSON:
            request_headers[HttpHeader.CONTENT_TYPE] = HttpContentType.JSON
        case PayloadType.URL_ENCODED:
            request_headers[HttpHeader.CONTENT_TYPE] = HttpContentType.FORM_URL_ENCODED
        case PayloadType.NONE | PayloadType.MULTIPART_FORM_DATA:
            pass

    return request_headers


def attach_correlation_id(headers: httpx.Headers) -> httpx.Headers:
    """Forward the current asgi-correlation-id as ``X-Request-ID`` unless one is already set.

    The id only exists when the host application runs the asgi-correlation-id middleware.
    """
    request_id = correlation_id.get()
    if request_id and HttpHeader.REQUEST_ID not in headers:
        headers[HttpHeader.REQUEST_ID] = request_id
    return headers
