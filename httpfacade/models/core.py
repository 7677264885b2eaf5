"""Core models for request building and response handling."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import httpx

HeadersInit = httpx.Headers | Mapping[str, str] | Sequence[tuple[str, str]]


class HttpMethod(StrEnum):
    """HTTP verbs issued by the client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class HttpHeader(StrEnum):
    """Header names the client reads or writes."""

    AUTHORIZATION = "Authorization"
    CONTENT_TYPE = "Content-Type"
    CONTENT_DISPOSITION = "Content-Disposition"
    CONTENT_LENGTH = "Content-Length"
    USER_AGENT = "User-Agent"
    REQUEST_ID = "X-Request-ID"


class HttpContentType(StrEnum):
    """Content types attached by the header builder."""

    JSON = "application/json"
    FORM_URL_ENCODED = "application/x-www-form-urlencoded"


class PayloadType(StrEnum):
    """Encoding applied to an outgoing payload."""

    NONE = "none"
    JSON = "json"
    URL_ENCODED = "url_encoded"
    MULTIPART_FORM_DATA = "multipart_form_data"


class ResponseType(StrEnum):
    """Decoding applied to an incoming body."""

    NONE = "none"
    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class MultipartBody:
    """Form fields handed to the transport for native multipart encoding."""

    fields: Mapping[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.fields)

    def __iter__(self):
        return iter(self.fields.items())


RequestBody = str | MultipartBody
