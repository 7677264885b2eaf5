"""Payload encoding per payload type."""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import orjson
from beartype import beartype

from httpfacade.core.errors import EncodeError
from httpfacade.models.core import MultipartBody, PayloadType, RequestBody

# Characters left untouched by JavaScript's encodeURIComponent, besides alphanumerics and "_.-~".
_URI_COMPONENT_SAFE = "!*'()"


def form_value(value: Any) -> str:
    """Stringify a form value the way JavaScript does: ``true``/``false``/``null``."""
    match value:
        case bool():
            return "true" if value else "false"
        case None:
            return "null"
        case _:
            return str(value)


@beartype
def encode_form_url(form: Mapping[str, Any]) -> str:
    """Encode a flat mapping as ``key=value&...``.

    Only values are percent-encoded; keys are emitted verbatim and must already be URL safe.
    """
    return "&".join(
        f"{key}={quote(form_value(value), safe=_URI_COMPONENT_SAFE)}" for key, value in form.items()
    )


def encode_payload(payload: Any, payload_type: PayloadType) -> RequestBody:
    """Convert ``payload`` into the body handed to the transport."""
    match payload_type:
        case PayloadType.JSON:
            try:
                return orjson.dumps(payload).decode()
            except orjson.JSONEncodeError as ex:
                raise EncodeError(f"Payload is not JSON serializable: {ex}") from ex
        case PayloadType.URL_ENCODED:
            if not isinstance(payload, Mapping):
                raise EncodeError(f"URL encoded payload must be a mapping, got {type(payload).__name__}")
            return encode_form_url(payload)
        case PayloadType.MULTIPART_FORM_DATA:
            if not isinstance(payload, Mapping):
                raise EncodeError(f"Multipart payload must be a mapping, got {type(payload).__name__}")
            return MultipartBody(fields=dict(payload))
        case PayloadType.NONE:
            if not isinstance(payload, str):
                raise EncodeError(f"Raw payload must be a string, got {type(payload).__name__}")
            return payload
