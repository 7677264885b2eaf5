"""Response decoding and header parsing."""

import re
from collections.abc import Awaitable, Callable
from typing import Any

from beartype import beartype

from httpfacade.client.transport import RawResponse
from httpfacade.core.errors import DecodeError, make_http_error
from httpfacade.models.core import HttpMethod, ResponseType

FILENAME_PATTERN = re.compile(r"""filename[^;=\n]*=((['"]).*?\2|[^;\n]*)""")
QUOTES_PATTERN = re.compile(r"""['"]""")


async def ensure_success(method: HttpMethod, response: RawResponse) -> None:
    """Raise ``HttpStatusError`` for a non-success response, leaving its body unread."""
    if response.ok:
        return
    await response.aclose()
    raise make_http_error(
        response.status,
        f"HTTP {method} request failed with status {response.status}",
    )


def parse_response(
    method: HttpMethod,
    response_type: ResponseType,
) -> Callable[[RawResponse], Awaitable[Any]]:
    """Return the coroutine function decoding a raw response as ``response_type``."""

    async def _parse(response: RawResponse) -> Any:
        await ensure_success(method, response)

        try:
            match response_type:
                case ResponseType.JSON:
                    return await response.json()
                case ResponseType.TEXT:
                    return await response.text()
                case ResponseType.NONE:
                    await response.aclose()
                    return None
        except Exception as ex:
            raise DecodeError(
                f"Failed to decode {response_type} response of HTTP {method} request: {ex}"
            ) from ex

    return _parse


@beartype
def extract_file_name(disposition: str | None) -> str | None:
    """Extract the filename of an ``attachment`` Content-Disposition header."""
    if not disposition or "attachment" not in disposition:
        return None

    matches = FILENAME_PATTERN.search(disposition)
    if matches is None or not matches.group(1):
        return None

    return QUOTES_PATTERN.sub("", matches.group(1)) or None
