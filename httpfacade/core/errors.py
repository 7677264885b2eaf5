"""Error taxonomy for the request pipeline."""

from http import HTTPStatus


class HttpFacadeError(Exception):
    """Base exception for every failure raised by httpfacade."""


class TransportError(HttpFacadeError):
    """Network or connection failure before any response was received."""


class EncodeError(HttpFacadeError):
    """Payload could not be converted to the wire form of its payload type."""


class DecodeError(HttpFacadeError):
    """Response body could not be read or parsed as the expected response type."""


class BodyConsumedError(HttpFacadeError):
    """A response body reader was called after the body was already consumed."""


class ResultAlreadyCompletedError(HttpFacadeError):
    """Data was applied twice to the same result envelope."""


class HttpStatusError(HttpFacadeError):
    """Response received with a non-success status code."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    @property
    def expose(self) -> bool:
        """Whether the message is safe to show to a client (4xx and below)."""
        return self.status < 500

    @property
    def phrase(self) -> str:
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Unknown"

    def __repr__(self) -> str:
        return f"HttpStatusError(status={self.status}, message={self.message!r})"


def make_http_error(status: int, message: str) -> HttpStatusError:
    """Build the typed error for a non-success HTTP status."""
    return HttpStatusError(status, message)
