"""Result envelope wrapping every successful request."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, TypeVar

from httpfacade.core.errors import ResultAlreadyCompletedError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class HttpRequest:
    """Identity of the request a result belongs to."""

    method: str
    url: str


@dataclass(slots=True)
class FileBlob:
    """Downloaded file: parsed filename plus the still-buffering body.

    ``blob`` resolves independently of the enclosing result, await it to get the bytes.
    """

    filename: str | None
    blob: asyncio.Future[bytes]


@dataclass
class HttpResult(Generic[T]):
    """Timing-annotated wrapper around a decoded response value."""

    request: HttpRequest
    initiated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None
    duration: float | None = None  # milliseconds
    data: T | None = None

    @classmethod
    def start(cls, method: str, url: str) -> "HttpResult[T]":
        """Create an envelope and capture the initiation time."""
        return cls(request=HttpRequest(method=str(method), url=url))

    @property
    def completed(self) -> bool:
        return self.completed_at is not None

    def apply_data(self, data: T) -> None:
        """Attach the decoded value and stamp completion time and duration."""
        if self.completed_at is not None:
            raise ResultAlreadyCompletedError(
                f"Result for {self.request.method} {self.request.url} already completed"
            )
        self.data = data
        self.completed_at = datetime.now(UTC)
        self.duration = (self.completed_at - self.initiated_at).total_seconds() * 1000
