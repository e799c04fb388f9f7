"""Type definitions for HTTP operations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class HttpResponse:
    """A fully received response.

    Attributes:
        url: Final URL after all redirects were followed
        status_code: HTTP status of the final response
        content: Raw body bytes (empty for HEAD and first-byte probes)
    """

    url: str
    status_code: int
    content: bytes = b""

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400
