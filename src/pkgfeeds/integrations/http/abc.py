"""HTTP operations abstraction.

Every upstream probe goes through this interface so fetchers can be exercised
against canned responses. Implementations follow redirects and apply a fixed
timeout; there is no retry and no caching.
"""

from abc import ABC, abstractmethod

from pkgfeeds.integrations.http.types import HttpResponse


class HttpClient(ABC):
    """Abstract read-only HTTP client for dependency injection."""

    @abstractmethod
    def get(self, url: str, *, headers: dict[str, str] | None = None) -> HttpResponse:
        """Fetch a URL with GET and return the complete body.

        Non-2xx statuses are returned, not raised: several upstream APIs carry
        their error message in the body.

        Raises:
            HttpError: On connection failure, timeout, or an invalid URL
        """
        ...

    @abstractmethod
    def head(self, url: str, *, headers: dict[str, str] | None = None) -> HttpResponse:
        """Issue a HEAD request, following redirects to the final URL.

        Raises:
            HttpError: On connection failure, timeout, or an invalid URL
        """
        ...

    @abstractmethod
    def get_first_byte(self, url: str, *, headers: dict[str, str] | None = None) -> HttpResponse:
        """Issue a ranged GET (bytes=0-0) without reading the body.

        Fallback for servers that reject HEAD; only the final URL and status of
        the returned response are meaningful.

        Raises:
            HttpError: On connection failure, timeout, or an invalid URL
        """
        ...

    def close(self) -> None:
        """Release pooled connections. Implementations without any keep this no-op."""
