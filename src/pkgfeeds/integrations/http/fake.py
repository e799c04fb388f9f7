"""Fake HttpClient implementation for testing.

FakeHttpClient serves canned responses keyed by exact URL and records every
request so tests can assert on request counts, order, and headers.
"""

import json
from dataclasses import dataclass
from typing import Any

from pkgfeeds.core.errors import HttpError
from pkgfeeds.integrations.http.abc import HttpClient
from pkgfeeds.integrations.http.types import HttpResponse


@dataclass(frozen=True)
class RecordedRequest:
    """A request made against FakeHttpClient."""

    method: str
    url: str
    headers: dict[str, str]


def json_response(url: str, payload: Any, *, status_code: int = 200) -> HttpResponse:
    """Build an HttpResponse whose body is `payload` encoded as JSON."""
    return HttpResponse(url=url, status_code=status_code, content=json.dumps(payload).encode())


def text_response(url: str, body: str, *, status_code: int = 200) -> HttpResponse:
    """Build an HttpResponse with a UTF-8 text body."""
    return HttpResponse(url=url, status_code=status_code, content=body.encode())


class FakeHttpClient(HttpClient):
    """In-memory fake implementation of HTTP operations.

    Constructor Injection:
    - responses: URL -> response served for GET
    - head_responses: URL -> response served for HEAD
    - range_responses: URL -> response served for first-byte GET
    - Any value may be an exception instance, which is raised instead

    Unknown URLs raise HttpError, mirroring a connection failure.

    Examples:
        >>> url = "https://api.github.com/repos/a/b/releases/latest"
        >>> http = FakeHttpClient(responses={url: json_response(url, {"tag_name": "v1.0"})})
        >>> http.get(url).status_code
        200
    """

    def __init__(
        self,
        *,
        responses: dict[str, HttpResponse | Exception] | None = None,
        head_responses: dict[str, HttpResponse | Exception] | None = None,
        range_responses: dict[str, HttpResponse | Exception] | None = None,
    ) -> None:
        self._responses = responses or {}
        self._head_responses = head_responses or {}
        self._range_responses = range_responses or {}
        self._requests: list[RecordedRequest] = []

    def get(self, url: str, *, headers: dict[str, str] | None = None) -> HttpResponse:
        return self._serve("GET", url, headers, self._responses)

    def head(self, url: str, *, headers: dict[str, str] | None = None) -> HttpResponse:
        return self._serve("HEAD", url, headers, self._head_responses)

    def get_first_byte(self, url: str, *, headers: dict[str, str] | None = None) -> HttpResponse:
        return self._serve("RANGE", url, headers, self._range_responses)

    @property
    def requests(self) -> list[RecordedRequest]:
        """Get every request made, in order.

        This property is for test assertions only.
        """
        return self._requests.copy()

    @property
    def requested_urls(self) -> list[str]:
        """Get the URLs of every request made, in order.

        This property is for test assertions only.
        """
        return [request.url for request in self._requests]

    def _serve(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None,
        table: dict[str, HttpResponse | Exception],
    ) -> HttpResponse:
        self._requests.append(RecordedRequest(method=method, url=url, headers=dict(headers or {})))
        if url not in table:
            raise HttpError(f"Request to {url} failed: no route to host")
        response = table[url]
        if isinstance(response, Exception):
            raise response
        return response
