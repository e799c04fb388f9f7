"""Real HTTP implementation using httpx."""

import logging

import httpx

from pkgfeeds.core.errors import HttpError
from pkgfeeds.integrations.http.abc import HttpClient
from pkgfeeds.integrations.http.types import HttpResponse

logger = logging.getLogger(__name__)


class RealHttpClient(HttpClient):
    """Production implementation backed by a synchronous httpx.Client.

    One client is shared for the whole run; it is closed by the CLI when the
    command finishes.
    """

    def __init__(
        self,
        *,
        timeout: float,
        user_agent: str,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    def get(self, url: str, *, headers: dict[str, str] | None = None) -> HttpResponse:
        return self._request("GET", url, headers)

    def head(self, url: str, *, headers: dict[str, str] | None = None) -> HttpResponse:
        response = self._request("HEAD", url, headers)
        return HttpResponse(url=response.url, status_code=response.status_code)

    def get_first_byte(self, url: str, *, headers: dict[str, str] | None = None) -> HttpResponse:
        request_headers = dict(headers or {})
        request_headers["Range"] = "bytes=0-0"
        logger.debug("GET %s (first byte only)", url)
        try:
            # Streamed so a server that ignores Range never sends us the body
            with self._client.stream("GET", url, headers=request_headers) as response:
                return HttpResponse(url=str(response.url), status_code=response.status_code)
        except httpx.TimeoutException as e:
            raise HttpError(f"Timed out fetching {url}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise HttpError(f"Request to {url} failed: {e}") from e

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, url: str, headers: dict[str, str] | None) -> HttpResponse:
        logger.debug("%s %s", method, url)
        try:
            response = self._client.request(method, url, headers=headers)
        except httpx.TimeoutException as e:
            raise HttpError(f"Timed out fetching {url}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise HttpError(f"Request to {url} failed: {e}") from e

        logger.debug("%s %s -> %d (%s)", method, url, response.status_code, response.url)
        return HttpResponse(
            url=str(response.url),
            status_code=response.status_code,
            content=response.content,
        )
