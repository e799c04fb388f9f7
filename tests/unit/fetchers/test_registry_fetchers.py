"""Tests for single-document registry sources."""

import pytest

from pkgfeeds.core.errors import ProbeFailure
from pkgfeeds.core.fetchers.registries import (
    CHROME_RELEASE_QUERY,
    CHROME_VERSION_HISTORY_URL,
    fetch_chrome_version,
    fetch_npm_version,
    fetch_onepassword_cli_version,
    fetch_pypi_version,
    fetch_snap_version,
    fetch_vscode_version,
)
from pkgfeeds.core.fetchers.types import FetchContext
from pkgfeeds.core.versions.fake import FakeVersionComparator
from pkgfeeds.integrations.http.fake import FakeHttpClient, json_response, text_response
from tests.test_utils.package_helpers import latest_release_url


def _ctx(http: FakeHttpClient, order: list[str] | None = None) -> FetchContext:
    return FetchContext(http=http, comparator=FakeVersionComparator(order=order))


def test_npm_scoped_package_is_url_encoded() -> None:
    url = "https://registry.npmjs.org/@anthropic-ai%2Fclaude-code"
    document = {"dist-tags": {"latest": "1.0.35", "next": "1.1.0-beta.2"}}
    http = FakeHttpClient(responses={url: json_response(url, document)})

    assert fetch_npm_version(_ctx(http), "@anthropic-ai/claude-code", "latest") == "1.0.35"
    assert fetch_npm_version(_ctx(http), "@anthropic-ai/claude-code", "next") == "1.1.0-beta.2"
    assert http.requests[0].headers == {}


def test_npm_missing_dist_tag_is_empty() -> None:
    url = "https://registry.npmjs.org/left-pad"
    http = FakeHttpClient(responses={url: json_response(url, {"dist-tags": {"latest": "1.3.0"}})})

    assert fetch_npm_version(_ctx(http), "left-pad", "beta") == ""


def test_npm_not_found_is_a_failure() -> None:
    url = "https://registry.npmjs.org/no-such-package"
    http = FakeHttpClient(
        responses={url: json_response(url, {"error": "Not found"}, status_code=404)}
    )

    with pytest.raises(ProbeFailure, match="no-such-package: Not found"):
        fetch_npm_version(_ctx(http), "no-such-package", "latest")


def test_pypi_uses_info_version_by_default() -> None:
    url = "https://pypi.org/pypi/httpx/json"
    document = {"info": {"version": "0.27.0"}, "releases": {"0.27.0": [], "0.28.0b1": []}}
    http = FakeHttpClient(responses={url: json_response(url, document)})

    assert fetch_pypi_version(_ctx(http), "httpx", allow_prerelease=False) == "0.27.0"


def test_pypi_allow_prerelease_takes_highest_release_key() -> None:
    url = "https://pypi.org/pypi/httpx/json"
    document = {
        "info": {"version": "0.27.0"},
        "releases": {"0.26.0": [], "0.28.0b1": [], "0.27.0": []},
    }
    http = FakeHttpClient(responses={url: json_response(url, document)})
    ctx = _ctx(http, order=["0.26.0", "0.27.0", "0.28.0b1"])

    assert fetch_pypi_version(ctx, "httpx", allow_prerelease=True) == "0.28.0b1"


def test_snap_picks_requested_channel_and_sends_series_header() -> None:
    url = "https://api.snapcraft.io/v2/snaps/info/code"
    document = {
        "channel-map": [
            {"channel": {"name": "edge"}, "version": "1.96.0-insider"},
            {"channel": {"name": "stable"}, "version": "1.95.3"},
        ]
    }
    http = FakeHttpClient(responses={url: json_response(url, document)})

    assert fetch_snap_version(_ctx(http), "code", "stable") == "1.95.3"
    assert http.requests[0].headers == {"Snap-Device-Series": "16"}


def test_snap_unknown_channel_is_empty() -> None:
    url = "https://api.snapcraft.io/v2/snaps/info/code"
    http = FakeHttpClient(responses={url: json_response(url, {"channel-map": []})})

    assert fetch_snap_version(_ctx(http), "code", "beta") == ""


def test_chrome_reads_first_release_of_channel() -> None:
    url = f"{CHROME_VERSION_HISTORY_URL}/beta/versions/all/releases?{CHROME_RELEASE_QUERY}"
    document = {"releases": [{"version": "131.0.6778.33"}, {"version": "131.0.6778.24"}]}
    http = FakeHttpClient(responses={url: json_response(url, document)})

    assert fetch_chrome_version(_ctx(http), "beta") == "131.0.6778.33"


def test_chrome_without_releases_is_empty() -> None:
    url = f"{CHROME_VERSION_HISTORY_URL}/stable/versions/all/releases?{CHROME_RELEASE_QUERY}"
    http = FakeHttpClient(responses={url: json_response(url, {"releases": []})})

    assert fetch_chrome_version(_ctx(http), "stable") == ""


def test_onepassword_cli_reads_version_field() -> None:
    url = "https://app-updates.agilebits.com/check/1/0/CLI2/en/2.0.0/N"
    http = FakeHttpClient(responses={url: json_response(url, {"version": "2.30.3"})})

    assert fetch_onepassword_cli_version(_ctx(http), url) == "2.30.3"


def test_onepassword_cli_invalid_body_is_a_failure() -> None:
    url = "https://app-updates.agilebits.com/check/1/0/CLI2/en/2.0.0/N"
    http = FakeHttpClient(responses={url: text_response(url, "<html>maintenance</html>")})

    with pytest.raises(ProbeFailure, match="Failed to fetch 1Password CLI"):
        fetch_onepassword_cli_version(_ctx(http), url)


def test_vscode_uses_latest_stable_release_of_vscode_repo() -> None:
    url = latest_release_url("microsoft/vscode")
    http = FakeHttpClient(responses={url: json_response(url, {"tag_name": "1.95.3"})})

    assert fetch_vscode_version(_ctx(http)) == "1.95.3"


def test_transport_failure_propagates_as_probe_failure() -> None:
    with pytest.raises(ProbeFailure, match="no route to host"):
        fetch_npm_version(_ctx(FakeHttpClient()), "left-pad", "latest")
