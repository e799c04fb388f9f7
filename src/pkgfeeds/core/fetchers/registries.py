"""Single-request sources: one JSON document, one projected field."""

import logging
from typing import Any

from pkgfeeds.core.errors import ProbeFailure
from pkgfeeds.core.fetchers.envelope import ApiError, JsonObject, ParseError, decode_json_object
from pkgfeeds.core.fetchers.github import fetch_latest_release_tag
from pkgfeeds.core.fetchers.types import FetchContext
from pkgfeeds.core.versions.normalize import select_maximum

logger = logging.getLogger(__name__)

NPM_REGISTRY_URL = "https://registry.npmjs.org"
PYPI_URL = "https://pypi.org/pypi"
SNAPCRAFT_INFO_URL = "https://api.snapcraft.io/v2/snaps/info"
SNAP_DEVICE_SERIES = "16"
CHROME_VERSION_HISTORY_URL = (
    "https://versionhistory.googleapis.com/v1/chrome/platforms/linux/channels"
)
# endtime=none,fraction>=0.5 and version desc, pre-encoded
CHROME_RELEASE_QUERY = "filter=endtime%3Dnone%2Cfraction%3E%3D0.5&order_by=version%20desc"
VSCODE_REPO = "microsoft/vscode"


def fetch_npm_version(ctx: FetchContext, package: str, dist_tag: str) -> str:
    # Scoped packages (@scope/name) need the slash encoded
    url = f"{NPM_REGISTRY_URL}/{package.replace('/', '%2F')}"
    document = _fetch_object(ctx, url, f"npm package {package}")
    dist_tags = document.get("dist-tags")
    if not isinstance(dist_tags, dict):
        return ""
    return _text(dist_tags.get(dist_tag))


def fetch_pypi_version(ctx: FetchContext, project: str, allow_prerelease: bool) -> str:
    """Current PyPI release of `project`.

    info.version is what PyPI considers latest and never a pre-release. When
    pre-releases are allowed the highest release key wins instead.
    """
    document = _fetch_object(ctx, f"{PYPI_URL}/{project}/json", f"PyPI project {project}")
    if allow_prerelease:
        releases = document.get("releases")
        if isinstance(releases, dict) and releases:
            return select_maximum(releases.keys(), ctx.comparator)

    info = document.get("info")
    if not isinstance(info, dict):
        return ""
    return _text(info.get("version"))


def fetch_snap_version(ctx: FetchContext, package: str, channel: str) -> str:
    document = _fetch_object(
        ctx,
        f"{SNAPCRAFT_INFO_URL}/{package}",
        f"snap {package}",
        headers={"Snap-Device-Series": SNAP_DEVICE_SERIES},
    )
    channel_map = document.get("channel-map")
    if not isinstance(channel_map, list):
        return ""
    for entry in channel_map:
        if not isinstance(entry, dict):
            continue
        entry_channel = entry.get("channel")
        if isinstance(entry_channel, dict) and entry_channel.get("name") == channel:
            return _text(entry.get("version"))
    return ""


def fetch_chrome_version(ctx: FetchContext, channel: str) -> str:
    """Newest Chrome release on `channel` that is live and at least half rolled out."""
    url = f"{CHROME_VERSION_HISTORY_URL}/{channel}/versions/all/releases?{CHROME_RELEASE_QUERY}"
    document = _fetch_object(ctx, url, f"Chrome {channel}")
    releases = document.get("releases")
    if not isinstance(releases, list) or not releases or not isinstance(releases[0], dict):
        return ""
    return _text(releases[0].get("version"))


def fetch_onepassword_cli_version(ctx: FetchContext, url: str) -> str:
    document = _fetch_object(ctx, url, "1Password CLI")
    return _text(document.get("version"))


def fetch_vscode_version(ctx: FetchContext) -> str:
    return fetch_latest_release_tag(ctx, VSCODE_REPO, "stable")


def _fetch_object(
    ctx: FetchContext, url: str, label: str, headers: dict[str, str] | None = None
) -> dict[str, Any]:
    logger.debug("Fetching %s from %s", label, url)
    response = ctx.http.get(url, headers=headers)
    match decode_json_object(response):
        case JsonObject(fields=fields):
            return fields
        case ApiError(message=message):
            raise ProbeFailure(f"Failed to fetch {label}: {message}")
        case ParseError(detail=detail):
            raise ProbeFailure(f"Failed to fetch {label}: {detail}")


def _text(value: object) -> str:
    # Registries occasionally serve numbers where strings are expected
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (str, int, float)):
        return str(value)
    return ""
