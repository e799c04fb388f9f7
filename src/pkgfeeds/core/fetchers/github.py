"""GitHub release and tag lookups.

Only requests to api.github.com carry the bearer token and the pinned API
version header; no other host ever sees the credential.
"""

import logging
import re
from collections.abc import Iterator

from pkgfeeds.core.errors import ProbeFailure
from pkgfeeds.core.fetchers.envelope import (
    ApiError,
    JsonArray,
    JsonObject,
    ParseError,
    decode_json_array,
    decode_json_object,
)
from pkgfeeds.core.fetchers.types import FetchContext
from pkgfeeds.core.versions.normalize import (
    NoMatch,
    apply_regex_format,
    select_maximum,
    strip_decorations,
)
from pkgfeeds.integrations.http.types import HttpResponse

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
PAGE_SIZE = 100
RECENT_RELEASES_SIZE = 30


def github_headers(ctx: FetchContext, url: str) -> dict[str, str]:
    """Headers for `url`: authenticated only when it targets the GitHub API."""
    if not url.startswith(f"{GITHUB_API_URL}/"):
        return {}
    headers = {"X-GitHub-Api-Version": GITHUB_API_VERSION}
    if ctx.github_token:
        headers["Authorization"] = f"Bearer {ctx.github_token}"
    return headers


def fetch_latest_release_tag(ctx: FetchContext, repo: str, channel: str) -> str:
    """Tag of the newest release in `channel` (stable, prerelease or any).

    Stable uses /releases/latest, which already excludes drafts and
    pre-releases. The other channels scan the most recent releases.

    Raises:
        ProbeFailure: If GitHub answers with an error or unparseable body
    """
    if channel == "stable":
        url = f"{GITHUB_API_URL}/repos/{repo}/releases/latest"
        match decode_json_object(_get(ctx, url)):
            case JsonObject(fields=fields):
                if "message" in fields and "tag_name" not in fields:
                    raise ProbeFailure(f"GitHub API error for {repo}: {fields['message']}")
                return _text(fields.get("tag_name"))
            case ApiError(message=message):
                raise ProbeFailure(f"GitHub API error for {repo}: {message}")
            case ParseError(detail=detail):
                raise ProbeFailure(detail)

    url = f"{GITHUB_API_URL}/repos/{repo}/releases?per_page={RECENT_RELEASES_SIZE}"
    releases = _require_array(decode_json_array(_get(ctx, url)), repo)
    for release in releases:
        if isinstance(release, dict) and _in_channel(release, channel):
            return _text(release.get("tag_name"))
    return ""


def fetch_filtered_release_tag(
    ctx: FetchContext, repo: str, tag_regex: str, channel: str
) -> str:
    """Tag of the newest release in `channel` whose tag matches `tag_regex`.

    Releases come newest first, so the first match wins and paging stops.
    Paging also stops on an empty or short page, or at the page ceiling.

    Raises:
        ProbeFailure: If tag_regex is invalid, or GitHub answers with an error
    """
    pattern = _compile(tag_regex, "tagRegex")

    for page in range(1, ctx.release_page_limit + 1):
        url = f"{GITHUB_API_URL}/repos/{repo}/releases?per_page={PAGE_SIZE}&page={page}"
        releases = _require_array(decode_json_array(_get(ctx, url)), repo)
        logger.debug("Page %d: %d releases", page, len(releases))

        for release in releases:
            if not isinstance(release, dict):
                continue
            tag = _text(release.get("tag_name"))
            if tag and _in_channel(release, channel) and pattern.search(tag):
                return tag

        if len(releases) < PAGE_SIZE:
            break
    return ""


def fetch_filtered_tags_maximum(
    ctx: FetchContext,
    repo: str,
    *,
    tag_regex: str | None,
    tag_prefix: str | None,
    version_regex: str | None,
    version_format: str | None,
) -> str:
    """Highest version among all tags that survive filtering and extraction.

    Every page up to the ceiling is collected before choosing, since tag
    listings are not reliably ordered by version.

    Raises:
        ProbeFailure: If tag_regex is invalid, or the first page already fails
    """
    pattern = _compile(tag_regex, "tagRegex") if tag_regex else None
    candidates: list[str] = []
    for tag in iter_tag_names(ctx, repo, tag_prefix=tag_prefix):
        if pattern is not None and not pattern.search(tag):
            continue
        version = tag_to_version(tag, version_regex, version_format)
        if version:
            candidates.append(version)

    logger.debug("%d candidate versions for %s", len(candidates), repo)
    return select_maximum(candidates, ctx.comparator)


def iter_tag_names(ctx: FetchContext, repo: str, *, tag_prefix: str | None) -> Iterator[str]:
    """Yield bare tag names page by page.

    With a prefix the matching-refs endpoint filters server side and names come
    from "ref"; otherwise the tags endpoint is listed and names come from "name".
    A page that fails after the first ends the listing; tags already yielded
    stay valid.
    """
    if tag_prefix:
        base = f"{GITHUB_API_URL}/repos/{repo}/git/matching-refs/tags/{tag_prefix}"
        name_field = "ref"
    else:
        base = f"{GITHUB_API_URL}/repos/{repo}/tags"
        name_field = "name"

    for page in range(1, ctx.tag_page_limit + 1):
        url = f"{base}?per_page={PAGE_SIZE}&page={page}"
        try:
            items = _require_array(decode_json_array(_get(ctx, url)), repo)
        except ProbeFailure as e:
            if page == 1:
                raise
            logger.debug("Stopping tag listing for %s at page %d: %s", repo, page, e)
            return

        logger.debug("Page %d: %d tags", page, len(items))
        for item in items:
            name = _text(item.get(name_field)) if isinstance(item, dict) else ""
            if name:
                yield name.removeprefix("refs/tags/")

        if len(items) < PAGE_SIZE:
            return


def tag_to_version(tag: str, version_regex: str | None, version_format: str | None) -> str:
    """Convert one tag to a version, or "" when extraction rejects it."""
    if version_regex and version_format:
        extracted = apply_regex_format(tag, version_regex, version_format)
        if isinstance(extracted, NoMatch):
            return ""
        return extracted
    return strip_decorations(tag)


def _get(ctx: FetchContext, url: str) -> HttpResponse:
    response = ctx.http.get(url, headers=github_headers(ctx, url))
    logger.debug("GitHub %s -> %d", url, response.status_code)
    return response


def _require_array(decoded: JsonArray | ApiError | ParseError, repo: str) -> list:
    match decoded:
        case JsonArray(items=items):
            return items
        case ApiError(message=message):
            raise ProbeFailure(f"GitHub API error for {repo}: {message}")
        case ParseError(detail=detail):
            raise ProbeFailure(detail)


def _in_channel(release: dict, channel: str) -> bool:
    match channel:
        case "stable":
            return release.get("prerelease") is False
        case "prerelease":
            return release.get("prerelease") is True
        case _:
            return True


def _compile(regex: str, label: str) -> re.Pattern[str]:
    try:
        return re.compile(regex)
    except re.error as e:
        raise ProbeFailure(f"Invalid {label} {regex!r}: {e}") from e


def _text(value: object) -> str:
    return value if isinstance(value, str) else ""
