"""Route a source variant to its fetcher and normalize the result."""

import logging

from pkgfeeds.core.errors import ProbeFailure
from pkgfeeds.core.feeds.sources import (
    ChromeSource,
    EdgeSource,
    FeedSource,
    FlutterSource,
    GitHubReleaseFilteredSource,
    GitHubReleaseSource,
    GitHubTagsFilteredSource,
    LmStudioSource,
    ManualSource,
    NpmSource,
    OnePasswordCliSource,
    OnePasswordLinuxSource,
    PypiSource,
    SnapSource,
    UnrecognizedSource,
    VcsSource,
    VscodeSource,
)
from pkgfeeds.core.fetchers.derived import (
    fetch_edge_version,
    fetch_flutter_version,
    fetch_lmstudio_version,
    fetch_onepassword_linux_version,
)
from pkgfeeds.core.fetchers.github import (
    fetch_filtered_release_tag,
    fetch_filtered_tags_maximum,
    fetch_latest_release_tag,
)
from pkgfeeds.core.fetchers.registries import (
    fetch_chrome_version,
    fetch_npm_version,
    fetch_onepassword_cli_version,
    fetch_pypi_version,
    fetch_snap_version,
    fetch_vscode_version,
)
from pkgfeeds.core.fetchers.types import FetchContext, ProbeResult
from pkgfeeds.core.versions.normalize import NoMatch, apply_regex_format, strip_decorations

logger = logging.getLogger(__name__)


def probe_upstream(ctx: FetchContext, source: FeedSource) -> ProbeResult:
    """Ask the upstream behind `source` for its current version.

    Never raises for upstream trouble: probe failures and transport errors
    become an unsuccessful ProbeResult carrying the reason.
    """
    try:
        return _probe(ctx, source)
    except ProbeFailure as e:
        logger.debug("Probe failed for %s source: %s", source.source_type, e)
        return ProbeResult.failed(str(e))


def normalize_release_tag(tag: str, version_regex: str | None, version_format: str | None) -> str:
    """Undecorated tag, reshaped by versionRegex/versionFormat when they match."""
    version = strip_decorations(tag)
    if not (version_regex and version_format):
        return version
    extracted = apply_regex_format(version, version_regex, version_format)
    if isinstance(extracted, NoMatch):
        logger.debug("versionRegex %r did not match %r; using tag as-is", version_regex, version)
        return version
    return extracted


def _probe(ctx: FetchContext, source: FeedSource) -> ProbeResult:
    match source:
        case GitHubReleaseSource():
            tag = fetch_latest_release_tag(ctx, source.repo, source.channel)
            return _from_tag(tag, source.version_regex, source.version_format)
        case GitHubReleaseFilteredSource():
            tag = fetch_filtered_release_tag(ctx, source.repo, source.tag_regex, source.channel)
            return _from_tag(tag, source.version_regex, source.version_format)
        case GitHubTagsFilteredSource():
            version = fetch_filtered_tags_maximum(
                ctx,
                source.repo,
                tag_regex=source.tag_regex,
                tag_prefix=source.tag_prefix,
                version_regex=source.version_regex,
                version_format=source.version_format,
            )
            return ProbeResult.found(version, version)
        case VcsSource(repo=None):
            return ProbeResult.failed("VCS feed has no repo to read a stable tag from")
        case VcsSource(repo=str() as repo):
            tag = fetch_latest_release_tag(ctx, repo, "stable")
            return _from_tag(tag, source.version_regex, source.version_format)
        case ChromeSource():
            return _as_is(fetch_chrome_version(ctx, source.channel))
        case EdgeSource():
            return _as_is(fetch_edge_version(ctx, source.url))
        case VscodeSource():
            return _from_tag(fetch_vscode_version(ctx), None, None)
        case OnePasswordCliSource():
            return _as_is(fetch_onepassword_cli_version(ctx, source.url))
        case OnePasswordLinuxSource():
            return _as_is(fetch_onepassword_linux_version(ctx, source.url))
        case LmStudioSource():
            return _as_is(fetch_lmstudio_version(ctx, source.url))
        case NpmSource():
            return _as_is(fetch_npm_version(ctx, source.package, source.dist_tag))
        case PypiSource():
            return _as_is(fetch_pypi_version(ctx, source.project, source.allow_prerelease))
        case SnapSource():
            return _as_is(fetch_snap_version(ctx, source.package, source.channel))
        case FlutterSource():
            return _as_is(fetch_flutter_version(ctx, source.url))
        case ManualSource():
            return ProbeResult.failed("Manual feeds are not probed")
        case UnrecognizedSource():
            return ProbeResult.failed(f"Unrecognized feed type '{source.raw_type}'")
        case _:
            raise ProbeFailure(f"No fetcher for {type(source).__name__}")


def _from_tag(tag: str, version_regex: str | None, version_format: str | None) -> ProbeResult:
    if not tag:
        return ProbeResult.failed("Upstream returned no release tag")
    return ProbeResult.found(tag, normalize_release_tag(tag, version_regex, version_format))


def _as_is(value: str) -> ProbeResult:
    return ProbeResult.found(value, value.strip())
