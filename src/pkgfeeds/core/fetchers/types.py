"""Shared types for upstream fetchers."""

from dataclasses import dataclass

from pkgfeeds.core.versions.comparator import VersionComparator
from pkgfeeds.integrations.http.abc import HttpClient

DEFAULT_RELEASE_PAGE_LIMIT = 10
DEFAULT_TAG_PAGE_LIMIT = 20


@dataclass(frozen=True)
class FetchContext:
    """Everything a fetcher needs besides its source variant.

    Attributes:
        http: Client used for every upstream request
        comparator: Ordering used wherever a maximum is chosen
        github_token: Bearer credential sent to api.github.com only
        release_page_limit: Page ceiling when scanning releases
        tag_page_limit: Page ceiling when collecting tags
    """

    http: HttpClient
    comparator: VersionComparator
    github_token: str | None = None
    release_page_limit: int = DEFAULT_RELEASE_PAGE_LIMIT
    tag_page_limit: int = DEFAULT_TAG_PAGE_LIMIT


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of asking one upstream source for its current version.

    Attributes:
        raw_value: Identifier as the upstream reported it (tag, slug, field value)
        normalized_version: Comparable version, "" when none was determined
        success: Whether a usable version was obtained
        error_detail: Human-readable reason when success is False
    """

    raw_value: str
    normalized_version: str
    success: bool
    error_detail: str | None = None

    @staticmethod
    def found(raw_value: str, normalized_version: str) -> "ProbeResult":
        if not normalized_version:
            return ProbeResult.failed(f"Upstream returned no version (raw value {raw_value!r})")
        return ProbeResult(
            raw_value=raw_value,
            normalized_version=normalized_version,
            success=True,
        )

    @staticmethod
    def failed(detail: str) -> "ProbeResult":
        return ProbeResult(raw_value="", normalized_version="", success=False, error_detail=detail)
