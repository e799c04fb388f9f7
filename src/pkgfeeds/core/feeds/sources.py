"""Typed source variants, one per feed "type".

Each variant carries only the parameters its fetch strategy needs. Unknown or
empty types resolve to UnrecognizedSource so dispatch can match exhaustively
with an explicit fallback instead of an open-ended string switch.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pkgfeeds.core.errors import InvalidFeedError
from pkgfeeds.core.feeds.store import FeedConfig, find_entry, get_field

DEFAULT_CHANNEL = "stable"
DEFAULT_DIST_TAG = "latest"
DEFAULT_LMSTUDIO_URL = "https://lmstudio.ai/download/latest/linux/x64"
DEFAULT_FLUTTER_CHANGELOG_URL = (
    "https://raw.githubusercontent.com/flutter/flutter/master/CHANGELOG.md"
)


class FeedSource(BaseModel):
    """Base for all source variants."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    source_type: ClassVar[str] = ""


class VersionExtraction(FeedSource):
    """Mixin fields for sources whose tags may need a regex-to-template transform."""

    version_regex: str | None = Field(default=None, alias="versionRegex")
    version_format: str | None = Field(default=None, alias="versionFormat")


class GitHubReleaseSource(VersionExtraction):
    source_type: ClassVar[str] = "github-release"

    repo: str
    channel: str = DEFAULT_CHANNEL


class GitHubReleaseFilteredSource(VersionExtraction):
    source_type: ClassVar[str] = "github-release-filtered"

    repo: str
    tag_regex: str = Field(alias="tagRegex")
    channel: str = DEFAULT_CHANNEL


class GitHubTagsFilteredSource(VersionExtraction):
    source_type: ClassVar[str] = "github-tags-filtered"

    repo: str
    tag_regex: str | None = Field(default=None, alias="tagRegex")
    tag_prefix: str | None = Field(default=None, alias="tagPrefix")


class VcsSource(VersionExtraction):
    """Live-checkout package; `repo` only feeds the informational stable tag."""

    source_type: ClassVar[str] = "vcs"

    repo: str | None = None


class ChromeSource(FeedSource):
    source_type: ClassVar[str] = "chrome"

    channel: str = DEFAULT_CHANNEL


class EdgeSource(FeedSource):
    source_type: ClassVar[str] = "edge"

    url: str


class VscodeSource(FeedSource):
    source_type: ClassVar[str] = "vscode"


class OnePasswordCliSource(FeedSource):
    source_type: ClassVar[str] = "1password-cli2"

    url: str


class OnePasswordLinuxSource(FeedSource):
    source_type: ClassVar[str] = "1password-linux-stable"

    url: str


class LmStudioSource(FeedSource):
    source_type: ClassVar[str] = "lmstudio"

    url: str = DEFAULT_LMSTUDIO_URL


class NpmSource(FeedSource):
    source_type: ClassVar[str] = "npm"

    package: str
    dist_tag: str = Field(default=DEFAULT_DIST_TAG, alias="distTag")


class PypiSource(FeedSource):
    source_type: ClassVar[str] = "pypi"

    project: str
    allow_prerelease: bool = Field(default=False, alias="allowPrerelease")


class SnapSource(FeedSource):
    source_type: ClassVar[str] = "snap"

    package: str
    channel: str = DEFAULT_CHANNEL


class FlutterSource(FeedSource):
    source_type: ClassVar[str] = "flutter"

    url: str = DEFAULT_FLUTTER_CHANGELOG_URL


class ManualSource(FeedSource):
    source_type: ClassVar[str] = "manual"


class UnrecognizedSource(FeedSource):
    """Empty or unknown type; treated as manual with a warning for the latter."""

    raw_type: str


SOURCE_MODELS: dict[str, type[FeedSource]] = {
    model.source_type: model
    for model in (
        GitHubReleaseSource,
        GitHubReleaseFilteredSource,
        GitHubTagsFilteredSource,
        VcsSource,
        ChromeSource,
        EdgeSource,
        VscodeSource,
        OnePasswordCliSource,
        OnePasswordLinuxSource,
        LmStudioSource,
        NpmSource,
        PypiSource,
        SnapSource,
        FlutterSource,
        ManualSource,
    )
}


def resolve_source(config: FeedConfig, package_name: str) -> FeedSource:
    """Build the typed source variant for a package's feed.

    Raises:
        InvalidFeedError: If the package has no feed, or a parameter its source
            type requires is missing or malformed
    """
    entry = find_entry(config, package_name)
    if entry is None:
        raise InvalidFeedError(f"No feed entry for '{package_name}'")

    source_type = entry.source_type
    model = SOURCE_MODELS.get(source_type)
    if model is None:
        return UnrecognizedSource(raw_type=source_type)

    values: dict[str, str] = {}
    for field_name, field_info in model.model_fields.items():
        key = field_info.alias or field_name
        value = get_field(config, package_name, key)
        if value is not None:
            values[key] = value

    try:
        return model.model_validate(values)
    except ValidationError as e:
        raise InvalidFeedError(
            f"{source_type} feed for '{package_name}' is invalid: {_describe(e)}"
        ) from e


def _describe(error: ValidationError) -> str:
    problems: list[str] = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        if item["type"] == "missing":
            problems.append(f"missing required parameter '{location}'")
        else:
            problems.append(f"'{location}': {item['msg']}")
    return "; ".join(problems)
