"""Pydantic models for JSON output schemas.

These models validate every JSON record before it reaches stdout, so scripts
consuming `pkgfeeds check --json` can rely on the shape.
"""

from pydantic import BaseModel, ConfigDict, Field

STATUS_PATTERN = "^(NO_FEED|MANUAL|VCS|UNKNOWN|UPDATE|OK|NEWER)$"


class PackageStatusRecord(BaseModel):
    """One line of `pkgfeeds check --json` output.

    Attributes:
        package: Package name
        current_version: pkgver from the local descriptor ("" when absent)
        upstream_version: Normalized upstream version ("" when unknown)
        status: Classification result
    """

    model_config = ConfigDict(strict=True)

    package: str
    current_version: str
    upstream_version: str
    status: str = Field(..., pattern=STATUS_PATTERN)


class FeedSourceRecord(BaseModel):
    """JSON output of `pkgfeeds feeds show`.

    Attributes:
        package: Package name
        type: Feed type as written in the document
        parameters: Resolved parameters, defaults applied, keyed as in the document
    """

    model_config = ConfigDict(strict=True)

    package: str
    type: str
    parameters: dict[str, str | bool | None]
