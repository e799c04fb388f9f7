"""Builders for feed documents and package descriptors used across tests."""

import json
from pathlib import Path
from typing import Any

from pkgfeeds.core.feeds.store import FeedConfig, parse_feed_document


def feeds_v2(*packages: dict[str, Any]) -> dict[str, Any]:
    return {"schemaVersion": 2, "packages": list(packages)}


def build_feeds(*packages: dict[str, Any]) -> FeedConfig:
    """In-memory FeedConfig from flat (schema v2) package entries."""
    return parse_feed_document(feeds_v2(*packages))


def write_feeds(path: Path, *packages: dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(feeds_v2(*packages), indent=2), encoding="utf-8")
    return path


def write_pkgbuild(
    packages_dir: Path,
    name: str,
    pkgver: str,
    *,
    pkgrel: str = "3",
    quote: str = "'",
) -> Path:
    """Create <packages_dir>/<name>/PKGBUILD with a realistic layout."""
    package_dir = packages_dir / name
    package_dir.mkdir(parents=True, exist_ok=True)
    descriptor = package_dir / "PKGBUILD"
    descriptor.write_text(
        f"# Maintainer: Test <test@example.com>\n"
        f"pkgname={name}\n"
        f"pkgver={quote}{pkgver}{quote}\n"
        f"pkgrel={pkgrel}\n"
        f"arch=('x86_64')\n"
        f"source=(\"https://example.com/{name}-$pkgver.tar.gz\")\n"
        f"sha256sums=('SKIP')\n",
        encoding="utf-8",
    )
    return descriptor


def latest_release_url(repo: str) -> str:
    return f"https://api.github.com/repos/{repo}/releases/latest"


def releases_page_url(repo: str, page: int) -> str:
    return f"https://api.github.com/repos/{repo}/releases?per_page=100&page={page}"


def tags_page_url(repo: str, page: int) -> str:
    return f"https://api.github.com/repos/{repo}/tags?per_page=100&page={page}"


def matching_refs_url(repo: str, prefix: str, page: int) -> str:
    return (
        f"https://api.github.com/repos/{repo}/git/matching-refs/tags/{prefix}"
        f"?per_page=100&page={page}"
    )
