"""Sources whose version is derived indirectly.

Edge reads RPM repository metadata, LM Studio resolves a download redirect,
and 1Password Linux and Flutter scrape human-oriented pages.
"""

import gzip
import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator

from pkgfeeds.core.errors import HttpError, ProbeFailure
from pkgfeeds.core.fetchers.types import FetchContext
from pkgfeeds.integrations.http.types import HttpResponse

logger = logging.getLogger(__name__)

EDGE_PACKAGE_NAME = "microsoft-edge-stable"
REPOMD_SUFFIX = "/repodata/repomd.xml"
LMSTUDIO_SLUG_RE = re.compile(r"/linux/x64/([^/]+)/")
LMSTUDIO_BUILD_SUFFIX_RE = re.compile(r"^([0-9]+(?:\.[0-9]+){2,4})-([0-9]+)$")
LMSTUDIO_DOTTED_RE = re.compile(r"^[0-9]+(?:\.[0-9]+){2,5}$")
ONEPASSWORD_UPDATED_RE = re.compile(r"Updated to ([0-9]+(?:\.[0-9]+)+(?:-[0-9]+)?)")
FLUTTER_HEADING_RE = re.compile(r"^### \[?([0-9]+\.[0-9]+\.[0-9]+)", re.MULTILINE)
# Servers answering these to HEAD get a ranged GET instead
HEAD_REJECTED_STATUSES = (405, 501)


def fetch_edge_version(ctx: FetchContext, repomd_url: str) -> str:
    """Version of microsoft-edge-stable from the repository's primary metadata.

    Two requests: repomd.xml names the gzip-compressed primary document, whose
    last microsoft-edge-stable entry carries the version.

    Raises:
        ProbeFailure: If either document is unavailable or malformed
    """
    repomd = _require_ok(ctx.http.get(repomd_url), "Edge repomd.xml")
    href = _primary_location(_parse_xml(repomd.content, repomd_url))
    if not href:
        raise ProbeFailure(f"No primary metadata location in {repomd_url}")

    base = repomd_url.removesuffix(REPOMD_SUFFIX)
    primary_url = f"{base}/{href}"
    primary = _require_ok(ctx.http.get(primary_url), "Edge primary metadata")
    try:
        document = gzip.decompress(primary.content)
    except (OSError, EOFError) as e:
        raise ProbeFailure(f"Cannot decompress {primary_url}: {e}") from e

    versions = list(_edge_versions(_parse_xml(document, primary_url)))
    logger.debug("Found %d %s entries in %s", len(versions), EDGE_PACKAGE_NAME, primary_url)
    return versions[-1] if versions else ""


def fetch_lmstudio_version(ctx: FetchContext, url: str) -> str:
    """Version encoded in the URL the latest-download link redirects to.

    "0.4.1-1" becomes "0.4.1.1" since a pkgver cannot contain a hyphen; an
    already dotted slug passes through.

    Raises:
        ProbeFailure: If the redirect cannot be resolved or the slug is unrecognized
    """
    final_url = resolve_final_url(ctx, url)
    logger.debug("LM Studio latest resolves to %s", final_url)

    match = LMSTUDIO_SLUG_RE.search(final_url)
    if match is None:
        raise ProbeFailure(f"No version slug in LM Studio download URL {final_url}")
    slug = match.group(1)

    build_suffix = LMSTUDIO_BUILD_SUFFIX_RE.match(slug)
    if build_suffix is not None:
        return f"{build_suffix.group(1)}.{build_suffix.group(2)}"
    if LMSTUDIO_DOTTED_RE.match(slug):
        return slug
    raise ProbeFailure(f"Unrecognized LM Studio version slug: {slug}")


def resolve_final_url(ctx: FetchContext, url: str) -> str:
    """Follow redirects from `url` without downloading the target.

    Tries HEAD first; if the server rejects it, or the HEAD request fails at
    the transport level, retries with a single-byte ranged GET.
    """
    try:
        response = ctx.http.head(url)
        if response.status_code not in HEAD_REJECTED_STATUSES and not response.is_error:
            return response.url
        logger.debug("HEAD %s answered %d; retrying with ranged GET", url, response.status_code)
    except HttpError as e:
        logger.debug("HEAD %s failed (%s); retrying with ranged GET", url, e)

    response = ctx.http.get_first_byte(url)
    if response.is_error:
        raise ProbeFailure(f"Cannot resolve {url}: HTTP {response.status_code}")
    return response.url


def fetch_onepassword_linux_version(ctx: FetchContext, url: str) -> str:
    page = _require_ok(ctx.http.get(url), "1Password release notes")
    # The version sometimes wraps across lines in the page source
    collapsed = re.sub(r"\s+", " ", page.text)
    # The last marker on the page wins
    matches = ONEPASSWORD_UPDATED_RE.findall(collapsed)
    return matches[-1] if matches else ""


def fetch_flutter_version(ctx: FetchContext, url: str) -> str:
    changelog = _require_ok(ctx.http.get(url), "Flutter changelog")
    match = FLUTTER_HEADING_RE.search(changelog.text)
    return match.group(1) if match else ""


def _require_ok(response: HttpResponse, label: str) -> HttpResponse:
    if response.is_error:
        raise ProbeFailure(
            f"Failed to fetch {label}: HTTP {response.status_code} from {response.url}"
        )
    return response


def _parse_xml(content: bytes, source: str) -> ET.Element:
    try:
        return ET.fromstring(content)
    except ET.ParseError as e:
        raise ProbeFailure(f"Invalid XML from {source}: {e}") from e


def _local_name(element: ET.Element) -> str:
    return element.tag.rsplit("}", 1)[-1]


def _primary_location(root: ET.Element) -> str:
    for element in root.iter():
        if _local_name(element) != "data" or element.get("type") != "primary":
            continue
        for child in element:
            if _local_name(child) == "location":
                return child.get("href", "")
    return ""


def _edge_versions(root: ET.Element) -> Iterator[str]:
    for element in root.iter():
        match _local_name(element):
            case "entry":
                if element.get("name") == EDGE_PACKAGE_NAME and element.get("ver"):
                    yield element.get("ver", "")
            case "package":
                version = _package_version(element)
                if version:
                    yield version


def _package_version(package: ET.Element) -> str:
    name = ""
    version = ""
    for child in package:
        match _local_name(child):
            case "name":
                name = (child.text or "").strip()
            case "version":
                version = child.get("ver", "")
    return version if name == EDGE_PACKAGE_NAME else ""
