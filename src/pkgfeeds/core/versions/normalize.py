"""Version normalization: turning upstream tags into comparable versions."""

import logging
import re
from collections.abc import Iterable
from typing import Final

from pkgfeeds.core.versions.comparator import Ordering, VersionComparator

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\$([1-9])")


class NoMatch:
    """Sentinel returned by apply_regex_format when the regex does not match.

    Not an error: callers fall back to the undecorated tag.
    """

    def __repr__(self) -> str:
        return "NO_MATCH"

    def __bool__(self) -> bool:
        return False


NO_MATCH: Final = NoMatch()


def strip_decorations(raw: str) -> str:
    """Strip tag conventions to produce a bare version.

    "refs/tags/v1.2.3" -> "1.2.3", "V1.2.3" -> "1.2.3", CR/LF noise removed.
    """
    value = raw.replace("\r", "").replace("\n", "")
    value = value.removeprefix("refs/tags/")
    if value[:1] in ("v", "V"):
        value = value[1:]
    return value


def apply_regex_format(raw: str, regex: str, template: str) -> str | NoMatch:
    """Extract a version from `raw` with capture groups substituted into `template`.

    The regex is matched at the start of `raw` (append ``$`` for a full match).
    ``$1``..``$9`` in `template` are replaced with the corresponding groups; a
    group that did not participate, or does not exist, becomes "".

    Example:
        >>> apply_regex_format("release-69-1", r"^release-([0-9]+)-([0-9]+)$", "$1.$2")
        '69.1'

    Returns:
        The formatted version, or NO_MATCH when the regex does not match
    """
    try:
        match = re.match(regex, raw)
    except re.error as e:
        logger.debug("Invalid versionRegex %r: %s", regex, e)
        return NO_MATCH
    if match is None:
        return NO_MATCH

    group_count = len(match.groups())

    def substitute(placeholder: re.Match[str]) -> str:
        index = int(placeholder.group(1))
        if index > group_count:
            return ""
        return match.group(index) or ""

    return _PLACEHOLDER_RE.sub(substitute, template)


def select_maximum(versions: Iterable[str], comparator: VersionComparator) -> str:
    """Return the highest version by `comparator`, or "" for no candidates."""
    best = ""
    for version in versions:
        if not version:
            continue
        if not best or comparator.compare(version, best) is Ordering.GREATER:
            best = version
    return best
