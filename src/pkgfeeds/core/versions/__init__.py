from pkgfeeds.core.versions.comparator import (
    LexicalComparator,
    Ordering,
    VercmpComparator,
    VersionComparator,
    select_comparator,
)
from pkgfeeds.core.versions.normalize import (
    NO_MATCH,
    NoMatch,
    apply_regex_format,
    select_maximum,
    strip_decorations,
)

__all__ = [
    "NO_MATCH",
    "LexicalComparator",
    "NoMatch",
    "Ordering",
    "VercmpComparator",
    "VersionComparator",
    "apply_regex_format",
    "select_comparator",
    "select_maximum",
    "strip_decorations",
]
