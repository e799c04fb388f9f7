"""Classification of a package's version state.

The rules form an ordered chain: the first predicate that holds decides the
status. Each rule is a plain (predicate, status) pair so it can be exercised
on its own.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from pkgfeeds.core.descriptor import is_vcs_name
from pkgfeeds.core.versions.comparator import Ordering, VersionComparator


class PackageStatus(Enum):
    NO_FEED = "NO_FEED"
    MANUAL = "MANUAL"
    VCS = "VCS"
    UNKNOWN = "UNKNOWN"
    UPDATE = "UPDATE"
    OK = "OK"
    NEWER = "NEWER"


@dataclass(frozen=True)
class PackageVersionState:
    """Everything known about one package before classification.

    Attributes:
        package_name: Directory name of the package
        local_version: pkgver from the descriptor, "" when absent
        upstream_version: Normalized upstream version, "" when unknown
        feed_present: Whether the feed configuration has an entry
        is_vcs: Whether the feed type is "vcs"
        is_manual: Whether the feed is manual, or of an empty/unknown type
    """

    package_name: str
    local_version: str
    upstream_version: str
    feed_present: bool
    is_vcs: bool = False
    is_manual: bool = False


Rule = tuple[Callable[[PackageVersionState], bool], PackageStatus]

CLASSIFICATION_RULES: tuple[Rule, ...] = (
    (lambda state: not state.feed_present, PackageStatus.NO_FEED),
    (lambda state: state.is_manual, PackageStatus.MANUAL),
    (lambda state: state.is_vcs or is_vcs_name(state.package_name), PackageStatus.VCS),
    (lambda state: not state.upstream_version, PackageStatus.UNKNOWN),
    (lambda state: not state.local_version, PackageStatus.UPDATE),
)

_ORDERING_STATUS = {
    Ordering.GREATER: PackageStatus.UPDATE,
    Ordering.EQUAL: PackageStatus.OK,
    Ordering.LESS: PackageStatus.NEWER,
}


def classify(state: PackageVersionState, comparator: VersionComparator) -> PackageStatus:
    """Reduce a version state to exactly one status."""
    for predicate, status in CLASSIFICATION_RULES:
        if predicate(state):
            return status
    return _ORDERING_STATUS[comparator.compare(state.upstream_version, state.local_version)]
