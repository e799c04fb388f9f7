"""Fake VersionComparator for testing.

Orders versions by their position in an explicit list, so tests state the
expected ordering directly instead of depending on an installed vercmp.
"""

from pkgfeeds.core.versions.comparator import Ordering, VersionComparator


class FakeVersionComparator(VersionComparator):
    """Comparator that ranks versions by index in `order` (lowest first).

    Versions missing from `order` raise KeyError, which surfaces a test that
    compares something it did not declare.

    Examples:
        >>> comparator = FakeVersionComparator(order=["1.9", "1.10", "2.0"])
        >>> comparator.compare("1.10", "1.9")
        <Ordering.GREATER: 1>
    """

    def __init__(self, *, order: list[str] | None = None, degraded: bool = False) -> None:
        self._rank = {version: index for index, version in enumerate(order or [])}
        self._degraded = degraded
        self._compare_calls: list[tuple[str, str]] = []

    @property
    def degraded(self) -> bool:
        return self._degraded

    def compare(self, a: str, b: str) -> Ordering:
        self._compare_calls.append((a, b))
        return Ordering.from_int(self._rank[a] - self._rank[b])

    @property
    def compare_calls(self) -> list[tuple[str, str]]:
        """Get the list of compare() calls that were made.

        This property is for test assertions only.
        """
        return self._compare_calls.copy()
