"""Package version ordering.

Two implementations sit behind one interface and exactly one is chosen per run:

- VercmpComparator delegates to pacman's ``vercmp``, the authoritative ordering
  (epoch dominates, alphanumeric segments compare element-wise, ``~`` marks a
  pre-release that sorts below the same version without it).
- LexicalComparator is plain string ordering. It is wrong for multi-digit
  segments ("9" > "10"), epochs, and tilde pre-releases, and reports itself as
  degraded so callers can warn.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from pkgfeeds.integrations.shell.abc import Shell

logger = logging.getLogger(__name__)

VERCMP_TOOL = "vercmp"


class Ordering(Enum):
    """Result of comparing version `a` against version `b`."""

    GREATER = 1
    EQUAL = 0
    LESS = -1

    @staticmethod
    def from_int(value: int) -> "Ordering":
        if value > 0:
            return Ordering.GREATER
        if value < 0:
            return Ordering.LESS
        return Ordering.EQUAL


class VersionComparator(ABC):
    """Abstract version ordering for dependency injection."""

    @property
    @abstractmethod
    def degraded(self) -> bool:
        """True when ordering is known to be inaccurate for some inputs."""
        ...

    @abstractmethod
    def compare(self, a: str, b: str) -> Ordering:
        """Order version `a` relative to version `b`.

        Returns:
            GREATER if a sorts after b, EQUAL if equivalent, LESS otherwise
        """
        ...


class VercmpComparator(VersionComparator):
    """Authoritative ordering via the ``vercmp`` binary from pacman."""

    def __init__(self, shell: Shell) -> None:
        self._shell = shell

    @property
    def degraded(self) -> bool:
        return False

    def compare(self, a: str, b: str) -> Ordering:
        result = self._shell.run([VERCMP_TOOL, a, b])
        output = result.stdout.strip()
        if result.returncode != 0 or not output:
            raise RuntimeError(
                f"vercmp failed for {a!r} vs {b!r} (exit {result.returncode}): "
                f"{result.stderr.strip()}"
            )
        try:
            return Ordering.from_int(int(output))
        except ValueError as e:
            raise RuntimeError(f"Unexpected vercmp output: {output!r}") from e


class LexicalComparator(VersionComparator):
    """Fallback ordering by plain string comparison.

    Known to be incorrect for "9" vs "10", epochs ("2:1.0" vs "9.99") and tilde
    pre-releases ("1.0~rc1" vs "1.0").
    """

    @property
    def degraded(self) -> bool:
        return True

    def compare(self, a: str, b: str) -> Ordering:
        if a == b:
            return Ordering.EQUAL
        if a > b:
            return Ordering.GREATER
        return Ordering.LESS


def select_comparator(shell: Shell) -> VersionComparator:
    """Pick the comparator for this run based on what the host provides."""
    if shell.which(VERCMP_TOOL) is not None:
        logger.debug("Using vercmp for version comparison")
        return VercmpComparator(shell)
    logger.debug("vercmp not found; falling back to lexical comparison")
    return LexicalComparator()


def has_ordering_hazard(version: str) -> bool:
    """Whether lexical comparison is known to mis-order this version.

    Epochs and tilde pre-release markers are the cases the fallback cannot
    approximate; multi-digit segments are covered by the run-wide warning.
    """
    return ":" in version or "~" in version
