"""Exception taxonomy for pkgfeeds.

Only ConfigError is fatal to a run. ProbeFailure downgrades a single package to
UNKNOWN and ApplyFailure is reported per package; neither stops the batch.
"""


class PkgfeedsError(Exception):
    """Base class for all pkgfeeds errors."""


class ConfigError(PkgfeedsError):
    """Feed document is missing, unreadable, or structurally invalid."""


class ProbeFailure(PkgfeedsError):
    """Upstream version could not be determined for one package."""


class InvalidFeedError(ProbeFailure):
    """Feed entry lacks a parameter its source type requires."""


class HttpError(ProbeFailure):
    """Transport-level failure (connection error, timeout, invalid URL)."""


class ApplyFailure(PkgfeedsError):
    """Rewriting the local descriptor or refreshing checksums failed."""
