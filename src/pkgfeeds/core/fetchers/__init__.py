from pkgfeeds.core.fetchers.dispatch import probe_upstream
from pkgfeeds.core.fetchers.types import FetchContext, ProbeResult

__all__ = ["FetchContext", "ProbeResult", "probe_upstream"]
