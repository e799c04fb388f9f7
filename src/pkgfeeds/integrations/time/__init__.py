from pkgfeeds.integrations.time.abc import Time
from pkgfeeds.integrations.time.real import RealTime

__all__ = ["RealTime", "Time"]
