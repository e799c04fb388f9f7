"""Clock abstraction for testing.

Backups written in apply mode are named after the current time; routing the
clock through this ABC keeps those names deterministic in tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class Time(ABC):
    """Abstract time operations for dependency injection."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current local time."""
        ...
