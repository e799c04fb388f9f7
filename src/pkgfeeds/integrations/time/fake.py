"""Fake Time implementation for testing."""

from datetime import datetime

from pkgfeeds.integrations.time.abc import Time


class FakeTime(Time):
    """In-memory fake returning a fixed instant.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(self, current: datetime | None = None) -> None:
        """Create FakeTime pinned to `current` (default 2024-01-15 14:30:00)."""
        self._current = current if current is not None else datetime(2024, 1, 15, 14, 30, 0)

    def now(self) -> datetime:
        return self._current
