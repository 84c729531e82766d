"""Track which providers are temporarily disabled after a permanent failure."""
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable

from jobtracker.log import get_logger

log = get_logger(__name__)


class AvailabilityTracker:
    """Per-provider "skip until" deadlines, in seconds from *clock*.

    State lives only as long as the tracker; nothing is persisted. Reads and
    writes are unsynchronised, so concurrent failures may each set the
    deadline and the last write wins.
    """

    def __init__(self, disable_seconds: float = 600.0, clock: Callable[[], float] = time.time) -> None:
        self.disable_seconds = disable_seconds
        self.clock = clock
        self._skip_until: dict[str, float] = {}

    def is_available(self, provider: str) -> bool:
        return self.clock() >= self._skip_until.get(provider, 0.0)

    def skip_until(self, provider: str) -> float:
        return self._skip_until.get(provider, 0.0)

    def disable(self, provider: str, seconds: float | None = None) -> float:
        until = self.clock() + (self.disable_seconds if seconds is None else seconds)
        self._skip_until[provider] = until
        log.warning(
            "Provider %s disabled until %s",
            provider,
            datetime.fromtimestamp(until, tz=timezone.utc).isoformat(timespec="seconds"),
        )
        return until

    def reset(self, provider: str | None = None) -> None:
        if provider is None:
            self._skip_until.clear()
        else:
            self._skip_until.pop(provider, None)
