"""In-memory usage ledgers for the free and premium quota classes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from threading import Lock

logger = logging.getLogger(__name__)


class QuotaClass(str, Enum):
    """Usage class a ledger meters."""

    FREE = "free"        # anonymous, keyed by IP, lifetime epoch
    PREMIUM = "premium"  # authenticated, keyed by token and calendar day


@dataclass(frozen=True)
class QuotaRecord:
    """Snapshot of consumption for one ledger key."""

    used: int
    limit: int
    quota_class: QuotaClass

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)

    @property
    def exceeded(self) -> bool:
        return self.used >= self.limit

    def as_dict(self) -> dict[str, object]:
        """Return the wire representation used by the usage endpoints."""
        return {
            "current": self.used,
            "limit": self.limit,
            "remaining": self.remaining,
            "exceeded": self.exceeded,
            "type": self.quota_class.value,
        }


def free_key(ip: str) -> str:
    """Ledger key for an anonymous caller; no date component."""
    return f"free:{ip}"


def premium_key(token: str, day: date) -> str:
    """Ledger key for an authenticated caller on a given calendar day."""
    return f"premium:{token}:{day.isoformat()}"


class QuotaLedger:
    """Counter map for a single quota class.

    ``check`` never mutates. ``increment`` charges exactly one unit per call,
    so callers invoke it once per fulfilled generation and only after the
    generation succeeded.
    """

    def __init__(self, quota_class: QuotaClass, limit: int) -> None:
        if limit <= 0:
            raise ValueError("Quota limit must be positive")
        self.quota_class = quota_class
        self.limit = limit
        self._counts: dict[str, int] = {}
        self._lock = Lock()

    def check(self, key: str) -> QuotaRecord:
        """Return the current record for ``key``; unseen keys report zero usage."""
        with self._lock:
            used = self._counts.get(key, 0)
        return QuotaRecord(used=used, limit=self.limit, quota_class=self.quota_class)

    def increment(self, key: str) -> None:
        """Charge one unit of consumption to ``key``."""
        with self._lock:
            self._counts[key] = self._counts.get(key, 0) + 1

    def clear(self) -> None:
        """Drop every counter, starting a new epoch for all keys."""
        with self._lock:
            dropped = len(self._counts)
            self._counts.clear()
        logger.info("Cleared %s usage ledger (%d keys)", self.quota_class.value, dropped)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)
