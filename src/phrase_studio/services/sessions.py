"""Session token store backing password-derived premium access."""

from __future__ import annotations

import logging
import secrets
from threading import Lock
from typing import Final

logger = logging.getLogger(__name__)

TOKEN_BYTES: Final[int] = 32
DEFAULT_CAPACITY: Final[int] = 10_000


class SessionTokenStore:
    """Set of active opaque session tokens.

    Tokens never expire on their own. They leave the store when invalidated
    one at a time or when the store grows past ``capacity``, at which point
    the oldest-issued half is evicted and those users must log in again.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 2:
            raise ValueError("Token capacity must be at least 2")
        self.capacity = capacity
        # dict keeps insertion order, which gives oldest-first eviction
        self._tokens: dict[str, None] = {}
        self._lock = Lock()

    def issue(self) -> str:
        """Create, store and return a new 256-bit hex token."""
        token = secrets.token_hex(TOKEN_BYTES)
        with self._lock:
            self._tokens[token] = None
        self.capacity_guard()
        return token

    def is_valid(self, token: str | None) -> bool:
        if not token:
            return False
        with self._lock:
            return token in self._tokens

    def invalidate(self, token: str | None) -> bool:
        """Remove ``token``; return True if it was active."""
        if not token:
            return False
        with self._lock:
            if token not in self._tokens:
                return False
            del self._tokens[token]
        return True

    def capacity_guard(self) -> int:
        """Evict the oldest half of the tokens once the ceiling is exceeded.

        Returns:
            Number of tokens evicted (0 when under capacity).
        """
        with self._lock:
            size = len(self._tokens)
            if size <= self.capacity:
                return 0
            evict = size // 2
            for token in list(self._tokens)[:evict]:
                del self._tokens[token]
        logger.warning(
            "Session store exceeded %d tokens; evicted %d oldest sessions",
            self.capacity,
            evict,
        )
        return evict

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
