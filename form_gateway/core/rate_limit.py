"""Fixed-Window Rate Limiting pro Client-Adresse.

Zählt Anfragen je Client in einem festen Zeitfenster (Standard: 24h) und
lehnt ab, sobald das Tageslimit überschritten ist. Die Zähler liegen nur
im Prozessspeicher (limits.MemoryStorage) und gehen beim Neustart verloren.
"""
import logging
import math
import threading
import time
from dataclasses import dataclass, replace
from typing import Dict, Optional

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage, Storage
from limits.strategies import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

# Namespace für die Schlüssel im Storage.
NAMESPACE = "form-gateway"


@dataclass(frozen=True)
class RateLimitStatus:
    """Ergebnis einer Limit-Prüfung für einen Client."""

    allowed: bool
    limit: int
    remaining: int
    reset_at: float  # Epoch-Sekunden

    def seconds_until_reset(self, now: Optional[float] = None) -> int:
        now = time.time() if now is None else now
        return max(0, math.ceil(self.reset_at - now))

    def headers(self, now: Optional[float] = None) -> Dict[str, str]:
        """Standard-Header (RateLimit-*), keine Legacy X-RateLimit-* Header."""
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.seconds_until_reset(now)),
        }


def default_message(max_requests: int, window_seconds: int) -> str:
    if window_seconds % 3600 == 0:
        span = f"{window_seconds // 3600} hours"
    else:
        span = f"{window_seconds} seconds"
    return f"You have exceeded the request limit of {max_requests} requests per {span}."


class RateLimiter:
    """Kapselt Storage und Strategie. Wird einmal beim Start gebaut und in
    app.state abgelegt; Tests bauen sich eigene Instanzen."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: int = 24 * 3600,
        message: Optional[str] = None,
        storage: Optional[Storage] = None,
    ) -> None:
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.message = message or default_message(max_requests, window_seconds)
        self.storage = storage if storage is not None else MemoryStorage()
        self._strategy = FixedWindowRateLimiter(self.storage)
        self._item = RateLimitItemPerSecond(max_requests, window_seconds, namespace=NAMESPACE)
        # Zählen und Fensterstatus lesen als eine Einheit.
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "RateLimiter":
        return cls(
            settings.api_daily_limit,
            window_seconds=settings.rate_limit_window_seconds,
            message=settings.rate_limit_message,
        )

    def hit(self, client_id: str) -> RateLimitStatus:
        """Zählt eine Anfrage und meldet, ob sie noch im Limit liegt."""
        with self._lock:
            allowed = self._strategy.hit(self._item, client_id)
            status = replace(self.peek(client_id), allowed=allowed)
        if not allowed:
            logger.warning(
                f"Rate limit exceeded for client {client_id} "
                f"({self.max_requests}/{self.window_seconds}s, reset in {status.seconds_until_reset()}s)"
            )
        return status

    def peek(self, client_id: str) -> RateLimitStatus:
        """Fensterstatus ohne zu zählen."""
        reset_at, remaining = self._strategy.get_window_stats(self._item, client_id)
        return RateLimitStatus(
            allowed=remaining > 0,
            limit=self.max_requests,
            remaining=remaining,
            reset_at=reset_at,
        )

    def reset(self) -> None:
        self.storage.reset()
