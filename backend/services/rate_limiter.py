"""
Fixed-window request limiter keyed by client address.

Process-local: each server process counts on its own. A deployment running
several workers needs a shared store (Redis or similar) instead.
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from config import RATE_LIMIT_WINDOW_SECONDS, RATE_LIMIT_MAX_REQUESTS

logger = logging.getLogger(__name__)


@dataclass
class RateLimitRecord:
    count: int
    reset_time: float


@dataclass
class RateLimitDecision:
    allowed: bool
    count: int
    reset_time: float
    retry_after: Optional[int] = None


def client_key(forwarded_for: Optional[str], peer_host: Optional[str]) -> str:
    """First X-Forwarded-For entry, else the direct peer, else 'unknown'"""
    ip = None
    if forwarded_for:
        ip = forwarded_for.split(",")[0].strip() or None
    if not ip:
        ip = peer_host or "unknown"
    return f"rate_limit:{ip}"


class RateLimiter:
    def __init__(
        self,
        window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        clock: Callable[[], float] = time.time
    ):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._clock = clock
        self._records: Dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitDecision:
        """Count one request for `key` and decide whether it may proceed"""
        with self._lock:
            now = self._clock()
            record = self._records.get(key)

            if record is None or now > record.reset_time:
                record = RateLimitRecord(count=1, reset_time=now + self.window_seconds)
                self._records[key] = record
                return RateLimitDecision(True, record.count, record.reset_time)

            if record.count >= self.max_requests:
                return RateLimitDecision(False, record.count, record.reset_time, retry_after=self.window_seconds)

            record.count += 1
            return RateLimitDecision(True, record.count, record.reset_time)

    def sweep(self) -> int:
        """Drop records whose window has ended; returns how many were removed"""
        with self._lock:
            now = self._clock()
            expired = [key for key, record in self._records.items() if now > record.reset_time]
            for key in expired:
                del self._records[key]
        if expired:
            logger.info(f"Rate limiter sweep removed {len(expired)} expired records")
        return len(expired)

    def reset(self):
        with self._lock:
            self._records.clear()

    def __len__(self):
        return len(self._records)
