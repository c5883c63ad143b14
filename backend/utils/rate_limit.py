# backend/utils/rate_limit.py
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """
    Fixed-window request counter per key (client IP, e-mail address, ...).

    A key may be hit `limit` times until its window of `interval_seconds` ends,
    then it starts over. Windows live in memory; when more than `max_keys` are
    tracked the least recently used one is forgotten.
    """

    def __init__(
        self,
        name: str,
        limit: int,
        interval_seconds: float,
        max_keys: int = 500,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.limit = limit
        self.interval_seconds = interval_seconds
        self.max_keys = max_keys
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: "OrderedDict[str, _Window]" = OrderedDict()

    def hit(self, key: str) -> bool:
        """Count one request for `key`; False when the key is over its limit."""
        with self._lock:
            now = self._clock()
            window = self._windows.get(key)
            if window is None or now >= window.reset_at:
                window = _Window(count=0, reset_at=now + self.interval_seconds)
            self._windows[key] = window
            self._windows.move_to_end(key)
            while len(self._windows) > self.max_keys:
                self._windows.popitem(last=False)

            if window.count >= self.limit:
                logger.warning(f"Rate limit '{self.name}' exceeded for {key}")
                return False
            window.count += 1
            return True


@dataclass
class AuthRateLimits:
    login: RateLimiter
    signup: RateLimiter
    password_reset: RateLimiter
    verification_resend: RateLimiter


def build_auth_rate_limits(settings) -> AuthRateLimits:
    return AuthRateLimits(
        login=RateLimiter("login", settings.LOGIN_ATTEMPTS_PER_WINDOW, settings.LOGIN_WINDOW_MINUTES * 60),
        signup=RateLimiter("signup", settings.SIGNUPS_PER_HOUR, 3600),
        password_reset=RateLimiter("password_reset", settings.PASSWORD_RESETS_PER_HOUR, 3600),
        verification_resend=RateLimiter("verification_resend", settings.VERIFICATION_RESENDS_PER_HOUR, 3600),
    )
