"""
API Middleware
==============
Request throttling for the annotate endpoint (every call may cost a model
request) and API-key protection for routes that change the dictionary.
"""
import hmac
import time
import hashlib
import threading
from collections import defaultdict, deque
from functools import wraps
from typing import Callable, Deque, Dict, NamedTuple, Optional
from flask import request, jsonify, g

from comment_translator.config import config
from comment_translator.utils.logging import get_logger

WINDOW_SECONDS = 60


class RateLimitInfo(NamedTuple):
    allowed: bool
    limit: int
    remaining: int
    reset: int


class RateLimiter:
    """Sliding one-minute window per client."""

    def __init__(self, requests_per_minute: int = 60):
        self.requests_per_minute = requests_per_minute
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def check(self, client: str, now: float = None) -> RateLimitInfo:
        """Record a request from ``client`` if it fits in the window."""
        now = time.time() if now is None else now
        with self._lock:
            hits = self._hits[client]
            while hits and hits[0] <= now - WINDOW_SECONDS:
                hits.popleft()

            if len(hits) >= self.requests_per_minute:
                reset = int(hits[0] + WINDOW_SECONDS - now) + 1
                return RateLimitInfo(False, self.requests_per_minute, 0, reset)

            hits.append(now)
            return RateLimitInfo(True, self.requests_per_minute,
                                 self.requests_per_minute - len(hits), WINDOW_SECONDS)


def client_key() -> str:
    """Hash of the caller's address and API key."""
    forwarded = request.headers.get('X-Forwarded-For', '')
    address = forwarded.split(',')[0].strip() or request.remote_addr or 'unknown'
    raw = f"{address}:{request.headers.get('X-API-Key', '')}"
    return hashlib.sha256(raw.encode()).hexdigest()[:16]


_rate_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter(config.security.rate_limit_per_minute)
    return _rate_limiter


def rate_limit(f: Callable) -> Callable:
    """Answer 429 once the caller exceeds its per-minute budget."""
    @wraps(f)
    def decorated(*args, **kwargs):
        info = get_rate_limiter().check(client_key())
        g.rate_limit_info = info
        if not info.allowed:
            return jsonify({'error': 'Rate limit exceeded', 'retry_after': info.reset}), 429
        return f(*args, **kwargs)

    return decorated


def require_api_key(f: Callable) -> Callable:
    """Guard a route with ``X-API-Key`` when ``API_KEY`` is configured.

    Missing key -> 401, wrong key -> 403.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        expected = config.security.api_key
        if expected:
            supplied = request.headers.get('X-API-Key')
            if not supplied:
                return jsonify({'error': 'API key required'}), 401
            if not hmac.compare_digest(supplied.encode(), expected.encode()):
                get_logger().api_logger.warning(f"Rejected API key on {request.method} {request.path}")
                return jsonify({'error': 'Invalid API key'}), 403
        return f(*args, **kwargs)

    return decorated


def add_rate_limit_headers(response):
    info = g.get('rate_limit_info')
    if info is not None:
        response.headers['X-RateLimit-Limit'] = str(info.limit)
        response.headers['X-RateLimit-Remaining'] = str(info.remaining)
        response.headers['X-RateLimit-Reset'] = str(info.reset)
    return response
