"""
Fixed-window rate limiter theo IP client.

Mỗi instance giữ map counter riêng; có thể truyền `store` (dict-like) khác để
dùng chung giữa nhiều process. Entry hết hạn chỉ bị xoá khi gọi `sweep()`.
"""
import math
import threading
import time
from dataclasses import dataclass


@dataclass
class RateLimitEntry:
    count: int
    reset_time: float


@dataclass
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_time: float
    limit: int


class RateLimiter:
    def __init__(self, max_requests=60, window_seconds=60, clock=time.time, store=None):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self.store = store if store is not None else {}
        self._lock = threading.Lock()

    def check(self, key):
        now = self.clock()
        with self._lock:
            current = self.store.get(key)

            if current is None or now > current.reset_time:
                reset_time = now + self.window_seconds
                self.store[key] = RateLimitEntry(count=1, reset_time=reset_time)
                return RateLimitResult(True, self.max_requests - 1, reset_time, self.max_requests)

            if current.count >= self.max_requests:
                return RateLimitResult(False, 0, current.reset_time, self.max_requests)

            current.count += 1
            self.store[key] = current
            return RateLimitResult(
                True,
                max(0, self.max_requests - current.count),
                current.reset_time,
                self.max_requests,
            )

    def sweep(self):
        """Xoá các entry đã hết window, trả về số entry bị xoá."""
        now = self.clock()
        with self._lock:
            expired = [key for key, entry in self.store.items() if now > entry.reset_time]
            for key in expired:
                del self.store[key]
        return len(expired)

    def headers(self, result):
        return rate_limit_headers(result, now=self.clock())


def client_ip(request):
    cf_ip = request.headers.get("cf-connecting-ip")
    if cf_ip:
        return cf_ip.strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return "unknown"


def rate_limit_headers(result, now=None):
    if now is None:
        now = time.time()
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(math.ceil(result.reset_time)),
        "X-RateLimit-Reset-After": str(max(0, math.ceil(result.reset_time - now))),
    }
