from typing import Protocol


class RateLimiter(Protocol):
    """Answers whether one more request under `key` fits in the current window."""

    def allow(self, key: str, max_requests: int, window_seconds: int) -> bool:
        ...
