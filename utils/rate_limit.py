import time
from collections import defaultdict
from typing import Callable


class RateLimiter:
    """Sliding-window limiter keyed by client identifier.

    ``limiter(identifier)`` returns True and records the request when the
    identifier is still under ``max_requests`` within the last ``window_seconds``,
    and False otherwise. Rejected requests are not recorded.
    """

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: dict[str, list[float]] = defaultdict(list)

    def __call__(self, identifier: str) -> bool:
        now = self._clock()
        window_start = now - self.window_seconds

        recent = [t for t in self._requests[identifier] if t > window_start]
        if len(recent) >= self.max_requests:
            self._requests[identifier] = recent
            return False

        recent.append(now)
        self._requests[identifier] = recent
        return True

    def reset(self, identifier: str | None = None):
        if identifier is None:
            self._requests.clear()
        else:
            self._requests.pop(identifier, None)
