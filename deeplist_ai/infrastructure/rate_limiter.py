"""进程内滑动窗口限流器。

每个 AIService 实例持有一个 RateLimiter，用来约束本客户端发往 OpenRouter 的请求速率。
这只是单实例的建议性限流，不会跨进程/跨实例协调。
"""

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict


class RateLimiter:
    """滑动窗口计数器。

    - can_make_request(): 先剔除窗口外的时间戳，未超限则记录本次请求并返回 True。
    - get_reset_time(): 距离最早一条记录滑出窗口还剩多少秒。

    检查与记录在同一把锁内完成，多线程宿主下也保持原子性。
    """

    def __init__(
        self,
        max_requests: int = 60,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._timestamps: Deque[float] = deque()
        self._lock = threading.Lock()

    def _prune(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self.window_seconds:
            self._timestamps.popleft()

    def can_make_request(self) -> bool:
        with self._lock:
            now = self._clock()
            self._prune(now)
            if len(self._timestamps) >= self.max_requests:
                return False
            self._timestamps.append(now)
            return True

    def get_reset_time(self) -> float:
        with self._lock:
            if not self._timestamps:
                return 0.0
            return max(0.0, self._timestamps[0] + self.window_seconds - self._clock())

    def get_status(self) -> Dict[str, float]:
        """返回当前窗口内的请求数与重置时间，用于日志/调试。"""

        with self._lock:
            self._prune(self._clock())
            count = len(self._timestamps)
        return {
            "count": count,
            "max_requests": self.max_requests,
            "window_seconds": self.window_seconds,
            "reset_in": self.get_reset_time(),
        }

    def reset(self) -> None:
        with self._lock:
            self._timestamps.clear()
