"""
有限次数 + 固定间隔的重试策略。

    policy = RetryPolicy(max_attempts=3, delay=5, is_retryable=is_retryable_analysis_error)
    result = policy.run(lambda: call_upstream())

sleep 可注入，测试里传一个记录调用的函数即可，不必真的等待。
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RetriesExhausted(Exception):
    """所有尝试都以可重试错误告终。last_error 是最后一次的异常。"""

    def __init__(self, attempts: int, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f'failed after {attempts} attempts: {last_error}')


@dataclass
class RetryPolicy:
    max_attempts: int
    delay: float
    is_retryable: Callable[[BaseException], bool]
    sleep: Callable[[float], None] = time.sleep

    def run(self, fn: Callable[[], T]) -> T:
        last_error = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return fn()
            except Exception as exc:
                if not self.is_retryable(exc):
                    raise
                last_error = exc
                if attempt < self.max_attempts:
                    logger.warning(
                        "attempt %d/%d failed (%s), retrying in %ss",
                        attempt, self.max_attempts, exc, self.delay,
                    )
                    self.sleep(self.delay)

        logger.error("giving up after %d attempts: %s", self.max_attempts, last_error)
        raise RetriesExhausted(self.max_attempts, last_error) from last_error
