"""Retry policy for failed exchanges."""

from dataclasses import dataclass
from typing import Tuple, Type

from ...const import DEFAULT_RETRY_COUNT, DEFAULT_RETRY_DELAY
from ...domain.exceptions import FrameError, ResponseTimeoutError


@dataclass(frozen=True)
class RetryPolicy:
    """How often a failed exchange is re-issued.

    Only timeouts and frame-level failures (bad CRC, malformed frame,
    device exception) are retried. Connection and parameter errors
    always propagate on the first occurrence.

    Attributes:
        count: Extra attempts after the first one (0 disables retry)
        delay: Pause in seconds before each retry

    Example:
        >>> policy = RetryPolicy(count=2)
        >>> policy.should_retry(ResponseTimeoutError(), attempt=1)
        True
        >>> policy.should_retry(ResponseTimeoutError(), attempt=3)
        False
    """

    count: int = DEFAULT_RETRY_COUNT
    delay: float = DEFAULT_RETRY_DELAY
    retry_on: Tuple[Type[BaseException], ...] = (ResponseTimeoutError, FrameError)

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"Retry count must be >= 0, got {self.count}")
        if self.delay < 0:
            raise ValueError(f"Retry delay must be >= 0, got {self.delay}")

    @property
    def max_attempts(self) -> int:
        return self.count + 1

    def should_retry(self, error: BaseException, attempt: int) -> bool:
        """Whether ``error`` on attempt number ``attempt`` (1-based) warrants another try."""
        return attempt < self.max_attempts and isinstance(error, self.retry_on)
