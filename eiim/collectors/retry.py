"""Fixed-count retry with linear backoff."""

import logging
import time
from typing import Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """
    Run a callable up to max_attempts times.

    After failed attempt N the policy sleeps base_delay * N seconds. The last
    failure is re-raised.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 5.0,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.retry_on = retry_on
        self._sleep = sleep

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * attempt

    def call(self, func: Callable[..., T], *args, label: str = "", **kwargs) -> T:
        """Call func(*args, **kwargs) with retries."""
        name = label or getattr(func, "__name__", "call")
        for attempt in range(1, self.max_attempts + 1):
            try:
                return func(*args, **kwargs)
            except self.retry_on as e:
                if attempt >= self.max_attempts:
                    logger.error("%s failed after %d attempts: %s", name, attempt, e)
                    raise
                delay = self.delay_for(attempt)
                logger.warning(
                    "%s failed (attempt %d/%d): %s. Retrying in %.1fs",
                    name, attempt, self.max_attempts, e, delay,
                )
                self._sleep(delay)
        raise AssertionError("unreachable")
