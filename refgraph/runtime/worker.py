"""Sequential task execution with retry support.

Acquisitions run one at a time; a task is a zero-argument callable and
its outcome is captured in a TaskResult instead of being raised, so a
caller can keep going after a failed item.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from refgraph.errors import AcquisitionError

logger = logging.getLogger("refgraph.worker")


@dataclass
class RetryConfig:
    """Configuration for task retry behavior.

    Attributes:
        max_retries: Maximum number of retry attempts (0 = no retries).
        base_delay: Initial delay between retries in seconds.
        max_delay: Maximum delay between retries in seconds.
        exponential_base: Base for exponential backoff calculation.
        retryable_exceptions: Tuple of exception types that should trigger retry.
    """

    max_retries: int = 2
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    retryable_exceptions: tuple = (AcquisitionError, OSError, TimeoutError)

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def backoff(self, attempt: int) -> float:
        """Delay before the attempt following ``attempt`` (1-based)."""
        return min(self.base_delay * (self.exponential_base ** (attempt - 1)), self.max_delay)


# Single attempt, no backoff
NO_RETRY = RetryConfig(max_retries=0)


@dataclass
class TaskResult:
    """Task execution result.

    Attributes:
        task_id: Task identifier.
        success: Whether execution succeeded.
        result: Return value from task function.
        error: Exception if task failed.
        attempts: Number of attempts made.
        execution_time: Time taken in seconds.
    """

    task_id: str
    success: bool
    result: Any = None
    error: Optional[Exception] = None
    attempts: int = 0
    execution_time: float = 0.0


def execute_with_retry(
    task_id: str,
    func: Callable[[], Any],
    config: Optional[RetryConfig] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> TaskResult:
    """Execute a task, retrying retryable failures with exponential backoff.

    Args:
        task_id: Identifier used in log messages.
        func: Zero-argument callable to run.
        config: Retry policy, defaults to a single attempt.
        sleep: Function used to wait between attempts.

    Returns:
        TaskResult: Outcome of the last attempt.
    """
    config = config or NO_RETRY
    start_time = time.time()
    last_error: Optional[Exception] = None

    for attempt in range(1, config.max_attempts + 1):
        try:
            result = func()
            if attempt > 1:
                logger.info("Task %s succeeded on attempt %d", task_id, attempt)
            return TaskResult(
                task_id=task_id,
                success=True,
                result=result,
                attempts=attempt,
                execution_time=time.time() - start_time,
            )
        except config.retryable_exceptions as e:
            last_error = e
            if attempt < config.max_attempts:
                delay = config.backoff(attempt)
                logger.warning(
                    "Task %s failed (attempt %d/%d), retrying in %.1fs: %s",
                    task_id,
                    attempt,
                    config.max_attempts,
                    delay,
                    e,
                )
                sleep(delay)
            else:
                logger.error("Task %s failed after %d attempt(s): %s", task_id, attempt, e)

    return TaskResult(
        task_id=task_id,
        success=False,
        error=last_error,
        attempts=config.max_attempts,
        execution_time=time.time() - start_time,
    )
