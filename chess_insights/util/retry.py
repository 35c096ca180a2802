# chess_insights/util/retry.py
import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Tuple, Type

from chess_insights.config import FETCH_BACKOFF_SECONDS, FETCH_MAX_ATTEMPTS
from chess_insights.errors import FetchFailed, NotFound, TransientError
from chess_insights.util.log import get_logger

log = get_logger("chess_insights.retry", "RETRY")


@dataclass
class RetryPolicy:
  """
  Bounded retry with linear backoff:
    - attempt i (1-based) that fails with a retryable error sleeps base_delay * i,
    - fatal errors propagate immediately,
    - exhausting max_attempts raises FetchFailed naming the URL.
  """
  max_attempts: int = FETCH_MAX_ATTEMPTS
  base_delay: float = FETCH_BACKOFF_SECONDS
  retryable: Tuple[Type[BaseException], ...] = (TransientError,)
  fatal: Tuple[Type[BaseException], ...] = (NotFound,)
  sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep

  def backoff(self, attempt: int) -> float:
    return self.base_delay * attempt

  async def run(self, fn: Callable[[], Awaitable[Any]], url: str) -> Any:
    attempts = max(1, self.max_attempts)
    last: BaseException | None = None
    for attempt in range(1, attempts + 1):
      try:
        return await fn()
      except self.fatal:
        raise
      except self.retryable as e:
        last = e
        if attempt < attempts:
          delay = self.backoff(attempt)
          log.warning("attempt %d/%d for %s failed (%s); retrying in %.2fs", attempt, attempts, url, e, delay)
          await self.sleep(delay)
    log.error("giving up on %s after %d attempts", url, attempts)
    raise FetchFailed(url) from last
