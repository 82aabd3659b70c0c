"""
Fan-out Join
============

Dispatch independent branches concurrently and collect every outcome.

A failing branch never cancels or blocks its siblings. Successes are listed
in completion order so slow branches cannot hold back finished ones.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, Hashable, List, Mapping, Tuple, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


@dataclass
class BranchFailure(Generic[K]):
    key: K
    error: Exception

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass
class FanOutResult(Generic[K, T]):
    """Successes as (key, value) pairs in completion order, plus failures."""

    successes: List[Tuple[K, T]] = field(default_factory=list)
    failures: List[BranchFailure] = field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def values(self) -> List[T]:
        return [value for _, value in self.successes]


async def fan_out(
    branches: Mapping[K, Callable[[], Awaitable[T]]],
) -> FanOutResult:
    """
    Run every branch concurrently and wait for all of them.

    Args:
        branches: Branch key -> zero-argument callable returning an awaitable

    Returns:
        FanOutResult; never raises because of a branch failure
    """

    async def settle(key, action):
        try:
            return key, await action(), None
        except Exception as e:
            return key, None, e

    result = FanOutResult()
    if not branches:
        return result

    tasks = [asyncio.ensure_future(settle(key, action)) for key, action in branches.items()]
    for next_done in asyncio.as_completed(tasks):
        key, value, error = await next_done
        if error is None:
            result.successes.append((key, value))
        else:
            logger.warning(f"Branch {key!r} failed: {error}")
            result.failures.append(BranchFailure(key=key, error=error))

    logger.info(
        f"Fan-out finished: {len(result.successes)} succeeded, {result.failure_count} failed"
    )
    return result
