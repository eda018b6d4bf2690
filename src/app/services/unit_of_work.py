"""Unit of Work Interface

Transaction boundary shared by the repositories of one use case execution.
``run`` executes one acquire-compute-commit unit and retries it when the
store reports lock or unique-key contention.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, TypeVar

from src.domain.errors import ConcurrencyConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UnitOfWork(ABC):
    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

    async def run(
        self,
        work: Callable[[], Awaitable[T]],
        max_attempts: int = 1,
        backoff_seconds: float = 0.0,
    ) -> T:
        """
        Execute ``work`` and commit, all-or-nothing

        Any exception rolls the transaction back. ConcurrencyConflictError is
        retried up to ``max_attempts`` times in total; the last one is
        re-raised.

        Args:
            work: Coroutine factory performing reads and writes (no commit)
            max_attempts: Total attempts for contention failures
            backoff_seconds: Linear back-off unit between attempts

        Returns:
            Whatever ``work`` returned
        """
        attempt = 1
        while True:
            try:
                value = await work()
                await self.commit()
                return value
            except ConcurrencyConflictError as e:
                await self.rollback()
                if attempt >= max_attempts:
                    raise
                logger.warning(
                    f"Concurrency conflict (attempt {attempt}/{max_attempts}): {e.message}"
                )
                if backoff_seconds:
                    await asyncio.sleep(backoff_seconds * attempt)
                attempt += 1
            except Exception:
                await self.rollback()
                raise
