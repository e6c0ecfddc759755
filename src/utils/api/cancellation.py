# src/utils/api/cancellation.py
# Created: 2026-10-19 09:12:40
# Author: Genterr

from typing import Iterator, Optional, Set
from contextlib import contextmanager
import asyncio

from src.core.exceptions import RequestCancelledError

class CancellationToken:
    """
    Caller-owned signal for abandoning in-flight requests.

    Cancelling the token cancels every task currently bound to it; the
    bound operation then fails with RequestCancelledError instead of
    asyncio.CancelledError. No extra tasks are created.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._tasks: Set[asyncio.Task] = set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Trigger cancellation; safe to call more than once"""
        if self._cancelled:
            return
        self._cancelled = True
        for task in list(self._tasks):
            task.cancel()

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RequestCancelledError("Request cancelled")

    @contextmanager
    def bind(self) -> Iterator[None]:
        """Bind the running task to this token for the duration of the block"""
        self.raise_if_cancelled()
        task: Optional[asyncio.Task] = asyncio.current_task()
        if task is None:
            yield
            return

        self._tasks.add(task)
        try:
            yield
        except asyncio.CancelledError:
            if not self._cancelled:
                raise
            task.uncancel()
            raise RequestCancelledError("Request cancelled") from None
        finally:
            self._tasks.discard(task)
