"""
Cooperative cancellation for bot tasks.
Tasks poll the token at their checkpoints; nothing is interrupted mid-call.
"""

from __future__ import annotations
import asyncio
from typing import Optional


class OperationCancelledError(Exception):
    """Raised at a checkpoint once the token has been cancelled."""


class CancellationToken:

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self):
        self._event.set()

    def raise_if_cancelled(self):
        if self._event.is_set():
            raise OperationCancelledError()

    async def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Sleep until cancelled or until timeout elapses.
        Returns True if the token was cancelled.
        """
        try:
            await asyncio.wait_for(self._event.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True
