"""
Annotation hook

After data is set, the dashboard kicks off an annotation fetch and hands the
pending awaitable to the chart. Charts register callbacks that run once the
fetch resolves. Fetch failures and cancellation belong to the fetcher: the
callbacks are simply not run.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)

AnnotationCallback = Callable[[Any], Any]


class AnnotationHook:
    """Holds the pending annotation fetch for one chart."""

    def __init__(self):
        self._future: Optional[asyncio.Future] = None

    @property
    def pending(self) -> Optional[asyncio.Future]:
        return self._future

    def set(self, awaitable: Optional[Awaitable[Any]]) -> None:
        """Track ``awaitable`` (coroutines are scheduled on the running loop); None clears it."""
        self._future = asyncio.ensure_future(awaitable) if awaitable is not None else None

    def after(self, callback: AnnotationCallback) -> None:
        """Run ``callback(annotations)`` when the fetch resolves; no-op when nothing was set."""
        if self._future is None:
            return

        def _on_done(future: asyncio.Future) -> None:
            if future.cancelled():
                logger.debug("Annotation fetch cancelled, skipping callback")
                return
            error = future.exception()
            if error is not None:
                logger.debug("Annotation fetch failed, skipping callback", error=str(error))
                return
            callback(future.result())

        self._future.add_done_callback(_on_done)
