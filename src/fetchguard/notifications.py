"""Degrade notifications.

Observers are told when a client serves cached data instead of fresh data,
or gives up with only an error message to report. Delivery runs in
background tasks: the caller's return path never waits on an observer, and
an observer that raises only affects itself.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from fetchguard.types import Degradation

logger = logging.getLogger(__name__)

Observer = Callable[[Degradation], Awaitable[None] | None]


class DegradeNotifier:
    """Observer list for :class:`~fetchguard.types.Degradation` events."""

    def __init__(self) -> None:
        self._observers: list[Observer] = []
        self._background_tasks: set[asyncio.Task[None]] = set()

    def __len__(self) -> int:
        return len(self._observers)

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer. Returns a callable that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def emit(self, degradation: Degradation) -> None:
        """Schedule delivery to every observer and return immediately."""
        for observer in list(self._observers):
            task = asyncio.create_task(self._deliver(observer, degradation))
            self._background_tasks.add(task)
            task.add_done_callback(self._background_tasks.discard)

    async def drain(self) -> None:
        """Wait for scheduled deliveries on the running loop to finish."""
        loop = asyncio.get_running_loop()
        while True:
            pending = [t for t in self._background_tasks if t.get_loop() is loop]
            if not pending:
                return
            await asyncio.gather(*pending)

    async def _deliver(self, observer: Observer, degradation: Degradation) -> None:
        try:
            result = observer(degradation)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(
                "Degrade observer %r failed for %s", observer, degradation.address
            )


_default_notifier: DegradeNotifier | None = None


def default_notifier() -> DegradeNotifier:
    """Return the process-wide notifier shared by clients by default."""
    global _default_notifier
    if _default_notifier is None:
        _default_notifier = DegradeNotifier()
    return _default_notifier
