
from __future__ import annotations
import logging
import time
from typing import Callable, Dict

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0


class FrameScheduler:
    """
    One-shot per-frame callbacks, driven by the application loop.

    A callback requested while a tick is running is queued for the next tick,
    so a self-rescheduling animation runs exactly once per frame.
    """

    def __init__(self, clock: Callable[[], float] = monotonic_ms):
        self._clock = clock
        self._next_handle = 1
        self._pending: Dict[int, FrameCallback] = {}

    def now(self) -> float:
        return self._clock()

    def request(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int | None) -> None:
        if handle is not None:
            self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def tick(self, now: float | None = None) -> int:
        """Run every callback queued before this call. Returns how many ran."""
        if now is None:
            now = self._clock()
        batch = self._pending
        self._pending = {}
        ran = 0
        for handle, callback in batch.items():
            try:
                callback(now)
            except Exception:
                logger.exception("Frame callback %d failed and was dropped", handle)
            ran += 1
        return ran
