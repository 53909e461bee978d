
from __future__ import annotations
import logging
from typing import Callable, Optional

from core.frame_scheduler import FrameScheduler

logger = logging.getLogger(__name__)


class PingAnimation:
    """
    Progress 0..100 of a signal round trip, advanced once per frame.

    start() while active is a no-op. On reaching the duration the progress is
    exactly 100, the animation goes inactive and no further frame is requested.
    stop() cancels the pending frame and resets progress to 0.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        duration_ms: float = 15000.0,
        on_complete: Optional[Callable[[], None]] = None,
    ):
        self._scheduler = scheduler
        self.duration_ms = duration_ms
        self.on_complete = on_complete
        self.active = False
        self.progress = 0.0
        self._start_ms = 0.0
        self._run_duration_ms = duration_ms
        self._handle: Optional[int] = None

    def set_duration(self, duration_ms: float) -> None:
        """Applies from the next start(); a running ping keeps its duration."""
        self.duration_ms = duration_ms

    def start(self) -> bool:
        if self.active:
            return False
        self.active = True
        self.progress = 0.0
        self._start_ms = self._scheduler.now()
        self._run_duration_ms = max(0.0, self.duration_ms)
        self._handle = self._scheduler.request(self._frame)
        logger.debug("Ping started, %.0f ms", self._run_duration_ms)
        return True

    def stop(self) -> None:
        self._scheduler.cancel(self._handle)
        self._handle = None
        self.active = False
        self.progress = 0.0

    def _frame(self, now_ms: float) -> None:
        self._handle = None
        if not self.active:
            return
        elapsed = now_ms - self._start_ms
        if elapsed >= self._run_duration_ms:
            self.progress = 100.0
            self.active = False
            if self.on_complete is not None:
                self.on_complete()
            return
        self.progress = max(self.progress, elapsed / self._run_duration_ms * 100.0)
        self._handle = self._scheduler.request(self._frame)
