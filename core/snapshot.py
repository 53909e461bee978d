
from __future__ import annotations
import dataclasses
import threading
from typing import Generic, TypeVar

T = TypeVar("T")


class LatestSnapshot(Generic[T]):
    """
    Single-slot channel holding the most recent value.

    Writers (UI handlers, fetch threads) replace the value; the render loop
    reads it at the top of every frame. Nothing is queued.
    """

    def __init__(self, initial: T):
        self._value = initial
        self._lock = threading.Lock()
        self._version = 0

    def publish(self, value: T) -> None:
        with self._lock:
            self._value = value
            self._version += 1

    def update(self, **changes) -> T:
        """Replace fields of a dataclass snapshot and publish the result."""
        with self._lock:
            self._value = dataclasses.replace(self._value, **changes)
            self._version += 1
            return self._value

    def get(self) -> T:
        with self._lock:
            return self._value

    @property
    def version(self) -> int:
        return self._version
