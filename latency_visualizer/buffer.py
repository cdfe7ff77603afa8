import threading

import numpy as np

from .constants import DEFAULT_CAPACITY
from .ping import as_latency


class SampleBuffer:
    """Fixed-capacity ring of latency samples, oldest evicted first.

    Gaps are stored as NaN. One writer (the owning monitor) pushes while any
    number of readers take snapshots; both go through the same lock, so a
    reader sees the buffer either before or after a push, never halfway.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if not isinstance(capacity, (int, np.integer)) or capacity <= 0:
            raise ValueError(f"capacity must be a positive integer, got {capacity!r}")
        self._capacity = int(capacity)
        self._data = np.full(self._capacity, np.nan)
        self._start = 0
        self._size = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self):
        with self._lock:
            return self._size

    def push(self, sample) -> None:
        value = as_latency(sample)
        if value is None:
            value = np.nan
        with self._lock:
            if self._size < self._capacity:
                self._data[(self._start + self._size) % self._capacity] = value
                self._size += 1
            else:
                # Full: overwrite the oldest slot and advance the head.
                self._data[self._start] = value
                self._start = (self._start + 1) % self._capacity
            assert self._size <= self._capacity

    def snapshot(self) -> np.ndarray:
        """Ordered, read-only copy of the samples (oldest first)."""
        with self._lock:
            end = self._start + self._size
            if end <= self._capacity:
                out = self._data[self._start:end].copy()
            else:
                out = np.concatenate(
                    (self._data[self._start:], self._data[: end - self._capacity])
                )
        out.flags.writeable = False
        return out

    def clear(self) -> None:
        with self._lock:
            self._data.fill(np.nan)
            self._start = 0
            self._size = 0
