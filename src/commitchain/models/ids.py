"""Commit id and timestamp sources."""

import threading
import time


def current_time_ms() -> int:
    """Return wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class CommitIdGenerator:
    """Hands out sequential commit ids ("0", "1", "2", ...).

    Repositories that share a generator never produce the same id twice,
    unless the generator is reset while their commits are still alive.
    """

    def __init__(self, start: int = 0):
        self._lock = threading.Lock()
        self._next = start

    def next_id(self) -> str:
        """Reserve and return the next id."""
        with self._lock:
            value = self._next
            self._next += 1
        return str(value)

    def peek(self) -> int:
        """Return the value the next call to ``next_id`` will use."""
        return self._next

    def reset(self, start: int = 0) -> None:
        """Restart numbering. Meant for test setup only."""
        with self._lock:
            self._next = start

    def __repr__(self) -> str:
        return f"CommitIdGenerator(next={self._next})"


# Shared by every repository that is not given its own generator.
default_id_generator = CommitIdGenerator()
