"""Fixed-capacity FIFO of recorded MIDI events."""

from __future__ import annotations

from collections import deque

from .events import MidiEvent

DEFAULT_CAPACITY = 400


class MidiRingBuffer:
    """Bounded FIFO of ``(tick, event)`` pairs between an input and the engine.

    A write into a full buffer is refused rather than overwriting old data.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("ring buffer capacity must be at least 1")
        self._capacity = capacity
        self._items: deque[tuple[int, MidiEvent]] = deque()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def full(self) -> bool:
        return len(self._items) >= self._capacity

    def write(self, tick: int, event: MidiEvent) -> bool:
        """Append an event; return False when the buffer is full."""
        if self.full:
            return False
        self._items.append((tick, event))
        return True

    def read(self) -> tuple[int, MidiEvent] | None:
        """Remove and return the oldest ``(tick, event)``, or None when empty."""
        if not self._items:
            return None
        return self._items.popleft()

    def __len__(self) -> int:
        return len(self._items)