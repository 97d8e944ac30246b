"""MIDI channel events and per-channel note bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator

CHANNEL_COUNT = 16
NOTE_COUNT = 128


class MidiEventKind(IntEnum):
    """Channel message kinds, valued by their MIDI status nibble."""

    NOTE_OFF = 0x8
    NOTE_ON = 0x9
    KEY_AFTERTOUCH = 0xA
    CONTROL_CHANGE = 0xB
    PROGRAM_CHANGE = 0xC
    CHANNEL_AFTERTOUCH = 0xD
    PITCH_WHEEL = 0xE


@dataclass(frozen=True)
class MidiEvent:
    """A MIDI channel event.

    ``num`` is the first data byte (note, controller or program number) and
    ``value`` the second (velocity, controller value, ...).
    """

    kind: MidiEventKind
    channel: int = 0
    num: int = 0
    value: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", MidiEventKind(self.kind))
        if not 0 <= self.channel < CHANNEL_COUNT:
            raise ValueError(f"MIDI channel out of range: {self.channel}")
        if self.num < 0 or self.value < 0:
            raise ValueError("MIDI data values must not be negative")

    @property
    def is_note_on(self) -> bool:
        return self.kind is MidiEventKind.NOTE_ON and self.value > 0

    @property
    def is_note_off(self) -> bool:
        return self.kind is MidiEventKind.NOTE_OFF or (
            self.kind is MidiEventKind.NOTE_ON and self.value == 0
        )


def _check_note(channel: int, note: int) -> None:
    if not 0 <= channel < CHANNEL_COUNT:
        raise ValueError(f"MIDI channel out of range: {channel}")
    if not 0 <= note < NOTE_COUNT:
        raise ValueError(f"MIDI note out of range: {note}")


class NoteState:
    """Tracks which notes are currently sounding on each channel."""

    def __init__(self) -> None:
        self._on: set[tuple[int, int]] = set()

    def update(self, event: MidiEvent) -> None:
        """Record a sent event: note-ons become pending, note-offs clear them."""
        if event.is_note_on:
            _check_note(event.channel, event.num)
            self._on.add((event.channel, event.num))
        elif event.is_note_off:
            self._on.discard((event.channel, event.num))

    def is_pending(self, channel: int, note: int) -> bool:
        _check_note(channel, note)
        return (channel, note) in self._on

    def unset(self, channel: int, note: int) -> None:
        _check_note(channel, note)
        self._on.discard((channel, note))

    def pending(self) -> list[tuple[int, int]]:
        """Sounding notes as ``(channel, note)`` pairs, channel first, ascending."""
        return sorted(self._on)

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(self.pending())

    def __len__(self) -> int:
        return len(self._on)