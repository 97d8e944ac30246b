"""MIDI outputs with a queue of requests played from the engine thread."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Iterable

from .events import MidiEvent, MidiEventKind, NoteState

Sink = Callable[[MidiEvent], bool]


@dataclass
class MidiRequest:
    """A slot in an output's request pool."""

    event: MidiEvent
    used: bool = False


class Output:
    """A named MIDI output writing through ``sink``.

    ``sink`` receives each event and returns True when it was written.
    """

    def __init__(self, name: str, sink: Sink) -> None:
        self.name = name
        self._sink = sink
        self._requests: list[MidiRequest] = []
        self._lock = threading.Lock()

    def send(self, event: MidiEvent) -> bool:
        """Write an event immediately; meant for the engine thread."""
        return bool(self._sink(event))

    def _unused_request(self, event: MidiEvent) -> MidiRequest:
        # The earliest slot of the trailing run of unused slots keeps FIFO order.
        found = None
        for request in reversed(self._requests):
            if request.used:
                break
            found = request
        if found is None:
            found = MidiRequest(event)
            self._requests.append(found)
        return found

    def add_request(self, event: MidiEvent) -> None:
        """Queue an event to be written on the next :meth:`play_requests`."""
        with self._lock:
            request = self._unused_request(event)
            request.event = event
            request.used = True

    def play_requests(self) -> int:
        """Write every queued event in order and return how many were played."""
        with self._lock:
            queued = [request for request in self._requests if request.used]
            for request in queued:
                request.used = False
            events = [request.event for request in queued]
        for event in events:
            self.send(event)
        return len(events)

    def send_events(self, events: Iterable[MidiEvent], note_state: NoteState) -> None:
        """Write events, recording successfully written notes in ``note_state``."""
        for event in events:
            if self.send(event):
                note_state.update(event)

    def flush_pending_notes(self, note_state: NoteState) -> None:
        """Send a note-off for every sounding note and clear it from ``note_state``."""
        for channel, note in note_state.pending():
            self.send(MidiEvent(MidiEventKind.NOTE_OFF, channel, note, 0))
            note_state.unset(channel, note)