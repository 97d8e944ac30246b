"""Tracks of timed MIDI events and their playback state inside a loop."""

from __future__ import annotations

import bisect
import threading
from dataclasses import dataclass, field
from typing import Iterator, Optional, Protocol

from .events import MidiEvent, MidiEventKind, NoteState
from .output import Output

DEFAULT_PPQ = 192
DEFAULT_LOOP_LEN = DEFAULT_PPQ * 4


class _RunningEngine(Protocol):
    def is_running(self) -> bool: ...


@dataclass(eq=False)
class SeqEvent:
    """One event of a track; ``deleted`` events are kept until the trash is emptied."""

    event: MidiEvent
    deleted: bool = False


@dataclass(eq=False)
class TickEvent:
    """All events of a track that fall on one tick."""

    tick: int
    events: list[SeqEvent] = field(default_factory=list)
    deleted: bool = False

    def live_events(self) -> list[SeqEvent]:
        return [seqev for seqev in self.events if not seqev.deleted]


@dataclass(eq=False)
class Track:
    """A named list of tick events kept in ascending tick order."""

    name: str = ""
    tick_events: list[TickEvent] = field(default_factory=list)

    def add_event(self, tick: int, event: MidiEvent) -> SeqEvent:
        """Insert ``event`` at ``tick`` after any events already there."""
        if tick < 0:
            raise ValueError(f"tick must not be negative: {tick}")
        ticks = [tickev.tick for tickev in self.tick_events]
        pos = bisect.bisect_left(ticks, tick)
        if pos < len(ticks) and ticks[pos] == tick:
            tickev = self.tick_events[pos]
            tickev.deleted = False
        else:
            tickev = TickEvent(tick)
            self.tick_events.insert(pos, tickev)
        seqev = SeqEvent(event)
        tickev.events.append(seqev)
        return seqev

    def max_tick(self) -> int:
        """Return the last tick holding an event, or 0 for an empty track."""
        return max(
            (tickev.tick for tickev in self.tick_events if not tickev.deleted),
            default=0,
        )

    def copy(self) -> Track:
        """Return an independent copy holding only the events not deleted."""
        clone = Track(self.name)
        for tickev in self.tick_events:
            if tickev.deleted:
                continue
            live = [SeqEvent(seqev.event) for seqev in tickev.live_events()]
            if live:
                clone.tick_events.append(TickEvent(tickev.tick, live))
        return clone

    def __iter__(self) -> Iterator[tuple[int, MidiEvent]]:
        for tickev in self.tick_events:
            if tickev.deleted:
                continue
            for seqev in tickev.live_events():
                yield tickev.tick, seqev.event


class TrackContext:
    """A track played in a loop on an output, with its mute and sync state."""

    def __init__(
        self,
        track: Track,
        output: Optional[Output] = None,
        loop_start: int = 0,
        loop_len: int = DEFAULT_LOOP_LEN,
        engine: Optional[_RunningEngine] = None,
    ) -> None:
        self.track = track
        self.output = output
        self.loop_start = loop_start
        self.loop_len = loop_len
        self.engine = engine
        self.need_sync = True
        self.mute = False
        self.deleted = False
        self.play_pending_notes = False
        self.notes = NoteState()
        self.trash: list[tuple[TickEvent, SeqEvent]] = []
        self.lock = threading.Lock()
        self._cursor: Optional[int] = self._first_available(0, 0)

    @property
    def name(self) -> str:
        return self.track.name

    @name.setter
    def name(self, value: str) -> None:
        self.track.name = value

    @property
    def current(self) -> Optional[TickEvent]:
        """The tick event the playback cursor points at, if any."""
        if self._cursor is None or self._cursor >= len(self.track.tick_events):
            return None
        return self.track.tick_events[self._cursor]

    def _first_available(self, start: int, tick: int) -> Optional[int]:
        for index, tickev in enumerate(self.track.tick_events[start:], start):
            if not tickev.deleted and tickev.tick >= tick:
                return index
        return None

    def _advance(self) -> None:
        if self._cursor is None:
            return
        self._cursor = self._first_available(self._cursor + 1, 0)

    def _restart_loop(self) -> None:
        self.seek(self.loop_start)

    def loop_pos(self, tick: int) -> int:
        """Map an absolute tick to its position inside the loop."""
        if self.loop_len <= 0:
            raise ValueError(f"loop length must be positive: {self.loop_len}")
        tick %= self.loop_len
        while tick < self.loop_start:
            tick += self.loop_len
        return tick

    def seek(self, tick: int) -> None:
        """Point the cursor at the first live tick event at or after ``tick``."""
        self._cursor = self._first_available(0, tick)

    def play(self, tick: int) -> None:
        """Play whatever falls on ``tick`` and move the cursor along the loop."""
        if self.output is None:
            return
        last_pulse = self.loop_start + self.loop_len - 1
        tick = self.loop_pos(tick)

        if self.need_sync:
            self.seek(tick)
            self.need_sync = False

        if tick == last_pulse or self.play_pending_notes:
            self.output.flush_pending_notes(self.notes)
            self.play_pending_notes = False

        tickev = self.current
        if tickev is None:
            self._restart_loop()
            return

        if tickev.tick == tick:
            if not self.mute:
                self.output.send_events(
                    [seqev.event for seqev in tickev.live_events()], self.notes
                )
            self._advance()

        if self.current is None or tickev.tick >= last_pulse:
            self._restart_loop()

    def mute_now(self) -> None:
        """Mute the track; sounding notes are cut on the next tick while running."""
        self.mute = True
        if (
            self.output is not None
            and self.engine is not None
            and self.engine.is_running()
        ):
            self.play_pending_notes = True

    def toggle_mute(self) -> None:
        if self.mute:
            self.mute = False
        else:
            self.mute_now()

    def discard_event(self, tick: int, index: int) -> SeqEvent:
        """Mark the ``index``-th live event at ``tick`` as deleted and trash it.

        A discarded note-off is still sent so that no note is left hanging.
        """
        tickev = next(
            (
                candidate
                for candidate in self.track.tick_events
                if candidate.tick == tick and not candidate.deleted
            ),
            None,
        )
        if tickev is None:
            raise KeyError(f"no event at tick {tick}")
        live = tickev.live_events()
        if not 0 <= index < len(live):
            raise IndexError(f"no event {index} at tick {tick}")
        seqev = live[index]
        if len(live) == 1:
            tickev.deleted = True
        seqev.deleted = True
        if self.output is not None and seqev.event.kind is MidiEventKind.NOTE_OFF:
            self.output.add_request(seqev.event)
        self.trash.append((tickev, seqev))
        self.need_sync = True
        return seqev

    def empty_trash(self) -> int:
        """Drop trashed events for good and return how many were dropped.

        Nothing is done when another thread holds the track lock.
        """
        if not self.trash:
            return 0
        if not self.lock.acquire(blocking=False):
            return 0
        try:
            count = len(self.trash)
            for tickev, seqev in self.trash:
                tickev.events = [ev for ev in tickev.events if ev is not seqev]
                if not tickev.events:
                    self.track.tick_events = [
                        other for other in self.track.tick_events if other is not tickev
                    ]
            self.trash.clear()
            self.need_sync = True
            return count
        finally:
            self.lock.release()