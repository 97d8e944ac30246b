"""Key and MIDI bindings that toggle track mutes and select the recorded track."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, Optional, Union

from .events import MidiEvent, MidiEventKind


class BindingWait(Enum):
    """What the remote MIDI input is waiting for to capture a new binding."""

    NONE = 0
    NOTE = 1
    PROGRAM = 2
    CONTROL = 3
    ENABLE = 4


@dataclass(eq=False)
class RecordState:
    """Whether recording is on, on which track, and whether that changed."""

    enabled: bool = False
    track: Any = None
    changed: bool = False

    def select(self, track: Any) -> None:
        """Toggle recording onto ``track``: the same track again switches it off."""
        if self.enabled:
            if self.track is track:
                self.enabled = False
            else:
                self.track = track
        else:
            self.enabled = True
            self.track = track
        self.changed = True


def _index_of(tracks: list, track: Any) -> Optional[int]:
    return next((i for i, item in enumerate(tracks) if item is track), None)


class BindingTable:
    """Maps a binding key (a value or a pair of values) to an ordered list of tracks."""

    def __init__(self, lock: Optional[threading.RLock] = None) -> None:
        self._lock = lock if lock is not None else threading.RLock()
        self._bindings: dict[Hashable, list] = {}

    def add(self, key: Hashable, track: Any) -> None:
        """Bind ``track`` to ``key`` unless it already is."""
        with self._lock:
            tracks = self._bindings.setdefault(key, [])
            if _index_of(tracks, track) is None:
                tracks.append(track)

    def set_single(self, key: Hashable, track: Any) -> None:
        """Make ``track`` the first track bound to ``key``, replacing the previous one."""
        with self._lock:
            tracks = self._bindings.get(key)
            if tracks:
                tracks[0] = track
            else:
                self._bindings[key] = [track]

    def lookup(self, key: Hashable) -> tuple:
        """Return the tracks bound to ``key``, empty when there are none."""
        with self._lock:
            return tuple(self._bindings.get(key, ()))

    def remove_track(self, track: Any) -> None:
        with self._lock:
            for tracks in self._bindings.values():
                index = _index_of(tracks, track)
                if index is not None:
                    del tracks[index]

    def keys_for(self, track: Any, limit: int) -> list:
        """Return up to ``limit`` keys bound to ``track``, in insertion order."""
        with self._lock:
            keys = []
            for key, tracks in self._bindings.items():
                if len(keys) >= limit:
                    break
                if _index_of(tracks, track) is not None:
                    keys.append(key)
            return keys

    def clear(self) -> None:
        with self._lock:
            self._bindings.clear()

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, key: object) -> bool:
        return key in self._bindings


Hit = tuple[bool, bool]


class Bindings:
    """All mute and record bindings of an engine.

    Triggering methods return ``(muted, recorded)``: whether a mute binding
    toggled tracks and whether a record binding changed the record state.
    """

    def __init__(self) -> None:
        self._midi_lock = threading.RLock()
        self.mute_note = BindingTable(self._midi_lock)
        self.mute_program = BindingTable(self._midi_lock)
        self.mute_control = BindingTable(self._midi_lock)
        self.rec_note = BindingTable(self._midi_lock)
        self.rec_program = BindingTable(self._midi_lock)
        self.rec_control = BindingTable(self._midi_lock)
        self.mute_key = BindingTable()
        self.rec_key = BindingTable()
        self.waiting = BindingWait.NONE
        self.captured: tuple[int, int] = (0, 0)

    def _tables(self) -> tuple[BindingTable, ...]:
        return (
            self.mute_key,
            self.rec_key,
            self.mute_note,
            self.mute_program,
            self.mute_control,
            self.rec_note,
            self.rec_program,
            self.rec_control,
        )

    def clear(self) -> None:
        for table in self._tables():
            table.clear()

    def remove_track(self, track: Any) -> None:
        for table in self._tables():
            table.remove_track(track)

    @staticmethod
    def _fire(
        mute_table: BindingTable,
        rec_table: BindingTable,
        key: Hashable,
        record: RecordState,
    ) -> Hit:
        muted = recorded = False
        tracks = mute_table.lookup(key)
        if tracks:
            for track in tracks:
                track.toggle_mute()
            muted = True
        tracks = rec_table.lookup(key)
        if tracks:
            record.select(tracks[0])
            recorded = True
        return muted, recorded

    def _fire_midi(
        self,
        mute_table: BindingTable,
        rec_table: BindingTable,
        key: Hashable,
        record: RecordState,
    ) -> Hit:
        # Skip rather than wait while the tables are being updated.
        if not self._midi_lock.acquire(blocking=False):
            return False, False
        try:
            return self._fire(mute_table, rec_table, key, record)
        finally:
            self._midi_lock.release()

    def press_note(self, note: int, record: RecordState) -> Hit:
        return self._fire_midi(self.mute_note, self.rec_note, note, record)

    def press_program(self, program: int, record: RecordState) -> Hit:
        return self._fire_midi(self.mute_program, self.rec_program, program, record)

    def change_control(self, control: int, value: int, record: RecordState) -> Hit:
        return self._fire_midi(
            self.mute_control, self.rec_control, (control, value), record
        )

    def press_key(self, key: Union[int, str], record: RecordState) -> Hit:
        """Trigger the bindings of a keyboard key, given as a code or a character."""
        if isinstance(key, str):
            if len(key) != 1:
                raise ValueError(f"a key binding is one character: {key!r}")
            key = ord(key)
        return self._fire(self.mute_key, self.rec_key, key, record)

    def _capture(self, first: int, second: int) -> None:
        self.captured = (first, second)
        self.waiting = BindingWait.NONE

    def handle_remote(self, event: MidiEvent, record: RecordState) -> Hit:
        """Handle an event from the remote-control input.

        While waiting for a binding, a matching event is captured instead of
        triggering bindings.
        """
        kind = event.kind
        if event.is_note_off:
            if self.waiting is BindingWait.NOTE:
                self._capture(event.num, 0)
            return False, False
        if kind is MidiEventKind.NOTE_ON:
            return self.press_note(event.num, record)
        if kind is MidiEventKind.PROGRAM_CHANGE:
            if self.waiting is BindingWait.PROGRAM:
                self._capture(event.num, 0)
                return False, False
            return self.press_program(event.num, record)
        if kind is MidiEventKind.CONTROL_CHANGE:
            if self.waiting is BindingWait.CONTROL:
                self._capture(event.num, event.value)
                return False, False
            return self.change_control(event.num, event.value, record)
        return False, False