"""The loop engine: outputs, tracks, bindings and the per-tick playback cycle."""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Optional, Sequence

from .bindings import Bindings, RecordState
from .events import MidiEvent
from .output import Output
from .ring_buffer import DEFAULT_CAPACITY, MidiRingBuffer
from .track import DEFAULT_PPQ, Track, TrackContext

DEFAULT_TEMPO = 500_000
NO_OUTPUT = "No output"


class MmcCommand(IntEnum):
    """MIDI Machine Control commands the engine reacts to."""

    STOP = 0x01
    PLAY = 0x02
    RECORD_STROBE = 0x06
    PAUSE = 0x09


def get_sysex_mmc(sysex: Sequence[int]) -> Optional[MmcCommand]:
    """Return the transport command carried by an MMC sysex message.

    Play and pause both map to :attr:`MmcCommand.PAUSE` (a start/stop
    toggle). Anything that is not a handled MMC command gives None.
    """
    if len(sysex) < 5 or sysex[1] != 0x7F or sysex[3] != 0x06:
        return None
    command = sysex[4]
    if command == MmcCommand.STOP:
        return MmcCommand.STOP
    if command in (MmcCommand.PLAY, MmcCommand.PAUSE):
        return MmcCommand.PAUSE
    if command == MmcCommand.RECORD_STROBE:
        return MmcCommand.RECORD_STROBE
    return None


def _discard(event: MidiEvent) -> bool:
    return True


class Engine:
    """A MIDI loop engine driven one tick at a time by :meth:`step`."""

    def __init__(
        self,
        name: str = "midiloop",
        ppq: int = DEFAULT_PPQ,
        tempo: int = DEFAULT_TEMPO,
        ring_capacity: int = DEFAULT_CAPACITY,
    ) -> None:
        if ppq <= 0:
            raise ValueError(f"ppq must be positive: {ppq}")
        if tempo <= 0:
            raise ValueError(f"tempo must be positive: {tempo}")
        self.name = name
        self.ppq = ppq
        self.tempo = tempo
        self.tick = 0
        self.outputs: list[Output] = []
        self.tracks: list[TrackContext] = []
        self.bindings = Bindings()
        self.record = RecordState()
        self.recorded = MidiRingBuffer(ring_capacity)
        self.mute_state_changed = False
        self._running = False

    # Outputs

    def create_output(
        self, name: str, sink: Optional[Callable[[MidiEvent], bool]] = None
    ) -> Output:
        """Create an output writing through ``sink`` (events are dropped when None)."""
        output = Output(name, sink if sink is not None else _discard)
        self.outputs.append(output)
        return output

    def delete_output(self, output: Output) -> bool:
        """Detach ``output`` from every track and remove it; False if unknown."""
        for track in self.tracks:
            if track.output is output:
                track.output = None
        for index, candidate in enumerate(self.outputs):
            if candidate is output:
                del self.outputs[index]
                return True
        return False

    def output_names(self) -> list[str]:
        """Names for an output selector, the first entry meaning no output."""
        return [NO_OUTPUT] + [output.name for output in self.outputs]

    def get_output(self, index: int) -> Optional[Output]:
        if 0 <= index < len(self.outputs):
            return self.outputs[index]
        return None

    # Tracks

    def create_track(self, name: str) -> TrackContext:
        """Add an empty track looping over one bar from tick zero."""
        track = TrackContext(Track(name), None, 0, self.ppq * 4, engine=self)
        self.tracks.append(track)
        return track

    def delete_track(self, track: TrackContext) -> bool:
        """Remove a track, or mark it deleted while the engine runs."""
        for index, candidate in enumerate(self.tracks):
            if candidate is track:
                self.bindings.remove_track(track)
                if self.is_running():
                    track.deleted = True
                else:
                    del self.tracks[index]
                return True
        return False

    def copy_track(self, track: TrackContext) -> TrackContext:
        """Add a muted copy of ``track`` on the same output and loop."""
        clone = TrackContext(
            track.track.copy(),
            track.output,
            track.loop_start,
            track.loop_len,
            engine=self,
        )
        clone.mute = True
        self.tracks.append(clone)
        return clone

    # Recording

    def set_rec(self, track: Optional[TrackContext]) -> None:
        self.record.enabled = True
        self.record.track = track
        self.record.changed = True

    def toggle_rec(self) -> None:
        """Switch recording off, or on for the last recorded (or first) track."""
        if self.record.enabled:
            self.record.enabled = False
        elif self.record.track is None and self.tracks:
            self.set_rec(self.tracks[0])
        else:
            self.set_rec(self.record.track)
        self.record.changed = True

    # Transport

    def start(self) -> None:
        """Start playing, or stop when already playing."""
        if self._running:
            self.stop()
        else:
            self._running = True
            self.prepare_tracks()

    def stop(self) -> None:
        """Stop playing, silence sounding notes and rewind to tick zero."""
        if self._running:
            self.free_trash()
            self.play_output_requests()
            self.play_pending_notes()
            self._running = False
            self.clean_tracks()
        self.tick = 0

    def is_running(self) -> bool:
        return self._running

    def set_tick(self, tick: int) -> None:
        if tick < 0:
            raise ValueError(f"tick must not be negative: {tick}")
        self.tick = tick
        self.mark_tracks_need_sync()

    def set_tempo(self, tempo: int) -> None:
        """Set the tempo in microseconds per quarter note."""
        if tempo <= 0:
            raise ValueError(f"tempo must be positive: {tempo}")
        self.tempo = tempo

    # Track housekeeping

    def mark_tracks_need_sync(self) -> None:
        for track in self.tracks:
            track.need_sync = True

    def prepare_tracks(self) -> None:
        """Point every track's cursor at the current position in its loop."""
        for track in self.tracks:
            track.seek(track.loop_pos(self.tick))

    def clean_tracks(self) -> None:
        """Drop the tracks marked deleted."""
        self.tracks = [track for track in self.tracks if not track.deleted]

    def free_trash(self) -> None:
        """Drop deleted tracks and empty the trash of the others."""
        self.clean_tracks()
        for track in self.tracks:
            track.empty_trash()

    # Playback

    def play_tracks(self) -> None:
        for track in self.tracks:
            if not track.deleted:
                track.play(self.tick)

    def play_pending_notes(self) -> None:
        for track in self.tracks:
            if not track.deleted and track.output is not None:
                track.output.flush_pending_notes(track.notes)

    def play_output_requests(self) -> None:
        for output in self.outputs:
            output.play_requests()

    def handle_mmc(self, sysex: Sequence[int]) -> Optional[MmcCommand]:
        """Apply an MMC transport message and return the command recognised."""
        command = get_sysex_mmc(sysex)
        if command is MmcCommand.STOP:
            self.stop()
        elif command is MmcCommand.PAUSE:
            self.start()
        elif command is MmcCommand.RECORD_STROBE:
            self.toggle_rec()
        return command

    def step(self) -> bool:
        """Run one tick; return False when the engine is stopped.

        Queued output requests are played even while stopped.
        """
        self.play_output_requests()
        if not self._running:
            return False
        self.play_tracks()
        self.free_trash()
        self.tick += 1
        return True