"""Conversions between audio frames, sequencer ticks and bar/beat positions.

Tempo is expressed in microseconds per quarter note and ``ppq`` is the
number of ticks per quarter note. All conversions use integer arithmetic
and round towards zero.
"""

from __future__ import annotations

from dataclasses import dataclass

MICROSECONDS_PER_SECOND = 1_000_000
MICROSECONDS_PER_MINUTE = 60_000_000
BEATS_PER_BAR = 4
BEAT_TYPE = 4


@dataclass(frozen=True)
class BarBeatTick:
    """A transport position in bars and beats, as published to a timebase."""

    bar: int
    beat: int
    tick: int
    ticks_per_beat: int
    beats_per_minute: float
    bar_start_tick: float = 0.0
    beat_type: float = float(BEAT_TYPE)
    bbt_offset: int = 0


def _check_non_negative(**values: int) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValueError(f"{name} must not be negative: {value}")


def _check_positive(**values: int) -> None:
    for name, value in values.items():
        if value <= 0:
            raise ValueError(f"{name} must be positive: {value}")


def tick_to_frame(tick: int, frame_rate: int, ppq: int, tempo: int) -> int:
    """Return the frame at which ``tick`` falls."""
    _check_non_negative(tick=tick, frame_rate=frame_rate, tempo=tempo)
    _check_positive(ppq=ppq)
    return (tick * frame_rate * tempo) // (ppq * MICROSECONDS_PER_SECOND)


def frame_to_tick(frame: int, frame_rate: int, ppq: int, tempo: int) -> int:
    """Return the tick in progress at ``frame``."""
    _check_non_negative(frame=frame, ppq=ppq)
    _check_positive(frame_rate=frame_rate, tempo=tempo)
    return (frame * ppq * MICROSECONDS_PER_SECOND) // (frame_rate * tempo)


def first_tick_in_buffer(
    frame: int, frame_rate: int, ppq: int, tempo: int
) -> tuple[int, int]:
    """Return ``(tick, offset)`` for the first tick starting at or after ``frame``.

    ``offset`` is the number of frames from ``frame`` to the start of that
    tick; it is zero when a tick starts exactly on ``frame``.
    """
    _check_non_negative(frame=frame)
    _check_positive(frame_rate=frame_rate, ppq=ppq, tempo=tempo)
    numerator = frame * ppq * MICROSECONDS_PER_SECOND
    denominator = frame_rate * tempo
    tick, remainder = divmod(numerator, denominator)
    if remainder == 0:
        return tick, 0
    # The tick in progress started in the previous buffer.
    tick += 1
    tick_frame = (tick * tempo * frame_rate) // (ppq * MICROSECONDS_PER_SECOND)
    return tick, tick_frame - frame


def bbt_position(
    frame: int, frame_rate: int, tempo: int, tick: int, ppq: int
) -> BarBeatTick:
    """Compute the bar/beat position of ``frame`` in 4/4 time."""
    _check_non_negative(frame=frame, tick=tick)
    _check_positive(frame_rate=frame_rate, tempo=tempo, ppq=ppq)
    beat_index = (frame * MICROSECONDS_PER_SECOND) // (frame_rate * tempo)
    bar = beat_index // BEATS_PER_BAR + 1
    beat = (beat_index + 1) % BEATS_PER_BAR or BEATS_PER_BAR
    return BarBeatTick(
        bar=bar,
        beat=beat,
        tick=tick,
        ticks_per_beat=ppq,
        beats_per_minute=float(MICROSECONDS_PER_MINUTE // tempo),
    )