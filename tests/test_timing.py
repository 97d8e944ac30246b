import pytest

from midiloop.timing import (
    BarBeatTick,
    bbt_position,
    first_tick_in_buffer,
    frame_to_tick,
    tick_to_frame,
)

PPQ = 192
TEMPO = 500000


def test_zero_tick_is_frame_zero():
    assert tick_to_frame(0, 48000, PPQ, TEMPO) == 0
    assert frame_to_tick(0, 48000, PPQ, TEMPO) == 0


@pytest.mark.parametrize("tick", [0, 1, 7, 191, 192, 1000, 76800])
def test_exact_round_trip_when_frames_per_tick_is_whole(tick):
    frame = tick_to_frame(tick, 48000, PPQ, TEMPO)
    assert frame_to_tick(frame, 48000, PPQ, TEMPO) == tick


def test_tick_to_frame_is_monotonic():
    frames = [tick_to_frame(t, 44100, PPQ, TEMPO) for t in range(500)]
    assert frames == sorted(frames)


def test_one_quarter_note_is_one_tempo_period():
    # One quarter note (ppq ticks) lasts `tempo` microseconds.
    frames = tick_to_frame(PPQ, 1_000_000, PPQ, TEMPO)
    assert frames == TEMPO


@pytest.mark.parametrize("frame", [0, 1, 99, 125, 250, 44099, 44100, 99999])
@pytest.mark.parametrize("frame_rate", [44100, 48000])
def test_first_tick_in_buffer_invariants(frame, frame_rate):
    tick, offset = first_tick_in_buffer(frame, frame_rate, PPQ, TEMPO)
    assert offset >= 0
    assert tick_to_frame(tick, frame_rate, PPQ, TEMPO) - frame == offset
    assert tick - frame_to_tick(frame, frame_rate, PPQ, TEMPO) in (0, 1)


def test_first_tick_on_exact_boundary_has_zero_offset():
    frame = tick_to_frame(10, 48000, PPQ, TEMPO)
    assert first_tick_in_buffer(frame, 48000, PPQ, TEMPO) == (10, 0)


def test_first_tick_inside_a_tick_moves_to_next():
    frame = tick_to_frame(10, 48000, PPQ, TEMPO) + 1
    tick, offset = first_tick_in_buffer(frame, 48000, PPQ, TEMPO)
    assert tick == 11
    assert frame + offset == tick_to_frame(11, 48000, PPQ, TEMPO)


def test_bbt_at_start():
    pos = bbt_position(0, 48000, TEMPO, 0, PPQ)
    assert pos.bar == 1
    assert pos.beat == 1
    assert pos.tick == 0
    assert pos.ticks_per_beat == PPQ
    assert pos.beat_type == 4
    assert pos.bar_start_tick == 0
    assert pos.beats_per_minute == 120


def test_bbt_beats_cycle_through_a_bar():
    frames_per_beat = tick_to_frame(PPQ, 48000, PPQ, TEMPO)
    beats = [
        bbt_position(i * frames_per_beat, 48000, TEMPO, 0, PPQ).beat
        for i in range(8)
    ]
    assert beats == [1, 2, 3, 4, 1, 2, 3, 4]


def test_bbt_bar_advances_every_four_beats():
    frames_per_beat = tick_to_frame(PPQ, 48000, PPQ, TEMPO)
    bars = [
        bbt_position(i * frames_per_beat, 48000, TEMPO, 0, PPQ).bar
        for i in range(9)
    ]
    assert bars == [1, 1, 1, 1, 2, 2, 2, 2, 3]


def test_bbt_reports_given_tick():
    pos = bbt_position(12345, 44100, TEMPO, 321, PPQ)
    assert isinstance(pos, BarBeatTick)
    assert pos.tick == 321
    assert 1 <= pos.beat <= 4


@pytest.mark.parametrize(
    "call",
    [
        lambda: tick_to_frame(1, 48000, 0, TEMPO),
        lambda: frame_to_tick(1, 0, PPQ, TEMPO),
        lambda: frame_to_tick(1, 48000, PPQ, 0),
        lambda: first_tick_in_buffer(1, 48000, 0, TEMPO),
        lambda: bbt_position(1, 48000, 0, 0, PPQ),
        lambda: tick_to_frame(-1, 48000, PPQ, TEMPO),
        lambda: frame_to_tick(-5, 48000, PPQ, TEMPO),
    ],
)
def test_invalid_arguments_raise(call):
    with pytest.raises(ValueError):
        call()