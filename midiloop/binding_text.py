"""Short human-readable summaries of the bindings attached to a track."""

from __future__ import annotations

from typing import Iterable, Sequence, Union

NOTE_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

# Program and control fields are rendered into four characters at most.
_FIELD_WIDTH = 4

KeyItem = Union[int, str]
ControlItem = Union[int, Sequence[int]]


def _check_byte(value: int, what: str) -> int:
    if not isinstance(value, int) or not 0 <= value <= 0xFF:
        raise ValueError(f"{what} must be a byte value: {value!r}")
    return value


def _signed_byte(value: int) -> int:
    return value - 0x100 if value >= 0x80 else value


def _join(fields: Iterable[str]) -> str:
    return "".join(f" {field}" for field in fields)


def _key_char(key: KeyItem) -> str:
    if isinstance(key, str):
        if len(key) != 1:
            raise ValueError(f"a key binding is one character: {key!r}")
        key = ord(key)
    return chr(_check_byte(key, "key"))


def key_bindings_str(keys: Iterable[KeyItem]) -> str:
    """Render keyboard bindings as ``" a b"``: each key preceded by a space."""
    return _join(_key_char(key) for key in keys)


def _note_name(note: int) -> str:
    if not isinstance(note, int) or not 0 <= note <= 127:
        raise ValueError(f"MIDI note out of range: {note!r}")
    octave = note // 12 - 1
    return f"{NOTE_NAMES[note % 12]}{octave}"


def note_bindings_str(notes: Iterable[int]) -> str:
    """Render MIDI note bindings by name and octave, e.g. ``" C4 A#-1"``."""
    return _join(_note_name(note) for note in notes)


def _program_field(program: int) -> str:
    return str(_signed_byte(_check_byte(program, "program")))[:_FIELD_WIDTH]


def program_bindings_str(programs: Iterable[int]) -> str:
    """Render program-change bindings as their numbers, e.g. ``" 0 12"``."""
    return _join(_program_field(program) for program in programs)


def _control_pairs(controls: Iterable[ControlItem]) -> list[tuple[int, int]]:
    items = list(controls)
    if all(isinstance(item, (tuple, list)) for item in items):
        pairs = []
        for item in items:
            if len(item) != 2:
                raise ValueError(f"a control binding is a pair: {item!r}")
            pairs.append((item[0], item[1]))
        return pairs
    if any(isinstance(item, (tuple, list)) for item in items):
        raise ValueError("control bindings mix pairs and flat values")
    if len(items) % 2:
        raise ValueError("flat control bindings need an even number of values")
    return list(zip(items[::2], items[1::2]))


def _control_field(control: int, value: int) -> str:
    control = _signed_byte(_check_byte(control, "control"))
    value = _signed_byte(_check_byte(value, "control value"))
    return f"{control}-{value}"[:_FIELD_WIDTH]


def control_bindings_str(controls: Iterable[ControlItem]) -> str:
    """Render control-change bindings as ``" control-value"`` fields.

    ``controls`` holds ``(control, value)`` pairs or a flat sequence of
    alternating control numbers and values. Each field is cut to four
    characters.
    """
    return _join(
        _control_field(control, value) for control, value in _control_pairs(controls)
    )