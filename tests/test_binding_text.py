import pytest

from midiloop.binding_text import (
    NOTE_NAMES,
    control_bindings_str,
    key_bindings_str,
    note_bindings_str,
    program_bindings_str,
)


def _parse_note(token):
    split = 2 if len(token) > 1 and token[1] == "#" else 1
    name, octave = token[:split], int(token[split:])
    return (octave + 1) * 12 + NOTE_NAMES.index(name)


def test_empty_inputs_give_empty_strings():
    assert key_bindings_str([]) == ""
    assert note_bindings_str([]) == ""
    assert program_bindings_str([]) == ""
    assert control_bindings_str([]) == ""


def test_key_bindings_from_bytes():
    assert key_bindings_str(b"ab") == " a b"


def test_key_bindings_chars_match_codes():
    assert key_bindings_str("xyz") == key_bindings_str([ord(c) for c in "xyz"])


def test_key_binding_rejects_long_string():
    with pytest.raises(ValueError):
        key_bindings_str(["ab"])


def test_key_binding_rejects_out_of_range():
    with pytest.raises(ValueError):
        key_bindings_str([300])


def test_middle_c():
    assert note_bindings_str([60]) == " C4"


def test_lowest_note_has_minus_one_octave():
    assert note_bindings_str([0]) == " C-1"


def test_note_names_round_trip():
    notes = list(range(128))
    tokens = note_bindings_str(notes).split(" ")
    assert tokens[0] == ""
    assert [_parse_note(token) for token in tokens[1:]] == notes


def test_note_out_of_range():
    with pytest.raises(ValueError):
        note_bindings_str([128])


def test_program_numbers():
    programs = [0, 5, 127]
    assert program_bindings_str(programs) == "".join(f" {p}" for p in programs)


def test_high_program_is_signed():
    text = program_bindings_str([200])
    assert text.startswith(" -")
    assert len(text) <= 5


def test_control_pairs_and_flat_agree():
    pairs = [(1, 2), (7, 100), (64, 127)]
    flat = [value for pair in pairs for value in pair]
    assert control_bindings_str(pairs) == control_bindings_str(flat)


def test_short_control_field():
    assert control_bindings_str([(1, 2)]) == " 1-2"


def test_control_fields_are_at_most_four_chars():
    pairs = [(c, v) for c in (0, 7, 64, 127) for v in (0, 9, 99, 127)]
    tokens = control_bindings_str(pairs).split(" ")[1:]
    assert len(tokens) == len(pairs)
    assert all(1 <= len(token) <= 4 for token in tokens)
    assert all(token.startswith(f"{c}-") for token, (c, _) in zip(tokens, pairs))


def test_control_odd_flat_sequence_rejected():
    with pytest.raises(ValueError):
        control_bindings_str([1, 2, 3])


def test_control_mixed_forms_rejected():
    with pytest.raises(ValueError):
        control_bindings_str([(1, 2), 3])