from midiloop.events import MidiEvent, MidiEventKind, NoteState
from midiloop.output import MidiRequest, Output


def _collector(result=True):
    sent = []

    def sink(event):
        sent.append(event)
        return result

    return sent, sink


def _note_on(channel, note):
    return MidiEvent(MidiEventKind.NOTE_ON, channel, note, 100)


def test_send_uses_sink_result():
    sent, sink = _collector(False)
    out = Output("out", sink)
    assert out.send(_note_on(0, 60)) is False
    assert sent == [_note_on(0, 60)]


def test_name_is_settable():
    _, sink = _collector()
    out = Output("first", sink)
    out.name = "second"
    assert out.name == "second"


def test_requests_played_in_fifo_order():
    sent, sink = _collector()
    out = Output("out", sink)
    events = [_note_on(0, n) for n in range(4)]
    for event in events:
        out.add_request(event)
    assert sent == []
    assert out.play_requests() == 4
    assert sent == events


def test_play_requests_empties_queue():
    sent, sink = _collector()
    out = Output("out", sink)
    out.add_request(_note_on(0, 1))
    out.play_requests()
    assert out.play_requests() == 0
    assert len(sent) == 1


def test_request_slots_reused_keep_order():
    sent, sink = _collector()
    out = Output("out", sink)
    first = [_note_on(1, n) for n in range(3)]
    second = [_note_on(2, n) for n in range(2)]
    for event in first:
        out.add_request(event)
    out.play_requests()
    for event in second:
        out.add_request(event)
    assert out.play_requests() == len(second)
    assert sent == first + second


def test_midi_request_defaults_unused():
    request = MidiRequest(_note_on(0, 0))
    assert request.used is False


def test_send_events_tracks_written_notes():
    sent, sink = _collector()
    out = Output("out", sink)
    state = NoteState()
    events = [_note_on(0, 60), _note_on(1, 62)]
    out.send_events(events, state)
    assert sent == events
    assert state.pending() == [(0, 60), (1, 62)]


def test_send_events_ignores_failed_writes():
    _, sink = _collector(False)
    out = Output("out", sink)
    state = NoteState()
    out.send_events([_note_on(0, 60)], state)
    assert state.pending() == []


def test_flush_pending_notes_sends_note_offs():
    sent, sink = _collector()
    out = Output("out", sink)
    state = NoteState()
    state.update(_note_on(4, 30))
    state.update(_note_on(0, 90))
    out.flush_pending_notes(state)
    assert sent == [
        MidiEvent(MidiEventKind.NOTE_OFF, 0, 90, 0),
        MidiEvent(MidiEventKind.NOTE_OFF, 4, 30, 0),
    ]
    assert len(state) == 0


def test_flush_with_nothing_pending_sends_nothing():
    sent, sink = _collector()
    state = NoteState()
    Output("out", sink).flush_pending_notes(state)
    assert sent == []
    assert state.pending() == []