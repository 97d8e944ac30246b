# midiloop

`midiloop` is the core of a MIDI looper. It holds a set of tracks. Each track
loops over its own span of ticks. On every step of the engine, the events that
fall on the current tick go to named outputs.

An output does not open a MIDI device. You give it a *sink*, which is a
callable that receives each `MidiEvent` and returns `True` when it wrote the
event. Only events the sink accepts are recorded as sounding notes. A sink can
pass events on to any MIDI library, or it can collect them in a list.

## Installation

```
pip install midiloop
```

To install the tools for running the test suite as well:

```
pip install "midiloop[test]"
```

## Modules

- `midiloop.events`
  - `MidiEventKind`: the channel message kinds, each valued by its status
    nibble.
  - `MidiEvent`: a frozen dataclass with the fields `kind`, `channel`, `num`
    and `value`. `num` is the first data byte and `value` the second.
  - `NoteState`: records which `(channel, note)` pairs are sounding, through
    `update`, `is_pending`, `unset` and `pending`.
- `midiloop.ring_buffer`
  - `MidiRingBuffer`: a bounded FIFO of `(tick, event)` pairs with a default
    capacity of 400. `write` returns `False` when the buffer is full and does
    not overwrite old entries. `read` returns the oldest pair, or `None` when
    the buffer is empty.
- `midiloop.output`
  - `Output`: a named output.
    - `send` writes an event at once.
    - `add_request` queues an event, and `play_requests` writes the queued
      events in order.
    - `send_events` writes events and records the notes in a `NoteState`.
    - `flush_pending_notes` sends a note-off for every note that is still
      sounding.
- `midiloop.timing`
  - Integer conversions between ticks and audio frames: `tick_to_frame` and
    `frame_to_tick`.
  - `first_tick_in_buffer`: returns the first tick at or after a frame, and the
    offset in frames to that tick.
  - `bbt_position`: returns the bar, beat and tick of a frame in 4/4 time, as a
    `BarBeatTick`.
  - Tempo is given in microseconds per quarter note throughout.
- `midiloop.track`
  - `Track`: a named list of `TickEvent`s kept in tick order, each holding
    `SeqEvent`s. Use `add_event`, `max_tick` and `copy` to work with it.
  - `TrackContext`: plays a track in a loop on an output. It offers
    `loop_pos`, `seek`, `play`, `mute_now` and `toggle_mute`.
    - `discard_event` marks an event deleted and moves it to a trash list. If
      the event is a note-off, it is still queued on the output.
    - `empty_trash` drops the trashed events for good.
- `midiloop.bindings`
  - `BindingTable`: maps a key to a list of tracks.
  - `Bindings`: holds mute and record tables for notes, programs, controls
    and keyboard keys.
    - Trigger them with `press_note`, `press_program`, `change_control` and
      `press_key`. Each returns `(muted, recorded)`.
    - `handle_remote` takes a remote-control `MidiEvent`. If `waiting` is set to
      a `BindingWait` value, a matching event is captured into `captured`
      instead of triggering bindings.
  - `RecordState`: holds whether recording is on and which track it records
    into.
- `midiloop.binding_text`
  - `key_bindings_str`, `note_bindings_str`, `program_bindings_str` and
    `control_bindings_str` render bindings as short display strings.
- `midiloop.engine`
  - `Engine`: ties the modules above together.
    - Outputs: `create_output`, `delete_output`, `output_names` and
      `get_output`.
    - Tracks: `create_track`, `delete_track` and `copy_track`.
    - Recording: `set_rec` and `toggle_rec`.
    - Transport: `start`, `stop`, `is_running`, `set_tick` and `set_tempo`.
    - Playback: `step`.
  - `get_sysex_mmc` decodes MIDI Machine Control sysex messages into
    `MmcCommand` values. `Engine.handle_mmc` applies them to the engine.

## Example

```python
from midiloop.engine import Engine
from midiloop.events import MidiEvent, MidiEventKind

sent = []

def sink(event):
    sent.append(event)
    return True

engine = Engine()                      # ppq 192, tempo 500000 µs per quarter note
out = engine.create_output("synth", sink)

track = engine.create_track("bass")    # loops over one bar: ticks 0..767
track.output = out
track.track.add_event(0, MidiEvent(MidiEventKind.NOTE_ON, channel=0, num=36, value=100))
track.track.add_event(96, MidiEvent(MidiEventKind.NOTE_OFF, channel=0, num=36))

engine.start()
for _ in range(engine.ppq * 4):
    engine.step()
engine.stop()                          # sends note-offs for notes still sounding

print(sent)
```

`start` toggles the engine: calling it while the engine is running stops it.
`stop` rewinds to tick 0.

### Bindings

Keyboard keys and MIDI messages can toggle the mute of a track, or choose the
track to record into:

```python
engine.bindings.mute_key.add(ord("a"), track)
engine.bindings.press_key("a", engine.record)         # (True, False); track is now muted

engine.bindings.rec_note.set_single(60, track)
engine.bindings.press_note(60, engine.record)         # (False, True)
engine.record.track is track                          # True
```

### Display strings

```python
from midiloop.binding_text import note_bindings_str, control_bindings_str

note_bindings_str([60, 51])        # ' C4 D#3'
control_bindings_str([(1, 64)])    # ' 1-64'  (each field is cut to four characters)
```

### Timing

```python
from midiloop.timing import tick_to_frame, frame_to_tick

tick_to_frame(192, 48000, 192, 500000)    # 24000
frame_to_tick(24000, 48000, 192, 500000)  # 192
```

## What it does not do

- **No MIDI devices or audio server.** `midiloop` does not open MIDI ports or
  connect to a sound server. Events reach the outside world only through the
  sinks you give to `Engine.create_output`. Incoming remote and recorded
  events must be passed in by your code, through `Bindings.handle_remote`,
  `Engine.handle_mmc` and `Engine.recorded.write`.
- **No clock.** Nothing calls `Engine.step` on a timer. Your code has to call it
  once per tick. Use the functions in `midiloop.timing` to work out when.
- **No storage.** Projects and tracks cannot be saved to or loaded from MIDI
  files.
- **No user interface and no command-line program.**

## Running the tests

```
pytest
```