"""Loop-based MIDI sequencing engine: looping tracks, bindings, outputs and timing."""

__version__ = "0.1.0"

__all__ = [
    "binding_text",
    "bindings",
    "engine",
    "events",
    "output",
    "ring_buffer",
    "timing",
    "track",
]