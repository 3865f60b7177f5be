# notes/pitch.py
import math
from typing import Tuple

A4_MIDI = 69
A4_HZ = 440.0

PITCH_CLASSES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# note length in beats
DURATION_BEATS = {
    "whole": 4.0,
    "half": 2.0,
    "quarter": 1.0,
    "eighth": 0.5,
    "sixteenth": 0.25,
    "1n": 4.0,
    "2n": 2.0,
    "4n": 1.0,
    "8n": 0.5,
    "16n": 0.25,
}

def midi_to_frequency(midi_pitch: int) -> float:
    """Equal temperament, A4 = 440 Hz."""
    return A4_HZ * (2.0 ** ((midi_pitch - A4_MIDI) / 12.0))

def frequency_to_midi(frequency: float) -> int:
    if frequency <= 0:
        raise ValueError(f"Invalid frequency: {frequency}")
    return int(round(A4_MIDI + 12.0 * math.log2(frequency / A4_HZ)))

def midi_to_pitch_label(midi_pitch: int) -> Tuple[str, int]:
    """60 -> ("C", 4). Sharps only; floor division keeps negative pitches consistent."""
    return PITCH_CLASSES[midi_pitch % 12], midi_pitch // 12 - 1

def pitch_name(midi_pitch: int) -> str:
    name, octave = midi_to_pitch_label(midi_pitch)
    return f"{name}{octave}"

def duration_seconds(token: str, bpm: float = 120.0) -> float:
    try:
        beats = DURATION_BEATS[token]
    except KeyError:
        raise ValueError(f"Unknown duration token: {token!r}") from None
    if bpm <= 0:
        raise ValueError(f"Invalid bpm: {bpm}")
    return beats * 60.0 / bpm
