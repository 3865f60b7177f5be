# midi/writer.py
import mido
from typing import Sequence
from notes.model import Note
from notes.pitch import DURATION_BEATS, duration_seconds

def notes_to_midi(notes: Sequence[Note], bpm: float = 120.0, interval_s: float = 0.5,
                  duration: str = "quarter", ticks_per_beat: int = 480,
                  velocity: int = 100, program: int = 0) -> mido.MidiFile:
    """One monophonic track: note i starts at i*interval_s, lasting `duration` (clipped at the next onset)."""
    duration_seconds(duration, bpm)  # rejects unknown tokens and bpm <= 0
    mid = mido.MidiFile(ticks_per_beat=ticks_per_beat)
    track = mido.MidiTrack()
    mid.tracks.append(track)
    tempo = mido.bpm2tempo(bpm)
    track.append(mido.MetaMessage('set_tempo', tempo=tempo, time=0))
    track.append(mido.Message('program_change', program=program, channel=0, time=0))

    step = int(round(mido.second2tick(interval_s, ticks_per_beat, tempo)))
    if step <= 0:
        raise ValueError(f"Invalid interval_s: {interval_s}")
    length = min(int(round(DURATION_BEATS[duration] * ticks_per_beat)), step)

    cursor = 0  # absolute tick of the last event written
    for i, n in enumerate(notes):
        on_at = i * step
        pitch = max(0, min(127, int(n.midi_pitch)))
        track.append(mido.Message('note_on', note=pitch, velocity=velocity, channel=0, time=on_at - cursor))
        track.append(mido.Message('note_off', note=pitch, velocity=0, channel=0, time=length))
        cursor = on_at + length
    track.append(mido.MetaMessage('end_of_track', time=0))
    return mid

def write_midi(path: str, notes: Sequence[Note], **kwargs) -> str:
    notes_to_midi(notes, **kwargs).save(path)
    return path
