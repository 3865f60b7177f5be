# notes/model.py
from dataclasses import dataclass
from notes.pitch import midi_to_frequency, pitch_name

@dataclass(frozen=True)
class GridPosition:
    x: float
    y: float               # snapped to a grid line
    grid_index: int        # steps down from the top of the grid
    semitone_offset: int   # signed distance from the middle reference line
    reference_pitch: int = 60

    @property
    def midi_pitch(self) -> int:
        return self.reference_pitch + self.semitone_offset

    @property
    def frequency(self) -> float:
        return midi_to_frequency(self.midi_pitch)

@dataclass(frozen=True)
class Note:
    x: float
    y: float
    grid_index: int
    midi_pitch: int   # MIDI note number
    order: int        # insertion counter

    @property
    def frequency(self) -> float:
        return midi_to_frequency(self.midi_pitch)

    @property
    def label(self) -> str:
        return pitch_name(self.midi_pitch)
