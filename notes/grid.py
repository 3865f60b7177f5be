# notes/grid.py
import logging
from dataclasses import replace
from typing import List, Optional
from config import GridConfig
from notes.model import GridPosition, Note
from notes.policies import make_snap, make_placement, playback_sorted

log = logging.getLogger(__name__)

class PitchGridModel:
    """Click coordinates -> snapped pitch positions, plus the ordered list of placed notes.

    The model never draws or plays anything; the App forwards new notes to the
    renderer and synth. Bounds checking of clicks also happens outside.
    """
    def __init__(self, cfg: Optional[GridConfig] = None):
        self.cfg = cfg or GridConfig()
        self._snap = make_snap(self.cfg.snap_policy)
        self._place = make_placement(self.cfg.placement_policy)
        self._notes: List[Note] = []
        self._counter = 0

    @property
    def notes(self) -> List[Note]:
        return list(self._notes)

    def __len__(self) -> int:
        return len(self._notes)

    def resolve_position(self, x: float, y: float) -> GridPosition:
        return self._snap.resolve(self.cfg, x, y)

    def preview_position(self, x: float, y: float) -> GridPosition:
        """Where the next note would land for a click at (x, y)."""
        pos = self.resolve_position(x, y)
        return replace(pos, x=self._place(self.cfg, x, len(self._notes)))

    def add_note(self, click_x: float, click_y: float, position: Optional[GridPosition] = None) -> Note:
        if position is None:
            position = self.resolve_position(click_x, click_y)
        note = Note(
            x=self._place(self.cfg, click_x, len(self._notes)),
            y=position.y,
            grid_index=position.grid_index,
            midi_pitch=self.cfg.reference_pitch + (self.cfg.middle_index - position.grid_index),
            order=self._counter,
        )
        self._counter += 1
        self._notes.append(note)
        log.debug("Added note #%d %s at (%.1f, %.1f)", note.order, note.label, note.x, note.y)
        return note

    def clear_all(self):
        self._notes = []
        self._counter = 0
        log.debug("Cleared all notes")

    def playback_order(self) -> List[Note]:
        return playback_sorted(self._notes, self.cfg.playback_order)
