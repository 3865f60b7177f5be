# ========================= notes/policies.py =========================
import math
from typing import List, Sequence, Tuple
from notes.model import GridPosition, Note
from config import GridConfig

# ---------- snapping ----------
class SnapStrategy:
    def resolve(self, cfg: GridConfig, x: float, y: float) -> GridPosition:
        raise NotImplementedError

    @staticmethod
    def _position(cfg: GridConfig, x: float, k: int) -> GridPosition:
        return GridPosition(x=x, y=cfg.line_y(k), grid_index=k,
                            semitone_offset=cfg.middle_index - k,
                            reference_pitch=cfg.reference_pitch)

class FixedStepSnap(SnapStrategy):
    """Round to the nearest step below the grid top; index floored at 0, no upper clamp."""
    def resolve(self, cfg: GridConfig, x: float, y: float) -> GridPosition:
        rel = (y - cfg.grid_top) / cfg.step_px
        k = max(0, int(math.floor(rel + 0.5)))
        return self._position(cfg, x, k)

class NearestCandidateSnap(SnapStrategy):
    """Pick the closest of a finite candidate list; first candidate wins ties."""
    def candidates(self, cfg: GridConfig) -> List[Tuple[int, float]]:
        # lowest pitch first
        return [(k, cfg.line_y(k)) for k in range(cfg.grid_steps, -1, -1)]

    def resolve(self, cfg: GridConfig, x: float, y: float) -> GridPosition:
        cands = self.candidates(cfg)
        best_k, best_y = cands[0]
        best_d = abs(y - best_y)
        for k, cy in cands:
            d = abs(y - cy)
            if d < best_d:
                best_k, best_d = k, d
        return self._position(cfg, x, best_k)

def make_snap(mode: str) -> SnapStrategy:
    return FixedStepSnap() if mode == "fixed" else NearestCandidateSnap()

# ---------- horizontal placement ----------
def click_x_placement(cfg: GridConfig, click_x: float, count: int) -> float:
    return click_x

def auto_column_placement(cfg: GridConfig, click_x: float, count: int) -> float:
    """Next free column; once past the right edge the spacing is compressed instead of wrapping."""
    x = cfg.first_column_x + count * cfg.column_spacing
    max_x = cfg.max_column_x
    if x > max_x:
        compressed = min(cfg.column_spacing, (max_x - cfg.first_column_x) / (count + 1))
        return cfg.first_column_x + count * compressed
    return x

def make_placement(mode: str):
    return click_x_placement if mode == "click_x" else auto_column_placement

# ---------- playback order ----------
def playback_sorted(notes: Sequence[Note], mode: str) -> List[Note]:
    # sorted() is stable
    if mode == "x":
        return sorted(notes, key=lambda n: n.x)
    return sorted(notes, key=lambda n: n.order)
