# input/bounds.py
from typing import Tuple
from config import GridConfig

def hit_rect(cfg: GridConfig) -> Tuple[float, float, float, float]:
    """(left, top, right, bottom) of the clickable area around the staff."""
    return (cfg.staff_left + cfg.hit_left_inset,
            cfg.staff_top - cfg.hit_above,
            cfg.staff_left + cfg.staff_width - cfg.hit_right_inset,
            cfg.staff_top + cfg.hit_below)

def in_staff_area(cfg: GridConfig, x: float, y: float) -> bool:
    left, top, right, bottom = hit_rect(cfg)
    return left <= x <= right and top <= y <= bottom
