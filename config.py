# ========================= config.py =========================
from dataclasses import dataclass, field
from typing import Optional
from notes.pitch import DURATION_BEATS

SNAP_POLICIES = ("nearest", "fixed")
PLACEMENT_POLICIES = ("auto_column", "click_x")
PLAYBACK_ORDERS = ("insertion", "x")

@dataclass(frozen=True)
class GridConfig:
    staff_top: float = 50.0
    staff_left: float = 50.0
    staff_width: float = 700.0
    step_px: float = 6.0              # one semitone per grid step
    middle_line_offset: float = 80.0  # staff_top -> middle reference line
    reference_pitch: int = 60         # C4 sits on the middle line
    middle_index: int = 8
    grid_steps: int = 16              # indices 0..grid_steps (+-8 semitones)

    snap_policy: str = "nearest"
    placement_policy: str = "auto_column"
    playback_order: str = "insertion"

    # auto-column layout
    first_column_offset: float = 120.0
    column_spacing: float = 60.0
    right_margin: float = 80.0

    # interactive rectangle around the staff
    hit_left_inset: float = 80.0
    hit_right_inset: float = 20.0
    hit_above: float = 20.0
    hit_below: float = 150.0

    def __post_init__(self):
        if self.step_px <= 0:
            raise ValueError(f"Invalid step_px: {self.step_px}")
        if self.staff_width <= 0:
            raise ValueError(f"Invalid staff_width: {self.staff_width}")
        if self.grid_steps < 0 or not (0 <= self.middle_index <= self.grid_steps):
            raise ValueError(f"Invalid middle_index: {self.middle_index} (grid_steps={self.grid_steps})")
        if self.snap_policy not in SNAP_POLICIES:
            raise ValueError(f"Invalid snap_policy: {self.snap_policy}")
        if self.placement_policy not in PLACEMENT_POLICIES:
            raise ValueError(f"Invalid placement_policy: {self.placement_policy}")
        if self.playback_order not in PLAYBACK_ORDERS:
            raise ValueError(f"Invalid playback_order: {self.playback_order}")

    @property
    def grid_top(self) -> float:
        """y of grid index 0 (the highest pitch)."""
        return self.staff_top + self.middle_line_offset - self.middle_index * self.step_px

    @property
    def middle_line_y(self) -> float:
        return self.staff_top + self.middle_line_offset

    @property
    def first_column_x(self) -> float:
        return self.staff_left + self.first_column_offset

    @property
    def max_column_x(self) -> float:
        return self.staff_left + self.staff_width - self.right_margin

    def line_y(self, grid_index: int) -> float:
        return self.grid_top + grid_index * self.step_px

@dataclass
class RenderConfig:
    window_w: int = 800
    window_h: int = 340
    font_name: str = "consolas"
    fps: int = 60

@dataclass
class AudioConfig:
    backend: str = "tone"       # "tone" (mixer) or "midi" (system MIDI out)
    waveform: str = "triangle"  # tone backend only
    sample_rate: int = 44100
    volume: float = 0.4
    midi_program: int = 0       # Acoustic Grand
    midi_device: Optional[int] = None

@dataclass
class PlaybackConfig:
    bpm: float = 120.0
    interval_s: float = 0.5
    click_duration: str = "eighth"
    sequence_duration: str = "quarter"

    def __post_init__(self):
        if self.bpm <= 0:
            raise ValueError(f"Invalid bpm: {self.bpm}")
        if self.interval_s <= 0:
            raise ValueError(f"Invalid interval_s: {self.interval_s}")
        for token in (self.click_duration, self.sequence_duration):
            if token not in DURATION_BEATS:
                raise ValueError(f"Unknown duration token: {token!r}")

@dataclass
class AppConfig:
    grid: GridConfig = field(default_factory=GridConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    export_dir: str = "."
    shortcuts: str = ""   # extra "key=COMMAND" pairs, comma separated
