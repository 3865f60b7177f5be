"""
Shared fixtures: headless SDL and fake renderer/synth collaborators.
"""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from config import AppConfig, GridConfig


class FakeRenderer:
    """Records what would have been drawn."""

    def __init__(self):
        self.frames = []
        self.button_rects = {}

    def begin_frame(self):
        pass

    def end_frame(self):
        pass

    def draw_status_bar(self, right_info_text=""):
        pass

    def draw_staff(self, notes):
        self.frames.append(list(notes))

    def draw_hover(self, pos):
        pass

    def hud(self, text):
        pass

    def button_at(self, pos):
        return None


class FakeSynth:
    """Collects triggers instead of making sound."""

    def __init__(self, now=100.0):
        self.t = now
        self.ready_calls = 0
        self.played = []      # (frequency, duration)
        self.scheduled = []   # (at_time, frequency, duration)
        self.cancelled = 0

    def now(self):
        return self.t

    def ensure_ready(self):
        self.ready_calls += 1
        return True

    def trigger(self, frequency, duration="eighth", at_time=None):
        if at_time is not None and at_time > self.t:
            self.scheduled.append((at_time, frequency, duration))
        else:
            self.played.append((frequency, duration))

    def cancel_pending(self):
        self.cancelled += 1
        self.scheduled.clear()
        return 0

    def update(self, now=None):
        pass

    def close(self):
        pass


@pytest.fixture
def grid_cfg():
    return GridConfig()


@pytest.fixture
def app_factory(tmp_path):
    from app import App

    def make(**grid_kwargs):
        cfg = AppConfig(grid=GridConfig(**grid_kwargs), export_dir=str(tmp_path))
        return App(cfg, renderer=FakeRenderer(), synth=FakeSynth())

    return make
