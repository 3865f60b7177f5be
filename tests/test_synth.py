"""
Tests for Synth readiness, scheduling and tone rendering.
"""

import numpy as np
import pytest
import pygame.midi

from audio.synth import Synth, render_wave
from config import AudioConfig
from timeline.scheduler import Scheduler


class RecordedSound:
    def __init__(self, sink, frequency, seconds):
        self.sink = sink
        self.item = (frequency, seconds)

    def play(self):
        self.sink.append(self.item)


class Clock:
    def __init__(self, t=10.0):
        self.t = t

    def __call__(self):
        return self.t


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def synth(clock, monkeypatch):
    """Synth whose audio init succeeds and whose sounds are recorded."""
    s = Synth(AudioConfig(), clock=clock)
    s.init_calls = 0

    def fake_init():
        s.init_calls += 1

    s.played = []
    monkeypatch.setattr(s, "_init_mixer", fake_init)
    monkeypatch.setattr(s, "_tone", lambda f, sec: RecordedSound(s.played, f, sec))
    return s


class TestScheduler:

    def test_due_in_time_order(self):
        sch = Scheduler()
        sch.schedule(2.0, 330.0, "quarter")
        sch.schedule(1.0, 220.0, "quarter")
        sch.schedule(5.0, 440.0, "quarter")
        assert [t.frequency for t in sch.due(2.0)] == [220.0, 330.0]
        assert len(sch) == 1

    def test_equal_times_keep_insertion_order(self):
        sch = Scheduler()
        sch.schedule(1.0, 1.0, "quarter")
        sch.schedule(1.0, 2.0, "quarter")
        assert [t.frequency for t in sch.due(1.0)] == [1.0, 2.0]

    def test_cancel_all(self):
        sch = Scheduler()
        sch.schedule(1.0, 1.0, "quarter")
        assert sch.cancel_all() == 1
        assert list(sch.due(99.0)) == []


class TestReadiness:

    def test_trigger_before_ready_initialises_first(self, synth):
        assert not synth.ready
        synth.trigger(261.63, "eighth")
        assert synth.ready
        assert synth.played == [(261.63, 0.25)]

    def test_init_runs_once(self, synth):
        synth.ensure_ready()
        synth.ensure_ready()
        synth.trigger(440.0)
        assert synth.init_calls == 1

    def test_failed_init_is_silent(self, monkeypatch):
        def boom():
            raise RuntimeError("no device")
        monkeypatch.setattr(pygame.midi, "init", boom)
        s = Synth(AudioConfig(backend="midi"))
        assert s.ensure_ready() is False
        assert s.trigger(440.0) is None
        s.update()


class TestScheduling:

    def test_future_trigger_is_scheduled(self, synth, clock):
        t = synth.trigger(440.0, "quarter", at_time=clock.t + 0.5)
        assert t is not None
        assert synth.played == []
        clock.t += 0.5
        synth.update()
        assert synth.played == [(440.0, 0.5)]

    def test_past_trigger_plays_now(self, synth, clock):
        assert synth.trigger(440.0, "quarter", at_time=clock.t - 1) is None
        assert len(synth.played) == 1

    def test_cancel_pending(self, synth, clock):
        synth.trigger(440.0, "quarter", at_time=clock.t + 1)
        synth.trigger(220.0, "quarter", at_time=clock.t + 2)
        assert synth.cancel_pending() == 2
        clock.t += 5
        synth.update()
        assert synth.played == []


class TestRenderWave:

    @pytest.mark.parametrize("waveform", ["sine", "triangle", "square", "saw"])
    def test_shape_and_range(self, waveform):
        buf = render_wave(440.0, 0.25, 8000, waveform, volume=0.5)
        assert buf.dtype == np.int16
        assert buf.shape == (2000,)
        assert np.abs(buf.astype(np.int32)).max() <= int(0.5 * 32767)

    def test_envelope_starts_and_ends_silent(self):
        buf = render_wave(440.0, 0.5, 8000, "square")
        assert buf[0] == 0
        assert abs(int(buf[-1])) <= 1


def test_bad_bpm_is_logged_not_raised(clock, monkeypatch, caplog):
    s = Synth(AudioConfig(), bpm=0, clock=clock)
    monkeypatch.setattr(s, "_init_mixer", lambda: None)
    played = []
    monkeypatch.setattr(s, "_tone", lambda f, sec: RecordedSound(played, f, sec))
    with caplog.at_level("ERROR"):
        s.trigger(261.63, "eighth")
    assert played == []
    assert "Sound trigger failed" in caplog.text
