# audio/synth.py
import heapq, logging, time
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
import pygame
import pygame.midi
import pygame.sndarray

from config import AudioConfig
from notes.pitch import duration_seconds, frequency_to_midi
from timeline.scheduler import Scheduler, Trigger

log = logging.getLogger(__name__)

DRUM_CH = 9  # GM: ch10(索引9)為打擊，避免使用
ATTACK_S = 0.005
RELEASE_FRAC = 0.3

def render_wave(frequency: float, seconds: float, sample_rate: int,
                waveform: str = "triangle", volume: float = 0.4) -> np.ndarray:
    """Mono int16 buffer with a short attack and a linear release."""
    n = max(1, int(sample_rate * seconds))
    t = np.arange(n, dtype=np.float64) / sample_rate
    phase = 2.0 * np.pi * frequency * t
    if waveform == "sine":
        wave = np.sin(phase)
    elif waveform == "square":
        wave = np.sign(np.sin(phase))
    elif waveform == "saw":
        cyc = t * frequency
        wave = 2.0 * (cyc - np.floor(0.5 + cyc))
    else:
        wave = (2.0 / np.pi) * np.arcsin(np.sin(phase))

    env = np.ones(n, dtype=np.float64)
    a = min(n, max(1, int(sample_rate * ATTACK_S)))
    env[:a] = np.linspace(0.0, 1.0, a)
    r = min(n - a, int(n * RELEASE_FRAC))
    if r > 0:
        env[n - r:] = np.linspace(1.0, 0.0, r)

    vol = max(0.0, min(1.0, volume))
    return (wave * env * vol * 32767).astype(np.int16)

class Synth:
    """
    Sound trigger with a one-time readiness gate:
    - ensure_ready(): initialise mixer / MIDI out once; failure -> silent mode
    - trigger(freq, duration, at_time=None): play now, or schedule for later
    - update(): fire due triggers and pending MIDI note-offs (call once per frame)
    """
    def __init__(self, cfg: AudioConfig, bpm: float = 120.0,
                 clock: Callable[[], float] = time.perf_counter):
        self.cfg = cfg
        self.bpm = bpm
        self.clock = clock
        self.scheduler = Scheduler()

        self._init_done = False
        self.ready = False
        self.midi_out = None
        self.sample_rate = cfg.sample_rate
        self.mixer_channels = 1

        self.channels = [ch for ch in range(16) if ch != DRUM_CH]
        self._rr_index = 0
        self._offs: List[Tuple[float, int, int]] = []  # (end, pitch, ch)
        self._cache: Dict[Tuple[float, int], "pygame.mixer.Sound"] = {}

    def now(self) -> float:
        return self.clock()

    # ---------- readiness ----------
    def ensure_ready(self) -> bool:
        if self._init_done:
            return self.ready
        self._init_done = True
        try:
            if self.cfg.backend == "midi":
                self._init_midi()
            else:
                self._init_mixer()
            self.ready = True
            log.info("Audio ready (backend=%s)", self.cfg.backend)
        except Exception as e:
            self.ready = False
            log.warning("Audio init failed, running silent: %s", e)
        return self.ready

    def _init_mixer(self):
        if not pygame.mixer.get_init():
            pygame.mixer.pre_init(self.cfg.sample_rate, -16, 2, 512)
            pygame.mixer.init()
        freq, _fmt, channels = pygame.mixer.get_init()
        self.sample_rate = freq
        self.mixer_channels = channels

    def _init_midi(self):
        pygame.midi.init()
        dev = self.cfg.midi_device
        if dev is None:
            dev = pygame.midi.get_default_output_id()
        if dev == -1:
            pygame.midi.quit()
            raise RuntimeError("No MIDI output device found")
        self.midi_out = pygame.midi.Output(dev)
        for ch in self.channels:
            self.midi_out.set_instrument(self.cfg.midi_program, ch)
        log.info("Using system MIDI out (device %d)", dev)

    # ---------- triggering ----------
    def trigger(self, frequency: float, duration: str = "eighth",
                at_time: Optional[float] = None) -> Optional[Trigger]:
        self.ensure_ready()
        if at_time is not None and at_time > self.now():
            return self.scheduler.schedule(at_time, frequency, duration)
        self._sound(frequency, duration)
        return None

    def cancel_pending(self) -> int:
        n = self.scheduler.cancel_all()
        if n:
            log.debug("Cancelled %d pending triggers", n)
        return n

    def update(self, now: Optional[float] = None):
        now = self.now() if now is None else now
        for t in self.scheduler.due(now):
            self._sound(t.frequency, t.duration)
        while self._offs and self._offs[0][0] <= now:
            _, pitch, ch = heapq.heappop(self._offs)
            try: self.midi_out.note_off(pitch, 0, ch)
            except Exception: log.debug("note_off failed for %d", pitch, exc_info=True)

    def _sound(self, frequency: float, duration: str):
        if not self.ready:
            return
        try:
            seconds = duration_seconds(duration, self.bpm)
            if self.midi_out is not None:
                self._midi_note(frequency, seconds)
            else:
                self._tone(frequency, seconds).play()
        except Exception:
            log.error("Sound trigger failed (%.2f Hz)", frequency, exc_info=True)

    def _tone(self, frequency: float, seconds: float):
        key = (round(frequency, 3), int(seconds * 1000))
        snd = self._cache.get(key)
        if snd is None:
            mono = render_wave(frequency, seconds, self.sample_rate, self.cfg.waveform, self.cfg.volume)
            arr = np.ascontiguousarray(np.column_stack([mono] * self.mixer_channels)) \
                if self.mixer_channels > 1 else mono
            snd = pygame.sndarray.make_sound(arr)
            self._cache[key] = snd
        return snd

    def _alloc_channel(self) -> int:
        ch = self.channels[self._rr_index % len(self.channels)]
        self._rr_index += 1
        return ch

    def _midi_note(self, frequency: float, seconds: float):
        pitch = max(0, min(127, frequency_to_midi(frequency)))
        ch = self._alloc_channel()
        self.midi_out.note_on(pitch, 100, ch)
        heapq.heappush(self._offs, (self.now() + seconds, pitch, ch))

    def close(self):
        self.cancel_pending()
        if self.midi_out is not None:
            for _, pitch, ch in self._offs:
                try: self.midi_out.note_off(pitch, 0, ch)
                except Exception: pass
            self._offs.clear()
            try:
                self.midi_out.close()
            except Exception:
                log.debug("MIDI close failed", exc_info=True)
            self.midi_out = None
            pygame.midi.quit()
        elif self.ready:
            pygame.mixer.quit()
        self._cache.clear()
        self.ready = False
        self._init_done = False
