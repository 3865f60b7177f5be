# app.py
import logging, os
import pygame
from typing import Dict, List, Optional
from config import AppConfig
from notes.grid import PitchGridModel
from notes.model import GridPosition, Note
from render.renderer import Renderer, STATUS_H
from render.svg_export import export_svg
from audio.synth import Synth
from midi.writer import write_midi
from input.bounds import in_staff_area
from input.shortcuts import (DEFAULT_SHORTCUTS, CLEAR, PLAY, EXPORT_SVG, EXPORT_MIDI, QUIT,
                             parse_shortcuts, describe_shortcuts)
from utils.crashlog import log_exception

log = logging.getLogger(__name__)

SVG_NAME = "staff-sketch.svg"
MIDI_NAME = "staff-sketch.mid"

def save_file_dialog(title: str, default_ext: str, initial: str,
                     patterns: list[tuple[str, str]]) -> Optional[str]:
    """Chosen path, "" if cancelled, None if no dialog is available."""
    try:
        import tkinter as tk
        from tkinter import filedialog
        root = tk.Tk(); root.withdraw()
        file = filedialog.asksaveasfilename(title=title, defaultextension=default_ext,
                                            initialfile=initial, filetypes=patterns)
        root.update(); root.destroy()
        return file or ""
    except Exception:
        log.debug("save dialog unavailable", exc_info=True)
        return None

class App:
    def __init__(self, cfg: AppConfig, renderer: Optional[Renderer] = None,
                 synth: Optional[Synth] = None, model: Optional[PitchGridModel] = None):
        self.cfg = cfg
        self.model = model or PitchGridModel(cfg.grid)
        self.renderer = renderer or Renderer(cfg.render, cfg.grid)
        self.synth = synth or Synth(cfg.audio, bpm=cfg.playback.bpm)
        self.shortcuts: Dict[int, str] = dict(DEFAULT_SHORTCUTS)
        if cfg.shortcuts:
            self.shortcuts.update(parse_shortcuts(cfg.shortcuts))
        self._keys_text = describe_shortcuts(self.shortcuts)

        self.running = False
        self.hover: Optional[GridPosition] = None

        # UI 訊息（toast）
        self._msg = ""
        self._msg_time = 0.0

    # ---------- UI 訊息 ----------
    def _toast(self, msg: str, secs: float = 4.0):
        self._msg = msg
        self._msg_time = max(self._msg_time, secs)

    @property
    def notes(self) -> List[Note]:
        return self.model.notes

    # ---------- commands ----------
    def place_note(self, x: float, y: float) -> Optional[Note]:
        """Clicks outside the staff area are ignored."""
        if not in_staff_area(self.cfg.grid, x, y):
            return None
        pos = self.model.resolve_position(x, y)
        note = self.model.add_note(x, y, pos)
        self.synth.trigger(note.frequency, self.cfg.playback.click_duration)
        self.redraw()
        return note

    def clear(self):
        self.synth.cancel_pending()
        self.model.clear_all()
        self.redraw()

    def play_sequence(self) -> bool:
        seq = self.model.playback_order()
        if not seq:
            return False
        self.synth.cancel_pending()
        self.synth.ensure_ready()
        t0 = self.synth.now()
        for i, n in enumerate(seq):
            self.synth.trigger(n.frequency, self.cfg.playback.sequence_duration,
                               at_time=t0 + i * self.cfg.playback.interval_s)
        log.info("Playing %d notes", len(seq))
        return True

    def export_svg(self, path: Optional[str] = None) -> Optional[str]:
        path = path or os.path.join(self.cfg.export_dir, SVG_NAME)
        try:
            out = export_svg(path, self.cfg.grid, self.model.notes,
                             self.cfg.render.window_w, self.cfg.render.window_h)
        except OSError as e:
            log_exception("export_svg", e)
            log.error("SVG export failed: %s", e)
            self._toast("SVG export failed (see logs)", 6.0)
            return None
        self._toast(f"Saved {os.path.basename(out)} ✓", 2.0)
        return out

    def export_midi(self, path: Optional[str] = None) -> Optional[str]:
        seq = self.model.playback_order()
        if not seq:
            return None
        path = path or os.path.join(self.cfg.export_dir, MIDI_NAME)
        pb = self.cfg.playback
        try:
            out = write_midi(path, seq, bpm=pb.bpm, interval_s=pb.interval_s,
                             duration=pb.sequence_duration, program=self.cfg.audio.midi_program)
        except (OSError, ValueError) as e:
            log_exception("export_midi", e)
            log.error("MIDI export failed: %s", e)
            self._toast("MIDI export failed (see logs)", 6.0)
            return None
        log.info("Exported MIDI with %d notes to %s", len(seq), out)
        self._toast(f"Saved {os.path.basename(out)} ✓", 2.0)
        return out

    def _export_interactive(self, kind: str):
        if kind == EXPORT_SVG:
            path = save_file_dialog("Export SVG", ".svg", SVG_NAME, [("SVG", "*.svg"), ("All files", "*.*")])
        else:
            path = save_file_dialog("Export MIDI", ".mid", MIDI_NAME, [("MIDI", "*.mid"), ("All files", "*.*")])
        if path == "":
            return None
        return self.export_svg(path) if kind == EXPORT_SVG else self.export_midi(path)

    def run_command(self, cmd: str):
        if cmd == CLEAR:
            self.clear()
        elif cmd == PLAY:
            self.play_sequence()
        elif cmd in (EXPORT_SVG, EXPORT_MIDI):
            self._export_interactive(cmd)
        elif cmd == QUIT:
            self.running = False

    # ---------- events ----------
    def handle_event(self, e):
        if e.type == pygame.QUIT:
            self.running = False
        elif e.type == pygame.KEYDOWN and e.key in self.shortcuts:
            self.run_command(self.shortcuts[e.key])
        elif e.type == pygame.MOUSEMOTION:
            mx, my = e.pos
            self.hover = self.model.preview_position(mx, my) \
                if in_staff_area(self.cfg.grid, mx, my) else None
        elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            mx, my = e.pos
            if my <= STATUS_H:
                label = self.renderer.button_at((mx, my))
                if label:
                    self.run_command(label)
            else:
                self.place_note(mx, my)

    # ---------- drawing ----------
    def redraw(self):
        self.renderer.begin_frame()
        right = f"NOTES: {len(self.model)}  ORDER: {self.cfg.grid.playback_order}"
        if self._msg:
            right += f"  |  {self._msg}"
        self.renderer.draw_status_bar(right_info_text=right)
        self.renderer.draw_staff(self.model.notes)
        self.renderer.draw_hover(self.hover)
        self.renderer.hud(self._keys_text)
        self.renderer.end_frame()

    # ---------- Main loop ----------
    def run(self):
        self.running = True
        self.synth.ensure_ready()
        try:
            while self.running:
                dt = self.renderer.tick()
                for e in pygame.event.get():
                    self.handle_event(e)
                    if not self.running:
                        break
                if not self.running:
                    break

                # ===== 訊息倒數（toast） =====
                if self._msg_time > 0:
                    self._msg_time -= dt
                    if self._msg_time <= 0:
                        self._msg_time = 0
                        self._msg = ""

                self.synth.update()
                self.redraw()
        finally:
            self.synth.close()
            pygame.quit()
