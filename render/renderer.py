# render/renderer.py
import logging
import pygame
from typing import Optional, Sequence
from config import GridConfig, RenderConfig
from notes.model import GridPosition, Note
from render.svg_export import staff_line_ys, NOTE_RADIUS
from input.shortcuts import COMMANDS

STATUS_H = 36
BTN_PAD_X = 12
BTN_GAP = 10

BG = (250, 250, 247)
INK = (20, 20, 24)
GUIDE = (224, 224, 224)
COLUMN = (240, 240, 240)

class Renderer:
    def __init__(self, cfg: RenderConfig, grid: GridConfig):
        pygame.init()
        self.cfg = cfg
        self.grid = grid
        self.screen = pygame.display.set_mode((cfg.window_w, cfg.window_h))
        pygame.display.set_caption("Staff Sketch")
        self.font = self._load_font(18)
        self.font_small = self._load_font(14)
        self.clock = pygame.time.Clock()
        self.button_rects = {}

    def _load_font(self, size: int):
        try:
            return pygame.font.SysFont(self.cfg.font_name, size)
        except Exception:
            logging.warning("字型載入失敗，改用預設字型：%s", self.cfg.font_name, exc_info=True)
            return pygame.font.Font(None, size + 4)

    def tick(self, fps: Optional[int] = None) -> float:
        return self.clock.tick(fps or self.cfg.fps) / 1000.0

    def begin_frame(self):
        self.screen.fill(BG)

    def end_frame(self):
        pygame.display.flip()

    def button_at(self, pos) -> Optional[str]:
        for label, rect in self.button_rects.items():
            if rect.collidepoint(pos):
                return label
        return None

    def draw_status_bar(self, right_info_text: str = ""):
        pygame.draw.rect(self.screen, (24, 24, 28), (0, 0, self.cfg.window_w, STATUS_H))
        pygame.draw.line(self.screen, (60, 60, 66), (0, STATUS_H), (self.cfg.window_w, STATUS_H), 1)

        x = 10; self.button_rects.clear()
        for label in COMMANDS:
            surf = self.font_small.render(label, True, (220, 220, 230))
            rect = surf.get_rect(); rect.topleft = (x + BTN_PAD_X, (STATUS_H - rect.height)//2)
            box = pygame.Rect(x, 4, rect.width + BTN_PAD_X*2, STATUS_H - 8)
            pygame.draw.rect(self.screen, (40, 40, 46), box, border_radius=6)
            pygame.draw.rect(self.screen, (75, 75, 85), box, 1, border_radius=6)
            self.screen.blit(surf, rect)
            self.button_rects[label] = box
            x += box.width + BTN_GAP

        if right_info_text:
            right = self.font_small.render(right_info_text, True, (180, 180, 190))
            self.screen.blit(right, (self.cfg.window_w - right.get_width() - 10,
                                     (STATUS_H - right.get_height())//2))

    # ------- staff -------
    def draw_staff(self, notes: Sequence[Note]):
        """Full redraw: guides, staff lines, reference label and every note."""
        g = self.grid
        left, right = g.staff_left, g.staff_left + g.staff_width

        for k in range(g.grid_steps + 1):
            if (g.middle_index - k) % 2 != 0:
                y = g.line_y(k)
                pygame.draw.line(self.screen, GUIDE, (left + g.hit_left_inset, y),
                                 (right - g.hit_right_inset, y), 1)

        if g.placement_policy == "auto_column":
            top, bottom = g.staff_top - 10, g.staff_top + 120
            x = g.first_column_x
            while x < right - 50:
                pygame.draw.line(self.screen, COLUMN, (x, top), (x, bottom), 1)
                x += g.column_spacing

        for y in staff_line_ys(g):
            pygame.draw.line(self.screen, INK, (left, y), (right, y), 1)

        label = self.font_small.render("C4", True, (120, 120, 130))
        self.screen.blit(label, (left + 8, g.middle_line_y - label.get_height() // 2))

        for n in notes:
            try:
                self.draw_note(n)
            except Exception:
                logging.error("單一音符繪製失敗，跳過該音符：%r", n, exc_info=True)
                continue

    def draw_note(self, n: Note, color=INK):
        x, y = int(round(n.x)), int(round(n.y))
        pygame.draw.circle(self.screen, color, (x, y), NOTE_RADIUS)
        # ledger lines outside the five staff lines
        lines = staff_line_ys(self.grid)
        gap = lines[1] - lines[0]
        ly = lines[0] - gap
        while ly >= y - 0.5:
            pygame.draw.line(self.screen, INK, (x - 10, ly), (x + 10, ly), 1); ly -= gap
        ly = lines[-1] + gap
        while ly <= y + 0.5:
            pygame.draw.line(self.screen, INK, (x - 10, ly), (x + 10, ly), 1); ly += gap

    def draw_hover(self, pos: Optional[GridPosition]):
        if pos is None:
            return
        pygame.draw.circle(self.screen, (170, 170, 190), (int(pos.x), int(pos.y)), NOTE_RADIUS, 1)
        surf = self.font_small.render(f"{pos.midi_pitch}", True, (150, 150, 165))
        self.screen.blit(surf, (int(pos.x) + NOTE_RADIUS + 4, int(pos.y) - surf.get_height() // 2))

    def hud(self, text: str):
        surf = self.font.render(text, True, (90, 90, 100))
        self.screen.blit(surf, (10, self.cfg.window_h - surf.get_height() - 8))
