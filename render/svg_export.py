# render/svg_export.py
import logging
import xml.etree.ElementTree as ET
from typing import Sequence
from config import GridConfig
from notes.model import Note

log = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
STAFF_LINES = 5
NOTE_RADIUS = 6

def staff_line_ys(cfg: GridConfig):
    """Five staff lines, two semitone steps apart, centred on the middle reference line."""
    gap = 2 * cfg.step_px
    mid = cfg.middle_line_y
    return [mid + (i - STAFF_LINES // 2) * gap for i in range(STAFF_LINES)]

def _fmt(v: float) -> str:
    return f"{v:.2f}".rstrip("0").rstrip(".")

def build_svg(cfg: GridConfig, notes: Sequence[Note], width: int, height: int) -> ET.Element:
    root = ET.Element("svg", {
        "xmlns": SVG_NS, "version": "1.1",
        "width": str(width), "height": str(height),
        "viewBox": f"0 0 {width} {height}",
    })
    ET.SubElement(root, "rect", {"x": "0", "y": "0", "width": str(width),
                                 "height": str(height), "fill": "#ffffff"})

    guides = ET.SubElement(root, "g", {"id": "guides", "stroke": "#e0e0e0", "stroke-width": "0.5"})
    for k in range(cfg.grid_steps + 1):
        if (cfg.middle_index - k) % 2 != 0:
            y = _fmt(cfg.line_y(k))
            ET.SubElement(guides, "line", {
                "x1": _fmt(cfg.staff_left + cfg.hit_left_inset), "y1": y,
                "x2": _fmt(cfg.staff_left + cfg.staff_width - cfg.hit_right_inset), "y2": y,
            })

    staff = ET.SubElement(root, "g", {"id": "staff", "stroke": "#000000", "stroke-width": "1"})
    for y in staff_line_ys(cfg):
        ET.SubElement(staff, "line", {
            "x1": _fmt(cfg.staff_left), "y1": _fmt(y),
            "x2": _fmt(cfg.staff_left + cfg.staff_width), "y2": _fmt(y),
        })

    group = ET.SubElement(root, "g", {"id": "notes", "fill": "#000000"})
    for n in notes:
        try:
            el = ET.SubElement(group, "circle", {
                "cx": _fmt(n.x), "cy": _fmt(n.y), "r": str(NOTE_RADIUS),
                "data-midi": str(int(n.midi_pitch)),
            })
            ET.SubElement(el, "title").text = n.label
        except Exception:
            log.error("Skipping note in SVG export: %r", n, exc_info=True)
    return root

def svg_to_string(root: ET.Element) -> str:
    return ET.tostring(root, encoding="unicode")

def export_svg(path: str, cfg: GridConfig, notes: Sequence[Note], width: int, height: int) -> str:
    root = build_svg(cfg, notes, width, height)
    ET.ElementTree(root).write(path, encoding="utf-8", xml_declaration=True)
    log.info("Exported SVG with %d notes to %s", len(notes), path)
    return path
