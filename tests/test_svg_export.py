"""
Tests for SVG export.
"""

import xml.etree.ElementTree as ET

from config import GridConfig
from notes.grid import PitchGridModel
from render.svg_export import build_svg, export_svg, staff_line_ys, svg_to_string, SVG_NS


def _q(tag):
    return f"{{{SVG_NS}}}{tag}"


class TestStaffGeometry:

    def test_five_lines_centred_on_middle_line(self):
        ys = staff_line_ys(GridConfig())
        assert ys == [106, 118, 130, 142, 154]


class TestBuildSvg:

    def test_document_structure(self):
        model = PitchGridModel()
        model.add_note(300, 130)
        model.add_note(300, 100)
        root = ET.fromstring(svg_to_string(build_svg(model.cfg, model.notes, 800, 340)))
        assert root.tag == _q("svg")
        assert root.get("viewBox") == "0 0 800 340"
        groups = {g.get("id"): g for g in root.findall(_q("g"))}
        assert len(groups["staff"].findall(_q("line"))) == 5
        # guides on odd semitone offsets: 8 of the 17 grid lines
        assert len(groups["guides"].findall(_q("line"))) == 8
        circles = groups["notes"].findall(_q("circle"))
        assert [(c.get("cx"), c.get("cy")) for c in circles] == [("170", "130"), ("230", "100")]
        assert circles[1].find(_q("title")).text == "F4"

    def test_write_file(self, tmp_path):
        path = export_svg(str(tmp_path / "out.svg"), GridConfig(), [], 800, 340)
        with open(path, encoding="utf-8") as f:
            head = f.read(100)
        assert head.startswith("<?xml")
