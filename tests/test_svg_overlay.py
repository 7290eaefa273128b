"""Tests for the debug SVG overlay."""

import os

from tikzsketch.export.svg_overlay import emit_overlay_svg
from tikzsketch.io.save_artifacts import save_svg
from tikzsketch.pipeline import build_diagram


class TestOverlay:
    """Tests for overlay content."""

    def test_groups_and_ids(self, simple_diagram_paths):
        svg = emit_overlay_svg(build_diagram(simple_diagram_paths, 400, 400)).tostring()

        for group_id in ("dots", "morphisms", "wires", "routes"):
            assert f'id="{group_id}"' in svg
        for element_id in ("d0", "m0", "w0", "r0"):
            assert f'id="{element_id}"' in svg

    def test_empty_diagram(self):
        svg = emit_overlay_svg(build_diagram([], 100, 100)).tostring()
        assert "<polygon" not in svg
        assert "<polyline" not in svg

    def test_saved_file(self, temp_dir, simple_diagram_paths):
        path = os.path.join(temp_dir, "overlay.svg")
        save_svg(emit_overlay_svg(build_diagram(simple_diagram_paths, 400, 400)), path)

        with open(path, encoding="utf-8") as f:
            assert f.read().startswith("<svg")
