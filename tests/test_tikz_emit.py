"""Tests for TikZ emission."""

import pytest

from tikzsketch.config import OutputConfig, PipelineConfig
from tikzsketch.export.tikz_emit import emit_tikz, format_coords, transform_point
from tikzsketch.pipeline import build_diagram, render_diagram, sketch_to_tikz

EXPECTED_SIMPLE = "\n".join([
    "\\documentclass{standalone}",
    "\\usepackage{freetikz}",
    "\\begin{document}",
    "\\begin{tikzpicture}",
    "  \\node[dot] (d0) at (5, 8.5) {};",
    "  \\node[morphism, hvflip] (m0) at (5, 5) {m0};",
    "  \\draw (d0.center) to[out=-90, in=90] (m0.north);",
    "\\end{tikzpicture}",
    "\\end{document}",
])


class TestTransformPoint:
    """Tests for the screen to TikZ coordinate mapping."""

    @pytest.mark.parametrize("point,expected", [
        ([0, 0], (0, 10)),
        ([100, 100], (10, 0)),
        ([50, 25], (5, 7.5)),
        ([37, 0], (3.5, 10)),
    ])
    def test_corners_and_snapping(self, point, expected):
        assert transform_point(point, 100, 100) == pytest.approx(expected)

    def test_non_square_surface(self):
        assert transform_point([200, 50], 400, 100) == pytest.approx((5, 5))

    def test_format_coords(self):
        assert format_coords([50, 25], 100, 100, OutputConfig()) == "5, 7.5"


class TestEmitTikz:
    """Tests for whole-document emission."""

    def test_simple_diagram(self, simple_diagram_paths):
        assert sketch_to_tikz(simple_diagram_paths, 400, 400) == EXPECTED_SIMPLE

    def test_no_trailing_newline(self, simple_diagram_paths):
        assert not sketch_to_tikz(simple_diagram_paths, 400, 400).endswith("\n")

    def test_empty_diagram(self):
        text = sketch_to_tikz([], 100, 100)
        assert text.splitlines() == [
            "\\documentclass{standalone}",
            "\\usepackage{freetikz}",
            "\\begin{document}",
            "\\begin{tikzpicture}",
            "\\end{tikzpicture}",
            "\\end{document}",
        ]

    def test_rendering_is_repeatable(self, simple_diagram_paths):
        graph = build_diagram(simple_diagram_paths, 400, 400)
        assert render_diagram(graph) == render_diagram(graph)

    def test_free_wire_uses_coordinates(self):
        text = sketch_to_tikz([[[10, 50], [90, 50]]], 100, 100)
        assert "  \\draw (1, 5) to[out=0, in=180] (9, 5);" in text.splitlines()

    def test_interior_corners_are_chained(self):
        path = [[0, 0], [10, 0], [20, 10], [30, 20], [40, 20], [50, 20], [50, 30], [50, 40]]
        text = sketch_to_tikz([path], 100, 100)
        assert "  \\draw (0, 10) to[out=0, in=180] (4, 8) to[out=0, in=90] (5, 6);" in text.splitlines()

    def test_statement_order(self, simple_diagram_paths):
        lines = sketch_to_tikz(simple_diagram_paths, 400, 400).splitlines()
        kinds = [line.strip().split("[")[0].split()[0] for line in lines[4:-2]]
        assert kinds == ["\\node", "\\node", "\\draw"]

    def test_configurable_document(self, simple_diagram_paths):
        config = PipelineConfig()
        config.output.document_class = "article"
        config.output.tikz_package = "tikz"
        graph = build_diagram(simple_diagram_paths, 400, 400, config)

        lines = emit_tikz(graph, config.output).splitlines()

        assert lines[0] == "\\documentclass{article}"
        assert lines[1] == "\\usepackage{tikz}"
