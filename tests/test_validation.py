"""Tests for diagram validation."""

import json
import os

from tikzsketch.models import (
    CheckResult, DiagramGraph, DotConnection, FreeConnection, MorphismConnection,
    RoutedEdge, Severity, ValidationReport,
)
from tikzsketch.pipeline import build_diagram
from tikzsketch.validate.report import format_check_result, generate_report, summarize_report
from tikzsketch.validate.rules import (
    build_connection_graph, check_connections_resolve, check_dangling_wires,
    check_isolated_nodes, check_wire_endpoints_preserved, run_validation,
)
from tikzsketch.wires.simplify import simplify_wire
from helpers import circle_points, make_dot, make_wire


def _graph(dots=(), morphisms=(), wires=(), edges=()):
    return DiagramGraph(
        diagram_id="diagram_test",
        width=100,
        height=100,
        dots=list(dots),
        morphisms=list(morphisms),
        wires=list(wires),
        edges=list(edges),
    )


def _edge(annotated, route=None):
    return RoutedEdge(
        wire_index=annotated.wire.index,
        begin=annotated.begin,
        end=annotated.end,
        route=route or simplify_wire(annotated.wire.path),
    )


class TestRules:
    """Tests for individual checks."""

    def test_clean_diagram_passes(self, simple_diagram_paths):
        report = run_validation(build_diagram(simple_diagram_paths, 400, 400))

        assert not report.has_errors
        assert report.warning_count == 0
        assert all(c.passed for c in report.checks)

    def test_unresolved_connection(self):
        wire = make_wire(0, [[0, 0], [10, 0]], DotConnection(index=3), FreeConnection(point=[10, 0]))
        result = check_connections_resolve(_graph(wires=[wire]))

        assert not result.passed
        assert result.severity == Severity.ERROR
        assert result.evidence["unresolved"] == ["wire 0 begin -> d3"]

    def test_missing_morphism(self):
        wire = make_wire(0, [[0, 0], [10, 0]], FreeConnection(point=[0, 0]), MorphismConnection(index=0))
        assert not check_connections_resolve(_graph(wires=[wire])).passed

    def test_lost_endpoint(self):
        wire = make_wire(0, [[0, 0], [10, 0], [20, 0]], FreeConnection(point=[0, 0]), FreeConnection(point=[20, 0]))
        truncated = simplify_wire([[0, 0], [10, 0]])
        result = check_wire_endpoints_preserved(_graph(wires=[wire], edges=[_edge(wire, truncated)]))

        assert not result.passed
        assert result.evidence["wire_indices"] == [0]

    def test_dangling_wire_warns(self):
        wire = make_wire(0, [[0, 0], [10, 0]], FreeConnection(point=[0, 0]), FreeConnection(point=[10, 0]))
        result = check_dangling_wires(_graph(wires=[wire]))

        assert not result.passed
        assert result.severity == Severity.WARN

    def test_isolated_dot(self):
        dot = make_dot(0, circle_points(50, 50, 5))
        result = check_isolated_nodes(_graph(dots=[dot]))

        assert not result.passed
        assert result.severity == Severity.INFO
        assert result.evidence["nodes"] == ["d0"]

    def test_free_endpoints_are_not_isolated(self):
        wire = make_wire(0, [[0, 0], [10, 0]], FreeConnection(point=[0, 0]), FreeConnection(point=[10, 0]))
        assert check_isolated_nodes(_graph(wires=[wire], edges=[_edge(wire)])).passed


class TestConnectionGraph:
    """Tests for the networkx connection view."""

    def test_nodes_and_edges(self, simple_diagram_paths):
        g = build_connection_graph(build_diagram(simple_diagram_paths, 400, 400))

        assert set(g.nodes) == {"d0", "m0"}
        assert g.number_of_edges() == 1
        assert g.has_edge("d0", "m0")

    def test_free_ends_become_nodes(self):
        wire = make_wire(2, [[0, 0], [10, 0]], FreeConnection(point=[0, 0]), FreeConnection(point=[10, 0]))
        g = build_connection_graph(_graph(wires=[wire], edges=[_edge(wire)]))

        assert set(g.nodes) == {"w2.begin", "w2.end"}


class TestReport:
    """Tests for report output."""

    def test_format_check_result(self):
        check = CheckResult(rule_id="dangling_wires", severity=Severity.WARN, passed=False, message="1 wires")
        assert format_check_result(check) == "[FAIL][WARN] dangling_wires: 1 wires"

    def test_summary_lists_issues(self):
        report = ValidationReport(checks=[
            CheckResult(rule_id="a", severity=Severity.ERROR, passed=True, message="ok"),
            CheckResult(rule_id="b", severity=Severity.WARN, passed=False, message="bad"),
        ])
        lines = summarize_report(report)

        assert "Failed: 1" in lines
        assert "[WARN] b: bad" in lines

    def test_generate_report_writes_files(self, temp_dir, simple_diagram_paths):
        report = run_validation(build_diagram(simple_diagram_paths, 400, 400))

        report_path, summary_path = generate_report(report, temp_dir)

        assert os.path.exists(summary_path)
        with open(report_path, encoding="utf-8") as f:
            data = json.load(f)
        assert [c["rule_id"] for c in data["checks"]] == [
            "connections_resolve", "wire_endpoints_preserved", "dangling_wires", "isolated_nodes",
        ]
