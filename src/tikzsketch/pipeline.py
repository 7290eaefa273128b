"""
Main pipeline orchestrator for tikzsketch.

Runs classification, connection, wire simplification, anchoring and TikZ
emission in order. ``build_diagram`` and ``render_diagram`` are pure and
hold no state between calls; ``run_pipeline`` wraps them with file I/O.
"""

import os
from typing import List

from pydantic import TypeAdapter

from tikzsketch.config import load_config
from tikzsketch.export.svg_overlay import emit_overlay_svg
from tikzsketch.export.tikz_emit import emit_tikz
from tikzsketch.io.load_strokes import filter_paths, load_strokes, validate_stroke_inputs
from tikzsketch.io.save_artifacts import DebugArtifactWriter, ensure_dir, save_json, save_text
from tikzsketch.models import DiagramGraph, Shape, generate_diagram_id
from tikzsketch.shapes.classify import classify_paths
from tikzsketch.shapes.connect import connect_wires
from tikzsketch.tracer import get_tracer, trace
from tikzsketch.validate.report import generate_report
from tikzsketch.validate.rules import run_validation
from tikzsketch.wires.anchor import anchor_edges
from tikzsketch.wires.simplify import simplify_wires

SHAPE_LIST = TypeAdapter(List[Shape])


@trace(label="build_diagram")
def build_diagram(paths, width, height, config=None):
    """
    Turn finished strokes into a diagram graph.

    Args:
        paths: list of paths, each a list of [x, y] screen-space points
        width: drawing surface width in pixels
        height: drawing surface height in pixels
        config: PipelineConfig (defaults when omitted)

    Returns:
        DiagramGraph
    """
    tracer = get_tracer()

    if config is None:
        config = load_config()

    paths = filter_paths(paths)

    with tracer.span("classify", module="pipeline"):
        dots, morphisms, wires = classify_paths(paths, config)

    with tracer.span("connect", module="pipeline"):
        annotated = connect_wires(wires, dots, morphisms, config)

    with tracer.span("route", module="pipeline"):
        routes = simplify_wires(annotated, config)
        edges = anchor_edges(annotated, routes, morphisms)

    return DiagramGraph(
        diagram_id=generate_diagram_id(paths, width, height),
        width=width,
        height=height,
        dots=dots,
        morphisms=morphisms,
        wires=annotated,
        edges=edges,
    )


def render_diagram(graph, config=None):
    """Serialize a DiagramGraph to TikZ source."""
    if config is None:
        config = load_config()
    return emit_tikz(graph, config.output)


def sketch_to_tikz(paths, width, height, config=None):
    """Strokes in, TikZ source out."""
    if config is None:
        config = load_config()
    return render_diagram(build_diagram(paths, width, height, config), config)


@trace(label="run_pipeline", arg_names=("input_path", "out_dir"))
def run_pipeline(input_path, out_dir, config=None, config_path=None, debug=False):
    """
    Run the full pipeline on a stroke file.

    Writes diagram.tex, scene.json, validation_report.json and
    validation_summary.txt into out_dir.

    Args:
        input_path: JSON stroke file or SVG drawing
        out_dir: output directory
        config: PipelineConfig object (optional)
        config_path: path to YAML config file (optional)
        debug: enable debug artifact generation

    Returns:
        tuple of (DiagramGraph, ValidationReport)
    """
    tracer = get_tracer()

    if config is None:
        config = load_config(config_path)

    debug = debug or config.debug.enabled

    errors = validate_stroke_inputs(input_path)
    if errors:
        for error in errors:
            tracer.event(error, level="ERROR")
        raise ValueError(f"Input validation failed: {errors}")

    ensure_dir(out_dir)

    strokes = load_strokes(input_path)
    graph = build_diagram(strokes.paths, strokes.width, strokes.height, config)
    tikz = render_diagram(graph, config)

    with tracer.span("validate_export", module="pipeline"):
        report = run_validation(graph)

        save_text(tikz, os.path.join(out_dir, "diagram.tex"))
        save_json(graph, os.path.join(out_dir, "scene.json"))
        generate_report(report, out_dir)

    if debug:
        _write_debug_artifacts(graph, out_dir)

    tracer.event(
        f"Pipeline complete: {len(graph.dots)} dots, {len(graph.morphisms)} morphisms, "
        f"{len(graph.edges)} edges"
    )
    tracer.event(f"Slowest spans: {tracer.timing_summary()}", level="DEBUG")

    return graph, report


def _write_debug_artifacts(graph, out_dir):
    """Dump per-stage intermediate results under debug/<diagram_id>/."""
    writer = DebugArtifactWriter(out_dir, graph.diagram_id, enabled=True)

    shapes = sorted(
        [*graph.dots, *graph.morphisms, *(a.wire for a in graph.wires)],
        key=lambda s: s.shape_id,
    )
    writer.save_json(SHAPE_LIST.dump_python(shapes, mode="json"), "classify", "shapes.json")

    connections = [
        {
            "wire": a.wire.index,
            "begin": a.begin.model_dump(mode="json"),
            "end": a.end.model_dump(mode="json"),
        }
        for a in graph.wires
    ]
    writer.save_json(connections, "connect", "connections.json")

    routes = [e.model_dump(mode="json") for e in graph.edges]
    writer.save_json(routes, "route", "edges.json")
    writer.save_svg(emit_overlay_svg(graph), "route", "overlay.svg")
