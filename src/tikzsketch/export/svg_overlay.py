"""
Debug overlay of a classified diagram in screen coordinates.

Draws the raw strokes colour-coded by kind with their node ids, plus each
wire's simplified route, so classification and routing can be checked
against the sketch by eye.
"""

import svgwrite

from tikzsketch.tracer import get_tracer, trace

DOT_COLOR = "#1f77b4"
MORPHISM_COLOR = "#2ca02c"
WIRE_COLOR = "#999999"
ROUTE_COLOR = "#d62728"


def _points(path):
    return [(float(p[0]), float(p[1])) for p in path]


@trace(label="emit_overlay_svg")
def emit_overlay_svg(graph, stroke_width=1.5):
    """
    Create an SVG overlay of a DiagramGraph.

    Args:
        graph: DiagramGraph
        stroke_width: line width in pixels

    Returns:
        svgwrite.Drawing object
    """
    tracer = get_tracer()

    dwg = svgwrite.Drawing(size=(f"{graph.width}px", f"{graph.height}px"))
    dwg.viewbox(0, 0, graph.width, graph.height)

    dots = dwg.g(id="dots", fill="none", stroke=DOT_COLOR, stroke_width=stroke_width)
    for dot in graph.dots:
        dots.add(dwg.polygon(_points(dot.path), id=dot.node_id))
        dots.add(dwg.text(dot.node_id, insert=_points([dot.centroid])[0], fill=DOT_COLOR, stroke="none"))

    morphisms = dwg.g(id="morphisms", fill="none", stroke=MORPHISM_COLOR, stroke_width=stroke_width)
    for morphism in graph.morphisms:
        morphisms.add(dwg.polygon(_points(morphism.path), id=morphism.node_id))
        morphisms.add(dwg.text(
            morphism.node_id, insert=_points([morphism.centroid])[0], fill=MORPHISM_COLOR, stroke="none",
        ))

    wires = dwg.g(id="wires", fill="none", stroke=WIRE_COLOR, stroke_width=stroke_width)
    for annotated in graph.wires:
        wires.add(dwg.polyline(_points(annotated.wire.path), id=f"w{annotated.wire.index}"))

    routes = dwg.g(id="routes", fill="none", stroke=ROUTE_COLOR, stroke_width=stroke_width)
    for edge in graph.edges:
        corners = _points([wp.point for wp in edge.route.points])
        routes.add(dwg.polyline(corners, id=f"r{edge.wire_index}"))
        for corner in corners:
            routes.add(dwg.circle(center=corner, r=2 * stroke_width, fill=ROUTE_COLOR))

    for group in (wires, routes, dots, morphisms):
        dwg.add(group)

    tracer.event(f"Overlay emitted: {len(graph.dots) + len(graph.morphisms)} nodes, {len(graph.edges)} routes")

    return dwg
