"""
TikZ emission for tikzsketch.

Writes dots, then morphisms, then one draw statement per routed edge.
Screen coordinates are mapped onto a scale x scale TikZ canvas with y
flipped and snapped to the grid.
"""

from tikzsketch.geometry.snapping import format_number, round_to_grid
from tikzsketch.tracer import get_tracer, trace


def transform_point(point, width, height, grid=0.5, scale=10.0):
    """
    Map a screen-space point to grid-snapped TikZ coordinates.

    Returns (x, y) floats.
    """
    x = round_to_grid(point[0] * scale / width, grid)
    y = round_to_grid(scale - point[1] * scale / height, grid)
    return x, y


def format_coords(point, width, height, output_config):
    """TikZ coordinate text "x, y" for a screen-space point."""
    x, y = transform_point(point, width, height, output_config.grid, output_config.scale)
    return f"{format_number(x)}, {format_number(y)}"


def preamble(output_config):
    """Lines opening the standalone document and picture."""
    return [
        f"\\documentclass{{{output_config.document_class}}}",
        f"\\usepackage{{{output_config.tikz_package}}}",
        "\\begin{document}",
        "\\begin{tikzpicture}",
    ]


def postamble():
    """Lines closing the picture and document."""
    return ["\\end{tikzpicture}", "\\end{document}"]


def dot_statement(dot, width, height, output_config):
    coords = format_coords(dot.centroid, width, height, output_config)
    return f"  \\node[dot] ({dot.node_id}) at ({coords}) {{}};"


def morphism_statement(morphism, width, height, output_config):
    coords = format_coords(morphism.centroid, width, height, output_config)
    style = f"morphism{morphism.orientation.style_suffix}"
    return f"  \\node[{style}] ({morphism.node_id}) at ({coords}) {{{morphism.node_id}}};"


def edge_statement(edge, width, height, output_config):
    """
    Draw statement chaining through every corner of the edge's route.

    Attached endpoints use their anchor reference; free endpoints and all
    interior corners are written as coordinates.
    """
    points = edge.route.points

    def reference(anchor, wire_point):
        if anchor is not None:
            return anchor
        return format_coords(wire_point.point, width, height, output_config)

    parts = [f"  \\draw ({reference(edge.begin_anchor, points[0])})"]

    for i in range(1, len(points)):
        target = points[i]
        if i == len(points) - 1:
            target_text = reference(edge.end_anchor, target)
        else:
            target_text = format_coords(target.point, width, height, output_config)
        out_angle = format_number(points[i - 1].out_angle)
        in_angle = format_number(target.in_angle)
        parts.append(f" to[out={out_angle}, in={in_angle}] ({target_text})")

    parts.append(";")
    return "".join(parts)


@trace(label="emit_tikz")
def emit_tikz(graph, output_config):
    """
    Serialize a DiagramGraph to TikZ source.

    Args:
        graph: DiagramGraph
        output_config: OutputConfig

    Returns:
        TikZ document text without a trailing newline
    """
    tracer = get_tracer()
    width, height = graph.width, graph.height

    lines = preamble(output_config)
    lines.extend(dot_statement(d, width, height, output_config) for d in graph.dots)
    lines.extend(morphism_statement(m, width, height, output_config) for m in graph.morphisms)
    lines.extend(edge_statement(e, width, height, output_config) for e in graph.edges)
    lines.extend(postamble())

    tracer.event(f"TikZ emitted: {len(graph.dots)} dots, {len(graph.morphisms)} morphisms, {len(graph.edges)} edges")

    return "\n".join(lines)
