"""
Anchor selection on morphism boundaries.

When several wires enter a morphism from the same side they are spread
over that side's compass anchors instead of all meeting at one point.
Only north and south are distinguished; any layout not covered by the
one/two/three-per-side rules falls back to the raw snapped angle.
"""

from tikzsketch.geometry.snapping import format_number
from tikzsketch.models import RoutedEdge
from tikzsketch.tracer import get_tracer, trace


def count_side_connections(morphism_index, centre, annotated_wires):
    """
    Count wire endpoints attached to a morphism from above and below.

    An endpoint is on the north side when it lies above the centroid
    (smaller screen y), otherwise on the south side.

    Returns (north, south).
    """
    north = 0
    south = 0

    for annotated in annotated_wires:
        ends = (
            (annotated.begin, annotated.wire.path[0]),
            (annotated.end, annotated.wire.path[-1]),
        )
        for connection, endpoint in ends:
            if connection.kind != "morphism" or connection.index != morphism_index:
                continue
            if endpoint[1] < centre[1]:
                north += 1
            else:
                south += 1

    return north, south


def _side_anchor(side, count, point, centre, width):
    if count == 1:
        return side
    if count == 2:
        return f"{side} west" if point[0] <= centre[0] else f"{side} east"
    # three: split the box width into thirds around the centroid
    if point[0] < centre[0] - width / 6:
        return f"{side} west"
    if point[0] > centre[0] + width / 6:
        return f"{side} east"
    return side


def morphism_anchor(morphism, point, angle, annotated_wires):
    """
    Pick the compass anchor of a morphism for one wire endpoint.

    Args:
        morphism: MorphismShape the endpoint attaches to
        point: [x, y] endpoint in screen space
        angle: snapped tangent angle at the endpoint
        annotated_wires: every AnnotatedWire of the diagram

    Returns:
        anchor name such as "north west", or the angle as a string
    """
    centre = morphism.centroid
    width = morphism.descriptors.bbox.width
    north, south = count_side_connections(morphism.index, centre, annotated_wires)

    candidates = []
    if point[1] <= centre[1]:
        candidates.append(("north", north))
    if point[1] >= centre[1]:
        candidates.append(("south", south))

    # one-per-side rules first, then two, then three
    for count in (1, 2, 3):
        for side, side_count in candidates:
            if side_count == count:
                return _side_anchor(side, count, point, centre, width)

    return format_number(angle)


def endpoint_reference(connection, point, angle, morphisms_by_index, annotated_wires):
    """
    TikZ node reference for an attached endpoint.

    Returns "d<i>.center", "m<i>.<anchor>", or None for a free endpoint.
    """
    if connection.kind == "dot":
        return f"{connection.node_id}.center"
    if connection.kind == "morphism":
        morphism = morphisms_by_index[connection.index]
        anchor = morphism_anchor(morphism, point, angle, annotated_wires)
        return f"{connection.node_id}.{anchor}"
    return None


@trace(label="anchor_edges")
def anchor_edges(annotated_wires, simplified_wires, morphisms):
    """
    Combine connections and simplified routes into routed edges.

    Returns list of RoutedEdge in wire order.
    """
    tracer = get_tracer()

    morphisms_by_index = {m.index: m for m in morphisms}
    edges = []

    for annotated, route in zip(annotated_wires, simplified_wires):
        begin_ref = endpoint_reference(
            annotated.begin, route.first.point, route.first.out_angle,
            morphisms_by_index, annotated_wires,
        )
        end_ref = endpoint_reference(
            annotated.end, route.last.point, route.last.in_angle,
            morphisms_by_index, annotated_wires,
        )
        edges.append(RoutedEdge(
            wire_index=annotated.wire.index,
            begin=annotated.begin,
            end=annotated.end,
            route=route,
            begin_anchor=begin_ref,
            end_anchor=end_ref,
        ))

    tracer.event(f"Anchored {len(edges)} edges")

    return edges
