"""
Wire simplification into routable corners.

A freehand wire is reduced in four passes:

A. tag every point with snapped directions towards its neighbours
B. keep only points whose incoming direction is horizontal or vertical
C. drop points that sit in the middle of a straight run
D. tidy the final segment and re-append the true endpoint

The first and last input points always survive.
"""

from tikzsketch.geometry.snapping import angle_from_to, is_horizontal_or_vertical, snap_angle
from tikzsketch.models import SimplifiedWire, WirePoint
from tikzsketch.tracer import get_tracer, trace


def tag_angles(path, snap_step=45):
    """
    Pass A: attach snapped in/out angles to every point.

    The first point has no in angle and the last has no out angle.
    """
    if len(path) < 2:
        raise ValueError(f"A wire needs at least 2 points, got {len(path)}")

    def snapped(a, b):
        return snap_angle(angle_from_to(a, b), snap_step)

    tagged = [WirePoint(point=list(path[0]), out_angle=snapped(path[0], path[1]))]

    for i in range(1, len(path) - 1):
        tagged.append(WirePoint(
            point=list(path[i]),
            in_angle=snapped(path[i], path[i - 1]),
            out_angle=snapped(path[i], path[i + 1]),
        ))

    tagged.append(WirePoint(point=list(path[-1]), in_angle=snapped(path[-1], path[-2])))

    return tagged


def select_corners(tagged, angle_threshold=5.0):
    """Pass B: keep endpoints plus interior points entering horizontally or vertically."""
    corners = [tagged[0]]
    for wire_point in tagged[1:-1]:
        if is_horizontal_or_vertical(wire_point.in_angle, angle_threshold):
            corners.append(wire_point)
    corners.append(tagged[-1])
    return corners


def _is_straight_through(previous, current):
    """Directions back from current and onward from previous are antiparallel."""
    if previous.out_angle is None or current.in_angle is None:
        return False
    return abs(current.in_angle - previous.out_angle) == 180


def prune_collinear(corners):
    """
    Passes C and D: drop pass-through points, keep the true endpoint.

    Each interior corner is compared with its predecessor among the
    selected corners.
    """
    sparse = [corners[0]]
    for i in range(1, len(corners) - 1):
        if not _is_straight_through(corners[i - 1], corners[i]):
            sparse.append(corners[i])

    final = corners[-1]
    if len(sparse) > 1 and _is_straight_through(sparse[-1], final):
        sparse.pop()
    sparse.append(final)

    return sparse


def simplify_wire(path, angle_threshold=5.0, snap_step=45):
    """
    Reduce a wire's points to a routable corner sequence.

    Args:
        path: list of [x, y] screen-space points, at least two
        angle_threshold: tolerance in degrees around horizontal/vertical
        snap_step: angle snapping step in degrees

    Returns:
        SimplifiedWire whose first and last points equal the path's
    """
    tagged = tag_angles(path, snap_step)
    corners = select_corners(tagged, angle_threshold)
    return SimplifiedWire(points=prune_collinear(corners))


@trace(label="simplify_wires")
def simplify_wires(annotated_wires, config):
    """
    Simplify every annotated wire.

    Returns list of SimplifiedWire in wire order.
    """
    tracer = get_tracer()

    simplified = []
    total_points_before = 0
    total_points_after = 0

    for annotated in annotated_wires:
        path = annotated.wire.path
        simple = simplify_wire(
            path,
            angle_threshold=config.wire.angle_threshold,
            snap_step=config.wire.angle_snap_threshold,
        )
        simplified.append(simple)
        total_points_before += len(path)
        total_points_after += len(simple.points)

    reduction = 1 - (total_points_after / total_points_before) if total_points_before > 0 else 0
    tracer.event(f"Simplified: {total_points_before} -> {total_points_after} points ({reduction:.1%} reduction)")

    return simplified
