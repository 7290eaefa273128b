"""
Connectivity resolution for wire endpoints.

Each wire endpoint attaches to the dot or morphism that contains it, or
else to the one whose centroid is nearest within the connect threshold,
or stays a free coordinate. Containment always beats proximity. Dots are
scanned before morphisms and lower indices first, so on an exact distance
tie the dot (then the lower index) wins.
"""

import numpy as np

from tikzsketch.geometry.descriptors import distance
from tikzsketch.models import AnnotatedWire, DotConnection, FreeConnection, MorphismConnection
from tikzsketch.tracer import get_tracer, trace


def polygon_contains(polygon, point):
    """
    Even-odd point-in-polygon test.

    The polygon is implicitly closed. Points exactly on an edge may fall
    either way.
    """
    vertices = np.asarray(polygon, dtype=float).reshape(-1, 2)
    px, py = float(point[0]), float(point[1])

    x1 = vertices[:, 0]
    y1 = vertices[:, 1]
    x0 = np.roll(x1, 1)
    y0 = np.roll(y1, 1)

    straddles = (y1 > py) != (y0 > py)
    if not np.any(straddles):
        return False

    x0, y0, x1, y1 = x0[straddles], y0[straddles], x1[straddles], y1[straddles]
    crossing_x = (x0 - x1) * (py - y1) / (y0 - y1) + x1

    return bool(np.count_nonzero(px < crossing_x) % 2 == 1)


def resolve_endpoint(point, dots, morphisms, connect_threshold=50.0):
    """
    Find what a wire endpoint attaches to.

    Args:
        point: [x, y] endpoint in screen space
        dots: list of DotShape in index order
        morphisms: list of MorphismShape in index order
        connect_threshold: centroid distance below which an endpoint attaches

    Returns:
        DotConnection, MorphismConnection or FreeConnection
    """
    best_distance = connect_threshold
    best_connection = None

    for dot in dots:
        if polygon_contains(dot.path, point):
            return DotConnection(index=dot.index)
        d = distance(dot.centroid, point)
        if d < best_distance:
            best_distance = d
            best_connection = DotConnection(index=dot.index)

    for morphism in morphisms:
        if polygon_contains(morphism.path, point):
            return MorphismConnection(index=morphism.index)
        d = distance(morphism.centroid, point)
        if d < best_distance:
            best_distance = d
            best_connection = MorphismConnection(index=morphism.index)

    if best_connection is not None and best_distance < connect_threshold:
        return best_connection

    return FreeConnection(point=[float(point[0]), float(point[1])])


@trace(label="connect_wires")
def connect_wires(wires, dots, morphisms, config):
    """
    Resolve both endpoints of every wire, independently.

    Returns list of AnnotatedWire in wire order.
    """
    tracer = get_tracer()
    threshold = config.connect.connect_threshold

    annotated = []
    free_endpoints = 0

    for wire in wires:
        begin = resolve_endpoint(wire.path[0], dots, morphisms, threshold)
        end = resolve_endpoint(wire.path[-1], dots, morphisms, threshold)

        free_endpoints += sum(1 for c in (begin, end) if c.kind == "free")
        annotated.append(AnnotatedWire(wire=wire, begin=begin, end=end))

    tracer.event(f"Connected {len(annotated)} wires, {free_endpoints} free endpoints")

    return annotated
