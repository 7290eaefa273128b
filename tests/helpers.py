"""Path and shape builders shared by the tests."""

import math

from tikzsketch.geometry.descriptors import compute_descriptors
from tikzsketch.models import AnnotatedWire, DotShape, MorphismShape, WireShape


def circle_points(cx, cy, radius, n=20):
    """Regular n-gon approximating a circle, not explicitly closed."""
    return [
        [cx + radius * math.cos(2 * math.pi * k / n), cy + radius * math.sin(2 * math.pi * k / n)]
        for k in range(n)
    ]


def rectangle_points(cx, cy, width, height):
    """Closed axis-aligned rectangle, starting at the top-left corner."""
    left, right = cx - width / 2, cx + width / 2
    top, bottom = cy - height / 2, cy + height / 2
    return [[left, top], [right, top], [right, bottom], [left, bottom], [left, top]]


def make_dot(index, path, shape_id=None):
    d = compute_descriptors(path)
    return DotShape(
        shape_id=index if shape_id is None else shape_id,
        index=index,
        path=path,
        centroid=d.centroid,
        descriptors=d,
    )


def make_morphism(index, path, shape_id=None):
    d = compute_descriptors(path)
    return MorphismShape(
        shape_id=index if shape_id is None else shape_id,
        index=index,
        path=path,
        centroid=d.centroid,
        orientation=d.orientation,
        descriptors=d,
    )


def make_wire(index, path, begin, end):
    """AnnotatedWire with the given connections."""
    wire = WireShape(shape_id=100 + index, index=index, path=path)
    return AnnotatedWire(wire=wire, begin=begin, end=end)
