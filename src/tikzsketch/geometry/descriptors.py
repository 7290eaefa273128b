"""
Geometric descriptors of a freehand path.

Every function here is a pure function of the point sequence. Paths are
treated as polygons (implicitly closed) for area and centroid, and as open
polylines for perimeter. Ratios whose denominator vanishes come back as
nan or inf instead of raising; the classifier rejects non-finite values.
"""

import math

import numpy as np
from shapely.geometry import MultiPoint

from tikzsketch.models import BoundingBox, Orientation, ShapeDescriptors


def _as_array(path):
    return np.asarray(path, dtype=float).reshape(-1, 2)


def safe_ratio(numerator, denominator):
    """Divide, returning inf or nan instead of raising on a zero denominator."""
    if denominator == 0:
        return math.inf if numerator > 0 else math.nan
    return float(numerator / denominator)


def distance(a, b):
    """Euclidean distance between two points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def bounding_box(path):
    """Axis-aligned bounding box of the path."""
    points = _as_array(path)
    return BoundingBox(
        min_x=float(points[:, 0].min()),
        min_y=float(points[:, 1].min()),
        max_x=float(points[:, 0].max()),
        max_y=float(points[:, 1].max()),
    )


def signed_area(path):
    """Shoelace area of the implicitly closed polygon."""
    points = _as_array(path)
    x = points[:, 0]
    y = points[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)
    return float(0.5 * np.sum(x * y_next - x_next * y))


def polygon_area(path):
    """Absolute polygon area; self-intersecting paths are not corrected."""
    return abs(signed_area(path))


def polygon_centroid(path):
    """
    Area-weighted centroid of the implicitly closed polygon.

    Falls back to the vertex mean when the polygon encloses no area,
    e.g. a straight stroke.
    """
    points = _as_array(path)
    x = points[:, 0]
    y = points[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)

    cross = x * y_next - x_next * y
    k = 3.0 * np.sum(cross)

    if k == 0:
        return [float(x.mean()), float(y.mean())]

    cx = np.sum((x + x_next) * cross) / k
    cy = np.sum((y + y_next) * cross) / k
    return [float(cx), float(cy)]


def perimeter(path):
    """Length of the open polyline through the path's points."""
    points = _as_array(path)
    if len(points) < 2:
        return 0.0
    segments = np.diff(points, axis=0)
    return float(np.sum(np.hypot(segments[:, 0], segments[:, 1])))


def compactness(area, length):
    """Ratio of the equal-area circle's circumference to the perimeter."""
    return safe_ratio(2 * math.sqrt(area * math.pi), length)


def eccentricity(path, centre):
    """
    Ratio of the smaller to the larger eigenvalue of the point covariance.

    Eigenvalues come from the closed-form quadratic for a 2x2 symmetric
    matrix. 1.0 is isotropic, 0.0 is a line.
    """
    centred = _as_array(path) - np.asarray(centre, dtype=float)
    cxx = float(np.sum(centred[:, 0] * centred[:, 0]))
    cyy = float(np.sum(centred[:, 1] * centred[:, 1]))
    cxy = float(np.sum(centred[:, 0] * centred[:, 1]))

    trace = cxx + cyy
    det = cxx * cyy - cxy * cxy
    root = math.sqrt(max(trace * trace - 4 * det, 0.0))

    larger = (trace + root) / 2
    smaller = (trace - root) / 2
    return safe_ratio(smaller, larger)


def rectangularity(bbox, area):
    """Fraction of the bounding box covered by the polygon."""
    return safe_ratio(area, bbox.area)


def max_distance_from(path, centre):
    """Largest distance of any path point from centre."""
    offsets = _as_array(path) - np.asarray(centre, dtype=float)
    return float(np.max(np.hypot(offsets[:, 0], offsets[:, 1])))


def circularity(path, centre, area):
    """Area relative to the circle reaching the farthest point from centre."""
    radius = max_distance_from(path, centre)
    return safe_ratio(area, math.pi * radius * radius)


def aspect_ratio(bbox):
    """Bounding box width over height."""
    return safe_ratio(bbox.width, bbox.height)


def convex_hull_area(path):
    """
    Area of the convex hull of the path's points.

    Collinear or repeated points yield a degenerate hull of zero area.
    """
    return float(MultiPoint([tuple(p) for p in _as_array(path)]).convex_hull.area)


def convexity_ratio(path, area):
    """Polygon area over convex hull area."""
    return safe_ratio(area, convex_hull_area(path))


def openness_ratio(path, length):
    """Gap between the first and last point relative to the perimeter."""
    return safe_ratio(distance(path[0], path[-1]), length)


def orientation(path, centre):
    """
    Quadrant of the point farthest from centre, in screen coordinates.

    Ties keep the earliest point in path order.
    """
    corner = path[0]
    farthest = distance(corner, centre)
    for point in path[1:]:
        d = distance(point, centre)
        if d > farthest:
            farthest = d
            corner = point

    dx = corner[0] - centre[0]
    dy = corner[1] - centre[1]

    if dx < 0 and dy < 0:
        return Orientation.BOTH_FLIP
    if dx >= 0 and dy < 0:
        return Orientation.HORIZONTAL_FLIP
    if dx >= 0 and dy >= 0:
        return Orientation.NO_FLIP
    return Orientation.VERTICAL_FLIP


def compute_descriptors(path, convexity_threshold=0.5, open_threshold=0.1):
    """
    Compute the full descriptor set of one path.

    Args:
        path: list of [x, y] screen-space points, at least two
        convexity_threshold: minimum area / hull area for a convex shape
        open_threshold: minimum endpoint gap / perimeter for an open shape

    Returns:
        ShapeDescriptors
    """
    bbox = bounding_box(path)
    centre = polygon_centroid(path)
    s_area = signed_area(path)
    area = abs(s_area)
    length = perimeter(path)
    convexity = convexity_ratio(path, area)
    openness = openness_ratio(path, length)

    return ShapeDescriptors(
        bbox=bbox,
        centroid=centre,
        signed_area=s_area,
        area=area,
        perimeter=length,
        compactness=compactness(area, length),
        eccentricity=eccentricity(path, centre),
        rectangularity=rectangularity(bbox, area),
        circularity=circularity(path, centre, area),
        aspect_ratio=aspect_ratio(bbox),
        convexity_ratio=convexity,
        openness_ratio=openness,
        is_open=openness > open_threshold,
        is_convex=convexity >= convexity_threshold,
        orientation=orientation(path, centre),
    )
