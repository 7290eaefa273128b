"""
Rule-based shape classification.

Each path becomes exactly one of dot, morphism or wire. The rules are a
fixed decision list evaluated top to bottom; the first match wins:

1. open or non-convex           -> wire
2. circularity above threshold  -> dot
3. rectangular and not circular -> morphism
4. anything else                -> wire

Dots and morphisms receive their node index here, in input order.
"""

import math

from tikzsketch.geometry.descriptors import compute_descriptors
from tikzsketch.models import DotShape, MorphismShape, WireShape
from tikzsketch.tracer import get_tracer, trace

WIRE = "wire"
DOT = "dot"
MORPHISM = "morphism"


def has_non_finite(descriptors):
    """Check whether any numeric descriptor is nan or infinite."""
    values = list(descriptors.ratios().values()) + list(descriptors.centroid)
    return any(not math.isfinite(v) for v in values)


def decide_kind(descriptors, config):
    """
    Apply the decision list to one descriptor set.

    Returns one of "wire", "dot", "morphism".
    """
    if has_non_finite(descriptors):
        return WIRE

    if descriptors.is_open or not descriptors.is_convex:
        return WIRE

    threshold_circ = config.classify.circularity_threshold
    threshold_rect = config.classify.rectangularity_threshold

    if descriptors.circularity > threshold_circ:
        return DOT
    if descriptors.rectangularity > threshold_rect and descriptors.circularity < threshold_circ:
        return MORPHISM

    return WIRE


def describe_path(path, config):
    """Descriptors of one path under the configured thresholds."""
    return compute_descriptors(
        path,
        convexity_threshold=config.classify.convexity_threshold,
        open_threshold=config.classify.open_threshold,
    )


@trace(label="classify_paths")
def classify_paths(paths, config):
    """
    Classify every path.

    Args:
        paths: list of paths, each a list of at least two [x, y] points
        config: PipelineConfig

    Returns:
        tuple of (dots, morphisms, wires), each list in input order
    """
    tracer = get_tracer()

    dots = []
    morphisms = []
    wires = []

    for shape_id, path in enumerate(paths):
        descriptors = describe_path(path, config)
        kind = decide_kind(descriptors, config)
        points = [[float(p[0]), float(p[1])] for p in path]

        if kind == DOT:
            dots.append(DotShape(
                shape_id=shape_id,
                index=len(dots),
                path=points,
                centroid=descriptors.centroid,
                descriptors=descriptors,
            ))
        elif kind == MORPHISM:
            morphisms.append(MorphismShape(
                shape_id=shape_id,
                index=len(morphisms),
                path=points,
                centroid=descriptors.centroid,
                orientation=descriptors.orientation,
                descriptors=descriptors,
            ))
        else:
            wires.append(WireShape(
                shape_id=shape_id,
                index=len(wires),
                path=points,
                descriptors=descriptors,
            ))

        tracer.event(
            f"path {shape_id}: {kind}",
            level="DEBUG",
            descriptors=descriptors,
        )

    tracer.event(f"Classified: {len(dots)} dots, {len(morphisms)} morphisms, {len(wires)} wires")

    return dots, morphisms, wires
