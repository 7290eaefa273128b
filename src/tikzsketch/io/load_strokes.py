"""
Stroke loading for tikzsketch.

Reads finished strokes from a JSON stroke file or from an SVG drawing and
drops anything too short to classify. The drawing surface size travels
with the strokes because the TikZ coordinate transform depends on it.

JSON stroke files look like::

    {"width": 800, "height": 600, "paths": [[[10, 20], [30, 40]], ...]}
"""

import json
import os
import re

from svgpathtools import Line, parse_path

from tikzsketch.models import StrokeSet
from tikzsketch.tracer import get_tracer, trace

SUPPORTED_EXTENSIONS = (".json", ".svg")

_PATH_D_RE = re.compile(r'<path[^>]*\sd\s*=\s*"([^"]+)"[^>]*/?\s*>', re.IGNORECASE)
_SVG_TAG_RE = re.compile(r"<svg\b[^>]*>", re.IGNORECASE)
_WIDTH_RE = re.compile(r'\swidth\s*=\s*"([^"]*?)"')
_HEIGHT_RE = re.compile(r'\sheight\s*=\s*"([^"]*?)"')
_VIEWBOX_RE = re.compile(r'viewBox\s*=\s*"([^"]+)"')
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

CURVE_SAMPLES = 8


def filter_paths(paths, min_points=2):
    """Drop paths with fewer than min_points points."""
    return [path for path in paths if len(path) >= min_points]


def _parse_length(text):
    match = _NUMBER_RE.match(text.strip()) if text else None
    return float(match.group(0)) if match else None


def parse_svg_size(svg_text):
    """
    Drawing surface size from the root <svg> element.

    Prefers width/height attributes, falls back to the viewBox.

    Raises ValueError when neither is present.
    """
    tag_match = _SVG_TAG_RE.search(svg_text)
    if not tag_match:
        raise ValueError("No <svg> element found")
    tag = tag_match.group(0)

    width_match = _WIDTH_RE.search(tag)
    height_match = _HEIGHT_RE.search(tag)
    width = _parse_length(width_match.group(1)) if width_match else None
    height = _parse_length(height_match.group(1)) if height_match else None

    if width and height:
        return width, height

    viewbox_match = _VIEWBOX_RE.search(tag)
    if viewbox_match:
        values = [float(v) for v in _NUMBER_RE.findall(viewbox_match.group(1))]
        if len(values) == 4:
            return values[2], values[3]

    raise ValueError("SVG has neither width/height nor a viewBox")


def svg_path_to_polylines(d):
    """
    Convert one SVG path description to point lists, one per subpath.

    Straight segments contribute their end point; curves are sampled.
    """
    polylines = []

    for subpath in parse_path(d).continuous_subpaths():
        if len(subpath) == 0:
            continue
        start = subpath[0].start
        points = [[start.real, start.imag]]
        for segment in subpath:
            if isinstance(segment, Line):
                samples = [segment.end]
            else:
                samples = [segment.point(i / CURVE_SAMPLES) for i in range(1, CURVE_SAMPLES + 1)]
            points.extend([p.real, p.imag] for p in samples)
        polylines.append(points)

    return polylines


def parse_svg_strokes(svg_text):
    """Parse every <path> of an SVG drawing into a StrokeSet."""
    width, height = parse_svg_size(svg_text)

    paths = []
    for d in _PATH_D_RE.findall(svg_text):
        paths.extend(svg_path_to_polylines(d))

    return StrokeSet(width=width, height=height, paths=paths)


@trace(label="load_strokes")
def load_strokes(path):
    """
    Load strokes from a JSON stroke file or an SVG drawing.

    Returns a StrokeSet with paths of fewer than two points removed.

    Raises FileNotFoundError if path does not exist.
    Raises ValueError for unsupported or malformed files.
    """
    tracer = get_tracer()

    if not os.path.exists(path):
        raise FileNotFoundError(f"Stroke file not found: {path}")

    ext = os.path.splitext(path)[1].lower()
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    if ext == ".json":
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Malformed stroke file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Stroke file {path} must contain a JSON object")
        strokes = StrokeSet.model_validate(data)
    elif ext == ".svg":
        strokes = parse_svg_strokes(content)
    else:
        raise ValueError(f"Unsupported stroke format: {path}")

    kept = filter_paths(strokes.paths)
    dropped = len(strokes.paths) - len(kept)
    if dropped:
        tracer.event(f"Dropped {dropped} paths with fewer than 2 points", level="WARN")

    tracer.event(f"Loaded {len(kept)} strokes on {strokes.width}x{strokes.height} surface")

    return StrokeSet(width=strokes.width, height=strokes.height, paths=kept)


def validate_stroke_inputs(path):
    """
    Validate that a stroke file exists and has a supported format.

    Returns a list of error messages (empty if valid).
    """
    errors = []

    if not os.path.exists(path):
        errors.append(f"File not found: {path}")
        return errors

    ext = os.path.splitext(path)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        errors.append(f"Unsupported stroke format: {path}")

    return errors
