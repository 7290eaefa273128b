"""
Output writers for tikzsketch.

The TikZ document, the JSON scene dump and the validation report go to the
output directory; per-stage intermediates go under
``debug/<diagram_id>/<stage>/`` when debugging is on.
"""

import json
import os

from tikzsketch.tracer import get_tracer


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def _write(path, content, kind):
    ensure_dir(os.path.dirname(path))
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    get_tracer().event(f"Saved {kind}: {path}")


def save_json(data, path, indent=2):
    """Write a dict, list or pydantic model as JSON."""
    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")
    _write(path, json.dumps(data, indent=indent, default=str), "JSON")


def save_text(text, path):
    """Write text ending in exactly one newline."""
    _write(path, text.rstrip("\n") + "\n", "text")


def save_svg(svg_content, path):
    """Write an svgwrite drawing or raw SVG markup."""
    content = svg_content.tostring() if hasattr(svg_content, "tostring") else str(svg_content)
    _write(path, content, "SVG")


def get_debug_dir(out_dir, diagram_id, stage_name):
    """Debug directory of one stage, created on demand."""
    debug_dir = os.path.join(out_dir, "debug", diagram_id, stage_name)
    ensure_dir(debug_dir)
    return debug_dir


class DebugArtifactWriter:
    """
    Writes one diagram's debug artifacts, grouped by stage.

    A disabled writer accepts every call and writes nothing.
    """

    def __init__(self, out_dir, diagram_id, enabled=True):
        self.out_dir = out_dir
        self.diagram_id = diagram_id
        self.enabled = enabled

    def path_for(self, stage_name, filename):
        return os.path.join(get_debug_dir(self.out_dir, self.diagram_id, stage_name), filename)

    def save_json(self, data, stage_name, filename):
        if self.enabled:
            save_json(data, self.path_for(stage_name, filename))

    def save_svg(self, svg_content, stage_name, filename):
        if self.enabled:
            save_svg(svg_content, self.path_for(stage_name, filename))
