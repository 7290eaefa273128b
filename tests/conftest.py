"""Pytest fixtures for tikzsketch tests."""

import json
import os
import tempfile

import pytest

from helpers import circle_points, rectangle_points


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def default_config():
    """Create default pipeline configuration."""
    from tikzsketch.config import PipelineConfig
    return PipelineConfig()


@pytest.fixture
def square_path():
    """Closed 100x100 square."""
    return [[0, 0], [100, 0], [100, 100], [0, 100], [0, 0]]


@pytest.fixture
def circle_path():
    """20-point circle of radius 50 around the origin."""
    return circle_points(0, 0, 50)


@pytest.fixture
def box_path():
    """Wide closed box (150x50) centred on (200, 200)."""
    return rectangle_points(200, 200, 150, 50)


@pytest.fixture
def zigzag_path():
    """Open three-point zig-zag."""
    return [[0, 0], [50, 50], [100, 0]]


@pytest.fixture
def simple_diagram_paths():
    """
    A dot above a box joined by a vertical wire on a 400x400 surface.

    The wire starts inside the dot and ends just above the box.
    """
    return [
        circle_points(200, 60, 10),
        rectangle_points(200, 200, 150, 50),
        [[200, 65], [200, 100], [200, 140], [200, 170]],
    ]


@pytest.fixture
def stroke_file(temp_dir, simple_diagram_paths):
    """JSON stroke file holding the simple diagram."""
    path = os.path.join(temp_dir, "strokes.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"width": 400, "height": 400, "paths": simple_diagram_paths}, f)
    return path
