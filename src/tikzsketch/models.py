"""
Pydantic data models for the tikzsketch diagram graph.

Every stage hands the next one validated, immutable models. Shapes and
connections are tagged unions discriminated on ``kind``. Node indices are
issued once at classification time and never recomputed from list position.
"""

import hashlib
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Point = Annotated[List[float], Field(min_length=2, max_length=2)]


class Orientation(str, Enum):
    """Which quadrant a morphism's farthest corner points into (screen space)."""
    BOTH_FLIP = "both-flip"
    HORIZONTAL_FLIP = "horizontal-flip"
    NO_FLIP = "no-flip"
    VERTICAL_FLIP = "vertical-flip"

    @property
    def style_suffix(self):
        """TikZ style suffix appended to the morphism node style."""
        return _ORIENTATION_STYLES[self]


_ORIENTATION_STYLES = {
    Orientation.BOTH_FLIP: ", hvflip",
    Orientation.HORIZONTAL_FLIP: ", hflip",
    Orientation.NO_FLIP: "",
    Orientation.VERTICAL_FLIP: ", vflip",
}


class Severity(str, Enum):
    """Severity levels for validation checks."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


class BoundingBox(BaseModel):
    """Axis-aligned bounding box of a path."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def width(self):
        return self.max_x - self.min_x

    @property
    def height(self):
        return self.max_y - self.min_y

    @property
    def area(self):
        return self.width * self.height


class ShapeDescriptors(BaseModel):
    """
    Geometric measures of one path.

    Ratios are left as nan/inf when their denominator vanishes; the
    classifier treats non-finite values as failing every threshold.
    """
    bbox: BoundingBox
    centroid: Point
    signed_area: float
    area: float
    perimeter: float
    compactness: float
    eccentricity: float
    rectangularity: float
    circularity: float
    aspect_ratio: float
    convexity_ratio: float
    openness_ratio: float
    is_open: bool
    is_convex: bool
    orientation: Orientation

    model_config = ConfigDict(extra="forbid", frozen=True)

    def ratios(self):
        """Numeric descriptors, keyed by name."""
        return {
            "area": self.area,
            "perimeter": self.perimeter,
            "compactness": self.compactness,
            "eccentricity": self.eccentricity,
            "rectangularity": self.rectangularity,
            "circularity": self.circularity,
            "aspect_ratio": self.aspect_ratio,
            "convexity_ratio": self.convexity_ratio,
            "openness_ratio": self.openness_ratio,
        }


class DotShape(BaseModel):
    """A near-circular closed stroke, emitted as node ``d<index>``."""
    kind: Literal["dot"] = "dot"
    shape_id: int  # position of the source path in the input
    index: int
    path: List[Point]
    centroid: Point
    descriptors: ShapeDescriptors

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def node_id(self):
        return f"d{self.index}"


class MorphismShape(BaseModel):
    """A near-rectangular closed stroke, emitted as node ``m<index>``."""
    kind: Literal["morphism"] = "morphism"
    shape_id: int
    index: int
    path: List[Point]
    centroid: Point
    orientation: Orientation = Orientation.NO_FLIP
    descriptors: ShapeDescriptors

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def node_id(self):
        return f"m{self.index}"


class WireShape(BaseModel):
    """An open or non-convex stroke, emitted as a routed edge."""
    kind: Literal["wire"] = "wire"
    shape_id: int
    index: int
    path: List[Point] = Field(..., min_length=2)
    descriptors: Optional[ShapeDescriptors] = None

    model_config = ConfigDict(extra="forbid", frozen=True)


Shape = Annotated[Union[DotShape, MorphismShape, WireShape], Field(discriminator="kind")]


class DotConnection(BaseModel):
    """Wire endpoint attached to the centre of a dot."""
    kind: Literal["dot"] = "dot"
    index: int

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def node_id(self):
        return f"d{self.index}"


class MorphismConnection(BaseModel):
    """Wire endpoint attached to the boundary of a morphism."""
    kind: Literal["morphism"] = "morphism"
    index: int

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def node_id(self):
        return f"m{self.index}"


class FreeConnection(BaseModel):
    """Wire endpoint not attached to any node, kept in screen coordinates."""
    kind: Literal["free"] = "free"
    point: Point

    model_config = ConfigDict(extra="forbid", frozen=True)


Connection = Annotated[
    Union[DotConnection, MorphismConnection, FreeConnection],
    Field(discriminator="kind"),
]


class AnnotatedWire(BaseModel):
    """A wire with its resolved begin and end connections."""
    wire: WireShape
    begin: Connection
    end: Connection

    model_config = ConfigDict(extra="forbid", frozen=True)


class WirePoint(BaseModel):
    """A corner of a simplified wire with its snapped tangent angles."""
    point: Point
    in_angle: Optional[float] = None
    out_angle: Optional[float] = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class SimplifiedWire(BaseModel):
    """Routable corner sequence of a wire; always keeps both endpoints."""
    points: List[WirePoint] = Field(..., min_length=2)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def first(self):
        return self.points[0]

    @property
    def last(self):
        return self.points[-1]


class RoutedEdge(BaseModel):
    """A wire ready for emission: connections, route and endpoint anchors."""
    wire_index: int
    begin: Connection
    end: Connection
    route: SimplifiedWire
    begin_anchor: Optional[str] = None
    end_anchor: Optional[str] = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class DiagramGraph(BaseModel):
    """Dots, morphisms and routed edges of one drawing surface."""
    diagram_id: str
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    dots: List[DotShape] = Field(default_factory=list)
    morphisms: List[MorphismShape] = Field(default_factory=list)
    wires: List[AnnotatedWire] = Field(default_factory=list)
    edges: List[RoutedEdge] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)


class StrokeSet(BaseModel):
    """Finished strokes handed over by the capture surface."""
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    paths: List[List[Point]] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class CheckResult(BaseModel):
    """Result of a single validation check."""
    rule_id: str
    severity: Severity
    passed: bool
    message: str
    evidence: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ValidationReport(BaseModel):
    """Collection of validation check results."""
    checks: List[CheckResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @property
    def has_errors(self):
        return any(c.severity == Severity.ERROR and not c.passed for c in self.checks)

    @property
    def error_count(self):
        return sum(1 for c in self.checks if c.severity == Severity.ERROR and not c.passed)

    @property
    def warning_count(self):
        return sum(1 for c in self.checks if c.severity == Severity.WARN and not c.passed)


def generate_diagram_id(paths, width, height, round_digits=2):
    """
    Generate a deterministic diagram ID from the input strokes.

    Rounds coordinates to avoid floating point instability.
    """
    rounded = [
        [[round(p[0], round_digits), round(p[1], round_digits)] for p in path]
        for path in paths
    ]
    data = f"{round(width, round_digits)}x{round(height, round_digits)}:{rounded}"
    h = hashlib.sha256(data.encode()).hexdigest()[:12]
    return f"diagram_{h}"
