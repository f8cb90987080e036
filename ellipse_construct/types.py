from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

FeatureId = str
Label = str


class ConstructionError(RuntimeError):
    """Base class for recoverable geometric construction failures."""


class Unsatisfiable(ConstructionError):
    """Raised when two circles cannot meet (triangle inequality violated)."""


class LocusNotFound(ConstructionError):
    """Raised when a ratio locus has no root inside the search bound."""


class InsufficientPoints(ConstructionError):
    """Raised when fewer points than a closed curve needs are available."""

    def __init__(self, count: int, required: int = 4) -> None:
        super().__init__(f"need at least {required} distinct points, got {count}")
        self.count = count
        self.required = required


class ConfigurationError(ValueError):
    """Raised for malformed construction parameters."""


@dataclass(frozen=True)
class Point2D:
    """Planar coordinate in display units."""

    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    def __add__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Point2D":
        return Point2D(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: float) -> "Point2D":
        return Point2D(self.x / factor, self.y / factor)

    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: "Point2D") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __repr__(self) -> str:
        return f"Point2D({self.x:.6g}, {self.y:.6g})"


@dataclass(frozen=True)
class NamedPoint:
    label: Label
    position: Point2D


@dataclass(frozen=True)
class ConstructionSegment:
    """Straight construction line owned by a feature."""

    feature: FeatureId
    start: Point2D
    end: Point2D


@dataclass(frozen=True)
class ConstructionArc:
    """Compass arc; angles are in radians, counter-clockwise."""

    feature: FeatureId
    center: Point2D
    radius: float
    start_angle: float
    end_angle: float


@dataclass(frozen=True)
class ConstructionText:
    feature: FeatureId
    position: Point2D
    text: str
    emphasis: bool = False


@dataclass
class ConstructionSketch:
    """Geometry produced by one construction method before assembly.

    ``point_groups`` maps a feature id to the ellipse points that feature
    contributes, so the draw plan can reveal them step by step while the
    curve is always fitted through every group.
    """

    named_points: Dict[Label, NamedPoint] = field(default_factory=dict)
    point_features: Dict[Label, FeatureId] = field(default_factory=dict)
    segments: List[ConstructionSegment] = field(default_factory=list)
    arcs: List[ConstructionArc] = field(default_factory=list)
    texts: List[ConstructionText] = field(default_factory=list)
    point_groups: Dict[FeatureId, List[Point2D]] = field(default_factory=dict)
    center: Optional[Point2D] = None
    notes: List[str] = field(default_factory=list)

    def add_point(self, feature: FeatureId, label: Label, position: Point2D) -> Point2D:
        self.named_points[label] = NamedPoint(label, position)
        self.point_features[label] = feature
        return position

    def add_ellipse_points(self, feature: FeatureId, points: List[Point2D]) -> None:
        self.point_groups.setdefault(feature, []).extend(points)

    def raw_points(self) -> List[Point2D]:
        """Return every ellipse point in feature insertion order."""

        out: List[Point2D] = []
        for points in self.point_groups.values():
            out.extend(points)
        return out


__all__ = [
    "FeatureId",
    "Label",
    "ConstructionError",
    "Unsatisfiable",
    "LocusNotFound",
    "InsufficientPoints",
    "ConfigurationError",
    "Point2D",
    "NamedPoint",
    "ConstructionSegment",
    "ConstructionArc",
    "ConstructionText",
    "ConstructionSketch",
]
