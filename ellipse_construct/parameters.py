"""Per-method literal inputs and visibility rules."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Dict, Optional


class Method(enum.Enum):
    """Supported ellipse constructions."""

    FOCUS_DIRECTRIX = "focus-directrix"
    ARC_CIRCLE_FROM_AXES = "arc-circle-axes"
    ARC_CIRCLE_FROM_TRIANGLE = "arc-circle-triangle"
    ARC_CIRCLE_MIRRORED = "arc-circle-mirrored"

    @classmethod
    def parse(cls, value: str) -> "Method":
        key = value.strip().lower().replace("_", "-")
        for member in cls:
            if member.value == key or member.name.lower().replace("_", "-") == key:
                return member
        raise ValueError(f"unknown construction method {value!r}")


@dataclass(frozen=True)
class ConstructionParameters:
    """Literal lengths (millimetres) and ratios fixed when a plan is created.

    ``scale`` converts millimetres to display units.  Fields a method does
    not use keep their defaults and are ignored.
    """

    scale: float = 3.5
    baseline_length: float = 100.0
    radius_ac: float = 75.0
    radius_bc: float = 60.0
    perpendicular_length: float = 60.0
    extension_length: float = 17.5
    division_spacing: float = 10.0
    division_count: int = 4
    major_axis: float = 120.0
    minor_axis: float = 80.0
    focus_distance: float = 65.0
    eccentricity: float = 2.0 / 3.0
    sample_count: int = 24
    search_bound: float = 160.0
    directrix_length: float = 116.0

    def mm(self, value: float) -> float:
        """Convert a length in millimetres to display units."""

        return value * self.scale

    @classmethod
    def for_method(cls, method: Method) -> "ConstructionParameters":
        overrides = _METHOD_DEFAULTS.get(method, {})
        return replace(cls(), **overrides)


_METHOD_DEFAULTS: Dict[Method, Dict[str, object]] = {
    Method.FOCUS_DIRECTRIX: {"scale": 3.77},
    Method.ARC_CIRCLE_FROM_AXES: {"scale": 3.5},
    Method.ARC_CIRCLE_FROM_TRIANGLE: {"scale": 3.5},
    Method.ARC_CIRCLE_MIRRORED: {"scale": 3.5},
}


@dataclass(frozen=True)
class FeatureRule:
    """Step window during which a feature may be drawn.

    ``last_step=None`` keeps the feature visible once it appears; a value
    makes it transient (compass arcs shown only while their step is active).
    """

    first_step: int
    last_step: Optional[int] = None

    def visible_at(self, step_index: int) -> bool:
        if step_index < self.first_step:
            return False
        return self.last_step is None or step_index <= self.last_step


def only_at(step_index: int) -> FeatureRule:
    return FeatureRule(step_index, step_index)


def from_step(step_index: int) -> FeatureRule:
    return FeatureRule(step_index)


__all__ = [
    "Method",
    "ConstructionParameters",
    "FeatureRule",
    "only_at",
    "from_step",
]
