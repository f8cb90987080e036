"""Configuration helpers for the construction engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Tolerances shared by every construction method."""

    dedup_epsilon: float = 1.0
    locus_tolerance: float = 0.01
    min_contour_points: int = 4
    tick_interval: float = 1.5
    arc_span_degrees: float = 36.0


_ENGINE_CONFIG = EngineConfig()


def get_engine_config() -> EngineConfig:
    return copy.deepcopy(_ENGINE_CONFIG)


def set_engine_config(config: EngineConfig) -> None:
    global _ENGINE_CONFIG
    _ENGINE_CONFIG = copy.deepcopy(config)


__all__ = ["EngineConfig", "get_engine_config", "set_engine_config"]
