"""Construction plans: a method bound to its literals and step table."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, List, Optional, Tuple

from .methods import METHOD_DEFINITIONS, MethodDefinition
from .parameters import ConstructionParameters, FeatureRule, Method
from .types import FeatureId
from .validate import validate_parameters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConstructionStep:
    """One numbered step; ``reveals(feature_id)`` tells whether it is drawn there."""

    index: int
    label: str
    reveals: Callable[[FeatureId], bool] = field(compare=False, repr=False)


class ConstructionPlan:
    """Immutable binding of a :class:`Method` to parameters and visibility rules.

    Parameters are validated up front, so nothing malformed ever reaches the
    locator.  Instances hold no mutable state and can be shared freely.
    """

    def __init__(self, method: Method, params: Optional[ConstructionParameters] = None) -> None:
        if isinstance(method, str):
            method = Method.parse(method)
        if params is None:
            params = ConstructionParameters.for_method(method)
        validate_parameters(method, params)
        definition: MethodDefinition = METHOD_DEFINITIONS[method]
        labels, rules = definition.layout(params)
        self._method = method
        self._params = params
        self._definition = definition
        self._rules: Dict[FeatureId, FeatureRule] = dict(rules)
        self._steps: Tuple[ConstructionStep, ...] = tuple(
            ConstructionStep(idx, label, partial(self.is_visible, step_index=idx))
            for idx, label in enumerate(labels)
        )
        logger.debug("Created %s plan with %d steps", method.value, len(self._steps))

    @property
    def method(self) -> Method:
        return self._method

    @property
    def params(self) -> ConstructionParameters:
        return self._params

    @property
    def definition(self) -> MethodDefinition:
        return self._definition

    @property
    def title(self) -> str:
        return self._definition.title

    @property
    def scale(self) -> float:
        return self._params.scale

    @property
    def steps(self) -> Tuple[ConstructionStep, ...]:
        return self._steps

    @property
    def step_count(self) -> int:
        return len(self._steps)

    @property
    def features(self) -> List[FeatureId]:
        return list(self._rules)

    def clamp_step(self, step_index: int) -> int:
        return min(max(step_index, 0), self.step_count - 1)

    def is_visible(self, feature_id: FeatureId, step_index: int = 0, reveal_all: bool = False) -> bool:
        """Return ``True`` when ``feature_id`` may be drawn at ``step_index``."""

        rule = self._rules.get(feature_id)
        if rule is None:
            logger.debug("Unknown feature %r for %s", feature_id, self._method.value)
            return False
        if reveal_all:
            return True
        return rule.visible_at(step_index)

    def __repr__(self) -> str:
        return f"ConstructionPlan({self._method.value!r}, steps={self.step_count})"


__all__ = ["ConstructionPlan", "ConstructionStep"]
