import math
from typing import Iterable

from .parameters import ConstructionParameters, Method
from .types import ConfigurationError


def _ensure_positive(method: Method, params: ConstructionParameters, names: Iterable[str]) -> None:
    for name in names:
        value = getattr(params, name)
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ConfigurationError(f'[{method.value}] {name} must be a number (got {value!r})')
        if not math.isfinite(value) or value <= 0:
            raise ConfigurationError(f'[{method.value}] {name} must be positive (got {value!r})')


def _ensure_count(method: Method, name: str, value: object, minimum: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigurationError(f'[{method.value}] {name} must be an integer (got {value!r})')
    if value < minimum:
        raise ConfigurationError(f'[{method.value}] {name} must be at least {minimum} (got {value})')


def validate_parameters(method: Method, params: ConstructionParameters) -> None:
    """Reject malformed literals before any geometry is attempted."""

    if not isinstance(method, Method):
        raise ConfigurationError(f'unknown construction method {method!r}')
    _ensure_positive(method, params, ('scale',))

    if method is Method.FOCUS_DIRECTRIX:
        _ensure_positive(method, params, ('focus_distance', 'eccentricity', 'search_bound', 'directrix_length'))
        if params.eccentricity >= 1.0:
            raise ConfigurationError(
                f'[{method.value}] eccentricity must be below 1 for an ellipse (got {params.eccentricity!r})'
            )
        _ensure_count(method, 'sample_count', params.sample_count, 4)
    elif method is Method.ARC_CIRCLE_FROM_AXES:
        _ensure_positive(method, params, ('major_axis', 'minor_axis'))
        if params.minor_axis >= params.major_axis:
            raise ConfigurationError(
                f'[{method.value}] minor_axis must be shorter than major_axis '
                f'(got {params.minor_axis!r} >= {params.major_axis!r})'
            )
        _ensure_count(method, 'division_count', params.division_count, 1)
    elif method in (Method.ARC_CIRCLE_FROM_TRIANGLE, Method.ARC_CIRCLE_MIRRORED):
        names = ['baseline_length', 'perpendicular_length', 'extension_length', 'division_spacing']
        if method is Method.ARC_CIRCLE_FROM_TRIANGLE:
            names += ['radius_ac', 'radius_bc']
        _ensure_positive(method, params, names)
        _ensure_count(method, 'division_count', params.division_count, 1)
        if params.division_count * params.division_spacing >= params.baseline_length / 2:
            raise ConfigurationError(
                f'[{method.value}] division points must stay between A and the midpoint O '
                f'({params.division_count} x {params.division_spacing!r} >= {params.baseline_length / 2!r})'
            )
