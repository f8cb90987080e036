from .types import (
    ConfigurationError,
    ConstructionError,
    InsufficientPoints,
    LocusNotFound,
    NamedPoint,
    Point2D,
    Unsatisfiable,
)
from .config import EngineConfig, get_engine_config, set_engine_config
from .parameters import ConstructionParameters, Method
from .locator import (
    circle_circle_intersections,
    circle_line_intersections,
    ratio_locus_point,
    trilaterate,
)
from .validate import validate_parameters
from .plan import ConstructionPlan, ConstructionStep
from .assembler import assemble_contour
from .fitter import CubicSegment, fit_closed_curve, sample_closed_curve
from .drawplan import ArcOp, ClosedCurveOp, DrawPlan, PointOp, SegmentOp, Style, TextOp
from .engine import PipelineResult, build_draw_plan, locate_points, run_pipeline
from .sequencer import Mode, SequencerState, StepSequencer
from .tikz_codegen import generate_tikz_code, generate_tikz_document

__all__ = [
    'ConfigurationError',
    'ConstructionError',
    'InsufficientPoints',
    'LocusNotFound',
    'NamedPoint',
    'Point2D',
    'Unsatisfiable',
    'EngineConfig',
    'get_engine_config',
    'set_engine_config',
    'ConstructionParameters',
    'Method',
    'circle_circle_intersections',
    'circle_line_intersections',
    'ratio_locus_point',
    'trilaterate',
    'validate_parameters',
    'ConstructionPlan',
    'ConstructionStep',
    'assemble_contour',
    'CubicSegment',
    'fit_closed_curve',
    'sample_closed_curve',
    'ArcOp',
    'ClosedCurveOp',
    'DrawPlan',
    'PointOp',
    'SegmentOp',
    'Style',
    'TextOp',
    'PipelineResult',
    'build_draw_plan',
    'locate_points',
    'run_pipeline',
    'Mode',
    'SequencerState',
    'StepSequencer',
    'generate_tikz_code',
    'generate_tikz_document',
]
