"""
cubicspline: piecewise cubic interpolation of multi-channel sampled data.

Build an immutable interpolant once with :func:`build_cubic`, then evaluate
it at ascending query points with :func:`evaluate`.
"""

# Import modules themselves (allows: from cubicspline import tridiagonal)
from . import cubic
from . import evaluate as evaluator
from . import logger
from . import options
from . import rescale
from . import tridiagonal

from .cubic import Cubic, build_cubic
from .evaluate import derivative, evaluate
from .logger import get_logger, set_level, setup
from .options import DEFAULT_OPTIONS, SplineOptions
from .rescale import locate, rescale_1d, rescale_2d
from .tridiagonal import TridiagonalSolver, solve_tridiagonal, thomas

__version__ = "0.1.0"

__all__ = [
    "cubic",
    "evaluator",
    "logger",
    "options",
    "rescale",
    "tridiagonal",
    "Cubic",
    "build_cubic",
    "derivative",
    "evaluate",
    "get_logger",
    "set_level",
    "setup",
    "DEFAULT_OPTIONS",
    "SplineOptions",
    "locate",
    "rescale_1d",
    "rescale_2d",
    "TridiagonalSolver",
    "solve_tridiagonal",
    "thomas",
]
