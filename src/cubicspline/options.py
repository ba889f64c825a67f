"""
Per-call configuration for spline construction and evaluation.

There are no config files or environment variables; callers pass a
``SplineOptions`` instance (or nothing, for ``DEFAULT_OPTIONS``).
"""
from __future__ import annotations

from dataclasses import dataclass

SEARCH_STRATEGIES = ("cursor", "bisect")
SOLVER_NAMES = ("banded", "thomas")


@dataclass(frozen=True, slots=True)
class SplineOptions:
    """Switches for the builder and the evaluator.

    search : ``"cursor"`` walks a monotone segment cursor and needs ascending
        queries; ``"bisect"`` does a binary search per query and accepts any
        order.
    solver : tridiagonal back end used for ``n >= 4`` samples,
        ``"banded"`` (SciPy/LAPACK) or ``"thomas"`` (Numba kernel).
    check_input : validate ``x``/``y`` before building.
    """

    search: str = "cursor"
    solver: str = "banded"
    check_input: bool = True

    def __post_init__(self):
        if self.search not in SEARCH_STRATEGIES:
            raise ValueError(
                f"Unknown search strategy {self.search!r}, expected one of {SEARCH_STRATEGIES}"
            )
        if self.solver not in SOLVER_NAMES:
            raise ValueError(
                f"Unknown solver {self.solver!r}, expected one of {SOLVER_NAMES}"
            )


DEFAULT_OPTIONS = SplineOptions()


def resolve(options: SplineOptions | None) -> SplineOptions:
    """Return *options*, or the defaults when it is ``None``."""
    return DEFAULT_OPTIONS if options is None else options
