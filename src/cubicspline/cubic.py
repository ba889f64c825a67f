"""
Cubic-spline interpolant for a function y = f(x) sampled at points (x, y).

The x coordinates form a strictly increasing sequence with at least two
elements. The y values may be multidimensional: either a flat sequence of
length ``n * ndim`` laid out row-major by sample then dimension, or an
``(n, ndim)`` array. Every dimension shares the same knots.

Depending on the number of samples ``n`` the builder takes one of three
separate paths:

* ``n == 2`` -- the straight line through both samples.
* ``n == 3`` -- a single quadratic over ``[x0, x2]``; the middle abscissa is
  not kept as a breakpoint.
* ``n >= 4`` -- a C1 piecewise cubic whose knot derivatives solve a
  tridiagonal system with not-a-knot style end conditions (curvature
  extrapolated from the three outermost knots on each side).

Each segment stores the power-basis quadruple ``(a, b, c, d)`` of
``a*z**3 + b*z**2 + c*z + d`` with ``z = x - nodes[segment]``.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .evaluate import derivative, evaluate
from .logger import get_logger
from .options import SplineOptions, resolve
from .tridiagonal import TridiagonalSolver, solve_tridiagonal, thomas

log = get_logger(__name__)

SOLVERS = {
    "banded": solve_tridiagonal,
    "thomas": thomas,
}


# ===================================================================
#  Interpolant
# ===================================================================

@dataclass(frozen=True, slots=True, eq=False)
class Cubic:
    """Immutable piecewise cubic interpolant.

    Attributes
    ----------
    nodes : (m,) ndarray
        Strictly increasing knots, read-only.
    coefficients : (segments, ndim, 4) ndarray
        Power-basis quadruples ``(a, b, c, d)`` per segment and dimension,
        read-only.
    """

    nodes: np.ndarray
    coefficients: np.ndarray

    def __post_init__(self):
        nodes = np.array(self.nodes, dtype=np.float64)
        coefficients = np.array(self.coefficients, dtype=np.float64)

        if nodes.ndim != 1 or nodes.shape[0] < 2:
            raise ValueError("A cubic interpolant needs at least two knots")
        if not np.all(np.diff(nodes) > 0):
            raise ValueError("Knots must be strictly increasing")
        segments = nodes.shape[0] - 1
        if (coefficients.ndim != 3 or coefficients.shape[0] != segments
                or coefficients.shape[1] < 1 or coefficients.shape[2] != 4):
            raise ValueError(
                f"Coefficients of shape {coefficients.shape} do not fit "
                f"{segments} segment(s), expected ({segments}, ndim, 4)"
            )

        nodes.flags.writeable = False
        coefficients.flags.writeable = False
        object.__setattr__(self, "nodes", nodes)
        object.__setattr__(self, "coefficients", coefficients)

    @property
    def segments(self) -> int:
        return self.coefficients.shape[0]

    @property
    def ndim(self) -> int:
        return self.coefficients.shape[1]

    @property
    def weights(self) -> np.ndarray:
        """Flat coefficient buffer of length ``segments * ndim * 4``."""
        return self.coefficients.reshape(-1)

    @property
    def domain(self) -> tuple[float, float]:
        return float(self.nodes[0]), float(self.nodes[-1])

    def evaluate(self, queries, options: SplineOptions | None = None) -> np.ndarray:
        """Shorthand for :func:`cubicspline.evaluate.evaluate`."""
        return evaluate(self, queries, options)

    def derivative(self, queries, options: SplineOptions | None = None) -> np.ndarray:
        """Shorthand for :func:`cubicspline.evaluate.derivative`."""
        return derivative(self, queries, options)

    __call__ = evaluate

    def __repr__(self):
        lo, hi = self.domain
        return (
            f"Cubic(segments={self.segments}, ndim={self.ndim}, "
            f"domain=[{lo:g}, {hi:g}])"
        )


# ===================================================================
#  Input handling
# ===================================================================

def _prepare(x, y, check_input):
    """Return float64 ``x`` of shape (n,) and ``y`` of shape (n, ndim)."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    if x.ndim != 1:
        raise ValueError(f"x must be one-dimensional, got shape {x.shape}")
    n = x.shape[0]
    if n < 2:
        raise ValueError("Not enough points to spline")

    if y.ndim == 1:
        if y.shape[0] == 0 or y.shape[0] % n != 0:
            raise ValueError(
                f"len(y) = {y.shape[0]} is not a positive multiple of len(x) = {n}"
            )
        y = y.reshape(n, -1)
    elif y.ndim == 2:
        if y.shape[0] != n or y.shape[1] == 0:
            raise ValueError(f"y of shape {y.shape} does not match len(x) = {n}")
    else:
        raise ValueError(f"y must be flat or (n, ndim), got shape {y.shape}")

    if check_input:
        if not np.all(np.isfinite(x)):
            raise ValueError("x contains non-finite values")
        if not np.all(np.diff(x) > 0):
            raise ValueError("x must be strictly increasing")
        if not np.all(np.isfinite(y)):
            raise ValueError("y contains non-finite values")

    return x, y


# ===================================================================
#  Coefficient derivation
# ===================================================================

def _linear(x, y, dydx):
    """Two samples: the straight line, exact at both ends."""
    coefficients = np.zeros((1, y.shape[1], 4))
    coefficients[0, :, 2] = dydx[0]
    coefficients[0, :, 3] = y[0]
    return np.array([x[0], x[1]]), coefficients


def _quadratic(x, y, dx, dydx):
    """
    Three samples: one quadratic spanning ``[x0, x2]``.

    The quadratic is built from the first sample and the two secant slopes
    (Newton divided differences), so ``x1`` is dropped as a breakpoint and
    the middle sample only enters through its slopes.
    """
    c1 = (dydx[1] - dydx[0]) / (x[2] - x[0])
    coefficients = np.zeros((1, y.shape[1], 4))
    coefficients[0, :, 1] = c1
    coefficients[0, :, 2] = dydx[0] - c1 * dx[0]
    coefficients[0, :, 3] = y[0]
    return np.array([x[0], x[2]]), coefficients


def _spline(x, y, dx, dydx, solver):
    """Four or more samples: knot slopes from a tridiagonal solve."""
    n, ndim = y.shape
    xb = x[2] - x[0]
    xe = x[n - 1] - x[n - 3]

    sub = np.zeros(n)
    sub[:n - 2] = dx[1:]
    sub[n - 2] = xe

    diag = np.empty(n)
    diag[0] = dx[1]
    diag[1:n - 1] = 2.0 * (dx[1:] + dx[:-1])
    diag[n - 1] = dx[n - 3]

    sup = np.zeros(n)
    sup[1] = xb
    sup[2:] = dx[:-1]

    rhs = np.empty((n, ndim))
    rhs[0] = ((dx[0] + 2.0 * xb) * dx[1] * dydx[0] + dx[0] ** 2 * dydx[1]) / xb
    rhs[1:n - 1] = 3.0 * (dx[1:, None] * dydx[:-1] + dx[:-1, None] * dydx[1:])
    rhs[n - 1] = (dx[n - 2] ** 2 * dydx[n - 3]
                  + (2.0 * xe + dx[n - 2]) * dx[n - 3] * dydx[n - 2]) / xe

    slopes = np.asarray(solver(sub, diag, sup, rhs), dtype=np.float64)
    if slopes.shape != (n, ndim):
        raise ValueError(
            f"Tridiagonal solver returned shape {slopes.shape}, expected {(n, ndim)}"
        )
    if not np.all(np.isfinite(slopes)):
        raise np.linalg.LinAlgError("Knot slopes are not finite")

    h = dx[:, None]
    alpha = (dydx - slopes[:-1]) / h
    beta = (slopes[1:] - dydx) / h

    coefficients = np.empty((n - 1, ndim, 4))
    coefficients[..., 0] = (beta - alpha) / h
    coefficients[..., 1] = 2.0 * alpha - beta
    coefficients[..., 2] = slopes[:-1]
    coefficients[..., 3] = y[:-1]
    return x.copy(), coefficients


def build_cubic(
    x,
    y,
    solver: TridiagonalSolver | None = None,
    options: SplineOptions | None = None,
) -> Cubic:
    """
    Construct a cubic-spline interpolant through the points (x, y).

    Parameters
    ----------
    x : (n,) array_like
        Strictly increasing abscissae, ``n >= 2``.
    y : (n * ndim,) or (n, ndim) array_like
        Sample values; a flat ``y`` is row-major by sample then dimension and
        its dimension count is ``len(y) // len(x)``.
    solver : TridiagonalSolver, optional
        Tridiagonal back end for ``n >= 4``. Defaults to the one named by
        ``options.solver``.
    options : SplineOptions, optional
        ``solver`` and ``check_input`` are used here.

    Returns
    -------
    Cubic

    Raises
    ------
    ValueError
        If ``x``/``y`` do not satisfy the preconditions above.
    numpy.linalg.LinAlgError
        If the tridiagonal solve fails or yields non-finite slopes.

    Notes
    -----
    With three samples the result is one quadratic over ``[x0, x2]`` and the
    knots are only the two endpoints. The middle sample influences the fit
    through the two secant slopes rather than being kept as a knot.
    """
    options = resolve(options)
    x, y = _prepare(x, y, options.check_input)
    n, ndim = y.shape

    dx = np.diff(x)
    dydx = np.diff(y, axis=0) / dx[:, None]

    if n == 2:
        nodes, coefficients = _linear(x, y, dydx)
        branch = "linear"
    elif n == 3:
        nodes, coefficients = _quadratic(x, y, dx, dydx)
        branch = "quadratic"
    else:
        nodes, coefficients = _spline(x, y, dx, dydx, solver or SOLVERS[options.solver])
        branch = "spline"

    log.debug("built cubic: %d samples, %d dimension(s), %s branch", n, ndim, branch)
    return Cubic(nodes, coefficients)
