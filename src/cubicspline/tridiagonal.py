"""
Tridiagonal linear solvers with several right-hand sides.

Band convention used throughout the package (all bands have length ``n``):

* ``sub[k]``  is the entry at row ``k + 1``, column ``k``; ``sub[n-1]`` is unused.
* ``diag[k]`` is the entry at row ``k``, column ``k``.
* ``sup[k]``  is the entry at row ``k - 1``, column ``k``; ``sup[0]`` is unused.

This is exactly the row layout of LAPACK banded storage, so the three bands
stack straight into the ``ab`` matrix of :func:`scipy.linalg.solve_banded`.

Two back ends share the :class:`TridiagonalSolver` call signature:

* :func:`solve_tridiagonal` -- SciPy banded LU with partial pivoting.
* :func:`thomas`            -- Numba-compiled Thomas algorithm, no pivoting,
  intended for the diagonally dominant systems the spline builder produces.
"""

from typing import Protocol

import numpy as np
from numba import njit
from numpy.typing import NDArray
from scipy.linalg import solve_banded

from .logger import get_logger

log = get_logger(__name__)


class TridiagonalSolver(Protocol):
    """Anything that solves ``(sub, diag, sup) @ x = rhs`` column by column."""

    def __call__(
        self,
        sub: NDArray[np.float64],
        diag: NDArray[np.float64],
        sup: NDArray[np.float64],
        rhs: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        ...


def _check_bands(sub, diag, sup, rhs):
    """Coerce the bands to float64 and check that the shapes agree."""
    sub = np.asarray(sub, dtype=np.float64)
    diag = np.asarray(diag, dtype=np.float64)
    sup = np.asarray(sup, dtype=np.float64)
    rhs = np.asarray(rhs, dtype=np.float64)

    n = diag.shape[0] if diag.ndim == 1 else -1
    if n < 1 or sub.shape != (n,) or sup.shape != (n,):
        raise ValueError(
            f"Bad band sizes in tridiagonal solve: sub={sub.shape}, "
            f"diag={diag.shape}, sup={sup.shape}"
        )
    if rhs.ndim not in (1, 2) or rhs.shape[0] != n:
        raise ValueError(
            f"Right-hand side shape {rhs.shape} does not match system size {n}"
        )
    return sub, diag, sup, rhs


def _check_solution(x):
    if not np.all(np.isfinite(x)):
        raise np.linalg.LinAlgError("Tridiagonal system is singular or ill-conditioned")
    return x


# ===================================================================
#  SciPy banded LU
# ===================================================================

def solve_tridiagonal(sub, diag, sup, rhs):
    """
    Solve a tridiagonal system via :func:`scipy.linalg.solve_banded`.

    Parameters
    ----------
    sub, diag, sup : (n,) array_like
        Sub-, main and super-diagonal in the band convention of this module.
    rhs : (n,) or (n, k) array_like
        One right-hand side, or ``k`` independent ones stacked as columns.

    Returns
    -------
    ndarray
        Solution with the same shape as *rhs*.

    Raises
    ------
    ValueError
        If the band and right-hand-side shapes disagree.
    numpy.linalg.LinAlgError
        If the matrix is singular or the solution is not finite.
    """
    sub, diag, sup, rhs = _check_bands(sub, diag, sup, rhs)
    n = diag.shape[0]

    ab = np.zeros((3, n))
    ab[0, 1:] = sup[1:]
    ab[1] = diag
    ab[2, :-1] = sub[:-1]

    log.debug3("banded solve: n=%d, rhs=%s", n, rhs.shape)
    x = solve_banded((1, 1), ab, rhs, check_finite=False)
    return _check_solution(x)


# ===================================================================
#  Thomas algorithm (Numba)
# ===================================================================

@njit(cache=True, error_model="numpy")
def _thomas_core(sub, diag, sup, rhs):
    """Forward sweep and back substitution for every column of *rhs*."""
    n, k = rhs.shape
    x = np.empty((n, k))
    piv = np.empty(n)
    w = np.empty((n, k))

    piv[0] = diag[0]
    for j in range(k):
        w[0, j] = rhs[0, j]

    for i in range(1, n):
        m = sub[i - 1] / piv[i - 1]
        piv[i] = diag[i] - m * sup[i]
        for j in range(k):
            w[i, j] = rhs[i, j] - m * w[i - 1, j]

    for j in range(k):
        x[n - 1, j] = w[n - 1, j] / piv[n - 1]
    for i in range(n - 2, -1, -1):
        for j in range(k):
            x[i, j] = (w[i, j] - sup[i + 1] * x[i + 1, j]) / piv[i]

    return x


def thomas(sub, diag, sup, rhs):
    """
    Solve a tridiagonal system with the Thomas algorithm.

    Same contract as :func:`solve_tridiagonal`. No pivoting is done, so the
    matrix should be diagonally dominant (or otherwise safe for Gaussian
    elimination without row exchanges); a zero pivot surfaces as a
    :class:`numpy.linalg.LinAlgError`.
    """
    sub, diag, sup, rhs = _check_bands(sub, diag, sup, rhs)
    columns = rhs.reshape(rhs.shape[0], -1)

    log.debug3("thomas solve: n=%d, rhs=%s", diag.shape[0], rhs.shape)
    x = _thomas_core(
        np.ascontiguousarray(sub),
        np.ascontiguousarray(diag),
        np.ascontiguousarray(sup),
        np.ascontiguousarray(columns),
    )
    return _check_solution(x.reshape(rhs.shape))
