"""
Evaluation of piecewise cubic interpolants.

Segment lookup comes in two flavours, selected by ``SplineOptions.search``:

* ``"cursor"`` -- a single forward-moving segment index shared by all
  queries. Amortised O(1) per query, but only correct when the queries are
  ascending. Unsorted queries are not detected and give wrong values.
* ``"bisect"`` -- a binary search per query over the knots. O(log n) per
  query, correct for any query order.

Both pick the segment ``l`` with ``nodes[l] < q <= nodes[l + 1]``, clamped to
the first and last segments, so queries outside the knot range fall on the
polynomial extension of the edge segment.

The local cubic is evaluated in nested (Horner) form on ``z = q - nodes[l]``.
"""

import numpy as np
from numba import njit

from .logger import get_logger
from .options import SplineOptions, resolve

log = get_logger(__name__)


# ===================================================================
#  Segment lookup
# ===================================================================

@njit(cache=True)
def _cursor_segments(nodes, queries):
    """Segment index per query from a monotone, non-resetting cursor."""
    last = max(1, nodes.shape[0] - 1) - 1
    seg = np.empty(queries.shape[0], dtype=np.int64)
    cursor = 0
    for i in range(queries.shape[0]):
        while cursor < last and queries[i] > nodes[cursor + 1]:
            cursor += 1
        seg[i] = cursor
    return seg


def _bisect_segments(nodes, queries):
    """Segment index per query by binary search; any query order."""
    last = max(1, nodes.shape[0] - 1) - 1
    seg = np.searchsorted(nodes, queries, side="left") - 1
    return np.clip(seg, 0, last)


def find_segments(nodes, queries, search="cursor"):
    """
    Map each query abscissa to the index of the polynomial segment used for it.

    Parameters
    ----------
    nodes : (m,) ndarray
        Strictly increasing knots.
    queries : (p,) ndarray
        Query abscissae, ascending when ``search == "cursor"``.
    search : {"cursor", "bisect"}
        Lookup strategy.

    Returns
    -------
    (p,) ndarray of int64
    """
    if search == "cursor":
        return _cursor_segments(nodes, queries)
    if search == "bisect":
        return _bisect_segments(nodes, queries)
    raise ValueError(f"Unknown search strategy {search!r}")


# ===================================================================
#  Public evaluation
# ===================================================================

def _prepare(spline, queries, options):
    options = resolve(options)
    q = np.atleast_1d(np.asarray(queries, dtype=np.float64)).ravel()
    seg = find_segments(spline.nodes, q, options.search)
    z = (q - spline.nodes[seg])[:, None]
    coef = spline.coefficients[seg]
    log.debug2(
        "evaluating %d queries over %d segments (%s)",
        q.shape[0], spline.segments, options.search,
    )
    return z, coef


def evaluate(spline, queries, options: SplineOptions | None = None) -> np.ndarray:
    """
    Interpolate the function values at *queries*.

    Parameters
    ----------
    spline : Cubic
        Interpolant built by :func:`cubicspline.build_cubic`.
    queries : array_like
        Query abscissae. Must be ascending under the default ``"cursor"``
        search and should lie in ``spline.domain``.
    options : SplineOptions, optional
        Only ``search`` is used here.

    Returns
    -------
    (p * ndim,) ndarray
        Values row-major by query then dimension, the layout of a flat ``y``.
    """
    z, coef = _prepare(spline, queries, options)
    a, b, c, d = coef[..., 0], coef[..., 1], coef[..., 2], coef[..., 3]
    return (z * (z * (z * a + b) + c) + d).ravel()


def derivative(spline, queries, options: SplineOptions | None = None) -> np.ndarray:
    """
    First derivative of the interpolant at *queries*.

    Same query rules and output layout as :func:`evaluate`.
    """
    z, coef = _prepare(spline, queries, options)
    a, b, c = coef[..., 0], coef[..., 1], coef[..., 2]
    return (z * (3.0 * a * z + 2.0 * b) + c).ravel()
