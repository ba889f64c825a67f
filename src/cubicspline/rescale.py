"""
Grid transfer of sampled data with cubic splines.

Resamples arrays defined on one grid onto another. Values requested outside
the source grid are not extrapolated; they are set to a fill value.
"""

import numpy as np

from .cubic import build_cubic
from .options import SplineOptions


def locate(xx, x):
    """
    Find the index i such that xx[i] <= x < xx[i+1].

    Parameters
    ----------
    xx : ndarray
        Sorted 1D array (ascending order)
    x : float
        Value to locate

    Returns
    -------
    int
        Index of the lower bound; 0 if x < xx[0], len(xx)-1 if x >= xx[-1]
    """
    n = len(xx)
    if x < xx[0]:
        return 0
    if x >= xx[n - 1]:
        return n - 1
    return int(np.searchsorted(xx, x, side="right")) - 1


def rescale_1d(x0, y0, x1, fill=0.0, options: SplineOptions | None = None):
    """
    Rescale a 1D (optionally multi-channel) array from one grid to another.

    Parameters
    ----------
    x0 : (n,) ndarray
        Original X-coordinates, strictly increasing
    y0 : (n,) or (n, k) ndarray
        Original values; columns of a 2D array are independent channels
    x1 : (m,) ndarray
        New X-coordinates, ascending unless ``options.search == "bisect"``
    fill : float, optional
        Value used where x1 lies outside [x0[0], x0[-1]] (default 0)
    options : SplineOptions, optional
        Passed to the builder and the evaluator

    Returns
    -------
    ndarray
        Shape (m,) for 1D y0, (m, k) for 2D y0
    """
    x0 = np.asarray(x0, dtype=np.float64)
    y0 = np.asarray(y0, dtype=np.float64)
    x1 = np.asarray(x1, dtype=np.float64)
    if y0.ndim not in (1, 2) or y0.shape[0] != len(x0):
        raise ValueError("Bad sizes in rescale_1d")

    channels = y0.reshape(len(x0), -1)
    spline = build_cubic(x0, channels, options=options)
    y1 = spline.evaluate(x1, options).reshape(len(x1), -1)

    outside = (x1 < x0[0]) | (x1 > x0[-1])
    y1[outside] = fill
    return y1.reshape((len(x1),) + y0.shape[1:])


def rescale_2d(x0, y0, z0, x1, y1, fill=0.0, options: SplineOptions | None = None):
    """
    Rescale a 2D array from grid (x0, y0) to grid (x1, y1).

    Parameters
    ----------
    x0 : (n0,) ndarray
        Original X-coordinates
    y0 : (m0,) ndarray
        Original Y-coordinates
    z0 : (n0, m0) ndarray
        Original 2D array
    x1 : (n1,) ndarray
        New X-coordinates
    y1 : (m1,) ndarray
        New Y-coordinates
    fill : float, optional
        Value used outside the original grid (default 0)

    Returns
    -------
    (n1, m1) ndarray

    Notes
    -----
    Interpolates along x first, treating every column of z0 as a channel of
    one spline, then along y with every row of the intermediate result as a
    channel.
    """
    z0 = np.asarray(z0, dtype=np.float64)
    if z0.shape != (len(x0), len(y0)):
        raise ValueError("Bad sizes in rescale_2d")

    x0 = np.asarray(x0, dtype=np.float64)
    y0 = np.asarray(y0, dtype=np.float64)
    x1 = np.asarray(x1, dtype=np.float64)
    y1 = np.asarray(y1, dtype=np.float64)

    # the x pass feeds the y pass as data, so it must stay finite
    zt = rescale_1d(x0, z0, x1, fill=0.0, options=options)
    z1 = rescale_1d(y0, zt.T, y1, fill=0.0, options=options).T

    z1[(x1 < x0[0]) | (x1 > x0[-1]), :] = fill
    z1[:, (y1 < y0[0]) | (y1 > y0[-1])] = fill
    return z1
