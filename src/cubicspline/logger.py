"""
Thin wrapper around Python's ``logging`` module with two extra levels
below ``DEBUG`` for the inner numerical loops.

Usage
-----
>>> from cubicspline.logger import get_logger
>>> log = get_logger(__name__)
>>> log.debug("building spline")       # construction
>>> log.debug2("evaluating queries")   # evaluation
>>> log.debug3("solver detail")        # tridiagonal solves
"""

import logging
import sys
from functools import lru_cache

# ── Custom levels (below DEBUG=10) ──────────────────────────────────────
DEBUG2 = 9
DEBUG3 = 8

logging.addLevelName(DEBUG2, "DEBUG2")
logging.addLevelName(DEBUG3, "DEBUG3")

ROOT_NAME = "cubicspline"


class SplineLogger(logging.Logger):
    """Logger subclass that adds ``debug2`` and ``debug3`` convenience methods."""

    def debug2(self, msg, *args, **kwargs):
        if self.isEnabledFor(DEBUG2):
            self._log(DEBUG2, msg, args, **kwargs)

    def debug3(self, msg, *args, **kwargs):
        if self.isEnabledFor(DEBUG3):
            self._log(DEBUG3, msg, args, **kwargs)


# ── Level names accepted by set_level() besides the stdlib ones ─────────
LEVEL_NAMES = {
    "DEBUG2": DEBUG2,
    "DEBUG3": DEBUG3,
}


@lru_cache(maxsize=None)
def _with_debug_levels(cls):
    """``cls`` extended with the ``debug2``/``debug3`` methods."""
    if issubclass(cls, SplineLogger):
        return cls
    if cls is logging.Logger:
        return SplineLogger
    return type(f"Spline{cls.__name__}", (SplineLogger, cls), {})


def get_logger(name: str | None = None) -> SplineLogger:
    """Return a logger under the ``cubicspline`` hierarchy.

    Module loggers (``cubicspline.cubic`` and friends) inherit from the
    ``cubicspline`` root logger, so a single ``set_level()`` call controls
    everything. The process-wide logger class is left untouched; a logger
    that already exists without ``debug2``/``debug3`` gets them added.
    """
    log = logging.getLogger(name or ROOT_NAME)
    if not isinstance(log, SplineLogger):
        log.__class__ = _with_debug_levels(type(log))
    return log


def set_level(level: int | str = logging.INFO) -> None:
    """Set the log level for *all* cubicspline loggers at once.

    Accepts Python level ints/names as well as ``"DEBUG2"``/``"DEBUG3"``.
    """
    if isinstance(level, str):
        level = LEVEL_NAMES.get(level.upper(), level.upper())
    get_logger().setLevel(level)


def setup(level: int | str = logging.INFO, stream=None) -> None:
    """One-time setup: attach a stderr handler with the cubicspline format.

    Safe to call multiple times, extra calls only update the level.
    """
    root = get_logger()
    if not root.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)-7s: %(message)s"))
        root.addHandler(handler)
    set_level(level)
