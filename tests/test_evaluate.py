"""
Tests for evaluate -- segment lookup and polynomial evaluation.

Covers find_segments (cursor and bisect), evaluate, derivative, the output
layout for multi-channel interpolants and behaviour outside the knot range.
"""
import numpy as np
import pytest
from scipy.interpolate import CubicSpline

from cubicspline import SplineOptions, build_cubic, derivative, evaluate
from cubicspline.evaluate import find_segments

RTOL = 1e-10
ATOL = 1e-12

BISECT = SplineOptions(search="bisect")


@pytest.fixture(scope="module")
def wave():
    x = np.array([0.0, 0.4, 1.1, 1.5, 2.3, 3.0, 3.8, 4.5])
    y = np.column_stack([np.sin(x), np.cos(2 * x)])
    return x, y, build_cubic(x, y)


# ===================================================================
# find_segments
# ===================================================================

class TestFindSegments:
    nodes = np.array([0.0, 1.0, 2.0, 3.0])

    @pytest.mark.parametrize("search", ["cursor", "bisect"])
    def test_interior_and_knots(self, search):
        q = np.array([0.0, 0.5, 1.0, 1.5, 2.0, 2.5, 3.0])
        seg = find_segments(self.nodes, q, search)
        # a query on a knot belongs to the segment on its left
        assert list(seg) == [0, 0, 0, 1, 1, 2, 2]

    @pytest.mark.parametrize("search", ["cursor", "bisect"])
    def test_clamped_outside(self, search):
        q = np.array([-5.0, -0.1, 3.1, 10.0])
        if search == "cursor":
            q = np.sort(q)
        seg = find_segments(self.nodes, q, search)
        assert list(seg) == [0, 0, 2, 2]

    @pytest.mark.parametrize("search", ["cursor", "bisect"])
    def test_single_segment(self, search):
        seg = find_segments(np.array([0.0, 1.0]), np.array([-1.0, 0.5, 2.0]), search)
        assert list(seg) == [0, 0, 0]

    def test_cursor_never_moves_back(self):
        q = np.array([2.5, 0.5, 1.5])
        assert list(find_segments(self.nodes, q, "cursor")) == [2, 2, 2]

    def test_bisect_any_order(self):
        q = np.array([2.5, 0.5, 1.5])
        assert list(find_segments(self.nodes, q, "bisect")) == [2, 0, 1]

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            find_segments(self.nodes, np.array([0.5]), "linear")

    def test_empty_queries(self):
        assert find_segments(self.nodes, np.empty(0), "cursor").shape == (0,)


# ===================================================================
# evaluate
# ===================================================================

class TestEvaluate:
    def test_layout(self, wave):
        x, y, spline = wave
        out = evaluate(spline, x)
        assert out.shape == (len(x) * 2,)
        assert np.allclose(out.reshape(-1, 2), y, rtol=RTOL, atol=ATOL)

    def test_method_and_call(self, wave):
        x, _, spline = wave
        q = np.linspace(x[0], x[-1], 13)
        assert np.array_equal(spline.evaluate(q), evaluate(spline, q))
        assert np.array_equal(spline(q), evaluate(spline, q))

    def test_bisect_matches_cursor(self, wave):
        x, _, spline = wave
        q = np.linspace(x[0], x[-1], 101)
        assert np.array_equal(evaluate(spline, q), evaluate(spline, q, BISECT))

    def test_bisect_unsorted(self, wave):
        x, _, spline = wave
        q = np.linspace(x[0], x[-1], 31)
        rng = np.random.default_rng(7)
        order = rng.permutation(len(q))
        shuffled = evaluate(spline, q[order], BISECT).reshape(-1, 2)
        assert np.allclose(shuffled, evaluate(spline, q).reshape(-1, 2)[order], rtol=RTOL, atol=ATOL)

    def test_cursor_requires_ascending(self, wave):
        """Descending queries are not detected and land on the wrong segment."""
        _, _, spline = wave
        q = np.array([4.0, 0.2])
        assert not np.allclose(evaluate(spline, q), evaluate(spline, q, BISECT))

    def test_scalar_query(self, wave):
        x, y, spline = wave
        assert np.allclose(evaluate(spline, x[3]), y[3], rtol=RTOL, atol=ATOL)

    def test_empty_queries(self, wave):
        _, _, spline = wave
        assert evaluate(spline, []).shape == (0,)

    def test_edge_polynomial_extension(self, wave):
        x, y, spline = wave
        ref = CubicSpline(x, y, bc_type="not-a-knot", extrapolate=True)
        q = np.array([-0.5, -0.1, 4.6, 5.0])
        assert np.allclose(evaluate(spline, q).reshape(-1, 2), ref(q), rtol=1e-9, atol=1e-10)

    def test_evaluation_does_not_mutate(self, wave):
        x, _, spline = wave
        before = spline.weights.copy()
        evaluate(spline, np.linspace(x[0], x[-1], 50))
        evaluate(spline, np.linspace(x[-1], x[0], 50), BISECT)
        assert np.array_equal(spline.weights, before)


# ===================================================================
# derivative
# ===================================================================

class TestDerivative:
    def test_cube(self):
        x = np.arange(6.0)
        spline = build_cubic(x, x**3)
        q = np.linspace(0.0, 5.0, 21)
        assert np.allclose(derivative(spline, q), 3 * q**2, atol=1e-8)

    def test_linear_branch(self):
        spline = build_cubic([0.0, 2.0], [1.0, 5.0])
        assert np.allclose(spline.derivative([0.0, 1.0, 2.0]), 2.0)

    def test_quadratic_branch(self):
        spline = build_cubic([0.0, 1.0, 2.0], [0.0, 1.0, 4.0])
        assert np.allclose(spline.derivative([0.0, 0.5, 2.0]), [0.0, 1.0, 4.0], atol=1e-9)

    def test_continuous_across_knots(self, wave):
        x, _, spline = wave
        eps = 1e-7
        left = derivative(spline, x[1:-1] - eps, BISECT)
        right = derivative(spline, x[1:-1] + eps, BISECT)
        assert np.allclose(left, right, atol=1e-5)

    def test_bisect_matches_cursor(self, wave):
        x, _, spline = wave
        q = np.linspace(x[0], x[-1], 40)
        assert np.array_equal(derivative(spline, q), derivative(spline, q, BISECT))
