"""Unit tests for barycentric Lagrange interpolation."""

import numpy as np
import pytest

from specol.exceptions import DegreeMismatch
from specol.grid import GridType
from specol.interpolation import LagrangeInterpolant, barycentric_weights


ALL_TYPES = list(GridType)


def direct_weights(x):
    n = len(x)
    w = np.ones(n)
    for k in range(n):
        for j in range(n):
            if j != k:
                w[k] /= x[k] - x[j]
    return w


class TestBarycentricWeights:
    @pytest.mark.parametrize("grid_type", ALL_TYPES)
    @pytest.mark.parametrize("N", [1, 2, 3, 6, 10, 15])
    def test_match_product_formula(self, grid_type, N):
        interp = LagrangeInterpolant(N, grid_type)
        assert np.allclose(interp.weights, direct_weights(interp.x), rtol=1e-12, atol=0.0)

    def test_two_point_weights(self):
        w = barycentric_weights(np.array([-1.0, 1.0]))
        assert np.allclose(w, [-0.5, 0.5])

    def test_high_degree_lobatto_pattern(self):
        # Lobatto weights are proportional to (-1)^k with halved end values
        N = 60
        interp = LagrangeInterpolant(N, GridType.CHEBYSHEV_GAUSS_LOBATTO)
        w = interp.weights
        assert np.all(np.isfinite(w))
        ratio = w / w[0]
        expected = np.array([(-1.0) ** k * 2.0 for k in range(N + 1)])
        expected[0] = 1.0
        expected[-1] = (-1.0) ** N
        assert np.allclose(ratio, expected, rtol=1e-9)

    def test_weights_are_read_only(self):
        interp = LagrangeInterpolant(4)
        with pytest.raises(ValueError):
            interp.weights[0] = 1.0


class TestEvaluation:
    @pytest.fixture(params=ALL_TYPES)
    def interp(self, request):
        return LagrangeInterpolant(4, request.param)

    def test_exact_at_nodes(self, interp):
        rng = np.random.default_rng(7)
        u = rng.normal(size=interp.npoint)
        for k, xk in enumerate(interp.x):
            assert interp.eval(u, xk) == u[k]

    def test_reproduces_quadratic(self, interp):
        u = interp.sample(lambda x: x**2)
        xs = np.linspace(-1.0, 1.0, 50)
        assert np.allclose(interp.eval(u, xs), xs**2, rtol=0.0, atol=1e-14)

    def test_reproduces_degree_n_polynomial(self, interp):
        f = lambda x: 3.0 * x**4 - x**3 + 0.5 * x - 2.0
        u = interp.sample(f)
        xs = np.linspace(-1.0, 1.0, 37)
        assert np.allclose(interp.eval(u, xs), f(xs), atol=1e-13)

    def test_scalar_and_array_shapes(self, interp):
        u = interp.sample(np.cos)
        assert isinstance(interp.eval(u, 0.3), float)
        out = interp.eval(u, np.zeros((2, 3)) + 0.1)
        assert out.shape == (2, 3)
        out = interp.eval(u, [0.1, 0.2])
        assert out.shape == (2,)

    def test_mixed_nodes_and_stations(self, interp):
        u = interp.sample(lambda x: x**3)
        xs = np.array([interp.x[0], 0.123, interp.x[2], -0.77])
        assert np.allclose(interp.eval(u, xs), xs**3, atol=1e-14)

    def test_degree_mismatch(self, interp):
        with pytest.raises(DegreeMismatch):
            interp.eval(np.ones(interp.npoint + 1), 0.0)
        with pytest.raises(DegreeMismatch):
            interp.eval_deriv1(np.ones(3), 0.0)

    def test_derivatives_of_cubic(self, interp):
        u = interp.sample(lambda x: x**3)
        xs = np.linspace(-1.0, 1.0, 11)
        assert np.allclose(interp.eval_deriv1(u, xs), 3.0 * xs**2, atol=1e-11)
        assert np.allclose(interp.eval_deriv2(u, xs), 6.0 * xs, atol=1e-10)

    def test_estimate_max_error_polynomial(self, interp):
        err, _ = interp.estimate_max_error(lambda x: x**4 - x, nstation=500)
        assert err < 1e-13

    def test_estimate_max_error_exponential(self):
        interp = LagrangeInterpolant(10)
        err, x_at = interp.estimate_max_error(np.exp)
        assert err < 1e-8
        assert -1.0 <= x_at <= 1.0


class TestBasis:
    @pytest.mark.parametrize("grid_type", ALL_TYPES)
    def test_kronecker_at_nodes(self, grid_type):
        interp = LagrangeInterpolant(6, grid_type)
        for p in range(interp.npoint):
            values = interp.psi(p, interp.x)
            expected = np.zeros(interp.npoint)
            expected[p] = 1.0
            assert np.array_equal(values, expected)

    @pytest.mark.parametrize("grid_type", ALL_TYPES)
    def test_partition_of_unity(self, grid_type):
        interp = LagrangeInterpolant(6, grid_type)
        xs = np.linspace(-1.0, 1.0, 101)
        total = sum(interp.psi(p, xs) for p in range(interp.npoint))
        assert np.allclose(total, 1.0, atol=1e-12)

    def test_matches_product_formula(self):
        interp = LagrangeInterpolant(5, GridType.UNIFORM)
        x = interp.x
        for p in range(interp.npoint):
            for s in (-0.93, -0.2, 0.41, 0.99):
                expected = np.prod([(s - x[j]) / (x[p] - x[j]) for j in range(6) if j != p])
                assert interp.basis(p, s) == pytest.approx(expected, rel=1e-12, abs=1e-14)

    def test_index_out_of_range(self):
        interp = LagrangeInterpolant(3)
        with pytest.raises(IndexError):
            interp.psi(4, 0.0)
        with pytest.raises(IndexError):
            interp.psi(-1, 0.0)


class TestLebesgue:
    def test_chebyshev_beats_uniform(self):
        uniform = LagrangeInterpolant(6, GridType.UNIFORM).lebesgue_constant(2001)
        cgl = LagrangeInterpolant(6, GridType.CHEBYSHEV_GAUSS_LOBATTO).lebesgue_constant(2001)
        cg = LagrangeInterpolant(6, GridType.CHEBYSHEV_GAUSS).lebesgue_constant(2001)
        assert 1.0 <= cgl < 2.5
        assert 1.0 <= cg < 3.0
        assert uniform > cgl

    def test_lebesgue_function_is_one_at_nodes(self):
        interp = LagrangeInterpolant(5)
        assert np.allclose(interp.lebesgue_function(interp.x), 1.0)
        assert isinstance(interp.lebesgue_function(0.3), float)


class TestInterpolantSetup:
    def test_repr(self):
        assert "N=4" in repr(LagrangeInterpolant(4))

    def test_unknown_d2_method(self):
        with pytest.raises(ValueError, match="d2_method"):
            LagrangeInterpolant(4, d2_method="spectral")

    def test_get_points(self):
        interp = LagrangeInterpolant(4, "uniform")
        assert interp.get_points() is interp.x
        assert interp.N == 4 and interp.npoint == 5
