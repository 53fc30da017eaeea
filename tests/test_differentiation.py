"""Unit tests for differentiation matrices."""

import numpy as np
import pytest

from specol.differentiation import build_d1, build_d2, build_d2_squared
from specol.grid import GridType
from specol.interpolation import LagrangeInterpolant


CHEBYSHEV_TYPES = [GridType.CHEBYSHEV_GAUSS, GridType.CHEBYSHEV_GAUSS_LOBATTO]


class TestFirstDerivative:
    @pytest.mark.parametrize("grid_type", CHEBYSHEV_TYPES)
    @pytest.mark.parametrize("N", range(1, 21))
    def test_row_sums_vanish_chebyshev(self, grid_type, N):
        d1 = LagrangeInterpolant(N, grid_type).d1
        assert np.all(np.abs(d1.sum(axis=1)) < 1e-10)

    @pytest.mark.parametrize("N", range(1, 21))
    def test_row_sums_vanish_uniform(self, N):
        d1 = LagrangeInterpolant(N, GridType.UNIFORM).d1
        assert np.all(np.abs(d1.sum(axis=1)) < 1e-10)

    @pytest.mark.parametrize("grid_type", list(GridType))
    def test_constant_has_zero_derivative(self, grid_type):
        interp = LagrangeInterpolant(8, grid_type)
        assert np.allclose(interp.d1 @ np.full(9, 3.5), 0.0, atol=1e-12)

    @pytest.mark.parametrize("grid_type", list(GridType))
    def test_exact_for_monomials(self, grid_type):
        interp = LagrangeInterpolant(8, grid_type)
        x = np.array(interp.x)
        for k in range(1, 9):
            assert np.allclose(interp.d1 @ x**k, k * x ** (k - 1), atol=1e-10)

    def test_lobatto_corner_entries(self):
        N = 8
        d1 = LagrangeInterpolant(N, GridType.CHEBYSHEV_GAUSS_LOBATTO).d1
        corner = (2.0 * N * N + 1.0) / 6.0
        assert d1[0, 0] == pytest.approx(-corner, rel=1e-12)
        assert d1[N, N] == pytest.approx(corner, rel=1e-12)

    def test_two_point_matrix(self):
        d1 = build_d1(np.array([-1.0, 1.0]), np.array([-0.5, 0.5]))
        assert np.allclose(d1, [[-0.5, 0.5], [-0.5, 0.5]])

    def test_off_diagonal_formula(self):
        interp = LagrangeInterpolant(5, GridType.UNIFORM)
        x, w, d1 = interp.x, interp.weights, interp.d1
        for i in range(6):
            for j in range(6):
                if i != j:
                    assert d1[i, j] == pytest.approx((w[j] / w[i]) / (x[i] - x[j]), rel=1e-14)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            build_d1(np.zeros(3), np.ones(4))


class TestSecondDerivative:
    @pytest.mark.parametrize("method", ["analytic", "squared"])
    @pytest.mark.parametrize("grid_type", list(GridType))
    @pytest.mark.parametrize("N", [1, 2, 4, 8, 12, 20])
    def test_row_sums_vanish(self, method, grid_type, N):
        d2 = LagrangeInterpolant(N, grid_type, d2_method=method).d2
        scale = max(1.0, float(np.max(np.abs(d2))))
        assert np.all(np.abs(d2.sum(axis=1)) < 1e-10 * scale)

    @pytest.mark.parametrize("method", ["analytic", "squared"])
    @pytest.mark.parametrize("grid_type", list(GridType))
    def test_exact_for_monomials(self, method, grid_type):
        interp = LagrangeInterpolant(8, grid_type, d2_method=method)
        x = np.array(interp.x)
        for k in range(2, 9):
            assert np.allclose(interp.d2 @ x**k, k * (k - 1) * x ** (k - 2), atol=1e-8)
        assert np.allclose(interp.d2 @ x, 0.0, atol=1e-10)

    @pytest.mark.parametrize("grid_type", list(GridType))
    def test_analytic_matches_squared(self, grid_type):
        analytic = LagrangeInterpolant(10, grid_type, d2_method="analytic").d2
        squared = LagrangeInterpolant(10, grid_type, d2_method="squared").d2
        scale = float(np.max(np.abs(analytic)))
        assert np.allclose(analytic, squared, rtol=0.0, atol=1e-10 * scale)

    def test_linear_interpolant_has_zero_second_derivative(self):
        d2 = LagrangeInterpolant(1, GridType.CHEBYSHEV_GAUSS_LOBATTO).d2
        assert np.array_equal(d2, np.zeros((2, 2)))

    def test_free_functions_agree_with_interpolant(self):
        interp = LagrangeInterpolant(6, GridType.CHEBYSHEV_GAUSS)
        d1 = build_d1(interp.x, interp.weights)
        assert np.array_equal(d1, interp.d1)
        assert np.array_equal(build_d2(interp.x, interp.weights, d1), interp.d2)
        assert np.allclose(build_d2_squared(d1), d1 @ d1, atol=1e-9)

    def test_d2_shape_mismatch(self):
        with pytest.raises(ValueError):
            build_d2(np.zeros(3), np.ones(3), np.eye(4))


class TestCaching:
    def test_matrices_are_cached(self):
        interp = LagrangeInterpolant(6)
        assert interp.d1 is interp.d1
        assert interp.d2 is interp.calc_d2()

    def test_d2_before_d1(self):
        interp = LagrangeInterpolant(6, d2_method="squared")
        d2 = interp.d2
        assert interp.d1 is interp.calc_d1()
        assert np.array_equal(d2, build_d2_squared(interp.d1))

    def test_repeated_builds_are_bit_identical(self):
        a = LagrangeInterpolant(9, GridType.UNIFORM)
        b = LagrangeInterpolant(9, GridType.UNIFORM)
        assert np.array_equal(a.d1, b.d1)
        assert np.array_equal(a.d2, b.d2)

    def test_cached_matrices_are_read_only(self):
        interp = LagrangeInterpolant(4)
        with pytest.raises(ValueError):
            interp.d1[0, 0] = 1.0
        with pytest.raises(ValueError):
            interp.d2[1, 1] = 1.0
