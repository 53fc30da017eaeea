"""Tests for the problem registry and the bundled drivers."""

import os

import numpy as np
import pytest

from specol import run_problem
from specol.problems import BaseProblem, ProblemRegistry
from specol.problems.problem_list.bvp1d import BVP1DProblem, bvp1d_solution, bvp1d_source
from specol.problems.problem_list.heat1d import heat1d_initial, heat1d_solution


class TestRegistry:
    def test_builtin_problems(self):
        assert set(ProblemRegistry.list_problems()) >= {"bvp1d", "heat1d", "basis", "dft"}
        assert ProblemRegistry.is_registered("bvp1d")
        assert not ProblemRegistry.is_registered("sod")

    def test_get_problem_class(self):
        assert ProblemRegistry.get_problem_class("bvp1d") is BVP1DProblem

    def test_unknown_problem(self):
        with pytest.raises(KeyError, match="Unknown problem"):
            ProblemRegistry.get_problem_class("nonexistent")

    def test_create_problem(self, tmp_path):
        problem = ProblemRegistry.create_problem("bvp1d", config={"io": {"outdir": str(tmp_path)}})
        assert isinstance(problem, BaseProblem)
        assert problem.outdir == str(tmp_path)


class TestAnalyticalSolutions:
    def test_bvp1d_solution_satisfies_equation(self):
        x = np.linspace(-0.9, 0.9, 7)
        h = 1e-4
        u = bvp1d_solution
        d1 = (u(x + h) - u(x - h)) / (2 * h)
        d2 = (u(x + h) - 2 * u(x) + u(x - h)) / h**2
        assert np.allclose(d2 - 4 * d1 + 4 * u(x), bvp1d_source(x), atol=1e-5)

    def test_bvp1d_solution_boundary_values(self):
        assert bvp1d_solution(np.array([-1.0, 1.0])) == pytest.approx([0.0, 0.0], abs=1e-14)

    def test_heat1d_initial_matches_solution(self):
        x = np.linspace(-1.0, 1.0, 11)
        assert np.allclose(heat1d_initial(x), heat1d_solution(x, 0.0), atol=1e-14)


class TestDrivers:
    def test_bvp1d_default(self):
        problem = ProblemRegistry.create_problem("bvp1d")
        result = problem.run(plot=False, save=False)
        assert problem.N == 4
        assert result["u"].shape == (5,)
        assert result["u"][0] == pytest.approx(0.0, abs=1e-14)
        assert result["u"][-1] == pytest.approx(0.0, abs=1e-14)
        assert result["max_error"] < 0.1

    def test_bvp1d_converges(self):
        problem = ProblemRegistry.create_problem("bvp1d", config={"grid": {"N": 16}})
        assert problem.run(plot=False, save=False)["max_error"] < 1e-6

    def test_bvp1d_squared_d2(self):
        problem = ProblemRegistry.create_problem(
            "bvp1d", config={"grid": {"N": 12, "d2_method": "squared"}}
        )
        assert problem.run(plot=False, save=False)["max_error"] < 1e-6

    def test_heat1d(self):
        problem = ProblemRegistry.create_problem("heat1d", config={"grid": {"N": 10}})
        result = problem.run(plot=False, save=False)
        assert result["max_error"] < 1e-3
        assert result["u"][0] == result["u0"][0]
        assert result["u"][-1] == result["u0"][-1]
        assert result["n_accepted"] > 0
        assert result["n_function_evals"] == 1 + 12 * (result["n_accepted"] + result["n_rejected"])

    def test_heat1d_dopri5(self):
        problem = ProblemRegistry.create_problem(
            "heat1d", config={"grid": {"N": 10}, "integration": {"method": "dopri5"}}
        )
        result = problem.run(plot=False, save=False)
        assert result["max_error"] < 1e-3
        assert result["n_function_evals"] == 1 + 7 * (result["n_accepted"] + result["n_rejected"])

    @pytest.mark.parametrize("t0,t1", [(0.05, 0.1), (0.05, 0.15), (1.0, 1.1)])
    def test_heat1d_nonzero_start_time(self, t0, t1):
        reference = ProblemRegistry.create_problem(
            "heat1d", config={"integration": {"t0": 0.0, "t1": t1 - t0}}
        ).run(plot=False, save=False)
        result = ProblemRegistry.create_problem(
            "heat1d", config={"integration": {"t0": t0, "t1": t1}}
        ).run(plot=False, save=False)
        assert result["max_error"] < 1e-4
        assert np.allclose(result["u_exact"], reference["u_exact"], rtol=0.0, atol=1e-15)
        assert result["max_error"] == pytest.approx(reference["max_error"], rel=0.5, abs=1e-8)

    def test_basis(self):
        problem = ProblemRegistry.create_problem("basis")
        result = problem.run(plot=False, save=False)
        assert result["x_uniform"].shape == (7,)
        assert result["lebesgue_chebyshev_gauss_lobatto"] < result["lebesgue_uniform"]
        for key in ("lebesgue_uniform", "lebesgue_chebyshev_gauss", "lebesgue_chebyshev_gauss_lobatto"):
            assert result[key] >= 1.0

    def test_dft(self):
        problem = ProblemRegistry.create_problem("dft")
        result = problem.run(plot=False, save=False)
        assert np.allclose(result["peak_frequencies"], [50.0, 120.0])
        assert np.allclose(result["peak_amplitudes"], [0.7, 1.0])
        assert result["u_noisy"].shape == (1500,)

    def test_dft_seed_reproducible(self):
        a = ProblemRegistry.create_problem("dft").run(plot=False, save=False)
        b = ProblemRegistry.create_problem("dft").run(plot=False, save=False)
        assert np.array_equal(a["u_noisy"], b["u_noisy"])


class TestOutputs:
    @pytest.mark.parametrize(
        "name,files",
        [
            ("bvp1d", ["bvp1d.png", "bvp1d.npz"]),
            ("heat1d", ["heat1d.png", "heat1d.npz"]),
            ("dft", ["dft.png", "dft.npz"]),
            ("basis", ["basis_uniform.png", "basis_chebyshev_gauss.png",
                       "basis_chebyshev_gauss_lobatto.png", "basis.npz"]),
        ],
    )
    def test_plot_and_save(self, tmp_path, name, files):
        problem = ProblemRegistry.create_problem(name, config={"io": {"outdir": str(tmp_path)}})
        problem.run(plot=True, save=True)
        for f in files:
            assert os.path.isfile(tmp_path / f), f

    def test_config_file(self, tmp_path):
        cfg = tmp_path / "bvp.yaml"
        cfg.write_text(
            "grid:\n  N: 10\nio:\n  outdir: {}\n  format: svg\n  plot: true\n  save: false\n".format(
                tmp_path / "out"
            )
        )
        problem = ProblemRegistry.create_problem("bvp1d", config_path=str(cfg))
        result = problem.run()
        assert problem.N == 10
        assert result["max_error"] < 1e-6
        assert os.path.isfile(tmp_path / "out" / "bvp1d.svg")
        assert not os.path.exists(tmp_path / "out" / "bvp1d.npz")

    def test_run_problem(self, tmp_path):
        problem, result = run_problem("dft", outdir=str(tmp_path), plot=False, save=True)
        assert problem.outdir == str(tmp_path)
        assert os.path.isfile(tmp_path / "dft.npz")
        assert "peak_frequencies" in result
