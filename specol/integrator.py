"""Adaptive time integration for semi-discrete (method-of-lines) systems.

This module provides embedded explicit Runge-Kutta pairs and the usual
accept/reject step size controller. It supports Bogacki-Shampine 3(2),
Dormand-Prince 5(4) and Dormand-Prince 8(5,3); all propagate the
higher-order solution.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from .exceptions import IntegrationFailure

logger = logging.getLogger(__name__)

RhsFunction = Callable[[float, np.ndarray], np.ndarray]


@dataclass
class AdaptiveStepController:
    """Step size controller with error-per-step acceptance.

    Attributes:
        rtol: Relative tolerance for error control
        atol: Absolute tolerance for error control
        safety_factor: Safety factor for step size adjustment (typically 0.9)
        min_dt_factor: Minimum allowed step size reduction factor
        max_dt_factor: Maximum allowed step size increase factor
        max_rejections: Maximum number of consecutive step rejections
    """

    rtol: float = 1e-8
    atol: float = 1e-10
    safety_factor: float = 0.9
    min_dt_factor: float = 0.2
    max_dt_factor: float = 5.0
    max_rejections: int = 20

    def compute_new_dt(self, dt_current: float, error: float,
                       solution_scale: float, order: int) -> Tuple[float, bool]:
        """Compute new time step and whether to accept current step.

        Args:
            dt_current: Current time step
            error: Local error estimate (max norm across all components)
            solution_scale: Scale of the solution (for relative error)
            order: Order of the embedded (lower-order) solution

        Returns:
            Tuple of (new_dt, accept)
        """
        tolerance = self.atol + self.rtol * solution_scale
        accept = error <= tolerance

        if not np.isfinite(error):
            factor = self.min_dt_factor
        elif error > 0:
            factor = self.safety_factor * (tolerance / error) ** (1.0 / (order + 1))
            factor = float(np.clip(factor, self.min_dt_factor, self.max_dt_factor))
        else:
            factor = self.max_dt_factor
        if not accept:
            # A rejected step never grows
            factor = min(factor, 1.0)
        return dt_current * factor, accept


class EmbeddedRungeKutta:
    """Explicit embedded Runge-Kutta pair given by its Butcher tableau."""

    c: np.ndarray
    a: np.ndarray
    b_high: np.ndarray
    b_low: np.ndarray

    def __init__(self, name: str, order_high: int, order_low: int):
        self.name = name
        self.order_high = order_high
        self.order_low = order_low

    @property
    def n_stages(self) -> int:
        return len(self.c)

    def step(self, rhs_func: RhsFunction, t: float, U: np.ndarray,
             dt: float) -> Tuple[np.ndarray, float]:
        """Perform one embedded RK step.

        Returns:
            Tuple of (U_high, error) where error is the local error estimate
        """
        k = [None] * self.n_stages
        k[0] = np.asarray(rhs_func(t, U), dtype=float)
        for i in range(1, self.n_stages):
            U_stage = U.copy()
            for j in range(i):
                if self.a[i, j] != 0.0:
                    U_stage += dt * self.a[i, j] * k[j]
            k[i] = np.asarray(rhs_func(t + self.c[i] * dt, U_stage), dtype=float)

        U_high = U.copy()
        for i in range(self.n_stages):
            if self.b_high[i] != 0.0:
                U_high += dt * self.b_high[i] * k[i]

        return U_high, self.error_estimate(k, dt)

    def error_estimate(self, k, dt: float) -> float:
        """Max-norm of the difference between the high and low order solutions."""
        delta = np.zeros_like(k[0])
        for i in range(self.n_stages):
            delta += dt * (self.b_high[i] - self.b_low[i]) * k[i]
        return float(np.max(np.abs(delta)))


class BogackiShampine32(EmbeddedRungeKutta):
    """Bogacki-Shampine 3(2) pair."""

    def __init__(self):
        super().__init__("bs23", 3, 2)
        self.c = np.array([0.0, 0.5, 0.75, 1.0])
        self.a = np.array([
            [0.0, 0.0, 0.0, 0.0],
            [0.5, 0.0, 0.0, 0.0],
            [0.0, 0.75, 0.0, 0.0],
            [2.0/9.0, 1.0/3.0, 4.0/9.0, 0.0]
        ])
        self.b_high = np.array([2.0/9.0, 1.0/3.0, 4.0/9.0, 0.0])
        self.b_low = np.array([7.0/24.0, 1.0/4.0, 1.0/3.0, 1.0/8.0])


class DormandPrince54(EmbeddedRungeKutta):
    """Dormand-Prince 5(4) pair."""

    def __init__(self):
        super().__init__("dopri5", 5, 4)
        self.c = np.array([0.0, 1.0/5.0, 3.0/10.0, 4.0/5.0, 8.0/9.0, 1.0, 1.0])
        self.a = np.array([
            [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
            [1.0/5.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
            [3.0/40.0, 9.0/40.0, 0.0, 0.0, 0.0, 0.0, 0.0],
            [44.0/45.0, -56.0/15.0, 32.0/9.0, 0.0, 0.0, 0.0, 0.0],
            [19372.0/6561.0, -25360.0/2187.0, 64448.0/6561.0, -212.0/729.0, 0.0, 0.0, 0.0],
            [9017.0/3168.0, -355.0/33.0, 46732.0/5247.0, 49.0/176.0, -5103.0/18656.0, 0.0, 0.0],
            [35.0/384.0, 0.0, 500.0/1113.0, 125.0/192.0, -2187.0/6784.0, 11.0/84.0, 0.0]
        ])
        self.b_high = np.array([35.0/384.0, 0.0, 500.0/1113.0, 125.0/192.0, -2187.0/6784.0, 11.0/84.0, 0.0])
        self.b_low = np.array([5179.0/57600.0, 0.0, 7571.0/16695.0, 393.0/640.0, -92097.0/339200.0, 187.0/2100.0, 1.0/40.0])


class DormandPrince853(EmbeddedRungeKutta):
    """Dormand-Prince 8(5,3) pair.

    Twelve stages, eighth-order solution. The local error combines the
    fifth- and third-order embedded estimates as in DOP853 (Hairer, Norsett,
    Wanner, Solving ODEs I), which behaves like a seventh-order estimate for
    step size control.
    """

    def __init__(self):
        super().__init__("dopri8", 8, 7)
        self.c = np.array([
            0.0,
            0.526001519587677318785587544488e-01,
            0.789002279381515978178381316732e-01,
            0.118350341907227396726757197510,
            0.281649658092772603273242802490,
            0.333333333333333333333333333333,
            0.25,
            0.307692307692307692307692307692,
            0.651282051282051282051282051282,
            0.6,
            0.857142857142857142857142857142,
            1.0,
        ])

        a = np.zeros((12, 12))
        a[1, 0] = 5.26001519587677318785587544488e-2

        a[2, 0] = 1.97250569845378994544595329183e-2
        a[2, 1] = 5.91751709536136983633785987549e-2

        a[3, 0] = 2.95875854768068491816892993775e-2
        a[3, 2] = 8.87627564304205475450678981324e-2

        a[4, 0] = 2.41365134159266685502369798665e-1
        a[4, 2] = -8.84549479328286085344864962717e-1
        a[4, 3] = 9.24834003261792003115737966543e-1

        a[5, 0] = 3.7037037037037037037037037037e-2
        a[5, 3] = 1.70828608729473871279604482173e-1
        a[5, 4] = 1.25467687566822425016691814123e-1

        a[6, 0] = 3.7109375e-2
        a[6, 3] = 1.70252211019544039314978060272e-1
        a[6, 4] = 6.02165389804559606850219397283e-2
        a[6, 5] = -1.7578125e-2

        a[7, 0] = 3.70920001185047927108779319836e-2
        a[7, 3] = 1.70383925712239993810214054705e-1
        a[7, 4] = 1.07262030446373284651809199168e-1
        a[7, 5] = -1.53194377486244017527936158236e-2
        a[7, 6] = 8.27378916381402288758473766002e-3

        a[8, 0] = 6.24110958716075717114429577812e-1
        a[8, 3] = -3.36089262944694129406857109825
        a[8, 4] = -8.68219346841726006818189891453e-1
        a[8, 5] = 2.75920996994467083049415600797e1
        a[8, 6] = 2.01540675504778934086186788979e1
        a[8, 7] = -4.34898841810699588477366255144e1

        a[9, 0] = 4.77662536438264365890433908527e-1
        a[9, 3] = -2.48811461997166764192642586468
        a[9, 4] = -5.90290826836842996371446475743e-1
        a[9, 5] = 2.12300514481811942347288949897e1
        a[9, 6] = 1.52792336328824235832596922938e1
        a[9, 7] = -3.32882109689848629194453265587e1
        a[9, 8] = -2.03312017085086261358222928593e-2

        a[10, 0] = -9.3714243008598732571704021658e-1
        a[10, 3] = 5.18637242884406370830023853209
        a[10, 4] = 1.09143734899672957818500254654
        a[10, 5] = -8.14978701074692612513997267357
        a[10, 6] = -1.85200656599969598641566180701e1
        a[10, 7] = 2.27394870993505042818970056734e1
        a[10, 8] = 2.49360555267965238987089396762
        a[10, 9] = -3.0467644718982195003823669022

        a[11, 0] = 2.27331014751653820792359768449
        a[11, 3] = -1.05344954667372501984066689879e1
        a[11, 4] = -2.00087205822486249909675718444
        a[11, 5] = -1.79589318631187989172765950534e1
        a[11, 6] = 2.79488845294199600508499808837e1
        a[11, 7] = -2.85899827713502369474065508674
        a[11, 8] = -8.87285693353062954433549289258
        a[11, 9] = 1.23605671757943030647266201528e1
        a[11, 10] = 6.43392746015763530355970484046e-1
        self.a = a

        b = np.zeros(12)
        b[0] = 5.42937341165687622380535766363e-2
        b[5] = 4.45031289275240888144113950566
        b[6] = 1.89151789931450038304281599044
        b[7] = -5.8012039600105847814672114227
        b[8] = 3.1116436695781989440891606237e-1
        b[9] = -1.52160949662516078556178806805e-1
        b[10] = 2.01365400804030348374776537501e-1
        b[11] = 4.47106157277725905176885569043e-2
        self.b_high = b

        # Error weights of the fifth- and third-order embedded solutions
        e5 = np.zeros(12)
        e5[0] = 0.1312004499419488073250102996e-1
        e5[5] = -0.1225156446376204440720569753e+1
        e5[6] = -0.4957589496572501915214079952
        e5[7] = 0.1664377182454986536961530415e+1
        e5[8] = -0.3503288487499736816886487290
        e5[9] = 0.3341791187130174790297318841
        e5[10] = 0.8192320648511571246570742613e-1
        e5[11] = -0.2235530786388629525884427845e-1
        self.e5 = e5

        e3 = b.copy()
        e3[0] -= 0.244094488188976377952755905512
        e3[8] -= 0.733846688281611857341361741547
        e3[11] -= 0.220588235294117647058823529412e-1
        self.e3 = e3

        # Fifth-order solution weights; b_high - b_low equals e5
        self.b_low = b - e5

    def error_estimate(self, k, dt: float) -> float:
        err5 = np.zeros_like(k[0])
        err3 = np.zeros_like(k[0])
        for i in range(self.n_stages):
            err5 += dt * self.e5[i] * k[i]
            err3 += dt * self.e3[i] * k[i]
        e5 = float(np.max(np.abs(err5)))
        e3 = float(np.max(np.abs(err3)))
        denom = e5 * e5 + 0.01 * e3 * e3
        if denom == 0.0:
            return 0.0
        return float(e5 * e5 / np.sqrt(denom))


def create_adaptive_method(method_name: str) -> EmbeddedRungeKutta:
    """Create an embedded Runge-Kutta pair by name ("bs23", "dopri5", "dopri8").

    Raises:
        ValueError: If method_name is not recognized
    """
    method_name = method_name.lower()

    if method_name in ("bs23", "rk23"):
        return BogackiShampine32()
    elif method_name in ("dopri5", "rk45"):
        return DormandPrince54()
    elif method_name in ("dopri8", "dop853", "rk78"):
        return DormandPrince853()
    else:
        raise ValueError(f"Unknown adaptive method: {method_name}. "
                         f"Supported methods: bs23, dopri5, dopri8")


@dataclass
class IntegrationStats:
    """Work counters reported by an integration.

    Attributes:
        n_function_evals: Number of right-hand side evaluations
        n_accepted: Number of accepted steps
        n_rejected: Number of rejected steps
        last_dt: Last accepted step size
    """

    n_function_evals: int = 0
    n_accepted: int = 0
    n_rejected: int = 0
    last_dt: float = 0.0

    @property
    def n_steps(self) -> int:
        return self.n_accepted + self.n_rejected

    def __str__(self) -> str:
        return (
            f"Number of function evaluations   = {self.n_function_evals}\n"
            f"Number of performed steps        = {self.n_steps}\n"
            f"Number of accepted steps         = {self.n_accepted}\n"
            f"Number of rejected steps         = {self.n_rejected}\n"
            f"Last accepted/suggested stepsize = {self.last_dt:.6e}"
        )


class AdaptiveTimeStepper:
    """Drive an embedded RK pair from t0 to t1 under a step controller."""

    def __init__(self, method: EmbeddedRungeKutta, controller: AdaptiveStepController,
                 max_steps: int = 100000):
        self.method = method
        self.controller = controller
        self.max_steps = int(max_steps)

    def _initial_dt(self, rhs_func: RhsFunction, t0: float, y0: np.ndarray,
                    f0: np.ndarray, span: float) -> float:
        scale = self.controller.atol + self.controller.rtol * np.abs(y0)
        d0 = float(np.max(np.abs(y0) / scale))
        d1 = float(np.max(np.abs(f0) / scale))
        if not (d0 >= 1e-5 and d1 >= 1e-5 and np.isfinite(d1)):
            dt = 1e-6
        else:
            dt = 0.01 * d0 / d1
        return min(dt, span)

    def integrate(self, rhs_func: RhsFunction, y0: np.ndarray, t0: float, t1: float,
                  dt0: Optional[float] = None) -> Tuple[np.ndarray, IntegrationStats]:
        stats = IntegrationStats()

        def counted(t, y):
            stats.n_function_evals += 1
            return rhs_func(t, y)

        U = np.array(y0, dtype=float, copy=True)
        t = float(t0)
        t1 = float(t1)
        span = t1 - t
        if span < 0.0:
            raise ValueError(f"Final time {t1} must not precede initial time {t0}")
        if span == 0.0:
            return U, stats

        if dt0 is None:
            dt = self._initial_dt(counted, t, U, np.asarray(counted(t, U), dtype=float), span)
        else:
            dt = min(float(dt0), span)
        if dt <= 0.0:
            raise ValueError(f"Initial step must be positive, got {dt}")

        consecutive_rejections = 0
        while t < t1:
            if stats.n_steps >= self.max_steps:
                raise IntegrationFailure(
                    f"Reached max_steps={self.max_steps} at t={t:.6e} before t1={t1:.6e}"
                )
            dt = min(dt, t1 - t)
            if t + dt == t:
                raise IntegrationFailure(f"Step size underflow at t={t:.6e} (dt={dt:.3e})")

            U_new, error = self.method.step(counted, t, U, dt)
            if np.all(np.isfinite(U_new)):
                solution_scale = max(float(np.max(np.abs(U))), float(np.max(np.abs(U_new))))
            else:
                error = np.inf
                solution_scale = float(np.max(np.abs(U)))
            dt_next, accept = self.controller.compute_new_dt(
                dt, error, solution_scale, self.method.order_low
            )

            if accept:
                # Land exactly on t1 to avoid round-off drift
                t = t1 if t1 - (t + dt) <= 1e-14 * max(1.0, abs(t1)) else t + dt
                U = U_new
                stats.n_accepted += 1
                stats.last_dt = dt
                consecutive_rejections = 0
            else:
                stats.n_rejected += 1
                consecutive_rejections += 1
                logger.debug("Rejected step at t=%.6e dt=%.3e error=%.3e", t, dt, error)
                if consecutive_rejections >= self.controller.max_rejections:
                    raise IntegrationFailure(
                        f"{consecutive_rejections} consecutive step rejections at t={t:.6e}"
                    )
            dt = dt_next

        return U, stats


def create_adaptive_stepper(method_name: str = "dopri5", rtol: float = 1e-8,
                            atol: float = 1e-10, max_steps: int = 100000,
                            **controller_kwargs) -> AdaptiveTimeStepper:
    """Create an adaptive time stepper with method and controller."""
    method = create_adaptive_method(method_name)
    controller = AdaptiveStepController(rtol=rtol, atol=atol, **controller_kwargs)
    return AdaptiveTimeStepper(method, controller, max_steps=max_steps)


def integrate(rhs_func: RhsFunction, y0: np.ndarray, t0: float, t1: float,
              method: str = "dopri5", rtol: float = 1e-8, atol: float = 1e-10,
              dt0: Optional[float] = None, max_steps: int = 100000,
              **controller_kwargs) -> Tuple[np.ndarray, IntegrationStats]:
    """Integrate dy/dt = rhs_func(t, y) from t0 to t1.

    Returns:
        Tuple of (y(t1), stats). y0 is not modified.

    Raises:
        IntegrationFailure: On too many steps, repeated rejection or step underflow
    """
    stepper = create_adaptive_stepper(method, rtol=rtol, atol=atol,
                                      max_steps=max_steps, **controller_kwargs)
    y1, stats = stepper.integrate(rhs_func, y0, t0, t1, dt0=dt0)
    logger.debug("Integrated %s from t=%g to t=%g: %d accepted, %d rejected, %d evals",
                 stepper.method.name, t0, t1, stats.n_accepted, stats.n_rejected,
                 stats.n_function_evals)
    return y1, stats
