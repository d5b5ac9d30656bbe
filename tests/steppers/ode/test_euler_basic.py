# tests/steppers/ode/test_euler_basic.py
"""
End-to-end Forward Euler runs through `flowlab.integrate`.

Tests verify:
- Step count N = floor((t1 - t0) / dt) and the time grid
- The first step by hand
- First-order convergence on the capacitor equation
- Vector states
- Rejection of bad dt / tspan and the max_steps cap
- JIT and pure-Python kernels agree
"""
from __future__ import annotations

import math

import numpy as np
import pytest

from flowlab import integrate
from flowlab.models.scalar import capacitor, capacitor_exact, logistic
from flowlab.simulate import step_count
from flowlab.steppers import get_stepper


def test_euler_registered_with_aliases():
    spec = get_stepper("euler")
    assert spec.meta.order == 1
    assert spec.meta.scheme == "explicit"
    assert get_stepper("fwd_euler") is spec
    assert get_stepper("forward_euler") is spec


def test_unknown_stepper_lists_available():
    with pytest.raises(KeyError, match="Available:.*euler"):
        get_stepper("leapfrog")


def test_euler_grid_and_first_step():
    sol = integrate(capacitor, 0.25, (0.0, 5.0), 2.0 ** 0.6)

    n = math.floor(5.0 / 2.0 ** 0.6)
    assert sol.n == n + 1
    assert sol.stepper == "euler"
    np.testing.assert_allclose(sol.t, 2.0 ** 0.6 * np.arange(n + 1))
    assert sol.x[0] == 0.25
    assert sol.x[1] == pytest.approx(0.25 + (1.0 - 0.25) * 2.0 ** 0.6)


def test_step_count_floor_and_zero_span():
    assert step_count((0.0, 1.0), 0.3) == 3
    assert step_count((2.0, 2.0), 0.1) == 0

    sol = integrate(capacitor, 0.5, (2.0, 2.0), 0.1)
    assert sol.n == 1
    assert sol.t[0] == 2.0
    assert sol.final == 0.5


def test_euler_capacitor_first_order_convergence():
    """Halving dt roughly halves the error at t = 1."""
    errs = []
    for dt in (0.01, 0.005, 0.0025):
        sol = integrate(capacitor, 0.25, (0.0, 1.0), dt)
        errs.append(abs(sol.final - capacitor_exact(sol.t[-1], 0.25)))

    ratios = [errs[0] / errs[1], errs[1] / errs[2]]
    np.testing.assert_allclose(ratios, [2.0, 2.0], rtol=0.05)


def test_euler_fixed_points_stay_put():
    sol = integrate(logistic, 0.0, (0.0, 7.0), 0.5)
    np.testing.assert_allclose(sol.x, 0.0)
    sol = integrate(logistic, 1.0, (0.0, 7.0), 0.5)
    np.testing.assert_allclose(sol.x, 1.0)


def test_euler_vector_state():
    def rot(x):
        return np.array([-x[1], x[0]])

    sol = integrate(rot, [1.0, 0.0], (0.0, 1.0), 0.1)
    assert sol.x.shape == (11, 2)
    np.testing.assert_allclose(sol.x[1], [1.0, 0.1])
    # explicit Euler spirals outwards on a centre
    radii = np.hypot(sol.x[:, 0], sol.x[:, 1])
    assert np.all(np.diff(radii) > 0)


@pytest.mark.parametrize("dt", [0.0, -0.1, float("nan"), float("inf")])
def test_euler_rejects_bad_dt(dt):
    with pytest.raises(ValueError, match="dt must be finite and positive"):
        integrate(capacitor, 0.0, (0.0, 1.0), dt)


def test_euler_rejects_reversed_tspan():
    with pytest.raises(ValueError, match="t0 <= t1"):
        integrate(capacitor, 0.0, (1.0, 0.0), 0.1)


def test_euler_rejects_matrix_initial_condition():
    with pytest.raises(ValueError, match="scalar or 1D"):
        integrate(capacitor, np.zeros((2, 2)), (0.0, 1.0), 0.1)


def test_euler_max_steps_names_step_count():
    with pytest.raises(ValueError, match="needs 1048576 steps"):
        integrate(capacitor, 0.0, (0.0, 1.0), 2.0 ** -20, max_steps=1000)


def test_euler_jit_matches_python():
    pytest.importorskip("numba")

    def decay(x):
        return -2.0 * x

    py = integrate(decay, 1.0, (0.0, 2.0), 0.01, jit=False)
    jit = integrate(decay, 1.0, (0.0, 2.0), 0.01, jit=True)
    np.testing.assert_allclose(jit.x, py.x, rtol=0.0, atol=1e-12)


def test_euler_calls_rhs_once_per_step():
    calls = []

    def f(x):
        calls.append(x)
        return 1.0 - x

    sol = integrate(f, 0.0, (0.0, 1.0), 0.125)
    assert len(sol.t) == 9
    # no extra evaluation past the last sample
    assert len(calls) == 8
    assert calls[-1] == sol.x[-2]


class _Rate:
    k = 1.0


_RATE = _Rate()


def test_euler_jit_failure_is_runtime_error():
    pytest.importorskip("numba")
    with pytest.raises(RuntimeError, match="JIT compilation with numba failed"):
        integrate(lambda x: _RATE.k - x, 0.0, (0.0, 1.0), 0.1, jit=True)
