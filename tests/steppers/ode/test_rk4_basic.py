# tests/steppers/ode/test_rk4_basic.py
"""
RK4 runs: accuracy on dx/dt = -a x and the error gap against Euler.
"""
from __future__ import annotations

import numpy as np
import pytest

from flowlab import integrate
from flowlab.models.scalar import logistic, logistic_exact
from flowlab.steppers import get_stepper, registry


def test_rk4_meta():
    spec = get_stepper("rk4")
    assert spec.meta.order == 4
    assert get_stepper("classical_rk4") is spec
    assert {"euler", "rk4"} <= set(registry())


def test_rk4_decay_analytic():
    def decay(x):
        return -x

    sol = integrate(decay, 1.0, (0.0, 2.0), 0.1, stepper="rk4")
    np.testing.assert_allclose(sol.x, np.exp(-sol.t), rtol=1e-5)
    assert sol.stepper == "rk4"


def test_rk4_beats_euler_on_logistic():
    x0, dt = 0.25, 0.1
    euler = integrate(logistic, x0, (0.0, 7.0), dt)
    rk4 = integrate(logistic, x0, (0.0, 7.0), dt, stepper="rk4")
    exact = logistic_exact(rk4.t[-1], x0)

    err_euler = abs(euler.final - exact)
    err_rk4 = abs(rk4.final - exact)
    assert err_rk4 < 1e-4
    assert err_rk4 < err_euler / 10


def test_rk4_vector_harmonic_oscillator():
    def sho(x):
        return np.array([x[1], -x[0]])

    sol = integrate(sho, [1.0, 0.0], (0.0, 2 * np.pi), 0.01, stepper="rk4")
    t = sol.t[-1]
    np.testing.assert_allclose(sol.final, [np.cos(t), -np.sin(t)], atol=1e-6)


def test_rk4_jit_matches_python():
    pytest.importorskip("numba")

    def decay(x):
        return -0.5 * x

    py = integrate(decay, 2.0, (0.0, 1.0), 0.05, stepper="rk4")
    jit = integrate(decay, 2.0, (0.0, 1.0), 0.05, stepper="rk4", jit=True)
    np.testing.assert_allclose(jit.x, py.x, rtol=1e-12)


def test_rk4_calls_rhs_four_times_per_step():
    calls = []

    def f(x):
        calls.append(x)
        return -x

    integrate(f, 1.0, (0.0, 1.0), 0.25, stepper="rk4")
    assert len(calls) == 4 * 4
