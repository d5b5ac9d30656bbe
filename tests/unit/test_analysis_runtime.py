# tests/unit/test_analysis_runtime.py
from __future__ import annotations

import numpy as np
import pytest

from flowlab.analysis import (
    default_dt_range,
    derivative_dt_range,
    euler_error_vs_dt,
    forward_difference_error,
    reciprocal_product,
    roundoff_dt_range,
)
from flowlab.models.scalar import capacitor, capacitor_exact, logistic, logistic_exact


def test_dt_ranges():
    dts = default_dt_range()
    assert dts.shape == (1000,)
    assert dts[0] == pytest.approx(1e-4)
    assert dts[-1] == pytest.approx(1.0)

    tiny = roundoff_dt_range()
    assert tiny.shape == (100,)
    np.testing.assert_allclose(tiny[[0, -1]], [1e-17, 1e-14])

    deriv = derivative_dt_range()
    np.testing.assert_allclose(deriv[[0, -1]], [1e-16, 1e-8])


def test_euler_error_shrinks_with_dt_on_capacitor():
    dts = np.array([0.5, 0.1, 0.01])
    errs = euler_error_vs_dt(capacitor, lambda t: capacitor_exact(t, 0.25), 0.25, (0.0, 5.0), dts)

    assert errs.shape == (3,)
    assert np.all(errs >= 0.0)
    assert errs[0] > errs[1] > errs[2]


def test_euler_error_matches_manual_run():
    dt = 0.25
    errs = euler_error_vs_dt(logistic, lambda t: logistic_exact(t, 0.1), 0.1, (0.0, 1.0), [dt])

    x = 0.1
    for _ in range(4):
        x = x + x * (1.0 - x) * dt
    assert errs[0] == pytest.approx(abs(logistic_exact(1.0, 0.1) - x))


def test_euler_error_respects_max_steps():
    with pytest.raises(ValueError, match="needs"):
        euler_error_vs_dt(capacitor, lambda t: 1.0, 0.0, (0.0, 1.0), [1e-3], max_steps=10)


def test_roundoff_error_on_tiny_interval():
    """Over (0, 1e-12) truncation is negligible, so what remains is rounding."""
    dts = roundoff_dt_range(5)[-2:]
    errs = euler_error_vs_dt(logistic, lambda t: logistic_exact(t, 0.25), 0.25, (0.0, 1e-12), dts)
    assert np.all(np.isfinite(errs))
    assert np.all(errs < 1e-12)


def test_reciprocal_product_exposes_rounding():
    assert reciprocal_product(49) != 1.0
    assert reciprocal_product(49) == pytest.approx(1.0)
    assert reciprocal_product(2) == 1.0


def test_forward_difference_error_grows_as_dt_shrinks():
    dts = derivative_dt_range()
    errs = forward_difference_error(dts, 0.25)
    assert errs.shape == dts.shape
    # round-off dominates the whole range: the tiniest steps are useless
    assert errs[0] > 1e-2
    assert errs[-1] < 1e-7
    assert errs[:40].mean() > errs[-40:].mean()
