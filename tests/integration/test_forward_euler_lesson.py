# tests/integration/test_forward_euler_lesson.py
"""
Integration tests: the Forward Euler lesson end to end.

Tests verify:
- The logistic section plots exactly what `integrate` computes
- Error-vs-dt curves agree with `euler_error_vs_dt`
- Rendering the whole lesson through the CLI writes one file per section
- JIT on/off parity of the plotted errors
"""
from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import numpy as np
import pytest

from flowlab import cli, get_lesson, integrate, lessons
from flowlab.analysis import default_dt_range, euler_error_vs_dt
from flowlab.models.scalar import logistic, logistic_exact


def test_logistic_section_matches_integrate():
    fig = get_lesson("forward-euler").render("logistic", {"pow": 0.4, "x0": 0.1})
    try:
        t, x = fig.axes[0].get_lines()[0].get_data()
    finally:
        plt.close(fig)

    sol = integrate(logistic, 0.1, (0.0, 7.0), 2.0 ** 0.4)
    np.testing.assert_allclose(t, sol.t)
    np.testing.assert_allclose(x, sol.x)


def test_logistic_error_section_matches_analysis():
    fig = get_lesson("forward-euler").render("logistic-error", {"x0": 0.5})
    try:
        dts, errs = fig.axes[0].get_lines()[0].get_data()
    finally:
        plt.close(fig)

    np.testing.assert_allclose(dts, default_dt_range())
    expected = euler_error_vs_dt(logistic, lambda t: logistic_exact(t, 0.5), 0.5, (0.0, 7.0), dts[::97])
    np.testing.assert_allclose(errs[::97], expected)
    # first-order method: small dt is much better than dt = 1
    assert errs[0] < errs[-1] / 100


def test_error_curves_identical_with_jit():
    pytest.importorskip("numba")
    lessons.configure(jit=True)
    fig = get_lesson("forward-euler").render("capacitor-error", {"x0": 0.25})
    try:
        _, errs_jit = fig.axes[0].get_lines()[0].get_data()
    finally:
        plt.close(fig)

    lessons.configure(jit=False)
    fig = get_lesson("forward-euler").render("capacitor-error", {"x0": 0.25})
    try:
        _, errs_py = fig.axes[0].get_lines()[0].get_data()
    finally:
        plt.close(fig)
    np.testing.assert_allclose(errs_jit, errs_py, rtol=0.0, atol=1e-12)


def test_cli_renders_every_section(tmp_path: Path, capsys):
    code = cli.main(["render", "forward-euler", "--set", "x0=0.5", "--out", str(tmp_path), "--fmt", "png"])
    captured = capsys.readouterr()
    assert code == 0

    lesson = get_lesson("forward-euler")
    expected = [tmp_path / f"forward-euler-{name}.png" for name in lesson.section_names()]
    assert captured.out.split() == [str(p) for p in expected]
    for path in expected:
        assert path.exists()
        assert path.stat().st_size > 0
