# tests/unit/test_plot_trajectories.py
from __future__ import annotations

import matplotlib

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import numpy as np
import pytest

from flowlab.errors import FlowlabWarning
from flowlab.models.planar import rotation
from flowlab.plot import start_grid, theme, trajectories


def test_start_grid_by_step_and_count():
    np.testing.assert_allclose(start_grid(-1.0, 1.0, step=0.4), [-1.0, -0.6, -0.2, 0.2, 0.6, 1.0])
    np.testing.assert_allclose(start_grid(0.0, 0.7, n=5), np.linspace(0.0, 0.7, 5))
    with pytest.raises(ValueError, match="exactly one"):
        start_grid(0.0, 1.0)
    with pytest.raises(ValueError, match="exactly one"):
        start_grid(0.0, 1.0, step=0.1, n=3)


def test_trajectories_draws_every_start():
    fig, ax = plt.subplots()
    trajs = trajectories(
        rotation, tfinal=1.0, params=(1.0, 1.0),
        xstart=[-0.5, 0.5], ystart=[0.0, 0.5, 1.0], xlim=(-1, 1), ylim=(-1, 1), ax=ax,
    )

    assert len(trajs) == 6
    assert len(ax.get_lines()) == 6
    # one arrowhead per path
    assert len(ax.texts) == 6
    assert ax.get_lines()[0].get_color() == theme.get("traj_color")
    np.testing.assert_allclose(trajs[0].y[:, 0], [-0.5, 0.0])
    np.testing.assert_allclose(trajs[1].y[:, 0], [-0.5, 0.5])
    assert ax.get_xlim() == (-1.0, 1.0)
    assert list(ax.get_xticks()) == []
    plt.close(fig)


def test_trajectories_keeps_ticks_when_asked():
    fig, ax = plt.subplots()
    trajectories(rotation, tfinal=0.5, xstart=[0.5], ystart=[0.5], ticks=True, ax=ax)
    assert len(ax.get_xticks()) > 0
    plt.close(fig)


def test_trajectories_skips_failed_solves_with_warning():
    def blowup(state, params, t):
        x, y = state
        return (x * x, 0.0)

    fig, ax = plt.subplots()
    with pytest.warns(FlowlabWarning, match=r"Skipping trajectory from \(1\.000, 0\.000\)"):
        trajs = trajectories(blowup, tfinal=3.0, xstart=[-1.0, 1.0], ystart=[0.0], ax=ax)

    assert len(trajs) == 1
    assert trajs[0].y[0, 0] == -1.0
    assert len(ax.get_lines()) == 1
    plt.close(fig)
