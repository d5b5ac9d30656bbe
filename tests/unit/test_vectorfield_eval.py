import matplotlib

matplotlib.use("Agg", force=True)

import matplotlib.pyplot as plt
import numpy as np
import pytest

from flowlab.models.linear import eigensystem, linear_field
from flowlab.models.planar import pendulum, rotation, strogatz_6_3_10
from flowlab.plot.vectorfield import eval_vectorfield, linear_vectorfield, vectorfield


def test_eval_vectorfield_grid_layout_and_values():
    X, Y, U, V = eval_vectorfield(rotation, (2.0, 3.0), xlim=(-1, 1), ylim=(0, 1), grid=(3, 2))

    assert X.shape == (2, 3)
    np.testing.assert_allclose(X[0], [-1.0, 0.0, 1.0])
    np.testing.assert_allclose(Y[:, 0], [0.0, 1.0])
    np.testing.assert_allclose(U, -2.0 * Y)
    np.testing.assert_allclose(V, 3.0 * X)


def test_eval_vectorfield_normalize_then_scale():
    X, Y, U, V = eval_vectorfield(strogatz_6_3_10, xlim=(-1, 1), ylim=(-1, 1), grid=5, normalize=True, scale=0.2)

    speed = np.hypot(U, V)
    nonzero = speed > 0
    np.testing.assert_allclose(speed[nonzero], 0.2)
    # the origin is a fixed point and stays a zero vector
    assert speed[2, 2] == 0.0


def test_eval_vectorfield_scale_only():
    _, _, U1, V1 = eval_vectorfield(rotation, (1.0, 1.0), grid=4)
    _, _, U2, V2 = eval_vectorfield(rotation, (1.0, 1.0), grid=4, scale=0.5)
    np.testing.assert_allclose(U2, 0.5 * U1)
    np.testing.assert_allclose(V2, 0.5 * V1)


def test_vectorfield_draws_quiver_in_data_units():
    fig, ax = plt.subplots()
    handle = vectorfield(rotation, params=(1.0, 1.0), ax=ax, xlim=(-1, 1), ylim=(-1, 1), grid=5, title="rot")

    assert handle.mode == "quiver"
    assert handle.quiver is not None
    assert handle.quiver.scale == 1.0
    assert ax.get_xlim() == (-1.0, 1.0)
    assert ax.get_title() == "rot"
    assert ax.get_aspect() == 1.0
    assert not ax.spines["top"].get_visible()
    plt.close(fig)


def test_vectorfield_plot_limits_differ_from_sampling():
    fig, ax = plt.subplots()
    vectorfield(pendulum, params=0.5, ax=ax, xlim=(-5, 5), ylim=(-5, 5), grid=6, plot_xlim=(-3, 5))
    assert ax.get_xlim() == (-3.0, 5.0)
    assert ax.get_ylim() == (-5.0, 5.0)
    plt.close(fig)


def test_vectorfield_update_recomputes_in_place():
    fig, ax = plt.subplots()
    handle = vectorfield(rotation, params=(1.0, 1.0), ax=ax, grid=4, scale=1.0)
    U_ref = handle.U

    handle.update(params=(2.0, 1.0))
    assert handle.U is U_ref
    np.testing.assert_allclose(handle.U, -2.0 * handle.Y)
    np.testing.assert_allclose(handle.quiver.U, handle.U.ravel())

    handle.update(normalize=True, scale=0.1)
    np.testing.assert_allclose(np.hypot(handle.U, handle.V)[np.hypot(handle.X, handle.Y) > 0], 0.1)
    assert handle.normalize is True
    plt.close(fig)


def test_vectorfield_nullclines_follow_params_and_toggle():
    fig, ax = plt.subplots()
    handle = vectorfield(pendulum, params=0.5, ax=ax, xlim=(-3, 3), ylim=(-2, 2), grid=6, nullclines=True)

    # y' = gamma - sin x and x' = y both change sign in the window
    assert len(handle.nullcline_artists) == 2
    assert handle.nullcline_grid == (80, 80)

    # gamma > 1: y' never vanishes, only the x' nullcline remains
    handle.update(params=1.5)
    assert len(handle.nullcline_artists) == 1

    handle.toggle_nullclines()
    assert handle.nullclines_enabled is False
    assert handle.nullcline_artists == []
    handle.toggle_nullclines()
    assert handle.nullclines_enabled is True
    assert len(handle.nullcline_artists) == 1
    plt.close(fig)


def test_vectorfield_stream_mode_redraws():
    fig, ax = plt.subplots()
    handle = vectorfield(rotation, params=(1.0, 1.0), ax=ax, grid=8, mode="streamlines", scale=1.0)
    assert handle.mode == "stream"
    first = handle.stream
    handle.update(params=(0.5, 1.0))
    assert handle.stream is not first
    plt.close(fig)


def test_vectorfield_rejects_unknown_mode():
    with pytest.raises(ValueError, match="quiver' or 'stream"):
        vectorfield(rotation, mode="contour")


def test_linear_vectorfield_layout():
    A = np.array([[-1.0, 4.0], [0.25, -1.0]])
    fig, ax = plt.subplots()
    handle = linear_vectorfield(A, ax=ax)

    assert handle.X.shape == (25, 25)
    np.testing.assert_allclose(handle.X[0, [0, -1]], [-2.0, 2.0])
    np.testing.assert_allclose(handle.Y[[0, -1], 0], [-1.0, 1.0])
    assert ax.get_xlim() == (-1.5, 1.5)
    assert ax.get_ylim() == (-0.75, 0.75)
    title = ax.get_title()
    assert title.startswith("λ = ")
    assert "-2.000" in title and "0.000," in title + ","
    assert len(handle.eigvec_artists) == 2

    # the field is A @ (x, y), scaled by 0.2
    f = linear_field(A)
    np.testing.assert_allclose(handle.U[3, 4], 0.2 * f((handle.X[3, 4], handle.Y[3, 4]))[0])
    plt.close(fig)


def test_linear_vectorfield_eigvec_arrows_point_along_eigenvectors():
    A = np.diag([1.0, -1.0])
    fig, ax = plt.subplots()
    handle = linear_vectorfield(A, ax=ax, grid=5)
    _, vecs = eigensystem(A)
    for k, arrow in enumerate(handle.eigvec_artists):
        np.testing.assert_allclose(arrow.xy, vecs[:, k])
    plt.close(fig)
