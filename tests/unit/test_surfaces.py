"""Unit tests for Greek sweeps and metric surfaces."""

import numpy as np
import pytest

from bsm_engine.analysis.surfaces import (
    METRICS,
    SURFACE_AXES,
    greek_sweep,
    metric_surface,
    metric_value,
)
from bsm_engine.core.black_scholes import calculate_greeks, option_price


def test_metric_value_matches_core(standard_params):
    greeks = calculate_greeks(standard_params, "put")

    assert metric_value("price", standard_params, "put") == option_price(standard_params, "put")
    assert metric_value("delta", standard_params, "put") == greeks.delta
    assert metric_value("gamma", standard_params, "put") == greeks.gamma
    assert metric_value("vega", standard_params, "put") == greeks.vega
    assert metric_value("theta", standard_params, "put") == greeks.theta
    assert metric_value("rho", standard_params, "put") == greeks.rho


def test_metric_value_unknown_metric(standard_params):
    with pytest.raises(ValueError, match="Unknown metric"):
        metric_value("vanna", standard_params)


def test_greek_sweep_aligned_with_values(standard_params):
    spots = np.linspace(80.0, 120.0, 9)
    deltas = greek_sweep(standard_params, "delta", "spot", spots, "call")

    assert deltas.shape == spots.shape
    for spot, value in zip(spots, deltas):
        assert value == pytest.approx(metric_value("delta", standard_params.replace(S=spot), "call"))
    assert np.all(np.diff(deltas) > 0)


def test_greek_sweep_volatility_axis(standard_params):
    vols = [0.1, 0.2, 0.4]
    prices = greek_sweep(standard_params, "price", "volatility", vols)
    assert prices[1] == pytest.approx(option_price(standard_params, "call"))
    assert prices[0] < prices[1] < prices[2]


def test_greek_sweep_unknown_axis(standard_params):
    with pytest.raises(ValueError, match="Unknown sweep axis"):
        greek_sweep(standard_params, "delta", "dividend", [0.01])


@pytest.mark.parametrize("axes", sorted(SURFACE_AXES))
def test_default_surface_is_51_by_51(standard_params, axes):
    surface = metric_surface(standard_params, "price", axes=axes)

    assert surface.x.shape == (51,)
    assert surface.y.shape == (51,)
    assert surface.z.shape == (51, 51)
    assert np.all(np.isfinite(surface.z))


def test_strike_time_surface_ranges(standard_params):
    surface = metric_surface(standard_params, "price", axes="strike-time", grid_size=4)

    np.testing.assert_allclose(surface.x, [60.0, 80.0, 100.0, 120.0, 140.0])
    assert surface.y[0] == pytest.approx(0.05)
    assert surface.y[-1] == pytest.approx(2.0)
    assert surface.x_label == "Strike ($)"


def test_surface_cells_match_pointwise_pricing(standard_params):
    surface = metric_surface(standard_params, "gamma", axes="strike-time", grid_size=4)

    for j, t in enumerate(surface.y):
        for i, k in enumerate(surface.x):
            expected = metric_value("gamma", standard_params.replace(K=k, T=t))
            assert surface.z[j, i] == pytest.approx(expected)


def test_volatility_axis_reported_in_percent(standard_params):
    surface = metric_surface(standard_params, "vega", axes="spot-vol", grid_size=3)

    assert surface.y[0] == pytest.approx(5.0)
    assert surface.y[-1] == pytest.approx(80.0)
    assert surface.y_label == "Volatility (%)"
    # Cell values are computed with the fractional volatility
    expected = metric_value("vega", standard_params.replace(S=surface.x[0], sigma=0.05))
    assert surface.z[0, 0] == pytest.approx(expected)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"metric": "vanna"},
        {"metric": "price", "axes": "rate-time"},
        {"metric": "price", "option_type": "straddle"},
        {"metric": "price", "grid_size": 0},
    ],
)
def test_surface_rejects_bad_arguments(standard_params, kwargs):
    with pytest.raises(ValueError):
        metric_surface(standard_params, **kwargs)


def test_metric_registry_names():
    assert set(METRICS) == {"price", "delta", "gamma", "theta", "vega", "rho"}


def test_surfaces_compare_by_identity(standard_params):
    first = metric_surface(standard_params, "price", grid_size=2)
    second = metric_surface(standard_params, "price", grid_size=2)

    assert first == first
    assert first != second
    assert len({first, second}) == 2
