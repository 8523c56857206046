"""
Greek sweeps and two-parameter metric surfaces.

A sweep evaluates one metric (price or a Greek) while a single market
input varies; a surface evaluates it over the Cartesian product of two
inputs. Every cell is an independent pricing call, so the grid is built
as a flat map over the product and reshaped afterwards.
"""

import itertools
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from bsm_engine.core.black_scholes import delta, gamma, option_price, rho, theta, vega
from bsm_engine.utils.constants import DEFAULT_GRID_SIZE
from bsm_engine.utils.types import MarketParams, OptionType, check_option_type

MetricFn = Callable[[MarketParams, OptionType], float]

METRICS: dict[str, MetricFn] = {
    "price": option_price,
    "delta": delta,
    "gamma": lambda params, option_type: gamma(params),
    "theta": theta,
    "vega": lambda params, option_type: vega(params),
    "rho": rho,
}

# Sweep axis name -> MarketParams field
SWEEP_AXES = {"spot": "S", "strike": "K", "time": "T", "volatility": "sigma", "rate": "r"}

# Surface axes: (x field, y field, x label, y label)
SURFACE_AXES = {
    "strike-time": ("K", "T", "Strike ($)", "Time (years)"),
    "strike-vol": ("K", "sigma", "Strike ($)", "Volatility (%)"),
    "spot-vol": ("S", "sigma", "Spot ($)", "Volatility (%)"),
}

_VOL_RANGE = (0.05, 0.80)
_TIME_RANGE = (0.05, 2.0)


@dataclass(frozen=True, eq=False)
class Surface:
    """
    Metric values on a rectangular grid.

    Attributes:
        x: Values along the x axis
        y: Values along the y axis (volatility axes are in percent)
        z: Grid of shape (len(y), len(x)); z[j, i] belongs to (x[i], y[j])
    """
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    x_label: str
    y_label: str
    metric: str
    option_type: OptionType


def metric_value(metric: str, params: MarketParams, option_type: OptionType = "call") -> float:
    """
    Evaluate a named metric.

    Raises:
        ValueError: If metric is not one of METRICS
    """
    if metric not in METRICS:
        raise ValueError(f"Unknown metric '{metric}', expected one of {tuple(METRICS)}")
    check_option_type(option_type)
    return METRICS[metric](params, option_type)


def greek_sweep(
    params: MarketParams,
    metric: str,
    axis: str,
    values: Sequence[float],
    option_type: OptionType = "call",
) -> np.ndarray:
    """
    Evaluate metric while one market input takes each of values.

    Args:
        params: Base market inputs
        metric: One of METRICS
        axis: One of SWEEP_AXES ("spot", "strike", "time", "volatility", "rate")
        values: Values substituted for that input

    Returns:
        Array of metric values aligned with values
    """
    if axis not in SWEEP_AXES:
        raise ValueError(f"Unknown sweep axis '{axis}', expected one of {tuple(SWEEP_AXES)}")
    field_name = SWEEP_AXES[axis]
    return np.array(
        [metric_value(metric, params.replace(**{field_name: float(v)}), option_type) for v in values],
        dtype=float,
    )


def _axis_range(field_name: str, params: MarketParams) -> tuple[float, float]:
    if field_name == "K":
        return params.S * 0.6, params.S * 1.4
    if field_name == "S":
        return params.K * 0.5, params.K * 1.5
    if field_name == "T":
        return _TIME_RANGE
    return _VOL_RANGE


def metric_surface(
    params: MarketParams,
    metric: str,
    axes: str = "strike-time",
    option_type: OptionType = "call",
    grid_size: int = DEFAULT_GRID_SIZE,
) -> Surface:
    """
    Evaluate metric over a (grid_size + 1) x (grid_size + 1) grid.

    Ranges: strike 0.6·S to 1.4·S, spot 0.5·K to 1.5·K, time 0.05 to 2
    years, volatility 5% to 80%. Inputs not on an axis come from params.

    Raises:
        ValueError: If axes, metric or option_type is unknown, or grid_size < 1
    """
    if axes not in SURFACE_AXES:
        raise ValueError(f"Unknown surface axes '{axes}', expected one of {tuple(SURFACE_AXES)}")
    if grid_size < 1:
        raise ValueError(f"grid_size must be >= 1, got {grid_size}")
    if metric not in METRICS:
        raise ValueError(f"Unknown metric '{metric}', expected one of {tuple(METRICS)}")
    check_option_type(option_type)

    x_field, y_field, x_label, y_label = SURFACE_AXES[axes]
    x = np.linspace(*_axis_range(x_field, params), grid_size + 1)
    y = np.linspace(*_axis_range(y_field, params), grid_size + 1)

    fn = METRICS[metric]
    cells = [
        fn(params.replace(**{x_field: float(xv), y_field: float(yv)}), option_type)
        for yv, xv in itertools.product(y, x)
    ]
    z = np.array(cells, dtype=float).reshape(len(y), len(x))

    if y_field == "sigma":
        y = y * 100.0

    return Surface(
        x=x,
        y=y,
        z=z,
        x_label=x_label,
        y_label=y_label,
        metric=metric,
        option_type=option_type,
    )
