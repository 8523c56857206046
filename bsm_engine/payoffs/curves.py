"""
Payoff and profit/loss curves for option strategies.

Expiry payoffs are evaluated algebraically from each leg's intrinsic
value and locked-in premium. Pre-expiry curves re-price every leg with
the Black-Scholes model at each sampled spot and time, which makes them
the only part of the engine with non-trivial computational volume.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

import numpy as np

from bsm_engine.core.black_scholes import black_scholes, intrinsic_value
from bsm_engine.payoffs.strategies import Strategy
from bsm_engine.utils.constants import (
    AT_EXPIRY_TIME,
    DEFAULT_CURVE_STEPS,
    PRE_EXPIRY_TIME_THRESHOLD,
)
from bsm_engine.utils.types import MarketParams


@dataclass(frozen=True, eq=False)
class PayoffCurve:
    """
    Sampled P&L of a strategy over a spot range.

    Attributes:
        spots: Ascending spot prices
        pnl: Profit/loss at each spot
        label: Display label (e.g. time slice name)
    """
    spots: np.ndarray
    pnl: np.ndarray
    label: str = "At Expiry"

    def __iter__(self) -> Iterator[tuple[float, float]]:
        for spot, pnl in zip(self.spots, self.pnl):
            yield float(spot), float(pnl)

    def __len__(self) -> int:
        return len(self.spots)


@dataclass
class PayoffSummary:
    """Headline numbers for a payoff diagram."""
    max_profit: float
    max_loss: float
    breakevens: list[float]
    net_premium: float


def _spot_grid(spot_min: float, spot_max: float, steps: int) -> np.ndarray:
    if steps < 1:
        raise ValueError(f"steps must be >= 1, got {steps}")
    if spot_max < spot_min:
        raise ValueError(f"spot_max ({spot_max}) must be >= spot_min ({spot_min})")
    return np.linspace(spot_min, spot_max, steps + 1, dtype=float)


def payoff_at_expiry(strategy: Strategy, spot: float) -> float:
    """
    Total P&L of the strategy if the underlying settles at spot.

    Formula:
        Σ quantity · (intrinsic(leg, spot) - premium)
    """
    return sum(
        leg.quantity * (intrinsic_value(spot, leg.strike, leg.option_type) - leg.premium)
        for leg in strategy
    )


def payoff_curve(
    strategy: Strategy,
    spot_min: float,
    spot_max: float,
    steps: int = DEFAULT_CURVE_STEPS,
) -> PayoffCurve:
    """
    Sample the expiry P&L at steps + 1 evenly spaced spots.

    Both ends of [spot_min, spot_max] are included. Each point is
    evaluated independently with payoff_at_expiry.

    Raises:
        ValueError: If steps < 1 or spot_max < spot_min
    """
    spots = _spot_grid(spot_min, spot_max, steps)
    pnl = np.array([payoff_at_expiry(strategy, s) for s in spots], dtype=float)
    return PayoffCurve(spots=spots, pnl=pnl)


def default_time_slices(T: float) -> list[tuple[float, str]]:
    """Now, 75%, 50% and 25% of T remaining, plus a near-zero 'At Expiry' slice."""
    return [
        (T, "Now"),
        (T * 0.75, "75% T left"),
        (T * 0.5, "50% T left"),
        (T * 0.25, "25% T left"),
        (AT_EXPIRY_TIME, "At Expiry"),
    ]


def _position_value(strategy: Strategy, spot: float, time: float, rate: float, volatility: float) -> float:
    total = 0.0
    for leg in strategy:
        if time > PRE_EXPIRY_TIME_THRESHOLD:
            value = black_scholes(
                MarketParams(S=spot, K=leg.strike, T=time, r=rate, sigma=volatility)
            ).price_for(leg.option_type)
        else:
            value = intrinsic_value(spot, leg.strike, leg.option_type)
        total += leg.quantity * (value - leg.premium)
    return total


def pre_expiry_curve(
    strategy: Strategy,
    spot_min: float,
    spot_max: float,
    times: Sequence[float],
    steps: int = DEFAULT_CURVE_STEPS,
    rate: Optional[float] = None,
    volatility: Optional[float] = None,
    labels: Optional[Sequence[str]] = None,
) -> list[PayoffCurve]:
    """
    Mark-to-model P&L curves at several times to expiry.

    Every leg is re-priced with Black-Scholes at every sampled spot and
    time; for times at or below PRE_EXPIRY_TIME_THRESHOLD the intrinsic
    value is used instead.

    Args:
        strategy: Position to value
        spot_min, spot_max: Spot range, sampled at steps + 1 points
        times: Remaining times to expiry in years, one curve each
        steps: Number of intervals in the spot grid
        rate: Risk-free rate; defaults to the strategy's quoting rate
        volatility: Volatility; defaults to the strategy's quoting volatility
        labels: Optional display label per time

    Returns:
        One PayoffCurve per entry of times, in the same order

    Raises:
        ValueError: If rate/volatility are missing and the strategy carries
            no quoting parameters, or labels and times differ in length
    """
    if rate is None or volatility is None:
        if strategy.params is None:
            raise ValueError(
                "rate and volatility are required for strategies without quoting parameters"
            )
        rate = strategy.params.r if rate is None else rate
        volatility = strategy.params.sigma if volatility is None else volatility

    if labels is None:
        labels = [f"T={t:.4g}" for t in times]
    elif len(labels) != len(times):
        raise ValueError(f"labels ({len(labels)}) and times ({len(times)}) must have same length")

    spots = _spot_grid(spot_min, spot_max, steps)

    curves = []
    for time, label in zip(times, labels):
        pnl = np.array(
            [_position_value(strategy, s, time, rate, volatility) for s in spots],
            dtype=float,
        )
        curves.append(PayoffCurve(spots=spots, pnl=pnl, label=label))
    return curves


def find_breakevens(curve: PayoffCurve) -> list[float]:
    """
    Spots where the P&L crosses zero, located by linear interpolation.

    A crossing is registered between consecutive samples whose P&L goes
    from negative to non-negative or from non-negative to negative.
    """
    breakevens = []
    spots, pnl = curve.spots, curve.pnl
    for i in range(1, len(spots)):
        y1, y2 = pnl[i - 1], pnl[i]
        if (y1 < 0 <= y2) or (y2 < 0 <= y1):
            x1, x2 = spots[i - 1], spots[i]
            breakevens.append(float(x1 + (-y1 * (x2 - x1)) / (y2 - y1)))
    return breakevens


def summarize_payoff(strategy: Strategy, curve: PayoffCurve) -> PayoffSummary:
    """Max profit, max loss and breakevens over the sampled range."""
    return PayoffSummary(
        max_profit=float(np.max(curve.pnl)),
        max_loss=float(np.min(curve.pnl)),
        breakevens=find_breakevens(curve),
        net_premium=strategy.net_premium,
    )
