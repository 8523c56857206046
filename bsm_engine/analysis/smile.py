"""
Synthetic volatility smile and ATM term structure.

Market prices are generated from a known volatility model and then fed
back through the implied volatility solver, which shows how well the
solver recovers the input volatilities across strikes and maturities.
"""

import math

import numpy as np
import pandas as pd

from bsm_engine.core.black_scholes import black_scholes
from bsm_engine.solvers.implied_vol import implied_volatility
from bsm_engine.utils.logging_config import get_logger
from bsm_engine.utils.types import MarketParams

logger = get_logger("analysis.smile")


def parabolic_vol(moneyness: float, base_vol: float, skew: float, curvature: float) -> float:
    """vol = base + skew·m + curvature·m², with m = ln(K/S)."""
    return base_vol + skew * moneyness + curvature * moneyness * moneyness


def synthetic_smile(
    S: float,
    T: float,
    r: float,
    base_vol: float = 0.2,
    skew: float = 0.1,
    curvature: float = 0.05,
    strike_step: float = 1.0,
) -> pd.DataFrame:
    """
    Price out-of-the-money options on a parabolic smile and re-solve their IVs.

    Strikes run from 0.7·S to 1.3·S. Puts are used below spot, calls at or
    above. Strikes whose model volatility is at most 1% or whose price is
    below 0.01 are skipped.

    Returns:
        DataFrame with columns strike, option_type, price, true_vol,
        implied_vol (nan where the solver returns no volatility)
    """
    if strike_step <= 0:
        raise ValueError(f"strike_step must be positive, got {strike_step}")

    rows = []
    unconverged = 0
    for strike in np.arange(S * 0.7, S * 1.3 + 1e-9, strike_step):
        strike = float(strike)
        true_vol = parabolic_vol(math.log(strike / S), base_vol, skew, curvature)
        if true_vol <= 0.01:
            continue

        option_type = "put" if strike < S else "call"
        price = black_scholes(MarketParams(S, strike, T, r, true_vol)).price_for(option_type)
        if price < 0.01:
            continue

        result = implied_volatility(price, S, strike, T, r, option_type, warn=False)
        if not result.success:
            unconverged += 1
        rows.append(
            {
                "strike": strike,
                "option_type": option_type,
                "price": price,
                "true_vol": true_vol,
                "implied_vol": result.volatility if result.available else math.nan,
            }
        )

    if unconverged:
        logger.warning("Synthetic smile: %d of %d strikes did not converge", unconverged, len(rows))
    return pd.DataFrame(rows, columns=["strike", "option_type", "price", "true_vol", "implied_vol"])


def atm_term_structure(S: float, r: float, base_vol: float = 0.2) -> pd.DataFrame:
    """
    Recover ATM call implied volatility for maturities 0.05 to 3 years.

    The true volatility follows base_vol + 0.05·e^(-2t). Where the solver
    returns no volatility the true value is reported instead.

    Returns:
        DataFrame with columns maturity, true_vol, implied_vol
    """
    rows = []
    unconverged = 0
    for t in np.arange(0.05, 3.0 + 1e-9, 0.05):
        t = float(t)
        vol = base_vol + 0.05 * math.exp(-2.0 * t)
        call_price = black_scholes(MarketParams(S, S, t, r, vol)).call_price
        result = implied_volatility(call_price, S, S, t, r, "call", warn=False)
        if not result.success:
            unconverged += 1
        rows.append(
            {
                "maturity": t,
                "true_vol": vol,
                "implied_vol": result.volatility if result.available else vol,
            }
        )
    if unconverged:
        logger.warning("ATM term structure: %d of %d maturities did not converge", unconverged, len(rows))
    return pd.DataFrame(rows, columns=["maturity", "true_vol", "implied_vol"])
