"""
Implied volatility solver.

This module provides the high-level interface for solving implied
volatility: it checks the quoted price against no-arbitrage bounds and
then runs the Newton-Raphson iteration. The result is always a tagged
ImpliedVolResult, so callers can tell "no solution exists" apart from
"solution uncertain".
"""

import math
from typing import Iterable, Optional

from bsm_engine.solvers.newton_raphson import newton_raphson_iv
from bsm_engine.utils.constants import (
    IV_INITIAL_GUESS,
    IV_MAX_ITERATIONS,
    IV_PRICE_TOLERANCE,
)
from bsm_engine.utils.logging_config import get_logger
from bsm_engine.utils.types import (
    ImpliedVolResult,
    ImpliedVolStatus,
    OptionType,
    check_option_type,
)

logger = get_logger("solvers.implied_vol")


def validate_arbitrage_bounds(
    market_price: float,
    S: float,
    K: float,
    T: float,
    r: float,
    option_type: OptionType,
) -> Optional[str]:
    """
    Check if market price violates no-arbitrage bounds.

    Bounds:
        Call: max(S - K·e^(-rT), 0) <= C < S
        Put:  max(K·e^(-rT) - S, 0) <= P < K·e^(-rT)

    Returns:
        None if valid, error message string if the price cannot be
        produced by any volatility
    """
    check_option_type(option_type)

    if T <= 0:
        return f"Time to expiration must be positive, got T={T}"
    if market_price <= 0:
        return f"Market price must be positive, got {market_price}"

    discount_strike = K * math.exp(-r * T)

    if option_type == "call":
        lower_bound = max(S - discount_strike, 0.0)
        if market_price < lower_bound:
            return f"Call price {market_price:.4f} below lower bound {lower_bound:.4f}"
        if market_price >= S:
            return f"Call price {market_price:.4f} not below spot {S:.4f}"
    else:
        lower_bound = max(discount_strike - S, 0.0)
        if market_price < lower_bound:
            return f"Put price {market_price:.4f} below lower bound {lower_bound:.4f}"
        if market_price >= discount_strike:
            return (
                f"Put price {market_price:.4f} not below discounted strike "
                f"{discount_strike:.4f}"
            )

    return None


def implied_volatility(
    market_price: float,
    S: float,
    K: float,
    T: float,
    r: float,
    option_type: OptionType = "call",
    max_iterations: int = IV_MAX_ITERATIONS,
    tolerance: float = IV_PRICE_TOLERANCE,
    initial_guess: float = IV_INITIAL_GUESS,
    warn: bool = True,
) -> ImpliedVolResult:
    """
    Solve for the volatility that reproduces market_price.

    Args:
        market_price: Observed market price
        S: Spot price
        K: Strike price
        T: Time to expiration in years
        r: Risk-free rate (annualized, continuous)
        option_type: "call" or "put"
        max_iterations: Iteration ceiling for Newton-Raphson
        tolerance: Convergence tolerance on the price difference
        initial_guess: Starting volatility
        warn: Log a warning when the solver stops without converging.
            Batch callers pass False and report once per batch.

    Returns:
        ImpliedVolResult; status OUT_OF_BOUNDS (volatility nan) when the
        inputs admit no solution, otherwise see newton_raphson_iv

    Raises:
        ValueError: If option_type is not "call" or "put"

    Examples:
        >>> result = implied_volatility(10.4506, S=100, K=100, T=1.0, r=0.05)
        >>> round(result.volatility, 3), result.success
        (0.2, True)
    """
    violation = validate_arbitrage_bounds(market_price, S, K, T, r, option_type)
    if violation:
        logger.info("Implied volatility not available: %s", violation)
        return ImpliedVolResult(
            volatility=math.nan,
            iterations=0,
            status=ImpliedVolStatus.OUT_OF_BOUNDS,
            message=violation,
        )

    result = newton_raphson_iv(
        market_price,
        S,
        K,
        T,
        r,
        option_type,
        initial_guess=initial_guess,
        max_iterations=max_iterations,
        price_tolerance=tolerance,
    )

    if warn and not result.success:
        logger.warning(
            "Implied volatility did not converge (S=%s, K=%s, T=%s, price=%s): %s",
            S,
            K,
            T,
            market_price,
            result.message,
        )

    return result


def volatility_smile(
    quotes: Iterable[tuple[float, float]],
    S: float,
    T: float,
    r: float,
    option_type: OptionType = "call",
) -> list[tuple[float, float]]:
    """
    Solve implied volatilities across strikes to build a smile or skew.

    Args:
        quotes: (strike, market_price) pairs
        S: Current spot price (same for all)
        T: Time to expiration (same for all)
        r: Risk-free rate (same for all)
        option_type: "call" or "put" (same for all)

    Returns:
        (strike, implied_vol) pairs in input order; quotes without an
        available, finite volatility are dropped

    Example:
        >>> smile = volatility_smile([(95, 7.5), (100, 4.5), (105, 2.3)], S=100, T=1.0, r=0.05)
        >>> len(smile) <= 3
        True
    """
    smile = []
    unconverged = 0
    for strike, price in quotes:
        result = implied_volatility(price, S, strike, T, r, option_type, warn=False)
        if result.available and not result.success:
            unconverged += 1
        if result.available and math.isfinite(result.volatility):
            smile.append((strike, result.volatility))

    if unconverged:
        logger.warning("Volatility smile: %d quotes did not converge", unconverged)
    return smile
