"""
Newton-Raphson method for implied volatility calculation.

This module implements the Newton-Raphson algorithm for solving
the Black-Scholes equation for volatility given a market price.
The method uses raw vega (∂V/∂σ) as the derivative and falls back to a
multiplicative bisection-style step wherever vega vanishes numerically.
"""

import math

from bsm_engine.core.black_scholes import option_price, raw_vega
from bsm_engine.utils.constants import (
    IV_FALLBACK_GROW,
    IV_FALLBACK_SHRINK,
    IV_INITIAL_GUESS,
    IV_MAX_ITERATIONS,
    IV_MAX_VOL,
    IV_MIN_VEGA,
    IV_MIN_VOL,
    IV_PRICE_TOLERANCE,
)
from bsm_engine.utils.logging_config import get_logger
from bsm_engine.utils.types import (
    ImpliedVolResult,
    ImpliedVolStatus,
    MarketParams,
    OptionType,
)

logger = get_logger("solvers.newton_raphson")


def newton_raphson_iv(
    market_price: float,
    S: float,
    K: float,
    T: float,
    r: float,
    option_type: OptionType,
    initial_guess: float = IV_INITIAL_GUESS,
    max_iterations: int = IV_MAX_ITERATIONS,
    price_tolerance: float = IV_PRICE_TOLERANCE,
) -> ImpliedVolResult:
    """
    Solve for implied volatility using Newton-Raphson method.

    The Newton-Raphson update is:
        σ_{n+1} = σ_n - (BS(σ_n) - market_price) / vega_raw(σ_n)

    When raw vega drops below IV_MIN_VEGA the step is replaced by σ·0.5
    (model price too high) or σ·1.5 (model price too low). Every update is
    clamped to [IV_MIN_VOL, IV_MAX_VOL].

    Args:
        market_price: Observed market price of the option
        S, K, T, r: Standard Black-Scholes parameters
        option_type: "call" or "put"
        initial_guess: Starting volatility estimate
        max_iterations: Maximum number of iterations
        price_tolerance: Convergence tolerance for price difference

    Returns:
        ImpliedVolResult with status CONVERGED when the price tolerance is
        met, otherwise the last iterate as a best estimate tagged
        DEGENERATE_VEGA (a fallback step was needed) or MAX_ITERATIONS.

    Notes:
        Callers are expected to check no-arbitrage bounds first; see
        implied_vol.implied_volatility.
    """
    sigma = initial_guess
    fallback_steps = 0
    iterations = 0
    diff = math.nan

    for _ in range(max_iterations):
        iterations += 1
        params = MarketParams(S=S, K=K, T=T, r=r, sigma=sigma)

        diff = option_price(params, option_type) - market_price

        if abs(diff) < price_tolerance:
            return ImpliedVolResult(
                volatility=sigma,
                iterations=iterations,
                status=ImpliedVolStatus.CONVERGED,
                fallback_steps=fallback_steps,
                message=f"Converged in {iterations} iterations",
            )

        vega_value = raw_vega(params)

        if vega_value < IV_MIN_VEGA:
            # Flat region: Newton step is undefined
            fallback_steps += 1
            sigma = sigma * IV_FALLBACK_SHRINK if diff > 0 else sigma * IV_FALLBACK_GROW
            logger.debug(
                "Vega %.2e below threshold at iteration %d, stepping sigma to %.6f",
                vega_value,
                iterations,
                sigma,
            )
        else:
            sigma = sigma - diff / vega_value

        sigma = min(max(sigma, IV_MIN_VOL), IV_MAX_VOL)

    if fallback_steps:
        status = ImpliedVolStatus.DEGENERATE_VEGA
        message = (
            f"Max iterations ({max_iterations}) reached after {fallback_steps} "
            f"fallback steps; residual {diff:.2e}"
        )
    else:
        status = ImpliedVolStatus.MAX_ITERATIONS
        message = f"Max iterations ({max_iterations}) reached; residual {diff:.2e}"

    logger.debug(
        "Newton-Raphson stopped without converging (S=%s, K=%s, T=%s, price=%s): %s",
        S,
        K,
        T,
        market_price,
        message,
    )

    return ImpliedVolResult(
        volatility=sigma,
        iterations=iterations,
        status=status,
        fallback_steps=fallback_steps,
        message=message,
    )
