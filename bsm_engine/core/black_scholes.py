"""
Black-Scholes option pricing model.

This module implements the classical Black-Scholes-Merton formula for
European options on a non-dividend-paying asset, including all standard
Greeks. Every function is total: degenerate inputs (expired options,
zero volatility, non-positive spot or strike) produce well-defined
boundary values instead of raising.

Mathematical Background:
    The Black-Scholes formula prices European options under assumptions:
    - Log-normal asset price distribution
    - Constant volatility and interest rate
    - No transaction costs or taxes
    - Continuous trading possible

References:
    Black, F., & Scholes, M. (1973). The Pricing of Options and Corporate Liabilities.
    Journal of Political Economy, 81(3), 637-654.
"""

import math

from bsm_engine.core.distributions import normal_cdf, normal_pdf
from bsm_engine.utils.constants import DAYS_PER_YEAR, PERCENT
from bsm_engine.utils.types import (
    Greeks,
    MarketParams,
    OptionType,
    PricingResult,
    check_option_type,
)


def intrinsic_value(spot: float, strike: float, option_type: OptionType) -> float:
    """Payoff from immediate exercise: max(S-K, 0) for calls, max(K-S, 0) for puts."""
    check_option_type(option_type)
    if option_type == "call":
        return max(spot - strike, 0.0)
    return max(strike - spot, 0.0)


def compute_d1_d2(params: MarketParams) -> tuple[float, float]:
    """
    Calculate the d1 and d2 parameters of the Black-Scholes formula.

    Args:
        params: Market inputs (S, K, T, r, sigma)

    Returns:
        Tuple (d1, d2). Both are 0.0 when T, sigma, S or K is non-positive;
        this is a sentinel, not an error, so callers never branch on failure.

    Formula:
        d1 = [ln(S/K) + (r + σ²/2)T] / (σ√T)
        d2 = d1 - σ√T
    """
    S, K, T, r, sigma = params.S, params.K, params.T, params.r, params.sigma

    if T <= 0 or sigma <= 0 or S <= 0 or K <= 0:
        return 0.0, 0.0

    diffusion = sigma * math.sqrt(T)
    d1 = (math.log(S / K) + (r + 0.5 * sigma * sigma) * T) / diffusion
    return d1, d1 - diffusion


def black_scholes(params: MarketParams) -> PricingResult:
    """
    Price a European call and put with the Black-Scholes formula.

    Args:
        params: Market inputs (S, K, T, r, sigma)

    Returns:
        PricingResult with call price, put price, d1 and d2

    Formula:
        C = S·N(d1) - K·e^(-rT)·N(d2)
        P = K·e^(-rT)·N(-d2) - S·N(-d1)

    Examples:
        >>> result = black_scholes(MarketParams(S=100, K=100, T=0.5, r=0.05, sigma=0.2))
        >>> round(result.call_price, 2), round(result.put_price, 2)
        (6.89, 4.42)

    Edge Cases:
        - T <= 0: intrinsic values, d1 = d2 = 0
        - Both prices are floored at 0 to absorb rounding near zero
    """
    S, K, T, r = params.S, params.K, params.T, params.r

    # At expiration
    if T <= 0:
        return PricingResult(
            call_price=max(S - K, 0.0),
            put_price=max(K - S, 0.0),
            d1=0.0,
            d2=0.0,
        )

    d1, d2 = compute_d1_d2(params)
    discount = math.exp(-r * T)

    call_price = S * normal_cdf(d1) - K * discount * normal_cdf(d2)
    put_price = K * discount * normal_cdf(-d2) - S * normal_cdf(-d1)

    return PricingResult(
        call_price=max(call_price, 0.0),
        put_price=max(put_price, 0.0),
        d1=d1,
        d2=d2,
    )


def option_price(params: MarketParams, option_type: OptionType = "call") -> float:
    """
    Calculate European option price (call or put).

    Raises:
        ValueError: If option_type is not "call" or "put"
    """
    return black_scholes(params).price_for(option_type)


# ===========================
# Greeks Calculations
# ===========================


def delta(params: MarketParams, option_type: OptionType = "call") -> float:
    """
    Calculate option delta (∂V/∂S).

    For a call, delta ∈ [0, 1]; for a put, delta ∈ [-1, 0], and
    delta_call - delta_put = 1 whenever T > 0.

    Formulas:
        Call delta: Δ_c = N(d1)
        Put delta:  Δ_p = N(d1) - 1

    Edge Cases:
        At T <= 0 delta is the terminal indicator: call 1 if S > K else 0,
        put -1 if S < K else 0.
    """
    check_option_type(option_type)

    if params.T <= 0:
        if option_type == "call":
            return 1.0 if params.S > params.K else 0.0
        return -1.0 if params.S < params.K else 0.0

    d1, _ = compute_d1_d2(params)
    call_delta = normal_cdf(d1)
    return call_delta if option_type == "call" else call_delta - 1.0


def gamma(params: MarketParams) -> float:
    """
    Calculate option gamma (∂²V/∂S²).

    Gamma is the same for calls and puts and is never negative.

    Formula:
        Γ = φ(d1) / (S · σ · √T)

    Edge Cases:
        0 when T <= 0 or σ <= 0, where delta becomes a step function.
    """
    S, T, sigma = params.S, params.T, params.sigma

    if T <= 0 or sigma <= 0 or S <= 0:
        return 0.0

    d1, _ = compute_d1_d2(params)
    return normal_pdf(d1) / (S * sigma * math.sqrt(T))


def raw_vega(params: MarketParams) -> float:
    """Unscaled vega S·φ(d1)·√T, the derivative used by the Newton solver."""
    if params.T <= 0:
        return 0.0

    d1, _ = compute_d1_d2(params)
    return params.S * normal_pdf(d1) * math.sqrt(params.T)


def vega(params: MarketParams) -> float:
    """
    Calculate option vega (∂V/∂σ), reported per 1% change in volatility.

    Formula:
        ν = S · √T · φ(d1) / 100

    Interpretation:
        Vega of 0.35 means: for 1% increase in volatility (e.g., 20% → 21%),
        option price increases by $0.35.
    """
    return raw_vega(params) / PERCENT


def theta(params: MarketParams, option_type: OptionType = "call") -> float:
    """
    Calculate option theta (∂V/∂t), reported per calendar day.

    Formulas:
        Call theta: Θ_c = [-S·σ·φ(d1)/(2√T) - r·K·e^(-rT)·N(d2)] / 365
        Put theta:  Θ_p = [-S·σ·φ(d1)/(2√T) + r·K·e^(-rT)·N(-d2)] / 365

    Interpretation:
        Theta of -0.05 means option loses $0.05 in value per calendar day,
        all else equal.
    """
    check_option_type(option_type)

    S, K, T, r, sigma = params.S, params.K, params.T, params.r, params.sigma

    # At expiration, theta is undefined (discontinuous)
    if T <= 0:
        return 0.0

    d1, d2 = compute_d1_d2(params)
    discount = math.exp(-r * T)

    # Diffusion contribution, same for call and put
    term1 = -(S * normal_pdf(d1) * sigma) / (2.0 * math.sqrt(T))

    if option_type == "call":
        theta_annual = term1 - r * K * discount * normal_cdf(d2)
    else:
        theta_annual = term1 + r * K * discount * normal_cdf(-d2)

    return theta_annual / DAYS_PER_YEAR


def rho(params: MarketParams, option_type: OptionType = "call") -> float:
    """
    Calculate option rho (∂V/∂r), reported per 1% change in interest rate.

    Formulas:
        Call rho: ρ_c = K·T·e^(-rT)·N(d2) / 100
        Put rho:  ρ_p = -K·T·e^(-rT)·N(-d2) / 100

    Notes:
        Call rho is positive (higher rates → higher call value) and put
        rho is negative.
    """
    check_option_type(option_type)

    K, T, r = params.K, params.T, params.r

    if T <= 0:
        return 0.0

    _, d2 = compute_d1_d2(params)
    discount_strike = K * T * math.exp(-r * T)

    if option_type == "call":
        return discount_strike * normal_cdf(d2) / PERCENT
    return -discount_strike * normal_cdf(-d2) / PERCENT


def calculate_greeks(params: MarketParams, option_type: OptionType = "call") -> Greeks:
    """
    Calculate all Greeks for an option in one pass.

    Example:
        >>> greeks = calculate_greeks(MarketParams(100, 100, 1.0, 0.05, 0.20))
        >>> print(f"Delta: {greeks.delta:.4f}")
        Delta: 0.6368
    """
    return Greeks(
        delta=delta(params, option_type),
        gamma=gamma(params),
        vega=vega(params),
        theta=theta(params, option_type),
        rho=rho(params, option_type),
    )
