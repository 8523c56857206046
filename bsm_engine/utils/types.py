"""
Data types and structures for options pricing.

This module defines dataclasses and types used throughout the engine
for representing market inputs, prices, Greeks, option legs and solver
results. All of them are plain values; none carries state beyond a
single computation.
"""

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum
from typing import Literal

OptionType = Literal["call", "put"]

OPTION_TYPES = ("call", "put")


def check_option_type(option_type: str) -> None:
    """Raise ValueError unless option_type is "call" or "put"."""
    if option_type not in OPTION_TYPES:
        raise ValueError(f"option_type must be 'call' or 'put', got '{option_type}'")


@dataclass(frozen=True)
class MarketParams:
    """
    Immutable container for Black-Scholes market inputs.

    No validation happens here: non-positive time, volatility, spot or
    strike are legal and produce degenerate (intrinsic / zero) outputs.

    Attributes:
        S: Current spot price of the underlying asset
        K: Strike price
        T: Time to expiration in years
        r: Risk-free interest rate (annualized, continuous compounding)
        sigma: Volatility (annualized standard deviation of log-returns)
    """
    S: float
    K: float
    T: float
    r: float
    sigma: float

    def replace(self, **changes: float) -> "MarketParams":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class PricingResult:
    """
    Call and put prices together with the d1/d2 intermediates.

    Attributes:
        call_price: European call value (never negative)
        put_price: European put value (never negative)
        d1: Standardized moneyness, 0 for degenerate inputs
        d2: d1 - σ√T, 0 for degenerate inputs
    """
    call_price: float
    put_price: float
    d1: float
    d2: float

    def price_for(self, option_type: OptionType) -> float:
        check_option_type(option_type)
        return self.call_price if option_type == "call" else self.put_price


@dataclass
class Greeks:
    """
    Container for option Greeks.

    Attributes:
        delta: Rate of change of option price with respect to spot price (∂V/∂S)
        gamma: Rate of change of delta with respect to spot price (∂²V/∂S²)
        vega: Rate of change of option price with respect to volatility (∂V/∂σ), per 1% vol
        theta: Rate of change of option price with respect to time (∂V/∂t), per day
        rho: Rate of change of option price with respect to interest rate (∂V/∂r), per 1% rate
    """
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float


@dataclass(frozen=True)
class OptionLeg:
    """
    One option position inside a strategy.

    Attributes:
        option_type: "call" or "put"
        strike: Strike price
        premium: Price paid per unit, locked in when the leg is created
        quantity: Signed size; positive is long, negative is short
    """
    option_type: OptionType
    strike: float
    premium: float
    quantity: float = 1.0


class ImpliedVolStatus(Enum):
    """How the implied volatility solver terminated."""

    CONVERGED = "converged"
    OUT_OF_BOUNDS = "out-of-bounds"
    MAX_ITERATIONS = "max-iterations"
    DEGENERATE_VEGA = "degenerate-vega"


@dataclass
class ImpliedVolResult:
    """
    Result from implied volatility solver.

    Attributes:
        volatility: Solved implied volatility (annualized); nan when the
            price lies outside the no-arbitrage bounds, otherwise the
            converged value or the last iterate as a best estimate
        iterations: Number of iterations performed
        status: Termination state of the solver
        fallback_steps: How many bisection-style steps replaced a Newton step
        message: Additional information about convergence
    """
    volatility: float
    iterations: int
    status: ImpliedVolStatus
    fallback_steps: int = 0
    message: str = ""

    @property
    def success(self) -> bool:
        """True only when the price tolerance was met."""
        return self.status is ImpliedVolStatus.CONVERGED

    @property
    def available(self) -> bool:
        """False when no volatility exists for the quoted price."""
        return self.status is not ImpliedVolStatus.OUT_OF_BOUNDS and not math.isnan(
            self.volatility
        )
