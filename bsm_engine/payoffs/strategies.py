"""
Multi-leg option strategies.

A Strategy is an ordered collection of OptionLeg values whose premiums
are quoted with the Black-Scholes model once, when the strategy is
built. Those premiums are the locked-in entry cost of the position and
are never re-derived afterwards; only pre-expiry valuation re-prices
the legs (see payoffs.curves).
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Iterator, Optional

from bsm_engine.core.black_scholes import black_scholes
from bsm_engine.utils.types import MarketParams, OptionLeg, check_option_type


@dataclass(frozen=True)
class Strategy:
    """
    Ordered option legs plus the market inputs their premiums were quoted at.

    Attributes:
        name: Display name
        legs: Legs in display order (order does not affect payoff)
        params: Quoting parameters; None for hand-assembled strategies
    """
    name: str
    legs: tuple[OptionLeg, ...]
    params: Optional[MarketParams] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        for leg in self.legs:
            check_option_type(leg.option_type)
            if leg.strike <= 0:
                raise ValueError(f"Strike must be positive, got {leg.strike}")
            if leg.premium < 0:
                raise ValueError(f"Premium cannot be negative, got {leg.premium}")

    def __iter__(self) -> Iterator[OptionLeg]:
        return iter(self.legs)

    def __len__(self) -> int:
        return len(self.legs)

    @property
    def net_premium(self) -> float:
        """Σ quantity·premium. Positive is a net debit, negative a net credit."""
        return sum(leg.quantity * leg.premium for leg in self.legs)

    @property
    def strikes(self) -> list[float]:
        return [leg.strike for leg in self.legs]

    def scaled(self, factor: float, name: Optional[str] = None) -> "Strategy":
        """Return the same legs with every quantity multiplied by factor."""
        legs = tuple(replace(leg, quantity=leg.quantity * factor) for leg in self.legs)
        return Strategy(name=name or self.name, legs=legs, params=self.params)


def _check_ascending(*strikes: float) -> None:
    if any(lo >= hi for lo, hi in zip(strikes, strikes[1:])):
        raise ValueError(f"Strikes must be strictly ascending, got {list(strikes)}")


def _quote(params: MarketParams, strike: float) -> tuple[float, float]:
    """(call premium, put premium) at the given strike."""
    result = black_scholes(params.replace(K=strike))
    return result.call_price, result.put_price


def long_call(params: MarketParams) -> Strategy:
    """Buy one call at params.K. Max loss is the premium paid."""
    call, _ = _quote(params, params.K)
    return Strategy(
        name="Long Call",
        legs=(OptionLeg("call", params.K, call, 1.0),),
        params=params,
    )


def long_put(params: MarketParams) -> Strategy:
    """Buy one put at params.K."""
    _, put = _quote(params, params.K)
    return Strategy(
        name="Long Put",
        legs=(OptionLeg("put", params.K, put, 1.0),),
        params=params,
    )


def short_call(params: MarketParams) -> Strategy:
    """Sell one call at params.K, collecting the premium."""
    return long_call(params).scaled(-1.0, name="Short Call")


def short_put(params: MarketParams) -> Strategy:
    return long_put(params).scaled(-1.0, name="Short Put")


def long_straddle(params: MarketParams) -> Strategy:
    """Buy a call and a put at the same strike."""
    call, put = _quote(params, params.K)
    return Strategy(
        name="Long Straddle",
        legs=(
            OptionLeg("call", params.K, call, 1.0),
            OptionLeg("put", params.K, put, 1.0),
        ),
        params=params,
    )


def long_strangle(params: MarketParams, put_strike: float, call_strike: float) -> Strategy:
    """Buy a put at put_strike and a call at the higher call_strike."""
    _check_ascending(put_strike, call_strike)
    _, put = _quote(params, put_strike)
    call, _ = _quote(params, call_strike)
    return Strategy(
        name="Long Strangle",
        legs=(
            OptionLeg("put", put_strike, put, 1.0),
            OptionLeg("call", call_strike, call, 1.0),
        ),
        params=params,
    )


def butterfly_spread(
    params: MarketParams, lower: float, middle: float, upper: float
) -> Strategy:
    """
    Long call butterfly: +1 call at lower, -2 calls at middle, +1 call at upper.

    With symmetric wings the maximum profit, reached at the middle strike,
    is (middle - lower) minus the net debit; below lower or above upper
    the position loses exactly the net debit.
    """
    _check_ascending(lower, middle, upper)
    c1, _ = _quote(params, lower)
    c2, _ = _quote(params, middle)
    c3, _ = _quote(params, upper)
    return Strategy(
        name="Butterfly Spread",
        legs=(
            OptionLeg("call", lower, c1, 1.0),
            OptionLeg("call", middle, c2, -2.0),
            OptionLeg("call", upper, c3, 1.0),
        ),
        params=params,
    )


def iron_condor(
    params: MarketParams, k1: float, k2: float, k3: float, k4: float
) -> Strategy:
    """
    Iron condor over four ascending strikes.

    Legs: +1 put at k1, -1 put at k2, -1 call at k3, +1 call at k4. The
    position is a net credit that is kept in full while spot ends between
    k2 and k3.
    """
    _check_ascending(k1, k2, k3, k4)
    _, p1 = _quote(params, k1)
    _, p2 = _quote(params, k2)
    c3, _ = _quote(params, k3)
    c4, _ = _quote(params, k4)
    return Strategy(
        name="Iron Condor",
        legs=(
            OptionLeg("put", k1, p1, 1.0),
            OptionLeg("put", k2, p2, -1.0),
            OptionLeg("call", k3, c3, -1.0),
            OptionLeg("call", k4, c4, 1.0),
        ),
        params=params,
    )


# Strike placement around params.K, keyed by strategy id
_BUILDERS: dict[str, Callable[[MarketParams, float], Strategy]] = {
    "long-call": lambda p, w: long_call(p),
    "long-put": lambda p, w: long_put(p),
    "short-call": lambda p, w: short_call(p),
    "short-put": lambda p, w: short_put(p),
    "long-straddle": lambda p, w: long_straddle(p),
    "long-strangle": lambda p, w: long_strangle(p, p.K - w, p.K + w),
    "butterfly": lambda p, w: butterfly_spread(p, p.K - w, p.K, p.K + w),
    "iron-condor": lambda p, w: iron_condor(p, p.K - 2 * w, p.K - w, p.K + w, p.K + 2 * w),
}

STRATEGY_NAMES = tuple(_BUILDERS)


def build_strategy(name: str, params: MarketParams, width: float = 10.0) -> Strategy:
    """
    Build a named strategy centred on params.K.

    Args:
        name: One of STRATEGY_NAMES
        params: Market inputs used to quote every premium
        width: Distance between adjacent strikes for multi-strike strategies

    Raises:
        ValueError: If name is unknown or width is not positive
    """
    if name not in _BUILDERS:
        raise ValueError(f"Unknown strategy '{name}', expected one of {STRATEGY_NAMES}")
    if width <= 0:
        raise ValueError(f"Strike width must be positive, got {width}")
    return _BUILDERS[name](params, width)
