"""Unit tests for expiry payoffs, pre-expiry curves and payoff summaries."""

import numpy as np
import pytest

from bsm_engine.core.black_scholes import black_scholes
from bsm_engine.payoffs.curves import (
    PayoffCurve,
    default_time_slices,
    find_breakevens,
    payoff_at_expiry,
    payoff_curve,
    pre_expiry_curve,
    summarize_payoff,
)
from bsm_engine.payoffs.strategies import (
    Strategy,
    butterfly_spread,
    iron_condor,
    long_call,
    long_straddle,
)
from bsm_engine.utils.types import MarketParams, OptionLeg


# ===========================
# Expiry Payoff Tests
# ===========================


def test_long_call_payoff_scenario(standard_params):
    """Spot 110 at expiry: 10 intrinsic less ≈6.90 premium ≈ 3.10."""
    strategy = long_call(standard_params)
    premium = strategy.legs[0].premium

    pnl = payoff_at_expiry(strategy, 110.0)

    assert pnl == pytest.approx(10.0 - premium)
    assert abs(pnl - 3.10) < 0.02


def test_long_call_breakeven(standard_params):
    strategy = long_call(standard_params)
    premium = strategy.legs[0].premium

    curve = payoff_curve(strategy, 50.0, 150.0, 1000)
    breakevens = find_breakevens(curve)

    assert len(breakevens) == 1
    assert breakevens[0] == pytest.approx(100.0 + premium, abs=1e-9)
    assert abs(breakevens[0] - 106.90) < 0.02


def test_long_call_loss_capped_at_premium(standard_params):
    strategy = long_call(standard_params)
    assert payoff_at_expiry(strategy, 50.0) == pytest.approx(-strategy.legs[0].premium)


def test_butterfly_payoff_scenario(standard_params):
    strategy = butterfly_spread(standard_params, 90.0, 100.0, 110.0)
    net_debit = strategy.net_premium

    assert payoff_at_expiry(strategy, 100.0) == pytest.approx((100.0 - 90.0) - net_debit)
    for spot in (50.0, 80.0, 90.0, 110.0, 130.0):
        assert payoff_at_expiry(strategy, spot) == pytest.approx(-net_debit)


def test_butterfly_max_profit_at_middle_strike(standard_params):
    strategy = butterfly_spread(standard_params, 90.0, 100.0, 110.0)
    curve = payoff_curve(strategy, 50.0, 150.0, 200)

    assert curve.spots[np.argmax(curve.pnl)] == pytest.approx(100.0)


def test_iron_condor_keeps_credit_between_short_strikes(standard_params):
    strategy = iron_condor(standard_params, 80.0, 90.0, 110.0, 120.0)
    credit = -strategy.net_premium

    assert payoff_at_expiry(strategy, 100.0) == pytest.approx(credit)
    assert payoff_at_expiry(strategy, 60.0) == pytest.approx(credit - 10.0)
    assert payoff_at_expiry(strategy, 140.0) == pytest.approx(credit - 10.0)


def test_premiums_not_recomputed_during_sweep(standard_params):
    """Expiry payoffs depend only on the locked-in premium, not on market inputs."""
    legs = (OptionLeg("call", 100.0, 5.0, 1.0),)
    strategy = Strategy("fixed", legs, params=standard_params)
    assert payoff_at_expiry(strategy, 120.0) == 15.0


def test_leg_order_irrelevant(standard_params):
    strategy = iron_condor(standard_params, 80.0, 90.0, 110.0, 120.0)
    reversed_strategy = Strategy("reversed", tuple(reversed(strategy.legs)))
    for spot in (70.0, 85.0, 100.0, 115.0, 130.0):
        assert payoff_at_expiry(reversed_strategy, spot) == pytest.approx(payoff_at_expiry(strategy, spot))


# ===========================
# Curve Sampling Tests
# ===========================


def test_payoff_curve_sampling(standard_params):
    strategy = long_call(standard_params)
    curve = payoff_curve(strategy, 50.0, 150.0, 4)

    assert len(curve) == 5
    np.testing.assert_allclose(curve.spots, [50.0, 75.0, 100.0, 125.0, 150.0])
    for spot, pnl in curve:
        assert pnl == pytest.approx(payoff_at_expiry(strategy, spot))


def test_payoff_curve_single_point_range(standard_params):
    curve = payoff_curve(long_call(standard_params), 100.0, 100.0, 2)
    assert list(curve.spots) == [100.0, 100.0, 100.0]


@pytest.mark.parametrize("spot_min,spot_max,steps", [(50.0, 150.0, 0), (150.0, 50.0, 10)])
def test_payoff_curve_rejects_bad_grid(standard_params, spot_min, spot_max, steps):
    with pytest.raises(ValueError):
        payoff_curve(long_call(standard_params), spot_min, spot_max, steps)


# ===========================
# Pre-Expiry Curve Tests
# ===========================


def test_pre_expiry_reprices_legs(standard_params):
    strategy = long_call(standard_params)
    premium = strategy.legs[0].premium

    curves = pre_expiry_curve(strategy, 80.0, 120.0, [0.25], steps=4)

    assert len(curves) == 1
    for spot, pnl in curves[0]:
        model = black_scholes(MarketParams(spot, 100.0, 0.25, 0.05, 0.20)).call_price
        assert pnl == pytest.approx(model - premium)


def test_pre_expiry_uses_intrinsic_below_threshold(standard_params):
    strategy = long_straddle(standard_params)
    expiry = payoff_curve(strategy, 50.0, 150.0, 20)

    curves = pre_expiry_curve(strategy, 50.0, 150.0, [0.0005, 0.0], steps=20)

    for curve in curves:
        np.testing.assert_allclose(curve.pnl, expiry.pnl)


def test_pre_expiry_call_keeps_time_value(standard_params):
    """With r >= 0 a long call is worth more before expiry than at expiry."""
    strategy = long_call(standard_params)
    expiry = payoff_curve(strategy, 60.0, 140.0, 40)
    now = pre_expiry_curve(strategy, 60.0, 140.0, [standard_params.T], steps=40)[0]

    assert np.all(now.pnl > expiry.pnl)


def test_pre_expiry_now_slice_has_zero_pnl_at_entry(standard_params):
    """At the quoting spot and time, each leg is worth exactly its premium."""
    strategy = butterfly_spread(standard_params, 90.0, 100.0, 110.0)
    now = pre_expiry_curve(strategy, 100.0, 100.0, [standard_params.T], steps=1)[0]

    assert now.pnl[0] == pytest.approx(0.0, abs=1e-12)


def test_pre_expiry_explicit_rate_and_vol_override(standard_params):
    strategy = long_call(standard_params)
    base = pre_expiry_curve(strategy, 90.0, 110.0, [0.25], steps=2)[0]
    high_vol = pre_expiry_curve(strategy, 90.0, 110.0, [0.25], steps=2, volatility=0.4)[0]

    assert np.all(high_vol.pnl > base.pnl)


def test_pre_expiry_requires_market_inputs_without_params():
    strategy = Strategy("bare", (OptionLeg("call", 100.0, 5.0, 1.0),))

    with pytest.raises(ValueError, match="rate and volatility"):
        pre_expiry_curve(strategy, 50.0, 150.0, [0.5])

    curves = pre_expiry_curve(strategy, 50.0, 150.0, [0.5], rate=0.05, volatility=0.2)
    assert len(curves) == 1


def test_pre_expiry_labels(standard_params):
    strategy = long_call(standard_params)
    times, labels = zip(*default_time_slices(standard_params.T))

    curves = pre_expiry_curve(strategy, 50.0, 150.0, times, steps=10, labels=labels)

    assert [c.label for c in curves] == ["Now", "75% T left", "50% T left", "25% T left", "At Expiry"]

    with pytest.raises(ValueError):
        pre_expiry_curve(strategy, 50.0, 150.0, times, labels=["only one"])


def test_default_time_slices():
    slices = default_time_slices(0.5)
    assert [t for t, _ in slices] == pytest.approx([0.5, 0.375, 0.25, 0.125, 0.01])


# ===========================
# Summary Tests
# ===========================


def test_find_breakevens_interpolates():
    curve = PayoffCurve(spots=np.array([0.0, 1.0, 2.0, 3.0]), pnl=np.array([-1.0, 1.0, 1.0, -3.0]))
    assert find_breakevens(curve) == pytest.approx([0.5, 2.25])


def test_find_breakevens_none_when_always_profitable():
    curve = PayoffCurve(spots=np.array([0.0, 1.0]), pnl=np.array([1.0, 2.0]))
    assert find_breakevens(curve) == []


def test_summarize_straddle(standard_params):
    strategy = long_straddle(standard_params)
    curve = payoff_curve(strategy, 50.0, 150.0, 1000)

    summary = summarize_payoff(strategy, curve)

    cost = strategy.net_premium
    assert summary.net_premium == pytest.approx(cost)
    assert summary.max_loss == pytest.approx(-cost)
    assert summary.breakevens == pytest.approx([100.0 - cost, 100.0 + cost], abs=1e-9)
    assert summary.max_profit == pytest.approx(50.0 - cost)


def test_payoff_curves_compare_by_identity(standard_params):
    strategy = long_call(standard_params)
    first = payoff_curve(strategy, 50.0, 150.0, 10)
    second = payoff_curve(strategy, 50.0, 150.0, 10)

    assert first == first
    assert first != second
    assert len({first, second}) == 2
