"""
Streamlit web interface for the pricing engine.

Interactive UI with tabs for:
- Option pricing and Greeks
- Greeks sensitivity sweeps
- Greek surfaces
- Implied volatility solver and smile
- Strategy payoff diagrams
"""

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from bsm_engine.analysis.smile import atm_term_structure, synthetic_smile
from bsm_engine.analysis.surfaces import METRICS, SURFACE_AXES, greek_sweep, metric_surface
from bsm_engine.core.black_scholes import black_scholes, calculate_greeks
from bsm_engine.payoffs.curves import (
    default_time_slices,
    payoff_curve,
    pre_expiry_curve,
    summarize_payoff,
)
from bsm_engine.payoffs.strategies import STRATEGY_NAMES, build_strategy
from bsm_engine.solvers.implied_vol import implied_volatility
from bsm_engine.utils.logging_config import setup_logging
from bsm_engine.utils.types import MarketParams

setup_logging("WARNING")

st.set_page_config(page_title="Black-Scholes Pricing Engine", layout="wide")

st.title("Black-Scholes Pricing Engine")
st.markdown("European option prices, Greeks, implied volatility and strategy payoffs")

# Sidebar parameters
st.sidebar.header("Option Parameters")
S = st.sidebar.number_input("Spot Price (S)", value=100.0, min_value=0.01)
K = st.sidebar.number_input("Strike Price (K)", value=100.0, min_value=0.01)
T = st.sidebar.slider("Time to Expiry (years)", 0.0, 3.0, 0.5)
r = st.sidebar.slider("Risk-Free Rate (%)", 0.0, 20.0, 5.0) / 100
sigma = st.sidebar.slider("Volatility (%)", 1.0, 200.0, 20.0) / 100
option_type = st.sidebar.selectbox("Option Type", ["call", "put"])

params = MarketParams(S, K, T, r, sigma)

tab1, tab2, tab3, tab4, tab5 = st.tabs(
    ["Pricing & Greeks", "Greeks Sensitivity", "Surfaces", "Implied Volatility", "Payoffs"]
)

with tab1:
    st.header("Option Valuation")

    result = black_scholes(params)
    col1, col2, col3 = st.columns(3)
    col1.metric(label="Call Price", value=f"${result.call_price:.4f}")
    col2.metric(label="Put Price", value=f"${result.put_price:.4f}")
    col3.metric(label="d1 / d2", value=f"{result.d1:.4f} / {result.d2:.4f}")

    greeks_vals = calculate_greeks(params, option_type)

    st.subheader(f"Greeks ({option_type})")
    greeks_df = pd.DataFrame({
        "Greek": ["Delta", "Gamma", "Vega", "Theta", "Rho"],
        "Value": [
            f"{greeks_vals.delta:.6f}",
            f"{greeks_vals.gamma:.6f}",
            f"{greeks_vals.vega:.6f}",
            f"{greeks_vals.theta:.6f}",
            f"{greeks_vals.rho:.6f}",
        ],
        "Description": [
            "Price change per $1 spot move",
            "Delta change per $1 spot move",
            "Price change per 1% vol move",
            "Price change per day",
            "Price change per 1% rate move",
        ],
    })
    st.table(greeks_df)

with tab2:
    st.header("Greeks Sensitivity Analysis")

    metric = st.selectbox("Metric", list(METRICS), index=1, key="sweep_metric")
    sweeps = {
        "spot": (np.arange(max(1.0, K * 0.5), K * 1.5, 0.5), "Spot Price"),
        "time": (np.arange(0.02, 2.0, 0.02), "Time to Expiry (years)"),
        "volatility": (np.arange(0.02, 1.0, 0.01), "Volatility"),
    }

    for axis, (values, title) in sweeps.items():
        fig = go.Figure()
        for kind in ("call", "put"):
            fig.add_trace(go.Scatter(x=values, y=greek_sweep(params, metric, axis, values, kind), name=kind))
        fig.update_layout(title=f"{metric.capitalize()} vs {title}", xaxis_title=title, yaxis_title=metric)
        st.plotly_chart(fig, use_container_width=True)

with tab3:
    st.header("Greek Surfaces")

    surface_metric = st.selectbox("Metric", list(METRICS), index=1, key="surface_metric")
    axes = st.selectbox("Axes", list(SURFACE_AXES))
    surface = metric_surface(params, surface_metric, axes, option_type)

    fig_surface = go.Figure(data=[go.Surface(x=surface.x, y=surface.y, z=surface.z)])
    fig_surface.update_layout(
        title=f"{surface_metric.capitalize()} surface ({option_type})",
        scene=dict(xaxis_title=surface.x_label, yaxis_title=surface.y_label, zaxis_title=surface_metric),
        height=600,
    )
    st.plotly_chart(fig_surface, use_container_width=True)

with tab4:
    st.header("Implied Volatility Solver")

    market_price = st.number_input("Market Price", value=10.0, min_value=0.0)
    iv_result = implied_volatility(market_price, S, K, T, r, option_type)

    if not iv_result.available:
        st.error(f"Implied Volatility: N/A ({iv_result.message})")
    elif iv_result.success:
        st.success(f"Implied Volatility: {iv_result.volatility:.4f} ({iv_result.volatility*100:.2f}%)")
        check = black_scholes(params.replace(sigma=iv_result.volatility)).price_for(option_type)
        st.info(f"Iterations: {iv_result.iterations} | Model price at IV: ${check:.4f}")
    else:
        st.warning(f"Best estimate {iv_result.volatility:.4f}: {iv_result.message}")

    st.subheader("Volatility Smile")
    c1, c2, c3 = st.columns(3)
    base_vol = c1.slider("Base Vol (%)", 5.0, 80.0, 20.0) / 100
    skew = c2.slider("Skew", -0.5, 0.5, 0.1)
    curvature = c3.slider("Smile", 0.0, 0.5, 0.05)

    smile_df = synthetic_smile(S, max(T, 0.01), r, base_vol, skew, curvature)
    fig_smile = go.Figure()
    fig_smile.add_trace(go.Scatter(x=smile_df["strike"], y=smile_df["true_vol"] * 100, name="True vol"))
    fig_smile.add_trace(
        go.Scatter(x=smile_df["strike"], y=smile_df["implied_vol"] * 100, name="Recovered IV", mode="markers")
    )
    fig_smile.update_layout(title="Volatility Smile", xaxis_title="Strike", yaxis_title="Volatility (%)")
    st.plotly_chart(fig_smile, use_container_width=True)

    term_df = atm_term_structure(S, r, base_vol)
    fig_term = go.Figure()
    fig_term.add_trace(go.Scatter(x=term_df["maturity"], y=term_df["implied_vol"] * 100, name="ATM IV"))
    fig_term.update_layout(title="ATM Term Structure", xaxis_title="Maturity (years)", yaxis_title="IV (%)")
    st.plotly_chart(fig_term, use_container_width=True)

with tab5:
    st.header("Payoff Diagrams")

    strategy_name = st.selectbox("Strategy", STRATEGY_NAMES)
    width = st.slider("Strike Width", 1.0, 50.0, 10.0)

    try:
        strategy = build_strategy(strategy_name, params, width)
    except ValueError as e:
        st.error(f"Error: {e}")
        st.stop()

    expiry = payoff_curve(strategy, K * 0.5, K * 1.5, 300)
    summary = summarize_payoff(strategy, expiry)

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Net Premium", f"{summary.net_premium:.2f}")
    m2.metric("Max Profit", f"{summary.max_profit:.2f}")
    m3.metric("Max Loss", f"{summary.max_loss:.2f}")
    m4.metric("Breakevens", ", ".join(f"{b:.2f}" for b in summary.breakevens) or "none")

    fig_payoff = go.Figure()
    fig_payoff.add_trace(go.Scatter(x=expiry.spots, y=expiry.pnl, name="At Expiry", line=dict(width=3)))
    if T > 0:
        times, labels = zip(*default_time_slices(T))
        for curve in pre_expiry_curve(strategy, K * 0.5, K * 1.5, times, labels=labels):
            fig_payoff.add_trace(go.Scatter(x=curve.spots, y=curve.pnl, name=curve.label, line=dict(dash="dot")))
    fig_payoff.update_layout(title=strategy.name, xaxis_title="Spot at Expiry", yaxis_title="P&L")
    st.plotly_chart(fig_payoff, use_container_width=True)

    st.table(pd.DataFrame([vars(leg) for leg in strategy]))
