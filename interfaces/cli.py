"""
Command-line interface for the pricing engine.

This CLI provides access to:
- Option pricing (Black-Scholes)
- Greeks calculation
- Implied volatility solving
- Strategy payoff summaries
"""

import click

from bsm_engine.core.black_scholes import black_scholes, calculate_greeks
from bsm_engine.payoffs.curves import payoff_curve, summarize_payoff
from bsm_engine.payoffs.strategies import STRATEGY_NAMES, build_strategy
from bsm_engine.solvers.implied_vol import implied_volatility
from bsm_engine.utils.logging_config import setup_logging
from bsm_engine.utils.types import MarketParams


@click.group()
@click.version_option(version="1.0.0")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging verbosity",
)
def cli(log_level):
    """Black-Scholes pricing engine: prices, Greeks, implied volatility, payoffs."""
    setup_logging(log_level)


@cli.command()
@click.option("--spot", "-S", type=float, required=True, help="Spot price")
@click.option("--strike", "-K", type=float, required=True, help="Strike price")
@click.option("--time", "-T", type=float, required=True, help="Time to expiry (years)")
@click.option("--rate", "-r", type=float, required=True, help="Risk-free rate")
@click.option("--vol", "-v", type=float, required=True, help="Volatility (annualized)")
def price(spot, strike, time, rate, vol):
    """Calculate call and put prices using Black-Scholes."""
    result = black_scholes(MarketParams(spot, strike, time, rate, vol))
    click.echo(f"\nCall Option Price: ${result.call_price:.4f}")
    click.echo(f"Put Option Price:  ${result.put_price:.4f}")
    click.echo(f"d1: {result.d1:.4f}  d2: {result.d2:.4f}")


@cli.command()
@click.option("--spot", "-S", type=float, required=True, help="Spot price")
@click.option("--strike", "-K", type=float, required=True, help="Strike price")
@click.option("--time", "-T", type=float, required=True, help="Time to expiry (years)")
@click.option("--rate", "-r", type=float, required=True, help="Risk-free rate")
@click.option("--vol", "-v", type=float, required=True, help="Volatility")
@click.option("--type", "-t", type=click.Choice(["call", "put"]), default="call")
def greeks(spot, strike, time, rate, vol, type):
    """Calculate all option Greeks."""
    greeks_values = calculate_greeks(MarketParams(spot, strike, time, rate, vol), type)

    click.echo(f"\nGreeks for {type.capitalize()} Option:")
    click.echo(f"  Delta:  {greeks_values.delta:>10.6f}")
    click.echo(f"  Gamma:  {greeks_values.gamma:>10.6f}")
    click.echo(f"  Vega:   {greeks_values.vega:>10.6f} (per 1% vol)")
    click.echo(f"  Theta:  {greeks_values.theta:>10.6f} (per day)")
    click.echo(f"  Rho:    {greeks_values.rho:>10.6f} (per 1% rate)")


@cli.command()
@click.option("--market-price", "-p", type=float, required=True, help="Market price")
@click.option("--spot", "-S", type=float, required=True, help="Spot price")
@click.option("--strike", "-K", type=float, required=True, help="Strike price")
@click.option("--time", "-T", type=float, required=True, help="Time to expiry (years)")
@click.option("--rate", "-r", type=float, required=True, help="Risk-free rate")
@click.option("--type", "-t", type=click.Choice(["call", "put"]), default="call")
def iv(market_price, spot, strike, time, rate, type):
    """Solve for implied volatility."""
    result = implied_volatility(market_price, spot, strike, time, rate, type)

    if not result.available:
        click.echo("\nImplied Volatility: N/A")
        click.echo(f"Reason: {result.message}", err=True)
        return

    click.echo(f"\nImplied Volatility: {result.volatility:.4f} ({result.volatility*100:.2f}%)")
    click.echo(f"Status: {result.status.value}")
    click.echo(f"Iterations: {result.iterations}")
    if not result.success:
        click.echo(f"Warning: best estimate only ({result.message})", err=True)


@cli.command()
@click.option("--strategy", "-s", type=click.Choice(STRATEGY_NAMES), default="long-call")
@click.option("--spot", "-S", type=float, required=True, help="Spot price")
@click.option("--strike", "-K", type=float, required=True, help="Centre strike")
@click.option("--time", "-T", type=float, required=True, help="Time to expiry (years)")
@click.option("--rate", "-r", type=float, required=True, help="Risk-free rate")
@click.option("--vol", "-v", type=float, required=True, help="Volatility")
@click.option("--width", "-w", type=float, default=10.0, help="Strike spacing")
@click.option("--steps", type=int, default=300, help="Spot samples for the curve")
def payoff(strategy, spot, strike, time, rate, vol, width, steps):
    """Summarize the expiry payoff of a named strategy."""
    try:
        position = build_strategy(strategy, MarketParams(spot, strike, time, rate, vol), width)
    except ValueError as e:
        raise click.BadParameter(str(e))

    curve = payoff_curve(position, strike * 0.5, strike * 1.5, steps)
    summary = summarize_payoff(position, curve)

    click.echo(f"\n{position.name}")
    for leg in position:
        click.echo(
            f"  {leg.quantity:+g} {leg.option_type:<4} K={leg.strike:.2f}  premium={leg.premium:.4f}"
        )
    click.echo(f"Net premium: {summary.net_premium:.4f}")
    click.echo(f"Max profit:  {summary.max_profit:.4f}")
    click.echo(f"Max loss:    {summary.max_loss:.4f}")
    breakevens = ", ".join(f"{b:.2f}" for b in summary.breakevens) or "none"
    click.echo(f"Breakevens:  {breakevens}")


if __name__ == "__main__":
    cli()
