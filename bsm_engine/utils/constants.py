"""
Numerical constants and tolerances for the pricing engine.

This module defines the fixed coefficient tables, edge case thresholds
and solver defaults. They are process-wide literals; callers tune solver
behaviour through keyword arguments, never by mutating these values.
"""

# Abramowitz & Stegun 7.1.26 erf coefficients (Φ error < 7.5e-8)
AS_A1 = 0.254829592
AS_A2 = -0.284496736
AS_A3 = 1.421413741
AS_A4 = -1.453152027
AS_A5 = 1.061405429
AS_P = 0.3275911

# Normal distribution bounds
CDF_CLAMP = 10.0  # Beyond ±10, CDF is returned as exactly 0 or 1

# Reporting conventions for Greeks
DAYS_PER_YEAR = 365.0  # Theta is reported per calendar day
PERCENT = 100.0  # Vega and rho are reported per 1 percentage point

# Implied volatility solver parameters
IV_INITIAL_GUESS = 0.3  # Starting volatility for Newton-Raphson
IV_MAX_ITERATIONS = 100
IV_PRICE_TOLERANCE = 1e-8  # Convergence tolerance on price difference
IV_MIN_VEGA = 1e-12  # Raw vega below this triggers the bisection-style step
IV_MIN_VOL = 0.001  # 0.1% minimum volatility
IV_MAX_VOL = 10.0  # 1000% maximum volatility
IV_FALLBACK_SHRINK = 0.5  # Applied when the model price is too high
IV_FALLBACK_GROW = 1.5  # Applied when the model price is too low

# Payoff curves
DEFAULT_CURVE_STEPS = 200
PRE_EXPIRY_TIME_THRESHOLD = 1e-3  # Below this, legs are valued at intrinsic
AT_EXPIRY_TIME = 0.01  # Time slice standing in for "at expiry"

# Surfaces
DEFAULT_GRID_SIZE = 50  # 51 x 51 cells per surface
