"""
Time Value of Money Engine

Shared payment, balance and 5-key TVM solver used by every loan and savings
calculator. Payment formulas match Excel's PMT() and the BA II Plus /
HP 12C conventions (money paid out is negative, money received positive).
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Dict, Optional

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 200
TOLERANCE = 1e-9

# Upper bounds accepted by the TVM solver
MAX_TVM_RATE = 1000
MAX_TVM_PERIODS = 18250

# Balance at or below one cent counts as paid off
PAYOFF_THRESHOLD = 0.01

PERIODS_PER_YEAR = {
    "annually": 1,
    "semi-annually": 2,
    "quarterly": 4,
    "monthly": 12,
    "semi-monthly": 24,
    "bi-weekly": 26,
    "weekly": 52,
    "daily": 365,
    "continuously": math.inf,
}

SOLVE_TARGETS = ("N", "IY", "PV", "PMT", "FV")


def periods_per_year(frequency: str) -> float:
    """Number of compounding or payment periods per year for a frequency name."""
    try:
        return PERIODS_PER_YEAR[frequency]
    except KeyError:
        raise ValueError(f"Unknown frequency: {frequency}")


def effective_periodic_rate(
    annual_rate: float,
    compound_frequency: str = "monthly",
    payment_frequency: str = "monthly",
) -> float:
    """
    Convert an annual percentage rate into the rate per payment period.

    Args:
        annual_rate: Annual rate as a percentage (e.g., 6 for 6%)
        compound_frequency: How often interest compounds
        payment_frequency: How often payments are made

    Returns:
        Rate per payment period as decimal
    """
    if annual_rate == 0:
        return 0.0

    r = annual_rate / 100
    p = periods_per_year(payment_frequency)
    if math.isinf(p):
        raise ValueError("Payments cannot be made continuously")

    if compound_frequency == "continuously":
        return math.exp(r / p) - 1

    c = periods_per_year(compound_frequency)
    if c == p:
        return r / c
    return (1 + r / c) ** (c / p) - 1


def calculate_payment(principal: float, periodic_rate: float, periods: int) -> float:
    """
    Calculate the level payment that amortizes a loan.

    Matches Excel's PMT() function (returned as a positive number).

    Args:
        principal: Loan principal amount
        periodic_rate: Interest rate per payment period as decimal
        periods: Number of payments

    Returns:
        Payment per period
    """
    if principal <= 0 or periods <= 0:
        return 0.0

    if periodic_rate == 0:
        return principal / periods

    growth = (1 + periodic_rate) ** periods
    return principal * periodic_rate * growth / (growth - 1)


def calculate_monthly_payment(
    principal: float, annual_rate: float, term_years: float
) -> float:
    """Monthly P&I payment for an annual percentage rate and a term in years."""
    return calculate_payment(
        principal, annual_rate / 100 / 12, int(round(term_years * 12))
    )


def calculate_remaining_balance(
    principal: float,
    periodic_rate: float,
    periods: int,
    payments_completed: int,
) -> float:
    """Calculate remaining loan balance after N level payments."""
    payment = calculate_payment(principal, periodic_rate, periods)

    if periodic_rate == 0:
        return max(0.0, principal - payment * payments_completed)

    growth = (1 + periodic_rate) ** payments_completed
    balance = principal * growth - payment * ((growth - 1) / periodic_rate)

    return max(0.0, balance)


@dataclass
class TVMInputs:
    """Inputs for the 5-key TVM solver. The `solve_for` value is ignored."""

    solve_for: str
    n: float = 0.0  # Number of payment periods
    iy: float = 0.0  # Annual interest rate as a percentage
    pv: float = 0.0
    pmt: float = 0.0
    fv: float = 0.0
    payments_per_year: int = 12
    compounds_per_year: int = 12
    pmt_at_beginning: bool = False


@dataclass
class TVMResults:
    n: float
    iy: float
    pv: float
    pmt: float
    fv: float


def _tvm_periodic_rate(annual_rate: float, py: int, cy: int) -> float:
    """Rate per payment period for P/Y payments and C/Y compounds per year."""
    if annual_rate == 0:
        return 0.0
    per_compound = annual_rate / 100 / cy
    if py == cy:
        return per_compound
    return (1 + per_compound) ** (cy / py) - 1


def _growth(i: float, n: float) -> float:
    """(1 + i)^n, infinite when the power overflows a float."""
    if 1 + i <= 0:
        return math.nan
    try:
        return (1 + i) ** n
    except OverflowError:
        return math.inf


def _annuity_factor(i: float, n: float, at_beginning: bool) -> float:
    factor = (_growth(i, n) - 1) / i
    if at_beginning:
        factor *= 1 + i
    return factor


def _tvm_balance(i: float, inputs: TVMInputs) -> float:
    """PV·(1+i)^N + PMT·annuity + FV; zero when the five values are consistent."""
    if i == 0:
        return inputs.pv + inputs.pmt * inputs.n + inputs.fv
    return (
        inputs.pv * _growth(i, inputs.n)
        + inputs.pmt * _annuity_factor(i, inputs.n, inputs.pmt_at_beginning)
        + inputs.fv
    )


def _solve_fv(inputs: TVMInputs) -> float:
    i = _tvm_periodic_rate(inputs.iy, inputs.payments_per_year, inputs.compounds_per_year)
    if i == 0:
        return -(inputs.pv + inputs.pmt * inputs.n)
    return -(
        inputs.pv * _growth(i, inputs.n)
        + inputs.pmt * _annuity_factor(i, inputs.n, inputs.pmt_at_beginning)
    )


def _solve_pv(inputs: TVMInputs) -> float:
    i = _tvm_periodic_rate(inputs.iy, inputs.payments_per_year, inputs.compounds_per_year)
    if i == 0:
        return -(inputs.fv + inputs.pmt * inputs.n)
    discount = _growth(i, -inputs.n)
    annuity = (1 - discount) / i
    if inputs.pmt_at_beginning:
        annuity *= 1 + i
    return -inputs.fv * discount - inputs.pmt * annuity


def _solve_pmt(inputs: TVMInputs) -> float:
    if inputs.n <= 0:
        raise ValueError("Number of periods must be positive to solve for payment")
    i = _tvm_periodic_rate(inputs.iy, inputs.payments_per_year, inputs.compounds_per_year)
    if i == 0:
        return -(inputs.pv + inputs.fv) / inputs.n
    numerator = -(inputs.pv * _growth(i, inputs.n) + inputs.fv)
    return numerator / _annuity_factor(i, inputs.n, inputs.pmt_at_beginning)


def _solve_n(inputs: TVMInputs) -> float:
    i = _tvm_periodic_rate(inputs.iy, inputs.payments_per_year, inputs.compounds_per_year)

    if i == 0:
        if inputs.pmt == 0:
            raise ValueError("Cannot solve for N with zero interest and zero payment")
        return -(inputs.pv + inputs.fv) / inputs.pmt

    pmt = inputs.pmt * (1 + i) if inputs.pmt_at_beginning else inputs.pmt
    numerator = pmt - inputs.fv * i
    denominator = pmt + inputs.pv * i

    if denominator == 0 or numerator / denominator <= 0:
        raise ValueError("Cannot solve for N with these parameters - no solution exists")

    return math.log(numerator / denominator) / math.log(1 + i)


def _solve_iy(inputs: TVMInputs) -> float:
    """
    Solve for the annual rate.

    Newton-Raphson on the periodic rate with a numeric derivative, falling
    back to bisection over a bracketing interval when Newton leaves the
    valid domain.
    """
    py = inputs.payments_per_year
    cy = inputs.compounds_per_year

    # Values already balance without interest
    if abs(_tvm_balance(0.0, inputs)) < 0.01:
        return 0.0

    def to_annual(i: float) -> float:
        if py == cy:
            return i * cy * 100
        return (_growth(i, py / cy) - 1) * cy * 100

    # Starting point from the lump-sum case when there are no payments
    i = 0.01
    if inputs.pmt == 0 and inputs.pv != 0 and inputs.fv != 0 and inputs.n > 0:
        ratio = -inputs.fv / inputs.pv
        if ratio > 0:
            i = ratio ** (1 / inputs.n) - 1

    for _ in range(MAX_ITERATIONS):
        f = _tvm_balance(i, inputs)
        step = max(abs(i) * 1e-6, 1e-10)
        df = (_tvm_balance(i + step, inputs) - _tvm_balance(i - step, inputs)) / (2 * step)

        if df == 0 or not math.isfinite(df):
            break

        new_i = i - f / df
        if not math.isfinite(new_i) or new_i <= -1:
            break

        if abs(new_i - i) < TOLERANCE:
            return to_annual(new_i)
        i = new_i

    logger.warning("TVM rate solve falling back to bisection")

    low, high = -0.99, 1.0
    f_low = _tvm_balance(low, inputs)
    f_high = _tvm_balance(high, inputs)
    while f_low * f_high > 0 and math.isfinite(f_high) and high < 1000:
        high *= 2
        f_high = _tvm_balance(high, inputs)

    if math.isnan(f_low) or math.isnan(f_high) or f_low * f_high > 0:
        raise ValueError("Cannot solve for interest rate with these parameters")

    for _ in range(MAX_ITERATIONS):
        mid = (low + high) / 2
        f_mid = _tvm_balance(mid, inputs)
        if math.isnan(f_mid):
            raise ValueError("Cannot solve for interest rate with these parameters")
        if abs(f_mid) < TOLERANCE or (high - low) / 2 < TOLERANCE:
            return to_annual(mid)
        if f_low * f_mid < 0:
            high = mid
        else:
            low, f_low = mid, f_mid

    return to_annual((low + high) / 2)


_SOLVERS = {
    "N": ("n", _solve_n),
    "IY": ("iy", _solve_iy),
    "PV": ("pv", _solve_pv),
    "PMT": ("pmt", _solve_pmt),
    "FV": ("fv", _solve_fv),
}


def solve_tvm(inputs: TVMInputs) -> TVMResults:
    """
    Solve for whichever of N, I/Y, PV, PMT or FV is requested.

    Raises:
        ValueError: For an unknown target or parameters with no solution
    """
    if inputs.solve_for not in _SOLVERS:
        raise ValueError(f"Unknown solve mode: {inputs.solve_for}")

    field, solver = _SOLVERS[inputs.solve_for]
    value = solver(inputs)
    if not math.isfinite(value):
        raise ValueError(
            f"Cannot solve for {inputs.solve_for} with these parameters - "
            "the result is too large"
        )

    result = TVMResults(
        n=inputs.n, iy=inputs.iy, pv=inputs.pv, pmt=inputs.pmt, fv=inputs.fv
    )
    setattr(result, field, value)
    return result


def generate_tvm_schedule(
    pv: float,
    pmt: float,
    annual_rate: float,
    n: int,
    payments_per_year: int = 12,
    compounds_per_year: int = 12,
    pmt_at_beginning: bool = False,
    max_rows: Optional[int] = None,
) -> List[Dict]:
    """
    Generate a payment-by-payment schedule for a solved TVM loan.

    Payments at the beginning of a period are applied before interest accrues.
    The schedule stops once the balance is paid off, or after `max_rows` rows.
    """
    schedule = []
    i = _tvm_periodic_rate(annual_rate, payments_per_year, compounds_per_year)
    balance = abs(pv)
    payment = abs(pmt)

    periods = int(n)
    if max_rows is not None:
        periods = min(periods, max_rows)

    for period in range(1, periods + 1):
        if balance <= PAYOFF_THRESHOLD:
            break

        if pmt_at_beginning:
            paid = min(payment, balance)
            balance -= paid
            interest = balance * i
            balance += interest
            principal = paid - interest
        else:
            interest = balance * i
            principal = min(payment - interest, balance)
            paid = principal + interest
            balance -= principal

        schedule.append(
            {
                "period": period,
                "payment": round(paid, 2),
                "principal": round(principal, 2),
                "interest": round(interest, 2),
                "balance": round(balance, 2),
            }
        )

    return schedule


def validate_tvm_inputs(inputs: TVMInputs) -> List[str]:
    errors = []

    if inputs.solve_for not in SOLVE_TARGETS:
        errors.append(f"Unknown solve mode: {inputs.solve_for}")
    if inputs.payments_per_year <= 0:
        errors.append("Payments per year must be positive")
    if inputs.compounds_per_year <= 0:
        errors.append("Compounds per year must be positive")
    if inputs.solve_for != "N":
        if inputs.n < 0:
            errors.append("Number of periods cannot be negative")
        elif inputs.n > MAX_TVM_PERIODS:
            errors.append(f"Number of periods cannot exceed {MAX_TVM_PERIODS}")
    if inputs.solve_for != "IY":
        if inputs.iy <= -100:
            errors.append("Interest rate must be greater than -100%")
        elif inputs.iy > MAX_TVM_RATE:
            errors.append(f"Interest rate cannot exceed {MAX_TVM_RATE}%")

    return errors
