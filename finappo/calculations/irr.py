"""
IRR and NPV Calculations

Implements IRR using Newton-Raphson with a bisection fallback, matching
Excel's IRR/XIRR/MIRR functions, plus payback period and a per-period
discounted cash flow schedule.
"""

import logging
from dataclasses import dataclass
from typing import List, Dict, Optional, Sequence
from datetime import date
import numpy as np

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-7
LOWER_BOUND = -0.99
UPPER_BOUND = 10.0


@dataclass
class CashFlow:
    period: float  # 0 for the initial investment
    amount: float  # Negative = outflow, positive = inflow
    label: Optional[str] = None


@dataclass
class IRRInputs:
    cash_flows: List[CashFlow]
    finance_rate: Optional[float] = None  # Percentage, for MIRR
    reinvestment_rate: Optional[float] = None  # Percentage, for MIRR
    periods_per_year: int = 1  # Cash-flow periods per year, 12 for monthly flows


@dataclass
class IRRResults:
    irr: float  # Percentage
    annualized_irr: float  # Percentage
    mirr: Optional[float]  # Percentage
    npv: float  # NPV at the IRR, ~0
    npv_at_zero: float
    total_investment: float
    total_returns: float
    profit_loss: float
    payback_period: Optional[float]
    schedule: List[Dict]


def _periods_for(cash_flows: Sequence[float], periods: Optional[Sequence[float]]) -> np.ndarray:
    if periods is None:
        return np.arange(len(cash_flows), dtype=float)
    if len(periods) != len(cash_flows):
        raise ValueError("Cash flows and periods arrays must have same length")
    return np.asarray(periods, dtype=float)


def calculate_npv(
    cash_flows: Sequence[float],
    discount_rate: float,
    periods: Optional[Sequence[float]] = None,
) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Discount rate per period (e.g., 0.10 for 10%)
        periods: Period of each cash flow; defaults to 0, 1, 2, ...

    Returns:
        NPV value
    """
    flows = np.asarray(cash_flows, dtype=float)
    t = _periods_for(cash_flows, periods)
    return float(np.sum(flows / (1 + discount_rate) ** t))


def _npv_derivative(
    cash_flows: Sequence[float], rate: float, periods: Optional[Sequence[float]] = None
) -> float:
    """Calculate derivative of NPV with respect to rate (for Newton-Raphson)."""
    flows = np.asarray(cash_flows, dtype=float)
    t = _periods_for(cash_flows, periods)
    return float(-np.sum(t * flows / (1 + rate) ** (t + 1)))


def _check_sign_change(cash_flows: Sequence[float]) -> None:
    if len(cash_flows) < 2:
        raise ValueError("At least 2 cash flows required")

    has_positive = any(cf > 0 for cf in cash_flows)
    has_negative = any(cf < 0 for cf in cash_flows)

    if not has_positive or not has_negative:
        raise ValueError("Cash flows must contain both positive and negative values")


def _initial_guess(cash_flows: Sequence[float], periods: np.ndarray) -> float:
    """Simple average return per period as a starting point."""
    invested = -sum(cf for cf in cash_flows if cf < 0)
    returned = sum(cf for cf in cash_flows if cf > 0)
    horizon = float(periods.max()) or 1.0
    return (returned - invested) / invested / horizon


def calculate_irr(
    cash_flows: Sequence[float],
    guess: Optional[float] = None,
    periods: Optional[Sequence[float]] = None,
) -> float:
    """
    Calculate IRR (Internal Rate of Return).

    Newton-Raphson from the guess; if a step leaves the bracket
    [-99%, 1000%] or the derivative vanishes, switches to bisection over the
    bracket.

    Args:
        cash_flows: Array of periodic cash flows
        guess: Initial guess for rate; defaults to the simple average return
        periods: Period of each cash flow; defaults to 0, 1, 2, ...

    Returns:
        IRR per period as decimal (e.g., 0.15 for 15%)

    Raises:
        ValueError: If IRR cannot be calculated
    """
    _check_sign_change(cash_flows)
    t = _periods_for(cash_flows, periods)

    def npv(rate: float) -> float:
        return calculate_npv(cash_flows, rate, t)

    rate = _initial_guess(cash_flows, t) if guess is None else guess

    low, high = LOWER_BOUND, UPPER_BOUND
    if npv(low) * npv(high) > 0:
        if abs(npv(low)) < abs(npv(high)):
            low = -0.999
        else:
            high = 100.0

    for _ in range(MAX_ITERATIONS):
        value = npv(rate)
        if abs(value) < TOLERANCE:
            return rate

        derivative = _npv_derivative(cash_flows, rate, t)
        if abs(derivative) < TOLERANCE:
            break

        new_rate = rate - value / derivative
        if not np.isfinite(new_rate) or not low <= new_rate <= high:
            break

        if abs(new_rate - rate) < TOLERANCE:
            return new_rate
        rate = new_rate

    logger.warning("IRR Newton-Raphson did not converge, using bisection")

    npv_low = npv(low)
    if npv_low * npv(high) > 0:
        raise ValueError("IRR calculation did not converge")

    for _ in range(MAX_ITERATIONS):
        mid = (low + high) / 2
        npv_mid = npv(mid)
        if abs(npv_mid) < TOLERANCE or (high - low) / 2 < TOLERANCE:
            return mid
        if npv_low * npv_mid < 0:
            high = mid
        else:
            low, npv_low = mid, npv_mid

    logger.warning("IRR bisection did not converge")
    raise ValueError("IRR calculation did not converge")


def _years_from_first(dates: Sequence[date]) -> List[float]:
    return [(d - dates[0]).days / 365.0 for d in dates]


def calculate_xnpv(
    cash_flows: Sequence[float], dates: Sequence[date], discount_rate: float
) -> float:
    """Calculate XNPV (NPV with specific dates, 365-day years)."""
    if len(cash_flows) != len(dates):
        raise ValueError("Cash flows and dates arrays must have same length")
    return calculate_npv(cash_flows, discount_rate, _years_from_first(dates))


def calculate_xirr(
    cash_flows: Sequence[float], dates: Sequence[date], guess: Optional[float] = None
) -> float:
    """
    Calculate XIRR (IRR with specific dates).

    Matches Excel's XIRR() function behavior for irregular cash flows.

    Returns:
        Annual IRR as decimal

    Raises:
        ValueError: If XIRR cannot be calculated
    """
    if len(cash_flows) != len(dates):
        raise ValueError("Cash flows and dates arrays must have same length")
    return calculate_irr(cash_flows, guess, _years_from_first(dates))


def calculate_mirr(
    cash_flows: List[CashFlow], finance_rate: float, reinvestment_rate: float
) -> Optional[float]:
    """
    Modified IRR.

    Outflows are discounted to period 0 at the finance rate and inflows are
    compounded to the final period at the reinvestment rate.

    Returns:
        MIRR as a percentage, or None when there is no horizon or no outflow
    """
    n = max(cf.period for cf in cash_flows)
    if n == 0:
        return None

    pv_outflows = sum(
        abs(cf.amount) * (1 + finance_rate / 100) ** -cf.period
        for cf in cash_flows
        if cf.amount < 0
    )
    fv_inflows = sum(
        cf.amount * (1 + reinvestment_rate / 100) ** (n - cf.period)
        for cf in cash_flows
        if cf.amount > 0
    )

    if pv_outflows == 0:
        return None

    return ((fv_inflows / pv_outflows) ** (1 / n) - 1) * 100


def calculate_payback_period(cash_flows: List[CashFlow]) -> Optional[float]:
    """
    Period at which cumulative cash flow turns non-negative.

    Interpolates linearly within the period that recovers the investment.
    Returns None if the investment is never recovered.
    """
    cumulative = 0.0
    for cf in sorted(cash_flows, key=lambda c: c.period):
        previous = cumulative
        cumulative += cf.amount
        if cumulative >= 0:
            if cf.amount != 0 and previous < 0:
                return cf.period - (1 - abs(previous) / cf.amount)
            return cf.period
    return None


def calculate_irr_results(inputs: IRRInputs) -> IRRResults:
    """Full IRR analysis of a set of (period, amount) cash flows."""
    flows = sorted(inputs.cash_flows, key=lambda c: c.period)
    amounts = [cf.amount for cf in flows]
    periods = [cf.period for cf in flows]

    irr = calculate_irr(amounts, periods=periods)

    mirr = None
    if inputs.finance_rate is not None and inputs.reinvestment_rate is not None:
        mirr = calculate_mirr(flows, inputs.finance_rate, inputs.reinvestment_rate)

    total_investment = -sum(a for a in amounts if a < 0)
    total_returns = sum(a for a in amounts if a > 0)

    schedule = []
    cumulative = 0.0
    for cf in flows:
        cumulative += cf.amount
        factor = (1 + irr) ** -cf.period
        schedule.append(
            {
                "period": cf.period,
                "amount": cf.amount,
                "label": cf.label,
                "present_value_factor": factor,
                "discounted_value": round(cf.amount * factor, 2),
                "cumulative_cash_flow": round(cumulative, 2),
            }
        )

    return IRRResults(
        irr=irr * 100,
        annualized_irr=annualize_rate(irr, inputs.periods_per_year) * 100,
        mirr=mirr,
        npv=calculate_npv(amounts, irr, periods),
        npv_at_zero=sum(amounts),
        total_investment=total_investment,
        total_returns=total_returns,
        profit_loss=calculate_profit(amounts),
        payback_period=calculate_payback_period(flows),
        schedule=schedule,
    )


def validate_irr_inputs(inputs: IRRInputs) -> List[str]:
    errors = []
    flows = inputs.cash_flows

    if len(flows) < 2:
        errors.append("At least two cash flows are required")
    if not any(cf.amount > 0 for cf in flows):
        errors.append("At least one positive cash flow (return) is required")
    if not any(cf.amount < 0 for cf in flows):
        errors.append("At least one negative cash flow (investment) is required")

    periods = [cf.period for cf in flows]
    if len(periods) != len(set(periods)):
        errors.append("Each period must be unique")

    if inputs.finance_rate is not None and not -100 <= inputs.finance_rate <= 100:
        errors.append("Finance rate must be between -100% and 100%")
    if inputs.reinvestment_rate is not None and not -100 <= inputs.reinvestment_rate <= 100:
        errors.append("Reinvestment rate must be between -100% and 100%")
    if not 1 <= inputs.periods_per_year <= 365:
        errors.append("Periods per year must be between 1 and 365")

    return errors


def calculate_multiple(cash_flows: Sequence[float]) -> float:
    """
    Calculate equity multiple.

    Args:
        cash_flows: Array of cash flows (investments are negative)

    Returns:
        Multiple (e.g., 2.0 = 2.0x return)
    """
    total_inflows = sum(cf for cf in cash_flows if cf > 0)
    total_outflows = abs(sum(cf for cf in cash_flows if cf < 0))

    if total_outflows == 0:
        raise ValueError("No investment (outflows) found")

    return total_inflows / total_outflows


def calculate_profit(cash_flows: Sequence[float]) -> float:
    """Total inflows minus total outflows."""
    return float(sum(cash_flows))


def annualize_rate(periodic_rate: float, periods_per_year: int) -> float:
    """
    Compound a per-period rate up to an annual rate.

    Monthly cash flows (periods_per_year=12) give (1 + r)^12 - 1. Rates too
    large for a float come back as inf.
    """
    with np.errstate(over="ignore"):
        return float(np.power(1 + periodic_rate, periods_per_year) - 1)


def to_periodic_rate(annual_rate: float, periods_per_year: int) -> float:
    """Inverse of annualize_rate."""
    return float(np.power(1 + annual_rate, 1 / periods_per_year) - 1)
