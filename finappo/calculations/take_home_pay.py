"""
Take-Home Pay Calculations

Net pay after 2025 federal income tax brackets, FICA, a flat state income
tax and pre-/post-tax deductions. Each tax line is rounded to whole dollars.
"""

from dataclasses import dataclass
from typing import List, Dict, Optional, Tuple

from finappo.calculations.formatting import round_half_up

SOCIAL_SECURITY_RATE = 0.062
SOCIAL_SECURITY_WAGE_BASE = 176100
MEDICARE_RATE = 0.0145
ADDITIONAL_MEDICARE_RATE = 0.009

ADDITIONAL_MEDICARE_THRESHOLDS = {
    "single": 200000,
    "married": 250000,
    "married-separate": 125000,
    "head-of-household": 200000,
}

STANDARD_DEDUCTIONS = {
    "single": 15000,
    "married": 30000,
    "married-separate": 15000,
    "head-of-household": 22500,
}

_RATES = (0.10, 0.12, 0.22, 0.24, 0.32, 0.35, 0.37)


def _brackets(*thresholds: float) -> List[Tuple[float, float, float]]:
    """Build (min, max, rate) brackets from the upper bounds of the first six."""
    bounds = (0,) + thresholds + (float("inf"),)
    return [(bounds[i], bounds[i + 1], rate) for i, rate in enumerate(_RATES)]


FEDERAL_TAX_BRACKETS = {
    "single": _brackets(11925, 48400, 103350, 197300, 250500, 626350),
    "married": _brackets(23850, 96800, 206700, 394600, 501000, 751600),
    "married-separate": _brackets(11925, 48400, 103350, 197300, 250500, 375800),
    "head-of-household": _brackets(17000, 64850, 103350, 197300, 250500, 626350),
}

# Simplified flat (top marginal) rates
STATE_TAX_RATES = {
    "none": 0.0,
    "AL": 0.05, "AK": 0.0, "AZ": 0.025, "AR": 0.049, "CA": 0.093,
    "CO": 0.044, "CT": 0.0699, "DE": 0.066, "FL": 0.0, "GA": 0.0575,
    "HI": 0.11, "ID": 0.058, "IL": 0.0495, "IN": 0.0315, "IA": 0.06,
    "KS": 0.057, "KY": 0.04, "LA": 0.0425, "ME": 0.075, "MD": 0.0575,
    "MA": 0.05, "MI": 0.0425, "MN": 0.0985, "MS": 0.05, "MO": 0.048,
    "MT": 0.0675, "NE": 0.0684, "NV": 0.0, "NH": 0.0, "NJ": 0.1075,
    "NM": 0.059, "NY": 0.109, "NC": 0.0475, "ND": 0.029, "OH": 0.0375,
    "OK": 0.05, "OR": 0.099, "PA": 0.0307, "RI": 0.0599, "SC": 0.07,
    "SD": 0.0, "TN": 0.0, "TX": 0.0, "UT": 0.0465, "VT": 0.0875,
    "VA": 0.0575, "WA": 0.0, "WV": 0.065, "WI": 0.0765, "WY": 0.0,
}

PAY_PERIODS = {
    "weekly": 52,
    "bi-weekly": 26,
    "semi-monthly": 24,
    "monthly": 12,
    "annually": 1,
}


@dataclass
class TakeHomePayInputs:
    gross_salary: float  # Per pay period
    pay_frequency: str = "annually"
    filing_status: str = "single"
    state: str = "none"
    federal_allowances: int = 0
    pre_tax_deductions: float = 0.0  # Annual
    post_tax_deductions: float = 0.0  # Annual
    state_income_tax_rate: Optional[float] = None  # Decimal override, e.g. 0.05


@dataclass
class TakeHomePayResults:
    gross_pay: float
    gross_pay_by_period: Dict[str, float]
    pre_tax_deductions: float
    post_tax_deductions: float
    taxable_income: float
    fica_wages: float
    federal_income_tax: float
    social_security_tax: float
    medicare_tax: float
    state_income_tax: float
    total_taxes: float
    net_pay_before_post_tax: float
    net_pay: float
    net_pay_by_period: Dict[str, float]
    effective_tax_rate: float
    take_home_percentage: float


def calculate_federal_tax(taxable_income: float, filing_status: str) -> float:
    """Progressive federal income tax, rounded to whole dollars."""
    if taxable_income <= 0:
        return 0.0

    tax = 0.0
    for low, high, rate in FEDERAL_TAX_BRACKETS[filing_status]:
        if taxable_income <= low:
            break
        tax += (min(taxable_income, high) - low) * rate

    return round_half_up(tax)


def calculate_fica(wages: float, filing_status: str) -> Tuple[float, float]:
    """
    Social Security and Medicare tax on FICA wages.

    Returns:
        (social_security, medicare), each rounded to whole dollars
    """
    social_security = min(wages, SOCIAL_SECURITY_WAGE_BASE) * SOCIAL_SECURITY_RATE

    medicare = wages * MEDICARE_RATE
    threshold = ADDITIONAL_MEDICARE_THRESHOLDS.get(filing_status, 200000)
    if wages > threshold:
        medicare += (wages - threshold) * ADDITIONAL_MEDICARE_RATE

    return round_half_up(social_security), round_half_up(medicare)


def annual_to_periods(annual: float) -> Dict[str, float]:
    return {
        "annually": round_half_up(annual),
        "monthly": round_half_up(annual / 12),
        "semi_monthly": round_half_up(annual / 24),
        "bi_weekly": round_half_up(annual / 26),
        "weekly": round_half_up(annual / 52),
    }


def state_tax_rate(state: str, override: Optional[float] = None) -> float:
    if override is not None:
        return override
    return STATE_TAX_RATES.get(state, 0.0)


def calculate_take_home_pay(inputs: TakeHomePayInputs) -> TakeHomePayResults:
    """
    Calculate annual take-home pay.

    Pre-tax deductions reduce both FICA wages and taxable income; the
    standard deduction reduces federal and state taxable income only.
    """
    gross = inputs.gross_salary * PAY_PERIODS.get(inputs.pay_frequency, 1)

    fica_wages = max(0.0, gross - inputs.pre_tax_deductions)
    social_security, medicare = calculate_fica(fica_wages, inputs.filing_status)

    taxable_income = max(
        0.0,
        gross - inputs.pre_tax_deductions - STANDARD_DEDUCTIONS[inputs.filing_status],
    )
    federal_tax = calculate_federal_tax(taxable_income, inputs.filing_status)
    state_tax = round_half_up(
        taxable_income * state_tax_rate(inputs.state, inputs.state_income_tax_rate)
    )

    total_taxes = federal_tax + social_security + medicare + state_tax
    net_before_post_tax = gross - total_taxes - inputs.pre_tax_deductions
    net_pay = net_before_post_tax - inputs.post_tax_deductions

    return TakeHomePayResults(
        gross_pay=gross,
        gross_pay_by_period=annual_to_periods(gross),
        pre_tax_deductions=inputs.pre_tax_deductions,
        post_tax_deductions=inputs.post_tax_deductions,
        taxable_income=taxable_income,
        fica_wages=fica_wages,
        federal_income_tax=federal_tax,
        social_security_tax=social_security,
        medicare_tax=medicare,
        state_income_tax=state_tax,
        total_taxes=total_taxes,
        net_pay_before_post_tax=net_before_post_tax,
        net_pay=net_pay,
        net_pay_by_period=annual_to_periods(net_pay),
        effective_tax_rate=total_taxes / gross * 100 if gross > 0 else 0.0,
        take_home_percentage=net_pay / gross * 100 if gross > 0 else 0.0,
    )


def validate_take_home_pay_inputs(inputs: TakeHomePayInputs) -> List[str]:
    errors = []

    if inputs.gross_salary <= 0:
        errors.append("Gross salary must be positive")
    if inputs.federal_allowances < 0:
        errors.append("Federal allowances cannot be negative")
    if inputs.pre_tax_deductions < 0:
        errors.append("Pre-tax deductions cannot be negative")
    elif inputs.pre_tax_deductions > inputs.gross_salary * PAY_PERIODS.get(
        inputs.pay_frequency, 1
    ):
        errors.append("Pre-tax deductions cannot exceed gross pay")
    if inputs.post_tax_deductions < 0:
        errors.append("Post-tax deductions cannot be negative")
    if inputs.state_income_tax_rate is not None and not (
        0 <= inputs.state_income_tax_rate <= 0.15
    ):
        errors.append("State income tax rate must be between 0% and 15%")
    if inputs.filing_status not in FEDERAL_TAX_BRACKETS:
        errors.append(f"Unknown filing status: {inputs.filing_status}")
    if inputs.pay_frequency not in PAY_PERIODS:
        errors.append(f"Unknown pay frequency: {inputs.pay_frequency}")

    return errors
