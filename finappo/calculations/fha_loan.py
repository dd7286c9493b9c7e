"""
FHA Loan Calculations

Upfront and annual mortgage insurance premiums per the FHA MIP table,
the MIP schedule over the life of the loan, and a conventional-loan
comparison.
"""

from dataclasses import dataclass
from typing import List, Dict, Optional
from datetime import date
from dateutil.relativedelta import relativedelta

from finappo.calculations.amortization import DEFAULT_START_DATE
from finappo.calculations.tvm import calculate_monthly_payment

FHA_CONFORMING_LIMIT = 726200
UFMIP_RATE = 0.0175
MIN_DOWN_PAYMENT_PERCENT = 3.5
MIP_CANCELLATION_MONTHS = 132


@dataclass
class FHALoanInputs:
    home_price: float
    down_payment: float
    loan_term: int  # Years
    interest_rate: float  # Annual percentage
    finance_ufmip: bool = True
    property_tax: float = 0.0  # Annual
    home_insurance: float = 0.0  # Annual
    hoa_fee: float = 0.0  # Monthly
    other_costs: float = 0.0  # Monthly
    start_date: Optional[date] = None


@dataclass
class FHALoanDetails:
    base_loan_amount: float
    ufmip_amount: float
    total_loan_amount: float
    ltv: float  # Percent
    annual_mip_rate: float  # Percent
    monthly_mip_amount: float
    mip_duration: Optional[int]  # Months, None for life of loan


@dataclass
class FHAMonthlyPayment:
    principal_and_interest: float
    monthly_mip: float
    property_tax: float
    home_insurance: float
    hoa_fee: float
    other_costs: float
    total_monthly: float


@dataclass
class FHATotals:
    total_principal_and_interest: float
    total_interest: float
    total_mip: float
    total_property_tax: float
    total_home_insurance: float
    total_hoa: float
    total_other_costs: float
    total_of_all_payments: float


@dataclass
class FHALoanResults:
    loan_details: FHALoanDetails
    monthly_payment: FHAMonthlyPayment
    totals: FHATotals
    payoff_date: date
    schedule: List[Dict]


@dataclass
class ConventionalLoanResults:
    loan_amount: float
    monthly_payment: float
    total_interest: float
    total_payment: float


def calculate_ltv(home_price: float, down_payment: float) -> float:
    """Loan-to-value as a percentage of the home price."""
    if home_price <= 0:
        return 0.0
    return max(0.0, home_price - down_payment) / home_price * 100


def get_annual_mip_rate(base_loan_amount: float, ltv: float, loan_term_years: int) -> float:
    """
    Annual MIP rate (percent) from the FHA premium table.

    Args:
        base_loan_amount: Loan amount before UFMIP
        ltv: Loan-to-value percentage
        loan_term_years: Loan term in years

    Returns:
        Annual MIP rate as a percentage
    """
    high_balance = base_loan_amount > FHA_CONFORMING_LIMIT

    if loan_term_years > 15:
        if high_balance:
            return 0.75 if ltv > 95 else 0.70
        return 0.55 if ltv > 95 else 0.50

    if not high_balance:
        return 0.40 if ltv > 90 else 0.15
    if ltv <= 78:
        return 0.15
    if ltv <= 90:
        return 0.40
    return 0.65


def get_mip_duration(ltv: float) -> Optional[int]:
    """MIP cancels after 11 years at 90% LTV or less, otherwise lasts the life of the loan."""
    if ltv > 90:
        return None
    return MIP_CANCELLATION_MONTHS


def calculate_loan_details(inputs: FHALoanInputs) -> FHALoanDetails:
    base_loan_amount = max(0.0, inputs.home_price - inputs.down_payment)
    ltv = calculate_ltv(inputs.home_price, inputs.down_payment)
    ufmip = base_loan_amount * UFMIP_RATE
    total_loan_amount = base_loan_amount + ufmip if inputs.finance_ufmip else base_loan_amount
    annual_mip_rate = get_annual_mip_rate(base_loan_amount, ltv, inputs.loan_term)

    return FHALoanDetails(
        base_loan_amount=base_loan_amount,
        ufmip_amount=ufmip,
        total_loan_amount=total_loan_amount,
        ltv=ltv,
        annual_mip_rate=annual_mip_rate,
        monthly_mip_amount=base_loan_amount * annual_mip_rate / 100 / 12,
        mip_duration=get_mip_duration(ltv),
    )


def generate_fha_schedule(inputs: FHALoanInputs, details: FHALoanDetails) -> List[Dict]:
    """Monthly schedule on the total loan with MIP charged while it is in force."""
    monthly_rate = inputs.interest_rate / 100 / 12
    monthly_payment = calculate_monthly_payment(
        details.total_loan_amount, inputs.interest_rate, inputs.loan_term
    )
    start_date = inputs.start_date or DEFAULT_START_DATE

    schedule = []
    balance = details.total_loan_amount
    cumulative_principal = 0.0
    cumulative_interest = 0.0
    cumulative_mip = 0.0

    for month in range(1, inputs.loan_term * 12 + 1):
        if balance <= 0:
            break

        interest = balance * monthly_rate
        principal = min(monthly_payment - interest, balance)
        balance = max(0.0, balance - principal)

        in_force = details.mip_duration is None or month <= details.mip_duration
        mip = details.monthly_mip_amount if in_force else 0.0

        cumulative_principal += principal
        cumulative_interest += interest
        cumulative_mip += mip

        schedule.append(
            {
                "month": month,
                "date": (start_date + relativedelta(months=month - 1)).isoformat(),
                "payment": monthly_payment,
                "principal": principal,
                "interest": interest,
                "mip_payment": mip,
                "balance": balance,
                "cumulative_principal": cumulative_principal,
                "cumulative_interest": cumulative_interest,
                "cumulative_mip": cumulative_mip,
            }
        )

    return schedule


def calculate_fha_loan(inputs: FHALoanInputs) -> FHALoanResults:
    """
    Calculate FHA loan payment, MIP and lifetime totals.

    When the UFMIP is paid at closing rather than financed it is counted in
    total MIP and total of all payments.
    """
    details = calculate_loan_details(inputs)
    principal_and_interest = calculate_monthly_payment(
        details.total_loan_amount, inputs.interest_rate, inputs.loan_term
    )
    schedule = generate_fha_schedule(inputs, details)

    property_tax = inputs.property_tax / 12
    home_insurance = inputs.home_insurance / 12

    monthly = FHAMonthlyPayment(
        principal_and_interest=principal_and_interest,
        monthly_mip=details.monthly_mip_amount,
        property_tax=property_tax,
        home_insurance=home_insurance,
        hoa_fee=inputs.hoa_fee,
        other_costs=inputs.other_costs,
        total_monthly=(
            principal_and_interest
            + details.monthly_mip_amount
            + property_tax
            + home_insurance
            + inputs.hoa_fee
            + inputs.other_costs
        ),
    )

    total_interest = sum(row["interest"] for row in schedule)
    total_mip = sum(row["mip_payment"] for row in schedule)
    actual_months = len(schedule)

    total_property_tax = property_tax * actual_months
    total_home_insurance = home_insurance * actual_months
    total_hoa = inputs.hoa_fee * actual_months
    total_other_costs = inputs.other_costs * actual_months
    total_principal_and_interest = details.total_loan_amount + total_interest
    upfront_cost = 0.0 if inputs.finance_ufmip else details.ufmip_amount

    totals = FHATotals(
        total_principal_and_interest=total_principal_and_interest,
        total_interest=total_interest,
        total_mip=total_mip + upfront_cost,
        total_property_tax=total_property_tax,
        total_home_insurance=total_home_insurance,
        total_hoa=total_hoa,
        total_other_costs=total_other_costs,
        total_of_all_payments=(
            total_principal_and_interest
            + total_mip
            + total_property_tax
            + total_home_insurance
            + total_hoa
            + total_other_costs
            + upfront_cost
        ),
    )

    start_date = inputs.start_date or DEFAULT_START_DATE

    return FHALoanResults(
        loan_details=details,
        monthly_payment=monthly,
        totals=totals,
        payoff_date=start_date + relativedelta(months=actual_months),
        schedule=[
            {k: v if k in ("month", "date") else round(v, 2) for k, v in row.items()}
            for row in schedule
        ],
    )


def calculate_conventional_loan(
    home_price: float, down_payment_percent: float, loan_term: int, interest_rate: float
) -> ConventionalLoanResults:
    """Plain conventional loan for side-by-side comparison with FHA."""
    loan_amount = home_price - home_price * down_payment_percent / 100
    monthly_payment = calculate_monthly_payment(loan_amount, interest_rate, loan_term)
    total_payment = monthly_payment * loan_term * 12

    return ConventionalLoanResults(
        loan_amount=loan_amount,
        monthly_payment=monthly_payment,
        total_interest=total_payment - loan_amount,
        total_payment=total_payment,
    )


def validate_fha_inputs(inputs: FHALoanInputs) -> List[str]:
    """Return user-facing validation messages (empty when inputs are valid)."""
    errors = []

    if inputs.home_price <= 0:
        errors.append("Home price must be greater than 0")
    elif inputs.down_payment < inputs.home_price * MIN_DOWN_PAYMENT_PERCENT / 100:
        errors.append("FHA loans require a minimum down payment of 3.5%")

    if inputs.down_payment < 0:
        errors.append("Down payment cannot be negative")
    if not 1 <= inputs.loan_term <= 40:
        errors.append("Loan term must be between 1 and 40 years")
    if not 0 <= inputs.interest_rate <= 30:
        errors.append("Interest rate must be between 0% and 30%")
    if inputs.property_tax < 0 or inputs.home_insurance < 0:
        errors.append("Property tax and insurance cannot be negative")
    if inputs.hoa_fee < 0 or inputs.other_costs < 0:
        errors.append("Monthly costs cannot be negative")

    return errors
