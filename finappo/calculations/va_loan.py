"""
VA Loan Calculations

VA loans need no down payment and carry no monthly mortgage insurance.
Instead a one-time funding fee, set by service type, prior use and down
payment, is charged on the base loan and may be financed. Veterans with a
service-connected disability are exempt.
"""

from dataclasses import dataclass
from typing import List, Dict, Optional
from datetime import date
from dateutil.relativedelta import relativedelta

from finappo.calculations.amortization import DEFAULT_START_DATE
from finappo.calculations.fha_loan import calculate_ltv
from finappo.calculations.tvm import calculate_monthly_payment

# Funding fee percentages by down payment tier: under 5%, 5-10%, 10% or more
FUNDING_FEE_RATES = {
    "regular": {"first": (2.15, 1.5, 1.25), "subsequent": (3.3, 1.5, 1.25)},
    "reserves": {"first": (2.15, 1.5, 1.25), "subsequent": (3.3, 1.5, 1.25)},
}


@dataclass
class VALoanInputs:
    home_price: float
    down_payment: float = 0.0
    loan_term: int = 30  # Years
    interest_rate: float = 6.5  # Annual percentage
    service_type: str = "regular"  # "regular" or "reserves"
    loan_usage: str = "first"  # "first" or "subsequent"
    is_disabled: bool = False
    finance_funding_fee: bool = True
    property_tax: float = 0.0  # Annual
    home_insurance: float = 0.0  # Annual
    hoa_fee: float = 0.0  # Monthly
    other_costs: float = 0.0  # Monthly
    start_date: Optional[date] = None


@dataclass
class VALoanDetails:
    base_loan_amount: float
    down_payment_percent: float
    funding_fee_rate: float  # Percent
    funding_fee_amount: float
    total_loan_amount: float
    ltv: float  # Percent


@dataclass
class VAMonthlyPayment:
    principal_and_interest: float
    property_tax: float
    home_insurance: float
    hoa_fee: float
    other_costs: float
    total_monthly: float


@dataclass
class VATotals:
    total_principal_and_interest: float
    total_interest: float
    total_property_tax: float
    total_home_insurance: float
    total_hoa: float
    total_other_costs: float
    total_of_all_payments: float


@dataclass
class VALoanResults:
    loan_details: VALoanDetails
    monthly_payment: VAMonthlyPayment
    totals: VATotals
    payoff_date: date
    schedule: List[Dict]


def down_payment_percent(home_price: float, down_payment: float) -> float:
    if home_price <= 0:
        return 0.0
    return down_payment * 100 / home_price


def get_funding_fee_rate(
    down_percent: float, service_type: str, loan_usage: str, is_disabled: bool = False
) -> float:
    """Funding fee percentage; 0 for exempt veterans."""
    if is_disabled:
        return 0.0

    zero_down, five_percent, ten_percent = FUNDING_FEE_RATES[service_type][loan_usage]
    if down_percent >= 10:
        return ten_percent
    if down_percent >= 5:
        return five_percent
    return zero_down


def calculate_loan_details(inputs: VALoanInputs) -> VALoanDetails:
    base_loan_amount = max(0.0, inputs.home_price - inputs.down_payment)
    down_percent = down_payment_percent(inputs.home_price, inputs.down_payment)
    fee_rate = get_funding_fee_rate(
        down_percent, inputs.service_type, inputs.loan_usage, inputs.is_disabled
    )
    fee_amount = base_loan_amount * fee_rate / 100

    return VALoanDetails(
        base_loan_amount=base_loan_amount,
        down_payment_percent=down_percent,
        funding_fee_rate=fee_rate,
        funding_fee_amount=fee_amount,
        total_loan_amount=(
            base_loan_amount + fee_amount if inputs.finance_funding_fee else base_loan_amount
        ),
        ltv=calculate_ltv(inputs.home_price, inputs.down_payment),
    )


def generate_va_schedule(inputs: VALoanInputs, details: VALoanDetails) -> List[Dict]:
    """Monthly P&I schedule on the total loan, funding fee included when financed."""
    monthly_rate = inputs.interest_rate / 100 / 12
    monthly_payment = calculate_monthly_payment(
        details.total_loan_amount, inputs.interest_rate, inputs.loan_term
    )
    start_date = inputs.start_date or DEFAULT_START_DATE

    schedule = []
    balance = details.total_loan_amount
    cumulative_principal = 0.0
    cumulative_interest = 0.0

    for month in range(1, inputs.loan_term * 12 + 1):
        if balance <= 0:
            break

        interest = balance * monthly_rate
        principal = min(monthly_payment - interest, balance)
        balance = max(0.0, balance - principal)
        cumulative_principal += principal
        cumulative_interest += interest

        schedule.append(
            {
                "month": month,
                "date": (start_date + relativedelta(months=month - 1)).isoformat(),
                "payment": monthly_payment,
                "principal": principal,
                "interest": interest,
                "balance": balance,
                "cumulative_principal": cumulative_principal,
                "cumulative_interest": cumulative_interest,
            }
        )

    return schedule


def calculate_va_loan(inputs: VALoanInputs) -> VALoanResults:
    """
    Calculate VA loan payment and lifetime totals.

    A funding fee paid at closing instead of financed is added to the total
    of all payments.
    """
    details = calculate_loan_details(inputs)
    principal_and_interest = calculate_monthly_payment(
        details.total_loan_amount, inputs.interest_rate, inputs.loan_term
    )
    schedule = generate_va_schedule(inputs, details)

    property_tax = inputs.property_tax / 12
    home_insurance = inputs.home_insurance / 12

    monthly = VAMonthlyPayment(
        principal_and_interest=principal_and_interest,
        property_tax=property_tax,
        home_insurance=home_insurance,
        hoa_fee=inputs.hoa_fee,
        other_costs=inputs.other_costs,
        total_monthly=(
            principal_and_interest
            + property_tax
            + home_insurance
            + inputs.hoa_fee
            + inputs.other_costs
        ),
    )

    total_interest = sum(row["interest"] for row in schedule)
    actual_months = len(schedule)
    total_principal_and_interest = details.total_loan_amount + total_interest
    upfront_fee = 0.0 if inputs.finance_funding_fee else details.funding_fee_amount

    totals = VATotals(
        total_principal_and_interest=total_principal_and_interest,
        total_interest=total_interest,
        total_property_tax=property_tax * actual_months,
        total_home_insurance=home_insurance * actual_months,
        total_hoa=inputs.hoa_fee * actual_months,
        total_other_costs=inputs.other_costs * actual_months,
        total_of_all_payments=(
            total_principal_and_interest
            + (property_tax + home_insurance + inputs.hoa_fee + inputs.other_costs)
            * actual_months
            + upfront_fee
        ),
    )

    start_date = inputs.start_date or DEFAULT_START_DATE

    return VALoanResults(
        loan_details=details,
        monthly_payment=monthly,
        totals=totals,
        payoff_date=start_date + relativedelta(months=actual_months),
        schedule=[
            {k: v if k in ("month", "date") else round(v, 2) for k, v in row.items()}
            for row in schedule
        ],
    )


def validate_va_inputs(inputs: VALoanInputs) -> List[str]:
    errors = []

    if inputs.home_price <= 0:
        errors.append("Home price must be greater than 0")
    if inputs.down_payment < 0:
        errors.append("Down payment cannot be negative")
    elif inputs.home_price > 0 and inputs.down_payment > inputs.home_price:
        errors.append("Down payment cannot exceed home price")
    if not 1 <= inputs.loan_term <= 40:
        errors.append("Loan term must be between 1 and 40 years")
    if not 0 <= inputs.interest_rate <= 30:
        errors.append("Interest rate must be between 0% and 30%")
    if inputs.service_type not in FUNDING_FEE_RATES:
        errors.append(f"Unknown service type: {inputs.service_type}")
    if inputs.loan_usage not in ("first", "subsequent"):
        errors.append(f"Unknown loan usage: {inputs.loan_usage}")
    if inputs.property_tax < 0 or inputs.home_insurance < 0:
        errors.append("Property tax and insurance cannot be negative")
    if inputs.hoa_fee < 0 or inputs.other_costs < 0:
        errors.append("Monthly costs cannot be negative")

    return errors
