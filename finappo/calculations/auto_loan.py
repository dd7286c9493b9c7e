"""
Auto Loan Calculations
"""

from dataclasses import dataclass
from typing import List

from finappo.calculations.tvm import calculate_payment


@dataclass
class AutoLoanInputs:
    auto_price: float
    loan_term: int = 60  # Months
    interest_rate: float = 5.0  # Annual percentage
    down_payment: float = 0.0
    trade_in_value: float = 0.0
    sales_tax_rate: float = 0.0  # Percentage
    other_fees: float = 0.0
    include_tax_fees_in_loan: bool = True


@dataclass
class AutoLoanResults:
    price_after_trade_in: float
    sales_tax: float
    upfront_payment: float
    loan_amount: float
    monthly_payment: float
    total_payments: float
    total_interest: float
    total_cost: float


def calculate_auto_loan(inputs: AutoLoanInputs) -> AutoLoanResults:
    """
    Calculate an auto loan.

    Sales tax applies to the price after the trade-in. Tax and fees are
    either rolled into the loan or paid upfront with the down payment.
    """
    price_after_trade = inputs.auto_price - inputs.trade_in_value
    sales_tax = price_after_trade * inputs.sales_tax_rate / 100

    if inputs.include_tax_fees_in_loan:
        loan_amount = price_after_trade + sales_tax + inputs.other_fees - inputs.down_payment
        upfront = inputs.down_payment
    else:
        loan_amount = price_after_trade - inputs.down_payment
        upfront = inputs.down_payment + sales_tax + inputs.other_fees
    loan_amount = max(0.0, loan_amount)

    monthly_payment = calculate_payment(
        loan_amount, inputs.interest_rate / 100 / 12, inputs.loan_term
    )
    total_payments = monthly_payment * inputs.loan_term

    return AutoLoanResults(
        price_after_trade_in=price_after_trade,
        sales_tax=sales_tax,
        upfront_payment=upfront,
        loan_amount=loan_amount,
        monthly_payment=monthly_payment,
        total_payments=total_payments,
        total_interest=total_payments - loan_amount,
        total_cost=total_payments + upfront,
    )


def validate_auto_loan_inputs(inputs: AutoLoanInputs) -> List[str]:
    errors = []

    if inputs.auto_price <= 0:
        errors.append("Auto price must be greater than 0")
    if inputs.loan_term <= 0:
        errors.append("Loan term must be at least 1 month")
    elif inputs.loan_term > 120:
        errors.append("Loan term cannot exceed 120 months")
    if inputs.interest_rate < 0:
        errors.append("Interest rate cannot be negative")
    elif inputs.interest_rate > 100:
        errors.append("Interest rate cannot exceed 100%")
    if inputs.down_payment < 0 or inputs.trade_in_value < 0:
        errors.append("Down payment and trade-in value cannot be negative")
    if inputs.sales_tax_rate < 0 or inputs.other_fees < 0:
        errors.append("Sales tax and fees cannot be negative")

    return errors
