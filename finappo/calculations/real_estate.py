"""
Real Estate Ownership and Investment Analysis

Projects the cost of owning a home year by year (mortgage, escrow growth,
PMI, maintenance, appreciation, mortgage-interest deduction) and, when a
rent is supplied, the property's investment metrics.
"""

import math
from dataclasses import dataclass
from typing import List, Dict, Optional

from finappo.calculations.amortization import calculate_dscr, calculate_loan_constant
from finappo.calculations.tvm import calculate_monthly_payment

PMI_ANNUAL_RATE = 0.005
PMI_EQUITY_THRESHOLD = 20.0


@dataclass
class RealEstateInputs:
    home_price: float
    down_payment_percent: float = 20.0
    loan_term_years: int = 30
    interest_rate: float = 7.0
    property_tax: float = 0.0  # Annual
    home_insurance: float = 0.0  # Annual
    hoa_monthly: float = 0.0
    maintenance_annual: float = 0.0
    appreciation_rate: float = 3.0
    property_tax_increase_rate: float = 3.0
    insurance_increase_rate: float = 3.0
    income_tax_rate: float = 22.0
    analysis_years: int = 30
    monthly_rent: Optional[float] = None
    vacancy_rate: float = 5.0
    closing_costs: float = 0.0


@dataclass
class InvestmentMetrics:
    gross_annual_rent: float
    effective_gross_income: float
    operating_expenses: float
    noi: float
    cap_rate: float
    annual_debt_service: float
    annual_cash_flow: float
    cash_invested: float
    cash_on_cash_return: float
    dscr: Optional[float]
    loan_constant: float


@dataclass
class RealEstateResults:
    down_payment: float
    loan_amount: float
    monthly_mortgage: float
    monthly_pmi: float
    total_monthly_payment: float
    yearly_data: List[Dict]
    total_interest: float
    total_tax_savings: float
    final_home_value: float
    final_equity: float
    total_cost_paid: float
    net_cost: float
    investment: Optional[InvestmentMetrics] = None


def calculate_monthly_pmi(home_price: float, down_payment: float) -> float:
    """PMI at 0.5% of the loan per year when less than 20% is put down."""
    if home_price <= 0 or down_payment / home_price * 100 >= PMI_EQUITY_THRESHOLD:
        return 0.0
    return (home_price - down_payment) * PMI_ANNUAL_RATE / 12


def project_ownership(
    inputs: RealEstateInputs, monthly_mortgage: float, monthly_pmi: float
) -> List[Dict]:
    """
    Year-by-year ownership projection.

    Property tax and insurance grow after each year at their own rates;
    maintenance grows at the property tax rate. PMI stops once the down
    payment plus principal repaid reaches 20% of the purchase price.
    """
    down_payment = inputs.home_price * inputs.down_payment_percent / 100
    principal = inputs.home_price - down_payment
    monthly_rate = inputs.interest_rate / 100 / 12
    tax_growth = 1 + inputs.property_tax_increase_rate / 100

    balance = principal
    property_tax = inputs.property_tax
    insurance = inputs.home_insurance
    home_value = inputs.home_price
    data = []

    for year in range(1, inputs.analysis_years + 1):
        yearly_principal = 0.0
        yearly_interest = 0.0

        for _ in range(12):
            if balance > 0:
                interest = balance * monthly_rate
                principal_paid = min(monthly_mortgage - interest, balance)
                yearly_principal += principal_paid
                yearly_interest += interest
                balance = max(0.0, balance - principal_paid)

        home_value *= 1 + inputs.appreciation_rate / 100
        tax_deduction = yearly_interest * inputs.income_tax_rate / 100

        total_principal_paid = principal - balance
        equity = down_payment + total_principal_paid + (home_value - inputs.home_price)

        equity_percent = 0.0
        if inputs.home_price > 0:
            equity_percent = (down_payment + total_principal_paid) / inputs.home_price * 100
        yearly_pmi = 0.0 if equity_percent >= PMI_EQUITY_THRESHOLD else monthly_pmi * 12

        maintenance = inputs.maintenance_annual * tax_growth ** (year - 1)
        total_cost = (
            yearly_principal
            + yearly_interest
            + property_tax
            + insurance
            + yearly_pmi
            + inputs.hoa_monthly * 12
            + maintenance
        )

        data.append(
            {
                "year": year,
                "monthly_payment": monthly_mortgage,
                "principal_paid": yearly_principal,
                "interest_paid": yearly_interest,
                "tax_deduction": tax_deduction,
                "property_tax": property_tax,
                "insurance": insurance,
                "pmi": yearly_pmi,
                "maintenance": maintenance,
                "total_cost": total_cost,
                "home_value": home_value,
                "loan_balance": balance,
                "equity": equity,
            }
        )

        property_tax *= tax_growth
        insurance *= 1 + inputs.insurance_increase_rate / 100

    return data


def calculate_investment_metrics(
    inputs: RealEstateInputs, loan_amount: float, monthly_mortgage: float, monthly_pmi: float
) -> InvestmentMetrics:
    """First-year rental metrics for the property at the purchase price."""
    gross_rent = (inputs.monthly_rent or 0.0) * 12
    effective_income = gross_rent * (1 - inputs.vacancy_rate / 100)
    operating_expenses = (
        inputs.property_tax
        + inputs.home_insurance
        + inputs.hoa_monthly * 12
        + inputs.maintenance_annual
    )
    noi = effective_income - operating_expenses
    debt_service = monthly_mortgage * 12
    cash_flow = noi - debt_service - monthly_pmi * 12
    cash_invested = inputs.home_price * inputs.down_payment_percent / 100 + inputs.closing_costs

    dscr = calculate_dscr(noi, debt_service)

    return InvestmentMetrics(
        gross_annual_rent=gross_rent,
        effective_gross_income=effective_income,
        operating_expenses=operating_expenses,
        noi=noi,
        cap_rate=noi / inputs.home_price * 100 if inputs.home_price > 0 else 0.0,
        annual_debt_service=debt_service,
        annual_cash_flow=cash_flow,
        cash_invested=cash_invested,
        cash_on_cash_return=cash_flow / cash_invested * 100 if cash_invested > 0 else 0.0,
        dscr=None if math.isinf(dscr) else dscr,
        loan_constant=calculate_loan_constant(
            loan_amount, inputs.interest_rate, inputs.loan_term_years
        ),
    )


def calculate_real_estate(inputs: RealEstateInputs) -> RealEstateResults:
    """
    Full ownership analysis over the analysis horizon.

    Net cost of ownership is everything paid minus the final home value and
    the accumulated mortgage-interest tax savings.
    """
    down_payment = inputs.home_price * inputs.down_payment_percent / 100
    loan_amount = inputs.home_price - down_payment
    monthly_mortgage = calculate_monthly_payment(
        loan_amount, inputs.interest_rate, inputs.loan_term_years
    )
    monthly_pmi = calculate_monthly_pmi(inputs.home_price, down_payment)

    total_monthly = (
        monthly_mortgage
        + monthly_pmi
        + inputs.property_tax / 12
        + inputs.home_insurance / 12
        + inputs.hoa_monthly
        + inputs.maintenance_annual / 12
    )

    yearly = project_ownership(inputs, monthly_mortgage, monthly_pmi)

    total_interest = sum(row["interest_paid"] for row in yearly)
    total_tax_savings = sum(row["tax_deduction"] for row in yearly)
    total_cost_paid = sum(row["total_cost"] for row in yearly)
    final_home_value = yearly[-1]["home_value"] if yearly else inputs.home_price
    final_equity = yearly[-1]["equity"] if yearly else down_payment

    investment = None
    if inputs.monthly_rent is not None:
        investment = calculate_investment_metrics(
            inputs, loan_amount, monthly_mortgage, monthly_pmi
        )

    return RealEstateResults(
        down_payment=down_payment,
        loan_amount=loan_amount,
        monthly_mortgage=monthly_mortgage,
        monthly_pmi=monthly_pmi,
        total_monthly_payment=total_monthly,
        yearly_data=[
            {k: v if k == "year" else round(v, 2) for k, v in row.items()}
            for row in yearly
        ],
        total_interest=total_interest,
        total_tax_savings=total_tax_savings,
        final_home_value=final_home_value,
        final_equity=final_equity,
        total_cost_paid=total_cost_paid,
        net_cost=total_cost_paid - final_home_value - total_tax_savings,
        investment=investment,
    )


def validate_real_estate_inputs(inputs: RealEstateInputs) -> List[str]:
    errors = []

    if inputs.home_price <= 0:
        errors.append("Home price must be greater than 0")
    if not 0 <= inputs.down_payment_percent <= 100:
        errors.append("Down payment must be between 0% and 100%")
    if inputs.loan_term_years < 1:
        errors.append("Loan term must be at least 1 year")
    if inputs.interest_rate < 0:
        errors.append("Interest rate cannot be negative")
    elif inputs.interest_rate > 100:
        errors.append("Interest rate cannot exceed 100%")
    if not 1 <= inputs.analysis_years <= 50:
        errors.append("Analysis period must be between 1 and 50 years")
    if min(inputs.property_tax, inputs.home_insurance, inputs.hoa_monthly, inputs.maintenance_annual) < 0:
        errors.append("Ownership costs cannot be negative")
    if inputs.monthly_rent is not None and inputs.monthly_rent < 0:
        errors.append("Monthly rent cannot be negative")
    if not 0 <= inputs.vacancy_rate <= 100:
        errors.append("Vacancy rate must be between 0% and 100%")

    return errors
