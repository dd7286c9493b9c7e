"""
Investment analysis API endpoints.
"""

from fastapi import APIRouter
from pydantic import BaseModel
from typing import List, Optional
from datetime import date

from finappo.api.responses import reject_invalid, solver_error, to_response
from finappo.calculations import irr, real_estate, rent_vs_buy

router = APIRouter()


class RealEstateInput(BaseModel):
    """Input for the ownership and rental analysis."""

    home_price: float
    down_payment_percent: float = 20.0
    loan_term_years: int = 30
    interest_rate: float = 7.0
    property_tax: float = 0.0
    home_insurance: float = 0.0
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


@router.post("/real-estate")
async def calculate_real_estate(inputs: RealEstateInput):
    estate_inputs = real_estate.RealEstateInputs(**inputs.model_dump())
    reject_invalid("real-estate", real_estate.validate_real_estate_inputs(estate_inputs))
    return to_response(real_estate.calculate_real_estate(estate_inputs))


class CashFlowInput(BaseModel):
    period: float
    amount: float
    label: Optional[str] = None


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[CashFlowInput]
    finance_rate: Optional[float] = None
    reinvestment_rate: Optional[float] = None
    periods_per_year: int = 1
    # One date per cash flow, in the same order, for XIRR
    dates: Optional[List[date]] = None


@router.post("/irr")
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate IRR, MIRR, NPV and payback for period cash flows."""
    irr_inputs = irr.IRRInputs(
        cash_flows=[
            irr.CashFlow(period=cf.period, amount=cf.amount, label=cf.label)
            for cf in inputs.cash_flows
        ],
        finance_rate=inputs.finance_rate,
        reinvestment_rate=inputs.reinvestment_rate,
        periods_per_year=inputs.periods_per_year,
    )
    reject_invalid("irr", irr.validate_irr_inputs(irr_inputs))

    amounts = [cf.amount for cf in inputs.cash_flows]

    try:
        results = irr.calculate_irr_results(irr_inputs)
        xirr = None
        if inputs.dates:
            xirr = irr.calculate_xirr(amounts, inputs.dates) * 100
    except ValueError as e:
        raise solver_error("irr", e)

    response = to_response(results)
    response["multiple"] = irr.calculate_multiple(amounts)
    if xirr is not None:
        response["xirr"] = xirr
    return response


class RentVsBuyInput(BaseModel):
    """Input for the rent vs buy comparison. Rates are annual percentages."""

    home_price: float
    monthly_rent: float
    down_payment_percent: float = 20.0
    mortgage_rate: float = 7.0
    loan_term_years: int = 30
    buying_closing_costs: float = 0.0
    property_tax_rate: float = 1.2
    home_insurance_annual: float = 0.0
    hoa_fees_monthly: float = 0.0
    maintenance_percent: float = 1.0
    home_appreciation_rate: float = 3.0
    selling_closing_costs_percent: float = 6.0
    rent_increase_rate: float = 3.0
    renters_insurance_monthly: float = 0.0
    security_deposit: float = 0.0
    years_to_stay: int = 10
    marginal_tax_rate: float = 22.0
    investment_return_rate: float = 7.0


@router.post("/rent-vs-buy")
async def calculate_rent_vs_buy(inputs: RentVsBuyInput):
    """Compare the net cost of buying against renting over the holding period."""
    comparison = rent_vs_buy.RentVsBuyInputs(**inputs.model_dump())
    reject_invalid("rent-vs-buy", rent_vs_buy.validate_rent_vs_buy_inputs(comparison))
    return to_response(rent_vs_buy.calculate_rent_vs_buy(comparison))
