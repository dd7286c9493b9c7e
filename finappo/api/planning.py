"""
Personal planning API endpoints.

Roth IRA, budget, take-home pay and compound interest.
"""

from fastapi import APIRouter
from pydantic import BaseModel
from typing import Dict, Optional

from finappo.api.responses import reject_invalid, to_response
from finappo.calculations import budget, compound_interest, roth_ira, take_home_pay

router = APIRouter()


class RothIRAInput(BaseModel):
    """Input for the Roth IRA vs taxable account comparison."""

    current_age: int
    retirement_age: int
    current_balance: float = 0.0
    annual_contribution: float = 0.0
    maximize_contributions: bool = False
    expected_return: float = 6.0
    marginal_tax_rate: float = 25.0
    start_year: Optional[int] = None

    # Optional eligibility check
    modified_agi: Optional[float] = None
    married: bool = False


@router.post("/roth-ira")
async def calculate_roth_ira(inputs: RothIRAInput):
    roth_inputs = roth_ira.RothIRAInputs(
        **inputs.model_dump(exclude={"modified_agi", "married"})
    )
    reject_invalid("roth-ira", roth_ira.validate_roth_ira_inputs(roth_inputs))

    response = to_response(roth_ira.calculate_roth_ira(roth_inputs))
    if inputs.modified_agi is not None:
        response["eligibility"] = roth_ira.contribution_eligibility(
            inputs.modified_agi, inputs.married
        )
    return response


class BudgetInput(BaseModel):
    period: str = "monthly"
    income: Dict[str, float] = {}
    income_tax_rate: float = 0.0
    expenses: Dict[str, Dict[str, float]] = {}


@router.post("/budget")
async def calculate_budget(inputs: BudgetInput):
    """Summarize a budget against income and spending guidelines."""
    budget_inputs = budget.BudgetInputs(**inputs.model_dump())
    reject_invalid("budget", budget.validate_budget_inputs(budget_inputs))
    return to_response(budget.calculate_budget(budget_inputs))


class TakeHomePayInput(BaseModel):
    gross_salary: float
    pay_frequency: str = "annually"
    filing_status: str = "single"
    state: str = "none"
    federal_allowances: int = 0
    pre_tax_deductions: float = 0.0
    post_tax_deductions: float = 0.0
    state_income_tax_rate: Optional[float] = None


@router.post("/take-home-pay")
async def calculate_take_home_pay(inputs: TakeHomePayInput):
    """Federal, FICA and state taxes and the resulting net pay."""
    pay_inputs = take_home_pay.TakeHomePayInputs(**inputs.model_dump())
    reject_invalid("take-home-pay", take_home_pay.validate_take_home_pay_inputs(pay_inputs))
    return to_response(take_home_pay.calculate_take_home_pay(pay_inputs))


class CompoundInterestInput(BaseModel):
    initial_investment: float
    interest_rate: float
    years: int = 10
    months: int = 0
    compounding_frequency: str = "monthly"
    monthly_contribution: float = 0.0
    annual_contribution: float = 0.0
    contribution_timing: str = "end"
    tax_rate: float = 0.0
    inflation_rate: float = 0.0


@router.post("/compound-interest")
async def calculate_compound_interest(inputs: CompoundInterestInput):
    """Grow an investment with optional contributions, tax and inflation."""
    growth_inputs = compound_interest.CompoundInterestInputs(**inputs.model_dump())
    reject_invalid(
        "compound-interest",
        compound_interest.validate_compound_interest_inputs(growth_inputs),
    )
    return to_response(compound_interest.calculate_compound_interest(growth_inputs))
