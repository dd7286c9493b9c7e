"""
API routes for the financial calculators.
"""

from fastapi import APIRouter
from pydantic import BaseModel
from typing import List

from finappo.api import investment, loans, planning

router = APIRouter()

# Include sub-routers; every calculator lives under /calculate
router.include_router(loans.router, prefix="/calculate", tags=["loans"])
router.include_router(planning.router, prefix="/calculate", tags=["planning"])
router.include_router(investment.router, prefix="/calculate", tags=["investment"])

# (slug, display name, category)
CALCULATORS = [
    ("amortization", "Amortization Calculator", "loans"),
    ("tvm", "Time Value of Money Calculator", "loans"),
    ("mortgage", "Mortgage Calculator", "loans"),
    ("heloc", "HELOC Calculator", "loans"),
    ("fha-loan", "FHA Loan Calculator", "loans"),
    ("va-loan", "VA Loan Calculator", "loans"),
    ("auto-loan", "Auto Loan Calculator", "loans"),
    ("roth-ira", "Roth IRA Calculator", "planning"),
    ("budget", "Budget Calculator", "planning"),
    ("take-home-pay", "Take-Home Pay Calculator", "planning"),
    ("compound-interest", "Compound Interest Calculator", "planning"),
    ("real-estate", "Real Estate Calculator", "investment"),
    ("rent-vs-buy", "Rent vs Buy Calculator", "investment"),
    ("irr", "IRR Calculator", "investment"),
]


class CalculatorInfo(BaseModel):
    slug: str
    name: str
    category: str
    endpoint: str


@router.get("/calculators", response_model=List[CalculatorInfo], tags=["calculators"])
async def list_calculators():
    """List the available calculators and their endpoints."""
    return [
        CalculatorInfo(
            slug=slug, name=name, category=category, endpoint=f"/api/calculate/{slug}"
        )
        for slug, name, category in CALCULATORS
    ]
