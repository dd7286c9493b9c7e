"""
Financial Calculation Engine

Pure calculation modules for personal finance and real estate calculators.
Payment math is designed to match Excel formula behavior.
"""

from finappo.calculations import (
    tvm,
    amortization,
    mortgage,
    heloc,
    fha_loan,
    va_loan,
    auto_loan,
    real_estate,
    rent_vs_buy,
    roth_ira,
    budget,
    take_home_pay,
    irr,
    compound_interest,
    formatting,
)

__all__ = [
    "tvm",
    "amortization",
    "mortgage",
    "heloc",
    "fha_loan",
    "va_loan",
    "auto_loan",
    "real_estate",
    "rent_vs_buy",
    "roth_ira",
    "budget",
    "take_home_pay",
    "irr",
    "compound_interest",
    "formatting",
]
