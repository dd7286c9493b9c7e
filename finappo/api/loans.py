"""
Loan calculator API endpoints.

Amortization, TVM, mortgage, HELOC, FHA, VA and auto loans.
"""

from fastapi import APIRouter
from pydantic import BaseModel
from typing import List, Optional
from datetime import date

from finappo.api.responses import reject_invalid, solver_error, to_response
from finappo.calculations import (
    amortization,
    auto_loan,
    fha_loan,
    heloc,
    mortgage,
    tvm,
    va_loan,
)
from finappo.config import get_settings

router = APIRouter()


class OneTimePaymentInput(BaseModel):
    month: int
    amount: float


class ExtraPaymentsInput(BaseModel):
    """Extra principal applied on top of the regular payment."""

    monthly_extra: float = 0.0
    monthly_extra_start_month: int = 1
    yearly_extra: float = 0.0
    yearly_extra_start_month: int = 12
    one_time_payments: List[OneTimePaymentInput] = []

    def to_extra_payments(self) -> amortization.ExtraPayments:
        return amortization.ExtraPayments(
            monthly_extra=self.monthly_extra,
            monthly_extra_start_month=self.monthly_extra_start_month,
            yearly_extra=self.yearly_extra,
            yearly_extra_start_month=self.yearly_extra_start_month,
            one_time_payments=[
                amortization.OneTimePayment(month=p.month, amount=p.amount)
                for p in self.one_time_payments
            ],
        )


def _extra_payments(extra: Optional[ExtraPaymentsInput]):
    return extra.to_extra_payments() if extra else None


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    loan_amount: float
    term_years: int
    term_months: int = 0
    interest_rate: float
    compound_frequency: str = "monthly"
    payment_frequency: str = "monthly"
    start_date: Optional[date] = None
    extra_payments: Optional[ExtraPaymentsInput] = None


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate a loan amortization schedule."""
    loan = amortization.AmortizationInputs(
        loan_amount=inputs.loan_amount,
        term_years=inputs.term_years,
        term_months=inputs.term_months,
        interest_rate=inputs.interest_rate,
        compound_frequency=inputs.compound_frequency,
        payment_frequency=inputs.payment_frequency,
        start_date=inputs.start_date or get_settings().schedule_start_date,
    )
    reject_invalid("amortization", amortization.validate_amortization_inputs(loan))

    results = amortization.calculate_amortization(
        loan, _extra_payments(inputs.extra_payments)
    )
    return to_response(results)


class TVMInput(BaseModel):
    """Input for the 5-key TVM solver. Sign convention: outflows negative."""

    solve_for: str
    n: float = 0.0
    iy: float = 0.0
    pv: float = 0.0
    pmt: float = 0.0
    fv: float = 0.0
    payments_per_year: int = 12
    compounds_per_year: int = 12
    pmt_at_beginning: bool = False
    include_schedule: bool = False


@router.post("/tvm")
async def calculate_tvm(inputs: TVMInput):
    """Solve for the missing TVM value."""
    tvm_inputs = tvm.TVMInputs(
        solve_for=inputs.solve_for.upper(),
        n=inputs.n,
        iy=inputs.iy,
        pv=inputs.pv,
        pmt=inputs.pmt,
        fv=inputs.fv,
        payments_per_year=inputs.payments_per_year,
        compounds_per_year=inputs.compounds_per_year,
        pmt_at_beginning=inputs.pmt_at_beginning,
    )
    reject_invalid("tvm", tvm.validate_tvm_inputs(tvm_inputs))

    try:
        results = tvm.solve_tvm(tvm_inputs)
    except ValueError as e:
        raise solver_error("tvm", e)

    response = {"solve_for": tvm_inputs.solve_for, "results": to_response(results)}

    if inputs.include_schedule and results.n > 0:
        response["schedule"] = to_response(
            {
                "schedule": tvm.generate_tvm_schedule(
                    pv=results.pv,
                    pmt=results.pmt,
                    annual_rate=results.iy,
                    n=int(round(results.n)),
                    payments_per_year=inputs.payments_per_year,
                    compounds_per_year=inputs.compounds_per_year,
                    pmt_at_beginning=inputs.pmt_at_beginning,
                    max_rows=get_settings().max_schedule_rows,
                )
            }
        )["schedule"]

    return response


class MortgageInput(BaseModel):
    """Input for mortgage calculation. Tax, insurance and PMI are annual."""

    home_price: float
    down_payment: float
    loan_term: int = 30
    interest_rate: float
    property_tax: float = 0.0
    home_insurance: float = 0.0
    pmi: float = 0.0
    hoa_fee: float = 0.0
    other_costs: float = 0.0
    start_date: Optional[date] = None
    extra_payments: Optional[ExtraPaymentsInput] = None


@router.post("/mortgage")
async def calculate_mortgage(inputs: MortgageInput):
    """Calculate the monthly payment breakdown, totals and schedule."""
    mortgage_inputs = mortgage.MortgageInputs(
        home_price=inputs.home_price,
        down_payment=inputs.down_payment,
        loan_term=inputs.loan_term,
        interest_rate=inputs.interest_rate,
        property_tax=inputs.property_tax,
        home_insurance=inputs.home_insurance,
        pmi=inputs.pmi,
        hoa_fee=inputs.hoa_fee,
        other_costs=inputs.other_costs,
        start_date=inputs.start_date or get_settings().schedule_start_date,
    )
    reject_invalid("mortgage", mortgage.validate_mortgage_inputs(mortgage_inputs))

    results = mortgage.calculate_mortgage(
        mortgage_inputs, _extra_payments(inputs.extra_payments)
    )
    return to_response(results)


class HELOCInput(BaseModel):
    loan_amount: float
    interest_rate: float
    draw_period: int = 10
    repayment_period: int = 20
    include_schedule: bool = True


@router.post("/heloc")
async def calculate_heloc(inputs: HELOCInput):
    """Calculate draw and repayment period payments."""
    heloc_inputs = heloc.HELOCInputs(
        loan_amount=inputs.loan_amount,
        interest_rate=inputs.interest_rate,
        draw_period=inputs.draw_period,
        repayment_period=inputs.repayment_period,
    )
    reject_invalid("heloc", heloc.validate_heloc_inputs(heloc_inputs))

    results = heloc.calculate_heloc(heloc_inputs)
    response = to_response(results)
    if inputs.include_schedule:
        response["schedule"] = to_response(
            {"schedule": heloc.generate_heloc_schedule(results)}
        )["schedule"]
    return response


class FHALoanInput(BaseModel):
    home_price: float
    down_payment: float
    loan_term: int = 30
    interest_rate: float
    finance_ufmip: bool = True
    property_tax: float = 0.0
    home_insurance: float = 0.0
    hoa_fee: float = 0.0
    other_costs: float = 0.0
    start_date: Optional[date] = None
    compare_conventional: bool = False
    conventional_down_payment_percent: float = 20.0
    conventional_interest_rate: Optional[float] = None


@router.post("/fha-loan")
async def calculate_fha_loan(inputs: FHALoanInput):
    """Calculate an FHA loan with UFMIP and annual MIP."""
    fha_inputs = fha_loan.FHALoanInputs(
        home_price=inputs.home_price,
        down_payment=inputs.down_payment,
        loan_term=inputs.loan_term,
        interest_rate=inputs.interest_rate,
        finance_ufmip=inputs.finance_ufmip,
        property_tax=inputs.property_tax,
        home_insurance=inputs.home_insurance,
        hoa_fee=inputs.hoa_fee,
        other_costs=inputs.other_costs,
        start_date=inputs.start_date or get_settings().schedule_start_date,
    )
    reject_invalid("fha-loan", fha_loan.validate_fha_inputs(fha_inputs))

    response = to_response(fha_loan.calculate_fha_loan(fha_inputs))

    if inputs.compare_conventional:
        rate = inputs.conventional_interest_rate
        response["conventional"] = to_response(
            fha_loan.calculate_conventional_loan(
                inputs.home_price,
                inputs.conventional_down_payment_percent,
                inputs.loan_term,
                inputs.interest_rate if rate is None else rate,
            )
        )

    return response


class AutoLoanInput(BaseModel):
    auto_price: float
    loan_term: int = 60  # Months
    interest_rate: float = 5.0
    down_payment: float = 0.0
    trade_in_value: float = 0.0
    sales_tax_rate: float = 0.0
    other_fees: float = 0.0
    include_tax_fees_in_loan: bool = True


@router.post("/auto-loan")
async def calculate_auto_loan(inputs: AutoLoanInput):
    auto_inputs = auto_loan.AutoLoanInputs(**inputs.model_dump())
    reject_invalid("auto-loan", auto_loan.validate_auto_loan_inputs(auto_inputs))
    return to_response(auto_loan.calculate_auto_loan(auto_inputs))


class VALoanInput(BaseModel):
    home_price: float
    down_payment: float = 0.0
    loan_term: int = 30
    interest_rate: float
    service_type: str = "regular"
    loan_usage: str = "first"
    is_disabled: bool = False
    finance_funding_fee: bool = True
    property_tax: float = 0.0
    home_insurance: float = 0.0
    hoa_fee: float = 0.0
    other_costs: float = 0.0
    start_date: Optional[date] = None
    compare_conventional: bool = False
    conventional_down_payment_percent: float = 20.0
    conventional_interest_rate: Optional[float] = None


@router.post("/va-loan")
async def calculate_va_loan(inputs: VALoanInput):
    """Calculate a VA loan with its one-time funding fee."""
    va_inputs = va_loan.VALoanInputs(
        **inputs.model_dump(
            exclude={
                "compare_conventional",
                "conventional_down_payment_percent",
                "conventional_interest_rate",
            }
        )
    )
    va_inputs.start_date = inputs.start_date or get_settings().schedule_start_date
    reject_invalid("va-loan", va_loan.validate_va_inputs(va_inputs))

    response = to_response(va_loan.calculate_va_loan(va_inputs))

    if inputs.compare_conventional:
        rate = inputs.conventional_interest_rate
        response["conventional"] = to_response(
            fha_loan.calculate_conventional_loan(
                inputs.home_price,
                inputs.conventional_down_payment_percent,
                inputs.loan_term,
                inputs.interest_rate if rate is None else rate,
            )
        )

    return response
