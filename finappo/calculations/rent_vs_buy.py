"""
Rent vs Buy Comparison

Compares the net cost of buying a home against renting over a holding
period. The buying side counts every cash outlay less the equity recovered
at sale and the itemized-deduction tax savings, plus the investment return
forgone on the upfront cash and on any monthly premium over rent. The
renting side counts rent, renters insurance and the return forgone on the
security deposit.
"""

from dataclasses import dataclass
from typing import List, Dict, Optional

from finappo.calculations.tvm import calculate_monthly_payment, calculate_remaining_balance

# Married filing jointly; deductions below this are not itemized
STANDARD_DEDUCTION = 27700
BREAK_EVEN_HORIZON = 30


@dataclass
class RentVsBuyInputs:
    home_price: float
    monthly_rent: float
    down_payment_percent: float = 20.0
    mortgage_rate: float = 7.0
    loan_term_years: int = 30
    buying_closing_costs: float = 0.0
    property_tax_rate: float = 1.2  # Percent of home value per year
    home_insurance_annual: float = 0.0
    hoa_fees_monthly: float = 0.0
    maintenance_percent: float = 1.0  # Percent of home value per year
    home_appreciation_rate: float = 3.0
    selling_closing_costs_percent: float = 6.0
    rent_increase_rate: float = 3.0
    renters_insurance_monthly: float = 0.0
    security_deposit: float = 0.0
    years_to_stay: int = 10
    marginal_tax_rate: float = 22.0
    investment_return_rate: float = 7.0


@dataclass
class BuyingCosts:
    down_payment: float
    closing_costs: float
    mortgage_payments: float
    property_tax: float
    insurance: float
    hoa: float
    maintenance: float
    selling_costs: float
    less_home_equity: float
    less_tax_savings: float
    opportunity_cost: float

    @property
    def total(self) -> float:
        return (
            self.down_payment
            + self.closing_costs
            + self.mortgage_payments
            + self.property_tax
            + self.insurance
            + self.hoa
            + self.maintenance
            + self.selling_costs
            + self.less_home_equity
            + self.less_tax_savings
            + self.opportunity_cost
        )


@dataclass
class RentingCosts:
    rent: float
    renters_insurance: float
    security_deposit_opportunity_cost: float

    @property
    def total(self) -> float:
        return self.rent + self.renters_insurance + self.security_deposit_opportunity_cost


@dataclass
class RentVsBuyResults:
    total_buy_cost: float
    total_rent_cost: float
    net_difference: float
    better_option: str  # "buying" or "renting"
    break_even_year: Optional[int]
    down_payment_amount: float
    loan_amount: float
    monthly_mortgage_payment: float
    monthly_housing_cost: float  # First year, all-in
    total_interest_paid: float
    home_value_at_end: float
    home_equity: float
    total_tax_savings: float
    total_rent_paid: float
    average_monthly_rent: float
    buying_costs: BuyingCosts
    renting_costs: RentingCosts
    yearly_breakdown: List[Dict]


def _loan(inputs: RentVsBuyInputs):
    down_payment = inputs.home_price * inputs.down_payment_percent / 100
    loan_amount = inputs.home_price - down_payment
    payment = calculate_monthly_payment(
        loan_amount, inputs.mortgage_rate, inputs.loan_term_years
    )
    return down_payment, loan_amount, payment


def _balance_after(inputs: RentVsBuyInputs, loan_amount: float, months: int) -> float:
    term_months = inputs.loan_term_years * 12
    return calculate_remaining_balance(
        loan_amount, inputs.mortgage_rate / 100 / 12, term_months, min(months, term_months)
    )


def yearly_interest(inputs: RentVsBuyInputs, year: int) -> float:
    """Mortgage interest paid during one year of the loan."""
    _, loan_amount, payment = _loan(inputs)
    term_months = inputs.loan_term_years * 12
    start_month = min((year - 1) * 12, term_months)
    end_month = min(year * 12, term_months)

    opening = _balance_after(inputs, loan_amount, start_month)
    closing = _balance_after(inputs, loan_amount, end_month)
    return max(0.0, payment * (end_month - start_month) - (opening - closing))


def _appreciation(inputs: RentVsBuyInputs, years: int) -> float:
    return (1 + inputs.home_appreciation_rate / 100) ** years


def calculate_tax_savings(inputs: RentVsBuyInputs, years: int) -> float:
    """Tax saved on interest and property tax above the standard deduction."""
    savings = 0.0
    for year in range(1, years + 1):
        property_tax = (
            inputs.home_price * _appreciation(inputs, year - 1) * inputs.property_tax_rate / 100
        )
        deductible = yearly_interest(inputs, year) + property_tax
        if deductible > STANDARD_DEDUCTION:
            savings += (deductible - STANDARD_DEDUCTION) * inputs.marginal_tax_rate / 100
    return savings


def monthly_housing_cost(inputs: RentVsBuyInputs) -> float:
    """First-year monthly cost of owning."""
    _, _, payment = _loan(inputs)
    return (
        payment
        + inputs.home_price * inputs.property_tax_rate / 100 / 12
        + inputs.home_insurance_annual / 12
        + inputs.hoa_fees_monthly
        + inputs.home_price * inputs.maintenance_percent / 100 / 12
    )


def calculate_opportunity_cost(inputs: RentVsBuyInputs, years: int) -> float:
    """
    Investment return forgone by buying.

    Covers the upfront cash and, for each month owning costs more than
    renting, that difference compounded monthly to the end of the period.
    """
    down_payment, _, _ = _loan(inputs)
    upfront = down_payment + inputs.buying_closing_costs
    forgone_on_upfront = upfront * ((1 + inputs.investment_return_rate / 100) ** years - 1)

    owning = monthly_housing_cost(inputs)
    monthly_return = inputs.investment_return_rate / 100 / 12
    total_months = years * 12
    rent = inputs.monthly_rent
    forgone_on_savings = 0.0

    for month in range(1, total_months + 1):
        if month > 1 and month % 12 == 1:
            rent *= 1 + inputs.rent_increase_rate / 100
        premium = owning - (rent + inputs.renters_insurance_monthly)
        if premium > 0:
            forgone_on_savings += premium * (1 + monthly_return) ** (total_months - month)

    return forgone_on_upfront + forgone_on_savings


def calculate_buying_costs(inputs: RentVsBuyInputs, years: int) -> BuyingCosts:
    down_payment, loan_amount, payment = _loan(inputs)
    months_owned = min(years, inputs.loan_term_years) * 12

    property_tax = insurance = hoa = maintenance = 0.0
    for year in range(1, years + 1):
        factor = _appreciation(inputs, year - 1)
        property_tax += inputs.home_price * factor * inputs.property_tax_rate / 100
        maintenance += inputs.home_price * factor * inputs.maintenance_percent / 100
        # Insurance and HOA inflate with home values
        insurance += inputs.home_insurance_annual * factor
        hoa += inputs.hoa_fees_monthly * 12 * factor

    home_value = inputs.home_price * _appreciation(inputs, years)
    equity = home_value - _balance_after(inputs, loan_amount, months_owned)

    return BuyingCosts(
        down_payment=down_payment,
        closing_costs=inputs.buying_closing_costs,
        mortgage_payments=payment * months_owned,
        property_tax=property_tax,
        insurance=insurance,
        hoa=hoa,
        maintenance=maintenance,
        selling_costs=home_value * inputs.selling_closing_costs_percent / 100,
        less_home_equity=-equity,
        less_tax_savings=-calculate_tax_savings(inputs, years),
        opportunity_cost=calculate_opportunity_cost(inputs, years),
    )


def _total_rent(inputs: RentVsBuyInputs, years: int) -> float:
    return sum(
        inputs.monthly_rent * 12 * (1 + inputs.rent_increase_rate / 100) ** (year - 1)
        for year in range(1, years + 1)
    )


def calculate_renting_costs(inputs: RentVsBuyInputs, years: int) -> RentingCosts:
    return RentingCosts(
        rent=_total_rent(inputs, years),
        renters_insurance=inputs.renters_insurance_monthly * 12 * years,
        security_deposit_opportunity_cost=inputs.security_deposit
        * ((1 + inputs.investment_return_rate / 100) ** years - 1),
    )


def find_break_even_year(inputs: RentVsBuyInputs) -> Optional[int]:
    """First holding period in years after which buying costs less than renting."""
    for year in range(1, BREAK_EVEN_HORIZON + 1):
        if calculate_buying_costs(inputs, year).total < calculate_renting_costs(inputs, year).total:
            return year
    return None


def calculate_rent_vs_buy(inputs: RentVsBuyInputs) -> RentVsBuyResults:
    years = inputs.years_to_stay
    down_payment, loan_amount, payment = _loan(inputs)

    buying = calculate_buying_costs(inputs, years)
    renting = calculate_renting_costs(inputs, years)

    yearly_breakdown = []
    for year in range(1, years + 1):
        year_buying = buying if year == years else calculate_buying_costs(inputs, year)
        year_renting = renting if year == years else calculate_renting_costs(inputs, year)
        yearly_breakdown.append(
            {
                "year": year,
                "buy_monthly_average": round(year_buying.total / (year * 12), 2),
                "rent_monthly": round(
                    inputs.monthly_rent * (1 + inputs.rent_increase_rate / 100) ** (year - 1), 2
                ),
                "cumulative_buy_cost": round(year_buying.total, 2),
                "cumulative_rent_cost": round(year_renting.total, 2),
                "home_equity": round(-year_buying.less_home_equity, 2),
            }
        )

    total_buy_cost = buying.total
    total_rent_cost = renting.total

    return RentVsBuyResults(
        total_buy_cost=total_buy_cost,
        total_rent_cost=total_rent_cost,
        net_difference=abs(total_buy_cost - total_rent_cost),
        better_option="buying" if total_buy_cost < total_rent_cost else "renting",
        break_even_year=find_break_even_year(inputs),
        down_payment_amount=down_payment,
        loan_amount=loan_amount,
        monthly_mortgage_payment=payment,
        monthly_housing_cost=monthly_housing_cost(inputs),
        total_interest_paid=sum(yearly_interest(inputs, y) for y in range(1, years + 1)),
        home_value_at_end=inputs.home_price * _appreciation(inputs, years),
        home_equity=-buying.less_home_equity,
        total_tax_savings=-buying.less_tax_savings,
        total_rent_paid=renting.rent,
        average_monthly_rent=renting.rent / (years * 12),
        buying_costs=buying,
        renting_costs=renting,
        yearly_breakdown=yearly_breakdown,
    )


def validate_rent_vs_buy_inputs(inputs: RentVsBuyInputs) -> List[str]:
    errors = []

    if inputs.home_price <= 0:
        errors.append("Home price must be greater than 0")
    if inputs.monthly_rent <= 0:
        errors.append("Monthly rent must be greater than 0")
    if not 0 <= inputs.down_payment_percent <= 100:
        errors.append("Down payment must be between 0% and 100%")
    if not 1 <= inputs.loan_term_years <= 40:
        errors.append("Loan term must be between 1 and 40 years")
    if not 1 <= inputs.years_to_stay <= 50:
        errors.append("Years to stay must be between 1 and 50")
    if not 0 <= inputs.mortgage_rate <= 30:
        errors.append("Mortgage rate must be between 0% and 30%")

    for name, value in (
        ("Property tax rate", inputs.property_tax_rate),
        ("Maintenance", inputs.maintenance_percent),
        ("Selling costs", inputs.selling_closing_costs_percent),
        ("Marginal tax rate", inputs.marginal_tax_rate),
    ):
        if not 0 <= value <= 100:
            errors.append(f"{name} must be between 0% and 100%")

    for name, value in (
        ("Home appreciation", inputs.home_appreciation_rate),
        ("Rent increase", inputs.rent_increase_rate),
        ("Investment return", inputs.investment_return_rate),
    ):
        if not -100 < value <= 100:
            errors.append(f"{name} must be between -100% and 100%")

    if min(
        inputs.buying_closing_costs,
        inputs.home_insurance_annual,
        inputs.hoa_fees_monthly,
        inputs.renters_insurance_monthly,
        inputs.security_deposit,
    ) < 0:
        errors.append("Costs cannot be negative")

    return errors
