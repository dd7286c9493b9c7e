"""
Budget Calculations

Sums income and eight expense categories for a monthly or annual period,
expresses each as a share of gross income, and checks housing,
transportation and savings against common guidelines.
"""

from dataclasses import dataclass, field
from typing import List, Dict

INCOME_FIELDS = ("salary", "pension", "investments", "other_income")

EXPENSE_CATEGORIES = {
    "housing": (
        "mortgage",
        "property_tax",
        "rental",
        "insurance",
        "hoa_fee",
        "home_maintenance",
        "utilities",
    ),
    "transportation": (
        "auto_loan",
        "auto_insurance",
        "gasoline",
        "auto_maintenance",
        "parking_tolls",
        "other_transportation",
    ),
    "debt": ("credit_card", "student_loan", "other_loans"),
    "living": ("food", "clothing", "household_supplies", "meals_out", "other"),
    "healthcare": ("medical_insurance", "medical_spending"),
    "children_education": (
        "child_personal_care",
        "tuition_supplies",
        "child_support",
        "other_education",
    ),
    "savings_investment": (
        "retirement_401k",
        "college_saving",
        "investments",
        "emergency_fund",
    ),
    "miscellaneous": (
        "pet",
        "gifts_donations",
        "hobbies_sports",
        "entertainment",
        "travel_vacation",
        "other_expenses",
    ),
}

# Recommended share of gross income, percent
HOUSING_GUIDELINE = 30
TRANSPORTATION_GUIDELINE = 15
SAVINGS_GUIDELINE = 15


@dataclass
class BudgetInputs:
    """
    Income and expenses for one period.

    `income` is keyed by INCOME_FIELDS and `expenses` by category name, each
    category a mapping of the field names in EXPENSE_CATEGORIES. Missing
    fields count as zero.
    """

    period: str = "monthly"  # "monthly" or "annual"
    income: Dict[str, float] = field(default_factory=dict)
    income_tax_rate: float = 0.0  # Percentage
    expenses: Dict[str, Dict[str, float]] = field(default_factory=dict)


@dataclass
class BudgetResults:
    period: str
    gross_income: float
    income_tax: float
    net_income: float
    categories: Dict[str, Dict]
    total_expenses: float
    total_expenses_percentage: float
    surplus_deficit: float
    surplus_deficit_percentage: float
    benchmarks: Dict[str, Dict]


def _percent_of(amount: float, gross_income: float) -> float:
    return amount / gross_income * 100 if gross_income > 0 else 0.0


def benchmark_status(current: float, recommended: float, kind: str) -> str:
    """
    Classify a percentage against a guideline.

    Expenses are "good" at or under the guideline, "warning" within 20% over,
    otherwise "high". Savings are "good" at or over, "warning" within 20%
    under, otherwise "low".
    """
    if kind == "expense":
        if current <= recommended:
            return "good"
        if current <= recommended * 1.2:
            return "warning"
        return "high"

    if current >= recommended:
        return "good"
    if current >= recommended * 0.8:
        return "warning"
    return "low"


def _benchmark(current: float, recommended: float, kind: str) -> Dict:
    return {
        "current": current,
        "recommended": recommended,
        "status": benchmark_status(current, recommended, kind),
    }


def calculate_budget(inputs: BudgetInputs) -> BudgetResults:
    gross_income = sum(inputs.income.get(name, 0.0) for name in INCOME_FIELDS)
    income_tax = gross_income * inputs.income_tax_rate / 100
    net_income = gross_income - income_tax

    categories = {}
    for category in EXPENSE_CATEGORIES:
        total = sum(inputs.expenses.get(category, {}).values())
        categories[category] = {
            "total": total,
            "percentage": _percent_of(total, gross_income),
        }

    total_expenses = sum(c["total"] for c in categories.values())
    surplus = net_income - total_expenses

    return BudgetResults(
        period=inputs.period,
        gross_income=gross_income,
        income_tax=income_tax,
        net_income=net_income,
        categories=categories,
        total_expenses=total_expenses,
        total_expenses_percentage=_percent_of(total_expenses, gross_income),
        surplus_deficit=surplus,
        surplus_deficit_percentage=_percent_of(surplus, gross_income),
        benchmarks={
            "housing": _benchmark(
                categories["housing"]["percentage"], HOUSING_GUIDELINE, "expense"
            ),
            "transportation": _benchmark(
                categories["transportation"]["percentage"],
                TRANSPORTATION_GUIDELINE,
                "expense",
            ),
            "savings": _benchmark(
                categories["savings_investment"]["percentage"],
                SAVINGS_GUIDELINE,
                "savings",
            ),
        },
    )


def validate_budget_inputs(inputs: BudgetInputs) -> List[str]:
    errors = []

    if inputs.income_tax_rate < 0:
        errors.append("Income tax rate cannot be negative")
    if inputs.income_tax_rate > 100:
        errors.append("Income tax rate cannot exceed 100%")

    for key, value in inputs.income.items():
        if key not in INCOME_FIELDS:
            errors.append(f"Unknown income field {key}")
        elif value < 0:
            errors.append(f"Income field {key} cannot be negative")

    for category, fields in inputs.expenses.items():
        if category not in EXPENSE_CATEGORIES:
            errors.append(f"Unknown expense category {category}")
            continue
        for key, value in fields.items():
            if key not in EXPENSE_CATEGORIES[category]:
                errors.append(f"Unknown {category} expense field {key}")
            elif value < 0:
                errors.append(f"Expense field {key} cannot be negative")

    return errors
