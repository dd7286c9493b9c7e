"""
Display rounding and formatting helpers shared by the calculators.
"""

from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round half away from zero.

    Python's round() uses banker's rounding, which makes $1,087.50 round to
    $1,088 but $1,086.50 round to $1,086. Tax lines and display values need
    the conventional rule.
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if digits <= 0:
        return float(int(rounded))
    return float(rounded)


def format_currency(value: float, decimals: int = 0) -> str:
    """Format a dollar amount, e.g. 1234.56 -> '$1,235' or '-$1,234'."""
    sign = "-" if value < 0 else ""
    amount = round_half_up(abs(value), decimals)
    return f"{sign}${amount:,.{decimals}f}"


def format_percentage(value: float, decimals: int = 2) -> str:
    """Format a value already expressed in percent, e.g. 8.25 -> '8.25%'."""
    return f"{value:.{decimals}f}%"


def format_ratio_as_percentage(value: float, decimals: int = 1) -> str:
    """Format a decimal ratio as a percent, e.g. 0.0725 -> '7.3%'."""
    return format_percentage(value * 100, decimals)
