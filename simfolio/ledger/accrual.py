"""Fixed-income accrual and maturity helpers."""

import calendar
from datetime import datetime, timedelta

from simfolio.models.tenure import parse_tenure

DAYS_PER_YEAR = 365
ACCRUAL_DAYS = 30


def monthly_accrual(principal: float, interest_rate: float) -> float:
    """Interest accrued over one 30-day period with simple daily accrual.

    The amount is recomputed from the principal each time; it does not
    accumulate across refreshes.

    Args:
        principal: Amount the rate applies to.
        interest_rate: Annual rate as a percentage.

    Returns:
        Accrued interest for 30 days.
    """
    annual_return = principal * interest_rate / 100
    daily_return = annual_return / DAYS_PER_YEAR
    return daily_return * ACCRUAL_DAYS


def _add_months(start: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the target month's length."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def maturity_from_tenure(start: datetime, tenure: str) -> datetime:
    """Calculate the maturity date for a tenure label.

    Args:
        start: Acquisition timestamp.
        tenure: Tenure label, see parse_tenure.

    Returns:
        start plus the tenure.
    """
    amount, unit = parse_tenure(tenure)
    if unit == "days":
        return start + timedelta(days=amount)
    if unit == "weeks":
        return start + timedelta(weeks=amount)
    return _add_months(start, int(amount))
