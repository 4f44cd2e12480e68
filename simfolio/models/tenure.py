"""Tenure labels for fixed-income products."""

import re

_TENURE_PATTERN = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*(d|days?|w|weeks?|m|mo|months?|y|yrs?|years?)\s*$",
    re.IGNORECASE,
)


def parse_tenure(tenure: str) -> tuple[float, str]:
    """Parse a tenure label into an amount and a unit.

    Args:
        tenure: Label such as "1 year", "6 months", "90 days" or "2w".

    Returns:
        Tuple of (amount, unit) where unit is "days", "weeks" or "months".
        Years are returned as months.

    Raises:
        ValueError: If the label cannot be parsed.
    """
    match = _TENURE_PATTERN.match(tenure)
    if match is None:
        raise ValueError(f"Invalid tenure: {tenure!r}")

    amount = float(match.group(1))
    unit = match.group(2).lower()

    if unit.startswith("d"):
        return amount, "days"
    if unit.startswith("w"):
        return amount, "weeks"
    if unit.startswith("y"):
        amount = amount * 12
    if amount != int(amount):
        raise ValueError(f"Tenure must be a whole number of months: {tenure!r}")
    return amount, "months"
