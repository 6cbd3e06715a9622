"""
Date Resolution for CV Entries

Sheet authors write dates however they like ("2019", "Jan 2020", "05/2021",
"Summer 2018", "Present"). Entries only need a year for display bookkeeping and
a month/year pair to order them, so resolution is deliberately forgiving:

- Year: first 19xx/20xx in the string, otherwise the sentinel current_year + 10
  so undated (ongoing) entries sort ahead of everything dated.
- Month: the token directly before a separator and the year, otherwise "1".

Nothing here raises on bad input.
"""

import re
from datetime import date
from typing import Optional

from cvsheet.utils.timestamp import current_year

SENTINEL_YEAR_OFFSET = 10

YEAR_PATTERN = re.compile(r"(20|19)[0-9]{2}")
MONTH_PATTERN = re.compile(r"(\w+|\d+)(?=(\s|/|-)(20|19)[0-9]{2})")

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)


def sentinel_year() -> int:
    """Year assigned to entries with no resolvable date."""
    return current_year() + SENTINEL_YEAR_OFFSET


def resolve_year(date_string: Optional[str]) -> int:
    """
    Extract the first 19xx/20xx year from a date string.

    Args:
        date_string: Loosely formatted date (may be None or empty)

    Returns:
        The year, or current_year + 10 when no year is present

    Examples:
        >>> resolve_year("Jan 2020")
        2020
        >>> resolve_year("Present") == current_year() + 10
        True
    """
    if not date_string:
        return sentinel_year()

    match = YEAR_PATTERN.search(date_string)
    if match is None:
        return sentinel_year()
    return int(match.group(0))


def resolve_month(date_string: Optional[str]) -> str:
    """
    Extract the month token written immediately before the year.

    The token must be followed by a space, slash or hyphen and then the year
    ("Jan 2020", "01/2020", "March-2019").

    Returns:
        The raw month token, or "1" when there is none
    """
    if not date_string:
        return "1"

    match = MONTH_PATTERN.search(date_string)
    if match is None:
        return "1"
    return match.group(1)


def month_number(token: str) -> int:
    """
    Convert a month token to 1-12.

    Accepts numbers, full English month names and their abbreviations
    ("Jan", "Sept"), case-insensitively. Anything else is January.
    """
    if token.isdigit():
        number = int(token)
        return number if 1 <= number <= 12 else 1

    token = token.lower()
    if len(token) >= 3:
        for i, name in enumerate(MONTH_NAMES, 1):
            if name.startswith(token):
                return i
    return 1


def resolve_date(date_string: Optional[str]) -> date:
    """
    Build the synthetic first-of-month date used to order entries.

    Never displayed; only used as a sort key.

    Args:
        date_string: Loosely formatted date (may be None or empty)

    Returns:
        date(year, month, 1) from resolve_year() and resolve_month()
    """
    return date(resolve_year(date_string), month_number(resolve_month(date_string)), 1)
