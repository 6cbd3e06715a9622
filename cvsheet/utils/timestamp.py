"""Date helpers shared across contexts."""

from datetime import date, datetime


def today() -> date:
    """Return today's date."""
    return date.today()


def now() -> str:
    """Return current local time formatted for log directory names."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def current_year() -> int:
    """Return the current calendar year."""
    return today().year
