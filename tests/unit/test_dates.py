"""Unit tests for date resolution."""

from datetime import date

import pytest

from cvsheet.contexts.templating import dates
from cvsheet.contexts.templating.dates import (
    month_number,
    resolve_date,
    resolve_month,
    resolve_year,
    sentinel_year,
)
from cvsheet.utils.timestamp import current_year


@pytest.mark.unit
@pytest.mark.parametrize(
    "date_string, expected",
    [
        ("2020", 2020),
        ("Jan 2020", 2020),
        ("05/1999", 1999),
        ("March-2018", 2018),
        ("Summer of 2015 to 2016", 2015),
        ("since2003", 2003),
    ],
)
def test_resolve_year_extracts_first_year(date_string, expected):
    """Test that the first 19xx/20xx year is returned."""
    assert resolve_year(date_string) == expected


@pytest.mark.unit
@pytest.mark.parametrize("date_string", [None, "", "Present", "Current", "1850", "2150", "N/A"])
def test_resolve_year_sentinel(date_string):
    """Test strings without a 19xx/20xx year resolve to current year + 10."""
    assert resolve_year(date_string) == current_year() + 10


@pytest.mark.unit
def test_sentinel_follows_current_year(monkeypatch):
    """Test the sentinel is computed from the current year at call time."""
    monkeypatch.setattr(dates, "current_year", lambda: 2000)
    assert sentinel_year() == 2010
    assert resolve_year("Present") == 2010


@pytest.mark.unit
@pytest.mark.parametrize(
    "date_string, expected",
    [
        ("Jan 2020", "Jan"),
        ("05/2021", "05"),
        ("March-2018", "March"),
        ("2020", "1"),
        ("Present", "1"),
        (None, "1"),
        ("Summer of 2015", "of"),
    ],
)
def test_resolve_month(date_string, expected):
    """Test the month token is the word directly before separator + year."""
    assert resolve_month(date_string) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "token, expected",
    [
        ("1", 1),
        ("05", 5),
        ("12", 12),
        ("13", 1),
        ("0", 1),
        ("Jan", 1),
        ("march", 3),
        ("Sept", 9),
        ("December", 12),
        ("of", 1),
        ("Spring", 1),
        ("Ma", 1),
    ],
)
def test_month_number(token, expected):
    """Test month tokens map to 1-12 with January as fallback."""
    assert month_number(token) == expected


@pytest.mark.unit
def test_resolve_date():
    """Test synthetic first-of-month dates."""
    assert resolve_date("Mar 2020") == date(2020, 3, 1)
    assert resolve_date("11/2019") == date(2019, 11, 1)
    assert resolve_date("2017") == date(2017, 1, 1)


@pytest.mark.unit
def test_resolve_date_unparseable_month_falls_back_to_january():
    """Test a non-month token before the year does not break resolution."""
    assert resolve_date("Summer 2018") == date(2018, 1, 1)
    assert resolve_date("2019-2020") == date(2019, 1, 1)


@pytest.mark.unit
def test_resolve_date_without_year_uses_sentinel():
    """Test undated strings resolve to January of the sentinel year."""
    assert resolve_date(None) == date(current_year() + 10, 1, 1)
    assert resolve_date("Present") == date(current_year() + 10, 1, 1)
