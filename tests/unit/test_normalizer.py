"""Unit tests for entry, output and side normalization."""

import pytest

from cvsheet.contexts.intake.records import RawEntry, RawOutputRow, RawSideRow
from cvsheet.contexts.templating.normalizer import (
    derive_timeline,
    format_description_bullets,
    join_numbered,
    normalize_entries,
    normalize_output_rows,
    normalize_side_rows,
    order_output_entries,
)
from cvsheet.utils.timestamp import current_year


def _entry(**fields) -> RawEntry:
    row = {"section": "work", "in_resume": "TRUE", **fields}
    return RawEntry.from_row(row)


# ============================================================================
# Joining numbered columns
# ============================================================================


@pytest.mark.unit
def test_join_numbered_skips_empty_values():
    """Test only non-empty values are joined, in column order."""
    assert join_numbered(["a", None, "", "b"], "|") == "a|b"


@pytest.mark.unit
def test_join_numbered_none_present():
    """Test joining nothing yields an empty string, not a separator."""
    assert join_numbered([], "\n- ") == ""
    assert join_numbered([None, ""], "\n- ") == ""


@pytest.mark.unit
def test_format_description_bullets():
    """Test description cells become a markdown bullet list."""
    assert format_description_bullets(["Built X", None, "Shipped Y"]) == "- Built X\n- Shipped Y"
    assert format_description_bullets([None]) == ""


# ============================================================================
# Timeline
# ============================================================================


@pytest.mark.unit
@pytest.mark.parametrize(
    "start, end, expected",
    [
        (None, None, "N/A"),
        (None, "2021", "2021"),
        ("2019", None, "Current - 2019"),
        ("2019", "2021", "2021 - 2019"),
        ("Jan 2019", "Mar 2021", "Mar 2021 - Jan 2019"),
    ],
)
def test_derive_timeline(start, end, expected):
    """Test every row of the timeline case table."""
    assert derive_timeline(start, end) == expected


@pytest.mark.unit
def test_null_marker_treated_as_absent():
    """Test literal "NULL" dates are absent before the timeline is derived."""
    (entry,) = normalize_entries([_entry(title="A", start="NULL", end="NULL")])
    assert entry.timeline == "N/A"
    assert entry.start == "N/A"
    assert entry.end == "N/A"

    (entry,) = normalize_entries([_entry(title="B", start="2019", end="NULL")])
    assert entry.timeline == "Current - 2019"


# ============================================================================
# Entry normalization
# ============================================================================


@pytest.mark.unit
def test_normalize_entry_example():
    """Test the canonical example row normalizes as documented."""
    raw = _entry(
        title="Engineer",
        start="NULL",
        end="2021",
        description_1="Built X",
        description_2="",
    )
    (entry,) = normalize_entries([raw])

    assert entry.timeline == "2021"
    assert entry.description_bullets == "- Built X"
    assert entry.end_year == 2021
    assert entry.start_year == current_year() + 10


@pytest.mark.unit
def test_normalize_entry_missing_fields_become_na():
    """Test absent display fields are replaced with "N/A"."""
    (entry,) = normalize_entries([RawEntry.from_row({"title": "Only title"})])

    assert entry.loc == "N/A"
    assert entry.institution == "N/A"
    assert entry.section == "N/A"
    assert entry.description_bullets == ""
    assert entry.extras == ""
    assert entry.in_resume is False


@pytest.mark.unit
def test_normalize_entry_extras_joined():
    """Test extra_* cells are joined with a blank line."""
    (entry,) = normalize_entries([_entry(title="A", extra_1="One", extra_2=None, extra_3="Two")])
    assert entry.extras == "One\n\n Two"


@pytest.mark.unit
def test_entries_sorted_newest_first():
    """Test entries sort descending by resolved end date."""
    raw = [
        _entry(title="old", end="2015"),
        _entry(title="mid-jan", end="Jan 2019"),
        _entry(title="new", end="Dec 2020"),
        _entry(title="mid-nov", end="Nov 2019"),
    ]
    titles = [e.title for e in normalize_entries(raw)]
    assert titles == ["new", "mid-nov", "mid-jan", "old"]


@pytest.mark.unit
def test_undated_entries_sort_first():
    """Test entries without an end date come before every dated entry."""
    raw = [
        _entry(title="dated", end="2020"),
        _entry(title="undated"),
    ]
    entries = normalize_entries(raw)

    assert [e.title for e in entries] == ["undated", "dated"]
    assert entries[0].timeline == "N/A"
    assert entries[0].end_year == current_year() + 10


@pytest.mark.unit
def test_sort_is_stable():
    """Test entries with equal end dates keep sheet order."""
    raw = [
        _entry(title="first", end="2020"),
        _entry(title="second", end="Jan 2020"),
        _entry(title="ongoing-1", start="2018"),
        _entry(title="ongoing-2", start="2019", end="NULL"),
    ]
    titles = [e.title for e in normalize_entries(raw)]
    assert titles == ["ongoing-1", "ongoing-2", "first", "second"]


@pytest.mark.unit
def test_malformed_row_does_not_abort(monkeypatch):
    """Test a row that fails normalization falls back instead of raising."""
    from cvsheet.contexts.templating import normalizer

    original = normalizer.normalize_entry

    def flaky(raw):
        if raw.title == "bad":
            raise ValueError("boom")
        return original(raw)

    monkeypatch.setattr(normalizer, "normalize_entry", flaky)

    entries = normalize_entries([_entry(title="good", end="2020"), _entry(title="bad", end="2021")])

    assert [e.title for e in entries] == ["bad", "good"]
    assert entries[0].timeline == "N/A"
    assert entries[1].timeline == "2020"


# ============================================================================
# Output and side rows
# ============================================================================


@pytest.mark.unit
def test_normalize_output_rows():
    """Test institution columns are <br>-joined."""
    row = RawOutputRow.from_row(
        {"title": "Talk", "institution_1": "PyCon", "institution_2": "", "institution_3": "Berlin"}
    )
    (entry,) = normalize_output_rows([row])
    assert entry.institution_bullets == "PyCon<br>Berlin"


@pytest.mark.unit
def test_normalize_side_rows_empty():
    """Test side rows with no entry cells get an empty string."""
    (entry,) = normalize_side_rows([RawSideRow.from_row({"section": "s", "entry_1": ""})])
    assert entry.entry_bullets == ""


@pytest.mark.unit
def test_order_output_entries():
    """Test output rows order by leading year, undated rows last."""
    rows = normalize_output_rows(
        RawOutputRow.from_row({"title": title, "year": year})
        for title, year in [
            ("undated-1", None),
            ("2019", "2019"),
            ("range", "2021--2022"),
            ("undated-2", ""),
            ("2020", "2020-current"),
        ]
    )
    titles = [e.title for e in order_output_entries(rows)]
    assert titles == ["range", "2020", "2019", "undated-1", "undated-2"]
