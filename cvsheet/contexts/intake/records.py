"""
CV Table Records

Fixed-schema records for the six CV tables. Source rows arrive as loosely typed
dicts of string cells; they are coerced once here (blank cells to None, the
in_resume flag to bool) so downstream code never re-checks raw cell values.

Numbered sibling columns (description_1, description_2, ... or extra_1, ...) are
collected by prefix in their original column order, matching how the sheet
author laid them out.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

Row = Dict[str, Optional[str]]


def clean_cell(value: Optional[str]) -> Optional[str]:
    """
    Normalize a single cell value.

    Args:
        value: Raw cell value (may be None or non-string)

    Returns:
        Stripped string, or None for blank cells
    """
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_flag(value: Optional[str]) -> bool:
    """Interpret an in_resume cell: case-insensitive "TRUE" is True, anything else False."""
    cleaned = clean_cell(value)
    return cleaned is not None and cleaned.upper() == "TRUE"


def prefixed_values(row: Row, prefix: str) -> Tuple[Optional[str], ...]:
    """
    Collect cells whose column name starts with prefix, in column order.

    Args:
        row: Source row
        prefix: Column prefix (e.g., "description", "extra", "institution")

    Returns:
        Tuple of cleaned cell values (blank cells kept as None)
    """
    return tuple(clean_cell(value) for key, value in row.items() if key.startswith(prefix))


def _get(row: Row, *keys: str) -> Optional[str]:
    """Return the first non-blank cell among the given column names."""
    for key in keys:
        value = clean_cell(row.get(key))
        if value is not None:
            return value
    return None


@dataclass(frozen=True)
class RawEntry:
    """
    One row of the entries table (a job, degree, project, publication...).

    Attributes:
        title: Entry heading
        loc: Location
        institution: Employer, school or publisher
        start: Start date as written in the sheet
        end: End date as written in the sheet
        section: Section key used to group entries
        in_resume: Whether the row is rendered at all
        descriptions: description_* cells in column order
        extras: extra_* cells in column order
    """

    title: Optional[str] = None
    loc: Optional[str] = None
    institution: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None
    section: Optional[str] = None
    in_resume: bool = False
    descriptions: Tuple[Optional[str], ...] = ()
    extras: Tuple[Optional[str], ...] = ()

    @classmethod
    def from_row(cls, row: Row) -> "RawEntry":
        return cls(
            title=_get(row, "title"),
            loc=_get(row, "loc"),
            institution=_get(row, "institution"),
            start=_get(row, "start"),
            end=_get(row, "end"),
            section=_get(row, "section"),
            in_resume=parse_flag(row.get("in_resume")),
            descriptions=prefixed_values(row, "description"),
            extras=prefixed_values(row, "extra"),
        )


@dataclass(frozen=True)
class RawOutputRow:
    """One row of the output table (talks, posters, software...)."""

    title: Optional[str] = None
    year: Optional[str] = None
    section: Optional[str] = None
    in_resume: bool = False
    institutions: Tuple[Optional[str], ...] = ()

    @classmethod
    def from_row(cls, row: Row) -> "RawOutputRow":
        return cls(
            title=_get(row, "title"),
            year=_get(row, "year"),
            section=_get(row, "section"),
            in_resume=parse_flag(row.get("in_resume")),
            institutions=prefixed_values(row, "institution"),
        )


@dataclass(frozen=True)
class RawSideRow:
    """One row of the side table (free-form sidebar blocks)."""

    section: Optional[str] = None
    in_resume: bool = False
    entries: Tuple[Optional[str], ...] = ()

    @classmethod
    def from_row(cls, row: Row) -> "RawSideRow":
        return cls(
            section=_get(row, "section"),
            in_resume=parse_flag(row.get("in_resume")),
            entries=prefixed_values(row, "entry"),
        )


@dataclass(frozen=True)
class TextBlock:
    """Free-form prose keyed by label."""

    label: Optional[str] = None
    text: Optional[str] = None

    @classmethod
    def from_row(cls, row: Row) -> "TextBlock":
        # Older sheets key text blocks by a "loc" column
        return cls(label=_get(row, "label", "loc"), text=_get(row, "text"))


@dataclass(frozen=True)
class ContactInfoItem:
    """Icon + contact line."""

    icon: Optional[str] = None
    contact: Optional[str] = None

    @classmethod
    def from_row(cls, row: Row) -> "ContactInfoItem":
        return cls(icon=_get(row, "icon"), contact=_get(row, "contact"))


@dataclass(frozen=True)
class ListItem:
    """A bare bulleted fact (skill, language, interest...)."""

    section: Optional[str] = None
    icon: Optional[str] = None
    item: Optional[str] = None
    in_resume: bool = False

    @classmethod
    def from_row(cls, row: Row) -> "ListItem":
        return cls(
            section=_get(row, "section"),
            icon=_get(row, "icon"),
            item=_get(row, "item"),
            in_resume=parse_flag(row.get("in_resume")),
        )


def records_from_rows(record_cls, rows: Iterable[Row]) -> tuple:
    """Coerce every source row of a table into record_cls, preserving order."""
    return tuple(record_cls.from_row(row) for row in rows)
