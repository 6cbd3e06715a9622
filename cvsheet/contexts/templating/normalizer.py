"""
CV Table Normalization

Turns raw table records into display-ready entries:

- Entries: numbered description/extra columns collapsed into bullet and extras
  blocks, "NULL" dates treated as absent, a timeline label synthesized from
  start/end, years resolved, and the whole collection sorted newest first.
  Missing display fields become "N/A" after sorting.
- Output and side rows: numbered columns collapsed into a single <br>-joined field.

A malformed row never aborts normalization of the rest of the table; it is logged
and kept with fallback values.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from cvsheet.contexts.intake.records import RawEntry, RawOutputRow, RawSideRow
from cvsheet.contexts.templating.dates import resolve_date, resolve_year, sentinel_year
from cvsheet.contexts.templating.logger import _log_debug, _log_warning

MISSING = "N/A"
NULL_MARKER = "NULL"

BULLET_SEPARATOR = "\n- "
BULLET_PREFIX = "- "
EXTRAS_SEPARATOR = "\n\n "
BREAK_SEPARATOR = "<br>"


@dataclass(frozen=True)
class NormalizedEntry:
    """
    Display-ready entry.

    All display fields are strings: absent values are "N/A", while the joined
    description_bullets and extras are "" when there is nothing to join.
    """

    title: str
    loc: str
    institution: str
    start: str
    end: str
    section: str
    in_resume: bool
    description_bullets: str
    extras: str
    start_year: int
    end_year: int
    timeline: str


@dataclass(frozen=True)
class OutputEntry:
    """Display-ready output row (title plus <br>-joined institution lines)."""

    title: Optional[str]
    year: Optional[str]
    section: Optional[str]
    in_resume: bool
    institution_bullets: str


@dataclass(frozen=True)
class SideEntry:
    """Display-ready side row."""

    section: Optional[str]
    in_resume: bool
    entry_bullets: str


def join_numbered(values: Iterable[Optional[str]], separator: str) -> str:
    """
    Join the non-empty values of numbered sibling columns.

    Args:
        values: Cell values in column order (None/blank cells are skipped)
        separator: String placed between kept values

    Returns:
        Joined string, or "" if no value is present

    Example:
        >>> join_numbered(["Built X", None, "Shipped Y"], "\\n- ")
        'Built X\\n- Shipped Y'
    """
    return separator.join(value for value in values if value)


def format_description_bullets(descriptions: Sequence[Optional[str]]) -> str:
    """Format description cells as a markdown bullet list ("" when none)."""
    joined = join_numbered(descriptions, BULLET_SEPARATOR)
    return f"{BULLET_PREFIX}{joined}" if joined else ""


def drop_null_marker(value: Optional[str]) -> Optional[str]:
    """Treat the literal "NULL" cell value as absent."""
    return None if value == NULL_MARKER else value


def derive_timeline(start: Optional[str], end: Optional[str]) -> str:
    """
    Build the timeline label for an entry.

    | start | end | timeline          |
    |-------|-----|-------------------|
    | no    | no  | "N/A"             |
    | no    | yes | end               |
    | yes   | no  | "Current - start" |
    | yes   | yes | "end - start"     |
    """
    if start is None and end is None:
        return MISSING
    if start is None:
        return end
    if end is None:
        return f"Current - {start}"
    return f"{end} - {start}"


def _or_missing(value: Optional[str]) -> str:
    return MISSING if value is None else value


def normalize_entry(raw: RawEntry) -> Tuple[date, NormalizedEntry]:
    """
    Normalize one entry.

    Returns:
        Tuple of (sort key resolved from the end date, normalized entry)
    """
    start = drop_null_marker(raw.start)
    end = drop_null_marker(raw.end)

    entry = NormalizedEntry(
        title=_or_missing(raw.title),
        loc=_or_missing(raw.loc),
        institution=_or_missing(raw.institution),
        start=_or_missing(start),
        end=_or_missing(end),
        section=_or_missing(raw.section),
        in_resume=raw.in_resume,
        description_bullets=format_description_bullets(raw.descriptions),
        extras=join_numbered(raw.extras, EXTRAS_SEPARATOR),
        start_year=resolve_year(start),
        end_year=resolve_year(end),
        timeline=derive_timeline(start, end),
    )
    return resolve_date(end), entry


def fallback_entry(raw: RawEntry) -> Tuple[date, NormalizedEntry]:
    """Entry used when a row cannot be normalized: every display field "N/A", undated."""
    year = sentinel_year()
    entry = NormalizedEntry(
        title=raw.title if isinstance(raw.title, str) else MISSING,
        loc=MISSING,
        institution=MISSING,
        start=MISSING,
        end=MISSING,
        section=raw.section if isinstance(raw.section, str) else MISSING,
        in_resume=bool(raw.in_resume),
        description_bullets="",
        extras="",
        start_year=year,
        end_year=year,
        timeline=MISSING,
    )
    return date(year, 1, 1), entry


def normalize_entries(raw_entries: Iterable[RawEntry]) -> Tuple[NormalizedEntry, ...]:
    """
    Normalize the entries table and sort it newest first.

    Sorting is stable and descending by the date resolved from each entry's end
    value; entries without an end date carry the sentinel year and come first.

    Args:
        raw_entries: Entries in sheet order

    Returns:
        Tuple of normalized entries in display order
    """
    keyed: List[Tuple[date, NormalizedEntry]] = []
    for index, raw in enumerate(raw_entries):
        try:
            keyed.append(normalize_entry(raw))
        except (TypeError, ValueError, AttributeError) as e:
            _log_warning(f"Entry row {index} could not be normalized ({e}); using fallback values")
            keyed.append(fallback_entry(raw))

    keyed.sort(key=lambda pair: pair[0], reverse=True)
    _log_debug(f"Normalized {len(keyed)} entries")
    return tuple(entry for _, entry in keyed)


def normalize_output_rows(rows: Iterable[RawOutputRow]) -> Tuple[OutputEntry, ...]:
    """Collapse institution* columns of each output row into institution_bullets."""
    return tuple(
        OutputEntry(
            title=row.title,
            year=row.year,
            section=row.section,
            in_resume=row.in_resume,
            institution_bullets=join_numbered(row.institutions, BREAK_SEPARATOR),
        )
        for row in rows
    )


def normalize_side_rows(rows: Iterable[RawSideRow]) -> Tuple[SideEntry, ...]:
    """Collapse entry* columns of each side row into entry_bullets."""
    return tuple(
        SideEntry(
            section=row.section,
            in_resume=row.in_resume,
            entry_bullets=join_numbered(row.entries, BREAK_SEPARATOR),
        )
        for row in rows
    )


def order_output_entries(entries: Iterable[OutputEntry]) -> List[OutputEntry]:
    """
    Order output rows newest first by the leading four characters of their year.

    Year cells may hold ranges ("2019--2021", "2020-current"), so only the first
    four characters are compared. Rows without a year keep their order at the end.
    """
    return sorted(
        entries,
        key=lambda entry: (entry.year is not None, (entry.year or "")[:4]),
        reverse=True,
    )
