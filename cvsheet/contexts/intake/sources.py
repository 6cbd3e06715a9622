"""
CV Data Sources

Adapters that read the six CV tables from wherever the sheet author keeps them:
- CsvFolderSource: a folder of <table>.csv files
- GoogleSheetSource: a Google Sheet with one tab per table
- StaticSource: tables already in memory

Every source returns rows as ordered dicts of string cells, in sheet order.
A failed read raises SourceUnavailableError; nothing is retried.
"""

import csv
import io
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import requests

from cvsheet.contexts.intake.exceptions import (
    MissingColumnsError,
    MissingTableError,
    SourceUnavailableError,
)
from cvsheet.contexts.intake.logger import log_source_failure, log_table_loaded
from cvsheet.contexts.intake.records import Row

REQUIRED_TABLES = ("entries", "text_blocks", "contact_info", "list", "output", "side")

# Columns a table cannot be rendered without
REQUIRED_COLUMNS = {
    "entries": ("section", "title"),
    "text_blocks": ("text",),
    "contact_info": ("icon", "contact"),
    "list": ("section", "item"),
    "output": ("section", "title"),
    "side": ("section",),
}

GOOGLE_SHEET_ID = re.compile(r"/spreadsheets/d/([a-zA-Z0-9_-]+)")
SHEETS_VALUES_URL = "https://sheets.googleapis.com/v4/spreadsheets/{sheet_id}/values/{tab}"


def rows_from_lines(lines: Sequence[Sequence[str]], skip_rows: int = 0) -> Tuple[List[str], List[Row]]:
    """
    Turn raw table lines into a header and row dicts.

    Args:
        lines: Table lines as lists of cell strings (header line included)
        skip_rows: Lines to discard before the header row (sheet instructions, etc.)

    Returns:
        Tuple of (header, rows). Rows are keyed by header in line order; short
        rows are padded with None and fully blank lines are dropped.
    """
    lines = list(lines)[skip_rows:]
    if not lines:
        return [], []

    header = [name.strip() for name in lines[0]]
    rows = []
    for line in lines[1:]:
        # Skip fully blank lines (trailing newlines in exported sheets)
        if not any(cell.strip() for cell in line):
            continue
        padded = list(line) + [None] * (len(header) - len(line))
        rows.append(dict(zip(header, padded)))
    return header, rows


def parse_csv_text(text: str, skip_rows: int = 0) -> List[Row]:
    """Parse CSV text into a list of row dicts (see rows_from_lines)."""
    return rows_from_lines(csv.reader(io.StringIO(text)), skip_rows)[1]


def check_columns(name: str, header: Sequence[str], location: str) -> None:
    """
    Check a table header carries the columns its rows need.

    A table with no header at all is treated as empty and passes.

    Raises:
        MissingColumnsError: If any required column is absent
    """
    if not header:
        return
    missing = [column for column in REQUIRED_COLUMNS.get(name, ()) if column not in header]
    if missing:
        raise MissingColumnsError(
            f"Table '{name}' lacks required column(s)", missing, location=location, table=name
        )


class DataSource:
    """Base class for CV table sources."""

    location: str = ""

    def read_table(self, name: str) -> List[Row]:
        """
        Read one table.

        Raises:
            MissingTableError: If the table does not exist in the source
            SourceUnavailableError: If the source cannot be read
        """
        raise NotImplementedError

    def read_tables(self, names: Sequence[str] = REQUIRED_TABLES) -> Dict[str, List[Row]]:
        """Read every named table, failing on the first one that cannot be read."""
        tables = {}
        for name in names:
            try:
                rows = self.read_table(name)
            except SourceUnavailableError as e:
                log_source_failure(name, self.location, e)
                raise
            log_table_loaded(name, len(rows), self.location)
            tables[name] = rows
        return tables


class CsvFolderSource(DataSource):
    """
    Reads tables from a folder containing one <table>.csv file per table.

    Args:
        folder: Folder holding entries.csv, text_blocks.csv, ...
        skip_rows: Lines to discard before each header row (default: 0)
    """

    def __init__(self, folder: Path, skip_rows: int = 0):
        self.folder = Path(folder)
        self.skip_rows = skip_rows
        self.location = str(self.folder)

        if not self.folder.is_dir():
            raise SourceUnavailableError("Data folder not found", location=self.location)

    def read_table(self, name: str) -> List[Row]:
        path = self.folder / f"{name}.csv"
        if not path.exists():
            raise MissingTableError(
                f"Required table '{name}' not found", location=self.location, table=name
            )

        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceUnavailableError(
                f"Could not read {path.name}", location=self.location, table=name, original_error=e
            ) from e

        header, rows = rows_from_lines(csv.reader(io.StringIO(text)), self.skip_rows)
        check_columns(name, header, self.location)
        return rows


class GoogleSheetSource(DataSource):
    """
    Reads tables from the tabs of a Google Sheet via the Sheets API values endpoint.

    Cells are requested as their formatted text, so a column mixing years with
    "NULL" or "Present" comes back exactly as the sheet shows it. An unknown tab
    name is rejected by the API, which surfaces as MissingTableError.

    Authentication is explicit configuration: a publicly readable sheet ("anyone with
    the link can view") is read with an API key, a private one sends the OAuth access
    token cached at <credentials_cache>/token.

    Args:
        sheet: Sheet URL or bare sheet id
        publicly_readable: Read with the API key instead of cached credentials (default: True)
        credentials_cache: Folder holding the cached access token for private sheets
        api_key: Google API key used for publicly readable sheets
        skip_rows: Lines to discard before each header row (default: 1, the
            instructions row at the top of each tab)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        sheet: str,
        publicly_readable: bool = True,
        credentials_cache: Path = Path(".secrets"),
        api_key: Optional[str] = None,
        skip_rows: int = 1,
        timeout: float = 30.0,
    ):
        self.sheet_id = self.parse_sheet_id(sheet)
        self.publicly_readable = publicly_readable
        self.credentials_cache = Path(credentials_cache)
        self.api_key = api_key
        self.skip_rows = skip_rows
        self.timeout = timeout
        self.location = sheet
        self.session = requests.Session()

    @staticmethod
    def parse_sheet_id(sheet: str) -> str:
        """Extract the sheet id from a Google Sheets URL (bare ids pass through)."""
        match = GOOGLE_SHEET_ID.search(sheet)
        return match.group(1) if match else sheet.strip()

    @staticmethod
    def is_sheet_url(location: str) -> bool:
        """Check whether a data location refers to a Google Sheet."""
        return GOOGLE_SHEET_ID.search(location) is not None

    def _auth(self) -> Tuple[Dict[str, str], Dict[str, str]]:
        """Return (headers, query params) authenticating one request."""
        if self.publicly_readable:
            if not self.api_key:
                raise SourceUnavailableError(
                    "Reading a public sheet needs a Google API key (set GOOGLE_API_KEY)",
                    location=self.location,
                )
            return {}, {"key": self.api_key}

        token_file = self.credentials_cache / "token"
        if not token_file.exists():
            raise SourceUnavailableError(
                f"No cached credentials at {token_file}", location=self.location
            )
        return {"Authorization": f"Bearer {token_file.read_text(encoding='utf-8').strip()}"}, {}

    def read_table(self, name: str) -> List[Row]:
        url = SHEETS_VALUES_URL.format(sheet_id=self.sheet_id, tab=name)
        headers, params = self._auth()
        params.update({"valueRenderOption": "FORMATTED_VALUE", "majorDimension": "ROWS"})

        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.HTTPError as e:
            # The API answers 400 "Unable to parse range" for a tab that does not exist
            if e.response is not None and e.response.status_code == 400:
                raise MissingTableError(
                    f"Required table '{name}' not found", location=self.location, table=name
                ) from e
            raise SourceUnavailableError(
                "Sheet request failed", location=self.location, table=name, original_error=e
            ) from e
        except (requests.RequestException, ValueError) as e:
            raise SourceUnavailableError(
                "Sheet request failed", location=self.location, table=name, original_error=e
            ) from e

        lines = [[str(cell) for cell in line] for line in payload.get("values", [])]
        header, rows = rows_from_lines(lines, self.skip_rows)
        check_columns(name, header, self.location)
        return rows


class StaticSource(DataSource):
    """
    Serves tables held in memory.

    Args:
        tables: Mapping of table name to list of row dicts
        location: Label used in logs and errors
    """

    def __init__(self, tables: Dict[str, List[Row]], location: str = "<memory>"):
        self.tables = tables
        self.location = location

    def read_table(self, name: str) -> List[Row]:
        if name not in self.tables:
            raise MissingTableError(
                f"Required table '{name}' not found", location=self.location, table=name
            )
        return [dict(row) for row in self.tables[name]]


def open_source(
    location: str,
    publicly_readable: bool = True,
    credentials_cache: Path = Path(".secrets"),
    api_key: Optional[str] = None,
    skip_rows: Optional[int] = None,
) -> DataSource:
    """
    Pick a source for a data location.

    Google Sheet URLs use GoogleSheetSource, anything else is treated as a folder
    of CSV files.

    Args:
        location: Sheet URL or folder path
        publicly_readable: Passed to GoogleSheetSource
        credentials_cache: Passed to GoogleSheetSource
        api_key: Passed to GoogleSheetSource
        skip_rows: Override the source's default rows skipped before each header

    Returns:
        DataSource for the location

    Raises:
        SourceUnavailableError: If a folder location does not exist
    """
    if GoogleSheetSource.is_sheet_url(location):
        return GoogleSheetSource(
            location,
            publicly_readable=publicly_readable,
            credentials_cache=credentials_cache,
            api_key=api_key,
            skip_rows=1 if skip_rows is None else skip_rows,
        )
    return CsvFolderSource(Path(location), skip_rows=0 if skip_rows is None else skip_rows)
