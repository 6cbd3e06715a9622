"""Unit tests for CV data sources."""

from pathlib import Path

import pytest
import requests

from cvsheet.contexts.intake.exceptions import (
    MissingColumnsError,
    MissingTableError,
    SourceUnavailableError,
)
from cvsheet.contexts.intake.sources import (
    REQUIRED_TABLES,
    CsvFolderSource,
    GoogleSheetSource,
    StaticSource,
    open_source,
    parse_csv_text,
)

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "cv_data"
SHEET_URL = "https://docs.google.com/spreadsheets/d/1AbC-d_9/edit#gid=0"


class FakeResponse:
    def __init__(self, payload=None, status_code: int = 200):
        self.payload = payload if payload is not None else {}
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers})
        if self.error:
            raise self.error
        return self.response


# ============================================================================
# CSV parsing
# ============================================================================


@pytest.mark.unit
def test_parse_csv_text_skips_rows_and_blank_lines():
    """Test leading rows are skipped and blank lines dropped."""
    text = "instructions row,,\ntitle,start,end\nA,2019,2020\n,,\nB,2018\n"
    rows = parse_csv_text(text, skip_rows=1)

    assert rows == [
        {"title": "A", "start": "2019", "end": "2020"},
        {"title": "B", "start": "2018", "end": None},
    ]


@pytest.mark.unit
def test_parse_csv_text_empty():
    """Test empty text has no rows."""
    assert parse_csv_text("") == []


# ============================================================================
# CsvFolderSource
# ============================================================================


@pytest.mark.unit
def test_csv_folder_source_reads_tables():
    """Test all required tables are read from the fixture folder in sheet order."""
    tables = CsvFolderSource(FIXTURES_PATH).read_tables()

    assert set(tables) == set(REQUIRED_TABLES)
    assert tables["entries"][0]["title"] == "Data Engineer"
    assert len(tables["entries"]) == 5


@pytest.mark.unit
def test_csv_folder_source_missing_folder(tmp_path):
    """Test a missing folder is a source failure."""
    with pytest.raises(SourceUnavailableError):
        CsvFolderSource(tmp_path / "missing")


@pytest.mark.unit
def test_csv_folder_source_missing_table(tmp_path):
    """Test a missing table file raises MissingTableError."""
    (tmp_path / "entries.csv").write_text("section,title\nwork,A\n", encoding="utf-8")
    source = CsvFolderSource(tmp_path)

    with pytest.raises(MissingTableError) as exc_info:
        source.read_tables()

    assert exc_info.value.table == "text_blocks"



@pytest.mark.unit
def test_csv_folder_source_undecodable_file(tmp_path):
    """Test a file that is not UTF-8 is a source failure, not a decode error."""
    (tmp_path / "entries.csv").write_bytes(b"section,title\nwork,Caf\xe9\n")
    source = CsvFolderSource(tmp_path)

    with pytest.raises(SourceUnavailableError) as exc_info:
        source.read_table("entries")

    assert exc_info.value.table == "entries"
    assert isinstance(exc_info.value.original_error, UnicodeDecodeError)


@pytest.mark.unit
def test_csv_folder_source_wrong_columns(tmp_path):
    """Test a table missing required columns is rejected."""
    (tmp_path / "list.csv").write_text("icon,label\nlanguage,English\n", encoding="utf-8")
    source = CsvFolderSource(tmp_path)

    with pytest.raises(MissingColumnsError) as exc_info:
        source.read_table("list")

    assert exc_info.value.columns == ["section", "item"]

# ============================================================================
# StaticSource
# ============================================================================


@pytest.mark.unit
def test_static_source_returns_copies():
    """Test rows are copied so callers cannot alter the source."""
    source = StaticSource({"entries": [{"title": "A"}]})
    rows = source.read_table("entries")
    rows[0]["title"] = "B"

    assert source.read_table("entries") == [{"title": "A"}]


@pytest.mark.unit
def test_static_source_missing_table():
    """Test missing tables are reported."""
    with pytest.raises(MissingTableError):
        StaticSource({}).read_table("side")


# ============================================================================
# GoogleSheetSource
# ============================================================================


@pytest.mark.unit
def test_parse_sheet_id():
    """Test sheet ids are extracted from URLs and bare ids pass through."""
    assert GoogleSheetSource.parse_sheet_id(SHEET_URL) == "1AbC-d_9"
    assert GoogleSheetSource.parse_sheet_id("1AbC-d_9") == "1AbC-d_9"
    assert GoogleSheetSource.is_sheet_url(SHEET_URL)
    assert not GoogleSheetSource.is_sheet_url("data/cv")


@pytest.mark.unit
def test_google_sheet_source_public_read():
    """Test a public sheet tab is read with the API key and the first row skipped."""
    source = GoogleSheetSource(SHEET_URL, api_key="key-123")
    source.session = FakeSession(
        FakeResponse({"values": [["Describe this tab"], ["icon", "contact"], ["github", "gh/x"]]})
    )

    rows = source.read_table("contact_info")

    assert rows == [{"icon": "github", "contact": "gh/x"}]
    call = source.session.calls[0]
    assert call["url"] == "https://sheets.googleapis.com/v4/spreadsheets/1AbC-d_9/values/contact_info"
    assert call["params"]["key"] == "key-123"
    assert call["params"]["valueRenderOption"] == "FORMATTED_VALUE"
    assert call["headers"] == {}


@pytest.mark.unit
def test_google_sheet_source_keeps_mixed_column_text():
    """Test a column mixing years with text keeps every cell, short rows padded."""
    source = GoogleSheetSource(SHEET_URL, api_key="key-123")
    source.session = FakeSession(
        FakeResponse(
            {
                "values": [
                    ["Instructions"],
                    ["section", "title", "start", "end"],
                    ["work", "A", "2019", "2021"],
                    ["work", "B", "2021", "NULL"],
                    [],
                    ["work", "C"],
                ]
            }
        )
    )

    rows = source.read_table("entries")

    assert [row["end"] for row in rows] == ["2021", "NULL", None]


@pytest.mark.unit
def test_google_sheet_source_public_without_api_key():
    """Test a public sheet without an API key fails before any request."""
    source = GoogleSheetSource(SHEET_URL)
    source.session = FakeSession(FakeResponse())

    with pytest.raises(SourceUnavailableError):
        source.read_table("entries")

    assert source.session.calls == []


@pytest.mark.unit
def test_google_sheet_source_private_uses_cached_token(tmp_path):
    """Test private sheets send the cached bearer token and no API key."""
    (tmp_path / "token").write_text("abc123\n", encoding="utf-8")
    source = GoogleSheetSource(SHEET_URL, publicly_readable=False, credentials_cache=tmp_path)
    source.session = FakeSession(FakeResponse({"values": [["x"], ["icon", "contact"]]}))

    assert source.read_table("contact_info") == []

    call = source.session.calls[0]
    assert call["headers"] == {"Authorization": "Bearer abc123"}
    assert "key" not in call["params"]


@pytest.mark.unit
def test_google_sheet_source_private_without_token(tmp_path):
    """Test a private sheet without cached credentials fails."""
    source = GoogleSheetSource(SHEET_URL, publicly_readable=False, credentials_cache=tmp_path)
    source.session = FakeSession(FakeResponse())

    with pytest.raises(SourceUnavailableError):
        source.read_table("entries")


@pytest.mark.unit
def test_google_sheet_source_missing_tab():
    """Test a 400 response for an unknown tab is a missing table."""
    source = GoogleSheetSource(SHEET_URL, api_key="key-123")
    source.session = FakeSession(FakeResponse(status_code=400))

    with pytest.raises(MissingTableError):
        source.read_table("side")


@pytest.mark.unit
def test_google_sheet_source_wrong_tab_columns():
    """Test a tab whose header lacks the table's columns is rejected."""
    source = GoogleSheetSource(SHEET_URL, api_key="key-123")
    source.session = FakeSession(
        FakeResponse({"values": [["Instructions"], ["label", "text"], ["intro", "Hi"]]})
    )

    with pytest.raises(MissingColumnsError) as exc_info:
        source.read_table("side")

    assert exc_info.value.columns == ["section"]


@pytest.mark.unit
def test_google_sheet_source_network_error():
    """Test connection failures surface as SourceUnavailableError."""
    source = GoogleSheetSource(SHEET_URL, api_key="key-123")
    source.session = FakeSession(error=requests.ConnectionError("offline"))

    with pytest.raises(SourceUnavailableError) as exc_info:
        source.read_table("entries")

    assert isinstance(exc_info.value.original_error, requests.ConnectionError)


# ============================================================================
# open_source
# ============================================================================


@pytest.mark.unit
def test_open_source_picks_adapter():
    """Test sheet URLs and folders map to the right source."""
    assert isinstance(open_source(SHEET_URL), GoogleSheetSource)
    assert isinstance(open_source(str(FIXTURES_PATH)), CsvFolderSource)
    assert open_source(SHEET_URL).skip_rows == 1
    assert open_source(str(FIXTURES_PATH)).skip_rows == 0
