"""
Intake Context

Responsibilities:
- Reads the six CV tables from a data source (CSV folder, Google Sheet, memory)
- Coerces loosely typed rows into fixed-schema records

Owns: Data source access, row coercion
Never: Formats or orders content for display
"""

from cvsheet.contexts.intake.exceptions import (
    MissingColumnsError,
    MissingTableError,
    SourceUnavailableError,
)
from cvsheet.contexts.intake.records import (
    ContactInfoItem,
    ListItem,
    RawEntry,
    RawOutputRow,
    RawSideRow,
    TextBlock,
)
from cvsheet.contexts.intake.sources import (
    REQUIRED_TABLES,
    CsvFolderSource,
    DataSource,
    GoogleSheetSource,
    StaticSource,
    open_source,
)

__all__ = [
    # Sources
    "DataSource",
    "CsvFolderSource",
    "GoogleSheetSource",
    "StaticSource",
    "open_source",
    "REQUIRED_TABLES",
    # Records
    "RawEntry",
    "RawOutputRow",
    "RawSideRow",
    "TextBlock",
    "ContactInfoItem",
    "ListItem",
    # Errors
    "SourceUnavailableError",
    "MissingTableError",
    "MissingColumnsError",
]
