"""Custom exceptions for the intake context."""

from typing import Optional


class SourceUnavailableError(Exception):
    """
    Exception raised when the data source cannot be read.

    Fatal to CVModel construction: no partial model is built.

    Attributes:
        message: Error description
        location: Data location that was being read (folder, sheet URL, ...)
        table: Table being read when the failure happened, if any
        original_error: The underlying I/O or HTTP error
    """

    def __init__(
        self,
        message: str,
        location: Optional[str] = None,
        table: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.location = location
        self.table = table
        self.original_error = original_error

        parts = [message]

        if location:
            parts.append(f"Location: {location}")
        if table:
            parts.append(f"Table: {table}")
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class MissingTableError(SourceUnavailableError):
    """Raised when a required table is absent from the data source."""

    pass


class MissingColumnsError(SourceUnavailableError):
    """
    Raised when a table lacks columns every row of that table needs.

    Usually means the wrong tab or file was read.

    Attributes:
        columns: Required column names absent from the header
    """

    def __init__(self, message: str, columns, location: Optional[str] = None, table: Optional[str] = None):
        self.columns = list(columns)
        super().__init__(f"{message}: {self.columns}", location=location, table=table)
