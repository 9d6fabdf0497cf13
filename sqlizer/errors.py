"""Errors raised while turning a JSON stream into SQL statements."""
from typing import Any, Optional


class SqlizerError(Exception):
    """Base class for every load failure."""

    # 1-based position of the document being loaded when the error surfaced
    document_index: Optional[int] = None


class StructuralError(SqlizerError):
    """The parse event stream is not well nested."""


class ProjectionError(SqlizerError):
    """A document can not be turned into a record."""

    def __init__(self, message: str, document: Any = None):
        super().__init__(message)
        self.document = document

    def __str__(self):
        base = super().__str__()
        if self.document is None:
            return base
        return f"{base}: {self.document!r}"


class ColumnMismatchError(SqlizerError):
    """A record does not fit the columns of the open batch for its table."""

    def __init__(self, record, batch):
        super().__init__(
            f"columns {list(record.columns)} of record for '{record.table}' "
            f"do not match open batch columns {list(batch.columns)}"
        )
        self.record = record
        self.batch = batch

    def __str__(self):
        values = dict(zip(self.record.columns, self.record.values))
        return f"{super().__str__()}: {values!r}"


class SinkError(SqlizerError):
    """The database rejected a flushed statement."""

    def __init__(self, message: str, statement: Optional[Any] = None):
        super().__init__(message)
        self.statement = statement

    def __str__(self):
        base = super().__str__()
        if self.statement is None:
            return base
        return f"{base} (batch for '{self.statement.table}', {self.statement.row_count} rows)"
