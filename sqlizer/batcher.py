#!/usr/bin/env python3
"""Group consecutive records into bounded multi-row INSERT statements."""
import enum, logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from sqlizer.errors import ColumnMismatchError
from sqlizer.projector import Record
from sqlizer.sanitize import quote_identifier, quote_literal

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROWS = 1000


class BatchStatement:
    """Rows for one table sharing one fixed column list."""

    def __init__(self, table: str, columns: Sequence[str]):
        self.table = table
        self.columns: Tuple[str, ...] = tuple(columns)
        self._rows: List[Tuple[str, ...]] = []
        self.closed = False

    @property
    def rows(self) -> List[Tuple[str, ...]]:
        return list(self._rows)

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def add_row(self, literals: Sequence[str]):
        if self.closed:
            raise RuntimeError(f"batch for '{self.table}' is already flushed")
        if len(literals) != len(self.columns):
            raise ValueError(f"expected {len(self.columns)} values, got {len(literals)}")
        self._rows.append(tuple(literals))

    def close(self) -> "BatchStatement":
        self.closed = True
        return self

    def to_sql(self) -> str:
        cols = ", ".join(quote_identifier(c) for c in self.columns)
        values = "), (".join(", ".join(row) for row in self._rows)
        return f"INSERT INTO {quote_identifier(self.table)} ({cols}) VALUES ({values});"

    def __repr__(self):
        state = "closed" if self.closed else "open"
        return f"<BatchStatement {self.table} {list(self.columns)} rows={self.row_count} {state}>"


class AccumulatorState(enum.Enum):
    EMPTY = "empty"
    OPEN = "open"


class BatchAccumulator:
    """Collect records into batches, flushing before a row would not fit.

    A batch is closed and handed back when the next record has a different
    table or when it already holds ``max_rows_per_batch`` rows. Only one
    batch is open at a time, so memory stays bounded by a single batch.
    """

    def __init__(self, max_rows_per_batch: int = DEFAULT_MAX_ROWS,
                 sanitize: Callable[[Any], str] = quote_literal):
        if not isinstance(max_rows_per_batch, int) or max_rows_per_batch <= 0:
            raise ValueError(f"max_rows_per_batch must be a positive integer, got {max_rows_per_batch!r}")
        self.max_rows_per_batch = max_rows_per_batch
        self._sanitize = sanitize
        self._batch: Optional[BatchStatement] = None

    @property
    def state(self) -> AccumulatorState:
        return AccumulatorState.EMPTY if self._batch is None else AccumulatorState.OPEN

    @property
    def pending_rows(self) -> int:
        return 0 if self._batch is None else self._batch.row_count

    @property
    def current(self) -> Optional[BatchStatement]:
        return self._batch

    def add_record(self, record: Record) -> Optional[BatchStatement]:
        """Add one record; return the batch it forced out, if any."""
        batch = self._batch
        if batch is None:
            self._open(record)
            return None
        if record.table != batch.table or batch.row_count >= self.max_rows_per_batch:
            flushed = self.flush()
            self._open(record)
            return flushed
        if tuple(record.columns) != batch.columns:
            raise ColumnMismatchError(record, batch)
        batch.add_row(self._literals(record))
        return None

    def flush(self) -> Optional[BatchStatement]:
        batch, self._batch = self._batch, None
        if batch is None:
            return None
        logger.debug("flushing %d rows into %s", batch.row_count, batch.table)
        return batch.close()

    def _open(self, record: Record):
        batch = BatchStatement(record.table, record.columns)
        batch.add_row(self._literals(record))
        self._batch = batch

    def _literals(self, record: Record) -> Tuple[str, ...]:
        return tuple(self._sanitize(v) for v in record.values)
