"""Statement sinks: where flushed batches are executed or written.

A sink receives one complete BatchStatement at a time. Retrying a failed
statement is up to the caller.
"""
import logging, sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TextIO

from sqlizer.batcher import BatchStatement
from sqlizer.errors import SinkError

logger = logging.getLogger(__name__)


class StatementSink(ABC):
    @abstractmethod
    def open(self) -> None:
        """Acquire the connection or file."""

    @abstractmethod
    def execute(self, statement: BatchStatement) -> None:
        """Run one flushed statement."""

    @abstractmethod
    def close(self) -> None:
        """Release resources."""

    @property
    @abstractmethod
    def output_path(self) -> str:
        """Where statements end up (for logs)."""

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class SqliteStatementSink(StatementSink):
    """Execute statements against a SQLite database file.

    Each statement is committed on its own; tables must already exist.
    """

    def __init__(self, db_path: str, timeout: float = 30.0):
        self._db_path = Path(db_path)
        self._timeout = timeout
        self._conn: Optional[sqlite3.Connection] = None
        self.executed = 0

    @property
    def output_path(self) -> str:
        return str(self._db_path)

    @property
    def connection(self) -> Optional[sqlite3.Connection]:
        return self._conn

    def open(self) -> None:
        if self._conn is not None:
            return
        self._conn = sqlite3.connect(str(self._db_path), timeout=self._timeout)
        logger.info(f"SQLite output -> {self._db_path}")

    def execute(self, statement: BatchStatement) -> None:
        if self._conn is None:
            raise RuntimeError("SqliteStatementSink is not opened")
        try:
            self._conn.execute(statement.to_sql())
            self._conn.commit()
        except sqlite3.Error as e:
            self._conn.rollback()
            raise SinkError(str(e), statement) from e
        self.executed += 1

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.info(f"SQLite database closed: {self._db_path}")


class SqlScriptSink(StatementSink):
    """Write rendered statements to a text stream, one per line."""

    def __init__(self, stream: TextIO, name: str = "<stream>"):
        self._stream = stream
        self._name = name
        self.executed = 0

    @property
    def output_path(self) -> str:
        return self._name

    def open(self) -> None:
        pass

    def execute(self, statement: BatchStatement) -> None:
        self._stream.write(statement.to_sql())
        self._stream.write("\n")
        self.executed += 1

    def close(self) -> None:
        self._stream.flush()
