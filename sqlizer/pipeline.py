#!/usr/bin/env python3
"""Drive a JSON byte stream through assembly, projection and batching into a sink."""
import logging, time
from dataclasses import asdict, dataclass, field
from typing import Any, BinaryIO, Callable, Dict, Optional

from sqlizer.assembler import DocumentAssembler
from sqlizer.batcher import BatchAccumulator, BatchStatement
from sqlizer.errors import SqlizerError
from sqlizer.events import ParseEvent
from sqlizer.metrics import batches_counter, documents_counter, errors_counter, flush_duration, rows_counter
from sqlizer.projector import RecordProjector
from sqlizer.sanitize import quote_literal
from sqlizer.settings import LoaderSettings
from sqlizer.sinks import StatementSink
from sqlizer.streaming_parser import StreamingJSONParser

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 100000


@dataclass
class LoadStats:
    documents: int = 0
    rows: int = 0
    batches: int = 0
    tables: Dict[str, int] = field(default_factory=dict)
    seconds: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class StreamLoader:
    """Load one JSON stream into a statement sink.

    Every flushed statement is executed before the next event is read, so
    at most one statement is in flight. The sink must already be open.
    """

    def __init__(self, sink: StatementSink, settings: Optional[LoaderSettings] = None,
                 sanitize: Callable[[Any], str] = quote_literal):
        self.settings = settings or LoaderSettings()
        self.sink = sink
        self.parser = StreamingJSONParser()
        self.assembler = DocumentAssembler()
        self.projector = RecordProjector(self.settings.type_key, self.settings.reserved_prefix)
        self.accumulator = BatchAccumulator(self.settings.max_rows_per_batch, sanitize)
        self.stats = LoadStats()
        # flushed out of the accumulator but not yet accepted by the sink
        self._in_flight: Optional[BatchStatement] = None
        self._finishing = False

    @property
    def buffered_rows(self) -> int:
        in_flight = 0 if self._in_flight is None else self._in_flight.row_count
        return in_flight + self.accumulator.pending_rows

    def feed(self, event: ParseEvent) -> None:
        doc = self.assembler.feed(event)
        if doc is None:
            return
        record = self.projector.project(doc)
        self._execute(self.accumulator.add_record(record))
        self.stats.documents += 1
        documents_counter.inc()
        if self.stats.documents % PROGRESS_EVERY == 0:
            logger.info("%s documents | %s rows written", self.stats.documents, self.stats.rows)

    def finish(self) -> LoadStats:
        """Flush the last partial batch."""
        self._finishing = True
        self._execute(self.accumulator.flush())
        return self.stats

    def drain(self) -> LoadStats:
        """Execute the interrupted statement, if any, then the open batch."""
        statement, self._in_flight = self._in_flight, None
        if statement is not None:
            logger.warning("Re-executing interrupted statement for %s (%d rows)",
                           statement.table, statement.row_count)
            self._execute(statement)
        return self.finish()

    def load(self, stream: BinaryIO) -> LoadStats:
        start = time.time()
        try:
            for event in self.parser.iter_events(stream, buf_size=self.settings.buffer_size):
                self.feed(event)
            self.finish()
        except KeyboardInterrupt:
            logger.warning("Interrupted; draining %d buffered rows", self.buffered_rows)
            try:
                self.drain()
            except SqlizerError as e:
                logger.error("Drain failed, %d rows not persisted: %s", self.buffered_rows, e)
            raise
        except SqlizerError as e:
            errors_counter.labels(kind=type(e).__name__).inc()
            if e.document_index is None and not self._finishing:
                e.document_index = self.stats.documents + 1
            where = "end of stream" if e.document_index is None else f"document {e.document_index}"
            logger.error("Failed at %s: %s", where, e)
            raise
        finally:
            self.stats.seconds = time.time() - start
        logger.info("Done %s documents, %s rows in %s batches in %.2fs",
                    self.stats.documents, self.stats.rows, self.stats.batches, self.stats.seconds)
        return self.stats

    def load_path(self, path: str) -> LoadStats:
        with open(path, 'rb') as f:
            return self.load(f)

    def _execute(self, statement: Optional[BatchStatement]) -> None:
        if statement is None:
            return
        self._in_flight = statement
        with flush_duration.time():
            self.sink.execute(statement)
        self._in_flight = None
        count = statement.row_count
        self.stats.batches += 1
        self.stats.rows += count
        self.stats.tables[statement.table] = self.stats.tables.get(statement.table, 0) + count
        rows_counter.inc(count)
        batches_counter.labels(table=statement.table).inc()
