"""Streaming JSON to SQL bulk loading."""
from sqlizer.errors import (
    SqlizerError,
    StructuralError,
    ProjectionError,
    ColumnMismatchError,
    SinkError,
)
from sqlizer.events import EventKind, ParseEvent
from sqlizer.assembler import DocumentAssembler
from sqlizer.projector import Record, RecordProjector
from sqlizer.batcher import AccumulatorState, BatchAccumulator, BatchStatement
from sqlizer.pipeline import LoadStats, StreamLoader
from sqlizer.settings import LoaderSettings

__all__ = [
    "SqlizerError",
    "StructuralError",
    "ProjectionError",
    "ColumnMismatchError",
    "SinkError",
    "EventKind",
    "ParseEvent",
    "DocumentAssembler",
    "Record",
    "RecordProjector",
    "AccumulatorState",
    "BatchAccumulator",
    "BatchStatement",
    "LoadStats",
    "StreamLoader",
    "LoaderSettings",
]
