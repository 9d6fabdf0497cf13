#!/usr/bin/env python3
"""Constant-memory JSON event stream on top of ijson."""
import ijson, logging
from typing import BinaryIO, Iterator

from sqlizer.errors import StructuralError
from sqlizer.events import IJSON_EVENTS, EventKind, ParseEvent

logger = logging.getLogger(__name__)

DEFAULT_BUF_SIZE = 16384  # 16k chunks

_OPENERS = (EventKind.START_OBJECT, EventKind.START_ARRAY)
_CLOSERS = (EventKind.END_OBJECT, EventKind.END_ARRAY)


class StreamingJSONParser:
    def auto_detect_json_structure(self, path: str) -> str:
        """Return 'array', 'object', or 'unknown'."""
        try:
            with open(path, 'rb') as f:
                while True:
                    ch = f.read(1)
                    if not ch:
                        return 'unknown'
                    if not ch.isspace():
                        if ch == b'[':
                            return 'array'
                        if ch == b'{':
                            return 'object'
                        return 'unknown'
        except OSError as e:
            logger.error(f"detect structure failed: {e}")
            return 'unknown'

    def iter_events(self, stream: BinaryIO, buf_size: int = DEFAULT_BUF_SIZE) -> Iterator[ParseEvent]:
        """Yield parse events for every top-level value in ``stream``.

        Concatenated values are accepted; each one is framed by a
        START_DOCUMENT / END_DOCUMENT pair.
        """
        depth = 0
        try:
            for name, value in ijson.basic_parse(
                stream, buf_size=buf_size, multiple_values=True, use_float=True
            ):
                kind = IJSON_EVENTS[name]
                if depth == 0:
                    yield ParseEvent.start_document()
                if kind in _OPENERS:
                    depth += 1
                elif kind in _CLOSERS:
                    depth -= 1
                if kind in (EventKind.KEY, EventKind.VALUE):
                    yield ParseEvent(kind, value)
                else:
                    yield ParseEvent(kind)
                if depth == 0:
                    yield ParseEvent.end_document()
        except ijson.JSONError as e:
            logger.error(f"stream parse failed: {e}")
            raise StructuralError(f"Failed to parse JSON: {e}") from e

    def iter_path_events(self, path: str, buf_size: int = DEFAULT_BUF_SIZE) -> Iterator[ParseEvent]:
        """Yield parse events from a file without loading it."""
        with open(path, 'rb') as f:
            yield from self.iter_events(f, buf_size=buf_size)
