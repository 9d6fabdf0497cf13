#!/usr/bin/env python3
"""Rebuild complete JSON documents from a flat stream of parse events."""
import logging
from typing import Any, Dict, List, Optional, Union

from sqlizer.errors import StructuralError
from sqlizer.events import EventKind, ParseEvent

logger = logging.getLogger(__name__)

Frame = Union[Dict[str, Any], List[Any]]


class DocumentAssembler:
    """Turn parse events into top-level objects, one document at a time.

    Only the open containers of the document in flight are held: a stack of
    list/dict frames plus a parallel stack of keys waiting for their value.
    A top-level array is a transparent wrapper, so every object directly
    inside it comes out as its own document.
    """

    def __init__(self):
        self._stack: List[Frame] = []
        self._keys: List[str] = []
        # key stack height when each frame was opened
        self._marks: List[int] = []
        self._wrapped = False
        self._failed = False
        self._handlers = {
            EventKind.START_DOCUMENT: self._start_document,
            EventKind.END_DOCUMENT: self._end_document,
            EventKind.START_ARRAY: self._start_array,
            EventKind.END_ARRAY: self._end_array,
            EventKind.START_OBJECT: self._start_object,
            EventKind.END_OBJECT: self._end_object,
            EventKind.KEY: self._key,
            EventKind.VALUE: self._value,
        }

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def pending_keys(self) -> int:
        return len(self._keys)

    def reset(self):
        self._clear()
        self._failed = False

    def feed(self, event: ParseEvent) -> Optional[Dict[str, Any]]:
        """Consume one event; return a document when it closes a top-level object."""
        if self._failed:
            raise StructuralError("assembler stopped after malformed input")
        try:
            return self._handlers[event.kind](event.value)
        except StructuralError:
            self._failed = True
            raise

    def _clear(self):
        self._stack = []
        self._keys = []
        self._marks = []
        self._wrapped = False

    def _push(self, frame: Frame):
        self._stack.append(frame)
        self._marks.append(len(self._keys))

    def _pop(self) -> Frame:
        if len(self._keys) > self._marks[-1]:
            raise StructuralError(f"key {self._keys[-1]!r} closed without a value")
        self._marks.pop()
        return self._stack.pop()

    def _start_document(self, _):
        self._clear()
        return None

    def _end_document(self, _):
        if self._stack or self._keys or self._wrapped:
            logger.debug("open frames %d, pending keys %d at end of document",
                         len(self._stack), len(self._keys))
            raise StructuralError("parse stack not empty - malformed input")
        return None

    def _start_array(self, _):
        if self._stack:
            self._push([])
            return None
        # a bare top-level array only wraps documents; it gets no frame
        if self._wrapped:
            raise StructuralError("array directly inside the top-level array is not a document")
        self._wrapped = True
        return None

    def _end_array(self, _):
        if not self._stack:
            if not self._wrapped:
                raise StructuralError("end of array without an open array")
            self._wrapped = False
            return None
        if not isinstance(self._stack[-1], list):
            raise StructuralError("end of array while an object is open")
        self._attach(self._pop())
        return None

    def _start_object(self, _):
        self._push({})
        return None

    def _end_object(self, _):
        if not self._stack or not isinstance(self._stack[-1], dict):
            raise StructuralError("end of object without an open object")
        frame = self._pop()
        if not self._stack:
            return frame
        self._attach(frame)
        return None

    def _key(self, name):
        if not self._stack or not isinstance(self._stack[-1], dict):
            raise StructuralError(f"key {name!r} outside an object")
        if len(self._keys) > self._marks[-1]:
            raise StructuralError(f"key {name!r} while key {self._keys[-1]!r} still awaits its value")
        self._keys.append(name)
        return None

    def _value(self, value):
        if not self._stack:
            raise StructuralError(f"value {value!r} has no enclosing object")
        self._attach(value)
        return None

    def _attach(self, value):
        top = self._stack[-1]
        if isinstance(top, dict):
            if len(self._keys) <= self._marks[-1]:
                raise StructuralError(f"value {value!r} has no pending key")
            top[self._keys.pop()] = value
        else:
            top.append(value)
