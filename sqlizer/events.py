"""Structural parse events produced by the tokenizer adapter."""
import enum
from typing import Any, NamedTuple


class EventKind(enum.Enum):
    START_DOCUMENT = "start_document"
    END_DOCUMENT = "end_document"
    START_OBJECT = "start_object"
    END_OBJECT = "end_object"
    START_ARRAY = "start_array"
    END_ARRAY = "end_array"
    KEY = "key"
    VALUE = "value"


class ParseEvent(NamedTuple):
    kind: EventKind
    value: Any = None

    @classmethod
    def start_document(cls):
        return cls(EventKind.START_DOCUMENT)

    @classmethod
    def end_document(cls):
        return cls(EventKind.END_DOCUMENT)

    @classmethod
    def start_object(cls):
        return cls(EventKind.START_OBJECT)

    @classmethod
    def end_object(cls):
        return cls(EventKind.END_OBJECT)

    @classmethod
    def start_array(cls):
        return cls(EventKind.START_ARRAY)

    @classmethod
    def end_array(cls):
        return cls(EventKind.END_ARRAY)

    @classmethod
    def key(cls, name: str):
        return cls(EventKind.KEY, name)

    @classmethod
    def scalar(cls, value: Any):
        return cls(EventKind.VALUE, value)


# ijson basic_parse event name -> kind
IJSON_EVENTS = {
    "start_map": EventKind.START_OBJECT,
    "end_map": EventKind.END_OBJECT,
    "start_array": EventKind.START_ARRAY,
    "end_array": EventKind.END_ARRAY,
    "map_key": EventKind.KEY,
    "null": EventKind.VALUE,
    "boolean": EventKind.VALUE,
    "integer": EventKind.VALUE,
    "double": EventKind.VALUE,
    "number": EventKind.VALUE,
    "string": EventKind.VALUE,
}
