"""Project assembled documents onto (table, columns, values) records."""
import logging
from typing import Any, Dict, NamedTuple, Tuple

from sqlizer.errors import ProjectionError

logger = logging.getLogger(__name__)

DEFAULT_TYPE_KEY = "$type"
DEFAULT_RESERVED_PREFIX = "$"


class Record(NamedTuple):
    table: str
    columns: Tuple[str, ...]
    values: Tuple[Any, ...]


class RecordProjector:
    """Pick the entity type and a sorted column set out of a document.

    Column order depends only on the key names, never on the order the
    keys had in the source document.
    """

    def __init__(self, type_key: str = DEFAULT_TYPE_KEY,
                 reserved_prefix: str = DEFAULT_RESERVED_PREFIX):
        self.type_key = type_key
        self.reserved_prefix = reserved_prefix

    def _is_reserved(self, key: str) -> bool:
        if key == self.type_key:
            return True
        return bool(self.reserved_prefix) and key.startswith(self.reserved_prefix)

    def project(self, doc: Dict[str, Any]) -> Record:
        if not isinstance(doc, dict):
            raise ProjectionError("document is not an object", doc)
        table = doc.get(self.type_key)
        if not isinstance(table, str) or not table:
            raise ProjectionError(f"document has no '{self.type_key}' entity type", doc)
        columns = tuple(sorted(k for k in doc if not self._is_reserved(k)))
        return Record(table, columns, tuple(doc[c] for c in columns))
