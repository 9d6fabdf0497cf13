"""Render Python values and names as SQL literals."""
import json, re
from decimal import Decimal
from typing import Any

_BARE_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def quote_literal(value: Any) -> str:
    """Return ``value`` as a SQL literal.

    Nested objects and arrays are stored as their JSON text.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (dict, list)):
        value = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return "'" + str(value).replace("'", "''") + "'"


def quote_identifier(name: str) -> str:
    if _BARE_IDENTIFIER.match(name):
        return name
    return '"' + name.replace('"', '""') + '"'
