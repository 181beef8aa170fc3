#!/usr/bin/env python3
"""
KUBESHORT ACCESS MODES - Compact List Codec
-------------------------------------------
Access modes travel as one comma-separated string ("ro,rw-once") instead of
a JSON array. Order is preserved in both directions.

Author: KubeShort Team
Date: 2026-01-16
"""

import json
from typing import Any, Iterable, List, Optional

from kubeshort.core.errors import MalformedCompactValue, UnrecognizedEnumValue
from kubeshort.core.models import AccessMode

MODE_TO_SYMBOL = {
    AccessMode.READ_ONLY_MANY: "ro",
    AccessMode.READ_WRITE_MANY: "rw",
    AccessMode.READ_WRITE_ONCE: "rw-once",
}
SYMBOL_TO_MODE = {symbol: mode for mode, symbol in MODE_TO_SYMBOL.items()}


def access_modes_to_string(modes: Optional[Iterable[Any]]) -> str:
    """
    Renders the compact form. An absent or empty list becomes "".
    Raises UnrecognizedEnumValue for anything outside AccessMode.
    """
    if not modes:
        return ""

    symbols = []
    for mode in modes:
        symbol = MODE_TO_SYMBOL.get(mode) if isinstance(mode, AccessMode) else None
        if symbol is None:
            raise UnrecognizedEnumValue(mode, "access mode")
        symbols.append(symbol)

    return ",".join(symbols)


def access_modes_from_string(s: str) -> List[AccessMode]:
    """
    Parses the compact form. "" yields an empty list.
    Raises MalformedCompactValue naming the first unknown token.
    """
    if s == "":
        return []

    modes = []
    for token in s.split(","):
        mode = SYMBOL_TO_MODE.get(token)
        if mode is None:
            raise MalformedCompactValue(token, s)
        modes.append(mode)

    return modes


def access_modes_to_json(modes: Optional[Iterable[Any]]) -> str:
    """Encodes the list as a single JSON string value."""
    return json.dumps(access_modes_to_string(modes))


def access_modes_from_json(data: str) -> List[AccessMode]:
    """Decodes a JSON document that must hold exactly one string value."""
    try:
        value = json.loads(data)
    except json.JSONDecodeError:
        raise MalformedCompactValue(data, data)

    if not isinstance(value, str):
        raise MalformedCompactValue(value, data)

    return access_modes_from_string(value)
