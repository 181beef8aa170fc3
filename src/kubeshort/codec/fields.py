#!/usr/bin/env python3
"""
KUBESHORT FIELD READERS
-----------------------
Typed accessors over a decoded flat object. Absent keys yield None;
present keys with the wrong JSON type raise MissingOrInvalidField.

Author: KubeShort Team
Date: 2026-01-16
"""

from typing import Any, Dict, Mapping, Optional

from kubeshort.core.errors import MissingOrInvalidField


def get_string_entry(obj: Mapping[str, Any], key: str) -> str:
    """Required string field."""
    value = obj.get(key)
    if not isinstance(value, str):
        raise MissingOrInvalidField(value, key, "string")
    return value


def get_optional_string(obj: Mapping[str, Any], key: str) -> Optional[str]:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MissingOrInvalidField(value, key, "string")
    return value


def get_optional_int(obj: Mapping[str, Any], key: str) -> Optional[int]:
    value = obj.get(key)
    if value is None:
        return None
    # bool is an int subclass; JSON true/false is not a number
    if isinstance(value, bool) or not isinstance(value, int):
        raise MissingOrInvalidField(value, key, "integer")
    return value


def get_bool(obj: Mapping[str, Any], key: str) -> bool:
    value = obj.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise MissingOrInvalidField(value, key, "boolean")
    return value


def get_quantity(obj: Mapping[str, Any], key: str) -> Optional[str]:
    """Quantities are strings on the wire, but bare numbers are accepted."""
    value = obj.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise MissingOrInvalidField(value, key, "quantity")
    return str(value)


def get_string_map(obj: Mapping[str, Any], key: str) -> Dict[str, str]:
    value = obj.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise MissingOrInvalidField(value, key, "dictionary")
    for k, v in value.items():
        if not isinstance(v, str):
            raise MissingOrInvalidField(v, f"{key}.{k}", "string")
    return dict(value)


def get_object(obj: Mapping[str, Any], key: str) -> Optional[Mapping[str, Any]]:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise MissingOrInvalidField(value, key, "dictionary")
    return value
