#!/usr/bin/env python3
"""
KUBESHORT ERRORS - The Diagnosis Codes
--------------------------------------
Every failure raised by the codec is one of the classes below. Each error
carries the offending value so callers can report exactly what was rejected.

The codec never retries and never logs: an error is raised once and travels
unchanged to the caller.

Author: KubeShort Team
Date: 2026-01-16
"""

from typing import Any, Optional


class KubeShortError(ValueError):
    """Base class for all codec failures."""

    def __init__(self, value: Any, message: str):
        super().__init__(message)
        self.value = value
        self.message = message

    def __str__(self) -> str:
        return self.message


class ExpectedObject(KubeShortError):
    """The decode input is not a JSON object (dictionary)."""

    def __init__(self, value: Any, message: Optional[str] = None):
        super().__init__(value, message or f"expected dictionary for persistent volume, got {type(value).__name__}")


class MissingOrInvalidField(KubeShortError):
    """A field is absent or carries the wrong JSON type."""

    def __init__(self, value: Any, field: str, expected: str):
        if value is None:
            message = f"missing required field \"{field}\""
        else:
            message = f"expected {expected} for key \"{field}\", got {type(value).__name__} ({value!r})"
        super().__init__(value, message)
        self.field = field
        self.expected = expected


class UnsupportedVariant(KubeShortError):
    """The type tag does not match any registered volume variant."""

    def __init__(self, vol_type: str):
        super().__init__(vol_type, f"unsupported volume type ({vol_type})")


class EmptyUnion(KubeShortError):
    """Encode was attempted without a volume source."""

    def __init__(self, value: Any = None):
        super().__init__(value, "empty volume definition")


class UnrecognizedEnumValue(KubeShortError):
    """An enum member has no wire representation."""

    def __init__(self, value: Any, enum_name: str):
        super().__init__(value, f"unrecognized {enum_name} ({value!r})")
        self.enum_name = enum_name


class MalformedCompactValue(KubeShortError):
    """A compact comma-separated string contains an unparseable token."""

    def __init__(self, token: Any, original: Any):
        super().__init__(original, f"couldn't parse ({original}): unknown token {token!r}")
        self.token = token
        self.original = original


class SubcomponentFailure(KubeShortError):
    """
    Raised by a volume variant from inside its own decode/encode.
    The resource codec forwards it untouched so the caller sees the root cause.
    """


class InvalidSelector(SubcomponentFailure):
    """The compound identifier cannot be split into the segments a variant needs."""

    def __init__(self, selector: Any, vol_type: str, expected: str, message: Optional[str] = None):
        super().__init__(selector, message or f"expected {expected} selector segment(s) for {vol_type}, got {selector!r}")
        self.vol_type = vol_type
