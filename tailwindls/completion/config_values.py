"""
Typed accessors over the raw configuration tree.

The configuration file is parsed into plain Python values
(str | int | float | bool | None | dict | list). These helpers check the
shape of a value before the merger uses it and raise ConfigShapeError
naming the offending field otherwise.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Union

RawValue = Union[str, int, float, bool, None, Mapping[str, Any], Sequence[Any]]

HEX_DIGITS = "0123456789ABCDEF"


class ConfigShapeError(ValueError):
    """A configuration value does not have the expected shape."""

    def __init__(self, field: str, expected: str, value: Any) -> None:
        super().__init__(
            f"{field}: expected {expected}, got {type(value).__name__}"
        )
        self.field = field
        self.expected = expected
        self.value = value


def as_mapping(value: RawValue, field: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigShapeError(field, "a mapping", value)
    return value


def as_sequence(value: RawValue, field: str) -> Sequence[Any]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ConfigShapeError(field, "a list", value)
    return value


def as_text(value: RawValue, field: str) -> str:
    """Accept strings and numbers (YAML turns `18:` into an int)."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigShapeError(field, "a string", value)
    return str(value)


def normalize_hex(value: RawValue) -> str | None:
    """
    Normalize a color value to six uppercase hex digits.

    A leading '#' is stripped. Eight digit values drop their alpha channel,
    three digit shorthand is expanded. Anything else returns None.

    >>> normalize_hex("#fff")
    'FFFFFF'
    >>> normalize_hex("FFFFFFAA")
    'FFFFFF'
    >>> normalize_hex("12G") is None
    True
    """
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return None

    content = str(value).strip().upper()
    if content.startswith("#"):
        content = content[1:]
    if not content or any(c not in HEX_DIGITS for c in content):
        return None

    if len(content) in (6, 8):
        return content[:6]
    if len(content) == 3:
        return "".join(c * 2 for c in content)

    return None
