"""
Naming helpers shared by the analyzer and the backends.

Synthesized entity names, reserved identifier escaping and the
UPPER_CASE form used for enum member labels.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

# Schema names that collide with target-language keywords
RESERVED_IDENTIFIERS = frozenset({"class", "continue", "default", "enum", "goto", "interface"})

# Labels the camel-case splitter mangles, remapped after conversion.
# Only the first occurrence in a label is replaced.
CASE_CONVERSION_EXCEPTIONS = {
    "U_T_C": "UTC",
}

_CAPITAL_PATTERN = re.compile(r"([A-Z])")
_LOWERCASE_PATTERN = re.compile(r"[a-z]")


def capitalize(text: str) -> str:
    """Upper-case the first character only ("kind" -> "Kind", "dataId" -> "DataId")."""
    return text[:1].upper() + text[1:]


def synthesized_name(enclosing_name: str, property_name: str) -> str:
    """Name of an entity synthesized for an inline enum or object property."""
    return f"{enclosing_name}{capitalize(property_name)}"


def escape_reserved_word(name: str, extra_reserved: Iterable[str] = ()) -> str:
    """Append "_" to reserved identifiers; other names pass through unchanged."""
    if name in RESERVED_IDENTIFIERS or name in extra_reserved:
        return f"{name}_"
    return name


def camel_case_to_upper_case(value: str) -> tuple[str, bool]:
    """
    Convert a mixed-case enum value to its UPPER_CASE label.

    Examples:
        "pause" -> ("PAUSE", False)
        "dataBreakpoint" -> ("DATA_BREAKPOINT", False)
        "function breakpoint" -> ("FUNCTION_BREAKPOINT", False)
        "MD5" -> ("MD5", True)
        "timestampUTC" -> ("TIMESTAMP_UTC", True)

    Args:
        value: The wire-format enum value

    Returns:
        The label, and whether it needs an explicit serialized name because
        lower-casing it back does not reproduce the value
    """
    if not _LOWERCASE_PATTERN.search(value):
        return value, True

    result = _CAPITAL_PATTERN.sub(r"_\1", value).upper().replace(" ", "_")
    for mangled, fixed in CASE_CONVERSION_EXCEPTIONS.items():
        if mangled in result:
            return result.replace(mangled, fixed, 1), True
    return result, False
