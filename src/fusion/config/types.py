"""Value type tags and stored-value rules for the configuration store.

ValueType is the static type a ConfigOption declares. The store itself
holds raw values of a closed set of Python types (see is_storable_value);
conversion to the declared type happens on read.
"""

import collections.abc as _abc
import datetime as _datetime
import enum as _enum
import typing as _typing

# =============================================================================
# Numeric limits
# =============================================================================

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

FLOAT32_MAX = 3.4028234663852886e38
"""Largest finite single-precision value."""

FLOAT32_MIN = 1.401298464324817e-45
"""Smallest positive (subnormal) single-precision value."""


# =============================================================================
# Type tags
# =============================================================================


class ValueType(_enum.Enum):
    """Static type declared by a ConfigOption."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    """32-bit signed integer."""

    LONG = "long"
    """64-bit signed integer."""

    FLOAT = "float"
    """Single-precision float (range checked, stored as a Python float)."""

    DOUBLE = "double"
    STRING = "string"
    DURATION = "duration"
    ENUM = "enum"
    MAP = "map"
    """Mapping of str to str. Eligible for prefix-map expansion."""


# =============================================================================
# Stored values
# =============================================================================

_SCALAR_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    str,
    bytes,
    bytearray,
    _datetime.timedelta,
    _enum.Enum,
)

StoredValue: _typing.TypeAlias = _typing.Any
"""A raw value held by the store. Validated by is_storable_value()."""


def _is_string_map(value: _typing.Any) -> bool:
    return isinstance(value, _abc.Mapping) and all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    )


def is_storable_value(value: _typing.Any) -> bool:
    """
    Check whether a value may be held by the store.

    Allowed: bool, int, float, str, bytes/bytearray, timedelta, enum members,
    a mapping of str to str, and a list/tuple whose items are any of those
    (lists of maps back list-valued map options).
    """
    if isinstance(value, _SCALAR_TYPES):
        return True
    if isinstance(value, _abc.Mapping):
        return _is_string_map(value)
    if isinstance(value, (list, tuple)):
        return all(isinstance(item, _SCALAR_TYPES) or _is_string_map(item) for item in value)
    return False


def _copy_item(value: _typing.Any) -> _typing.Any:
    if isinstance(value, _abc.Mapping):
        return dict(value)
    if isinstance(value, bytearray):
        return bytearray(value)
    return value


def copy_stored_value(value: _typing.Any) -> StoredValue:
    """
    Copy the mutable parts of a storable value.

    Mappings become dicts and tuples become lists; list items are copied
    one level deep, so no container is shared with the caller.
    """
    if isinstance(value, (list, tuple)):
        return [_copy_item(item) for item in value]
    return _copy_item(value)


def normalize_stored_value(value: _typing.Any) -> StoredValue:
    """
    Return the form in which a value is kept by the store.

    Containers are copied so later mutation by the caller cannot reach
    into the store.

    Raises:
        TypeError: If the value is not storable.
    """
    if not is_storable_value(value):
        raise TypeError(
            f"Unsupported configuration value type: {type(value).__name__} ({value!r})"
        )
    return copy_stored_value(value)
