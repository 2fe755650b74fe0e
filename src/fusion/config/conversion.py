"""
Conversion of raw stored values into the type an option declares.

Every converter follows the same rules:

1. Same-type fast path: a value whose runtime type already is the target
   type is returned unchanged. Types are compared exactly, so a bool is
   never accepted as an int.
2. Range checks: narrowing to a fixed-width number (int32, int64, float32)
   fails with ValueOverflowError instead of truncating.
3. Text fallback: anything else is rendered with to_text() and parsed with
   the target's textual grammar. Parse failures raise MalformedValueError.

convert_to_string is the exception: it casts, it does not stringify.
"""

import collections.abc as _abc
import datetime as _datetime
import enum as _enum
import re as _re
import typing as _typing

import pydantic as _pydantic

import fusion.config.errors as errors
import fusion.config.types as types

E = _typing.TypeVar("E", bound=_enum.Enum)

LIST_SEPARATOR = ";"
MAP_ENTRY_SEPARATOR = ","
MAP_KEY_VALUE_SEPARATOR = ":"

_INTEGER_RE = _re.compile(r"[+-]?\d+")
_DURATION_RE = _re.compile(r"(?P<amount>[+-]?\d+(?:\.\d+)?)\s*(?P<unit>[a-zA-Zµ]*)")

_DURATION_UNITS: dict[str, float] = {}
"""Time unit spelling -> length in seconds."""
for _names, _seconds in (
    (("ns", "nano", "nanos", "nanosecond", "nanoseconds"), 1e-9),
    (("us", "µs", "micro", "micros", "microsecond", "microseconds"), 1e-6),
    (("", "ms", "milli", "millis", "millisecond", "milliseconds"), 1e-3),
    (("s", "sec", "secs", "second", "seconds"), 1.0),
    (("m", "min", "mins", "minute", "minutes"), 60.0),
    (("h", "hour", "hours"), 3600.0),
    (("d", "day", "days"), 86400.0),
):
    for _name in _names:
        _DURATION_UNITS[_name] = _seconds

_TIMEDELTA_ADAPTER = _pydantic.TypeAdapter(_datetime.timedelta)


# =============================================================================
# Helpers
# =============================================================================


def to_text(value: _typing.Any) -> str:
    """
    Render a stored value in its canonical text form.

    Booleans render as true/false and enum members by name. Durations render
    in whole milliseconds when exact, else in microseconds. Lists are joined
    with ';' and maps render as 'k:v,k:v'.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, _enum.Enum):
        return value.name
    if isinstance(value, _datetime.timedelta):
        millis = value / _datetime.timedelta(milliseconds=1)
        if millis == int(millis):
            return f"{int(millis)} ms"
        return f"{value // _datetime.timedelta(microseconds=1)} us"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, _abc.Mapping):
        return MAP_ENTRY_SEPARATOR.join(
            f"{k}{MAP_KEY_VALUE_SEPARATOR}{to_text(v)}" for k, v in value.items()
        )
    if isinstance(value, (list, tuple)):
        return LIST_SEPARATOR.join(to_text(item) for item in value)
    return str(value)


def _malformed(value: _typing.Any, target: str, detail: str = "") -> errors.MalformedValueError:
    message = f"Could not parse value '{to_text(value)}' for type {target}"
    if detail:
        message = f"{message}: {detail}"
    return errors.MalformedValueError(message, value=value, target=target)


def _parse_integer(value: _typing.Any, target: str) -> int:
    if type(value) is int:
        return value
    text = to_text(value).strip()
    if not _INTEGER_RE.fullmatch(text):
        raise _malformed(value, target)
    return int(text)


def _overflow(value: _typing.Any, target: str) -> errors.ValueOverflowError:
    return errors.ValueOverflowError(
        f"Configuration value {to_text(value)} overflows/underflows the {target} type.",
        value=value,
        target=target,
    )


def _check_range(number: int, low: int, high: int, value: _typing.Any, target: str) -> int:
    if number < low or number > high:
        raise _overflow(value, target)
    return number


def _parse_float(value: _typing.Any, target: str) -> float:
    if type(value) is float:
        return value
    if type(value) is int:
        try:
            return float(value)
        except OverflowError:
            raise _overflow(value, target) from None
    try:
        return float(to_text(value).strip())
    except ValueError:
        raise _malformed(value, target) from None


# =============================================================================
# Scalar converters
# =============================================================================


def convert_to_boolean(value: _typing.Any) -> bool:
    """Convert to bool. Text must be 'true' or 'false' (case-insensitive)."""
    if type(value) is bool:
        return value
    text = to_text(value).upper()
    if text == "TRUE":
        return True
    if text == "FALSE":
        return False
    raise errors.MalformedValueError(
        f"Unrecognized option for boolean: {to_text(value)}. "
        "Expected either true or false (case insensitive)",
        value=value,
        target="boolean",
    )


def convert_to_integer(value: _typing.Any) -> int:
    """Convert to a 32-bit signed integer."""
    number = _parse_integer(value, "integer")
    return _check_range(number, types.INT32_MIN, types.INT32_MAX, value, "integer")


def convert_to_long(value: _typing.Any) -> int:
    """Convert to a 64-bit signed integer."""
    number = _parse_integer(value, "long")
    return _check_range(number, types.INT64_MIN, types.INT64_MAX, value, "long")


def convert_to_float(value: _typing.Any) -> float:
    """
    Convert to a single-precision float.

    The result is a Python float. Zero and magnitudes within the float32
    range pass; anything else (including inf and nan) overflows.
    """
    number = _parse_float(value, "float")
    magnitude = abs(number)
    if number == 0.0 or types.FLOAT32_MIN <= magnitude <= types.FLOAT32_MAX:
        return number
    raise _overflow(value, "float")


def convert_to_double(value: _typing.Any) -> float:
    """Convert to a double-precision float."""
    return _parse_float(value, "double")


def convert_to_string(value: _typing.Any) -> str:
    """
    Cast a stored value to str.

    Raises:
        ConversionTypeError: If the value is not already a str.
    """
    if type(value) is str:
        return value
    raise errors.ConversionTypeError(
        f"Convert to String failed: {type(value).__name__}",
        value=value,
    )


def convert_to_duration(value: _typing.Any) -> _datetime.timedelta:
    """
    Convert to a timedelta.

    Accepted text forms:
    - '<amount> <unit>' such as '500 ms', '10s', '1.5 min' (no unit = ms)
    - ISO-8601 durations ('PT10S') and '[-][DD ][HH:MM]SS' forms

    timedelta has microsecond resolution: a non-zero amount that would
    round to zero, or one beyond the timedelta range, raises
    ValueOverflowError.
    """
    if type(value) is _datetime.timedelta:
        return value
    text = to_text(value).strip()
    match = _DURATION_RE.fullmatch(text)
    if match:
        seconds = _DURATION_UNITS.get(match.group("unit").lower())
        if seconds is None:
            raise _malformed(value, "duration", f"unknown time unit '{match.group('unit')}'")
        amount = float(match.group("amount"))
        try:
            duration = _datetime.timedelta(seconds=amount * seconds)
        except OverflowError:
            raise _overflow(value, "duration") from None
        # Below the microsecond resolution of timedelta
        if amount and not duration:
            raise _overflow(value, "duration")
        return duration
    try:
        return _TIMEDELTA_ADAPTER.validate_python(text)
    except _pydantic.ValidationError:
        raise _malformed(value, "duration") from None


def convert_to_enum(value: _typing.Any, enum_class: type[E]) -> E:
    """
    Convert to a member of enum_class.

    The text form of the value (member name for enum members) is upper-cased
    and compared with the member names.
    """
    if type(value) is enum_class:
        return value
    name = to_text(value).upper()
    for member in enum_class:
        if member.name == name:
            return member
    variants = [member.name for member in enum_class]
    raise errors.UnknownEnumVariantError(
        f"Could not parse value for enum {enum_class.__name__}. "
        f"Expected one of: [{', '.join(variants)}]",
        value=value,
        target=enum_class.__name__,
        variants=variants,
    )


def convert_to_properties(value: _typing.Any) -> dict[str, str]:
    """
    Convert to a mapping of str to str.

    Mappings are copied (values must be str); text is parsed as
    'k1:v1,k2:v2'.
    """
    if isinstance(value, _abc.Mapping):
        return {str(k): convert_to_string(v) for k, v in value.items()}
    text = to_text(value).strip()
    result: dict[str, str] = {}
    if not text:
        return result
    for entry in text.split(MAP_ENTRY_SEPARATOR):
        key, sep, item = entry.partition(MAP_KEY_VALUE_SEPARATOR)
        if not sep or not key.strip():
            raise _malformed(value, "map", f"entry '{entry}' is not of the form key:value")
        result[key.strip()] = item.strip()
    return result


# =============================================================================
# Dispatch
# =============================================================================

_SCALAR_CONVERTERS: dict[types.ValueType, _typing.Callable[[_typing.Any], _typing.Any]] = {
    types.ValueType.BOOLEAN: convert_to_boolean,
    types.ValueType.INTEGER: convert_to_integer,
    types.ValueType.LONG: convert_to_long,
    types.ValueType.FLOAT: convert_to_float,
    types.ValueType.DOUBLE: convert_to_double,
    types.ValueType.STRING: convert_to_string,
    types.ValueType.DURATION: convert_to_duration,
    types.ValueType.MAP: convert_to_properties,
}


def convert_scalar(
    value: _typing.Any,
    value_type: types.ValueType,
    enum_class: type[_enum.Enum] | None = None,
) -> _typing.Any:
    """Convert a single value to value_type."""
    if value_type is types.ValueType.ENUM:
        if enum_class is None:
            raise ValueError("Enum conversion requires an enum class")
        return convert_to_enum(value, enum_class)
    return _SCALAR_CONVERTERS[value_type](value)


def convert_to_list(
    value: _typing.Any,
    value_type: types.ValueType,
    enum_class: type[_enum.Enum] | None = None,
) -> list[_typing.Any]:
    """
    Convert to a list of value_type.

    Lists and tuples are converted element-wise; text is split on ';'.
    """
    if isinstance(value, (list, tuple)):
        items: _typing.Sequence[_typing.Any] = value
    else:
        text = to_text(value)
        items = [item.strip() for item in text.split(LIST_SEPARATOR)] if text.strip() else []
    return [convert_scalar(item, value_type, enum_class) for item in items]


def convert_value(
    value: _typing.Any,
    value_type: types.ValueType,
    enum_class: type[_enum.Enum] | None = None,
    *,
    is_list: bool = False,
) -> _typing.Any:
    """Convert a raw stored value to the declared type of an option."""
    if is_list:
        return convert_to_list(value, value_type, enum_class)
    return convert_scalar(value, value_type, enum_class)

