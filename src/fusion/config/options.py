"""
Fluent builder for ConfigOption.

    >>> import fusion.config.options as options
    >>> port = options.key("net.port").int_type().default_value(8080)
    >>> ports = options.key("net.ports").int_type().as_list().default_values(8000, 8001)
    >>> labels = options.key("app.labels").map_type().no_default_value()

The builder carries no semantics of its own; it only fixes the key and type
before handing everything to the ConfigOption constructor.
"""

from __future__ import annotations

import datetime as _datetime
import enum as _enum
import typing as _typing

import fusion.config.option as option
import fusion.config.types as types

T = _typing.TypeVar("T")
E = _typing.TypeVar("E", bound=_enum.Enum)


def key(name: str) -> OptionBuilder:
    """
    Start declaring an option.

    Raises:
        TypeError: If name is None.
    """
    if name is None:
        raise TypeError("Option key must not be None")
    return OptionBuilder(name)


class OptionBuilder:
    """Second step: choose the value type."""

    def __init__(self, name: str) -> None:
        self._key = name

    def _typed(
        self,
        value_type: types.ValueType,
        enum_class: type[_enum.Enum] | None = None,
    ) -> TypedConfigOptionBuilder[_typing.Any]:
        return TypedConfigOptionBuilder(self._key, value_type, enum_class)

    def boolean_type(self) -> TypedConfigOptionBuilder[bool]:
        return self._typed(types.ValueType.BOOLEAN)

    def int_type(self) -> TypedConfigOptionBuilder[int]:
        """32-bit signed integer."""
        return self._typed(types.ValueType.INTEGER)

    def long_type(self) -> TypedConfigOptionBuilder[int]:
        """64-bit signed integer."""
        return self._typed(types.ValueType.LONG)

    def float_type(self) -> TypedConfigOptionBuilder[float]:
        """Single-precision float."""
        return self._typed(types.ValueType.FLOAT)

    def double_type(self) -> TypedConfigOptionBuilder[float]:
        return self._typed(types.ValueType.DOUBLE)

    def string_type(self) -> TypedConfigOptionBuilder[str]:
        return self._typed(types.ValueType.STRING)

    def duration_type(self) -> TypedConfigOptionBuilder[_datetime.timedelta]:
        return self._typed(types.ValueType.DURATION)

    def enum_type(self, enum_class: type[E]) -> TypedConfigOptionBuilder[E]:
        if enum_class is None:
            raise TypeError("Enum class must not be None")
        return self._typed(types.ValueType.ENUM, enum_class)

    def map_type(self) -> TypedConfigOptionBuilder[dict[str, str]]:
        """Mapping of str to str; also readable from 'key.*' entries."""
        return self._typed(types.ValueType.MAP)


class TypedConfigOptionBuilder(_typing.Generic[T]):
    """Third step: give a default, declare no default, or switch to a list."""

    def __init__(
        self,
        name: str,
        value_type: types.ValueType,
        enum_class: type[_enum.Enum] | None = None,
    ) -> None:
        self._key = name
        self._value_type = value_type
        self._enum_class = enum_class

    def default_value(self, value: T) -> option.ConfigOption[T]:
        return option.ConfigOption(
            self._key,
            self._value_type,
            default_value=value,
            enum_class=self._enum_class,
        )

    def no_default_value(self) -> option.ConfigOption[T]:
        return option.ConfigOption(self._key, self._value_type, enum_class=self._enum_class)

    def as_list(self) -> ListConfigOptionBuilder[T]:
        return ListConfigOptionBuilder(self._key, self._value_type, self._enum_class)


class ListConfigOptionBuilder(_typing.Generic[T]):
    """Final step for list-valued options."""

    def __init__(
        self,
        name: str,
        value_type: types.ValueType,
        enum_class: type[_enum.Enum] | None = None,
    ) -> None:
        self._key = name
        self._value_type = value_type
        self._enum_class = enum_class

    def default_values(self, *values: T) -> option.ConfigOption[list[T]]:
        return option.ConfigOption(
            self._key,
            self._value_type,
            default_value=list(values),
            is_list=True,
            enum_class=self._enum_class,
        )

    def no_default_values(self) -> option.ConfigOption[list[T]]:
        return option.ConfigOption(
            self._key,
            self._value_type,
            is_list=True,
            enum_class=self._enum_class,
        )


# =============================================================================
# Shortcuts
# =============================================================================


def get_boolean_config_option(name: str) -> option.ConfigOption[bool]:
    """Boolean option without a default."""
    return key(name).boolean_type().no_default_value()


def get_integer_config_option(name: str) -> option.ConfigOption[int]:
    """Integer option without a default."""
    return key(name).int_type().no_default_value()


def get_long_config_option(name: str) -> option.ConfigOption[int]:
    """Long option without a default."""
    return key(name).long_type().no_default_value()


def get_float_config_option(name: str) -> option.ConfigOption[float]:
    """Float option without a default."""
    return key(name).float_type().no_default_value()


def get_double_config_option(name: str) -> option.ConfigOption[float]:
    """Double option without a default."""
    return key(name).double_type().no_default_value()
