"""
ConfigOption: the declaration of a single configuration setting.

An option names a canonical key, the static type of its value, an optional
default, and an ordered tuple of fallback keys consulted when the canonical
key has no value. Options are immutable; the with_* methods return new
options.

Options are normally created through the fluent builder in options.py:

    >>> import fusion.config.options as options
    >>> threshold = (
    ...     options.key("cpu.utilization.threshold")
    ...     .double_type()
    ...     .default_value(0.9)
    ...     .with_deprecated_keys("cpu.threshold")
    ... )
"""

from __future__ import annotations

import enum as _enum
import typing as _typing

import fusion.config.description as desc
import fusion.config.fallback as fallback
import fusion.config.types as types

T = _typing.TypeVar("T")


def _freeze(value: _typing.Any) -> _typing.Hashable:
    """Hashable stand-in for a default value; list items are frozen too."""
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, dict):
        return frozenset((k, _freeze(v)) for k, v in value.items())
    if isinstance(value, bytearray):
        return bytes(value)
    return value


class ConfigOption(_typing.Generic[T]):
    """
    Immutable descriptor of a configuration setting.

    Equality and hashing use the canonical key, the fallback keys (order
    sensitive) and the default value. The value type and list-ness are not
    part of equality.
    """

    __slots__ = (
        "_key",
        "_value_type",
        "_enum_class",
        "_is_list",
        "_default_value",
        "_fallback_keys",
        "_description",
    )

    def __init__(
        self,
        key: str,
        value_type: types.ValueType,
        *,
        default_value: T | None = None,
        is_list: bool = False,
        fallback_keys: _typing.Iterable[fallback.FallbackKey] = (),
        description: desc.Description = desc.EMPTY_DESCRIPTION,
        enum_class: type[_enum.Enum] | None = None,
    ) -> None:
        """
        Create an option.

        Args:
            key: Canonical key. Must be a non-empty string.
            value_type: Declared type of the value (or of list elements).
            default_value: Default, or None for "no default".
            is_list: Whether the value is a list of value_type.
            fallback_keys: Alternative keys in lookup order.
            description: Documentation attached to the option.
            enum_class: Enum class, required when value_type is ENUM.

        Raises:
            TypeError: If key or value_type is None.
            ValueError: If key is empty or an ENUM option has no enum_class.
        """
        if key is None:
            raise TypeError("Option key must not be None")
        if value_type is None:
            raise TypeError(f"Value type of option '{key}' must not be None")
        if not isinstance(key, str) or not key:
            raise ValueError(f"Option key must be a non-empty string, got {key!r}")
        if value_type is types.ValueType.ENUM and enum_class is None:
            raise ValueError(f"Enum option '{key}' requires an enum class")

        self._key = key
        self._value_type = value_type
        self._enum_class = enum_class
        self._is_list = is_list
        self._default_value = default_value
        self._fallback_keys: tuple[fallback.FallbackKey, ...] = tuple(fallback_keys)
        self._description = description

    def _replace(self, **changes: _typing.Any) -> ConfigOption[T]:
        fields: dict[str, _typing.Any] = {
            "default_value": self._default_value,
            "is_list": self._is_list,
            "fallback_keys": self._fallback_keys,
            "description": self._description,
            "enum_class": self._enum_class,
        }
        fields.update(changes)
        return ConfigOption(self._key, self._value_type, **fields)

    # -------------------------------------------------------------------------
    # Derived options
    # -------------------------------------------------------------------------

    def with_fallback_keys(self, *fallback_keys: str) -> ConfigOption[T]:
        """
        Return a copy with additional plain fallback keys.

        New keys are placed in front of all existing fallback keys, so they
        are checked first.
        """
        new_keys = tuple(fallback.FallbackKey.create_fallback_key(k) for k in fallback_keys)
        return self._replace(fallback_keys=new_keys + self._fallback_keys)

    def with_deprecated_keys(self, *deprecated_keys: str) -> ConfigOption[T]:
        """
        Return a copy with additional deprecated keys.

        New keys are placed after all existing fallback keys, so they are
        checked last.
        """
        new_keys = tuple(fallback.FallbackKey.create_deprecated_key(k) for k in deprecated_keys)
        return self._replace(fallback_keys=self._fallback_keys + new_keys)

    def with_description(self, value: str | desc.Description) -> ConfigOption[T]:
        """Return a copy with the given description (plain text or a Description)."""
        if isinstance(value, str):
            value = desc.Description.of(value)
        return self._replace(description=value)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def key(self) -> str:
        """Canonical key."""
        return self._key

    @property
    def value_type(self) -> types.ValueType:
        return self._value_type

    @property
    def enum_class(self) -> type[_enum.Enum] | None:
        return self._enum_class

    @property
    def is_list(self) -> bool:
        return self._is_list

    @property
    def default_value(self) -> T | None:
        return self._default_value

    @property
    def fallback_keys(self) -> tuple[fallback.FallbackKey, ...]:
        """Fallback keys in lookup order."""
        return self._fallback_keys

    @property
    def description(self) -> desc.Description:
        return self._description

    def has_default_value(self) -> bool:
        return self._default_value is not None

    def has_fallback_keys(self) -> bool:
        return bool(self._fallback_keys)

    # -------------------------------------------------------------------------
    # Dunder methods
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(other) is not ConfigOption:
            return NotImplemented
        return (
            self._key == other._key
            and self._fallback_keys == other._fallback_keys
            and self._default_value == other._default_value
        )

    def __hash__(self) -> int:
        return hash((self._key, self._fallback_keys, _freeze(self._default_value)))

    def __repr__(self) -> str:
        keys = ", ".join(str(k) for k in self._fallback_keys)
        return f"Key: '{self._key}' , default: {self._default_value} (fallback keys: [{keys}])"
