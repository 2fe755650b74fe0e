"""
Configuration: a thread-safe, typed key/value store.

Values are stored raw under flat string keys and converted to the declared
type of a ConfigOption on read.

Read semantics (get / get_optional):
- The canonical key of the option is tried first.
- For scalar map options, if no value is stored at exactly that key, the
  'key.*' entries are collected into a dict (prefix map). An exact value
  always wins over prefix expansion.
- Otherwise each fallback key is tried in the option's order. The first
  fallback that resolves is reported to the diagnostics sink.
- Nothing found: None (absence is not an error). A value that is present
  but cannot be converted raises a ConversionError.

Write semantics (set):
- Only the canonical key is written. Fallback keys are never written.
- Writing a map option first removes all 'key.*' entries, in the same
  critical section as the insert.

Thread safety: every operation holds the store's lock for its whole
duration. Operations on two stores (add_all, ==) take both locks in a
global order, so concurrent a.add_all(b) / b.add_all(a) cannot deadlock.
"""

from __future__ import annotations

import collections.abc as _abc
import contextlib as _contextlib
import itertools as _itertools
import logging as _logging
import threading as _threading
import typing as _typing

import fusion.config.conversion as conversion
import fusion.config.diagnostics as config_diagnostics
import fusion.config.fallback as fallback
import fusion.config.option as option
import fusion.config.prefix_map as prefix_map
import fusion.config.types as types

_logger = _logging.getLogger(__name__)

T = _typing.TypeVar("T")

# Creation order of stores; defines the lock order for two-store operations
_STORE_SEQUENCE = _itertools.count()


class _Missing:
    """Sentinel type for 'no default override given'."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"


_MISSING = _Missing()


def _detach(value: types.StoredValue) -> types.StoredValue:
    """Copy mutable containers so callers never alias stored values."""
    return types.copy_stored_value(value)


def _values_equal(left: types.StoredValue, right: types.StoredValue) -> bool:
    """
    Compare stored values; byte sequences compare element-wise.

    The same object is always equal to itself, so a NaN held by a store
    and by its clone compares equal.
    """
    if left is right:
        return True
    byte_types = (bytes, bytearray)
    if isinstance(left, byte_types) and isinstance(right, byte_types):
        return bytes(left) == bytes(right)
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(map(_values_equal, left, right))
    return type(left) is type(right) and left == right


class Configuration:
    """
    Mutable configuration store.

    Example:
        >>> import fusion.config.options as options
        >>> port = options.key("net.port").int_type().default_value(8080)
        >>> config = Configuration.from_map({"net.port": "9090"})
        >>> config.get(port)
        9090
        >>> config.set(port, 7070).get(port)
        7070

    Args:
        other: Store to copy. The copy is a snapshot, not a live view.
        diagnostics: Sink for fallback-key usage. Defaults to the sink of
            ``other`` when copying, otherwise to NullDiagnostics.
    """

    def __init__(
        self,
        other: Configuration | None = None,
        *,
        diagnostics: config_diagnostics.ConfigDiagnostics | None = None,
    ) -> None:
        self._lock = _threading.RLock()
        self._sequence = next(_STORE_SEQUENCE)
        self._conf_data: dict[str, types.StoredValue] = {}

        if other is not None:
            with other._lock:
                self._conf_data = {k: _detach(v) for k, v in other._conf_data.items()}
            self._diagnostics = other._diagnostics if diagnostics is None else diagnostics
        else:
            self._diagnostics = (
                config_diagnostics.NullDiagnostics() if diagnostics is None else diagnostics
            )

    @classmethod
    def from_map(
        cls,
        mapping: _abc.Mapping[str, str],
        *,
        diagnostics: config_diagnostics.ConfigDiagnostics | None = None,
    ) -> Configuration:
        """
        Build a store from a plain string map.

        Values are stored verbatim as strings; conversion happens when they
        are read through an option.

        Raises:
            TypeError: If a key or value is not a str.
        """
        config = cls(diagnostics=diagnostics)
        for key, value in mapping.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise TypeError(f"from_map expects str keys and values, got {key!r}: {value!r}")
            config._conf_data[key] = value
        return config

    @property
    def diagnostics(self) -> config_diagnostics.ConfigDiagnostics:
        """Sink receiving fallback-key usage signals."""
        return self._diagnostics

    # -------------------------------------------------------------------------
    # Typed access
    # -------------------------------------------------------------------------

    def get_optional(self, config_option: option.ConfigOption[T]) -> T | None:
        """
        Read an option without applying its default.

        Returns:
            The converted value, or None if neither the canonical key nor
            any fallback key has a value.

        Raises:
            ConversionError: If a value is present but cannot be converted.
            ConversionTypeError: If a prefix-map entry is not a string.
        """
        with self._lock:
            raw, used_key = self._resolve(config_option)
            if raw is None:
                return None
            value = conversion.convert_value(
                raw,
                config_option.value_type,
                config_option.enum_class,
                is_list=config_option.is_list,
            )

        if used_key is not None:
            self._diagnostics.on_fallback_used(
                used_key.key, config_option.key, used_key.is_deprecated
            )
        return _typing.cast(T, value)

    def get(
        self,
        config_option: option.ConfigOption[T],
        default: T | _Missing = _MISSING,
    ) -> T | None:
        """
        Read an option, falling back to a default when it has no value.

        Args:
            config_option: The option to read.
            default: Overrides the option's own default when given.

        Returns:
            The converted value, else ``default`` if given, else the
            option's default (which may be None).
        """
        value = self.get_optional(config_option)
        if value is not None:
            return value
        if isinstance(default, _Missing):
            return config_option.default_value
        return default

    def set(self, config_option: option.ConfigOption[T], value: T) -> Configuration:
        """
        Write a value under the option's canonical key.

        Returns:
            self, for chaining.

        Raises:
            ValueError: If value is None.
            TypeError: If value is not a storable type.
        """
        if value is None:
            raise ValueError(f"Value for option '{config_option.key}' must not be None")
        self._set_value_internal(
            config_option.key, value, prefix_map.can_be_prefix_map(config_option)
        )
        return self

    def contains(self, config_option: option.ConfigOption[_typing.Any]) -> bool:
        """Check whether the option has a value under its key, prefix map or fallbacks."""
        can_be_prefix_map = prefix_map.can_be_prefix_map(config_option)
        keys = [config_option.key] + [k.key for k in config_option.fallback_keys]
        with self._lock:
            for key in keys:
                if key in self._conf_data:
                    return True
                if can_be_prefix_map and prefix_map.contains_prefix_map(self._conf_data, key):
                    return True
        return False

    def remove_config(self, config_option: option.ConfigOption[_typing.Any]) -> bool:
        """
        Remove the option's canonical key and all its fallback keys.

        For map options the prefix-map entries of each key are removed too.

        Returns:
            True if anything was removed.
        """
        can_be_prefix_map = prefix_map.can_be_prefix_map(config_option)
        keys = [config_option.key] + [k.key for k in config_option.fallback_keys]
        removed = False
        with self._lock:
            for key in keys:
                if self._conf_data.pop(key, None) is not None:
                    removed = True
                if can_be_prefix_map and prefix_map.remove_prefix_map(self._conf_data, key):
                    removed = True
        return removed

    # -------------------------------------------------------------------------
    # Raw access
    # -------------------------------------------------------------------------

    def get_raw_value(self, key: str) -> types.StoredValue | None:
        """Return the value stored at exactly ``key`` (no fallbacks, no prefix map)."""
        if key is None:
            raise TypeError("Key must not be None")
        with self._lock:
            value = self._conf_data.get(key)
        return None if value is None else _detach(value)

    def set_raw_value(self, key: str, value: types.StoredValue) -> None:
        """
        Store a raw value under ``key``.

        Mapping values replace any existing 'key.*' entries.

        Raises:
            TypeError: If key is None or value is not a storable type.
            ValueError: If value is None.
        """
        self._set_value_internal(key, value, isinstance(value, _abc.Mapping))

    def contains_key(self, key: str) -> bool:
        """Check whether a value is stored at exactly ``key``."""
        with self._lock:
            return key in self._conf_data

    def get_keys(self) -> set[str]:
        """Return a copy of the stored keys."""
        with self._lock:
            return set(self._conf_data)

    def remove_key(self, key: str) -> bool:
        """
        Remove ``key`` and any 'key.*' entries.

        Returns:
            True if anything was removed.
        """
        with self._lock:
            removed = self._conf_data.pop(key, None) is not None
            return prefix_map.remove_prefix_map(self._conf_data, key) or removed

    def to_map(self) -> dict[str, str]:
        """Return every entry rendered as text."""
        with self._lock:
            return {k: conversion.to_text(v) for k, v in self._conf_data.items()}

    # -------------------------------------------------------------------------
    # Bulk operations
    # -------------------------------------------------------------------------

    def add_all(self, other: Configuration, prefix: str = "") -> None:
        """
        Copy every entry of ``other`` into this store.

        Existing keys are overwritten. With a prefix, each key is stored
        as ``prefix + key``.
        """
        with _locked(self, other):
            entries = list(other._conf_data.items())
            for key, value in entries:
                self._conf_data[prefix + key] = _detach(value)
        _logger.debug(
            "Merged %d entries into configuration #%d (prefix=%r)",
            len(entries),
            self._sequence,
            prefix,
        )

    def clone(self) -> Configuration:
        """Return an independent copy of this store."""
        return Configuration(self)

    def __copy__(self) -> Configuration:
        return self.clone()

    def __deepcopy__(self, memo: dict[int, _typing.Any]) -> Configuration:
        return self.clone()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _resolve(
        self,
        config_option: option.ConfigOption[_typing.Any],
    ) -> tuple[types.StoredValue | None, fallback.FallbackKey | None]:
        """Find the raw value of an option. Caller holds the lock."""
        can_be_prefix_map = prefix_map.can_be_prefix_map(config_option)

        raw = self._lookup(config_option.key, can_be_prefix_map)
        if raw is not None:
            return raw, None

        for fallback_key in config_option.fallback_keys:
            raw = self._lookup(fallback_key.key, can_be_prefix_map)
            if raw is not None:
                return raw, fallback_key

        return None, None

    def _lookup(self, key: str, can_be_prefix_map: bool) -> types.StoredValue | None:
        """Exact value at key, else its prefix map (if allowed and non-empty)."""
        value = self._conf_data.get(key)
        if value is not None:
            return value
        if can_be_prefix_map:
            properties = prefix_map.convert_to_properties_prefixed(self._conf_data, key)
            if properties:
                return properties
        return None

    def _set_value_internal(
        self,
        key: str,
        value: types.StoredValue,
        can_be_prefix_map: bool,
    ) -> None:
        if key is None:
            raise TypeError("Key must not be None")
        if value is None:
            raise ValueError(f"Value for key '{key}' must not be None")
        stored = types.normalize_stored_value(value)

        with self._lock:
            if can_be_prefix_map and prefix_map.remove_prefix_map(self._conf_data, key):
                _logger.debug("Removed prefix-map entries under '%s' before write", key)
            self._conf_data[key] = stored

    # -------------------------------------------------------------------------
    # Dunder methods
    # -------------------------------------------------------------------------

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains_key(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._conf_data)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Configuration):
            return NotImplemented
        with _locked(self, other):
            if self._conf_data.keys() != other._conf_data.keys():
                return False
            return all(
                _values_equal(value, other._conf_data[key])
                for key, value in self._conf_data.items()
            )

    # Mutable container, like dict
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        with self._lock:
            return f"Configuration({self._conf_data!r})"


@_contextlib.contextmanager
def _locked(*stores: Configuration) -> _typing.Iterator[None]:
    """Hold the locks of several stores, acquired in creation order."""
    unique = {id(store): store for store in stores}.values()
    ordered = sorted(unique, key=lambda store: store._sequence)
    with _contextlib.ExitStack() as stack:
        for store in ordered:
            stack.enter_context(store._lock)
        yield
