"""
Prefix-map helpers.

A map-typed option whose key is 'a.b' can be stored either as one dict
under 'a.b' or as a group of flat entries 'a.b.x', 'a.b.y'. These helpers
operate on a raw key/value dict; the caller is responsible for locking.
"""

import typing as _typing

import fusion.config.conversion as conversion
import fusion.config.option as option
import fusion.config.types as types


def can_be_prefix_map(config_option: option.ConfigOption[_typing.Any]) -> bool:
    """Only scalar (non-list) map options expand from prefixed keys."""
    return config_option.value_type is types.ValueType.MAP and not config_option.is_list


def filter_prefix_map_key(key: str, candidate: str) -> bool:
    """Check whether candidate is an entry of the prefix map under key."""
    return candidate.startswith(key + ".")


def contains_prefix_map(configs: _typing.Mapping[str, _typing.Any], key: str) -> bool:
    """Check whether any entry of the prefix map under key exists."""
    return any(filter_prefix_map_key(key, candidate) for candidate in configs)


def convert_to_properties_prefixed(
    configs: _typing.Mapping[str, _typing.Any],
    key: str,
) -> dict[str, str]:
    """
    Collect the prefix map under key.

    Returns a dict of suffix -> value for every 'key.suffix' entry. Values
    must be strings. An empty dict means no entries exist.

    Raises:
        ConversionTypeError: If an entry holds a non-string value.
    """
    prefix = key + "."
    return {
        candidate[len(prefix):]: conversion.convert_to_string(value)
        for candidate, value in configs.items()
        if candidate.startswith(prefix)
    }


def remove_prefix_map(configs: dict[str, _typing.Any], key: str) -> bool:
    """
    Remove every entry of the prefix map under key.

    Returns:
        True if at least one entry was removed.
    """
    prefix_keys = [candidate for candidate in configs if filter_prefix_map_key(key, candidate)]
    for candidate in prefix_keys:
        del configs[candidate]
    return bool(prefix_keys)
