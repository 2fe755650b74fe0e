"""
Typed configuration for Fusion.

Options are declared once with the fluent builder and read from / written to
a thread-safe Configuration store:

    >>> import fusion.config as config
    >>> threshold = (
    ...     config.key("cpu.utilization.threshold")
    ...     .double_type()
    ...     .default_value(0.9)
    ...     .with_deprecated_keys("cpu.threshold")
    ... )
    >>> store = config.Configuration.from_map({"cpu.threshold": "0.75"})
    >>> store.get(threshold)
    0.75

Renamed keys keep working through fallback keys; reads that resolve through
one are reported to the store's diagnostics sink.
"""

import fusion.config.description as description
from fusion.config.configuration import Configuration
from fusion.config.conversion import (
    convert_to_boolean,
    convert_to_double,
    convert_to_duration,
    convert_to_enum,
    convert_to_float,
    convert_to_integer,
    convert_to_list,
    convert_to_long,
    convert_to_properties,
    convert_to_string,
    convert_value,
    to_text,
)
from fusion.config.diagnostics import (
    ConfigDiagnostics,
    FallbackUsage,
    LoggingDiagnostics,
    NullDiagnostics,
    RecordingDiagnostics,
)
from fusion.config.errors import (
    ConfigurationError,
    ConversionError,
    ConversionTypeError,
    MalformedValueError,
    UnknownEnumVariantError,
    ValueOverflowError,
)
from fusion.config.fallback import FallbackKey
from fusion.config.option import ConfigOption
from fusion.config.options import (
    ListConfigOptionBuilder,
    OptionBuilder,
    TypedConfigOptionBuilder,
    get_boolean_config_option,
    get_double_config_option,
    get_float_config_option,
    get_integer_config_option,
    get_long_config_option,
    key,
)
from fusion.config.prefix_map import (
    can_be_prefix_map,
    contains_prefix_map,
    convert_to_properties_prefixed,
    filter_prefix_map_key,
    remove_prefix_map,
)
from fusion.config.types import ValueType

__all__ = [
    # Store
    "Configuration",
    # Options
    "ConfigOption",
    "FallbackKey",
    "ValueType",
    "key",
    "OptionBuilder",
    "TypedConfigOptionBuilder",
    "ListConfigOptionBuilder",
    "get_boolean_config_option",
    "get_double_config_option",
    "get_float_config_option",
    "get_integer_config_option",
    "get_long_config_option",
    # Diagnostics
    "ConfigDiagnostics",
    "FallbackUsage",
    "LoggingDiagnostics",
    "NullDiagnostics",
    "RecordingDiagnostics",
    # Errors
    "ConfigurationError",
    "ConversionError",
    "ConversionTypeError",
    "MalformedValueError",
    "UnknownEnumVariantError",
    "ValueOverflowError",
    # Conversion
    "convert_to_boolean",
    "convert_to_double",
    "convert_to_duration",
    "convert_to_enum",
    "convert_to_float",
    "convert_to_integer",
    "convert_to_list",
    "convert_to_long",
    "convert_to_properties",
    "convert_to_string",
    "convert_value",
    "to_text",
    # Prefix maps
    "can_be_prefix_map",
    "contains_prefix_map",
    "convert_to_properties_prefixed",
    "filter_prefix_map_key",
    "remove_prefix_map",
    # Submodules
    "description",
]
