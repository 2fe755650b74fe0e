"""
Exceptions raised by the configuration package.

Absence of a value is never an error (reads return None). These types are
raised when a value IS present but cannot be turned into the declared type:

- MalformedValueError: text that does not match the target grammar
- ValueOverflowError: numeric value outside the target type's range
- UnknownEnumVariantError: text that names no member of the enum
- ConversionTypeError: a non-string handed to the string-only converter

Precondition violations (None keys, None values, missing type tags) use the
built-in TypeError / ValueError and are raised at the call site.
"""

import typing as _typing


class ConfigurationError(Exception):
    """Base class for configuration errors."""

    pass


class ConversionError(ConfigurationError, ValueError):
    """A stored value could not be converted to the requested type."""

    def __init__(self, message: str, *, value: _typing.Any, target: str) -> None:
        super().__init__(message)
        self.value = value
        self.target = target


class MalformedValueError(ConversionError):
    """Text form of a value does not parse as the target type."""

    pass


class ValueOverflowError(ConversionError):
    """Numeric value overflows or underflows the target type."""

    pass


class UnknownEnumVariantError(ConversionError):
    """Value names no member of the target enum."""

    def __init__(
        self,
        message: str,
        *,
        value: _typing.Any,
        target: str,
        variants: list[str],
    ) -> None:
        super().__init__(message, value=value, target=target)
        self.variants = variants


class ConversionTypeError(ConfigurationError, TypeError):
    """Value has a runtime type the converter refuses to cast."""

    def __init__(self, message: str, *, value: _typing.Any) -> None:
        super().__init__(message)
        self.value = value
