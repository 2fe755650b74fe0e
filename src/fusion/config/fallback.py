"""Alternative keys accepted when reading a ConfigOption."""

from __future__ import annotations

import dataclasses as _dataclasses


@_dataclasses.dataclass(frozen=True)
class FallbackKey:
    """
    A key checked when the canonical key of an option has no value.

    Plain fallback keys are aliases; deprecated keys are old names that
    still work but should be migrated away from. Equality and hash use
    both fields.
    """

    key: str
    is_deprecated: bool = False

    @classmethod
    def create_fallback_key(cls, key: str) -> FallbackKey:
        """Create a plain (non-deprecated) fallback key."""
        return cls(key, False)

    @classmethod
    def create_deprecated_key(cls, key: str) -> FallbackKey:
        """Create a deprecated fallback key."""
        return cls(key, True)

    def __post_init__(self) -> None:
        if self.key is None:
            raise TypeError("Fallback key must not be None")

    def __str__(self) -> str:
        return f"{{key={self.key}, isDeprecated={str(self.is_deprecated).lower()}}}"
