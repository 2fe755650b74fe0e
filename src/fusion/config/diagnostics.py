"""
Diagnostics raised when a read resolves through a fallback key.

Operators migrating key names need to know when an old name is still in
use. The store calls its diagnostics sink synchronously, from inside get(),
every time a fallback key (rather than the canonical key) supplies a value.

- NullDiagnostics: discards signals (store default)
- LoggingDiagnostics: WARNING for deprecated keys, INFO for plain fallbacks
- RecordingDiagnostics: keeps every signal in memory for inspection
"""

import abc as _abc
import dataclasses as _dataclasses
import logging as _logging
import threading as _threading

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass(frozen=True)
class FallbackUsage:
    """One read that was resolved through a fallback key."""

    alias: str
    canonical_key: str
    deprecated: bool


class ConfigDiagnostics(_abc.ABC):
    """Receives fallback-key usage signals from a Configuration."""

    @_abc.abstractmethod
    def on_fallback_used(self, alias: str, canonical_key: str, deprecated: bool) -> None:
        """
        Called when a fallback key supplied the value of an option.

        Args:
            alias: The fallback key that resolved.
            canonical_key: The option's canonical key.
            deprecated: Whether the fallback key is deprecated.
        """
        ...


class NullDiagnostics(ConfigDiagnostics):
    """Discards all signals."""

    def on_fallback_used(self, alias: str, canonical_key: str, deprecated: bool) -> None:
        pass


class LoggingDiagnostics(ConfigDiagnostics):
    """Reports fallback usage through the logging module."""

    def __init__(self, logger: _logging.Logger | None = None) -> None:
        self._logger = logger or _logger

    def on_fallback_used(self, alias: str, canonical_key: str, deprecated: bool) -> None:
        if deprecated:
            self._logger.warning(
                "Config uses deprecated configuration key '%s' instead of proper key '%s'",
                alias,
                canonical_key,
            )
        else:
            self._logger.info(
                "Config uses fallback configuration key '%s' instead of key '%s'",
                alias,
                canonical_key,
            )


class RecordingDiagnostics(ConfigDiagnostics):
    """
    Keeps every signal in memory.

    Useful in tests and for applications that want to report all
    outdated keys at startup.
    """

    def __init__(self) -> None:
        self._lock = _threading.Lock()
        self._usages: list[FallbackUsage] = []

    def on_fallback_used(self, alias: str, canonical_key: str, deprecated: bool) -> None:
        with self._lock:
            self._usages.append(FallbackUsage(alias, canonical_key, deprecated))

    @property
    def usages(self) -> list[FallbackUsage]:
        """Snapshot of recorded signals, oldest first."""
        with self._lock:
            return list(self._usages)

    @property
    def deprecated_usages(self) -> list[FallbackUsage]:
        """Recorded signals for deprecated keys only."""
        return [usage for usage in self.usages if usage.deprecated]

    def clear(self) -> None:
        with self._lock:
            self._usages.clear()
