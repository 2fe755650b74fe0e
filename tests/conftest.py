"""
Shared pytest fixtures for Fusion tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import pytest as _pytest

import fusion.config as config


@_pytest.fixture
def recording_diagnostics() -> config.RecordingDiagnostics:
    """Diagnostics sink that records every fallback-key read."""
    return config.RecordingDiagnostics()


@_pytest.fixture
def sample_store(recording_diagnostics: config.RecordingDiagnostics) -> config.Configuration:
    """
    Store with a mix of canonical, deprecated and prefix-map entries.

    Keys:
        fs.search.enabled, net.hostname, net.port: plain strings
        cpu.threshold: value for a renamed option
        labels.env, labels.team: prefix-map entries under 'labels'
    """
    return config.Configuration.from_map(
        {
            "fs.search.enabled": "true",
            "net.hostname": "localhost",
            "net.port": "8080",
            "cpu.threshold": "0.75",
            "labels.env": "prod",
            "labels.team": "core",
        },
        diagnostics=recording_diagnostics,
    )
