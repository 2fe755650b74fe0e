"""
Fusion core: typed, thread-safe application configuration.

See fusion.config for the public API.
"""

__version__ = "0.1.0"
