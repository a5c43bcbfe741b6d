"""
Exceptions raised by the projection engine.
"""


class ConfigurationError(ValueError):
    """Raised when a configuration value or bracket table is malformed."""
