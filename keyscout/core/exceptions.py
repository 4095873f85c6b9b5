"""
Custom exceptions for KeyScout.
"""

class KeyScoutError(Exception):
    """Base exception for KeyScout."""
    pass

class ConfigError(KeyScoutError):
    """Raised when configuration-related errors occur."""
    pass

class FrameworkConfigError(ConfigError):
    """Raised when a framework definition is missing a required field."""
    pass
