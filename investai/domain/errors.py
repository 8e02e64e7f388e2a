"""
Domain exceptions. Zero external dependencies.
"""


class ConfigurationError(RuntimeError):
    """Raised when a required setting (e.g. model credentials) is missing. Always fatal."""


class ToolRegistrationError(ValueError):
    """Raised when a tool registry is built with duplicate names or a bad terminal tool count."""
