"""
Error types raised by the EV charging scheduler.
"""


class EVChargingError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(EVChargingError, ValueError):
    """Inputs or configuration violate a precondition of the core.

    Raised for an empty station list, a malformed price table or an invalid
    overrides file. Callers should surface these as user-facing failures.
    """


__all__ = ["EVChargingError", "ConfigurationError"]
