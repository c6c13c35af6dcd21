"""
Exceptions raised by the iso_vin package.

An invalid VIN is never an error: validity is reported through
``VIN.is_valid`` and friends. Exceptions are reserved for malformed
serialized payloads and broken configuration.
"""


class VINError(Exception):
    """Base exception for iso_vin errors."""
    pass


class VINDecodeError(VINError, ValueError):
    """Raised when a serialized VIN payload has the wrong shape."""
    pass


class ConfigurationError(VINError):
    """Raised when localization resources or settings are misconfigured."""
    pass
