"""
VIN Core Module
===============

The VIN value type, its checksum primitives and serialization.
"""

from .vin_utils import (
    # Constants
    VINConstants,
    VIN_LENGTH,
    VIN_VALID_CHARS,
    VIN_INVALID_CHARS,
    INVALID_CHAR_SUBSTITUTIONS,
    # Checksum
    character_value,
    calculate_check_digit,
    apply_check_digit,
    requires_checksum,
    # Validation
    VINValidationResult,
    validate_vin,
    validate_vin_format,
    validate_vin_checksum,
    # Correction
    sanitize_vin_text,
)
from .vin import VIN, is_valid_vin
from .serialization import VINJSONEncoder, encode_vin, decode_vin, vin_from_value

__all__ = [
    # Constants
    "VINConstants",
    "VIN_LENGTH",
    "VIN_VALID_CHARS",
    "VIN_INVALID_CHARS",
    "INVALID_CHAR_SUBSTITUTIONS",
    # Checksum
    "character_value",
    "calculate_check_digit",
    "apply_check_digit",
    "requires_checksum",
    # Validation
    "VINValidationResult",
    "validate_vin",
    "validate_vin_format",
    "validate_vin_checksum",
    # Correction
    "sanitize_vin_text",
    # Value type
    "VIN",
    "is_valid_vin",
    # Serialization
    "VINJSONEncoder",
    "encode_vin",
    "decode_vin",
    "vin_from_value",
]
