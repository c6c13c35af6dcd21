"""
ISO 3779 VIN
============

Vehicle Identification Number value type with validation, section
extraction, the North American check digit and a repair function.

Package Structure:
    iso_vin/
    ├── core/           # VIN type, checksum, serialization
    ├── localization/   # WMI region/country/manufacturer names
    ├── config.py       # Settings and logging setup
    └── exceptions.py

Quick Start:
    from iso_vin import VIN

    vin = VIN("1HGBH41JXMN109186")
    print(vin.is_valid, vin.wmi, vin.checksum_digit)
    print(vin.wmi_manufacturer())

    VIN("1hgbh41jxmn109186").propose()

Version: 1.0.0
"""

__version__ = "1.0.0"

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .core import (
    VINConstants,
    VIN_LENGTH,
    VIN_VALID_CHARS,
    VIN,
    is_valid_vin,
    VINValidationResult,
    validate_vin,
    calculate_check_digit,
    VINJSONEncoder,
    encode_vin,
    decode_vin,
)
from .localization import (
    UNKNOWN_NAME,
    WMILookup,
    DictWMILookup,
    ResourceWMILookup,
)
from .exceptions import VINError, VINDecodeError, ConfigurationError

__all__ = [
    "__version__",
    # Core
    "VINConstants",
    "VIN_LENGTH",
    "VIN_VALID_CHARS",
    "VIN",
    "is_valid_vin",
    "VINValidationResult",
    "validate_vin",
    "calculate_check_digit",
    "VINJSONEncoder",
    "encode_vin",
    "decode_vin",
    # Localization
    "UNKNOWN_NAME",
    "WMILookup",
    "DictWMILookup",
    "ResourceWMILookup",
    # Errors
    "VINError",
    "VINDecodeError",
    "ConfigurationError",
]
