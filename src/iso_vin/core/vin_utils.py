"""
VIN Utilities - Single Source of Truth
======================================

Constants and primitives shared by the VIN value type:
character transliteration, the ISO 3779 / SAE J853 check digit,
format checks and the sanitizing steps used by ``VIN.propose()``.

None of these functions normalize their input. A lowercase letter is
simply not a VIN character, so callers that want leniency go through
``VIN.propose()``.
"""

import logging
from typing import Optional, Dict, List, Tuple, FrozenSet
from dataclasses import dataclass

logger = logging.getLogger(__name__)


# =============================================================================
# VIN CONSTANTS
# =============================================================================

class VINConstants:
    """Immutable VIN specification constants per ISO 3779 / SAE J853."""

    LENGTH: int = 17

    # Valid characters (I, O, Q excluded to avoid confusion with 1, 0)
    VALID_CHARS: FrozenSet[str] = frozenset("0123456789ABCDEFGHJKLMNPRSTUVWXYZ")
    INVALID_CHARS: FrozenSet[str] = frozenset("IOQ")

    # 0-based index of the check digit (position 9 in the standard)
    CHECK_DIGIT_INDEX: int = 8

    # Section boundaries, 0-based half-open ranges
    WMI_SLICE: slice = slice(0, 3)
    VDS_SLICE: slice = slice(3, 9)
    VIS_SLICE: slice = slice(9, 17)

    # Checksum weights by position; the check digit itself weighs 0
    CHECKSUM_WEIGHTS: Tuple[int, ...] = (8, 7, 6, 5, 4, 3, 2, 10, 0, 9, 8, 7, 6, 5, 4, 3, 2)

    # Character to value mapping for checksum (ISO 3779)
    CHAR_VALUES: Dict[str, int] = {
        'A': 1, 'B': 2, 'C': 3, 'D': 4, 'E': 5, 'F': 6, 'G': 7, 'H': 8,
        'J': 1, 'K': 2, 'L': 3, 'M': 4, 'N': 5, 'P': 7, 'R': 9,
        'S': 2, 'T': 3, 'U': 4, 'V': 5, 'W': 6, 'X': 7, 'Y': 8, 'Z': 9,
        '0': 0, '1': 1, '2': 2, '3': 3, '4': 4, '5': 5, '6': 6, '7': 7, '8': 8, '9': 9
    }

    # First characters assigned to North America, where the check digit is mandatory
    NORTH_AMERICA_PREFIXES: FrozenSet[str] = frozenset("12345")

    # Used by propose() when nothing usable survives sanitizing
    FALLBACK_SEED: str = "1VWAA7A30FC000001"
    PAD_CHAR: str = "0"

    # Content of VIN.UNKNOWN
    UNKNOWN_CONTENT: str = "00000000000000000"


VIN_LENGTH = VINConstants.LENGTH
VIN_VALID_CHARS = VINConstants.VALID_CHARS
VIN_INVALID_CHARS = VINConstants.INVALID_CHARS

# Invalid VIN characters -> look-alike replacements
INVALID_CHAR_SUBSTITUTIONS: Dict[str, str] = {
    'I': '1',  # I looks like 1
    'O': '0',  # O looks like 0
    'Q': '0',  # Q looks like 0 (round shape)
}


# =============================================================================
# CHECKSUM
# =============================================================================

def character_value(char: str) -> Optional[int]:
    """
    Transliterate a single VIN character to its checksum value.

    Returns:
        The numeric value, or None for characters without a mapping
        (I, O, Q, lowercase letters and anything outside the VIN alphabet)
    """
    return VINConstants.CHAR_VALUES.get(char)


def calculate_check_digit(vin: str) -> Optional[str]:
    """
    Calculate the expected check digit for a VIN.

    The check digit (position 9) is calculated by:
    1. Assigning numeric values to each character
    2. Multiplying by position weights
    3. Summing and taking mod 11
    4. Result 10 becomes 'X'

    Args:
        vin: 17-character VIN (check digit position will be ignored)

    Returns:
        Expected check digit ('0'-'9' or 'X'), or None if the length is
        wrong or a character has no transliteration

    Examples:
        >>> calculate_check_digit("1FMEE5DH5NLA77159")
        '5'
        >>> calculate_check_digit("1G1YY25RX85104727")
        'X'
    """
    if len(vin) != VIN_LENGTH:
        return None

    total = 0
    for i, char in enumerate(vin):
        if i == VINConstants.CHECK_DIGIT_INDEX:
            continue
        value = character_value(char)
        if value is None:
            return None
        total += value * VINConstants.CHECKSUM_WEIGHTS[i]

    remainder = total % 11
    return 'X' if remainder == 10 else str(remainder)


def validate_vin_checksum(vin: str) -> bool:
    """
    Check if VIN checksum is valid.

    Args:
        vin: 17-character VIN string

    Returns:
        True if the character at position 9 equals the computed check digit
    """
    expected = calculate_check_digit(vin)
    if expected is None:
        return False

    return vin[VINConstants.CHECK_DIGIT_INDEX] == expected


def validate_vin_format(vin: str) -> bool:
    """
    Quick check if VIN has valid format (length and characters).

    Does NOT check checksum. Use validate_vin() for full validation.
    """
    if len(vin) != VIN_LENGTH:
        return False
    return all(c in VIN_VALID_CHARS for c in vin)


def requires_checksum(vin: str) -> bool:
    """Whether the first character marks a North American VIN."""
    return vin[:1] in VINConstants.NORTH_AMERICA_PREFIXES


def apply_check_digit(vin: str) -> str:
    """
    Overwrite position 9 with the computed check digit.

    Strings whose check digit cannot be computed are returned unchanged.
    """
    expected = calculate_check_digit(vin)
    if expected is None:
        return vin
    index = VINConstants.CHECK_DIGIT_INDEX
    return vin[:index] + expected + vin[index + 1:]


# =============================================================================
# SANITIZING
# =============================================================================

def sanitize_vin_text(raw_text: str) -> str:
    """
    Turn arbitrary text into 17 characters from the VIN alphabet.

    Processing steps:
    1. Uppercase
    2. Remove spaces
    3. Substitute I -> 1, O -> 0, Q -> 0
    4. Drop every other character outside the alphabet
    5. Fall back to a fixed seed if nothing is left
    6. Pad with '0' or truncate to 17 characters

    The check digit is left as-is; see apply_check_digit().
    """
    text = raw_text.upper().replace(' ', '')
    text = ''.join(INVALID_CHAR_SUBSTITUTIONS.get(c, c) for c in text)
    text = ''.join(c for c in text if c in VIN_VALID_CHARS)

    if not text:
        logger.debug(f"Nothing usable in {raw_text!r}, using fallback seed")
        text = VINConstants.FALLBACK_SEED

    return text.ljust(VIN_LENGTH, VINConstants.PAD_CHAR)[:VIN_LENGTH]


# =============================================================================
# VIN VALIDATION
# =============================================================================

@dataclass
class VINValidationResult:
    """Result of VIN validation."""
    vin: str
    is_valid_length: bool
    has_valid_chars: bool
    invalid_chars: List[str]
    requires_checksum: bool
    checksum_valid: bool
    expected_check_digit: Optional[str]
    is_fully_valid: bool

    def to_dict(self) -> Dict:
        return {
            'vin': self.vin,
            'is_valid_length': self.is_valid_length,
            'has_valid_chars': self.has_valid_chars,
            'invalid_chars': self.invalid_chars,
            'requires_checksum': self.requires_checksum,
            'checksum_valid': self.checksum_valid,
            'expected_check_digit': self.expected_check_digit,
            'is_fully_valid': self.is_fully_valid,
        }


def validate_vin(vin: str) -> VINValidationResult:
    """
    Comprehensive VIN validation.

    Checks:
    1. Length (must be 17)
    2. Character validity (no I, O, Q, no lowercase)
    3. Checksum at position 9, enforced for North American VINs only

    Args:
        vin: VIN string to validate, taken verbatim

    Returns:
        VINValidationResult with all validation details
    """
    is_valid_length = len(vin) == VIN_LENGTH

    invalid_chars = [c for c in vin if c not in VIN_VALID_CHARS]
    has_valid_chars = len(invalid_chars) == 0

    expected_check_digit = calculate_check_digit(vin)
    checksum_valid = (
        expected_check_digit is not None
        and vin[VINConstants.CHECK_DIGIT_INDEX] == expected_check_digit
    )
    needs_checksum = requires_checksum(vin)

    is_fully_valid = (
        is_valid_length
        and has_valid_chars
        and (checksum_valid or not needs_checksum)
    )

    return VINValidationResult(
        vin=vin,
        is_valid_length=is_valid_length,
        has_valid_chars=has_valid_chars,
        invalid_chars=invalid_chars,
        requires_checksum=needs_checksum,
        checksum_valid=checksum_valid,
        expected_check_digit=expected_check_digit,
        is_fully_valid=is_fully_valid,
    )
