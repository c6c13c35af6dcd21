"""
VIN Value Type
==============

The Vehicle Identification Number as standardized in ISO 3779.

A VIN wraps the raw text it was built from. Nothing is validated or
normalized at construction; validity, sections and the check digit are
derived from ``content`` on access.

Usage:
    from iso_vin import VIN

    vin = VIN("WAUZZZ8X7CB000001")
    vin.is_valid          # True
    vin.wmi, vin.vds      # ('WAU', 'ZZZ8X7')
    VIN("1hg bh41jxmn109186").propose()   # VIN(content='1HGBH41JXMN109186')
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Optional, Union

from .vin_utils import (
    VINConstants,
    apply_check_digit,
    requires_checksum,
    sanitize_vin_text,
    validate_vin_checksum,
    validate_vin_format,
)
from ..localization.wmi_lookup import (
    WMILookup,
    country_key,
    get_default_lookup,
    manufacturer_key,
    region_key,
    resolve_with_fallback,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VIN:
    """
    Immutable VIN value.

    Equality and hashing use ``content`` only, byte for byte.
    Invalid VINs are ordinary values: accessors report emptiness
    instead of raising.
    """

    content: str

    UNKNOWN: ClassVar["VIN"]

    # -------------------------------------------------------------------------
    # Validity
    # -------------------------------------------------------------------------

    @property
    def is_valid(self) -> bool:
        """
        Whether the VIN has 17 characters from the VIN alphabet and,
        for North American VINs (first character 1-5), a correct check digit.
        """
        if not validate_vin_format(self.content):
            return False
        if requires_checksum(self.content):
            return self.is_checksum_valid
        return True

    @property
    def is_checksum_valid(self) -> bool:
        """Whether position 9 holds the computed check digit."""
        return validate_vin_checksum(self.content)

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    @property
    def wmi(self) -> str:
        """The world manufacturer identifier."""
        if not self.is_valid:
            return ""
        return self.content[VINConstants.WMI_SLICE]

    @property
    def vds(self) -> str:
        """The vehicle descriptor section."""
        if not self.is_valid:
            return ""
        return self.content[VINConstants.VDS_SLICE]

    @property
    def vis(self) -> str:
        """The vehicle identification section."""
        if not self.is_valid:
            return ""
        return self.content[VINConstants.VIS_SLICE]

    @property
    def checksum_digit(self) -> Optional[str]:
        """
        The raw character at position 9.

        Only the length is checked, so this also works on VINs that are
        invalid for other reasons.
        """
        if len(self.content) != VINConstants.LENGTH:
            return None
        return self.content[VINConstants.CHECK_DIGIT_INDEX]

    @property
    def id(self) -> str:
        return self.content

    # -------------------------------------------------------------------------
    # Localized names
    # -------------------------------------------------------------------------

    def wmi_region(self, lookup: Optional[WMILookup] = None) -> str:
        """Localized region name for the first WMI character."""
        return self._lookup_name(region_key, lookup)

    def wmi_country(self, lookup: Optional[WMILookup] = None) -> str:
        """Localized country name for the first two WMI characters."""
        return self._lookup_name(country_key, lookup)

    def wmi_manufacturer(self, lookup: Optional[WMILookup] = None) -> str:
        """Localized manufacturer name for the full WMI."""
        return self._lookup_name(manufacturer_key, lookup)

    def _lookup_name(self, make_key: Callable[[str], str], lookup: Optional[WMILookup]) -> str:
        wmi = self.wmi
        if not wmi:
            return ""
        if lookup is None:
            lookup = get_default_lookup()
        return resolve_with_fallback(lookup, make_key(wmi))

    # -------------------------------------------------------------------------
    # Repair
    # -------------------------------------------------------------------------

    def propose(self) -> "VIN":
        """
        Propose a valid VIN derived from this one.

        Uppercases, drops spaces, maps I/O/Q to 1/0/0, strips anything
        else outside the VIN alphabet, falls back to a fixed seed when
        nothing is left, pads with '0' or truncates to 17 characters and
        finally rewrites the check digit. The check digit is applied to
        every VIN, not just North American ones.

        Returns:
            A new VIN that is both valid and checksum-valid
        """
        sanitized = sanitize_vin_text(self.content)
        proposed = apply_check_digit(sanitized)
        if proposed != self.content:
            logger.debug(f"Proposed VIN: '{self.content}' -> '{proposed}'")
        return VIN(proposed)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_json(self) -> str:
        """Encode as a bare JSON string."""
        from .serialization import encode_vin
        return encode_vin(self)

    @classmethod
    def from_json(cls, payload: Union[str, bytes]) -> "VIN":
        """Decode from a bare JSON string."""
        from .serialization import decode_vin
        return decode_vin(payload)

    @classmethod
    def from_value(cls, value: Any) -> "VIN":
        """Build from an already-parsed JSON value, which must be a string."""
        from .serialization import vin_from_value
        return vin_from_value(value)

    def __str__(self) -> str:
        return self.content


VIN.UNKNOWN = VIN(VINConstants.UNKNOWN_CONTENT)


def is_valid_vin(content: str) -> bool:
    """Shorthand for ``VIN(content).is_valid``."""
    return VIN(content).is_valid
