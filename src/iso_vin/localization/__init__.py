"""
Localized WMI region, country and manufacturer names.
"""

from .wmi_lookup import (
    UNKNOWN_NAME,
    WMILookup,
    DictWMILookup,
    ResourceWMILookup,
    region_key,
    country_key,
    manufacturer_key,
    resolve_with_fallback,
    get_default_lookup,
    set_default_lookup,
    reset_default_lookup,
)

__all__ = [
    "UNKNOWN_NAME",
    "WMILookup",
    "DictWMILookup",
    "ResourceWMILookup",
    "region_key",
    "country_key",
    "manufacturer_key",
    "resolve_with_fallback",
    "get_default_lookup",
    "set_default_lookup",
    "reset_default_lookup",
]
