"""
WMI Name Lookup - Localization Abstraction Layer
================================================

Resolves region, country and manufacturer names for a World Manufacturer
Identifier (ISO 3780). The VIN type only builds keys and consumes the
result; where the names come from is up to the WMILookup implementation.

Keys:
    ISO3780_WMI_REGION_<1st char of WMI>
    ISO3780_WMI_COUNTRY_<first 2 chars of WMI>
    ISO3780_WMI_MANUFACTURER_<full WMI>

Unresolved keys yield UNKNOWN_NAME ("?") rather than an error.

Usage:
    from iso_vin.localization import ResourceWMILookup

    lookup = ResourceWMILookup(locale="de")
    VIN("WAUZZZ8X7CB000001").wmi_country(lookup)
"""

import logging
import re
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

import yaml

from ..config import get_config
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "?"

REGION_KEY_PREFIX = "ISO3780_WMI_REGION_"
COUNTRY_KEY_PREFIX = "ISO3780_WMI_COUNTRY_"
MANUFACTURER_KEY_PREFIX = "ISO3780_WMI_MANUFACTURER_"

BASE_LOCALE = "en"
RESOURCE_DIR = Path(__file__).parent / "resources"


# =============================================================================
# KEY BUILDERS
# =============================================================================

def region_key(wmi: str) -> str:
    return REGION_KEY_PREFIX + wmi[:1]


def country_key(wmi: str) -> str:
    return COUNTRY_KEY_PREFIX + wmi[:2]


def manufacturer_key(wmi: str) -> str:
    return MANUFACTURER_KEY_PREFIX + wmi


# =============================================================================
# ABSTRACT BASE CLASS
# =============================================================================

class WMILookup(ABC):
    """
    Abstract key -> localized name lookup.

    Implementations must return UNKNOWN_NAME for keys they cannot
    resolve instead of raising.
    """

    @property
    @abstractmethod
    def locale(self) -> str:
        """Return the locale the names are given in."""
        ...

    @abstractmethod
    def lookup(self, key: str) -> str:
        """
        Resolve a key to a localized name.

        Args:
            key: Composed lookup key, e.g. "ISO3780_WMI_COUNTRY_WA"

        Returns:
            The localized name, or UNKNOWN_NAME
        """
        ...

    def __contains__(self, key: str) -> bool:
        return self.lookup(key) != UNKNOWN_NAME


class DictWMILookup(WMILookup):
    """Lookup over an in-memory table."""

    def __init__(self, table: Mapping[str, str], locale: str = BASE_LOCALE):
        self._table: Dict[str, str] = dict(table)
        self._locale = locale

    @property
    def locale(self) -> str:
        return self._locale

    def lookup(self, key: str) -> str:
        return self._table.get(key, UNKNOWN_NAME)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(locale={self._locale!r}, entries={len(self._table)})"


class ResourceWMILookup(DictWMILookup):
    """
    Lookup over a YAML resource table.

    Tables live in ``<resource_dir>/<locale>.yaml`` as flat key: name
    mappings. A regional locale such as ``de_DE`` or ``en-US`` uses the
    table of its language part; a locale without any table falls back to
    the English table. Unless disabled, keys missing from a non-English
    table are taken from the English table.

    Raises:
        ConfigurationError: If a table exists but cannot be parsed or
            is not a mapping
    """

    def __init__(
        self,
        locale: str = BASE_LOCALE,
        resource_dir: Optional[Union[str, Path]] = None,
        fallback_to_base_locale: bool = True,
    ):
        self.resource_dir = Path(resource_dir) if resource_dir else RESOURCE_DIR
        self.requested_locale = locale
        resolved = _resolve_locale(self.resource_dir, locale)

        table: Dict[str, str] = {}
        if fallback_to_base_locale and resolved != BASE_LOCALE:
            table.update(_load_table(self.resource_dir, BASE_LOCALE))
        table.update(_load_table(self.resource_dir, resolved))

        super().__init__(table, locale=resolved)
        logger.debug(f"Loaded {len(table)} WMI names for locale '{resolved}' from {self.resource_dir}")

    @classmethod
    def available_locales(cls, resource_dir: Optional[Union[str, Path]] = None) -> List[str]:
        """List the locales that have a table in the resource directory."""
        directory = Path(resource_dir) if resource_dir else RESOURCE_DIR
        return sorted(p.stem for p in directory.glob("*.yaml"))


def _table_path(resource_dir: Path, locale: str) -> Path:
    return resource_dir / f"{locale}.yaml"


def _resolve_locale(resource_dir: Path, locale: str) -> str:
    """
    Pick the table to load for a locale.

    Tries the locale itself, then its language part (``de_DE`` -> ``de``),
    then BASE_LOCALE.
    """
    language = re.split(r"[-_.@]", locale, maxsplit=1)[0]
    for candidate in (locale, language, language.lower()):
        if candidate and _table_path(resource_dir, candidate).is_file():
            return candidate

    if locale != BASE_LOCALE:
        logger.warning(
            f"No WMI name table for locale '{locale}' in {resource_dir}, "
            f"using '{BASE_LOCALE}'"
        )
    return BASE_LOCALE


def _load_table(resource_dir: Path, locale: str) -> Dict[str, str]:
    """Load and check one <locale>.yaml table; a missing table is empty."""
    path = _table_path(resource_dir, locale)
    if not path.is_file():
        logger.warning(f"No WMI name table for locale '{locale}': {path}")
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse WMI name table {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"WMI name table {path} must be a mapping, got {type(data).__name__}"
        )

    return {str(key): str(value) for key, value in data.items()}


# =============================================================================
# FALLBACK PROTOCOL
# =============================================================================

def resolve_with_fallback(lookup: WMILookup, key: str) -> str:
    """
    Query a key, retrying once with the last character dropped.

    The second answer is returned as-is, even if it is UNKNOWN_NAME.
    """
    name = lookup.lookup(key)
    if name != UNKNOWN_NAME:
        return name

    coarser = key[:-1]
    logger.debug(f"No name for '{key}', retrying with '{coarser}'")
    return lookup.lookup(coarser)


# =============================================================================
# DEFAULT LOOKUP
# =============================================================================

_default_lookup: Optional[WMILookup] = None
_default_lookup_lock = threading.Lock()


def get_default_lookup() -> WMILookup:
    """
    Get the process-wide lookup.

    Built from get_config().localization on first call, cached thereafter.
    """
    global _default_lookup
    if _default_lookup is None:
        with _default_lookup_lock:
            if _default_lookup is None:
                settings = get_config().localization
                _default_lookup = ResourceWMILookup(
                    locale=settings.locale,
                    resource_dir=settings.resource_dir,
                    fallback_to_base_locale=settings.fallback_to_base_locale,
                )
    return _default_lookup


def set_default_lookup(lookup: WMILookup) -> None:
    """Replace the process-wide lookup."""
    global _default_lookup
    with _default_lookup_lock:
        _default_lookup = lookup


def reset_default_lookup() -> None:
    """Drop the cached lookup so the next call rebuilds it from config."""
    global _default_lookup
    with _default_lookup_lock:
        _default_lookup = None
