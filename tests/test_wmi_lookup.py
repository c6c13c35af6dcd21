"""
Test Suite for WMI Name Lookup
==============================

Tests covering:
- Key composition
- The one-step fallback protocol
- Bundled YAML tables and locale fallback
- The process-wide default lookup

Run with: pytest tests/test_wmi_lookup.py -v
"""

import logging
import threading

import pytest
import sys
from pathlib import Path
from typing import Dict, List

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from iso_vin import VIN, ConfigurationError
from iso_vin.config import reset_config
from iso_vin.localization import (
    UNKNOWN_NAME,
    DictWMILookup,
    ResourceWMILookup,
    WMILookup,
    country_key,
    get_default_lookup,
    manufacturer_key,
    region_key,
    reset_default_lookup,
    resolve_with_fallback,
    set_default_lookup,
)


# =============================================================================
# TEST FIXTURES
# =============================================================================

class RecordingLookup(WMILookup):
    """Lookup that records every key it is asked for."""

    def __init__(self, table: Dict[str, str]):
        self.table = table
        self.queries: List[str] = []

    @property
    def locale(self) -> str:
        return "test"

    def lookup(self, key: str) -> str:
        self.queries.append(key)
        return self.table.get(key, UNKNOWN_NAME)


@pytest.fixture
def clean_defaults(monkeypatch):
    """Isolate tests from the environment and cached defaults."""
    for var in ("VIN_LOCALE", "VIN_WMI_RESOURCE_DIR", "VIN_WMI_BASE_FALLBACK"):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    reset_default_lookup()
    yield
    reset_config()
    reset_default_lookup()


# =============================================================================
# KEYS AND FALLBACK
# =============================================================================

class TestKeys:
    """Tests for key builders."""

    def test_keys(self):
        assert region_key("WAU") == "ISO3780_WMI_REGION_W"
        assert country_key("WAU") == "ISO3780_WMI_COUNTRY_WA"
        assert manufacturer_key("WAU") == "ISO3780_WMI_MANUFACTURER_WAU"


class TestFallback:
    """Tests for the one-step fallback protocol."""

    def test_direct_hit(self):
        lookup = RecordingLookup({"ISO3780_WMI_COUNTRY_WA": "Germany"})
        assert resolve_with_fallback(lookup, "ISO3780_WMI_COUNTRY_WA") == "Germany"
        assert lookup.queries == ["ISO3780_WMI_COUNTRY_WA"]

    def test_one_retry(self):
        lookup = RecordingLookup({"ISO3780_WMI_COUNTRY_W": "Germany"})
        assert resolve_with_fallback(lookup, "ISO3780_WMI_COUNTRY_WA") == "Germany"
        assert lookup.queries == ["ISO3780_WMI_COUNTRY_WA", "ISO3780_WMI_COUNTRY_W"]

    def test_no_second_retry(self):
        """Test the second answer is returned even if unknown."""
        lookup = RecordingLookup({"ISO3780_WMI_MANUFACTURER_W": "Never reached"})
        assert resolve_with_fallback(lookup, "ISO3780_WMI_MANUFACTURER_WAU") == UNKNOWN_NAME
        assert lookup.queries == ["ISO3780_WMI_MANUFACTURER_WAU", "ISO3780_WMI_MANUFACTURER_WA"]


class TestVINNames:
    """Tests for the VIN name accessors with an injected lookup."""

    def test_region_country_manufacturer(self):
        lookup = RecordingLookup({
            "ISO3780_WMI_REGION_W": "Europe",
            "ISO3780_WMI_COUNTRY_WA": "Germany",
            "ISO3780_WMI_MANUFACTURER_WAU": "Audi",
        })
        vin = VIN("WAUZZZ8X7CB000001")
        assert vin.wmi_region(lookup) == "Europe"
        assert vin.wmi_country(lookup) == "Germany"
        assert vin.wmi_manufacturer(lookup) == "Audi"

    def test_manufacturer_falls_back_to_two_characters(self):
        lookup = RecordingLookup({"ISO3780_WMI_MANUFACTURER_1H": "Honda"})
        assert VIN("1HGBH41JXMN109186").wmi_manufacturer(lookup) == "Honda"

    def test_unknown_names(self):
        lookup = RecordingLookup({})
        vin = VIN("WAUZZZ8X7CB000001")
        assert vin.wmi_region(lookup) == UNKNOWN_NAME
        assert vin.wmi_manufacturer(lookup) == UNKNOWN_NAME

    def test_invalid_vin_skips_lookup(self):
        """Test invalid VINs return empty names without querying."""
        lookup = RecordingLookup({"ISO3780_WMI_REGION_": "Nowhere"})
        vin = VIN("INVALID")
        assert vin.wmi_region(lookup) == ""
        assert vin.wmi_country(lookup) == ""
        assert vin.wmi_manufacturer(lookup) == ""
        assert lookup.queries == []


# =============================================================================
# IMPLEMENTATIONS
# =============================================================================

class TestDictLookup:
    """Tests for DictWMILookup."""

    def test_lookup(self):
        lookup = DictWMILookup({"ISO3780_WMI_REGION_J": "Asia"})
        assert lookup.lookup("ISO3780_WMI_REGION_J") == "Asia"
        assert lookup.lookup("ISO3780_WMI_REGION_W") == UNKNOWN_NAME
        assert "ISO3780_WMI_REGION_J" in lookup
        assert "ISO3780_WMI_REGION_W" not in lookup
        assert lookup.locale == "en"
        assert len(lookup) == 1

    def test_table_is_copied(self):
        table = {"ISO3780_WMI_REGION_J": "Asia"}
        lookup = DictWMILookup(table)
        table["ISO3780_WMI_REGION_J"] = "Changed"
        assert lookup.lookup("ISO3780_WMI_REGION_J") == "Asia"


class TestResourceLookup:
    """Tests for the bundled YAML tables."""

    @pytest.fixture(scope="class")
    def english(self):
        return ResourceWMILookup("en")

    def test_available_locales(self):
        assert {"en", "de"} <= set(ResourceWMILookup.available_locales())

    @pytest.mark.parametrize("content,region", [
        ("WAUZZZ8X7CB000001", "Europe"),
        ("1HGBH41JXMN109186", "North America"),
        ("WBAJA9105KB304806", "Europe"),
        ("JN1TFNT32A0041590", "Asia"),
    ])
    def test_regions(self, english, content, region):
        assert VIN(content).wmi_region(english) == region

    @pytest.mark.parametrize("content,country", [
        ("WAUZZZ8X7CB000001", "Germany"),
        ("1HGBH41JXMN109186", "United States"),
        ("WBAJA9105KB304806", "Germany"),
        ("2C3KA43R08H129584", "Canada"),
    ])
    def test_countries(self, english, content, country):
        assert VIN(content).wmi_country(english) == country

    @pytest.mark.parametrize("content,manufacturer", [
        ("WAUZZZ8X7CB000001", "Audi"),
        ("1HGBH41JXMN109186", "Honda"),
        ("WBAJA9105KB304806", "BMW"),
        ("WP1ZZZ9PZ8LA33027", "Porsche SUV"),
    ])
    def test_manufacturers(self, english, content, manufacturer):
        assert VIN(content).wmi_manufacturer(english) == manufacturer

    def test_german(self):
        german = ResourceWMILookup("de")
        vin = VIN("WAUZZZ8X7CB000001")
        assert german.locale == "de"
        assert vin.wmi_region(german) == "Europa"
        assert vin.wmi_country(german) == "Deutschland"

    def test_german_falls_back_to_english(self):
        """Test names missing from the German table come from English."""
        german = ResourceWMILookup("de")
        assert VIN("WAUZZZ8X7CB000001").wmi_manufacturer(german) == "Audi"

    def test_german_without_base_fallback(self):
        german = ResourceWMILookup("de", fallback_to_base_locale=False)
        assert VIN("WAUZZZ8X7CB000001").wmi_manufacturer(german) == UNKNOWN_NAME

    def test_unknown_locale_uses_english(self, caplog):
        """Test a locale without a table falls back to English with a warning."""
        with caplog.at_level(logging.WARNING, logger="iso_vin.localization.wmi_lookup"):
            lookup = ResourceWMILookup("xx")
        assert lookup.locale == "en"
        assert lookup.requested_locale == "xx"
        assert VIN("WAUZZZ8X7CB000001").wmi_region(lookup) == "Europe"
        assert "'xx'" in caplog.text

    @pytest.mark.parametrize("locale,resolved", [
        ("de_DE", "de"),
        ("de-AT", "de"),
        ("de_DE.UTF-8", "de"),
        ("DE", "de"),
        ("en-US", "en"),
        ("en_GB", "en"),
    ])
    def test_regional_locale_uses_language_table(self, locale, resolved):
        assert ResourceWMILookup(locale).locale == resolved

    def test_missing_base_table_is_empty(self, tmp_path):
        """Test a resource directory without any matching table yields unknown names."""
        lookup = ResourceWMILookup("fr", resource_dir=tmp_path)
        assert len(lookup) == 0
        assert VIN("WAUZZZ8X7CB000001").wmi_region(lookup) == UNKNOWN_NAME

    def test_custom_resource_dir(self, tmp_path):
        (tmp_path / "en.yaml").write_text(
            "ISO3780_WMI_MANUFACTURER_WAU: Audi AG\n", encoding="utf-8"
        )
        lookup = ResourceWMILookup("en", resource_dir=tmp_path)
        assert VIN("WAUZZZ8X7CB000001").wmi_manufacturer(lookup) == "Audi AG"
        assert VIN("WAUZZZ8X7CB000001").wmi_region(lookup) == UNKNOWN_NAME

    def test_empty_table(self, tmp_path):
        (tmp_path / "en.yaml").write_text("", encoding="utf-8")
        assert len(ResourceWMILookup("en", resource_dir=tmp_path)) == 0

    def test_malformed_table(self, tmp_path):
        (tmp_path / "en.yaml").write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ResourceWMILookup("en", resource_dir=tmp_path)

    def test_unparseable_table(self, tmp_path):
        (tmp_path / "en.yaml").write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ResourceWMILookup("en", resource_dir=tmp_path)


# =============================================================================
# DEFAULT LOOKUP
# =============================================================================

class TestDefaultLookup:
    """Tests for the process-wide lookup."""

    def test_default_is_english(self, clean_defaults):
        lookup = get_default_lookup()
        assert lookup.locale == "en"
        assert get_default_lookup() is lookup
        assert VIN("WAUZZZ8X7CB000001").wmi_manufacturer() == "Audi"

    def test_locale_from_environment(self, clean_defaults, monkeypatch):
        monkeypatch.setenv("VIN_LOCALE", "de")
        reset_config()
        assert VIN("WAUZZZ8X7CB000001").wmi_country() == "Deutschland"

    def test_set_default_lookup(self, clean_defaults):
        set_default_lookup(DictWMILookup({"ISO3780_WMI_REGION_W": "Somewhere"}))
        assert VIN("WAUZZZ8X7CB000001").wmi_region() == "Somewhere"

    @pytest.mark.parametrize("locale,country", [
        ("de_DE", "Deutschland"),
        ("en-US", "Germany"),
        ("fr", "Germany"),
    ])
    def test_regional_and_unsupported_locales(self, clean_defaults, monkeypatch, locale, country):
        """Test names resolve for any VIN_LOCALE instead of raising."""
        monkeypatch.setenv("VIN_LOCALE", locale)
        reset_config()
        vin = VIN("WAUZZZ8X7CB000001")
        assert vin.wmi_country() == country
        assert vin.wmi_manufacturer() == "Audi"

    def test_lookup_leaves_root_logging_alone(self, clean_defaults, monkeypatch):
        """Test name lookups never install handlers on the root logger."""
        monkeypatch.setenv("VIN_LOG_LEVEL", "DEBUG")
        reset_config()
        root = logging.getLogger()
        handlers_before = list(root.handlers)
        level_before = root.level

        VIN("WAUZZZ8X7CB000001").wmi_region()

        assert root.handlers == handlers_before
        assert root.level == level_before

    def test_concurrent_first_use_builds_once(self, clean_defaults):
        """Test threads racing on first use share one lookup."""
        barrier = threading.Barrier(8)
        results = []

        def worker():
            barrier.wait()
            results.append(get_default_lookup())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert all(lookup is results[0] for lookup in results)
