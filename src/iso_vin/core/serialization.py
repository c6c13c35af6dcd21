"""
Single-string JSON encoding for VINs.

A VIN serializes to its bare content, so ``VIN("WP1ZZZ9PZ8LA33027")``
becomes the JSON text ``"WP1ZZZ9PZ8LA33027"``, never an object wrapper.
Decoding accepts any string, valid VIN or not; only payloads of the
wrong shape raise VINDecodeError.
"""

import json
from typing import Any, Union

from .vin import VIN
from ..exceptions import VINDecodeError


def encode_vin(vin: VIN) -> str:
    """Encode a VIN as JSON text."""
    return json.dumps(vin.content, ensure_ascii=False)


def vin_from_value(value: Any) -> VIN:
    """
    Build a VIN from a decoded JSON value.

    Raises:
        VINDecodeError: If the value is not a string
    """
    if not isinstance(value, str):
        raise VINDecodeError(f"Expected a string for VIN, got {type(value).__name__}")
    return VIN(value)


def decode_vin(payload: Union[str, bytes]) -> VIN:
    """
    Decode a VIN from JSON text.

    Raises:
        VINDecodeError: If the payload is not JSON or does not hold a string
    """
    try:
        value = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        raise VINDecodeError(f"Failed to decode VIN payload: {e}") from e
    return vin_from_value(value)


class VINJSONEncoder(json.JSONEncoder):
    """
    JSON encoder that writes VINs nested in larger documents as plain strings.

    Usage:
        json.dumps({"vin": VIN("WAUZZZ8X7CB000001")}, cls=VINJSONEncoder)
    """

    def default(self, o):
        if isinstance(o, VIN):
            return o.content
        return super().default(o)
