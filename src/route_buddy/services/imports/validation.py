"""Shared name/coordinate validation for every location input path."""

from __future__ import annotations

import math
import re
from typing import Any, Optional

from ...errors import ValidationError
from ...models.domain import Location

_PAIR_SEPARATOR = re.compile(r"\s*;\s*|,\s+|\s+")
_DECIMAL = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


def coerce_float(value: Any, field: str) -> float:
    """Parse a coordinate from a number or string, accepting ``,`` as decimal separator."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"Missing or invalid {field}.")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            raise ValidationError(f"Missing {field}.")
        if not _DECIMAL.match(text):
            raise ValidationError(f"Unable to parse {field} from value '{value}'")
        number = float(text)
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field.capitalize()} must be a finite number.")
    return number


def validate_location(name: Any, lat: Any, lng: Any, address: Any = None) -> Location:
    label = str(name).strip() if name is not None else ""
    if not label:
        raise ValidationError("Location name must not be empty.")

    latitude = coerce_float(lat, "latitude")
    longitude = coerce_float(lng, "longitude")
    if latitude < -90 or latitude > 90:
        raise ValidationError("Latitude must be between -90 and 90.")
    if longitude < -180 or longitude > 180:
        raise ValidationError("Longitude must be between -180 and 180.")

    address_value: Optional[str] = None
    if address is not None:
        address_value = str(address).strip() or None
    return Location(name=label, lat=latitude, lng=longitude, address=address_value)


def parse_coordinate_pair(value: Any) -> tuple[str, str]:
    """Split a combined ``"lat, lng"`` cell into its two parts.

    Accepts ``"48.85, 2.35"``, ``"48.85;2.35"``, ``"48,85; 2,35"`` and
    ``"48.85 2.35"``. A single comma without surrounding whitespace is taken
    as the pair separator (``"48.85,2.35"``).
    """
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError("Missing coordinates.")

    parts = [part for part in _PAIR_SEPARATOR.split(text) if part]
    if len(parts) == 1 and parts[0].count(",") == 1:
        parts = parts[0].split(",")
    if len(parts) != 2:
        raise ValidationError(f"Unable to parse coordinates from value '{value}'")
    return parts[0], parts[1]
