"""
Fixed-point coordinate validation.

Coordinates are stored as signed integers holding degrees scaled by
1,000,000 (six decimal places). 40.689247 degrees is stored as 40689247.

Invariants:
    - Latitude stays within [-90_000_000, 90_000_000]
    - Longitude stays within [-180_000_000, 180_000_000]
    - Bounds are inclusive and never relaxed
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

COORDINATE_SCALE = 1_000_000

LATITUDE_MIN = -90 * COORDINATE_SCALE
LATITUDE_MAX = 90 * COORDINATE_SCALE
LONGITUDE_MIN = -180 * COORDINATE_SCALE
LONGITUDE_MAX = 180 * COORDINATE_SCALE

_QUANTUM = Decimal(1) / COORDINATE_SCALE


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def valid_coordinates(latitude: Any, longitude: Any) -> bool:
    """Check that a fixed-point coordinate pair lies within bounds.

    Args:
        latitude: Latitude in degrees x 1,000,000
        longitude: Longitude in degrees x 1,000,000

    Returns:
        True if both values are integers inside the inclusive bounds
    """
    if not _is_int(latitude) or not _is_int(longitude):
        return False
    return (
        LATITUDE_MIN <= latitude <= LATITUDE_MAX
        and LONGITUDE_MIN <= longitude <= LONGITUDE_MAX
    )


def to_fixed_point(degrees: float | str | Decimal) -> int:
    """Convert decimal degrees to the fixed-point representation.

    Rounds half away from zero at the sixth decimal place.

    Example:
        >>> to_fixed_point(-74.044502)
        -74044502

    Raises:
        ValueError: If degrees is not a finite number
    """
    try:
        value = Decimal(str(degrees))
    except InvalidOperation:
        raise ValueError(f"Invalid coordinate value: {degrees!r}")
    if not value.is_finite():
        raise ValueError(f"Coordinate must be finite, got {degrees!r}")

    quantized = value.quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    return int(quantized * COORDINATE_SCALE)


def from_fixed_point(value: int) -> float:
    """Convert a fixed-point coordinate back to decimal degrees."""
    return float(Decimal(value) / COORDINATE_SCALE)
