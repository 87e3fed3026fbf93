"""
Wind speed and direction formatting
Speeds are m/s, directions are meteorological degrees (where the wind comes from)
"""

import math
from typing import Optional

NOT_AVAILABLE = "N/A"
NOT_AVAILABLE_ICON = "wi-na"

# (exclusive upper bound, translation key)
TEXT_SEA_BANDS = [
    (0.3, "CALM"),
    (13.9, "BREEZE"),
    (24.5, "GALE"),
    (32.7, "STORM"),
]
TEXT_SEA_TOP = "HURRICANE"

# Lower bound of each Beaufort force 1-12
BEAUFORT_THRESHOLDS = [0.3, 1.6, 3.4, 5.5, 8.0, 10.8, 13.9, 17.2, 20.8, 24.5, 28.5, 32.7]

# (inclusive upper bound, icon class)
WIND_ICON_BANDS = [
    (0.2, "wi-cloud"),
    (1.5, "wi-windy"),
    (3.3, "wi-windy"),
    (5.4, "wi-windy"),
    (7.9, "wi-strong-wind"),
    (10.7, "wi-strong-wind"),
    (13.8, "wi-strong-wind"),
    (17.1, "wi-gale-warning"),
    (20.7, "wi-gale-warning"),
    (24.4, "wi-gale-warning"),
    (28.4, "wi-storm-warning"),
    (32.6, "wi-storm-warning"),
]
WIND_ICON_TOP = "wi-hurricane-warning"

# Sector i covers (22.5 + 45*(i-1), 22.5 + 45*i]; sector 0 wraps around north
COMPASS_POINTS = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]

# Arrows point the way the wind blows, so a north wind points down
DIRECTION_ICONS = [
    "wi-direction-down",
    "wi-direction-down-left",
    "wi-direction-left",
    "wi-direction-up-left",
    "wi-direction-up",
    "wi-direction-up-right",
    "wi-direction-right",
    "wi-direction-down-right",
]


def format_number(value) -> str:
    """Print 5.0 as "5" and 13.9 as "13.9" """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_available(value) -> bool:
    """None and the 0 sentinel both mean the provider had no value"""
    if value is None or isinstance(value, bool):
        return False
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and number != 0


def get_text_sea(speed: float) -> str:
    """Nautical term key for a wind speed (CALM, BREEZE, GALE, STORM, HURRICANE)"""
    for upper, key in TEXT_SEA_BANDS:
        if speed < upper:
            return key
    return TEXT_SEA_TOP


def get_beaufort_force(speed: float) -> int:
    force = 0
    for threshold in BEAUFORT_THRESHOLDS:
        if speed >= threshold:
            force += 1
        else:
            break
    return force


def get_wind_icon(speed: Optional[float]) -> str:
    if speed is None:
        return NOT_AVAILABLE_ICON
    for upper, icon in WIND_ICON_BANDS:
        if speed <= upper:
            return icon
    return WIND_ICON_TOP


def normalize_degrees(degrees: float) -> float:
    return degrees % 360


def _sector(degrees: float) -> int:
    normalized = normalize_degrees(degrees)
    if normalized > 337.5 or normalized <= 22.5:
        return 0
    sector = 1
    while normalized > 22.5 + 45 * sector:
        sector += 1
    return sector


def get_compass_point(degrees: float) -> str:
    return COMPASS_POINTS[_sector(degrees)]


def get_direction_icon(degrees: Optional[float]) -> str:
    if not is_available(degrees):
        return NOT_AVAILABLE_ICON
    return DIRECTION_ICONS[_sector(float(degrees))]


def get_wind_direction(degrees: Optional[float], direction_type: str = "compass") -> str:
    """
    Direction label for display

    Args:
        degrees: Direction in degrees, 0 or None when unavailable
        direction_type: 'compass' for N/NE/E..., anything else for raw degrees
    """
    if not is_available(degrees):
        return NOT_AVAILABLE

    if direction_type == "compass":
        return get_compass_point(float(degrees))

    return f"{format_number(degrees)}°"
