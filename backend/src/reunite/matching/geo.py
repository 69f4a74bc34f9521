"""Location scoring and GPS helpers.

Text locations are the primary signal. GPS is recorded where the reporter
stood when submitting, not where the item was, so it only contributes a small
bonus when no text tier applies.
"""

import math
from typing import Optional

from .ports import ItemProfile
from .utils import round_half_up

EARTH_RADIUS_KM = 6371.0

MAX_LOCATION_SCORE = 25
PARTIAL_LOCATION_SCORE = 17  # 70% of max, truncated
AREA_LOCATION_SCORE = round_half_up(MAX_LOCATION_SCORE * 0.5)  # 13

# (max distance km, points), checked in order
GPS_DISTANCE_TIERS = (
    (0.05, 6),
    (0.1, 4),
    (0.2, 3),
    (0.5, 2),
)


def haversine_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometers."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def has_coordinates(item: ItemProfile) -> bool:
    return item.gps_latitude is not None and item.gps_longitude is not None


def item_distance_km(item_a: ItemProfile, item_b: ItemProfile) -> Optional[float]:
    """Distance between two items, or None when either lacks GPS."""
    if not (has_coordinates(item_a) and has_coordinates(item_b)):
        return None
    return haversine_distance_km(
        item_a.gps_latitude, item_a.gps_longitude,
        item_b.gps_latitude, item_b.gps_longitude,
    )


def is_within_radius(item_a: ItemProfile, item_b: ItemProfile, radius_km: float) -> bool:
    """True when both items carry GPS and lie within radius_km of each other.

    Callers decide what a missing coordinate means; the match finder only
    applies this check when both sides have coordinates.
    """
    distance = item_distance_km(item_a, item_b)
    return distance is not None and distance <= radius_km


def gps_proximity_score(distance_km: float) -> int:
    for max_distance, points in GPS_DISTANCE_TIERS:
        if distance_km <= max_distance:
            return points
    return 0


def location_score(lost: ItemProfile, found: ItemProfile) -> int:
    """Tiered location score (0-25).

    Tiers, first hit wins:
    1. Exact text location (case-insensitive): 25
    2. One text location contains the other: 17
    3. Same sub-area, both present: 13
    4. Both sides have GPS: 6 / 4 / 3 / 2 / 0 by distance (50m, 100m, 200m, 500m)

    Blank text locations never produce a text tier.
    """
    lost_location = (lost.location or "").strip().lower()
    found_location = (found.location or "").strip().lower()

    if lost_location and found_location:
        if lost_location == found_location:
            return MAX_LOCATION_SCORE
        if lost_location in found_location or found_location in lost_location:
            return PARTIAL_LOCATION_SCORE

    if lost.area and found.area and lost.area.strip().lower() == found.area.strip().lower():
        return AREA_LOCATION_SCORE

    distance = item_distance_km(lost, found)
    if distance is None:
        return 0
    return gps_proximity_score(distance)


def format_distance(distance_km: float) -> str:
    """Human-readable distance: "150m" below 1 km, "1.2km" above."""
    if distance_km < 1:
        return f"{round_half_up(distance_km * 1000)}m"
    return f"{distance_km:.1f}km"
