"""Great-circle distance helpers."""

import math

from directory_search.models import Location

EARTH_RADIUS_MILES = 3959.0


def distance_miles(a: Location, b: Location) -> float:
    """Haversine distance between two points in miles."""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    # rounding can push h just past 1 for near-antipodal points
    h = min(1.0, h)
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
