"""Radius matching over multi-location provider records."""

import logging
from typing import Iterable, Iterator, List

from directory_search.core.geo import distance_miles
from directory_search.models import Location, ServiceProvider

logger = logging.getLogger(__name__)


def resolvable_locations(provider: ServiceProvider) -> Iterator[Location]:
    """Yield the primary location and every additional location that carries coordinates."""
    if isinstance(provider.primary_location, Location):
        yield provider.primary_location
    for extra in provider.additional_locations or ():
        location = getattr(extra, "location", None)
        if isinstance(location, Location):
            yield location
        else:
            logger.debug("Skipping additional location without coordinates for provider %s", provider.id)


def within_radius(center: Location, radius_miles: float, provider: ServiceProvider) -> bool:
    return any(distance_miles(center, location) <= radius_miles for location in resolvable_locations(provider))


def match_within_radius(
    center: Location,
    radius_miles: float,
    providers: Iterable[ServiceProvider],
) -> List[ServiceProvider]:
    """Return providers with at least one location inside the radius, in input order."""
    return [provider for provider in providers if within_radius(center, radius_miles, provider)]
