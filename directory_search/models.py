"""Core data models shared by the geocoding, matching and search layers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

COMPANY = "company"
DISPOSAL_SITE = "disposal_site"
CATEGORIES = (COMPANY, DISPOSAL_SITE)

SEARCH_TYPE_STATE = "state"
SEARCH_TYPE_LOCAL = "local"


@dataclass(frozen=True, slots=True)
class Location:
    """A WGS84 point. Construction rejects non-finite or out-of-range values."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise ValueError(f"coordinates must be finite: ({self.lat}, {self.lng})")
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"latitude out of range: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"longitude out of range: {self.lng}")

    @classmethod
    def parse(cls, lat: Any, lng: Any) -> Optional["Location"]:
        """Build a Location from loosely typed values, or return None if they are unusable."""
        if lat is None or lng is None or isinstance(lat, bool) or isinstance(lng, bool):
            return None
        try:
            return cls(float(lat), float(lng))
        except (TypeError, ValueError):
            return None

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True, slots=True)
class AdditionalLocation:
    """Satellite office or facility attached to a provider."""

    city: Optional[str] = None
    address: Optional[str] = None
    location: Optional[Location] = None


@dataclass(slots=True)
class ServiceProvider:
    """A company or disposal site as read from the provider store."""

    id: int
    name: str
    category: str = COMPANY
    tier: Optional[str] = None
    primary_location: Optional[Location] = None
    additional_locations: Tuple[AdditionalLocation, ...] = ()
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass(frozen=True, slots=True)
class StateLandingPage:
    id: int
    state_code: str
    category: str
    provider_id: Optional[int] = None
    active: bool = False


@dataclass(frozen=True, slots=True)
class GeocodeResult:
    location: Location
    formatted_address: str
    state_code: Optional[str] = None
    state_name: Optional[str] = None
    is_state_level_match: bool = False


@dataclass(frozen=True, slots=True)
class StateClassification:
    state_code: Optional[str]
    state_name: Optional[str]
    search_type: str = SEARCH_TYPE_LOCAL


@dataclass(slots=True)
class SearchResult:
    location: Location
    formatted_address: str
    state_code: Optional[str]
    state_name: Optional[str]
    search_type: str
    premium_company: Optional[ServiceProvider]
    premium_disposal_site: Optional[ServiceProvider]
    companies: List[ServiceProvider]
    disposal_sites: List[ServiceProvider]
    radius_miles: float
    has_radius_results: bool
