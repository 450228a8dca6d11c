"""Utilities for turning geocoder payloads and database rows into models, and models into JSON."""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from directory_search.models import (
    COMPANY,
    AdditionalLocation,
    GeocodeResult,
    Location,
    SearchResult,
    ServiceProvider,
)

logger = logging.getLogger(__name__)

STATE_COMPONENT_TYPE = "administrative_area_level_1"

_PROVIDER_COLUMNS = {
    "id",
    "name",
    "tier",
    "address",
    "phone",
    "website",
    "email",
    "lat",
    "lng",
    "additional_locations",
}


def parse_state(address_components: Iterable[Dict[str, Any]]) -> Tuple[Optional[str], Optional[str]]:
    """Return (short_name, long_name) of the first state-level address component."""
    for component in address_components or []:
        if STATE_COMPONENT_TYPE in set(component.get("types", [])):
            return component.get("short_name"), component.get("long_name")
    return None, None


def is_state_level(types: Iterable[str]) -> bool:
    return STATE_COMPONENT_TYPE in set(types or [])


def to_geocode_result(candidate: Dict[str, Any]) -> GeocodeResult:
    """Normalize one Geocoding API candidate. Raises ValueError when it has no usable geometry."""
    geometry = (candidate.get("geometry") or {}).get("location") or {}
    location = Location.parse(geometry.get("lat"), geometry.get("lng"))
    if location is None:
        raise ValueError(f"geocode candidate has no usable coordinates: {geometry!r}")

    state_code, state_name = parse_state(candidate.get("address_components", []))
    return GeocodeResult(
        location=location,
        formatted_address=candidate.get("formatted_address") or "",
        state_code=state_code,
        state_name=state_name,
        is_state_level_match=is_state_level(candidate.get("types", [])),
    )


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _load_locations_blob(raw: Any) -> List[Any]:
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        raw = json.loads(raw)
    if not isinstance(raw, list):
        raise ValueError("additional locations must be a list")
    return raw


def parse_additional_locations(raw: Any) -> Tuple[AdditionalLocation, ...]:
    """Read-side parsing: keep every entry that is a mapping, drop coordinates that are unusable."""
    try:
        entries = _load_locations_blob(raw)
    except ValueError:
        logger.debug("Discarding unparseable additional locations blob: %r", raw)
        return ()

    locations = []
    for entry in entries:
        if not isinstance(entry, dict):
            logger.debug("Skipping additional location that is not an object: %r", entry)
            continue
        locations.append(
            AdditionalLocation(
                city=_strip_or_none(entry.get("city")),
                address=_strip_or_none(entry.get("address")),
                location=Location.parse(entry.get("lat"), entry.get("lng")),
            )
        )
    return tuple(locations)


def validate_additional_locations(raw: Any) -> List[Dict[str, Any]]:
    """Write-side validation. Returns normalized JSON-ready entries or raises ValueError."""
    entries = _load_locations_blob(raw)
    normalized = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"additional location {index} must be an object")
        city = _strip_or_none(entry.get("city"))
        if not city:
            raise ValueError(f"additional location {index} requires a city")

        lat, lng = entry.get("lat"), entry.get("lng")
        item: Dict[str, Any] = {"city": city, "address": _strip_or_none(entry.get("address"))}
        if lat is None and lng is None:
            normalized.append(item)
            continue
        location = Location.parse(lat, lng)
        if location is None:
            raise ValueError(f"additional location {index} has invalid coordinates: ({lat!r}, {lng!r})")
        item.update(location.to_dict())
        normalized.append(item)
    return normalized


def to_provider(row: Dict[str, Any], category: str) -> ServiceProvider:
    """Convert a provider row (companies or disposal_sites table) into a ServiceProvider."""
    tier = _strip_or_none(row.get("tier")) if category == COMPANY else None
    return ServiceProvider(
        id=row["id"],
        name=row.get("name") or "",
        category=category,
        tier=tier.lower() if tier else None,
        primary_location=Location.parse(row.get("lat"), row.get("lng")),
        additional_locations=parse_additional_locations(row.get("additional_locations")),
        address=row.get("address"),
        phone=row.get("phone"),
        website=row.get("website"),
        email=row.get("email"),
        details={key: value for key, value in row.items() if key not in _PROVIDER_COLUMNS},
    )


def _location_dict(location: Optional[Location]) -> Optional[Dict[str, float]]:
    return location.to_dict() if location is not None else None


def provider_to_dict(provider: ServiceProvider) -> Dict[str, Any]:
    payload: Dict[str, Any] = dict(provider.details)
    payload.update(
        {
            "id": provider.id,
            "name": provider.name,
            "address": provider.address,
            "phone": provider.phone,
            "website": provider.website,
            "email": provider.email,
            "location": _location_dict(provider.primary_location),
            "additionalLocations": [
                {"city": loc.city, "address": loc.address, "location": _location_dict(loc.location)}
                for loc in provider.additional_locations
            ],
        }
    )
    if provider.category == COMPANY:
        payload["tier"] = provider.tier
    return payload


def geocode_result_to_dict(result: GeocodeResult) -> Dict[str, Any]:
    return {
        "location": result.location.to_dict(),
        "formattedAddress": result.formatted_address,
        "state": {"code": result.state_code, "name": result.state_name} if result.state_code else None,
        "isStateLevelMatch": result.is_state_level_match,
    }


def landing_page_payload(state_code: Optional[str], provider: Optional[ServiceProvider]) -> Optional[Dict[str, Any]]:
    if provider is None:
        return None
    key = "company" if provider.category == COMPANY else "disposalSite"
    return {"stateCode": state_code, key: provider_to_dict(provider)}


def to_search_payload(result: SearchResult) -> Dict[str, Any]:
    """Serialize a SearchResult with the field names the web client expects."""
    return {
        "location": {**result.location.to_dict(), "formattedAddress": result.formatted_address},
        "state": {"code": result.state_code, "name": result.state_name} if result.state_code else None,
        "searchType": result.search_type,
        "hasRadiusResults": result.has_radius_results,
        "premiumLandingPage": landing_page_payload(result.state_code, result.premium_company),
        "disposalSiteLandingPage": landing_page_payload(result.state_code, result.premium_disposal_site),
        "companies": [provider_to_dict(provider) for provider in result.companies],
        "disposalSites": [provider_to_dict(provider) for provider in result.disposal_sites],
        "radius": result.radius_miles,
    }
