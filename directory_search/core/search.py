"""Search orchestration: geocode, match, resolve state and premium pages, rank, assemble."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from directory_search.core.config import Settings
from directory_search.core.geocoder import GeocodeError, GeocodeUnavailable, GoogleGeocoder
from directory_search.core.landing import resolve_premium
from directory_search.core.matching import match_within_radius
from directory_search.core.states import classify, with_text_fallback
from directory_search.models import COMPANY, DISPOSAL_SITE, SearchResult, ServiceProvider

logger = logging.getLogger(__name__)

DEFAULT_TIER_RANKING: Dict[str, int] = {"premium": 3, "featured": 2, "verified": 1, "basic": 0}


class SearchError(RuntimeError):
    """Base class for search failures surfaced to callers."""


class InvalidSearchInput(SearchError, ValueError):
    """Blank address or a radius that is not a positive number."""


class GeocodeFailed(SearchError):
    """Geocoding failed; `cause` tells not-found apart from provider outages."""

    def __init__(self, cause: GeocodeError) -> None:
        super().__init__(str(cause))
        self.cause = cause

    @property
    def unavailable(self) -> bool:
        return isinstance(self.cause, GeocodeUnavailable)


@dataclass(frozen=True)
class SearchConfig:
    default_radius_miles: float = 50.0
    tier_ranking: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_TIER_RANKING))
    state_text_fallback: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "SearchConfig":
        return cls(
            default_radius_miles=settings.default_radius_miles,
            state_text_fallback=settings.state_text_fallback,
        )


def tier_rank(provider: ServiceProvider, ranking: Mapping[str, int]) -> int:
    return ranking.get((provider.tier or "").lower(), 0)


def sort_by_tier(providers: Sequence[ServiceProvider], ranking: Mapping[str, int]) -> List[ServiceProvider]:
    """Stable sort by tier rank, highest first. Equal ranks keep their input order."""
    return sorted(providers, key=lambda provider: tier_rank(provider, ranking), reverse=True)


def without_provider(
    providers: Sequence[ServiceProvider],
    pinned: Optional[ServiceProvider],
) -> List[ServiceProvider]:
    """Drop the pinned provider (matched by id) so it can be re-inserted once at the top."""
    if pinned is None:
        return list(providers)
    return [provider for provider in providers if provider.id != pinned.id]


def _validate_radius(radius_miles: Any) -> float:
    if isinstance(radius_miles, bool):
        raise InvalidSearchInput("radiusMiles must be numeric")
    try:
        radius = float(radius_miles)
    except (TypeError, ValueError) as exc:
        raise InvalidSearchInput("radiusMiles must be numeric") from exc
    if not math.isfinite(radius) or radius <= 0:
        raise InvalidSearchInput("radiusMiles must be positive")
    return radius


class SearchService:
    def __init__(self, geocoder: Any, store: Any, config: Optional[SearchConfig] = None) -> None:
        self.geocoder = geocoder
        self.store = store
        self.config = config or SearchConfig()

    @classmethod
    def from_settings(cls, settings: Settings, store: Any) -> "SearchService":
        geocoder = GoogleGeocoder(settings.google_api_key, timeout=settings.geocode_timeout_seconds)
        return cls(geocoder, store, SearchConfig.from_settings(settings))

    def search(self, address_text: Optional[str], radius_miles: Any = None) -> SearchResult:
        if radius_miles is None:
            radius_miles = self.config.default_radius_miles
        radius = _validate_radius(radius_miles)
        address = address_text.strip() if isinstance(address_text, str) else ""
        if not address:
            raise InvalidSearchInput("Address is required")

        try:
            geocode = self.geocoder.resolve(address)
        except GeocodeError as exc:
            logger.warning("Geocoding failed for %r: %s", address, exc)
            raise GeocodeFailed(exc) from exc
        if self.config.state_text_fallback:
            geocode = with_text_fallback(geocode, address)

        center = geocode.location
        logger.info(
            "Search %r at (%s, %s), radius=%s miles",
            address,
            center.lat,
            center.lng,
            radius,
        )

        companies = match_within_radius(center, radius, self.store.list_companies())
        disposal_sites = match_within_radius(center, radius, self.store.list_disposal_sites())

        state = classify(geocode)
        premium_company = resolve_premium(self.store, state.state_code, COMPANY)
        premium_site = resolve_premium(self.store, state.state_code, DISPOSAL_SITE)

        other_companies = without_provider(companies, premium_company)
        other_sites = without_provider(disposal_sites, premium_site)
        ranked_companies = sort_by_tier(other_companies, self.config.tier_ranking)

        has_radius_results = bool(ranked_companies) or bool(disposal_sites)
        if premium_company is not None:
            ranked_companies.insert(0, premium_company)
        if premium_site is not None:
            other_sites.insert(0, premium_site)

        logger.info(
            "Search %r matched companies=%d disposal_sites=%d state=%s type=%s",
            address,
            len(ranked_companies),
            len(other_sites),
            state.state_code,
            state.search_type,
        )

        return SearchResult(
            location=center,
            formatted_address=geocode.formatted_address,
            state_code=state.state_code,
            state_name=state.state_name,
            search_type=state.search_type,
            premium_company=premium_company,
            premium_disposal_site=premium_site,
            companies=ranked_companies,
            disposal_sites=other_sites,
            radius_miles=radius,
            has_radius_results=has_radius_results,
        )
