"""Geocode adapter: free-text address in, normalized GeocodeResult out."""

import logging

import requests

from directory_search.etl.transform import to_geocode_result
from directory_search.models import GeocodeResult
from directory_search.vendors import google_geocoding

logger = logging.getLogger(__name__)

# Statuses that mean "this input cannot be geocoded", as opposed to a provider-side problem.
_NOT_FOUND_STATUSES = {"ZERO_RESULTS", "INVALID_REQUEST"}


class GeocodeError(RuntimeError):
    """Base class for geocoding failures."""


class GeocodeNotFound(GeocodeError):
    """The provider answered but had no candidate for the address."""


class GeocodeUnavailable(GeocodeError):
    """The provider could not be reached, timed out, or is misconfigured."""


class GoogleGeocoder:
    def __init__(self, api_key: str, timeout: float = 10) -> None:
        self.api_key = api_key
        self.timeout = timeout

    def resolve(self, address_text: str) -> GeocodeResult:
        if not self.api_key:
            raise GeocodeUnavailable("Google API key not configured")

        try:
            payload = google_geocoding.geocode(address_text, api_key=self.api_key, timeout=self.timeout)
        except google_geocoding.GoogleGeocodingError as exc:
            if exc.status in _NOT_FOUND_STATUSES:
                raise GeocodeNotFound(f"no geocode match for {address_text!r}") from exc
            raise GeocodeUnavailable(f"geocoding provider error: {exc.status}") from exc
        except requests.RequestException as exc:
            logger.error("Geocoding request failed for %r: %s", address_text, exc)
            raise GeocodeUnavailable(f"geocoding provider unreachable: {exc}") from exc

        results = payload.get("results") or []
        if not results:
            raise GeocodeNotFound(f"no geocode match for {address_text!r}")

        try:
            return to_geocode_result(results[0])
        except ValueError as exc:
            raise GeocodeNotFound(str(exc)) from exc
