"""Client utilities for the Google Geocoding API."""

import logging
from typing import Any, Dict

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class GoogleGeocodingError(RuntimeError):
    """Raised when the Geocoding API returns a non-successful status."""

    def __init__(self, status: str, message: str = "") -> None:
        super().__init__(message or status)
        self.status = status


def geocode(address: str, api_key: str, timeout: float = 10) -> Dict[str, Any]:
    params = {"address": address, "key": api_key}
    response = _SESSION.get(_BASE_URL, params=params, timeout=timeout)
    response.raise_for_status()
    payload = response.json()
    status = payload.get("status")
    if status not in {"OK", "ZERO_RESULTS"}:
        logger.error("geocode failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise GoogleGeocodingError(status or "UNKNOWN_ERROR", payload.get("error_message") or "")
    return payload
