"""HTTP entrypoint for location search and directory lookups (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request

from directory_search.core.config import get_settings
from directory_search.core.db import PostgresProviderStore
from directory_search.core.geocoder import GeocodeError, GeocodeUnavailable
from directory_search.core.landing import resolve_premium
from directory_search.core.search import GeocodeFailed, InvalidSearchInput, SearchService
from directory_search.etl.transform import (
    geocode_result_to_dict,
    landing_page_payload,
    provider_to_dict,
    to_search_payload,
)
from directory_search.models import COMPANY, DISPOSAL_SITE, ServiceProvider

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)


@lru_cache(maxsize=1)
def get_store() -> PostgresProviderStore:
    return PostgresProviderStore()


@lru_cache(maxsize=1)
def get_search_service() -> SearchService:
    return SearchService.from_settings(get_settings(), get_store())


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint. Reads settings only, never touches the database."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "worker_port_config": getattr(settings, "worker_port", None),
                "geocoder_configured": bool(settings.google_api_key),
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.post("/search")
def search() -> Any:
    """
    Search companies and disposal sites around an address.
    Required JSON fields: address
    Optional: radiusMiles (positive number, defaults to DEFAULT_RADIUS_MILES)
    """
    payload = _json_object()

    address = payload.get("address")
    if not isinstance(address, str) or not address.strip():
        return jsonify({"error": "Address is required"}), 400

    service = get_search_service()
    try:
        result = service.search(address, payload.get("radiusMiles"))
    except InvalidSearchInput as exc:
        return jsonify({"error": str(exc)}), 400
    except GeocodeFailed as exc:
        if exc.unavailable:
            return jsonify({"error": "Geocoding service unavailable", "details": str(exc)}), 503
        return jsonify({"error": "Unable to geocode address"}), 400
    except Exception as exc:  # noqa: BLE001
        logger.exception("Search failed for %r: %s", address, exc)
        return jsonify({"error": "Failed to perform search"}), 500

    return jsonify(to_search_payload(result)), 200


@app.post("/geocode")
def geocode() -> Any:
    """Resolve an address to coordinates and state without searching providers."""
    payload = _json_object()
    address = payload.get("address")
    if not isinstance(address, str) or not address.strip():
        return jsonify({"error": "Address is required"}), 400

    try:
        result = get_search_service().geocoder.resolve(address.strip())
    except GeocodeUnavailable as exc:
        return jsonify({"error": "Geocoding service unavailable", "details": str(exc)}), 503
    except GeocodeError:
        return jsonify({"error": "Unable to geocode address"}), 400

    return jsonify(geocode_result_to_dict(result)), 200


@app.get("/state-landing-pages/<state_code>")
def state_landing_page(state_code: str) -> Any:
    return _landing_page_response(state_code, COMPANY, "State landing page not found")


@app.get("/disposal-site-landing-pages/<state_code>")
def disposal_site_landing_page(state_code: str) -> Any:
    return _landing_page_response(state_code, DISPOSAL_SITE, "Disposal site landing page not found")


@app.get("/public/v1/companies")
def public_companies() -> Any:
    """List companies. Optional query params: tier, state, limit."""
    try:
        limit = _parse_limit(request.args.get("limit"))
    except ValueError as exc:
        return jsonify({"success": False, "error": str(exc)}), 400

    providers = get_store().list_companies()
    tier = request.args.get("tier")
    if tier:
        providers = [p for p in providers if (p.tier or "") == tier.lower()]
    return _listing_response(providers, request.args.get("state"), limit)


@app.get("/public/v1/disposal-sites")
def public_disposal_sites() -> Any:
    """List disposal sites. Optional query params: state, limit."""
    try:
        limit = _parse_limit(request.args.get("limit"))
    except ValueError as exc:
        return jsonify({"success": False, "error": str(exc)}), 400

    providers = get_store().list_disposal_sites()
    return _listing_response(providers, request.args.get("state"), limit)


# ---------- Internals ----------


def _json_object() -> Dict[str, Any]:
    """Request body as a dict; arrays, scalars and invalid JSON read as empty."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _landing_page_response(state_code: str, category: str, not_found: str) -> Any:
    code = state_code.strip().upper()
    provider = resolve_premium(get_store(), code, category)
    if provider is None:
        return jsonify({"error": not_found}), 404
    return jsonify(landing_page_payload(code, provider)), 200


def _parse_limit(raw: Optional[str]) -> Optional[int]:
    if raw is None or raw == "":
        return None
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        raise ValueError("limit must be numeric") from None
    if limit <= 0:
        raise ValueError("limit must be positive")
    return limit


def _listing_response(providers: List[ServiceProvider], state: Optional[str], limit: Optional[int]) -> Any:
    if state:
        needle = state.lower()
        providers = [p for p in providers if needle in (p.address or "").lower()]
    if limit is not None:
        providers = providers[:limit]

    data = [provider_to_dict(provider) for provider in providers]
    return jsonify({"success": True, "count": len(data), "data": data}), 200


def main() -> None:
    """Cloud Run injects PORT; fall back to WORKER_PORT for local runs."""
    env_port = os.getenv("PORT")
    logger.info("[BOOT] ENV PORT=%s", env_port)

    port = int(env_port or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)

    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
