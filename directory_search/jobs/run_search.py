"""CLI job to run a single location search and print the result as JSON."""

import argparse
import json
import logging
import sys
from typing import Optional

from directory_search.core.config import get_settings
from directory_search.core.db import PostgresProviderStore
from directory_search.core.search import GeocodeFailed, InvalidSearchInput, SearchService
from directory_search.etl.transform import to_search_payload

logger = logging.getLogger(__name__)


def run_search_job(*, address: str, radius_miles: Optional[float]) -> dict:
    settings = get_settings()
    service = SearchService.from_settings(settings, PostgresProviderStore())
    result = service.search(address, radius_miles)
    logger.info(
        "Search complete: companies=%d disposal_sites=%d has_radius_results=%s",
        len(result.companies),
        len(result.disposal_sites),
        result.has_radius_results,
    )
    return to_search_payload(result)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search providers around an address")
    parser.add_argument("address", help="Street address, city/state, postal code or state name")
    parser.add_argument(
        "--radius",
        dest="radius_miles",
        type=float,
        default=get_settings().default_radius_miles,
        help="Search radius in miles",
    )
    return parser


def main(argv: Optional[list] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        payload = run_search_job(address=args.address, radius_miles=args.radius_miles)
    except InvalidSearchInput as exc:
        logger.error("Invalid search: %s", exc)
        return 2
    except GeocodeFailed as exc:
        logger.error("Geocoding failed: %s", exc)
        return 3 if exc.unavailable else 2

    json.dump(payload, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
