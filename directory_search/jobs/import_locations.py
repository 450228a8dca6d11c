"""CLI job that validates a provider's additional locations and stores them."""

import argparse
import json
import logging
from pathlib import Path
from typing import Optional

from directory_search.core.db import update_additional_locations
from directory_search.models import CATEGORIES

logger = logging.getLogger(__name__)


def import_locations_job(*, category: str, provider_id: int, path: Path) -> int:
    with path.open("r", encoding="utf-8") as fh:
        locations = json.load(fh)

    stored = update_additional_locations(category, provider_id, locations)
    logger.info("Stored %d additional locations for %s %s", len(stored), category, provider_id)
    return len(stored)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Replace a provider's additional locations from a JSON file")
    parser.add_argument("category", choices=CATEGORIES, help="Provider category")
    parser.add_argument("provider_id", type=int, help="Provider id")
    parser.add_argument("path", type=Path, help='JSON list of {"city", "address", "lat", "lng"} objects')
    return parser


def main(argv: Optional[list] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    try:
        import_locations_job(category=args.category, provider_id=args.provider_id, path=args.path)
    except ValueError as exc:
        logger.error("Rejected additional locations: %s", exc)
        return 2
    except LookupError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
