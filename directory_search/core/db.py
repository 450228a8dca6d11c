"""Database helpers for the provider and landing-page store."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from psycopg2 import extras, pool

from directory_search.core.config import get_settings
from directory_search.etl.transform import to_provider, validate_additional_locations
from directory_search.models import COMPANY, DISPOSAL_SITE, ServiceProvider, StateLandingPage

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.SimpleConnectionPool] = None

_PROVIDER_TABLES = {COMPANY: "companies", DISPOSAL_SITE: "disposal_sites"}

_LANDING_PAGE_QUERIES = {
    COMPANY: """
SELECT id, state_code, company_id AS provider_id, active
FROM state_landing_pages
WHERE state_code = %(state_code)s
LIMIT 1;
""",
    DISPOSAL_SITE: """
SELECT id, state_code, disposal_site_id AS provider_id, active
FROM disposal_site_landing_pages
WHERE state_code = %(state_code)s
LIMIT 1;
""",
}

_ACTIVE_VALUES = {"yes", "true", "1", "active"}


def init_pool(minconn: int = 1, maxconn: int = 5) -> pool.SimpleConnectionPool:
    """Initialise and return the shared connection pool."""
    global _connection_pool
    if _connection_pool is None:
        settings = get_settings()
        if not settings.database_url:
            raise RuntimeError("DATABASE_URL is required for database connections")
        _connection_pool = pool.SimpleConnectionPool(
            minconn,
            maxconn,
            dsn=settings.database_url,
            connect_timeout=10,
        )
        logger.info("Database connection pool initialised")
    return _connection_pool


@contextmanager
def get_connection():
    """Context manager yielding a pooled connection."""
    pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


def _fetch_all(sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    with get_connection() as conn:
        with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
            cur.execute(sql, params or {})
            return [dict(row) for row in cur.fetchall()]


def _fetch_one(sql: str, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    rows = _fetch_all(sql, params)
    return rows[0] if rows else None


def _is_active(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _ACTIVE_VALUES


def _table_for(category: str) -> str:
    try:
        return _PROVIDER_TABLES[category]
    except KeyError:
        raise ValueError(f"unknown provider category: {category}") from None


def list_providers(category: str) -> List[ServiceProvider]:
    table = _table_for(category)
    rows = _fetch_all(f"SELECT * FROM {table} ORDER BY id;")
    return [to_provider(row, category) for row in rows]


def get_provider(category: str, provider_id: int) -> Optional[ServiceProvider]:
    table = _table_for(category)
    row = _fetch_one(f"SELECT * FROM {table} WHERE id = %(id)s;", {"id": provider_id})
    return to_provider(row, category) if row else None


def get_landing_page(state_code: str, category: str) -> Optional[StateLandingPage]:
    """Return the landing page configured for a state, active or not."""
    if category not in _LANDING_PAGE_QUERIES:
        raise ValueError(f"unknown provider category: {category}")
    row = _fetch_one(_LANDING_PAGE_QUERIES[category], {"state_code": state_code.strip().upper()})
    if row is None:
        return None
    return StateLandingPage(
        id=row["id"],
        state_code=row["state_code"],
        category=category,
        provider_id=row.get("provider_id"),
        active=_is_active(row.get("active")),
    )


def update_additional_locations(category: str, provider_id: int, locations: Any) -> List[Dict[str, Any]]:
    """Validate and persist a provider's additional locations. Raises ValueError before any write."""
    table = _table_for(category)
    normalized = validate_additional_locations(locations)

    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(
                f"UPDATE {table} SET additional_locations = %(locations)s, updated_at = NOW() WHERE id = %(id)s;",
                {"locations": extras.Json(normalized), "id": provider_id},
            )
            updated = cur.rowcount
        conn.commit()

    if not updated:
        raise LookupError(f"{category} {provider_id} does not exist")
    logger.debug("Stored %d additional locations for %s %s", len(normalized), category, provider_id)
    return normalized


class PostgresProviderStore:
    """Read interface used by the search service, backed by the pooled connection."""

    def list_companies(self) -> List[ServiceProvider]:
        return list_providers(COMPANY)

    def list_disposal_sites(self) -> List[ServiceProvider]:
        return list_providers(DISPOSAL_SITE)

    def get_company(self, provider_id: int) -> Optional[ServiceProvider]:
        return get_provider(COMPANY, provider_id)

    def get_disposal_site(self, provider_id: int) -> Optional[ServiceProvider]:
        return get_provider(DISPOSAL_SITE, provider_id)

    def get_landing_page(self, state_code: str, category: str) -> Optional[StateLandingPage]:
        return get_landing_page(state_code, category)

