"""Resolve the premium provider bound to a state landing page."""

import logging
from typing import Any, Optional

from directory_search.models import CATEGORIES, COMPANY, ServiceProvider, StateLandingPage

logger = logging.getLogger(__name__)


def get_provider(store: Any, category: str, provider_id: int) -> Optional[ServiceProvider]:
    if category == COMPANY:
        return store.get_company(provider_id)
    return store.get_disposal_site(provider_id)


def find_active_landing_page(store: Any, state_code: Optional[str], category: str) -> Optional[StateLandingPage]:
    if category not in CATEGORIES:
        raise ValueError(f"unknown provider category: {category}")
    if not state_code:
        return None

    page = store.get_landing_page(state_code.strip().upper(), category)
    if page is None or not page.active or page.provider_id is None:
        return None
    return page


def resolve_premium(store: Any, state_code: Optional[str], category: str) -> Optional[ServiceProvider]:
    """Return the provider bound to the active landing page for this state and category, if any."""
    page = find_active_landing_page(store, state_code, category)
    if page is None:
        return None

    provider = get_provider(store, category, page.provider_id)
    if provider is None:
        logger.warning(
            "Landing page %s for %s (%s) points at missing provider %s",
            page.id,
            page.state_code,
            category,
            page.provider_id,
        )
    return provider
