"""State extraction and search-type classification."""

import logging
import re
from typing import Optional, Tuple

from directory_search.models import (
    SEARCH_TYPE_LOCAL,
    SEARCH_TYPE_STATE,
    GeocodeResult,
    StateClassification,
)

logger = logging.getLogger(__name__)

US_STATES = {
    "AL": "Alabama",
    "AK": "Alaska",
    "AZ": "Arizona",
    "AR": "Arkansas",
    "CA": "California",
    "CO": "Colorado",
    "CT": "Connecticut",
    "DE": "Delaware",
    "DC": "District of Columbia",
    "FL": "Florida",
    "GA": "Georgia",
    "HI": "Hawaii",
    "ID": "Idaho",
    "IL": "Illinois",
    "IN": "Indiana",
    "IA": "Iowa",
    "KS": "Kansas",
    "KY": "Kentucky",
    "LA": "Louisiana",
    "ME": "Maine",
    "MD": "Maryland",
    "MA": "Massachusetts",
    "MI": "Michigan",
    "MN": "Minnesota",
    "MS": "Mississippi",
    "MO": "Missouri",
    "MT": "Montana",
    "NE": "Nebraska",
    "NV": "Nevada",
    "NH": "New Hampshire",
    "NJ": "New Jersey",
    "NM": "New Mexico",
    "NY": "New York",
    "NC": "North Carolina",
    "ND": "North Dakota",
    "OH": "Ohio",
    "OK": "Oklahoma",
    "OR": "Oregon",
    "PA": "Pennsylvania",
    "RI": "Rhode Island",
    "SC": "South Carolina",
    "SD": "South Dakota",
    "TN": "Tennessee",
    "TX": "Texas",
    "UT": "Utah",
    "VT": "Vermont",
    "VA": "Virginia",
    "WA": "Washington",
    "WV": "West Virginia",
    "WI": "Wisconsin",
    "WY": "Wyoming",
}

# ", IN", ", IN 46204", ", IN 46204-1234" followed by a comma or the end of the text.
_STATE_CODE_REGEX = re.compile(r",\s*([A-Z]{2})(?:\s+\d{5}(?:-\d{4})?)?\s*(?:,|$)")
# Longest names first so "West Virginia" wins over "Virginia".
_STATE_NAME_REGEX = re.compile(
    r"\b(" + "|".join(re.escape(name) for name in sorted(US_STATES.values(), key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)
_NAME_TO_CODE = {name.lower(): code for code, name in US_STATES.items()}


def extract_state_from_text(text: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Best-effort state lookup in free text. Heuristic; may mis-parse unusual addresses."""
    if not text:
        return None, None

    for match in _STATE_CODE_REGEX.finditer(text):
        code = match.group(1)
        if code in US_STATES:
            return code, US_STATES[code]

    match = _STATE_NAME_REGEX.search(text)
    if match:
        code = _NAME_TO_CODE[match.group(1).lower()]
        return code, US_STATES[code]
    return None, None


def with_text_fallback(geocode: GeocodeResult, address_text: str) -> GeocodeResult:
    """Fill in a missing state from the formatted address or the raw input. Provider data always wins."""
    if geocode.state_code:
        return geocode

    code, name = extract_state_from_text(geocode.formatted_address)
    if code is None:
        code, name = extract_state_from_text(address_text)
    if code is None:
        return geocode

    logger.info("Recovered state %s from address text for %r", code, address_text)
    return GeocodeResult(
        location=geocode.location,
        formatted_address=geocode.formatted_address,
        state_code=code,
        state_name=name,
        is_state_level_match=geocode.is_state_level_match,
    )


def classify(geocode: GeocodeResult) -> StateClassification:
    search_type = SEARCH_TYPE_STATE if geocode.is_state_level_match else SEARCH_TYPE_LOCAL
    return StateClassification(
        state_code=geocode.state_code,
        state_name=geocode.state_name,
        search_type=search_type,
    )
