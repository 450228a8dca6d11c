from directory_search.core import states
from directory_search.models import SEARCH_TYPE_LOCAL, SEARCH_TYPE_STATE

from fakes import geocoded


def test_classify_state_level_match():
    result = states.classify(geocoded(39.8, -86.1, "IN", "Indiana", state_level=True))

    assert result.state_code == "IN"
    assert result.state_name == "Indiana"
    assert result.search_type == SEARCH_TYPE_STATE


def test_classify_local_match():
    result = states.classify(geocoded(39.77, -86.16, "IN", "Indiana", state_level=False))

    assert result.search_type == SEARCH_TYPE_LOCAL
    assert result.state_code == "IN"


def test_classify_without_state():
    result = states.classify(geocoded(51.5, -0.12))

    assert result.state_code is None
    assert result.state_name is None
    assert result.search_type == SEARCH_TYPE_LOCAL


def test_extract_state_from_text_code_forms():
    assert states.extract_state_from_text("Indianapolis, IN") == ("IN", "Indiana")
    assert states.extract_state_from_text("1 Monument Cir, Indianapolis, IN 46204, USA") == ("IN", "Indiana")
    assert states.extract_state_from_text("Denver, CO 80202-1234") == ("CO", "Colorado")


def test_extract_state_from_text_names():
    assert states.extract_state_from_text("somewhere in west virginia") == ("WV", "West Virginia")
    assert states.extract_state_from_text("Virginia Beach, Virginia") == ("VA", "Virginia")


def test_extract_state_from_text_ignores_unknown():
    assert states.extract_state_from_text("London, UK") == (None, None)
    assert states.extract_state_from_text("") == (None, None)
    assert states.extract_state_from_text(None) == (None, None)


def test_text_fallback_never_overrides_provider_components():
    original = geocoded(39.77, -86.16, "IN", "Indiana", formatted="Chicago, IL, USA")

    assert states.with_text_fallback(original, "Chicago, IL") is original


def test_text_fallback_fills_missing_state():
    original = geocoded(39.77, -86.16, formatted="Indianapolis, IN 46204, USA")

    result = states.with_text_fallback(original, "downtown indy")

    assert (result.state_code, result.state_name) == ("IN", "Indiana")
    assert result.location == original.location
    assert result.is_state_level_match is False


def test_text_fallback_uses_input_when_formatted_address_has_no_state():
    original = geocoded(39.77, -86.16, formatted="")

    result = states.with_text_fallback(original, "Gary, IN")

    assert result.state_code == "IN"
