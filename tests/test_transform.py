import json

import pytest

from directory_search.etl import transform
from directory_search.models import COMPANY, DISPOSAL_SITE, AdditionalLocation, Location, SearchResult

from fakes import company, disposal_site


def test_parse_state():
    components = [
        {"long_name": "Marion County", "short_name": "Marion County", "types": ["administrative_area_level_2"]},
        {"long_name": "Indiana", "short_name": "IN", "types": ["administrative_area_level_1", "political"]},
    ]
    assert transform.parse_state(components) == ("IN", "Indiana")
    assert transform.parse_state([]) == (None, None)
    assert transform.parse_state(None) == (None, None)


def test_is_state_level():
    assert transform.is_state_level(["administrative_area_level_1", "political"]) is True
    assert transform.is_state_level(["locality", "political"]) is False
    assert transform.is_state_level(["postal_code"]) is False
    assert transform.is_state_level(None) is False


def test_to_geocode_result_requires_coordinates():
    with pytest.raises(ValueError):
        transform.to_geocode_result({"geometry": {"location": {"lat": "x", "lng": 1}}})


def test_parse_additional_locations_is_tolerant():
    raw = json.dumps(
        [
            {"city": "Gary", "address": "1 Broadway", "lat": 41.6, "lng": -87.3},
            {"city": "Muncie"},
            {"city": "Bad", "lat": "north", "lng": -85.4},
            "not an object",
        ]
    )

    parsed = transform.parse_additional_locations(raw)

    assert parsed == (
        AdditionalLocation(city="Gary", address="1 Broadway", location=Location(41.6, -87.3)),
        AdditionalLocation(city="Muncie"),
        AdditionalLocation(city="Bad"),
    )


@pytest.mark.parametrize("raw", [None, "", "{not json", '{"city": "Gary"}', 42])
def test_parse_additional_locations_discards_unusable_blobs(raw):
    assert transform.parse_additional_locations(raw) == ()


def test_validate_additional_locations_normalizes():
    normalized = transform.validate_additional_locations(
        [{"city": " Gary ", "address": "", "lat": "41.6", "lng": "-87.3"}, {"city": "Muncie", "address": "Main"}]
    )

    assert normalized == [
        {"city": "Gary", "address": None, "lat": 41.6, "lng": -87.3},
        {"city": "Muncie", "address": "Main"},
    ]


@pytest.mark.parametrize(
    "raw",
    [
        {"city": "Gary"},
        ["Gary"],
        [{"address": "Main"}],
        [{"city": "Gary", "lat": 41.6}],
        [{"city": "Gary", "lat": 141.6, "lng": -87.3}],
        [{"city": "Gary", "lat": "north", "lng": "west"}],
    ],
)
def test_validate_additional_locations_rejects(raw):
    with pytest.raises(ValueError):
        transform.validate_additional_locations(raw)


def test_to_provider_company_row():
    row = {
        "id": 42,
        "name": "INSERV",
        "tier": "Premium",
        "address": "1 Monument Cir, Indianapolis, IN",
        "phone": "555-0100",
        "website": "https://example.com",
        "email": None,
        "lat": "39.7684",
        "lng": "-86.1581",
        "additional_locations": [{"city": "Gary", "lat": 41.6, "lng": -87.3}],
        "description": "Septic services",
    }

    provider = transform.to_provider(row, COMPANY)

    assert provider.id == 42
    assert provider.tier == "premium"
    assert provider.primary_location == Location(39.7684, -86.1581)
    assert provider.additional_locations[0].location == Location(41.6, -87.3)
    assert provider.details == {"description": "Septic services"}


def test_to_provider_disposal_site_has_no_tier_and_tolerates_bad_coordinates():
    row = {"id": 9, "name": "Landfill", "tier": "premium", "lat": "", "lng": None, "hours": "8-5"}

    provider = transform.to_provider(row, DISPOSAL_SITE)

    assert provider.tier is None
    assert provider.primary_location is None
    assert provider.additional_locations == ()
    assert provider.details == {"hours": "8-5"}


def test_provider_to_dict_shapes():
    comp = company(1, 39.7, -86.1, tier="verified")
    comp.details["description"] = "desc"
    site = disposal_site(2, extra=[AdditionalLocation(city="Gary")])

    comp_payload = transform.provider_to_dict(comp)
    site_payload = transform.provider_to_dict(site)

    assert comp_payload["tier"] == "verified"
    assert comp_payload["location"] == {"lat": 39.7, "lng": -86.1}
    assert comp_payload["description"] == "desc"
    assert "tier" not in site_payload
    assert site_payload["location"] is None
    assert site_payload["additionalLocations"] == [{"city": "Gary", "address": None, "location": None}]


def test_to_search_payload_field_names():
    pinned = company(42, 39.7, -86.1, tier="premium")
    site = disposal_site(9, 39.8, -86.2)
    result = SearchResult(
        location=Location(39.77, -86.16),
        formatted_address="Indianapolis, IN, USA",
        state_code="IN",
        state_name="Indiana",
        search_type="local",
        premium_company=pinned,
        premium_disposal_site=site,
        companies=[pinned],
        disposal_sites=[site],
        radius_miles=50.0,
        has_radius_results=False,
    )

    payload = transform.to_search_payload(result)

    assert payload["location"] == {"lat": 39.77, "lng": -86.16, "formattedAddress": "Indianapolis, IN, USA"}
    assert payload["state"] == {"code": "IN", "name": "Indiana"}
    assert payload["searchType"] == "local"
    assert payload["premiumLandingPage"]["stateCode"] == "IN"
    assert payload["premiumLandingPage"]["company"]["id"] == 42
    assert payload["disposalSiteLandingPage"]["disposalSite"]["id"] == 9
    assert [c["id"] for c in payload["companies"]] == [42]
    assert [s["id"] for s in payload["disposalSites"]] == [9]
    assert payload["radius"] == 50.0
    assert payload["hasRadiusResults"] is False


def test_to_search_payload_without_state():
    result = SearchResult(
        location=Location(51.5, -0.12),
        formatted_address="London, UK",
        state_code=None,
        state_name=None,
        search_type="local",
        premium_company=None,
        premium_disposal_site=None,
        companies=[],
        disposal_sites=[],
        radius_miles=10.0,
        has_radius_results=False,
    )

    payload = transform.to_search_payload(result)

    assert payload["state"] is None
    assert payload["premiumLandingPage"] is None
    assert payload["disposalSiteLandingPage"] is None
