"""
test_zone_validator.py — Proximity tiers, deduplication, ordering and the
severity / validity summary.

Facilities are placed due north of the launch point, so distances follow
directly from the latitude offset (0.1° ≈ 11.1 km).
"""

import pytest

from launchsite.integrations.facilities import Facility
from launchsite.integrations.static_hazards import StaticHazardProvider
from launchsite.models.analysis import Location, ZoneWarning
from launchsite.services.zone_validator import (
    HIGH_LATITUDE_MESSAGE,
    VERIFICATION_UNAVAILABLE_MESSAGE,
    _airport_warning,
    _hospital_warning,
    _military_warning,
    _school_warning,
    summarize_warnings,
    validate_zone,
)


class FakeProvider:
    name = "fake"

    def __init__(self, facilities):
        self.facilities = facilities
        self.calls = 0

    async def find_facilities(self, lat, lon, radius_m):
        self.calls += 1
        return self.facilities


class RaisingProvider:
    name = "raising"

    async def find_facilities(self, lat, lon, radius_m):
        raise RuntimeError("connection reset")


def _facility(kind, dlat, base_lat=0.0, ident="1", **kwargs):
    return Facility("node", ident, kind, base_lat + dlat, 0.0, **kwargs)


async def _validate(facilities, lat=0.0):
    return await validate_zone(Location(latitude=lat, longitude=0.0), FakeProvider(facilities))


# ── Airports ─────────────────────────────────────────────────────────────────

class TestAirports:

    async def test_jfk_from_static_table_is_danger(self):
        jfk = Location(latitude=40.6413, longitude=-73.7781)
        result = await validate_zone(jfk, StaticHazardProvider())

        assert result.severity == "danger"
        assert result.is_valid is False
        airport = [w for w in result.warnings if w.type == "airport"]
        assert len(airport) == 1
        assert "CRITICAL" in airport[0].message
        assert "JFK International Airport" in airport[0].message

    async def test_inside_critical_radius(self):
        result = await _validate([_facility("airport", 0.05, name="Test Field")])
        assert result.severity == "danger"
        assert result.warnings[0].message.startswith("CRITICAL")

    async def test_between_tiers_is_caution_and_invalid(self):
        result = await _validate([_facility("airport", 0.1, name="Test Field")])

        assert result.severity == "caution"
        assert result.is_valid is False
        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert warning.type == "airport"
        assert "CRITICAL" not in warning.message
        assert 11_000 < warning.distance < 11_300

    async def test_beyond_caution_radius_is_safe(self):
        result = await _validate([_facility("airport", 0.2)])
        assert result.severity == "safe"
        assert result.is_valid is True
        assert result.warnings == []


# ── Other categories ─────────────────────────────────────────────────────────

class TestOtherCategories:

    async def test_military_critical(self):
        result = await _validate([_facility("military", 0.03, name="Range")])
        assert result.severity == "danger"
        assert result.warnings[0].type == "military"

    async def test_military_caution(self):
        result = await _validate([_facility("military", 0.08, name="Range")])
        assert result.severity == "caution"
        assert result.is_valid is False
        assert "CRITICAL" not in result.warnings[0].message

    async def test_school_critical_within_500m(self):
        result = await _validate([_facility("school", 0.004, name="Elm Primary", subtype="school")])
        assert result.severity == "danger"
        assert result.warnings[0].type == "school"

    async def test_school_caution_is_invalid(self):
        result = await _validate([_facility("school", 0.01, name="Elm Primary")])
        assert result.severity == "caution"
        assert result.is_valid is False

    async def test_nearby_hospital_is_other_and_valid(self):
        result = await _validate([_facility("hospital", 0.01, name="General")])
        assert [w.type for w in result.warnings] == ["other"]
        assert result.severity == "caution"
        assert result.is_valid is True

    async def test_distant_hospital_ignored(self):
        result = await _validate([_facility("hospital", 0.02)])
        assert result.warnings == []

    async def test_unnamed_facility_gets_generic_name(self):
        result = await _validate([_facility("school", 0.01, subtype="college")])
        assert "unnamed college" in result.warnings[0].message


# ── Urban density ────────────────────────────────────────────────────────────

class TestUrbanDensity:

    async def test_large_city_within_10km(self):
        result = await _validate([_facility("place", 0.05, name="Big City", subtype="city", population=150_000)])
        assert [w.type for w in result.warnings] == ["urban_dense"]
        assert result.severity == "caution"
        assert result.is_valid is True

    async def test_mid_town_within_5km(self):
        result = await _validate([_facility("place", 0.03, subtype="town", population=60_000)])
        assert [w.type for w in result.warnings] == ["urban_dense"]

    async def test_mid_town_beyond_5km_ignored(self):
        result = await _validate([_facility("place", 0.06, subtype="town", population=60_000)])
        assert result.warnings == []

    async def test_suburb_within_2km(self):
        result = await _validate([_facility("place", 0.01, name="Leafy", subtype="suburb")])
        assert [w.type for w in result.warnings] == ["urban_dense"]

    async def test_small_town_ignored(self):
        result = await _validate([_facility("place", 0.01, subtype="town", population=8_000)])
        assert result.warnings == []


# ── Provider failure, dedupe, latitude, ordering ─────────────────────────────

class TestValidationFlow:

    async def test_provider_none_is_unverified(self):
        result = await _validate(None)

        assert len(result.warnings) == 1
        assert result.warnings[0].type == "other"
        assert result.warnings[0].message == VERIFICATION_UNAVAILABLE_MESSAGE
        assert result.severity == "caution"
        assert result.is_valid is False

    async def test_provider_exception_is_unverified(self):
        result = await validate_zone(Location(latitude=10, longitude=10), RaisingProvider())
        assert result.warnings[0].message == VERIFICATION_UNAVAILABLE_MESSAGE
        assert result.is_valid is False

    async def test_empty_list_is_safe(self):
        result = await _validate([])
        assert result.severity == "safe"
        assert result.is_valid is True

    async def test_duplicate_elements_warn_once(self):
        f = _facility("airport", 0.1, ident="42")
        result = await _validate([f, f, _facility("airport", 0.1, ident="42")])
        assert len(result.warnings) == 1

    async def test_same_id_different_element_type_not_merged(self):
        node = Facility("node", "7", "school", 0.01, 0.0)
        way = Facility("way", "7", "school", 0.01, 0.0)
        result = await _validate([node, way])
        assert len(result.warnings) == 2

    @pytest.mark.parametrize("lat", [65.0, -65.0])
    async def test_high_latitude(self, lat):
        result = await _validate([], lat=lat)
        assert len(result.warnings) == 1
        assert result.warnings[0].type == "other"
        assert result.warnings[0].message == HIGH_LATITUDE_MESSAGE
        assert result.severity == "caution"
        assert result.is_valid is True

    async def test_exactly_60_degrees_not_flagged(self):
        result = await _validate([], lat=60.0)
        assert result.warnings == []

    async def test_fixed_warning_order(self):
        base = 61.0
        facilities = [
            _facility("place", 0.01, base, "p", subtype="suburb"),
            _facility("hospital", 0.01, base, "h"),
            _facility("school", 0.01, base, "s"),
            _facility("military", 0.08, base, "m"),
            _facility("airport", 0.1, base, "a"),
        ]
        result = await _validate(facilities, lat=base)

        assert [w.type for w in result.warnings] == [
            "airport", "military", "school", "other", "other", "urban_dense",
        ]
        assert result.warnings[4].message == HIGH_LATITUDE_MESSAGE

    async def test_same_inputs_same_output(self):
        facilities = [_facility("airport", 0.1, ident="a"), _facility("school", 0.01, ident="s")]
        first = await _validate(facilities)
        second = await _validate(facilities)
        assert first == second


# ── summarize_warnings ───────────────────────────────────────────────────────

class TestSummarizeWarnings:

    def test_no_warnings_is_safe(self):
        result = summarize_warnings([])
        assert result.severity == "safe"
        assert result.is_valid is True

    def test_critical_marker_without_distance_is_danger(self):
        result = summarize_warnings([ZoneWarning(type="other", message="CRITICAL: manual closure")])
        assert result.severity == "danger"
        assert result.is_valid is False

    def test_critical_distance_without_marker_is_danger(self):
        result = summarize_warnings([ZoneWarning(type="airport", message="close", distance=1_000)])
        assert result.severity == "danger"

    def test_non_blocking_warning_stays_valid(self):
        result = summarize_warnings([ZoneWarning(type="urban_dense", message="busy", distance=3_000)])
        assert result.severity == "caution"
        assert result.is_valid is True


# ── Exact tier boundaries ────────────────────────────────────────────────────

def _verdict(build, kind, distance):
    warning = build(Facility("node", "1", kind, 0.0, 0.0, name="Site"), distance)
    return warning, summarize_warnings([warning] if warning else [])


class TestTierBoundaries:
    """Lower bounds are inclusive for the outer tier: d < critical is critical."""

    @pytest.mark.parametrize("build,kind,distance,severity,is_valid", [
        (_airport_warning, "airport", 7_999, "danger", False),
        (_airport_warning, "airport", 8_000, "caution", False),
        (_airport_warning, "airport", 14_999, "caution", False),
        (_airport_warning, "airport", 15_000, "safe", True),
        (_military_warning, "military", 4_999, "danger", False),
        (_military_warning, "military", 5_000, "caution", False),
        (_military_warning, "military", 9_999, "caution", False),
        (_military_warning, "military", 10_000, "safe", True),
        (_school_warning, "school", 499, "danger", False),
        (_school_warning, "school", 500, "caution", False),
        (_school_warning, "school", 1_999, "caution", False),
        (_school_warning, "school", 2_000, "safe", True),
        (_hospital_warning, "hospital", 1_499, "caution", True),
        (_hospital_warning, "hospital", 1_500, "safe", True),
    ])
    def test_boundary(self, build, kind, distance, severity, is_valid):
        warning, verdict = _verdict(build, kind, distance)

        assert verdict.severity == severity
        assert verdict.is_valid is is_valid
        if severity == "safe":
            assert warning is None
        else:
            assert warning.distance == distance
            assert warning.message.startswith("CRITICAL") is (severity == "danger")


class TestFacilityNamesInMessages:

    async def test_upper_case_hospital_name_stays_caution(self):
        result = await _validate([_facility("hospital", 0.01, name="CRITICAL CARE CENTRE")])

        assert "CRITICAL CARE CENTRE" in result.warnings[0].message
        assert result.severity == "caution"
        assert result.is_valid is True

    async def test_upper_case_town_name_stays_caution(self):
        result = await _validate([
            _facility("place", 0.01, name="CRITICAL POINT", subtype="suburb"),
        ])
        assert result.severity == "caution"

    def test_marker_inside_message_is_not_critical(self):
        warning = ZoneWarning(type="other", message="Hospital CRITICAL CARE is 1.1km away.")
        assert summarize_warnings([warning]).severity == "caution"
