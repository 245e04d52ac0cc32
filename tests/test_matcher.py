"""
Tests for eligibility matching
"""

from booster_api.domain.release.matcher import (
    derive_location_hint,
    find_eligible_boosters,
    locations_match,
)
from booster_api.models import Booking, BoosterProfile

from .conftest import make_booster


class TestLocationHint:
    """Tests for picking the location to match against"""

    def test_prefers_releasing_booster_location(self):
        """Test the releasing booster's city wins over the booking address"""
        booster = BoosterProfile(name="P1", location="Odense")
        booking = Booking(location="Vesterbrogade 12, København")
        assert derive_location_hint(booster, booking) == "Odense"

    def test_falls_back_to_first_address_part(self):
        """Test the first comma-separated part of the booking location is used"""
        booking = Booking(location=" København , Vesterbro")
        assert derive_location_hint(None, booking) == "København"

    def test_blank_booster_location_falls_back(self):
        """Test a blank booster location is ignored"""
        booster = BoosterProfile(name="P1", location="  ")
        booking = Booking(location="Aarhus")
        assert derive_location_hint(booster, booking) == "Aarhus"

    def test_no_location_anywhere(self):
        """Test no hint can be derived without any location"""
        assert derive_location_hint(None, Booking(location=None)) is None
        assert derive_location_hint(None, Booking(location=", Vesterbro")) is None


class TestLocationsMatch:
    """Tests for the permissive location comparison"""

    def test_case_insensitive(self):
        assert locations_match("KØBENHAVN", "københavn")

    def test_hint_inside_booster_location(self):
        assert locations_match("København K", "København")

    def test_booster_location_inside_hint(self):
        assert locations_match("Aarhus", "Aarhus C")

    def test_different_cities(self):
        assert not locations_match("Odense", "Aalborg")

    def test_missing_location(self):
        assert not locations_match(None, "Aalborg")
        assert not locations_match("", "Aalborg")


class TestFindEligibleBoosters:
    """Tests for the eligible booster query"""

    def test_filters_availability_location_and_releaser(self, db_session):
        """Test only available, nearby, other boosters are returned in store order"""
        releaser = make_booster(db_session, name="Releaser", location="København")
        first = make_booster(db_session, name="First", location="København N")
        make_booster(db_session, name="Away", location="Aalborg")
        make_booster(db_session, name="Busy", location="København", is_available=False)
        second = make_booster(db_session, name="Second", location="københavn")

        eligible = find_eligible_boosters(db_session, releaser.id, "København")

        assert [b.id for b in eligible] == [first.id, second.id]

    def test_releasing_booster_never_returned(self, db_session):
        """Test exclusion holds even when the releaser is the only match"""
        releaser = make_booster(db_session, name="Releaser", location="Odense")

        assert find_eligible_boosters(db_session, releaser.id, "Odense") == []

    def test_no_hint_means_no_candidates(self, db_session):
        """Test a missing hint yields an empty list"""
        releaser = make_booster(db_session, name="Releaser")
        make_booster(db_session, name="Other")

        assert find_eligible_boosters(db_session, releaser.id, None) == []
        assert find_eligible_boosters(db_session, releaser.id, "   ") == []
