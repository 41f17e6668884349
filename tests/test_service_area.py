"""Unit tests for the service-area admission check."""

from fare_engine.domain.entities import Coordinate
from fare_engine.domain.service_area import (
    is_location_in_uk,
    is_location_serviceable,
    is_route_serviceable,
)
from tests.conftest import CENTRAL_LONDON, PARIS, READING


class TestServiceArea:
    def test_london_is_serviceable(self):
        assert is_location_serviceable(CENTRAL_LONDON).serviceable

    def test_outside_uk(self):
        assert not is_location_in_uk(PARIS)
        check = is_location_serviceable(PARIS)
        assert not check.serviceable
        assert "United Kingdom" in check.message

    def test_highlands_polygon(self):
        check = is_location_serviceable(Coordinate(58.0, -4.5))
        assert not check.serviceable
        assert "Highlands" in check.message

    def test_outer_hebrides_radius(self):
        check = is_location_serviceable(Coordinate(57.76, -7.01))
        assert not check.serviceable
        assert "Outer Hebrides" in check.message

    def test_edinburgh_is_serviceable(self):
        assert is_location_serviceable(Coordinate(55.9533, -3.1883)).serviceable

    def test_route_reports_failing_endpoint(self):
        check = is_route_serviceable(READING, PARIS)
        assert not check.serviceable
        assert check.message.startswith("Dropoff location:")

        check = is_route_serviceable(PARIS, READING)
        assert check.message.startswith("Pickup location:")

    def test_long_route_is_not_capped(self):
        # Land's End to Edinburgh: long, but both ends serviceable.
        assert is_route_serviceable(
            Coordinate(50.066, -5.714), Coordinate(55.9533, -3.1883)
        ).serviceable
