"""Test distance calculation, geofencing and reported device locations."""
import math
from datetime import datetime, timezone

import pytest

from app.services.gps_service import (
    GeoPoint, Geofence, GeolocationOptions, GPSService,
    LocationUnavailableError, ReportedLocationProvider
)

NOW = datetime(2026, 10, 19, 12, 0, 0)

def meters_to_degrees(meters):
    """Arc length along the equator (or a meridian) to degrees."""
    return math.degrees(meters / GPSService.EARTH_RADIUS_METERS)

def epoch_ms(moment):
    return moment.replace(tzinfo=timezone.utc).timestamp() * 1000

def test_distance_to_self_is_zero():
    assert GPSService.calculate_distance(33.3152, 44.3661, 33.3152, 44.3661) == 0

def test_distance_is_symmetric():
    forward = GPSService.calculate_distance(33.3152, 44.3661, 33.3170, 44.3690)
    backward = GPSService.calculate_distance(33.3170, 44.3690, 33.3152, 44.3661)
    assert forward == pytest.approx(backward, abs=1e-9)

def test_one_degree_of_longitude_at_equator():
    distance = GPSService.calculate_distance(0, 0, 0, 1)
    assert distance == pytest.approx(111194.93, rel=1e-6)

def test_antipodal_points():
    distance = GPSService.calculate_distance(0, 0, 0, 180)
    assert distance == pytest.approx(math.pi * GPSService.EARTH_RADIUS_METERS)

def test_point_about_100m_east_of_origin_is_near_boundary():
    distance = GPSService.calculate_distance(0, 0, 0, 0.0009)
    assert distance == pytest.approx(100.08, abs=0.01)

    result = GPSService.verify_location(GeoPoint(0, 0.0009), Geofence(GeoPoint(0, 0), 100))
    assert result['is_inside'] is False
    assert result['radius'] == 100

def test_geofence_accepts_99m_and_rejects_101m():
    fence = Geofence(GeoPoint(0, 0), 100)

    inside = GPSService.verify_location(GeoPoint(0, meters_to_degrees(99)), fence)
    outside = GPSService.verify_location(GeoPoint(0, meters_to_degrees(101)), fence)

    assert inside['is_inside'] is True
    assert inside['distance'] == pytest.approx(99)
    assert outside['is_inside'] is False
    assert outside['distance'] == pytest.approx(101)

def test_geofence_boundary_is_inclusive():
    point = GeoPoint(0, 0.0009)
    exact = GPSService.calculate_distance(0, 0, point.latitude, point.longitude)

    result = GPSService.verify_location(point, Geofence(GeoPoint(0, 0), exact))

    assert result['is_inside'] is True

def test_geolocation_options_as_browser_position_options():
    options = GeolocationOptions()
    assert options.to_dict() == {
        'enableHighAccuracy': True,
        'timeout': 10000,
        'maximumAge': 0
    }

def test_geolocation_options_from_config():
    options = GeolocationOptions.from_config({
        'GEOLOCATION_HIGH_ACCURACY': False,
        'GEOLOCATION_TIMEOUT_SECONDS': 5,
        'GEOLOCATION_MAXIMUM_AGE_SECONDS': 0
    })
    assert options.enable_high_accuracy is False
    assert options.timeout_seconds == 5

class TestReportedLocationProvider:
    """Location reported by the scanning client."""

    def provider(self, **payload):
        return ReportedLocationProvider.from_payload(payload, now_func=lambda: NOW)

    def test_reported_fix(self):
        point = self.provider(location={'latitude': 33.3152, 'longitude': '44.3661'}).current_position(
            GeolocationOptions()
        )
        assert point == GeoPoint(33.3152, 44.3661)

    @pytest.mark.parametrize('error, code', [
        ({'code': 1, 'message': 'User denied Geolocation'}, LocationUnavailableError.PERMISSION_DENIED),
        ({'code': 2}, LocationUnavailableError.POSITION_UNAVAILABLE),
        ({'code': 3}, LocationUnavailableError.TIMEOUT),
        ({'code': 'permission_denied'}, LocationUnavailableError.PERMISSION_DENIED),
        ('TIMEOUT', LocationUnavailableError.TIMEOUT),
        ({'message': 'no signal'}, LocationUnavailableError.POSITION_UNAVAILABLE),
    ])
    def test_reported_errors(self, error, code):
        provider = self.provider(location_error=error, location={'latitude': 0, 'longitude': 0})
        with pytest.raises(LocationUnavailableError) as exc_info:
            provider.current_position(GeolocationOptions())
        assert exc_info.value.code == code
        assert exc_info.value.message

    def test_permission_denied_keeps_client_message(self):
        provider = self.provider(location_error={'code': 1, 'message': 'User denied Geolocation'})
        with pytest.raises(LocationUnavailableError) as exc_info:
            provider.current_position(GeolocationOptions())
        assert exc_info.value.message == 'User denied Geolocation'

    def test_missing_location(self):
        with pytest.raises(LocationUnavailableError) as exc_info:
            self.provider().current_position(GeolocationOptions())
        assert exc_info.value.code == LocationUnavailableError.POSITION_UNAVAILABLE

    @pytest.mark.parametrize('location', [
        {'latitude': 91, 'longitude': 0},
        {'latitude': 0, 'longitude': -180.5},
        {'latitude': 'north', 'longitude': 0},
        {'latitude': None, 'longitude': 0},
        {'latitude': True, 'longitude': 0},
        {'latitude': float('nan'), 'longitude': 0},
        {'longitude': 0},
    ])
    def test_invalid_coordinates(self, location):
        with pytest.raises(LocationUnavailableError) as exc_info:
            self.provider(location=location).current_position(GeolocationOptions())
        assert exc_info.value.code == LocationUnavailableError.INVALID_POSITION

    def test_fresh_fix_within_timeout_is_accepted(self):
        location = {'latitude': 1, 'longitude': 2, 'timestamp': epoch_ms(NOW) - 4000}
        point = self.provider(location=location).current_position(GeolocationOptions())
        assert point == GeoPoint(1, 2)

    def test_stale_fix_is_rejected(self):
        location = {'latitude': 1, 'longitude': 2, 'timestamp': epoch_ms(NOW) - 60000}
        with pytest.raises(LocationUnavailableError) as exc_info:
            self.provider(location=location).current_position(GeolocationOptions())
        assert exc_info.value.code == LocationUnavailableError.STALE_POSITION

    def test_device_clock_running_behind_is_tolerated(self):
        # 10 s request window plus 30 s skew
        location = {'latitude': 1, 'longitude': 2, 'timestamp': epoch_ms(NOW) - 35000}
        point = self.provider(location=location).current_position(GeolocationOptions())
        assert point == GeoPoint(1, 2)

    def test_device_clock_running_ahead_is_tolerated(self):
        location = {'latitude': 1, 'longitude': 2, 'timestamp': epoch_ms(NOW) + 20000}
        point = self.provider(location=location).current_position(GeolocationOptions())
        assert point == GeoPoint(1, 2)

    def test_fix_from_the_future_is_rejected(self):
        location = {'latitude': 1, 'longitude': 2, 'timestamp': epoch_ms(NOW) + 35000}
        with pytest.raises(LocationUnavailableError) as exc_info:
            self.provider(location=location).current_position(GeolocationOptions())
        assert exc_info.value.code == LocationUnavailableError.INVALID_POSITION

    def test_clock_skew_is_configurable(self):
        location = {'latitude': 1, 'longitude': 2, 'timestamp': epoch_ms(NOW) - 15000}
        provider = ReportedLocationProvider.from_payload(
            {'location': location}, now_func=lambda: NOW, clock_skew_seconds=0
        )
        with pytest.raises(LocationUnavailableError) as exc_info:
            provider.current_position(GeolocationOptions())
        assert exc_info.value.code == LocationUnavailableError.STALE_POSITION

    def test_unparseable_timestamp_is_rejected(self):
        location = {'latitude': 1, 'longitude': 2, 'timestamp': 'yesterday'}
        with pytest.raises(LocationUnavailableError) as exc_info:
            self.provider(location=location).current_position(GeolocationOptions())
        assert exc_info.value.code == LocationUnavailableError.INVALID_POSITION
