"""GPS and geofence verification service."""
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from app.utils.helpers import utcnow
from app.utils.validators import Validator

@dataclass(frozen=True)
class GeoPoint:
    """Latitude/longitude pair in decimal degrees."""
    latitude: float
    longitude: float

@dataclass(frozen=True)
class Geofence:
    """Circular region a scan must originate from."""
    center: GeoPoint
    radius_meters: float

@dataclass(frozen=True)
class GeolocationOptions:
    """Options the device geolocation request is made with."""
    enable_high_accuracy: bool = True
    timeout_seconds: float = 10
    maximum_age_seconds: float = 0

    @classmethod
    def from_config(cls, config) -> 'GeolocationOptions':
        return cls(
            enable_high_accuracy=config.get('GEOLOCATION_HIGH_ACCURACY', True),
            timeout_seconds=config.get('GEOLOCATION_TIMEOUT_SECONDS', 10),
            maximum_age_seconds=config.get('GEOLOCATION_MAXIMUM_AGE_SECONDS', 0)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Browser ``PositionOptions`` equivalent (milliseconds)."""
        return {
            'enableHighAccuracy': self.enable_high_accuracy,
            'timeout': int(self.timeout_seconds * 1000),
            'maximumAge': int(self.maximum_age_seconds * 1000)
        }

class LocationUnavailableError(Exception):
    """The device could not produce a usable position fix."""

    PERMISSION_DENIED = 'PERMISSION_DENIED'
    POSITION_UNAVAILABLE = 'POSITION_UNAVAILABLE'
    TIMEOUT = 'TIMEOUT'
    INVALID_POSITION = 'INVALID_POSITION'
    STALE_POSITION = 'STALE_POSITION'

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

class GeolocationProvider:
    """Source of the device's current position."""

    def current_position(self, options: GeolocationOptions) -> GeoPoint:
        """Return a fresh fix or raise ``LocationUnavailableError``."""
        raise NotImplementedError

class ReportedLocationProvider(GeolocationProvider):
    """Position reported by the client alongside the scan.

    The client runs the geolocation request itself and sends either a
    ``location`` object (``latitude``, ``longitude`` and optionally the fix
    ``timestamp`` in epoch milliseconds) or a ``location_error`` object
    (``code`` as a name or the W3C numeric code, and ``message``).
    """

    # W3C GeolocationPositionError codes
    BROWSER_ERROR_CODES = {
        1: LocationUnavailableError.PERMISSION_DENIED,
        2: LocationUnavailableError.POSITION_UNAVAILABLE,
        3: LocationUnavailableError.TIMEOUT,
    }

    DEFAULT_MESSAGES = {
        LocationUnavailableError.PERMISSION_DENIED: 'Location permission was denied',
        LocationUnavailableError.POSITION_UNAVAILABLE: 'Device location is unavailable',
        LocationUnavailableError.TIMEOUT: 'Timed out waiting for device location',
    }

    # Tolerated difference between the device clock and the server clock
    DEFAULT_CLOCK_SKEW_SECONDS = 30

    def __init__(
        self,
        location: Optional[Dict[str, Any]] = None,
        location_error: Optional[Any] = None,
        now_func: Callable[[], datetime] = utcnow,
        clock_skew_seconds: float = DEFAULT_CLOCK_SKEW_SECONDS
    ):
        self.location = location
        self.location_error = location_error
        self.now_func = now_func
        self.clock_skew_seconds = clock_skew_seconds

    @classmethod
    def from_payload(
        cls,
        data: Dict[str, Any],
        now_func: Callable[[], datetime] = utcnow,
        clock_skew_seconds: float = DEFAULT_CLOCK_SKEW_SECONDS
    ) -> 'ReportedLocationProvider':
        return cls(
            location=data.get('location'),
            location_error=data.get('location_error'),
            now_func=now_func,
            clock_skew_seconds=clock_skew_seconds
        )

    def current_position(self, options: GeolocationOptions) -> GeoPoint:
        if self.location_error:
            raise self._reported_error()

        if not isinstance(self.location, dict):
            raise LocationUnavailableError(
                LocationUnavailableError.POSITION_UNAVAILABLE,
                'Device location was not provided'
            )

        latitude = Validator.parse_coordinate(self.location.get('latitude'), 90)
        longitude = Validator.parse_coordinate(self.location.get('longitude'), 180)
        if latitude is None or longitude is None:
            raise LocationUnavailableError(
                LocationUnavailableError.INVALID_POSITION,
                'Device reported invalid coordinates'
            )

        timestamp = self.location.get('timestamp')
        if timestamp is not None:
            self._check_fix_age(timestamp, options)

        return GeoPoint(latitude, longitude)

    def _reported_error(self) -> LocationUnavailableError:
        error = self.location_error
        code, message = error, None
        if isinstance(error, dict):
            code, message = error.get('code'), error.get('message')

        if isinstance(code, int) and not isinstance(code, bool):
            code = self.BROWSER_ERROR_CODES.get(code)
        elif isinstance(code, str):
            code = code.strip().upper() or None

        code = code or LocationUnavailableError.POSITION_UNAVAILABLE
        message = message or self.DEFAULT_MESSAGES.get(code, 'Device location is unavailable')
        return LocationUnavailableError(code, message)

    def _check_fix_age(self, timestamp: Any, options: GeolocationOptions) -> None:
        # A fresh fix must have been taken within the request timeout, give or
        # take the allowed clock skew
        try:
            fix_time = datetime.fromtimestamp(float(timestamp) / 1000, tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError):
            raise LocationUnavailableError(
                LocationUnavailableError.INVALID_POSITION,
                'Device reported an invalid fix timestamp'
            )

        age = (self.now_func() - fix_time.replace(tzinfo=None)).total_seconds()
        if age < -self.clock_skew_seconds:
            raise LocationUnavailableError(
                LocationUnavailableError.INVALID_POSITION,
                'Device location fix is timestamped in the future'
            )
        if age > options.maximum_age_seconds + options.timeout_seconds + self.clock_skew_seconds:
            raise LocationUnavailableError(
                LocationUnavailableError.STALE_POSITION,
                'Device location fix is too old; a fresh fix is required'
            )

class GPSService:
    """Service for GPS and location verification."""

    EARTH_RADIUS_METERS = 6371000

    @staticmethod
    def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate great-circle distance between two GPS points in meters."""
        R = GPSService.EARTH_RADIUS_METERS

        lat1_rad = math.radians(lat1)
        lat2_rad = math.radians(lat2)
        delta_lat = math.radians(lat2 - lat1)
        delta_lon = math.radians(lon2 - lon1)

        a = (math.sin(delta_lat/2) ** 2 +
             math.cos(lat1_rad) * math.cos(lat2_rad) *
             math.sin(delta_lon/2) ** 2)
        # Rounding can push ``a`` a hair past 1 for antipodal points
        a = min(1.0, a)
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))

        return R * c

    @staticmethod
    def verify_location(point: GeoPoint, geofence: Geofence) -> Dict:
        """Verify if the point is within the geofence (boundary inclusive)."""
        distance = GPSService.calculate_distance(
            geofence.center.latitude, geofence.center.longitude,
            point.latitude, point.longitude
        )

        is_inside = distance <= geofence.radius_meters

        return {
            'is_inside': is_inside,
            'distance': distance,
            'radius': geofence.radius_meters,
            'center': {
                'latitude': geofence.center.latitude,
                'longitude': geofence.center.longitude
            }
        }
