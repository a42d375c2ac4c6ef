"""Geographic helpers: coordinates, great-circle distance and travel ETA.

Distances are computed with the Haversine formula on a spherical Earth.
ETAs assume a fixed average city speed; there is no routing or traffic data
behind them, but the constant must stay at 30 km/h so values match what the
mobile app has always displayed.
"""

from math import radians, sin, cos, sqrt, atan2, isfinite, floor
from typing import NamedTuple

EARTH_RADIUS_KM = 6371  # Earth's mean radius in km
AVERAGE_CITY_SPEED_KMH = 30


class InvalidCoordinateError(ValueError):
    """Raised when a latitude/longitude pair is missing, non-finite or out of range."""


class InvalidDistanceError(ValueError):
    """Raised when a distance is negative or not a finite number."""


def _as_float(value, name, error_cls):
    if isinstance(value, bool):
        raise error_cls(f'{name} must be a number')
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise error_cls(f'{name} must be a number')
    if not isfinite(number):
        raise error_cls(f'{name} must be a finite number')
    return number


class Coordinate(NamedTuple):
    """A (latitude, longitude) pair in decimal degrees."""

    latitude: float
    longitude: float

    @classmethod
    def of(cls, latitude, longitude):
        """Build a validated coordinate.

        Raises:
            InvalidCoordinateError: value is not numeric, NaN/infinite,
                or latitude/longitude is outside [-90, 90] / [-180, 180].
        """
        lat = _as_float(latitude, 'latitude', InvalidCoordinateError)
        lng = _as_float(longitude, 'longitude', InvalidCoordinateError)
        if not -90 <= lat <= 90:
            raise InvalidCoordinateError(f'latitude {lat} is outside [-90, 90]')
        if not -180 <= lng <= 180:
            raise InvalidCoordinateError(f'longitude {lng} is outside [-180, 180]')
        return cls(lat, lng)

    def to_dict(self):
        return {'latitude': self.latitude, 'longitude': self.longitude}


def parse_coordinate(latitude, longitude):
    """Build a Coordinate from request values (strings, numbers or None)."""
    if latitude is None or latitude == '' or longitude is None or longitude == '':
        raise InvalidCoordinateError('latitude and longitude are required')
    return Coordinate.of(latitude, longitude)


def estimate_distance_km(observer: Coordinate, target: Coordinate) -> float:
    """Great-circle distance in km between two coordinates (Haversine).

    Returns full precision; callers round for display.
    """
    d_lat = radians(target.latitude - observer.latitude)
    d_lon = radians(target.longitude - observer.longitude)
    a = (sin(d_lat / 2) ** 2
         + cos(radians(observer.latitude)) * cos(radians(target.latitude)) * sin(d_lon / 2) ** 2)
    # Float error can push a a hair past 1 for antipodal points
    a = min(a, 1.0)
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance(lat1, lon1, lat2, lon2):
    """Calculate distance in km between two raw coordinate pairs."""
    return estimate_distance_km(Coordinate.of(lat1, lon1), Coordinate.of(lat2, lon2))


def estimate_eta_minutes(distance_km: float) -> int:
    """Rough travel time in whole minutes at the average city speed.

    Halves round up, so 0.5 min shows as 1 min.
    """
    km = _as_float(distance_km, 'distance_km', InvalidDistanceError)
    if km < 0:
        raise InvalidDistanceError('distance_km must not be negative')
    time_hours = km / AVERAGE_CITY_SPEED_KMH
    return int(floor(time_hours * 60 + 0.5))


def format_eta(minutes: int) -> str:
    return f'{minutes} min'


def get_bounding_box(center: Coordinate, radius_km):
    """
    Calculate a bounding box for SQL filtering.
    Returns (min_lat, max_lat, min_lng, max_lng). Longitudes may fall
    outside [-180, 180]; see longitude_ranges.
    """
    # Approximate degrees per km at this latitude
    lat_delta = radius_km / 111.0  # ~111 km per degree latitude
    lng_scale = cos(radians(center.latitude))
    if lng_scale < 1e-6 or abs(center.latitude) + lat_delta >= 90:
        # Circle reaches a pole: every longitude is within range
        lng_delta = 180.0
    else:
        lng_delta = radius_km / (111.0 * lng_scale)

    return (
        max(center.latitude - lat_delta, -90.0),
        min(center.latitude + lat_delta, 90.0),
        center.longitude - lng_delta,
        center.longitude + lng_delta
    )


def longitude_ranges(min_lng, max_lng):
    """Split a longitude span into ranges inside [-180, 180].

    A box that crosses the antimeridian becomes two ranges, one on each side.
    """
    if max_lng - min_lng >= 360:
        return [(-180.0, 180.0)]
    if min_lng < -180:
        return [(min_lng + 360, 180.0), (-180.0, max_lng)]
    if max_lng > 180:
        return [(min_lng, 180.0), (-180.0, max_lng - 360)]
    return [(min_lng, max_lng)]


def map_region(observer: Coordinate, target: Coordinate):
    """Map viewport centred between two points, padded so both stay visible."""
    return {
        'latitude': (observer.latitude + target.latitude) / 2,
        'longitude': (observer.longitude + target.longitude) / 2,
        'latitude_delta': abs(observer.latitude - target.latitude) * 1.5 + 0.01,
        'longitude_delta': abs(observer.longitude - target.longitude) * 1.5 + 0.01,
    }
