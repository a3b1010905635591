"""Utilitaires géographiques / Geographic utilities."""

import math

EARTH_RADIUS_M = 6_371_000.0
METERS_PER_DEGREE = 111_320.0


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance Haversine en metres / Haversine distance in meters.

    Terre spherique (rayon moyen) ; les NaN se propagent, les bornes sont validees en amont.
    Spherical earth (mean radius); NaN propagates, ranges are validated upstream.
    """
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dlat / 2) ** 2 + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def bounding_box(lat: float, lon: float, radius_m: float) -> tuple[float, float, float, float]:
    """
    Boîte englobante autour d'un point / Bounding box around a point.
    Retourne (lat_min, lat_max, lon_min, lon_max).
    Pre-filtre grossier avant distance_meters / Coarse pre-filter before distance_meters.
    """
    delta_lat = radius_m / METERS_PER_DEGREE
    cos_lat = math.cos(math.radians(lat))
    # Aux poles la longitude ne filtre plus rien / At the poles longitude filters nothing
    delta_lon = 180.0 if cos_lat < 1e-9 else radius_m / (METERS_PER_DEGREE * cos_lat)
    return (lat - delta_lat, lat + delta_lat, lon - delta_lon, lon + delta_lon)


def within_radius(lat: float, lon: float, target_lat: float, target_lon: float, radius_m: float) -> bool:
    """Point cible dans le rayon ? / Is the target point within the radius?"""
    return distance_meters(lat, lon, target_lat, target_lon) <= radius_m


def validate_coordinates(latitude: float, longitude: float) -> str | None:
    """Message d'erreur si coordonnees hors bornes / Error message if coordinates are out of range."""
    if not -90 <= latitude <= 90:
        return "Latitude must be between -90 and 90 degrees"
    if not -180 <= longitude <= 180:
        return "Longitude must be between -180 and 180 degrees"
    return None
