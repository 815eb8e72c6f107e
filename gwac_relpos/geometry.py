"""
Spherical geometry for relative pointing.

This module re-expresses a sky position in a spherical frame whose pole
sits at another sky position. With the FFoV pointing as the pole, the
JFoV pointing's new longitude is the rotation of the JFoV about the FFoV
centre, and its new co-latitude is the angular separation between them.

Conventions:
    - Longitude (right ascension) in [0, 2π), measured from +X toward +Y
    - Latitude (declination) measured from the equatorial plane, not the pole
    - All angles in radians; callers convert from degrees

Rotation Convention:
    Active rotation of the pole vector V = (lon0, lat0):
        1. About Z by -lon0, bringing V into the XZ plane
        2. About the new Y axis by -(π/2 - lat0), bringing V onto +Z
"""

import numpy as np
from typing import Tuple
import logging

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * np.pi


def sphere_to_cart(r: float, lon: float, lat: float) -> Tuple[float, float, float]:
    """
    Convert spherical coordinates to Cartesian.

    Args:
        r: Radius
        lon: Longitude in radians
        lat: Latitude in radians (from the equator)

    Returns:
        (x, y, z)
    """
    x = r * np.cos(lat) * np.cos(lon)
    y = r * np.cos(lat) * np.sin(lon)
    z = r * np.sin(lat)
    return float(x), float(y), float(z)


def cart_to_sphere(x: float, y: float, z: float) -> Tuple[float, float, float]:
    """
    Convert Cartesian coordinates to spherical.

    Args:
        x, y, z: Cartesian coordinates

    Returns:
        (r, lon, lat) with lon in [0, 2π) and lat in [-π/2, π/2]
    """
    r = np.sqrt(x * x + y * y + z * z)
    lon = np.arctan2(y, x)
    if lon < 0:
        lon += TWO_PI
    lat = np.arctan2(z, np.hypot(x, y))
    return float(r), float(lon), float(lat)


def frame_rotation_matrix(pole_lon: float, pole_lat: float) -> np.ndarray:
    """
    Rotation matrix carrying the pole (pole_lon, pole_lat) onto +Z.

    Equivalent to Ry(-(π/2 - pole_lat)) @ Rz(-pole_lon) in the active
    convention.

    Args:
        pole_lon: Pole longitude in radians
        pole_lat: Pole latitude in radians

    Returns:
        3x3 rotation matrix
    """
    ca, sa = np.cos(pole_lon), np.sin(pole_lon)
    cb, sb = np.cos(pole_lat), np.sin(pole_lat)

    return np.array([
        [sb * ca, sb * sa, -cb],
        [-sa, ca, 0.0],
        [cb * ca, cb * sa, sb]
    ], dtype=np.float64)


def rotate_to_frame(
    pole_lon: float,
    pole_lat: float,
    lon: float,
    lat: float,
) -> Tuple[float, float]:
    """
    Express a point in the spherical frame whose pole is (pole_lon, pole_lat).

    Args:
        pole_lon: Longitude of the new pole in radians
        pole_lat: Latitude of the new pole in radians
        lon: Longitude of the point in radians
        lat: Latitude of the point in radians

    Returns:
        (lon', lat') of the point in the new frame, radians
    """
    point = np.array(sphere_to_cart(1.0, lon, lat))
    rotated = frame_rotation_matrix(pole_lon, pole_lat) @ point
    _, new_lon, new_lat = cart_to_sphere(*rotated)
    return new_lon, new_lat

