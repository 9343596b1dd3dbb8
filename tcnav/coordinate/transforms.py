# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Coordinate transformation utilities"""


import numpy as np

from ..core.constants import FE_WGS84, RE_WGS84


def ecef2llh(xyz: np.ndarray) -> np.ndarray:
    """Convert ECEF coordinates to geodetic coordinates

    Parameters
    ----------
    xyz : np.ndarray
        ECEF coordinates [x, y, z] (m)

    Returns
    -------
    np.ndarray
        [lat, lon, height] (rad, rad, m) on the WGS84 ellipsoid

    Notes
    -----
    Iterative; used for antenna positions offset by a lever arm, where
    the geodetic position is not carried by the navigation quaternion.
    Undefined at the poles.
    """
    x, y, z = xyz[0], xyz[1], xyz[2]

    # Longitude
    lon = np.arctan2(y, x)

    # Iterative computation of latitude and height
    p = np.sqrt(x**2 + y**2)
    lat = np.arctan2(z, p * (1.0 - FE_WGS84))

    for _ in range(5):  # Usually converges in 3-4 iterations
        N = RE_WGS84 / np.sqrt(1.0 - FE_WGS84 * (2.0 - FE_WGS84) * np.sin(lat)**2)
        h = p / np.cos(lat) - N
        lat = np.arctan2(z, p * (1.0 - FE_WGS84 * (2.0 - FE_WGS84) * N / (N + h)))

    return np.array([lat, lon, h])


def llh2ecef(llh: np.ndarray) -> np.ndarray:
    """Convert geodetic coordinates to ECEF coordinates

    Parameters
    ----------
    llh : np.ndarray
        [lat, lon, height] (rad, rad, m) on the WGS84 ellipsoid

    Returns
    -------
    np.ndarray
        ECEF coordinates [x, y, z] (m)
    """
    lat, lon, h = llh[0], llh[1], llh[2]

    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)
    sin_lon = np.sin(lon)
    cos_lon = np.cos(lon)

    N = RE_WGS84 / np.sqrt(1.0 - FE_WGS84 * (2.0 - FE_WGS84) * sin_lat**2)

    x = (N + h) * cos_lat * cos_lon
    y = (N + h) * cos_lat * sin_lon
    z = (N * (1.0 - FE_WGS84 * (2.0 - FE_WGS84)) + h) * sin_lat

    return np.array([x, y, z])


def compute_rotation_matrix_enu(llh: np.ndarray) -> np.ndarray:
    """Compute rotation matrix from ECEF to ENU coordinates

    Parameters
    ----------
    llh : np.ndarray
        Geodetic coordinates [lat, lon, height] (rad, rad, m)

    Returns
    -------
    np.ndarray
        Rotation matrix (3x3) with v_enu = R @ v_ecef
    """
    lat, lon = llh[0], llh[1]
    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)
    sin_lon = np.sin(lon)
    cos_lon = np.cos(lon)

    return np.array([
        [-sin_lon, cos_lon, 0],
        [-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat],
        [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat]
    ])


def latlon2q_e2n(lat: float, lon: float) -> np.ndarray:
    """Quaternion of a north-east-down frame at (lat, lon)

    The returned quaternion q_e2n satisfies v_ecef = quat2dcm(q_e2n) @ v_ned.
    It is the product of a rotation about the ECEF z axis by the longitude
    and a rotation about the resulting y axis by -(lat + pi/2).

    Parameters
    ----------
    lat : float
        Latitude (rad)
    lon : float
        Longitude (rad)

    Returns
    -------
    np.ndarray
        Quaternion [w, x, y, z]
    """
    half_lon = lon * 0.5
    half_tilt = -(lat + np.pi / 2) * 0.5
    c_lon, s_lon = np.cos(half_lon), np.sin(half_lon)
    c_tilt, s_tilt = np.cos(half_tilt), np.sin(half_tilt)
    # q_z(lon) * q_y(-(lat + pi/2))
    return np.array([
        c_lon * c_tilt,
        -s_lon * s_tilt,
        c_lon * s_tilt,
        s_lon * c_tilt,
    ])


def q_e2n2latlon(q_e2n: np.ndarray) -> tuple[float, float]:
    """Latitude and longitude encoded in an ECEF-to-navigation quaternion

    Parameters
    ----------
    q_e2n : np.ndarray
        Quaternion [w, x, y, z] with v_ecef = quat2dcm(q_e2n) @ v_n

    Returns
    -------
    tuple[float, float]
        (latitude, longitude) in radians
    """
    q0, q1, q2, q3 = q_e2n
    alpha = (q0**2 + q3**2) * 2 - 1
    beta = (q0 * q1 - q2 * q3) * 2
    gamma = (q0 * q2 + q1 * q3) * 2
    lat = np.arctan2(-alpha, np.hypot(beta, gamma))
    lon = np.arctan2(beta, -gamma)
    return lat, lon
