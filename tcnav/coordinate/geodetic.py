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

"""Geodetic computations and utilities"""


import numpy as np

from ..core.constants import FE_WGS84, OMGE, RE_WGS84


def radius_of_curvature(lat: float) -> tuple[float, float]:
    """
    Compute radii of curvature at given latitude

    Parameters:
    -----------
    lat : float
        Latitude (rad)

    Returns:
    --------
    M : float
        Meridional radius of curvature (m)
    N : float
        Prime vertical radius of curvature (m)
    """
    sin_lat = np.sin(lat)
    e2 = FE_WGS84 * (2.0 - FE_WGS84)

    # Prime vertical radius
    N = RE_WGS84 / np.sqrt(1.0 - e2 * sin_lat**2)

    # Meridional radius
    M = RE_WGS84 * (1.0 - e2) / (1.0 - e2 * sin_lat**2)**1.5

    return M, N


def gravity_model(lat: float, h: float) -> float:
    """
    Compute local gravity using WGS84 gravity model

    Parameters:
    -----------
    lat : float
        Latitude (rad)
    h : float
        Height above ellipsoid (m)

    Returns:
    --------
    g : float
        Local gravity (m/s^2)
    """
    # WGS84 gravity model parameters
    ge = 9.7803253359  # Gravity at equator (m/s^2)

    sin_lat = np.sin(lat)
    sin2_lat = sin_lat**2

    # Normal gravity at ellipsoid surface (Somigliana formula)
    g0 = ge * (1.0 + 0.00193185265241 * sin2_lat) / \
         np.sqrt(1.0 - 0.00669437999014 * sin2_lat)

    # Height correction (free-air reduction)
    g = g0 * (1.0 - 2.0 * h / RE_WGS84)

    return g



def earth_rate_ned(lat: float) -> np.ndarray:
    """
    Earth rotation rate resolved in the local north-east-down frame

    Parameters:
    -----------
    lat : float
        Latitude (rad)

    Returns:
    --------
    omega_ie_n : np.ndarray
        Earth angular velocity (rad/s)
    """
    return np.array([OMGE * np.cos(lat), 0.0, -OMGE * np.sin(lat)])


def transport_rate_ned(lat: float, h: float, v_ned: np.ndarray) -> np.ndarray:
    """
    Angular velocity of the north-east-down frame relative to ECEF

    Parameters:
    -----------
    lat : float
        Latitude (rad)
    h : float
        Height above ellipsoid (m)
    v_ned : np.ndarray
        Velocity [north, east, down] (m/s)

    Returns:
    --------
    omega_en_n : np.ndarray
        Transport rate (rad/s)
    """
    M, N = radius_of_curvature(lat)
    return np.array([
        v_ned[1] / (N + h),
        -v_ned[0] / (M + h),
        -v_ned[1] * np.tan(lat) / (N + h),
    ])
