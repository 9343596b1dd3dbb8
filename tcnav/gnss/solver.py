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

"""Ranging solver interface and a reference single point implementation"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np
from numpy.linalg import norm

from ..coordinate import compute_rotation_matrix_enu
from ..core.constants import CLIGHT, D2R, OMGE

logger = logging.getLogger(__name__)

# Constants
ERR_BASE = 3.0      # Elevation independent range error (m)
ERR_EL = 3.0        # Elevation dependent range error (m)


@dataclass
class ReceiverPosition:
    """Receiver position in both ECEF (m) and geodetic (rad, rad, m) form"""
    xyz: np.ndarray
    llh: np.ndarray


@dataclass
class RelativeProperty:
    """
    Per-satellite result of a ranging solver.

    Attributes:
        weight (float): Inverse of the range standard deviation (1/m);
            zero or negative excludes the satellite
        range_residual (float): Measured minus modeled range (m)
        rate_relative_neg (float): Range rate relative term, the negative of
            the modeled range rate plus the satellite clock drift (m/s)
        los_neg (np.ndarray): Unit line of sight from satellite to receiver (ECEF)
    """
    weight: float = 0.0
    range_residual: float = 0.0
    rate_relative_neg: float = 0.0
    los_neg: np.ndarray = field(default_factory=lambda: np.zeros(3))

    @classmethod
    def invalid(cls) -> 'RelativeProperty':
        return cls()


class RangingSolver(ABC):
    """Interface consumed by the tightly coupled corrector"""

    @abstractmethod
    def relative_property(self, prn: int, range_corrected: float, time_arrival: float,
                          usr_pos: ReceiverPosition, usr_vel: np.ndarray) -> RelativeProperty:
        """
        Residual and geometry of one satellite

        Parameters
        ----------
        prn : int
            Satellite number
        range_corrected : float
            Pseudorange with the receiver clock error removed (m)
        time_arrival : float
            Signal reception time in GPS time (s)
        usr_pos : ReceiverPosition
            Receiver position
        usr_vel : np.ndarray
            Receiver velocity in ECEF (m/s)
        """


def sagnac_correction(sat_pos, rec_pos):
    """Sagnac effect correction"""
    return (OMGE / CLIGHT) * (sat_pos[0] * rec_pos[1] - sat_pos[1] * rec_pos[0])


def geodist(sat_pos, rec_pos):
    """Geometric distance and unit vector from receiver to satellite"""
    diff = sat_pos - rec_pos
    r = norm(diff)
    if r > 0:
        e = diff / r
    else:
        e = np.zeros(3)
    return r, e


def satazel(llh, e):
    """Satellite azimuth/elevation from receiver position and line-of-sight vector"""
    enu = compute_rotation_matrix_enu(llh) @ e

    az = np.arctan2(enu[0], enu[1])
    if az < 0:
        az += 2 * np.pi
    el = np.arcsin(np.clip(enu[2], -1.0, 1.0))

    return az, el


def varerr(el, err_base=ERR_BASE, err_el=ERR_EL):
    """Variance of pseudorange error"""
    s_el = np.sin(el)
    if s_el <= 0:
        return np.inf
    return err_base ** 2 + (err_el / s_el) ** 2


SatelliteProvider = Callable[[int, float], Optional[tuple]]


class SinglePositioningSolver(RangingSolver):
    """
    Ranging solver on top of an external satellite state provider.

    The provider is called as provider(prn, t_transmit) and returns
    (position, velocity, clock_bias, clock_drift) in ECEF (m, m/s) and
    seconds (s, s/s), or None when the satellite is unavailable.

    Examples:
        >>> solver = SinglePositioningSolver(ephemeris.satellite_state, elevation_mask=10.0)
        >>> prop = solver.relative_property(5, 2.2e7, t, usr_pos, usr_vel)
    """

    def __init__(self, satellite_provider: SatelliteProvider,
                 elevation_mask: float = 0.0,
                 err_base: float = ERR_BASE,
                 err_el: float = ERR_EL):
        """
        Parameters
        ----------
        satellite_provider : callable
            Satellite state lookup, see class description
        elevation_mask : float
            Minimum elevation (deg)
        err_base : float
            Elevation independent range error (m)
        err_el : float
            Elevation dependent range error (m)
        """
        self.satellite_provider = satellite_provider
        self.elevation_mask = elevation_mask
        self.err_base = err_base
        self.err_el = err_el

    def relative_property(self, prn, range_corrected, time_arrival, usr_pos, usr_vel):
        t_transmit = time_arrival - range_corrected / CLIGHT
        sat = self.satellite_provider(prn, t_transmit)
        if sat is None:
            logger.debug(f"No satellite state for PRN {prn}")
            return RelativeProperty.invalid()
        sat_pos, sat_vel, dts, ddts = sat
        sat_pos = np.asarray(sat_pos, dtype=float)
        sat_vel = np.asarray(sat_vel, dtype=float)

        rho, los = geodist(sat_pos, usr_pos.xyz)
        if rho <= 0:
            return RelativeProperty.invalid()
        rho += sagnac_correction(sat_pos, usr_pos.xyz)

        _, el = satazel(usr_pos.llh, los)
        if el < self.elevation_mask * D2R:
            logger.debug(f"PRN {prn} below elevation mask: {el / D2R:.1f} deg")
            return RelativeProperty.invalid()

        los_neg = -los
        return RelativeProperty(
            weight=1.0 / np.sqrt(varerr(el, self.err_base, self.err_el)),
            range_residual=range_corrected + CLIGHT * dts - rho,
            rate_relative_neg=float(los_neg @ (sat_vel - np.asarray(usr_vel, dtype=float))) + CLIGHT * ddts,
            los_neg=los_neg,
        )
