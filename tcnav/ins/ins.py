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

"""Quaternion based strapdown inertial navigation state"""

from dataclasses import dataclass, field
from typing import ClassVar

import numpy as np

from ..attitude import euler2quat, quat2dcm, quat2euler, quat_multiply, quat_normalize, rotvec2quat
from ..coordinate import (
    earth_rate_ned,
    gravity_model,
    latlon2q_e2n,
    llh2ecef,
    q_e2n2latlon,
    transport_rate_ned,
)


@dataclass
class INS:
    """Strapdown INS state in a local north-east-down navigation frame

    Position is carried by the ECEF-to-navigation quaternion q_e2n together
    with the ellipsoidal height, so that latitude and longitude never suffer
    from singularities in the state itself.

    Indexed layout (STATE_VALUES = 12):
        [0:3]  velocity w.r.t. earth in navigation frame (north, east, down) (m/s)
        [3:7]  q_e2n, v_ecef = quat2dcm(q_e2n) @ v_n
        [7]    height above WGS84 ellipsoid (m)
        [8:12] q_n2b, v_n = quat2dcm(q_n2b) @ v_b
    """

    STATE_VALUES: ClassVar[int] = 12

    v_2e_4n: np.ndarray = field(default_factory=lambda: np.zeros(3))
    q_e2n: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0]))
    h: float = 0.0
    q_n2b: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0]))

    def __post_init__(self):
        self.v_2e_4n = np.asarray(self.v_2e_4n, dtype=float).copy()
        self.q_e2n = np.asarray(self.q_e2n, dtype=float).copy()
        self.q_n2b = np.asarray(self.q_n2b, dtype=float).copy()
        self.h = float(self.h)

    def size(self) -> int:
        return self.STATE_VALUES

    def __len__(self) -> int:
        return self.size()

    def __getitem__(self, index: int) -> float:
        if 0 <= index < 3:
            return self.v_2e_4n[index]
        if 3 <= index < 7:
            return self.q_e2n[index - 3]
        if index == 7:
            return self.h
        if 8 <= index < 12:
            return self.q_n2b[index - 8]
        raise IndexError(f"INS state index {index} out of range [0, {self.STATE_VALUES})")

    def __setitem__(self, index: int, value: float):
        if 0 <= index < 3:
            self.v_2e_4n[index] = value
        elif 3 <= index < 7:
            self.q_e2n[index - 3] = value
        elif index == 7:
            self.h = float(value)
        elif 8 <= index < 12:
            self.q_n2b[index - 8] = value
        else:
            raise IndexError(f"INS state index {index} out of range [0, {self.STATE_VALUES})")

    # Initialization

    def init_position(self, latitude: float, longitude: float, height: float):
        """Set position from geodetic coordinates (rad, rad, m)"""
        self.q_e2n = latlon2q_e2n(latitude, longitude)
        self.h = float(height)

    def init_velocity(self, v_north: float, v_east: float, v_down: float):
        """Set velocity in the navigation frame (m/s)"""
        self.v_2e_4n = np.array([v_north, v_east, v_down], dtype=float)

    def init_attitude(self, yaw: float, pitch: float, roll: float = 0.0):
        """Set attitude from euler angles (rad)"""
        self.q_n2b = euler2quat(np.array([roll, pitch, yaw], dtype=float))

    # Derived quantities

    @property
    def latitude(self) -> float:
        return q_e2n2latlon(self.q_e2n)[0]

    @property
    def longitude(self) -> float:
        return q_e2n2latlon(self.q_e2n)[1]

    def position_llh(self) -> np.ndarray:
        lat, lon = q_e2n2latlon(self.q_e2n)
        return np.array([lat, lon, self.h])

    def position_xyz(self) -> np.ndarray:
        return llh2ecef(self.position_llh())

    def dcm_n2e(self) -> np.ndarray:
        """Rotation matrix mapping navigation-frame vectors into ECEF"""
        return quat2dcm(self.q_e2n)

    def dcm_b2n(self) -> np.ndarray:
        """Rotation matrix mapping body-frame vectors into the navigation frame"""
        return quat2dcm(self.q_n2b)

    def velocity_xyz(self) -> np.ndarray:
        return self.dcm_n2e() @ self.v_2e_4n

    def euler(self) -> np.ndarray:
        """Attitude as [roll, pitch, yaw] (rad)"""
        return quat2euler(self.q_n2b)

    # Time update

    def update(self, accel: np.ndarray, gyro: np.ndarray, dt: float):
        """
        Propagate the state with one IMU sample

        Parameters:
        -----------
        accel : np.ndarray
            Specific force in body frame (m/s^2)
        gyro : np.ndarray
            Angular velocity w.r.t. inertial space in body frame (rad/s)
        dt : float
            Time step (s)
        """
        accel = np.asarray(accel, dtype=float)
        gyro = np.asarray(gyro, dtype=float)

        lat = self.latitude
        C_b2n = self.dcm_b2n()
        omega_ie_n = earth_rate_ned(lat)
        omega_en_n = transport_rate_ned(lat, self.h, self.v_2e_4n)
        g_n = np.array([0.0, 0.0, gravity_model(lat, self.h)])

        # Velocity
        v_dot = C_b2n @ accel + g_n - np.cross(2 * omega_ie_n + omega_en_n, self.v_2e_4n)

        # Position
        self.q_e2n = quat_normalize(quat_multiply(self.q_e2n, rotvec2quat(omega_en_n * dt)))
        self.h -= self.v_2e_4n[2] * dt

        # Attitude
        omega_nb_b = gyro - C_b2n.T @ (omega_ie_n + omega_en_n)
        self.q_n2b = quat_normalize(quat_multiply(self.q_n2b, rotvec2quat(omega_nb_b * dt)))

        self.v_2e_4n = self.v_2e_4n + v_dot * dt

    def copy(self) -> 'INS':
        """Create deep copy of state"""
        return INS(
            v_2e_4n=self.v_2e_4n.copy(),
            q_e2n=self.q_e2n.copy(),
            h=self.h,
            q_n2b=self.q_n2b.copy(),
        )
