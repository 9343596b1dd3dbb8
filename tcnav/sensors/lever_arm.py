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

"""Lever arm compensation between the IMU and the GNSS antenna"""

from typing import Optional

import numpy as np

from ..core.constants import OMGE


class LeverArm:
    """
    Lever arm from the IMU center to the GNSS antenna phase center.

    Attributes:
        lever_arm (np.ndarray): lever arm vector in the body frame (meters)

    Examples:
        >>> lever = LeverArm(np.array([0.5, 0.0, -0.3]))  # 50cm forward, 30cm up
        >>> antenna_pos = lever.compensate_position(imu_pos_ecef, C_b2e)
    """

    def __init__(self, lever_arm: Optional[np.ndarray] = None):
        """
        Initialize lever arm

        Parameters:
        -----------
        lever_arm : np.ndarray
            3D lever arm vector from IMU center to antenna in body frame (m)
        """
        self.lever_arm = np.zeros(3) if lever_arm is None else np.asarray(lever_arm, dtype=float)

    def compensate_position(self,
                          pos_imu: np.ndarray,
                          R_body: np.ndarray) -> np.ndarray:
        """
        Antenna position from the IMU position

        Parameters:
        -----------
        pos_imu : np.ndarray
            IMU position (3,)
        R_body : np.ndarray
            Rotation matrix from body to the frame of pos_imu (3x3)

        Returns:
        --------
        pos_antenna : np.ndarray
            Antenna position in the frame of pos_imu
        """
        return pos_imu + R_body @ self.lever_arm

    def compensate_velocity(self,
                          vel_imu: np.ndarray,
                          omega_body: np.ndarray,
                          R_body: np.ndarray) -> np.ndarray:
        """
        Antenna velocity from the IMU velocity

        Parameters:
        -----------
        vel_imu : np.ndarray
            IMU velocity (3,)
        omega_body : np.ndarray
            Angular velocity of the body relative to the frame of vel_imu,
            resolved in body frame (3,)
        R_body : np.ndarray
            Rotation matrix from body to the frame of vel_imu (3x3)

        Returns:
        --------
        vel_antenna : np.ndarray
            Antenna velocity
        """
        # v_antenna = v_imu + R_body * (omega_body x lever_arm)
        return vel_imu + R_body @ np.cross(omega_body, self.lever_arm)

    @staticmethod
    def body_rate_wrt_earth(omega_b2i_4b: np.ndarray, C_b2e: np.ndarray) -> np.ndarray:
        """
        Remove earth rotation from an inertial body rate

        Parameters:
        -----------
        omega_b2i_4b : np.ndarray
            Body angular velocity w.r.t. inertial space, body frame (rad/s)
        C_b2e : np.ndarray
            Rotation matrix from body to ECEF (3x3)

        Returns:
        --------
        omega_eb_b : np.ndarray
            Body angular velocity w.r.t. ECEF, body frame (rad/s)
        """
        return np.asarray(omega_b2i_4b, dtype=float) - C_b2e.T @ np.array([0.0, 0.0, OMGE])
