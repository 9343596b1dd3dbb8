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

"""Error-state Kalman filter around the strapdown INS"""

import logging
from typing import Optional

import numpy as np
from scipy.linalg import cho_factor, cho_solve

from ..attitude import quat_conj, quat_multiply, quat_normalize, skew
from ..coordinate import earth_rate_ned, radius_of_curvature, transport_rate_ned
from .correct_info import CorrectInfo
from .ins import INS

logger = logging.getLogger(__name__)


class INSErrorModel:
    """Linearized error model of INS

    Error state (P_SIZE = 10):
        [0:3]  velocity error (m/s)
        [3:6]  vector part of the q_e2n error quaternion
        [6]    height error (m)
        [7:10] vector part of the q_n2b error quaternion

    Process noise input (Q_SIZE = 7):
        [0:3]  accelerometer noise
        [3:6]  gyro noise
        [6]    gravity noise

    Errors are defined as estimate minus truth, so correct() subtracts them.
    """

    P_SIZE = 10
    Q_SIZE = 7

    def __init__(self, ins: INS):
        self.ins = ins

    @property
    def state(self) -> INS:
        return self.ins

    def get_ab(self, accel: np.ndarray, gyro: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """
        Continuous-time system matrix A and noise input matrix B

        Parameters:
        -----------
        accel : np.ndarray
            Specific force in body frame (m/s^2)
        gyro : np.ndarray
            Angular velocity in body frame (rad/s)

        Returns:
        --------
        A : np.ndarray
            (P_SIZE, P_SIZE)
        B : np.ndarray
            (P_SIZE, Q_SIZE)
        """
        ins = self.ins
        lat, h, v = ins.latitude, ins.h, ins.v_2e_4n
        C_b2n = ins.dcm_b2n()
        f_n = C_b2n @ np.asarray(accel, dtype=float)
        omega_ie_n = earth_rate_ned(lat)
        omega_en_n = transport_rate_ned(lat, h, v)
        M, N = radius_of_curvature(lat)

        A = np.zeros((self.P_SIZE, self.P_SIZE))
        B = np.zeros((self.P_SIZE, self.Q_SIZE))

        # Velocity
        A[0:3, 0:3] = -skew(2 * omega_ie_n + omega_en_n)
        A[0:3, 7:10] = -2 * skew(f_n)

        # Position, driven by the transport rate
        d_omega_en_dv = np.array([
            [0.0, 1.0 / (N + h), 0.0],
            [-1.0 / (M + h), 0.0, 0.0],
            [0.0, -np.tan(lat) / (N + h), 0.0],
        ])
        A[3:6, 0:3] = 0.5 * ins.dcm_n2e() @ d_omega_en_dv
        A[6, 2] = -1.0

        # Attitude
        A[7:10, 7:10] = -skew(omega_ie_n + omega_en_n)

        B[0:3, 0:3] = C_b2n
        B[2, 6] = 1.0
        B[7:10, 3:6] = 0.5 * C_b2n

        return A, B

    def correct(self, x_hat: np.ndarray):
        """
        Apply error estimate to INS

        Parameters:
        -----------
        x_hat : np.ndarray
            Error estimate, first P_SIZE elements are used
        """
        ins = self.ins
        ins.v_2e_4n = ins.v_2e_4n - x_hat[0:3]

        delta_q_e2n = np.array([1.0, x_hat[3], x_hat[4], x_hat[5]])
        ins.q_e2n = quat_normalize(quat_multiply(quat_conj(delta_q_e2n), ins.q_e2n))
        ins.h -= x_hat[6]

        delta_q_n2b = np.array([1.0, x_hat[7], x_hat[8], x_hat[9]])
        ins.q_n2b = quat_normalize(quat_multiply(quat_conj(delta_q_n2b), ins.q_n2b))


class FilteredINS:
    """Kalman filter driving an error model

    The model supplies P_SIZE, Q_SIZE, state, get_ab(accel, gyro) and
    correct(x_hat); this class owns the covariance arithmetic only.
    """

    def __init__(self, model,
                 P: Optional[np.ndarray] = None,
                 Q: Optional[np.ndarray] = None):
        """
        Initialize filter

        Parameters:
        -----------
        model : INSErrorModel or compatible
            Error model
        P : np.ndarray, optional
            Initial state covariance (P_SIZE x P_SIZE), identity if omitted
        Q : np.ndarray, optional
            Process noise covariance (Q_SIZE x Q_SIZE), identity if omitted
        """
        self.model = model
        self._P = None
        self._Q = None
        self.P = np.eye(model.P_SIZE) if P is None else P
        self.Q = np.eye(model.Q_SIZE) if Q is None else Q

    @property
    def state(self):
        return self.model.state

    @property
    def P(self) -> np.ndarray:
        return self._P

    @P.setter
    def P(self, P: np.ndarray):
        P = np.asarray(P, dtype=float)
        if P.shape != (self.model.P_SIZE, self.model.P_SIZE):
            raise ValueError(f"P must be {self.model.P_SIZE}x{self.model.P_SIZE}, got {P.shape}")
        self._P = P.copy()

    @property
    def Q(self) -> np.ndarray:
        return self._Q

    @Q.setter
    def Q(self, Q: np.ndarray):
        Q = np.asarray(Q, dtype=float)
        if Q.shape != (self.model.Q_SIZE, self.model.Q_SIZE):
            raise ValueError(f"Q must be {self.model.Q_SIZE}x{self.model.Q_SIZE}, got {Q.shape}")
        self._Q = Q.copy()

    def update(self, accel: np.ndarray, gyro: np.ndarray, dt: float):
        """
        Time update

        Parameters:
        -----------
        accel : np.ndarray
            Specific force in body frame (m/s^2)
        gyro : np.ndarray
            Angular velocity in body frame (rad/s)
        dt : float
            Time step (s)
        """
        A, B = self.model.get_ab(accel, gyro)
        self.model.state.update(accel, gyro, dt)

        Phi = np.eye(self.model.P_SIZE) + A * dt
        Gamma = B * dt
        self._P = Phi @ self._P @ Phi.T + Gamma @ self._Q @ Gamma.T

    def correct_primitive(self, info: CorrectInfo) -> Optional[np.ndarray]:
        """
        Measurement update

        Parameters:
        -----------
        info : CorrectInfo
            Observation matrix, residuals and their covariance

        Returns:
        --------
        x_hat : np.ndarray or None
            Applied error estimate, None when info is empty
        """
        if info.is_empty:
            return None

        H, z, R = info.H, info.z, info.R
        P = self._P

        # Innovation covariance
        S = H @ P @ H.T + R

        # Kalman gain, K = P H^T S^-1
        K = cho_solve(cho_factor(S), H @ P).T

        x_hat = K @ z

        I_KH = np.eye(P.shape[0]) - K @ H
        self._P = I_KH @ P @ I_KH.T + K @ R @ K.T

        logger.debug(f"Measurement update with {info.rows} rows, |x_hat|={np.linalg.norm(x_hat):.3e}")
        self.model.correct(x_hat)
        return x_hat
