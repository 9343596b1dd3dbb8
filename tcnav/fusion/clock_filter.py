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

"""Error model extended with receiver clock error states"""

from typing import Optional

import numpy as np

from ..ins.filtered import INSErrorModel
from .config import BETA_CLOCK_ERROR, BETA_CLOCK_ERROR_RATE
from .state import ClockAugmentedState


class ClockAugmentedFilterModel:
    """Error model of ClockAugmentedState

    Each clock channel k adds two error states at
    P_SIZE_WITHOUT_CLOCK_ERROR + 2k (clock error, m) and the next index
    (clock error rate, m/s), modeled as first order Gauss-Markov processes:

        d(clock_error)/dt      = clock_error_rate - beta_clock_error * clock_error
        d(clock_error_rate)/dt = -beta_clock_error_rate * clock_error_rate

    Process noise enters both clock states independently through Q entries
    appended after the base noise inputs.
    """

    def __init__(self, state: ClockAugmentedState,
                 base_model: Optional[INSErrorModel] = None,
                 beta_clock_error: float = BETA_CLOCK_ERROR,
                 beta_clock_error_rate: float = BETA_CLOCK_ERROR_RATE):
        """
        Parameters:
        -----------
        state : ClockAugmentedState
            Augmented navigation state
        base_model : INSErrorModel, optional
            Error model of state.base, created if omitted
        beta_clock_error : float
            Decay coefficient of clock error (1/s)
        beta_clock_error_rate : float
            Decay coefficient of clock error rate (1/s)
        """
        self.state = state
        self.base_model = INSErrorModel(state.base) if base_model is None else base_model
        if self.base_model.state is not state.base:
            raise ValueError("Base model must be bound to the base of the augmented state")
        self.beta_clock_error = beta_clock_error
        self.beta_clock_error_rate = beta_clock_error_rate

        self.CLOCKS_SUPPORTED = state.CLOCKS_SUPPORTED
        self.STATE_VALUES_WITHOUT_CLOCK_ERROR = state.STATE_VALUES_WITHOUT_CLOCK_ERROR
        self.P_SIZE_WITHOUT_CLOCK_ERROR = self.base_model.P_SIZE
        self.Q_SIZE_WITHOUT_CLOCK_ERROR = self.base_model.Q_SIZE
        self.P_SIZE_CLOCK_ERROR = state.STATE_VALUES_CLOCK_ERROR
        self.Q_SIZE_CLOCK_ERROR = state.STATE_VALUES_CLOCK_ERROR
        self.P_SIZE = self.P_SIZE_WITHOUT_CLOCK_ERROR + self.P_SIZE_CLOCK_ERROR
        self.Q_SIZE = self.Q_SIZE_WITHOUT_CLOCK_ERROR + self.Q_SIZE_CLOCK_ERROR

    def clock_error_column(self, clock_index: int) -> int:
        """Column of the clock error of a channel in P and H"""
        return self.P_SIZE_WITHOUT_CLOCK_ERROR + clock_index * 2

    def clock_error_rate_column(self, clock_index: int) -> int:
        """Column of the clock error rate of a channel in P and H"""
        return self.clock_error_column(clock_index) + 1

    def get_ab(self, accel: np.ndarray, gyro: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Base A and B embedded in the augmented size plus the clock blocks"""
        A_base, B_base = self.base_model.get_ab(accel, gyro)

        A = np.zeros((self.P_SIZE, self.P_SIZE))
        B = np.zeros((self.P_SIZE, self.Q_SIZE))
        A[:self.P_SIZE_WITHOUT_CLOCK_ERROR, :self.P_SIZE_WITHOUT_CLOCK_ERROR] = A_base
        B[:self.P_SIZE_WITHOUT_CLOCK_ERROR, :self.Q_SIZE_WITHOUT_CLOCK_ERROR] = B_base

        # A layout per clock:
        # [-b_c] [      1] : clock error
        # [   0] [-b_cdot] : clock error rate
        for j in range(self.CLOCKS_SUPPORTED):
            i = self.clock_error_column(j)
            A[i, i] += -self.beta_clock_error
            A[i, i + 1] += 1
            A[i + 1, i + 1] += -self.beta_clock_error_rate

        for k in range(self.Q_SIZE_CLOCK_ERROR):
            B[self.P_SIZE_WITHOUT_CLOCK_ERROR + k, self.Q_SIZE_WITHOUT_CLOCK_ERROR + k] += 1

        return A, B

    def correct(self, x_hat: np.ndarray):
        """
        Apply error estimate: clock states first, then the base state

        Parameters:
        -----------
        x_hat : np.ndarray
            Error estimate of length P_SIZE
        """
        x_hat = np.asarray(x_hat, dtype=float).reshape(-1)
        for k in range(self.P_SIZE_CLOCK_ERROR):
            j = self.STATE_VALUES_WITHOUT_CLOCK_ERROR + k
            self.state[j] = self.state[j] - x_hat[self.P_SIZE_WITHOUT_CLOCK_ERROR + k]
        self.base_model.correct(x_hat[:self.P_SIZE_WITHOUT_CLOCK_ERROR])
