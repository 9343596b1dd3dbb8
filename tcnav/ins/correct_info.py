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

"""Innovation bundle handed to the Kalman measurement update"""

from dataclasses import dataclass

import numpy as np


@dataclass
class CorrectInfo:
    """Row aligned (H, z, R) triple of a measurement update

    Attributes
    ----------
    H : np.ndarray
        Observation matrix, shape (rows, P_SIZE)
    z : np.ndarray
        Residual vector, shape (rows,)
    R : np.ndarray
        Measurement error covariance, shape (rows, rows)

    Notes
    -----
    A bundle with zero rows means "no information": the measurement update
    for this epoch must be skipped.
    """
    H: np.ndarray
    z: np.ndarray
    R: np.ndarray

    def __post_init__(self):
        self.H = np.atleast_2d(np.asarray(self.H, dtype=float))
        self.z = np.asarray(self.z, dtype=float).reshape(-1)
        self.R = np.atleast_2d(np.asarray(self.R, dtype=float))
        rows = self.z.shape[0]
        if rows == 0:
            self.R = self.R.reshape(0, 0)
            return
        if self.H.shape[0] != rows or self.R.shape != (rows, rows):
            raise ValueError(
                f"Inconsistent correction info: H {self.H.shape}, z {self.z.shape}, R {self.R.shape}")

    @classmethod
    def no_info(cls, p_size: int = 0) -> 'CorrectInfo':
        """Empty bundle"""
        return cls(np.zeros((0, p_size)), np.zeros(0), np.zeros((0, 0)))

    @property
    def rows(self) -> int:
        return self.z.shape[0]

    @property
    def is_empty(self) -> bool:
        return self.rows == 0
