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

"""Navigation state augmented with receiver clock errors"""

from typing import Optional

import numpy as np

from ..ins.ins import INS


class InvalidClockIndexError(IndexError):
    """Clock channel index outside [0, clocks)"""


class ClockAugmentedState:
    """Inertial state extended with K receiver clock channels

    Indexed layout: the base state values come first, followed by
    (clock_error, clock_error_rate) pairs in channel order, i.e.
    index STATE_VALUES_WITHOUT_CLOCK_ERROR + 2k is the error of channel k and
    the next index is its rate. Clock errors are in meters and rates in m/s.

    The single-writer rule applies: propagation and correction of the same
    instance must not run concurrently.
    """

    def __init__(self, clocks: int = 1, base: Optional[INS] = None):
        """
        Parameters:
        -----------
        clocks : int
            Number of receiver clocks K, fixed for the lifetime of the state
        base : INS, optional
            Base inertial state, a fresh INS if omitted
        """
        if clocks < 1:
            raise ValueError(f"At least one clock is required, got {clocks}")
        self.base = INS() if base is None else base
        self._clock_error = np.zeros(clocks)
        self._clock_error_rate = np.zeros(clocks)

    @property
    def CLOCKS_SUPPORTED(self) -> int:
        return self._clock_error.shape[0]

    @property
    def STATE_VALUES_WITHOUT_CLOCK_ERROR(self) -> int:
        return self.base.size()

    @property
    def STATE_VALUES_CLOCK_ERROR(self) -> int:
        return 2 * self.CLOCKS_SUPPORTED

    @property
    def STATE_VALUES(self) -> int:
        return self.STATE_VALUES_WITHOUT_CLOCK_ERROR + self.STATE_VALUES_CLOCK_ERROR

    def size(self) -> int:
        return self.STATE_VALUES

    def __len__(self) -> int:
        return self.size()

    def _check_clock(self, index: int) -> int:
        if not 0 <= index < self.CLOCKS_SUPPORTED:
            raise InvalidClockIndexError(
                f"Clock index {index} out of range [0, {self.CLOCKS_SUPPORTED})")
        return index

    def clock_error(self, index: int = 0) -> float:
        """Receiver clock error of channel index (m)"""
        return self._clock_error[self._check_clock(index)]

    def clock_error_rate(self, index: int = 0) -> float:
        """Receiver clock error rate of channel index (m/s)"""
        return self._clock_error_rate[self._check_clock(index)]

    def set_clock_error(self, index: int, value: float):
        self._clock_error[self._check_clock(index)] = value

    def set_clock_error_rate(self, index: int, value: float):
        self._clock_error_rate[self._check_clock(index)] = value

    def shift_clock_error(self, index: int, delta: float):
        """Add delta (m) to the clock error of channel index"""
        self._clock_error[self._check_clock(index)] += delta

    def _clock_slot(self, index: int) -> Optional[tuple[int, bool]]:
        offset = index - self.STATE_VALUES_WITHOUT_CLOCK_ERROR
        if 0 <= offset < self.STATE_VALUES_CLOCK_ERROR:
            return offset >> 1, offset % 2 == 0
        return None

    def __getitem__(self, index: int) -> float:
        slot = self._clock_slot(index)
        if slot is None:
            return self.base[index]
        channel, is_error = slot
        return self._clock_error[channel] if is_error else self._clock_error_rate[channel]

    def __setitem__(self, index: int, value: float):
        slot = self._clock_slot(index)
        if slot is None:
            self.base[index] = value
            return
        channel, is_error = slot
        if is_error:
            self._clock_error[channel] = value
        else:
            self._clock_error_rate[channel] = value

    def update(self, accel: np.ndarray, gyro: np.ndarray, dt: float):
        """
        Propagate clock errors by their rates, then the inertial part

        Clock error rates are not changed here; they evolve only through
        process noise in the filter time update.
        """
        self._clock_error += self._clock_error_rate * dt
        self.base.update(accel, gyro, dt)

    def copy(self) -> 'ClockAugmentedState':
        """Create deep copy of state"""
        res = ClockAugmentedState(self.CLOCKS_SUPPORTED, self.base.copy())
        res._clock_error[:] = self._clock_error
        res._clock_error_rate[:] = self._clock_error_rate
        return res
