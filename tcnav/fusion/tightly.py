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

"""Tightly coupled INS/GNSS measurement update

Raw pseudorange and range rate of every satellite are linearized around the
current augmented state and fused directly by the Kalman filter. Whole
millisecond receiver clock jumps are detected from the mean range residual
and repaired before the update.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, Optional

import numpy as np

from ..core.constants import CLIGHT, E_WGS84, LAMBDA_L1, RE_WGS84
from ..coordinate import ecef2llh
from ..gnss.solver import RangingSolver, ReceiverPosition
from ..ins.correct_info import CorrectInfo
from ..ins.filtered import FilteredINS
from ..ins.ins import INS
from ..logger import LogLevel
from ..observation.raw_data import MeasurementItem, RawObservationSet
from ..sensors.lever_arm import LeverArm
from .clock_filter import ClockAugmentedFilterModel
from .config import TightlyCoupledConfig
from .state import ClockAugmentedState

logger = logging.getLogger(__name__)


class CorrectionOutcome(Enum):
    """Result of one measurement update attempt"""
    NO_OBSERVATION = 'no_observation'
    NOMINAL = 'nominal'
    JUMP_FIXED = 'jump_fixed'
    JUMP_UNRESOLVED = 'jump_unresolved'

    @property
    def updated(self) -> bool:
        """Whether the Kalman update was applied"""
        return self in (CorrectionOutcome.NOMINAL, CorrectionOutcome.JUMP_FIXED)


@dataclass
class ReceiverState:
    """
    Receiver snapshot at signal reception.

    Attributes:
        t (float): Reception time, epoch time minus clock error / c (s)
        clock_index (int): Clock channel
        clock_error (float): Clock error used, including any trial shift (m)
        pos (ReceiverPosition): Antenna position
        vel (np.ndarray): Antenna velocity in ECEF (m/s)
    """
    t: float
    clock_index: int
    clock_error: float
    pos: ReceiverPosition
    vel: np.ndarray


CorrectInfoGenerator = Callable[..., CorrectInfo]


class TightlyCoupledCorrector:
    """
    Measurement update of a clock augmented INS with raw GNSS observations.

    Examples:
        >>> corrector = TightlyCoupledCorrector.create(TightlyCoupledConfig(clocks=1))
        >>> corrector.state.base.init_position(lat, lon, h)
        >>> corrector.filter.update(accel, gyro, dt)
        >>> outcome = corrector.correct(raw)
    """

    def __init__(self, filtered_ins: FilteredINS, config: Optional[TightlyCoupledConfig] = None):
        """
        Parameters:
        -----------
        filtered_ins : FilteredINS
            Kalman filter whose model is a ClockAugmentedFilterModel
        config : TightlyCoupledConfig, optional
            Jump detection and noise parameters, defaults if omitted
        """
        if not isinstance(filtered_ins.model, ClockAugmentedFilterModel):
            raise TypeError("Filter model must be a ClockAugmentedFilterModel")
        if config is not None and config.clocks != filtered_ins.model.CLOCKS_SUPPORTED:
            raise ValueError(f"Configuration expects {config.clocks} clocks, "
                             f"filter model supports {filtered_ins.model.CLOCKS_SUPPORTED}")
        self.filter = filtered_ins
        self.config = TightlyCoupledConfig(clocks=filtered_ins.model.CLOCKS_SUPPORTED) if config is None else config

    @classmethod
    def create(cls, config: Optional[TightlyCoupledConfig] = None,
               ins: Optional[INS] = None,
               P: Optional[np.ndarray] = None,
               Q: Optional[np.ndarray] = None) -> 'TightlyCoupledCorrector':
        """Build state, error model and filter from a configuration"""
        config = TightlyCoupledConfig() if config is None else config
        state = ClockAugmentedState(config.clocks, ins)
        model = ClockAugmentedFilterModel(
            state,
            beta_clock_error=config.beta_clock_error,
            beta_clock_error_rate=config.beta_clock_error_rate)
        return cls(FilteredINS(model, P, Q), config)

    @property
    def model(self) -> ClockAugmentedFilterModel:
        return self.filter.model

    @property
    def state(self) -> ClockAugmentedState:
        return self.filter.model.state

    def receiver_state(self, t: float, clock_index: int,
                       clock_error_shift: float = 0.0,
                       lever_arm_b: Optional[np.ndarray] = None,
                       omega_b2i_4b: Optional[np.ndarray] = None) -> ReceiverState:
        """
        Receiver snapshot for one epoch

        Parameters:
        -----------
        t : float
            Epoch time of the observation (s)
        clock_index : int
            Clock channel
        clock_error_shift : float
            Trial shift added to the clock error estimate (m)
        lever_arm_b : np.ndarray, optional
            IMU to antenna lever arm in body frame (m)
        omega_b2i_4b : np.ndarray, optional
            Body angular velocity w.r.t. inertial space in body frame (rad/s),
            required together with lever_arm_b
        """
        ins = self.state.base
        clock_error = self.state.clock_error(clock_index) + clock_error_shift
        xyz = ins.position_xyz()
        vel = ins.velocity_xyz()

        if lever_arm_b is None:
            pos = ReceiverPosition(xyz, ins.position_llh())
        else:
            lever = LeverArm(lever_arm_b)
            C_b2e = ins.dcm_n2e() @ ins.dcm_b2n()
            xyz = lever.compensate_position(xyz, C_b2e)
            pos = ReceiverPosition(xyz, ecef2llh(xyz))
            if omega_b2i_4b is not None:
                vel = lever.compensate_velocity(
                    vel, LeverArm.body_rate_wrt_earth(omega_b2i_4b, C_b2e), C_b2e)

        return ReceiverState(
            t=t - clock_error / CLIGHT,
            clock_index=clock_index,
            clock_error=clock_error,
            pos=pos,
            vel=vel,
        )

    def _position_jacobian(self) -> np.ndarray:
        """
        Derivative of the ECEF position w.r.t. the q_e2n error and height

        Returns:
        --------
        H_uh : np.ndarray
            (3, 4), columns are q_e2n error x, y, z and height
        """
        ins = self.state.base
        q = ins.q_e2n
        q_alpha = (q[0] ** 2 + q[3] ** 2) * 2 - 1
        q_beta = (q[0] * q[1] - q[2] * q[3]) * 2
        q_gamma = (q[0] * q[2] + q[1] * q[3]) * 2
        e2 = E_WGS84 ** 2
        n = RE_WGS84 / np.sqrt(1.0 - e2 * q_alpha ** 2)
        sf = n * e2 * q_alpha * -2 / (1.0 - e2 * q_alpha ** 2)
        n_h = (n + ins.h) * 2
        sf2 = sf * -(1.0 - e2)
        n_h2 = (n * (1.0 - e2) + ins.h) * 2

        return np.array([
            [-q_gamma * q_beta * sf, -q_gamma ** 2 * sf - n_h * q_alpha, -n_h * q_beta, -q_gamma],
            [q_beta ** 2 * sf + n_h * q_alpha, q_beta * q_gamma * sf, -n_h * q_gamma, q_beta],
            [q_alpha * q_beta * sf2 + n_h2 * q_beta, q_alpha * q_gamma * sf2 + n_h2 * q_gamma, 0.0, -q_alpha],
        ])

    def assign_z_h_r(self, solver: RangingSolver, prn: int, x: ReceiverState,
                     range_: float, rate: Optional[float],
                     z: np.ndarray, H: np.ndarray, R_diag: np.ndarray) -> int:
        """
        Fill rows of z, H and R for one satellite

        Parameters:
        -----------
        solver : RangingSolver
            Residual calculator
        prn : int
            Satellite number
        x : ReceiverState
            Receiver snapshot
        range_ : float
            Measured range including receiver and satellite clock errors (m)
        rate : float or None
            Measured range rate (m/s), None when unavailable
        z, H, R_diag : np.ndarray
            Output views starting at the first free row

        Returns:
        --------
        rows : int
            Number of rows written, 0 when the solver excluded the satellite
        """
        prop = solver.relative_property(prn, range_ - x.clock_error, x.t, x.pos, x.vel)
        logger.log(LogLevel.TRACE.value,
                   f"PRN {prn}: weight={prop.weight:.3f}, range_residual={prop.range_residual:.3f}")

        if prop.weight <= 0:
            return 0

        model = self.model
        los_neg = np.asarray(prop.los_neg, dtype=float)
        rows = 1 if rate is None else 2
        H[:rows, :] = 0

        # Range
        z[0] = prop.range_residual
        H[0, 3:7] -= los_neg @ self._position_jacobian()
        H[0, model.clock_error_column(x.clock_index)] = -1

        # NaN takes the floor
        weight = prop.weight if prop.weight >= self.config.weight_floor else self.config.weight_floor
        R_diag[0] = (1.0 / weight) ** 2

        if rate is None:
            return 1

        # Rate
        z[1] = rate - self.state.clock_error_rate(x.clock_index) + prop.rate_relative_neg

        H[1, 0:3] -= los_neg @ self.state.base.dcm_n2e()
        vx, vy, vz = x.vel
        H[1, 3] -= (los_neg[1] * -vz + los_neg[2] * vy) * 2
        H[1, 4] -= (los_neg[0] * vz + los_neg[2] * -vx) * 2
        H[1, 5] -= (los_neg[0] * -vy + los_neg[1] * vx) * 2
        H[1, model.clock_error_rate_column(x.clock_index)] = -1

        R_diag[1] = R_diag[0] * self.config.rate_variance_scale

        return 2

    def correct_info(self, raw: RawObservationSet,
                     clock_error_shift: float = 0.0,
                     lever_arm_b: Optional[np.ndarray] = None,
                     omega_b2i_4b: Optional[np.ndarray] = None) -> CorrectInfo:
        """
        Innovation bundle of one epoch

        Parameters:
        -----------
        raw : RawObservationSet
            Observations of one clock channel
        clock_error_shift : float
            Forced shift of the clock error (m), used while recovering a
            clock jump; normally a multiple of 1 ms * c
        lever_arm_b, omega_b2i_4b : np.ndarray, optional
            Lever arm compensation, see receiver_state()

        Returns:
        --------
        info : CorrectInfo
            Empty when nothing is usable
        """
        P_SIZE = self.model.P_SIZE

        if not 0 <= raw.clock_index < self.model.CLOCKS_SUPPORTED:
            logger.debug(f"Clock index {raw.clock_index} not supported")
            return CorrectInfo.no_info(P_SIZE)

        if raw.solver is None:
            logger.debug("No ranging solver attached")
            return CorrectInfo.no_info(P_SIZE)

        x = self.receiver_state(raw.time, raw.clock_index, clock_error_shift,
                                lever_arm_b, omega_b2i_4b)

        # range + rate
        size = len(raw.measurement) * 2
        z = np.zeros(size)
        H = np.zeros((size, P_SIZE))
        R_diag = np.zeros(size)

        z_index = 0
        for prn, values in raw.measurement.items():
            range_ = values.get(MeasurementItem.L1_PSEUDORANGE)
            if range_ is None:
                continue

            rate = values.get(MeasurementItem.L1_RANGE_RATE)
            if rate is None:
                doppler = values.get(MeasurementItem.L1_DOPPLER)
                if doppler is not None:
                    rate = -doppler * LAMBDA_L1

            z_index += self.assign_z_h_r(
                raw.solver, prn, x, range_, rate,
                z[z_index:], H[z_index:], R_diag[z_index:])

        if z_index <= 0:
            return CorrectInfo.no_info(P_SIZE)

        return CorrectInfo(H[:z_index], z[:z_index], np.diag(R_diag[:z_index]))

    def range_residual_mean_ms(self, clock_index: int, info: CorrectInfo) -> float:
        """Mean range residual of a clock channel in ms, 0 without range rows"""
        column = self.model.clock_error_column(clock_index)
        ranges = info.H[:, column] < -0.5
        if not np.any(ranges):
            return 0.0
        return float(np.mean(info.z[ranges])) / CLIGHT / 1E-3

    def correct_generic(self, raw: RawObservationSet,
                        generator: CorrectInfoGenerator) -> CorrectionOutcome:
        """
        Measurement update with clock jump recovery

        Parameters:
        -----------
        raw : RawObservationSet
            Observations of one epoch
        generator : callable
            generator(raw, clock_error_shift) returning CorrectInfo

        Returns:
        --------
        outcome : CorrectionOutcome
        """
        info = generator(raw, 0.0)
        if info.is_empty:
            return CorrectionOutcome.NO_OBSERVATION

        outcome = CorrectionOutcome.NOMINAL
        threshold = self.config.clock_jump_threshold_ms

        # Receiver clock is steered to keep its error within +/- 1 ms
        delta_ms = self.range_residual_mean_ms(raw.clock_index, info)
        if abs(delta_ms) >= threshold:
            clock_error_shift = CLIGHT * 1E-3 * np.floor(delta_ms + 0.5)
            info = generator(raw, clock_error_shift)
            delta_ms_shifted = self.range_residual_mean_ms(raw.clock_index, info)
            if info.is_empty or abs(delta_ms_shifted) >= threshold:
                logger.warning(f"Detect receiver clock jump: {delta_ms:.6f} [ms] => Skipped")
                return CorrectionOutcome.JUMP_UNRESOLVED
            logger.warning(f"Detect receiver clock jump: {delta_ms:.6f} [ms] => Fixed")
            self.state.shift_clock_error(raw.clock_index, clock_error_shift)
            outcome = CorrectionOutcome.JUMP_FIXED

        self.filter.correct_primitive(info)
        return outcome

    def correct(self, raw: RawObservationSet,
                lever_arm_b: Optional[np.ndarray] = None,
                omega_b2i_4b: Optional[np.ndarray] = None) -> CorrectionOutcome:
        """
        Measurement update with GNSS raw measurement

        Parameters:
        -----------
        raw : RawObservationSet
            GNSS measurement
        lever_arm_b : np.ndarray, optional
            Lever arm vector in body frame (m)
        omega_b2i_4b : np.ndarray, optional
            Angular speed vector in body frame (rad/s)
        """
        generator = partial(self.correct_info, lever_arm_b=lever_arm_b, omega_b2i_4b=omega_b2i_4b)
        return self.correct_generic(raw, generator)
