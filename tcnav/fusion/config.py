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

"""Configuration of the tightly coupled INS/GNSS filter"""

import logging
from dataclasses import dataclass, fields

logger = logging.getLogger(__name__)

# ============================================================================
# RECEIVER CLOCK MODEL
# ============================================================================
BETA_CLOCK_ERROR = 1.0        # Gauss-Markov decay of clock error (1/s)
BETA_CLOCK_ERROR_RATE = 1.0   # Gauss-Markov decay of clock error rate (1/s)

# ============================================================================
# CLOCK JUMP DETECTION
# ============================================================================
CLOCK_JUMP_THRESHOLD_MS = 0.9  # Mean range residual treated as a clock jump (ms)

# ============================================================================
# MEASUREMENT NOISE
# ============================================================================
WEIGHT_FLOOR = 0.1            # Minimum solver weight before inversion
RATE_VARIANCE_SCALE = 1E-3    # Rate variance relative to range variance


@dataclass
class TightlyCoupledConfig:
    """
    Parameters of the tightly coupled filter.

    Attributes:
        clocks (int): Number of receiver clocks estimated (K)
        beta_clock_error (float): Decay coefficient of clock error (1/s)
        beta_clock_error_rate (float): Decay coefficient of clock error rate (1/s)
        clock_jump_threshold_ms (float): Mean range residual magnitude that
            triggers clock jump recovery (ms)
        weight_floor (float): Lower clamp applied to solver weights
        rate_variance_scale (float): Ratio of range-rate to range variance

    Examples:
        >>> config = TightlyCoupledConfig.from_dict({'clocks': 2})
        >>> config.clocks
        2
    """
    clocks: int = 1
    beta_clock_error: float = BETA_CLOCK_ERROR
    beta_clock_error_rate: float = BETA_CLOCK_ERROR_RATE
    clock_jump_threshold_ms: float = CLOCK_JUMP_THRESHOLD_MS
    weight_floor: float = WEIGHT_FLOOR
    rate_variance_scale: float = RATE_VARIANCE_SCALE

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ValueError on inconsistent parameters"""
        if int(self.clocks) != self.clocks or self.clocks < 1:
            raise ValueError(f"clocks must be a positive integer, got {self.clocks}")
        if self.beta_clock_error < 0 or self.beta_clock_error_rate < 0:
            raise ValueError("Clock decay coefficients must be non-negative")
        if self.clock_jump_threshold_ms <= 0:
            raise ValueError("clock_jump_threshold_ms must be positive")
        if self.weight_floor <= 0:
            raise ValueError("weight_floor must be positive")
        if self.rate_variance_scale <= 0:
            raise ValueError("rate_variance_scale must be positive")

    @classmethod
    def from_dict(cls, config: dict) -> 'TightlyCoupledConfig':
        """Build configuration from a dictionary, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        for key in config:
            if key not in known:
                logger.warning(f"Unknown configuration key ignored: {key}")
        return cls(**{k: v for k, v in config.items() if k in known})
