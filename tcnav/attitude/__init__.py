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

"""
Attitude module for quaternion algebra and rotations.

This module provides the numba-compiled helpers used by the strapdown
mechanization and by the tightly coupled observation model:
- Quaternion products, conjugates and exponentials
- Quaternion to DCM / euler conversions
- Skew symmetric matrices
"""

from .euler import euler2quat
from .quaternion import (
    quat2dcm, quat2euler, quat_conj, quat_multiply, quat_normalize, rotvec2quat,
)
from .skew import skew

__all__ = [
    'skew',
    'euler2quat',
    'quat2dcm', 'quat2euler', 'quat_conj', 'quat_multiply', 'quat_normalize',
    'rotvec2quat',
]
