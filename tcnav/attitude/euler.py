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
Attitude conversion from euler angles.

Euler angles are in the order 'roll-pitch-yaw' (ZYX rotation sequence).
"""

import numpy as np
from numba import njit


@njit(cache=True, fastmath=True)
def euler2quat(e):
    """
    Convert euler angles (roll-pitch-yaw) to the body-to-navigation quaternion.

    Parameters
    ----------
    e : array_like, shape (3,)
        RPY euler angles [roll, pitch, yaw] in radians

    Returns
    -------
    q : ndarray, shape (4,)
        Quaternion [w, x, y, z]
    """
    sinX, sinY, sinZ = np.sin(e * 0.5)
    cosX, cosY, cosZ = np.cos(e * 0.5)
    q = np.array([cosZ*cosY*cosX + sinZ*sinY*sinX,
                  cosZ*cosY*sinX - sinZ*sinY*cosX,
                  cosZ*sinY*cosX + sinZ*cosY*sinX,
                  sinZ*cosY*cosX - cosZ*sinY*sinX],
                 dtype=np.double)
    return q
