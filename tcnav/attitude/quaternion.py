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
Quaternion algebra for strapdown navigation.

All quaternions are scalar first [w, x, y, z]. quat2dcm returns the matrix C
such that v_to = C @ v_from for a quaternion q_from2to, i.e. q_n2b maps body
vectors into the navigation frame and q_e2n maps navigation-frame vectors
into ECEF.

References:
    Principles of GNSS, Inertial, and Multisensor Integrated Navigation Systems
    - (2013) Paul D. Groves
"""

import numpy as np
from numba import njit


@njit(cache=True, fastmath=True)
def quat2euler(q):
    """
    Convert quaternion to corresponding euler angles (roll-pitch-yaw).

    Parameters
    ----------
    q : array_like, shape (4,)
        Quaternion [w, x, y, z]

    Returns
    -------
    e : ndarray, shape (3,)
        RPY euler angles [roll, pitch, yaw] in radians
    """
    w, x, y, z = q
    e = np.array([np.arctan2(2*(w*x + y*z), (w*w - x*x - y*y + z*z)),
                  np.arcsin(-2*(-w*y + x*z)),
                  np.arctan2(2*(w*z + x*y), (w*w + x*x - y*y - z*z))],
                 dtype=np.double)
    return e


@njit(cache=True, fastmath=True)
def quat2dcm(q):
    """
    Convert quaternion to corresponding direction cosine matrix.

    Parameters
    ----------
    q : array_like, shape (4,)
        Quaternion [w, x, y, z]

    Returns
    -------
    C : ndarray, shape (3, 3)
        Direction cosine matrix
    """
    w, x, y, z = q
    C = np.array([[w*w + x*x - y*y - z*z,         2*(x*y - w*z),          2*(w*y + x*z)],
                  [        2*(w*z + x*y), w*w - x*x + y*y - z*z,          2*(y*z - w*x)],
                  [        2*(x*z - w*y),         2*(y*z + w*x),  w*w - x*x - y*y + z*z]],
                 dtype=np.double)
    return C


@njit(cache=True, fastmath=True)
def quat_multiply(q1, q2):
    """
    Hamilton product q1 * q2.

    Parameters
    ----------
    q1, q2 : array_like, shape (4,)
        Quaternions [w, x, y, z]

    Returns
    -------
    q : ndarray, shape (4,)
        Product quaternion
    """
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2
    q = np.array([w1*w2 - x1*x2 - y1*y2 - z1*z2,
                  w1*x2 + x1*w2 + y1*z2 - z1*y2,
                  w1*y2 - x1*z2 + y1*w2 + z1*x2,
                  w1*z2 + x1*y2 - y1*x2 + z1*w2],
                 dtype=np.double)
    return q


@njit(cache=True, fastmath=True)
def quat_conj(q):
    """Quaternion conjugate [w, -x, -y, -z]"""
    return np.array([q[0], -q[1], -q[2], -q[3]], dtype=np.double)


@njit(cache=True, fastmath=True)
def quat_normalize(q):
    """Scale quaternion to unit norm"""
    return q / np.sqrt(q[0]*q[0] + q[1]*q[1] + q[2]*q[2] + q[3]*q[3])


@njit(cache=True, fastmath=True)
def rotvec2quat(v):
    """
    Convert rotation vector to quaternion (quaternion exponential).

    Parameters
    ----------
    v : array_like, shape (3,)
        Rotation vector (axis * angle) in radians

    Returns
    -------
    q : ndarray, shape (4,)
        Quaternion [w, x, y, z]
    """
    angle = np.sqrt(v[0]*v[0] + v[1]*v[1] + v[2]*v[2])
    if angle < 1e-12:
        # second order series around zero
        q = np.array([1.0 - angle*angle / 8, v[0] * 0.5, v[1] * 0.5, v[2] * 0.5],
                     dtype=np.double)
        return q / np.sqrt(q[0]*q[0] + q[1]*q[1] + q[2]*q[2] + q[3]*q[3])
    s = np.sin(angle * 0.5) / angle
    q = np.array([np.cos(angle * 0.5), v[0] * s, v[1] * s, v[2] * s], dtype=np.double)
    return q
