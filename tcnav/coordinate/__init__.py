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

"""Coordinate transformation utilities

This module provides the geodetic helpers the strapdown mechanization and
the ranging solver depend on:
- ECEF <-> geodetic (WGS84) conversions
- ECEF to ENU rotation
- Navigation-frame quaternion <-> latitude/longitude
- Radii of curvature, normal gravity, earth and transport rates
"""

from .geodetic import earth_rate_ned, gravity_model, radius_of_curvature, transport_rate_ned
from .transforms import (
    compute_rotation_matrix_enu,
    ecef2llh,
    latlon2q_e2n,
    llh2ecef,
    q_e2n2latlon,
)

__all__ = [
    'ecef2llh', 'llh2ecef', 'compute_rotation_matrix_enu',
    'latlon2q_e2n', 'q_e2n2latlon',
    'radius_of_curvature', 'gravity_model', 'earth_rate_ned', 'transport_rate_ned',
]
