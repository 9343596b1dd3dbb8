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

"""Core constants shared by the INS and GNSS sides of the filter.

Provides the speed of light, GPS carrier frequencies and wavelengths,
WGS84 ellipsoid parameters and unit conversions.

Example Usage:
    >>> from tcnav.core import CLIGHT, LAMBDA_L1
    >>> range_rate = -doppler_hz * LAMBDA_L1
"""

from .constants import *
