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

"""Physical constants and system parameters for INS/GNSS integration"""

import numpy as np

# Physical Constants
CLIGHT = 299792458.0  # speed of light (m/s)

# GPS frequencies
FREQ_L1 = 1.57542E9   # L1 frequency (Hz)
FREQ_L2 = 1.22760E9   # L2 frequency (Hz)

# Wavelengths
LAMBDA_L1 = CLIGHT / FREQ_L1   # L1 carrier wavelength (m)
LAMBDA_L2 = CLIGHT / FREQ_L2   # L2 carrier wavelength (m)

# One millisecond of receiver clock error expressed as range (m)
CLOCK_MS_RANGE = CLIGHT * 1E-3

# Earth Parameters (WGS84)
RE_WGS84 = 6378137.0           # earth semimajor axis (m)
FE_WGS84 = 1.0 / 298.257223563 # earth flattening
OMGE = 7.2921151467E-5         # earth angular velocity (rad/s)
RP_WGS84 = 6356752.31425       # polar radius (semi-minor axis) (m)
E_WGS84 = 0.0818191908425      # WGS84 eccentricity
E2_WGS84 = E_WGS84 * E_WGS84   # WGS84 eccentricity squared

# Unit conversions
R2D = 180.0 / np.pi            # radians to degrees
D2R = np.pi / 180.0            # degrees to radians
