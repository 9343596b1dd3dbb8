#!/usr/bin/env python3
"""Test suite for physical constants"""

import unittest
import numpy as np
from tcnav.core.constants import (
    CLIGHT, FREQ_L1, FREQ_L2, LAMBDA_L1, LAMBDA_L2, CLOCK_MS_RANGE,
    RE_WGS84, FE_WGS84, RP_WGS84, E_WGS84, E2_WGS84, OMGE, R2D, D2R
)


class TestPhysicalConstants(unittest.TestCase):
    """Test physical constants values"""

    def test_speed_of_light(self):
        self.assertEqual(CLIGHT, 299792458.0)

    def test_gps_frequencies(self):
        """Test GPS frequency and wavelength constants"""
        self.assertAlmostEqual(FREQ_L1, 1575.42e6, delta=1e3)
        self.assertAlmostEqual(FREQ_L2, 1227.60e6, delta=1e3)

        # L1 wavelength ~19.03 cm
        self.assertAlmostEqual(LAMBDA_L1, 0.1903, delta=1e-4)
        self.assertAlmostEqual(LAMBDA_L1 * FREQ_L1, CLIGHT)
        self.assertGreater(LAMBDA_L2, LAMBDA_L1)

    def test_clock_millisecond(self):
        """One millisecond of clock error is ~300 km of range"""
        self.assertAlmostEqual(CLOCK_MS_RANGE, 299792.458, places=6)

    def test_earth_parameters(self):
        self.assertAlmostEqual(RE_WGS84, 6378137.0, delta=1.0)
        self.assertAlmostEqual(FE_WGS84, 1.0/298.257223563, delta=1e-12)
        self.assertAlmostEqual(OMGE, 7.2921151467e-5, delta=1e-14)

        # Eccentricity consistent with flattening
        self.assertAlmostEqual(E2_WGS84, FE_WGS84 * (2 - FE_WGS84), delta=1e-12)
        self.assertAlmostEqual(E_WGS84 ** 2, E2_WGS84)
        self.assertAlmostEqual(RP_WGS84, RE_WGS84 * (1 - FE_WGS84), delta=1e-3)

    def test_unit_conversions(self):
        self.assertAlmostEqual(R2D * D2R, 1.0)
        self.assertAlmostEqual(180.0 * D2R, np.pi)


if __name__ == '__main__':
    unittest.main()
