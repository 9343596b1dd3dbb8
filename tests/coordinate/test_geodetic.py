import unittest
import numpy as np
from tcnav.coordinate import (
    earth_rate_ned, gravity_model, radius_of_curvature, transport_rate_ned
)
from tcnav.core.constants import RE_WGS84, FE_WGS84, OMGE


class TestGeodetic(unittest.TestCase):

    def test_radius_of_curvature(self):
        e2 = FE_WGS84 * (2 - FE_WGS84)
        M, N = radius_of_curvature(0.0)
        self.assertAlmostEqual(N, RE_WGS84, places=6)
        self.assertAlmostEqual(M, RE_WGS84 * (1 - e2), places=6)

        # Both radii are equal at the pole
        M, N = radius_of_curvature(np.pi / 2)
        self.assertAlmostEqual(M, N, places=3)

    def test_gravity_model(self):
        self.assertAlmostEqual(gravity_model(0.0, 0.0), 9.7803253359, places=9)
        self.assertGreater(gravity_model(np.pi / 2, 0.0), gravity_model(0.0, 0.0))
        self.assertLess(gravity_model(0.0, 1000.0), gravity_model(0.0, 0.0))

    def test_earth_rate(self):
        np.testing.assert_allclose(earth_rate_ned(0.0), [OMGE, 0.0, 0.0], atol=1e-18)
        np.testing.assert_allclose(earth_rate_ned(np.pi / 2), [0.0, 0.0, -OMGE], atol=1e-18)

    def test_transport_rate(self):
        np.testing.assert_allclose(transport_rate_ned(0.5, 0.0, np.zeros(3)), np.zeros(3))

        # Eastward motion at the equator rotates the frame about north
        omega = transport_rate_ned(0.0, 0.0, np.array([0.0, 100.0, 0.0]))
        self.assertAlmostEqual(omega[0], 100.0 / RE_WGS84)
        self.assertAlmostEqual(omega[1], 0.0)
        self.assertAlmostEqual(omega[2], 0.0)


if __name__ == '__main__':
    unittest.main()
