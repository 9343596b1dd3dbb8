import unittest
import numpy as np
from tcnav.attitude import quat2dcm
from tcnav.coordinate.transforms import (
    ecef2llh, llh2ecef, compute_rotation_matrix_enu, latlon2q_e2n, q_e2n2latlon
)
from tcnav.core.constants import RE_WGS84, FE_WGS84


class TestCoordinateTransforms(unittest.TestCase):

    def setUp(self):
        # Test points
        self.tokyo_llh = np.array([np.radians(35.6762), np.radians(139.6503), 40.0])  # Tokyo Tower
        self.newyork_llh = np.array([np.radians(40.7128), np.radians(-74.0060), 10.0])  # New York
        self.equator_llh = np.array([0.0, 0.0, 0.0])  # Equator, prime meridian
        self.south_llh = np.array([np.radians(-35.0), np.radians(150.0), 100.0])  # Southern hemisphere

    def test_llh2ecef_ecef2llh_round_trip(self):
        for llh in [self.tokyo_llh, self.newyork_llh, self.equator_llh, self.south_llh]:
            llh_recovered = ecef2llh(llh2ecef(llh))
            np.testing.assert_allclose(llh_recovered[:2], llh[:2], rtol=1e-10, atol=1e-10,
                                       err_msg=f"Round-trip failed for lat/lon {llh}")
            np.testing.assert_allclose(llh_recovered[2], llh[2], rtol=1e-8, atol=1e-6,
                                       err_msg=f"Round-trip failed for height {llh}")

    def test_llh2ecef_known_values(self):
        xyz = llh2ecef(np.array([0.0, 0.0, 0.0]))
        np.testing.assert_allclose(xyz, [RE_WGS84, 0.0, 0.0], atol=1e-3)

        xyz = llh2ecef(np.array([0.0, np.pi / 2, 100.0]))
        np.testing.assert_allclose(xyz, [0.0, RE_WGS84 + 100.0, 0.0], atol=1e-3)

        # Polar radius
        b = RE_WGS84 * np.sqrt(1 - FE_WGS84 * (2 - FE_WGS84))
        xyz = llh2ecef(np.array([np.pi / 2, 0.0, 0.0]))
        self.assertAlmostEqual(xyz[2], b, places=3)

    def test_latlon2q_round_trip(self):
        for llh in [self.tokyo_llh, self.newyork_llh, self.equator_llh, self.south_llh]:
            q = latlon2q_e2n(llh[0], llh[1])
            self.assertAlmostEqual(np.linalg.norm(q), 1.0, places=12)
            lat, lon = q_e2n2latlon(q)
            self.assertAlmostEqual(lat, llh[0], places=12)
            self.assertAlmostEqual(lon, llh[1], places=12)

    def test_q_e2n_axes_match_enu(self):
        # Columns of C_n2e are north, east and down in ECEF
        for llh in [self.tokyo_llh, self.south_llh]:
            C_n2e = quat2dcm(latlon2q_e2n(llh[0], llh[1]))
            R_enu = compute_rotation_matrix_enu(llh)
            np.testing.assert_allclose(C_n2e[:, 0], R_enu[1], atol=1e-12)
            np.testing.assert_allclose(C_n2e[:, 1], R_enu[0], atol=1e-12)
            np.testing.assert_allclose(C_n2e[:, 2], -R_enu[2], atol=1e-12)

    def test_equator_quaternion(self):
        q = latlon2q_e2n(0.0, 0.0)
        C_n2e = quat2dcm(q)
        # North is ECEF z, down is -x
        np.testing.assert_allclose(C_n2e @ [1.0, 0.0, 0.0], [0.0, 0.0, 1.0], atol=1e-12)
        np.testing.assert_allclose(C_n2e @ [0.0, 0.0, 1.0], [-1.0, 0.0, 0.0], atol=1e-12)


if __name__ == '__main__':
    unittest.main()
