import unittest
import numpy as np
from tcnav.coordinate import earth_rate_ned, gravity_model, llh2ecef
from tcnav.ins import INS


class TestINS(unittest.TestCase):

    def setUp(self):
        self.lat, self.lon, self.h = np.radians(35.0), np.radians(139.0), 50.0
        self.ins = INS()
        self.ins.init_position(self.lat, self.lon, self.h)
        self.ins.init_velocity(1.0, 2.0, -0.5)
        self.ins.init_attitude(np.radians(30.0), np.radians(5.0), np.radians(-2.0))

    def test_layout(self):
        self.assertEqual(len(self.ins), 12)
        np.testing.assert_array_equal([self.ins[i] for i in range(3)], [1.0, 2.0, -0.5])
        np.testing.assert_array_equal([self.ins[i] for i in range(3, 7)], self.ins.q_e2n)
        self.assertEqual(self.ins[7], self.h)
        np.testing.assert_array_equal([self.ins[i] for i in range(8, 12)], self.ins.q_n2b)

        with self.assertRaises(IndexError):
            self.ins[12]
        with self.assertRaises(IndexError):
            self.ins[-1] = 0.0

    def test_setitem(self):
        self.ins[1] = 3.0
        self.ins[7] = 120.0
        self.assertEqual(self.ins.v_2e_4n[1], 3.0)
        self.assertEqual(self.ins.h, 120.0)

    def test_position(self):
        self.assertAlmostEqual(self.ins.latitude, self.lat, places=12)
        self.assertAlmostEqual(self.ins.longitude, self.lon, places=12)
        np.testing.assert_allclose(self.ins.position_llh(), [self.lat, self.lon, self.h])
        np.testing.assert_allclose(self.ins.position_xyz(),
                                   llh2ecef(np.array([self.lat, self.lon, self.h])), atol=1e-6)

    def test_velocity_xyz_preserves_norm(self):
        self.assertAlmostEqual(np.linalg.norm(self.ins.velocity_xyz()),
                               np.linalg.norm(self.ins.v_2e_4n))

    def test_euler(self):
        np.testing.assert_allclose(self.ins.euler(),
                                   np.radians([-2.0, 5.0, 30.0]), atol=1e-12)

    def test_copy_is_deep(self):
        other = self.ins.copy()
        other.v_2e_4n[0] = 99.0
        other.q_n2b[0] = 0.0
        self.assertEqual(self.ins.v_2e_4n[0], 1.0)
        self.assertNotEqual(self.ins.q_n2b[0], 0.0)

    def test_stationary_update(self):
        ins = INS()
        ins.init_position(self.lat, self.lon, self.h)
        C_b2n = ins.dcm_b2n()
        accel = C_b2n.T @ np.array([0.0, 0.0, -gravity_model(self.lat, self.h)])
        gyro = C_b2n.T @ earth_rate_ned(self.lat)

        for _ in range(100):
            ins.update(accel, gyro, 0.01)

        np.testing.assert_allclose(ins.v_2e_4n, np.zeros(3), atol=1e-9)
        self.assertAlmostEqual(ins.h, self.h, places=9)
        self.assertAlmostEqual(ins.latitude, self.lat, places=12)
        np.testing.assert_allclose(ins.q_n2b, [1.0, 0.0, 0.0, 0.0], atol=1e-12)

    def test_moving_north(self):
        ins = INS()
        ins.init_position(0.0, 0.0, 0.0)
        ins.init_velocity(100.0, 0.0, 0.0)
        ins.update(np.array([0.0, 0.0, -gravity_model(0.0, 0.0)]), earth_rate_ned(0.0), 1.0)
        self.assertGreater(ins.latitude, 0.0)
        self.assertAlmostEqual(ins.longitude, 0.0, places=9)


if __name__ == '__main__':
    unittest.main()
