import unittest
import numpy as np
from tcnav.coordinate import earth_rate_ned, gravity_model
from tcnav.ins import INS, CorrectInfo, FilteredINS, INSErrorModel


class TestCorrectInfo(unittest.TestCase):

    def test_no_info(self):
        info = CorrectInfo.no_info(10)
        self.assertTrue(info.is_empty)
        self.assertEqual(info.rows, 0)
        self.assertEqual(info.H.shape, (0, 10))
        self.assertEqual(info.R.shape, (0, 0))

    def test_shapes(self):
        info = CorrectInfo(np.zeros((2, 10)), [1.0, 2.0], np.eye(2))
        self.assertEqual(info.rows, 2)
        self.assertFalse(info.is_empty)
        self.assertEqual(info.z.shape, (2,))

    def test_inconsistent_rows(self):
        with self.assertRaises(ValueError):
            CorrectInfo(np.zeros((2, 10)), [1.0], np.eye(1))
        with self.assertRaises(ValueError):
            CorrectInfo(np.zeros((1, 10)), [1.0], np.eye(2))


class TestINSErrorModel(unittest.TestCase):

    def setUp(self):
        self.ins = INS()
        self.ins.init_position(np.radians(35.0), np.radians(139.0), 50.0)
        self.ins.init_velocity(10.0, -5.0, 0.0)
        self.model = INSErrorModel(self.ins)

    def test_sizes(self):
        self.assertEqual(self.model.P_SIZE, 10)
        self.assertEqual(self.model.Q_SIZE, 7)
        self.assertIs(self.model.state, self.ins)

        A, B = self.model.get_ab(np.array([0.0, 0.0, -9.8]), np.zeros(3))
        self.assertEqual(A.shape, (10, 10))
        self.assertEqual(B.shape, (10, 7))
        # Height error driven by down velocity error
        self.assertEqual(A[6, 2], -1.0)

    def test_correct_zero(self):
        before = self.ins.copy()
        self.model.correct(np.zeros(10))
        np.testing.assert_allclose(self.ins.v_2e_4n, before.v_2e_4n)
        np.testing.assert_allclose(self.ins.q_e2n, before.q_e2n)
        np.testing.assert_allclose(self.ins.q_n2b, before.q_n2b)
        self.assertEqual(self.ins.h, before.h)

    def test_correct_subtracts(self):
        x_hat = np.zeros(10)
        x_hat[0:3] = [1.0, -1.0, 0.5]
        x_hat[6] = 2.0
        self.model.correct(x_hat)
        np.testing.assert_allclose(self.ins.v_2e_4n, [9.0, -4.0, -0.5])
        self.assertAlmostEqual(self.ins.h, 48.0)

    def test_correct_attitude(self):
        x_hat = np.zeros(10)
        x_hat[9] = 1e-3
        self.model.correct(x_hat)
        self.assertAlmostEqual(np.linalg.norm(self.ins.q_n2b), 1.0, places=12)
        # Heading error removed from an initially level, north pointing attitude
        self.assertAlmostEqual(self.ins.euler()[2], -2e-3, places=8)


class TestFilteredINS(unittest.TestCase):

    def setUp(self):
        self.ins = INS()
        self.ins.init_position(np.radians(35.0), np.radians(139.0), 50.0)
        self.fins = FilteredINS(INSErrorModel(self.ins))

    def test_defaults(self):
        np.testing.assert_array_equal(self.fins.P, np.eye(10))
        np.testing.assert_array_equal(self.fins.Q, np.eye(7))
        self.assertIs(self.fins.state, self.ins)

    def test_shape_validation(self):
        with self.assertRaises(ValueError):
            self.fins.P = np.eye(9)
        with self.assertRaises(ValueError):
            FilteredINS(INSErrorModel(self.ins), Q=np.eye(10))

    def test_time_update(self):
        lat = self.ins.latitude
        accel = np.array([0.0, 0.0, -gravity_model(lat, self.ins.h)])
        gyro = earth_rate_ned(lat)
        P0 = self.fins.P.copy()

        self.fins.update(accel, gyro, 0.1)

        np.testing.assert_allclose(self.fins.P, self.fins.P.T, atol=1e-12)
        # Velocity uncertainty grows with accelerometer noise
        self.assertGreater(self.fins.P[0, 0], P0[0, 0])

    def test_correct_primitive_empty(self):
        P0 = self.fins.P.copy()
        self.assertIsNone(self.fins.correct_primitive(CorrectInfo.no_info(10)))
        np.testing.assert_array_equal(self.fins.P, P0)

    def test_correct_primitive_height(self):
        H = np.zeros((1, 10))
        H[0, 6] = 1.0
        x_hat = self.fins.correct_primitive(CorrectInfo(H, [2.0], [[1.0]]))

        self.assertAlmostEqual(x_hat[6], 1.0)
        np.testing.assert_allclose(np.delete(x_hat, 6), np.zeros(9), atol=1e-15)
        self.assertAlmostEqual(self.ins.h, 49.0)
        self.assertAlmostEqual(self.fins.P[6, 6], 0.5)


if __name__ == '__main__':
    unittest.main()
