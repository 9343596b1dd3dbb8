import unittest
import numpy as np
from tcnav.attitude import (
    euler2quat, quat2dcm, quat2euler, quat_conj, quat_multiply, quat_normalize,
    rotvec2quat, skew
)


class TestQuaternion(unittest.TestCase):

    def setUp(self):
        self.euler = np.array([0.1, -0.2, 1.3])  # roll, pitch, yaw
        self.q = euler2quat(self.euler)

    def test_euler_round_trip(self):
        np.testing.assert_allclose(quat2euler(self.q), self.euler, atol=1e-12)

    def test_dcm_is_rotation(self):
        C = quat2dcm(self.q)
        np.testing.assert_allclose(C @ C.T, np.eye(3), atol=1e-12)
        self.assertAlmostEqual(np.linalg.det(C), 1.0, places=12)

    def test_dcm_yaw_only(self):
        # Body x axis rotated by yaw about the down axis
        q = euler2quat(np.array([0.0, 0.0, np.pi / 2]))
        np.testing.assert_allclose(quat2dcm(q) @ np.array([1.0, 0.0, 0.0]),
                                   [0.0, 1.0, 0.0], atol=1e-12)

    def test_multiply_composes_dcm(self):
        q2 = euler2quat(np.array([-0.4, 0.3, 0.2]))
        np.testing.assert_allclose(quat2dcm(quat_multiply(self.q, q2)),
                                   quat2dcm(self.q) @ quat2dcm(q2), atol=1e-12)

    def test_conjugate_is_inverse(self):
        np.testing.assert_allclose(quat_multiply(self.q, quat_conj(self.q)),
                                   [1.0, 0.0, 0.0, 0.0], atol=1e-12)

    def test_normalize(self):
        q = quat_normalize(self.q * 3.0)
        self.assertAlmostEqual(np.linalg.norm(q), 1.0, places=12)
        np.testing.assert_allclose(q, self.q, atol=1e-12)

    def test_rotvec2quat(self):
        v = np.array([0.0, 0.0, np.pi / 2])
        np.testing.assert_allclose(rotvec2quat(v),
                                   [np.cos(np.pi / 4), 0.0, 0.0, np.sin(np.pi / 4)], atol=1e-12)

        # Tiny rotation falls back to the series expansion
        q = rotvec2quat(np.array([1e-14, 0.0, 0.0]))
        self.assertAlmostEqual(np.linalg.norm(q), 1.0, places=12)
        self.assertAlmostEqual(q[1], 5e-15)

    def test_skew_matches_cross(self):
        a = np.array([1.0, -2.0, 0.5])
        b = np.array([0.3, 0.7, -1.1])
        np.testing.assert_allclose(skew(a) @ b, np.cross(a, b), atol=1e-12)
        np.testing.assert_allclose(skew(a), -skew(a).T)


if __name__ == '__main__':
    unittest.main()
