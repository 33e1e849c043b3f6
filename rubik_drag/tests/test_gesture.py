# rubik_drag/tests/test_gesture.py
import math
import unittest

from rubik_drag.errors import InvariantViolation
from rubik_drag.interaction.camera import FixedCamera, OrbitCamera, horizontal_azimuth
from rubik_drag.interaction.gesture import (
    FACE_AXIS_TABLE,
    GestureClassifier,
    GestureState,
    PointerHit,
    resolve_axis,
    snap_angle,
    snap_normal,
)

# Distancia de drag (px) que produce exactamente 90° con la ganancia por defecto
QUARTER_PX = 10 + (math.pi / 2) / 0.01


class TestSnapping(unittest.TestCase):
    def test_snap_angle_bins(self):
        cases = {
            0: 0, 39: 0, 40: 0, 41: 90,
            129: 90, 130: 90, 131: 180,
            219: 180, 220: 180, 221: 270,
            309: 270, 310: 270, 311: 360,
            359: 360, 360: 360,
        }
        for deg, expected in cases.items():
            with self.subTest(deg=deg):
                self.assertEqual(snap_angle(deg), expected)

    def test_snap_angle_out_of_range(self):
        for deg in (-1, 361, float("nan")):
            with self.subTest(deg=deg):
                with self.assertRaises(InvariantViolation):
                    snap_angle(deg)

    def test_snap_normal(self):
        self.assertEqual(snap_normal((0.01, 0.99, -0.02)), (0, 1, 0))
        self.assertEqual(snap_normal((-0.95, 0.1, 0.0)), (-1, 0, 0))
        self.assertEqual(snap_normal((0.0, 0.0, -1.0)), (0, 0, -1))

    def test_snap_normal_without_dominant_axis(self):
        with self.assertRaises(InvariantViolation):
            snap_normal((0.6, 0.6, 0.5))


class TestFaceAxisTable(unittest.TestCase):
    NORMALS = [(0, 1, 0), (0, -1, 0), (1, 0, 0), (-1, 0, 0), (0, 0, 1), (0, 0, -1)]

    def test_table_is_total(self):
        self.assertEqual(len(FACE_AXIS_TABLE), 12)
        for normal in self.NORMALS:
            for screen_axis in ("x", "y"):
                with self.subTest(normal=normal, screen_axis=screen_axis):
                    axis, toward = resolve_axis(normal, screen_axis)
                    self.assertIn(toward, (1, -1))
                    # Nunca se gira alrededor de la normal de la cara tocada
                    self.assertEqual(normal["xyz".index(axis)], 0)

    def test_far_faces_invert_vertical_drag(self):
        self.assertEqual(resolve_axis((1, 0, 0), "y")[1], -resolve_axis((-1, 0, 0), "y")[1])
        self.assertEqual(resolve_axis((0, 0, -1), "y")[1], -resolve_axis((0, 0, 1), "y")[1])

    def test_unknown_normal(self):
        with self.assertRaises(InvariantViolation):
            resolve_axis((1, 1, 0), "x")


class TestCamera(unittest.TestCase):
    def test_horizontal_azimuth(self):
        self.assertAlmostEqual(horizontal_azimuth((0.0, 3.0, 5.0)), 0.0)
        self.assertAlmostEqual(horizontal_azimuth((5.0, 3.0, 0.0)), math.pi / 2)
        self.assertAlmostEqual(horizontal_azimuth(FixedCamera.at_azimuth(-90).position), -math.pi / 2)

    def test_orbit_camera_position(self):
        cam = OrbitCamera(yaw=0.0, pitch=0.0, distance=6.0)
        x, y, z = cam.position
        self.assertAlmostEqual(x, 0.0)
        self.assertAlmostEqual(y, 0.0)
        self.assertAlmostEqual(z, 6.0)

        cam.orbit(90.0, 200.0)
        self.assertEqual(cam.pitch, 89.0)
        self.assertAlmostEqual(horizontal_azimuth(cam.position), -math.pi / 2)

        cam.zoom(100.0)
        self.assertEqual(cam.distance, 2.5)


class TestGestureClassifier(unittest.TestCase):
    def setUp(self):
        self.draggable = True
        self.clf = GestureClassifier(FixedCamera.at_azimuth(0), is_draggable=lambda: self.draggable)

    def drag(self, hit, dx, dy, clf=None):
        clf = clf or self.clf
        self.assertTrue(clf.press((100.0, 100.0), hit))
        clf.move((100.0 + dx, 100.0 + dy))
        return clf.release()

    def test_press_outside_cube(self):
        self.assertFalse(self.clf.press((0.0, 0.0), None))
        self.assertIs(self.clf.state, GestureState.IDLE)

    def test_press_arms_session(self):
        self.assertTrue(self.clf.press((5.0, 5.0), PointerHit((1, 1, 1), (0.0, 0.0, 1.0))))
        self.assertIs(self.clf.state, GestureState.ARMED)
        self.assertEqual(self.clf.session.normal, (0, 0, 1))
        self.assertIsNone(self.clf.pending)

    def test_press_with_unsnapped_normal_fails_fast(self):
        with self.assertRaises(InvariantViolation):
            self.clf.press((0.0, 0.0), PointerHit((1, 1, 1), (0.6, 0.6, 0.5)))
        self.assertIs(self.clf.state, GestureState.IDLE)

    def test_small_move_does_not_lock(self):
        self.clf.press((100.0, 100.0), PointerHit((1, 1, 1), (0.0, 0.0, 1.0)))
        self.assertIsNone(self.clf.move((105.0, 103.0)))
        self.assertIs(self.clf.state, GestureState.ARMED)

    def test_click_emits_nothing(self):
        self.clf.press((100.0, 100.0), PointerHit((1, 1, 1), (0.0, 0.0, 1.0)))
        self.assertIsNone(self.clf.release())
        self.assertIs(self.clf.state, GestureState.IDLE)

    def test_angle_starts_at_zero_on_lock(self):
        self.clf.press((100.0, 100.0), PointerHit((1, 1, 1), (0.0, 0.0, 1.0)))
        self.assertAlmostEqual(self.clf.move((110.0, 100.0)), 0.0)
        self.assertIs(self.clf.state, GestureState.AXIS_LOCKED)
        self.assertAlmostEqual(self.clf.move((130.0, 100.0)), 0.2)
        self.assertEqual((self.clf.pending.axis, self.clf.pending.layer), ("y", 1))

    def test_front_top_row_right_is_U_prime(self):
        resolved = self.drag(PointerHit((1, 1, 1), (0.0, 0.0, 1.0)), QUARTER_PX + 1, 0)
        self.assertEqual(resolved.end_deg, 90)
        self.assertEqual(resolved.sign, 1)
        self.assertEqual(resolved.notation, "U'")
        self.assertIs(self.clf.state, GestureState.RESOLVED)

    def test_front_top_row_left_is_U(self):
        resolved = self.drag(PointerHit((1, 1, 1), (0.0, 0.0, 1.0)), -QUARTER_PX - 1, 0)
        self.assertEqual(resolved.sign, -1)
        self.assertEqual(resolved.notation, "U")
        self.assertAlmostEqual(resolved.target_angle, -math.pi / 2)

    def test_front_right_column_down_is_R_prime(self):
        resolved = self.drag(PointerHit((1, 0, 1), (0.0, 0.0, 1.0)), 0, QUARTER_PX + 1)
        self.assertEqual(resolved.notation, "R'")

    def test_middle_slice_drag(self):
        resolved = self.drag(PointerHit((0, 0, 1), (0.0, 0.0, 1.0)), 0, -QUARTER_PX - 1)
        self.assertEqual(resolved.pending.layer, 0)
        self.assertEqual(resolved.notation, "M'")

    def test_double_turn(self):
        resolved = self.drag(PointerHit((1, 1, 1), (0.0, 0.0, 1.0)), 2 * QUARTER_PX, 0)
        self.assertEqual(resolved.end_deg, 180)
        self.assertEqual(resolved.notation, "U' U'")

    def test_short_drag_springs_back(self):
        resolved = self.drag(PointerHit((1, 1, 1), (0.0, 0.0, 1.0)), 30, 0)
        self.assertEqual(resolved.end_deg, 0)
        self.assertEqual(resolved.notation, "")
        self.assertEqual(resolved.target_angle, 0.0)

    def test_discard_returns_to_idle(self):
        self.drag(PointerHit((1, 1, 1), (0.0, 0.0, 1.0)), 50, 0)
        self.clf.discard()
        self.assertIs(self.clf.state, GestureState.IDLE)
        self.assertIsNone(self.clf.session)

    def test_revoked_draggability_cancels(self):
        self.clf.press((100.0, 100.0), PointerHit((1, 1, 1), (0.0, 0.0, 1.0)))
        self.clf.move((200.0, 100.0))
        pending = self.clf.pending
        self.assertNotEqual(pending.angle, 0.0)

        self.draggable = False
        self.assertIsNone(self.clf.move((220.0, 100.0)))
        self.assertIs(self.clf.state, GestureState.IDLE)
        self.assertEqual(pending.angle, 0.0)
        self.assertIsNone(self.clf.release())

    def test_angle_without_locked_layer_fails_fast(self):
        self.clf.press((100.0, 100.0), PointerHit((1, 1, 1), (0.0, 0.0, 1.0)))
        self.clf.session.locked = True
        with self.assertRaises(InvariantViolation):
            self.clf.move((150.0, 100.0))
        self.assertIs(self.clf.state, GestureState.IDLE)

    def test_press_while_not_draggable(self):
        self.draggable = False
        self.assertFalse(self.clf.press((0.0, 0.0), PointerHit((1, 1, 1), (0.0, 0.0, 1.0))))
        self.assertIs(self.clf.state, GestureState.IDLE)

    def test_top_face_follows_camera_azimuth(self):
        hit = PointerHit((1, 1, 1), (0.0, 1.0, 0.0))
        # azimut (grados) -> (eje, capa, signo del ángulo) para un drag hacia la derecha
        fixtures = {
            0: ("z", 1, -1),
            90: ("x", 1, -1),
            180: ("z", 1, 1),
            -90: ("x", 1, 1),
        }
        for azimuth, (axis, layer, sign) in fixtures.items():
            with self.subTest(azimuth=azimuth):
                clf = GestureClassifier(FixedCamera.at_azimuth(azimuth))
                clf.press((100.0, 100.0), hit)
                angle = clf.move((100.0 + QUARTER_PX + 1, 100.0))
                self.assertEqual((clf.pending.axis, clf.pending.layer), (axis, layer))
                self.assertEqual(math.copysign(1, angle), sign)
                self.assertEqual(clf.release().end_deg, 90)

    def test_bottom_face_follows_camera_azimuth(self):
        hit = PointerHit((-1, -1, 1), (0.0, -1.0, 0.0))
        fixtures = {
            0: ("z", 1, 1),
            90: ("x", -1, 1),
        }
        for azimuth, (axis, layer, sign) in fixtures.items():
            with self.subTest(azimuth=azimuth):
                clf = GestureClassifier(FixedCamera.at_azimuth(azimuth))
                clf.press((100.0, 100.0), hit)
                angle = clf.move((100.0 + QUARTER_PX + 1, 100.0))
                self.assertEqual((clf.pending.axis, clf.pending.layer), (axis, layer))
                self.assertEqual(math.copysign(1, angle), sign)


if __name__ == "__main__":
    unittest.main()
