import os
import sys
import unittest

sys.path.append(os.path.join(os.path.dirname(__file__), '../src'))

from RoseCAM.common.geom import *
from RoseCAM.common.curve import Curve

def vertical_curve(x=1.0, z0=0.0, z1=1.0, n=11):
    return Curve([Vector(x, z0 + (z1 - z0) * i / (n - 1)) for i in range(n)])

class GeomTest(unittest.TestCase):
    def assertNear(self, v1, v2, places=3, msg=None):
        self.assertAlmostEqual(v1, v2, places=places, msg=msg)

    def assertVector(self, v, x, z, places=6):
        self.assertNear(v.x, x, places=places, msg=f"{v}")
        self.assertNear(v.z, z, places=places, msg=f"{v}")

    def testAngleCheck(self):
        self.assertEqual(angle_check(-30), 330)
        self.assertEqual(angle_check(725), 5)
        self.assertEqual(angle_check(360), 0)
        self.assertEqual(angle_check(0), 0)
        self.assertNear(angle_check(-720.5), 359.5)
        self.assertNear(angle_check(1e6 + 10), angle_check(angle_check(1e6 + 10)))
        for a in [-1e5, -361, -0.25, 0, 12.5, 359.999, 360, 1234.5, 98765]:
            c = angle_check(a)
            self.assertTrue(0 <= c < 360, f"{a} -> {c}")
            self.assertEqual(angle_check(c), c)

    def testAboutEqual(self):
        self.assertTrue(about_equal(1.0, 1.0 + 1e-7))
        self.assertFalse(about_equal(1.0, 1.001))
        self.assertTrue(about_equal(0.5, 0.5, 0.5 + 1e-8))
        self.assertFalse(about_equal(0.5, 0.5, 0.6))

    def testProportion(self):
        self.assertNear(proportion(0, 5, 10, 0, 1), 0.5)
        self.assertNear(proportion(0, 10, 10, 2, 4), 4)
        self.assertEqual(proportion(3, 7, 3, 2, 4), 2)

    def testSnapZero(self):
        self.assertEqual(snap_zero(-1e-13), 0.0)
        self.assertEqual(str(snap_zero(-0.0)), "0.0")
        self.assertEqual(snap_zero(1e-6), 1e-6)
        v = Vector(-1e-15, 1.0).snapped()
        self.assertEqual(str(v.x), "0.0")

    def testDegreesForDistance(self):
        self.assertNear(degrees_for_distance(pi, 1.0), 180)
        self.assertEqual(degrees_for_distance(1.0, 0.0), 0.0)

    def testVector(self):
        a = Vector(3, 4)
        self.assertEqual(a.length(), 5)
        self.assertEqual(a + Vector(1, 1), Vector(4, 5))
        self.assertEqual(a - Vector(1, 1), Vector(2, 3))
        self.assertEqual(a * 2, Vector(6, 8))
        self.assertEqual(2 * a, Vector(6, 8))
        self.assertEqual(-a, Vector(-3, -4))
        self.assertEqual(a.dist(Vector(3, 0)), 4)
        self.assertVector(a.normalized(), 0.6, 0.8)
        self.assertTrue(Vector(0, 0).normalized().is_zero())
        self.assertVector(Vector(1, 0).rotated(90), 0, 1)
        self.assertVector(Vector(1, 0).scaled(2, 0, 2), 0, 0)
        self.assertEqual(Vector.from_tuple((1, 2)), Vector(1, 2))
        self.assertRaises(ValueError, lambda: Vector.from_tuple((1, 2, 3)))

    def testPoint3D(self):
        p = polar_to_xyz(2.0, 1.0, 90)
        self.assertNear(p.x, 0)
        self.assertNear(p.y, 2)
        self.assertNear(p.z, 1)
        self.assertNear(polar_to_xyz(1, 0, 0).dist(polar_to_xyz(1, 0, 180)), 2)
        self.assertNear(Point3D(1, 0, 0).angle(Point3D(0, 1, 0)), pi / 2)
        self.assertEqual(Point3D(0, 0, 0).angle(Point3D(0, 1, 0)), 0.0)

class CurveTest(unittest.TestCase):
    def assertNear(self, v1, v2, places=3, msg=None):
        self.assertAlmostEqual(v1, v2, places=places, msg=msg)

    def testEmpty(self):
        c = Curve([])
        self.assertIsNone(c.nearest_point(Vector(0, 0)))
        self.assertIsNone(c.perpendicular(Vector(0, 0), True))
        self.assertIsNone(c.top_point())
        self.assertEqual(c.length(), 0)
        single = Curve([Vector(1, 1)])
        self.assertEqual(single.nearest_point(Vector(5, 5)), Vector(1, 1))
        self.assertIsNone(single.perpendicular(Vector(0, 0), True))

    def testNearestPoint(self):
        c = vertical_curve()
        p = c.nearest_point(Vector(1.5, 0.25))
        self.assertNear(p.x, 1.0)
        self.assertNear(p.z, 0.25)
        p = c.nearest_point(Vector(0.5, 2.0))
        self.assertNear(p.z, 1.0)
        self.assertEqual(c.index_of_nearest_point(Vector(1, 0.31)), 3)

    def testPerpendicular(self):
        c = vertical_curve()
        self.assertEqual(c.perpendicular(Vector(1, 0.5), True), Vector(1, 0))
        self.assertEqual(c.perpendicular(Vector(1, 0.5), False), Vector(-1, 0))
        flat = Curve([Vector(0, 0), Vector(1, 0)])
        self.assertEqual(flat.perpendicular(Vector(0.5, 0), True), Vector(0, -1))
        # no negative zero leaking out
        self.assertEqual(str(flat.perpendicular(Vector(0.5, 0), False).x), "0.0")

    def testSubset(self):
        c = vertical_curve()
        sub = c.subset_points(Vector(1, 0.2), Vector(1, 0.5))
        self.assertEqual(len(sub), 4)
        self.assertNear(sub[0].z, 0.2)
        self.assertNear(sub[-1].z, 0.5)
        sub = c.subset_points(Vector(1, 0.5), Vector(1, 0.2))
        self.assertEqual(len(sub), 4)
        self.assertNear(sub[0].z, 0.5)
        self.assertNear(sub[-1].z, 0.2)

    def testResample(self):
        c = Curve([Vector(0, 0), Vector(0, 1)])
        r = c.resampled(0.1)
        self.assertEqual(len(r), 11)
        self.assertNear(r.points[5].z, 0.5)
        self.assertEqual(r.top_point(), Vector(0, 1))
        self.assertEqual(len(c.resampled(0)), 2)

    def testInterpolateDown(self):
        c = vertical_curve()
        p = c.interpolate_down(Vector(1, 0.5), 0.25)
        self.assertNear(p.z, 0.75)
        p = c.interpolate_down(Vector(1, 0.5), -0.25)
        self.assertNear(p.z, 0.25)
        self.assertIsNone(c.interpolate_down(Vector(1, 0.5), 0.75))
        self.assertEqual(c.interpolate_down(Vector(1, 0.5), 0), Vector(1, 0.5))

    def testOffset(self):
        c = vertical_curve()
        o = c.offset(0.1)
        self.assertNear(o.bottom_point().x, 1.1)
        self.assertNear(o.bottom_point().z, 0.0)
        self.assertNear(o.top_point().z, 1.0)
        o = c.offset(-0.1)
        self.assertNear(o.bottom_point().x, 0.9)
        self.assertIs(c.offset(0).points[0], c.points[0])

    def testTransforms(self):
        c = vertical_curve()
        self.assertNear(c.flipped_x().points[0].x, -1)
        self.assertNear(c.translated(0, -1).top_point().z, 0)
        s = c.scaled(2)
        self.assertNear(s.top_point().x, 2)
        self.assertNear(s.top_point().z, 2)
        self.assertNear(s.length(), 2)

if __name__ == '__main__':
    unittest.main()
