import contextlib
import io
import os
import sys
import unittest

sys.path.append(os.path.join(os.path.dirname(__file__), '../src'))

from RoseCAM.common.geom import *
from RoseCAM.common.notify import ChangeRecorder, Observable
from RoseCAM.cam.cutlist import *
from RoseCAM.cam.cutpoint import CutPoint, GoToPoint
from RoseCAM.cam.cutpoints import CutPointList
from RoseCAM.cam.cutter import *
from RoseCAM.cam.index_points import IndexPoint
from RoseCAM.cam.line_point import LinePoint
from RoseCAM.cam.offset import OffRosettePoint, OffsetGroup
from RoseCAM.cam.outline import Outline
from RoseCAM.cam.passplan import PassPlan
from RoseCAM.cam.rosette_point import RosettePoint
from RoseCAM.cam.spiral import SpiralRosette
from RoseCAM.cam.surface import RecordingSurface

def cylinder():
    return Outline([Vector(1.0, 0.0), Vector(1.0, 1.0)])

def fixed_cutter(name="Fixed"):
    return Cutter(name, Frame.FIXED, Location.FRONT_OUTSIDE)

class Item(Observable):
    def __init__(self):
        Observable.__init__(self)
        self.value = 1

class NotifyTest(unittest.TestCase):
    def testSetPropertyValue(self):
        item = Item()
        rec = ChangeRecorder(item)
        self.assertFalse(item.setPropertyValue('value', 1))
        self.assertEqual(rec.changes, [])
        self.assertTrue(item.setPropertyValue('value', 2))
        self.assertEqual(rec.changes, [(item, 'value', 1, 2)])
        rec.clear()
        self.assertEqual(rec.names(), [])

    def testWatch(self):
        item = Item()
        parent = Item()
        rec = ChangeRecorder(parent)
        parent.watch(item)
        parent.watch(item)
        self.assertEqual(parent.watched, [item])
        item.setPropertyValue('value', 5)
        # passed on with the parent as the source
        self.assertEqual(rec.changes, [(parent, 'value', 1, 5)])
        parent.unwatch(item)
        item.setPropertyValue('value', 6)
        self.assertEqual(len(rec.changes), 1)
        parent.watch(item)
        parent.disconnectAll()
        item.setPropertyValue('value', 7)
        self.assertEqual(len(rec.changes), 1)
        self.assertEqual(parent.watched, [])

class CutPointListTest(unittest.TestCase):
    def assertNear(self, v1, v2, places=6, msg=None):
        self.assertAlmostEqual(v1, v2, places=places, msg=msg)

    def setUp(self):
        self.outline = cylinder()
        self.cutter = fixed_cutter()
        self.points = CutPointList(self.outline)

    def testWarning(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            self.points.add_warning("nothing to cut")
        self.assertEqual(self.points.warnings, ["nothing to cut"])
        self.assertEqual(out.getvalue(), "Warning: nothing to cut\n")

    def add_spiral(self):
        spiral = SpiralRosette(Vector(1.0, 0.8), self.cutter, self.outline, end_depth=0.03)
        spiral.begin_point.move(1.0, 0.2)
        return self.points.add(spiral)

    def testAddCut(self):
        points = self.points
        p = points.add_cut(Vector(1.2, 0.5), self.cutter)
        self.assertIsInstance(p, RosettePoint)
        self.assertNear(p.x, 1.0)
        self.assertNear(p.z, 0.5)
        self.assertEqual(p.num, 0)
        self.assertIs(points[0], p)
        self.assertEqual(p.tag, CutPointList.DEFAULT_TYPE)
        idx = points.add_cut(Vector(1.1, 0.3), self.cutter, IndexPoint.tag)
        self.assertIsInstance(idx, IndexPoint)
        self.assertNear(idx.x, 1.0)
        self.assertNear(idx.z, 0.3)
        idx.set_repeat(4)
        # copies the last cut made with the same cutter
        dup = points.add_cut(Vector(0.9, 0.7), self.cutter)
        self.assertIsInstance(dup, IndexPoint)
        self.assertEqual(dup.repeat, 4)
        self.assertNear(dup.z, 0.7)
        self.assertEqual(dup.num, 2)
        other = points.add_cut(Vector(1.0, 0.1), fixed_cutter("Other"))
        self.assertIsInstance(other, RosettePoint)
        line = points.add_cut(Vector(1.0, 0.1), self.cutter, "LinePoint")
        self.assertIsInstance(line, LinePoint)
        self.assertEqual(len(points), 5)
        self.assertEqual(points.all_for_cutter(self.cutter), [p, idx, dup, line])
        self.assertIs(points.last_cut_point(self.cutter), line)
        self.assertRaises(ValueError, lambda: points.add_cut(Vector(1.0, 0.1), self.cutter, "NoSuchPoint"))

    def testAddCutNoCurve(self):
        points = CutPointList(Outline([Vector(1.0, 0.0)]))
        self.assertIsNone(points.add_cut(Vector(1.0, 0.0), self.cutter))
        self.assertTrue(points.is_empty())

    def testAddTwice(self):
        p = self.points.add_cut(Vector(1.0, 0.5), self.cutter)
        self.assertIsNone(self.points.add(p))
        self.assertIsNone(self.points.insert(0, p))
        self.assertEqual(len(self.points), 1)

    def testRemove(self):
        points = self.points
        a = points.add_cut(Vector(1.0, 0.2), self.cutter)
        b = points.add_cut(Vector(1.0, 0.4), self.cutter)
        c = points.add_cut(Vector(1.0, 0.6), self.cutter)
        self.assertTrue(points.remove(b))
        self.assertEqual(list(points), [a, c])
        self.assertEqual([p.num for p in points], [0, 1])
        self.assertFalse(points.remove(b))
        self.assertIsNone(points.get(2))
        self.assertIsNone(points.get(-1))
        points.clear()
        self.assertTrue(points.is_empty())

    def testOrder(self):
        points = self.points
        a = points.add_cut(Vector(1.0, 0.2), self.cutter)
        b = points.add_cut(Vector(1.0, 0.4), self.cutter)
        rec = ChangeRecorder(points)
        self.assertFalse(points.move_up(a))
        self.assertFalse(points.move_down(b))
        self.assertTrue(points.move_up(b))
        self.assertEqual(list(points), [b, a])
        self.assertEqual((b.num, a.num), (0, 1))
        self.assertTrue(points.move_down(b))
        self.assertEqual(list(points), [a, b])
        self.assertEqual([name for name in rec.names() if name == 'order'], ['order', 'order'])
        c = IndexPoint(Vector(1.0, 0.8), self.cutter, self.outline)
        points.insert(0, c)
        self.assertEqual(list(points), [c, a, b])
        self.assertEqual([p.num for p in points], [0, 1, 2])

    def testDuplicate(self):
        points = self.points
        a = points.add_cut(Vector(1.0, 0.2), self.cutter)
        points.add_cut(Vector(1.0, 0.4), self.cutter)
        dup = points.duplicate(a)
        self.assertIs(points[1], dup)
        self.assertEqual(dup.pos(), a.pos())
        self.assertEqual([p.num for p in points], [0, 1, 2])
        self.assertIsNone(points.duplicate(IndexPoint(Vector(1.0, 0.5), self.cutter, self.outline)))

    def testNotifications(self):
        points = self.points
        rec = ChangeRecorder(points)
        p = points.add_cut(Vector(1.2, 0.5), self.cutter)
        self.assertEqual(rec.names(), ['add', 'pos'])
        rec.clear()
        p.set_depth(0.03)
        self.assertEqual(rec.changes, [(points, 'depth', 0.05, 0.03)])
        rec.clear()
        # moving off the curve snaps back on
        p.move(1.5, 0.25)
        self.assertNear(p.x, 1.0)
        self.assertNear(p.z, 0.25)
        rec.clear()
        points.remove(p)
        self.assertEqual(rec.names(), ['delete'])
        rec.clear()
        p.set_depth(0.04)
        self.assertEqual(rec.changes, [])

    def testOutlineChange(self):
        p = self.points.add_cut(Vector(1.0, 0.5), self.cutter)
        self.outline.set_thickness(0.2)
        self.assertNear(p.x, 1.0)
        self.assertNear(p.z, 0.5)

    def testTransforms(self):
        points = self.points
        p = points.add_cut(Vector(1.0, 0.5), self.cutter)
        rec = ChangeRecorder(points)
        self.assertTrue(points.invert())
        self.assertNear(p.z, -0.5)
        self.assertNear(self.outline.dot_curve.bottom_point().z, -1.0)
        self.assertEqual(rec.names(), ['multi'])
        points.invert()
        self.assertTrue(points.offset_vertical(0.25))
        self.assertNear(p.z, 0.25)
        self.assertNear(self.outline.dot_curve.bottom_point().z, -0.25)
        self.assertTrue(points.scale(2))
        self.assertNear(p.x, 2.0)
        self.assertNear(p.z, 0.5)
        self.assertNear(self.outline.dot_curve.top_point().x, 2.0)
        rec.clear()
        self.assertFalse(points.scale(20))
        self.assertNear(p.x, 2.0)
        self.assertEqual(rec.names(), [])
        self.assertFalse(points.suspended)

    def testSpiralToPoints(self):
        points = self.points
        first = points.add_cut(Vector(1.0, 0.1), self.cutter)
        spiral = self.add_spiral()
        last = points.add_cut(Vector(1.0, 0.9), self.cutter, "IndexPoint")
        res = points.spiral_to_points(spiral, n_inserts=3)
        self.assertEqual(len(res), 5)
        self.assertEqual(len(points), 7)
        self.assertIs(points[0], first)
        self.assertIs(points[6], last)
        self.assertEqual([p.num for p in points], list(range(7)))
        self.assertTrue(all(isinstance(p, RosettePoint) for p in points[1:6]))
        self.assertNear(points[3].z, 0.5)
        self.assertFalse(points.contains(spiral))
        self.assertIsNone(points.spiral_to_points(spiral))
        spiral = self.add_spiral()
        self.assertEqual(len(points.spiral_to_points(spiral, space=0.1)), 7)

    def testRemoveBeginPoint(self):
        spiral = self.add_spiral()
        self.assertTrue(self.points.remove(spiral.begin_point))
        self.assertTrue(self.points.is_empty())

    def testDropGoTo(self):
        points = self.points
        goto = points.add(GoToPoint(Vector(1.2, 0.5), self.cutter, self.outline))
        spiral = self.add_spiral()
        points.drop_goto(goto, spiral)
        self.assertEqual(list(points), [spiral])
        self.assertEqual(spiral.num, 0)
        self.assertEqual(spiral.go_tos, [goto])
        self.assertEqual(goto.num, 0)
        self.assertTrue(points.remove(goto))
        self.assertEqual(spiral.go_tos, [])
        self.assertEqual(len(points), 1)

    def testDropOffPoint(self):
        points = self.points
        group = points.add(OffsetGroup(Vector(1.0, 0.5), self.cutter, self.outline))
        rp = points.add_cut(Vector(1.0, 0.3), self.cutter, RosettePoint.tag)
        res = points.drop_off_point(rp, group)
        self.assertIsInstance(res, OffRosettePoint)
        self.assertIs(res.group, group)
        self.assertEqual(list(points), [group])
        self.assertTrue(group.contains(res))
        self.assertEqual(res.pos(), rp.pos())
        line = points.add_cut(Vector(1.0, 0.3), self.cutter, LinePoint.tag)
        self.assertIsNone(points.drop_off_point(line, group))
        self.assertTrue(points.contains(line))
        self.assertTrue(points.remove(res))
        self.assertEqual(group.off_points, [])

    def testInstructions(self):
        points = self.points
        points.add_cut(Vector(1.0, 0.3), self.cutter, IndexPoint.tag)
        group = points.add(OffsetGroup(Vector(1.0, 0.5), self.cutter, self.outline))
        points.add_cut(Vector(1.0, 0.7), fixed_cutter("Other"), IndexPoint.tag)
        cl = CutList()
        points.make_instructions(cl, PassPlan(), 720, self.cutter)
        comments = [i.text for i in cl.of_type(InstType.COMMENT)]
        self.assertIn("IndexPoint 0", comments)
        self.assertNotIn("IndexPoint 2", comments)
        # offset cuts only when asked for
        self.assertNotIn("OffsetCut 1", comments)
        cl = CutList()
        points.make_instructions(cl, PassPlan(), 720, target=group)
        comments = [i.text for i in cl.of_type(InstType.COMMENT)]
        self.assertIn("OffsetCut 1", comments)
        self.assertNotIn("IndexPoint 0", comments)
        cl = CutList()
        points.make_instructions(cl, PassPlan(), 720)
        comments = [i.text for i in cl.of_type(InstType.COMMENT)]
        self.assertIn("IndexPoint 2", comments)

    def testCutSurface(self):
        points = self.points
        points.add_cut(Vector(1.0, 0.3), self.cutter, IndexPoint.tag)
        points.add_cut(Vector(1.0, 0.6), self.cutter, RosettePoint.tag)
        points.add_cut(Vector(1.0, 0.8), fixed_cutter("Other"), IndexPoint.tag)
        surface = RecordingSurface(8)
        points.cut_surface(surface, self.cutter)
        self.assertEqual(len(surface.cuts), IndexPoint.DEFAULT_REPEAT + 8)
        self.assertTrue(surface.is_at_rest())
        surface = RecordingSurface(8)
        points.cut_surface(surface)
        self.assertEqual(len(surface.cuts), 2 * IndexPoint.DEFAULT_REPEAT + 8)

if __name__ == '__main__':
    unittest.main()
