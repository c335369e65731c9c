from math import *

from RoseCAM.common.enums import EnumClass
from RoseCAM.common.geom import *
from RoseCAM.common.notify import Observable
from RoseCAM.cam.cutlist import Speed
from RoseCAM.cam.cutpoint import CutPoint
from RoseCAM.cam.cutter import Frame, Location
from RoseCAM.cam.index_points import IndexPoint, MoveDirection, move_vector_for
from RoseCAM.cam.line_point import LinePoint
from RoseCAM.cam.rosette import is_repeat_cut
from RoseCAM.cam.rosette_point import Motion, RosettePoint

class SpiralStyle(object):
    """Distributes a total twist along a list of outline points. The result
    is a list of Point3D(radius, z, cumulative spindle angle)."""
    name = None
    display_name = None
    needs_amplitude = False
    def __repr__(self):
        return self.name
    def make_spiral(self, points, twist, amp):
        if not points:
            return None
        if len(points) == 1:
            p = points[0]
            return [Point3D(p.x, p.z, 0.0), Point3D(p.x, p.z, twist)]
        return self.calculate(points, twist, amp)
    def calculate(self, points, twist, amp):
        raise NotImplementedError()

def path_lengths(points):
    res = [0.0]
    for p1, p2 in zip(points, points[1:]):
        res.append(res[-1] + p1.dist(p2))
    return res

class SpiralUNIFORMD(SpiralStyle):
    # twist proportional to the distance along the outline
    name = "UNIFORMD"
    display_name = "Uniform D"
    def calculate(self, points, twist, amp):
        cum = path_lengths(points)
        tot = cum[-1]
        return [Point3D(p.x, p.z, twist * d / tot if tot else 0.0) for p, d in zip(points, cum)]

class SpiralUNIFORMZ(SpiralStyle):
    # twist proportional to the height
    name = "UNIFORMZ"
    display_name = "Uniform Z"
    def calculate(self, points, twist, amp):
        z0 = points[0].z
        tot = points[-1].z - z0
        return [Point3D(p.x, p.z, twist * (p.z - z0) / tot if tot else 0.0) for p in points]

class SpiralSIN4(SpiralStyle):
    # quarter sine wave: steep at the start, flattening out at the end
    name = "SIN4"
    display_name = "Sin4"
    def calculate(self, points, twist, amp):
        cum = path_lengths(points)
        tot = cum[-1]
        return [Point3D(p.x, p.z, twist * sin(pi / 2.0 * d / tot) if tot else 0.0) for p, d in zip(points, cum)]

class SpiralLibrary(object):
    DEFAULT_SPIRAL = "UNIFORMD"
    def __init__(self):
        self.styles = [SpiralUNIFORMD(), SpiralUNIFORMZ(), SpiralSIN4()]
    def all_names(self):
        return [s.name for s in self.styles]
    def find(self, name):
        for s in self.styles:
            if s.name == name:
                return s
        return None
    def get_spiral(self, name):
        return self.find(name) or self.find(self.DEFAULT_SPIRAL)
    def default_spiral(self):
        return self.find(self.DEFAULT_SPIRAL)

spirals = SpiralLibrary()

def get_spiral(name):
    return spirals.get_spiral(name)

class Spiral(Observable):
    DEFAULT_TWIST = 90.0
    DEFAULT_AMP = 0.0
    def __init__(self, style=None, twist=DEFAULT_TWIST, amp=DEFAULT_AMP):
        Observable.__init__(self)
        if not isinstance(style, SpiralStyle):
            style = get_spiral(style or SpiralLibrary.DEFAULT_SPIRAL)
        self.style = style
        self.twist = twist
        self.amp = amp
    def __repr__(self):
        if self.style.needs_amplitude:
            return f"{self.style.name} {self.twist:0.1f} {self.amp:0.3f}"
        return f"{self.style.name} {self.twist:0.1f}"
    def copy(self):
        return Spiral(self.style, self.twist, self.amp)
    def set_style(self, style):
        if not isinstance(style, SpiralStyle):
            style = spirals.find(style)
            if style is None:
                return
        self.setPropertyValue('style', style)
    def set_twist(self, twist):
        self.setPropertyValue('twist', twist)
    def set_amp(self, amp):
        self.setPropertyValue('amp', amp)
    def make_spiral(self, points):
        return self.style.make_spiral(points, self.twist, self.amp)

class Spacing(EnumClass):
    UNIFORM_X = 0
    UNIFORM_Z = 1
    UNIFORM_D = 2
    descriptions = [
        (UNIFORM_X, "UNIFORM_X", "Equal steps in X"),
        (UNIFORM_Z, "UNIFORM_Z", "Equal steps in Z"),
        (UNIFORM_D, "UNIFORM_D", "Equal steps along the curve"),
    ]

def spacing_lengths(rzc, spacing):
    """Cumulative length along the twist points, measured the given way."""
    res = [0.0]
    for p1, p2 in zip(rzc, rzc[1:]):
        if spacing == Spacing.UNIFORM_X:
            d = abs(p2.x - p1.x)
        elif spacing == Spacing.UNIFORM_Z:
            d = abs(p2.y - p1.y)
        else:
            d = hypot(p2.x - p1.x, p2.y - p1.y)
        res.append(res[-1] + d)
    return res

def to_xyz(rzc):
    if rzc is None:
        return []
    return [polar_to_xyz(p.x, p.y, p.z) for p in rzc]

def total_distance(xyz):
    return sum(p1.dist(p2) for p1, p2 in zip(xyz, xyz[1:]))

class SpiralCut(CutPoint):
    """Cut that varies continuously along the outline from a begin point
    to the position of this object (the end point), twisting the spindle
    as it goes. The begin point is a plain cut point of the matching kind
    and is owned by the spiral."""
    begin_class = None
    def __init__(self, pos, cutter, outline, depth=CutPoint.DEFAULT_DEPTH, snap=True, num=0,
            end_depth=CutPoint.DEFAULT_DEPTH, spiral=None, begin_point=None):
        CutPoint.__init__(self, pos, cutter, outline, depth, snap, num)
        self.end_depth = end_depth
        self.spiral = spiral if spiral is not None else Spiral()
        if begin_point is None:
            begin_point = self.begin_class(pos, cutter, outline, num=num)
        self.begin_point = begin_point
        self.go_tos = []
        self.watch(self.spiral)
        self.watch(self.begin_point)
    def __repr__(self):
        return f"{self.num}: {self.x:0.3f} {self.z:0.3f} {self.begin_point.depth:0.3f}->{self.end_depth:0.3f}"
    def properties(self):
        return CutPoint.properties(self) + ['end_depth', 'spiral']
    def store(self):
        dump = CutPoint.store(self)
        dump['begin_point'] = self.begin_point.store()
        dump['go_tos'] = [g.store() for g in self.go_tos]
        return dump
    def class_specific_load(self, dump):
        if 'begin_point' in dump:
            self.unwatch(self.begin_point)
            self.begin_point = CutPoint.load(self.outline, self.cutter, dump['begin_point'])
            self.watch(self.begin_point)
        for g in list(self.go_tos):
            self.unwatch(g)
        self.go_tos = []
        for item in dump.get('go_tos', []):
            g = CutPoint.load(self.outline, self.cutter, item)
            self.go_tos.append(g)
            self.watch(g)
    def place(self, pos):
        CutPoint.place(self, pos)
        self.begin_point.place(pos)
    def linked_points(self):
        return [self.begin_point] + self.go_tos
    def clear(self):
        for p in self.linked_points():
            p.clear()
        self.go_tos = []
        CutPoint.clear(self)
    def set_num(self, num):
        CutPoint.set_num(self, num)
        for p in self.linked_points():
            p.set_num(num)
    def set_cutter(self, cutter):
        CutPoint.set_cutter(self, cutter)
        for p in self.linked_points():
            p.set_cutter(cutter)
    def set_end_depth(self, depth):
        self.setPropertyValue('end_depth', depth)
    def end_width_at_max(self):
        return self.cutter.width_of_cut(self.end_depth)
    def snap_to_curve(self):
        CutPoint.snap_to_curve(self)
        self.begin_point.snap_to_curve()
    def scale(self, factor):
        CutPoint.scale(self, factor)
        for p in self.linked_points():
            p.scale(factor)
    def invert(self):
        CutPoint.invert(self)
        for p in self.linked_points():
            p.invert()
    def offset_vertical(self, delta):
        CutPoint.offset_vertical(self, delta)
        for p in self.linked_points():
            p.offset_vertical(delta)
    def contains_go_to(self, point):
        return point in self.go_tos
    def add_go_to(self, point):
        if self.contains_go_to(point):
            return
        point.set_num(self.num)
        self.go_tos.append(point)
        self.watch(point)
        self.emitPropertyChanged('add', None, point)
    def remove_go_to(self, point):
        if not self.contains_go_to(point):
            return
        self.go_tos.remove(point)
        self.unwatch(point)
        point.clear()
        self.emitPropertyChanged('remove', point, None)
    def surface_twist(self):
        """Twist along the cut surface between the begin and end points."""
        curve = self.outline.cut_curve(self.cutter.location)
        if not len(curve):
            return None
        points = curve.subset_points(curve.nearest_point(self.begin_point.pos()), curve.nearest_point(self.pos()))
        return self.spiral.make_spiral(points)
    def fine_cutter_path(self):
        return self.cutter_path().resampled(self.outline.resolution / 10.0)
    def cutter_twist(self):
        """Surface twist moved onto the path of the cutter centre."""
        rzc = self.surface_twist()
        if rzc is None:
            return None
        if self.cutter.frame in (Frame.FIXED, Frame.DRILL, Frame.ECF):
            # the cut path is on the surface
            return rzc
        fine = self.fine_cutter_path()
        res = []
        for p in rzc:
            near = fine.nearest_point(Vector(p.x, p.y))
            res.append(Point3D(near.x, near.z, p.z))
        return res
    def extra_twist(self, rzc):
        return [0.0] * len(rzc)
    def depth_fraction(self, r, arc_fraction, r0, r1):
        return arc_fraction
    def point_at(self, r, z, c, fraction):
        """A plain cut point of the begin point's kind at r, z with the twist
        c in degrees and the depth fraction of the way to the end."""
        raise NotImplementedError()
    def sample_points(self):
        """One plain cut point per point of the cutter twist. Empty for a
        spiral of zero length."""
        rzc = self.cutter_twist()
        if not rzc:
            return []
        xyz = to_xyz(rzc)
        total = total_distance(xyz)
        if total <= 0.0:
            return []
        twist = self.extra_twist(rzc)
        r0, r1 = rzc[0].x, rzc[-1].x
        res = []
        cum = 0.0
        for i, p in enumerate(rzc):
            if i > 0:
                cum += xyz[i].dist(xyz[i - 1])
            arc_fraction = 1.0 if i == len(rzc) - 1 else cum / total
            res.append(self.point_at(p.x, p.y, p.z + twist[i], self.depth_fraction(p.x, arc_fraction, r0, r1)))
        return res
    def inserts_for_spacing(self, space, spacing=Spacing.UNIFORM_D):
        rzc = self.surface_twist()
        if not rzc or space <= 0:
            return 0
        return max(int(round(spacing_lengths(rzc, spacing)[-1] / space)) - 1, 0)
    def to_points(self, n_inserts=None, spacing=Spacing.UNIFORM_D):
        """Plain cut points replacing this spiral: the begin point, the
        intermediate points and the end point. Without n_inserts there is
        one point per sample of the cutter twist. A spiral of zero length
        gives just the begin point."""
        if n_inserts is None:
            points = self.sample_points()
            return points if points else [self.begin_point.duplicate()]
        rzc = self.surface_twist()
        if not rzc or total_distance(to_xyz(rzc)) <= 0.0:
            return [self.begin_point.duplicate()]
        cum = spacing_lengths(rzc, spacing)
        cum_total = cum[-1]
        r0, r1 = rzc[0].x, rzc[-1].x
        res = [self.begin_point.duplicate()]
        if cum_total > 0:
            delta = cum_total / (n_inserts + 1)
            for i in range(1, n_inserts + 1):
                target = i * delta
                r, z, c = rzc[-1].as_tuple()
                for j in range(1, len(rzc)):
                    if cum[j] >= target:
                        r = proportion(cum[j - 1], target, cum[j], rzc[j - 1].x, rzc[j].x)
                        z = proportion(cum[j - 1], target, cum[j], rzc[j - 1].y, rzc[j].y)
                        c = proportion(cum[j - 1], target, cum[j], rzc[j - 1].z, rzc[j].z)
                        break
                point = self.point_at(r, z, c, self.depth_fraction(r, target / cum_total, r0, r1))
                point.snap = True
                point.snap_to_curve()
                res.append(point)
        end = self.point_at(self.x, self.z, rzc[-1].z, 1.0)
        end.snap = self.snap
        res.append(end)
        return res
    def cut_surface(self, surface):
        points = self.sample_points()
        if not points:
            self.begin_point.cut_surface(surface)
            return
        for point in points:
            point.cut_surface(surface)
            point.clear()
            if is_calculation_cancelled():
                break
    def sample_depths(self, rzc, xyz, total):
        start = self.begin_point.depth
        res = []
        cum = 0.0
        for i in range(len(rzc)):
            if i > 0:
                cum += xyz[i].dist(xyz[i - 1])
            res.append(start + cum / total * (self.end_depth - start))
        return res
    def stream_repeats(self, cutlist, rzc, cuts, twist, safety, end_safety, repeat, phase, mask):
        """Follow the whole spiral once per repeat with the spindle turning
        along with the twist, going back through the go-to points between
        repeats."""
        begin = self.begin_point.pos()
        last_c = 0.0
        did_a_cut = False
        cutlist.spindle_wrap_check()
        for i in range(repeat):
            if not is_repeat_cut(mask, repeat, i):
                continue
            if did_a_cut:
                for g in self.go_tos:
                    cutlist.go_to_xz(Speed.FAST, g.x, g.z)
            # minus to match the phase of a rosette
            c_angle = 360.0 * i / repeat - phase / repeat
            last_c = c_angle - twist[0]
            cutlist.go_to(Speed.FAST, begin - safety, last_c)
            for p, cut, tw in zip(rzc, cuts, twist):
                last_c = c_angle - tw
                cutlist.go_to_xzc(Speed.VELOCITY, p.x + cut.x, p.y + cut.z, last_c)
            end = self.pos() - end_safety
            cutlist.go_to_xz(Speed.VELOCITY, end.x, end.z)
            did_a_cut = True
        if last_c != 360.0:
            cutlist.turn(360.0)
        cutlist.spindle_wrap_check()

@CutPoint.register_class
class SpiralIndex(SpiralCut):
    begin_class = IndexPoint
    def end_move_vector(self, scale):
        return move_vector_for(self, self.begin_point.direction, scale)
    def point_at(self, r, z, c, fraction):
        begin = self.begin_point
        res = begin.duplicate()
        res.depth = begin.depth + fraction * (self.end_depth - begin.depth)
        res.phase = angle_check(begin.phase + c * begin.repeat)
        res.move(r, z)
        return res
    def cut_vector(self, perp, depth):
        direction = self.begin_point.direction
        if direction == MoveDirection.MOVE_X:
            return Vector(depth if Location.is_front_in_or_back_out(self.cutter.location) else -depth, 0.0)
        if direction == MoveDirection.MOVE_Z:
            return Vector(0.0, -depth if perp.z < 0.0 else depth)
        return perp * depth
    def make_instructions(self, cutlist, plan, steps_per_rot):
        cutlist.comment(f"SpiralIndex {self.num}")
        cutlist.comment(f"Cutter: {self.cutter}")
        rzc = self.cutter_twist()
        xyz = to_xyz(rzc)
        total = total_distance(xyz)
        if total <= 0.0:
            self.begin_point.make_instructions(cutlist, plan, steps_per_rot)
            return
        fine = self.fine_cutter_path()
        dir = Location.is_front_in_or_back_out(self.cutter.location)
        cuts = []
        for p, depth in zip(rzc, self.sample_depths(rzc, xyz, total)):
            perp = fine.perpendicular(Vector(p.x, p.y), dir) or Vector(0.0, 0.0)
            cuts.append(self.cut_vector(perp, depth))
        begin = self.begin_point
        self.stream_repeats(cutlist, rzc, cuts, [p.z for p in rzc],
            begin.move_vector(LatheSettings.index_safety), self.end_move_vector(LatheSettings.index_safety),
            begin.repeat, begin.phase, begin.mask)

@CutPoint.register_class
class SpiralRosette(SpiralCut):
    """Rosette cuts repeated along the spiral. When the rosette amplitude of
    the begin point equals its depth the amplitude tapers with the depth."""
    begin_class = RosettePoint
    def depth_fraction(self, r, arc_fraction, r0, r1):
        if r1 != r0:
            return (r - r0) / (r1 - r0)
        return arc_fraction
    def point_at(self, r, z, c, fraction):
        begin = self.begin_point
        start = begin.depth
        res = begin.duplicate()
        res.depth = start + fraction * (self.end_depth - start)
        sources = [(res.rosette, begin.rosette)]
        if Motion.is_dual(begin.motion):
            sources.append((res.rosette2, begin.rosette2))
        for rosette, begin_rosette in sources:
            if begin_rosette.p_to_p == start:
                rosette.set_p_to_p(start + fraction * (self.end_depth - start))
            rosette.set_phase(begin_rosette.phase + c * begin_rosette.repeat)
        res.move(r, z)
        return res
    def make_instructions(self, cutlist, plan, steps_per_rot):
        cutlist.comment(f"SpiralRosette {self.num}")
        cutlist.comment(f"Cutter: {self.cutter}")
        points = self.sample_points()
        if not points:
            self.begin_point.make_instructions(cutlist, plan, steps_per_rot)
            return
        for point in points:
            point.make_instructions(cutlist, plan, steps_per_rot)
            point.clear()

@CutPoint.register_class
class SpiralLine(SpiralCut):
    """Lines along the spiral, the pattern bar of the begin point adding
    twist as a function of the distance travelled."""
    begin_class = LinePoint
    def __init__(self, pos, cutter, outline, depth=CutPoint.DEFAULT_DEPTH, snap=True, num=0,
            end_depth=CutPoint.DEFAULT_DEPTH, spiral=None, begin_point=None,
            scale_depth=False, scale_amplitude=False):
        SpiralCut.__init__(self, pos, cutter, outline, depth, snap, num, end_depth, spiral, begin_point)
        self.scale_depth = scale_depth
        self.scale_amplitude = scale_amplitude
    def properties(self):
        return SpiralCut.properties(self) + ['scale_depth', 'scale_amplitude']
    def scaled_end_depth(self):
        begin = self.begin_point
        if begin.x == 0:
            return begin.depth
        return begin.depth * self.x / begin.x
    def update_end_depth(self):
        if self.scale_depth:
            self.setPropertyValue('end_depth', self.scaled_end_depth())
    def set_scale_depth(self, scale):
        self.setPropertyValue('scale_depth', bool(scale))
        self.update_end_depth()
    def set_scale_amplitude(self, scale):
        self.setPropertyValue('scale_amplitude', bool(scale))
    def set_end_depth(self, depth):
        # follows the radius while scaled
        if self.scale_depth:
            return
        SpiralCut.set_end_depth(self, depth)
    def move(self, x, z):
        SpiralCut.move(self, x, z)
        self.update_end_depth()
    def snap_to_curve(self):
        SpiralCut.snap_to_curve(self)
        self.update_end_depth()
    def onWatchedChanged(self, source, name, old, new):
        if source is self.begin_point:
            self.update_end_depth()
        SpiralCut.onWatchedChanged(self, source, name, old, new)
    def end_move_vector(self, scale):
        return self.perp_vector(scale)
    def pattern_twist(self, rzc):
        """Extra twist in degrees at every point, the pattern bar amplitude
        at the distance travelled turned into an angle at that radius."""
        bar = self.begin_point.pattern_bar
        start_r = self.begin_point.x
        xyz = to_xyz(rzc)
        res = []
        dist = 0.0
        for i, p in enumerate(rzc):
            if i > 0:
                dist += xyz[i].dist(xyz[i - 1])
            amp = bar.amplitude_at(dist)
            if self.scale_amplitude and start_r != 0:
                amp *= p.x / start_r
            res.append(degrees_for_distance(amp, p.x))
        return res
    def extra_twist(self, rzc):
        surface = self.surface_twist()
        if surface is None or len(surface) != len(rzc):
            return self.pattern_twist(rzc)
        return self.pattern_twist(surface)
    def point_depth(self, r, fraction):
        begin = self.begin_point
        if self.scale_depth and begin.x != 0:
            return begin.depth * r / begin.x
        return begin.depth + fraction * (self.end_depth - begin.depth)
    def point_at(self, r, z, c, fraction):
        begin = self.begin_point
        res = begin.duplicate()
        res.depth = self.point_depth(r, fraction)
        res.phase = begin.phase + c * begin.repeat
        res.move(r, z)
        return res
    def make_instructions(self, cutlist, plan, steps_per_rot):
        cutlist.comment(f"SpiralLine {self.num}")
        cutlist.comment(f"Cutter: {self.cutter}")
        rzc = self.cutter_twist()
        xyz = to_xyz(rzc)
        total = total_distance(xyz)
        if total <= 0.0:
            self.begin_point.make_instructions(cutlist, plan, steps_per_rot)
            return
        add_twist = self.extra_twist(rzc)
        fine = self.fine_cutter_path()
        dir = Location.is_front_in_or_back_out(self.cutter.location)
        cuts = []
        for i, (p, depth) in enumerate(zip(rzc, self.sample_depths(rzc, xyz, total))):
            if self.scale_depth:
                depth = self.point_depth(p.x, 0.0)
            perp = fine.perpendicular(Vector(p.x, p.y), dir) or Vector(0.0, 0.0)
            cuts.append(perp * depth)
        begin = self.begin_point
        self.stream_repeats(cutlist, rzc, cuts, [p.z + add for p, add in zip(rzc, add_twist)],
            begin.move_vector(LatheSettings.line_safety), self.end_move_vector(LatheSettings.line_safety),
            begin.repeat, begin.phase, begin.mask)
