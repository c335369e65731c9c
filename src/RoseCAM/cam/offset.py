from math import *

from RoseCAM.common.geom import *
from RoseCAM.cam.cutlist import Speed
from RoseCAM.cam.cutpoint import CutPoint
from RoseCAM.cam.cutter import Location
from RoseCAM.cam.patterns import CustomPattern, CustomStyle, patterns
from RoseCAM.cam.rosette import Rosette
from RoseCAM.cam.rosette_point import Motion, RosettePoint
from RoseCAM.cam.surface import offset_repeats, sweep_sectors

class IndexWheel(object):
    """The 24 and 35 hole index wheels used to space the repeats of an
    offset cut."""
    VALID_REPEATS = [1, 2, 3, 4, 5, 6, 7, 8, 12, 24, 35]
    @staticmethod
    def is_valid_repeat(repeat):
        return repeat in IndexWheel.VALID_REPEATS
    @staticmethod
    def holes(repeat):
        if not IndexWheel.is_valid_repeat(repeat):
            return 0
        if repeat in (1, 5, 7):
            return 35
        return 24
    @staticmethod
    def holes_per_repeat(repeat):
        return IndexWheel.holes(repeat) // repeat if IndexWheel.is_valid_repeat(repeat) else 0

class OffsetCut(CutPoint):
    """Cut made on a secondary axis, tilted to the tangent of the outline
    and spaced around the piece with an index wheel."""
    DEFAULT_REPEAT = Rosette.DEFAULT_REPEAT
    def __init__(self, pos, cutter, outline, depth=CutPoint.DEFAULT_DEPTH, snap=True, num=0,
            repeat=DEFAULT_REPEAT, index_offset=0):
        CutPoint.__init__(self, pos, cutter, outline, depth, snap, num)
        self.repeat = repeat if IndexWheel.is_valid_repeat(repeat) else self.DEFAULT_REPEAT
        self.index_offset = 0
        self.index_offset = self.normalize_offset(index_offset) or 0
    def properties(self):
        return CutPoint.properties(self) + ['repeat', 'index_offset']
    def set_repeat(self, repeat):
        if not IndexWheel.is_valid_repeat(repeat):
            return
        old = self.repeat
        if old == repeat:
            return
        self.repeat = repeat
        self.index_offset = self.index_offset % IndexWheel.holes_per_repeat(repeat)
        self.emitPropertyChanged('repeat', old, repeat)
    def normalize_offset(self, offset):
        per_repeat = IndexWheel.holes_per_repeat(self.repeat)
        if per_repeat == 0 or offset >= per_repeat:
            return None
        return int(offset) % per_repeat
    def set_index_offset(self, offset):
        offset = self.normalize_offset(offset)
        if offset is None:
            return
        self.setPropertyValue('index_offset', offset)
    def index_wheel_holes(self):
        return IndexWheel.holes(self.repeat)
    def index_offset_degrees(self):
        holes = self.index_wheel_holes()
        if holes == 0:
            return 0.0
        return self.index_offset * 360.0 / holes
    def tangent_point(self):
        """Point of the cut surface nearest to the offset origin."""
        return self.outline.cut_curve(self.cutter.location).nearest_point(self.pos())
    def tangent_vector(self):
        pos = self.pos()
        if self.snap:
            tan = self.cutter_path().perpendicular(pos, Location.is_front_in_or_back_out(self.cutter.location))
            if tan is None:
                return Vector(0.0, 0.0)
        else:
            tp = self.tangent_point()
            if tp is None:
                return Vector(0.0, 0.0)
            tan = tp - pos
        return tan.normalized().snapped()
    def tangent_angle(self):
        tan = self.tangent_vector()
        return degrees(atan2(-tan.x, -tan.z))
    def distance_to_top(self):
        tp = self.tangent_point()
        return tp.dist(self.outline.outside_curve().top_point())
    def offset_for(self, point):
        """Position of point in the tilted frame of this offset origin."""
        return (point.pos() - self.pos()).rotated(self.tangent_angle())
    def header_comments(self, cutlist):
        holes = self.index_wheel_holes()
        per_repeat = holes // self.repeat
        n = -self.index_offset
        if n < 0:
            n += per_repeat
        cutlist.comment("************************")
        cutlist.comment(f"OffsetCut {self.num}")
        cutlist.comment(f"Cutter: {self.cutter}")
        cutlist.comment(f"  tangent angle is {self.tangent_angle():0.1f}")
        cutlist.comment(f"  distance to top is {self.distance_to_top():0.3f}")
        cutlist.comment(f"  repeat is {self.repeat}")
        cutlist.comment(f"    use {holes} hole index wheel, offset {-self.index_offset} holes")
        skip = "".join(f"{i}  " for i in range(n, holes, per_repeat))
        cutlist.comment(f"    skip {per_repeat} holes each repeat:  holes {skip}")
        cutlist.comment("************************")
    def make_instructions(self, cutlist, plan, steps_per_rot):
        self.header_comments(cutlist)
    def cut_surface(self, surface):
        offset_repeats(surface, self.repeat, self.index_offset_degrees(), self.pos(), self.tangent_angle(),
            lambda i: self.cut_repeat(surface, i))
    def cut_repeat(self, surface, i):
        raise NotImplementedError()

@CutPoint.register_class
class OffRosettePoint(RosettePoint):
    """Rosette cut belonging to an offset group, positioned relative to the
    offset origin of the group."""
    def __init__(self, pos, cutter, outline, depth=CutPoint.DEFAULT_DEPTH, snap=True, num=0,
            motion=Motion.ROCK, rosette=None, rosette2=None, group=None):
        RosettePoint.__init__(self, pos, cutter, outline, depth, snap, num, motion, rosette, rosette2)
        self.group = group
    @staticmethod
    def from_rosette_point(rpt, group):
        return OffRosettePoint(rpt.pos(), rpt.cutter, rpt.outline, rpt.depth, rpt.snap, group.num,
            rpt.motion, rpt.rosette.copy(), rpt.rosette2.copy(), group)
    def suffix(self):
        if self.group is None:
            return "a"
        return chr(ord('a') + self.group.off_points.index(self))
    def offset_perp(self):
        return self.perp_vector(1.0).rotated(self.group.tangent_angle()).snapped()
    def cut_surface(self, surface, origin=None):
        if origin is None:
            origin = self.group.offset_for(self)
        start = origin + self.offset_perp() * self.depth
        sweep_sectors(surface, self.cutter, lambda c: start + self.rosette_move(c), pass_angle=False)
    def make_instructions(self, cutlist, plan, steps_per_rot, origin=None):
        if origin is None:
            origin = self.group.offset_for(self)
        cutlist.comment(f"OffRosettePoint {self.num}{self.suffix()}")
        cutlist.comment(f"Cutter: {self.cutter}")
        self.make_passes(cutlist, plan, steps_per_rot, origin, self.offset_perp())

@CutPoint.register_class
class OffsetGroup(OffsetCut):
    """Several rosette cuts sharing one offset origin."""
    def __init__(self, pos, cutter, outline, depth=CutPoint.DEFAULT_DEPTH, snap=True, num=0,
            repeat=OffsetCut.DEFAULT_REPEAT, index_offset=0):
        OffsetCut.__init__(self, pos, cutter, outline, depth, snap, num, repeat, index_offset)
        self.off_points = []
    def __repr__(self):
        return f"{self.num}: {self.x:0.3f} {self.z:0.3f} offset group of {len(self.off_points)}"
    def store(self):
        dump = OffsetCut.store(self)
        dump['off_points'] = [p.store() for p in self.off_points]
        return dump
    def class_specific_load(self, dump):
        for p in list(self.off_points):
            self.remove_off_point(p)
        for item in dump.get('off_points', []):
            point = CutPoint.load(self.outline, self.cutter, item)
            point.group = self
            self.off_points.append(point)
            self.watch(point)
    def clear(self):
        for p in self.off_points:
            p.clear()
        self.off_points = []
        OffsetCut.clear(self)
    def set_num(self, num):
        OffsetCut.set_num(self, num)
        for p in self.off_points:
            p.set_num(num)
    def move(self, x, z):
        delta = Vector(x, z) - self.pos()
        for p in self.off_points:
            p.move(p.x + delta.x, p.z + delta.z)
            p.snap_to_curve()
        OffsetCut.move(self, x, z)
    def snap_to_curve(self):
        for p in self.off_points:
            p.snap_to_curve()
        OffsetCut.snap_to_curve(self)
    def invert(self):
        for p in self.off_points:
            p.invert()
        OffsetCut.move(self, self.x, -self.z)
    def scale(self, factor):
        for p in self.off_points:
            p.scale(factor)
        OffsetCut.move(self, self.x * factor, self.z * factor)
    def contains(self, point):
        return point in self.off_points
    def add_off_point(self, point):
        """Adds a rosette cut to the group. A plain rosette point is
        converted, the new member is returned."""
        if self.contains(point):
            return None
        if not isinstance(point, OffRosettePoint):
            if not isinstance(point, RosettePoint):
                return None
            point = OffRosettePoint.from_rosette_point(point, self)
        point.group = self
        point.set_num(self.num)
        self.off_points.append(point)
        self.watch(point)
        self.emitPropertyChanged('add', None, point)
        return point
    def remove_off_point(self, point):
        if point not in self.off_points:
            return
        self.unwatch(point)
        point.clear()
        self.off_points.remove(point)
        self.emitPropertyChanged('remove', point, None)
    def make_instructions(self, cutlist, plan, steps_per_rot):
        self.header_comments(cutlist)
        for p in self.off_points:
            p.make_instructions(cutlist, plan, steps_per_rot, self.offset_for(p))
    def cut_surface(self, surface):
        if not self.off_points or self.repeat <= 0:
            return
        OffsetCut.cut_surface(self, surface)
    def cut_repeat(self, surface, i):
        for p in self.off_points:
            p.cut_surface(surface, self.offset_for(p))
            if is_calculation_cancelled():
                break

def default_custom_pattern():
    customs = patterns.all_custom()
    if not customs:
        patterns.add(CustomPattern("undefined", CustomStyle.STRAIGHT))
        customs = patterns.all_custom()
    return customs[0]

@CutPoint.register_class
class PatternPoint(OffsetCut):
    """Offset cut whose width follows a custom pattern as the spindle turns.
    Optionally the cut is corrected for the curvature of the shape."""
    def __init__(self, pos, cutter, outline, depth=CutPoint.DEFAULT_DEPTH, snap=True, num=0,
            repeat=OffsetCut.DEFAULT_REPEAT, index_offset=0, pattern=None, pattern_repeat=1, phase=0.0, optimize=False):
        OffsetCut.__init__(self, pos, cutter, outline, depth, snap, num, repeat, index_offset)
        self.pattern = pattern if pattern is not None else default_custom_pattern()
        self.pattern_repeat = max(int(pattern_repeat), 1)
        self.phase = angle_check(phase)
        self.optimize = False
        if optimize:
            self.set_optimize(True)
    def __repr__(self):
        return f"{CutPoint.__repr__(self)} {self.pattern.name}"
    def properties(self):
        return OffsetCut.properties(self) + ['pattern', 'pattern_repeat', 'phase', 'optimize']
    def set_pattern(self, pattern):
        if not isinstance(pattern, CustomPattern):
            return
        self.setPropertyValue('pattern', pattern)
    def set_pattern_repeat(self, repeat):
        if repeat < 1:
            return
        self.setPropertyValue('pattern_repeat', int(repeat))
    def set_phase(self, phase):
        self.setPropertyValue('phase', angle_check(phase))
    def ok_to_optimize(self):
        """False when the widest cut would run past the top or the bottom
        of the shape."""
        if Location.is_inside(self.cutter.location):
            curve = self.outline.inside_curve()
        else:
            curve = self.outline.outside_curve()
        tp = self.tangent_point()
        if tp is None:
            return False
        width = self.width_at_max()
        return curve.top_point().dist(tp) >= width and curve.bottom_point().dist(tp) >= width
    def set_optimize(self, optimize):
        if optimize and not self.ok_to_optimize():
            self.disable_optimize("cut falls off the top or the bottom of the shape")
            return
        self.setPropertyValue('optimize', bool(optimize))
    def disable_optimize(self, reason):
        text = f"PatternPoint {self.num}: {reason}, optimization turned off"
        self.add_warning(text)
        self.setPropertyValue('optimize', False)
    def check_optimize(self):
        if self.optimize and not self.ok_to_optimize():
            self.disable_optimize("cut falls off the top or the bottom of the shape")
    def move(self, x, z):
        OffsetCut.move(self, x, z)
        self.check_optimize()
    def set_snap(self, snap):
        OffsetCut.set_snap(self, snap)
        self.check_optimize()
    def snap_to_curve(self):
        OffsetCut.snap_to_curve(self)
        self.check_optimize()
    def depth_for_width(self, w):
        r = self.cutter.radius
        if w >= 2.0 * r:
            return r
        return r * (1.0 - sqrt(1.0 - (w / (2.0 * r)) ** 2))
    def width_for_depth(self, d):
        r = self.cutter.radius
        if d >= r:
            return 2.0 * r
        return 2.0 * r * sqrt(1.0 - (1.0 - d / r) ** 2)
    def move_vector(self, scale=1.0):
        """Direction of the width of the cut, at right angles to the
        perpendicular."""
        perp = self.perp_vector(1.0)
        if Location.is_outside(self.cutter.location) and not self.is_top_outside():
            move = Vector(perp.z, -perp.x)
        else:
            move = Vector(-perp.z, perp.x)
        return (move * scale).snapped()
    def find_point(self, dist, angle):
        """Where a cut reaching dist along the surface ends up at a spindle
        angle, None if that is off the shape."""
        a = radians(angle)
        p1 = self.outline.outside_curve().interpolate_down(self.tangent_point(), -dist * cos(a))
        if p1 is None or p1.x == 0:
            return None
        s = dist * sin(a) / (2.0 * p1.x)
        if abs(s) > 1.0:
            return None
        phi = 2.0 * asin(s)
        return Point3D(p1.x * cos(phi), p1.z, p1.x * sin(phi))
    def pattern_move(self, angle, depth=None):
        """Cutter centre in the offset frame at a spindle angle. A shallower
        depth than the full cut raises the cutter by the difference."""
        per_repeat = 360.0 / self.pattern_repeat
        frac = angle_check(angle + self.phase / self.pattern_repeat) / per_repeat
        frac -= int(frac)
        y_max = self.pattern.value(frac)
        y_min = self.pattern.value2(frac) if self.pattern.is_dual() else 0.0
        max_width = self.width_at_max()
        width = (y_max - y_min) * max_width
        cut_depth = self.depth_for_width(width)
        x_move = width / 2.0
        if self.pattern.is_dual() and y_min != 0.0:
            x_move = (y_max + y_min) / 2.0 * max_width
        y_move = cut_depth
        if self.optimize and cut_depth > 0.0 and width > 0.0:
            p2 = self.find_point(y_max * max_width, angle)
            tp = self.tangent_point()
            p_start = Point3D(tp.x, tp.z, 0.0)
            if self.pattern.is_dual() and y_min != 0.0:
                p_start = self.find_point(y_min * max_width, angle)
            if p2 is None or p_start is None:
                self.disable_optimize("unable to provide curve compensation")
            else:
                perp = self.perp_vector(1.0)
                tilt = pi / 2.0 - Point3D(perp.x, perp.z, 0.0).angle(p2 - p_start)
                v = Vector(self.cutter.radius - cut_depth, x_move).rotated(degrees(tilt))
                x_move = v.z
                y_move = self.cutter.radius - v.x
        if depth is not None:
            y_move -= self.depth - depth
        if Location.is_back(self.cutter.location):
            return Vector(-x_move, -y_move)
        return Vector(x_move, -y_move)
    def cut_repeat(self, surface, i):
        sweep_sectors(surface, self.cutter, lambda c: self.pattern_move(c), pass_angle=False)
    def follow_pattern(self, cutlist, depth, step, negative, steps_per_rot):
        sign = -1.0 if negative else 1.0
        if self.pattern.is_straight():
            angles = self.pattern.breakpoint_angles(self.pattern_repeat, self.phase)
            if negative:
                angles = [c - 360.0 for c in reversed(angles)]
            for i, c in enumerate(angles):
                cutlist.go_to(Speed.VELOCITY if i == 0 else Speed.RPM, self.pattern_move(c, depth), c)
            return
        for i in range(0, steps_per_rot + 1, step):
            c = sign * 360.0 * i / steps_per_rot
            cutlist.go_to(Speed.VELOCITY if i == 0 else Speed.RPM, self.pattern_move(c, depth), c)
        if steps_per_rot % step != 0:
            cutlist.go_to(Speed.RPM, self.pattern_move(sign * 360.0, depth), sign * 360.0)
    def make_instructions(self, cutlist, plan, steps_per_rot):
        self.header_comments(cutlist)
        cutlist.comment(f"PatternPoint {self.num}")
        cutlist.comment(f"Cutter: {self.cutter}")
        cutlist.spindle_wrap_check()
        # start in the air above the cut
        start = self.pattern_move(0.0) + Vector(0.0, self.depth)
        cutlist.go_to(Speed.FAST, start, 0.0)
        for depth, step, negative, is_last in plan.passes(self.depth):
            self.follow_pattern(cutlist, depth, step, negative, steps_per_rot)
        cutlist.spindle_wrap_check()
        cutlist.go_to(Speed.FAST, start, 0.0)
