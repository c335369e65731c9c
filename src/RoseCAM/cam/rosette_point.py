from RoseCAM.common.enums import EnumClass
from RoseCAM.common.geom import *
from RoseCAM.cam.cutlist import Speed
from RoseCAM.cam.cutpoint import CutPoint
from RoseCAM.cam.cutter import Location
from RoseCAM.cam.rosette import Rosette
from RoseCAM.cam.surface import sweep_sectors

class Motion(EnumClass):
    ROCK = 0
    PUMP = 1
    PERP = 2
    TANGENT = 3
    BOTH = 4
    PERPTAN = 5
    descriptions = [
        (ROCK, "ROCK", "Rocking, along X"),
        (PUMP, "PUMP", "Pumping, along Z"),
        (PERP, "PERP", "Perpendicular to the curve"),
        (TANGENT, "TANGENT", "Tangent to the curve"),
        (BOTH, "BOTH", "Rocking and pumping, two rosettes"),
        (PERPTAN, "PERPTAN", "Perpendicular and tangent, two rosettes"),
    ]
    @staticmethod
    def is_dual(motion):
        return motion in (Motion.BOTH, Motion.PERPTAN)

@CutPoint.register_class
class RosettePoint(CutPoint):
    """Cut with the spindle turning and the cutter deflected by one or two
    rosettes."""
    def __init__(self, pos, cutter, outline, depth=CutPoint.DEFAULT_DEPTH, snap=True, num=0,
            motion=Motion.ROCK, rosette=None, rosette2=None):
        CutPoint.__init__(self, pos, cutter, outline, depth, snap, num)
        self.motion = motion
        self.rosette = rosette if rosette is not None else Rosette()
        self.rosette2 = rosette2 if rosette2 is not None else Rosette()
        self.watch(self.rosette)
        self.watch(self.rosette2)
    def __repr__(self):
        return f"{CutPoint.__repr__(self)} {Motion.toString(self.motion)}"
    def properties(self):
        return CutPoint.properties(self) + ['motion', 'rosette', 'rosette2']
    def set_motion(self, motion):
        if not Motion.isValid(motion):
            return
        self.setPropertyValue('motion', motion)
    def set_rosette(self, rosette):
        self.replace_source('rosette', rosette)
    def set_rosette2(self, rosette):
        self.replace_source('rosette2', rosette)
    def replace_source(self, name, rosette):
        old = getattr(self, name)
        if old is rosette:
            return
        self.unwatch(old)
        setattr(self, name, rosette)
        self.watch(rosette)
        self.emitPropertyChanged(name, old, rosette)
    def is_outside(self):
        return Location.is_outside(self.cutter.location)
    def perp_direction(self):
        # always away from the deepest point of the cut
        return (-self.perp_vector(1.0)).snapped()
    def tangent_direction(self):
        perp = self.perp_vector(1.0)
        location = self.cutter.location
        clockwise = Vector(perp.z, -perp.x)
        anticlockwise = Vector(-perp.z, perp.x)
        if location == Location.BACK_INSIDE:
            return anticlockwise.snapped()
        if location == Location.FRONT_OUTSIDE:
            return (anticlockwise if self.is_top_outside() else clockwise).snapped()
        if location == Location.BACK_OUTSIDE:
            return (clockwise if self.is_top_outside() else anticlockwise).snapped()
        return clockwise.snapped()
    def axis_move(self, x_move, z_move):
        """Signs of rock and pump deflections for the cutter location."""
        location = self.cutter.location
        if location == Location.BACK_INSIDE:
            return Vector(x_move, z_move)
        if location == Location.FRONT_OUTSIDE:
            return Vector(x_move, z_move if self.is_top_outside() else -z_move)
        if location == Location.BACK_OUTSIDE:
            return Vector(-x_move, z_move if self.is_top_outside() else -z_move)
        return Vector(-x_move, z_move)
    def rosette_move(self, angle):
        """Deflection of the cutter from its rest position at a spindle angle."""
        outside = self.is_outside()
        amp = self.rosette.amplitude_at(angle, outside)
        if self.motion == Motion.PERP:
            return self.perp_direction() * amp
        if self.motion == Motion.TANGENT:
            return self.tangent_direction() * amp
        if self.motion == Motion.PERPTAN:
            amp2 = self.rosette2.amplitude_at(angle, outside)
            return self.perp_direction() * amp + self.tangent_direction() * amp2
        if self.motion == Motion.BOTH:
            return self.axis_move(amp, self.rosette2.amplitude_at(angle, outside))
        if self.motion == Motion.PUMP:
            return self.axis_move(0.0, amp)
        return self.axis_move(amp, 0.0)
    def position_at(self, angle, depth=None):
        if depth is None:
            depth = self.depth
        return self.pos() + self.perp_vector(depth) + self.rosette_move(angle)
    def is_degenerate(self):
        if Motion.is_dual(self.motion):
            return self.rosette.is_degenerate() and self.rosette2.is_degenerate()
        return self.rosette.is_degenerate()
    def cut_a_circle(self, depth, perp):
        """True if the pass can be made as a plain turn because the cutter
        never reaches the rosette deflection at this depth."""
        if self.is_degenerate():
            return True
        shallow = depth <= self.depth - self.rosette.p_to_p - LatheSettings.cut_margin
        if self.motion == Motion.PUMP and perp.x == 0:
            return shallow
        if self.motion == Motion.ROCK and perp.z == 0:
            return shallow
        if self.motion == Motion.PERP:
            return shallow
        # the tangent rosette still moves the cutter along the surface above the pattern
        return False
    def is_in_air(self, depth, perp, angle):
        if self.motion == Motion.PUMP and perp.x == 0:
            return depth < -perp.z * self.rosette_move(angle).z
        if self.motion == Motion.ROCK and perp.z == 0:
            return depth < -perp.x * self.rosette_move(angle).x
        if self.motion in (Motion.PERP, Motion.PERPTAN):
            return depth < self.rosette.amplitude_at(angle, self.is_outside())
        return False
    def uses_breakpoints(self):
        return not Motion.is_dual(self.motion) and isinstance(self.rosette, Rosette) and self.rosette.is_straight()
    def breakpoint_angles(self):
        """Spindle angles of the pattern corners over one revolution, always
        including 0 and 360."""
        rosette = self.rosette
        res = rosette.pattern.breakpoint_angles(rosette.repeat, rosette.phase)
        i = len(res) - 2
        while i > 0:
            # a point in the middle of a flat stretch adds nothing
            if about_equal(rosette.amplitude_at(res[i]), rosette.amplitude_at(res[i - 1]), rosette.amplitude_at(res[i + 1])):
                del res[i]
            i -= 1
        return res
    def follow_rosette(self, cutlist, depth, step, negative, steps_per_rot, origin=None, perp=None):
        """One pass around at a given depth. Offset cuts pass their own
        origin and perpendicular, already turned into the offset frame."""
        if origin is None:
            origin = self.pos()
        if perp is None:
            perp = self.perp_vector(1.0)
        start = origin + perp * depth
        sign = -1.0 if negative else 1.0
        cutlist.spindle_wrap_check()
        if self.is_degenerate() or (not self.uses_breakpoints() and self.cut_a_circle(depth, perp)):
            cutlist.go_to(Speed.VELOCITY, start, 0.0)
            cutlist.turn(sign * 360.0)
            cutlist.spindle_wrap_check()
            return
        if self.uses_breakpoints():
            angles = self.breakpoint_angles()
            if negative:
                angles = [c - 360.0 for c in reversed(angles)]
            for i, c in enumerate(angles):
                cutlist.go_to(Speed.VELOCITY if i == 0 else Speed.RPM, start + self.rosette_move(c), c)
            return
        in_air = False
        air_pos = air_c = None
        for i in range(0, steps_per_rot + 1, step):
            c = sign * 360.0 * i / steps_per_rot
            pt = start + self.rosette_move(c)
            if self.is_in_air(depth, perp, c):
                if not in_air:
                    cutlist.go_to(Speed.FAST, pt, c)
                in_air = True
                air_pos, air_c = pt, c
                continue
            if in_air:
                # back to the last point in the air, then into the material
                cutlist.go_to(Speed.FAST, air_pos, air_c)
                in_air = False
            cutlist.go_to(Speed.VELOCITY if i == 0 else Speed.RPM, pt, c)
        if in_air:
            cutlist.go_to(Speed.FAST, air_pos, air_c)
        if steps_per_rot % step != 0:
            c = sign * 360.0
            cutlist.go_to(Speed.RPM, start + self.rosette_move(c), c)
    def soft_lift(self, cutlist, depth, step, negative, steps_per_rot, lift_angle, origin, perp):
        """Keep turning past the end of the last pass while the depth goes
        back to zero."""
        sign = -1.0 if negative else 1.0
        n = max(int(round(lift_angle * steps_per_rot / 360.0 / step)), 1)
        for k in range(1, n + 1):
            c = sign * (360.0 + lift_angle * k / n)
            d = depth * (1.0 - k / n)
            cutlist.go_to(Speed.RPM, origin + perp * d + self.rosette_move(c), c)
    def make_passes(self, cutlist, plan, steps_per_rot, origin, perp):
        start = origin + self.rosette_move(0.0) - perp * plan.safety
        cutlist.spindle_wrap_check()
        cutlist.go_to(Speed.FAST, start, 0.0)
        for depth, step, negative, is_last in plan.passes(self.depth):
            self.follow_rosette(cutlist, depth, step, negative, steps_per_rot, origin, perp)
            if is_last and plan.soft_lift > 0:
                self.soft_lift(cutlist, depth, step, negative, steps_per_rot, plan.soft_lift, origin, perp)
        cutlist.spindle_wrap_check()
        cutlist.go_to(Speed.FAST, start, 0.0)
    def make_instructions(self, cutlist, plan, steps_per_rot):
        cutlist.comment(f"RosettePoint {self.num}")
        cutlist.comment(f"Cutter: {self.cutter}")
        self.make_passes(cutlist, plan, steps_per_rot, self.pos(), self.perp_vector(1.0))
    def cut_surface(self, surface):
        start = self.pos() + self.perp_vector(self.depth)
        sweep_sectors(surface, self.cutter, lambda c: start + self.rosette_move(c))
