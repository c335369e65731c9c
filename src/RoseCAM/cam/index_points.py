from math import copysign

from RoseCAM.common.enums import EnumClass
from RoseCAM.common.geom import *
from RoseCAM.cam.cutlist import Speed
from RoseCAM.cam.cutpoint import CutPoint
from RoseCAM.cam.cutter import Location
from RoseCAM.cam.rosette import normalize_mask, is_repeat_cut
from RoseCAM.cam.surface import RotationTracker, cut_with

class MoveDirection(EnumClass):
    MOVE_X = 0
    MOVE_Z = 1
    MOVE_CURVE = 2
    descriptions = [
        (MOVE_X, "MOVE_X", "Along the X axis"),
        (MOVE_Z, "MOVE_Z", "Along the Z axis"),
        (MOVE_CURVE, "MOVE_CURVE", "Perpendicular to the curve"),
    ]

def index_angles_for(repeat, phase, mask):
    """Spindle angles of the repeats that are not masked out."""
    # minus to match the phase of a rosette
    return [360.0 * i / repeat - phase / repeat
        for i in range(repeat) if is_repeat_cut(mask, repeat, i)]

def move_vector_for(cutpoint, direction, scale):
    location = cutpoint.cutter.location
    perp = cutpoint.perp_vector(1.0)
    if direction == MoveDirection.MOVE_X:
        move = Vector(1.0 if Location.is_front_in_or_back_out(location) else -1.0, 0.0)
    elif direction == MoveDirection.MOVE_Z:
        if Location.is_inside(location):
            move = Vector(0.0, -1.0)
        elif perp.is_zero():
            move = Vector(0.0, 1.0)
        else:
            # cutting the top or the bottom of the shape
            move = Vector(0.0, copysign(1.0, perp.z))
    else:
        move = perp
    return (move * scale).snapped()

@CutPoint.register_class
class IndexPoint(CutPoint):
    """Single plunges at evenly spaced spindle angles, with the spindle
    stopped during each cut."""
    DEFAULT_REPEAT = 8
    def __init__(self, pos, cutter, outline, depth=CutPoint.DEFAULT_DEPTH, snap=True, num=0,
            direction=MoveDirection.MOVE_CURVE, repeat=DEFAULT_REPEAT, phase=0.0, mask=""):
        CutPoint.__init__(self, pos, cutter, outline, depth, snap, num)
        self.direction = direction
        self.repeat = max(int(repeat), 1)
        self.phase = angle_check(phase)
        self.mask = normalize_mask(mask)
    def __repr__(self):
        return f"{CutPoint.__repr__(self)} {MoveDirection.toString(self.direction)} {self.repeat}"
    def properties(self):
        return CutPoint.properties(self) + ['direction', 'repeat', 'phase', 'mask']
    def set_direction(self, direction):
        if not MoveDirection.isValid(direction):
            return
        self.setPropertyValue('direction', direction)
    def set_repeat(self, repeat):
        if repeat < 1:
            return
        self.setPropertyValue('repeat', int(repeat))
    def set_phase(self, phase):
        self.setPropertyValue('phase', angle_check(phase))
    def set_mask(self, mask):
        self.setPropertyValue('mask', normalize_mask(mask))
    def move_vector(self, scale=1.0):
        return move_vector_for(self, self.direction, scale)
    def index_angles(self):
        return index_angles_for(self.repeat, self.phase, self.mask)
    def cut_surface(self, surface):
        cut_pos = self.pos() + self.move_vector(self.depth)
        tracker = RotationTracker(surface)
        for c in self.index_angles():
            tracker.rotate_to(c)
            cut_with(surface, self.cutter, cut_pos, c)
        tracker.finish()
    def make_instructions(self, cutlist, plan, steps_per_rot):
        move = self.move_vector(1.0)
        safety = self.pos() - move * LatheSettings.index_safety
        cut = self.pos() + move * self.depth
        cutlist.comment(f"IndexPoint {self.num}")
        cutlist.comment(f"Cutter: {self.cutter}")
        cutlist.spindle_wrap_check()
        for c in self.index_angles():
            cutlist.go_to(Speed.FAST, safety, c)
            cutlist.go_to(Speed.VELOCITY, cut, c)
            cutlist.go_to(Speed.FAST, safety, c)
        cutlist.spindle_wrap_check()
        cutlist.go_to(Speed.FAST, safety, 0.0)

@CutPoint.register_class
class PiercePoint(CutPoint):
    """Plain turning cut made with the spindle running, as on a regular lathe."""
    def __init__(self, pos, cutter, outline, depth=CutPoint.DEFAULT_DEPTH, snap=True, num=0,
            direction=MoveDirection.MOVE_Z):
        CutPoint.__init__(self, pos, cutter, outline, depth, snap, num)
        self.direction = direction
    def __repr__(self):
        return f"{CutPoint.__repr__(self)} {MoveDirection.toString(self.direction)}"
    def properties(self):
        return CutPoint.properties(self) + ['direction']
    def set_direction(self, direction):
        if not MoveDirection.isValid(direction):
            return
        self.setPropertyValue('direction', direction)
    def move_vector(self, scale=1.0):
        return move_vector_for(self, self.direction, scale)
    def cut_surface(self, surface):
        cut_pos = self.pos() + self.move_vector(self.depth)
        n = surface.num_sectors()
        tracker = RotationTracker(surface)
        for i in range(n):
            c = 360.0 * i / n
            tracker.rotate_to(c)
            surface.cut_surface(self.cutter, cut_pos.x, cut_pos.z, c)
        tracker.finish()
    def make_instructions(self, cutlist, plan, steps_per_rot):
        cut = self.pos() + self.move_vector(self.depth)
        cutlist.comment(f"PiercePoint {self.num}")
        cutlist.comment(f"Cutter: {self.cutter}")
        cutlist.go_to(Speed.FAST, self.pos(), 0.0)
        cutlist.go_to(Speed.VELOCITY, cut, 0.0)
        cutlist.go_to(Speed.FAST, self.pos(), 0.0)
