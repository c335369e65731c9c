from RoseCAM.common.geom import *
from RoseCAM.cam.cutlist import Speed
from RoseCAM.cam.cutpoint import CutPoint
from RoseCAM.cam.index_points import index_angles_for
from RoseCAM.cam.rosette import PatternBar, normalize_mask
from RoseCAM.cam.surface import cut_at_angles

@CutPoint.register_class
class LinePoint(CutPoint):
    """Plunge perpendicular to the curve at evenly spaced spindle angles.
    The pattern bar only comes into play when the point is the start of a
    spiral, where it adds twist as a function of the distance travelled."""
    DEFAULT_REPEAT = 8
    def __init__(self, pos, cutter, outline, depth=CutPoint.DEFAULT_DEPTH, snap=True, num=0,
            repeat=DEFAULT_REPEAT, phase=0.0, mask="", pattern_bar=None):
        CutPoint.__init__(self, pos, cutter, outline, depth, snap, num)
        self.repeat = max(int(repeat), 1)
        # not normalised, spiral samples can have a negative phase
        self.phase = phase
        self.mask = normalize_mask(mask)
        self.pattern_bar = pattern_bar if pattern_bar is not None else PatternBar()
        self.watch(self.pattern_bar)
    def __repr__(self):
        return f"{CutPoint.__repr__(self)} {self.repeat} {self.phase:0.1f}deg"
    def properties(self):
        return CutPoint.properties(self) + ['repeat', 'phase', 'mask', 'pattern_bar']
    def set_repeat(self, repeat):
        if repeat < 1:
            return
        self.setPropertyValue('repeat', int(repeat))
    def set_phase(self, phase):
        self.setPropertyValue('phase', phase)
    def set_mask(self, mask):
        self.setPropertyValue('mask', normalize_mask(mask))
    def move_vector(self, scale=1.0):
        return self.perp_vector(scale)
    def index_angles(self):
        return index_angles_for(self.repeat, self.phase, self.mask)
    def cut_surface(self, surface):
        cut_pos = self.pos() + self.move_vector(self.depth)
        cut_at_angles(surface, self.cutter, self.index_angles(), lambda c: cut_pos)
    def make_instructions(self, cutlist, plan, steps_per_rot):
        move = self.move_vector(1.0)
        safety = self.pos() - move * LatheSettings.line_safety
        cut = self.pos() + move * self.depth
        cutlist.comment(f"LinePoint {self.num}")
        cutlist.comment(f"Cutter: {self.cutter}")
        cutlist.spindle_wrap_check()
        for c in self.index_angles():
            cutlist.go_to(Speed.FAST, safety, c)
            cutlist.go_to(Speed.VELOCITY, cut, c)
            cutlist.go_to(Speed.FAST, safety, c)
        cutlist.spindle_wrap_check()
        cutlist.go_to(Speed.FAST, safety, 0.0)
