from RoseCAM.common.geom import *
from RoseCAM.common.notify import Observable
from RoseCAM.cam.cutter import Location
from RoseCAM.cam.cutlist import Speed

class CutPoint(Observable):
    """Base of all cut-motion variants: a position in the XZ plane, with the
    cutter and the outline it is cut against."""
    loaders = {
    }
    DEFAULT_DEPTH = 0.050
    tag = None
    @classmethod
    def register_class(klass, klass2, name=None):
        klass2.tag = name or klass2.__name__
        klass2.loaders[klass2.tag] = lambda outline, cutter: klass2(Vector(0.0, 0.0), cutter, outline)
        return klass2
    def __init__(self, pos, cutter, outline, depth=DEFAULT_DEPTH, snap=True, num=0):
        Observable.__init__(self)
        self.num = num
        self.x = pos.x
        self.z = pos.z
        self.snap = snap
        self.cutter = cutter
        self.outline = outline
        self.depth = depth
        self.warnings = []
        if cutter is not None:
            self.watch(cutter)
    def __repr__(self):
        return f"{self.num}: {self.x:0.3f} {self.z:0.3f} d:{self.depth:0.3f}"
    def properties(self):
        return ['num', 'x', 'z', 'snap', 'depth']
    def store(self):
        dump = {}
        dump['_type'] = self.tag
        for attr in self.properties():
            value = getattr(self, attr)
            dump[attr] = value.copy() if hasattr(value, 'copy') else value
        # shared, not copied
        dump['cutter'] = self.cutter
        return dump
    def class_specific_load(self, dump):
        pass
    def reload(self, dump):
        rtype = dump['_type']
        if rtype != self.tag:
            raise ValueError("Unexpected type: %s" % rtype)
        for attr in self.properties():
            if attr in dump:
                value = dump[attr]
                old = getattr(self, attr, None)
                if isinstance(old, Observable):
                    self.unwatch(old)
                if hasattr(value, 'copy'):
                    value = value.copy()
                setattr(self, attr, value)
                if isinstance(value, Observable):
                    self.watch(value)
        self.class_specific_load(dump)
    @staticmethod
    def load(outline, cutter, dump):
        rtype = dump['_type']
        loader = CutPoint.loaders.get(rtype)
        if loader:
            res = loader(outline, dump.get('cutter', cutter))
        else:
            raise ValueError("Unexpected cut point type: %s" % rtype)
        res.reload(dump)
        return res
    @staticmethod
    def create(tag, pos, cutter, outline):
        res = CutPoint.load(outline, cutter, {'_type' : tag})
        res.place(pos)
        return res
    def place(self, pos):
        # initial position, no notification
        self.x = pos.x
        self.z = pos.z
    def duplicate(self, pos=None):
        res = CutPoint.load(self.outline, self.cutter, self.store())
        if pos is not None:
            res.move(pos.x, pos.z)
        return res
    def add_warning(self, text):
        print("Warning: " + text)
        self.warnings.append(text)
    def clear(self):
        self.disconnectAll()
    def pos(self):
        return Vector(self.x, self.z)
    def set_num(self, num):
        self.setPropertyValue('num', num)
    def set_snap(self, snap):
        self.setPropertyValue('snap', bool(snap))
    def set_depth(self, depth):
        self.setPropertyValue('depth', depth)
    def set_cutter(self, cutter):
        old = self.cutter
        if old is cutter:
            return
        if old is not None:
            self.unwatch(old)
        self.cutter = cutter
        self.watch(cutter)
        self.emitPropertyChanged('cutter', old, cutter)
    def move(self, x, z):
        old = self.pos()
        self.x = x
        self.z = z
        self.emitPropertyChanged('pos', old, self.pos())
    def scale(self, factor):
        self.move(self.x * factor, self.z * factor)
    def invert(self):
        self.move(self.x, -self.z)
    def offset_vertical(self, delta):
        self.move(self.x, self.z - delta)
    def separation(self, pt):
        return self.pos().dist(pt)
    def width_at_max(self):
        return self.cutter.width_of_cut(self.depth)
    def cutter_path(self):
        return self.outline.cutter_path_curve(self.cutter)
    def snap_to_curve(self):
        if not self.snap:
            return
        pos = self.pos()
        nearest = self.cutter_path().nearest_point(pos)
        if nearest is not None and nearest.dist(pos) > zero_eps:
            self.move(nearest.x, nearest.z)
    def perp_vector(self, scale=1.0):
        """Unit vector into the material at this point, times scale. A zero
        vector when the outline is too short to have a perpendicular."""
        pos = self.pos()
        dir = Location.is_front_in_or_back_out(self.cutter.location)
        if self.snap:
            perp = self.cutter_path().perpendicular(pos, dir)
        else:
            nearest = self.outline.cut_curve(self.cutter.location).nearest_point(pos)
            perp = nearest - pos if nearest is not None else None
            if perp is None or perp.is_zero():
                perp = self.cutter_path().perpendicular(pos, dir)
            else:
                perp = perp.normalized()
        if perp is None:
            return Vector(0.0, 0.0)
        return (perp * scale).snapped()
    def depth_pos(self, depth):
        return self.pos() + self.perp_vector(depth)
    def is_top_outside(self):
        return self.perp_vector().z < 0 and Location.is_outside(self.cutter.location)
    def cut_surface(self, surface):
        raise NotImplementedError()
    def make_instructions(self, cutlist, plan, steps_per_rot):
        raise NotImplementedError()

@CutPoint.register_class
class GoToPoint(CutPoint):
    """Safety waypoint, the cutter goes there without cutting."""
    def __init__(self, pos, cutter, outline, depth=0.0, snap=False, num=0):
        CutPoint.__init__(self, pos, cutter, outline, depth, snap, num)
    def snap_to_curve(self):
        pass
    def cut_surface(self, surface):
        pass
    def make_instructions(self, cutlist, plan, steps_per_rot):
        cutlist.comment(f"GoToPoint {self.num}")
        cutlist.spindle_wrap_check()
        cutlist.go_to_xzc(Speed.FAST, self.x, self.z, 0.0)
