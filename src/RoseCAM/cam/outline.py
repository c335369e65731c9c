from RoseCAM.common.curve import Curve
from RoseCAM.common.geom import LatheSettings, Vector
from RoseCAM.common.notify import Observable
from RoseCAM.cam.cutter import Frame, Location

class Outline(Observable):
    """Profile of the piece as digitised (the "dot" curve), with the inside
    and outside surfaces and the cutter centre paths derived from it."""
    MIN_SCALE = 0.1
    MAX_SCALE = 10.0
    DEFAULT_THICKNESS = 0.1
    def __init__(self, points, thickness=DEFAULT_THICKNESS, dot_location=Location.FRONT_OUTSIDE, resolution=None):
        Observable.__init__(self)
        self.dot_curve = Curve(points)
        self.thickness = thickness
        self.dot_location = dot_location
        self.resolution = resolution or LatheSettings.RESOLUTION
        self.curve_cache = {}
    def invalidate(self):
        self.curve_cache = {}
    def cached(self, key, func):
        if key not in self.curve_cache:
            self.curve_cache[key] = func()
        return self.curve_cache[key]
    def needs_flip(self, location):
        return location is not None and Location.is_front(self.dot_location) != Location.is_front(location)
    def surface_curves(self, location=None):
        def calc():
            t = self.thickness
            if Location.is_inside(self.dot_location):
                inside = self.dot_curve
                outside = inside.offset(t if Location.is_front(self.dot_location) else -t)
            else:
                outside = self.dot_curve
                inside = outside.offset(-t if Location.is_front(self.dot_location) else t)
            if self.needs_flip(location):
                inside = inside.flipped_x()
                outside = outside.flipped_x()
            return inside.resampled(self.resolution), outside.resampled(self.resolution)
        return self.cached(('surface', self.needs_flip(location)), calc)
    def inside_curve(self, location=None):
        return self.surface_curves(location)[0]
    def outside_curve(self, location=None):
        return self.surface_curves(location)[1]
    def cut_curve(self, location):
        if Location.is_inside(location):
            return self.inside_curve(location)
        return self.outside_curve(location)
    def dot_to_cutter(self, cutter):
        offset = 0.0
        same_side = Location.is_inside(self.dot_location) == Location.is_inside(cutter.location)
        if Frame.is_rotating(cutter.frame):
            offset = cutter.radius if same_side else cutter.radius + self.thickness
        elif cutter.frame in (Frame.DRILL, Frame.ECF):
            offset = 0.0 if same_side else self.thickness
        if (Location.is_front(self.dot_location) and Location.is_inside(cutter.location)) or \
                (Location.is_back(self.dot_location) and Location.is_outside(cutter.location)):
            offset = -offset
        return offset
    def cutter_path_curve(self, cutter):
        def calc():
            path = self.dot_curve.offset(self.dot_to_cutter(cutter))
            if self.needs_flip(cutter.location):
                path = path.flipped_x()
            return path.resampled(self.resolution)
        return self.cached(('cutter', cutter.frame, cutter.location, cutter.radius), calc)
    def set_thickness(self, thickness):
        if thickness < 0:
            return
        self.invalidate()
        self.setPropertyValue('thickness', thickness)
    def set_resolution(self, resolution):
        if resolution <= 0:
            return
        self.invalidate()
        self.setPropertyValue('resolution', resolution)
    def scale(self, factor):
        if factor < self.MIN_SCALE or factor > self.MAX_SCALE or factor == 1.0:
            return False
        self.dot_curve = self.dot_curve.scaled(factor)
        self.invalidate()
        self.emitPropertyChanged('scale', 1.0, factor)
        return True
    def invert(self):
        self.dot_curve = Curve([Vector(p.x, -p.z) for p in reversed(self.dot_curve.points)])
        self.invalidate()
        self.emitPropertyChanged('invert')
    def offset_vertical(self, delta):
        self.dot_curve = self.dot_curve.translated(0, -delta)
        self.invalidate()
        self.emitPropertyChanged('offset_vertical', 0, delta)
