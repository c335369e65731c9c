from math import *
import threading

class LatheSettings:
    RESOLUTION = 0.01
    steps_per_rot = 720
    surface_sectors = 360
    index_safety = 0.020
    line_safety = 0.050
    cut_margin = 0.0049
    pass_depth = 0.020
    pass_step = 5
    last_depth = 0.005
    last_step = 1
    rotation = 0
    soft_lift = 0.0

eps = 1e-6
zero_eps = 1e-12

def angle_check(angle):
    if abs(angle) > 36000:
        angle = fmod(angle, 360)
    while angle < 0:
        angle += 360
    while angle >= 360:
        angle -= 360
    return angle

def about_equal(a, b, *others):
    if abs(a - b) >= eps:
        return False
    return all(abs(a - c) < eps for c in others)

def proportion(x1, x, x2, y1, y2):
    if x1 == x2:
        return y1
    return y1 + (y2 - y1) * (x - x1) / (x2 - x1)

def snap_zero(value):
    # also turns -0.0 into 0.0
    if abs(value) < zero_eps:
        return 0.0
    return value

def degrees_for_distance(d, r):
    if r == 0:
        return 0.0
    return 360.0 * d / (2 * pi * r)

class Vector(object):
    """A point or a direction in the lathe XZ plane."""
    def __init__(self, x, z):
        self.x = x
        self.z = z
    def __repr__(self):
        return f"Vector({self.x:0.4f},{self.z:0.4f})"
    def __add__(self, other):
        return Vector(self.x + other.x, self.z + other.z)
    def __sub__(self, other):
        return Vector(self.x - other.x, self.z - other.z)
    def __mul__(self, scale):
        return Vector(self.x * scale, self.z * scale)
    __rmul__ = __mul__
    def __neg__(self):
        return Vector(-self.x, -self.z)
    def __eq__(self, other):
        return isinstance(other, Vector) and self.x == other.x and self.z == other.z
    def __hash__(self):
        return (self.x, self.z).__hash__()
    def as_tuple(self):
        return (self.x, self.z)
    @staticmethod
    def from_tuple(t):
        if len(t) != 2:
            raise ValueError("Invalid number of data items in a point record")
        return Vector(t[0], t[1])
    def length(self):
        return hypot(self.x, self.z)
    def dist(self, other):
        return hypot(other.x - self.x, other.z - self.z)
    def is_zero(self):
        return self.x == 0 and self.z == 0
    def normalized(self):
        l = self.length()
        if l == 0:
            return Vector(0.0, 0.0)
        return Vector(self.x / l, self.z / l)
    def snapped(self):
        return Vector(snap_zero(self.x), snap_zero(self.z))
    def rotated(self, deg):
        # counter-clockwise
        a = radians(deg)
        ca, sa = cos(a), sin(a)
        return Vector(self.x * ca - self.z * sa, self.x * sa + self.z * ca)
    def translated(self, dx, dz):
        return Vector(self.x + dx, self.z + dz)
    def scaled(self, cx, cz, scale):
        return Vector((self.x - cx) * scale + cx, (self.z - cz) * scale + cz)

class Point3D(object):
    def __init__(self, x, y, z):
        self.x = x
        self.y = y
        self.z = z
    def __repr__(self):
        return f"Point3D({self.x:0.4f},{self.y:0.4f},{self.z:0.4f})"
    def __sub__(self, other):
        return Point3D(self.x - other.x, self.y - other.y, self.z - other.z)
    def as_tuple(self):
        return (self.x, self.y, self.z)
    def length(self):
        return sqrt(self.x * self.x + self.y * self.y + self.z * self.z)
    def dist(self, other):
        return (self - other).length()
    def dot(self, other):
        return self.x * other.x + self.y * other.y + self.z * other.z
    def angle(self, other):
        denom = self.length() * other.length()
        if denom == 0:
            return 0.0
        return acos(max(-1.0, min(1.0, self.dot(other) / denom)))

def polar_to_xyz(r, z, c):
    """Point on a surface of revolution, c is the spindle angle in degrees."""
    a = radians(c)
    return Point3D(r * cos(a), r * sin(a), z)

def is_calculation_cancelled():
    return getattr(threading.current_thread(), 'cancelled', False)

def set_calculation_progress(amount_done, amount_total):
    setattr(threading.current_thread(), 'progress', (min(amount_done, amount_total - 1), amount_total))
