from math import *

from RoseCAM.common.enums import EnumClass
from RoseCAM.common.geom import angle_check

def filter_name(display_name):
    """Upper case alphanumerics of the first word, used as the lookup key."""
    name = display_name.upper().split(" ")[0] if display_name else ""
    return "".join(c for c in name if ('A' <= c <= 'Z') or ('0' <= c <= '9'))

def wrap_fraction(n):
    if n > 1.0 or n < 0.0:
        n -= floor(n)
    return n

class Pattern(object):
    """Normalised rosette shape: maps a fraction 0..1 of one repeat to a
    deflection 0..1 from the nominal radius."""
    display_name = None
    min_repeat = 1
    needs_repeat = False
    needs_n2 = False
    needs_amp2 = False
    is_builtin = True
    def __init__(self):
        self.name = filter_name(self.display_name)
    def __repr__(self):
        return self.name
    def needs_options(self):
        return self.needs_n2 or self.needs_amp2
    def is_dual(self):
        return False
    def value(self, n, repeat=None, n2=None, amp2=None):
        raise NotImplementedError()
    def value_for(self, n, repeat, n2, amp2):
        if self.needs_options():
            return self.value(n, repeat, n2, amp2)
        if self.needs_repeat:
            return self.value(n, repeat)
        return self.value(n)
    def is_straight(self):
        return False

class PatternNONE(Pattern):
    display_name = "None"
    def value(self, n, repeat=None, n2=None, amp2=None):
        return 0.0

class PatternSINE(Pattern):
    display_name = "Sine"
    def value(self, n, repeat=None, n2=None, amp2=None):
        return 0.5 - 0.5 * cos(2 * pi * wrap_fraction(n))

class PatternHALFSINE(Pattern):
    display_name = "HalfSine"
    def value(self, n, repeat=None, n2=None, amp2=None):
        return sin(wrap_fraction(n) * pi)

class PatternTRIANGLE(Pattern):
    display_name = "Triangle"
    def value(self, n, repeat=None, n2=None, amp2=None):
        return 1.0 - abs(1.0 - 2.0 * wrap_fraction(n))

class PatternSQUARE(Pattern):
    display_name = "Square"
    def value(self, n, repeat=None, n2=None, amp2=None):
        n = wrap_fraction(n)
        return 1.0 if 0.25 <= n < 0.75 else 0.0

class PatternNSIDE(Pattern):
    # Distance between the circumscribed circle and the side of a polygon
    display_name = "NSide"
    min_repeat = 3
    needs_repeat = True
    def value(self, n, repeat=None, n2=None, amp2=None):
        nn = wrap_fraction(n)
        rr = max(repeat or self.min_repeat, self.min_repeat)
        alpha = pi / rr
        x = cos(alpha)
        y = x * tan((nn * 2.0 - 1.0) * alpha)
        return (1.0 - sqrt(x * x + y * y)) / (1.0 - cos(alpha))

class PatternFLOWER(Pattern):
    display_name = "Flower"
    min_repeat = 3
    needs_repeat = True
    nside = PatternNSIDE()
    def value(self, n, repeat=None, n2=None, amp2=None):
        rr = max(repeat or self.min_repeat, self.min_repeat)
        return 1.0 - self.nside.value(wrap_fraction(n), rr)

class PatternHEART(Pattern):
    display_name = "Heart"
    def value(self, n, repeat=None, n2=None, amp2=None):
        # symmetrical, only the first half is defined
        nn = 2.0 * wrap_fraction(n)
        if nn > 1.0:
            nn = 2.0 - nn
        z = sin(nn * 2 * pi)
        if nn >= 0.75:
            z += 1.0
        elif nn > 0.25:
            z += (1.0 - sin(nn * 2 * pi)) / 2.0
        return z

class PatternTUDOR(Pattern):
    display_name = "Tudor Rose"
    triangle = PatternTRIANGLE()
    def value(self, n, repeat=None, n2=None, amp2=None):
        nn = wrap_fraction(n)
        z1 = 0.5 + 0.5 * cos(2.0 * nn * 2.0 * pi)
        z2 = 5.0 * self.triangle.value(nn)
        return min(z1, z2)

class PatternHOLTZB(Pattern):
    # sine with every third valley missing
    display_name = "HoltzB"
    sine = PatternSINE()
    def value(self, n, repeat=None, n2=None, amp2=None):
        nn = wrap_fraction(n)
        if nn < 2.0 / 3.0:
            return self.sine.value(nn * 3.0)
        return 0.0

class PatternHOLTZE(Pattern):
    # n2 small sine bumps inside a triangular envelope
    display_name = "HoltzE"
    needs_n2 = True
    min_n2 = 3
    sine = PatternSINE()
    def value(self, n, repeat=None, n2=None, amp2=None):
        nn = wrap_fraction(n)
        nn2 = max(n2 or 0, self.min_n2)
        a = 2 * nn if nn < 0.5 else 2 * (1 - nn)
        return a * self.sine.value(nn * nn2)

class PatternHOLTZS(Pattern):
    # heart outline with a small flower of n2 petals on top
    display_name = "HoltzS"
    needs_n2 = True
    needs_amp2 = True
    min_n2 = 3
    default_amp2 = 0.1
    flower = PatternFLOWER()
    heart = PatternHEART()
    def value(self, n, repeat=None, n2=None, amp2=None):
        nn = wrap_fraction(n)
        nn2 = max(n2 or 0, self.min_n2)
        a2 = amp2 if amp2 is not None and 0.0 <= amp2 <= 1.0 else self.default_amp2
        f = a2 * self.flower.value(wrap_fraction(nn * nn2), (repeat or 1) * nn2)
        return (1.0 - a2) * self.heart.value(nn) + f

class CustomStyle(EnumClass):
    STRAIGHT = 0
    TRIG = 1
    descriptions = [
        (STRAIGHT, "STRAIGHT", "Straight line segments"),
        (TRIG, "TRIG", "Cosine eased segments"),
    ]

class CustomPattern(Pattern):
    """Pattern defined by user points (x, y) in the unit square, sorted by x.
    A dual pattern carries a second line used as the lower edge of a cut."""
    is_builtin = False
    TOLERANCE = 0.001
    def __init__(self, display_name, style=CustomStyle.STRAIGHT, points=None, points2=None):
        self.display_name = display_name
        Pattern.__init__(self)
        self.style = style
        self.points = sorted(points or [(0.0, 0.0), (0.5, 1.0), (1.0, 0.0)])
        self.points2 = sorted(points2) if points2 else None
    def is_dual(self):
        return self.points2 is not None
    def is_straight(self):
        return self.style == CustomStyle.STRAIGHT
    def breakpoints(self):
        return [x for x, y in self.points]
    def breakpoint_angles(self, repeat, phase):
        """Sorted spindle angles of the corners of all repeats, 0 and 360
        included, without duplicates."""
        angles = [0.0, 360.0]
        for i in range(repeat):
            for x in self.breakpoints():
                angles.append(angle_check(x * 360.0 / repeat + i * 360.0 / repeat - phase / repeat))
        angles.sort()
        res = [angles[0]]
        for c in angles[1:]:
            if abs(c - res[-1]) >= 1e-6:
                res.append(c)
        return res
    def interpolate(self, points, n):
        if not points:
            return 0.0
        if n <= points[0][0]:
            return points[0][1]
        if n >= points[-1][0]:
            return points[-1][1]
        for (x1, y1), (x2, y2) in zip(points, points[1:]):
            if x1 <= n <= x2:
                if x2 == x1:
                    return y2
                t = (n - x1) / (x2 - x1)
                if self.style == CustomStyle.TRIG:
                    t = 0.5 - 0.5 * cos(pi * t)
                return y1 + (y2 - y1) * t
        return points[-1][1]
    def value(self, n, repeat=None, n2=None, amp2=None):
        return self.interpolate(self.points, n)
    def value2(self, n):
        if self.points2 is None:
            return 0.0
        return self.interpolate(self.points2, n)
    def set_dual(self, dual):
        if dual and self.points2 is None:
            self.points2 = [(x, 0.0) for x, y in self.points]
        elif not dual:
            self.points2 = None
    def add_point(self, x, y):
        self.points = sorted(self.points + [(min(max(x, 0.0), 1.0), min(max(y, 0.0), 1.0))])
    def needs_normalize(self):
        if len(self.points) < 2:
            return False
        xs = [x for x, y in self.points]
        ys = [y for x, y in self.points]
        return (abs(min(xs)) > self.TOLERANCE or abs(min(ys)) > self.TOLERANCE
            or abs(max(xs) - 1.0) > self.TOLERANCE or abs(max(ys) - 1.0) > self.TOLERANCE)
    def normalize(self):
        if not self.needs_normalize():
            return
        xs = [x for x, y in self.points]
        ys = [y for x, y in self.points]
        w = (max(xs) - min(xs)) or 1.0
        h = (max(ys) - min(ys)) or 1.0
        self.points = [((x - min(xs)) / w, (y - min(ys)) / h) for x, y in self.points]
    def mirror(self):
        if len(self.points) < 2:
            return
        left = [p for p in self.points if p[0] <= 0.5]
        self.points = sorted(left + [(1.0 - x, y) for x, y in left if x < 0.5])

builtin_pattern_classes = [
    PatternNONE, PatternSINE, PatternHALFSINE, PatternTRIANGLE, PatternSQUARE,
    PatternNSIDE, PatternFLOWER, PatternHEART, PatternTUDOR,
    PatternHOLTZB, PatternHOLTZE, PatternHOLTZS,
]

class PatternLibrary(object):
    DEFAULT_PATTERN = "SINE"
    def __init__(self):
        self.builtins = [cls() for cls in builtin_pattern_classes]
        self.customs = []
    def all_patterns(self):
        return self.builtins + self.customs
    def all_names(self):
        return [p.name for p in self.all_patterns()]
    def all_custom(self):
        return list(self.customs)
    def find(self, name):
        for p in self.all_patterns():
            if p.name == name:
                return p
        return None
    def get_pattern(self, name):
        return self.find(name) or self.find(self.DEFAULT_PATTERN)
    def default_pattern(self):
        return self.find(self.DEFAULT_PATTERN)
    def name_exists(self, name):
        return self.find(name) is not None
    def add(self, pattern):
        if self.name_exists(pattern.name):
            raise ValueError(f"Pattern {pattern.name} already exists")
        self.customs.append(pattern)
    def remove(self, pattern):
        if pattern in self.customs:
            self.customs.remove(pattern)

patterns = PatternLibrary()

def get_pattern(name):
    return patterns.get_pattern(name)
