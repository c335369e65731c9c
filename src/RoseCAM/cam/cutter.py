from math import *

from RoseCAM.common.enums import EnumClass
from RoseCAM.common.notify import Observable

class Frame(EnumClass):
    HCF = 0
    UCF = 1
    ECF = 2
    DRILL = 3
    FIXED = 4
    descriptions = [
        (HCF, "HCF", "Horizontal cutting frame"),
        (UCF, "UCF", "Universal cutting frame"),
        (ECF, "ECF", "Eccentric cutting frame"),
        (DRILL, "Drill", "Drilling frame"),
        (FIXED, "Fixed", "Fixed tool"),
    ]
    @staticmethod
    def is_rotating(frame):
        return frame in (Frame.HCF, Frame.UCF)

class Location(EnumClass):
    FRONT_INSIDE = 0
    FRONT_OUTSIDE = 1
    BACK_INSIDE = 2
    BACK_OUTSIDE = 3
    descriptions = [
        (FRONT_INSIDE, "FRONT_INSIDE", "Front, inside"),
        (FRONT_OUTSIDE, "FRONT_OUTSIDE", "Front, outside"),
        (BACK_INSIDE, "BACK_INSIDE", "Back, inside"),
        (BACK_OUTSIDE, "BACK_OUTSIDE", "Back, outside"),
    ]
    @staticmethod
    def is_front(loc):
        return loc in (Location.FRONT_INSIDE, Location.FRONT_OUTSIDE)
    @staticmethod
    def is_back(loc):
        return not Location.is_front(loc)
    @staticmethod
    def is_inside(loc):
        return loc in (Location.FRONT_INSIDE, Location.BACK_INSIDE)
    @staticmethod
    def is_outside(loc):
        return not Location.is_inside(loc)
    @staticmethod
    def is_front_in_or_back_out(loc):
        return loc in (Location.FRONT_INSIDE, Location.BACK_OUTSIDE)

class Profile(EnumClass):
    IDEAL = 0
    ROUND = 1
    POINT160 = 2
    descriptions = [
        (IDEAL, "IDEAL", "Ideal (zero width)"),
        (ROUND, "ROUND", "Round nose"),
        (POINT160, "POINT160", "160 degree point"),
    ]
    TAN80 = tan(radians(80))
    @staticmethod
    def width_at_depth(profile, d, rod_diameter):
        if d <= 0.0 or profile == Profile.IDEAL:
            return 0.0
        if profile == Profile.ROUND:
            r = rod_diameter / 2.0
            if d >= r:
                return rod_diameter
            return 2.0 * sqrt(r * r - (r - d) * (r - d))
        return min(rod_diameter, 2.0 * d * Profile.TAN80)

class Cutter(Observable):
    DEFAULT_RADIUS = 0.5
    DEFAULT_TIP_WIDTH = 0.1875
    def __init__(self, name="Cutter", frame=Frame.UCF, location=Location.FRONT_INSIDE, radius=DEFAULT_RADIUS,
            tip_width=DEFAULT_TIP_WIDTH, profile=Profile.POINT160, ucf_angle=0.0, ucf_rotate=0.0):
        Observable.__init__(self)
        self.name = name
        self.frame = frame
        self.location = location
        self.radius = radius
        self.tip_width = tip_width
        self.profile = profile
        self.ucf_angle = ucf_angle
        self.ucf_rotate = ucf_rotate
    def __repr__(self):
        return f"Cutter({self.name}, {Frame.toString(self.frame)}, {Location.toString(self.location)})"
    def copy(self):
        return Cutter(self.name, self.frame, self.location, self.radius, self.tip_width, self.profile,
            self.ucf_angle, self.ucf_rotate)
    def set_radius(self, radius):
        if radius < 0:
            return
        self.setPropertyValue('radius', radius)
    def set_tip_width(self, tip_width):
        if tip_width < 0:
            return
        self.setPropertyValue('tip_width', tip_width)
    def set_location(self, location):
        if not Location.isValid(location):
            return
        self.setPropertyValue('location', location)
    def set_frame(self, frame):
        if not Frame.isValid(frame):
            return
        self.setPropertyValue('frame', frame)
    def set_profile(self, profile):
        if not Profile.isValid(profile):
            return
        self.setPropertyValue('profile', profile)
    def width_of_cut(self, d):
        if d <= 0.0:
            return 0.0
        if Frame.is_rotating(self.frame):
            if d >= self.radius:
                return 2.0 * self.radius
            return 2.0 * sqrt(self.radius * self.radius - (self.radius - d) * (self.radius - d))
        return Profile.width_at_depth(self.profile, d, self.tip_width)
    def is_ideal_hcf(self):
        return self.frame == Frame.HCF and self.profile == Profile.IDEAL
    def follows_surface(self):
        # the cutter centre runs on the cut surface itself
        return self.frame in (Frame.FIXED, Frame.DRILL, Frame.ECF)
