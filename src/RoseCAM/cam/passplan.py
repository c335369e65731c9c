from RoseCAM.common.enums import EnumClass
from RoseCAM.common.geom import LatheSettings

class Rotation(EnumClass):
    PLUS_ALWAYS = 0
    NEG_ALWAYS = 1
    NEG_LAST = 2
    descriptions = [
        (PLUS_ALWAYS, "PLUS_ALWAYS", "Always + rotation"),
        (NEG_ALWAYS, "NEG_ALWAYS", "Always - rotation"),
        (NEG_LAST, "NEG_LAST", "+ on rough, - on final"),
    ]

class PassPlan(object):
    """Coarse passes of pass_depth each, followed by a final pass of
    last_depth to the full depth of the cut."""
    def __init__(self, pass_depth=0.020, pass_step=5, last_depth=0.005, last_step=1,
            rotation=Rotation.PLUS_ALWAYS, safety=0.0, soft_lift=0.0):
        self.pass_depth = max(pass_depth, 0.0)
        self.pass_step = max(int(pass_step), 1)
        self.last_depth = max(last_depth, 0.0)
        self.last_step = max(int(last_step), 1)
        self.rotation = rotation
        self.safety = safety
        self.soft_lift = soft_lift
    def __repr__(self):
        return f"PassPlan({self.pass_depth}/{self.pass_step}, {self.last_depth}/{self.last_step}, {Rotation.toString(self.rotation)})"
    def clone(self, **attrs):
        res = PassPlan(self.pass_depth, self.pass_step, self.last_depth, self.last_step, self.rotation,
            self.safety, self.soft_lift)
        for k, v in attrs.items():
            assert hasattr(res, k), f"Unknown attribute: {k}"
            setattr(res, k, v)
        return res
    @staticmethod
    def from_settings():
        return PassPlan(LatheSettings.pass_depth, LatheSettings.pass_step, LatheSettings.last_depth,
            LatheSettings.last_step, LatheSettings.rotation, soft_lift=LatheSettings.soft_lift)
    def coarse_negative(self):
        return self.rotation == Rotation.NEG_ALWAYS
    def last_negative(self):
        return self.rotation in (Rotation.NEG_ALWAYS, Rotation.NEG_LAST)
    def passes(self, cut_depth):
        """Yields (depth, step, negative rotation, is last pass)."""
        rough_depth = cut_depth - self.last_depth
        depth = 0.0
        while depth < rough_depth:
            if self.pass_depth > 0:
                depth = min(rough_depth, depth + self.pass_depth)
            else:
                depth = rough_depth
            last = self.last_depth <= 0 and depth >= rough_depth
            yield depth, self.pass_step, self.last_negative() if last else self.coarse_negative(), last
        if self.last_depth > 0:
            yield cut_depth, self.last_step, self.last_negative(), True
