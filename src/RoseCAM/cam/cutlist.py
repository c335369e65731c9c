from RoseCAM.common.enums import EnumClass

class Speed(EnumClass):
    FAST = 0
    VELOCITY = 1
    RPM = 2
    descriptions = [
        (FAST, "FAST", "Rapid move, not cutting"),
        (VELOCITY, "VELOCITY", "Linear feed, first point of a cut"),
        (RPM, "RPM", "Feed synchronised to the spindle"),
    ]

class InstType(EnumClass):
    GO_XZ_FAST = 0
    GO_XZ_VEL = 1
    GO_XZC_FAST = 2
    GO_XZC_RPM = 3
    GO_XZC_VEL = 4
    TURN = 5
    SPINDLE_WRAP_CHECK = 6
    COMMENT = 7
    descriptions = [
        (GO_XZ_FAST, "Go XZ Fast"),
        (GO_XZ_VEL, "Go XZ at Velocity"),
        (GO_XZC_FAST, "Go XZC Fast"),
        (GO_XZC_RPM, "Go XZC at RPM"),
        (GO_XZC_VEL, "Go XZC at Velocity"),
        (TURN, "Turn"),
        (SPINDLE_WRAP_CHECK, "Spindle Wrap Check"),
        (COMMENT, "//"),
    ]
    xz_types = {GO_XZ_FAST, GO_XZ_VEL}
    xzc_types = {GO_XZC_FAST, GO_XZC_RPM, GO_XZC_VEL}
    fast_types = {GO_XZ_FAST, GO_XZC_FAST}

class Inst(object):
    __slots__ = ('type', 'x', 'z', 'c', 'text')
    def __init__(self, type, x=0.0, z=0.0, c=0.0, text=""):
        self.type = type
        self.x = x
        self.z = z
        self.c = c
        self.text = text
    def __repr__(self):
        return str(self)
    def __str__(self):
        name = InstType.toString(self.type)
        if self.type in InstType.xzc_types:
            return f"{name}: {self.x:0.4f}, {self.z:0.4f}, {self.c:0.2f}"
        if self.type in InstType.xz_types:
            return f"{name}: {self.x:0.4f}, {self.z:0.4f}"
        if self.type == InstType.TURN:
            return f"{name}: {self.c:0.2f}"
        if self.type == InstType.COMMENT:
            return f"// {self.text}"
        return name
    def is_motion(self):
        return self.type not in (InstType.COMMENT, InstType.SPINDLE_WRAP_CHECK)
    def is_fast(self):
        return self.type in InstType.fast_types
    def is_cutting(self):
        return self.type in (InstType.GO_XZ_VEL, InstType.GO_XZC_VEL, InstType.GO_XZC_RPM)

class CutList(object):
    """Append-only list of abstract machine motions."""
    def __init__(self):
        self.insts = []
    def __len__(self):
        return len(self.insts)
    def __iter__(self):
        return iter(self.insts)
    def __getitem__(self, idx):
        return self.insts[idx]
    def clear(self):
        self.insts = []
    def add(self, inst):
        self.insts.append(inst)
    def go_to_xz(self, speed, x, z):
        if speed == Speed.FAST:
            self.add(Inst(InstType.GO_XZ_FAST, x, z))
        else:
            self.add(Inst(InstType.GO_XZ_VEL, x, z))
    def go_to_xzc(self, speed, x, z, c):
        if speed == Speed.FAST:
            self.add(Inst(InstType.GO_XZC_FAST, x, z, c))
        elif speed == Speed.RPM:
            self.add(Inst(InstType.GO_XZC_RPM, x, z, c))
        else:
            self.add(Inst(InstType.GO_XZC_VEL, x, z, c))
    def go_to(self, speed, pt, c):
        self.go_to_xzc(speed, pt.x, pt.z, c)
    def turn(self, c):
        self.add(Inst(InstType.TURN, c=c))
    def spindle_wrap_check(self):
        self.add(Inst(InstType.SPINDLE_WRAP_CHECK))
    def comment(self, text):
        self.add(Inst(InstType.COMMENT, text=text))
    def motions(self):
        return [i for i in self.insts if i.is_motion()]
    def of_type(self, *types):
        return [i for i in self.insts if i.type in types]
    def to_text(self):
        return "\n".join(str(i) for i in self.insts)
