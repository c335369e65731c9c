from math import *

from RoseCAM.common.enums import EnumClass
from RoseCAM.common.geom import angle_check
from RoseCAM.common.notify import Observable
from RoseCAM.cam.patterns import Pattern, get_pattern

class Mask(EnumClass):
    HIGH = 0
    LOW = 1
    descriptions = [
        (HIGH, "HIGH", "Masked repeats stay at the nominal radius"),
        (LOW, "LOW", "Masked repeats are fully deflected"),
    ]

class CombineType(EnumClass):
    NONE = 0
    MIN = 1
    MAX = 2
    ADD = 3
    SUB = 4
    descriptions = [
        (NONE, "NONE", "First value only"),
        (MIN, "MIN", "Minimum"),
        (MAX, "MAX", "Maximum"),
        (ADD, "ADD", "Sum"),
        (SUB, "SUB", "Difference"),
    ]
    @staticmethod
    def combine(op, n1, n2):
        if op == CombineType.MIN:
            return min(n1, n2)
        if op == CombineType.MAX:
            return max(n1, n2)
        if op == CombineType.ADD:
            return n1 + n2
        if op == CombineType.SUB:
            return n1 - n2
        return n1

def normalize_mask(mask):
    if not mask:
        return ""
    return "".join('0' if c == '0' else '1' for c in mask)

def expand_mask(mask, repeat):
    """Mask repeated cyclically until it covers every repeat."""
    if not mask:
        return ""
    full_mask = mask
    while len(full_mask) <= repeat:
        full_mask += mask
    return full_mask

def is_repeat_cut(mask, repeat, i):
    return not mask or expand_mask(mask, repeat)[i] != '0'

class DoubleArray(object):
    """Short list of floats entered by the user as text, e.g. "1.5, 1.0"."""
    EMPTY = "(none)"
    def __init__(self, data=None):
        self.data = list(data or [])
    def __len__(self):
        return len(self.data)
    def __getitem__(self, idx):
        return self.data[idx]
    def __eq__(self, other):
        return isinstance(other, DoubleArray) and self.data == other.data
    def __str__(self):
        return DoubleArray.format(self.data)
    def copy(self):
        return DoubleArray(self.data)
    @staticmethod
    def parse(text):
        if text is None:
            return DoubleArray()
        text = text.strip()
        if not text or text == DoubleArray.EMPTY:
            return DoubleArray()
        res = []
        for item in text.replace(",", " ").split():
            try:
                res.append(float(item))
            except ValueError:
                res.append(0.0)
        return DoubleArray(res)
    @staticmethod
    def format(values):
        if not values:
            return DoubleArray.EMPTY
        return ", ".join(f"{v:0.3f}" for v in values)

class AmplitudeSource(Observable):
    """Deflection of the cutter as a function of the spindle angle."""
    repeat = 1
    def __init__(self, p_to_p, phase=0.0, invert=False):
        Observable.__init__(self)
        self.p_to_p = p_to_p
        self.phase = phase
        self.invert = invert
    def amplitude_at(self, angle, invert=False):
        if invert:
            return self.p_to_p - self.amplitude(angle)
        return self.amplitude(angle)
    def amplitude(self, angle):
        raise NotImplementedError()
    def is_degenerate(self):
        return self.p_to_p == 0
    def is_straight(self):
        return False
    def set_p_to_p(self, p_to_p):
        if p_to_p < 0:
            return
        self.setPropertyValue('p_to_p', p_to_p)
    def set_phase(self, phase):
        self.setPropertyValue('phase', phase)
    def set_invert(self, invert):
        self.setPropertyValue('invert', bool(invert))
    def scale_amplitude(self, factor):
        if factor <= 0:
            return
        self.set_p_to_p(self.p_to_p * factor)

class Rosette(AmplitudeSource):
    DEFAULT_PATTERN = "SINE"
    DEFAULT_PTOP = 0.1
    DEFAULT_REPEAT = 8
    DEFAULT_N2 = 3
    DEFAULT_AMP2 = 0.1
    def __init__(self, pattern=None, p_to_p=DEFAULT_PTOP, repeat=DEFAULT_REPEAT, phase=0.0, invert=False,
            mask="", mask_hilo=Mask.HIGH, mask_phase=0.0, n2=DEFAULT_N2, amp2=DEFAULT_AMP2,
            symmetry_amp=None, symmetry_wid=None):
        AmplitudeSource.__init__(self, p_to_p, phase, invert)
        if not isinstance(pattern, Pattern):
            pattern = get_pattern(pattern or self.DEFAULT_PATTERN)
        self.pattern = pattern
        self.repeat = max(repeat, pattern.min_repeat)
        self.mask = normalize_mask(mask)
        self.mask_hilo = mask_hilo
        self.mask_phase = angle_check(mask_phase)
        self.n2 = n2
        self.amp2 = amp2
        self.symmetry_amp = DoubleArray(symmetry_amp)
        self.symmetry_wid = DoubleArray(symmetry_wid)
        self.check_none_pattern()
        self.check_symmetry_wid()
    def __repr__(self):
        return f"Rosette({self.pattern.name}{self.repeat}, p_to_p={self.p_to_p}, phase={self.phase})"
    def copy(self):
        return Rosette(self.pattern, self.p_to_p, self.repeat, self.phase, self.invert, self.mask,
            self.mask_hilo, self.mask_phase, self.n2, self.amp2, self.symmetry_amp.data, self.symmetry_wid.data)
    def is_none(self):
        return self.pattern.name == "NONE"
    def is_degenerate(self):
        return self.is_none() or self.p_to_p == 0
    def is_straight(self):
        return self.pattern.is_straight()
    def check_none_pattern(self):
        if self.is_none():
            self.p_to_p = 0.0
            self.phase = 0.0
            self.mask_phase = 0.0
    def check_symmetry_wid(self):
        data = self.symmetry_wid.data
        if not data:
            return
        if len(data) > self.repeat:
            del data[self.repeat:]
        if len(data) == self.repeat:
            data[-1] = self.repeat - sum(data[:-1])
    def set_pattern(self, pattern):
        if not isinstance(pattern, Pattern):
            pattern = get_pattern(pattern)
        old = self.pattern
        if old is pattern:
            return
        self.pattern = pattern
        self.check_none_pattern()
        if self.repeat < pattern.min_repeat:
            self.repeat = pattern.min_repeat
            self.check_symmetry_wid()
        self.emitPropertyChanged('pattern', old, pattern)
    def set_repeat(self, repeat):
        old = self.repeat
        self.repeat = max(int(repeat), self.pattern.min_repeat, 1)
        self.check_symmetry_wid()
        if old != self.repeat:
            self.emitPropertyChanged('repeat', old, self.repeat)
    def set_p_to_p(self, p_to_p):
        if p_to_p < 0:
            return
        if self.is_none():
            p_to_p = 0.0
        self.setPropertyValue('p_to_p', p_to_p)
    def set_phase(self, phase):
        if self.is_none():
            phase = 0.0
        self.setPropertyValue('phase', phase)
    def set_mask(self, mask):
        self.setPropertyValue('mask', normalize_mask(mask))
    def set_mask_hilo(self, hilo):
        if not Mask.isValid(hilo):
            return
        self.setPropertyValue('mask_hilo', hilo)
    def set_mask_phase(self, phase):
        self.setPropertyValue('mask_phase', 0.0 if self.is_none() else angle_check(phase))
    def set_n2(self, n2):
        self.setPropertyValue('n2', int(n2))
    def set_amp2(self, amp2):
        self.setPropertyValue('amp2', amp2)
    def set_symmetry_amp(self, values):
        if isinstance(values, str):
            values = DoubleArray.parse(values).data
        old = str(self.symmetry_amp)
        self.symmetry_amp = DoubleArray(values)
        if old != str(self.symmetry_amp):
            self.emitPropertyChanged('symmetry_amp', old, str(self.symmetry_amp))
    def set_symmetry_wid(self, values):
        if isinstance(values, str):
            values = DoubleArray.parse(values).data
        old = str(self.symmetry_wid)
        self.symmetry_wid = DoubleArray(values)
        self.check_symmetry_wid()
        if old != str(self.symmetry_wid):
            self.emitPropertyChanged('symmetry_wid', old, str(self.symmetry_wid))
    def uses_symmetry_amp(self):
        return len(self.symmetry_amp) > 0
    def uses_symmetry_wid(self):
        return len(self.symmetry_wid) > 0
    def factors(self):
        """Stretch factor of every repeat, plus a copy of the first one for
        the wrap-around. The first repeat-1 factors come from the width
        symmetry list, the last one makes them add up to repeat."""
        data = self.symmetry_wid.data
        factors = []
        for i in range(self.repeat - 1):
            factors.append(data[i % len(data)] if data else 1.0)
        factors.append(self.repeat - sum(factors))
        factors.append(factors[0])
        return factors
    def angle_breaks(self, factors=None):
        if factors is None:
            factors = self.factors()
        breaks = [0.0]
        for i in range(self.repeat):
            breaks.append(breaks[-1] + 360.0 / self.repeat * factors[i])
        return breaks
    def repeat_index(self, adjusted_angle, factors=None):
        if not self.uses_symmetry_wid():
            return int(adjusted_angle / (360.0 / self.repeat))
        breaks = self.angle_breaks(factors)
        for i in range(len(breaks) - 1, -1, -1):
            if adjusted_angle >= breaks[i]:
                return i
        return 0
    def is_masked(self, angle):
        if not self.mask:
            return False
        full_mask = expand_mask(self.mask, self.repeat)
        adjusted = angle_check(angle + self.phase / self.repeat - self.mask_phase / self.repeat)
        return full_mask[self.repeat_index(adjusted)] == '0'
    def pattern_value(self, fraction):
        return self.pattern.value_for(fraction, self.repeat, self.n2, self.amp2)
    def amplitude(self, angle):
        if self.is_masked(angle):
            return 0.0 if self.mask_hilo == Mask.HIGH else self.p_to_p
        per_repeat = 360.0 / self.repeat
        adjusted = angle_check(angle + self.phase / self.repeat)
        if not self.uses_symmetry_wid():
            m = int(adjusted / per_repeat)
            fraction = (adjusted - m * per_repeat) / per_repeat
        else:
            factors = self.factors()
            breaks = self.angle_breaks(factors)
            m = self.repeat_index(adjusted, factors)
            fraction = (adjusted - breaks[m]) / per_repeat / factors[m]
        delta = self.p_to_p * self.pattern_value(fraction)
        if self.uses_symmetry_amp():
            sym = self.symmetry_amp[m % len(self.symmetry_amp)]
            delta *= sym
            if self.pattern_value(0.0) >= 0.99:
                # patterns starting at the top keep the repeats joined up
                delta += self.p_to_p * (1.0 - sym)
        if self.invert:
            return self.p_to_p - delta
        return delta

class CompoundRosette(AmplitudeSource):
    """Several rosettes folded left to right through combine operators, then
    rescaled so that the largest deflection equals p_to_p."""
    DEFAULT_SIZE = 3
    NUM_SAMPLES = 720
    def __init__(self, rosettes=None, combiners=None, p_to_p=Rosette.DEFAULT_PTOP, phase=0.0, invert=False):
        AmplitudeSource.__init__(self, p_to_p, phase, invert)
        if rosettes is None:
            rosettes = [Rosette() for i in range(self.DEFAULT_SIZE)]
        self.rosettes = list(rosettes)
        if combiners is None:
            combiners = [CombineType.NONE] * (len(self.rosettes) - 1)
        if len(combiners) != len(self.rosettes) - 1:
            raise ValueError(f"{len(self.rosettes)} rosettes need {len(self.rosettes) - 1} combiners, got {len(combiners)}")
        self.combiners = list(combiners)
        self.max_deflection = None
        for r in self.rosettes:
            self.watch(r)
    def __repr__(self):
        res = ""
        for i, r in enumerate(self.rosettes):
            res += f"{r.pattern.name}{r.repeat}"
            if i < len(self.combiners):
                res += f" {CombineType.toString(self.combiners[i])} "
        return res
    def copy(self):
        return CompoundRosette([r.copy() for r in self.rosettes], self.combiners, self.p_to_p, self.phase, self.invert)
    def size(self):
        return len(self.rosettes)
    def set_repeat(self, repeat):
        pass
    def rosette(self, idx):
        if 0 <= idx < len(self.rosettes):
            return self.rosettes[idx]
        return None
    def set_rosette(self, idx, rosette):
        if not (0 <= idx < len(self.rosettes)):
            return
        old = self.rosettes[idx]
        self.unwatch(old)
        self.rosettes[idx] = rosette
        self.watch(rosette)
        self.max_deflection = None
        self.emitPropertyChanged('rosette', old, rosette)
    def combine_type(self, idx):
        if 0 <= idx < len(self.combiners):
            return self.combiners[idx]
        return CombineType.NONE
    def set_combine_type(self, idx, op):
        if not (0 <= idx < len(self.combiners)) or not CombineType.isValid(op):
            return
        old = self.combiners[idx]
        if old == op:
            return
        self.combiners[idx] = op
        self.max_deflection = None
        self.emitPropertyChanged('combine', old, op)
    def onWatchedChanged(self, source, name, old, new):
        self.max_deflection = None
        self.emitPropertyChanged(name, old, new)
    def deflection_at(self, angle):
        values = [r.amplitude_at(angle) for r in self.rosettes]
        res = values[0]
        for op, value in zip(self.combiners, values[1:]):
            res = CombineType.combine(op, res, value)
        return res
    def maximum(self):
        if self.max_deflection is None:
            step = 360.0 / self.NUM_SAMPLES
            self.max_deflection = max([0.0] + [self.deflection_at(i * step) for i in range(self.NUM_SAMPLES)])
        return self.max_deflection
    def is_degenerate(self):
        return self.p_to_p == 0 or self.maximum() <= 0
    def amplitude(self, angle):
        top = self.maximum()
        if top <= 0:
            res = 0.0
        else:
            res = min(max(self.deflection_at(angle) / top * self.p_to_p, 0.0), self.p_to_p)
        if self.invert:
            return self.p_to_p - res
        return res

class PatternBar(Observable):
    """Deflection as a function of distance along a line rather than of the
    spindle angle."""
    DEFAULT_REPEAT = 8
    DEFAULT_PATTERN = "SINE"
    DEFAULT_PTOP = 0.1
    DEFAULT_PERIOD = 0.5
    DEFAULT_N2 = 3
    DEFAULT_AMP2 = 0.1
    def __init__(self, pattern=None, p_to_p=DEFAULT_PTOP, period=DEFAULT_PERIOD, phase=0.0, invert=False,
            n2=DEFAULT_N2, amp2=DEFAULT_AMP2):
        Observable.__init__(self)
        if not isinstance(pattern, Pattern):
            pattern = get_pattern(pattern or self.DEFAULT_PATTERN)
        self.pattern = pattern
        self.p_to_p = p_to_p
        self.period = period
        self.phase = angle_check(phase)
        self.invert = invert
        self.n2 = n2
        self.amp2 = amp2
        if self.is_none():
            self.p_to_p = self.phase = 0.0
    def copy(self):
        return PatternBar(self.pattern, self.p_to_p, self.period, self.phase, self.invert, self.n2, self.amp2)
    def is_none(self):
        return self.pattern.name == "NONE"
    def set_pattern(self, pattern):
        if not isinstance(pattern, Pattern):
            pattern = get_pattern(pattern)
        old = self.pattern
        self.pattern = pattern
        if self.is_none():
            self.p_to_p = self.phase = 0.0
        if old is not pattern:
            self.emitPropertyChanged('pattern', old, pattern)
    def set_p_to_p(self, p_to_p):
        if p_to_p < 0:
            return
        self.setPropertyValue('p_to_p', 0.0 if self.is_none() else p_to_p)
    def set_period(self, period):
        if period <= 0:
            return
        self.setPropertyValue('period', period)
    def set_phase(self, phase):
        self.setPropertyValue('phase', 0.0 if self.is_none() else angle_check(phase))
    def set_invert(self, invert):
        self.setPropertyValue('invert', bool(invert))
    def set_n2(self, n2):
        self.setPropertyValue('n2', int(n2))
    def set_amp2(self, amp2):
        self.setPropertyValue('amp2', amp2)
    def amplitude_at(self, dist, invert=False):
        if invert:
            return self.p_to_p - self.amplitude_at(dist)
        if dist < 0.0:
            return 0.0
        offset = self.period * self.phase / 360.0
        frac = (dist + offset) / self.period
        frac -= floor(frac)
        d = self.p_to_p * self.pattern.value_for(frac, self.DEFAULT_REPEAT, self.n2, self.amp2)
        if self.invert:
            d = self.p_to_p - d
        return d
