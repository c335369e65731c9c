from RoseCAM.common.geom import LatheSettings, angle_check, is_calculation_cancelled

class Surface(object):
    """Rotating surface of revolution that the cut simulation carves.

    Angles are in degrees. Implementations only need to provide the
    primitive operations, the choreography lives in the cut points."""
    def num_sectors(self):
        return LatheSettings.surface_sectors
    def rotate_z(self, deg):
        raise NotImplementedError()
    def rotate_y(self, deg):
        raise NotImplementedError()
    def offset(self, dx, dy, dz):
        raise NotImplementedError()
    def cut_surface(self, cutter, x, z, c=None):
        raise NotImplementedError()

class RecordingSurface(Surface):
    """Surface that only records the operations issued to it, with the net
    rotation and offset they add up to."""
    def __init__(self, sectors=None):
        self.sectors = sectors or LatheSettings.surface_sectors
        self.calls = []
        self.cuts = []
        self.z_rotation = 0.0
        self.y_rotation = 0.0
        self.offsets = (0.0, 0.0, 0.0)
    def num_sectors(self):
        return self.sectors
    def rotate_z(self, deg):
        self.calls.append(('rotate_z', deg))
        self.z_rotation += deg
    def rotate_y(self, deg):
        self.calls.append(('rotate_y', deg))
        self.y_rotation += deg
    def offset(self, dx, dy, dz):
        self.calls.append(('offset', dx, dy, dz))
        ox, oy, oz = self.offsets
        self.offsets = (ox + dx, oy + dy, oz + dz)
    def cut_surface(self, cutter, x, z, c=None):
        self.calls.append(('cut', x, z, c))
        self.cuts.append((x, z, c, self.z_rotation))
    def is_at_rest(self, tolerance=1e-6):
        """True when the surface is back at a whole number of revolutions
        with no tilt and no offset."""
        z = angle_check(self.z_rotation)
        return (min(z, 360.0 - z) < tolerance and abs(self.y_rotation) < tolerance
            and all(abs(o) < tolerance for o in self.offsets))

class RotationTracker(object):
    def __init__(self, surface, start=0.0):
        self.surface = surface
        self.last_c = start
    def rotate_to(self, c):
        self.surface.rotate_z(c - self.last_c)
        self.last_c = c
    def finish(self):
        self.surface.rotate_z(360.0 - self.last_c)
        self.last_c = 0.0

def cut_with(surface, cutter, pos, c):
    if cutter.is_ideal_hcf():
        surface.cut_surface(cutter, pos.x, pos.z, c)
    else:
        surface.cut_surface(cutter, pos.x, pos.z)

def sweep_sectors(surface, cutter, position_at, pass_angle=True):
    """One full revolution, cutting at position_at(c) in every sector."""
    n = surface.num_sectors()
    tracker = RotationTracker(surface)
    for count in range(n):
        c = 360.0 * count / n
        pos = position_at(c)
        tracker.rotate_to(c)
        if pass_angle:
            cut_with(surface, cutter, pos, c)
        else:
            surface.cut_surface(cutter, pos.x, pos.z)
    tracker.finish()

def cut_at_angles(surface, cutter, angles, position_at):
    """Single cuts at the given spindle angles, then back to the start."""
    tracker = RotationTracker(surface)
    for c in angles:
        tracker.rotate_to(c)
        cut_with(surface, cutter, position_at(c), c)
    tracker.finish()

def offset_repeats(surface, repeat, index_offset, origin, tangent_angle, body):
    """Run body(i) once per repeat with the surface moved so that the offset
    origin is at 0,0 and tilted by the tangent angle. The frame is always
    restored before checking for cancellation."""
    z_rotation = index_offset
    if z_rotation != 0.0:
        surface.rotate_z(z_rotation)
    for i in range(repeat):
        if i > 0:
            surface.rotate_z(360.0 / repeat)
            z_rotation += 360.0 / repeat
        surface.offset(-origin.x, 0.0, -origin.z)
        surface.rotate_y(-tangent_angle)
        body(i)
        surface.rotate_y(tangent_angle)
        surface.offset(origin.x, 0.0, origin.z)
        if is_calculation_cancelled():
            break
    remainder = angle_check(-z_rotation)
    if remainder != 0.0:
        surface.rotate_z(remainder)
