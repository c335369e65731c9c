from shapely.geometry import LineString, MultiLineString, Point

from RoseCAM.common.geom import *

class Curve(object):
    """Open polyline in the XZ plane, ordered bottom to top."""
    def __init__(self, points):
        self.points = [p if isinstance(p, Vector) else Vector.from_tuple(p) for p in points]
        self.line_cache = None
    def __len__(self):
        return len(self.points)
    def line(self):
        if len(self.points) < 2:
            return None
        if self.line_cache is None:
            self.line_cache = LineString([p.as_tuple() for p in self.points])
        return self.line_cache
    def top_point(self):
        return self.points[-1] if self.points else None
    def bottom_point(self):
        return self.points[0] if self.points else None
    def length(self):
        line = self.line()
        return line.length if line is not None else 0.0
    def nearest_point(self, pt):
        if not self.points:
            return None
        if len(self.points) == 1:
            return self.points[0]
        line = self.line()
        res = line.interpolate(line.project(Point(pt.x, pt.z)))
        return Vector(res.x, res.y)
    def index_of_nearest_point(self, pt):
        if not self.points:
            return -1
        return min(range(len(self.points)), key=lambda i: self.points[i].dist(pt))
    def perpendicular(self, pt, dir):
        """Unit normal at the vertex nearest to pt, right-hand side of the
        direction of travel if dir is True."""
        if len(self.points) < 2:
            return None
        i = self.index_of_nearest_point(pt)
        im1 = max(i - 1, 0)
        ip1 = min(i + 1, len(self.points) - 1)
        dx = self.points[ip1].x - self.points[im1].x
        dz = self.points[ip1].z - self.points[im1].z
        if dir:
            v = Vector(dz, -dx)
        else:
            v = Vector(-dz, dx)
        return v.normalized().snapped()
    def subset_points(self, p0, p1):
        i0 = self.index_of_nearest_point(p0)
        i1 = self.index_of_nearest_point(p1)
        if i0 == -1 or i1 == -1:
            return None
        if i0 <= i1:
            return self.points[i0:i1 + 1]
        return list(reversed(self.points[i1:i0 + 1]))
    def resampled(self, spacing):
        line = self.line()
        if line is None or spacing <= 0:
            return Curve(self.points)
        total = line.length
        n = int(round(total / spacing)) + 1
        if n < 2:
            return Curve([self.points[0], self.points[-1]])
        res = [self.points[0]]
        for i in range(1, n - 1):
            p = line.interpolate(total * i / (n - 1))
            res.append(Vector(p.x, p.y))
        res.append(self.points[-1])
        return Curve(res)
    def interpolate_down(self, pt, d):
        """Point at arc distance d from the vertex nearest to pt, towards the
        top for positive d, towards the bottom for negative d. None if that
        falls off the curve."""
        if d == 0:
            return pt
        if len(self.points) < 2:
            return None
        start = self.index_of_nearest_point(pt)
        if d > 0:
            indexes = range(start + 1, len(self.points))
            step = -1
        else:
            indexes = range(start - 1, -1, -1)
            step = 1
        d = abs(d)
        length = 0.0
        for i in indexes:
            prev = self.points[i + step]
            cur = self.points[i]
            last = length
            length += prev.dist(cur)
            if length >= d:
                ratio = (d - last) / (length - last)
                return prev + (cur - prev) * ratio
        return None
    def offset(self, distance):
        """Offset to the right of the direction of travel."""
        line = self.line()
        if line is None or distance == 0:
            return Curve(self.points)
        geom = line.offset_curve(-distance)
        if isinstance(geom, MultiLineString):
            geom = max(geom.geoms, key=lambda g: g.length)
        coords = list(geom.coords)
        # keep the bottom-to-top ordering of the source curve
        if coords and Vector.from_tuple(coords[0]).dist(self.points[0]) > Vector.from_tuple(coords[-1]).dist(self.points[0]):
            coords.reverse()
        return Curve(coords)
    def flipped_x(self):
        return Curve([Vector(-p.x, p.z) for p in self.points])
    def translated(self, dx, dz):
        return Curve([p.translated(dx, dz) for p in self.points])
    def scaled(self, factor):
        return Curve([Vector(p.x * factor, p.z * factor) for p in self.points])
