from RoseCAM.common.geom import *
from RoseCAM.common.notify import Observable
from RoseCAM.cam.cutpoint import CutPoint
from RoseCAM.cam.offset import OffsetCut, OffsetGroup
from RoseCAM.cam.rosette_point import RosettePoint
from RoseCAM.cam.spiral import Spacing, SpiralCut

class CutPointList(Observable):
    """Ordered list of the cuts made on one piece. Cut points are numbered
    by their position in the list, renumbered after every structural
    change."""
    DEFAULT_TYPE = RosettePoint.tag
    def __init__(self, outline):
        Observable.__init__(self)
        self.outline = outline
        self.items = []
        self.warnings = []
        self.suspended = False
        self.watch(outline)
    def __repr__(self):
        return f"CutPoints: {len(self.items)} cuts"
    def __len__(self):
        return len(self.items)
    def __iter__(self):
        return iter(self.items)
    def __getitem__(self, idx):
        return self.items[idx]
    def add_warning(self, text):
        print("Warning: " + text)
        self.warnings.append(text)
    def is_empty(self):
        return not self.items
    def get(self, idx):
        if idx < 0 or idx >= len(self.items):
            return None
        return self.items[idx]
    def contains(self, point):
        return point in self.items
    def index(self, point):
        return self.items.index(point)
    def all_for_cutter(self, cutter=None):
        if cutter is None:
            return list(self.items)
        return [p for p in self.items if p.cutter is cutter]
    def offset_cuts(self):
        return [p for p in self.items if isinstance(p, OffsetCut)]
    def last_cut_point(self, cutter=None):
        points = self.all_for_cutter(cutter)
        return points[-1] if points else None
    def renumber(self):
        for i, p in enumerate(self.items):
            p.set_num(i)
    def attach(self, point, idx=None):
        if idx is None:
            idx = len(self.items)
        self.items.insert(idx, point)
        self.watch(point)
    def detach(self, point):
        self.unwatch(point)
        self.items.remove(point)
    def add(self, point):
        """Appends an existing cut point."""
        if self.contains(point):
            return None
        point.set_num(len(self.items))
        self.attach(point)
        self.emitPropertyChanged('add', None, point)
        return point
    def insert(self, idx, point):
        if self.contains(point):
            return None
        self.attach(point, max(0, min(idx, len(self.items))))
        self.renumber()
        self.emitPropertyChanged('add', None, point)
        return point
    def add_cut(self, pos, cutter, tag=None):
        """New cut point at pos. Without a type it copies the last cut made
        with the same cutter, or makes a rosette point if there is none.
        Nothing is added when the outline has no curve."""
        if len(self.outline.dot_curve) < 2:
            return None
        if tag is None:
            last = self.last_cut_point(cutter)
            if last is not None:
                return self.add_snapped(last.duplicate(pos))
            tag = self.DEFAULT_TYPE
        return self.add_snapped(CutPoint.create(tag, pos, cutter, self.outline))
    def add_snapped(self, point):
        res = self.add(point)
        if res is not None:
            res.snap_to_curve()
        return res
    def duplicate(self, point):
        """Copy of point inserted right after it."""
        if not self.contains(point):
            return None
        res = point.duplicate()
        self.attach(res, self.index(point) + 1)
        self.renumber()
        self.emitPropertyChanged('add', None, res)
        return res
    def remove(self, point):
        """Removes a cut point. A begin point removes its whole spiral, a
        go-to or an offset group member is taken out of its owner."""
        removed = False
        if self.contains(point):
            self.detach(point)
            point.clear()
            removed = True
        else:
            for item in self.items:
                if isinstance(item, SpiralCut):
                    if item.begin_point is point:
                        self.detach(item)
                        item.clear()
                        removed = True
                        break
                    if item.contains_go_to(point):
                        item.remove_go_to(point)
                        removed = True
                        break
                if isinstance(item, OffsetGroup) and item.contains(point):
                    item.remove_off_point(point)
                    removed = True
                    break
        self.renumber()
        if removed:
            self.emitPropertyChanged('delete', point, None)
        return removed
    def clear(self):
        if not self.items:
            return
        for p in self.items:
            self.unwatch(p)
            p.clear()
        self.items = []
        self.emitPropertyChanged('delete')
    def move_up(self, point):
        idx = self.index(point) if self.contains(point) else -1
        if idx < 1:
            return False
        self.items[idx - 1], self.items[idx] = self.items[idx], self.items[idx - 1]
        self.renumber()
        self.emitPropertyChanged('order', idx, idx - 1)
        return True
    def move_down(self, point):
        idx = self.index(point) if self.contains(point) else -1
        if idx < 0 or idx >= len(self.items) - 1:
            return False
        self.items[idx + 1], self.items[idx] = self.items[idx], self.items[idx + 1]
        self.renumber()
        self.emitPropertyChanged('order', idx, idx + 1)
        return True
    def drop_goto(self, goto, spiral):
        """Makes a go-to point part of a spiral."""
        if self.contains(goto):
            self.detach(goto)
        spiral.add_go_to(goto)
        self.renumber()
    def drop_off_point(self, point, group):
        """Moves a rosette point into an offset group."""
        if not isinstance(point, RosettePoint) or group.contains(point):
            return None
        if self.contains(point):
            self.detach(point)
        res = group.add_off_point(point)
        if res is not None and res is not point:
            point.clear()
        self.renumber()
        return res
    def spiral_to_points(self, spiral, space=None, spacing=Spacing.UNIFORM_D, n_inserts=None):
        """Replaces a spiral by plain cut points, spaced about space apart
        or n_inserts of them between the begin and end points."""
        if not self.contains(spiral):
            return None
        if space is not None:
            n_inserts = spiral.inserts_for_spacing(space, spacing)
        points = spiral.to_points(n_inserts, spacing)
        idx = self.index(spiral)
        self.detach(spiral)
        spiral.clear()
        for i, p in enumerate(points):
            self.attach(p, idx + i)
        self.snap_all()
        self.renumber()
        self.emitPropertyChanged('add', None, None)
        return points
    def snap_all(self):
        for p in self.items:
            p.snap_to_curve()
    def transform(self, outline_change, point_change):
        """Changes the outline and moves every cut point along with it,
        snapping only once both are done."""
        self.suspended = True
        try:
            if outline_change() is False:
                return False
            for p in self.items:
                point_change(p)
        finally:
            self.suspended = False
        self.snap_all()
        self.emitPropertyChanged('multi')
        return True
    def invert(self):
        return self.transform(self.outline.invert, lambda p: p.invert())
    def offset_vertical(self, delta):
        return self.transform(lambda: self.outline.offset_vertical(delta), lambda p: p.offset_vertical(delta))
    def scale(self, factor):
        return self.transform(lambda: self.outline.scale(factor), lambda p: p.scale(factor))
    def onWatchedChanged(self, source, name, old, new):
        if self.suspended:
            return
        if source is self.outline:
            self.snap_all()
            return
        if name in ('pos', 'snap') and source in self.items:
            source.snap_to_curve()
        self.emitPropertyChanged(name, old, new)
    def make_instructions(self, cutlist, plan, steps_per_rot, cutter=None, target=None):
        """Motions for every cut made with the cutter. Offset cuts are only
        made when asked for one at a time, as target."""
        if target is not None:
            target.make_instructions(cutlist, plan, steps_per_rot)
            return
        for p in self.all_for_cutter(cutter):
            if not isinstance(p, OffsetCut):
                p.make_instructions(cutlist, plan, steps_per_rot)
    def cut_surface(self, surface, cutter=None):
        points = self.all_for_cutter(cutter)
        for i, p in enumerate(points):
            if is_calculation_cancelled():
                break
            set_calculation_progress(i, len(points))
            p.cut_surface(surface)
