"""
Delaunay triangulation and Voronoi diagram (incremental Bowyer-Watson)
"""
import math

from .point import Point
from .polygon import Polygon


class Triangle:
    """Delaunay triangle with its circumcircle"""

    def __init__(self, p1, p2, p3):
        # Normalize orientation so that edges of adjacent triangles run
        # in opposite directions
        s = (p2.x - p1.x) * (p2.y + p1.y) + (p3.x - p2.x) * (p3.y + p2.y) + (p1.x - p3.x) * (p1.y + p3.y)

        self.p1 = p1
        if s > 0:
            self.p2 = p2
            self.p3 = p3
        else:
            self.p2 = p3
            self.p3 = p2

        ax, ay = p1.x, p1.y
        bx, by = p2.x, p2.y
        cx, cy = p3.x, p3.y
        d = 2 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
        if d == 0:
            # Collinear points: the circumcircle contains everything
            self.c = Point((ax + bx + cx) / 3, (ay + by + cy) / 3)
            self.r = float('inf')
        else:
            a2 = ax * ax + ay * ay
            b2 = bx * bx + by * by
            c2 = cx * cx + cy * cy
            self.c = Point(
                (a2 * (by - cy) + b2 * (cy - ay) + c2 * (ay - by)) / d,
                (a2 * (cx - bx) + b2 * (ax - cx) + c2 * (bx - ax)) / d
            )
            self.r = self.c.distance(p1)

    def has_edge(self, a, b):
        """Check if triangle has edge from a to b"""
        return ((self.p1 is a and self.p2 is b) or
                (self.p2 is a and self.p3 is b) or
                (self.p3 is a and self.p1 is b))


class Region:
    """Voronoi cell of a seed: the Delaunay triangles around it"""

    def __init__(self, seed):
        self.seed = seed
        self.vertices = []

    def sort_vertices(self):
        """Sort triangles by the angle of their circumcenter around the seed"""
        self.vertices.sort(key=lambda tr: math.atan2(tr.c.y - self.seed.y, tr.c.x - self.seed.x))
        return self

    def center(self):
        """Average of the circumcenters"""
        if len(self.vertices) == 0:
            return Point(self.seed.x, self.seed.y)
        c = Point(0, 0)
        for tr in self.vertices:
            c.add_eq(tr.c)
        c.scale_eq(1 / len(self.vertices))
        return c

    def borders(self, other):
        """Check if regions share an edge"""
        len1 = len(self.vertices)
        len2 = len(other.vertices)
        for i in range(len1):
            tr = self.vertices[i]
            j = next((k for k in range(len2) if other.vertices[k] is tr), -1)
            if j != -1:
                return self.vertices[(i + 1) % len1] is other.vertices[(j + len2 - 1) % len2]
        return False

    def to_polygon(self):
        """Polygon of circumcenters"""
        return Polygon([tr.c for tr in self.vertices])


class Voronoi:
    """Voronoi diagram inside a rectangular frame"""

    def __init__(self, minx, miny, maxx, maxy):
        self.triangles = []

        c1 = Point(minx, miny)
        c2 = Point(minx, maxy)
        c3 = Point(maxx, miny)
        c4 = Point(maxx, maxy)
        self.frame = [c1, c2, c3, c4]
        self.points = [c1, c2, c3, c4]

        self.triangles.append(Triangle(c1, c2, c3))
        self.triangles.append(Triangle(c2, c3, c4))

        self._regions = {p: self._build_region(p) for p in self.points}
        self._regions_dirty = False

    def _is_real(self, tr):
        """Check if triangle is real (not using frame points)"""
        return not any(p is c for p in (tr.p1, tr.p2, tr.p3) for c in self.frame)

    @property
    def seeds(self):
        """Points excluding the frame corners"""
        return [p for p in self.points if not any(p is c for c in self.frame)]

    def add_point(self, p):
        """Insert a point and retriangulate the cavity it opens"""
        to_split = [tr for tr in self.triangles if p.distance(tr.c) < tr.r]
        if len(to_split) == 0:
            return

        self.points.append(p)

        # Boundary of the cavity: edges not shared by two split triangles
        a = []
        b = []
        for t1 in to_split:
            e1 = True
            e2 = True
            e3 = True
            for t2 in to_split:
                if t2 is t1:
                    continue
                if e1 and t2.has_edge(t1.p2, t1.p1):
                    e1 = False
                if e2 and t2.has_edge(t1.p3, t1.p2):
                    e2 = False
                if e3 and t2.has_edge(t1.p1, t1.p3):
                    e3 = False
                if not (e1 or e2 or e3):
                    break
            if e1:
                a.append(t1.p1)
                b.append(t1.p2)
            if e2:
                a.append(t1.p2)
                b.append(t1.p3)
            if e3:
                a.append(t1.p3)
                b.append(t1.p1)

        index = 0
        for _ in range(len(a)):
            self.triangles.append(Triangle(p, a[index], b[index]))
            index = next((k for k in range(len(a)) if a[k] is b[index]), -1)
            if index <= 0:
                break

        for tr in to_split:
            self.triangles.remove(tr)

        self._regions_dirty = True

    def _build_region(self, p):
        r = Region(p)
        for tr in self.triangles:
            if tr.p1 is p or tr.p2 is p or tr.p3 is p:
                r.vertices.append(tr)
        return r.sort_vertices()

    @property
    def regions(self):
        """Mapping seed -> Region, rebuilt after insertions"""
        if self._regions_dirty:
            self._regions = {p: self._build_region(p) for p in self.points}
            self._regions_dirty = False
        return self._regions

    def triangulation(self):
        """Get real triangles (without frame points)"""
        return [tr for tr in self.triangles if self._is_real(tr)]

    def partitioning(self):
        """Regions made only of real triangles, in insertion order"""
        result = []
        for p in self.points:
            r = self.regions[p]
            if all(self._is_real(tr) for tr in r.vertices):
                result.append(r)
        return result

    def get_neighbours(self, r1):
        """Get neighbouring regions"""
        return [r2 for r2 in self.regions.values() if r1.borders(r2)]

    @staticmethod
    def relax(voronoi, to_relax=None):
        """
        Lloyd relaxation: move the selected seeds to the centroids of their
        regions and rebuild the diagram from scratch.
        """
        regions = voronoi.partitioning()
        points = voronoi.seeds

        if to_relax is None:
            to_relax = voronoi.points

        for r in regions:
            if any(r.seed is p for p in to_relax):
                points = [p for p in points if p is not r.seed]
                points.append(r.to_polygon().centroid)

        return Voronoi.build(points)

    @staticmethod
    def build(vertices):
        """Build Voronoi diagram from vertices"""
        if len(vertices) == 0:
            return Voronoi(-100, -100, 100, 100)

        minx = min(v.x for v in vertices)
        miny = min(v.y for v in vertices)
        maxx = max(v.x for v in vertices)
        maxy = max(v.y for v in vertices)

        dx = (maxx - minx) * 0.5
        dy = (maxy - miny) * 0.5

        voronoi = Voronoi(minx - dx / 2, miny - dy / 2, maxx + dx / 2, maxy + dy / 2)
        for v in vertices:
            voronoi.add_point(v)

        return voronoi
