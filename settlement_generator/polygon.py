"""
Polygon class for 2D polygons
"""
import math

from .point import Point
from .math_utils import cross, intersect_lines, interpolate as geom_interpolate, sign


def _last_index(items, item):
    for i in range(len(items) - 1, -1, -1):
        if items[i] is item:
            return i
    return -1


class Polygon:
    """
    2D polygon represented as an ordered, cyclic list of points.

    Vertices are stored by reference: a polygon built from another polygon's
    points shares them, which is how patches stay connected to each other.
    """

    DELTA = 0.000001

    def __init__(self, vertices=None):
        if vertices is None:
            self.vertices = []
        else:
            self.vertices = [v if isinstance(v, Point) else Point(v[0], v[1]) for v in vertices]

    def __len__(self):
        return len(self.vertices)

    def __getitem__(self, index):
        return self.vertices[index]

    def __setitem__(self, index, value):
        self.vertices[index] = value

    def __iter__(self):
        return iter(self.vertices)

    def __repr__(self):
        return f"Polygon({len(self.vertices)} vertices)"

    def copy(self):
        """New polygon sharing the same points"""
        return Polygon(self.vertices)

    def clone(self):
        """New polygon with copies of the points"""
        return Polygon([v.clone() for v in self.vertices])

    def set(self, other):
        """Copy vertex positions from another polygon of the same length"""
        for v, p in zip(self.vertices, other.vertices):
            v.set(p)

    def append(self, point):
        self.vertices.append(point)

    def extend(self, points):
        self.vertices.extend(points)

    def last(self):
        return self.vertices[-1]

    def index_of(self, point, start=0):
        """Index of the point object, or -1"""
        for i in range(start, len(self.vertices)):
            if self.vertices[i] is point:
                return i
        return -1

    def contains(self, point):
        """Check if the point object is one of the vertices"""
        return self.index_of(point) != -1

    @property
    def square(self):
        """Signed area, positive for counter-clockwise polygons"""
        length = len(self.vertices)
        if length < 3:
            return 0.0
        s = 0.0
        v1 = self.vertices[-1]
        for v2 in self.vertices:
            s += v1.x * v2.y - v2.x * v1.y
            v1 = v2
        return s * 0.5

    @property
    def perimeter(self):
        if len(self.vertices) < 2:
            return 0.0
        length = 0.0
        for i in range(len(self.vertices)):
            v0 = self.vertices[i]
            v1 = self.vertices[(i + 1) % len(self.vertices)]
            length += v0.distance(v1)
        return length

    @property
    def compactness(self):
        """Compactness measure (1.0 for circle, 0.79 for square, 0.60 for triangle)"""
        p = self.perimeter
        if p == 0:
            return 0.0
        return 4 * math.pi * self.square / (p * p)

    @property
    def center(self):
        """Fast approximation of centroid (average of vertices)"""
        if len(self.vertices) == 0:
            return Point(0, 0)
        c = Point(0, 0)
        for v in self.vertices:
            c.add_eq(v)
        c.scale_eq(1 / len(self.vertices))
        return c

    @property
    def centroid(self):
        """True centroid"""
        if len(self.vertices) < 3:
            return self.center
        x = 0.0
        y = 0.0
        a = 0.0
        for i in range(len(self.vertices)):
            v0 = self.vertices[i]
            v1 = self.vertices[(i + 1) % len(self.vertices)]
            f = cross(v0.x, v0.y, v1.x, v1.y)
            a += f
            x += (v0.x + v1.x) * f
            y += (v0.y + v1.y) * f
        if abs(a) < 1e-10:
            return self.center
        s6 = 1 / (3 * a)
        return Point(s6 * x, s6 * y)

    def edges(self):
        """Yield (v0, v1) for every edge"""
        length = len(self.vertices)
        for i in range(length):
            yield self.vertices[i], self.vertices[(i + 1) % length]

    def next(self, point):
        """Get next vertex after given point"""
        index = self.index_of(point)
        if index == -1:
            return None
        return self.vertices[(index + 1) % len(self.vertices)]

    def prev(self, point):
        """Get previous vertex before given point"""
        index = self.index_of(point)
        if index == -1:
            return None
        return self.vertices[(index + len(self.vertices) - 1) % len(self.vertices)]

    def vector(self, point):
        """Get vector from point to next point"""
        next_p = self.next(point)
        if next_p is None:
            return Point(0, 0)
        return next_p - point

    def vectori(self, i):
        return self.vertices[(i + 1) % len(self.vertices)] - self.vertices[i]

    def find_edge(self, a, b):
        """Index of the edge a->b, or -1"""
        index = self.index_of(a)
        if index == -1:
            return -1
        if self.vertices[(index + 1) % len(self.vertices)] is b:
            return index
        return -1

    def is_convex_vertexi(self, i):
        length = len(self.vertices)
        v0 = self.vertices[(i + length - 1) % length]
        v1 = self.vertices[i]
        v2 = self.vertices[(i + 1) % length]
        return cross(v1.x - v0.x, v1.y - v0.y, v2.x - v1.x, v2.y - v1.y) > 0

    def is_convex_vertex(self, v):
        """Check if vertex is convex"""
        index = self.index_of(v)
        if index == -1:
            return False
        return self.is_convex_vertexi(index)

    def is_convex(self):
        """Check if polygon is convex"""
        return all(self.is_convex_vertexi(i) for i in range(len(self.vertices)))

    def smooth_vertexi(self, i, f=1.0):
        length = len(self.vertices)
        v = self.vertices[i]
        prev_v = self.vertices[(i + length - 1) % length]
        next_v = self.vertices[(i + 1) % length]
        return Point(
            (prev_v.x + v.x * f + next_v.x) / (2 + f),
            (prev_v.y + v.y * f + next_v.y) / (2 + f)
        )

    def smooth_vertex(self, v, f=1.0):
        """Smoothed position of a vertex (the vertex itself is not moved)"""
        index = self.index_of(v)
        if index == -1:
            return Point(v.x, v.y)
        return self.smooth_vertexi(index, f)

    def smooth_vertex_eq(self, f=1.0):
        """New polygon with every vertex smoothed"""
        length = len(self.vertices)
        if length < 3:
            return self.clone()
        return Polygon([self.smooth_vertexi(i, f) for i in range(length)])

    def filter_short(self, threshold):
        """New polygon without edges shorter than threshold"""
        if len(self.vertices) < 2:
            return self.copy()
        v0 = self.vertices[0]
        result = [v0]
        i = 1
        while i < len(self.vertices):
            v1 = self.vertices[i]
            i += 1
            while v0.distance(v1) < threshold and i < len(self.vertices):
                v1 = self.vertices[i]
                i += 1
            result.append(v1)
            v0 = v1
        return Polygon(result)

    def inset(self, v, d):
        """
        Move a single vertex inward along the bisector of its two edges.

        The displacement is d / cos(half the turn between edge normals), so
        both incident edges end up d away from their old lines, capped at
        half of the shorter incident edge. The vertex is replaced by a new
        point; polygons sharing the old one are not affected.
        """
        index = self.index_of(v)
        if index == -1 or len(self.vertices) < 3:
            return
        p0 = self.prev(v)
        p2 = self.next(v)
        e0 = v - p0
        e1 = p2 - v
        if e0.length == 0 or e1.length == 0:
            return

        n0 = e0.rotate90().norm()
        n1 = e1.rotate90().norm()
        bisector = n0 + n1
        cap = min(e0.length, e1.length) * 0.5

        cos_half = bisector.length / 2
        if cos_half < 1e-9:
            offset = n0.norm(min(abs(d), cap) * sign(d))
        else:
            t = min(abs(d) / cos_half, cap)
            offset = bisector.norm(t * sign(d))
        self.vertices[index] = v + offset

    def inset_all(self, distances):
        p = self.copy()
        for i in range(len(p.vertices)):
            if distances[i] != 0:
                p.inset(p.vertices[i], distances[i])
        return p

    def inset_eq(self, d):
        for i in range(len(self.vertices)):
            self.inset(self.vertices[i], d)

    def rotate(self, angle):
        """Rotate polygon around the origin"""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        for v in self.vertices:
            vx = v.x * cos_a - v.y * sin_a
            vy = v.y * cos_a + v.x * sin_a
            v.set_to(vx, vy)

    def offset(self, point):
        """Offset polygon by point"""
        for v in self.vertices:
            v.offset(point.x, point.y)

    def distance(self, point):
        """Minimal distance from any vertex to point"""
        if len(self.vertices) == 0:
            return float('inf')
        return min(v.distance(point) for v in self.vertices)

    def borders(self, another):
        """Check if polygons share an edge"""
        len1 = len(self.vertices)
        len2 = len(another.vertices)
        for i in range(len1):
            j = another.index_of(self.vertices[i])
            if j != -1:
                next_v = self.vertices[(i + 1) % len1]
                if (next_v is another.vertices[(j + 1) % len2] or
                        next_v is another.vertices[(j + len2 - 1) % len2]):
                    return True
        return False

    def get_bounds(self):
        """(min_x, min_y, max_x, max_y)"""
        xs = [v.x for v in self.vertices]
        ys = [v.y for v in self.vertices]
        return min(xs), min(ys), max(xs), max(ys)

    def min(self, func):
        """Find vertex that minimizes function"""
        if len(self.vertices) == 0:
            return None
        best = self.vertices[0]
        best_val = func(best)
        for v in self.vertices[1:]:
            val = func(v)
            if val < best_val:
                best = v
                best_val = val
        return best

    def max(self, func):
        """Find vertex that maximizes function"""
        if len(self.vertices) == 0:
            return None
        best = self.vertices[0]
        best_val = func(best)
        for v in self.vertices[1:]:
            val = func(v)
            if val > best_val:
                best = v
                best_val = val
        return best

    def shrink(self, distances):
        """
        Cut a strip of the given width off every edge.
        Cheap, but only correct for convex polygons.
        """
        q = self.copy()
        for i, (v1, v2) in enumerate(self.edges()):
            d = distances[i]
            if d > 0:
                n = (v2 - v1).rotate90().norm(d)
                q = q.cut(v1 + n, v2 + n, 0)[0]
        return q

    def shrink_eq(self, d):
        """Shrink all edges by same distance"""
        return self.shrink([d] * len(self.vertices))

    def buffer(self, distances):
        """
        Offset every edge by its distance (positive to the left of the edge,
        i.e. inwards for counter-clockwise polygons) and resolve the
        self-intersections this creates, keeping the largest loop.
        """
        q = []
        for i, (v0, v1) in enumerate(self.edges()):
            d = distances[i]
            if d == 0:
                q.append(v0)
                q.append(v1)
            else:
                n = (v1 - v0).rotate90().norm(d)
                q.append(v0 + n)
                q.append(v1 + n)

        # Any two segments cross at most once
        max_cuts = len(q) * len(q)
        cuts = 0
        last_edge = 0
        was_cut = True
        while was_cut and cuts < max_cuts:
            was_cut = False
            n = len(q)
            for i in range(last_edge, n - 2):
                last_edge = i

                p11 = q[i]
                p12 = q[i + 1]
                x1, y1 = p11.x, p11.y
                dx1, dy1 = p12.x - x1, p12.y - y1

                for j in range(i + 2, n if i > 0 else n - 1):
                    p21 = q[j]
                    p22 = q[j + 1] if j < n - 1 else q[0]
                    x2, y2 = p21.x, p21.y
                    dx2, dy2 = p22.x - x2, p22.y - y2

                    t = intersect_lines(x1, y1, dx1, dy1, x2, y2, dx2, dy2)
                    if (t is not None and
                            self.DELTA < t.x < 1 - self.DELTA and
                            self.DELTA < t.y < 1 - self.DELTA):
                        pn = Point(x1 + dx1 * t.x, y1 + dy1 * t.x)
                        q.insert(j + 1, pn)
                        q.insert(i + 1, pn)
                        was_cut = True
                        cuts += 1
                        break
                if was_cut:
                    break

        # Walk the loops: at a crossing, jump to the other occurrence of the
        # shared point
        regular = list(range(len(q)))
        best_part = None
        best_square = float('-inf')
        while regular:
            indices = []
            seen = set()
            start = regular[0]
            index = start
            while index not in seen:
                seen.add(index)
                indices.append(index)
                if index in regular:
                    regular.remove(index)

                next_index = (index + 1) % len(q)
                v = q[next_index]
                first = q.index(v)
                last = _last_index(q, v)
                if first != next_index:
                    index = first
                elif last != next_index:
                    index = last
                else:
                    index = next_index
                if index == start:
                    break

            part = Polygon([q[i] for i in indices])
            s = part.square
            if s > best_square:
                best_part = part
                best_square = s

        return best_part if best_part is not None else Polygon()

    def buffer_eq(self, d):
        """Buffer all edges by same distance"""
        return self.buffer([d] * len(self.vertices))

    def peel(self, v1, d):
        """Cut a strip of width d off the edge starting at v1"""
        index = self.index_of(v1)
        v2 = self.vertices[(index + 1) % len(self.vertices)]
        n = (v2 - v1).rotate90().norm(d)
        return self.cut(v1 + n, v2 + n, 0)[0]

    def simplify(self, n):
        """Remove the least significant vertices until n remain"""
        length = len(self.vertices)
        while length > n:
            result = 0
            min_measure = float('inf')

            b = self.vertices[length - 1]
            c = self.vertices[0]
            for i in range(length):
                a = b
                b = c
                c = self.vertices[(i + 1) % length]
                measure = abs(a.x * (b.y - c.y) + b.x * (c.y - a.y) + c.x * (a.y - b.y))
                if measure < min_measure:
                    result = i
                    min_measure = measure

            del self.vertices[result]
            length -= 1

    def cut(self, p1, p2, gap=0.0):
        """
        Cut polygon with the infinite line through p1 and p2.

        Returns two halves, the first one on the side the line direction
        turns towards, or a single unsplit copy unless the line crosses the
        boundary exactly twice. With a gap, gap/2 is peeled off both halves
        along the cut.
        """
        x1, y1 = p1.x, p1.y
        dx1, dy1 = p2.x - x1, p2.y - y1

        length = len(self.vertices)
        edge1 = 0
        ratio1 = 0.0
        edge2 = 0
        ratio2 = 0.0
        count = 0

        for i in range(length):
            v0 = self.vertices[i]
            v1 = self.vertices[(i + 1) % length]

            x2, y2 = v0.x, v0.y
            dx2, dy2 = v1.x - x2, v1.y - y2

            t = intersect_lines(x1, y1, dx1, dy1, x2, y2, dx2, dy2)
            if t is not None and 0 <= t.y <= 1:
                if count == 0:
                    edge1 = i
                    ratio1 = t.x
                elif count == 1:
                    edge2 = i
                    ratio2 = t.x
                count += 1

        if count != 2:
            return [self.copy()]

        point1 = geom_interpolate(p1, p2, ratio1)
        point2 = geom_interpolate(p1, p2, ratio2)

        half1 = Polygon([point1] + self.vertices[edge1 + 1:edge2 + 1] + [point2])
        half2 = Polygon([point2] + self.vertices[edge2 + 1:] + self.vertices[:edge1 + 1] + [point1])

        if gap > 0:
            half1 = half1.peel(point2, gap / 2)
            half2 = half2.peel(point1, gap / 2)

        v = self.vectori(edge1)
        if cross(dx1, dy1, v.x, v.y) > 0:
            return [half1, half2]
        return [half2, half1]

    def split(self, p1, p2):
        """Split polygon along the diagonal between two of its vertices"""
        i1 = self.index_of(p1)
        i2 = self.index_of(p2)
        if i1 == -1 or i2 == -1:
            return [self.copy()]
        return self.spliti(i1, i2)

    def spliti(self, i1, i2):
        if i1 > i2:
            i1, i2 = i2, i1
        return [
            Polygon(self.vertices[i1:i2 + 1]),
            Polygon(self.vertices[i2:] + self.vertices[:i1 + 1])
        ]

    def interpolate(self, p):
        """Inverse-distance weights of the vertices for a point"""
        weights = []
        for v in self.vertices:
            d = v.distance(p)
            weights.append(1.0 / d if d > 0 else 1e10)
        total = sum(weights)
        return [w / total for w in weights]

    @staticmethod
    def rect(w=1.0, h=1.0):
        """Create rectangle"""
        return Polygon([
            Point(-w/2, -h/2),
            Point(w/2, -h/2),
            Point(w/2, h/2),
            Point(-w/2, h/2)
        ])

    @staticmethod
    def regular(n=8, r=1.0):
        """Create regular polygon"""
        return Polygon([
            Point(r * math.cos(i / n * math.pi * 2), r * math.sin(i / n * math.pi * 2))
            for i in range(n)
        ])

    @staticmethod
    def circle(r=1.0):
        """Create circle approximation"""
        return Polygon.regular(16, r)
