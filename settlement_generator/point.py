"""
Point class for 2D coordinates
"""
import math


class Point:
    """
    Mutable 2D point.

    Equality and hashing are inherited from ``object``: two points are the
    same vertex only when they are the same object. Polygons that share a
    Point object are connected at that vertex, and moving the point moves it
    in all of them.
    """

    def __init__(self, x=0.0, y=0.0):
        self.x = float(x)
        self.y = float(y)

    def __repr__(self):
        return f"Point({self.x:.2f}, {self.y:.2f})"

    def __add__(self, other):
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar):
        return Point(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar):
        return self.__mul__(scalar)

    def __truediv__(self, scalar):
        return Point(self.x / scalar, self.y / scalar)

    def __neg__(self):
        return Point(-self.x, -self.y)

    def clone(self):
        return Point(self.x, self.y)

    def set(self, x, y=None):
        """Set coordinates. Can take Point or (x, y)"""
        if isinstance(x, Point):
            self.x = x.x
            self.y = x.y
        elif y is not None:
            self.x = float(x)
            self.y = float(y)
        else:
            raise ValueError("Invalid arguments")

    def set_to(self, x, y):
        self.x = float(x)
        self.y = float(y)

    def offset(self, dx, dy):
        self.x += dx
        self.y += dy

    def add_eq(self, other):
        self.x += other.x
        self.y += other.y

    def scale_eq(self, f):
        self.x *= f
        self.y *= f

    @property
    def length(self):
        return math.sqrt(self.x * self.x + self.y * self.y)

    def norm(self, length=1.0):
        """Return normalized copy"""
        l = self.length
        if l > 0:
            return Point((self.x / l) * length, (self.y / l) * length)
        return Point(0, 0)

    def dot(self, other):
        return self.x * other.x + self.y * other.y

    def rotate90(self):
        """Rotate 90 degrees counterclockwise"""
        return Point(-self.y, self.x)

    def atan(self):
        """Angle in radians"""
        return math.atan2(self.y, self.x)

    def distance(self, other):
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)
