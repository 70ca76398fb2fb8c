"""
Mathematical utility functions
"""
import math

from .point import Point


def gate(value, min_val, max_val):
    """Clamp value between min and max"""
    return min_val if value < min_val else (value if value < max_val else max_val)


def sign(value):
    """Sign of value: -1, 0, or 1"""
    if value == 0:
        return 0
    return -1 if value < 0 else 1


def cross(x1, y1, x2, y2):
    """2D cross product"""
    return x1 * y2 - y1 * x2


def scalar(x1, y1, x2, y2):
    """Scalar product"""
    return x1 * x2 + y1 * y2


def distance2line(x1, y1, dx1, dy1, x0, y0):
    """
    Signed distance from (x0, y0) to the infinite line through (x1, y1)
    with direction (dx1, dy1). Points to the left of the direction are
    positive.
    """
    length = math.sqrt(dx1 * dx1 + dy1 * dy1)
    if length == 0:
        return math.sqrt((x0 - x1) ** 2 + (y0 - y1) ** 2)
    return (dx1 * y0 - dy1 * x0 + (y1 + dy1) * x1 - (x1 + dx1) * y1) / length


def interpolate(p1, p2, ratio=0.5):
    """Interpolate between two points"""
    return Point(
        p1.x + (p2.x - p1.x) * ratio,
        p1.y + (p2.y - p1.y) * ratio
    )


def intersect_lines(x1, y1, dx1, dy1, x2, y2, dx2, dy2):
    """
    Find intersection of two lines.
    Returns Point(t1, t2) where intersection is at (x1 + t1*dx1, y1 + t1*dy1)
    and (x2 + t2*dx2, y2 + t2*dy2), or None if lines are parallel.
    """
    denom = dx1 * dy2 - dy1 * dx2
    if denom == 0:
        return None

    t1 = ((x2 - x1) * dy2 - (y2 - y1) * dx2) / denom
    t2 = (dy1 * (x2 - x1) - dx1 * (y2 - y1)) / denom

    return Point(t1, t2)


def min_by(items, func):
    """First element minimizing func"""
    result = None
    best = None
    for item in items:
        measure = func(item)
        if result is None or measure < best:
            result = item
            best = measure
    return result


def max_by(items, func):
    """First element maximizing func"""
    result = None
    best = None
    for item in items:
        measure = func(item)
        if result is None or measure > best:
            result = item
            best = measure
    return result


def angle_between(a, b):
    """Absolute difference of two angles in radians, in [0, pi]"""
    d = a - b
    return abs(math.atan2(math.sin(d), math.cos(d)))
