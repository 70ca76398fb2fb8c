"""
Polygon cutting operations used to lay out ward interiors
"""
import math

from .point import Point
from .polygon import Polygon
from .math_utils import interpolate, min_by


def bisect(poly, vertex, ratio=0.5, angle=0.0, gap=0.0):
    """
    Cut poly with a line crossing the edge that starts at vertex.

    The line passes through the point at ratio along the edge and is
    perpendicular to it, rotated by angle.
    """
    next_v = poly.next(vertex)
    if next_v is None:
        return [poly.copy()]

    p1 = interpolate(vertex, next_v, ratio)
    d = next_v - vertex

    cos_b = math.cos(angle)
    sin_b = math.sin(angle)
    vx = d.x * cos_b - d.y * sin_b
    vy = d.y * cos_b + d.x * sin_b
    p2 = Point(p1.x - vy, p1.y + vx)

    return poly.cut(p1, p2, gap)


def radial(poly, center=None, gap=0.0):
    """One triangular sector per edge, all sharing center"""
    if center is None:
        center = poly.centroid

    sectors = []
    for v0, v1 in poly.edges():
        sector = Polygon([center, v0, v1])
        if gap > 0:
            sector = sector.shrink([gap / 2, 0, gap / 2])
        sectors.append(sector)
    return sectors


def semi_radial(poly, center=None, gap=0.0):
    """Like radial, but the sectors fan out of one of the polygon's vertices"""
    if center is None:
        centroid = poly.centroid
        center = min_by(poly.vertices, lambda v: v.distance(centroid))

    half_gap = gap / 2
    sectors = []
    for v0, v1 in poly.edges():
        if v0 is center or v1 is center:
            continue
        sector = Polygon([center, v0, v1])
        if half_gap > 0:
            sector = sector.shrink([
                half_gap if poly.find_edge(center, v0) == -1 else 0,
                0,
                half_gap if poly.find_edge(v1, center) == -1 else 0,
            ])
        sectors.append(sector)
    return sectors


def ring(poly, thickness):
    """Peel strips of the given thickness off every edge, short edges first"""
    slices = []
    for v1, v2 in poly.edges():
        v = v2 - v1
        n = v.rotate90().norm(thickness)
        slices.append((v.length, v1 + n, v2 + n))

    slices.sort(key=lambda s: s[0])

    peel = []
    p = poly
    for _, p1, p2 in slices:
        halves = p.cut(p1, p2)
        p = halves[0]
        if len(halves) == 2:
            peel.append(halves[1])
    return peel
