"""
Tests for the Delaunay triangulation and Voronoi partitioning.
"""

import pytest

from settlement_generator import Patch, Point, Random, Voronoi
from settlement_generator.voronoi import Triangle


def random_points(seed, count=30, size=100):
    rng = Random(seed)
    return [Point((rng.float() - 0.5) * size, (rng.float() - 0.5) * size) for _ in range(count)]


class TestTriangle:
    """Test circumcircles and edge orientation."""

    def test_circumcircle(self):
        tr = Triangle(Point(0, 0), Point(2, 0), Point(0, 2))
        assert (tr.c.x, tr.c.y) == pytest.approx((1, 1))
        assert tr.r == pytest.approx(2 ** 0.5)

    def test_orientation_is_normalized(self):
        a, b, c = Point(0, 0), Point(2, 0), Point(0, 2)
        t1 = Triangle(a, b, c)
        t2 = Triangle(a, c, b)
        assert (t1.p2 is t2.p2) and (t1.p3 is t2.p3)

    def test_collinear_points(self):
        tr = Triangle(Point(0, 0), Point(1, 0), Point(2, 0))
        assert tr.r == float("inf")


class TestVoronoi:
    """Test incremental construction of the diagram."""

    @pytest.fixture
    def diagram(self):
        return Voronoi.build(random_points(7))

    def test_all_seeds_inserted(self, diagram):
        assert len(diagram.seeds) == 30
        assert len(diagram.points) == 34

    def test_delaunay_property(self, diagram):
        """No point lies strictly inside the circumcircle of a triangle."""
        for tr in diagram.triangles:
            for p in diagram.points:
                if p is tr.p1 or p is tr.p2 or p is tr.p3:
                    continue
                assert p.distance(tr.c) >= tr.r - 1e-6

    def test_triangulation_excludes_frame(self, diagram):
        real = diagram.triangulation()
        assert 0 < len(real) < len(diagram.triangles)
        for tr in real:
            for p in (tr.p1, tr.p2, tr.p3):
                assert not any(p is c for c in diagram.frame)

    def test_partitioning_regions(self, diagram):
        regions = diagram.partitioning()
        assert len(regions) > 0

        for r in regions:
            poly = r.to_polygon()
            assert len(poly) >= 3
            assert poly.square > 0

    def test_neighbouring_patches_share_points(self, diagram):
        regions = diagram.partitioning()
        central = min(regions, key=lambda r: r.seed.length)
        first = Patch.from_region(central)
        patches = [Patch.from_region(r) for r in regions if r is not central]

        neighbours = [p for p in patches if p.shape.borders(first.shape)]
        assert len(neighbours) > 0
        shared = [v for v in neighbours[0].shape if first.shape.contains(v)]
        assert len(shared) >= 2

    def test_regions_are_cached_until_insertion(self, diagram):
        regions = diagram.regions
        assert diagram.regions is regions

        diagram.add_point(Point(0.5, 0.25))
        assert diagram.regions is not regions
        assert len(diagram.regions) == 35

    def test_relax_keeps_seed_count(self, diagram):
        seeds = sorted(diagram.seeds, key=lambda p: p.length)
        relaxed = Voronoi.relax(diagram, seeds[:3])

        assert len(relaxed.seeds) == 30
        moved = [p for p in seeds[:3] if not any(p is q for q in relaxed.seeds)]
        kept = [p for p in seeds[3:] if any(p is q for q in relaxed.seeds)]
        assert len(kept) == 27
        assert len(moved) == 3
