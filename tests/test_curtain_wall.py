"""
Tests for wall outlines, gate placement and towers.
"""

import pytest

from settlement_generator import (
    BadWallShapeError,
    CurtainWall,
    GenerationParams,
    Model,
    Patch,
    Point,
)


@pytest.fixture
def walled_block(grid_model):
    """4x4 grid of 10 unit cells with the central 2x2 block enclosed."""
    model, cells, points = grid_model(n=4, size=10)
    model.inner = [cells[(1, 1)], cells[(2, 1)], cells[(1, 2)], cells[(2, 2)]]
    midpoints = [points[(2, 1)], points[(3, 2)], points[(2, 3)], points[(1, 2)]]
    return model, cells, points, midpoints


class TestCircumference:
    """Test the outline of a group of patches."""

    def test_outline_of_block(self, walled_block):
        model, cells, points, midpoints = walled_block
        outline = model.find_circumference(model.inner)

        assert len(outline) == 8
        assert outline.square == pytest.approx(400)
        for v in midpoints:
            assert outline.contains(v)
        assert not outline.contains(points[(2, 2)])

    def test_single_patch(self, walled_block):
        model, cells, points, midpoints = walled_block
        outline = model.find_circumference([cells[(0, 0)]])
        assert len(outline) == 4
        assert outline[0] is cells[(0, 0)].shape[0]


class TestGates:
    """Test gate selection on virtual and real walls."""

    def test_virtual_wall(self, walled_block):
        model, cells, points, midpoints = walled_block
        wall = CurtainWall(False, model, model.inner, [], model.rng)

        assert len(wall.gates) == 1
        assert any(wall.gates[0] is v for v in midpoints)
        assert wall.segments == [False] * 8

        wall.build_towers()
        assert wall.towers == []

    def test_approach_picks_the_nearest_entrance(self, walled_block):
        model, cells, points, midpoints = walled_block
        wall = CurtainWall(False, model, model.inner, [], model.rng, approaches=[Point(1, 0)])
        assert wall.gates[0] is points[(3, 2)]

        wall = CurtainWall(False, model, model.inner, [], model.rng, approaches=[Point(0, 1)])
        assert wall.gates[0] is points[(2, 3)]

    def test_max_gates(self, walled_block):
        model, cells, points, midpoints = walled_block
        wall = CurtainWall(
            False, model, model.inner, [], model.rng,
            approaches=[Point(1, 0), Point(-1, 0)], max_gates=1,
        )
        assert len(wall.gates) == 1

    def test_reserved_vertices_are_never_gates(self, walled_block):
        model, cells, points, midpoints = walled_block
        reserved = midpoints[:3]
        wall = CurtainWall(False, model, model.inner, reserved, model.rng)
        assert wall.gates == [midpoints[3]]

    def test_no_entrances(self, walled_block):
        model, cells, points, midpoints = walled_block
        with pytest.raises(BadWallShapeError):
            CurtainWall(False, model, model.inner, midpoints, model.rng)

        patch = cells[(0, 0)]
        with pytest.raises(BadWallShapeError):
            CurtainWall(True, model, [patch], patch.shape.vertices, model.rng)

    def test_real_wall_towers(self, walled_block):
        model, cells, points, midpoints = walled_block
        wall = CurtainWall(True, model, model.inner, [], model.rng)
        wall.build_towers()

        assert wall.segments == [True] * 8
        assert len(wall.towers) == 8 - len(wall.gates)
        assert not any(t is g for t in wall.towers for g in wall.gates)

    def test_real_wall_is_smoothed(self, walled_block):
        model, cells, points, midpoints = walled_block
        corner = points[(1, 1)]
        CurtainWall(True, model, model.inner, [], model.rng)

        assert (corner.x, corner.y) != (10, 10)
        assert cells[(0, 0)].shape.contains(corner)


class TestWaterfront:
    """Test walls along water and wall adjacency."""

    def test_mark_waterfront(self, walled_block):
        model, cells, points, midpoints = walled_block
        wall = CurtainWall(True, model, model.inner, [], model.rng)
        wall.mark_waterfront([cells[(3, 1)]])

        assert wall.segments.count(False) == 1
        wall.build_towers()
        assert len(wall.towers) == 8 - len(wall.gates)

    def test_borders(self, walled_block):
        model, cells, points, midpoints = walled_block
        wall = CurtainWall(True, model, model.inner, [], model.rng)

        assert wall.borders(cells[(2, 0)])
        assert wall.borders(cells[(1, 1)])
        assert not wall.borders(cells[(0, 0)])
        assert wall.borders_by(cells[(2, 1)], points[(2, 1)], points[(3, 1)])
        assert wall.borders_by(cells[(2, 0)], points[(3, 1)], points[(2, 1)])

    def test_radius(self, walled_block):
        model, cells, points, midpoints = walled_block
        wall = CurtainWall(False, model, model.inner, [], model.rng)
        assert wall.get_radius() == pytest.approx(30 * 2 ** 0.5)


class TestOuterPatchSplit:
    """Test splitting the patch in front of a gate."""

    @pytest.fixture
    def hamlet(self):
        p = {xy: Point(*xy) for xy in [
            (0, 0), (10, 0), (20, 0), (0, 10), (10, 10), (20, 10), (0, 20), (20, 20),
        ]}
        a = Patch([p[0, 0], p[10, 0], p[10, 10], p[0, 10]])
        b = Patch([p[10, 0], p[20, 0], p[20, 10], p[10, 10]])
        c = Patch([p[0, 10], p[10, 10], p[20, 10], p[20, 20], p[0, 20]])

        model = Model(GenerationParams(n_patches=2, seed=3))
        model.patches = [a, b, c]
        model.inner = [a, b]
        return model, p, c

    def test_split(self, hamlet):
        model, p, outer = hamlet
        wall = CurtainWall(True, model, model.inner, [p[10, 0]], model.rng)

        assert wall.gates == [p[10, 10]]
        assert outer not in model.patches
        assert len(model.patches) == 4
        halves = model.patches[2:]
        assert all(half.shape.contains(p[10, 10]) for half in halves)
        assert sum(half.shape.square for half in halves) == pytest.approx(outer.shape.square)

    def test_plaza_is_not_split(self, hamlet):
        model, p, outer = hamlet
        model.plaza = outer
        CurtainWall(True, model, model.inner, [p[10, 0]], model.rng)

        assert model.patches[2] is outer
        assert len(model.patches) == 3
