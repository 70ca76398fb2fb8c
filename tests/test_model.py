"""
End-to-end tests for settlement generation.
"""

import pytest

from settlement_generator import (
    BadWallShapeError,
    Castle,
    GateWard,
    GenerationError,
    GenerationParams,
    Harbour,
    Market,
    Model,
    generate,
)
from settlement_generator import model as model_module


def snapshot(model):
    """Plain coordinates of everything generated, for comparisons."""
    patches = []
    for patch in model.patches:
        buildings = []
        if patch.ward is not None:
            buildings = [[(v.x, v.y) for v in b] for b in patch.ward.geometry]
        patches.append((
            [(v.x, v.y) for v in patch.shape],
            type(patch.ward).__name__,
            buildings,
        ))
    gates = [(g.x, g.y) for g in model.gates]
    return patches, gates


class TestWalledTown:
    """Test a walled town of about 500 people."""

    def test_inner_patches(self, town):
        assert len(town.inner) >= 7
        assert all(p.within_city and p.within_walls for p in town.inner)

    def test_plaza_is_the_only_market(self, town):
        assert town.plaza is not None
        assert town.plaza in town.inner
        assert isinstance(town.plaza.ward, Market)
        assert sum(isinstance(p.ward, Market) for p in town.inner) == 1

    def test_walls_and_gates(self, town):
        assert town.wall is not None
        assert town.wall is town.border
        assert 1 <= len(town.border.gates) <= 2
        assert len(town.wall.towers) > 0
        for gate in town.border.gates:
            assert town.wall.shape.contains(gate)
            assert gate not in town.wall.towers

    def test_citadel(self, town):
        assert town.citadel is not None
        assert isinstance(town.citadel.ward, Castle)
        assert all(g in town.gates for g in town.citadel.ward.wall.gates)

    def test_streets_lead_from_gates_to_plaza(self, town):
        assert len(town.streets) == len(town.gates)
        for gate, street in zip(town.gates, town.streets):
            assert street[0] is gate
            assert town.plaza.shape.contains(street.last())

    def test_arteries(self, town):
        assert len(town.arteries) >= 1
        assert all(len(artery) >= 2 for artery in town.arteries)

    def test_every_patch_has_a_ward(self, town):
        assert all(p.ward is not None for p in town.patches)
        assert town.city_radius > 0

    def test_buildings(self, town):
        buildings = [b for p in town.inner for b in p.ward.geometry]
        assert len(buildings) > len(town.inner)

    def test_topology(self, town):
        for gate in town.gates:
            assert gate in town.topology.pt2node


class TestDeterminism:
    """Test that a seed fully determines the settlement."""

    def test_same_seed_same_settlement(self):
        params = GenerationParams(n_patches=6, seed=7)
        assert snapshot(generate(params)) == snapshot(generate(params))

    def test_different_seed_different_settlement(self):
        a = generate(GenerationParams(n_patches=6, seed=7))
        b = generate(GenerationParams(n_patches=6, seed=8))
        assert snapshot(a) != snapshot(b)

    def test_keyword_arguments(self):
        model = generate(n_patches=5, seed=11)
        assert isinstance(model, Model)
        assert len(model.inner) >= 5


class TestVariants:
    """Test settlement options."""

    def test_unwalled(self):
        model = generate(GenerationParams(n_patches=6, walls_needed=False, seed=5))

        assert model.wall is None
        assert model.border is not None
        assert not model.border.real
        assert model.border.towers == []
        assert not any(p.within_walls for p in model.inner)
        assert len(model.gates) >= 1

    def test_no_plaza(self):
        model = generate(GenerationParams(n_patches=6, plaza_needed=False, seed=5))

        assert model.plaza is None
        for street in model.streets:
            assert street.last() is model.center

    def test_no_citadel(self):
        model = generate(GenerationParams(n_patches=6, citadel_needed=False, seed=5))
        assert model.citadel is None
        assert not any(isinstance(p.ward, Castle) for p in model.patches)

    def test_road_bearings_limit_gates(self):
        params = GenerationParams.from_population(3000, road_bearings=[0, 180], seed=21)
        model = generate(params)
        assert 1 <= len(model.border.gates) <= params.max_gates

    def test_waterfront(self):
        params = GenerationParams.from_population(
            3000, water_bearing=90, harbour_size="large", seed=4
        )
        model = generate(params)

        assert len(model.waterbody) > 0
        assert not any(w in model.patches for w in model.waterbody)
        assert not any(w.within_city for w in model.waterbody)

        wall = model.wall
        for i, (v0, v1) in enumerate(wall.shape.edges()):
            if any(w.shape.find_edge(v1, v0) != -1 for w in model.waterbody):
                assert not wall.segments[i]

        if model.harbour is not None:
            assert isinstance(model.harbour.ward, Harbour)
            assert any(w.shape.borders(model.harbour.shape) for w in model.waterbody)

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_tiny_walled_town_grows_outskirts(self, seed):
        model = generate(GenerationParams(n_patches=4, citadel_needed=False, seed=seed))

        outskirts = [
            p for p in model.patches
            if p not in model.inner and isinstance(p.ward, GateWard)
        ]
        assert len(outskirts) > 0
        assert all(p.within_city for p in outskirts)

    def test_five_patch_town_has_no_outskirts(self):
        model = generate(GenerationParams(n_patches=5, citadel_needed=False, seed=2))
        assert not any(
            isinstance(p.ward, GateWard) for p in model.patches if p not in model.inner
        )


class TestRetries:
    """Test the retry loop around structural failures."""

    def test_exhaustion(self, monkeypatch):
        def always_fails(self):
            raise BadWallShapeError()

        monkeypatch.setattr(Model, "_build_walls", always_fails)
        with pytest.raises(GenerationError) as info:
            generate(GenerationParams(n_patches=4, seed=1))

        assert info.value.attempts == model_module.MAX_ATTEMPTS
        assert isinstance(info.value.__cause__, BadWallShapeError)

    def test_recovers_after_failure(self, monkeypatch):
        original = Model._build_walls
        calls = []

        def flaky(self):
            calls.append(self.rng.get_seed())
            if len(calls) == 1:
                raise BadWallShapeError()
            original(self)

        monkeypatch.setattr(Model, "_build_walls", flaky)
        model = generate(GenerationParams(n_patches=6, seed=7))

        assert len(calls) >= 2
        assert calls[0] != calls[1], "the random stream is not rewound"
        assert model.border is not None

    def test_other_errors_propagate(self, monkeypatch):
        def broken(self):
            raise KeyError("bug")

        monkeypatch.setattr(Model, "_build_walls", broken)
        with pytest.raises(KeyError):
            generate(GenerationParams(n_patches=4, seed=1))

    def test_plain_value_errors_are_not_retried(self, monkeypatch):
        calls = []

        def broken(self):
            calls.append(1)
            [].remove(self)

        monkeypatch.setattr(Model, "_build_walls", broken)
        with pytest.raises(ValueError):
            generate(GenerationParams(n_patches=4, seed=1))
        assert len(calls) == 1

    def test_zero_division_is_retried(self, monkeypatch):
        original = Model._build_walls
        calls = []

        def degenerate(self):
            calls.append(1)
            if len(calls) == 1:
                raise ZeroDivisionError("float division by zero")
            original(self)

        monkeypatch.setattr(Model, "_build_walls", degenerate)
        model = generate(GenerationParams(n_patches=6, seed=7))

        assert len(calls) >= 2
        assert model.border is not None
