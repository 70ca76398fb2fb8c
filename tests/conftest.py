"""
Shared fixtures for the settlement generator tests.
"""

import pytest

from settlement_generator import GenerationParams, Model, Patch, Point, Polygon, Random


@pytest.fixture
def rng():
    """Seeded generator so every test sees the same stream."""
    return Random(12345)


@pytest.fixture
def square():
    """Counter-clockwise 10x10 square centred on the origin."""
    return Polygon.rect(10, 10)


@pytest.fixture
def grid_model():
    """
    Factory for a model whose patches are a square grid sharing points.

    Cells are ``size`` wide and counter-clockwise; ``cells`` maps (i, j) to
    the patch with its lower-left corner at grid point (i, j) and ``points``
    maps (i, j) to the shared Point objects.
    """

    def build(n=4, size=1.0, seed=1, **flags):
        points = {
            (i, j): Point(i * size, j * size)
            for i in range(n + 1)
            for j in range(n + 1)
        }
        cells = {}
        for i in range(n):
            for j in range(n):
                cells[(i, j)] = Patch([
                    points[(i, j)],
                    points[(i + 1, j)],
                    points[(i + 1, j + 1)],
                    points[(i, j + 1)],
                ])

        model = Model(GenerationParams(n_patches=4, seed=seed, **flags))
        model.patches = list(cells.values())
        model.center = Point(n * size / 2, n * size / 2)
        return model, cells, points

    return build


@pytest.fixture(scope="module")
def town():
    """A small walled town with plaza and citadel."""
    params = GenerationParams.from_population(
        500, walls_needed=True, plaza_needed=True, seed=42
    )
    return Model(params).generate()
