"""
Model class - core settlement generation logic
"""
import math

import structlog

from .curtain_wall import CurtainWall
from .errors import (
    BadCitadelShapeError,
    BadWallShapeError,
    GenerationError,
    StreetRoutingError,
    StructuralError,
)
from .math_utils import angle_between, min_by
from .params import GenerationParams
from .patch import Patch
from .point import Point
from .polygon import Polygon
from .random import Random
from .topology import Topology
from .voronoi import Voronoi
from .ward import (
    Castle,
    EmptyWard,
    Farm,
    GateWard,
    Harbour,
    Market,
    Slum,
    build_ward_distribution,
)

logger = structlog.get_logger()

MAX_ATTEMPTS = 20

# Zero-area shapes left by junction merges divide by zero
RECOVERABLE_ERRORS = (StructuralError, ZeroDivisionError)

# Consecutive vertices of inner patches closer than this are merged
JUNCTION_THRESHOLD = 8

MIN_CITADEL_COMPACTNESS = 0.75

# Outer patches within this angle of the water direction are water
WATER_SPREAD = math.pi / 3


class Model:
    """
    A generated settlement.

    Build one with ``Model(params).generate()`` or ``generate(params)``.
    Keyword arguments are accepted in place of a GenerationParams instance.
    """

    def __init__(self, params=None, **kwargs):
        if params is None:
            params = GenerationParams(**kwargs)
        self.params = params
        self.rng = Random(params.seed)

        self.n_patches = params.n_patches
        self.plaza_needed = params.plaza_needed
        self.citadel_needed = params.citadel_needed
        self.walls_needed = params.walls_needed

        self._reset()

    def _reset(self):
        self.topology = None
        self.patches = []
        self.waterbody = []
        self.inner = []
        self.citadel = None
        self.plaza = None
        self.harbour = None
        self.center = Point(0, 0)
        self.border = None
        self.wall = None
        self.city_radius = 0.0
        self.gates = []
        self.arteries = []
        self.streets = []
        self.roads = []

    def generate(self):
        """Run the pipeline, retrying on structural failures"""
        logger.info("Generating settlement", n_patches=self.n_patches, seed=self.params.seed)

        last_error = None
        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                self._build()
            except RECOVERABLE_ERRORS as e:
                last_error = e
                logger.warning("Generation attempt failed", attempt=attempt, error=str(e))
                self._reset()
                continue

            logger.info(
                "Settlement generated",
                attempt=attempt,
                patches=len(self.patches),
                inner=len(self.inner),
                gates=len(self.gates),
                arteries=len(self.arteries),
            )
            return self

        raise GenerationError(MAX_ATTEMPTS) from last_error

    def _build(self):
        self.streets = []
        self.roads = []

        self._build_patches()
        self._optimize_junctions()
        self._build_water()
        self._build_walls()
        self._build_streets()
        self._create_wards()
        self._build_geometry()

    def _build_patches(self):
        """Voronoi patches around a spiral of seeds"""
        rng = self.rng
        sa = rng.float() * 2 * math.pi
        points = []
        for i in range(self.n_patches * 8):
            a = sa + math.sqrt(i) * 5
            r = 0 if i == 0 else 10 + i * (2 + rng.float())
            points.append(Point(math.cos(a) * r, math.sin(a) * r))

        voronoi = Voronoi.build(points)

        # Relax central wards
        for _ in range(3):
            seeds = sorted(voronoi.seeds, key=lambda p: p.length)
            to_relax = seeds[:3]
            if self.n_patches < len(seeds):
                to_relax.append(seeds[self.n_patches])
            voronoi = Voronoi.relax(voronoi, to_relax)

        voronoi.points.sort(key=lambda p: p.length)
        regions = voronoi.partitioning()

        self.patches = []
        self.inner = []

        for count, r in enumerate(regions):
            patch = Patch.from_region(r)
            self.patches.append(patch)

            if count == 0:
                self.center = min_by(patch.shape.vertices, lambda p: p.length)
                if self.plaza_needed:
                    self.plaza = patch
            elif count == self.n_patches and self.citadel_needed:
                self.citadel = patch
                self.citadel.within_city = True

            if count < self.n_patches:
                patch.within_city = True
                patch.within_walls = self.walls_needed
                self.inner.append(patch)

    def _build_water(self):
        direction = self.params.water_direction
        if direction is None:
            return

        bearing = direction.atan()
        land = []
        for patch in self.patches:
            if not patch.within_city and angle_between(patch.shape.center.atan(), bearing) < WATER_SPREAD:
                self.waterbody.append(patch)
            else:
                land.append(patch)
        self.patches = land

    def _optimize_junctions(self):
        """Merge vertices of inner patches that are too close to each other"""
        patches_to_optimize = self.inner if self.citadel is None else self.inner + [self.citadel]

        wards_to_clean = []
        for w in patches_to_optimize:
            index = 0
            while index < len(w.shape):
                v0 = w.shape[index]
                v1 = w.shape[(index + 1) % len(w.shape)]

                if v0 is not v1 and v0.distance(v1) < JUNCTION_THRESHOLD:
                    for w1 in self.patch_by_vertex(v1):
                        if w1 is not w:
                            w1.shape[w1.shape.index_of(v1)] = v0
                            wards_to_clean.append(w1)

                    v0.add_eq(v1)
                    v0.scale_eq(0.5)
                    del w.shape.vertices[w.shape.index_of(v1)]
                else:
                    index += 1

        # Remove duplicate vertices
        for w in wards_to_clean:
            i = 0
            while i < len(w.shape):
                dup = w.shape.index_of(w.shape[i], i + 1)
                if dup != -1:
                    del w.shape.vertices[dup]
                else:
                    i += 1

    def _build_walls(self):
        reserved = list(self.citadel.shape.vertices) if self.citadel is not None else []
        for water in self.waterbody:
            reserved.extend(water.shape.vertices)

        self.border = CurtainWall(
            self.walls_needed, self, self.inner, reserved, self.rng,
            approaches=self.params.road_entry_points,
            max_gates=self.params.max_gates,
        )
        self.border.mark_waterfront(self.waterbody)
        if self.walls_needed:
            self.wall = self.border
            self.wall.build_towers()

        radius = self.border.get_radius()
        self.patches = [p for p in self.patches if p.shape.distance(self.center) < radius * 3]
        self.waterbody = [p for p in self.waterbody if p.shape.distance(self.center) < radius * 3]

        self.gates = list(self.border.gates)

        if self.citadel is not None:
            castle = Castle(self, self.citadel)
            castle.wall.build_towers()
            self.citadel.ward = castle

            if self.citadel.shape.compactness < MIN_CITADEL_COMPACTNESS:
                raise BadCitadelShapeError()

            self.gates += castle.wall.gates

    def _build_streets(self):
        self.topology = Topology(self)

        for gate in self.gates:
            if self.plaza is not None:
                end = self.plaza.shape.min(lambda v: v.distance(gate))
            else:
                end = self.center

            street = self.topology.build_path(gate, end, self.topology.outer)
            if street is None:
                raise StreetRoutingError()
            self.streets.append(Polygon(street))

            if gate in self.border.gates:
                direction = gate.norm(1000)
                start = min_by(self.topology.node2pt.values(), lambda p: p.distance(direction))
                if start is not None:
                    road = self.topology.build_path(start, gate, self.topology.inner)
                    if road is not None:
                        self.roads.append(Polygon(road))

        self._tidy_up_roads()

        for artery in self.arteries:
            smoothed = artery.smooth_vertex_eq(3)
            for i in range(1, len(artery) - 1):
                artery[i].set(smoothed[i])

    def _tidy_up_roads(self):
        """Stitch the distinct segments of streets and roads into arteries"""
        segments = []

        def cut_to_segments(street):
            for i in range(1, len(street)):
                v0 = street[i - 1]
                v1 = street[i]

                # Segments along the plaza are not arteries
                if self.plaza is not None and self.plaza.shape.contains(v0) and self.plaza.shape.contains(v1):
                    continue

                if not any(s0 is v0 and s1 is v1 for s0, s1 in segments):
                    segments.append((v0, v1))

        for street in self.streets:
            cut_to_segments(street)
        for road in self.roads:
            cut_to_segments(road)

        self.arteries = []
        while len(segments) > 0:
            start, end = segments.pop()

            for artery in self.arteries:
                if artery[0] is end:
                    artery.vertices.insert(0, start)
                    break
                if artery.last() is start:
                    artery.append(end)
                    break
            else:
                self.arteries.append(Polygon([start, end]))

    def _create_wards(self):
        rng = self.rng
        unassigned = list(self.inner)

        if self.plaza is not None:
            self.plaza.ward = Market(self, self.plaza)
            unassigned.remove(self.plaza)

        if self.params.harbour_size is not None and self.waterbody:
            best = min_by(unassigned, lambda p: Harbour.rate_location(self, p))
            if best is not None and Harbour.rate_location(self, best) < float("inf"):
                best.ward = Harbour(self, best, self.params.harbour_size == "large")
                self.harbour = best
                unassigned.remove(best)

        # Gate wards
        for gate in self.border.gates:
            for patch in self.patch_by_vertex(gate):
                if patch.within_city and patch.ward is None and rng.bool(0.2 if self.wall is None else 0.5):
                    patch.ward = GateWard(self, patch)
                    unassigned.remove(patch)

        wards = build_ward_distribution(self.params)
        # Some randomness
        for _ in range(len(wards) // 10):
            index = rng.int(0, len(wards) - 1)
            wards[index], wards[index + 1] = wards[index + 1], wards[index]

        while len(unassigned) > 0:
            ward_class = wards.pop(0) if wards else Slum

            rate = ward_class.rate_location
            if rate is None:
                best = rng.choice(unassigned)
            else:
                best = min_by(unassigned, lambda p: rate(self, p))

            best.ward = ward_class(self, best)
            unassigned.remove(best)

        # Outskirts, always for tiny towns and never for five patches
        if self.wall is not None:
            chance = 1 / (self.n_patches - 5) if self.n_patches != 5 else 1.0
            for gate in self.wall.gates:
                if not rng.bool(chance):
                    for patch in self.patch_by_vertex(gate):
                        if patch.ward is None:
                            patch.within_city = True
                            patch.ward = GateWard(self, patch)

        # City radius and countryside
        self.city_radius = 0.0
        for patch in self.patches:
            if patch.within_city:
                for v in patch.shape:
                    self.city_radius = max(self.city_radius, v.length)
            elif patch.ward is None:
                if rng.bool(0.2) and patch.shape.compactness >= 0.7:
                    patch.ward = Farm(self, patch)
                else:
                    patch.ward = EmptyWard(self, patch)

    def _build_geometry(self):
        for patch in self.patches:
            if patch.ward is not None:
                patch.ward.create_geometry()

    def find_circumference(self, patches):
        """Outline of a group of patches, through their shared points"""
        if len(patches) == 0:
            return Polygon()
        if len(patches) == 1:
            return Polygon(patches[0].shape.vertices)

        a = []
        b = []
        for w1 in patches:
            for v0, v1 in w1.shape.edges():
                if not any(w2.shape.find_edge(v1, v0) != -1 for w2 in patches):
                    a.append(v0)
                    b.append(v1)

        result = Polygon()
        index = 0
        for _ in range(len(a)):
            result.append(a[index])
            index = next((i for i, v in enumerate(a) if v is b[index]), -1)
            if index <= 0:
                break
        if index != 0:
            raise BadWallShapeError()
        return result

    def patch_by_vertex(self, v):
        return [patch for patch in self.patches if patch.shape.contains(v)]

    def get_neighbour(self, patch, v):
        """Patch on the other side of the edge starting at v"""
        next_v = patch.shape.next(v)
        for p in self.patches:
            if p.shape.find_edge(next_v, v) != -1:
                return p
        return None

    def get_neighbours(self, patch):
        return [p for p in self.patches if p is not patch and p.shape.borders(patch.shape)]

    def is_enclosed(self, patch):
        """Inside the walls, or surrounded by the city"""
        return patch.within_city and (
            patch.within_walls or all(p.within_city for p in self.get_neighbours(patch))
        )


def generate(params=None, **kwargs):
    """Generate a settlement"""
    return Model(params, **kwargs).generate()
