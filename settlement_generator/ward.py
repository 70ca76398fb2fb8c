"""
Ward classes representing different city districts
"""
import math
from enum import Enum

from . import cutter
from .math_utils import distance2line, interpolate as geom_interpolate, scalar
from .polygon import Polygon


class WardType(str, Enum):
    CRAFTSMEN = "craftsmen"
    MERCHANT = "merchant"
    CATHEDRAL = "cathedral"
    SLUM = "slum"
    PATRICIATE = "patriciate"
    ADMINISTRATION = "administration"
    MILITARY = "military"
    GATE = "gate"
    MARKET = "market"
    CASTLE = "castle"
    PARK = "park"
    FARM = "farm"
    HARBOUR = "harbour"
    EMPTY = "empty"


MAIN_STREET = 2.0
REGULAR_STREET = 1.0
ALLEY = 0.6


def _longest_edge(poly):
    """First vertex of the longest edge"""
    return poly.min(lambda v: -poly.vector(v).length)


def create_alleys(poly, rng, min_sq, grid_chaos, size_chaos, empty_prob=0.04, split=True):
    """
    Recursively bisect a block into building lots.

    Each cut crosses the longest edge; grid_chaos spreads the cut position
    and angle, size_chaos spreads the lot size around min_sq. With split set
    the cut leaves an alley between the halves.
    """
    if len(poly) < 3 or poly.square <= 0:
        return []

    v = _longest_edge(poly)

    spread = 0.8 * grid_chaos
    ratio = (1 - spread) / 2 + rng.float() * spread

    # Small blocks are cut straight
    angle_spread = math.pi / 6 * grid_chaos * (0.0 if poly.square < min_sq * 4 else 1.0)
    b = (rng.float() - 0.5) * angle_spread

    halves = cutter.bisect(poly, v, ratio, b, ALLEY if split else 0.0)
    if len(halves) < 2:
        return [poly] if len(poly) >= 4 else []

    buildings = []
    for half in halves:
        if half.square < min_sq * math.pow(2, 4 * size_chaos * (rng.float() - 0.5)):
            if len(half) >= 4 and not rng.bool(empty_prob):
                buildings.append(half)
        else:
            buildings.extend(create_alleys(
                half, rng, min_sq, grid_chaos, size_chaos, empty_prob,
                half.square > min_sq / (rng.float() * rng.float())
            ))
    return buildings


def create_ortho_building(poly, rng, min_block_sq, fill):
    """
    Slice a block into rectangular-ish buildings along two orthogonal axes.

    Pieces smaller than about min_block_sq are kept with probability fill.
    """

    def slice_block(p, c1, c2):
        v0 = _longest_edge(p)
        v1 = p.next(v0)
        v = v1 - v0

        ratio = 0.4 + rng.float() * 0.2
        p1 = geom_interpolate(v0, v1, ratio)

        # Cut across the longest edge
        if abs(scalar(v.x, v.y, c1.x, c1.y)) < abs(scalar(v.x, v.y, c2.x, c2.y)):
            c = c1
        else:
            c = c2

        halves = p.cut(p1, p1 + c)
        if len(halves) < 2:
            return [p]

        buildings = []
        for half in halves:
            if half.square < min_block_sq * math.pow(2, rng.normal() * 2 - 1):
                if rng.bool(fill):
                    buildings.append(half)
            else:
                buildings.extend(slice_block(half, c1, c2))
        return buildings

    if min_block_sq <= 0 or poly.square < min_block_sq:
        return [poly]

    c1 = poly.vector(_longest_edge(poly))
    c2 = c1.rotate90()
    for _ in range(100):
        blocks = slice_block(poly, c1, c2)
        if len(blocks) > 0:
            return blocks
    return [poly]


class Ward:
    """Base ward class"""

    ward_type = WardType.EMPTY

    MAIN_STREET = MAIN_STREET
    REGULAR_STREET = REGULAR_STREET
    ALLEY = ALLEY

    # Static scorer f(model, patch), lower is better; None means any patch will do
    rate_location = None

    def __init__(self, model, patch):
        self.model = model
        self.patch = patch
        self.geometry = []

    def __repr__(self):
        return f"{type(self).__name__}({len(self.geometry)} buildings)"

    @property
    def rng(self):
        return self.model.rng

    def create_geometry(self):
        self.geometry = []

    def get_label(self):
        return None

    def get_city_block(self):
        """Patch shape inset by half the width of the street along each edge"""
        inset_dist = []
        model = self.model
        inner_patch = model.wall is None or self.patch.within_walls

        for v0, v1 in self.patch.shape.edges():
            if model.wall is not None and model.wall.borders_by(self.patch, v0, v1):
                inset_dist.append(MAIN_STREET / 2)
                continue

            on_street = inner_patch and (
                model.plaza is not None and model.plaza.shape.find_edge(v1, v0) != -1
            )
            if not on_street:
                on_street = any(
                    street.contains(v0) and street.contains(v1) for street in model.arteries
                )
            if on_street:
                inset_dist.append(MAIN_STREET / 2)
            else:
                inset_dist.append((REGULAR_STREET if inner_patch else ALLEY) / 2)

        if self.patch.shape.is_convex():
            return self.patch.shape.shrink(inset_dist)
        return self.patch.shape.buffer(inset_dist)

    def filter_outskirts(self):
        """Thin out buildings far from roads and from the built-up area"""
        populated_edges = []
        shape = self.patch.shape

        def add_edge(v1, v2, factor=1.0):
            dx = v2.x - v1.x
            dy = v2.y - v1.y
            d = max(
                (0.0 if (v is v1 or v is v2) else distance2line(v1.x, v1.y, dx, dy, v.x, v.y)) * factor
                for v in shape.vertices
            )
            populated_edges.append((v1.x, v1.y, dx, dy, d))

        for v1, v2 in shape.edges():
            on_road = any(
                street.contains(v1) and street.contains(v2) for street in self.model.arteries
            )
            if on_road:
                add_edge(v1, v2, 1.0)
            else:
                n = self.model.get_neighbour(self.patch, v1)
                if n is not None and n.within_city:
                    add_edge(v1, v2, 1.0 if self.model.is_enclosed(n) else 0.4)

        density = []
        for v in shape.vertices:
            if v in self.model.gates:
                density.append(1.0)
            elif all(p.within_city for p in self.model.patch_by_vertex(v)):
                density.append(2 * self.rng.float())
            else:
                density.append(0.0)

        kept = []
        for building in self.geometry:
            min_dist = 1.0
            for x, y, dx, dy, d in populated_edges:
                if d <= 0:
                    continue
                for v in building.vertices:
                    dist = distance2line(x, y, dx, dy, v.x, v.y) / d
                    if dist < min_dist:
                        min_dist = dist

            weights = shape.interpolate(building.center)
            p = sum(density[j] * weights[j] for j in range(len(weights)))
            min_dist = min_dist / p if p > 0 else float('inf')

            if self.rng.fuzzy(1) > min_dist:
                kept.append(building)
        self.geometry = kept


class EmptyWard(Ward):
    """Countryside without buildings"""


class CommonWard(Ward):
    """Ward of densely packed buildings separated by alleys"""

    def __init__(self, model, patch, min_sq, grid_chaos, size_chaos, empty_prob=0.04):
        super().__init__(model, patch)
        self.min_sq = min_sq
        self.grid_chaos = grid_chaos
        self.size_chaos = size_chaos
        self.empty_prob = empty_prob

    def create_geometry(self):
        block = self.get_city_block()
        self.geometry = create_alleys(
            block, self.rng, self.min_sq, self.grid_chaos, self.size_chaos, self.empty_prob
        )

        # No triangular buildings in unwalled towns
        if self.model.wall is None:
            self.geometry = [b for b in self.geometry if len(b) >= 4]

        if not self.model.is_enclosed(self.patch):
            self.filter_outskirts()


class CraftsmenWard(CommonWard):
    ward_type = WardType.CRAFTSMEN

    def __init__(self, model, patch):
        rng = model.rng
        super().__init__(
            model, patch,
            10 + 80 * rng.float() * rng.float(),
            0.5 + rng.float() * 0.2, 0.6
        )

    def get_label(self):
        return "Craftsmen"


def _plaza_center(model):
    return model.plaza.shape.center if model.plaza is not None else model.center


class MerchantWard(CommonWard):
    ward_type = WardType.MERCHANT

    def __init__(self, model, patch):
        rng = model.rng
        super().__init__(
            model, patch,
            50 + 60 * rng.float() * rng.float(),
            0.5 + rng.float() * 0.3, 0.7,
            0.15
        )

    @staticmethod
    def rate_location(model, patch):
        # As close to the plaza as possible
        return patch.shape.distance(_plaza_center(model))

    def get_label(self):
        return "Merchant"


class Slum(CommonWard):
    ward_type = WardType.SLUM

    def __init__(self, model, patch):
        rng = model.rng
        super().__init__(
            model, patch,
            10 + 30 * rng.float() * rng.float(),
            0.6 + rng.float() * 0.4, 0.8,
            0.03
        )

    @staticmethod
    def rate_location(model, patch):
        # As far from the plaza as possible
        return -patch.shape.distance(_plaza_center(model))

    def get_label(self):
        return "Slum"


class PatriciateWard(CommonWard):
    ward_type = WardType.PATRICIATE

    def __init__(self, model, patch):
        rng = model.rng
        super().__init__(
            model, patch,
            80 + 30 * rng.float() * rng.float(),
            0.5 + rng.float() * 0.3, 0.8,
            0.2
        )

    @staticmethod
    def rate_location(model, patch):
        # Next to a park, away from slums
        rate = 0
        for p in model.patches:
            if p.ward is not None and p.shape.borders(patch.shape):
                if isinstance(p.ward, Park):
                    rate -= 1
                elif isinstance(p.ward, Slum):
                    rate += 1
        return rate

    def get_label(self):
        return "Patriciate"


class AdministrationWard(CommonWard):
    ward_type = WardType.ADMINISTRATION

    def __init__(self, model, patch):
        rng = model.rng
        super().__init__(
            model, patch,
            80 + 30 * rng.float() * rng.float(),
            0.1 + rng.float() * 0.3, 0.3
        )

    @staticmethod
    def rate_location(model, patch):
        # Overlooking the plaza, or as close to it as possible
        if model.plaza is not None:
            if patch.shape.borders(model.plaza.shape):
                return 0
            return patch.shape.distance(model.plaza.shape.center)
        return patch.shape.distance(model.center)

    def get_label(self):
        return "Administration"


class GateWard(CommonWard):
    ward_type = WardType.GATE

    def __init__(self, model, patch):
        rng = model.rng
        super().__init__(
            model, patch,
            10 + 50 * rng.float() * rng.float(),
            0.5 + rng.float() * 0.3, 0.7
        )

    def get_label(self):
        return "Gate"


class MilitaryWard(Ward):
    """Barracks: regular grid with open squares"""

    ward_type = WardType.MILITARY

    def create_geometry(self):
        block = self.get_city_block()
        if block.square <= 0:
            self.geometry = []
            return
        rng = self.rng
        self.geometry = create_alleys(
            block, rng,
            math.sqrt(block.square) * (1 + rng.float()),
            0.1 + rng.float() * 0.3, 0.3,
            0.25
        )

    @staticmethod
    def rate_location(model, patch):
        # Next to the citadel or the walls
        if model.citadel is not None and model.citadel.shape.borders(patch.shape):
            return 0
        if model.wall is not None and model.wall.borders(patch):
            return 1
        return 0 if (model.citadel is None and model.wall is None) else float("inf")

    def get_label(self):
        return "Military"


class Cathedral(Ward):
    ward_type = WardType.CATHEDRAL

    def create_geometry(self):
        block = self.get_city_block()
        if self.rng.bool(0.4):
            self.geometry = cutter.ring(block, 2 + self.rng.float() * 4)
        else:
            self.geometry = create_ortho_building(block, self.rng, 50, 0.8)

    @staticmethod
    def rate_location(model, patch):
        # Overlooking the plaza, or as close to it as possible
        if model.plaza is not None and patch.shape.borders(model.plaza.shape):
            return -1 / patch.shape.square
        return patch.shape.distance(_plaza_center(model)) * patch.shape.square

    def get_label(self):
        return "Temple"


class Market(Ward):
    """Open square with a statue or a fountain"""

    ward_type = WardType.MARKET

    def create_geometry(self):
        rng = self.rng
        statue = rng.bool(0.6)
        offset = statue or rng.bool(0.3)

        v0 = v1 = None
        if statue or offset:
            length = -1.0
            for p0, p1 in self.patch.shape.edges():
                if p0.distance(p1) > length:
                    length = p0.distance(p1)
                    v0, v1 = p0, p1

        if statue:
            obj = Polygon.rect(1 + rng.float(), 1 + rng.float())
            obj.rotate(math.atan2(v1.y - v0.y, v1.x - v0.x))
        else:
            obj = Polygon.circle(1 + rng.float())

        if offset:
            gravity = geom_interpolate(v0, v1)
            obj.offset(geom_interpolate(self.patch.shape.centroid, gravity, 0.2 + rng.float() * 0.4))
        else:
            obj.offset(self.patch.shape.centroid)

        self.geometry = [obj]

    @staticmethod
    def rate_location(model, patch):
        # One market should not touch another
        for p in model.inner:
            if isinstance(p.ward, Market) and p.shape.borders(patch.shape):
                return float("inf")

        # Not much larger than the plaza
        if model.plaza is not None:
            return patch.shape.square / model.plaza.shape.square
        return patch.shape.distance(model.center)

    def get_label(self):
        return "Market"


class Castle(Ward):
    """Citadel with its own wall"""

    ward_type = WardType.CASTLE

    def __init__(self, model, patch):
        super().__init__(model, patch)
        from .curtain_wall import CurtainWall

        reserved = [
            v for v in patch.shape.vertices
            if any(not p.within_city for p in model.patch_by_vertex(v)) or
            any(w.shape.contains(v) for w in model.waterbody)
        ]
        self.wall = CurtainWall(True, model, [patch], reserved, model.rng)

    def create_geometry(self):
        block = self.patch.shape.shrink_eq(MAIN_STREET * 2)
        if block.square <= 0:
            self.geometry = []
            return
        self.geometry = create_ortho_building(block, self.rng, math.sqrt(block.square) * 4, 0.6)

    def get_label(self):
        return "Castle"


class Park(Ward):
    ward_type = WardType.PARK

    def create_geometry(self):
        block = self.get_city_block()
        if block.compactness >= 0.7:
            self.geometry = cutter.radial(block, None, ALLEY)
        else:
            self.geometry = cutter.semi_radial(block, None, ALLEY)

    def get_label(self):
        return "Park"


class Farm(Ward):
    """A single farmhouse somewhere in the field"""

    ward_type = WardType.FARM

    def create_geometry(self):
        rng = self.rng
        housing = Polygon.rect(4, 4)
        pos = geom_interpolate(
            rng.choice(self.patch.shape.vertices),
            self.patch.shape.centroid,
            0.3 + rng.float() * 0.4
        )
        housing.rotate(rng.float() * math.pi)
        housing.offset(pos)

        self.geometry = create_ortho_building(housing, rng, 8, 0.5)

    def get_label(self):
        return "Farm"


class Harbour(Ward):
    """
    Waterfront ward: warehouses on land and piers reaching into the water.

    Piers are kept apart from the buildings in ``piers``.
    """

    ward_type = WardType.HARBOUR

    def __init__(self, model, patch, large=True):
        super().__init__(model, patch)
        self.large = large
        self.piers = []

    def create_geometry(self):
        self._create_warehouses()
        self._create_piers()

    def _create_warehouses(self):
        rng = self.rng
        block = self.get_city_block()
        if self.large:
            min_sq = 50 + rng.float() * 20
            grid_chaos = 0.15 + rng.float() * 0.10
        else:
            min_sq = 40 + rng.float() * 15
            grid_chaos = 0.20 + rng.float() * 0.10
        self.geometry = create_alleys(block, rng, min_sq, grid_chaos, 0.3, 0.02)

    def _waterfront(self):
        """(v0, v1, water patch) for every edge shared with the water"""
        edges = []
        for v0, v1 in self.patch.shape.edges():
            for water in self.model.waterbody:
                if water.shape.find_edge(v1, v0) != -1:
                    edges.append((v0, v1, water))
                    break
        return edges

    def _create_piers(self):
        self.piers = []
        edges = self._waterfront()
        if len(edges) == 0:
            return

        rng = self.rng
        total = sum(v0.distance(v1) for v0, v1, _ in edges)
        if self.large:
            count = 3 + rng.int(0, 2)
            length = 8 + rng.float() * 12
            width = 1.5 + rng.float() * 1.0
        else:
            count = 1 + rng.int(0, 1)
            length = 5 + rng.float() * 6
            width = 1.0 + rng.float() * 0.5

        spacing = total / (count + 1)
        for i in range(count):
            target = spacing * (i + 1)
            accumulated = 0.0
            for v0, v1, water in edges:
                edge_len = v0.distance(v1)
                if edge_len > 0 and accumulated + edge_len >= target:
                    base = geom_interpolate(v0, v1, (target - accumulated) / edge_len)
                    direction = v1 - v0
                    normal = direction.rotate90().norm()
                    # Point the pier towards the water
                    if normal.dot(water.shape.center - base) <= 0:
                        normal = -normal

                    along = direction.norm(width / 2)
                    extend = normal * length
                    p1 = base - along
                    p2 = base + along
                    self.piers.append(Polygon([p1, p2, p2 + extend, p1 + extend]))
                    break
                accumulated += edge_len

    @staticmethod
    def rate_location(model, patch):
        # Only patches on the water, as central as possible
        for water in model.waterbody:
            if water.shape.borders(patch.shape):
                return patch.shape.distance(model.center)
        return float("inf")

    def get_label(self):
        return "Harbour" if self.large else "Dock"


def _round(x):
    return int(math.floor(x + 0.5))


def build_ward_distribution(params):
    """
    Ward classes to hand out to the inner patches, in order.

    Proportions follow the classic town mix (about 46% craftsmen, 14% slums,
    6% each of merchants, patricians and markets) adjusted by the settlement
    flags.
    """
    n = params.n_patches
    wards = []
    wards += [CraftsmenWard] * max(3, _round(n * 0.46))
    wards += [Slum] * max(1, _round(n * (0.22 if params.shanty_needed else 0.14)))
    wards += [MerchantWard] * max(1, _round(n * 0.06))
    wards += [PatriciateWard] * _round(n * 0.06)
    wards += [Market] * _round(n * 0.06)
    wards += [AdministrationWard] * _round(n * (0.08 if params.capital_needed else 0.03))
    wards.append(MilitaryWard)
    if params.temple_needed:
        wards.append(Cathedral)
    if n >= 10:
        wards.append(Park)
    return wards
