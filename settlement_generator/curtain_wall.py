"""
CurtainWall class for city walls
"""
import structlog

from .errors import BadWallShapeError
from .math_utils import angle_between, max_by, min_by
from .patch import Patch
from .point import Point

logger = structlog.get_logger()


class CurtainWall:
    """
    Fortification around a group of patches.

    A virtual wall (real=False) is only the settlement perimeter: it has
    gates but no towers, and its vertices are not smoothed.
    """

    def __init__(self, real, model, patches, reserved, rng, approaches=None, max_gates=None):
        self.real = real
        self.patches = patches
        self.gates = []
        self.towers = []

        if len(patches) == 1:
            self.shape = patches[0].shape
        else:
            self.shape = model.find_circumference(patches)

            if real:
                smooth_factor = min(1, 40 / len(patches))
                smoothed = [
                    v if v in reserved else self.shape.smooth_vertex(v, smooth_factor)
                    for v in self.shape.vertices
                ]
                for v, p in zip(self.shape.vertices, smoothed):
                    v.set(p)

        self.segments = [real] * len(self.shape)
        self._build_gates(model, reserved, rng, approaches or [], max_gates)

        logger.debug(
            "Curtain wall built",
            real=real,
            vertices=len(self.shape),
            gates=len(self.gates),
        )

    def _build_gates(self, model, reserved, rng, approaches, max_gates):
        # Entrances are wall vertices shared by more than one enclosed patch
        if len(self.patches) > 1:
            entrances = [
                v for v in self.shape.vertices
                if v not in reserved and
                sum(1 for p in self.patches if p.shape.contains(v)) > 1
            ]
        else:
            entrances = [v for v in self.shape.vertices if v not in reserved]

        if len(entrances) == 0:
            raise BadWallShapeError()

        def full():
            return max_gates is not None and len(self.gates) >= max_gates

        center = model.center
        for direction in approaches:
            if full() or len(entrances) == 0:
                break
            bearing = direction.atan()
            gate = min_by(entrances, lambda v: angle_between((v - center).atan(), bearing))
            entrances = self._add_gate(model, reserved, entrances, entrances.index(gate))
            if len(entrances) < 3:
                break

        while len(entrances) > 0 and not full():
            if len(self.gates) > 0 and len(entrances) < 3:
                break
            index = rng.int(0, len(entrances))
            entrances = self._add_gate(model, reserved, entrances, index)

        if len(self.gates) == 0:
            raise BadWallShapeError()

        if self.real:
            for gate in self.gates:
                gate.set(self.shape.smooth_vertex(gate))

    def _add_gate(self, model, reserved, entrances, index):
        """Make entrances[index] a gate, return the entrances left for the next one"""
        gate = entrances[index]
        self.gates.append(gate)

        if self.real:
            self._split_outer_patch(model, reserved, gate)

        # Neighbouring entrances can't be gates
        n = len(entrances)
        dropped = {(index + k) % n for k in (-1, 0, 1)}
        return [v for i, v in enumerate(entrances) if i not in dropped]

    def _split_outer_patch(self, model, reserved, gate):
        """Split the patch outside the gate so a road can reach it"""
        outer_wards = [w for w in model.patch_by_vertex(gate) if w not in self.patches]
        if len(outer_wards) != 1:
            return
        outer = outer_wards[0]
        if len(outer.shape) <= 3 or outer is model.plaza:
            return

        wall_dir = self.shape.next(gate) - self.shape.prev(gate)
        out = Point(wall_dir.y, -wall_dir.x)

        def score(v):
            if self.shape.contains(v) or v in reserved:
                return float('-inf')
            d = v - gate
            if d.length == 0:
                return float('-inf')
            return d.dot(out) / d.length

        farthest = max_by(outer.shape.vertices, score)
        if score(farthest) == float('-inf'):
            return

        halves = outer.shape.split(gate, farthest)
        if len(halves) != 2 or any(len(half) < 3 for half in halves):
            return

        new_patches = []
        for half in halves:
            patch = Patch(half)
            patch.within_city = outer.within_city
            patch.within_walls = outer.within_walls
            new_patches.append(patch)

        for group in (model.patches, model.inner):
            if outer in group:
                idx = group.index(outer)
                group[idx:idx + 1] = new_patches

    def mark_waterfront(self, water):
        """Wall segments along water are not built"""
        for i, (v0, v1) in enumerate(self.shape.edges()):
            for patch in water:
                if patch.shape.find_edge(v1, v0) != -1 or patch.shape.find_edge(v0, v1) != -1:
                    self.segments[i] = False
                    break

    def build_towers(self):
        """Towers at every non-gate vertex next to a real segment"""
        self.towers = []
        if self.real:
            length = len(self.shape)
            for i, t in enumerate(self.shape.vertices):
                if t not in self.gates and (
                    self.segments[(i + length - 1) % length] or self.segments[i]
                ):
                    self.towers.append(t)

    def get_radius(self):
        """Distance from the origin to the farthest vertex"""
        radius = 0.0
        for v in self.shape.vertices:
            radius = max(radius, v.length)
        return radius

    def borders_by(self, patch, v0, v1):
        """Check if the edge v0->v1 of patch is a real wall segment"""
        if patch in self.patches:
            index = self.shape.find_edge(v0, v1)
        else:
            index = self.shape.find_edge(v1, v0)
        return index != -1 and self.segments[index]

    def borders(self, patch):
        """Check if wall borders patch"""
        within_walls = patch in self.patches
        length = len(self.shape)

        for i in range(length):
            if self.segments[i]:
                v0 = self.shape.vertices[i]
                v1 = self.shape.vertices[(i + 1) % length]
                if within_walls:
                    index = patch.shape.find_edge(v0, v1)
                else:
                    index = patch.shape.find_edge(v1, v0)
                if index != -1:
                    return True
        return False
