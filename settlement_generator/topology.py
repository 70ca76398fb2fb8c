"""
Street graph built from the patch boundaries of a settlement
"""
from .graph import Graph


class Topology:
    """
    One graph node per distinct patch vertex, linked along patch edges.

    Wall and citadel vertices are impassable except at gates; no node is
    created for them. Nodes off the settlement border are classified as
    inner (on a within-city patch) or outer.
    """

    def __init__(self, model):
        self.model = model
        self.graph = Graph()
        self.pt2node = {}
        self.node2pt = {}
        self.inner = []
        self.outer = []

        blocked = []
        if model.citadel is not None:
            blocked.extend(model.citadel.shape.vertices)
        if model.wall is not None:
            blocked.extend(model.wall.shape.vertices)
        gates = set(model.gates)
        self.blocked = {p for p in blocked if p not in gates}

        border = model.border.shape

        for patch in model.patches:
            shape = patch.shape
            if len(shape) == 0:
                continue

            v1 = shape.last()
            n1 = self._process_point(v1)

            for v in shape.vertices:
                v0, v1 = v1, v
                n0, n1 = n1, self._process_point(v1)

                if n0 is not None and not border.contains(v0):
                    self._classify(n0, patch.within_city)
                if n1 is not None and not border.contains(v1):
                    self._classify(n1, patch.within_city)

                if n0 is not None and n1 is not None:
                    n0.link(n1, v0.distance(v1))

    def _classify(self, node, within_city):
        target = self.inner if within_city else self.outer
        if node not in target:
            target.append(node)

    def _process_point(self, v):
        if v in self.blocked:
            return None
        node = self.pt2node.get(v)
        if node is None:
            node = self.graph.add()
            self.pt2node[v] = node
            self.node2pt[node] = v
        return node

    def build_path(self, from_pt, to_pt, exclude=None):
        """Points of the cheapest route, or None if there is none"""
        from_node = self.pt2node.get(from_pt)
        to_node = self.pt2node.get(to_pt)
        if from_node is None or to_node is None:
            return None

        path = self.graph.a_star(from_node, to_node, exclude)
        if path is None:
            return None
        return [self.node2pt[node] for node in path]
