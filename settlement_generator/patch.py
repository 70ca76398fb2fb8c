"""
Patch class representing a city region
"""
from .polygon import Polygon


class Patch:
    """A cell of the settlement: shape, location flags and the ward built on it"""

    def __init__(self, vertices):
        if isinstance(vertices, Polygon):
            self.shape = vertices
        else:
            self.shape = Polygon(vertices)
        self.ward = None
        self.within_walls = False
        self.within_city = False

    def __repr__(self):
        label = self.ward.get_label() if self.ward is not None else None
        return f"Patch({len(self.shape)} vertices, ward={label})"

    @staticmethod
    def from_region(region):
        """Create patch from Voronoi region"""
        return Patch([tr.c for tr in region.vertices])
