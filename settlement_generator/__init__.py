"""
Fortified settlement generator.
Procedural street and building layout of a medieval town.
"""

__version__ = "1.0.0"

# Core classes
from .model import Model, generate
from .params import (
    GenerationParams,
    bearing_to_direction,
    population_to_max_gates,
    population_to_patches,
)
from .errors import (
    BadCitadelShapeError,
    BadWallShapeError,
    GenerationError,
    StreetRoutingError,
    StructuralError,
)
from .patch import Patch
from .polygon import Polygon
from .point import Point
from .voronoi import Voronoi
from .graph import Graph, Node
from .curtain_wall import CurtainWall
from .topology import Topology
from .random import Random

# Ward types
from .ward import (
    Ward,
    WardType,
    EmptyWard,
    CommonWard,
    CraftsmenWard,
    MerchantWard,
    Slum,
    Market,
    Castle,
    GateWard,
    AdministrationWard,
    MilitaryWard,
    PatriciateWard,
    Park,
    Cathedral,
    Farm,
    Harbour,
    build_ward_distribution,
    create_alleys,
    create_ortho_building,
)

__all__ = [
    # Core
    'Model',
    'generate',
    'GenerationParams',
    'bearing_to_direction',
    'population_to_max_gates',
    'population_to_patches',
    'Patch',
    'Polygon',
    'Point',
    'Voronoi',
    'Graph',
    'Node',
    'CurtainWall',
    'Topology',
    'Random',
    # Errors
    'StructuralError',
    'BadCitadelShapeError',
    'BadWallShapeError',
    'StreetRoutingError',
    'GenerationError',
    # Wards
    'Ward',
    'WardType',
    'EmptyWard',
    'CommonWard',
    'CraftsmenWard',
    'MerchantWard',
    'Slum',
    'Market',
    'Castle',
    'GateWard',
    'AdministrationWard',
    'MilitaryWard',
    'PatriciateWard',
    'Park',
    'Cathedral',
    'Farm',
    'Harbour',
    'build_ward_distribution',
    'create_alleys',
    'create_ortho_building',
]
