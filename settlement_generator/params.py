"""
Generation parameters and helpers deriving them from a population figure
"""
import math
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .point import Point


def _round(x: float) -> int:
    return int(math.floor(x + 0.5))


def population_to_patches(population: int) -> int:
    """
    Number of inner patches for a population.

    <100 (hamlet) 3-4, <1000 (village) 5-9, <5000 (town) 10-14,
    <20k (city) 15-24, <100k (large city) 25-40, above that 40-50.
    """
    if population < 100:
        return 3 + _round(population / 100)
    if population < 1000:
        return 5 + _round((population - 100) / 900 * 4)
    if population < 5000:
        return 10 + _round((population - 1000) / 4000 * 4)
    if population < 20000:
        return 15 + _round((population - 5000) / 15000 * 9)
    if population < 100000:
        return 25 + _round((population - 20000) / 80000 * 15)
    return 40 + min(10, _round((population - 100000) / 200000 * 10))


def population_to_max_gates(population: int) -> int:
    """Maximum number of border gates for a population"""
    if population < 1000:
        return 2
    if population < 5000:
        return 3
    if population < 20000:
        return 4
    if population < 100000:
        return 5
    return 6


def bearing_to_direction(bearing: float) -> Point:
    """Unit vector for a compass bearing in degrees (0 = north, clockwise)"""
    rad = math.radians(bearing)
    return Point(math.sin(rad), -math.cos(rad))


class GenerationParams(BaseModel):
    """Settlement generation options."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    n_patches: int = Field(default=15, ge=1, description="Number of inner patches")
    plaza_needed: bool = Field(default=True, description="Central market plaza")
    citadel_needed: bool = Field(default=True, description="Walled citadel")
    walls_needed: bool = Field(default=True, description="City walls")
    temple_needed: bool = Field(default=False, description="Main temple ward")
    shanty_needed: bool = Field(default=False, description="Larger share of slums")
    capital_needed: bool = Field(
        default=False, description="Larger share of administration wards"
    )
    seed: int = Field(default=1, description="Random seed")

    # Surroundings
    road_entry_points: Optional[List[Point]] = Field(
        default=None, description="Unit directions of approaching roads"
    )
    max_gates: Optional[int] = Field(
        default=None, ge=1, description="Maximum number of border gates"
    )
    water_direction: Optional[Point] = Field(
        default=None, description="Unit direction towards open water"
    )
    harbour_size: Optional[Literal["large", "small"]] = Field(
        default=None, description="Harbour on the waterfront"
    )

    @classmethod
    def from_population(
        cls,
        population: int,
        road_bearings: Optional[List[float]] = None,
        water_bearing: Optional[float] = None,
        **flags,
    ) -> "GenerationParams":
        """Parameters for a settlement of the given population.

        Bearings are compass degrees; the remaining keyword arguments are
        passed through as fields.
        """
        values = {
            "n_patches": population_to_patches(population),
            "max_gates": population_to_max_gates(population),
        }
        if road_bearings:
            values["road_entry_points"] = [bearing_to_direction(b) for b in road_bearings]
        if water_bearing is not None:
            values["water_direction"] = bearing_to_direction(water_bearing)
        values.update(flags)
        return cls(**values)
