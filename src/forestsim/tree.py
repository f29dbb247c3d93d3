"""
Tree class representing an individual tree in a forest.
Implements compound annual height growth and sapling planting.
"""
from datetime import date
from typing import Dict, Any, Optional, Union

import numpy as np

from .species import TreeSpecies
from .exceptions import InvalidDataError

# Lower bounds for randomly planted saplings
MIN_HEIGHT_TO_PLANT = 10.0
MIN_GROWTH_RATE = 10.0


class Tree:
    def __init__(self, species: Union[str, TreeSpecies], planting_year: int,
                 height: float, growth_rate: float):
        """Initialize a tree.

        Negative heights and growth rates are accepted as given.

        Args:
            species: Species name (case-insensitive) or TreeSpecies member
            planting_year: Calendar year the tree was planted
            height: Current height (feet)
            growth_rate: Annual height growth (percent per year)

        Raises:
            InvalidSpeciesError: If the species name is not recognized
        """
        self.species = TreeSpecies.from_string(species)
        self.planting_year = int(planting_year)
        self.height = float(height)
        self.growth_rate = float(growth_rate)

    @classmethod
    def plant_random(cls, rng: np.random.Generator, year: Optional[int] = None,
                     min_height: float = MIN_HEIGHT_TO_PLANT,
                     min_growth_rate: float = MIN_GROWTH_RATE) -> 'Tree':
        """Plant a sapling with random species, height and growth rate.

        Height is drawn from [min_height, 2 * min_height) and growth rate
        from [min_growth_rate, 2 * min_growth_rate).

        Args:
            rng: Random generator supplying the draws
            year: Planting year (defaults to the current calendar year)
            min_height: Lower bound of the sapling height (feet)
            min_growth_rate: Lower bound of the growth rate (percent)

        Returns:
            Tree: New sapling
        """
        species = TreeSpecies.choose(rng)
        if year is None:
            year = date.today().year
        height = min_height + rng.random() * min_height
        growth_rate = min_growth_rate + rng.random() * min_growth_rate
        return cls(species, year, float(height), float(growth_rate))

    def grow(self, years: int = 1) -> None:
        """Grow the tree, compounding the growth rate once per year.

        Args:
            years: Number of years to grow (default: 1)
        """
        for _ in range(years):
            self.height += self.height * (self.growth_rate / 100.0)

    def describe(self) -> str:
        """Return ``"<SPECIES> <year> <height> <growth rate>"``."""
        return f"{self.species.value} {self.planting_year} {self.height:.2f} {self.growth_rate:.1f}"

    def format_row(self) -> str:
        """Return the column-aligned form used in forest listings."""
        return (f"{self.species.value:<6s} {self.planting_year:4d} "
                f"{self.height:6.2f}' {self.growth_rate:5.1f}%")

    def to_dict(self) -> Dict[str, Any]:
        """Convert tree to a plain dictionary."""
        return {
            'species': self.species.value,
            'planting_year': self.planting_year,
            'height': self.height,
            'growth_rate': self.growth_rate,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Tree':
        """Rebuild a tree from :meth:`to_dict` output.

        Raises:
            InvalidDataError: If keys are missing or values have the wrong type
            InvalidSpeciesError: If the species name is not recognized
        """
        if not isinstance(data, dict):
            raise InvalidDataError("tree record", f"expected a mapping, got {type(data).__name__}")

        missing = [key for key in ('species', 'planting_year', 'height', 'growth_rate')
                   if key not in data]
        if missing:
            raise InvalidDataError("tree record", f"missing keys {missing}")

        species = data['species']
        planting_year = data['planting_year']
        height = data['height']
        growth_rate = data['growth_rate']

        if not isinstance(species, str):
            raise InvalidDataError("tree record", f"species must be a string, got {species!r}")
        if isinstance(planting_year, bool) or not isinstance(planting_year, int):
            raise InvalidDataError("tree record", f"planting_year must be an integer, got {planting_year!r}")
        for key, value in (('height', height), ('growth_rate', growth_rate)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidDataError("tree record", f"{key} must be a number, got {value!r}")

        return cls(species, planting_year, height, growth_rate)

    def copy(self) -> 'Tree':
        return Tree(self.species, self.planting_year, self.height, self.growth_rate)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tree):
            return NotImplemented
        return (self.species == other.species
                and self.planting_year == other.planting_year
                and self.height == other.height
                and self.growth_rate == other.growth_rate)

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return (f"Tree(species={self.species.value!r}, planting_year={self.planting_year}, "
                f"height={self.height!r}, growth_rate={self.growth_rate!r})")
