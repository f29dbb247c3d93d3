"""
Tree species enumeration for type-safe species handling.

This module provides a TreeSpecies enum that inherits from (str, Enum) allowing
it to be used as a string where species names are expected, while providing
type safety and validation.

Usage:
    from forestsim.species import TreeSpecies

    species = TreeSpecies.from_string("birch")
    print(species.value)  # "BIRCH"

    if TreeSpecies.is_valid("Maple"):
        print("Valid species name")
"""

from enum import Enum
from typing import Optional

import numpy as np

from .exceptions import InvalidSpeciesError


def normalize_species_name(name: str) -> str:
    """Normalize a species name for lookup (trimmed, upper-case)."""
    return name.strip().upper()


class TreeSpecies(str, Enum):
    """
    Species that can be planted in a forest.

    Each member's value is the upper-case species name, which is also the
    form used in tree files, snapshots and display output.
    """

    BIRCH = "BIRCH"
    MAPLE = "MAPLE"
    FIR = "FIR"

    @classmethod
    def from_string(cls, name: str) -> "TreeSpecies":
        """
        Convert a species name to a TreeSpecies member.

        Args:
            name: Species name (case-insensitive, surrounding whitespace ignored)

        Returns:
            The corresponding TreeSpecies member

        Raises:
            InvalidSpeciesError: If the name is not a known species

        Example:
            >>> TreeSpecies.from_string("fir")
            <TreeSpecies.FIR: 'FIR'>
        """
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise InvalidSpeciesError(repr(name), cls.list_all_names())

        normalized = normalize_species_name(name)
        for member in cls:
            if member.value == normalized:
                return member

        raise InvalidSpeciesError(name, cls.list_all_names())

    @classmethod
    def is_valid(cls, name: Optional[str]) -> bool:
        """Check if a string names a known species."""
        if not isinstance(name, str):
            return False
        normalized = normalize_species_name(name)
        return any(member.value == normalized for member in cls)

    @classmethod
    def list_all_names(cls) -> list[str]:
        """Get the species names in declaration order."""
        return [member.value for member in cls]

    @classmethod
    def choose(cls, rng: np.random.Generator) -> "TreeSpecies":
        """
        Pick a species uniformly at random.

        Args:
            rng: Random generator supplying the draw

        Returns:
            A TreeSpecies member
        """
        members = list(cls)
        return members[int(rng.integers(len(members)))]

    def __str__(self) -> str:
        """Return the species name."""
        return self.value


__all__ = [
    "TreeSpecies",
    "normalize_species_name",
]
