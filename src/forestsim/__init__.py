"""
ForestSim: interactive forest management simulation

Forests are named, ordered collections of trees. Trees grow by a fixed
annual percentage; reaping replaces every tree above a height threshold
with a freshly planted sapling. Forests are bulk-loaded from tree lists
and saved/restored as whole snapshots.

Quick Start:
    >>> import numpy as np
    >>> from forestsim import Forest, Tree
    >>> forest = Forest("Demo", rng=np.random.default_rng(1))
    >>> forest.add_tree(Tree("birch", 2010, 12.0, 15.0))
    >>> forest.add_tree(Tree("FIR", 2005, 25.0, 8.0))
    >>> round(forest.average_height(), 2)
    18.5
    >>> len(forest.reap(20))
    1
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__author__ = "ForestSim Development Team"

# =============================================================================
# Core Classes - Primary API
# =============================================================================
from .species import TreeSpecies
from .tree import Tree, MIN_HEIGHT_TO_PLANT, MIN_GROWTH_RATE
from .forest import Forest, ReapRecord

# =============================================================================
# Loading and Configuration
# =============================================================================
from .tree_loader import load_forest_csv, read_tree_list
from .config_loader import ConfigLoader, SimulationConfig, load_simulation_config

# =============================================================================
# Session Shell
# =============================================================================
from .simulation import ForestSimulation

# =============================================================================
# Exceptions
# =============================================================================
from .exceptions import (
    ForestSimError,
    ConfigurationError,
    InvalidSpeciesError,
    ForestError,
    IndexOutOfRangeError,
    PersistenceError,
    DataError,
    ForestFileNotFoundError,
    InvalidDataError,
)

__all__ = [
    "__version__",
    "TreeSpecies",
    "Tree",
    "MIN_HEIGHT_TO_PLANT",
    "MIN_GROWTH_RATE",
    "Forest",
    "ReapRecord",
    "load_forest_csv",
    "read_tree_list",
    "ConfigLoader",
    "SimulationConfig",
    "load_simulation_config",
    "ForestSimulation",
    "ForestSimError",
    "ConfigurationError",
    "InvalidSpeciesError",
    "ForestError",
    "IndexOutOfRangeError",
    "PersistenceError",
    "DataError",
    "ForestFileNotFoundError",
    "InvalidDataError",
]
