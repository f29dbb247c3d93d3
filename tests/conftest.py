"""
Shared pytest fixtures for ForestSim tests.

This module provides commonly used fixtures for testing tree, forest and
simulation functionality, reducing code duplication across test files.
"""
import logging

import numpy as np
import pytest

from forestsim.tree import Tree
from forestsim.forest import Forest
from forestsim.config_loader import SimulationConfig


# =============================================================================
# Randomness
# =============================================================================

@pytest.fixture
def rng():
    """Seeded random generator so sapling draws are reproducible."""
    return np.random.default_rng(20240601)


# =============================================================================
# Tree Fixtures
# =============================================================================

@pytest.fixture
def birch_tree():
    """A young birch: 12 ft, 15% per year, planted 2010."""
    return Tree("BIRCH", 2010, 12.0, 15.0)


@pytest.fixture
def fir_tree():
    """An older fir: 25 ft, 8% per year, planted 2005."""
    return Tree("FIR", 2005, 25.0, 8.0)


@pytest.fixture
def mixed_trees():
    """Five trees of mixed species and sizes, in a fixed order."""
    return [
        Tree("BIRCH", 2010, 12.0, 15.0),
        Tree("MAPLE", 1998, 44.5, 3.5),
        Tree("FIR", 2005, 25.0, 8.0),
        Tree("maple", 2019, 8.25, 22.0),
        Tree("Fir", 1987, 61.0, 1.2),
    ]


# =============================================================================
# Forest Fixtures
# =============================================================================

@pytest.fixture
def demo_forest(birch_tree, fir_tree, rng):
    """The two-tree "Demo" forest: BIRCH 12 ft and FIR 25 ft."""
    return Forest("Demo", [birch_tree, fir_tree], rng=rng)


@pytest.fixture
def mixed_forest(mixed_trees, rng):
    """A five-tree forest with heights from 8.25 to 61 ft."""
    return Forest("Mixed", mixed_trees, rng=rng)


@pytest.fixture
def empty_forest(rng):
    """A forest with no trees."""
    return Forest("Empty", rng=rng)


# =============================================================================
# Data Directory Fixtures
# =============================================================================

MONTANE_CSV = """\
birch, 2010, 12.0, 15.0
FIR,2005,25.0,8.0
  Maple ,1999, 31.5 , 4.5
"""

ACADIAN_CSV = """\
MAPLE,2001,18.0,6.0
fir,2012,9.5,12.0
"""


@pytest.fixture
def data_dir(tmp_path):
    """A directory holding Montane.csv and Acadian.csv tree lists."""
    (tmp_path / "Montane.csv").write_text(MONTANE_CSV, encoding="utf-8")
    (tmp_path / "Acadian.csv").write_text(ACADIAN_CSV, encoding="utf-8")
    return tmp_path


@pytest.fixture
def sim_config(data_dir):
    """Simulation settings pointing at the test data directory."""
    return SimulationConfig(data_dir=str(data_dir), seed=7)


# =============================================================================
# Logging
# =============================================================================

@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers and propagation changes made by setup_logging()."""
    yield
    logger = logging.getLogger("forestsim")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
