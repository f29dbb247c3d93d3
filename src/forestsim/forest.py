"""
Forest class managing an ordered collection of trees.
Handles growth, reaping, summary metrics and snapshot persistence.

Tree positions are plain list indices: they shift when a tree is removed
and are only meaningful at the moment they are used.
"""
import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

import numpy as np

from .tree import Tree, MIN_HEIGHT_TO_PLANT, MIN_GROWTH_RATE
from .exceptions import (
    ForestSimError,
    IndexOutOfRangeError,
    InvalidDataError,
    PersistenceError,
)
from .logging_config import get_logger, log_reap_event, log_growth_summary

SNAPSHOT_FORMAT = 'forestsim.forest'
SNAPSHOT_VERSION = 1


def _default_file_mode() -> int:
    """Permission bits a plain open(..., 'w') would give a new file."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


@dataclass
class ReapRecord:
    """A tree replaced during reaping.

    Attributes:
        index: Position of the tree in the forest
        reaped: The tree that was removed (state at removal)
        replacement: The sapling planted in its place
    """
    index: int
    reaped: Tree
    replacement: Tree


class Forest:
    """A named, ordered collection of trees."""

    def __init__(self, name: str, trees: Optional[List[Tree]] = None,
                 rng: Optional[np.random.Generator] = None,
                 min_height_to_plant: float = MIN_HEIGHT_TO_PLANT,
                 min_growth_rate: float = MIN_GROWTH_RATE):
        """Initialize a forest.

        Args:
            name: Forest name, unique within a simulation session
            trees: Initial trees. If None, creates an empty forest.
            rng: Random generator used when planting saplings. A fresh
                generator is created if None.
            min_height_to_plant: Lower bound of sapling height (feet)
            min_growth_rate: Lower bound of sapling growth rate (percent)
        """
        self.name = name
        self.trees: List[Tree] = list(trees) if trees is not None else []
        self.rng = rng if rng is not None else np.random.default_rng()
        self.min_height_to_plant = min_height_to_plant
        self.min_growth_rate = min_growth_rate
        self.logger = get_logger(__name__)

    def add_tree(self, tree: Tree) -> None:
        """Append a tree to the end of the forest."""
        self.trees.append(tree)

    def add_random_tree(self, rng: Optional[np.random.Generator] = None,
                        year: Optional[int] = None) -> Tree:
        """Plant a random sapling at the end of the forest.

        Args:
            rng: Random generator (defaults to the forest's own)
            year: Planting year (defaults to the current calendar year)

        Returns:
            Tree: The planted sapling
        """
        tree = self._plant(rng, year)
        self.add_tree(tree)
        return tree

    def tree_at(self, index: int) -> Tree:
        """Get the tree at a position.

        Raises:
            IndexOutOfRangeError: If the position does not exist
        """
        if not 0 <= index < len(self.trees):
            raise IndexOutOfRangeError(index, len(self.trees))
        return self.trees[index]

    def remove_tree_at(self, index: int) -> Optional[Tree]:
        """Cut down the tree at a position.

        An invalid position is logged at debug level and leaves the forest
        unchanged.

        Args:
            index: Position of the tree to remove

        Returns:
            The removed tree, or None if the position does not exist
        """
        try:
            self.tree_at(index)
        except IndexOutOfRangeError as e:
            self.logger.debug(str(e))
            return None
        return self.trees.pop(index)

    def grow(self, years: int = 1) -> None:
        """Grow every tree in collection order.

        Args:
            years: Number of years to grow (default 1)
        """
        if years <= 0:
            return

        height_before = self.average_height()
        for tree in self.trees:
            tree.grow(years)

        if self.trees:
            log_growth_summary(self.logger, self.name, years,
                               height_before, self.average_height())

    def reap(self, max_height: float, rng: Optional[np.random.Generator] = None,
             year: Optional[int] = None) -> List[ReapRecord]:
        """Replace every tree taller than a threshold with a new sapling.

        Trees with height strictly greater than ``max_height`` are replaced
        in place, so the remaining trees keep their positions.

        Args:
            max_height: Height threshold (feet)
            rng: Random generator (defaults to the forest's own)
            year: Planting year of the saplings (defaults to the current year)

        Returns:
            One ReapRecord per replaced tree, in index order
        """
        records = []
        for index in range(len(self.trees)):
            tree = self.trees[index]
            if tree.height > max_height:
                replacement = self._plant(rng, year)
                self.trees[index] = replacement
                record = ReapRecord(index, tree, replacement)
                log_reap_event(self.logger, self.name, record)
                records.append(record)
        return records

    def _plant(self, rng: Optional[np.random.Generator], year: Optional[int]) -> Tree:
        return Tree.plant_random(
            rng if rng is not None else self.rng,
            year=year,
            min_height=self.min_height_to_plant,
            min_growth_rate=self.min_growth_rate,
        )

    def average_height(self) -> float:
        """Mean tree height, 0 for an empty forest."""
        if not self.trees:
            return 0.0
        return sum(tree.height for tree in self.trees) / len(self.trees)

    def get_metrics(self) -> Dict[str, Any]:
        """Get summary metrics for the forest.

        Returns:
            Dictionary with name, tree_count, average_height, min_height
            and max_height (extremes are 0 for an empty forest)
        """
        heights = [tree.height for tree in self.trees]
        return {
            'name': self.name,
            'tree_count': len(heights),
            'average_height': self.average_height(),
            'min_height': min(heights) if heights else 0.0,
            'max_height': max(heights) if heights else 0.0,
        }

    def describe(self) -> str:
        """Multi-line listing: name, one indexed line per tree, summary."""
        lines = [f"Forest name: {self.name}"]
        for index, tree in enumerate(self.trees):
            lines.append(f"     {index} {tree.format_row()}")
        lines.append(
            f"There are {len(self.trees)} trees, "
            f"with an average height of {self.average_height():.2f}"
        )
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert forest to a snapshot dictionary."""
        return {
            'format': SNAPSHOT_FORMAT,
            'version': SNAPSHOT_VERSION,
            'name': self.name,
            'trees': [tree.to_dict() for tree in self.trees],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], **kwargs: Any) -> 'Forest':
        """Rebuild a forest from :meth:`to_dict` output.

        Args:
            data: Snapshot dictionary
            **kwargs: Extra Forest constructor arguments (rng, planting bounds)

        Raises:
            InvalidDataError: If the snapshot structure is not recognized
            InvalidSpeciesError: If a tree names an unknown species
        """
        if not isinstance(data, dict):
            raise InvalidDataError("forest snapshot", f"expected a mapping, got {type(data).__name__}")
        if data.get('format') != SNAPSHOT_FORMAT:
            raise InvalidDataError("forest snapshot", f"unrecognized format {data.get('format')!r}")
        if data.get('version') != SNAPSHOT_VERSION:
            raise InvalidDataError("forest snapshot", f"unsupported version {data.get('version')!r}")

        name = data.get('name')
        trees = data.get('trees')
        if not isinstance(name, str):
            raise InvalidDataError("forest snapshot", f"name must be a string, got {name!r}")
        if not isinstance(trees, list):
            raise InvalidDataError("forest snapshot", f"trees must be a list, got {trees!r}")

        return cls(name, [Tree.from_dict(item) for item in trees], **kwargs)

    def save(self, filepath: Union[str, Path]) -> Path:
        """Save the whole forest to a snapshot file.

        The snapshot is written to a temporary file next to the destination
        and renamed over it, so the destination always holds either the old
        or the new complete snapshot.

        Args:
            filepath: Destination path (overwritten if it exists)

        Returns:
            Path of the written snapshot

        Raises:
            PersistenceError: If the snapshot cannot be encoded or written
        """
        path = Path(filepath)
        tmp_name = None
        try:
            payload = json.dumps(self.to_dict(), indent=2)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix='.tmp', dir=path.parent
            )
            os.chmod(tmp_name, _default_file_mode())
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, ValueError, TypeError) as e:
            raise PersistenceError(path, 'save', e) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        self.logger.debug(f"Saved forest '{self.name}' ({len(self.trees)} trees) to {path}")
        return path

    @classmethod
    def load(cls, filepath: Union[str, Path], **kwargs: Any) -> 'Forest':
        """Load a forest from a snapshot file.

        Args:
            filepath: Snapshot path written by :meth:`save`
            **kwargs: Extra Forest constructor arguments (rng, planting bounds)

        Returns:
            Forest: The restored forest

        Raises:
            PersistenceError: If the file cannot be read or does not hold a
                valid forest snapshot
        """
        path = Path(filepath)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            forest = cls.from_dict(data, **kwargs)
        except (OSError, ValueError, RecursionError, ForestSimError) as e:
            # json.JSONDecodeError and UnicodeDecodeError are ValueErrors;
            # RecursionError comes from deeply nested documents
            raise PersistenceError(path, 'load', e) from e

        forest.logger.debug(f"Loaded forest '{forest.name}' ({len(forest)} trees) from {path}")
        return forest

    def __len__(self) -> int:
        return len(self.trees)

    def __iter__(self) -> Iterator[Tree]:
        return iter(self.trees)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Forest):
            return NotImplemented
        return self.name == other.name and self.trees == other.trees

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"Forest(name={self.name!r}, trees={len(self.trees)})"
