"""
Bulk loading of forests from tree-list files.

A tree list has one tree per line with the fields
``species,plantingYear,height,growthRate``. There is no header row,
whitespace around fields is ignored and species names are
case-insensitive.
"""
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd

from .forest import Forest
from .tree import Tree
from .exceptions import ForestFileNotFoundError, InvalidDataError
from .logging_config import get_logger

logger = get_logger(__name__)

TREE_LIST_COLUMNS = ['species', 'planting_year', 'height', 'growth_rate']


def read_tree_list(filepath: Union[str, Path]) -> pd.DataFrame:
    """Read a tree-list file into a DataFrame of trimmed strings.

    Args:
        filepath: Path to the tree-list file

    Returns:
        DataFrame with one row per tree and a ``line`` column holding the
        1-based line number of each row in the file

    Raises:
        ForestFileNotFoundError: If the file does not exist
        InvalidDataError: If the file cannot be read as UTF-8 text or a line
            does not have exactly four fields
    """
    path = Path(filepath)
    if not path.is_file():
        raise ForestFileNotFoundError(str(path), "tree list")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidDataError(f"tree list {path.name}", f"cannot be read: {e}") from e

    rows = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        fields = [field.strip() for field in line.split(',')]
        if len(fields) != len(TREE_LIST_COLUMNS):
            raise InvalidDataError(
                f"tree list {path.name}",
                f"line {line_number} has {len(fields)} fields, expected {len(TREE_LIST_COLUMNS)}"
            )
        rows.append([line_number] + fields)

    return pd.DataFrame(rows, columns=['line'] + TREE_LIST_COLUMNS)


def load_forest_csv(filepath: Union[str, Path], name: Optional[str] = None,
                    **forest_kwargs: Any) -> Forest:
    """Build a forest from a tree-list file.

    Args:
        filepath: Path to the tree-list file
        name: Forest name (defaults to the file name without its suffix)
        **forest_kwargs: Extra Forest constructor arguments (rng, planting bounds)

    Returns:
        Forest holding the trees in file order

    Raises:
        ForestFileNotFoundError: If the file does not exist
        InvalidDataError: If a line is malformed
        InvalidSpeciesError: If a line names an unknown species
    """
    path = Path(filepath)
    frame = read_tree_list(path)

    # Convert numeric columns up front so bad values can be reported by line
    years = pd.to_numeric(frame['planting_year'], errors='coerce')
    heights = pd.to_numeric(frame['height'], errors='coerce')
    rates = pd.to_numeric(frame['growth_rate'], errors='coerce')

    forest = Forest(name if name is not None else path.stem, **forest_kwargs)
    for i, row in frame.iterrows():
        year = years[i]
        if pd.isna(year) or not float(year).is_integer():
            raise InvalidDataError(
                f"tree list {path.name}",
                f"line {row['line']}: planting year {row['planting_year']!r} is not an integer"
            )
        for column, values in (('height', heights), ('growth_rate', rates)):
            if pd.isna(values[i]):
                raise InvalidDataError(
                    f"tree list {path.name}",
                    f"line {row['line']}: {column} {row[column]!r} is not a number"
                )
        forest.add_tree(Tree(row['species'], int(year), float(heights[i]), float(rates[i])))

    logger.debug(f"Read {len(forest)} trees for forest '{forest.name}' from {path}")
    return forest
