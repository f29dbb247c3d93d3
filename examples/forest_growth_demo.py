"""
Forest Growth Demo

Grows a small forest for a few decades, reaping tall trees every ten
years, and prints a summary table of each decade.

Usage:
    python examples/forest_growth_demo.py
"""

import numpy as np
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from forestsim import Forest, Tree

console = Console()

REAP_HEIGHT = 60.0
YEARS = 40


def build_forest(rng: np.random.Generator) -> Forest:
    """Create the starting forest."""
    forest = Forest("Demo", rng=rng)
    forest.add_tree(Tree("BIRCH", 2010, 12.0, 15.0))
    forest.add_tree(Tree("FIR", 2005, 25.0, 8.0))
    forest.add_tree(Tree("MAPLE", 1998, 31.5, 4.5))
    for _ in range(5):
        forest.add_random_tree()
    return forest


def run_demo():
    console.print(Panel("[bold]ForestSim growth and reaping demo[/bold]"))

    forest = build_forest(np.random.default_rng(42))
    console.print(forest.describe(), markup=False)
    console.print()

    table = Table(title=f"Decade summary (reap above {REAP_HEIGHT:.0f} ft)")
    table.add_column("Year", justify="center")
    table.add_column("Trees", justify="right")
    table.add_column("Avg height", justify="right")
    table.add_column("Tallest", justify="right")
    table.add_column("Reaped", justify="right")

    for year in range(10, YEARS + 10, 10):
        forest.grow(years=10)
        records = forest.reap(REAP_HEIGHT)
        m = forest.get_metrics()
        table.add_row(
            str(year),
            str(m['tree_count']),
            f"{m['average_height']:.2f}",
            f"{m['max_height']:.2f}",
            str(len(records)),
        )

    console.print(table)


if __name__ == "__main__":
    run_demo()
