"""
Command line entry point for the forest simulation.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from .config_loader import load_simulation_config
from .exceptions import ConfigurationError, DataError
from .logging_config import setup_logging
from .simulation import ForestSimulation


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="forestsim",
        description="Interactive forest growth and harvest simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  forestsim Montane Acadian            Load Montane.csv and Acadian.csv
  forestsim --data-dir data Montane    Read tree lists from data/
  forestsim --seed 42 Montane          Reproducible saplings
        """,
    )
    parser.add_argument(
        "forests",
        nargs="*",
        help="Forest names; trees are read from <name>.csv",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Configuration file (YAML, TOML or JSON)",
    )
    parser.add_argument(
        "--data-dir",
        help="Directory holding tree lists and snapshots",
    )
    parser.add_argument(
        "--start",
        help="Forest to start on (default: first loaded forest)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the random generator",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write log records to this file",
    )
    return parser


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    """Run the forest simulation.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])
        console: Console receiving the session output

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    console = console if console is not None else Console(highlight=False)

    if not args.forests:
        console.print("No forest names provided on the command line.", markup=False)
        return 1

    try:
        config = load_simulation_config(
            args.config,
            data_dir=args.data_dir,
            initial_forest=args.start,
            seed=args.seed,
            log_level="DEBUG" if args.verbose else None,
        )
    except (ConfigurationError, DataError) as e:
        console.print(f"Configuration error: {e}", markup=False)
        return 2

    setup_logging(config.log_level, log_file=args.log_file)

    simulation = ForestSimulation(args.forests, config=config, console=console)
    simulation.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
