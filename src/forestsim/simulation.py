"""
Interactive forest simulation shell.

Holds the session state (named forests, their command-line order and the
current forest) and maps menu commands onto Forest operations.
"""
from typing import Callable, Dict, List, Optional

import numpy as np
from rich.console import Console

from .config_loader import SimulationConfig
from .forest import Forest
from .tree_loader import load_forest_csv
from .exceptions import DataError, InvalidSpeciesError, PersistenceError
from .logging_config import get_logger

MENU_PROMPT = "(P)rint, (A)dd, (C)ut, (G)row, (R)eap, (S)ave, (L)oad, (N)ext, e(X)it : "


class ForestSimulation:
    """Session state and command handlers for the forest simulation.

    Attributes:
        forest_names: Forest names in the order given on the command line
        forests: Loaded forests by name
        current_forest: Forest the commands act on (None before loading)
        config: Session settings
        rng: Random generator shared by all forests of the session
    """

    def __init__(self, forest_names: List[str],
                 config: Optional[SimulationConfig] = None,
                 console: Optional[Console] = None,
                 input_func: Optional[Callable[[str], str]] = None,
                 rng: Optional[np.random.Generator] = None):
        """Initialize a simulation session.

        Args:
            forest_names: Names of the forests to load, in navigation order
            config: Session settings (defaults to SimulationConfig())
            console: Console receiving all output
            input_func: Prompt-and-read function (defaults to console.input)
            rng: Random generator (seeded from config.seed if None)
        """
        self.forest_names = list(forest_names)
        self.config = config if config is not None else SimulationConfig()
        self.console = console if console is not None else Console(highlight=False)
        self.input_func = input_func if input_func is not None else self.console.input
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.forests: Dict[str, Forest] = {}
        self.current_forest: Optional[Forest] = None
        self.logger = get_logger(__name__)

        self._commands: Dict[str, Callable[[], None]] = {
            'P': self.print_forest,
            'A': self.add_tree,
            'C': self.cut_tree,
            'G': self.grow,
            'R': self.reap_trees,
            'S': self.save_forest,
            'L': self.load_forest,
            'N': self.next_forest,
        }

    def _say(self, message: str = "") -> None:
        self.console.print(message, markup=False, highlight=False)

    def _forest_kwargs(self) -> dict:
        return {
            'rng': self.rng,
            'min_height_to_plant': self.config.min_height_to_plant,
            'min_growth_rate': self.config.min_growth_rate,
        }

    def load_forests(self) -> None:
        """Bulk-load every named forest from its tree list.

        Unreadable lists are reported and skipped. The current forest
        becomes ``config.initial_forest`` if it loaded, otherwise the
        first forest that loaded.
        """
        for name in self.forest_names:
            path = self.config.csv_path(name)
            try:
                forest = load_forest_csv(path, name=name, **self._forest_kwargs())
            except (DataError, InvalidSpeciesError) as e:
                self._say(f"Error opening/reading {path}")
                self.logger.debug(f"Skipping forest '{name}': {e}")
                continue
            self.forests[name] = forest

        initial = self.config.initial_forest
        if initial is not None and initial in self.forests:
            self.current_forest = self.forests[initial]
        else:
            if initial is not None:
                self._say(f"{initial} forest not found among provided names.")
            self.current_forest = next(iter(self.forests.values()), None)

        if self.current_forest is not None:
            self._say(f"Initializing from {self.current_forest.name}")

    def print_forest(self) -> None:
        self._say(self.current_forest.describe())

    def add_tree(self) -> None:
        """Plant a random sapling in the current forest."""
        self.current_forest.add_random_tree()

    def cut_tree(self) -> None:
        """Ask for a tree number until a valid one is given, then cut it."""
        while True:
            index = self._read_number("Tree number to cut down: ", int,
                                      "That is not an integer")
            if index is None:
                return
            if self.current_forest.remove_tree_at(index) is not None:
                return
            self._say(f"Tree number {index} does not exist")

    def grow(self) -> None:
        self.current_forest.grow()

    def reap_trees(self) -> None:
        """Ask for a height and reap the current forest above it."""
        height = self._read_number("Height to reap from: ", float,
                                   "That is not a number")
        if height is None:
            return
        for record in self.current_forest.reap(height):
            self._say(f"Reaping the tall tree  {record.reaped.format_row()}")
            self._say(f"Replaced with new tree {record.replacement.format_row()}")

    def save_forest(self) -> None:
        """Save the current forest to its snapshot file."""
        path = self.config.snapshot_path(self.current_forest.name)
        try:
            self.current_forest.save(path)
        except PersistenceError as e:
            self._say(f"Error saving forest to file: {e}")
            self.logger.error(str(e), exc_info=e)
            return
        self._say(f"Forest saved as {path}")

    def load_forest(self) -> None:
        """Ask for a forest name and make its snapshot the current forest."""
        name = self._read_line("Enter forest name: ")
        if name is None:
            return
        path = self.config.snapshot_path(name)
        try:
            forest = Forest.load(path, **self._forest_kwargs())
        except PersistenceError as e:
            self._say(f"Error loading forest from file: {e}")
            self.logger.error(str(e), exc_info=e)
            return
        self.forests[forest.name] = forest
        self.current_forest = forest
        self._say(f"Forest loaded: {name}")

    def next_forest(self) -> None:
        """Move to the forest after the current one in command-line order."""
        names = [name for name in self.forest_names if name in self.forests]
        current = self.current_forest.name
        if current in names and names.index(current) + 1 < len(names):
            self.current_forest = self.forests[names[names.index(current) + 1]]
            self._say("Moving to the next forest")
            self._say(f"Initializing from {self.current_forest.name}")
        else:
            self._say("No more forests to move to.")

    def execute(self, option: str) -> bool:
        """Run one menu command.

        Args:
            option: Menu letter (case-insensitive)

        Returns:
            False when the option asks to exit, True otherwise
        """
        option = option.strip().upper()
        if option == 'X':
            self._say("Exiting the Forestry Simulation")
            return False
        command = self._commands.get(option)
        if command is None:
            self._say("Invalid menu option, try again")
        else:
            command()
        return True

    def run(self) -> None:
        """Load the forests and run the menu loop until exit or end of input."""
        self._say("Welcome to the Forestry Simulation")
        self._say("----------------------------------")
        self.load_forests()
        if self.current_forest is None:
            self._say("No forests could be loaded.")
            return

        while True:
            option = self._read_line(MENU_PROMPT)
            if option is None or not self.execute(option):
                break

    def _read_line(self, prompt: str) -> Optional[str]:
        # None signals end of input
        try:
            return self.input_func(prompt).strip()
        except EOFError:
            return None

    def _read_number(self, prompt: str, kind: type, error_message: str):
        while True:
            text = self._read_line(prompt)
            if text is None:
                return None
            try:
                return kind(text)
            except ValueError:
                self._say(error_message)
