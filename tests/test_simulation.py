"""
Tests for the interactive simulation shell.
"""
import io
import logging

import pytest
from rich.console import Console

from forestsim.simulation import ForestSimulation, MENU_PROMPT
from forestsim.forest import Forest
from forestsim.config_loader import SimulationConfig


class ScriptedInput:
    """Input function replaying a fixed list of answers, then EOF."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


def make_simulation(config, answers=(), names=("Montane", "Acadian")):
    output = io.StringIO()
    console = Console(file=output, width=300, color_system=None)
    scripted = ScriptedInput(answers)
    simulation = ForestSimulation(list(names), config=config, console=console,
                                  input_func=scripted)
    return simulation, output, scripted


def test_load_forests(sim_config):
    simulation, output, _ = make_simulation(sim_config)
    simulation.load_forests()

    assert list(simulation.forests) == ["Montane", "Acadian"]
    assert simulation.current_forest.name == "Montane"
    assert len(simulation.forests["Montane"]) == 3
    assert "Initializing from Montane" in output.getvalue()


def test_load_forests_skips_missing(sim_config):
    simulation, output, _ = make_simulation(sim_config, names=("Boreal", "Acadian"))
    simulation.load_forests()

    assert list(simulation.forests) == ["Acadian"]
    assert simulation.current_forest.name == "Acadian"
    assert "Error opening/reading" in output.getvalue()
    assert "Boreal.csv" in output.getvalue()


def test_load_forests_skips_undecodable_file(sim_config, data_dir):
    (data_dir / "Bad.csv").write_bytes(b"birch,2010,12.0,15.0\n\xff\xfe,1,1,1\n")
    simulation, output, _ = make_simulation(sim_config, names=("Bad", "Acadian"))
    simulation.load_forests()

    assert list(simulation.forests) == ["Acadian"]
    assert simulation.current_forest.name == "Acadian"
    assert "Error opening/reading" in output.getvalue()
    assert "Bad.csv" in output.getvalue()


def test_load_forests_initial_forest(data_dir):
    config = SimulationConfig(data_dir=str(data_dir), initial_forest="Acadian")
    simulation, _, _ = make_simulation(config)
    simulation.load_forests()
    assert simulation.current_forest.name == "Acadian"


def test_load_forests_initial_forest_missing(data_dir):
    config = SimulationConfig(data_dir=str(data_dir), initial_forest="Boreal")
    simulation, output, _ = make_simulation(config)
    simulation.load_forests()
    assert simulation.current_forest.name == "Montane"
    assert "Boreal forest not found among provided names." in output.getvalue()


def test_print(sim_config):
    simulation, output, _ = make_simulation(sim_config)
    simulation.load_forests()
    simulation.execute("p")
    text = output.getvalue()
    assert "Forest name: Montane" in text
    assert "     2 MAPLE  1999  31.50'   4.5%" in text
    assert "There are 3 trees, with an average height of 22.83" in text


def test_add(sim_config):
    simulation, _, _ = make_simulation(sim_config)
    simulation.load_forests()
    simulation.execute("A")
    assert len(simulation.current_forest) == 4
    assert 10.0 <= simulation.current_forest.trees[-1].height < 20.0


def test_add_uses_configured_planting_bounds(data_dir):
    config = SimulationConfig(data_dir=str(data_dir), min_height_to_plant=1.0,
                              min_growth_rate=1.0)
    simulation, _, _ = make_simulation(config)
    simulation.load_forests()
    simulation.execute("A")
    assert 1.0 <= simulation.current_forest.trees[-1].height < 2.0


def test_cut_reprompts_until_valid(sim_config):
    simulation, output, scripted = make_simulation(sim_config, ["abc", "7", "1"])
    simulation.load_forests()
    simulation.execute("C")

    text = output.getvalue()
    assert "That is not an integer" in text
    assert "Tree number 7 does not exist" in text
    assert [t.species.value for t in simulation.current_forest] == ["BIRCH", "MAPLE"]
    assert scripted.prompts == ["Tree number to cut down: "] * 3


def test_cut_out_of_range_is_reported_once(sim_config, caplog):
    simulation, output, _ = make_simulation(sim_config, ["7", "0"])
    simulation.load_forests()
    with caplog.at_level(logging.INFO, logger="forestsim"):
        simulation.execute("C")

    assert output.getvalue().count("does not exist") == 1
    assert "does not exist" not in caplog.text


def test_grow(sim_config):
    simulation, _, _ = make_simulation(sim_config)
    simulation.load_forests()
    simulation.execute("G")
    assert simulation.current_forest.trees[0].height == pytest.approx(13.8)


def test_reap(sim_config):
    simulation, output, _ = make_simulation(sim_config, ["high", "20"])
    simulation.load_forests()
    birch = simulation.current_forest.trees[0]
    simulation.execute("R")

    text = output.getvalue()
    assert "That is not a number" in text
    assert "Reaping the tall tree  FIR    2005  25.00'   8.0%" in text
    assert "Reaping the tall tree  MAPLE  1999  31.50'   4.5%" in text
    assert text.count("Replaced with new tree") == 2
    assert simulation.current_forest.trees[0] is birch


def test_reap_is_reported_once(sim_config, caplog):
    simulation, output, _ = make_simulation(sim_config, ["20"])
    simulation.load_forests()
    with caplog.at_level(logging.INFO, logger="forestsim"):
        simulation.execute("R")

    assert output.getvalue().count("Reaping the tall tree") == 2
    assert "Reaping the tall tree" not in caplog.text


def test_save_and_load(sim_config, data_dir):
    simulation, output, _ = make_simulation(sim_config, ["Montane"])
    simulation.load_forests()
    simulation.execute("S")
    assert (data_dir / "Montane.db").exists()
    assert "Forest saved as" in output.getvalue()

    saved = Forest.load(data_dir / "Montane.db")
    simulation.execute("G")
    simulation.execute("L")

    assert simulation.current_forest == saved
    assert simulation.forests["Montane"] is simulation.current_forest
    assert "Forest loaded: Montane" in output.getvalue()


def test_load_missing_snapshot_is_reported(sim_config):
    simulation, output, _ = make_simulation(sim_config, ["Nowhere"])
    simulation.load_forests()
    current = simulation.current_forest
    simulation.execute("L")

    assert "Error loading forest from file" in output.getvalue()
    assert simulation.current_forest is current


def test_save_failure_is_reported(data_dir):
    config = SimulationConfig(data_dir=str(data_dir), snapshot_extension="/missing.db")
    simulation, output, _ = make_simulation(config)
    simulation.load_forests()
    simulation.execute("S")
    assert "Error saving forest to file" in output.getvalue()


def test_next_forest(sim_config):
    simulation, output, _ = make_simulation(sim_config)
    simulation.load_forests()

    simulation.execute("N")
    assert simulation.current_forest.name == "Acadian"
    assert "Moving to the next forest" in output.getvalue()

    simulation.execute("N")
    assert simulation.current_forest.name == "Acadian"
    assert "No more forests to move to." in output.getvalue()


def test_invalid_option(sim_config):
    simulation, output, _ = make_simulation(sim_config)
    simulation.load_forests()
    assert simulation.execute("Z") is True
    assert "Invalid menu option, try again" in output.getvalue()


def test_exit(sim_config):
    simulation, output, _ = make_simulation(sim_config)
    assert simulation.execute("x") is False
    assert "Exiting the Forestry Simulation" in output.getvalue()


def test_run_session(sim_config):
    simulation, output, scripted = make_simulation(
        sim_config, ["A", "C", "0", "P", "N", "P", "X", "P"]
    )
    simulation.run()

    text = output.getvalue()
    assert text.startswith("Welcome to the Forestry Simulation")
    assert "Forest name: Montane" in text
    assert "Forest name: Acadian" in text
    assert "Exiting the Forestry Simulation" in text
    assert len(simulation.forests["Montane"]) == 3
    # "P" after exit is never read
    assert scripted.answers == ["P"]
    assert scripted.prompts.count(MENU_PROMPT) == 6


def test_run_stops_at_end_of_input(sim_config):
    simulation, output, _ = make_simulation(sim_config, ["G"])
    simulation.run()
    assert "Exiting" not in output.getvalue()


def test_run_without_forests(tmp_path):
    simulation, output, scripted = make_simulation(SimulationConfig(data_dir=str(tmp_path)))
    simulation.run()
    assert "No forests could be loaded." in output.getvalue()
    assert scripted.prompts == []
